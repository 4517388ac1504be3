"""
OrderDesk Backend: Paginated Resource Service (generic CRUD)
==============================================================

What:  The list/get/update/delete machinery shared by accounts, customers
       and orders, parameterized by ORM model, resource name, search column
       and response schema.
Who:   Subclassed by AccountService, CustomerService and OrderService; called
       by the route handlers.

Round trips per operation:
    search   2 queries: COUNT(*) of matching rows, then the requested page
    get      1 query
    update   1 UPDATE, affected-row count checked
    delete   1 DELETE, affected-row count checked
    create   implemented by each subclass (validation differs per entity)

Statelessness:
    A service instance holds configuration only. The session is passed into
    every call, so each request gets its own transaction and nothing is
    shared between requests.

Hooks for subclasses:
    _select()       SELECT producing one row per item (OrderService joins here)
    _count()        matching COUNT statement (must apply the same joins)
    _to_response()  maps one result row to the response schema
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.database import Base
from orderdesk.exceptions import NotFoundError, PersistenceError
from orderdesk.pagination import LIKE_ESCAPE, PageRequest, search_pattern, total_pages
from orderdesk.schemas.common import PaginatedResponse

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


def utcnow() -> datetime:
    """Current time in UTC; every created_at is stamped with this server-side."""
    return datetime.now(timezone.utc)


class ResourceService(Generic[ModelT, ResponseT]):
    """
    Search, fetch, update and delete rows of one entity kind.

    Args:
        model:          ORM class with an integer `id` primary key
        resource:       Lower-case name used in messages ("customer")
        search_column:  Text column matched case-insensitively by search()
        response_model: Pydantic schema for one item
    """

    def __init__(
        self,
        model: Type[ModelT],
        resource: str,
        search_column: Any,
        response_model: Type[ResponseT],
    ):
        self.model = model
        self.resource = resource
        self.search_column = search_column
        self.response_model = response_model
        self.page_model = PaginatedResponse[response_model]

    # ── Statement hooks ───────────────────────────────────────────────────

    def _select(self) -> Select:
        return select(self.model)

    def _count(self) -> Select:
        return select(func.count(self.model.id)).select_from(self.model)

    def _to_response(self, row: Row) -> ResponseT:
        return self.response_model.model_validate(row[0])

    def _filter(self, stmt: Select, search: str) -> Select:
        """Restrict `stmt` to rows whose search column contains `search` (any case)."""
        if not search:
            return stmt
        return stmt.where(
            self.search_column.ilike(search_pattern(search), escape=LIKE_ESCAPE)
        )

    # ── Operations ────────────────────────────────────────────────────────

    async def search(self, db: AsyncSession, page_request: PageRequest) -> PaginatedResponse:
        """
        Return one page of items matching the search term.

        Query plan (customers, search="jo", page=2, limit=10):
            SELECT count(dt_customer.id) FROM dt_customer
              WHERE dt_customer.name ILIKE '%jo%'
            SELECT * FROM dt_customer WHERE dt_customer.name ILIKE '%jo%'
              ORDER BY dt_customer.id LIMIT 10 OFFSET 10

        Rows are ordered by id, i.e. insertion order, so pages are stable.

        Returns:
            PaginatedResponse with data, page, limit, count and total pages

        Raises:
            PersistenceError: either query failed
        """
        term = page_request.search
        try:
            count_result = await db.execute(self._filter(self._count(), term))
            count = count_result.scalar() or 0

            page_stmt = (
                self._filter(self._select(), term)
                .order_by(self.model.id)
                .limit(page_request.limit)
                .offset(page_request.offset)
                .execution_options(populate_existing=True)
            )
            result = await db.execute(page_stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            raise self._persistence_error("list", e)

        return self.page_model(
            data=[self._to_response(row) for row in rows],
            page=page_request.page,
            limit=page_request.limit,
            count=count,
            total=total_pages(count, page_request.limit),
        )

    async def get(self, db: AsyncSession, item_id: int) -> ResponseT:
        """
        Fetch a single item by id.

        Raises:
            NotFoundError:    no row has this id (→ 404)
            PersistenceError: the query failed
        """
        # Bulk UPDATEs bypass the identity map, so always reload from the row
        try:
            result = await db.execute(
                self._select()
                .where(self.model.id == item_id)
                .execution_options(populate_existing=True)
            )
            row = result.first()
        except SQLAlchemyError as e:
            raise self._persistence_error("retrieve", e)

        if row is None:
            raise NotFoundError(resource=self.resource, resource_id=item_id)
        return self._to_response(row)

    async def delete(self, db: AsyncSession, item_id: int) -> None:
        """
        Delete the item with this id.

        Raises:
            NotFoundError:    the DELETE affected zero rows
            PersistenceError: the statement failed
        """
        stmt = (
            delete(self.model)
            .where(self.model.id == item_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            raise self._persistence_error("delete", e)

        if result.rowcount == 0:
            raise NotFoundError(resource=self.resource, resource_id=item_id)
        logger.info("Deleted %s %s", self.resource, item_id)

    # ── Helpers for subclasses ────────────────────────────────────────────

    async def _insert(
        self,
        db: AsyncSession,
        instance: ModelT,
        conflict_message: Optional[str] = None,
    ) -> ModelT:
        """
        Add `instance` and flush so the database assigns its id.

        The transaction itself is committed by get_db_session once the
        request succeeds.

        Raises:
            PersistenceError: constraint violation (with `conflict_message`
                              when given) or any other database failure
        """
        db.add(instance)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning("Constraint violation creating %s: %s", self.resource, e.orig)
            raise PersistenceError(
                message=conflict_message or f"Could not create {self.resource}: constraint violated",
                context={"error_type": type(e).__name__},
            )
        except SQLAlchemyError as e:
            raise self._persistence_error("create", e)

        logger.info("Created %s %s", self.resource, instance.id)
        return instance

    async def _update(self, db: AsyncSession, item_id: int, values: Dict[str, Any]) -> None:
        """
        Replace the given columns of one row. `id` and `created_at` are
        never part of `values`.

        Raises:
            NotFoundError:    the UPDATE affected zero rows
            PersistenceError: the statement failed
        """
        stmt = (
            update(self.model)
            .where(self.model.id == item_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            raise self._persistence_error("update", e)

        if result.rowcount == 0:
            raise NotFoundError(resource=self.resource, resource_id=item_id)
        logger.info("Updated %s %s", self.resource, item_id)

    def _persistence_error(self, action: str, exc: Exception) -> PersistenceError:
        logger.error(
            "Database error trying to %s %s: %s", action, self.resource, exc, exc_info=True
        )
        return PersistenceError(
            message=f"Could not {action} {self.resource}. Please try again.",
            context={"error_type": type(exc).__name__},
        )
