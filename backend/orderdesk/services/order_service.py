"""
OrderDesk Backend: Order Service
==================================

What:  CRUD for orders. Every read inner-joins dt_customer to embed the
       customer's name and phone.
Who:   /order routes.

Inner-join semantics:
    SELECT o.*, c.name, c.phone
      FROM dt_order o JOIN dt_customer c ON o.customer_id = c.id

    An order whose customer has been deleted matches no customer row, so it
    is excluded from list results, from the list count, and from get-by-id
    (which then raises NotFoundError). The order row itself still exists and
    can be updated to point at another customer, or deleted.

Referential check:
    There is no database foreign key (see models/order.py). create() and
    update() look the customer up first and reject unknown ids with
    ValidationError.
"""

import logging

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.exceptions import ValidationError
from orderdesk.models.customer import Customer
from orderdesk.models.order import Order
from orderdesk.schemas.order import OrderCreate, OrderResponse, OrderUpdate
from orderdesk.services.resource_service import ResourceService, utcnow

logger = logging.getLogger(__name__)


def _build_response(order: Order, name: str, phone: str) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        customer_id=order.customer_id,
        name=name,
        phone=phone,
        service=order.service,
        amount=order.amount,
        unit=order.unit,
        price=order.price,
        created_at=order.created_at,
    )


class OrderService(ResourceService[Order, OrderResponse]):
    """Orders are searched by service description."""

    def __init__(self):
        super().__init__(
            model=Order,
            resource="order",
            search_column=Order.service,
            response_model=OrderResponse,
        )

    def _select(self) -> Select:
        return (
            select(Order, Customer.name, Customer.phone)
            .join(Customer, Order.customer_id == Customer.id)
        )

    def _count(self) -> Select:
        # Same join as _select() so orphaned orders are not counted either
        return (
            select(func.count(Order.id))
            .select_from(Order)
            .join(Customer, Order.customer_id == Customer.id)
        )

    def _to_response(self, row: Row) -> OrderResponse:
        order, name, phone = row
        return _build_response(order, name, phone)

    async def _require_customer(self, db: AsyncSession, customer_id: int) -> Customer:
        try:
            customer = await db.get(Customer, customer_id, populate_existing=True)
        except SQLAlchemyError as e:
            raise self._persistence_error("retrieve", e)

        if customer is None:
            raise ValidationError(
                message=f"Customer with id [{customer_id}] does not exist",
                field="customer_id",
            )
        return customer

    async def create(self, db: AsyncSession, payload: OrderCreate) -> OrderResponse:
        """
        Insert an order for an existing customer and return it in read form
        (with the customer's name and phone).

        Raises:
            ValidationError:  customer_id does not identify a customer
            PersistenceError: the insert failed
        """
        customer = await self._require_customer(db, payload.customer_id)
        order = Order(
            customer_id=payload.customer_id,
            service=payload.service,
            amount=payload.amount,
            unit=payload.unit,
            price=payload.price,
            created_at=utcnow(),
        )
        await self._insert(db, order)
        return _build_response(order, customer.name, customer.phone)

    async def update(self, db: AsyncSession, order_id: int, payload: OrderUpdate) -> None:
        """
        Replace every mutable order field.

        Raises:
            ValidationError:  customer_id does not identify a customer
            NotFoundError:    no order with this id
            PersistenceError: the update failed
        """
        await self._require_customer(db, payload.customer_id)
        await self._update(
            db,
            order_id,
            {
                "customer_id": payload.customer_id,
                "service": payload.service,
                "amount": payload.amount,
                "unit": payload.unit,
                "price": payload.price,
            },
        )


order_service = OrderService()
