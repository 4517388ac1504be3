"""
OrderDesk Backend: Account Service
====================================

What:  CRUD for system accounts on top of ResourceService, plus the
       username lookup used by login.
Who:   /account routes, and AuthService for registration and login.

Every write that carries a password hashes it first (bcrypt, see
orderdesk.security). Reads go through AccountResponse, which has no password
field, so the hash never leaves this layer except via get_by_username(),
which AuthService needs for verification.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.exceptions import NotFoundError
from orderdesk.models.account import Account
from orderdesk.schemas.account import AccountCreate, AccountResponse, AccountUpdate
from orderdesk.security import hash_password
from orderdesk.services.resource_service import ResourceService, utcnow

logger = logging.getLogger(__name__)


class AccountService(ResourceService[Account, AccountResponse]):
    """Accounts are searched by display name."""

    def __init__(self):
        super().__init__(
            model=Account,
            resource="account",
            search_column=Account.name,
            response_model=AccountResponse,
        )

    async def create(self, db: AsyncSession, payload: AccountCreate) -> AccountResponse:
        """
        Insert a new account with a hashed password.

        Raises:
            HashingError:     password longer than 72 bytes (nothing is written)
            PersistenceError: username already taken, or the insert failed
        """
        account = Account(
            name=payload.name,
            phone=payload.phone,
            username=payload.username,
            password=hash_password(payload.password),
            created_at=utcnow(),
        )
        await self._insert(
            db,
            account,
            conflict_message=f"Username '{payload.username}' is already taken",
        )
        return AccountResponse.model_validate(account)

    async def update(self, db: AsyncSession, account_id: int, payload: AccountUpdate) -> None:
        """
        Replace name, phone and password (rehashed). Username and created_at
        are left untouched.

        Raises:
            HashingError:     new password too long (nothing is written)
            NotFoundError:    no account with this id
            PersistenceError: the update failed
        """
        await self._update(
            db,
            account_id,
            {
                "name": payload.name,
                "phone": payload.phone,
                "password": hash_password(payload.password),
            },
        )

    async def get_by_username(self, db: AsyncSession, username: str) -> Account:
        """
        Fetch the ORM account (including its hash) by username.

        Raises:
            NotFoundError:    no account with this username
            PersistenceError: the query failed
        """
        try:
            result = await db.execute(
                select(Account)
                .where(Account.username == username)
                .execution_options(populate_existing=True)
            )
            account = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._persistence_error("retrieve", e)

        if account is None:
            raise NotFoundError(resource="account", resource_id=username, key="username")
        return account


account_service = AccountService()
