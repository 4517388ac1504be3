"""
OrderDesk Backend: Account SQLAlchemy Model
=============================================

What:  ORM model representing the `sys_account` table.
Who:   Used by AuthService (register/login) and AccountService (CRUD).

Table Design:
    - Integer serial primary key (the API addresses accounts as /account/{id})
    - username: unique, the login identifier and the token subject
    - password: bcrypt hash string ("$2b$10$..."), never the plaintext
    - created_at: set server-side in UTC at insert; never changed by update
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.database import Base


class Account(Base):
    """
    A system user that can log in and obtain a bearer token.

    Lifecycle:
        1. Created at registration with the hash of the submitted password
        2. Updated as a full replace of name, phone and password (rehashed)
        3. Deleted by id
    """

    __tablename__ = "sys_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    # Unique at the database level; a duplicate insert raises IntegrityError,
    # which the service layer reports as PersistenceError.
    username: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
    )

    # bcrypt output embeds algorithm, cost and per-record salt
    password: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        # The hash is deliberately left out of the representation
        return f"<Account(id={self.id}, username='{self.username}')>"
