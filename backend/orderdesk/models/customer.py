"""
OrderDesk Backend: Customer SQLAlchemy Model
==============================================

What:  ORM model representing the `dt_customer` table.
Who:   Used by CustomerService, and joined by OrderService to embed the
       customer's name and phone into every order it reads.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.database import Base


class Customer(Base):
    """A customer that orders are placed for. Holds no credential material."""

    __tablename__ = "dt_customer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name='{self.name}')>"
