"""
OrderDesk Backend: Order SQLAlchemy Model
===========================================

What:  ORM model representing the `dt_order` table.
Who:   Used by OrderService.

Table Design:
    - customer_id references dt_customer.id but carries NO database foreign
      key constraint. Deleting a customer therefore succeeds even while
      orders point at it; those orders drop out of every read because reads
      inner-join dt_customer.
    - The existence of the customer is checked by OrderService on create and
      update instead.
    - amount and price are integers (no fractional quantities or currency).
    - customer name/phone are NOT stored here; they are joined at read time.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.database import Base


class Order(Base):
    """A service ordered by a customer: what, how much, in which unit, at what price."""

    __tablename__ = "dt_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Indexed for the join against dt_customer
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    service: Mapped[str] = mapped_column(Text, nullable=False, default="")

    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    unit: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, customer_id={self.customer_id}, "
            f"service='{self.service}')>"
        )
