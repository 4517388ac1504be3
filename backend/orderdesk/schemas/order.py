"""
OrderDesk Backend: Order Schemas
==================================

What:  Request bodies and the read model for orders.

OrderResponse carries the customer's `name` and `phone`. Those are not order
columns: OrderService fills them from an inner join against dt_customer on
every read.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from orderdesk.pagination import INT32_MAX, INT32_MIN


class OrderCreate(BaseModel):
    """Body for POST /order. `customer_id` must identify an existing customer."""
    customer_id: int = Field(
        default=0, ge=INT32_MIN, le=INT32_MAX, description="Owning customer"
    )
    service: str = Field(default="", description="Description of the ordered service")
    amount: int = Field(
        default=0, ge=INT32_MIN, le=INT32_MAX, description="Quantity, in `unit`"
    )
    unit: str = Field(default="", description="Unit of the quantity, e.g. 'hours'")
    price: int = Field(
        default=0, ge=INT32_MIN, le=INT32_MAX, description="Price as a whole number"
    )


class OrderUpdate(OrderCreate):
    """Body for PUT /order/{id}; a full replace of every order field."""


class OrderResponse(BaseModel):
    """
    Example:
        {"id": 1, "customer_id": 1, "name": "Acme", "phone": "555-0100",
         "service": "Cleaning", "amount": 2, "unit": "hours", "price": 50,
         "created_at": "2024-05-01T09:30:00Z"}
    """
    id: int
    customer_id: int
    name: str = Field(description="Customer name (joined)")
    phone: str = Field(description="Customer phone (joined)")
    service: str
    amount: int
    unit: str
    price: int
    created_at: datetime
