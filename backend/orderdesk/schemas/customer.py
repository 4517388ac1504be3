"""
OrderDesk Backend: Customer Schemas
=====================================
"""

from datetime import datetime

from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    """Body for POST /customer."""
    name: str = Field(default="", description="Customer display name")
    phone: str = Field(default="", description="Contact phone number")


class CustomerUpdate(CustomerCreate):
    """Body for PUT /customer/{id}; replaces name and phone."""


class CustomerResponse(BaseModel):
    id: int
    name: str
    phone: str
    created_at: datetime

    model_config = {"from_attributes": True}
