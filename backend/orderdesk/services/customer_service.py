"""
OrderDesk Backend: Customer Service
=====================================

What:  CRUD for customers. Search matches the customer name.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.models.customer import Customer
from orderdesk.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from orderdesk.services.resource_service import ResourceService, utcnow


class CustomerService(ResourceService[Customer, CustomerResponse]):

    def __init__(self):
        super().__init__(
            model=Customer,
            resource="customer",
            search_column=Customer.name,
            response_model=CustomerResponse,
        )

    async def create(self, db: AsyncSession, payload: CustomerCreate) -> CustomerResponse:
        customer = Customer(name=payload.name, phone=payload.phone, created_at=utcnow())
        await self._insert(db, customer)
        return CustomerResponse.model_validate(customer)

    async def update(self, db: AsyncSession, customer_id: int, payload: CustomerUpdate) -> None:
        # Orders pick up the new name/phone on their next read; nothing is copied
        await self._update(db, customer_id, {"name": payload.name, "phone": payload.phone})


customer_service = CustomerService()
