"""
OrderDesk Backend: Customer Route Handlers
============================================
"""

from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.database import get_db_session
from orderdesk.dependencies import page_request, path_id, require_token
from orderdesk.pagination import PageRequest
from orderdesk.schemas.common import ErrorResponse, PaginatedResponse
from orderdesk.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from orderdesk.services.customer_service import customer_service

router = APIRouter(
    prefix="/customer",
    tags=["Customers"],
    dependencies=[Depends(require_token)],
    responses={403: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.get("", response_model=PaginatedResponse[CustomerResponse], summary="List customers")
async def list_customers(
    params: PageRequest = Depends(page_request),
    db: AsyncSession = Depends(get_db_session),
):
    return await customer_service.search(db, params)


@router.post("", response_model=CustomerResponse, summary="Create a customer")
async def create_customer(
    payload: CustomerCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CustomerResponse:
    return await customer_service.create(db, payload)


@router.get(
    "/{id}",
    response_model=CustomerResponse,
    responses={404: {"description": "Customer not found", "model": ErrorResponse}},
    summary="Get a customer by id",
)
async def get_customer(
    customer_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> CustomerResponse:
    return await customer_service.get(db, customer_id)


@router.put("/{id}", summary="Replace a customer's name and phone")
async def update_customer(
    payload: CustomerUpdate,
    customer_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, int]:
    await customer_service.update(db, customer_id, payload)
    return {"updated customer": customer_id}


@router.delete(
    "/{id}",
    summary="Delete a customer",
    description=(
        "Deletes the customer even if orders reference it. Those orders are "
        "then hidden from order reads, which inner-join customers."
    ),
)
async def delete_customer(
    customer_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, int]:
    await customer_service.delete(db, customer_id)
    return {"deleted customer": customer_id}
