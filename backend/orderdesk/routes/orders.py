"""
OrderDesk Backend: Order Route Handlers
=========================================

What:  CRUD endpoints for orders. Read responses embed the customer's name
       and phone; the search term matches the service description.
"""

from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.database import get_db_session
from orderdesk.dependencies import page_request, path_id, require_token
from orderdesk.pagination import PageRequest
from orderdesk.schemas.common import ErrorResponse, PaginatedResponse
from orderdesk.schemas.order import OrderCreate, OrderResponse, OrderUpdate
from orderdesk.services.order_service import order_service

router = APIRouter(
    prefix="/order",
    tags=["Orders"],
    dependencies=[Depends(require_token)],
    responses={403: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.get(
    "",
    response_model=PaginatedResponse[OrderResponse],
    summary="List orders",
    description=(
        "Paginated order list filtered by a case-insensitive substring of the "
        "service description. Orders whose customer was deleted are not listed."
    ),
)
async def list_orders(
    params: PageRequest = Depends(page_request),
    db: AsyncSession = Depends(get_db_session),
):
    return await order_service.search(db, params)


@router.post(
    "",
    response_model=OrderResponse,
    responses={400: {"description": "Unknown customer_id", "model": ErrorResponse}},
    summary="Create an order",
)
async def create_order(
    payload: OrderCreate,
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    return await order_service.create(db, payload)


@router.get(
    "/{id}",
    response_model=OrderResponse,
    responses={404: {"description": "Order not found", "model": ErrorResponse}},
    summary="Get an order by id",
)
async def get_order(
    order_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    return await order_service.get(db, order_id)


@router.put("/{id}", summary="Replace every field of an order")
async def update_order(
    payload: OrderUpdate,
    order_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, int]:
    await order_service.update(db, order_id, payload)
    return {"updated order": order_id}


@router.delete("/{id}", summary="Delete an order")
async def delete_order(
    order_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, int]:
    await order_service.delete(db, order_id)
    return {"deleted order": order_id}
