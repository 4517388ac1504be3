"""
OrderDesk Backend: Account Route Handlers
===========================================

What:  CRUD endpoints for system accounts, all behind the auth gate.

Responses never contain the password hash: every handler returns
AccountResponse, which has no password field.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.database import get_db_session
from orderdesk.dependencies import page_request, path_id, require_token
from orderdesk.pagination import PageRequest
from orderdesk.schemas.account import AccountCreate, AccountResponse, AccountUpdate
from orderdesk.schemas.common import ErrorResponse, PaginatedResponse
from orderdesk.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/account",
    tags=["Accounts"],
    dependencies=[Depends(require_token)],
    responses={403: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.get(
    "",
    response_model=PaginatedResponse[AccountResponse],
    summary="List accounts",
    description="Paginated account list, optionally filtered by a case-insensitive name substring.",
)
async def list_accounts(
    params: PageRequest = Depends(page_request),
    db: AsyncSession = Depends(get_db_session),
):
    return await account_service.search(db, params)


@router.post("", response_model=AccountResponse, summary="Create an account")
async def create_account(
    payload: AccountCreate,
    db: AsyncSession = Depends(get_db_session),
) -> AccountResponse:
    return await account_service.create(db, payload)


@router.get(
    "/{id}",
    response_model=AccountResponse,
    responses={404: {"description": "Account not found", "model": ErrorResponse}},
    summary="Get an account by id",
)
async def get_account(
    account_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> AccountResponse:
    return await account_service.get(db, account_id)


@router.put(
    "/{id}",
    responses={404: {"description": "Account not found", "model": ErrorResponse}},
    summary="Replace an account's name, phone and password",
)
async def update_account(
    payload: AccountUpdate,
    account_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, int]:
    await account_service.update(db, account_id, payload)
    return {"updated account": account_id}


@router.delete(
    "/{id}",
    responses={404: {"description": "Account not found", "model": ErrorResponse}},
    summary="Delete an account",
)
async def delete_account(
    account_id: int = Depends(path_id),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, int]:
    await account_service.delete(db, account_id)
    return {"deleted account": account_id}
