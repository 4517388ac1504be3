"""
OrderDesk Backend: Login & Registration Routes
================================================

The only resource-facing endpoints that do not require a token.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.database import get_db_session
from orderdesk.schemas.account import (
    AccountResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
)
from orderdesk.schemas.common import ErrorResponse
from orderdesk.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        403: {"description": "Wrong password", "model": ErrorResponse},
        404: {"description": "Unknown username", "model": ErrorResponse},
    },
    summary="Log in and obtain an access token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    """
    Verify username and password and return the account with a signed token.

    The token goes into the X-JWT-TOKEN header of every subsequent request.
    """
    return await auth_service.login(db, payload.username, payload.password)


@router.post(
    "/register",
    response_model=AccountResponse,
    responses={
        400: {"description": "Username taken or password too long", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AccountResponse:
    return await auth_service.register(db, payload)
