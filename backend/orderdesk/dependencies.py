"""
OrderDesk Backend: Request Dependencies (Auth Gate & Parameter Parsing)
=========================================================================

What:  FastAPI dependencies shared by the resource routers.
Who:   Declared on routers and route signatures via Depends().

    require_token   the auth gate; attached to every account/customer/order
                    router so it runs before any handler body
    page_request    turns ?search=&page=&limit= into a PageRequest
    path_id         parses the {id} path segment

Auth gate contract:
    1. Read the token from settings.auth_header_name (default X-JWT-TOKEN);
       an optional "Bearer " prefix is accepted
    2. Validate it with the process-wide TokenService
    3. Missing, malformed or invalid → UnauthorizedError, rendered as
       403 {"error": "Permission denied"}; the handler never runs
    4. Valid → the claims are returned to the handler (unused today)

    The gate grants one global "authenticated" capability. It does not
    compare the token's username with the resource being accessed.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Query
from fastapi.security import APIKeyHeader

from orderdesk.config import settings
from orderdesk.exceptions import UnauthorizedError, ValidationError
from orderdesk.middleware.request_id import request_id_var
from orderdesk.pagination import PageRequest, to_int32
from orderdesk.security import token_service

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must produce our 403 envelope, not
# FastAPI's default error body. Also documents the header in OpenAPI.
token_header = APIKeyHeader(
    name=settings.auth_header_name,
    auto_error=False,
    description="Signed access token returned by POST /login",
)

BEARER_PREFIX = "bearer "


def extract_token(raw: Optional[str]) -> Optional[str]:
    """Strip whitespace and an optional case-insensitive "Bearer " prefix."""
    if raw is None:
        return None
    value = raw.strip()
    if value.lower().startswith(BEARER_PREFIX):
        value = value[len(BEARER_PREFIX):].strip()
    return value or None


async def require_token(raw_token: Optional[str] = Depends(token_header)) -> Dict[str, Any]:
    """
    Auth gate: reject the request unless it carries a valid token.

    Raises:
        UnauthorizedError: token missing or invalid (→ 403 "Permission denied")
    """
    try:
        return token_service.validate(extract_token(raw_token))
    except UnauthorizedError as exc:
        logger.warning(
            "[%s] Rejected request token: %s", request_id_var.get(""), exc.reason
        )
        raise


async def page_request(
    search: Optional[str] = Query(default=None, description="Case-insensitive substring filter"),
    page: Optional[str] = Query(default=None, description="Page number (default 1)"),
    limit: Optional[str] = Query(default=None, description="Items per page (default 10)"),
) -> PageRequest:
    """
    Build the list request from raw query parameters.

    page and limit are accepted as strings so a malformed value surfaces as
    our ValidationError ("Invalid page given abc") rather than FastAPI's
    generic validation payload.
    """
    return PageRequest.from_query(search=search, page=page, limit=limit)


def path_id(id: str) -> int:
    """
    Parse the {id} path segment.

    Raises:
        ValidationError: the segment is not a base-10 integer within the
                         INTEGER column range (→ 400)
    """
    try:
        return to_int32(id)
    except ValueError:
        raise ValidationError(message=f"Invalid ID given {id}", field="id")
