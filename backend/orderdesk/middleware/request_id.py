"""
OrderDesk Backend: Request ID Middleware
==========================================

What:  Tags each request with a short correlation id and echoes it back in
       the X-Request-ID response header.
Who:   Read by the access logger, the auth gate and the exception handlers,
       which put it in every error body.

A client-supplied X-Request-ID is reused so a frontend can correlate its own
error reports with server logs.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """First 8 hex chars of a uuid4; enough to correlate log lines."""
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns the request id, stores it in `request_id_var` and `request.state`."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
