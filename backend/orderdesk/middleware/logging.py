"""
OrderDesk Backend: Request Logging Middleware
===============================================

What:  One access log line per HTTP request with status and duration.
Who:   Applied to every request; runs inside RequestIDMiddleware so the
       correlation id is already set.

Example line:
    2026-01-15T12:00:00 [WARNING] orderdesk.access: GET /order 403 1.4ms [9b1f03aa] from 10.0.0.7

Never logged: request bodies (passwords) and the token header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from orderdesk.middleware.request_id import request_id_var

logger = logging.getLogger("orderdesk.access")

# Polled by orchestration; logging every probe drowns real traffic
SKIP_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, anything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration, request id and client ip."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
