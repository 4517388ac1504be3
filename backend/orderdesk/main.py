"""
OrderDesk Backend: FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       the module-level `app` is what uvicorn serves
       (uvicorn orderdesk.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:                                            │
    │    open:    POST /login  POST /register  GET /health│
    │    gated:   /account  /customer  /order  (+ /{id})  │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError 400 │ NotFound 404 │ Unauth 403  │
    │    Persistence 400 │ Hashing 400 │ unexpected 500   │
    └─────────────────────────────────────────────────────┘

Every error body has the same shape: {"error": <message>, "request_id": <id>}.

Lifecycle:
    Startup:  configure logging, validate configuration, create tables
              (settings.db_create_tables)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from orderdesk import __version__
from orderdesk.config import settings
from orderdesk.database import create_tables, dispose_engine
from orderdesk.exceptions import HashingError, OrderDeskError, ValidationError
from orderdesk.middleware.logging import RequestLoggingMiddleware
from orderdesk.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from orderdesk.routes import accounts, auth, customers, health, orders

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Handler: stdout (Docker captures it). force=True replaces whatever
    uvicorn installed before the app was imported.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("OrderDesk Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving; the log tells the operator what to fix
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")

    if settings.db_create_tables:
        await create_tables()
        logger.info("Database tables ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("OrderDesk Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def current_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: Optional[dict] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": current_request_id(request)},
        headers=headers,
    )


def format_validation_errors(exc: RequestValidationError) -> str:
    """
    Flatten pydantic's error list into one readable line.

        [{"loc": ("body", "username"), "msg": "Field required"}]
        → "Invalid request: username: Field required"
    """
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid request: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to status codes and the shared error body.

    Handler hierarchy:
        OrderDeskError subclasses → exc.status_code (400 / 403 / 404)
        RequestValidationError    → 400 (malformed JSON body or field types)
        HTTPException             → its own status (405 method not allowed,
                                    404 unknown route)
        Exception (fallback)      → 500, details logged server-side only
    """

    @app.exception_handler(OrderDeskError)
    async def handle_orderdesk_error(request: Request, exc: OrderDeskError):
        # Persistence, auth and lookup failures are logged where they are raised
        if isinstance(exc, (ValidationError, HashingError)):
            logger.warning(
                "[%s] %s: %s", current_request_id(request), type(exc).__name__, exc.message
            )
        return error_response(request, exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = format_validation_errors(exc)
        logger.warning("[%s] Validation error: %s", current_request_id(request), message)
        return error_response(request, 400, message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(
            request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            current_request_id(request),
            str(exc),
            exc_info=True,
        )
        return error_response(
            request, 500, "An unexpected error occurred. Please try again or contact support."
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a FastAPI app."""
    app = FastAPI(
        title="OrderDesk API",
        description=(
            "Order management backend: accounts, customers and orders with "
            "paginated search, guarded by signed access tokens."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type", settings.auth_header_name, REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(accounts.router)
    app.include_router(customers.router)
    app.include_router(orders.router)
    app.include_router(health.router)

    return app


app = create_app()
