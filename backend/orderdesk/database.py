"""
OrderDesk Backend: Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       FastAPI session dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system and by
       the application lifespan (table creation, engine disposal).
When:  Engine is created at module import; sessions are created per request.

Connection Pooling:
    pool_size=20, max_overflow=10:  at most 30 connections per worker
    pool_pre_ping:                  validates connections before use
    pool_recycle=3600:              recycles connections every hour

    SQLite URLs (tests, local demos) use SQLAlchemy's default SQLite pool,
    which does not accept the sizing arguments, so they are omitted there.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from orderdesk.config import settings


def _engine_options() -> Dict[str, Any]:
    """Keyword arguments for create_async_engine derived from settings."""
    options: Dict[str, Any] = {
        # Echo SQL only when debugging; it is very noisy otherwise
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit, so response
# models can be built from ORM instances once the transaction is closed.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers its table on `Base.metadata`, which create_tables()
    uses to issue CREATE TABLE IF NOT EXISTS at startup.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handlers
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/customer")
        async def list_customers(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables() -> None:
    """
    What:  Creates every table registered on Base.metadata that does not exist.
    When:  Application startup, when settings.db_create_tables is enabled.
    How:   create_all() is synchronous; run_sync bridges it onto the async
           connection. Existing tables are left untouched.
    """
    # Registers the ORM classes on Base.metadata before create_all runs
    import orderdesk.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
