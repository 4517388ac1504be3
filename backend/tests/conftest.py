"""
OrderDesk Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   A fresh in-memory SQLite database per test (aiosqlite + StaticPool so
       every session sees the same connection), real services on top of it,
       and an httpx AsyncClient talking to the app through ASGITransport.

Fixture Hierarchy (all function-scoped):
    db_engine
    └── session_factory
        ├── db_session:   one AsyncSession for service-level tests
        └── test_client:  AsyncClient with get_db_session overridden
            └── auth_headers: a valid token header for the gated routes
"""

import os

# Settings are read once at import; override them BEFORE any orderdesk import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-for-the-orderdesk-suite"
os.environ["JWT_EXPIRE_MINUTES"] = "60"
os.environ["BCRYPT_ROUNDS"] = "4"  # Lowest cost bcrypt accepts; keeps tests fast
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import orderdesk.models  # noqa: F401  (registers tables on Base.metadata)
from orderdesk.config import settings
from orderdesk.database import Base, get_db_session
from orderdesk.security import token_service


@pytest_asyncio.fixture
async def db_engine():
    """
    Provides an async engine over a private in-memory SQLite database.

    StaticPool hands out the single underlying connection every time, which
    is what keeps ":memory:" data alive across sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """
    Provides one session for service tests.

    Usage:
        async def test_get(db_session):
            created = await customer_service.create(db_session, payload)
            fetched = await customer_service.get(db_session, created.id)
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an HTTP client bound to the app, backed by the test database.

    Each request gets its own session, committed on success and rolled
    back on error, the same contract as get_db_session.
    """
    from orderdesk.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """A header carrying a freshly issued, valid token."""
    return {settings.auth_header_name: token_service.issue("tester")}


@pytest.fixture
def account_payload():
    return {
        "name": "Alice Admin",
        "phone": "555-0199",
        "username": "alice",
        "password": "s3cret-pass",
    }
