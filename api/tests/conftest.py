"""
Shared test fixtures for the SynthSEO gate tests.

Provides an in-memory database per test, an HTTP client wired to it,
and the site API key.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from synthgate.config import settings
from synthgate.database import Base, get_db
from synthgate.main import app
from synthgate.middleware.rate_limit import reset_limiter
from synthgate.services.options import ApiKeyStore

# Import models so they're registered with Base.metadata before table creation
from synthgate.models import RateLimitWindow, RequestAuditLog, SiteOption  # noqa: F401

TEST_DATABASE_URL = settings.test_database_url

# In-memory SQLite only lives as long as its connection, so share one.
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=StaticPool if TEST_DATABASE_URL.startswith("sqlite") else NullPool,
    echo=False,
)

TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

SITE_KEY = "correct-value-Abcdefghij0123456789"


class FakeClock:
    """Settable clock for window arithmetic."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def set(self, value: str) -> None:
        self.now = datetime.fromisoformat(value).replace(tzinfo=timezone.utc)

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Reset the admin route limiter before each test to ensure test isolation."""
    reset_limiter()
    yield


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create tables before each test function, drop after.
    Provides isolated database state per test.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client configured for testing.
    Overrides database dependency with test session.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Credential Fixtures ---


@pytest_asyncio.fixture
async def site_api_key(db_session: AsyncSession) -> str:
    """Store the site API key and return it."""
    await ApiKeyStore.for_session(db_session).set_current_key(SITE_KEY)
    return SITE_KEY


@pytest.fixture
def auth_headers():
    """Factory fixture for creating Bearer authorization headers."""

    def _auth_headers(api_key: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    return _auth_headers


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Token": settings.admin_token}


# --- Utility Fixtures ---


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting at 10:00:00 UTC."""
    return FakeClock(datetime(2026, 10, 19, 10, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def frozen_time():
    """
    Fixture for time-based testing using freezegun.

    Usage:
        with frozen_time("2026-10-19 12:00:00"):
            # time is frozen
    """
    from freezegun import freeze_time

    return freeze_time
