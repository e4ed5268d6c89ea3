"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

# db.session builds its engine from Settings at import time, so the environment
# must be in place before any app module is imported.
TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_API_TOKEN = "test-api-token"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["API_TOKEN"] = TEST_API_TOKEN
os.environ["DEV_MODE"] = "false"
os.environ["REDIS_ENABLED"] = "false"
os.environ["DEBUG_ERRORS"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from models import Base  # noqa: E402


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh in-memory SQLite engine with the schema for each test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database; disposing the engine throws the database away.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session on the per-test database."""
    session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@asynccontextmanager
async def build_client(
    db_session: AsyncSession,
    headers: dict[str, str] | None = None,
    raise_app_exceptions: bool = True,
) -> AsyncGenerator[AsyncClient]:
    """
    Yield an AsyncClient wired to the app with the test session injected.

    Dependency overrides are cleared on exit.
    """
    # Clear the settings cache so it picks up the test environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
            base_url="http://test",
            headers=headers,
        ) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Create a test client that sends the configured bearer token."""
    async with build_client(
        db_session, headers={"Authorization": f"Bearer {TEST_API_TOKEN}"},
    ) as test_client:
        yield test_client


@pytest.fixture
async def anonymous_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Create a test client without credentials."""
    async with build_client(db_session) as test_client:
        yield test_client
