"""
Pytest configuration and fixtures for campaign_codex tests.

This module provides the core testing infrastructure including:
- An in-memory SQLite database created fresh for every test
- Session fixtures for database access
- Test client for API integration tests
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from campaign_codex.core.config import settings  # noqa: E402
from campaign_codex.core.rate_limit import limiter  # noqa: E402
from campaign_codex.db.session import enable_sqlite_foreign_keys, get_session, init_models  # noqa: E402
from campaign_codex.main import app  # noqa: E402


@pytest.fixture(scope="function")
async def engine():
    """Create a fresh in-memory database with every table."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    await init_models(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a clean AsyncSession for the test; the database dies with the engine."""
    async_session = sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as test_session:
        yield test_session


@pytest.fixture(autouse=True)
def uploads_dir(tmp_path, monkeypatch):
    """Point image storage at a per-test temporary directory."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOADS_DIR", str(path))
    return path


@pytest.fixture
async def client(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client: AsyncClient):
            response = await client.get("/api/health")
            assert response.status_code == 200
    """

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = override_get_session

    # Disable rate limiting in tests
    limiter.enabled = False

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
