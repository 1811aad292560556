"""
Smoke tests to verify test infrastructure is working correctly.

These tests validate that the in-memory database, fixtures, and basic
testing setup are functioning properly.
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.security import verify_password
from campaign_codex.testing import DEFAULT_PASSWORD, create_user, get_auth_headers


@pytest.mark.unit
async def test_database_session(session: AsyncSession):
    assert isinstance(session, AsyncSession)


@pytest.mark.unit
async def test_create_user_factory(session: AsyncSession):
    user = await create_user(session, username="factory", email="factory@example.com")

    assert user.id is not None
    assert user.username == "factory"
    assert verify_password(DEFAULT_PASSWORD, user.password_hash)


@pytest.mark.integration
async def test_health_endpoint(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
async def test_auth_headers_authenticate(client: AsyncClient, session: AsyncSession):
    user = await create_user(session)

    response = await client.get("/api/auth/me", headers=get_auth_headers(user))

    assert response.status_code == 200
    assert response.json()["id"] == user.id
