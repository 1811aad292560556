"""
Integration tests for the auth endpoints.

Tests the API at /api/auth including:
- Registration and duplicate detection
- Login by username or e-mail
- The current-user endpoint
- The password reset round trip
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.messages import AuthMessages
from campaign_codex.services import email as email_service
from campaign_codex.testing import DEFAULT_PASSWORD, create_user


@pytest.mark.integration
async def test_register_returns_token_and_user(client: AsyncClient):
    response = await client.post(
        "/api/auth/register",
        json={"username": "mira", "email": "Mira@Example.com", "password": "lantern42"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["user"]["username"] == "mira"
    assert data["user"]["email"] == "mira@example.com"

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200
    assert me.json()["username"] == "mira"


@pytest.mark.integration
async def test_register_duplicate_user(client: AsyncClient, session: AsyncSession):
    await create_user(session, username="taken", email="taken@example.com")

    response = await client.post(
        "/api/auth/register",
        json={"username": "taken", "email": "other@example.com", "password": "lantern42"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == AuthMessages.USER_EXISTS


@pytest.mark.integration
async def test_register_weak_password_message(client: AsyncClient):
    response = await client.post(
        "/api/auth/register",
        json={"username": "weakling", "email": "weak@example.com", "password": "short1"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == AuthMessages.PASSWORD_TOO_SHORT


@pytest.mark.integration
async def test_register_missing_field_message(client: AsyncClient):
    response = await client.post("/api/auth/register", json={"username": "nomail"})

    assert response.status_code == 400
    assert response.json()["detail"] == "email is required"


@pytest.mark.integration
async def test_login_with_username_or_email(client: AsyncClient, session: AsyncSession):
    await create_user(session, username="bard", email="bard@example.com")

    by_name = await client.post("/api/auth/login", json={"username": "bard", "password": DEFAULT_PASSWORD})
    by_email = await client.post(
        "/api/auth/login", json={"username": "BARD@example.com", "password": DEFAULT_PASSWORD}
    )

    assert by_name.status_code == 200
    assert by_email.status_code == 200
    assert by_email.json()["user"]["username"] == "bard"


@pytest.mark.integration
async def test_login_wrong_password(client: AsyncClient, session: AsyncSession):
    await create_user(session, username="rogue")

    response = await client.post("/api/auth/login", json={"username": "rogue", "password": "not-it-123"})

    assert response.status_code == 401
    assert response.json()["detail"] == AuthMessages.INVALID_CREDENTIALS


@pytest.mark.integration
async def test_me_requires_token(client: AsyncClient):
    missing = await client.get("/api/auth/me")
    garbage = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert missing.status_code == 401
    assert garbage.status_code == 401
    assert garbage.json()["detail"] == AuthMessages.INVALID_TOKEN


@pytest.mark.integration
async def test_forgot_password_unknown_email_is_generic(client: AsyncClient):
    response = await client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})

    assert response.status_code == 200
    assert response.json()["message"] == AuthMessages.RESET_REQUESTED


@pytest.mark.integration
async def test_password_reset_round_trip(client: AsyncClient, session: AsyncSession, monkeypatch):
    user = await create_user(session, username="cleric", email="cleric@example.com")
    sent: list[str] = []

    async def fake_send(target, token):
        assert target.id == user.id
        sent.append(token)

    monkeypatch.setattr(email_service, "send_password_reset_email", fake_send)

    requested = await client.post("/api/auth/forgot-password", json={"email": "cleric@example.com"})
    assert requested.status_code == 200
    assert requested.json()["message"] == AuthMessages.RESET_REQUESTED
    assert len(sent) == 1

    reset = await client.post("/api/auth/reset-password", json={"token": sent[0], "password": "newlight77"})
    assert reset.status_code == 200
    assert reset.json()["message"] == AuthMessages.RESET_COMPLETE

    login = await client.post("/api/auth/login", json={"username": "cleric", "password": "newlight77"})
    assert login.status_code == 200

    reused = await client.post("/api/auth/reset-password", json={"token": sent[0], "password": "another99"})
    assert reused.status_code == 400
    assert reused.json()["detail"] == AuthMessages.RESET_TOKEN_INVALID


@pytest.mark.integration
async def test_forgot_password_without_smtp_still_succeeds(client: AsyncClient, session: AsyncSession):
    await create_user(session, email="paladin@example.com")

    response = await client.post("/api/auth/forgot-password", json={"email": "paladin@example.com"})

    assert response.status_code == 200
    assert response.json()["message"] == AuthMessages.RESET_REQUESTED
