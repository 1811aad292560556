"""
Test data factories for creating database models.

This module provides factory functions for creating test instances of database models
with sensible defaults. Each factory function can accept overrides for any field.
"""

from functools import lru_cache
from itertools import count
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.security import create_access_token, get_password_hash
from campaign_codex.models.campaign import Campaign, CampaignParticipant, ParticipantRole
from campaign_codex.models.character import Character, CharacterType
from campaign_codex.models.game_session import GameSession
from campaign_codex.models.location import Location
from campaign_codex.models.user import User
from campaign_codex.models.visibility import Visibility
from campaign_codex.services import campaigns as campaigns_service

DEFAULT_PASSWORD = "testpassword123"

_sequence = count(1)


@lru_cache
def _default_password_hash() -> str:
    # bcrypt is deliberately slow; hash the shared password once per run
    return get_password_hash(DEFAULT_PASSWORD)


async def _persist(session: AsyncSession, record: Any, commit: bool) -> Any:
    session.add(record)
    if commit:
        await session.commit()
        await session.refresh(record)
    else:
        await session.flush()
    return record


async def create_user(
    session: AsyncSession,
    commit: bool = True,
    **overrides: Any,
) -> User:
    """
    Create a test user with sensible defaults.

    Example:
        user = await create_user(session, username="gm", email="gm@example.com")
    """
    number = next(_sequence)
    defaults = {
        "username": f"user{number}",
        "email": f"user{number}@example.com",
        "password_hash": _default_password_hash(),
    }
    return await _persist(session, User(**{**defaults, **overrides}), commit)


async def create_campaign(
    session: AsyncSession,
    owner: User | None = None,
    **overrides: Any,
) -> Campaign:
    """
    Create a campaign through the campaign service.

    The owner participant row and the premade tags are created as well, exactly
    as the API does it.
    """
    if owner is None:
        owner = await create_user(session)
    return await campaigns_service.create_campaign(
        session,
        owner_id=owner.id,
        name=overrides.get("name", f"Campaign {next(_sequence)}"),
        description=overrides.get("description", "A test campaign"),
    )


async def add_participant(
    session: AsyncSession,
    campaign: Campaign,
    user: User | None = None,
    role: ParticipantRole = ParticipantRole.player,
    commit: bool = True,
) -> CampaignParticipant:
    if user is None:
        user = await create_user(session)
    participant = CampaignParticipant(
        campaign_id=campaign.id,
        user_id=user.id,
        role=role,
        invited_by=campaign.user_id,
    )
    return await _persist(session, participant, commit)


async def create_character(
    session: AsyncSession,
    campaign: Campaign,
    commit: bool = True,
    **overrides: Any,
) -> Character:
    defaults = {
        "campaign_id": campaign.id,
        "type": CharacterType.npc,
        "name": f"Character {next(_sequence)}",
        "visibility": Visibility.dm_only.value,
        "created_by_user_id": campaign.user_id,
        "last_updated_by_user_id": campaign.user_id,
    }
    values = {**defaults, **overrides}
    if isinstance(values["visibility"], Visibility):
        values["visibility"] = values["visibility"].value
    return await _persist(session, Character(**values), commit)


async def create_location(
    session: AsyncSession,
    campaign: Campaign,
    commit: bool = True,
    **overrides: Any,
) -> Location:
    defaults = {
        "campaign_id": campaign.id,
        "name": f"Location {next(_sequence)}",
        "visibility": Visibility.dm_only.value,
        "created_by_user_id": campaign.user_id,
        "last_updated_by_user_id": campaign.user_id,
    }
    return await _persist(session, Location(**{**defaults, **overrides}), commit)


async def create_game_session(
    session: AsyncSession,
    campaign: Campaign,
    commit: bool = True,
    **overrides: Any,
) -> GameSession:
    defaults = {
        "campaign_id": campaign.id,
        "session_number": next(_sequence),
        "title": "Test session",
        "visibility": Visibility.player_visible.value,
        "created_by_user_id": campaign.user_id,
        "last_updated_by_user_id": campaign.user_id,
    }
    return await _persist(session, GameSession(**{**defaults, **overrides}), commit)


def get_auth_token(user: User) -> str:
    return create_access_token(subject=user.id, username=user.username)


def get_auth_headers(user: User) -> dict[str, str]:
    """Bearer headers for requests made as ``user``."""
    return {"Authorization": f"Bearer {get_auth_token(user)}"}
