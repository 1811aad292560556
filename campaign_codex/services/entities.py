"""Registry of taggable / attachable campaign records keyed by entity type."""

from __future__ import annotations

from typing import Any, Optional

from sqlmodel import SQLModel, delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import InvalidRequestError, NotFoundError
from campaign_codex.core.messages import TagMessages
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.character import Character
from campaign_codex.models.content import ContentItem
from campaign_codex.models.creature import Creature
from campaign_codex.models.faction import Faction
from campaign_codex.models.game_session import GameSession
from campaign_codex.models.location import Location
from campaign_codex.models.quest import Quest
from campaign_codex.models.tag import EntityTag
from campaign_codex.models.world_info import WorldInfo
from campaign_codex.services.visibility import can_view_character, is_visible

ENTITY_MODELS: dict[str, type[SQLModel]] = {
    "character": Character,
    "location": Location,
    "faction": Faction,
    "world_info": WorldInfo,
    "quest": Quest,
    "session": GameSession,
    "creature": Creature,
    "content_item": ContentItem,
}


def get_entity_model(entity_type: str) -> type[SQLModel]:
    model = ENTITY_MODELS.get(entity_type)
    if model is None:
        raise InvalidRequestError(TagMessages.INVALID_ENTITY_TYPE)
    return model


async def get_entity(
    session: AsyncSession,
    *,
    entity_type: str,
    entity_id: int,
    campaign_id: int,
) -> Optional[Any]:
    model = get_entity_model(entity_type)
    stmt = select(model).where(model.id == entity_id, model.campaign_id == campaign_id)
    result = await session.exec(stmt)
    return result.one_or_none()


async def get_visible_entity(
    session: AsyncSession,
    *,
    entity_type: str,
    entity_id: int,
    campaign_id: int,
    role: Optional[ParticipantRole],
    user_id: int,
) -> Any:
    """Fetch a record the caller may see; anything else reads as not found."""
    entity = await get_entity(session, entity_type=entity_type, entity_id=entity_id, campaign_id=campaign_id)
    if entity is None:
        raise NotFoundError(TagMessages.ENTITY_NOT_FOUND)
    if isinstance(entity, Character):
        visible = can_view_character(entity, role, user_id)
    else:
        visible = is_visible(entity.visibility, role)
    if not visible:
        raise NotFoundError(TagMessages.ENTITY_NOT_FOUND)
    return entity


async def delete_entity_tags(session: AsyncSession, *, entity_type: str, entity_id: int) -> None:
    """Drop tag associations of a record; the caller commits."""
    await session.exec(
        delete(EntityTag).where(EntityTag.entity_type == entity_type, EntityTag.entity_id == entity_id)
    )
