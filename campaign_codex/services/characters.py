from __future__ import annotations

import logging
from typing import Any, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import InvalidRequestError, NotFoundError, PermissionDeniedError
from campaign_codex.core.messages import CharacterMessages
from campaign_codex.db.query import apply_filters, apply_ordering, search_across
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.character import Character, CharacterType
from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.character import CharacterCreate, CharacterUpdate
from campaign_codex.schemas.query import FilterCondition, SortDir
from campaign_codex.services import campaigns as campaigns_service
from campaign_codex.services import records
from campaign_codex.services.visibility import can_view_character, character_visibility_clause

logger = logging.getLogger(__name__)

ENTITY_TYPE = "character"

# What a player may change on the sheet assigned to them
OWN_CHARACTER_FIELDS = frozenset({"description", "character_sheet", "visibility"})
# What a player may change on an NPC or antagonist they wrote
AUTHORED_NPC_FIELDS = frozenset({"name", "description", "character_sheet", "alignment", "visibility"})


def _filter_fields() -> dict[str, Any]:
    return {
        "type": Character.type,
        "search": search_across(Character.name, Character.description),
    }


def _payload_values(payload: CharacterCreate | CharacterUpdate) -> dict[str, Any]:
    values = payload.model_dump(exclude_unset=True, exclude={"character_sheet"})
    if "character_sheet" in payload.model_fields_set:
        sheet = payload.character_sheet
        values["character_sheet"] = sheet.to_document() if sheet is not None else None
    return values


async def _check_assignable_player(session: AsyncSession, *, campaign_id: int, user_id: Optional[int]) -> None:
    if user_id is None:
        return
    role = await campaigns_service.resolve_role(session, campaign_id=campaign_id, user_id=user_id)
    if role is None:
        raise InvalidRequestError(CharacterMessages.INVALID_PLAYER)


async def get_character(session: AsyncSession, *, campaign_id: int, character_id: int) -> Character:
    """Load a character regardless of visibility; writes address records by id."""
    result = await session.exec(
        select(Character).where(Character.id == character_id, Character.campaign_id == campaign_id)
    )
    character = result.one_or_none()
    if character is None:
        raise NotFoundError(CharacterMessages.NOT_FOUND)
    return character


async def get_visible_character(
    session: AsyncSession,
    *,
    campaign_id: int,
    character_id: int,
    role: Optional[ParticipantRole],
    user_id: int,
) -> Character:
    character = await get_character(session, campaign_id=campaign_id, character_id=character_id)
    if not can_view_character(character, role, user_id):
        raise NotFoundError(CharacterMessages.NOT_FOUND)
    return character


async def list_characters(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: Optional[ParticipantRole],
    user_id: int,
    character_type: Optional[CharacterType] = None,
    search: Optional[str] = None,
) -> list[Character]:
    stmt = select(Character).where(
        Character.campaign_id == campaign_id,
        character_visibility_clause(role, user_id),
    )
    stmt = apply_filters(
        stmt,
        [
            FilterCondition(field="type", value=character_type),
            FilterCondition(field="search", value=search),
        ],
        _filter_fields(),
    )
    stmt = apply_ordering(stmt, [(Character.type, SortDir.asc), (Character.name, SortDir.asc)])
    result = await session.exec(stmt)
    return list(result.all())


async def create_character(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: ParticipantRole,
    user_id: int,
    payload: CharacterCreate,
) -> Character:
    values = _payload_values(payload)
    if role == ParticipantRole.player:
        # Players author their own sheet or NPCs, visible to the table by default
        if payload.type == CharacterType.player:
            values["player_user_id"] = user_id
        else:
            values["player_user_id"] = None
    else:
        if payload.type != CharacterType.player:
            values["player_user_id"] = None
        await _check_assignable_player(session, campaign_id=campaign_id, user_id=values.get("player_user_id"))
    if values.get("visibility") is None:
        values["visibility"] = Visibility.player_visible if role == ParticipantRole.player else Visibility.dm_only

    character = records.new_record(Character, values, campaign_id=campaign_id)
    records.stamp_new(character, user_id=user_id)
    character = await records.save(session, character)
    logger.info("Character %s created in campaign %s by user %s", character.id, campaign_id, user_id)
    return character


def _allowed_player_fields(character: Character, user_id: int) -> frozenset[str]:
    is_player_type = character.type == CharacterType.player
    if is_player_type and character.player_user_id == user_id:
        return OWN_CHARACTER_FIELDS
    if not is_player_type and character.created_by_user_id == user_id:
        return AUTHORED_NPC_FIELDS
    raise PermissionDeniedError(CharacterMessages.EDIT_FORBIDDEN)


async def update_character(
    session: AsyncSession,
    character: Character,
    *,
    role: ParticipantRole,
    user_id: int,
    payload: CharacterUpdate,
) -> Character:
    allowed = _allowed_player_fields(character, user_id) if role == ParticipantRole.player else None
    changes = _payload_values(payload)
    for field in ("type", "visibility"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    if "name" in changes and changes["name"] is None:
        raise InvalidRequestError(CharacterMessages.NAME_REQUIRED)
    if allowed is not None:
        changes = {field: value for field, value in changes.items() if field in allowed}
    else:
        new_type = changes.get("type", character.type)
        if new_type != CharacterType.player:
            changes["player_user_id"] = None
        elif "player_user_id" in changes:
            await _check_assignable_player(session, campaign_id=character.campaign_id, user_id=changes["player_user_id"])
    records.apply_changes(character, changes, user_id=user_id)
    return await records.save(session, character)


async def delete_character(
    session: AsyncSession,
    character: Character,
    *,
    role: ParticipantRole,
    user_id: int,
) -> None:
    if role == ParticipantRole.player:
        if character.type == CharacterType.player or character.created_by_user_id != user_id:
            raise PermissionDeniedError(CharacterMessages.DELETE_FORBIDDEN)
    await records.delete_record(session, character, entity_type=ENTITY_TYPE)
    logger.info("Character %s deleted from campaign %s", character.id, character.campaign_id)

