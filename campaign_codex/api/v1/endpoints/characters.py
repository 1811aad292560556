from typing import Any, List, Optional

from fastapi import APIRouter, Query, status

from campaign_codex.api.deps import CampaignAccess, SessionDep
from campaign_codex.models.character import CharacterType
from campaign_codex.schemas.character import CharacterCreate, CharacterRead, CharacterUpdate
from campaign_codex.services import characters as characters_service
from campaign_codex.services import records
from campaign_codex.services.visibility import sanitize_character

router = APIRouter()

ENTITY_TYPE = characters_service.ENTITY_TYPE


@router.get("/{campaign_id}/characters", response_model=List[CharacterRead])
async def list_characters(
    session: SessionDep,
    context: CampaignAccess,
    character_type: Optional[CharacterType] = Query(default=None, alias="type"),
    search: Optional[str] = None,
) -> List[dict[str, Any]]:
    characters = await characters_service.list_characters(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        user_id=context.user_id,
        character_type=character_type,
        search=search,
    )
    payloads = await records.with_tags(session, characters, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)
    return [sanitize_character(payload, context.role) for payload in payloads]


@router.get("/{campaign_id}/characters/{character_id}", response_model=CharacterRead)
async def read_character(character_id: int, session: SessionDep, context: CampaignAccess) -> dict[str, Any]:
    character = await characters_service.get_visible_character(
        session,
        campaign_id=context.campaign_id,
        character_id=character_id,
        role=context.role,
        user_id=context.user_id,
    )
    payload = await records.one_with_tags(session, character, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)
    return sanitize_character(payload, context.role)


@router.post("/{campaign_id}/characters", response_model=CharacterRead, status_code=status.HTTP_201_CREATED)
async def create_character(
    character_in: CharacterCreate,
    session: SessionDep,
    context: CampaignAccess,
) -> dict[str, Any]:
    character = await characters_service.create_character(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        user_id=context.user_id,
        payload=character_in,
    )
    payload = await records.one_with_tags(session, character, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)
    return sanitize_character(payload, context.role)


@router.put("/{campaign_id}/characters/{character_id}", response_model=CharacterRead)
async def update_character(
    character_id: int,
    character_in: CharacterUpdate,
    session: SessionDep,
    context: CampaignAccess,
) -> dict[str, Any]:
    character = await characters_service.get_character(
        session,
        campaign_id=context.campaign_id,
        character_id=character_id,
    )
    character = await characters_service.update_character(
        session,
        character,
        role=context.role,
        user_id=context.user_id,
        payload=character_in,
    )
    payload = await records.one_with_tags(session, character, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)
    return sanitize_character(payload, context.role)


@router.delete("/{campaign_id}/characters/{character_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_character(character_id: int, session: SessionDep, context: CampaignAccess) -> None:
    character = await characters_service.get_character(
        session,
        campaign_id=context.campaign_id,
        character_id=character_id,
    )
    await characters_service.delete_character(session, character, role=context.role, user_id=context.user_id)
