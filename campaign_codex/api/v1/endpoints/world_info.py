from typing import Any, List, Optional

from fastapi import APIRouter, status

from campaign_codex.api.deps import CampaignAccess, CampaignDM, SessionDep
from campaign_codex.core.messages import WorldInfoMessages
from campaign_codex.models.world_info import WorldInfo
from campaign_codex.schemas.world_info import WorldInfoCreate, WorldInfoRead, WorldInfoUpdate
from campaign_codex.services import records
from campaign_codex.services import world_info as world_info_service

router = APIRouter()

ENTITY_TYPE = world_info_service.ENTITY_TYPE


async def _load(session, context, entry_id: int) -> WorldInfo:
    return await records.get_in_campaign(
        session,
        WorldInfo,
        campaign_id=context.campaign_id,
        record_id=entry_id,
        not_found=WorldInfoMessages.NOT_FOUND,
    )


@router.get("/{campaign_id}/world-info", response_model=List[WorldInfoRead])
async def list_world_info(
    session: SessionDep,
    context: CampaignAccess,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> List[dict[str, Any]]:
    entries = await world_info_service.list_world_info(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        category=category,
        search=search,
    )
    return await records.with_tags(session, entries, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.get("/{campaign_id}/world-info/{entry_id}", response_model=WorldInfoRead)
async def read_world_info(entry_id: int, session: SessionDep, context: CampaignAccess) -> dict[str, Any]:
    entry = await records.get_visible_in_campaign(
        session,
        WorldInfo,
        campaign_id=context.campaign_id,
        record_id=entry_id,
        role=context.role,
        not_found=WorldInfoMessages.NOT_FOUND,
    )
    return await records.one_with_tags(session, entry, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.post("/{campaign_id}/world-info", response_model=WorldInfoRead, status_code=status.HTTP_201_CREATED)
async def create_world_info(entry_in: WorldInfoCreate, session: SessionDep, context: CampaignDM) -> dict[str, Any]:
    entry = await world_info_service.create_world_info(
        session,
        campaign_id=context.campaign_id,
        user_id=context.user_id,
        payload=entry_in,
    )
    return await records.one_with_tags(session, entry, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.put("/{campaign_id}/world-info/{entry_id}", response_model=WorldInfoRead)
async def update_world_info(
    entry_id: int,
    entry_in: WorldInfoUpdate,
    session: SessionDep,
    context: CampaignDM,
) -> dict[str, Any]:
    entry = await _load(session, context, entry_id)
    entry = await world_info_service.update_world_info(session, entry, user_id=context.user_id, payload=entry_in)
    return await records.one_with_tags(session, entry, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.delete("/{campaign_id}/world-info/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_world_info(entry_id: int, session: SessionDep, context: CampaignDM) -> None:
    entry = await _load(session, context, entry_id)
    await world_info_service.delete_world_info(session, entry)
