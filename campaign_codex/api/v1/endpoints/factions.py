from typing import Any, List, Optional

from fastapi import APIRouter, status

from campaign_codex.api.deps import CampaignAccess, CampaignDM, SessionDep
from campaign_codex.core.messages import FactionMessages
from campaign_codex.models.faction import Faction
from campaign_codex.schemas.faction import FactionCreate, FactionRead, FactionUpdate
from campaign_codex.services import factions as factions_service
from campaign_codex.services import records

router = APIRouter()

ENTITY_TYPE = factions_service.ENTITY_TYPE


@router.get("/{campaign_id}/factions", response_model=List[FactionRead])
async def list_factions(
    session: SessionDep,
    context: CampaignAccess,
    search: Optional[str] = None,
) -> List[dict[str, Any]]:
    factions = await factions_service.list_factions(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        search=search,
    )
    return await records.with_tags(session, factions, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.get("/{campaign_id}/factions/{faction_id}", response_model=FactionRead)
async def read_faction(faction_id: int, session: SessionDep, context: CampaignAccess) -> dict[str, Any]:
    faction = await records.get_visible_in_campaign(
        session,
        Faction,
        campaign_id=context.campaign_id,
        record_id=faction_id,
        role=context.role,
        not_found=FactionMessages.NOT_FOUND,
    )
    return await records.one_with_tags(session, faction, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.post("/{campaign_id}/factions", response_model=FactionRead, status_code=status.HTTP_201_CREATED)
async def create_faction(faction_in: FactionCreate, session: SessionDep, context: CampaignDM) -> dict[str, Any]:
    faction = await factions_service.create_faction(
        session,
        campaign_id=context.campaign_id,
        user_id=context.user_id,
        payload=faction_in,
    )
    return await records.one_with_tags(session, faction, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.put("/{campaign_id}/factions/{faction_id}", response_model=FactionRead)
async def update_faction(
    faction_id: int,
    faction_in: FactionUpdate,
    session: SessionDep,
    context: CampaignDM,
) -> dict[str, Any]:
    faction = await records.get_in_campaign(
        session,
        Faction,
        campaign_id=context.campaign_id,
        record_id=faction_id,
        not_found=FactionMessages.NOT_FOUND,
    )
    faction = await factions_service.update_faction(session, faction, user_id=context.user_id, payload=faction_in)
    return await records.one_with_tags(session, faction, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.delete("/{campaign_id}/factions/{faction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_faction(faction_id: int, session: SessionDep, context: CampaignDM) -> None:
    faction = await records.get_in_campaign(
        session,
        Faction,
        campaign_id=context.campaign_id,
        record_id=faction_id,
        not_found=FactionMessages.NOT_FOUND,
    )
    await factions_service.delete_faction(session, faction)
