from typing import Any, List, Optional

from fastapi import APIRouter, Query, status

from campaign_codex.api.deps import CampaignAccess, CampaignDM, SessionDep
from campaign_codex.core.messages import CreatureMessages
from campaign_codex.models.creature import Creature
from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.creature import CreatureCreate, CreatureRead, CreatureUpdate
from campaign_codex.services import creatures as creatures_service
from campaign_codex.services import records

router = APIRouter()

ENTITY_TYPE = creatures_service.ENTITY_TYPE


async def _load(session, context, creature_id: int) -> Creature:
    return await records.get_in_campaign(
        session,
        Creature,
        campaign_id=context.campaign_id,
        record_id=creature_id,
        not_found=CreatureMessages.NOT_FOUND,
    )


@router.get("/{campaign_id}/creatures", response_model=List[CreatureRead])
async def list_creatures(
    session: SessionDep,
    context: CampaignAccess,
    search: Optional[str] = None,
    creature_type: Optional[str] = Query(default=None, alias="creatureType"),
    challenge_rating: Optional[str] = Query(default=None, alias="challengeRating"),
    visibility: Optional[Visibility] = None,
) -> List[dict[str, Any]]:
    creatures = await creatures_service.list_creatures(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        search=search,
        creature_type=creature_type,
        challenge_rating=challenge_rating,
        visibility=visibility,
    )
    return await records.with_tags(session, creatures, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.get("/{campaign_id}/creatures/{creature_id}", response_model=CreatureRead)
async def read_creature(creature_id: int, session: SessionDep, context: CampaignAccess) -> dict[str, Any]:
    creature = await records.get_visible_in_campaign(
        session,
        Creature,
        campaign_id=context.campaign_id,
        record_id=creature_id,
        role=context.role,
        not_found=CreatureMessages.NOT_FOUND,
    )
    return await records.one_with_tags(session, creature, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.post("/{campaign_id}/creatures", response_model=CreatureRead, status_code=status.HTTP_201_CREATED)
async def create_creature(creature_in: CreatureCreate, session: SessionDep, context: CampaignDM) -> dict[str, Any]:
    creature = await creatures_service.create_creature(
        session,
        campaign_id=context.campaign_id,
        user_id=context.user_id,
        payload=creature_in,
    )
    return await records.one_with_tags(session, creature, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.put("/{campaign_id}/creatures/{creature_id}", response_model=CreatureRead)
async def update_creature(
    creature_id: int,
    creature_in: CreatureUpdate,
    session: SessionDep,
    context: CampaignDM,
) -> dict[str, Any]:
    creature = await _load(session, context, creature_id)
    creature = await creatures_service.update_creature(
        session,
        creature,
        user_id=context.user_id,
        payload=creature_in,
    )
    return await records.one_with_tags(session, creature, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.delete("/{campaign_id}/creatures/{creature_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_creature(creature_id: int, session: SessionDep, context: CampaignDM) -> None:
    creature = await _load(session, context, creature_id)
    await creatures_service.delete_creature(session, creature)
