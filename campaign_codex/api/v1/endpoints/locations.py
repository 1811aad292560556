from typing import Any, List, Optional

from fastapi import APIRouter, Query, status

from campaign_codex.api.deps import CampaignAccess, CampaignDM, SessionDep
from campaign_codex.core.messages import LocationMessages
from campaign_codex.models.location import Location
from campaign_codex.schemas.location import LocationCreate, LocationRead, LocationUpdate
from campaign_codex.services import locations as locations_service
from campaign_codex.services import records

router = APIRouter()


async def _load(session, context, location_id: int) -> Location:
    return await records.get_in_campaign(
        session,
        Location,
        campaign_id=context.campaign_id,
        record_id=location_id,
        not_found=LocationMessages.NOT_FOUND,
    )


@router.get("/{campaign_id}/locations", response_model=List[LocationRead])
async def list_locations(
    session: SessionDep,
    context: CampaignAccess,
    parent_id: Optional[str] = Query(default=None, description="Parent location id, or 'null' for roots"),
    search: Optional[str] = None,
) -> List[dict[str, Any]]:
    rows = await locations_service.list_locations(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        parent_id=parent_id,
        search=search,
    )
    return await locations_service.present_locations(session, rows, campaign_id=context.campaign_id)


@router.get("/{campaign_id}/locations/{location_id}", response_model=LocationRead)
async def read_location(location_id: int, session: SessionDep, context: CampaignAccess) -> dict[str, Any]:
    location = await records.get_visible_in_campaign(
        session,
        Location,
        campaign_id=context.campaign_id,
        record_id=location_id,
        role=context.role,
        not_found=LocationMessages.NOT_FOUND,
    )
    return await locations_service.present_location(session, location)


@router.post("/{campaign_id}/locations", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
async def create_location(location_in: LocationCreate, session: SessionDep, context: CampaignDM) -> dict[str, Any]:
    location = await locations_service.create_location(
        session,
        campaign_id=context.campaign_id,
        user_id=context.user_id,
        payload=location_in,
    )
    return await locations_service.present_location(session, location)


@router.put("/{campaign_id}/locations/{location_id}", response_model=LocationRead)
async def update_location(
    location_id: int,
    location_in: LocationUpdate,
    session: SessionDep,
    context: CampaignDM,
) -> dict[str, Any]:
    location = await _load(session, context, location_id)
    location = await locations_service.update_location(
        session,
        location,
        user_id=context.user_id,
        payload=location_in,
    )
    return await locations_service.present_location(session, location)


@router.delete("/{campaign_id}/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(location_id: int, session: SessionDep, context: CampaignDM) -> None:
    location = await _load(session, context, location_id)
    await locations_service.delete_location(session, location)
