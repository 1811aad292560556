from typing import List

from fastapi import APIRouter, status

from campaign_codex.api.deps import CampaignAccess, CampaignOwner, CurrentUser, SessionDep
from campaign_codex.models.campaign import Campaign
from campaign_codex.schemas.campaign import CampaignCreate, CampaignRead, CampaignUpdate, CampaignWithRole
from campaign_codex.services import campaigns as campaigns_service

router = APIRouter()


@router.get("", response_model=List[CampaignWithRole])
async def list_campaigns(session: SessionDep, current_user: CurrentUser) -> List[CampaignWithRole]:
    """Campaigns the caller owns or takes part in, newest first."""
    rows = await campaigns_service.list_user_campaigns(session, user_id=current_user.id)
    return [
        CampaignWithRole(**campaign.model_dump(), user_role=role, is_owner=is_owner)
        for campaign, role, is_owner in rows
    ]


@router.post("", response_model=CampaignWithRole, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    campaign_in: CampaignCreate,
    session: SessionDep,
    current_user: CurrentUser,
) -> CampaignWithRole:
    campaign = await campaigns_service.create_campaign(
        session,
        owner_id=current_user.id,
        name=campaign_in.name,
        description=campaign_in.description,
    )
    return CampaignWithRole(**campaign.model_dump(), user_role="dm", is_owner=True)


@router.get("/{campaign_id}", response_model=CampaignWithRole)
async def read_campaign(context: CampaignAccess) -> CampaignWithRole:
    return CampaignWithRole(**context.campaign.model_dump(), user_role=context.role, is_owner=context.is_owner)


@router.put("/{campaign_id}", response_model=CampaignRead)
async def update_campaign(
    campaign_in: CampaignUpdate,
    session: SessionDep,
    context: CampaignOwner,
) -> Campaign:
    return await campaigns_service.update_campaign(
        session,
        context.campaign,
        name=campaign_in.name,
        description=campaign_in.description,
    )


@router.delete("/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_campaign(session: SessionDep, context: CampaignOwner) -> None:
    await campaigns_service.delete_campaign(session, context.campaign_id)
