from typing import Any, List

from fastapi import APIRouter, status

from campaign_codex.api.deps import CampaignAccess, CampaignOwner, SessionDep
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.schemas.campaign import MyRoleRead, ParticipantInvite, ParticipantRead, ParticipantRoleUpdate
from campaign_codex.services import participants as participants_service

router = APIRouter()


@router.get("/{campaign_id}/participants", response_model=List[ParticipantRead])
async def list_participants(session: SessionDep, context: CampaignAccess) -> List[dict[str, Any]]:
    return await participants_service.list_participants(session, context.campaign)


@router.post(
    "/{campaign_id}/participants/invite",
    response_model=ParticipantRead,
    status_code=status.HTTP_201_CREATED,
)
async def invite_participant(
    invite_in: ParticipantInvite,
    session: SessionDep,
    context: CampaignOwner,
) -> dict[str, Any]:
    return await participants_service.invite_participant(
        session,
        context.campaign,
        email=invite_in.email,
        role=invite_in.role,
        invited_by=context.user_id,
    )


@router.put("/{campaign_id}/participants/{participant_id}/role", response_model=ParticipantRead)
async def update_participant_role(
    participant_id: int,
    role_in: ParticipantRoleUpdate,
    session: SessionDep,
    context: CampaignOwner,
) -> dict[str, Any]:
    participant = await participants_service.get_participant(session, context.campaign, participant_id)
    return await participants_service.update_participant_role(
        session,
        context.campaign,
        participant,
        role=role_in.role,
    )


@router.delete("/{campaign_id}/participants/{participant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_participant(participant_id: int, session: SessionDep, context: CampaignOwner) -> None:
    participant = await participants_service.get_participant(session, context.campaign, participant_id)
    await participants_service.remove_participant(session, context.campaign, participant)


@router.get("/{campaign_id}/my-role", response_model=MyRoleRead)
async def read_my_role(context: CampaignAccess) -> MyRoleRead:
    return MyRoleRead(
        hasAccess=True,
        role=context.role,
        isDM=context.role == ParticipantRole.dm,
        isPlayer=context.role == ParticipantRole.player,
    )
