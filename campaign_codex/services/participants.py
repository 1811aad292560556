from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import InvalidRequestError, NotFoundError, PermissionDeniedError
from campaign_codex.core.messages import ParticipantMessages
from campaign_codex.models.campaign import Campaign, CampaignParticipant, ParticipantRole
from campaign_codex.models.user import User
from campaign_codex.services import users as users_service

logger = logging.getLogger(__name__)


def _present(participant: CampaignParticipant, user: User, campaign: Campaign) -> dict[str, Any]:
    return {
        **participant.model_dump(),
        "username": user.username,
        "email": user.email,
        "is_owner": participant.user_id == campaign.user_id,
    }


async def list_participants(session: AsyncSession, campaign: Campaign) -> list[dict[str, Any]]:
    """Participants with their user details, DMs first, then by join date."""
    stmt = (
        select(CampaignParticipant, User)
        .join(User, User.id == CampaignParticipant.user_id)
        .where(CampaignParticipant.campaign_id == campaign.id)
        .order_by(
            case((CampaignParticipant.role == ParticipantRole.dm, 0), else_=1),
            CampaignParticipant.joined_at.asc(),
            CampaignParticipant.id.asc(),
        )
    )
    result = await session.exec(stmt)
    return [_present(participant, user, campaign) for participant, user in result.all()]


async def get_participant(session: AsyncSession, campaign: Campaign, participant_id: int) -> CampaignParticipant:
    result = await session.exec(
        select(CampaignParticipant).where(
            CampaignParticipant.id == participant_id,
            CampaignParticipant.campaign_id == campaign.id,
        )
    )
    participant = result.one_or_none()
    if participant is None:
        raise NotFoundError(ParticipantMessages.NOT_FOUND)
    return participant


async def invite_participant(
    session: AsyncSession,
    campaign: Campaign,
    *,
    email: str,
    role: ParticipantRole,
    invited_by: int,
) -> dict[str, Any]:
    user = await users_service.get_user_by_email(session, email)
    if user is None:
        raise NotFoundError(ParticipantMessages.USER_NOT_FOUND)

    existing = await session.exec(
        select(CampaignParticipant.id).where(
            CampaignParticipant.campaign_id == campaign.id,
            CampaignParticipant.user_id == user.id,
        )
    )
    if existing.first() is not None or user.id == campaign.user_id:
        raise InvalidRequestError(ParticipantMessages.ALREADY_PARTICIPANT)

    participant = CampaignParticipant(campaign_id=campaign.id, user_id=user.id, role=role, invited_by=invited_by)
    session.add(participant)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise InvalidRequestError(ParticipantMessages.ALREADY_PARTICIPANT) from exc
    await session.refresh(participant)
    logger.info("User %s joined campaign %s as %s", user.id, campaign.id, role.value)
    return _present(participant, user, campaign)


async def update_participant_role(
    session: AsyncSession,
    campaign: Campaign,
    participant: CampaignParticipant,
    *,
    role: ParticipantRole,
) -> dict[str, Any]:
    # The owner's DM role comes from ownership and cannot be edited away
    if participant.user_id == campaign.user_id:
        raise PermissionDeniedError(ParticipantMessages.CANNOT_CHANGE_OWNER)
    participant.role = role
    session.add(participant)
    await session.commit()
    await session.refresh(participant)
    user = await session.get(User, participant.user_id)
    return _present(participant, user, campaign)


async def remove_participant(session: AsyncSession, campaign: Campaign, participant: CampaignParticipant) -> None:
    if participant.user_id == campaign.user_id:
        raise PermissionDeniedError(ParticipantMessages.CANNOT_REMOVE_OWNER)
    await session.delete(participant)
    await session.commit()
    logger.info("User %s removed from campaign %s", participant.user_id, campaign.id)
