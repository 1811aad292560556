from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import NotFoundError
from campaign_codex.core.messages import CampaignMessages
from campaign_codex.models.campaign import Campaign, CampaignParticipant, ParticipantRole
from campaign_codex.models.tag import Tag
from campaign_codex.services import images as images_service

logger = logging.getLogger(__name__)

PREMADE_TAGS: tuple[tuple[str, str], ...] = (
    ("Important", "#FF5733"),
    ("NPC", "#33FF57"),
    ("Location", "#3357FF"),
    ("Quest", "#FF33F5"),
    ("Lore", "#D4AF37"),
    ("Session", "#FF8C33"),
    ("Player", "#33FFF5"),
    ("Villain", "#8C33FF"),
)


async def get_campaign(session: AsyncSession, campaign_id: int) -> Optional[Campaign]:
    result = await session.exec(select(Campaign).where(Campaign.id == campaign_id))
    return result.one_or_none()


async def resolve_role(
    session: AsyncSession,
    *,
    campaign_id: int,
    user_id: int,
) -> Optional[ParticipantRole]:
    """Effective role of a user in a campaign.

    Ownership is checked first and always wins; the participant table is only
    consulted for everyone else.
    """
    campaign = await get_campaign(session, campaign_id)
    if campaign is None:
        return None
    if campaign.user_id == user_id:
        return ParticipantRole.dm
    result = await session.exec(
        select(CampaignParticipant.role).where(
            CampaignParticipant.campaign_id == campaign_id,
            CampaignParticipant.user_id == user_id,
        )
    )
    role = result.one_or_none()
    return ParticipantRole(role) if role is not None else None


async def list_user_campaigns(session: AsyncSession, *, user_id: int) -> list[tuple[Campaign, ParticipantRole, bool]]:
    stmt = (
        select(Campaign, CampaignParticipant.role)
        .join(
            CampaignParticipant,
            (CampaignParticipant.campaign_id == Campaign.id) & (CampaignParticipant.user_id == user_id),
            isouter=True,
        )
        .where(or_(Campaign.user_id == user_id, CampaignParticipant.user_id == user_id))
        .order_by(Campaign.created_at.desc(), Campaign.id.desc())
    )
    result = await session.exec(stmt)
    rows: list[tuple[Campaign, ParticipantRole, bool]] = []
    for campaign, participant_role in result.all():
        is_owner = campaign.user_id == user_id
        role = ParticipantRole.dm if is_owner else ParticipantRole(participant_role)
        rows.append((campaign, role, is_owner))
    return rows


async def create_campaign(
    session: AsyncSession,
    *,
    owner_id: int,
    name: str,
    description: Optional[str] = None,
) -> Campaign:
    """Create a campaign with its owner participant row and the premade tags."""
    campaign = Campaign(user_id=owner_id, name=name, description=description)
    session.add(campaign)
    await session.flush()

    session.add(
        CampaignParticipant(
            campaign_id=campaign.id,
            user_id=owner_id,
            role=ParticipantRole.dm,
            invited_by=owner_id,
        )
    )
    for tag_name, color in PREMADE_TAGS:
        session.add(Tag(campaign_id=campaign.id, name=tag_name, color=color, is_premade=True))

    await session.commit()
    await session.refresh(campaign)
    logger.info("Campaign %s created by user %s", campaign.id, owner_id)
    return campaign


async def update_campaign(
    session: AsyncSession,
    campaign: Campaign,
    *,
    name: str,
    description: Optional[str],
) -> Campaign:
    campaign.name = name
    campaign.description = description
    campaign.updated_at = datetime.now(timezone.utc)
    session.add(campaign)
    await session.commit()
    await session.refresh(campaign)
    return campaign


async def delete_campaign(session: AsyncSession, campaign_id: int) -> None:
    campaign = await get_campaign(session, campaign_id)
    if campaign is None:
        raise NotFoundError(CampaignMessages.NOT_FOUND)
    await session.delete(campaign)
    await session.commit()
    images_service.delete_campaign_files(campaign_id)
    logger.info("Campaign %s deleted", campaign_id)
