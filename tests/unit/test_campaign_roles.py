"""
Unit tests for campaign role resolution and campaign creation.

Tests the business logic in campaign_codex.services.campaigns including:
- Owner always resolving to dm
- Participant roles and non-participants
- Premade tags and owner participant created with the campaign
"""

import pytest
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.models.campaign import CampaignParticipant, ParticipantRole
from campaign_codex.models.tag import Tag
from campaign_codex.services import campaigns as campaigns_service
from campaign_codex.testing import add_participant, create_campaign, create_user


@pytest.mark.unit
async def test_owner_resolves_to_dm_even_with_player_row(session: AsyncSession):
    owner = await create_user(session)
    campaign = await create_campaign(session, owner=owner)
    participant = (
        await session.exec(
            select(CampaignParticipant).where(
                CampaignParticipant.campaign_id == campaign.id,
                CampaignParticipant.user_id == owner.id,
            )
        )
    ).one()
    participant.role = ParticipantRole.player
    session.add(participant)
    await session.commit()

    role = await campaigns_service.resolve_role(session, campaign_id=campaign.id, user_id=owner.id)

    assert role == ParticipantRole.dm


@pytest.mark.unit
async def test_participant_and_stranger_roles(session: AsyncSession):
    campaign = await create_campaign(session)
    player = await create_user(session)
    co_dm = await create_user(session)
    stranger = await create_user(session)
    await add_participant(session, campaign, player)
    await add_participant(session, campaign, co_dm, role=ParticipantRole.dm)

    assert await campaigns_service.resolve_role(session, campaign_id=campaign.id, user_id=player.id) == ParticipantRole.player
    assert await campaigns_service.resolve_role(session, campaign_id=campaign.id, user_id=co_dm.id) == ParticipantRole.dm
    assert await campaigns_service.resolve_role(session, campaign_id=campaign.id, user_id=stranger.id) is None


@pytest.mark.unit
async def test_missing_campaign_resolves_to_no_role(session: AsyncSession):
    user = await create_user(session)

    assert await campaigns_service.resolve_role(session, campaign_id=9999, user_id=user.id) is None


@pytest.mark.unit
async def test_create_campaign_seeds_owner_and_premade_tags(session: AsyncSession):
    owner = await create_user(session)

    campaign = await create_campaign(session, owner=owner, name="Curse of the Crimson Moon")

    participants = (
        await session.exec(select(CampaignParticipant).where(CampaignParticipant.campaign_id == campaign.id))
    ).all()
    assert [(p.user_id, p.role) for p in participants] == [(owner.id, ParticipantRole.dm)]

    tags = (await session.exec(select(Tag).where(Tag.campaign_id == campaign.id))).all()
    assert len(tags) == 8
    assert all(tag.is_premade for tag in tags)
    assert "Villain" in {tag.name for tag in tags}
