"""
Integration tests for location endpoints.

Covers parent validation (self, foreign, cycles), the parent filter,
parent names in responses and the has-children delete guard.
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.messages import CampaignMessages, LocationMessages
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.visibility import Visibility
from campaign_codex.testing import add_participant, create_campaign, create_location, create_user, get_auth_headers


async def _dm_campaign(session: AsyncSession):
    dm = await create_user(session)
    campaign = await create_campaign(session, owner=dm)
    return dm, campaign


@pytest.mark.integration
async def test_create_nested_location_reports_parent_name(client: AsyncClient, session: AsyncSession):
    dm, campaign = await _dm_campaign(session)
    city = await create_location(session, campaign, name="Waterdeep")

    response = await client.post(
        f"/api/campaigns/{campaign.id}/locations",
        json={"name": "Yawning Portal", "parent_location_id": city.id, "location_type": "tavern"},
        headers=get_auth_headers(dm),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["parent_location_id"] == city.id
    assert data["parent_location_name"] == "Waterdeep"
    assert data["visibility"] == "dm-only"


@pytest.mark.integration
async def test_parent_filter(client: AsyncClient, session: AsyncSession):
    dm, campaign = await _dm_campaign(session)
    region = await create_location(session, campaign, name="Sword Coast")
    await create_location(session, campaign, name="Neverwinter", parent_location_id=region.id)
    headers = get_auth_headers(dm)
    url = f"/api/campaigns/{campaign.id}/locations"

    roots = await client.get(f"{url}?parent_id=null", headers=headers)
    children = await client.get(f"{url}?parent_id={region.id}", headers=headers)

    assert [row["name"] for row in roots.json()] == ["Sword Coast"]
    assert [row["name"] for row in children.json()] == ["Neverwinter"]


@pytest.mark.integration
async def test_location_cannot_be_its_own_parent(client: AsyncClient, session: AsyncSession):
    dm, campaign = await _dm_campaign(session)
    location = await create_location(session, campaign)

    response = await client.put(
        f"/api/campaigns/{campaign.id}/locations/{location.id}",
        json={"parent_location_id": location.id},
        headers=get_auth_headers(dm),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == LocationMessages.SELF_PARENT


@pytest.mark.integration
async def test_location_cycle_rejected(client: AsyncClient, session: AsyncSession):
    dm, campaign = await _dm_campaign(session)
    top = await create_location(session, campaign, name="Plane")
    middle = await create_location(session, campaign, name="Continent", parent_location_id=top.id)
    bottom = await create_location(session, campaign, name="Village", parent_location_id=middle.id)

    response = await client.put(
        f"/api/campaigns/{campaign.id}/locations/{top.id}",
        json={"parent_location_id": bottom.id},
        headers=get_auth_headers(dm),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == LocationMessages.PARENT_CYCLE


@pytest.mark.integration
async def test_parent_from_another_campaign_rejected(client: AsyncClient, session: AsyncSession):
    dm, campaign = await _dm_campaign(session)
    elsewhere = await create_location(session, await create_campaign(session))

    response = await client.post(
        f"/api/campaigns/{campaign.id}/locations",
        json={"name": "Smuggled", "parent_location_id": elsewhere.id},
        headers=get_auth_headers(dm),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == LocationMessages.INVALID_PARENT


@pytest.mark.integration
async def test_delete_location_with_children_refused(client: AsyncClient, session: AsyncSession):
    dm, campaign = await _dm_campaign(session)
    parent = await create_location(session, campaign)
    child = await create_location(session, campaign, parent_location_id=parent.id)
    headers = get_auth_headers(dm)

    refused = await client.delete(f"/api/campaigns/{campaign.id}/locations/{parent.id}", headers=headers)
    assert refused.status_code == 400
    assert refused.json()["detail"] == LocationMessages.HAS_CHILDREN

    assert (await client.delete(f"/api/campaigns/{campaign.id}/locations/{child.id}", headers=headers)).status_code == 204
    assert (await client.delete(f"/api/campaigns/{campaign.id}/locations/{parent.id}", headers=headers)).status_code == 204


@pytest.mark.integration
async def test_players_read_but_cannot_write_locations(client: AsyncClient, session: AsyncSession):
    _, campaign = await _dm_campaign(session)
    player = await create_user(session)
    await add_participant(session, campaign, player)
    await create_location(session, campaign, name="Public Square", visibility=Visibility.player_visible.value)
    secret = await create_location(session, campaign, name="Thieves' Den")
    headers = get_auth_headers(player)

    listing = await client.get(f"/api/campaigns/{campaign.id}/locations", headers=headers)
    detail = await client.get(f"/api/campaigns/{campaign.id}/locations/{secret.id}", headers=headers)
    write = await client.post(f"/api/campaigns/{campaign.id}/locations", json={"name": "Mine"}, headers=headers)

    assert [row["name"] for row in listing.json()] == ["Public Square"]
    assert detail.status_code == 404
    assert write.status_code == 403
    assert write.json()["detail"] == CampaignMessages.DM_REQUIRED


@pytest.mark.integration
async def test_list_reports_author_usernames(client: AsyncClient, session: AsyncSession):
    dm, campaign = await _dm_campaign(session)
    co_dm = await create_user(session)
    await add_participant(session, campaign, co_dm, role=ParticipantRole.dm)
    url = f"/api/campaigns/{campaign.id}/locations"

    created = await client.post(url, json={"name": "Neverwinter"}, headers=get_auth_headers(dm))
    assert created.status_code == 201
    assert created.json()["created_by_username"] == dm.username
    location_id = created.json()["id"]

    edited = await client.put(
        f"{url}/{location_id}", json={"description": "Jewel of the North"}, headers=get_auth_headers(co_dm)
    )
    assert edited.status_code == 200

    listing = await client.get(url, headers=get_auth_headers(dm))
    assert listing.status_code == 200
    [entry] = listing.json()
    assert entry["created_by_username"] == dm.username
    assert entry["last_updated_by_username"] == co_dm.username
