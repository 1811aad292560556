"""
Integration tests for faction and world info endpoints.
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.messages import FactionMessages
from campaign_codex.testing import add_participant, create_campaign, create_user, get_auth_headers


async def _table(session: AsyncSession):
    dm = await create_user(session)
    campaign = await create_campaign(session, owner=dm)
    player = await create_user(session)
    await add_participant(session, campaign, player)
    return dm, player, campaign


@pytest.mark.integration
async def test_faction_crud_and_visibility(client: AsyncClient, session: AsyncSession):
    dm, player, campaign = await _table(session)
    headers = get_auth_headers(dm)
    url = f"/api/campaigns/{campaign.id}/factions"

    created = await client.post(url, json={"name": "Zhentarim", "goals": "Control trade"}, headers=headers)
    assert created.status_code == 201
    faction_id = created.json()["id"]

    hidden_from_player = await client.get(f"{url}/{faction_id}", headers=get_auth_headers(player))
    assert hidden_from_player.status_code == 404
    assert hidden_from_player.json()["detail"] == FactionMessages.NOT_FOUND

    revealed = await client.put(f"{url}/{faction_id}", json={"visibility": "player-visible"}, headers=headers)
    assert revealed.json()["goals"] == "Control trade"

    player_list = await client.get(url, headers=get_auth_headers(player))
    assert [row["name"] for row in player_list.json()] == ["Zhentarim"]

    concealed = await client.put(f"{url}/{faction_id}", json={"visibility": "hidden"}, headers=headers)
    assert concealed.status_code == 200
    # Hidden records drop out of every listing, the DM's included
    assert (await client.get(url, headers=headers)).json() == []

    deleted = await client.delete(f"{url}/{faction_id}", headers=headers)
    assert deleted.status_code == 204


@pytest.mark.integration
async def test_world_info_search(client: AsyncClient, session: AsyncSession):
    dm, _, campaign = await _table(session)
    headers = get_auth_headers(dm)
    url = f"/api/campaigns/{campaign.id}/world-info"
    await client.post(url, json={"title": "The Weave", "content": "Source of arcane magic", "category": "magic"}, headers=headers)
    await client.post(url, json={"title": "Calendar of Harptos", "category": "time"}, headers=headers)

    searched = await client.get(f"{url}?search=arcane", headers=headers)

    assert [row["title"] for row in searched.json()] == ["The Weave"]


@pytest.mark.integration
async def test_world_info_requires_title(client: AsyncClient, session: AsyncSession):
    dm, _, campaign = await _table(session)

    response = await client.post(
        f"/api/campaigns/{campaign.id}/world-info", json={"content": "Untitled lore"}, headers=get_auth_headers(dm)
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "title is required"
