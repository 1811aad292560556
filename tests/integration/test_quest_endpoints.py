"""
Integration tests for quest endpoints.

Tests the API at /api/campaigns/{id}/quests including:
- Creating a quest with links, objectives and milestones in one request
- Replacing only the child collections an update supplies
- Link visibility for players
- Objective, milestone and session sub-resources
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.messages import QuestMessages
from campaign_codex.testing import (
    add_participant,
    create_campaign,
    create_character,
    create_game_session,
    create_location,
    create_user,
    get_auth_headers,
)


async def _table(session: AsyncSession):
    dm = await create_user(session)
    campaign = await create_campaign(session, owner=dm)
    player = await create_user(session)
    await add_participant(session, campaign, player)
    return dm, player, campaign


@pytest.mark.integration
async def test_create_quest_with_bundle(client: AsyncClient, session: AsyncSession):
    dm, player, campaign = await _table(session)
    npc = await create_character(session, campaign, name="Quest Giver")
    lair = await create_location(session, campaign, name="Dragon Lair")

    response = await client.post(
        f"/api/campaigns/{campaign.id}/quests",
        json={
            "title": "Slay the Dragon",
            "quest_type": "main",
            "visibility": "player-visible",
            "urgency_level": "high",
            "links": [
                {"entity_type": "character", "entity_id": npc.id, "role": "giver", "visibility": "player-visible"},
                {"entity_type": "location", "entity_id": lair.id, "role": "target"},
                {"entity_type": "faction"},
            ],
            "objectives": [
                {"title": "Find the lair"},
                {"title": "   "},
                {"title": "Defeat the dragon", "objective_type": "primary"},
            ],
            "milestones": [{"title": "Hoard located", "session_number": 3}, {"title": ""}],
        },
        headers=get_auth_headers(dm),
    )

    assert response.status_code == 201
    quest = response.json()
    assert quest["status"] == "active"
    assert len(quest["links"]) == 2
    assert [(o["title"], o["order_index"]) for o in quest["objectives"]] == [
        ("Find the lair", 0),
        ("Defeat the dragon", 2),
    ]
    assert [m["title"] for m in quest["milestones"]] == ["Hoard located"]

    player_view = await client.get(
        f"/api/campaigns/{campaign.id}/quests/{quest['id']}", headers=get_auth_headers(player)
    )
    assert player_view.status_code == 200
    assert [link["entity_type"] for link in player_view.json()["links"]] == ["character"]


@pytest.mark.integration
async def test_update_replaces_only_supplied_collections(client: AsyncClient, session: AsyncSession):
    dm, _, campaign = await _table(session)
    headers = get_auth_headers(dm)
    created = await client.post(
        f"/api/campaigns/{campaign.id}/quests",
        json={
            "title": "Escort the Caravan",
            "quest_type": "side",
            "objectives": [{"title": "Meet the merchant"}],
            "milestones": [{"title": "Left the city"}],
        },
        headers=headers,
    )
    quest_id = created.json()["id"]

    updated = await client.put(
        f"/api/campaigns/{campaign.id}/quests/{quest_id}",
        json={"status": "completed", "objectives": [{"title": "Reach Baldur's Gate"}]},
        headers=headers,
    )

    assert updated.status_code == 200
    body = updated.json()
    assert body["status"] == "completed"
    assert body["title"] == "Escort the Caravan"
    assert [o["title"] for o in body["objectives"]] == ["Reach Baldur's Gate"]
    assert [m["title"] for m in body["milestones"]] == ["Left the city"]


@pytest.mark.integration
async def test_quest_list_filters(client: AsyncClient, session: AsyncSession):
    dm, player, campaign = await _table(session)
    headers = get_auth_headers(dm)
    url = f"/api/campaigns/{campaign.id}/quests"
    await client.post(url, json={"title": "Main Arc", "quest_type": "main", "visibility": "player-visible"}, headers=headers)
    await client.post(url, json={"title": "Lost Cat", "quest_type": "side", "status": "on-hold"}, headers=headers)

    on_hold = await client.get(f"{url}?status=on-hold", headers=headers)
    main = await client.get(f"{url}?quest_type=main", headers=headers)
    player_list = await client.get(url, headers=get_auth_headers(player))

    assert [q["title"] for q in on_hold.json()] == ["Lost Cat"]
    assert [q["title"] for q in main.json()] == ["Main Arc"]
    assert [q["title"] for q in player_list.json()] == ["Main Arc"]


@pytest.mark.integration
async def test_quest_sub_resources(client: AsyncClient, session: AsyncSession):
    dm, _, campaign = await _table(session)
    headers = get_auth_headers(dm)
    npc = await create_character(session, campaign)
    game_session = await create_game_session(session, campaign, title="Ambush at the Ford")
    created = await client.post(
        f"/api/campaigns/{campaign.id}/quests", json={"title": "Bandit Trouble", "quest_type": "side"}, headers=headers
    )
    base = f"/api/campaigns/{campaign.id}/quests/{created.json()['id']}"

    link = await client.post(f"{base}/links", json={"entity_type": "character", "entity_id": npc.id}, headers=headers)
    assert link.status_code == 201
    missing_entity = await client.post(f"{base}/links", json={"entity_type": "character"}, headers=headers)
    assert missing_entity.status_code == 400
    assert missing_entity.json()["detail"] == QuestMessages.LINK_ENTITY_REQUIRED

    objective = await client.post(f"{base}/objectives", json={"title": "Track the bandits"}, headers=headers)
    assert objective.status_code == 201
    untitled = await client.post(f"{base}/objectives", json={"title": " "}, headers=headers)
    assert untitled.json()["detail"] == QuestMessages.OBJECTIVE_TITLE_REQUIRED

    completed = await client.put(
        f"{base}/objectives/{objective.json()['id']}", json={"status": "complete"}, headers=headers
    )
    assert completed.json()["status"] == "complete"

    milestone = await client.post(f"{base}/milestones", json={"title": "Camp found"}, headers=headers)
    assert milestone.status_code == 201

    linked = await client.post(f"{base}/sessions", json={"session_id": game_session.id, "notes": "First clash"}, headers=headers)
    assert linked.status_code == 200
    assert linked.json()["session_title"] == "Ambush at the Ford"

    detail = (await client.get(base, headers=headers)).json()
    assert len(detail["links"]) == 1
    assert [s["notes"] for s in detail["sessions"]] == ["First clash"]

    assert (await client.delete(f"{base}/links/{link.json()['id']}", headers=headers)).status_code == 204
    assert (await client.delete(f"{base}/objectives/{objective.json()['id']}", headers=headers)).status_code == 204
    missing_link = await client.delete(f"{base}/links/{link.json()['id']}", headers=headers)
    assert missing_link.status_code == 404

    deleted = await client.delete(base, headers=headers)
    assert deleted.status_code == 204
    assert (await client.get(base, headers=headers)).status_code == 404


@pytest.mark.integration
async def test_players_cannot_create_quests(client: AsyncClient, session: AsyncSession):
    _, player, campaign = await _table(session)

    response = await client.post(
        f"/api/campaigns/{campaign.id}/quests",
        json={"title": "My own quest", "quest_type": "personal"},
        headers=get_auth_headers(player),
    )

    assert response.status_code == 403
