"""
Integration tests for creature (bestiary) and custom content endpoints.
"""

import logging

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.messages import ContentMessages, CreatureMessages
from campaign_codex.testing import add_participant, create_campaign, create_user, get_auth_headers


def _goblin(**overrides):
    data = {
        "name": "Goblin Boss",
        "size": "Small",
        "creatureType": "humanoid",
        "subtype": "goblinoid",
        "challengeRating": "1",
        "armorClass": {"value": 17, "type": "chain shirt, shield"},
        "hitPoints": {"average": 21, "formula": "6d6"},
        "abilities": {"str": 10, "dex": 14, "con": 10, "int": 10, "wis": 8, "cha": 10},
        "speeds": {"walk": 30},
        "actions": [{"name": "Multiattack", "desc": "Two scimitar attacks."}],
    }
    data.update(overrides)
    return data


async def _table(session: AsyncSession):
    dm = await create_user(session)
    campaign = await create_campaign(session, owner=dm)
    player = await create_user(session)
    await add_participant(session, campaign, player)
    return dm, player, campaign


@pytest.mark.integration
async def test_creature_create_and_update_round_trip(client: AsyncClient, session: AsyncSession):
    dm, _, campaign = await _table(session)
    headers = get_auth_headers(dm)
    url = f"/api/campaigns/{campaign.id}/creatures"

    created = await client.post(url, json=_goblin(), headers=headers)
    assert created.status_code == 201
    data = created.json()
    assert data["creatureType"] == "humanoid"
    assert data["armorClass"] == {"value": 17, "type": "chain shirt, shield"}
    assert data["abilities"]["dex"] == 14
    assert data["sourceType"] == "homebrew"
    assert data["visibility"] == "dm-only"

    updated = await client.put(
        f"{url}/{data['id']}",
        json={"hitPoints": {"average": 27, "formula": "6d6+6"}, "challengeRating": "2"},
        headers=headers,
    )
    assert updated.status_code == 200
    body = updated.json()
    assert body["hitPoints"] == {"average": 27, "formula": "6d6+6"}
    assert body["challengeRating"] == "2"
    # Untouched sections survive a partial update
    assert body["armorClass"]["value"] == 17
    assert body["actions"][0]["name"] == "Multiattack"


@pytest.mark.integration
async def test_creature_validation_messages(client: AsyncClient, session: AsyncSession):
    dm, _, campaign = await _table(session)

    response = await client.post(
        f"/api/campaigns/{campaign.id}/creatures",
        json=_goblin(hitPoints={"formula": "6d6"}),
        headers=get_auth_headers(dm),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == CreatureMessages.HIT_POINTS_REQUIRED


@pytest.mark.integration
async def test_creature_filters_and_player_visibility(client: AsyncClient, session: AsyncSession):
    dm, player, campaign = await _table(session)
    headers = get_auth_headers(dm)
    url = f"/api/campaigns/{campaign.id}/creatures"
    await client.post(url, json=_goblin(), headers=headers)
    await client.post(
        url,
        json=_goblin(name="Owlbear", creatureType="monstrosity", challengeRating="3", visibility="player-visible"),
        headers=headers,
    )

    by_type = await client.get(f"{url}?creatureType=monstrosity", headers=headers)
    by_cr = await client.get(f"{url}?challengeRating=1", headers=headers)
    by_visibility = await client.get(f"{url}?visibility=dm-only", headers=headers)
    player_view = await client.get(url, headers=get_auth_headers(player))

    assert [row["name"] for row in by_type.json()] == ["Owlbear"]
    assert [row["name"] for row in by_cr.json()] == ["Goblin Boss"]
    assert [row["name"] for row in by_visibility.json()] == ["Goblin Boss"]
    assert [row["name"] for row in player_view.json()] == ["Owlbear"]


@pytest.mark.integration
async def test_players_cannot_write_creatures(client: AsyncClient, session: AsyncSession):
    _, player, campaign = await _table(session)

    response = await client.post(
        f"/api/campaigns/{campaign.id}/creatures", json=_goblin(), headers=get_auth_headers(player)
    )

    assert response.status_code == 403


@pytest.mark.integration
async def test_content_items_are_scoped_by_category(client: AsyncClient, session: AsyncSession):
    dm, player, campaign = await _table(session)
    headers = get_auth_headers(dm)
    base = f"/api/campaigns/{campaign.id}/content"

    spell = await client.post(
        f"{base}/spells",
        json={"title": "Fireball", "content_data": {"level": 3}, "visibility": "player-visible"},
        headers=headers,
    )
    await client.post(f"{base}/spells", json={"title": "Wish"}, headers=headers)
    await client.post(f"{base}/items", json={"title": "Bag of Holding"}, headers=headers)
    assert spell.status_code == 201
    assert spell.json()["category"] == "spells"

    dm_spells = await client.get(f"{base}/spells", headers=headers)
    player_spells = await client.get(f"{base}/spells", headers=get_auth_headers(player))
    assert sorted(row["title"] for row in dm_spells.json()) == ["Fireball", "Wish"]
    assert [row["title"] for row in player_spells.json()] == ["Fireball"]

    wrong_category = await client.get(f"{base}/items/{spell.json()['id']}", headers=headers)
    assert wrong_category.status_code == 404
    assert wrong_category.json()["detail"] == ContentMessages.NOT_FOUND

    updated = await client.put(
        f"{base}/spells/{spell.json()['id']}", json={"content_data": {"level": 4}}, headers=headers
    )
    assert updated.json()["content_data"] == {"level": 4}
    assert updated.json()["title"] == "Fireball"

    player_write = await client.post(f"{base}/spells", json={"title": "Homebrew"}, headers=get_auth_headers(player))
    assert player_write.status_code == 403

    deleted = await client.delete(f"{base}/spells/{spell.json()['id']}", headers=headers)
    assert deleted.status_code == 204


@pytest.mark.integration
async def test_content_item_writes_are_logged(client: AsyncClient, session: AsyncSession, caplog):
    dm, _, campaign = await _table(session)
    headers = get_auth_headers(dm)
    base = f"/api/campaigns/{campaign.id}/content/items"

    with caplog.at_level(logging.INFO, logger="campaign_codex.services.content"):
        created = await client.post(base, json={"title": "Bag of Holding"}, headers=headers)
        item_id = created.json()["id"]
        deleted = await client.delete(f"{base}/{item_id}", headers=headers)

    assert created.status_code == 201
    assert deleted.status_code == 204
    messages = [record.getMessage() for record in caplog.records if record.name == "campaign_codex.services.content"]
    assert f"Content item {item_id} (items) created in campaign {campaign.id}" in messages
    assert f"Content item {item_id} deleted from campaign {campaign.id}" in messages
