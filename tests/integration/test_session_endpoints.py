"""
Integration tests for game session endpoints.

Tests the API at /api/campaigns/{id}/sessions including:
- Session numbering and default visibility
- DM-only entity notes
- Posting a session note onto another record
- Player notes, their visibility and authorship rules
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.messages import SessionMessages
from campaign_codex.models.visibility import Visibility
from campaign_codex.testing import (
    add_participant,
    create_campaign,
    create_character,
    create_game_session,
    create_user,
    get_auth_headers,
)


async def _table(session: AsyncSession):
    dm = await create_user(session)
    campaign = await create_campaign(session, owner=dm)
    alice = await create_user(session)
    bob = await create_user(session)
    await add_participant(session, campaign, alice)
    await add_participant(session, campaign, bob)
    return dm, alice, bob, campaign


@pytest.mark.integration
async def test_sessions_number_themselves_and_hide_from_players(client: AsyncClient, session: AsyncSession):
    dm, alice, _, campaign = await _table(session)
    dm_headers = get_auth_headers(dm)
    url = f"/api/campaigns/{campaign.id}/sessions"

    first = await client.post(url, json={"title": "Arrival"}, headers=dm_headers)
    second = await client.post(url, json={"title": "The Tower"}, headers=dm_headers)

    assert first.status_code == 201
    assert first.json()["session_number"] == 1
    assert second.json()["session_number"] == 2
    assert first.json()["visibility"] == "dm-only"

    player_list = await client.get(url, headers=get_auth_headers(alice))
    assert player_list.json() == []

    shared = await client.put(
        f"{url}/{first.json()['id']}", json={"visibility": "player-visible"}, headers=dm_headers
    )
    assert shared.status_code == 200

    player_list = await client.get(url, headers=get_auth_headers(alice))
    assert [row["title"] for row in player_list.json()] == ["Arrival"]


@pytest.mark.integration
async def test_session_list_puts_undated_sessions_last(client: AsyncClient, session: AsyncSession):
    dm, _, _, campaign = await _table(session)
    url = f"/api/campaigns/{campaign.id}/sessions"
    headers = get_auth_headers(dm)
    await client.post(url, json={"title": "Undated"}, headers=headers)
    await client.post(url, json={"title": "Older", "date_played": "2026-01-10"}, headers=headers)
    await client.post(url, json={"title": "Newer", "date_played": "2026-03-02"}, headers=headers)

    response = await client.get(url, headers=headers)

    assert [row["title"] for row in response.json()] == ["Newer", "Older", "Undated"]


@pytest.mark.integration
async def test_session_notes_are_dm_only(client: AsyncClient, session: AsyncSession):
    dm, alice, _, campaign = await _table(session)
    npc = await create_character(session, campaign, name="Mysterious Stranger")
    game_session = await create_game_session(session, campaign, visibility=Visibility.player_visible.value)
    base = f"/api/campaigns/{campaign.id}/sessions/{game_session.id}"

    added = await client.post(
        f"{base}/notes",
        json={"entity_type": "character", "entity_id": npc.id, "quick_note": "Knows the password"},
        headers=get_auth_headers(dm),
    )
    assert added.status_code == 201

    dm_detail = await client.get(base, headers=get_auth_headers(dm))
    player_detail = await client.get(base, headers=get_auth_headers(alice))

    assert [note["quick_note"] for note in dm_detail.json()["session_notes"]] == ["Knows the password"]
    assert player_detail.status_code == 200
    assert player_detail.json()["session_notes"] == []

    player_add = await client.post(
        f"{base}/notes",
        json={"entity_type": "character", "entity_id": npc.id, "quick_note": "sneaky"},
        headers=get_auth_headers(alice),
    )
    assert player_add.status_code == 403


@pytest.mark.integration
async def test_session_note_rejects_unknown_entity_type(client: AsyncClient, session: AsyncSession):
    dm, _, _, campaign = await _table(session)
    game_session = await create_game_session(session, campaign)

    response = await client.post(
        f"/api/campaigns/{campaign.id}/sessions/{game_session.id}/notes",
        json={"entity_type": "spaceship", "entity_id": 1},
        headers=get_auth_headers(dm),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == SessionMessages.INVALID_ENTITY_TYPE


@pytest.mark.integration
async def test_post_note_appends_to_character(client: AsyncClient, session: AsyncSession):
    dm, _, _, campaign = await _table(session)
    npc = await create_character(session, campaign, name="Sage", description="Keeps the library.")
    game_session = await create_game_session(session, campaign, session_number=4)

    response = await client.post(
        f"/api/campaigns/{campaign.id}/sessions/{game_session.id}/post-notes",
        json={"entity_type": "character", "entity_id": npc.id, "note_content": "Revealed the map."},
        headers=get_auth_headers(dm),
    )

    assert response.status_code == 200
    assert response.json()["message"] == SessionMessages.NOTE_POSTED

    detail = await client.get(f"/api/campaigns/{campaign.id}/characters/{npc.id}", headers=get_auth_headers(dm))
    assert detail.json()["description"] == "Keeps the library.\n\nRevealed the map.\n\n[From Session 4]"


@pytest.mark.integration
async def test_player_cannot_post_from_dm_session(client: AsyncClient, session: AsyncSession):
    _, alice, _, campaign = await _table(session)
    npc = await create_character(session, campaign, visibility=Visibility.player_visible)
    game_session = await create_game_session(session, campaign)

    response = await client.post(
        f"/api/campaigns/{campaign.id}/sessions/{game_session.id}/post-notes",
        json={"entity_type": "character", "entity_id": npc.id, "note_content": "Mine now"},
        headers=get_auth_headers(alice),
    )

    assert response.status_code == 403
    assert response.json()["detail"] == SessionMessages.POST_FORBIDDEN


@pytest.mark.integration
async def test_player_notes_visibility_and_ownership(client: AsyncClient, session: AsyncSession):
    dm, alice, bob, campaign = await _table(session)
    game_session = await create_game_session(session, campaign)
    url = f"/api/campaigns/{campaign.id}/sessions/{game_session.id}/player-notes"

    private = await client.post(
        url, json={"note_content": "I pocketed the gem", "visibility": "hidden"}, headers=get_auth_headers(alice)
    )
    shared = await client.post(
        url,
        json={"note_content": "We reached the keep", "visibility": "player-visible"},
        headers=get_auth_headers(alice),
    )

    assert private.status_code == 201
    assert private.json()["visibility"] == "dm-only"
    assert private.json()["username"] == alice.username
    assert shared.json()["visibility"] == "player-visible"

    bob_view = await client.get(url, headers=get_auth_headers(bob))
    dm_view = await client.get(url, headers=get_auth_headers(dm))
    assert [note["note_content"] for note in bob_view.json()] == ["We reached the keep"]
    assert len(dm_view.json()) == 2

    note_id = shared.json()["id"]
    bob_edit = await client.put(f"{url}/{note_id}", json={"note_content": "Vandalised"}, headers=get_auth_headers(bob))
    bob_delete = await client.delete(f"{url}/{note_id}", headers=get_auth_headers(bob))
    assert bob_edit.status_code == 403
    assert bob_edit.json()["detail"] == SessionMessages.NOTE_EDIT_FORBIDDEN
    assert bob_delete.status_code == 403

    alice_edit = await client.put(
        f"{url}/{note_id}", json={"note_content": "We reached the keep at dusk"}, headers=get_auth_headers(alice)
    )
    assert alice_edit.status_code == 200
    assert alice_edit.json()["note_content"] == "We reached the keep at dusk"

    dm_delete = await client.delete(f"{url}/{note_id}", headers=get_auth_headers(dm))
    assert dm_delete.status_code == 204


@pytest.mark.integration
async def test_player_notes_require_visible_session(client: AsyncClient, session: AsyncSession):
    _, alice, _, campaign = await _table(session)
    secret_session = await create_game_session(session, campaign, visibility=Visibility.dm_only.value)

    response = await client.post(
        f"/api/campaigns/{campaign.id}/sessions/{secret_session.id}/player-notes",
        json={"note_content": "Peeking"},
        headers=get_auth_headers(alice),
    )

    assert response.status_code == 404


@pytest.mark.integration
async def test_player_edits_only_own_session(client: AsyncClient, session: AsyncSession):
    _, alice, bob, campaign = await _table(session)
    url = f"/api/campaigns/{campaign.id}/sessions"

    created = await client.post(url, json={"title": "Recap by Alice"}, headers=get_auth_headers(alice))
    assert created.status_code == 201
    assert created.json()["visibility"] == "player-visible"
    session_id = created.json()["id"]

    bob_edit = await client.put(f"{url}/{session_id}", json={"title": "Bob's now"}, headers=get_auth_headers(bob))
    alice_edit = await client.put(f"{url}/{session_id}", json={"summary": "Good night"}, headers=get_auth_headers(alice))

    assert bob_edit.status_code == 403
    assert bob_edit.json()["detail"] == SessionMessages.EDIT_FORBIDDEN
    assert alice_edit.status_code == 200
    assert alice_edit.json()["summary"] == "Good night"
