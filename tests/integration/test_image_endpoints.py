"""
Integration tests for image endpoints.

Covers upload validation, listing and serving through the parent
record's visibility, and refusal of stored paths outside the uploads root.
"""

import pytest
from httpx import AsyncClient
from starlette.datastructures import UploadFile
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.config import settings
from campaign_codex.core.messages import ImageMessages
from campaign_codex.models.image import Image
from campaign_codex.models.visibility import Visibility
from campaign_codex.testing import add_participant, create_campaign, create_character, create_user, get_auth_headers

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


async def _table(session: AsyncSession):
    dm = await create_user(session)
    campaign = await create_campaign(session, owner=dm)
    player = await create_user(session)
    await add_participant(session, campaign, player)
    return dm, player, campaign


async def _upload(client: AsyncClient, campaign_id: int, entity: str, headers, *, content=PNG_BYTES, mime="image/png"):
    return await client.post(
        f"/api/campaigns/{campaign_id}/images/{entity}",
        files={"image": ("portrait.png", content, mime)},
        headers=headers,
    )


@pytest.mark.integration
async def test_upload_list_and_serve(client: AsyncClient, session: AsyncSession):
    dm, player, campaign = await _table(session)
    npc = await create_character(session, campaign, visibility=Visibility.player_visible)
    headers = get_auth_headers(dm)

    uploaded = await _upload(client, campaign.id, f"character/{npc.id}", headers)
    assert uploaded.status_code == 201
    image = uploaded.json()
    assert image["file_size"] == len(PNG_BYTES)
    assert image["mime_type"] == "image/png"
    assert image["file_path"].startswith(f"campaigns/{campaign.id}/character/{npc.id}/")

    listed = await client.get(
        f"/api/campaigns/{campaign.id}/images/character/{npc.id}", headers=get_auth_headers(player)
    )
    assert [row["id"] for row in listed.json()] == [image["id"]]

    served = await client.get(
        f"/api/campaigns/{campaign.id}/images/{image['id']}/file", headers=get_auth_headers(player)
    )
    assert served.status_code == 200
    assert served.content == PNG_BYTES
    assert served.headers["content-type"] == "image/png"
    assert "max-age" in served.headers["cache-control"]

    deleted = await client.delete(f"/api/campaigns/{campaign.id}/images/{image['id']}", headers=headers)
    assert deleted.status_code == 204
    gone = await client.get(f"/api/campaigns/{campaign.id}/images/{image['id']}/file", headers=headers)
    assert gone.status_code == 404


@pytest.mark.integration
async def test_images_of_hidden_record_read_as_missing(client: AsyncClient, session: AsyncSession):
    dm, player, campaign = await _table(session)
    secret = await create_character(session, campaign, visibility=Visibility.dm_only)
    uploaded = await _upload(client, campaign.id, f"character/{secret.id}", get_auth_headers(dm))
    image_id = uploaded.json()["id"]
    headers = get_auth_headers(player)

    listed = await client.get(f"/api/campaigns/{campaign.id}/images/character/{secret.id}", headers=headers)
    served = await client.get(f"/api/campaigns/{campaign.id}/images/{image_id}/file", headers=headers)

    assert listed.status_code == 404
    assert served.status_code == 404


@pytest.mark.integration
@pytest.mark.parametrize(
    ("entity", "content", "mime", "status", "detail"),
    [
        ("spaceship/1", PNG_BYTES, "image/png", 400, ImageMessages.INVALID_ENTITY_TYPE),
        ("character/999", PNG_BYTES, "image/png", 404, ImageMessages.ENTITY_NOT_FOUND),
        (None, b"MZ binary", "application/octet-stream", 400, ImageMessages.INVALID_TYPE),
        (None, b"", "image/png", 400, ImageMessages.NO_FILE),
    ],
)
async def test_upload_rejections(client: AsyncClient, session: AsyncSession, entity, content, mime, status, detail):
    dm, _, campaign = await _table(session)
    npc = await create_character(session, campaign)

    response = await _upload(
        client, campaign.id, entity or f"character/{npc.id}", get_auth_headers(dm), content=content, mime=mime
    )

    assert response.status_code == status
    assert response.json()["detail"] == detail


@pytest.mark.integration
async def test_upload_too_large(client: AsyncClient, session: AsyncSession, monkeypatch):
    dm, _, campaign = await _table(session)
    npc = await create_character(session, campaign)
    monkeypatch.setattr(settings, "MAX_IMAGE_SIZE_BYTES", 16)

    response = await _upload(client, campaign.id, f"character/{npc.id}", get_auth_headers(dm))

    assert response.status_code == 400
    assert response.json()["detail"] == ImageMessages.TOO_LARGE


@pytest.mark.integration
async def test_upload_read_stops_past_size_cap(client: AsyncClient, session: AsyncSession, monkeypatch):
    dm, _, campaign = await _table(session)
    npc = await create_character(session, campaign)
    limit = len(PNG_BYTES)
    monkeypatch.setattr(settings, "MAX_IMAGE_SIZE_BYTES", limit)
    read_sizes = []
    original_read = UploadFile.read

    async def recording_read(self, size: int = -1) -> bytes:
        read_sizes.append(size)
        return await original_read(self, size)

    monkeypatch.setattr(UploadFile, "read", recording_read)
    headers = get_auth_headers(dm)

    at_limit = await _upload(client, campaign.id, f"character/{npc.id}", headers)
    over_limit = await _upload(client, campaign.id, f"character/{npc.id}", headers, content=PNG_BYTES + b"\x00")

    assert at_limit.status_code == 201
    assert over_limit.status_code == 400
    assert over_limit.json()["detail"] == ImageMessages.TOO_LARGE
    assert read_sizes.count(limit + 1) == 2
    assert -1 not in read_sizes


@pytest.mark.integration
async def test_players_cannot_upload(client: AsyncClient, session: AsyncSession):
    _, player, campaign = await _table(session)
    npc = await create_character(session, campaign, visibility=Visibility.player_visible)

    response = await _upload(client, campaign.id, f"character/{npc.id}", get_auth_headers(player))

    assert response.status_code == 403


@pytest.mark.integration
async def test_stored_path_outside_uploads_is_not_served(client: AsyncClient, session: AsyncSession, uploads_dir):
    dm, _, campaign = await _table(session)
    npc = await create_character(session, campaign)
    (uploads_dir.parent / "escape.png").write_bytes(PNG_BYTES)
    image = Image(
        campaign_id=campaign.id,
        entity_type="character",
        entity_id=npc.id,
        file_path="../escape.png",
        file_name="escape.png",
        file_size=len(PNG_BYTES),
        mime_type="image/png",
        uploaded_by_user_id=dm.id,
    )
    session.add(image)
    await session.commit()
    await session.refresh(image)

    response = await client.get(
        f"/api/campaigns/{campaign.id}/images/{image.id}/file", headers=get_auth_headers(dm)
    )

    assert response.status_code == 404
    assert response.json()["detail"] == ImageMessages.FILE_NOT_FOUND
