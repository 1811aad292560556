import logging
from typing import List

from fastapi import APIRouter, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from campaign_codex.api.deps import CampaignAccess, CampaignContext, CampaignDM, SessionDep
from campaign_codex.core.config import settings
from campaign_codex.core.messages import ImageMessages
from campaign_codex.models.image import Image
from campaign_codex.schemas.image import ImageRead
from campaign_codex.services import entities as entities_service
from campaign_codex.services import images as images_service
from campaign_codex.services import records

router = APIRouter()
logger = logging.getLogger(__name__)


def _check_entity_type(entity_type: str) -> None:
    if entity_type not in images_service.IMAGE_ENTITY_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ImageMessages.INVALID_ENTITY_TYPE)


async def _load_image(session, context: CampaignContext, image_id: int) -> Image:
    return await records.get_in_campaign(
        session,
        Image,
        campaign_id=context.campaign_id,
        record_id=image_id,
        not_found=ImageMessages.NOT_FOUND,
    )


async def _require_visible_owner(session, context: CampaignContext, entity_type: str, entity_id: int) -> None:
    """Images inherit the visibility of the record they are attached to."""
    await entities_service.get_visible_entity(
        session,
        entity_type=entity_type,
        entity_id=entity_id,
        campaign_id=context.campaign_id,
        role=context.role,
        user_id=context.user_id,
    )


@router.post(
    "/{campaign_id}/images/{entity_type}/{entity_id}",
    response_model=ImageRead,
    status_code=status.HTTP_201_CREATED,
)
async def upload_image(
    entity_type: str,
    entity_id: int,
    session: SessionDep,
    context: CampaignDM,
    image: UploadFile = File(...),
) -> Image:
    _check_entity_type(entity_type)
    target = await entities_service.get_entity(
        session,
        entity_type=entity_type,
        entity_id=entity_id,
        campaign_id=context.campaign_id,
    )
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ImageMessages.ENTITY_NOT_FOUND)

    content_type = (image.content_type or "").lower()
    if content_type not in images_service.ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ImageMessages.INVALID_TYPE)

    # One byte past the cap is enough to tell an oversized upload apart
    contents = await image.read(settings.MAX_IMAGE_SIZE_BYTES + 1)
    if not contents:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ImageMessages.NO_FILE)
    if len(contents) > settings.MAX_IMAGE_SIZE_BYTES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ImageMessages.TOO_LARGE)

    relative_path = images_service.store_image(
        campaign_id=context.campaign_id,
        entity_type=entity_type,
        entity_id=entity_id,
        filename=image.filename,
        content_type=content_type,
        contents=contents,
    )
    record = Image(
        campaign_id=context.campaign_id,
        entity_type=entity_type,
        entity_id=entity_id,
        file_path=relative_path,
        file_name=image.filename or relative_path.rsplit("/", 1)[-1],
        file_size=len(contents),
        mime_type=content_type,
        uploaded_by_user_id=context.user_id,
    )
    try:
        record = await records.save(session, record)
    except SQLAlchemyError:
        images_service.delete_image_file(relative_path)
        raise
    logger.info("Image %s uploaded for %s %s", record.id, entity_type, entity_id)
    return record


# Registered before the entity listing so ``/{image_id}/file`` is not read as an entity path
@router.get("/{campaign_id}/images/{image_id}/file")
async def serve_image(image_id: int, session: SessionDep, context: CampaignAccess) -> FileResponse:
    image = await _load_image(session, context, image_id)
    await _require_visible_owner(session, context, image.entity_type, image.entity_id)
    path = images_service.resolve_image_path(image.file_path)
    if path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ImageMessages.FILE_NOT_FOUND)
    return FileResponse(
        path,
        media_type=image.mime_type or "image/jpeg",
        headers={"Cache-Control": "public, max-age=31536000"},
    )


@router.get("/{campaign_id}/images/{entity_type}/{entity_id}", response_model=List[ImageRead])
async def list_images(
    entity_type: str,
    entity_id: int,
    session: SessionDep,
    context: CampaignAccess,
) -> List[Image]:
    _check_entity_type(entity_type)
    await _require_visible_owner(session, context, entity_type, entity_id)
    result = await session.exec(
        select(Image)
        .where(
            Image.campaign_id == context.campaign_id,
            Image.entity_type == entity_type,
            Image.entity_id == entity_id,
        )
        .order_by(Image.uploaded_at.desc(), Image.id.desc())
    )
    return list(result.all())


@router.delete("/{campaign_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(image_id: int, session: SessionDep, context: CampaignDM) -> None:
    image = await _load_image(session, context, image_id)
    images_service.delete_image_file(image.file_path)
    await session.delete(image)
    await session.commit()
