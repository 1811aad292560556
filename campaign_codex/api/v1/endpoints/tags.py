from typing import List

from fastapi import APIRouter, status

from campaign_codex.api.deps import CampaignAccess, CampaignContext, CampaignDM, SessionDep
from campaign_codex.core.exceptions import NotFoundError
from campaign_codex.core.messages import TagMessages
from campaign_codex.models.tag import Tag
from campaign_codex.schemas.tag import EntityTagSetRequest, TagCreate, TagRead, TagSummary, TagUpdate, TagWithUsage
from campaign_codex.services import entities as entities_service
from campaign_codex.services import tags as tags_service

router = APIRouter()


async def _require_entity(session, context: CampaignContext, entity_type: str, entity_id: int) -> None:
    entity = await entities_service.get_entity(
        session,
        entity_type=entity_type,
        entity_id=entity_id,
        campaign_id=context.campaign_id,
    )
    if entity is None:
        raise NotFoundError(TagMessages.ENTITY_NOT_FOUND)


@router.get("/{campaign_id}/tags", response_model=List[TagWithUsage])
async def list_tags(session: SessionDep, context: CampaignAccess) -> List[TagWithUsage]:
    """All tags of the campaign with the number of records carrying each."""
    rows = await tags_service.list_tags_with_usage(session, campaign_id=context.campaign_id)
    return [
        TagWithUsage.model_validate({**tag.model_dump(), "usage_count": usage_count})
        for tag, usage_count in rows
    ]


@router.post("/{campaign_id}/tags", response_model=TagRead, status_code=status.HTTP_201_CREATED)
async def create_tag(tag_in: TagCreate, session: SessionDep, context: CampaignDM) -> Tag:
    return await tags_service.create_tag(
        session,
        campaign_id=context.campaign_id,
        name=tag_in.name,
        color=tag_in.color,
        is_premade=tag_in.is_premade,
    )


@router.put("/{campaign_id}/tags/{tag_id}", response_model=TagRead)
async def update_tag(tag_id: int, tag_in: TagUpdate, session: SessionDep, context: CampaignDM) -> Tag:
    tag = await tags_service.get_tag(session, campaign_id=context.campaign_id, tag_id=tag_id)
    return await tags_service.update_tag(
        session,
        tag,
        name=tag_in.name,
        color=tag_in.color,
        is_premade=tag_in.is_premade,
    )


@router.delete("/{campaign_id}/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: int, session: SessionDep, context: CampaignDM) -> None:
    """Delete a tag together with every association to it."""
    tag = await tags_service.get_tag(session, campaign_id=context.campaign_id, tag_id=tag_id)
    await tags_service.delete_tag(session, tag)


@router.get("/{campaign_id}/entities/{entity_type}/{entity_id}/tags", response_model=List[TagSummary])
async def get_entity_tags(
    entity_type: str,
    entity_id: int,
    session: SessionDep,
    context: CampaignAccess,
) -> List[Tag]:
    await entities_service.get_visible_entity(
        session,
        entity_type=entity_type,
        entity_id=entity_id,
        campaign_id=context.campaign_id,
        role=context.role,
        user_id=context.user_id,
    )
    return await tags_service.get_entity_tags(
        session,
        entity_type=entity_type,
        entity_id=entity_id,
        campaign_id=context.campaign_id,
    )


@router.post("/{campaign_id}/entities/{entity_type}/{entity_id}/tags", response_model=List[TagSummary])
async def set_entity_tags(
    entity_type: str,
    entity_id: int,
    tags_in: EntityTagSetRequest,
    session: SessionDep,
    context: CampaignDM,
) -> List[Tag]:
    """Replace the whole tag set of a record."""
    await _require_entity(session, context, entity_type, entity_id)
    return await tags_service.set_entity_tags(
        session,
        campaign_id=context.campaign_id,
        entity_type=entity_type,
        entity_id=entity_id,
        tag_ids=tags_in.tag_ids,
    )


@router.delete(
    "/{campaign_id}/entities/{entity_type}/{entity_id}/tags/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_entity_tag(
    entity_type: str,
    entity_id: int,
    tag_id: int,
    session: SessionDep,
    context: CampaignDM,
) -> None:
    await _require_entity(session, context, entity_type, entity_id)
    await tags_service.remove_entity_tag(
        session,
        campaign_id=context.campaign_id,
        entity_type=entity_type,
        entity_id=entity_id,
        tag_id=tag_id,
    )
