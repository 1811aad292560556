from typing import Annotated, Any, List

from fastapi import APIRouter, Path, status

from campaign_codex.api.deps import CampaignAccess, CampaignDM, SessionDep
from campaign_codex.schemas.content import ContentItemCreate, ContentItemRead, ContentItemUpdate
from campaign_codex.services import content as content_service
from campaign_codex.services import records

router = APIRouter()

ENTITY_TYPE = content_service.ENTITY_TYPE

Category = Annotated[str, Path(min_length=1, max_length=100, description="Content category")]


@router.get("/{campaign_id}/content/{category}", response_model=List[ContentItemRead])
async def list_content(
    session: SessionDep,
    context: CampaignAccess,
    category: Category,
) -> List[dict[str, Any]]:
    items = await content_service.list_content(
        session,
        campaign_id=context.campaign_id,
        category=category,
        role=context.role,
    )
    return await records.with_tags(session, items, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.get("/{campaign_id}/content/{category}/{item_id}", response_model=ContentItemRead)
async def read_content_item(
    item_id: int,
    session: SessionDep,
    context: CampaignAccess,
    category: Category,
) -> dict[str, Any]:
    item = await content_service.get_content_item(
        session,
        campaign_id=context.campaign_id,
        category=category,
        item_id=item_id,
        role=context.role,
        check_visibility=True,
    )
    return await records.one_with_tags(session, item, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.post(
    "/{campaign_id}/content/{category}",
    response_model=ContentItemRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_content_item(
    item_in: ContentItemCreate,
    session: SessionDep,
    context: CampaignDM,
    category: Category,
) -> dict[str, Any]:
    item = await content_service.create_content_item(
        session,
        campaign_id=context.campaign_id,
        category=category,
        user_id=context.user_id,
        payload=item_in,
    )
    return await records.one_with_tags(session, item, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.put("/{campaign_id}/content/{category}/{item_id}", response_model=ContentItemRead)
async def update_content_item(
    item_id: int,
    item_in: ContentItemUpdate,
    session: SessionDep,
    context: CampaignDM,
    category: Category,
) -> dict[str, Any]:
    item = await content_service.get_content_item(
        session,
        campaign_id=context.campaign_id,
        category=category,
        item_id=item_id,
    )
    item = await content_service.update_content_item(session, item, user_id=context.user_id, payload=item_in)
    return await records.one_with_tags(session, item, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.delete("/{campaign_id}/content/{category}/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content_item(
    item_id: int,
    session: SessionDep,
    context: CampaignDM,
    category: Category,
) -> None:
    item = await content_service.get_content_item(
        session,
        campaign_id=context.campaign_id,
        category=category,
        item_id=item_id,
    )
    await content_service.delete_content_item(session, item)
