from __future__ import annotations

import logging
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import NotFoundError
from campaign_codex.core.messages import ContentMessages
from campaign_codex.db.query import apply_ordering
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.content import ContentItem
from campaign_codex.schemas.content import ContentItemCreate, ContentItemUpdate
from campaign_codex.schemas.query import SortDir
from campaign_codex.services import records
from campaign_codex.services.visibility import visibility_clause

logger = logging.getLogger(__name__)

ENTITY_TYPE = "content_item"


async def list_content(
    session: AsyncSession,
    *,
    campaign_id: int,
    category: str,
    role: Optional[ParticipantRole],
) -> list[ContentItem]:
    stmt = select(ContentItem).where(
        ContentItem.campaign_id == campaign_id,
        ContentItem.category == category,
        visibility_clause(ContentItem, role),
    )
    stmt = apply_ordering(stmt, [(ContentItem.updated_at, SortDir.desc), (ContentItem.id, SortDir.desc)])
    result = await session.exec(stmt)
    return list(result.all())


async def get_content_item(
    session: AsyncSession,
    *,
    campaign_id: int,
    category: str,
    item_id: int,
    role: Optional[ParticipantRole] = None,
    check_visibility: bool = False,
) -> ContentItem:
    stmt = select(ContentItem).where(
        ContentItem.id == item_id,
        ContentItem.campaign_id == campaign_id,
        ContentItem.category == category,
    )
    if check_visibility:
        stmt = stmt.where(visibility_clause(ContentItem, role))
    result = await session.exec(stmt)
    item = result.one_or_none()
    if item is None:
        raise NotFoundError(ContentMessages.NOT_FOUND)
    return item


async def create_content_item(
    session: AsyncSession,
    *,
    campaign_id: int,
    category: str,
    user_id: int,
    payload: ContentItemCreate,
) -> ContentItem:
    item = records.new_record(ContentItem, payload.model_dump(), campaign_id=campaign_id, category=category)
    records.stamp_new(item, user_id=user_id)
    item = await records.save(session, item)
    logger.info("Content item %s (%s) created in campaign %s", item.id, category, campaign_id)
    return item


async def update_content_item(
    session: AsyncSession,
    item: ContentItem,
    *,
    user_id: int,
    payload: ContentItemUpdate,
) -> ContentItem:
    changes = payload.model_dump(exclude_unset=True)
    for field in ("title", "visibility"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    records.apply_changes(item, changes, user_id=user_id)
    return await records.save(session, item)


async def delete_content_item(session: AsyncSession, item: ContentItem) -> None:
    await records.delete_record(session, item, entity_type=ENTITY_TYPE)
    logger.info("Content item %s deleted from campaign %s", item.id, item.campaign_id)
