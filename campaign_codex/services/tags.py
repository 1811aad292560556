from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import InvalidRequestError, NotFoundError
from campaign_codex.core.messages import TagMessages
from campaign_codex.models.tag import EntityTag, Tag

logger = logging.getLogger(__name__)


async def get_tag(session: AsyncSession, *, campaign_id: int, tag_id: int) -> Tag:
    stmt = select(Tag).where(Tag.id == tag_id, Tag.campaign_id == campaign_id)
    result = await session.exec(stmt)
    tag = result.one_or_none()
    if tag is None:
        raise NotFoundError(TagMessages.NOT_FOUND)
    return tag


async def _check_duplicate_name(
    session: AsyncSession,
    campaign_id: int,
    name: str,
    exclude_tag_id: int | None = None,
) -> None:
    """Check for case-insensitive duplicate tag name within the campaign."""
    stmt = select(Tag.id).where(
        Tag.campaign_id == campaign_id,
        func.lower(Tag.name) == name.lower().strip(),
    )
    if exclude_tag_id is not None:
        stmt = stmt.where(Tag.id != exclude_tag_id)
    result = await session.exec(stmt)
    if result.first() is not None:
        raise InvalidRequestError(TagMessages.DUPLICATE_NAME)


async def _commit_tag(session: AsyncSession, tag: Tag) -> Tag:
    session.add(tag)
    try:
        await session.commit()
    except IntegrityError as exc:
        # Lost a race against a concurrent insert of the same name
        await session.rollback()
        raise InvalidRequestError(TagMessages.DUPLICATE_NAME) from exc
    await session.refresh(tag)
    return tag


async def list_tags_with_usage(session: AsyncSession, *, campaign_id: int) -> list[tuple[Tag, int]]:
    stmt = (
        select(Tag, func.count(EntityTag.id))
        .join(EntityTag, EntityTag.tag_id == Tag.id, isouter=True)
        .where(Tag.campaign_id == campaign_id)
        .group_by(Tag.id)
        .order_by(Tag.name.asc())
    )
    result = await session.exec(stmt)
    return [(tag, count) for tag, count in result.all()]


async def create_tag(
    session: AsyncSession,
    *,
    campaign_id: int,
    name: str,
    color: str,
    is_premade: bool = False,
) -> Tag:
    await _check_duplicate_name(session, campaign_id, name)
    tag = Tag(campaign_id=campaign_id, name=name.strip(), color=color, is_premade=is_premade)
    return await _commit_tag(session, tag)


async def update_tag(
    session: AsyncSession,
    tag: Tag,
    *,
    name: Optional[str] = None,
    color: Optional[str] = None,
    is_premade: Optional[bool] = None,
) -> Tag:
    if name is not None:
        await _check_duplicate_name(session, tag.campaign_id, name, exclude_tag_id=tag.id)
        tag.name = name.strip()
    if color is not None:
        tag.color = color
    if is_premade is not None:
        tag.is_premade = is_premade
    tag.updated_at = datetime.now(timezone.utc)
    return await _commit_tag(session, tag)


async def delete_tag(session: AsyncSession, tag: Tag) -> None:
    await session.exec(delete(EntityTag).where(EntityTag.tag_id == tag.id))
    await session.delete(tag)
    await session.commit()


async def get_entity_tags(session: AsyncSession, *, entity_type: str, entity_id: int, campaign_id: int) -> list[Tag]:
    tags_by_entity = await get_tags_for_entities(
        session, entity_type=entity_type, entity_ids=[entity_id], campaign_id=campaign_id
    )
    return tags_by_entity.get(entity_id, [])


async def get_tags_for_entities(
    session: AsyncSession,
    *,
    entity_type: str,
    entity_ids: Iterable[int],
    campaign_id: int,
) -> dict[int, list[Tag]]:
    """Batch-load tags for many records of one type, keyed by entity id."""
    ids = list({entity_id for entity_id in entity_ids if entity_id is not None})
    if not ids:
        return {}
    stmt = (
        select(EntityTag.entity_id, Tag)
        .join(Tag, Tag.id == EntityTag.tag_id)
        .where(
            EntityTag.entity_type == entity_type,
            EntityTag.entity_id.in_(ids),
            Tag.campaign_id == campaign_id,
        )
        .order_by(Tag.name.asc())
    )
    result = await session.exec(stmt)
    grouped: dict[int, list[Tag]] = defaultdict(list)
    for entity_id, tag in result.all():
        grouped[entity_id].append(tag)
    return dict(grouped)


async def set_entity_tags(
    session: AsyncSession,
    *,
    campaign_id: int,
    entity_type: str,
    entity_id: int,
    tag_ids: Sequence[int],
) -> list[Tag]:
    """Replace the full tag set of a record in one transaction.

    Every id is checked against the campaign before anything is written, and
    the delete and inserts share a single commit, so a failure leaves the
    previous tag set untouched.
    """
    wanted = list(dict.fromkeys(tag_ids))
    if wanted:
        result = await session.exec(
            select(Tag.id).where(Tag.campaign_id == campaign_id, Tag.id.in_(wanted))
        )
        if len(set(result.all())) != len(wanted):
            raise InvalidRequestError(TagMessages.FOREIGN_TAGS)

    try:
        await session.exec(
            delete(EntityTag).where(EntityTag.entity_type == entity_type, EntityTag.entity_id == entity_id)
        )
        for tag_id in wanted:
            session.add(EntityTag(entity_type=entity_type, entity_id=entity_id, tag_id=tag_id))
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Failed to replace tags for %s %s", entity_type, entity_id)
        raise

    return await get_entity_tags(session, entity_type=entity_type, entity_id=entity_id, campaign_id=campaign_id)


async def remove_entity_tag(
    session: AsyncSession,
    *,
    campaign_id: int,
    entity_type: str,
    entity_id: int,
    tag_id: int,
) -> None:
    await get_tag(session, campaign_id=campaign_id, tag_id=tag_id)
    await session.exec(
        delete(EntityTag).where(
            EntityTag.entity_type == entity_type,
            EntityTag.entity_id == entity_id,
            EntityTag.tag_id == tag_id,
        )
    )
    await session.commit()
