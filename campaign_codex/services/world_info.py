from __future__ import annotations

from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.db.query import apply_filters, apply_ordering, search_across
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.world_info import WorldInfo
from campaign_codex.schemas.query import FilterCondition, SortDir
from campaign_codex.schemas.world_info import WorldInfoCreate, WorldInfoUpdate
from campaign_codex.services import records
from campaign_codex.services.visibility import visibility_clause

ENTITY_TYPE = "world_info"


async def list_world_info(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: Optional[ParticipantRole],
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> list[WorldInfo]:
    stmt = select(WorldInfo).where(WorldInfo.campaign_id == campaign_id, visibility_clause(WorldInfo, role))
    stmt = apply_filters(
        stmt,
        [
            FilterCondition(field="category", value=category),
            FilterCondition(field="search", value=search),
        ],
        {
            "category": WorldInfo.category,
            "search": search_across(WorldInfo.title, WorldInfo.content),
        },
    )
    stmt = apply_ordering(stmt, [(WorldInfo.category, SortDir.asc), (WorldInfo.title, SortDir.asc)])
    result = await session.exec(stmt)
    return list(result.all())


async def create_world_info(
    session: AsyncSession,
    *,
    campaign_id: int,
    user_id: int,
    payload: WorldInfoCreate,
) -> WorldInfo:
    entry = records.new_record(WorldInfo, payload.model_dump(), campaign_id=campaign_id)
    records.stamp_new(entry, user_id=user_id)
    return await records.save(session, entry)


async def update_world_info(
    session: AsyncSession,
    entry: WorldInfo,
    *,
    user_id: int,
    payload: WorldInfoUpdate,
) -> WorldInfo:
    changes = payload.model_dump(exclude_unset=True)
    for field in ("title", "visibility"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    records.apply_changes(entry, changes, user_id=user_id)
    return await records.save(session, entry)


async def delete_world_info(session: AsyncSession, entry: WorldInfo) -> None:
    await records.delete_record(session, entry, entity_type=ENTITY_TYPE)
