from __future__ import annotations

import logging
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.db.query import apply_filters, apply_ordering, search_across
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.faction import Faction
from campaign_codex.schemas.faction import FactionCreate, FactionUpdate
from campaign_codex.schemas.query import FilterCondition, SortDir
from campaign_codex.services import records
from campaign_codex.services.visibility import visibility_clause

logger = logging.getLogger(__name__)

ENTITY_TYPE = "faction"


async def list_factions(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: Optional[ParticipantRole],
    search: Optional[str] = None,
) -> list[Faction]:
    stmt = select(Faction).where(Faction.campaign_id == campaign_id, visibility_clause(Faction, role))
    stmt = apply_filters(
        stmt,
        [FilterCondition(field="search", value=search)],
        {"search": search_across(Faction.name, Faction.description, Faction.goals)},
    )
    stmt = apply_ordering(stmt, [(Faction.name, SortDir.asc)])
    result = await session.exec(stmt)
    return list(result.all())


async def create_faction(session: AsyncSession, *, campaign_id: int, user_id: int, payload: FactionCreate) -> Faction:
    faction = records.new_record(Faction, payload.model_dump(), campaign_id=campaign_id)
    records.stamp_new(faction, user_id=user_id)
    faction = await records.save(session, faction)
    logger.info("Faction %s created in campaign %s", faction.id, campaign_id)
    return faction


async def update_faction(session: AsyncSession, faction: Faction, *, user_id: int, payload: FactionUpdate) -> Faction:
    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "visibility"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    records.apply_changes(faction, changes, user_id=user_id)
    return await records.save(session, faction)


async def delete_faction(session: AsyncSession, faction: Faction) -> None:
    await records.delete_record(session, faction, entity_type=ENTITY_TYPE)
