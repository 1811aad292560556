from __future__ import annotations

import logging
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.db.query import apply_filters, apply_ordering, search_across
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.creature import Creature
from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.creature import CreatureCreate, CreatureUpdate
from campaign_codex.schemas.query import FilterCondition, SortDir
from campaign_codex.services import records
from campaign_codex.services.visibility import visibility_clause

logger = logging.getLogger(__name__)

ENTITY_TYPE = "creature"

# Columns that must never be cleared by an update
REQUIRED_COLUMNS = ("name", "size", "creature_type", "armor_class", "hit_points", "abilities", "source_type", "visibility")


async def list_creatures(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: Optional[ParticipantRole],
    search: Optional[str] = None,
    creature_type: Optional[str] = None,
    challenge_rating: Optional[str] = None,
    visibility: Optional[Visibility] = None,
) -> list[Creature]:
    stmt = select(Creature).where(Creature.campaign_id == campaign_id, visibility_clause(Creature, role))
    conditions = [
        FilterCondition(field="search", value=search),
        FilterCondition(field="creature_type", value=creature_type),
        FilterCondition(field="challenge_rating", value=challenge_rating),
    ]
    # Only DMs can narrow by visibility; for players the gate already decides
    if role == ParticipantRole.dm and visibility is not None:
        conditions.append(FilterCondition(field="visibility", value=visibility.value))
    stmt = apply_filters(
        stmt,
        conditions,
        {
            "search": search_across(Creature.name, Creature.short_description),
            "creature_type": Creature.creature_type,
            "challenge_rating": Creature.challenge_rating,
            "visibility": Creature.visibility,
        },
    )
    stmt = apply_ordering(stmt, [(Creature.name, SortDir.asc)])
    result = await session.exec(stmt)
    return list(result.all())


async def create_creature(
    session: AsyncSession,
    *,
    campaign_id: int,
    user_id: int,
    payload: CreatureCreate,
) -> Creature:
    creature = records.new_record(Creature, payload.to_columns(), campaign_id=campaign_id)
    records.stamp_new(creature, user_id=user_id)
    creature = await records.save(session, creature)
    logger.info("Creature %s created in campaign %s", creature.id, campaign_id)
    return creature


async def update_creature(
    session: AsyncSession,
    creature: Creature,
    *,
    user_id: int,
    payload: CreatureUpdate,
) -> Creature:
    changes = payload.to_columns()
    for column in REQUIRED_COLUMNS:
        if column in changes and changes[column] is None:
            changes.pop(column)
    records.apply_changes(creature, changes, user_id=user_id)
    return await records.save(session, creature)


async def delete_creature(session: AsyncSession, creature: Creature) -> None:
    await records.delete_record(session, creature, entity_type=ENTITY_TYPE)
