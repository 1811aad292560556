"""Quests and their objectives, milestones, links and session associations.

Create and update write the quest row and each supplied child collection in
separate commits. A failure part way through leaves the earlier steps applied.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Optional

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from campaign_codex.core.exceptions import InvalidRequestError, NotFoundError
from campaign_codex.core.messages import QuestMessages
from campaign_codex.db.query import apply_filters, apply_ordering, search_across
from campaign_codex.models.campaign import ParticipantRole
from campaign_codex.models.game_session import GameSession
from campaign_codex.models.quest import (
    Quest,
    QuestLink,
    QuestMilestone,
    QuestObjective,
    QuestSession,
    QuestStatus,
    QuestType,
    QuestUrgency,
)
from campaign_codex.schemas.query import FilterCondition, SortDir
from campaign_codex.schemas.quest import (
    BUNDLE_FIELDS,
    QuestCreate,
    QuestLinkCreate,
    QuestMilestoneCreate,
    QuestObjectiveCreate,
    QuestObjectiveUpdate,
    QuestUpdate,
)
from campaign_codex.services import records
from campaign_codex.services.visibility import visibility_clause

logger = logging.getLogger(__name__)

ENTITY_TYPE = "quest"


async def list_quests(
    session: AsyncSession,
    *,
    campaign_id: int,
    role: Optional[ParticipantRole],
    status: Optional[QuestStatus] = None,
    quest_type: Optional[QuestType] = None,
    urgency: Optional[QuestUrgency] = None,
    search: Optional[str] = None,
) -> list[Quest]:
    stmt = select(Quest).where(Quest.campaign_id == campaign_id, visibility_clause(Quest, role))
    stmt = apply_filters(
        stmt,
        [
            FilterCondition(field="status", value=status.value if status else None),
            FilterCondition(field="quest_type", value=quest_type.value if quest_type else None),
            FilterCondition(field="urgency", value=urgency.value if urgency else None),
            FilterCondition(field="search", value=search),
        ],
        {
            "status": Quest.status,
            "quest_type": Quest.quest_type,
            "urgency": Quest.urgency_level,
            "search": search_across(Quest.title, Quest.short_summary, Quest.description),
        },
    )
    stmt = apply_ordering(stmt, [(Quest.created_at, SortDir.desc), (Quest.id, SortDir.desc)])
    result = await session.exec(stmt)
    return list(result.all())


async def get_quest_bundle(session: AsyncSession, quest: Quest, *, role: Optional[ParticipantRole]) -> dict[str, Any]:
    """Child collections of a quest; links follow the same visibility policy as records."""
    links = await session.exec(
        select(QuestLink)
        .where(QuestLink.quest_id == quest.id, visibility_clause(QuestLink, role))
        .order_by(QuestLink.id)
    )
    objectives = await session.exec(
        select(QuestObjective)
        .where(QuestObjective.quest_id == quest.id)
        .order_by(QuestObjective.order_index, QuestObjective.id)
    )
    milestones = await session.exec(
        select(QuestMilestone)
        .where(QuestMilestone.quest_id == quest.id)
        .order_by(QuestMilestone.session_number, QuestMilestone.created_at)
    )
    sessions = await session.exec(
        select(QuestSession, GameSession.session_number, GameSession.title, GameSession.date_played)
        .join(GameSession, GameSession.id == QuestSession.session_id)
        .where(QuestSession.quest_id == quest.id)
        .order_by(GameSession.session_number)
    )
    return {
        "links": list(links.all()),
        "objectives": list(objectives.all()),
        "milestones": list(milestones.all()),
        "sessions": [
            {
                **association.model_dump(),
                "session_number": number,
                "session_title": title,
                "date_played": date_played,
            }
            for association, number, title, date_played in sessions.all()
        ],
    }


def _link_rows(quest_id: int, links: Sequence[QuestLinkCreate]) -> list[QuestLink]:
    return [
        records.new_record(QuestLink, link.model_dump(), quest_id=quest_id)
        for link in links
        if link.entity_id
    ]


def _objective_rows(quest_id: int, objectives: Sequence[QuestObjectiveCreate]) -> list[QuestObjective]:
    rows = []
    for position, objective in enumerate(objectives):
        title = (objective.title or "").strip()
        if not title:
            continue
        values = objective.model_dump()
        values.update(title=title, order_index=position)
        rows.append(records.new_record(QuestObjective, values, quest_id=quest_id))
    return rows


def _milestone_rows(quest_id: int, milestones: Sequence[QuestMilestoneCreate]) -> list[QuestMilestone]:
    rows = []
    for milestone in milestones:
        title = (milestone.title or "").strip()
        if not title:
            continue
        values = milestone.model_dump()
        values["title"] = title
        rows.append(records.new_record(QuestMilestone, values, quest_id=quest_id))
    return rows


async def _replace_children(session: AsyncSession, model: Any, quest_id: int, rows: list[Any]) -> None:
    await session.exec(delete(model).where(model.quest_id == quest_id))
    session.add_all(rows)
    await session.commit()


async def _write_bundle(session: AsyncSession, quest_id: int, payload: QuestCreate | QuestUpdate) -> None:
    if payload.links is not None:
        await _replace_children(session, QuestLink, quest_id, _link_rows(quest_id, payload.links))
    if payload.objectives is not None:
        await _replace_children(session, QuestObjective, quest_id, _objective_rows(quest_id, payload.objectives))
    if payload.milestones is not None:
        await _replace_children(session, QuestMilestone, quest_id, _milestone_rows(quest_id, payload.milestones))


async def create_quest(session: AsyncSession, *, campaign_id: int, user_id: int, payload: QuestCreate) -> Quest:
    quest = records.new_record(Quest, payload.model_dump(exclude=BUNDLE_FIELDS), campaign_id=campaign_id)
    records.stamp_new(quest, user_id=user_id)
    quest = await records.save(session, quest)
    await _write_bundle(session, quest.id, payload)
    logger.info("Quest %s created in campaign %s", quest.id, campaign_id)
    return quest


async def update_quest(session: AsyncSession, quest: Quest, *, user_id: int, payload: QuestUpdate) -> Quest:
    changes = payload.model_dump(exclude_unset=True, exclude=BUNDLE_FIELDS)
    for field in ("title", "quest_type", "status", "visibility"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    records.apply_changes(quest, changes, user_id=user_id)
    quest = await records.save(session, quest)
    await _write_bundle(session, quest.id, payload)
    return quest


async def delete_quest(session: AsyncSession, quest: Quest) -> None:
    # Child rows go with the quest through ON DELETE CASCADE
    await records.delete_record(session, quest, entity_type=ENTITY_TYPE)
    logger.info("Quest %s deleted from campaign %s", quest.id, quest.campaign_id)


async def add_link(session: AsyncSession, quest: Quest, payload: QuestLinkCreate) -> QuestLink:
    if payload.entity_id is None:
        raise InvalidRequestError(QuestMessages.LINK_ENTITY_REQUIRED)
    link = records.new_record(QuestLink, payload.model_dump(), quest_id=quest.id)
    return await records.save(session, link)


async def remove_link(session: AsyncSession, quest: Quest, link_id: int) -> None:
    result = await session.exec(select(QuestLink).where(QuestLink.id == link_id, QuestLink.quest_id == quest.id))
    link = result.one_or_none()
    if link is None:
        raise NotFoundError(QuestMessages.LINK_NOT_FOUND)
    await session.delete(link)
    await session.commit()


async def get_objective(session: AsyncSession, quest: Quest, objective_id: int) -> QuestObjective:
    result = await session.exec(
        select(QuestObjective).where(QuestObjective.id == objective_id, QuestObjective.quest_id == quest.id)
    )
    objective = result.one_or_none()
    if objective is None:
        raise NotFoundError(QuestMessages.OBJECTIVE_NOT_FOUND)
    return objective


async def add_objective(session: AsyncSession, quest: Quest, payload: QuestObjectiveCreate) -> QuestObjective:
    title = (payload.title or "").strip()
    if not title:
        raise InvalidRequestError(QuestMessages.OBJECTIVE_TITLE_REQUIRED)
    values = payload.model_dump()
    values.update(title=title, order_index=payload.order_index or 0)
    objective = records.new_record(QuestObjective, values, quest_id=quest.id)
    return await records.save(session, objective)


async def update_objective(
    session: AsyncSession,
    objective: QuestObjective,
    payload: QuestObjectiveUpdate,
) -> QuestObjective:
    changes = payload.model_dump(exclude_unset=True)
    for field in ("title", "objective_type", "status", "order_index"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    records.apply_changes(objective, changes)
    return await records.save(session, objective)


async def remove_objective(session: AsyncSession, objective: QuestObjective) -> None:
    await session.delete(objective)
    await session.commit()


async def add_milestone(session: AsyncSession, quest: Quest, payload: QuestMilestoneCreate) -> QuestMilestone:
    title = (payload.title or "").strip()
    if not title:
        raise InvalidRequestError(QuestMessages.MILESTONE_TITLE_REQUIRED)
    values = payload.model_dump()
    values["title"] = title
    milestone = records.new_record(QuestMilestone, values, quest_id=quest.id)
    return await records.save(session, milestone)


async def link_session(
    session: AsyncSession,
    quest: Quest,
    *,
    session_id: int,
    notes: Optional[str] = None,
) -> dict[str, Any]:
    """Associate a played session with a quest, updating the notes if already linked."""
    result = await session.exec(
        select(GameSession).where(GameSession.id == session_id, GameSession.campaign_id == quest.campaign_id)
    )
    game_session = result.one_or_none()
    if game_session is None:
        raise NotFoundError(QuestMessages.SESSION_NOT_FOUND)

    result = await session.exec(
        select(QuestSession).where(QuestSession.quest_id == quest.id, QuestSession.session_id == session_id)
    )
    association = result.one_or_none()
    if association is None:
        association = QuestSession(quest_id=quest.id, session_id=session_id, notes=notes)
    else:
        association.notes = notes
    association = await records.save(session, association)
    return {
        **association.model_dump(),
        "session_number": game_session.session_number,
        "session_title": game_session.title,
        "date_played": game_session.date_played,
    }
