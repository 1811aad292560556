from typing import Any, List, Optional

from fastapi import APIRouter, Query, status

from campaign_codex.api.deps import CampaignAccess, CampaignContext, CampaignDM, SessionDep
from campaign_codex.core.messages import QuestMessages
from campaign_codex.models.quest import Quest, QuestLink, QuestMilestone, QuestObjective, QuestStatus, QuestType, QuestUrgency
from campaign_codex.schemas.quest import (
    QuestCreate,
    QuestDetail,
    QuestLinkCreate,
    QuestLinkRead,
    QuestMilestoneCreate,
    QuestMilestoneRead,
    QuestObjectiveCreate,
    QuestObjectiveRead,
    QuestObjectiveUpdate,
    QuestRead,
    QuestSessionLink,
    QuestSessionRead,
    QuestUpdate,
)
from campaign_codex.services import quests as quests_service
from campaign_codex.services import records

router = APIRouter()

ENTITY_TYPE = quests_service.ENTITY_TYPE


async def _load(session, context: CampaignContext, quest_id: int) -> Quest:
    return await records.get_in_campaign(
        session,
        Quest,
        campaign_id=context.campaign_id,
        record_id=quest_id,
        not_found=QuestMessages.NOT_FOUND,
    )


async def _detail(session, context: CampaignContext, quest: Quest) -> dict[str, Any]:
    payload = await records.one_with_tags(session, quest, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)
    bundle = await quests_service.get_quest_bundle(session, quest, role=context.role)
    return {**payload, **bundle}


@router.get("/{campaign_id}/quests", response_model=List[QuestRead])
async def list_quests(
    session: SessionDep,
    context: CampaignAccess,
    quest_status: Optional[QuestStatus] = Query(default=None, alias="status"),
    quest_type: Optional[QuestType] = None,
    urgency: Optional[QuestUrgency] = None,
    search: Optional[str] = None,
) -> List[dict[str, Any]]:
    quests = await quests_service.list_quests(
        session,
        campaign_id=context.campaign_id,
        role=context.role,
        status=quest_status,
        quest_type=quest_type,
        urgency=urgency,
        search=search,
    )
    return await records.with_tags(session, quests, entity_type=ENTITY_TYPE, campaign_id=context.campaign_id)


@router.get("/{campaign_id}/quests/{quest_id}", response_model=QuestDetail)
async def read_quest(quest_id: int, session: SessionDep, context: CampaignAccess) -> dict[str, Any]:
    """Quest with its links, objectives, milestones and linked sessions."""
    quest = await records.get_visible_in_campaign(
        session,
        Quest,
        campaign_id=context.campaign_id,
        record_id=quest_id,
        role=context.role,
        not_found=QuestMessages.NOT_FOUND,
    )
    return await _detail(session, context, quest)


@router.post("/{campaign_id}/quests", response_model=QuestDetail, status_code=status.HTTP_201_CREATED)
async def create_quest(quest_in: QuestCreate, session: SessionDep, context: CampaignDM) -> dict[str, Any]:
    quest = await quests_service.create_quest(
        session,
        campaign_id=context.campaign_id,
        user_id=context.user_id,
        payload=quest_in,
    )
    return await _detail(session, context, quest)


@router.put("/{campaign_id}/quests/{quest_id}", response_model=QuestDetail)
async def update_quest(
    quest_id: int,
    quest_in: QuestUpdate,
    session: SessionDep,
    context: CampaignDM,
) -> dict[str, Any]:
    quest = await _load(session, context, quest_id)
    quest = await quests_service.update_quest(session, quest, user_id=context.user_id, payload=quest_in)
    return await _detail(session, context, quest)


@router.delete("/{campaign_id}/quests/{quest_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quest(quest_id: int, session: SessionDep, context: CampaignDM) -> None:
    quest = await _load(session, context, quest_id)
    await quests_service.delete_quest(session, quest)


@router.post(
    "/{campaign_id}/quests/{quest_id}/links",
    response_model=QuestLinkRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_quest_link(
    quest_id: int,
    link_in: QuestLinkCreate,
    session: SessionDep,
    context: CampaignDM,
) -> QuestLink:
    quest = await _load(session, context, quest_id)
    return await quests_service.add_link(session, quest, link_in)


@router.delete("/{campaign_id}/quests/{quest_id}/links/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_quest_link(quest_id: int, link_id: int, session: SessionDep, context: CampaignDM) -> None:
    quest = await _load(session, context, quest_id)
    await quests_service.remove_link(session, quest, link_id)


@router.post(
    "/{campaign_id}/quests/{quest_id}/objectives",
    response_model=QuestObjectiveRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_quest_objective(
    quest_id: int,
    objective_in: QuestObjectiveCreate,
    session: SessionDep,
    context: CampaignDM,
) -> QuestObjective:
    quest = await _load(session, context, quest_id)
    return await quests_service.add_objective(session, quest, objective_in)


@router.put("/{campaign_id}/quests/{quest_id}/objectives/{objective_id}", response_model=QuestObjectiveRead)
async def update_quest_objective(
    quest_id: int,
    objective_id: int,
    objective_in: QuestObjectiveUpdate,
    session: SessionDep,
    context: CampaignDM,
) -> QuestObjective:
    quest = await _load(session, context, quest_id)
    objective = await quests_service.get_objective(session, quest, objective_id)
    return await quests_service.update_objective(session, objective, objective_in)


@router.delete(
    "/{campaign_id}/quests/{quest_id}/objectives/{objective_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_quest_objective(quest_id: int, objective_id: int, session: SessionDep, context: CampaignDM) -> None:
    quest = await _load(session, context, quest_id)
    objective = await quests_service.get_objective(session, quest, objective_id)
    await quests_service.remove_objective(session, objective)


@router.post(
    "/{campaign_id}/quests/{quest_id}/milestones",
    response_model=QuestMilestoneRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_quest_milestone(
    quest_id: int,
    milestone_in: QuestMilestoneCreate,
    session: SessionDep,
    context: CampaignDM,
) -> QuestMilestone:
    quest = await _load(session, context, quest_id)
    return await quests_service.add_milestone(session, quest, milestone_in)


@router.post("/{campaign_id}/quests/{quest_id}/sessions", response_model=QuestSessionRead)
async def link_quest_session(
    quest_id: int,
    link_in: QuestSessionLink,
    session: SessionDep,
    context: CampaignDM,
) -> dict[str, Any]:
    quest = await _load(session, context, quest_id)
    return await quests_service.link_session(session, quest, session_id=link_in.session_id, notes=link_in.notes)
