from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from campaign_codex.models.quest import ObjectiveStatus, ObjectiveType, QuestStatus, QuestType, QuestUrgency
from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.common import CampaignRecordRead, RecordTitle


class QuestLinkCreate(BaseModel):
    entity_type: str = Field(..., min_length=1, max_length=50)
    entity_id: Optional[int] = None
    role: Optional[str] = Field(default=None, max_length=100)
    visibility: Visibility = Visibility.dm_only


class QuestLinkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quest_id: int
    entity_type: str
    entity_id: int
    role: Optional[str] = None
    visibility: Visibility
    created_at: datetime


class QuestObjectiveCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    objective_type: ObjectiveType = ObjectiveType.primary
    description: Optional[str] = None
    status: ObjectiveStatus = ObjectiveStatus.incomplete
    linked_entity_type: Optional[str] = Field(default=None, max_length=50)
    linked_entity_id: Optional[int] = None
    notes: Optional[str] = None
    order_index: Optional[int] = None


class QuestObjectiveUpdate(BaseModel):
    title: Optional[RecordTitle] = None
    objective_type: Optional[ObjectiveType] = None
    description: Optional[str] = None
    status: Optional[ObjectiveStatus] = None
    linked_entity_type: Optional[str] = Field(default=None, max_length=50)
    linked_entity_id: Optional[int] = None
    notes: Optional[str] = None
    order_index: Optional[int] = None


class QuestObjectiveRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quest_id: int
    objective_type: ObjectiveType
    title: str
    description: Optional[str] = None
    status: ObjectiveStatus
    linked_entity_type: Optional[str] = None
    linked_entity_id: Optional[int] = None
    notes: Optional[str] = None
    order_index: int
    created_at: datetime
    updated_at: datetime


class QuestMilestoneCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    session_number: Optional[int] = None


class QuestMilestoneRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quest_id: int
    title: str
    description: Optional[str] = None
    session_number: Optional[int] = None
    created_at: datetime


class QuestSessionLink(BaseModel):
    session_id: int
    notes: Optional[str] = None


class QuestSessionRead(BaseModel):
    id: int
    quest_id: int
    session_id: int
    notes: Optional[str] = None
    session_number: Optional[int] = None
    session_title: Optional[str] = None
    date_played: Optional[date] = None


class QuestFields(BaseModel):
    short_summary: Optional[str] = None
    description: Optional[str] = None
    quest_giver: Optional[str] = Field(default=None, max_length=255)
    initial_hook: Optional[str] = None
    rewards: Optional[str] = None
    consequences: Optional[str] = None
    urgency_level: Optional[QuestUrgency] = None
    estimated_sessions: Optional[int] = Field(default=None, ge=0)
    difficulty: Optional[str] = Field(default=None, max_length=50)
    visibility_controls: Optional[Dict[str, Any]] = None
    introduced_in_session: Optional[int] = None
    completed_in_session: Optional[int] = None


class QuestCreate(QuestFields):
    title: RecordTitle
    quest_type: QuestType
    status: QuestStatus = QuestStatus.active
    visibility: Visibility = Visibility.dm_only
    links: Optional[List[QuestLinkCreate]] = None
    objectives: Optional[List[QuestObjectiveCreate]] = None
    milestones: Optional[List[QuestMilestoneCreate]] = None


class QuestUpdate(QuestFields):
    title: Optional[RecordTitle] = None
    quest_type: Optional[QuestType] = None
    status: Optional[QuestStatus] = None
    visibility: Optional[Visibility] = None
    links: Optional[List[QuestLinkCreate]] = None
    objectives: Optional[List[QuestObjectiveCreate]] = None
    milestones: Optional[List[QuestMilestoneCreate]] = None


BUNDLE_FIELDS = frozenset({"links", "objectives", "milestones"})


class QuestRead(CampaignRecordRead, QuestFields):
    title: str
    quest_type: QuestType
    status: QuestStatus


class QuestDetail(QuestRead):
    links: List[QuestLinkRead] = Field(default_factory=list)
    objectives: List[QuestObjectiveRead] = Field(default_factory=list)
    milestones: List[QuestMilestoneRead] = Field(default_factory=list)
    sessions: List[QuestSessionRead] = Field(default_factory=list)
