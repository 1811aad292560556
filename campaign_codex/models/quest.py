from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

from campaign_codex.models.visibility import Visibility


class QuestType(str, Enum):
    main = "main"
    side = "side"
    faction = "faction"
    personal = "personal"
    one_shot = "one-shot"


class QuestStatus(str, Enum):
    active = "active"
    completed = "completed"
    failed = "failed"
    on_hold = "on-hold"
    abandoned = "abandoned"


class QuestUrgency(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    time_sensitive = "time-sensitive"


class ObjectiveType(str, Enum):
    primary = "primary"
    optional = "optional"
    hidden = "hidden"


class ObjectiveStatus(str, Enum):
    incomplete = "incomplete"
    complete = "complete"
    failed = "failed"


class Quest(SQLModel, table=True):
    __tablename__ = "quests"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(
        sa_column=Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    title: str = Field(sa_column=Column(String(length=255), nullable=False))
    quest_type: str = Field(sa_column=Column(String(length=20), nullable=False))
    status: str = Field(
        default=QuestStatus.active.value,
        sa_column=Column(String(length=20), nullable=False, server_default=QuestStatus.active.value, index=True),
    )
    short_summary: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    quest_giver: Optional[str] = Field(default=None, sa_column=Column(String(length=255), nullable=True))
    initial_hook: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    rewards: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    consequences: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    urgency_level: Optional[str] = Field(default=None, sa_column=Column(String(length=20), nullable=True))
    estimated_sessions: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    difficulty: Optional[str] = Field(default=None, sa_column=Column(String(length=50), nullable=True))
    visibility_controls: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    visibility: str = Field(
        default=Visibility.dm_only.value,
        sa_column=Column(String(length=20), nullable=False, server_default=Visibility.dm_only.value, index=True),
    )
    introduced_in_session: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    completed_in_session: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    created_by_user_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    )
    last_updated_by_user_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class QuestLink(SQLModel, table=True):
    """Reference from a quest to another campaign record, with its own visibility."""

    __tablename__ = "quest_links"

    id: Optional[int] = Field(default=None, primary_key=True)
    quest_id: int = Field(
        sa_column=Column(Integer, ForeignKey("quests.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    entity_type: str = Field(sa_column=Column(String(length=50), nullable=False))
    entity_id: int = Field(sa_column=Column(Integer, nullable=False))
    role: Optional[str] = Field(default=None, sa_column=Column(String(length=100), nullable=True))
    visibility: str = Field(
        default=Visibility.dm_only.value,
        sa_column=Column(String(length=20), nullable=False, server_default=Visibility.dm_only.value),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class QuestObjective(SQLModel, table=True):
    __tablename__ = "quest_objectives"

    id: Optional[int] = Field(default=None, primary_key=True)
    quest_id: int = Field(
        sa_column=Column(Integer, ForeignKey("quests.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    objective_type: str = Field(
        default=ObjectiveType.primary.value,
        sa_column=Column(String(length=20), nullable=False, server_default=ObjectiveType.primary.value),
    )
    title: str = Field(sa_column=Column(String(length=255), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    status: str = Field(
        default=ObjectiveStatus.incomplete.value,
        sa_column=Column(String(length=20), nullable=False, server_default=ObjectiveStatus.incomplete.value),
    )
    linked_entity_type: Optional[str] = Field(default=None, sa_column=Column(String(length=50), nullable=True))
    linked_entity_id: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    order_index: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default="0"))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class QuestMilestone(SQLModel, table=True):
    __tablename__ = "quest_milestones"

    id: Optional[int] = Field(default=None, primary_key=True)
    quest_id: int = Field(
        sa_column=Column(Integer, ForeignKey("quests.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    title: str = Field(sa_column=Column(String(length=255), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    session_number: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class QuestSession(SQLModel, table=True):
    """Association between a quest and a played session."""

    __tablename__ = "quest_sessions"
    __table_args__ = (
        UniqueConstraint("quest_id", "session_id", name="uq_quest_sessions_quest_session"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    quest_id: int = Field(
        sa_column=Column(Integer, ForeignKey("quests.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    session_id: int = Field(
        sa_column=Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
