from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Field, SQLModel

from campaign_codex.models.visibility import Visibility


class GameSession(SQLModel, table=True):
    """A played (or planned) session of the campaign."""

    __tablename__ = "sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(
        sa_column=Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    session_number: int = Field(sa_column=Column(Integer, nullable=False))
    title: Optional[str] = Field(default=None, sa_column=Column(String(length=255), nullable=True))
    date_played: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))
    summary: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes_characters: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes_npcs: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes_antagonists: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes_locations: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes_factions: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes_world_info: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    notes_quests: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    visibility: str = Field(
        default=Visibility.dm_only.value,
        sa_column=Column(String(length=20), nullable=False, server_default=Visibility.dm_only.value, index=True),
    )
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


class SessionNote(SQLModel, table=True):
    """DM note about one campaign record, scoped to a session."""

    __tablename__ = "session_notes"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(
        sa_column=Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    entity_type: str = Field(sa_column=Column(String(length=50), nullable=False))
    entity_id: int = Field(sa_column=Column(Integer, nullable=False))
    quick_note: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    detailed_note: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class PlayerSessionNote(SQLModel, table=True):
    __tablename__ = "player_session_notes"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(
        sa_column=Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    note_content: str = Field(sa_column=Column(Text, nullable=False))
    visibility: str = Field(
        default=Visibility.dm_only.value,
        sa_column=Column(String(length=20), nullable=False, server_default=Visibility.dm_only.value),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
