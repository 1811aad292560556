from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Enum as SQLEnum, Field, SQLModel

from campaign_codex.models.visibility import Visibility


class CharacterType(str, Enum):
    player = "player"
    npc = "npc"
    antagonist = "antagonist"


class Character(SQLModel, table=True):
    __tablename__ = "characters"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(
        sa_column=Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    type: CharacterType = Field(
        sa_column=Column(SQLEnum(CharacterType, name="character_type"), nullable=False, index=True),
    )
    name: str = Field(sa_column=Column(String(length=255), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    # Opaque document; validated against CharacterSheet at the API boundary
    character_sheet: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    alignment: Optional[str] = Field(default=None, sa_column=Column(String(length=50), nullable=True))
    visibility: str = Field(
        default=Visibility.dm_only.value,
        sa_column=Column(String(length=20), nullable=False, server_default=Visibility.dm_only.value, index=True),
    )
    player_user_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True),
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
