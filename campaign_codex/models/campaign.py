from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlmodel import Enum as SQLEnum, Field, SQLModel


class ParticipantRole(str, Enum):
    dm = "dm"
    player = "player"


class Campaign(SQLModel, table=True):
    """Top-level tenant. The owner is always a DM, independent of participant rows."""

    __tablename__ = "campaigns"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    name: str = Field(sa_column=Column(String(length=255), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class CampaignParticipant(SQLModel, table=True):
    __tablename__ = "campaign_participants"
    __table_args__ = (
        UniqueConstraint("campaign_id", "user_id", name="uq_campaign_participants_campaign_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(
        sa_column=Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    role: ParticipantRole = Field(
        sa_column=Column(
            SQLEnum(ParticipantRole, name="participant_role"),
            nullable=False,
            server_default=ParticipantRole.player.value,
        ),
    )
    invited_by: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    )
    joined_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
