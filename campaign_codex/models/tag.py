from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlmodel import Field, SQLModel


class Tag(SQLModel, table=True):
    """Campaign-scoped label; names are unique per campaign regardless of case."""

    __tablename__ = "tags"
    __table_args__ = (
        Index("uq_tags_campaign_lower_name", "campaign_id", text("lower(name)"), unique=True),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(
        sa_column=Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    name: str = Field(
        sa_column=Column(String(length=100), nullable=False),
    )
    color: str = Field(
        default="#6366F1",
        sa_column=Column(String(length=7), nullable=False, server_default="#6366F1"),
    )
    is_premade: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, server_default="false"),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class EntityTag(SQLModel, table=True):
    """Association of a tag with any campaign record, keyed by (entity_type, entity_id)."""

    __tablename__ = "entity_tags"
    __table_args__ = (
        UniqueConstraint("entity_type", "entity_id", "tag_id", name="uq_entity_tags_entity_tag"),
        Index("ix_entity_tags_entity", "entity_type", "entity_id"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    entity_type: str = Field(sa_column=Column(String(length=50), nullable=False))
    entity_id: int = Field(sa_column=Column(Integer, nullable=False))
    tag_id: int = Field(
        sa_column=Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
