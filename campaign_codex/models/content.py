from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlmodel import Field, SQLModel

from campaign_codex.models.visibility import Visibility


class ContentItem(SQLModel, table=True):
    """Category-scoped free-form document (handouts, items, custom lists)."""

    __tablename__ = "content_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(
        sa_column=Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    category: str = Field(sa_column=Column(String(length=100), nullable=False, index=True))
    title: str = Field(sa_column=Column(String(length=255), nullable=False))
    content_data: Optional[Any] = Field(default=None, sa_column=Column(JSON, nullable=True))
    visibility: str = Field(
        default=Visibility.dm_only.value,
        sa_column=Column(String(length=20), nullable=False, server_default=Visibility.dm_only.value),
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
