from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlmodel import Field, SQLModel


class Image(SQLModel, table=True):
    __tablename__ = "images"
    __table_args__ = (
        Index("ix_images_entity", "campaign_id", "entity_type", "entity_id"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(
        sa_column=Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False),
    )
    entity_type: str = Field(sa_column=Column(String(length=50), nullable=False))
    entity_id: int = Field(sa_column=Column(Integer, nullable=False))
    # Relative to UPLOADS_DIR
    file_path: str = Field(sa_column=Column(String(length=1024), nullable=False))
    file_name: str = Field(sa_column=Column(String(length=255), nullable=False))
    file_size: int = Field(sa_column=Column(Integer, nullable=False))
    mime_type: str = Field(sa_column=Column(String(length=100), nullable=False))
    uploaded_by_user_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
    )
    uploaded_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
