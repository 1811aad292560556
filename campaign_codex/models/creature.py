from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Field, SQLModel

from campaign_codex.models.visibility import Visibility


class CreatureSourceType(str, Enum):
    homebrew = "homebrew"
    user_imported = "user-imported"
    other = "other"


class CreatureSize(str, Enum):
    tiny = "Tiny"
    small = "Small"
    medium = "Medium"
    large = "Large"
    huge = "Huge"
    gargantuan = "Gargantuan"


class Creature(SQLModel, table=True):
    """Monster stat block. Structured parts are stored as JSON documents."""

    __tablename__ = "creatures"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: int = Field(
        sa_column=Column(Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    name: str = Field(sa_column=Column(String(length=255), nullable=False))
    source_type: str = Field(
        default=CreatureSourceType.homebrew.value,
        sa_column=Column(String(length=20), nullable=False, server_default=CreatureSourceType.homebrew.value),
    )
    visibility: str = Field(
        default=Visibility.dm_only.value,
        sa_column=Column(String(length=20), nullable=False, server_default=Visibility.dm_only.value, index=True),
    )
    size: str = Field(sa_column=Column(String(length=20), nullable=False))
    creature_type: str = Field(sa_column=Column(String(length=100), nullable=False, index=True))
    subtype: Optional[str] = Field(default=None, sa_column=Column(String(length=100), nullable=True))
    alignment: Optional[str] = Field(default=None, sa_column=Column(String(length=50), nullable=True))
    challenge_rating: Optional[str] = Field(default=None, sa_column=Column(String(length=10), nullable=True))
    proficiency_bonus: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    armor_class: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    hit_points: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    hit_dice: Optional[str] = Field(default=None, sa_column=Column(String(length=50), nullable=True))
    damage_vulnerabilities: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    damage_resistances: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    damage_immunities: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    condition_immunities: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    speeds: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    senses: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    languages: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    abilities: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    saving_throws: list[Any] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    skills: list[Any] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    traits: list[Any] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    actions: list[Any] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    legendary_actions_meta: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    lair_actions: list[Any] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    spellcasting: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    short_description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    appearance_rich_text: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    lore_rich_text: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    tactics_rich_text: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    dm_notes_rich_text: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    linked_entities: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
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
