from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from campaign_codex.core.messages import CreatureMessages
from campaign_codex.models.creature import CreatureSize, CreatureSourceType
from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.common import RecordName
from campaign_codex.schemas.tag import TagSummary

ABILITY_KEYS = ("str", "dex", "con", "int", "wis", "cha")


class ArmorClass(BaseModel):
    model_config = ConfigDict(extra="allow")

    value: int
    type: Optional[str] = None
    notes: Optional[str] = None


class HitPoints(BaseModel):
    model_config = ConfigDict(extra="allow")

    average: int
    formula: Optional[str] = None
    notes: Optional[str] = None


class AbilityScores(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    strength: int = Field(alias="str", ge=1)
    dexterity: int = Field(alias="dex", ge=1)
    constitution: int = Field(alias="con", ge=1)
    intelligence: int = Field(alias="int", ge=1)
    wisdom: int = Field(alias="wis", ge=1)
    charisma: int = Field(alias="cha", ge=1)


def _check_stat_block(data: Any, *, partial: bool) -> Any:
    """Reject incomplete stat blocks with the messages the client shows."""
    if not isinstance(data, dict):
        return data

    def supplied(*keys: str) -> bool:
        return not partial or any(key in data for key in keys)

    def first(*keys: str) -> Any:
        for key in keys:
            if key in data:
                return data[key]
        return None

    if supplied("size") and not first("size"):
        raise ValueError(CreatureMessages.SIZE_REQUIRED)
    if supplied("creatureType", "creature_type") and not first("creatureType", "creature_type"):
        raise ValueError(CreatureMessages.TYPE_REQUIRED)
    if supplied("armorClass", "armor_class"):
        armor_class = first("armorClass", "armor_class")
        if not isinstance(armor_class, dict) or armor_class.get("value") is None:
            raise ValueError(CreatureMessages.ARMOR_CLASS_REQUIRED)
    if supplied("hitPoints", "hit_points"):
        hit_points = first("hitPoints", "hit_points")
        if not isinstance(hit_points, dict) or hit_points.get("average") is None:
            raise ValueError(CreatureMessages.HIT_POINTS_REQUIRED)
    if supplied("abilities"):
        abilities = data.get("abilities")
        if not isinstance(abilities, dict) or not all(abilities.get(key) for key in ABILITY_KEYS):
            raise ValueError(CreatureMessages.ABILITIES_REQUIRED)
    return data


class CreatureFields(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    subtype: Optional[str] = Field(default=None, max_length=100)
    alignment: Optional[str] = Field(default=None, max_length=50)
    challenge_rating: Optional[str] = Field(default=None, max_length=10)
    proficiency_bonus: Optional[int] = None
    hit_dice: Optional[str] = Field(default=None, max_length=50)
    damage_vulnerabilities: Optional[str] = None
    damage_resistances: Optional[str] = None
    damage_immunities: Optional[str] = None
    condition_immunities: Optional[str] = None
    languages: Optional[str] = None
    legendary_actions_meta: Optional[Dict[str, Any]] = None
    spellcasting: Optional[Dict[str, Any]] = None
    short_description: Optional[str] = None
    appearance_rich_text: Optional[str] = None
    lore_rich_text: Optional[str] = None
    tactics_rich_text: Optional[str] = None
    dm_notes_rich_text: Optional[str] = None

    def to_columns(self) -> dict[str, Any]:
        """Supplied values keyed by column name; nested blocks keep their wire keys."""
        columns: dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if isinstance(value, BaseModel):
                value = value.model_dump(by_alias=True, exclude_unset=True)
            columns[name] = value
        return columns


class CreatureCreate(CreatureFields):
    name: RecordName
    source_type: CreatureSourceType = CreatureSourceType.homebrew
    visibility: Visibility = Visibility.dm_only
    size: CreatureSize
    creature_type: str = Field(..., min_length=1, max_length=100)
    armor_class: ArmorClass
    hit_points: HitPoints
    abilities: AbilityScores
    speeds: Dict[str, Any] = Field(default_factory=dict)
    senses: Dict[str, Any] = Field(default_factory=dict)
    saving_throws: List[Any] = Field(default_factory=list)
    skills: List[Any] = Field(default_factory=list)
    traits: List[Any] = Field(default_factory=list)
    actions: List[Any] = Field(default_factory=list)
    lair_actions: List[Any] = Field(default_factory=list)
    linked_entities: Dict[str, Any] = Field(
        default_factory=lambda: {"npcs": [], "factions": [], "locations": [], "quests": [], "sessions": []}
    )

    @model_validator(mode="before")
    @classmethod
    def check_stat_block(cls, data: Any) -> Any:
        return _check_stat_block(data, partial=False)

    def to_columns(self) -> dict[str, Any]:
        # Defaults are stored too on create
        columns = super().to_columns()
        for name in ("speeds", "senses", "saving_throws", "skills", "traits", "actions", "lair_actions",
                     "linked_entities", "source_type", "visibility"):
            columns.setdefault(name, getattr(self, name))
        return columns


class CreatureUpdate(CreatureFields):
    name: Optional[RecordName] = None
    source_type: Optional[CreatureSourceType] = None
    visibility: Optional[Visibility] = None
    size: Optional[CreatureSize] = None
    creature_type: Optional[str] = Field(default=None, max_length=100)
    armor_class: Optional[ArmorClass] = None
    hit_points: Optional[HitPoints] = None
    abilities: Optional[AbilityScores] = None
    speeds: Optional[Dict[str, Any]] = None
    senses: Optional[Dict[str, Any]] = None
    saving_throws: Optional[List[Any]] = None
    skills: Optional[List[Any]] = None
    traits: Optional[List[Any]] = None
    actions: Optional[List[Any]] = None
    lair_actions: Optional[List[Any]] = None
    linked_entities: Optional[Dict[str, Any]] = None

    @model_validator(mode="before")
    @classmethod
    def check_stat_block(cls, data: Any) -> Any:
        return _check_stat_block(data, partial=True)


class CreatureRead(BaseModel):
    """Stat block as stored, in the camelCase shape the client renders."""
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    campaign_id: int
    name: str
    source_type: str
    visibility: Visibility
    size: str
    creature_type: str
    subtype: Optional[str] = None
    alignment: Optional[str] = None
    challenge_rating: Optional[str] = None
    proficiency_bonus: Optional[int] = None
    armor_class: Optional[Dict[str, Any]] = None
    hit_points: Optional[Dict[str, Any]] = None
    hit_dice: Optional[str] = None
    damage_vulnerabilities: Optional[str] = None
    damage_resistances: Optional[str] = None
    damage_immunities: Optional[str] = None
    condition_immunities: Optional[str] = None
    speeds: Dict[str, Any] = Field(default_factory=dict)
    senses: Dict[str, Any] = Field(default_factory=dict)
    languages: Optional[str] = None
    abilities: Dict[str, Any] = Field(default_factory=dict)
    saving_throws: List[Any] = Field(default_factory=list)
    skills: List[Any] = Field(default_factory=list)
    traits: List[Any] = Field(default_factory=list)
    actions: List[Any] = Field(default_factory=list)
    legendary_actions_meta: Optional[Dict[str, Any]] = None
    lair_actions: List[Any] = Field(default_factory=list)
    spellcasting: Optional[Dict[str, Any]] = None
    short_description: Optional[str] = None
    appearance_rich_text: Optional[str] = None
    lore_rich_text: Optional[str] = None
    tactics_rich_text: Optional[str] = None
    dm_notes_rich_text: Optional[str] = None
    linked_entities: Dict[str, Any] = Field(default_factory=dict)
    created_by_user_id: Optional[int] = None
    created_by_username: Optional[str] = None
    last_updated_by_user_id: Optional[int] = None
    last_updated_by_username: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    tags: List[TagSummary] = Field(default_factory=list)
