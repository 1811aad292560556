from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from campaign_codex.models.character import CharacterType
from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.common import CampaignRecordRead, RecordName


class HitPointBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    current: Optional[int] = None
    max: Optional[int] = None
    temp: Optional[int] = None


class AbilityBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    strength: Optional[int] = None
    dexterity: Optional[int] = None
    constitution: Optional[int] = None
    intelligence: Optional[int] = None
    wisdom: Optional[int] = None
    charisma: Optional[int] = None


class PersonalityBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    traits: Optional[str] = None
    ideals: Optional[str] = None
    bonds: Optional[str] = None
    flaws: Optional[str] = None


class CharacterSheet(BaseModel):
    """Structured character sheet.

    Known sections are typed; unknown keys are kept so client-side sheet
    extensions survive a save.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    character_class: Optional[str] = Field(default=None, alias="class")
    level: Optional[int] = Field(default=None, ge=0)
    race: Optional[str] = None
    background: Optional[str] = None
    stats: Optional[AbilityBlock] = None
    hp: Optional[HitPointBlock] = None
    ac: Optional[int] = None
    initiative: Optional[int] = None
    speed: Optional[int] = None
    skills: Optional[Dict[str, Any]] = None
    savingThrows: Optional[Dict[str, Any]] = None
    features: Optional[List[Any]] = None
    traits: Optional[List[Any]] = None
    equipment: Optional[List[Any]] = None
    spells: Optional[List[Any]] = None
    proficiencies: Optional[Dict[str, Any]] = None
    personality: Optional[PersonalityBlock] = None
    backstory: Optional[str] = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class CharacterCreate(BaseModel):
    type: CharacterType
    name: RecordName
    description: Optional[str] = None
    character_sheet: Optional[CharacterSheet] = None
    alignment: Optional[str] = Field(default=None, max_length=50)
    visibility: Optional[Visibility] = None
    player_user_id: Optional[int] = None


class CharacterUpdate(BaseModel):
    type: Optional[CharacterType] = None
    name: Optional[RecordName] = None
    description: Optional[str] = None
    character_sheet: Optional[CharacterSheet] = None
    alignment: Optional[str] = Field(default=None, max_length=50)
    visibility: Optional[Visibility] = None
    player_user_id: Optional[int] = None


class CharacterRead(CampaignRecordRead):
    type: CharacterType
    name: str
    description: Optional[str] = None
    character_sheet: Optional[Dict[str, Any]] = None
    alignment: Optional[str] = None
    player_user_id: Optional[int] = None
