from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.common import CampaignRecordRead


class SessionFields(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    date_played: Optional[date] = None
    summary: Optional[str] = None
    notes_characters: Optional[str] = None
    notes_npcs: Optional[str] = None
    notes_antagonists: Optional[str] = None
    notes_locations: Optional[str] = None
    notes_factions: Optional[str] = None
    notes_world_info: Optional[str] = None
    notes_quests: Optional[str] = None


class SessionCreate(SessionFields):
    session_number: Optional[int] = Field(default=None, ge=0)
    visibility: Optional[Visibility] = None


class SessionUpdate(SessionFields):
    session_number: Optional[int] = Field(default=None, ge=0)
    visibility: Optional[Visibility] = None


class SessionNoteCreate(BaseModel):
    entity_type: str = Field(..., min_length=1, max_length=50)
    entity_id: int
    quick_note: Optional[str] = None
    detailed_note: Optional[str] = None


class SessionNoteRead(SessionNoteCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    created_at: datetime


class PostNoteRequest(BaseModel):
    entity_type: str = Field(..., min_length=1)
    entity_id: int
    note_content: str

    @field_validator("note_content")
    @classmethod
    def validate_note(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Note content is required")
        return value


def _coerce_note_visibility(value: Optional[str]) -> str:
    # Player notes are never hidden
    if value == Visibility.player_visible.value:
        return value
    return Visibility.dm_only.value


class PlayerNoteCreate(BaseModel):
    note_content: str
    visibility: str = Visibility.dm_only.value

    @field_validator("note_content")
    @classmethod
    def validate_note(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Note content is required")
        return value

    @field_validator("visibility", mode="before")
    @classmethod
    def coerce_visibility(cls, value: Optional[str]) -> str:
        return _coerce_note_visibility(value)


class PlayerNoteUpdate(BaseModel):
    note_content: Optional[str] = None
    visibility: Optional[str] = None

    @field_validator("note_content")
    @classmethod
    def validate_note(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Note content is required")
        return value

    @field_validator("visibility", mode="before")
    @classmethod
    def coerce_visibility(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _coerce_note_visibility(value)


class PlayerNoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    user_id: int
    username: Optional[str] = None
    note_content: str
    visibility: Visibility
    created_at: datetime
    updated_at: datetime


class SessionRead(CampaignRecordRead, SessionFields):
    session_number: int


class SessionDetail(SessionRead):
    session_notes: List[SessionNoteRead] = Field(default_factory=list)
    player_notes: List[PlayerNoteRead] = Field(default_factory=list)
