from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campaign_codex.models.campaign import ParticipantRole


class CampaignBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Campaign name is required")
        return value


class CampaignCreate(CampaignBase):
    pass


class CampaignUpdate(CampaignBase):
    pass


class CampaignRead(CampaignBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime


class CampaignWithRole(CampaignRead):
    user_role: ParticipantRole
    is_owner: bool


class ParticipantInvite(BaseModel):
    email: str = Field(..., min_length=1)
    role: ParticipantRole = ParticipantRole.player


class ParticipantRoleUpdate(BaseModel):
    role: ParticipantRole


class ParticipantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    user_id: int
    role: ParticipantRole
    invited_by: Optional[int] = None
    joined_at: datetime
    username: str
    email: str
    is_owner: bool


class MyRoleRead(BaseModel):
    """Role summary in the camelCase shape the client consumes."""

    hasAccess: bool
    role: ParticipantRole
    isDM: bool
    isPlayer: bool
