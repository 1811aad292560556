from typing import Optional

from pydantic import BaseModel, Field

from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.common import CampaignRecordRead, RecordName


class FactionCreate(BaseModel):
    name: RecordName
    description: Optional[str] = None
    alignment: Optional[str] = Field(default=None, max_length=50)
    goals: Optional[str] = None
    visibility: Visibility = Visibility.dm_only


class FactionUpdate(BaseModel):
    name: Optional[RecordName] = None
    description: Optional[str] = None
    alignment: Optional[str] = Field(default=None, max_length=50)
    goals: Optional[str] = None
    visibility: Optional[Visibility] = None


class FactionRead(CampaignRecordRead):
    name: str
    description: Optional[str] = None
    alignment: Optional[str] = None
    goals: Optional[str] = None
