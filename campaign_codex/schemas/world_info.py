from typing import Optional

from pydantic import BaseModel, Field

from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.common import CampaignRecordRead, RecordTitle


class WorldInfoCreate(BaseModel):
    title: RecordTitle
    content: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    visibility: Visibility = Visibility.dm_only


class WorldInfoUpdate(BaseModel):
    title: Optional[RecordTitle] = None
    content: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    visibility: Optional[Visibility] = None


class WorldInfoRead(CampaignRecordRead):
    title: str
    content: Optional[str] = None
    category: Optional[str] = None
