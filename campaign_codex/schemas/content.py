from typing import Any, Optional

from pydantic import BaseModel

from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.common import CampaignRecordRead, RecordTitle


class ContentItemCreate(BaseModel):
    title: RecordTitle
    content_data: Optional[Any] = None
    visibility: Visibility = Visibility.dm_only


class ContentItemUpdate(BaseModel):
    title: Optional[RecordTitle] = None
    content_data: Optional[Any] = None
    visibility: Optional[Visibility] = None


class ContentItemRead(CampaignRecordRead):
    category: str
    title: str
    content_data: Optional[Any] = None
