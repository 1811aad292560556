from typing import Optional

from pydantic import BaseModel, Field

from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.common import CampaignRecordRead, RecordName


class LocationCreate(BaseModel):
    name: RecordName
    description: Optional[str] = None
    location_type: Optional[str] = Field(default=None, max_length=100)
    parent_location_id: Optional[int] = None
    visibility: Visibility = Visibility.dm_only


class LocationUpdate(BaseModel):
    name: Optional[RecordName] = None
    description: Optional[str] = None
    location_type: Optional[str] = Field(default=None, max_length=100)
    parent_location_id: Optional[int] = None
    visibility: Optional[Visibility] = None


class LocationRead(CampaignRecordRead):
    name: str
    description: Optional[str] = None
    location_type: Optional[str] = None
    parent_location_id: Optional[int] = None
    parent_location_name: Optional[str] = None
