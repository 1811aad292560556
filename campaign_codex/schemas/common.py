from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from campaign_codex.models.visibility import Visibility
from campaign_codex.schemas.tag import TagSummary


def _required_text(message: str):
    def validate(value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError(message)
        return value

    return AfterValidator(validate)


RecordName = Annotated[str, Field(max_length=255), _required_text("Name is required")]
RecordTitle = Annotated[str, Field(max_length=255), _required_text("Title is required")]


class CampaignRecordRead(BaseModel):
    """Fields every campaign record exposes."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    visibility: Visibility
    created_by_user_id: Optional[int] = None
    created_by_username: Optional[str] = None
    last_updated_by_user_id: Optional[int] = None
    last_updated_by_username: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    tags: List[TagSummary] = Field(default_factory=list)
