from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class TagBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(default="#6366F1", pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tag name is required")
        return v


class TagCreate(TagBase):
    is_premade: bool = False


class TagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    is_premade: Optional[bool] = None

    @field_validator("name")
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Tag name cannot be empty")
        return v


class TagSummary(BaseModel):
    """Lightweight tag representation for embedding in other schemas."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str


class TagRead(TagBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    is_premade: bool
    created_at: datetime
    updated_at: datetime


class TagWithUsage(TagRead):
    usage_count: int = 0


class EntityTagSetRequest(BaseModel):
    """Request body for replacing the tags of an entity."""
    model_config = ConfigDict(populate_by_name=True)

    tag_ids: List[int] = Field(default_factory=list, alias="tagIds")
