from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: int
    entity_type: str
    entity_id: int
    file_path: str
    file_name: str
    file_size: int
    mime_type: str
    uploaded_by_user_id: Optional[int] = None
    uploaded_at: datetime
