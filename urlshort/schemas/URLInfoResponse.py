from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


# Response DTOs
class URLInfoResponse(BaseModel):
    # original_url is the Python field, 'url' is the JSON key
    original_url: str = Field(..., alias="url")
    token: str
    short_url: str
    custom_alias: Optional[str] = None
    created_at: datetime
    last_accessed_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    expired: bool = False
    access_count: int = 0

    model_config = {"from_attributes": True, "populate_by_name": True}
