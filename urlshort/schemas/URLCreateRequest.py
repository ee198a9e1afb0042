from pydantic import BaseModel, Field
from typing import Optional


# Request DTOs
class URLCreateRequest(BaseModel):
    # original_url is the Python field, 'url' is the JSON key
    original_url: str = Field(..., alias="url")
    custom_alias: Optional[str] = None
    # One of "1 Day", "1 Month", "1 Year", "Lifetime"
    expiration: Optional[str] = None

    model_config = {"populate_by_name": True}
