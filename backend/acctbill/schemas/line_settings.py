from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class LineSettingsUpdate(BaseModel):
    channel_access_token: str | None = Field(default=None, max_length=512)
    channel_secret: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


class LineSettingsResponse(BaseModel):
    company_id: UUID
    has_access_token: bool
    has_channel_secret: bool
    is_active: bool
    updated_at: datetime | None = None
