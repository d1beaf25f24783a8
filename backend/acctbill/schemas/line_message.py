"""Pydantic schemas for LINE messages."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class LineMessageResponse(BaseModel):
    id: UUID
    company_id: UUID
    billing_request_id: UUID | None
    recipient_type: str
    recipient_id: str
    recipient_name: str | None
    content: str
    status: str
    error_message: str | None
    trigger_type: str
    sent_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}
