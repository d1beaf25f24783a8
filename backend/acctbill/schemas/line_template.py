"""Pydantic schemas for LINE message templates."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class LineTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str | None = Field(default=None, max_length=50)
    content: str = Field(..., min_length=1)
    is_active: bool = True


class LineTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    category: str | None = Field(default=None, max_length=50)
    content: str | None = Field(default=None, min_length=1)
    is_active: bool | None = None


class LineTemplateResponse(BaseModel):
    id: UUID
    company_id: UUID
    name: str
    category: str | None
    content: str
    variables: list[str]
    is_active: bool
    usage_count: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
