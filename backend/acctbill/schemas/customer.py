from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    tax_id: str | None = Field(default=None, pattern=r"^\d{8}$")
    line_user_id: str | None = Field(default=None, max_length=64)
    line_group_id: str | None = Field(default=None, max_length=64)
    line_group_name: str | None = Field(default=None, max_length=255)


class CustomerUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    tax_id: str | None = Field(default=None, pattern=r"^\d{8}$")
    line_user_id: str | None = Field(default=None, max_length=64)
    line_group_id: str | None = Field(default=None, max_length=64)
    line_group_name: str | None = Field(default=None, max_length=255)


class CustomerResponse(BaseModel):
    id: UUID
    company_id: UUID
    name: str
    email: str | None
    tax_id: str | None
    line_user_id: str | None
    line_group_id: str | None
    line_group_name: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
