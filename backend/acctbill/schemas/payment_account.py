from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class PaymentAccountCreate(BaseModel):
    bank_code: str = Field(..., min_length=3, max_length=10)
    bank_name: str = Field(..., min_length=1, max_length=255)
    branch_name: str | None = Field(default=None, max_length=255)
    account_number: str = Field(..., min_length=1, max_length=50)
    account_name: str = Field(..., min_length=1, max_length=255)
    is_default: bool = False


class PaymentAccountUpdate(BaseModel):
    bank_code: str | None = Field(default=None, min_length=3, max_length=10)
    bank_name: str | None = Field(default=None, min_length=1, max_length=255)
    branch_name: str | None = Field(default=None, max_length=255)
    account_number: str | None = Field(default=None, min_length=1, max_length=50)
    account_name: str | None = Field(default=None, min_length=1, max_length=255)
    is_default: bool | None = None


class PaymentAccountResponse(BaseModel):
    id: UUID
    company_id: UUID
    bank_code: str
    bank_name: str
    branch_name: str | None
    account_number: str
    account_name: str
    is_default: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
