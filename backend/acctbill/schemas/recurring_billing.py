from datetime import datetime
from decimal import Decimal
from typing import Self
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from acctbill.core.config import settings
from acctbill.models.recurring_billing import ScheduleType


class RecurringBillingCreate(BaseModel):
    customer_id: UUID | None = None
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_line_group_id: str | None = Field(default=None, max_length=64)
    customer_line_group_name: str | None = Field(default=None, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    tax_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    cost_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    cost_vendor_id: UUID | None = None
    cost_vendor_name: str | None = Field(default=None, max_length=255)
    payment_account_id: UUID | None = None
    schedule_type: ScheduleType
    schedule_day: int = Field(..., ge=1, le=31)
    schedule_month: int | None = Field(default=None, ge=1, le=12)
    days_before_due: int = Field(default=settings.DEFAULT_DAYS_BEFORE_DUE, ge=0, le=365)
    auto_send: bool = False
    message_template: str | None = None

    @model_validator(mode="after")
    def validate_schedule_month(self) -> Self:
        """Yearly schedules need an anchor month."""
        if self.schedule_type == ScheduleType.YEARLY and self.schedule_month is None:
            msg = "schedule_month is required for schedule_type 'yearly'"
            raise ValueError(msg)
        return self


class RecurringBillingUpdate(BaseModel):
    customer_id: UUID | None = None
    customer_name: str | None = Field(default=None, min_length=1, max_length=255)
    customer_line_group_id: str | None = Field(default=None, max_length=64)
    customer_line_group_name: str | None = Field(default=None, max_length=255)
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    tax_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    cost_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    cost_vendor_id: UUID | None = None
    cost_vendor_name: str | None = Field(default=None, max_length=255)
    payment_account_id: UUID | None = None
    schedule_type: ScheduleType | None = None
    schedule_day: int | None = Field(default=None, ge=1, le=31)
    schedule_month: int | None = Field(default=None, ge=1, le=12)
    days_before_due: int | None = Field(default=None, ge=0, le=365)
    auto_send: bool | None = None
    message_template: str | None = None
    is_active: bool | None = None


class RecurringBillingResponse(BaseModel):
    id: UUID
    company_id: UUID
    customer_id: UUID | None
    customer_name: str
    customer_line_group_id: str | None
    customer_line_group_name: str | None
    title: str
    description: str | None
    amount: Decimal
    tax_amount: Decimal
    cost_amount: Decimal | None
    cost_vendor_id: UUID | None
    cost_vendor_name: str | None
    payment_account_id: UUID | None
    schedule_type: str
    schedule_day: int
    schedule_month: int | None
    days_before_due: int
    auto_send: bool
    message_template: str | None
    next_run_at: datetime
    last_run_at: datetime | None
    run_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
