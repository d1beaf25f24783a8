from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class BillingRequestCreate(BaseModel):
    customer_id: UUID | None = None
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: str | None = Field(default=None, max_length=255)
    customer_line_id: str | None = Field(default=None, max_length=64)
    customer_line_group_id: str | None = Field(default=None, max_length=64)
    customer_line_group_name: str | None = Field(default=None, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    billing_month: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    tax_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    cost_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    cost_vendor_id: UUID | None = None
    cost_vendor_name: str | None = Field(default=None, max_length=255)
    payment_account_id: UUID | None = None
    due_date: date


class BillingRequestUpdate(BaseModel):
    customer_name: str | None = Field(default=None, min_length=1, max_length=255)
    customer_email: str | None = Field(default=None, max_length=255)
    customer_line_id: str | None = Field(default=None, max_length=64)
    customer_line_group_id: str | None = Field(default=None, max_length=64)
    customer_line_group_name: str | None = Field(default=None, max_length=255)
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    billing_month: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    amount: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    tax_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    cost_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    payment_account_id: UUID | None = None
    due_date: date | None = None


class BillingNotifyRequest(BaseModel):
    custom_message: str | None = Field(default=None, min_length=1)
    template_id: UUID | None = None


class PaymentConfirmation(BaseModel):
    paid_amount: Decimal = Field(..., gt=0, decimal_places=2)
    payment_method: str | None = Field(default=None, max_length=50)
    payment_note: str | None = None
    paid_account_id: UUID | None = None
    send_notification: bool = True


class BillingRequestResponse(BaseModel):
    id: UUID
    company_id: UUID
    billing_number: str
    customer_id: UUID | None
    customer_name: str
    customer_email: str | None
    customer_line_id: str | None
    customer_line_group_id: str | None
    customer_line_group_name: str | None
    title: str
    description: str | None
    billing_month: str | None
    amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    cost_amount: Decimal | None
    cost_vendor_id: UUID | None
    cost_vendor_name: str | None
    payment_account_id: UUID | None
    due_date: date
    status: str
    paid_at: datetime | None
    paid_amount: Decimal | None
    payment_method: str | None
    payment_note: str | None
    paid_account_id: UUID | None
    transaction_id: UUID | None
    notification_sent_at: datetime | None
    recurring_billing_id: UUID | None
    billing_period: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BillingNotifyResponse(BaseModel):
    status: str
    line_message_id: UUID | None = None
    error: str | None = None


class LastCostResponse(BaseModel):
    cost_vendor_id: UUID | None
    cost_vendor_name: str | None
    cost_amount: Decimal | None

    model_config = {"from_attributes": True}
