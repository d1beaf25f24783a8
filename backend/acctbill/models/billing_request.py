from enum import Enum

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)

from acctbill.core.database import Base
from acctbill.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class BillingStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class BillingRequest(Base):
    __tablename__ = "billing_requests"
    __table_args__ = (
        UniqueConstraint("company_id", "billing_number", name="uq_billing_requests_number"),
        # One billing request per recurring definition per scheduled run
        UniqueConstraint(
            "recurring_billing_id", "billing_period", name="uq_billing_requests_recurring_period"
        ),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    billing_number = Column(String(50), nullable=False, index=True)

    customer_id = Column(UUIDType, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_line_id = Column(String(64), nullable=True)
    customer_line_group_id = Column(String(64), nullable=True)
    customer_line_group_name = Column(String(255), nullable=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    billing_month = Column(String(7), nullable=True)

    amount = Column(Numeric(12, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    cost_amount = Column(Numeric(12, 2), nullable=True)
    cost_vendor_id = Column(UUIDType, nullable=True)
    cost_vendor_name = Column(String(255), nullable=True)
    payment_account_id = Column(
        UUIDType, ForeignKey("payment_accounts.id", ondelete="SET NULL"), nullable=True
    )

    due_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=BillingStatus.DRAFT.value, index=True)

    # Payment
    paid_at = Column(DateTime(timezone=True), nullable=True)
    paid_amount = Column(Numeric(12, 2), nullable=True)
    payment_method = Column(String(50), nullable=True)
    payment_note = Column(Text, nullable=True)
    paid_account_id = Column(
        UUIDType, ForeignKey("payment_accounts.id", ondelete="SET NULL"), nullable=True
    )
    transaction_id = Column(
        UUIDType, ForeignKey("transactions.id", ondelete="SET NULL"), nullable=True
    )

    notification_sent_at = Column(DateTime(timezone=True), nullable=True)

    recurring_billing_id = Column(
        UUIDType,
        ForeignKey("recurring_billings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    billing_period = Column(String(10), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
