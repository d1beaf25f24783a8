from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)

from acctbill.core.database import Base
from acctbill.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class ScheduleType(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class RecurringBilling(Base):
    __tablename__ = "recurring_billings"
    __table_args__ = (Index("ix_recurring_billings_active_next_run", "is_active", "next_run_at"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )

    # Party
    customer_id = Column(UUIDType, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    customer_name = Column(String(255), nullable=False)
    customer_line_group_id = Column(String(64), nullable=True)
    customer_line_group_name = Column(String(255), nullable=True)

    # Commercial terms
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    cost_amount = Column(Numeric(12, 2), nullable=True)
    cost_vendor_id = Column(UUIDType, nullable=True)
    cost_vendor_name = Column(String(255), nullable=True)
    payment_account_id = Column(
        UUIDType, ForeignKey("payment_accounts.id", ondelete="SET NULL"), nullable=True
    )

    # Cadence
    schedule_type = Column(String(20), nullable=False, default=ScheduleType.MONTHLY.value)
    schedule_day = Column(Integer, nullable=False, default=1)
    schedule_month = Column(Integer, nullable=True)
    days_before_due = Column(Integer, nullable=False, default=14)

    # Automation
    auto_send = Column(Boolean, nullable=False, default=False)
    message_template = Column(Text, nullable=True)

    # Execution state
    next_run_at = Column(DateTime(timezone=True), nullable=False)
    last_run_at = Column(DateTime(timezone=True), nullable=True)
    run_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
