"""Income and expense entries in the cash book."""

from enum import Enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, func

from acctbill.core.database import Base
from acctbill.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    transaction_date = Column(Date, nullable=False, index=True)
    transaction_type = Column(String(20), nullable=False)
    description = Column(String(500), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    customer_id = Column(UUIDType, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    payment_account_id = Column(
        UUIDType, ForeignKey("payment_accounts.id", ondelete="SET NULL"), nullable=True
    )
    # Chart-of-accounts code, e.g. 4100 for service revenue
    category_code = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
