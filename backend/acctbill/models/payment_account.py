"""Receiving bank accounts shown on billing notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, func

from acctbill.core.database import Base
from acctbill.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class PaymentAccount(Base):
    __tablename__ = "payment_accounts"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    bank_code = Column(String(10), nullable=False)
    bank_name = Column(String(255), nullable=False)
    branch_name = Column(String(255), nullable=True)
    account_number = Column(String(50), nullable=False)
    account_name = Column(String(255), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
