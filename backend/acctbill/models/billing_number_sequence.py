"""Per-company monthly counter backing billing numbers."""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from acctbill.core.database import Base
from acctbill.models.shared import UUIDType, generate_uuid


class BillingNumberSequence(Base):
    __tablename__ = "billing_number_sequences"
    __table_args__ = (
        UniqueConstraint("company_id", "period", name="uq_billing_number_sequences_period"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType, ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False
    )
    period = Column(String(6), nullable=False)
    last_value = Column(Integer, nullable=False, default=0)
