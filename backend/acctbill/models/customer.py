from sqlalchemy import Column, DateTime, ForeignKey, String, func

from acctbill.core.database import Base
from acctbill.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class Customer(Base):
    __tablename__ = "customers"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    tax_id = Column(String(8), nullable=True)
    line_user_id = Column(String(64), nullable=True)
    line_group_id = Column(String(64), nullable=True)
    line_group_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
