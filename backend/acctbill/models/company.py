from sqlalchemy import Column, DateTime, String, func

from acctbill.core.database import Base
from acctbill.models.shared import UUIDType, generate_uuid


class Company(Base):
    __tablename__ = "companies"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    tax_id = Column(String(8), nullable=True)
    timezone = Column(String(50), nullable=False, default="Asia/Taipei")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
