"""Per-company LINE Messaging API credentials."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, func

from acctbill.core.database import Base
from acctbill.models.shared import UUIDType, generate_uuid


class LineSettings(Base):
    __tablename__ = "line_settings"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        unique=True,
    )
    channel_access_token = Column(String(512), nullable=True)
    channel_secret = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
