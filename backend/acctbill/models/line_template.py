"""Reusable LINE message templates."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func

from acctbill.core.database import Base
from acctbill.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class LineTemplate(Base):
    __tablename__ = "line_templates"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=True)
    content = Column(Text, nullable=False)
    # Placeholder names found in content, kept in sync on every content change
    variables = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    usage_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
