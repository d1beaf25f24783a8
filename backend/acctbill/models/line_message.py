"""LINE message model - audit trail of every push attempt."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func

from acctbill.core.database import Base
from acctbill.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class LineMessageStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


class RecipientType(str, Enum):
    GROUP = "group"
    USER = "user"


class TriggerType(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


class LineMessage(Base):
    """One row per attempted push; never updated after insert."""

    __tablename__ = "line_messages"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    billing_request_id = Column(
        UUIDType,
        ForeignKey("billing_requests.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    recipient_type = Column(String(20), nullable=False)
    recipient_id = Column(String(64), nullable=False)
    recipient_name = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, index=True)
    error_message = Column(String(1000), nullable=True)
    trigger_type = Column(String(20), nullable=False, default=TriggerType.AUTO.value)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
