"""Repository for LineMessage audit rows."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.core.sorting import apply_order_by
from acctbill.models.line_message import LineMessage, LineMessageStatus
from acctbill.models.shared import generate_uuid


class LineMessageRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        company_id: UUID,
        recipient_type: str,
        recipient_id: str,
        content: str,
        status: LineMessageStatus,
        trigger_type: str,
        recipient_name: str | None = None,
        billing_request_id: UUID | None = None,
        error_message: str | None = None,
        sent_at: datetime | None = None,
    ) -> LineMessage:
        message = LineMessage(
            id=generate_uuid(),
            company_id=company_id,
            billing_request_id=billing_request_id,
            recipient_type=recipient_type,
            recipient_id=recipient_id,
            recipient_name=recipient_name,
            content=content,
            status=status.value,
            error_message=error_message[:1000] if error_message else None,
            trigger_type=trigger_type,
            sent_at=sent_at,
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def get_by_id(self, message_id: UUID, company_id: UUID | None = None) -> LineMessage | None:
        query = self.db.query(LineMessage).filter(LineMessage.id == message_id)
        if company_id is not None:
            query = query.filter(LineMessage.company_id == company_id)
        return query.first()

    def get_all(
        self,
        company_id: UUID,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
        billing_request_id: UUID | None = None,
        order_by: str | None = None,
    ) -> list[LineMessage]:
        query = self.db.query(LineMessage).filter(LineMessage.company_id == company_id)
        if status is not None:
            query = query.filter(LineMessage.status == status)
        if billing_request_id is not None:
            query = query.filter(LineMessage.billing_request_id == billing_request_id)
        query = apply_order_by(query, LineMessage, order_by)
        return query.offset(skip).limit(limit).all()
