"""LINE notifications for billing requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.models.billing_request import BillingRequest
from acctbill.models.line_message import (
    LineMessage,
    LineMessageStatus,
    RecipientType,
    TriggerType,
)
from acctbill.models.recurring_billing import RecurringBilling
from acctbill.repositories.billing_request_repository import BillingRequestRepository
from acctbill.repositories.line_message_repository import LineMessageRepository
from acctbill.repositories.line_settings_repository import LineSettingsRepository
from acctbill.repositories.payment_account_repository import PaymentAccountRepository
from acctbill.repositories.recurring_billing_repository import RecurringBillingRepository
from acctbill.services.line_client import LineMessagingClient
from acctbill.services.message_template import (
    DEFAULT_BILLING_TEMPLATE,
    PAYMENT_RECEIVED_TEMPLATE,
    format_account_info,
    format_amount,
    format_date,
    render_template,
)
from acctbill.services.recurring_schedule import business_date

logger = logging.getLogger(__name__)


class DispatchStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class DispatchResult:
    status: DispatchStatus
    line_message: LineMessage | None = None
    reason: str | None = None

    @property
    def line_message_id(self) -> UUID | None:
        return self.line_message.id if self.line_message is not None else None  # type: ignore[return-value]


class BillingNotificationService:
    """Renders billing messages and pushes them through LINE.

    Every push attempt is recorded as a LineMessage row, whether it succeeded
    or failed. Skipped dispatches write nothing.
    """

    def __init__(self, db: Session, client: LineMessagingClient | None = None):
        self.db = db
        self.client = client or LineMessagingClient()
        self.billing_repo = BillingRequestRepository(db)
        self.message_repo = LineMessageRepository(db)
        self.settings_repo = LineSettingsRepository(db)
        self.account_repo = PaymentAccountRepository(db)

    def build_variables(self, billing: BillingRequest) -> dict[str, str]:
        account = None
        if billing.payment_account_id is not None:
            account = self.account_repo.get_by_id(
                billing.payment_account_id,  # type: ignore[arg-type]
                billing.company_id,  # type: ignore[arg-type]
            )
        return {
            "customer_name": str(billing.customer_name or ""),
            "title": str(billing.title or ""),
            "amount": format_amount(billing.total_amount),
            "due_date": format_date(billing.due_date),  # type: ignore[arg-type]
            "account_info": format_account_info(account),
            "billing_number": str(billing.billing_number or ""),
            "billing_month": str(billing.billing_month or ""),
        }

    def dispatch(self, billing: BillingRequest, recurring: RecurringBilling) -> DispatchResult:
        """Send the automatic notification for a billing request created by the sweep."""
        if not recurring.auto_send:
            return DispatchResult(DispatchStatus.SKIPPED, reason="auto_send disabled")
        if not recurring.customer_line_group_id:
            return DispatchResult(DispatchStatus.SKIPPED, reason="no LINE group configured")
        if not recurring.message_template:
            return DispatchResult(DispatchStatus.SKIPPED, reason="no message template")

        access_token = self.settings_repo.get_active_access_token(
            recurring.company_id  # type: ignore[arg-type]
        )
        if not access_token:
            return DispatchResult(DispatchStatus.SKIPPED, reason="LINE not configured")

        content = render_template(str(recurring.message_template), self.build_variables(billing))
        return self._push(
            billing,
            access_token=access_token,
            recipient_type=RecipientType.GROUP,
            recipient_id=str(recurring.customer_line_group_id),
            recipient_name=str(recurring.customer_line_group_name or recurring.customer_name),
            content=content,
            trigger_type=TriggerType.AUTO,
            mark_sent=True,
        )

    def send_billing_notice(
        self,
        billing: BillingRequest,
        custom_message: str | None = None,
        template: str | None = None,
    ) -> DispatchResult:
        """Manually send a billing notice.

        The message is the custom text when given, otherwise the rendered
        ``template``, the definition's template or the default notice, in that order.

        Raises:
            ValueError: If the billing request has no LINE recipient or the
                company has no active LINE credentials.
        """
        recipient_type, recipient_id, recipient_name = self._recipient(billing)
        if recipient_id is None:
            raise ValueError("Billing request has no LINE group or user id")

        access_token = self.settings_repo.get_active_access_token(
            billing.company_id  # type: ignore[arg-type]
        )
        if not access_token:
            raise ValueError("LINE messaging is not configured")

        if custom_message:
            content = custom_message
        else:
            template = template or self._recurring_template(billing) or DEFAULT_BILLING_TEMPLATE
            content = render_template(template, self.build_variables(billing))

        return self._push(
            billing,
            access_token=access_token,
            recipient_type=recipient_type,
            recipient_id=recipient_id,
            recipient_name=recipient_name,
            content=content,
            trigger_type=TriggerType.MANUAL,
            mark_sent=True,
        )

    def send_payment_received(self, billing: BillingRequest) -> DispatchResult:
        """Thank the customer for a confirmed payment. Best effort."""
        recipient_type, recipient_id, recipient_name = self._recipient(billing)
        if recipient_id is None:
            return DispatchResult(DispatchStatus.SKIPPED, reason="no LINE recipient")

        access_token = self.settings_repo.get_active_access_token(
            billing.company_id  # type: ignore[arg-type]
        )
        if not access_token:
            return DispatchResult(DispatchStatus.SKIPPED, reason="LINE not configured")

        variables = self.build_variables(billing)
        variables["amount"] = format_amount(billing.paid_amount)
        paid_at = billing.paid_at or datetime.now(UTC)
        variables["paid_date"] = format_date(business_date(paid_at))
        content = render_template(PAYMENT_RECEIVED_TEMPLATE, variables)

        return self._push(
            billing,
            access_token=access_token,
            recipient_type=recipient_type,
            recipient_id=recipient_id,
            recipient_name=recipient_name,
            content=content,
            trigger_type=TriggerType.AUTO,
            mark_sent=False,
        )

    def _recipient(self, billing: BillingRequest) -> tuple[RecipientType, str | None, str]:
        """Prefer the customer's LINE group, fall back to the personal LINE id."""
        if billing.customer_line_group_id:
            return (
                RecipientType.GROUP,
                str(billing.customer_line_group_id),
                str(billing.customer_line_group_name or billing.customer_name),
            )
        if billing.customer_line_id:
            return RecipientType.USER, str(billing.customer_line_id), str(billing.customer_name)
        return RecipientType.USER, None, str(billing.customer_name)

    def _recurring_template(self, billing: BillingRequest) -> str | None:
        if billing.recurring_billing_id is None:
            return None
        recurring = RecurringBillingRepository(self.db).get_by_id(
            billing.recurring_billing_id,  # type: ignore[arg-type]
            billing.company_id,  # type: ignore[arg-type]
        )
        if recurring is None or not recurring.message_template:
            return None
        return str(recurring.message_template)

    def _push(
        self,
        billing: BillingRequest,
        *,
        access_token: str,
        recipient_type: RecipientType,
        recipient_id: str,
        recipient_name: str,
        content: str,
        trigger_type: TriggerType,
        mark_sent: bool,
    ) -> DispatchResult:
        result = self.client.push_text(access_token, recipient_id, content)
        now = datetime.now(UTC)

        message = self.message_repo.create(
            company_id=billing.company_id,  # type: ignore[arg-type]
            billing_request_id=billing.id,  # type: ignore[arg-type]
            recipient_type=recipient_type.value,
            recipient_id=recipient_id,
            recipient_name=recipient_name,
            content=content,
            status=LineMessageStatus.SENT if result.success else LineMessageStatus.FAILED,
            trigger_type=trigger_type.value,
            error_message=result.error,
            sent_at=now if result.success else None,
        )

        if not result.success:
            logger.warning(
                "LINE notification failed for billing request %s (company %s): %s",
                billing.id,
                billing.company_id,
                result.error,
            )
            return DispatchResult(DispatchStatus.FAILED, line_message=message, reason=result.error)

        if mark_sent:
            self.billing_repo.mark_sent(billing, now)
        logger.info(
            "LINE notification sent for billing request %s to %s", billing.billing_number, recipient_name
        )
        return DispatchResult(DispatchStatus.SENT, line_message=message)
