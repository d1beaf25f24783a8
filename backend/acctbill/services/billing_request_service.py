"""Billing request operations outside the recurring sweep."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.core.config import settings
from acctbill.models.billing_request import BillingRequest, BillingStatus
from acctbill.repositories.billing_request_repository import BillingRequestRepository
from acctbill.repositories.customer_repository import CustomerRepository
from acctbill.repositories.line_template_repository import LineTemplateRepository
from acctbill.repositories.payment_account_repository import PaymentAccountRepository
from acctbill.repositories.transaction_repository import TransactionRepository
from acctbill.schemas.billing_request import (
    BillingRequestCreate,
    BillingRequestUpdate,
    PaymentConfirmation,
)
from acctbill.services.billing_notification_service import (
    BillingNotificationService,
    DispatchResult,
    DispatchStatus,
)
from acctbill.services.recurring_schedule import business_date

logger = logging.getLogger(__name__)


class BillingRequestService:
    def __init__(self, db: Session, notifier: BillingNotificationService | None = None):
        self.db = db
        self.repo = BillingRequestRepository(db)
        self.notifier = notifier or BillingNotificationService(db)

    def _get(self, billing_request_id: UUID, company_id: UUID) -> BillingRequest:
        billing = self.repo.get_by_id(billing_request_id, company_id)
        if billing is None:
            raise LookupError(f"Billing request {billing_request_id} not found")
        return billing

    def create(self, data: BillingRequestCreate, company_id: UUID) -> BillingRequest:
        """Create an ad hoc billing request in draft status."""
        if data.customer_id is not None:
            if CustomerRepository(self.db).get_by_id(data.customer_id, company_id) is None:
                raise ValueError(f"Customer {data.customer_id} not found")
        if data.payment_account_id is not None:
            account = PaymentAccountRepository(self.db).get_by_id(
                data.payment_account_id, company_id
            )
            if account is None:
                raise ValueError(f"Payment account {data.payment_account_id} not found")
        return self.repo.create(data, company_id, datetime.now(UTC))

    def update(
        self, billing_request_id: UUID, data: BillingRequestUpdate, company_id: UUID
    ) -> BillingRequest:
        billing = self._get(billing_request_id, company_id)
        if billing.status == BillingStatus.PAID.value:
            raise ValueError("Paid billing requests cannot be modified")
        return self.repo.update(billing, data)

    def delete(self, billing_request_id: UUID, company_id: UUID) -> None:
        billing = self._get(billing_request_id, company_id)
        if billing.status != BillingStatus.DRAFT.value:
            raise ValueError("Only draft billing requests can be deleted")
        self.repo.delete(billing)

    def notify(
        self,
        billing_request_id: UUID,
        company_id: UUID,
        custom_message: str | None = None,
        template_id: UUID | None = None,
    ) -> DispatchResult:
        billing = self._get(billing_request_id, company_id)
        template = None
        if template_id is not None and not custom_message:
            template = LineTemplateRepository(self.db).get_by_id(template_id, company_id)
            if template is None:
                raise ValueError(f"LINE template {template_id} not found")

        result = self.notifier.send_billing_notice(
            billing, custom_message, str(template.content) if template is not None else None
        )
        if template is not None and result.status == DispatchStatus.SENT:
            LineTemplateRepository(self.db).increment_usage(template)
            self.db.commit()
        return result

    def confirm_payment(
        self, billing_request_id: UUID, data: PaymentConfirmation, company_id: UUID
    ) -> BillingRequest:
        """Mark a billing request paid and book the income, then thank the customer.

        The paid status, the income transaction and the link between them commit
        together. The LINE notification runs after that commit, so a failed push
        leaves the payment recorded. Confirming an already-paid request is
        rejected, which keeps a retried call from booking the income twice.
        """
        billing = self._get(billing_request_id, company_id)
        if billing.status == BillingStatus.PAID.value:
            raise ValueError("Billing request is already paid")
        if data.paid_account_id is not None:
            account = PaymentAccountRepository(self.db).get_by_id(data.paid_account_id, company_id)
            if account is None:
                raise ValueError(f"Payment account {data.paid_account_id} not found")

        paid_at = datetime.now(UTC)
        transaction = TransactionRepository(self.db).create_income(
            company_id,
            transaction_date=business_date(paid_at),
            description=f"{billing.title} - {billing.customer_name}",
            amount=data.paid_amount,
            customer_id=billing.customer_id,  # type: ignore[arg-type]
            payment_account_id=data.paid_account_id,
            category_code=settings.INCOME_CATEGORY_CODE,
            notes=data.payment_note or f"請款單收款：{billing.billing_number}",
        )
        billing = self.repo.mark_paid(
            billing,
            paid_at=paid_at,
            paid_amount=data.paid_amount,
            payment_method=data.payment_method,
            payment_note=data.payment_note,
            paid_account_id=data.paid_account_id,
            transaction_id=transaction.id,  # type: ignore[arg-type]
        )
        logger.info(
            "Billing request %s marked paid, income transaction %s",
            billing.billing_number,
            transaction.id,
        )

        if data.send_notification:
            self.notifier.send_payment_received(billing)
        return billing
