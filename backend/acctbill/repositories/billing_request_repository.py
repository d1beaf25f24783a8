from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from acctbill.core.config import settings
from acctbill.core.sorting import apply_order_by
from acctbill.models.billing_number_sequence import BillingNumberSequence
from acctbill.models.billing_request import BillingRequest, BillingStatus
from acctbill.models.recurring_billing import RecurringBilling
from acctbill.schemas.billing_request import BillingRequestCreate, BillingRequestUpdate
from acctbill.services.recurring_schedule import business_date


class BillingRequestRepository:
    def __init__(self, db: Session):
        self.db = db

    def _next_sequence_value(self, company_id: UUID, period: str) -> int:
        """Increment the company's counter for a period within the current transaction."""
        stmt = (
            update(BillingNumberSequence)
            .where(
                BillingNumberSequence.company_id == company_id,
                BillingNumberSequence.period == period,
            )
            .values(last_value=BillingNumberSequence.last_value + 1)
        )
        result = self.db.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            self.db.add(BillingNumberSequence(company_id=company_id, period=period, last_value=1))
            self.db.flush()
            return 1
        return int(
            self.db.execute(
                select(BillingNumberSequence.last_value).where(
                    BillingNumberSequence.company_id == company_id,
                    BillingNumberSequence.period == period,
                )
            ).scalar_one()
        )

    def generate_billing_number(self, company_id: UUID, at: datetime) -> str:
        """Generate a billing number in PREFIX-YYYYMM-NNNN format."""
        period = business_date(at).strftime("%Y%m")
        value = self._next_sequence_value(company_id, period)
        return f"{settings.BILLING_NUMBER_PREFIX}-{period}-{value:04d}"

    def get_all(
        self,
        company_id: UUID,
        skip: int = 0,
        limit: int = 100,
        status: BillingStatus | None = None,
        customer_id: UUID | None = None,
        recurring_billing_id: UUID | None = None,
        order_by: str | None = None,
    ) -> list[BillingRequest]:
        query = self.db.query(BillingRequest).filter(BillingRequest.company_id == company_id)
        if status:
            query = query.filter(BillingRequest.status == status.value)
        if customer_id:
            query = query.filter(BillingRequest.customer_id == customer_id)
        if recurring_billing_id:
            query = query.filter(BillingRequest.recurring_billing_id == recurring_billing_id)
        query = apply_order_by(query, BillingRequest, order_by)
        return query.offset(skip).limit(limit).all()

    def count(self, company_id: UUID) -> int:
        return (
            self.db.query(BillingRequest).filter(BillingRequest.company_id == company_id).count()
        )

    def get_by_id(
        self, billing_request_id: UUID, company_id: UUID | None = None
    ) -> BillingRequest | None:
        query = self.db.query(BillingRequest).filter(BillingRequest.id == billing_request_id)
        if company_id is not None:
            query = query.filter(BillingRequest.company_id == company_id)
        return query.first()

    def get_last_cost(self, company_id: UUID, customer_id: UUID) -> BillingRequest | None:
        """Most recent billing request for the customer that names a cost vendor."""
        return (
            self.db.query(BillingRequest)
            .filter(
                BillingRequest.company_id == company_id,
                BillingRequest.customer_id == customer_id,
                BillingRequest.cost_vendor_name.isnot(None),
            )
            .order_by(BillingRequest.created_at.desc(), BillingRequest.billing_number.desc())
            .first()
        )

    def get_by_recurring_period(
        self, recurring_billing_id: UUID, billing_period: str
    ) -> BillingRequest | None:
        return (
            self.db.query(BillingRequest)
            .filter(
                BillingRequest.recurring_billing_id == recurring_billing_id,
                BillingRequest.billing_period == billing_period,
            )
            .first()
        )

    def create(self, data: BillingRequestCreate, company_id: UUID, now: datetime) -> BillingRequest:
        values = data.model_dump()
        billing = BillingRequest(
            **values,
            company_id=company_id,
            billing_number=self.generate_billing_number(company_id, now),
            total_amount=data.amount + data.tax_amount,
            status=BillingStatus.DRAFT.value,
        )
        self.db.add(billing)
        self.db.commit()
        self.db.refresh(billing)
        return billing

    def create_from_recurring(
        self,
        recurring: RecurringBilling,
        *,
        billing_number: str,
        billing_month: str,
        billing_period: str,
        due_date: date,
        status: BillingStatus,
    ) -> BillingRequest:
        """Add a billing request copied from a recurring definition. Flushes, does not commit."""
        amount = Decimal(recurring.amount or 0)
        tax_amount = Decimal(recurring.tax_amount or 0)
        billing = BillingRequest(
            company_id=recurring.company_id,
            billing_number=billing_number,
            customer_id=recurring.customer_id,
            customer_name=recurring.customer_name,
            customer_line_group_id=recurring.customer_line_group_id,
            customer_line_group_name=recurring.customer_line_group_name,
            title=recurring.title,
            description=recurring.description,
            billing_month=billing_month,
            amount=amount,
            tax_amount=tax_amount,
            total_amount=amount + tax_amount,
            cost_amount=recurring.cost_amount,
            cost_vendor_id=recurring.cost_vendor_id,
            cost_vendor_name=recurring.cost_vendor_name,
            payment_account_id=recurring.payment_account_id,
            due_date=due_date,
            status=status.value,
            recurring_billing_id=recurring.id,
            billing_period=billing_period,
        )
        self.db.add(billing)
        self.db.flush()
        return billing

    def update(
        self, billing: BillingRequest, data: BillingRequestUpdate
    ) -> BillingRequest:
        updates: dict[str, Any] = data.model_dump(exclude_unset=True)
        for key, value in updates.items():
            setattr(billing, key, value)
        if "amount" in updates or "tax_amount" in updates:
            billing.total_amount = Decimal(billing.amount) + Decimal(billing.tax_amount)  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(billing)
        return billing

    def delete(self, billing: BillingRequest) -> None:
        self.db.delete(billing)
        self.db.commit()

    def mark_sent(self, billing: BillingRequest, sent_at: datetime) -> BillingRequest:
        if billing.status == BillingStatus.DRAFT.value:
            billing.status = BillingStatus.SENT.value  # type: ignore[assignment]
        billing.notification_sent_at = sent_at  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(billing)
        return billing

    def mark_paid(
        self,
        billing: BillingRequest,
        *,
        paid_at: datetime,
        paid_amount: Decimal,
        payment_method: str | None = None,
        payment_note: str | None = None,
        paid_account_id: UUID | None = None,
        transaction_id: UUID | None = None,
    ) -> BillingRequest:
        billing.status = BillingStatus.PAID.value  # type: ignore[assignment]
        billing.paid_at = paid_at  # type: ignore[assignment]
        billing.paid_amount = paid_amount  # type: ignore[assignment]
        billing.payment_method = payment_method  # type: ignore[assignment]
        billing.payment_note = payment_note  # type: ignore[assignment]
        billing.paid_account_id = paid_account_id  # type: ignore[assignment]
        billing.transaction_id = transaction_id  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(billing)
        return billing
