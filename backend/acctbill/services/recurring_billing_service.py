"""Creation and editing of recurring billing definitions."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.models.recurring_billing import RecurringBilling, ScheduleType
from acctbill.repositories.customer_repository import CustomerRepository
from acctbill.repositories.payment_account_repository import PaymentAccountRepository
from acctbill.repositories.recurring_billing_repository import RecurringBillingRepository
from acctbill.schemas.recurring_billing import RecurringBillingCreate, RecurringBillingUpdate
from acctbill.services.recurring_schedule import compute_next_run

SCHEDULE_FIELDS = ("schedule_type", "schedule_day", "schedule_month")
NON_NULLABLE_FIELDS = (
    "customer_name",
    "title",
    "amount",
    "tax_amount",
    "schedule_type",
    "schedule_day",
    "days_before_due",
    "auto_send",
    "is_active",
)


class RecurringBillingService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = RecurringBillingRepository(db)

    def _validate_references(
        self,
        company_id: UUID,
        customer_id: UUID | None,
        payment_account_id: UUID | None,
    ) -> None:
        """Referenced customer and payment account must belong to the same company."""
        if customer_id is not None:
            customer = CustomerRepository(self.db).get_by_id(customer_id, company_id)
            if customer is None:
                raise ValueError(f"Customer {customer_id} not found")
        if payment_account_id is not None:
            account = PaymentAccountRepository(self.db).get_by_id(payment_account_id, company_id)
            if account is None or not account.is_active:
                raise ValueError(f"Payment account {payment_account_id} not found")

    def create(
        self,
        data: RecurringBillingCreate,
        company_id: UUID,
        now: datetime | None = None,
    ) -> RecurringBilling:
        """Create a definition with its first next_run_at computed from now.

        Raises:
            ValueError: If a referenced customer or payment account is not found.
        """
        self._validate_references(company_id, data.customer_id, data.payment_account_id)
        next_run_at = compute_next_run(
            data.schedule_type.value,
            data.schedule_day,
            data.schedule_month,
            reference=now or datetime.now(UTC),
        )
        return self.repo.create(data, company_id, next_run_at)

    def update(
        self,
        recurring_billing_id: UUID,
        data: RecurringBillingUpdate,
        company_id: UUID,
        now: datetime | None = None,
    ) -> RecurringBilling:
        """Apply a partial update, recomputing next_run_at when the schedule changes.

        Raises:
            LookupError: If the definition is not found.
            ValueError: If a referenced entity is not found or the merged
                schedule is invalid.
        """
        recurring = self.repo.get_by_id(recurring_billing_id, company_id)
        if recurring is None:
            raise LookupError(f"Recurring billing {recurring_billing_id} not found")

        updates: dict[str, Any] = data.model_dump(exclude_unset=True)
        if isinstance(updates.get("schedule_type"), ScheduleType):
            updates["schedule_type"] = updates["schedule_type"].value
        for field in NON_NULLABLE_FIELDS:
            if field in updates and updates[field] is None:
                raise ValueError(f"{field} cannot be null")

        self._validate_references(
            company_id,
            updates.get("customer_id"),
            updates.get("payment_account_id"),
        )

        schedule_type = updates.get("schedule_type", recurring.schedule_type)
        schedule_day = updates.get("schedule_day", recurring.schedule_day)
        schedule_month = updates.get("schedule_month", recurring.schedule_month)
        if schedule_type == ScheduleType.YEARLY.value and schedule_month is None:
            raise ValueError("schedule_month is required for schedule_type 'yearly'")

        schedule_changed = any(
            field in updates and updates[field] != getattr(recurring, field)
            for field in SCHEDULE_FIELDS
        )
        reactivated = updates.get("is_active") is True and not recurring.is_active
        if schedule_changed or reactivated:
            updates["next_run_at"] = compute_next_run(
                str(schedule_type),
                int(schedule_day),
                schedule_month,
                reference=now or datetime.now(UTC),
            )

        return self.repo.update(recurring, updates)

    def deactivate(self, recurring_billing_id: UUID, company_id: UUID) -> bool:
        return self.repo.deactivate(recurring_billing_id, company_id)
