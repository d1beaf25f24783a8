from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.core.sorting import apply_order_by
from acctbill.models.recurring_billing import RecurringBilling
from acctbill.schemas.recurring_billing import RecurringBillingCreate


class RecurringBillingRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        company_id: UUID,
        skip: int = 0,
        limit: int = 100,
        is_active: bool | None = None,
        customer_id: UUID | None = None,
        order_by: str | None = None,
    ) -> list[RecurringBilling]:
        query = self.db.query(RecurringBilling).filter(RecurringBilling.company_id == company_id)
        if is_active is not None:
            query = query.filter(RecurringBilling.is_active == is_active)
        if customer_id is not None:
            query = query.filter(RecurringBilling.customer_id == customer_id)
        query = apply_order_by(query, RecurringBilling, order_by)
        return query.offset(skip).limit(limit).all()

    def count(self, company_id: UUID) -> int:
        return (
            self.db.query(RecurringBilling)
            .filter(RecurringBilling.company_id == company_id)
            .count()
        )

    def get_by_id(
        self, recurring_billing_id: UUID, company_id: UUID | None = None
    ) -> RecurringBilling | None:
        query = self.db.query(RecurringBilling).filter(RecurringBilling.id == recurring_billing_id)
        if company_id is not None:
            query = query.filter(RecurringBilling.company_id == company_id)
        return query.first()

    def get_due(self, now: datetime) -> list[RecurringBilling]:
        """Active definitions whose next run has elapsed, across all companies."""
        return (
            self.db.query(RecurringBilling)
            .filter(
                RecurringBilling.is_active == True,  # noqa: E712
                RecurringBilling.next_run_at <= now,
            )
            .order_by(RecurringBilling.next_run_at.asc())
            .all()
        )

    def create(
        self, data: RecurringBillingCreate, company_id: UUID, next_run_at: datetime
    ) -> RecurringBilling:
        values = data.model_dump()
        values["schedule_type"] = data.schedule_type.value
        recurring = RecurringBilling(**values, company_id=company_id, next_run_at=next_run_at)
        self.db.add(recurring)
        self.db.commit()
        self.db.refresh(recurring)
        return recurring

    def update(self, recurring: RecurringBilling, values: dict[str, Any]) -> RecurringBilling:
        for key, value in values.items():
            setattr(recurring, key, value)
        self.db.commit()
        self.db.refresh(recurring)
        return recurring

    def deactivate(self, recurring_billing_id: UUID, company_id: UUID) -> bool:
        recurring = self.get_by_id(recurring_billing_id, company_id)
        if not recurring:
            return False
        recurring.is_active = False  # type: ignore[assignment]
        self.db.commit()
        return True

    def advance(
        self,
        recurring_billing_id: UUID,
        scheduled_run_at: datetime,
        next_run_at: datetime,
        run_at: datetime,
    ) -> bool:
        """Claim a firing by moving next_run_at forward if it still equals scheduled_run_at.

        Does not commit. Returns False unless the definition is still active and
        still due at scheduled_run_at.
        """
        count = (
            self.db.query(RecurringBilling)
            .filter(
                RecurringBilling.id == recurring_billing_id,
                RecurringBilling.is_active == True,  # noqa: E712
                RecurringBilling.next_run_at == scheduled_run_at,
                RecurringBilling.next_run_at <= run_at,
            )
            .update(
                {
                    "next_run_at": next_run_at,
                    "last_run_at": run_at,
                    "run_count": RecurringBilling.run_count + 1,
                    "updated_at": run_at,
                },
                synchronize_session=False,
            )
        )
        return count == 1
