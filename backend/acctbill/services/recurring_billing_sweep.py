"""Cron sweep that turns due recurring billing definitions into billing requests.

For each due definition the sweep runs three steps:

1. materialize: insert a billing request for the scheduled run (flushed, not committed)
2. advance: compare-and-swap ``next_run_at`` forward, bump ``run_count`` and
   stamp ``last_run_at``; both writes commit together
3. dispatch: best-effort LINE notification after the commit

A definition that fails in steps 1-2 is rolled back and stays due for the next
sweep. Notification failures never undo steps 1-2.
"""

import logging
import time
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from acctbill.core.config import settings
from acctbill.models.billing_request import BillingRequest, BillingStatus
from acctbill.models.recurring_billing import RecurringBilling
from acctbill.models.shared import ensure_utc
from acctbill.repositories.billing_request_repository import BillingRequestRepository
from acctbill.repositories.recurring_billing_repository import RecurringBillingRepository
from acctbill.schemas.sweep import SweepSummary
from acctbill.services.billing_notification_service import (
    BillingNotificationService,
    DispatchResult,
    DispatchStatus,
)
from acctbill.services.recurring_schedule import (
    billing_month,
    business_date,
    compute_due_date,
    compute_next_run,
)

logger = logging.getLogger(__name__)


class AlreadyProcessedError(Exception):
    """The scheduled run was claimed by another sweep."""


class RecurringBillingSweepService:
    def __init__(self, db: Session, notifier: BillingNotificationService | None = None):
        self.db = db
        self.recurring_repo = RecurringBillingRepository(db)
        self.billing_repo = BillingRequestRepository(db)
        self.notifier = notifier or BillingNotificationService(db)

    def select_due(self, now: datetime) -> list[RecurringBilling]:
        return self.recurring_repo.get_due(now)

    def materialize(
        self, recurring: RecurringBilling, now: datetime, scheduled_run_at: datetime
    ) -> BillingRequest:
        """Add the billing request for one firing. Leaves the definition untouched."""
        company_id: UUID = recurring.company_id  # type: ignore[assignment]
        status = BillingStatus.SENT if recurring.auto_send else BillingStatus.DRAFT
        return self.billing_repo.create_from_recurring(
            recurring,
            billing_number=self.billing_repo.generate_billing_number(company_id, now),
            billing_month=billing_month(now),
            billing_period=business_date(scheduled_run_at).isoformat(),
            due_date=compute_due_date(now, int(recurring.days_before_due)),
            status=status,
        )

    def advance(
        self, recurring: RecurringBilling, now: datetime, scheduled_run_at: datetime
    ) -> datetime:
        """Move the definition to its next run. Raises AlreadyProcessedError if not claimed."""
        next_run_at = compute_next_run(
            str(recurring.schedule_type),
            int(recurring.schedule_day),
            recurring.schedule_month,  # type: ignore[arg-type]
            reference=now,
        )
        claimed = self.recurring_repo.advance(
            recurring.id,  # type: ignore[arg-type]
            scheduled_run_at=scheduled_run_at,
            next_run_at=next_run_at,
            run_at=now,
        )
        if not claimed:
            raise AlreadyProcessedError(str(recurring.id))
        return next_run_at

    def dispatch(self, billing: BillingRequest, recurring: RecurringBilling) -> DispatchResult:
        return self.notifier.dispatch(billing, recurring)

    def process(self, recurring: RecurringBilling, now: datetime) -> BillingRequest | None:
        """Materialize and advance one definition in a single transaction.

        Returns the new billing request, or None when the scheduled run had
        already been processed (duplicate firing).
        """
        scheduled_run_at = recurring.next_run_at  # as stored, for the compare-and-swap
        recurring_id: UUID = recurring.id  # type: ignore[assignment]
        if ensure_utc(scheduled_run_at) > now:  # type: ignore[arg-type]
            # Reloaded after another sweep already advanced it
            return None
        billing_period = business_date(ensure_utc(scheduled_run_at)).isoformat()  # type: ignore[arg-type]

        try:
            billing = self.materialize(recurring, now, scheduled_run_at)  # type: ignore[arg-type]
            self.advance(recurring, now, scheduled_run_at)  # type: ignore[arg-type]
            self.db.commit()
        except AlreadyProcessedError:
            self.db.rollback()
            return None
        except IntegrityError:
            self.db.rollback()
            if self.billing_repo.get_by_recurring_period(recurring_id, billing_period) is None:
                raise
            # Billing request for this run exists already; only move the schedule on
            recurring = self.recurring_repo.get_by_id(recurring_id)  # type: ignore[assignment]
            try:
                self.advance(recurring, now, scheduled_run_at)  # type: ignore[arg-type]
                self.db.commit()
            except AlreadyProcessedError:
                self.db.rollback()
            return None

        self.db.refresh(billing)
        self.db.refresh(recurring)
        return billing

    def run_sweep(self, now: datetime | None = None) -> SweepSummary:
        """Process every due definition, isolating failures per definition."""
        if now is None:
            now = datetime.now(UTC)
        started = time.monotonic()
        summary = SweepSummary()

        due = self.select_due(now)
        logger.info("Found %d due recurring billings", len(due))

        for index, recurring in enumerate(due):
            if (
                settings.sweep_deadline_enabled
                and time.monotonic() - started > settings.RECURRING_SWEEP_DEADLINE_SECONDS
            ):
                summary.deferred = len(due) - index
                logger.warning(
                    "Sweep deadline reached, deferring %d recurring billings", summary.deferred
                )
                break

            summary.processed += 1
            recurring_id = recurring.id
            company_id = recurring.company_id

            try:
                billing = self.process(recurring, now)
            except Exception:
                self.db.rollback()
                summary.failed += 1
                logger.exception(
                    "Failed to materialize recurring billing %s (company %s)",
                    recurring_id,
                    company_id,
                )
                continue

            if billing is None:
                summary.skipped += 1
                logger.info(
                    "Recurring billing %s already processed for this period", recurring_id
                )
                continue

            summary.created += 1
            logger.info(
                "Created billing request %s from recurring billing %s (%s)",
                billing.billing_number,
                recurring_id,
                billing.status,
            )

            try:
                result = self.dispatch(billing, recurring)
            except Exception:
                self.db.rollback()
                summary.notification_failed += 1
                logger.exception(
                    "Failed to record notification for billing request %s (company %s)",
                    billing.id,
                    company_id,
                )
                continue

            if result.status == DispatchStatus.SENT:
                summary.notified += 1
            elif result.status == DispatchStatus.FAILED:
                summary.notification_failed += 1

        logger.info(
            "Recurring billing sweep done: processed=%d created=%d notified=%d failed=%d",
            summary.processed,
            summary.created,
            summary.notified,
            summary.failed,
        )
        return summary
