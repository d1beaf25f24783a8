import logging
from typing import Any

from arq import cron

from acctbill.core.database import SessionLocal
from acctbill.services.recurring_billing_sweep import RecurringBillingSweepService
from acctbill.tasks import redis_settings

logger = logging.getLogger(__name__)


async def run_recurring_billings_task(ctx: dict[str, Any]) -> dict[str, int]:
    """Background task: generate billing requests for due recurring billings.

    Runs every minute. Returns the sweep summary.
    """
    db = SessionLocal()
    try:
        summary = RecurringBillingSweepService(db).run_sweep()
        if summary.created > 0 or summary.failed > 0:
            logger.info(
                "Recurring billings: created %d, failed %d", summary.created, summary.failed
            )
        return summary.model_dump()
    finally:
        db.close()


class WorkerSettings:
    functions = [
        run_recurring_billings_task,
    ]
    cron_jobs = [
        cron(run_recurring_billings_task, minute=set(range(60))),  # every minute
    ]
    redis_settings = redis_settings
