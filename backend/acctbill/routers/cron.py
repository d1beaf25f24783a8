"""Cron trigger endpoints for external schedulers."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from acctbill.core.auth import verify_cron_secret
from acctbill.core.database import get_db
from acctbill.schemas.sweep import SweepSummary
from acctbill.services.recurring_billing_sweep import RecurringBillingSweepService
from acctbill.tasks import enqueue_recurring_billings_sweep

router = APIRouter(dependencies=[Depends(verify_cron_secret)])


@router.api_route(
    "/recurring_billings",
    methods=["GET", "POST"],
    response_model=SweepSummary,
    summary="Run the recurring billing sweep",
    responses={401: {"description": "Invalid or missing cron secret"}},
)
def run_recurring_billings(db: Session = Depends(get_db)) -> SweepSummary:
    """Generate billing requests for every due recurring billing."""
    return RecurringBillingSweepService(db).run_sweep()


@router.post(
    "/recurring_billings/enqueue",
    summary="Queue the recurring billing sweep on the worker",
    responses={401: {"description": "Invalid or missing cron secret"}},
)
async def enqueue_recurring_billings() -> dict[str, str | None]:
    """Hand the sweep to the arq worker instead of running it in the request."""
    job = await enqueue_recurring_billings_sweep()
    return {"job_id": job.job_id if job is not None else None}
