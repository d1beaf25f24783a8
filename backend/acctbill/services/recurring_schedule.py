"""Next-run calculation for recurring billing definitions."""

import calendar as cal
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from acctbill.core.config import settings
from acctbill.models.recurring_billing import ScheduleType
from acctbill.models.shared import ensure_utc

QUARTER_START_MONTHS = (1, 4, 7, 10)


def _run_instant(year: int, month: int, day: int) -> datetime:
    """Build the execution instant for a date, clamping day to the month's last day."""
    max_day = cal.monthrange(year, month)[1]
    return datetime(
        year,
        month,
        min(day, max_day),
        settings.SCHEDULE_RUN_HOUR_UTC,
        tzinfo=UTC,
    )


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def compute_next_run(
    schedule_type: str,
    schedule_day: int,
    schedule_month: int | None = None,
    reference: datetime | None = None,
) -> datetime:
    """Calculate the next execution instant strictly after ``reference``.

    Args:
        schedule_type: One of monthly, quarterly, yearly.
        schedule_day: Anchor day of month (1-31). Clamped to the target month's length.
        schedule_month: Anchor month (1-12), used for yearly schedules only.
        reference: Instant to calculate from. Defaults to now.

    Returns:
        UTC datetime at the configured execution hour.
    """
    reference = ensure_utc(reference) if reference is not None else datetime.now(UTC)
    schedule_type = str(getattr(schedule_type, "value", schedule_type))

    if schedule_type == ScheduleType.MONTHLY.value:
        candidate = _run_instant(reference.year, reference.month, schedule_day)
        if candidate <= reference:
            year, month = _next_month(reference.year, reference.month)
            candidate = _run_instant(year, month, schedule_day)
        return candidate

    elif schedule_type == ScheduleType.QUARTERLY.value:
        later = [m for m in QUARTER_START_MONTHS if m > reference.month]
        if later:
            return _run_instant(reference.year, later[0], schedule_day)
        return _run_instant(reference.year + 1, QUARTER_START_MONTHS[0], schedule_day)

    elif schedule_type == ScheduleType.YEARLY.value:
        month = schedule_month or 1
        candidate = _run_instant(reference.year, month, schedule_day)
        if candidate <= reference:
            candidate = _run_instant(reference.year + 1, month, schedule_day)
        return candidate

    raise ValueError(f"Unknown schedule type: {schedule_type}")


def business_date(instant: datetime) -> date:
    """Calendar date of an instant in the business timezone."""
    return ensure_utc(instant).astimezone(ZoneInfo(settings.BUSINESS_TIMEZONE)).date()


def compute_due_date(generated_at: datetime, days_before_due: int) -> date:
    """Due date is the generation date plus a number of calendar days."""
    return business_date(generated_at + timedelta(days=days_before_due))


def billing_month(instant: datetime) -> str:
    """``YYYY-MM`` of an instant in the business timezone."""
    return business_date(instant).strftime("%Y-%m")
