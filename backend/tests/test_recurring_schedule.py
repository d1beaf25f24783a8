"""Tests for recurring billing next-run and due date calculations."""

from datetime import UTC, date, datetime, timedelta

import pytest

from acctbill.models.recurring_billing import ScheduleType
from acctbill.services.recurring_schedule import (
    _run_instant,
    billing_month,
    business_date,
    compute_due_date,
    compute_next_run,
)


def _at(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


class TestRunInstant:
    def test_uses_execution_hour(self):
        assert _run_instant(2025, 2, 1) == _at(2025, 2, 1, 1)

    def test_clamps_to_last_day(self):
        assert _run_instant(2025, 4, 31) == _at(2025, 4, 30, 1)

    def test_clamps_to_leap_day(self):
        assert _run_instant(2024, 2, 31) == _at(2024, 2, 29, 1)


class TestMonthly:
    def test_anchor_passed_rolls_to_next_month(self):
        result = compute_next_run("monthly", 15, reference=_at(2025, 1, 20))
        assert result == _at(2025, 2, 15, 1)

    def test_anchor_not_yet_passed_stays_in_month(self):
        result = compute_next_run("monthly", 15, reference=_at(2025, 1, 10))
        assert result == _at(2025, 1, 15, 1)

    def test_same_day_before_execution_hour(self):
        result = compute_next_run("monthly", 15, reference=_at(2025, 1, 15, 0, 30))
        assert result == _at(2025, 1, 15, 1)

    def test_exactly_at_execution_instant_rolls_forward(self):
        result = compute_next_run("monthly", 15, reference=_at(2025, 1, 15, 1))
        assert result == _at(2025, 2, 15, 1)

    def test_december_rolls_into_next_year(self):
        result = compute_next_run("monthly", 5, reference=_at(2025, 12, 20))
        assert result == _at(2026, 1, 5, 1)

    def test_day_31_in_february_clamps(self):
        result = compute_next_run("monthly", 31, reference=_at(2025, 2, 1))
        assert result == _at(2025, 2, 28, 1)

    def test_day_31_after_clamped_run_moves_to_next_month(self):
        result = compute_next_run("monthly", 31, reference=_at(2025, 2, 28, 2))
        assert result == _at(2025, 3, 31, 1)

    def test_accepts_enum(self):
        result = compute_next_run(ScheduleType.MONTHLY, 1, reference=_at(2025, 1, 5))  # type: ignore[arg-type]
        assert result == _at(2025, 2, 1, 1)

    def test_naive_reference_treated_as_utc(self):
        result = compute_next_run("monthly", 15, reference=datetime(2025, 1, 20))
        assert result == _at(2025, 2, 15, 1)


class TestQuarterly:
    def test_next_quarter_start_after_february(self):
        result = compute_next_run("quarterly", 1, reference=_at(2025, 2, 15))
        assert result == _at(2025, 4, 1, 1)

    def test_quarter_start_month_moves_to_following_quarter(self):
        result = compute_next_run("quarterly", 1, reference=_at(2025, 4, 1))
        assert result == _at(2025, 7, 1, 1)

    def test_wraps_to_january(self):
        result = compute_next_run("quarterly", 10, reference=_at(2025, 11, 3))
        assert result == _at(2026, 1, 10, 1)

    def test_clamps_day(self):
        result = compute_next_run("quarterly", 31, reference=_at(2025, 3, 1))
        assert result == _at(2025, 4, 30, 1)


class TestYearly:
    def test_anchor_passed_rolls_to_next_year(self):
        result = compute_next_run("yearly", 10, 3, reference=_at(2025, 4, 1))
        assert result == _at(2026, 3, 10, 1)

    def test_anchor_ahead_in_same_year(self):
        result = compute_next_run("yearly", 10, 3, reference=_at(2025, 1, 1))
        assert result == _at(2025, 3, 10, 1)

    def test_leap_day_clamps_in_common_year(self):
        result = compute_next_run("yearly", 29, 2, reference=_at(2025, 3, 1))
        assert result == _at(2026, 2, 28, 1)

    def test_missing_month_defaults_to_january(self):
        result = compute_next_run("yearly", 5, None, reference=_at(2025, 3, 1))
        assert result == _at(2026, 1, 5, 1)


class TestInvariants:
    @pytest.mark.parametrize("schedule_type", ["monthly", "quarterly", "yearly"])
    @pytest.mark.parametrize("day", [1, 15, 28, 31])
    def test_always_strictly_after_reference(self, schedule_type, day):
        reference = _at(2024, 1, 1)
        for _ in range(40):
            result = compute_next_run(schedule_type, day, 6, reference=reference)
            assert result > reference
            assert result.hour == 1
            reference = result

    def test_unknown_schedule_type_raises(self):
        with pytest.raises(ValueError, match="Unknown schedule type: weekly"):
            compute_next_run("weekly", 1, reference=_at(2025, 1, 1))


class TestBusinessDates:
    def test_business_date_uses_taipei(self):
        # 17:00 UTC is 01:00 the next day in Asia/Taipei
        assert business_date(_at(2025, 1, 31, 17)) == date(2025, 2, 1)

    def test_billing_month(self):
        assert billing_month(_at(2025, 1, 31, 17)) == "2025-02"
        assert billing_month(_at(2025, 1, 31, 15)) == "2025-01"

    def test_due_date_adds_calendar_days(self):
        assert compute_due_date(_at(2025, 2, 1, 2), 14) == date(2025, 2, 15)

    def test_due_date_zero_days(self):
        assert compute_due_date(_at(2025, 2, 1, 2), 0) == date(2025, 2, 1)

    def test_due_date_crosses_month(self):
        generated = _at(2025, 1, 25, 1)
        assert compute_due_date(generated, 14) == (generated + timedelta(days=14)).date()
