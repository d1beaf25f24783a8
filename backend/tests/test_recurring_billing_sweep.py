"""Tests for the recurring billing sweep."""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from acctbill.core.config import settings
from acctbill.core.database import Base
from acctbill.models.billing_number_sequence import BillingNumberSequence
from acctbill.models.billing_request import BillingRequest, BillingStatus
from acctbill.models.company import Company
from acctbill.models.line_message import LineMessage
from acctbill.models.line_settings import LineSettings
from acctbill.models.recurring_billing import RecurringBilling
from acctbill.models.shared import ensure_utc
from acctbill.repositories.billing_request_repository import BillingRequestRepository
from acctbill.services.billing_notification_service import BillingNotificationService
from acctbill.services.line_client import LinePushResult
from acctbill.services.recurring_billing_sweep import (
    AlreadyProcessedError,
    RecurringBillingSweepService,
)
from tests.conftest import DEFAULT_COMPANY_ID

NOW = datetime(2025, 2, 1, 2, 0, tzinfo=UTC)


def _make_recurring(db, **kwargs: Any) -> RecurringBilling:
    defaults: dict[str, Any] = {
        "company_id": DEFAULT_COMPANY_ID,
        "customer_name": "好鄰居咖啡",
        "title": "記帳服務費",
        "amount": Decimal("5000"),
        "tax_amount": Decimal("0"),
        "schedule_type": "monthly",
        "schedule_day": 1,
        "days_before_due": 14,
        "auto_send": False,
        "next_run_at": datetime(2025, 2, 1, 1, 0, tzinfo=UTC),
    }
    defaults.update(kwargs)
    recurring = RecurringBilling(**defaults)
    db.add(recurring)
    db.commit()
    db.refresh(recurring)
    return recurring


def _configure_line(db, token: str = "channel-token") -> None:
    db.add(LineSettings(company_id=DEFAULT_COMPANY_ID, channel_access_token=token))
    db.commit()


@pytest.fixture
def line_client():
    client = MagicMock()
    client.push_text.return_value = LinePushResult(success=True, status_code=200)
    return client


@pytest.fixture
def service(db_session, line_client):
    notifier = BillingNotificationService(db_session, client=line_client)
    return RecurringBillingSweepService(db_session, notifier=notifier)


def _billings_for(db, recurring_id) -> list[BillingRequest]:
    return (
        db.query(BillingRequest)
        .filter(BillingRequest.recurring_billing_id == recurring_id)
        .all()
    )


class TestSelectDue:
    def test_selects_active_elapsed_definitions(self, db_session, service):
        due = _make_recurring(db_session, next_run_at=datetime(2025, 2, 1, 1, tzinfo=UTC))
        _make_recurring(db_session, next_run_at=datetime(2025, 3, 1, 1, tzinfo=UTC))
        _make_recurring(
            db_session, next_run_at=datetime(2025, 1, 1, 1, tzinfo=UTC), is_active=False
        )

        result = service.select_due(NOW)

        assert [r.id for r in result] == [due.id]

    def test_boundary_is_inclusive(self, db_session, service):
        recurring = _make_recurring(db_session, next_run_at=NOW)
        assert [r.id for r in service.select_due(NOW)] == [recurring.id]

    def test_orders_by_next_run(self, db_session, service):
        later = _make_recurring(db_session, next_run_at=datetime(2025, 1, 20, 1, tzinfo=UTC))
        earlier = _make_recurring(db_session, next_run_at=datetime(2025, 1, 10, 1, tzinfo=UTC))

        assert [r.id for r in service.select_due(NOW)] == [earlier.id, later.id]

    def test_includes_all_companies(self, db_session, service):
        other = Company(name="Other Co")
        db_session.add(other)
        db_session.commit()
        _make_recurring(db_session)
        _make_recurring(db_session, company_id=other.id)

        assert len(service.select_due(NOW)) == 2


class TestMaterialize:
    def test_total_is_amount_plus_tax(self, db_session, service):
        recurring = _make_recurring(
            db_session, amount=Decimal("1000"), tax_amount=Decimal("50")
        )

        billing = service.materialize(recurring, NOW, recurring.next_run_at)

        assert billing.total_amount == Decimal("1050")
        assert billing.amount == Decimal("1000")
        assert billing.tax_amount == Decimal("50")

    def test_copies_definition_fields(self, db_session, service):
        recurring = _make_recurring(
            db_session,
            description="二月份記帳",
            customer_line_group_id="C123",
            customer_line_group_name="咖啡店群組",
            cost_amount=Decimal("800"),
            cost_vendor_name="外包記帳士",
        )

        billing = service.materialize(recurring, NOW, recurring.next_run_at)

        assert billing.company_id == DEFAULT_COMPANY_ID
        assert billing.customer_name == "好鄰居咖啡"
        assert billing.title == "記帳服務費"
        assert billing.description == "二月份記帳"
        assert billing.customer_line_group_id == "C123"
        assert billing.customer_line_group_name == "咖啡店群組"
        assert billing.cost_amount == Decimal("800")
        assert billing.cost_vendor_name == "外包記帳士"
        assert billing.recurring_billing_id == recurring.id
        assert billing.billing_period == "2025-02-01"
        assert billing.billing_month == "2025-02"
        assert billing.due_date == date(2025, 2, 15)
        assert billing.billing_number == "BIL-202502-0001"

    def test_status_follows_auto_send(self, db_session, service):
        manual = _make_recurring(db_session)
        automatic = _make_recurring(db_session, auto_send=True)

        assert service.materialize(manual, NOW, manual.next_run_at).status == "draft"
        assert service.materialize(automatic, NOW, automatic.next_run_at).status == "sent"

    def test_does_not_touch_definition(self, db_session, service):
        recurring = _make_recurring(db_session)

        service.materialize(recurring, NOW, recurring.next_run_at)

        assert recurring.run_count == 0
        assert recurring.last_run_at is None


class TestAdvance:
    def test_moves_next_run_and_counts(self, db_session, service):
        recurring = _make_recurring(db_session)

        next_run = service.advance(recurring, NOW, recurring.next_run_at)
        db_session.commit()
        db_session.refresh(recurring)

        assert next_run == datetime(2025, 3, 1, 1, tzinfo=UTC)
        assert ensure_utc(recurring.next_run_at) == datetime(2025, 3, 1, 1, tzinfo=UTC)
        assert ensure_utc(recurring.last_run_at) == NOW
        assert recurring.run_count == 1

    def test_stale_scheduled_run_is_rejected(self, db_session, service):
        recurring = _make_recurring(db_session)

        with pytest.raises(AlreadyProcessedError):
            service.advance(recurring, NOW, datetime(2025, 1, 1, 1, tzinfo=UTC))

    def test_inactive_definition_is_rejected(self, db_session, service):
        recurring = _make_recurring(db_session, is_active=False)

        with pytest.raises(AlreadyProcessedError):
            service.advance(recurring, NOW, recurring.next_run_at)


class TestProcess:
    def test_commits_billing_and_advance_together(self, db_session, service):
        recurring = _make_recurring(db_session)

        billing = service.process(recurring, NOW)

        assert billing is not None
        assert billing.status == BillingStatus.DRAFT.value
        assert recurring.run_count == 1
        assert len(_billings_for(db_session, recurring.id)) == 1

    def test_lost_claim_rolls_back_billing(self, db_session, service):
        recurring = _make_recurring(db_session)

        with patch.object(service.recurring_repo, "advance", return_value=False):
            result = service.process(recurring, NOW)

        assert result is None
        assert _billings_for(db_session, recurring.id) == []
        db_session.refresh(recurring)
        assert recurring.run_count == 0
        # The sequence increment is undone with the rest of the transaction
        assert db_session.query(BillingNumberSequence).count() == 0

    def test_existing_period_advances_without_duplicate(self, db_session, service):
        recurring = _make_recurring(db_session)
        db_session.add(
            BillingRequest(
                company_id=DEFAULT_COMPANY_ID,
                billing_number="BIL-202502-9999",
                customer_name=recurring.customer_name,
                title=recurring.title,
                amount=Decimal("5000"),
                tax_amount=Decimal("0"),
                total_amount=Decimal("5000"),
                due_date=date(2025, 2, 15),
                recurring_billing_id=recurring.id,
                billing_period="2025-02-01",
            )
        )
        db_session.commit()

        result = service.process(recurring, NOW)

        assert result is None
        assert len(_billings_for(db_session, recurring.id)) == 1
        db_session.refresh(recurring)
        assert ensure_utc(recurring.next_run_at) == datetime(2025, 3, 1, 1, tzinfo=UTC)
        assert recurring.run_count == 1


class TestRunSweep:
    def test_end_to_end_monthly_auto_send(self, db_session, service, line_client):
        _configure_line(db_session)
        recurring = _make_recurring(
            db_session,
            auto_send=True,
            customer_line_group_id="C123",
            customer_line_group_name="咖啡店群組",
            message_template="{{客戶名稱}} 您好，{{請款項目}} NT$ {{金額}}，請於 {{到期日}} 前付款",
        )

        summary = service.run_sweep(NOW)

        assert summary.processed == 1
        assert summary.created == 1
        assert summary.notified == 1
        assert summary.failed == 0

        billings = _billings_for(db_session, recurring.id)
        assert len(billings) == 1
        billing = billings[0]
        assert billing.status == BillingStatus.SENT.value
        assert billing.total_amount == Decimal("5000")
        assert billing.due_date == date(2025, 2, 15)
        assert billing.notification_sent_at is not None

        line_client.push_text.assert_called_once_with(
            "channel-token",
            "C123",
            "好鄰居咖啡 您好，記帳服務費 NT$ 5,000，請於 2025/2/15 前付款",
        )
        messages = db_session.query(LineMessage).all()
        assert len(messages) == 1
        assert messages[0].status == "sent"
        assert messages[0].trigger_type == "auto"
        assert messages[0].recipient_type == "group"
        assert messages[0].billing_request_id == billing.id

        db_session.refresh(recurring)
        assert ensure_utc(recurring.next_run_at) == datetime(2025, 3, 1, 1, tzinfo=UTC)
        assert recurring.run_count == 1

    def test_running_twice_creates_one_billing(self, db_session, service):
        recurring = _make_recurring(db_session)

        first = service.run_sweep(NOW)
        second = service.run_sweep(NOW)

        assert first.created == 1
        assert second.processed == 0
        assert second.created == 0
        assert len(_billings_for(db_session, recurring.id)) == 1

    def test_failure_is_isolated_per_definition(self, db_session, service):
        first = _make_recurring(db_session, next_run_at=datetime(2025, 1, 29, 1, tzinfo=UTC))
        second = _make_recurring(db_session, next_run_at=datetime(2025, 1, 30, 1, tzinfo=UTC))
        third = _make_recurring(db_session, next_run_at=datetime(2025, 1, 31, 1, tzinfo=UTC))

        original = BillingRequestRepository.create_from_recurring

        def flaky(repo, recurring, **kwargs):
            if recurring.id == second.id:
                raise OperationalError("INSERT INTO billing_requests", {}, Exception("disk I/O"))
            return original(repo, recurring, **kwargs)

        with patch.object(BillingRequestRepository, "create_from_recurring", flaky):
            summary = service.run_sweep(NOW)

        assert summary.processed == 3
        assert summary.created == 2
        assert summary.failed == 1
        assert len(_billings_for(db_session, first.id)) == 1
        assert _billings_for(db_session, second.id) == []
        assert len(_billings_for(db_session, third.id)) == 1

        # The failed definition stays due for the next sweep
        db_session.refresh(second)
        assert second.run_count == 0
        assert ensure_utc(second.next_run_at) == datetime(2025, 1, 30, 1, tzinfo=UTC)

        numbers = sorted(
            b.billing_number for b in db_session.query(BillingRequest).all()
        )
        assert numbers == ["BIL-202502-0001", "BIL-202502-0002"]

    def test_auto_send_disabled_skips_notification(self, db_session, service, line_client):
        _configure_line(db_session)
        recurring = _make_recurring(
            db_session,
            auto_send=False,
            customer_line_group_id="C123",
            message_template="{{金額}}",
        )

        summary = service.run_sweep(NOW)

        assert summary.created == 1
        assert summary.notified == 0
        line_client.push_text.assert_not_called()
        assert db_session.query(LineMessage).count() == 0
        assert _billings_for(db_session, recurring.id)[0].status == "draft"

    def test_push_failure_keeps_billing(self, db_session, service, line_client):
        _configure_line(db_session)
        line_client.push_text.return_value = LinePushResult(
            success=False, status_code=400, error="The request body has 1 error(s)"
        )
        recurring = _make_recurring(
            db_session, auto_send=True, customer_line_group_id="C123", message_template="hi"
        )

        summary = service.run_sweep(NOW)

        assert summary.created == 1
        assert summary.notified == 0
        assert summary.notification_failed == 1
        message = db_session.query(LineMessage).one()
        assert message.status == "failed"
        assert message.error_message == "The request body has 1 error(s)"
        assert message.sent_at is None
        db_session.refresh(recurring)
        assert recurring.run_count == 1

    def test_unexpected_dispatch_error_does_not_abort(self, db_session, service, line_client):
        _configure_line(db_session)
        line_client.push_text.side_effect = RuntimeError("boom")
        _make_recurring(
            db_session,
            auto_send=True,
            customer_line_group_id="C123",
            message_template="hi",
            next_run_at=datetime(2025, 1, 30, 1, tzinfo=UTC),
        )
        _make_recurring(db_session)

        summary = service.run_sweep(NOW)

        assert summary.processed == 2
        assert summary.created == 2
        assert summary.notification_failed == 1
        assert db_session.query(BillingRequest).count() == 2

    def test_nothing_due(self, service):
        summary = service.run_sweep(NOW)
        assert summary.model_dump() == {
            "processed": 0,
            "created": 0,
            "notified": 0,
            "notification_failed": 0,
            "skipped": 0,
            "failed": 0,
            "deferred": 0,
        }

    def test_deadline_defers_remaining(self, db_session, service):
        _make_recurring(db_session, next_run_at=datetime(2025, 1, 30, 1, tzinfo=UTC))
        deferred = _make_recurring(db_session, next_run_at=datetime(2025, 1, 31, 1, tzinfo=UTC))

        clock = MagicMock()
        clock.monotonic.side_effect = [0.0, 1.0, 10.0]
        with (
            patch.object(settings, "RECURRING_SWEEP_DEADLINE_SECONDS", 5.0),
            patch("acctbill.services.recurring_billing_sweep.time", clock),
        ):
            summary = service.run_sweep(NOW)

        assert summary.processed == 1
        assert summary.created == 1
        assert summary.deferred == 1
        assert _billings_for(db_session, deferred.id) == []

    def test_defaults_now_to_current_time(self, db_session, service):
        _make_recurring(db_session, next_run_at=datetime(2020, 1, 1, 1, tzinfo=UTC))

        summary = service.run_sweep()

        assert summary.created == 1

    def test_numbers_are_sequential_within_month(self, db_session, service):
        for day in (27, 28, 29):
            _make_recurring(db_session, next_run_at=datetime(2025, 1, day, 1, tzinfo=UTC))

        service.run_sweep(NOW)

        numbers = [
            b.billing_number
            for b in db_session.query(BillingRequest).order_by(BillingRequest.billing_number)
        ]
        assert numbers == ["BIL-202502-0001", "BIL-202502-0002", "BIL-202502-0003"]


@pytest.fixture
def file_sessionmaker(tmp_path):
    """Sessions on a file-backed database so each one holds its own connection."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'sweep.db'}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with factory() as session:
        session.add(Company(id=DEFAULT_COMPANY_ID, name="Default Test Company"))
        session.commit()
    yield factory
    engine.dispose()


class TestOverlappingSweeps:
    def _sweep(self, session, line_client) -> RecurringBillingSweepService:
        notifier = BillingNotificationService(session, client=line_client)
        return RecurringBillingSweepService(session, notifier=notifier)

    def test_preloaded_definitions_are_not_billed_twice(self, file_sessionmaker, line_client):
        with file_sessionmaker() as setup:
            first = _make_recurring(setup, next_run_at=datetime(2025, 1, 29, 1, tzinfo=UTC))
            second = _make_recurring(setup, next_run_at=datetime(2025, 1, 30, 1, tzinfo=UTC))
            first_id, second_id = first.id, second.id

        with file_sessionmaker() as session_a, file_sessionmaker() as session_b:
            sweep_b = self._sweep(session_b, line_client)
            preloaded = sweep_b.select_due(NOW)
            assert len(preloaded) == 2

            summary_a = self._sweep(session_a, line_client).run_sweep(NOW)
            results_b = [sweep_b.process(recurring, NOW) for recurring in preloaded]

        assert summary_a.created == 2
        assert results_b == [None, None]

        with file_sessionmaker() as check:
            periods = sorted(b.billing_period for b in check.query(BillingRequest).all())
            assert periods == ["2025-01-29", "2025-01-30"]
            for recurring_id in (first_id, second_id):
                recurring = check.get(RecurringBilling, recurring_id)
                assert recurring.run_count == 1
                assert ensure_utc(recurring.next_run_at) == datetime(2025, 3, 1, 1, tzinfo=UTC)

    def test_sweep_over_preloaded_list_reports_skips(self, file_sessionmaker, line_client):
        with file_sessionmaker() as setup:
            for day in (29, 30):
                _make_recurring(setup, next_run_at=datetime(2025, 1, day, 1, tzinfo=UTC))

        with file_sessionmaker() as session_a, file_sessionmaker() as session_b:
            sweep_b = self._sweep(session_b, line_client)
            preloaded = sweep_b.select_due(NOW)
            self._sweep(session_a, line_client).run_sweep(NOW)

            with patch.object(sweep_b, "select_due", return_value=preloaded):
                summary_b = sweep_b.run_sweep(NOW)

        assert summary_b.created == 0
        assert summary_b.skipped == 2
        assert summary_b.failed == 0

        with file_sessionmaker() as check:
            assert check.query(BillingRequest).count() == 2


class TestFutureRun:
    def test_process_skips_definition_not_yet_due(self, db_session, service):
        recurring = _make_recurring(db_session, next_run_at=datetime(2025, 3, 1, 1, tzinfo=UTC))

        assert service.process(recurring, NOW) is None
        assert _billings_for(db_session, recurring.id) == []
        assert db_session.query(BillingNumberSequence).count() == 0

    def test_advance_rejects_future_scheduled_run(self, db_session, service):
        future = datetime(2025, 3, 1, 1, tzinfo=UTC)
        recurring = _make_recurring(db_session, next_run_at=future)

        with pytest.raises(AlreadyProcessedError):
            service.advance(recurring, NOW, future)
