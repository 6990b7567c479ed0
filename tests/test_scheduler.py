import threading
from datetime import UTC, date, datetime

import pytest

from gymbook.core.errors import Ok, ServiceError
from gymbook.models.workout import WorkoutStatus
from gymbook.services.report_scheduler import ReportScheduler, run_key, weekly_period

SUNDAY = datetime(2025, 6, 15, 8, 0, tzinfo=UTC)


class Outbox:
    def __init__(self):
        self.sent = []

    def __call__(self, subject, to, html, text=None):
        self.sent.append((subject, list(to), html))


@pytest.fixture
def outbox():
    return Outbox()


@pytest.fixture
def scheduler(database, outbox):
    return ReportScheduler(database.session, admin_email="boss@example.com", send=outbox)


def test_weekly_period_is_last_seven_days():
    period = weekly_period(SUNDAY)
    assert (period.start, period.end) == (date(2025, 6, 9), date(2025, 6, 15))
    assert run_key(period) == "reports:09-06-2025:15-06-2025"


def test_run_sends_coach_and_sales_reports(scheduler, outbox, coach, client_id, make_workout):
    make_workout(
        coach,
        client_id,
        date(2025, 6, 12),
        client_status=WorkoutStatus.FINISHED,
        coach_status=WorkoutStatus.FINISHED,
    )
    result = scheduler.run(now=SUNDAY)

    assert isinstance(result, Ok)
    assert result.value.status == "sent"
    assert result.value.emails_sent == 2
    subjects = [s for s, _, _ in outbox.sent]
    assert subjects == [
        "Weekly Coach Performance Report (09-06-2025 to 15-06-2025)",
        "Weekly Sales Statistics Report (09-06-2025 to 15-06-2025)",
    ]
    assert all(to == ["boss@example.com"] for _, to, _ in outbox.sent)
    coach_html, sales_html = outbox.sent[0][2], outbox.sent[1][2]
    assert "Kristin Watson" in coach_html
    assert "+100%" in coach_html
    assert "Yoga" in sales_html and "100%" in sales_html


def test_same_window_is_not_sent_twice(scheduler, outbox):
    assert scheduler.run(now=SUNDAY).value.status == "sent"
    again = scheduler.run(now=SUNDAY)
    assert again.value.status == "skipped"
    assert len(outbox.sent) == 2

    forced = scheduler.run(now=SUNDAY, force=True)
    assert forced.value.status == "sent"
    assert len(outbox.sent) == 4


def test_concurrent_run_reports_busy(database):
    entered = threading.Event()
    release = threading.Event()

    def slow_send(subject, to, html, text=None):
        entered.set()
        release.wait(timeout=5)

    sched = ReportScheduler(database.session, send=slow_send)
    worker = threading.Thread(target=sched.run, kwargs={"now": SUNDAY})
    worker.start()
    try:
        assert entered.wait(timeout=5)
        busy = sched.run(now=SUNDAY)
        assert isinstance(busy, ServiceError)
        assert busy.code == "already_running"
        assert busy.status_code == 409
    finally:
        release.set()
        worker.join(timeout=5)
    assert sched.last_key == "reports:09-06-2025:15-06-2025"


def test_start_and_shutdown_register_cron_job(database):
    sched = ReportScheduler(database.session, cron="0 8 * * sun")
    sched.start()
    try:
        job = sched._scheduler.get_job("weekly_reports")
        assert job is not None
        assert job.next_run_time.weekday() == 6
    finally:
        sched.shutdown()
    assert sched._scheduler is None
