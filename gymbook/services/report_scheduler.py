"""Weekly report e-mails.

Every Sunday 08:00 (gym time) the last seven days, today included, are
reported to the admin: one coach-performance mail and one sales mail.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from gymbook.core.errors import Ok, Result, conflict
from gymbook.core.logging import get_logger
from gymbook.core.settings import settings
from gymbook.email.render import render
from gymbook.services import mailer
from gymbook.services.reports import (
    Period,
    coach_performance,
    previous_period,
    sales_statistics,
)
from gymbook.utils.dates import format_date
from gymbook.utils.tz import gym_tz, now_local

JOB_ID = "weekly_reports"

SendFn = Callable[[str, Sequence[str], str], None]


@dataclass
class WeeklyRun:
    status: str  # sent | skipped
    key: str
    period: Period
    emails_sent: int = 0


def weekly_period(now: datetime) -> Period:
    today = now.date()
    return Period(today - timedelta(days=6), today)


def run_key(period: Period) -> str:
    return f"reports:{format_date(period.start)}:{format_date(period.end)}"


def run_weekly_reports(
    session_factory: Callable[[], Session],
    period: Period,
    *,
    admin_email: str | None = None,
    send: SendFn | None = None,
) -> int:
    """Build both reports for ``period`` and mail them. Returns mails sent."""
    send = send or mailer.send_email
    to = [admin_email or settings.ADMIN_EMAIL]
    previous = previous_period(period.start, period.end)
    start, end = format_date(period.start), format_date(period.end)

    with session_factory() as db:
        coach_rows = coach_performance(db, period, previous)
        sales_rows = sales_statistics(db, period, previous)

    ctx = {"period_start": start, "period_end": end}
    send(
        f"Weekly Coach Performance Report ({start} to {end})",
        to,
        render("coach_report.html", rows=coach_rows, **ctx),
    )
    send(
        f"Weekly Sales Statistics Report ({start} to {end})",
        to,
        render("sales_report.html", rows=sales_rows, **ctx),
    )
    return 2


class ReportScheduler:
    """Cron wrapper around :func:`run_weekly_reports`.

    One run at a time per process; a window already mailed is not mailed
    again unless forced.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        cron: str | None = None,
        admin_email: str | None = None,
        send: SendFn | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.cron = cron or settings.REPORT_CRON
        self.admin_email = admin_email
        self.send = send
        self._lock = threading.Lock()
        self._last_key: str | None = None
        self._scheduler: BackgroundScheduler | None = None

    @property
    def last_key(self) -> str | None:
        return self._last_key

    def run(self, now: datetime | None = None, force: bool = False) -> Result[WeeklyRun]:
        log = get_logger()
        tz = gym_tz()
        now = now.astimezone(tz) if now else now_local(tz)
        period = weekly_period(now)
        key = run_key(period)

        if not self._lock.acquire(blocking=False):
            log.warning("reports.weekly_busy", key=key)
            return conflict("already_running", "Weekly reports are already being generated")
        try:
            if key == self._last_key and not force:
                log.info("reports.weekly_skipped", key=key)
                return Ok(WeeklyRun(status="skipped", key=key, period=period))

            log.info("reports.weekly_start", key=key)
            sent = run_weekly_reports(
                self.session_factory,
                period,
                admin_email=self.admin_email,
                send=self.send,
            )
            self._last_key = key
            log.info("reports.weekly_sent", key=key, emails=sent)
            return Ok(WeeklyRun(status="sent", key=key, period=period, emails_sent=sent))
        finally:
            self._lock.release()

    def _tick(self) -> None:
        try:
            self.run()
        except Exception:
            # o job continua agendado para a próxima semana
            get_logger().exception("reports.weekly_failed")

    def start(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            return
        tz = gym_tz()
        self._scheduler = BackgroundScheduler(timezone=tz)
        self._scheduler.add_job(
            self._tick,
            CronTrigger.from_crontab(self.cron, timezone=tz),
            id=JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._scheduler.start()
        get_logger().info("scheduler.started", job=JOB_ID, cron=self.cron)

    def shutdown(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            get_logger().info("scheduler.stopped", job=JOB_ID)
        self._scheduler = None
