from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from gymbook.core.errors import unwrap
from gymbook.core.security import Role
from gymbook.core.settings import settings
from gymbook.db import get_db
from gymbook.deps import Actor, require_roles
from gymbook.schemas.reports import ReportOut, WeeklyRunOut
from gymbook.services.report_scheduler import ReportScheduler
from gymbook.services.reports import generate_report
from gymbook.utils.dates import format_date

router = APIRouter(prefix="/api/reports", tags=["reports"])

_admin_only = require_roles(Role.ADMIN)


def report_access(request: Request) -> Actor | None:
    if not settings.REPORTS_REQUIRE_ADMIN:
        return None
    return _admin_only(request)


@router.get("/performance", response_model=ReportOut)
def performance_report(
    type: str = Query(..., description="coach | sales"),
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    _: Actor | None = Depends(report_access),
    db: Session = Depends(get_db),
):
    rows = unwrap(generate_report(db, type, start_date, end_date))
    return ReportOut(data=rows)


@router.post("/trigger-weekly", response_model=WeeklyRunOut)
def trigger_weekly(
    request: Request,
    force: bool = Query(False),
    _: Actor | None = Depends(report_access),
):
    scheduler: ReportScheduler = request.app.state.report_scheduler
    run = unwrap(scheduler.run(force=force))
    return WeeklyRunOut(
        status=run.status,
        key=run.key,
        period_start=format_date(run.period.start),
        period_end=format_date(run.period.end),
        emails_sent=run.emails_sent,
    )
