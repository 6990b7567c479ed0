"""Period-over-period reports.

The comparison window is the equal-length run of days that ends the day
before ``start``. Aggregation happens in Python over two queries (workouts in
both windows, then their client feedback).
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from gymbook.core.errors import Ok, Result, invalid
from gymbook.core.logging import get_logger
from gymbook.core.settings import settings
from gymbook.models.coach import Coach
from gymbook.models.feedback import Feedback
from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.schemas.reports import CoachPerformance, ReportType, SalesStatistics
from gymbook.utils.dates import format_date, parse_report_date


@dataclass(frozen=True)
class Period:
    start: date
    end: date  # inclusivo

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end


@dataclass(frozen=True)
class RatingStats:
    average: float = 0.0
    minimum: int = 0


def previous_period(start: date, end: date) -> Period:
    duration = abs((end - start).days)
    prev_end = start - timedelta(days=1)
    return Period(prev_end - timedelta(days=duration), prev_end)


def _round_half_up(value: Decimal, places: str = "1") -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def percentage_change(old: float, new: float) -> str:
    """
    >>> percentage_change(10, 15)
    '+50%'
    >>> percentage_change(10, 5)
    '-50%'
    >>> percentage_change(0, 5)
    '+100%'
    """
    if old == 0:
        return "+100%" if new > 0 else "0%"
    change = (Decimal(str(new)) - Decimal(str(old))) / Decimal(str(old)) * 100
    rounded = int(_round_half_up(change))
    return f"+{rounded}%" if rounded >= 0 else f"{rounded}%"


def rating_stats(ratings: Sequence[int]) -> RatingStats:
    if not ratings:
        return RatingStats()
    avg = _round_half_up(Decimal(sum(ratings)) / len(ratings), "0.1")
    return RatingStats(average=float(avg), minimum=min(ratings))


def attendance_rate(workouts: Sequence[Workout]) -> int:
    """Percent of workouts the client finished, rounded half-up."""
    if not workouts:
        return 0
    finished = sum(1 for w in workouts if w.client_status == WorkoutStatus.FINISHED)
    return int(_round_half_up(Decimal(finished * 100) / len(workouts)))


def _active_workouts(db: Session, window: Period) -> list[Workout]:
    return (
        db.query(Workout)
        .filter(
            Workout.date >= window.start,
            Workout.date <= window.end,
            Workout.coach_status != WorkoutStatus.CANCELLED,
            Workout.client_status != WorkoutStatus.CANCELLED,
        )
        .order_by(Workout.date, Workout.time, Workout.created_at)
        .all()
    )


def _ratings_by_workout(
    db: Session, workout_ids: Iterable[uuid.UUID]
) -> dict[uuid.UUID, list[int]]:
    ids = list(workout_ids)
    out: dict[uuid.UUID, list[int]] = defaultdict(list)
    if not ids:
        return out
    rows = db.query(Feedback.workout_id, Feedback.rating).filter(
        Feedback.workout_id.in_(ids)
    )
    for workout_id, rating in rows:
        out[workout_id].append(rating)
    return out


def _collect(
    workouts: Iterable[Workout], ratings: dict[uuid.UUID, list[int]]
) -> list[int]:
    return [r for w in workouts for r in ratings.get(w.id, [])]


def coach_performance(
    db: Session, current: Period, previous: Period
) -> list[CoachPerformance]:
    workouts = _active_workouts(db, Period(previous.start, current.end))
    ratings = _ratings_by_workout(db, (w.id for w in workouts))

    by_coach: dict[uuid.UUID, dict[str, list[Workout]]] = defaultdict(
        lambda: {"current": [], "previous": []}
    )
    for w in workouts:
        if current.contains(w.date):
            by_coach[w.coach_id]["current"].append(w)
        elif previous.contains(w.date):
            by_coach[w.coach_id]["previous"].append(w)

    rows: list[CoachPerformance] = []
    coaches = db.query(Coach).order_by(Coach.last_name, Coach.first_name).all()
    for coach in coaches:
        bucket = by_coach.get(coach.id, {"current": [], "previous": []})
        cur_stats = rating_stats(_collect(bucket["current"], ratings))
        prev_stats = rating_stats(_collect(bucket["previous"], ratings))
        rows.append(
            CoachPerformance(
                gym_location=settings.GYM_LOCATION,
                coach_name=coach.full_name,
                email=coach.email or "",
                report_period_start=format_date(current.start),
                report_period_end=format_date(current.end),
                no_of_workouts=len(bucket["current"]),
                workouts_percent_change=percentage_change(
                    len(bucket["previous"]), len(bucket["current"])
                ),
                average_feedback=cur_stats.average,
                min_feedback=cur_stats.minimum,
                min_feedback_percent_change=percentage_change(
                    prev_stats.minimum, cur_stats.minimum
                ),
            )
        )
    return rows


def sales_statistics(
    db: Session, current: Period, previous: Period
) -> list[SalesStatistics]:
    workouts = _active_workouts(db, Period(previous.start, current.end))
    ratings = _ratings_by_workout(db, (w.id for w in workouts))

    # dict preserva a ordem em que cada tipo aparece no período atual
    current_by_type: dict[str, list[Workout]] = {}
    previous_by_type: dict[str, list[Workout]] = defaultdict(list)
    for w in workouts:
        if current.contains(w.date):
            current_by_type.setdefault(w.type, []).append(w)
        elif previous.contains(w.date):
            previous_by_type[w.type].append(w)

    rows: list[SalesStatistics] = []
    for workout_type, cur in current_by_type.items():
        prev = previous_by_type.get(workout_type, [])
        cur_rate, prev_rate = attendance_rate(cur), attendance_rate(prev)
        cur_stats = rating_stats(_collect(cur, ratings))
        prev_stats = rating_stats(_collect(prev, ratings))
        rows.append(
            SalesStatistics(
                gym_location=settings.GYM_LOCATION,
                workout_type=workout_type,
                report_period_start=format_date(current.start),
                report_period_end=format_date(current.end),
                workouts_lead_within_reporting_period=len(cur),
                clients_attendance_rate=f"{cur_rate}%",
                delta_of_clients_attendance=percentage_change(prev_rate, cur_rate),
                average_feedback=cur_stats.average,
                minimum_feedback=cur_stats.minimum,
                delta_of_minimum_feedback=percentage_change(
                    prev_stats.minimum, cur_stats.minimum
                ),
            )
        )
    return rows


def generate_report(
    db: Session, report_type: str | ReportType, start: str | date, end: str | date
) -> Result[list[CoachPerformance] | list[SalesStatistics]]:
    try:
        kind = ReportType(report_type)
    except ValueError:
        return invalid("invalid_report_type", "Invalid report type. Use 'coach' or 'sales'")

    try:
        start_d = start if isinstance(start, date) else parse_report_date(start)
        end_d = end if isinstance(end, date) else parse_report_date(end)
    except ValueError:
        return invalid("invalid_date_format", "Dates must be in DD-MM-YYYY format")
    if start_d > end_d:
        return invalid("invalid_date_range", "startDate must not be after endDate")

    current = Period(start_d, end_d)
    previous = previous_period(start_d, end_d)
    if kind == ReportType.COACH:
        rows = coach_performance(db, current, previous)
    else:
        rows = sales_statistics(db, current, previous)

    get_logger().info(
        "report.generated",
        type=kind.value,
        start=format_date(start_d),
        end=format_date(end_d),
        rows=len(rows),
    )
    return Ok(rows)
