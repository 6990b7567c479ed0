"""Free (coach, date, time) slots: a fixed daily template minus booked and
already-started slots."""

from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy.orm import Session

from gymbook.core.errors import Ok, Result, conflict, invalid, not_found
from gymbook.core.logging import get_logger
from gymbook.models.coach import Coach
from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.utils.dates import normalize_time, parse_date, parse_time
from gymbook.utils.tz import combine_local, gym_tz, now_local

# 13 sessões de uma hora, 08:00 .. 20:00
SLOT_TEMPLATE: tuple[str, ...] = tuple(f"{h:02d}:00" for h in range(8, 21))

_ALL = {None, "", "all"}


@dataclass
class CoachSlots:
    coach: Coach
    date: date
    slots: list[str] = field(default_factory=list)
    selected_time: str | None = None


def upcoming_template_slots(day: date, now: datetime) -> list[str]:
    """Template slots on ``day`` that start strictly after ``now``."""
    tz = now.tzinfo
    return [s for s in SLOT_TEMPLATE if combine_local(day, parse_time(s), tz) > now]


def booked_times(
    db: Session, day: date, coach_ids: list[uuid.UUID] | None = None
) -> dict[uuid.UUID, set[str]]:
    """Times held by non-cancelled workouts on ``day``, per coach."""
    q = db.query(Workout.coach_id, Workout.time).filter(
        Workout.date == day,
        Workout.coach_status != WorkoutStatus.CANCELLED,
        Workout.client_status != WorkoutStatus.CANCELLED,
    )
    if coach_ids is not None:
        q = q.filter(Workout.coach_id.in_(coach_ids))
    out: dict[uuid.UUID, set[str]] = defaultdict(set)
    for coach_id, t in q.all():
        out[coach_id].add(t)
    return out


def _coerce_coach_id(value: uuid.UUID | str | None) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    if value in _ALL:
        return None
    return uuid.UUID(str(value))


def find_available_slots(
    db: Session,
    date_str: str,
    *,
    coach_id: uuid.UUID | str | None = None,
    workout_type: str | None = None,
    time: str | None = None,
    now: datetime | None = None,
) -> Result[list[CoachSlots]]:
    """
    Free slots per coach on ``date_str`` (DD-MM-YYYY, gym wall clock).

    ``coach_id`` None/"all" fans out over every coach of ``workout_type``; only
    coaches with something free are returned. With ``time`` the query becomes
    a single-slot check for that hour.
    """
    try:
        day = parse_date(date_str)
    except ValueError:
        return invalid("invalid_date_format", "Date must be in DD-MM-YYYY format")

    tz = gym_tz()
    now = now.astimezone(tz) if now else now_local(tz)
    today = now.date()
    if day < today:
        return invalid("date_in_past", "Cannot book workouts for past dates")

    requested: str | None = None
    if time:
        try:
            requested = normalize_time(time)
        except ValueError:
            return invalid("invalid_time_format", "Time must be in HH:MM 24-hour format")
        if requested not in SLOT_TEMPLATE:
            return invalid(
                "slot_not_offered",
                "Workouts start on the hour between 08:00 and 20:00",
            )

    try:
        single_id = _coerce_coach_id(coach_id)
    except ValueError:
        return invalid("invalid_coach_id", "Invalid coach ID format")

    candidates = upcoming_template_slots(day, now)
    if day == today:
        if requested and requested not in candidates:
            return invalid(
                "slot_in_past", "Cannot book workouts for times that have already passed"
            )
        if not candidates:
            return invalid(
                "no_slots_today",
                "No more available time slots for today. Please try booking for another day.",
            )

    type_filter = None if workout_type in _ALL else workout_type
    if single_id is None:
        q = db.query(Coach)
        if type_filter:
            q = q.filter(Coach.type == type_filter)
        coaches = q.order_by(Coach.last_name, Coach.first_name).all()
    else:
        coach = db.get(Coach, single_id)
        if not coach:
            return not_found("coach_not_found", "Coach not found")
        if type_filter and coach.type != type_filter:
            return invalid(
                "coach_type_mismatch", "Coach type does not match the requested type"
            )
        coaches = [coach]

    booked = booked_times(db, day, [c.id for c in coaches])

    result: list[CoachSlots] = []
    for coach in coaches:
        free = [s for s in candidates if s not in booked.get(coach.id, set())]
        if requested:
            if requested not in free:
                continue
            result.append(
                CoachSlots(
                    coach=coach,
                    date=day,
                    slots=[s for s in free if s != requested],
                    selected_time=requested,
                )
            )
        elif free or single_id is not None:
            result.append(CoachSlots(coach=coach, date=day, slots=free))

    if not result:
        if requested:
            if not coaches:
                return not_found(
                    "no_matching_coach", "There are no coaches matching your criteria"
                )
            return conflict(
                "slot_already_booked", "The requested time is already booked"
            )
        return not_found(
            "no_available_workouts",
            "There are no available time slots for the requested date "
            "or no coaches matching your criteria",
        )

    get_logger().debug(
        "slots.computed",
        date=date_str,
        coaches=len(result),
        requested_time=requested,
    )
    return Ok(result)
