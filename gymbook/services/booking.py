from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gymbook.core.errors import Ok, Result, conflict, not_found, unprocessable
from gymbook.core.logging import get_logger
from gymbook.db.integrity import is_unique_violation
from gymbook.models.coach import Coach
from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.services.availability import SLOT_TEMPLATE
from gymbook.utils.dates import format_time, parse_date, parse_time
from gymbook.utils.tz import combine_local, gym_tz, now_local

SLOT_INDEX = "ux_workout_coach_slot_active"


def book_workout(
    db: Session,
    *,
    coach_id: uuid.UUID,
    client_id: uuid.UUID,
    workout_type: str,
    date: str,
    time: str,
    now: datetime | None = None,
) -> Result[Workout]:
    """
    Cria um workout Scheduled/Scheduled para (coach, date, time).

    There is no availability pre-query: the insert itself is the check, the
    partial unique index on active slots rejects the loser of a race.
    """
    log = get_logger()
    try:
        day = parse_date(date)
    except ValueError:
        return unprocessable("invalid_date_format", "Invalid date format. Use DD-MM-YYYY")
    try:
        hhmm = format_time(parse_time(time))
    except ValueError:
        return unprocessable("invalid_time_format", "Invalid time format. Use HH:MM")
    if hhmm not in SLOT_TEMPLATE:
        return unprocessable(
            "slot_not_offered", "Workouts start on the hour between 08:00 and 20:00"
        )

    tz = gym_tz()
    now = now.astimezone(tz) if now else now_local(tz)
    if combine_local(day, parse_time(hhmm), tz) <= now:
        return unprocessable("booking_in_past", "Cannot book a workout in the past")

    if db.get(Coach, coach_id) is None:
        return not_found("coach_not_found", "Coach not found")

    workout = Workout(
        coach_id=coach_id,
        client_id=client_id,
        type=workout_type,
        date=day,
        time=hhmm,
        coach_status=WorkoutStatus.SCHEDULED,
        client_status=WorkoutStatus.SCHEDULED,
    )
    db.add(workout)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e, SLOT_INDEX):
            log.info(
                "booking.conflict",
                coach_id=str(coach_id),
                date=date,
                time=hhmm,
            )
            return conflict(
                "slot_already_booked",
                "This time slot is already booked. Please choose another time.",
            )
        raise

    db.refresh(workout)
    log.info(
        "booking.created",
        workout_id=str(workout.id),
        coach_id=str(coach_id),
        client_id=str(client_id),
        date=date,
        time=hhmm,
    )
    return Ok(workout)
