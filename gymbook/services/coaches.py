"""Read side of the coach catalogue (profiles are seeded, not edited here)."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.orm import Session

from gymbook.core.errors import Ok, Result, not_found
from gymbook.models.coach import Coach
from gymbook.models.feedback import Feedback
from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.utils.tz import gym_tz, now_local


def list_coaches(db: Session, workout_type: str | None = None) -> list[Coach]:
    q = db.query(Coach)
    if workout_type:
        q = q.filter(Coach.type == workout_type)
    return q.order_by(Coach.last_name, Coach.first_name).all()


def get_coach(db: Session, coach_id: uuid.UUID) -> Result[Coach]:
    coach = db.get(Coach, coach_id)
    if coach is None:
        return not_found("coach_not_found", "Coach not found")
    return Ok(coach)


def coach_reviews(db: Session, coach_id: uuid.UUID) -> Result[list[Feedback]]:
    """Client feedback left for a coach, newest first."""
    if db.get(Coach, coach_id) is None:
        return not_found("coach_not_found", "Coach not found")
    rows = (
        db.query(Feedback)
        .filter(Feedback.coach_id == coach_id)
        .order_by(Feedback.created_at.desc())
        .all()
    )
    return Ok(rows)


def upcoming_workouts(
    db: Session,
    coach_id: uuid.UUID,
    client_id: uuid.UUID,
    now: datetime | None = None,
) -> list[Workout]:
    """Scheduled sessions between a coach and a client that have not started,
    soonest first."""
    tz = gym_tz()
    now = now.astimezone(tz) if now else now_local(tz)
    rows = (
        db.query(Workout)
        .filter(
            Workout.coach_id == coach_id,
            Workout.client_id == client_id,
            Workout.coach_status == WorkoutStatus.SCHEDULED,
            Workout.client_status == WorkoutStatus.SCHEDULED,
            Workout.date >= now.date(),
        )
        .order_by(Workout.date, Workout.time)
        .all()
    )
    return [w for w in rows if w.starts_at(tz) > now]
