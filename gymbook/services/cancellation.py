from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.orm import Session

from gymbook.core.errors import Ok, Result, conflict, forbidden, not_found
from gymbook.core.logging import get_logger
from gymbook.core.security import Role
from gymbook.models.workout import Workout
from gymbook.services import lifecycle
from gymbook.utils.tz import gym_tz, hours_until, now_local

CANCELLATION_CUTOFF_HOURS = 24


def is_participant(workout: Workout, role: Role, actor_id: uuid.UUID) -> bool:
    if role == Role.COACH:
        return workout.coach_id == actor_id
    return workout.client_id == actor_id


def cancel_workout(
    db: Session,
    workout_id: uuid.UUID,
    actor: Role,
    *,
    actor_id: uuid.UUID | None = None,
    now: datetime | None = None,
) -> Result[Workout]:
    """Cancel both sides of a workout at least 24h before it starts.

    Exactly 24h remaining is still allowed; anything less is refused.
    """
    workout = db.get(Workout, workout_id)
    if workout is None:
        return not_found("workout_not_found", "Workout not found")
    if workout.is_cancelled:
        return conflict("already_cancelled", "Workout is already cancelled")
    if actor_id is not None and not is_participant(workout, actor, actor_id):
        return forbidden("not_a_participant", "You are not a participant of this workout")

    tz = gym_tz()
    now = now.astimezone(tz) if now else now_local(tz)
    remaining = hours_until(workout.starts_at(tz), now)
    if remaining < CANCELLATION_CUTOFF_HOURS:
        return conflict(
            "cancellation_window_closed",
            "Workouts can only be cancelled at least 24 hours in advance",
        )

    lifecycle.cancel(workout)
    db.commit()
    db.refresh(workout)
    get_logger().info(
        "workout.cancelled",
        workout_id=str(workout.id),
        by=actor.value,
        hours_remaining=round(remaining, 2),
    )
    return Ok(workout)
