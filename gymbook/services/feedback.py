"""Post-workout feedback from either participant.

Client feedback carries a 1-5 rating that feeds the reports. Coach feedback
is a free-text note about the client and has no rating.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gymbook.core.errors import (
    Ok,
    Result,
    conflict,
    forbidden,
    not_found,
    unprocessable,
)
from gymbook.core.logging import get_logger
from gymbook.core.security import Role
from gymbook.db.integrity import is_unique_violation
from gymbook.models.feedback import CoachFeedback, Feedback
from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.services import lifecycle
from gymbook.utils.tz import gym_tz, now_local

MIN_RATING = 1
MAX_RATING = 5

_UNIQUE_BY_ROLE = {
    Role.CLIENT: "uq_feedback_workout_client",
    Role.COACH: "uq_coach_feedback_workout_coach",
}


def _participants_match(
    workout: Workout, role: Role, submitter_id: uuid.UUID, counterpart_id: uuid.UUID
) -> bool:
    if role == Role.CLIENT:
        return workout.client_id == submitter_id and workout.coach_id == counterpart_id
    return workout.coach_id == submitter_id and workout.client_id == counterpart_id


def _build(
    role: Role,
    workout: Workout,
    comment: str,
    rating: int | None,
) -> Feedback | CoachFeedback:
    if role == Role.CLIENT:
        return Feedback(
            workout_id=workout.id,
            client_id=workout.client_id,
            coach_id=workout.coach_id,
            comment=comment,
            rating=rating,
        )
    return CoachFeedback(
        workout_id=workout.id,
        client_id=workout.client_id,
        coach_id=workout.coach_id,
        comment=comment,
    )


def submit_feedback(
    db: Session,
    *,
    role: Role,
    workout_id: uuid.UUID,
    submitter_id: uuid.UUID,
    counterpart_id: uuid.UUID,
    comment: str,
    rating: int | None = None,
    now: datetime | None = None,
) -> Result[Feedback | CoachFeedback]:
    if role == Role.CLIENT and (
        rating is None or not MIN_RATING <= rating <= MAX_RATING
    ):
        return unprocessable("invalid_rating", "Rating must be between 1 and 5")

    workout = db.get(Workout, workout_id)
    if workout is None:
        return not_found("workout_not_found", "Workout not found")
    if not _participants_match(workout, role, submitter_id, counterpart_id):
        return forbidden("not_a_participant", "You are not a participant of this workout")
    if workout.status_for(role) == WorkoutStatus.CANCELLED:
        return conflict("workout_cancelled", "Cannot leave feedback for a cancelled workout")

    tz = gym_tz()
    now = now.astimezone(tz) if now else now_local(tz)
    if not workout.starts_at(tz) < now:
        return unprocessable(
            "workout_not_completed",
            "Feedback can only be submitted after the workout has taken place",
        )

    fb = _build(role, workout, comment, rating)
    db.add(fb)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e, _UNIQUE_BY_ROLE[role]):
            return conflict(
                "feedback_already_exists", "Feedback for this workout already exists"
            )
        raise

    try:
        lifecycle.finish(workout, role)
    except lifecycle.InvalidTransition as e:
        db.rollback()
        get_logger().warning(
            "feedback.status_rejected", workout_id=str(workout.id), transition=str(e)
        )
        return conflict(
            "invalid_status", f"Workout cannot be finished from status '{e.current.value}'"
        )

    # feedback e status no mesmo commit
    db.commit()
    db.refresh(fb)
    get_logger().info(
        "feedback.created",
        workout_id=str(workout.id),
        role=role.value,
        rating=rating,
    )
    return Ok(fb)
