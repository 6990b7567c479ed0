"""Per-role workout status transitions.

Coach and client each observe the same session through their own status
field; both sides follow one transition table.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from gymbook.core.logging import get_logger
from gymbook.core.security import Role
from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.utils.tz import gym_tz, now_local

TRANSITIONS: dict[WorkoutStatus, frozenset[WorkoutStatus]] = {
    WorkoutStatus.SCHEDULED: frozenset(
        {WorkoutStatus.CANCELLED, WorkoutStatus.WAITING_FOR_FEEDBACK}
    ),
    WorkoutStatus.WAITING_FOR_FEEDBACK: frozenset({WorkoutStatus.FINISHED}),
    WorkoutStatus.CANCELLED: frozenset(),
    WorkoutStatus.FINISHED: frozenset(),
}

PARTICIPANT_ROLES = (Role.CLIENT, Role.COACH)


class InvalidTransition(Exception):
    def __init__(self, role: Role, current: WorkoutStatus, target: WorkoutStatus):
        super().__init__(f"{role.value}: {current.value} -> {target.value}")
        self.role = role
        self.current = current
        self.target = target


def can_transition(current: WorkoutStatus, target: WorkoutStatus) -> bool:
    return target in TRANSITIONS[current]


def transition(workout: Workout, role: Role, target: WorkoutStatus) -> None:
    current = workout.status_for(role)
    if not can_transition(current, target):
        raise InvalidTransition(role, current, target)
    workout.set_status_for(role, target)


def finish(workout: Workout, role: Role) -> None:
    """Close the role's side after feedback. A side still Scheduled passes
    through Waiting for feedback first."""
    if workout.status_for(role) == WorkoutStatus.SCHEDULED:
        transition(workout, role, WorkoutStatus.WAITING_FOR_FEEDBACK)
    transition(workout, role, WorkoutStatus.FINISHED)


def cancel(workout: Workout) -> None:
    # cancelamento por qualquer parte encerra a sessão inteira
    for role in PARTICIPANT_ROLES:
        transition(workout, role, WorkoutStatus.CANCELLED)


def mark_past_workouts(
    workouts: Iterable[Workout], role: Role, now: datetime, tz: ZoneInfo
) -> int:
    """Move the role's side of every started workout from Scheduled to
    Waiting for feedback. Returns how many rows changed; caller commits."""
    changed = 0
    for w in workouts:
        if w.status_for(role) != WorkoutStatus.SCHEDULED:
            continue
        if w.is_cancelled:
            continue
        if w.starts_at(tz) < now:
            transition(w, role, WorkoutStatus.WAITING_FOR_FEEDBACK)
            changed += 1
    if changed:
        get_logger().info("workouts.awaiting_feedback", role=role.value, count=changed)
    return changed


def booked_workouts(
    db: Session,
    role: Role,
    participant_id: uuid.UUID,
    now: datetime | None = None,
) -> tuple[list[Workout], int]:
    """A participant's workouts by date and time, with started ones moved to
    Waiting for feedback on that participant's side first."""
    column = Workout.coach_id if role == Role.COACH else Workout.client_id
    workouts = (
        db.query(Workout)
        .filter(column == participant_id)
        .order_by(Workout.date, Workout.time)
        .all()
    )
    tz = gym_tz()
    now = now.astimezone(tz) if now else now_local(tz)
    updated = mark_past_workouts(workouts, role, now, tz)
    if updated:
        db.commit()
    return workouts, updated
