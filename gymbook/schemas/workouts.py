from __future__ import annotations

import uuid

from pydantic import Field

from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.schemas.common import CamelModel
from gymbook.utils.dates import format_date


class BookWorkoutIn(CamelModel):
    coach_id: uuid.UUID
    client_id: uuid.UUID
    type: str = Field(..., min_length=1, max_length=60)
    date: str = Field(..., description="DD-MM-YYYY, gym local date")
    time: str = Field(..., description="HH:MM, 24h")


class WorkoutOut(CamelModel):
    id: uuid.UUID
    coach_id: uuid.UUID
    client_id: uuid.UUID
    type: str
    date: str
    time: str
    coach_status: WorkoutStatus
    client_status: WorkoutStatus

    @classmethod
    def from_model(cls, w: Workout) -> WorkoutOut:
        return cls(
            id=w.id,
            coach_id=w.coach_id,
            client_id=w.client_id,
            type=w.type,
            date=format_date(w.date),
            time=w.time,
            coach_status=w.coach_status,
            client_status=w.client_status,
        )


class WorkoutEnvelope(CamelModel):
    message: str
    workout: WorkoutOut
    toast_message: str


class WorkoutListOut(CamelModel):
    message: str
    count: int
    workouts: list[WorkoutOut]
    updated_count: int = 0
    toast_message: str
