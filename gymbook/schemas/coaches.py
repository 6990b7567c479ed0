from __future__ import annotations

import uuid

from gymbook.models.coach import Coach
from gymbook.schemas.common import CamelModel


class CoachOut(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str | None = None
    title: str | None = None
    about: str | None = None
    type: str
    profile_pic: str | None = None
    rating: float | None = None
    specialization: list[str] = []
    certificates: list[str] = []


class CoachReviewOut(CamelModel):
    id: uuid.UUID
    client_id: uuid.UUID
    message: str
    rating: int
    date: str  # DD-MM-YYYY


class CoachSlotsOut(CamelModel):
    coach_id: uuid.UUID
    date: str
    message: str
    times: list[str]  # "HH:MM"
    available_slots: list[str]  # "8:00-9:00 AM"


class AvailableWorkoutOut(CamelModel):
    coach_id: uuid.UUID
    coach_name: str
    coach_title: str | None = None
    coach_profile_url: str = ""
    rating: float = 0
    type: str
    date: str
    selected_time: str | None = None
    available_slots: list[str]

    @classmethod
    def build(
        cls, coach: Coach, date: str, slots: list[str], selected_time: str | None
    ) -> AvailableWorkoutOut:
        return cls(
            coach_id=coach.id,
            coach_name=coach.full_name,
            coach_title=coach.title,
            coach_profile_url=coach.profile_pic or "",
            rating=coach.rating or 0,
            type=coach.type,
            date=date,
            selected_time=selected_time,
            available_slots=slots,
        )


class UpcomingWorkoutsOut(CamelModel):
    type: str | None = None
    upcoming_workouts: list[str] = []  # "May 7, 01:00 PM"
    message: str | None = None
