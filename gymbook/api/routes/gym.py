from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gymbook.core.errors import unwrap
from gymbook.db import get_db
from gymbook.schemas.coaches import (
    AvailableWorkoutOut,
    CoachOut,
    CoachReviewOut,
    CoachSlotsOut,
    UpcomingWorkoutsOut,
)
from gymbook.services import coaches as coach_svc
from gymbook.services.availability import find_available_slots
from gymbook.utils.dates import format_date, slot_label
from gymbook.utils.tz import as_utc, gym_tz

router = APIRouter(prefix="/gym/dev", tags=["gym"])


@router.get("/coaches", response_model=list[CoachOut])
def list_coaches(
    type: str | None = Query(None),
    db: Session = Depends(get_db),
):
    return coach_svc.list_coaches(db, type)


@router.get("/coaches/{coach_id}", response_model=CoachOut)
def get_coach(coach_id: uuid.UUID, db: Session = Depends(get_db)):
    return unwrap(coach_svc.get_coach(db, coach_id))


@router.get("/coaches/{coach_id}/feedbacks", response_model=list[CoachReviewOut])
def coach_feedbacks(coach_id: uuid.UUID, db: Session = Depends(get_db)):
    reviews = unwrap(coach_svc.coach_reviews(db, coach_id))
    tz = gym_tz()
    return [
        CoachReviewOut(
            id=fb.id,
            client_id=fb.client_id,
            message=fb.comment,
            rating=fb.rating,
            date=format_date(as_utc(fb.created_at).astimezone(tz).date()),
        )
        for fb in reviews
    ]


@router.get("/coaches/{coach_id}/available-slots/{date}", response_model=CoachSlotsOut)
def coach_available_slots(
    coach_id: uuid.UUID, date: str, db: Session = Depends(get_db)
):
    [entry] = unwrap(find_available_slots(db, date, coach_id=coach_id))
    return CoachSlotsOut(
        coach_id=entry.coach.id,
        date=date,
        message=(
            "Slots available for the selected date"
            if entry.slots
            else "No slots available for the selected date"
        ),
        times=entry.slots,
        available_slots=[slot_label(s) for s in entry.slots],
    )


@router.get(
    "/coaches/{coach_id}/upcoming-workouts/{client_id}",
    response_model=UpcomingWorkoutsOut,
    response_model_exclude_none=True,
)
def coach_upcoming_workouts(
    coach_id: uuid.UUID, client_id: uuid.UUID, db: Session = Depends(get_db)
):
    upcoming = coach_svc.upcoming_workouts(db, coach_id, client_id)
    if not upcoming:
        return UpcomingWorkoutsOut(message="No upcoming workouts booked")
    tz = gym_tz()
    labels = []
    for w in upcoming:
        start = w.starts_at(tz)
        labels.append(f"{start:%b} {start.day}, {start:%I:%M %p}")
    return UpcomingWorkoutsOut(type=upcoming[0].type, upcoming_workouts=labels)


@router.get(
    "/workouts/available",
    response_model=list[AvailableWorkoutOut],
    response_model_exclude_none=True,
)
def available_workouts(
    date: str = Query(..., description="DD-MM-YYYY"),
    type: str | None = Query("all"),
    time: str | None = Query(None, description="HH:MM"),
    coach_id: str | None = Query("all", alias="coachId"),
    db: Session = Depends(get_db),
):
    entries = unwrap(
        find_available_slots(
            db, date, coach_id=coach_id, workout_type=type, time=time
        )
    )
    return [
        AvailableWorkoutOut.build(e.coach, date, e.slots, e.selected_time)
        for e in entries
    ]
