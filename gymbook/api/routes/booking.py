"""Booking surface for both participants.

Clients book, cancel and review under ``/client``; coaches list, cancel and
leave notes under ``/coaches-page``. Each side acts only on its own id.
"""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gymbook.core.errors import forbidden, raise_for_error, unwrap
from gymbook.core.security import Role
from gymbook.db import get_db
from gymbook.deps import Actor, require_roles
from gymbook.schemas.common import ErrorOut
from gymbook.schemas.feedback import (
    ClientFeedbackIn,
    CoachFeedbackIn,
    FeedbackEnvelope,
    FeedbackOut,
)
from gymbook.schemas.workouts import (
    BookWorkoutIn,
    WorkoutEnvelope,
    WorkoutListOut,
    WorkoutOut,
)
from gymbook.services.booking import book_workout
from gymbook.services.cancellation import cancel_workout
from gymbook.services.feedback import submit_feedback
from gymbook.services.lifecycle import booked_workouts

client_router = APIRouter(prefix="/booking/dev/client", tags=["booking:client"])
coach_router = APIRouter(prefix="/booking/dev/coaches-page", tags=["booking:coach"])

ClientActor = Annotated[Actor, Depends(require_roles(Role.CLIENT))]
CoachActor = Annotated[Actor, Depends(require_roles(Role.COACH))]

_ERRORS = {
    400: {"model": ErrorOut},
    403: {"model": ErrorOut},
    404: {"model": ErrorOut},
    409: {"model": ErrorOut},
    422: {"model": ErrorOut},
}


def _ensure_self(actor: Actor, claimed: uuid.UUID) -> None:
    if actor.id != claimed:
        raise_for_error(
            forbidden("not_a_participant", "You can only act on your own workouts")
        )


def _list(db: Session, actor: Actor) -> WorkoutListOut:
    workouts, updated = booked_workouts(db, actor.role, actor.id)
    return WorkoutListOut(
        message="Workouts retrieved successfully",
        count=len(workouts),
        workouts=[WorkoutOut.from_model(w) for w in workouts],
        updated_count=updated,
        toast_message="Workouts loaded successfully",
    )


def _cancel(db: Session, actor: Actor, workout_id: uuid.UUID) -> WorkoutEnvelope:
    workout = unwrap(cancel_workout(db, workout_id, actor.role, actor_id=actor.id))
    return WorkoutEnvelope(
        message="Workout successfully cancelled",
        workout=WorkoutOut.from_model(workout),
        toast_message="Workout has been successfully cancelled",
    )


def _feedback_envelope(fb) -> FeedbackEnvelope:
    return FeedbackEnvelope(
        message="Feedback submitted successfully",
        feedback=FeedbackOut(
            id=fb.id,
            workout_id=fb.workout_id,
            client_id=fb.client_id,
            coach_id=fb.coach_id,
            comment=fb.comment,
            rating=getattr(fb, "rating", None),
        ),
        toast_message="Thank you for your feedback",
    )


# ---------- client ----------


@client_router.post(
    "/workouts",
    response_model=WorkoutEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
def create_workout(
    payload: BookWorkoutIn,
    actor: ClientActor,
    db: Session = Depends(get_db),
):
    _ensure_self(actor, payload.client_id)
    workout = unwrap(
        book_workout(
            db,
            coach_id=payload.coach_id,
            client_id=payload.client_id,
            workout_type=payload.type,
            date=payload.date,
            time=payload.time,
        )
    )
    return WorkoutEnvelope(
        message="Workout successfully booked",
        workout=WorkoutOut.from_model(workout),
        toast_message="Your workout has been successfully booked",
    )


@client_router.get("/workouts/booked", response_model=WorkoutListOut)
def client_booked_workouts(actor: ClientActor, db: Session = Depends(get_db)):
    return _list(db, actor)


@client_router.patch(
    "/workouts/{workout_id}", response_model=WorkoutEnvelope, responses=_ERRORS
)
def client_cancel_workout(
    workout_id: uuid.UUID, actor: ClientActor, db: Session = Depends(get_db)
):
    return _cancel(db, actor, workout_id)


@client_router.post(
    "/feedbacks",
    response_model=FeedbackEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
def client_feedback(
    payload: ClientFeedbackIn, actor: ClientActor, db: Session = Depends(get_db)
):
    _ensure_self(actor, payload.client_id)
    fb = unwrap(
        submit_feedback(
            db,
            role=Role.CLIENT,
            workout_id=payload.workout_id,
            submitter_id=payload.client_id,
            counterpart_id=payload.coach_id,
            comment=payload.comment,
            rating=payload.rating,
        )
    )
    return _feedback_envelope(fb)


# ---------- coach ----------


@coach_router.get("/workouts/booked", response_model=WorkoutListOut)
def coach_booked_workouts(actor: CoachActor, db: Session = Depends(get_db)):
    return _list(db, actor)


@coach_router.patch(
    "/workouts/{workout_id}", response_model=WorkoutEnvelope, responses=_ERRORS
)
def coach_cancel_workout(
    workout_id: uuid.UUID, actor: CoachActor, db: Session = Depends(get_db)
):
    return _cancel(db, actor, workout_id)


@coach_router.post(
    "/feedbacks",
    response_model=FeedbackEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
def coach_feedback(
    payload: CoachFeedbackIn, actor: CoachActor, db: Session = Depends(get_db)
):
    _ensure_self(actor, payload.coach_id)
    fb = unwrap(
        submit_feedback(
            db,
            role=Role.COACH,
            workout_id=payload.workout_id,
            submitter_id=payload.coach_id,
            counterpart_id=payload.client_id,
            comment=payload.comment,
        )
    )
    return _feedback_envelope(fb)
