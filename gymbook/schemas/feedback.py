from __future__ import annotations

import uuid

from pydantic import Field

from gymbook.schemas.common import CamelModel


class ClientFeedbackIn(CamelModel):
    workout_id: uuid.UUID
    client_id: uuid.UUID
    coach_id: uuid.UUID
    comment: str = Field(..., min_length=1, max_length=2000)
    rating: int = Field(..., ge=1, le=5)


class CoachFeedbackIn(CamelModel):
    """Coach notes on the client. No rating: only client ratings feed reports."""

    workout_id: uuid.UUID
    coach_id: uuid.UUID
    client_id: uuid.UUID
    comment: str = Field(..., min_length=1, max_length=2000)


class FeedbackOut(CamelModel):
    id: uuid.UUID
    workout_id: uuid.UUID
    client_id: uuid.UUID
    coach_id: uuid.UUID
    comment: str
    rating: int | None = None


class FeedbackEnvelope(CamelModel):
    message: str
    feedback: FeedbackOut
    toast_message: str
