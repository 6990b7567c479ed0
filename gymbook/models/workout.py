from __future__ import annotations

import datetime as dt
import enum
import uuid
from zoneinfo import ZoneInfo

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymbook.core.security import Role
from gymbook.db.base_class import Base


class WorkoutStatus(str, enum.Enum):
    SCHEDULED = "Scheduled"
    FINISHED = "Finished"
    CANCELLED = "Cancelled"
    WAITING_FOR_FEEDBACK = "Waiting for feedback"


# enum columns persist member names
_ACTIVE_SLOT = text("coach_status != 'CANCELLED' AND client_status != 'CANCELLED'")


class Workout(Base):
    __tablename__ = "workouts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    coach_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("coaches.id", ondelete="RESTRICT"), nullable=False
    )
    # client accounts live in the auth service
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    type: Mapped[str] = mapped_column(String(60), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)  # "HH:MM"
    coach_status: Mapped[WorkoutStatus] = mapped_column(
        Enum(WorkoutStatus, name="workout_status_enum"),
        nullable=False,
        default=WorkoutStatus.SCHEDULED,
    )
    client_status: Mapped[WorkoutStatus] = mapped_column(
        Enum(WorkoutStatus, name="workout_status_enum"),
        nullable=False,
        default=WorkoutStatus.SCHEDULED,
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
    )

    coach = relationship("Coach")

    __table_args__ = (
        Index(
            "ux_workout_coach_slot_active",
            "coach_id",
            "date",
            "time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT,
            sqlite_where=_ACTIVE_SLOT,
        ),
        Index("ix_workout_coach_id", "coach_id"),
        Index("ix_workout_client_id", "client_id"),
        Index("ix_workout_date", "date"),
    )

    @property
    def is_cancelled(self) -> bool:
        return WorkoutStatus.CANCELLED in (self.coach_status, self.client_status)

    def status_for(self, role: Role) -> WorkoutStatus:
        return self.coach_status if role == Role.COACH else self.client_status

    def set_status_for(self, role: Role, value: WorkoutStatus) -> None:
        if role == Role.COACH:
            self.coach_status = value
        else:
            self.client_status = value

    def starts_at(self, tz: ZoneInfo) -> dt.datetime:
        hours, minutes = map(int, self.time.split(":"))
        return dt.datetime.combine(self.date, dt.time(hours, minutes), tzinfo=tz)
