import os
import sys

# Add the current directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# settings é instanciado no import; fixa o ambiente de teste antes
os.environ["GYM_TIMEZONE"] = "UTC"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["REPORTS_REQUIRE_ADMIN"] = "true"
os.environ["JWT_SECRET"] = "test-secret"

import uuid
from datetime import date, timedelta

import pytest
from sqlalchemy.pool import StaticPool

import gymbook.db.base  # noqa: F401
from gymbook.core.security import Role, create_access_token
from gymbook.db import Database
from gymbook.db.base_class import Base
from gymbook.models.coach import Coach
from gymbook.models.feedback import Feedback
from gymbook.models.workout import Workout, WorkoutStatus
from gymbook.utils.tz import gym_tz, now_local


@pytest.fixture
def database():
    """Fresh in-memory SQLite database per test."""
    db = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=db.engine)
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(database):
    from gymbook.main import create_app

    return create_app(database)


@pytest.fixture
def client(app):
    """Create a test client for API tests."""
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        yield client


def _coach(db_session, **kw) -> Coach:
    coach = Coach(**kw)
    db_session.add(coach)
    db_session.commit()
    db_session.refresh(coach)
    return coach


@pytest.fixture
def coach(db_session):
    return _coach(
        db_session,
        first_name="Kristin",
        last_name="Watson",
        email="kristin@example.com",
        title="Yoga coach",
        type="Yoga",
        rating=4.9,
        specialization=["Yoga"],
        certificates=[],
    )


@pytest.fixture
def other_coach(db_session):
    return _coach(
        db_session,
        first_name="Ramon",
        last_name="Hart",
        email="ramon@example.com",
        title="Climbing coach",
        type="Climbing",
        rating=4.5,
        specialization=["Climbing"],
        certificates=[],
    )


@pytest.fixture
def client_id():
    return uuid.uuid4()


@pytest.fixture
def make_workout(db_session):
    """Insert a workout directly, bypassing the booking rules."""

    def _make(
        coach,
        client_id,
        day: date,
        time: str = "10:00",
        *,
        type: str | None = None,
        coach_status: WorkoutStatus = WorkoutStatus.SCHEDULED,
        client_status: WorkoutStatus = WorkoutStatus.SCHEDULED,
    ) -> Workout:
        w = Workout(
            coach_id=coach.id,
            client_id=client_id,
            type=type or coach.type,
            date=day,
            time=time,
            coach_status=coach_status,
            client_status=client_status,
        )
        db_session.add(w)
        db_session.commit()
        db_session.refresh(w)
        return w

    return _make


@pytest.fixture
def make_feedback(db_session):
    def _make(workout: Workout, rating: int, comment: str = "ok") -> Feedback:
        fb = Feedback(
            workout_id=workout.id,
            client_id=workout.client_id,
            coach_id=workout.coach_id,
            rating=rating,
            comment=comment,
        )
        db_session.add(fb)
        db_session.commit()
        return fb

    return _make


@pytest.fixture
def today():
    return now_local(gym_tz()).date()


@pytest.fixture
def future_day(today):
    return today + timedelta(days=3)


def auth_header(sub, role: Role) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(sub), role)}"}


@pytest.fixture
def client_headers(client_id):
    return auth_header(client_id, Role.CLIENT)


@pytest.fixture
def coach_headers(coach):
    return auth_header(coach.id, Role.COACH)


@pytest.fixture
def admin_headers():
    return auth_header("admin@example.com", Role.ADMIN)


@pytest.fixture
def make_headers():
    return auth_header
