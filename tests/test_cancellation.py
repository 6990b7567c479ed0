import uuid
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from gymbook.core.errors import Ok, ServiceError
from gymbook.core.security import Role
from gymbook.core.settings import settings
from gymbook.models.workout import WorkoutStatus
from gymbook.services.availability import find_available_slots
from gymbook.services.cancellation import cancel_workout

STARTS = datetime(2025, 6, 12, 10, 0, tzinfo=UTC)


def _workout(make_workout, coach, client_id):
    return make_workout(coach, client_id, date(2025, 6, 12), "10:00")


def test_cancel_with_23h59_left_fails(db_session, make_workout, coach, client_id):
    w = _workout(make_workout, coach, client_id)
    now = STARTS - timedelta(hours=23, minutes=59)
    result = cancel_workout(db_session, w.id, Role.CLIENT, actor_id=client_id, now=now)
    assert isinstance(result, ServiceError)
    assert result.code == "cancellation_window_closed"
    assert result.status_code == 409
    db_session.refresh(w)
    assert w.client_status == WorkoutStatus.SCHEDULED


def test_cancel_with_exactly_24h_left_succeeds(db_session, make_workout, coach, client_id):
    w = _workout(make_workout, coach, client_id)
    now = STARTS - timedelta(hours=24)
    result = cancel_workout(db_session, w.id, Role.CLIENT, actor_id=client_id, now=now)
    assert isinstance(result, Ok)
    assert result.value.client_status == WorkoutStatus.CANCELLED
    assert result.value.coach_status == WorkoutStatus.CANCELLED


def test_cutoff_counts_real_hours_across_dst(monkeypatch, db_session, make_workout, coach, client_id):
    # 28 -> 29 de março de 2026: Kyiv adianta o relógio uma hora
    monkeypatch.setattr(settings, "GYM_TIMEZONE", "Europe/Kyiv")
    kyiv = ZoneInfo("Europe/Kyiv")
    w = make_workout(coach, client_id, date(2026, 3, 29), "10:00")

    same_wall_time = datetime(2026, 3, 28, 10, 0, tzinfo=kyiv)
    result = cancel_workout(db_session, w.id, Role.CLIENT, actor_id=client_id, now=same_wall_time)
    assert isinstance(result, ServiceError)
    assert result.code == "cancellation_window_closed"

    a_real_day_before = datetime(2026, 3, 28, 9, 0, tzinfo=kyiv)
    result = cancel_workout(db_session, w.id, Role.CLIENT, actor_id=client_id, now=a_real_day_before)
    assert isinstance(result, Ok)


def test_coach_can_cancel_own_workout(db_session, make_workout, coach, client_id):
    w = _workout(make_workout, coach, client_id)
    result = cancel_workout(
        db_session, w.id, Role.COACH, actor_id=coach.id, now=STARTS - timedelta(days=2)
    )
    assert isinstance(result, Ok)


def test_cancel_twice_conflicts(db_session, make_workout, coach, client_id):
    w = _workout(make_workout, coach, client_id)
    now = STARTS - timedelta(days=2)
    assert isinstance(cancel_workout(db_session, w.id, Role.CLIENT, now=now), Ok)
    again = cancel_workout(db_session, w.id, Role.CLIENT, now=now)
    assert isinstance(again, ServiceError)
    assert again.code == "already_cancelled"


def test_unknown_workout(db_session):
    result = cancel_workout(db_session, uuid.uuid4(), Role.CLIENT)
    assert isinstance(result, ServiceError)
    assert result.status_code == 404


def test_stranger_cannot_cancel(db_session, make_workout, coach, client_id):
    w = _workout(make_workout, coach, client_id)
    result = cancel_workout(
        db_session, w.id, Role.CLIENT, actor_id=uuid.uuid4(), now=STARTS - timedelta(days=2)
    )
    assert isinstance(result, ServiceError)
    assert result.code == "not_a_participant"
    assert result.status_code == 403


def test_cancelled_slot_shows_up_as_free_again(db_session, make_workout, coach, client_id):
    w = _workout(make_workout, coach, client_id)
    now = STARTS - timedelta(days=2)
    before = find_available_slots(db_session, "12-06-2025", coach_id=coach.id, now=now)
    assert "10:00" not in before.value[0].slots

    cancel_workout(db_session, w.id, Role.CLIENT, actor_id=client_id, now=now)

    after = find_available_slots(db_session, "12-06-2025", coach_id=coach.id, now=now)
    assert "10:00" in after.value[0].slots
