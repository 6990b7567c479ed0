from datetime import UTC, date, datetime

import pytest

from gymbook.core.security import Role
from gymbook.models.workout import WorkoutStatus
from gymbook.services import lifecycle

S = WorkoutStatus


def test_transition_table():
    assert lifecycle.can_transition(S.SCHEDULED, S.CANCELLED)
    assert lifecycle.can_transition(S.SCHEDULED, S.WAITING_FOR_FEEDBACK)
    assert lifecycle.can_transition(S.WAITING_FOR_FEEDBACK, S.FINISHED)
    assert not lifecycle.can_transition(S.FINISHED, S.SCHEDULED)
    assert not lifecycle.can_transition(S.CANCELLED, S.FINISHED)
    assert not lifecycle.can_transition(S.WAITING_FOR_FEEDBACK, S.CANCELLED)


def test_finish_passes_through_waiting(make_workout, coach, client_id):
    w = make_workout(coach, client_id, date(2025, 1, 1))
    lifecycle.finish(w, Role.CLIENT)
    assert w.client_status == S.FINISHED
    assert w.coach_status == S.SCHEDULED


def test_illegal_transition_raises(make_workout, coach, client_id):
    w = make_workout(coach, client_id, date(2025, 1, 1), client_status=S.FINISHED)
    with pytest.raises(lifecycle.InvalidTransition) as exc:
        lifecycle.transition(w, Role.CLIENT, S.CANCELLED)
    assert exc.value.current == S.FINISHED


def test_cancel_sets_both_sides(make_workout, coach, client_id):
    w = make_workout(coach, client_id, date(2025, 1, 1))
    lifecycle.cancel(w)
    assert (w.coach_status, w.client_status) == (S.CANCELLED, S.CANCELLED)


def test_booked_workouts_marks_started_ones(db_session, make_workout, coach, client_id):
    past = make_workout(coach, client_id, date(2025, 6, 10), "09:00")
    later = make_workout(coach, client_id, date(2025, 6, 10), "15:00")
    cancelled = make_workout(
        coach,
        client_id,
        date(2025, 6, 9),
        "09:00",
        coach_status=S.CANCELLED,
        client_status=S.CANCELLED,
    )
    now = datetime(2025, 6, 10, 12, 0, tzinfo=UTC)

    workouts, updated = lifecycle.booked_workouts(db_session, Role.CLIENT, client_id, now)

    assert updated == 1
    assert [w.id for w in workouts] == [cancelled.id, past.id, later.id]
    db_session.expire_all()
    assert past.client_status == S.WAITING_FOR_FEEDBACK
    assert past.coach_status == S.SCHEDULED
    assert later.client_status == S.SCHEDULED
    assert cancelled.client_status == S.CANCELLED
