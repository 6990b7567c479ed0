from types import SimpleNamespace

from sqlalchemy.exc import IntegrityError

from gymbook.db.integrity import is_unique_violation

SLOT = "ux_workout_coach_slot_active"


class _PgError(Exception):
    def __init__(self, sqlstate, constraint):
        super().__init__(f"duplicate key value violates unique constraint \"{constraint}\"")
        self.sqlstate = sqlstate
        self.diag = SimpleNamespace(constraint_name=constraint)


def _wrap(orig):
    return IntegrityError("INSERT INTO workouts ...", {}, orig)


def test_postgres_matches_constraint_name():
    assert is_unique_violation(_wrap(_PgError("23505", SLOT)), SLOT)
    assert not is_unique_violation(_wrap(_PgError("23505", "uq_other")), SLOT)


def test_postgres_other_integrity_errors_do_not_match():
    assert not is_unique_violation(_wrap(_PgError("23503", SLOT)), SLOT)


def test_sqlite_unique_failure_matches():
    orig = Exception("UNIQUE constraint failed: workouts.coach_id, workouts.date, workouts.time")
    assert is_unique_violation(_wrap(orig), SLOT)


def test_sqlite_not_null_failure_does_not_match():
    orig = Exception("NOT NULL constraint failed: workouts.type")
    assert not is_unique_violation(_wrap(orig), SLOT)
