from __future__ import annotations

from sqlalchemy.exc import IntegrityError

_PG_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError, name: str) -> bool:
    """True when the failed statement broke the unique constraint/index ``name``.

    Postgres reports SQLSTATE 23505 with the constraint name, which must match.
    SQLite only says "UNIQUE constraint failed: <table>.<cols>" without naming
    the index, so any unique failure counts there.
    """
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        if sqlstate != _PG_UNIQUE_VIOLATION:
            return False
        diag = getattr(orig, "diag", None)
        constraint = getattr(diag, "constraint_name", None)
        return constraint is None or constraint == name

    message = str(orig or exc)
    if name in message:
        return True
    return message.startswith("UNIQUE constraint failed")
