from __future__ import annotations

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

from gymbook.core.settings import settings


def gym_tz() -> ZoneInfo:
    return ZoneInfo(settings.GYM_TIMEZONE)


def now_local(tz: ZoneInfo | None = None) -> datetime:
    return datetime.now(tz or gym_tz())


def ensure_aware(dt: datetime) -> datetime:
    """
    Garante que dt é timezone-aware.
    - Se vier naive: ERRO (evita comparar relógios diferentes).
    """
    if dt.tzinfo is None:
        raise ValueError("Naive datetime received. Always use timezone-aware datetimes.")
    return dt


def combine_local(d: date, t: time, tz: ZoneInfo | None = None) -> datetime:
    """Wall-clock date+time in the gym timezone, as an aware datetime."""
    tz = tz or gym_tz()
    if t.tzinfo is not None:
        t = time(t.hour, t.minute, t.second, t.microsecond)
    return datetime.combine(d, t).replace(tzinfo=tz)


def hours_until(target: datetime, now: datetime) -> float:
    # mesma tzinfo subtrai relógio de parede; em UTC conta as horas reais
    delta = ensure_aware(target).astimezone(UTC) - ensure_aware(now).astimezone(UTC)
    return delta.total_seconds() / 3600.0


def as_utc(dt: datetime) -> datetime:
    # SQLite devolve DateTime(timezone=True) sem tzinfo; o valor gravado é UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
