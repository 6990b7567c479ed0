"""DD-MM-YYYY / HH:MM parsing shared by the booking and report endpoints."""

from __future__ import annotations

import re
from datetime import date, datetime, time

DATE_FORMAT = "%d-%m-%Y"

_DATE_RE = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def parse_date(value: str) -> date:
    """Parse a DD-MM-YYYY string. Raises ValueError on bad shape or calendar date."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError("Date must be in DD-MM-YYYY format")
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_report_date(value: str) -> date:
    # aceita DD-MM-YYYY e ISO (YYYY-MM-DD ou datetime ISO completo)
    if _DATE_RE.match(value or ""):
        return parse_date(value)
    if _ISO_DATE_RE.match(value or ""):
        return date.fromisoformat(value[:10])
    raise ValueError("Date must be in DD-MM-YYYY or YYYY-MM-DD format")


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def parse_time(value: str) -> time:
    """Parse a 24-hour HH:MM string (single-digit hour tolerated)."""
    m = _TIME_RE.match(value or "")
    if not m:
        raise ValueError("Time must be in HH:MM 24-hour format")
    return time(int(m.group(1)), int(m.group(2)))


def format_time(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def normalize_time(value: str) -> str:
    return format_time(parse_time(value))


def slot_label(hhmm: str) -> str:
    """Label a one-hour slot: "14:00" -> "2:00-3:00 PM"."""
    start_hour = int(hhmm.split(":")[0])

    def _h12(h: int) -> int:
        return 12 if h % 12 == 0 else h % 12

    period = "PM" if start_hour >= 12 else "AM"
    return f"{_h12(start_hour)}:00-{_h12(start_hour + 1)}:00 {period}"
