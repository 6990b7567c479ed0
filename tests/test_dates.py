from datetime import date, time

import pytest

from gymbook.utils.dates import (
    format_date,
    normalize_time,
    parse_date,
    parse_report_date,
    parse_time,
    slot_label,
)


def test_parse_date_dd_mm_yyyy():
    assert parse_date("07-05-2025") == date(2025, 5, 7)
    assert format_date(date(2025, 5, 7)) == "07-05-2025"


@pytest.mark.parametrize("value", ["2025-05-07", "7-5-2025", "31-02-2025", "", "aa-bb-cccc"])
def test_parse_date_rejects_bad_input(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_parse_report_date_accepts_iso():
    assert parse_report_date("2025-05-07") == date(2025, 5, 7)
    assert parse_report_date("2025-05-07T10:00:00.000Z") == date(2025, 5, 7)
    assert parse_report_date("07-05-2025") == date(2025, 5, 7)
    with pytest.raises(ValueError):
        parse_report_date("May 7")


def test_parse_time_normalises():
    assert parse_time("14:30") == time(14, 30)
    assert normalize_time("9:00") == "09:00"


@pytest.mark.parametrize("value", ["24:00", "12:60", "1200", "", "12:5"])
def test_parse_time_rejects_bad_input(value):
    with pytest.raises(ValueError):
        parse_time(value)


@pytest.mark.parametrize(
    "hhmm,label",
    [
        ("08:00", "8:00-9:00 AM"),
        ("12:00", "12:00-1:00 PM"),
        ("14:00", "2:00-3:00 PM"),
        ("20:00", "8:00-9:00 PM"),
    ],
)
def test_slot_label(hhmm, label):
    assert slot_label(hhmm) == label
