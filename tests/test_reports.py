from datetime import date

import pytest

from gymbook.core.errors import Ok, ServiceError
from gymbook.models.workout import WorkoutStatus
from gymbook.services.reports import (
    attendance_rate,
    generate_report,
    percentage_change,
    previous_period,
    rating_stats,
)

FINISHED = dict(client_status=WorkoutStatus.FINISHED, coach_status=WorkoutStatus.FINISHED)


@pytest.mark.parametrize(
    "old,new,expected",
    [
        (0, 5, "+100%"),
        (0, 0, "0%"),
        (10, 5, "-50%"),
        (10, 15, "+50%"),
        (4, 4, "+0%"),
        (3, 4, "+33%"),
        (8, 9, "+13%"),  # 12.5 arredonda para cima
        (8, 7, "-13%"),  # -12.5 arredonda para longe de zero
    ],
)
def test_percentage_change(old, new, expected):
    assert percentage_change(old, new) == expected


def test_previous_period_has_equal_length():
    prev = previous_period(date(2025, 6, 8), date(2025, 6, 14))
    assert (prev.start, prev.end) == (date(2025, 6, 1), date(2025, 6, 7))


def test_rating_stats_round_half_up():
    assert rating_stats([]).average == 0
    assert rating_stats([4, 5]).average == 4.5
    assert rating_stats([4, 4, 5]).average == 4.3
    assert rating_stats([3, 4, 4, 4]).average == 3.8  # 3.75
    assert rating_stats([3, 5]).minimum == 3


def test_coach_report_period_over_period(db_session, coach, other_coach, client_id, make_workout, make_feedback):
    # atual: 08..14/06, anterior: 01..07/06
    for i, t in enumerate(["08:00", "09:00", "10:00", "11:00"]):
        w = make_workout(coach, client_id, date(2025, 6, 9 + i), t, **FINISHED)
        make_feedback(w, rating=[4, 5, 5, 3][i])
    for t in ["08:00", "09:00"]:
        w = make_workout(coach, client_id, date(2025, 6, 2), t, **FINISHED)
        make_feedback(w, rating=2)
    make_workout(
        coach,
        client_id,
        date(2025, 6, 10),
        "15:00",
        coach_status=WorkoutStatus.CANCELLED,
        client_status=WorkoutStatus.CANCELLED,
    )

    result = generate_report(db_session, "coach", "08-06-2025", "14-06-2025")
    assert isinstance(result, Ok)
    rows = {r.coach_name: r for r in result.value}
    assert set(rows) == {"Kristin Watson", "Ramon Hart"}

    kristin = rows["Kristin Watson"]
    assert kristin.no_of_workouts == 4
    assert kristin.workouts_percent_change == "+100%"
    assert kristin.average_feedback == 4.3  # 17/4 = 4.25
    assert kristin.min_feedback == 3
    assert kristin.min_feedback_percent_change == "+50%"
    assert kristin.report_period_start == "08-06-2025"
    assert kristin.email == "kristin@example.com"

    ramon = rows["Ramon Hart"]
    assert (ramon.no_of_workouts, ramon.workouts_percent_change) == (0, "0%")
    assert ramon.average_feedback == 0


def test_sales_report(db_session, coach, other_coach, client_id, make_workout, make_feedback):
    w1 = make_workout(coach, client_id, date(2025, 6, 9), "08:00", **FINISHED)
    make_workout(coach, client_id, date(2025, 6, 9), "09:00")
    make_workout(coach, client_id, date(2025, 6, 9), "10:00")
    make_workout(other_coach, client_id, date(2025, 6, 10), "08:00", **FINISHED)
    # anterior: Yoga 1/2 finalizados
    make_workout(coach, client_id, date(2025, 6, 3), "08:00", **FINISHED)
    make_workout(coach, client_id, date(2025, 6, 3), "09:00")
    make_feedback(w1, rating=4)

    result = generate_report(db_session, "sales", "08-06-2025", "14-06-2025")
    rows = result.value
    assert [r.workout_type for r in rows] == ["Yoga", "Climbing"]

    yoga = rows[0]
    assert yoga.workouts_lead_within_reporting_period == 3
    assert yoga.clients_attendance_rate == "33%"
    assert yoga.delta_of_clients_attendance == "-34%"  # 50 -> 33
    assert yoga.average_feedback == 4.0
    assert yoga.minimum_feedback == 4
    assert yoga.delta_of_minimum_feedback == "+100%"

    climbing = rows[1]
    assert climbing.clients_attendance_rate == "100%"
    assert climbing.delta_of_clients_attendance == "+100%"


def test_attendance_rate_empty():
    assert attendance_rate([]) == 0


@pytest.mark.parametrize(
    "kind,start,end,code",
    [
        ("weekly", "08-06-2025", "14-06-2025", "invalid_report_type"),
        ("coach", "14-06-2025", "08-06-2025", "invalid_date_range"),
        ("sales", "June 8", "14-06-2025", "invalid_date_format"),
    ],
)
def test_report_input_errors(db_session, kind, start, end, code):
    result = generate_report(db_session, kind, start, end)
    assert isinstance(result, ServiceError)
    assert result.code == code
    assert result.status_code == 400


def test_report_accepts_iso_dates(db_session, coach):
    result = generate_report(db_session, "coach", "2025-06-08", "2025-06-14")
    assert result.value[0].report_period_start == "08-06-2025"
