from __future__ import annotations

import enum

from gymbook.schemas.common import CamelModel


class ReportType(str, enum.Enum):
    COACH = "coach"
    SALES = "sales"


class CoachPerformance(CamelModel):
    gym_location: str
    coach_name: str
    email: str
    report_period_start: str  # DD-MM-YYYY
    report_period_end: str
    no_of_workouts: int
    workouts_percent_change: str
    average_feedback: float
    min_feedback: int
    min_feedback_percent_change: str


class SalesStatistics(CamelModel):
    gym_location: str
    workout_type: str
    report_period_start: str
    report_period_end: str
    workouts_lead_within_reporting_period: int
    clients_attendance_rate: str  # "NN%"
    delta_of_clients_attendance: str
    average_feedback: float
    minimum_feedback: int
    delta_of_minimum_feedback: str


class ReportOut(CamelModel):
    success: bool = True
    data: list[CoachPerformance] | list[SalesStatistics]


class WeeklyRunOut(CamelModel):
    status: str  # sent | skipped
    key: str
    period_start: str
    period_end: str
    emails_sent: int = 0
