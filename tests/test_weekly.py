from datetime import date
from decimal import Decimal

import pytest

from teamcap.config import get_settings
from teamcap.engine.errors import InvalidArgumentError
from teamcap.engine.weekly import WeeklyAvailabilityMatrix
from teamcap.schemas.availability import DailyAttendanceDay, Week
from teamcap.schemas.iteration import Iteration


@pytest.fixture
def matrix():
    return WeeklyAvailabilityMatrix()


@pytest.fixture
def four_week_iteration():
    return Iteration(id=3, name="Long", start_date=date(2024, 3, 4), end_date=date(2024, 3, 29), weeks_count=4)


def test_generate_weeks_from_date_range(matrix, two_week_iteration):
    weeks = matrix.generate_weeks(two_week_iteration)
    assert [w.week_index for w in weeks] == [1, 2]
    assert weeks[0].week_start == date(2024, 3, 4)
    assert weeks[0].week_end == date(2024, 3, 10)
    assert weeks[1].week_start == date(2024, 3, 11)


def test_declared_weeks_count_wins(matrix):
    it = Iteration(start_date=date(2024, 3, 4), end_date=date(2024, 3, 8), weeks_count=3)
    assert len(matrix.generate_weeks(it)) == 3


def test_days_present_rounds_half_up(matrix):
    assert matrix.days_present(80) == 4
    assert matrix.days_present(50) == 3
    assert matrix.days_present(30) == 2
    assert matrix.days_present(0) == 0
    assert matrix.days_present(100, 4) == 4


def test_member_rollup_skips_weeks_without_rows(matrix, four_week_iteration):
    weeks = matrix.generate_weeks(four_week_iteration)
    rows = [matrix.build_row(2, 7, 80), matrix.build_row(3, 7, 60), matrix.build_row(1, 8, 10)]

    rollup = matrix.rollup_member_across_weeks(7, weeks, rows)

    assert rollup.weeks_counted == 2
    assert rollup.avg_availability_percent == Decimal(70)
    assert rollup.total_days_present == 7
    assert rollup.total_days_total == 10


def test_member_rollup_without_rows(matrix, four_week_iteration):
    rollup = matrix.rollup_member_across_weeks(7, matrix.generate_weeks(four_week_iteration), [])
    assert rollup.weeks_counted == 0
    assert rollup.avg_availability_percent == Decimal(0)


def test_week_rollup(matrix):
    week = Week(week_index=1, week_start=date(2024, 3, 4), week_end=date(2024, 3, 10))
    rows = [matrix.build_row(1, 1, 80), matrix.build_row(1, 2, 60), matrix.build_row(2, 1, 10)]

    rollup = matrix.rollup_week(week, rows)

    assert rollup.week_capacity_sum == Decimal(140)
    assert rollup.week_avg_availability == Decimal(70)
    assert rollup.member_count == 2
    assert (rollup.days_present, rollup.days_total) == (7, 10)


def test_empty_week_reports_full_availability(matrix):
    week = Week(week_index=2, week_start=date(2024, 3, 11), week_end=date(2024, 3, 17))
    rollup = matrix.rollup_week(week, [])
    assert rollup.week_avg_availability == Decimal(100)
    assert rollup.week_capacity_sum == Decimal(0)
    assert rollup.member_count == 0


def test_iteration_rollup_averages_member_averages(matrix, four_week_iteration):
    weeks = matrix.generate_weeks(four_week_iteration)
    rows = [
        matrix.build_row(1, 1, 100),
        matrix.build_row(2, 1, 80),
        matrix.build_row(1, 2, 60),
    ]

    rollup = matrix.iteration_rollup(four_week_iteration, weeks, rows, [1, 2, 3], team_name="Core")

    # member 1 averages 90, member 2 averages 60, member 3 has no rows
    assert rollup.avg_availability == Decimal(75)
    assert rollup.total_members == 3
    assert rollup.total_capacity == Decimal(240)
    assert rollup.weeks_with_data == 2
    assert rollup.team_name == "Core"


def test_iteration_rollup_without_rows_uses_default(matrix, two_week_iteration):
    weeks = matrix.generate_weeks(two_week_iteration)
    rollup = matrix.iteration_rollup(two_week_iteration, weeks, [], [1, 2])
    assert rollup.avg_availability == Decimal(100)
    assert rollup.weeks_with_data == 0


def test_default_grid_uses_configured_availability(two_week_iteration):
    settings = get_settings().model_copy(update={"default_availability_percent": 80.0})
    matrix = WeeklyAvailabilityMatrix(settings)
    grid = matrix.default_grid(matrix.generate_weeks(two_week_iteration), [1, 2])
    assert len(grid) == 4
    assert {r.availability_percent for r in grid} == {Decimal(80)}
    assert {r.days_present for r in grid} == {4}


def test_default_daily_attendance_marks_weekdays_present(matrix):
    week = Week(week_index=1, week_start=date(2024, 3, 4), week_end=date(2024, 3, 10))
    days = matrix.default_daily_attendance(week)
    assert [d.day for d in days] == [date(2024, 3, d) for d in range(4, 9)]
    assert {d.status for d in days} == {"P"}


def _marks(*statuses):
    return [DailyAttendanceDay(day=date(2024, 3, 4 + i), status=s) for i, s in enumerate(statuses)]


def test_attendance_percent(matrix):
    assert matrix.attendance_percent(_marks("P", "P", "P", "A", "A")) == Decimal(60)
    assert matrix.attendance_percent(_marks("P", "P", "A")) == Decimal(67)
    assert matrix.attendance_percent([]) == Decimal(100)


def test_row_from_daily(matrix):
    row = matrix.row_from_daily(1, 9, _marks("P", "A", "P", "P", "A"))
    assert row.availability_percent == Decimal(60)
    assert row.days_present == 3
    assert row.days_total == 5


def test_row_from_daily_override_keeps_day_counts(matrix):
    row = matrix.row_from_daily(1, 9, _marks("P", "A", "P", "P", "A"), override_percent=90)
    assert row.availability_percent == Decimal(90)
    assert row.days_present == 3


def test_iteration_rollup_carries_team_id(matrix, two_week_iteration):
    it = two_week_iteration.model_copy(update={"team_id": 6})
    rollup = matrix.iteration_rollup(it, matrix.generate_weeks(it), [], [])
    assert rollup.team_id == 6


def test_check_daily_marks_accepts_distinct_weekdays(matrix):
    week = Week(week_index=1, week_start=date(2024, 3, 4), week_end=date(2024, 3, 10))
    matrix.check_daily_marks(week, _marks("P", "A", "P", "P", "A"))


def test_check_daily_marks_rejects_repeated_day(matrix):
    week = Week(week_index=1, week_start=date(2024, 3, 4), week_end=date(2024, 3, 10))
    days = [DailyAttendanceDay(day=date(2024, 3, 4), status="P"), DailyAttendanceDay(day=date(2024, 3, 4), status="A")]
    with pytest.raises(InvalidArgumentError):
        matrix.check_daily_marks(week, days)


def test_check_daily_marks_rejects_weekend(matrix):
    week = Week(week_index=1, week_start=date(2024, 3, 4), week_end=date(2024, 3, 10))
    with pytest.raises(InvalidArgumentError):
        matrix.check_daily_marks(week, [DailyAttendanceDay(day=date(2024, 3, 9), status="P")])


def test_check_daily_marks_rejects_day_outside_week(matrix):
    week = Week(week_index=1, week_start=date(2024, 3, 4), week_end=date(2024, 3, 10))
    with pytest.raises(InvalidArgumentError):
        matrix.check_daily_marks(week, [DailyAttendanceDay(day=date(2024, 3, 11), status="P")])
