from datetime import date
from decimal import Decimal

import pytest

from teamcap.engine.analytics import CapacityAnalytics
from teamcap.engine.capacity import to_decimal
from teamcap.schemas.availability import IterationRollup, MemberRollup, Week, WeekRollup
from teamcap.schemas.capacity import CapacityMember
from teamcap.schemas.iteration import Iteration


@pytest.fixture
def analytics():
    return CapacityAnalytics()


def _members(*capacities):
    return [CapacityMember(member_name=f"m{i}", effective_capacity_days=to_decimal(c)) for i, c in enumerate(capacities)]


def _iteration(committed):
    return Iteration(id=1, start_date=date(2024, 3, 4), end_date=date(2024, 3, 15), committed_points=to_decimal(committed))


def test_iteration_totals(analytics):
    totals = analytics.iteration_totals(_members(7.2, 6.4, 5))
    assert totals.total_capacity == Decimal("18.6")
    assert totals.member_count == 3


@pytest.mark.parametrize(
    "capacities,amount,label",
    [
        ((10, 10), Decimal(0), "Balanced"),
        ((20, 5), Decimal(5), "Over-capacity"),
        ((10, 5), Decimal(-5), "Under-capacity"),
    ],
)
def test_variance_labels(analytics, capacities, amount, label):
    result = analytics.variance(_iteration(20), _members(*capacities))
    assert result.variance_amount == amount
    assert result.variance_label == label


def test_variance_balanced_with_fractional_inputs(analytics):
    result = analytics.variance(_iteration(0.3), _members(0.1, 0.2))
    assert result.variance_label == "Balanced"


def test_variance_with_no_members(analytics):
    result = analytics.variance(_iteration(8), [])
    assert result.total_capacity == Decimal(0)
    assert result.variance_label == "Under-capacity"


def test_attendance_rate(analytics):
    rollup = MemberRollup(
        member_id=1, avg_availability_percent=Decimal(70), total_days_present=7, total_days_total=10, weeks_counted=2
    )
    assert analytics.attendance_rate(rollup) == Decimal("0.7")
    empty = rollup.model_copy(update={"total_days_present": 0, "total_days_total": 0})
    assert analytics.attendance_rate(empty) == Decimal(0)


def _rollup(name, avg, members, team_id=None, team_name=None, weeks_with_data=1):
    return IterationRollup(
        name=name,
        team_id=team_id,
        team_name=team_name,
        total_members=members,
        total_capacity=Decimal(0),
        avg_availability=to_decimal(avg),
        weeks_with_data=weeks_with_data,
    )


def test_cross_iteration_summary(analytics):
    summary = analytics.cross_iteration_summary(
        [
            _rollup("I1", 80, 4, team_id=1, team_name="Core"),
            _rollup("I2", 90, 3, team_id=1, team_name="Core"),
            _rollup("I3", 100, 0, team_id=2, team_name="Platform", weeks_with_data=0),
        ]
    )
    assert summary.avg_capacity_percent == Decimal("90.00")
    assert summary.total_members == 7
    assert summary.total_teams == 2
    assert summary.total_iterations == 3
    assert summary.active_iterations_count == 2


def test_teams_sharing_a_name_count_separately(analytics):
    summary = analytics.cross_iteration_summary(
        [_rollup("I1", 80, 2, team_id=1, team_name="Core"), _rollup("I2", 80, 2, team_id=2, team_name="Core")]
    )
    assert summary.total_teams == 2


def test_cross_iteration_summary_empty(analytics):
    summary = analytics.cross_iteration_summary([])
    assert summary.avg_capacity_percent == Decimal(0)
    assert summary.total_iterations == 0


def test_health_labels(analytics):
    assert analytics.health_label(Decimal(90)) == "Optimal"
    assert analytics.health_label(Decimal(85)) == "Good"
    assert analytics.health_label(Decimal(71)) == "Good"
    assert analytics.health_label(Decimal(70)) == "Needs Attention"


def test_iteration_trend(analytics):
    points = analytics.iteration_trend([_rollup("I1", "87.5", 4), _rollup("I2", 60, 2)])
    assert [(p.name, p.capacity, p.members, p.health) for p in points] == [
        ("I1", 88, 4, "Optimal"),
        ("I2", 60, 2, "Needs Attention"),
    ]


def test_weekly_trend(analytics):
    weeks = [
        Week(week_index=1, week_start=date(2024, 3, 4), week_end=date(2024, 3, 10)),
        Week(week_index=2, week_start=date(2024, 3, 11), week_end=date(2024, 3, 17)),
    ]
    rollups = [
        WeekRollup(
            week_index=1,
            week_capacity_sum=Decimal(140),
            week_avg_availability=Decimal(70),
            member_count=2,
            days_present=6,
            days_total=10,
        ),
        WeekRollup(week_index=2, week_capacity_sum=Decimal(0), week_avg_availability=Decimal(100), member_count=0),
    ]
    points = analytics.weekly_trend(weeks, rollups)
    assert points[0].week == "Week 1"
    assert points[0].week_start == date(2024, 3, 4)
    assert (points[0].availability, points[0].capacity) == (70, 60)
    assert (points[1].availability, points[1].capacity) == (100, 0)


def test_member_performance(analytics):
    rollups = [
        MemberRollup(
            member_id=1, avg_availability_percent=Decimal(70), total_days_present=7, total_days_total=10, weeks_counted=2
        ),
        MemberRollup(
            member_id=2, avg_availability_percent=Decimal(0), total_days_present=0, total_days_total=0, weeks_counted=0
        ),
    ]
    rows = analytics.member_performance(rollups, {1: "Asha"})
    assert (rows[0].member_name, rows[0].availability, rows[0].attendance_rate) == ("Asha", 70, 70)
    assert (rows[1].member_name, rows[1].attendance_rate) == ("Unknown", 0)


def test_capacity_stats(analytics):
    iterations = [
        Iteration(project_id=1, start_date=date(2024, 3, 4), end_date=date(2024, 3, 15)),
        Iteration(project_id=1, start_date=date(2024, 3, 18), end_date=date(2024, 3, 29)),
        Iteration(project_id=2, start_date=date(2024, 3, 4), end_date=date(2024, 3, 15)),
    ]
    stats = analytics.capacity_stats(iterations, _members(7.2, 6.4))
    assert stats.total_iterations == 3
    assert stats.total_members == 2
    assert stats.avg_capacity == Decimal("6.8")
    assert stats.total_projects == 2


def test_analytics_does_not_mutate_inputs(analytics):
    members = _members(5, 5)
    before = [m.model_dump() for m in members]
    analytics.variance(_iteration(10), members)
    analytics.iteration_totals(members)
    assert [m.model_dump() for m in members] == before
