"""Capacity analytics - read-only aggregation over members, weeks and iterations."""
from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

from teamcap.config import Settings, get_settings
from teamcap.engine.capacity import to_decimal
from teamcap.schemas.analytics import (
    CapacityStats,
    CrossIterationSummary,
    IterationTotals,
    IterationTrendPoint,
    MemberPerformance,
    VarianceResult,
    WeeklyTrendPoint,
)
from teamcap.schemas.availability import IterationRollup, MemberRollup, Week, WeekRollup
from teamcap.schemas.capacity import CapacityMember
from teamcap.schemas.iteration import Iteration

OVER_CAPACITY = "Over-capacity"
UNDER_CAPACITY = "Under-capacity"
BALANCED = "Balanced"


class CapacityAnalytics:
    """Deterministic capacity aggregation. Never mutates its inputs."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @staticmethod
    def _round(value: Decimal, places: int = 2) -> Decimal:
        quantize = Decimal(10) ** -places
        return value.quantize(quantize, rounding=ROUND_HALF_UP)

    @staticmethod
    def _whole(value: Decimal) -> int:
        return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    def iteration_totals(self, members: Sequence[CapacityMember]) -> IterationTotals:
        """Total Capacity = Σ effective_capacity_days."""
        total = sum((m.effective_capacity_days for m in members), Decimal(0))
        return IterationTotals(total_capacity=total, member_count=len(members))

    def variance(self, iteration: Iteration, members: Sequence[CapacityMember]) -> VarianceResult:
        """Variance = total capacity - committed points, labelled three ways.

        Exact Decimal arithmetic makes the zero boundary for Balanced reliable.
        """
        total = self.iteration_totals(members).total_capacity
        committed = to_decimal(iteration.committed_points)
        amount = total - committed
        if amount > 0:
            label = OVER_CAPACITY
        elif amount < 0:
            label = UNDER_CAPACITY
        else:
            label = BALANCED
        return VarianceResult(
            total_capacity=total,
            committed_points=committed,
            variance_amount=amount,
            variance_label=label,
        )

    def attendance_rate(self, rollup: MemberRollup) -> Decimal:
        """Present / total tracked days; 0 when nothing was tracked."""
        if rollup.total_days_total == 0:
            return Decimal(0)
        return Decimal(rollup.total_days_present) / Decimal(rollup.total_days_total)

    def cross_iteration_summary(self, iterations: Sequence[IterationRollup]) -> CrossIterationSummary:
        """Dashboard summary across iterations.

        An iteration is active when at least one of its weeks has recorded rows.
        """
        if iterations:
            avg = sum((i.avg_availability for i in iterations), Decimal(0)) / len(iterations)
        else:
            avg = Decimal(0)
        return CrossIterationSummary(
            avg_capacity_percent=self._round(avg),
            total_members=sum(i.total_members for i in iterations),
            total_teams=len({i.team_id for i in iterations if i.team_id is not None}),
            total_iterations=len(iterations),
            active_iterations_count=sum(1 for i in iterations if i.weeks_with_data > 0),
        )

    def health_label(self, avg_availability: Decimal) -> str:
        if avg_availability > to_decimal(self.settings.health_optimal_threshold):
            return "Optimal"
        if avg_availability > to_decimal(self.settings.health_good_threshold):
            return "Good"
        return "Needs Attention"

    def iteration_trend(self, iterations: Iterable[IterationRollup]) -> list[IterationTrendPoint]:
        return [
            IterationTrendPoint(
                name=i.name,
                capacity=self._whole(i.avg_availability),
                members=i.total_members,
                health=self.health_label(i.avg_availability),
            )
            for i in iterations
        ]

    def weekly_trend(self, weeks: Sequence[Week], rollups: Sequence[WeekRollup]) -> list[WeeklyTrendPoint]:
        """Week-over-week series.

        availability is the mean member percent; capacity is present days as a
        percent of tracked days, 0 for a week with no rows.
        """
        starts = {w.week_index: w.week_start for w in weeks}
        points = []
        for r in rollups:
            if r.days_total:
                day_based = Decimal(r.days_present) / Decimal(r.days_total) * 100
            else:
                day_based = Decimal(0)
            points.append(
                WeeklyTrendPoint(
                    week=f"Week {r.week_index}",
                    week_start=starts.get(r.week_index),
                    availability=self._whole(r.week_avg_availability),
                    capacity=self._whole(day_based),
                )
            )
        return points

    def member_performance(
        self,
        rollups: Sequence[MemberRollup],
        names: Mapping[int, str] | None = None,
    ) -> list[MemberPerformance]:
        names = names or {}
        rows = []
        for r in rollups:
            rows.append(
                MemberPerformance(
                    member_id=r.member_id,
                    member_name=names.get(r.member_id, "Unknown"),
                    availability=self._whole(r.avg_availability_percent),
                    present_days=r.total_days_present,
                    total_days=r.total_days_total,
                    attendance_rate=self._whole(self.attendance_rate(r) * 100),
                )
            )
        return rows

    def capacity_stats(
        self,
        iterations: Sequence[Iteration],
        members: Sequence[CapacityMember],
    ) -> CapacityStats:
        """Global counts; avg_capacity is mean effective days per member row."""
        if members:
            avg = sum((m.effective_capacity_days for m in members), Decimal(0)) / len(members)
        else:
            avg = Decimal(0)
        return CapacityStats(
            total_iterations=len(iterations),
            total_members=len(members),
            avg_capacity=self._round(avg, self.settings.summary_round_places),
            total_projects=len({i.project_id for i in iterations if i.project_id is not None}),
        )
