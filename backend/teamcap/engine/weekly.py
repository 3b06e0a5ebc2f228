"""Weekly availability matrix: week generation and member/week/iteration rollups."""
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from teamcap.config import Settings, get_settings
from teamcap.engine.calendar import is_working_day, week_boundaries, weeks_spanned, working_dates
from teamcap.engine.capacity import Number, to_decimal
from teamcap.engine.errors import InvalidArgumentError
from teamcap.schemas.availability import (
    DailyAttendanceDay,
    IterationRollup,
    MemberRollup,
    Week,
    WeeklyAvailability,
    WeekRollup,
)
from teamcap.schemas.iteration import Iteration

_HUNDRED = Decimal(100)
PRESENT = "P"
ABSENT = "A"


def _half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class WeeklyAvailabilityMatrix:
    """Per-week, per-member availability. Every method is a pure function of its arguments."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def week_count(self, iteration: Iteration) -> int:
        """Declared weeks_count wins over the count computed from the date range."""
        if iteration.weeks_count:
            return iteration.weeks_count
        return weeks_spanned(iteration.start_date, iteration.end_date)

    def generate_weeks(self, iteration: Iteration) -> list[Week]:
        weeks = []
        for index in range(1, self.week_count(iteration) + 1):
            week_start, week_end = week_boundaries(iteration.start_date, index)
            weeks.append(Week(week_index=index, week_start=week_start, week_end=week_end))
        return weeks

    def days_present(self, availability_percent: Number, days_in_week: int | None = None) -> int:
        """round(percent / 100 * days_in_week), halves rounded up."""
        days = self.settings.default_days_per_week if days_in_week is None else days_in_week
        return _half_up(to_decimal(availability_percent) / _HUNDRED * days)

    def build_row(
        self,
        week_index: int,
        member_id: int,
        availability_percent: Number,
        days_total: int | None = None,
    ) -> WeeklyAvailability:
        days_total = self.settings.default_days_per_week if days_total is None else days_total
        percent = to_decimal(availability_percent)
        return WeeklyAvailability(
            week_index=week_index,
            member_id=member_id,
            availability_percent=percent,
            days_present=self.days_present(percent, days_total),
            days_total=days_total,
        )

    def default_grid(self, weeks: Sequence[Week], member_ids: Iterable[int]) -> list[WeeklyAvailability]:
        """Full grid at the default availability; used when a matrix is first saved."""
        default = to_decimal(self.settings.default_availability_percent)
        return [
            self.build_row(week.week_index, member_id, default)
            for member_id in member_ids
            for week in weeks
        ]

    def rollup_member_across_weeks(
        self,
        member_id: int,
        weeks: Sequence[Week],
        rows: Iterable[WeeklyAvailability],
    ) -> MemberRollup:
        """Average over the weeks the member has a row for; missing weeks are skipped, not zeroed."""
        week_indexes = {w.week_index for w in weeks}
        member_rows = [r for r in rows if r.member_id == member_id and r.week_index in week_indexes]
        if member_rows:
            total_percent = sum((r.availability_percent for r in member_rows), Decimal(0))
            avg = total_percent / len(member_rows)
        else:
            avg = Decimal(0)
        return MemberRollup(
            member_id=member_id,
            avg_availability_percent=avg,
            total_days_present=sum(r.days_present for r in member_rows),
            total_days_total=sum(r.days_total for r in member_rows),
            weeks_counted=len(member_rows),
        )

    def rollup_week(self, week: Week, rows: Iterable[WeeklyAvailability]) -> WeekRollup:
        """Sum of member percentages for the week and their mean (100 for an empty week)."""
        week_rows = [r for r in rows if r.week_index == week.week_index]
        capacity_sum = sum((r.availability_percent for r in week_rows), Decimal(0))
        if week_rows:
            avg = capacity_sum / len(week_rows)
        else:
            avg = _HUNDRED
        return WeekRollup(
            week_index=week.week_index,
            week_capacity_sum=capacity_sum,
            week_avg_availability=avg,
            member_count=len(week_rows),
            days_present=sum(r.days_present for r in week_rows),
            days_total=sum(r.days_total for r in week_rows),
        )

    def iteration_rollup(
        self,
        iteration: Iteration,
        weeks: Sequence[Week],
        rows: Sequence[WeeklyAvailability],
        member_ids: Sequence[int],
        team_name: str | None = None,
    ) -> IterationRollup:
        """Iteration-level figures; avg_availability is the mean of per-member averages.

        With no recorded rows the iteration reports the default availability,
        matching the empty-week convention of rollup_week.
        """
        week_rollups = [self.rollup_week(week, rows) for week in weeks]
        member_avgs = []
        for member_id in member_ids:
            rollup = self.rollup_member_across_weeks(member_id, weeks, rows)
            if rollup.weeks_counted:
                member_avgs.append(rollup.avg_availability_percent)
        if member_avgs:
            avg = sum(member_avgs, Decimal(0)) / len(member_avgs)
        else:
            avg = to_decimal(self.settings.default_availability_percent)
        return IterationRollup(
            iteration_id=iteration.id,
            name=iteration.name,
            team_id=iteration.team_id,
            team_name=team_name,
            total_members=len(member_ids),
            total_capacity=sum((w.week_capacity_sum for w in week_rollups), Decimal(0)),
            avg_availability=avg,
            weeks=week_rollups,
            weeks_with_data=sum(1 for w in week_rollups if w.member_count > 0),
        )

    # Daily attendance

    def default_daily_attendance(self, week: Week) -> list[DailyAttendanceDay]:
        """Every working day of the week marked present."""
        return [DailyAttendanceDay(day=d, status=PRESENT) for d in working_dates(week.week_start, week.week_end)]

    def check_daily_marks(self, week: Week, days: Sequence[DailyAttendanceDay]) -> None:
        """Marks must fall on distinct working days inside the week."""
        seen = set()
        for d in days:
            if not week.week_start <= d.day <= week.week_end:
                raise InvalidArgumentError(f"{d.day} is outside week {week.week_index}")
            if not is_working_day(d.day):
                raise InvalidArgumentError(f"{d.day} is not a working day")
            if d.day in seen:
                raise InvalidArgumentError(f"{d.day} is marked more than once")
            seen.add(d.day)

    def attendance_percent(self, days: Sequence[DailyAttendanceDay]) -> Decimal:
        """Share of marked days that are present, as a whole percent; 100 with no marks."""
        if not days:
            return _HUNDRED
        present = self.days_present_from_daily(days)
        return Decimal(_half_up(Decimal(present) / len(days) * _HUNDRED))

    def days_present_from_daily(self, days: Sequence[DailyAttendanceDay]) -> int:
        return sum(1 for d in days if d.status == PRESENT)

    def row_from_daily(
        self,
        week_index: int,
        member_id: int,
        days: Sequence[DailyAttendanceDay],
        override_percent: Number | None = None,
    ) -> WeeklyAvailability:
        """Weekly row from day marks; an explicit override replaces the computed percent only."""
        if override_percent is None:
            percent = self.attendance_percent(days)
        else:
            percent = to_decimal(override_percent)
        if not days:
            return self.build_row(week_index, member_id, percent)
        return WeeklyAvailability(
            week_index=week_index,
            member_id=member_id,
            availability_percent=percent,
            days_present=self.days_present_from_daily(days),
            days_total=len(days),
        )
