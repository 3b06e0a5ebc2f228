"""Calendar arithmetic for iterations. Weekends are excluded; holidays are not modeled."""
from collections.abc import Iterator
from datetime import date, timedelta

from teamcap.engine.errors import InvalidArgumentError

DAYS_PER_WEEK = 7
_SATURDAY = 5


def is_working_day(day: date) -> bool:
    return day.weekday() < _SATURDAY


def working_days_between(start: date, end: date) -> int:
    """Count Monday-Friday days in the inclusive range [start, end].

    A reversed range counts as 0 rather than failing, so a half-edited
    date range stays computable.
    """
    if start > end:
        return 0
    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, DAYS_PER_WEEK)
    count = full_weeks * 5
    first_weekday = start.weekday()
    for offset in range(remainder):
        if (first_weekday + offset) % DAYS_PER_WEEK < _SATURDAY:
            count += 1
    return count


def working_dates(start: date, end: date) -> Iterator[date]:
    """Yield the weekday dates of [start, end] in order."""
    day = start
    while day <= end:
        if is_working_day(day):
            yield day
        day += timedelta(days=1)


def week_boundaries(iteration_start: date, week_index: int) -> tuple[date, date]:
    """(week_start, week_end) of the 1-based week_index; weeks are 7 contiguous days."""
    if week_index < 1:
        raise InvalidArgumentError(f"week_index must be >= 1, got {week_index}")
    week_start = iteration_start + timedelta(days=DAYS_PER_WEEK * (week_index - 1))
    return week_start, week_start + timedelta(days=DAYS_PER_WEEK - 1)


def weeks_spanned(start: date, end: date) -> int:
    """Number of 7-day weeks needed to cover the gap from start to end."""
    if start >= end:
        return 0
    days = (end - start).days
    return -(-days // DAYS_PER_WEEK)
