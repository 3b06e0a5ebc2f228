"""Weekly availability matrix schemas."""
from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


class Week(BaseModel):
    week_index: int
    week_start: date
    week_end: date


class WeeklyAvailability(BaseModel):
    """One (week, member) cell of the matrix."""

    id: int | None = None
    week_index: int
    member_id: int
    availability_percent: Decimal = Decimal(100)
    days_present: int = 5
    days_total: int = 5

    class Config:
        from_attributes = True


class WeeklyAvailabilityEntry(BaseModel):
    week_index: int = Field(..., ge=1)
    member_id: int
    availability_percent: Decimal = Field(default=100, ge=0, le=100)
    days_total: int | None = Field(default=None, ge=0, le=7)


class WeeklyAvailabilitySave(BaseModel):
    rows: list[WeeklyAvailabilityEntry]


class MemberRollup(BaseModel):
    member_id: int
    avg_availability_percent: Decimal
    total_days_present: int
    total_days_total: int
    weeks_counted: int


class WeekRollup(BaseModel):
    week_index: int
    week_capacity_sum: Decimal  # percentage points, not days
    week_avg_availability: Decimal
    member_count: int
    days_present: int = 0
    days_total: int = 0


class IterationRollup(BaseModel):
    iteration_id: int | None = None
    name: str = ""
    team_id: int | None = None
    team_name: str | None = None
    total_members: int
    total_capacity: Decimal
    avg_availability: Decimal
    weeks: list[WeekRollup] = Field(default_factory=list)
    weeks_with_data: int = 0


class AvailabilityMatrix(BaseModel):
    weeks: list[Week]
    rows: list[WeeklyAvailability]
    members: list[MemberRollup]
    week_rollups: list[WeekRollup]


class DailyAttendanceDay(BaseModel):
    day: date
    status: Literal["P", "A"]


class DailyAttendanceSave(BaseModel):
    week_index: int = Field(..., ge=1)
    member_id: int
    days: list[DailyAttendanceDay]
    override_percent: Decimal | None = Field(default=None, ge=0, le=100)
