"""Capacity analytics result schemas."""
from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

VarianceLabel = Literal["Over-capacity", "Under-capacity", "Balanced"]
HealthLabel = Literal["Optimal", "Good", "Needs Attention"]


class IterationTotals(BaseModel):
    total_capacity: Decimal
    member_count: int


class VarianceResult(BaseModel):
    total_capacity: Decimal
    committed_points: Decimal
    variance_amount: Decimal
    variance_label: VarianceLabel


class CrossIterationSummary(BaseModel):
    avg_capacity_percent: Decimal
    total_members: int
    total_teams: int
    total_iterations: int
    active_iterations_count: int


class IterationTrendPoint(BaseModel):
    name: str
    capacity: int
    members: int
    health: HealthLabel


class WeeklyTrendPoint(BaseModel):
    week: str
    week_start: date | None
    availability: int
    capacity: int


class MemberPerformance(BaseModel):
    member_id: int
    member_name: str
    availability: int
    present_days: int
    total_days: int
    attendance_rate: int  # percent


class CapacityStats(BaseModel):
    total_iterations: int
    total_members: int
    avg_capacity: Decimal
    total_projects: int


class IterationAnalytics(BaseModel):
    iteration_id: int
    totals: IterationTotals
    variance: VarianceResult
    members: list[MemberPerformance]
    weekly_trend: list[WeeklyTrendPoint]


class ProjectCapacityAnalytics(BaseModel):
    project_id: int
    summary: CrossIterationSummary
    iteration_trend: list[IterationTrendPoint]
