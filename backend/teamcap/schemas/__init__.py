"""Pydantic schemas."""
from teamcap.schemas.iteration import Iteration, IterationCreate, IterationUpdate
from teamcap.schemas.capacity import CapacityMember, CapacityMemberCreate, CapacityMemberUpdate, CopyMembersRequest
from teamcap.schemas.availability import (
    AvailabilityMatrix,
    DailyAttendanceDay,
    DailyAttendanceSave,
    IterationRollup,
    MemberRollup,
    Week,
    WeeklyAvailability,
    WeeklyAvailabilitySave,
    WeekRollup,
)
from teamcap.schemas.team import (
    Team,
    TeamApplyRequest,
    TeamApplyResponse,
    TeamDefinition,
    TeamDefinitionInput,
    TeamResaveRequest,
    TeamSaveRequest,
    TeamSnapshot,
)
from teamcap.schemas.analytics import (
    CapacityStats,
    CrossIterationSummary,
    IterationAnalytics,
    ProjectCapacityAnalytics,
    VarianceResult,
)

__all__ = [
    "Iteration",
    "IterationCreate",
    "IterationUpdate",
    "CapacityMember",
    "CapacityMemberCreate",
    "CapacityMemberUpdate",
    "CopyMembersRequest",
    "AvailabilityMatrix",
    "DailyAttendanceDay",
    "DailyAttendanceSave",
    "IterationRollup",
    "MemberRollup",
    "Week",
    "WeeklyAvailability",
    "WeeklyAvailabilitySave",
    "WeekRollup",
    "Team",
    "TeamApplyRequest",
    "TeamApplyResponse",
    "TeamDefinition",
    "TeamDefinitionInput",
    "TeamResaveRequest",
    "TeamSaveRequest",
    "TeamSnapshot",
    "CapacityStats",
    "CrossIterationSummary",
    "IterationAnalytics",
    "ProjectCapacityAnalytics",
    "VarianceResult",
]
