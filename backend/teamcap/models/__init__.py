"""SQLAlchemy models."""
from teamcap.models.availability import DailyAttendance, WeeklyAvailability
from teamcap.models.iteration import CapacityIteration
from teamcap.models.member import CapacityMember
from teamcap.models.stakeholder import Stakeholder
from teamcap.models.team import Team, TeamDefinition

__all__ = [
    "CapacityIteration",
    "CapacityMember",
    "DailyAttendance",
    "Stakeholder",
    "Team",
    "TeamDefinition",
    "WeeklyAvailability",
]
