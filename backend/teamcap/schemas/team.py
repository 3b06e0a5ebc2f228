"""Team template schemas."""
from decimal import Decimal

from pydantic import BaseModel, Field

from teamcap.schemas.capacity import CapacityMember


class Team(BaseModel):
    id: int | None = None
    project_id: int | None = None
    name: str
    description: str | None = None
    source_iteration_id: int | None = None

    class Config:
        from_attributes = True


class TeamDefinition(BaseModel):
    id: int | None = None
    team_id: int | None = None
    stakeholder_id: int | None = None
    member_name: str = "Unknown"
    role: str = "Team Member"
    default_availability_percent: Decimal = Decimal(100)
    default_leaves: Decimal = Decimal(0)

    class Config:
        from_attributes = True


class TeamSnapshot(BaseModel):
    """A team with the definitions captured for it."""

    team: Team
    definitions: list[TeamDefinition]


class TeamSaveRequest(BaseModel):
    # Blank names are rejected by the template manager, not here
    name: str = Field(..., max_length=255)
    description: str | None = None


class TeamApplyRequest(BaseModel):
    iteration_id: int


class TeamApplyResponse(BaseModel):
    team_id: int
    iteration_id: int
    members: list[CapacityMember]


class TeamDefinitionInput(BaseModel):
    stakeholder_id: int | None = None
    member_name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(default="Team Member", min_length=1, max_length=100)
    default_availability_percent: Decimal = Field(default=100, ge=0, le=100)
    default_leaves: Decimal = Field(default=0, ge=0)


class TeamResaveRequest(BaseModel):
    """Full replacement of a team's name, description and definitions."""

    name: str = Field(..., max_length=255)
    description: str | None = None
    definitions: list[TeamDefinitionInput]
