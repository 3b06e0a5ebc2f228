"""Capacity member schemas."""
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

WorkMode = Literal["office", "wfh", "hybrid"]


class CapacityMemberCreate(BaseModel):
    member_name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(default="Team Member", min_length=1, max_length=100)
    stakeholder_id: int | None = None
    team_id: int | None = None
    work_mode: WorkMode = "office"
    leaves: Decimal = Field(default=0, ge=0)
    availability_percent: Decimal = Field(default=100, ge=0, le=100)


class CapacityMemberUpdate(BaseModel):
    member_name: str | None = Field(None, min_length=1, max_length=255)
    role: str | None = Field(None, min_length=1, max_length=100)
    stakeholder_id: int | None = None
    work_mode: WorkMode | None = None
    leaves: Decimal | None = Field(None, ge=0)
    availability_percent: Decimal | None = Field(None, ge=0, le=100)


class CapacityMember(BaseModel):
    """Iteration-level member record. effective_capacity_days is engine-computed."""

    id: int | None = None
    iteration_id: int | None = None
    stakeholder_id: int | None = None
    team_id: int | None = None
    member_name: str = "Unknown"
    role: str = "Team Member"
    work_mode: str = "office"
    leaves: Decimal = Decimal(0)
    availability_percent: Decimal = Decimal(100)
    effective_capacity_days: Decimal = Decimal(0)

    class Config:
        from_attributes = True


class CopyMembersRequest(BaseModel):
    source_iteration_id: int
