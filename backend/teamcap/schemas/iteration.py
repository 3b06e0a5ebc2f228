"""Iteration schemas."""
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from teamcap.engine.calendar import working_days_between


class IterationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    start_date: date
    end_date: date
    committed_points: Decimal = Field(default=0, ge=0)
    weeks_count: int | None = Field(default=None, ge=1, le=52)
    team_id: int | None = None


class IterationUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    start_date: date | None = None
    end_date: date | None = None
    committed_points: Decimal | None = Field(None, ge=0)
    weeks_count: int | None = Field(None, ge=1, le=52)
    team_id: int | None = None


class Iteration(BaseModel):
    """Iteration record consumed by the engine.

    ``working_days`` is derived from the date range when not supplied.
    """

    id: int | None = None
    project_id: int | None = None
    team_id: int | None = None
    name: str = ""
    start_date: date
    end_date: date
    working_days: int | None = None
    committed_points: Decimal = Decimal(0)
    weeks_count: int | None = None

    @model_validator(mode="after")
    def derive_working_days(self) -> "Iteration":
        if self.working_days is None:
            self.working_days = working_days_between(self.start_date, self.end_date)
        return self

    class Config:
        from_attributes = True
