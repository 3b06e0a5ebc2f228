"""Weekly availability matrix and daily attendance API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from teamcap.database import get_db
from teamcap.engine.weekly import WeeklyAvailabilityMatrix
from teamcap.routers.iterations import get_iteration_or_404
from teamcap.schemas.availability import (
    AvailabilityMatrix,
    DailyAttendanceDay,
    DailyAttendanceSave,
    Week,
    WeeklyAvailability,
    WeeklyAvailabilitySave,
)
from teamcap.schemas.iteration import Iteration
from teamcap.services.stores import MemberStore, WeeklyAvailabilityStore

router = APIRouter(prefix="/iterations", tags=["availability"])


def _find_week(weeks: list[Week], week_index: int) -> Week:
    for w in weeks:
        if w.week_index == week_index:
            return w
    raise HTTPException(status_code=400, detail=f"Week {week_index} is outside this iteration")


async def _member_ids(db: AsyncSession, iteration_id: int) -> list[int]:
    return [m.id for m in await MemberStore(db).list_by_iteration(iteration_id)]


async def _build_matrix(db: AsyncSession, iteration: Iteration) -> AvailabilityMatrix:
    matrix = WeeklyAvailabilityMatrix()
    weeks = matrix.generate_weeks(iteration)
    rows = await WeeklyAvailabilityStore(db).list_by_iteration(iteration.id)
    member_ids = await _member_ids(db, iteration.id)
    return AvailabilityMatrix(
        weeks=weeks,
        rows=rows,
        members=[matrix.rollup_member_across_weeks(m, weeks, rows) for m in member_ids],
        week_rollups=[matrix.rollup_week(w, rows) for w in weeks],
    )


@router.get("/{iteration_id}/weeks", response_model=list[Week])
async def list_weeks(
    iteration_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    iteration = await get_iteration_or_404(db, iteration_id)
    return WeeklyAvailabilityMatrix().generate_weeks(iteration)


@router.get("/{iteration_id}/availability", response_model=AvailabilityMatrix)
async def get_availability(
    iteration_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    iteration = await get_iteration_or_404(db, iteration_id)
    return await _build_matrix(db, iteration)


@router.put("/{iteration_id}/availability", response_model=AvailabilityMatrix)
async def save_availability(
    iteration_id: int,
    data: WeeklyAvailabilitySave,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Upsert matrix cells; days_present is derived from each cell's percent."""
    iteration = await get_iteration_or_404(db, iteration_id)
    matrix = WeeklyAvailabilityMatrix()
    weeks = matrix.generate_weeks(iteration)
    member_ids = set(await _member_ids(db, iteration_id))
    rows = []
    for entry in data.rows:
        _find_week(weeks, entry.week_index)
        if entry.member_id not in member_ids:
            raise HTTPException(status_code=400, detail=f"Member {entry.member_id} is not on this iteration")
        rows.append(matrix.build_row(entry.week_index, entry.member_id, entry.availability_percent, entry.days_total))
    await WeeklyAvailabilityStore(db).save_rows(iteration_id, rows)
    return await _build_matrix(db, iteration)


@router.post("/{iteration_id}/availability/initialize", response_model=AvailabilityMatrix)
async def initialize_availability(
    iteration_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Fill every empty cell with the default availability. Recorded cells are kept."""
    iteration = await get_iteration_or_404(db, iteration_id)
    matrix = WeeklyAvailabilityMatrix()
    weeks = matrix.generate_weeks(iteration)
    store = WeeklyAvailabilityStore(db)
    recorded = {(r.week_index, r.member_id) for r in await store.list_by_iteration(iteration_id)}
    missing = [
        r
        for r in matrix.default_grid(weeks, await _member_ids(db, iteration_id))
        if (r.week_index, r.member_id) not in recorded
    ]
    if missing:
        await store.save_rows(iteration_id, missing)
    return await _build_matrix(db, iteration)


@router.get("/{iteration_id}/availability/daily", response_model=list[DailyAttendanceDay])
async def get_daily_attendance(
    iteration_id: int,
    week_index: int,
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Day marks for one cell; an unmarked week comes back all present."""
    iteration = await get_iteration_or_404(db, iteration_id)
    matrix = WeeklyAvailabilityMatrix()
    week = _find_week(matrix.generate_weeks(iteration), week_index)
    days = await WeeklyAvailabilityStore(db).get_daily(iteration_id, week_index, member_id)
    return days or matrix.default_daily_attendance(week)


@router.put("/{iteration_id}/availability/daily", response_model=WeeklyAvailability)
async def save_daily_attendance(
    iteration_id: int,
    data: DailyAttendanceSave,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    iteration = await get_iteration_or_404(db, iteration_id)
    matrix = WeeklyAvailabilityMatrix()
    week = _find_week(matrix.generate_weeks(iteration), data.week_index)
    if data.member_id not in await _member_ids(db, iteration_id):
        raise HTTPException(status_code=400, detail=f"Member {data.member_id} is not on this iteration")
    matrix.check_daily_marks(week, data.days)
    row = matrix.row_from_daily(data.week_index, data.member_id, data.days, data.override_percent)
    return await WeeklyAvailabilityStore(db).save_daily(iteration_id, row, data.days)
