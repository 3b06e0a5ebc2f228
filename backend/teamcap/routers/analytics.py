"""Capacity analytics API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamcap.database import get_db
from teamcap.engine.analytics import CapacityAnalytics
from teamcap.engine.weekly import WeeklyAvailabilityMatrix
from teamcap.routers.iterations import get_iteration_or_404
from teamcap.schemas.analytics import CapacityStats, IterationAnalytics, ProjectCapacityAnalytics
from teamcap.services.stores import IterationStore, MemberStore, TeamStore, WeeklyAvailabilityStore

router = APIRouter(tags=["analytics"])


@router.get("/iterations/{iteration_id}/analytics", response_model=IterationAnalytics)
async def iteration_analytics(
    iteration_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    iteration = await get_iteration_or_404(db, iteration_id)
    members = await MemberStore(db).list_by_iteration(iteration_id)
    rows = await WeeklyAvailabilityStore(db).list_by_iteration(iteration_id)
    matrix = WeeklyAvailabilityMatrix()
    analytics = CapacityAnalytics()
    weeks = matrix.generate_weeks(iteration)
    member_rollups = [matrix.rollup_member_across_weeks(m.id, weeks, rows) for m in members]
    return IterationAnalytics(
        iteration_id=iteration_id,
        totals=analytics.iteration_totals(members),
        variance=analytics.variance(iteration, members),
        members=analytics.member_performance(member_rollups, {m.id: m.member_name for m in members}),
        weekly_trend=analytics.weekly_trend(weeks, [matrix.rollup_week(w, rows) for w in weeks]),
    )


@router.get("/projects/{project_id}/capacity/analytics", response_model=ProjectCapacityAnalytics)
async def project_capacity_analytics(
    project_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Dashboard summary and iteration trend, oldest iteration first."""
    iterations = sorted(await IterationStore(db).list_by_project(project_id), key=lambda i: i.start_date)
    member_store = MemberStore(db)
    availability_store = WeeklyAvailabilityStore(db)
    team_names = await TeamStore(db).names(i.team_id for i in iterations)
    matrix = WeeklyAvailabilityMatrix()
    rollups = []
    for it in iterations:
        members = await member_store.list_by_iteration(it.id)
        rows = await availability_store.list_by_iteration(it.id)
        rollups.append(
            matrix.iteration_rollup(
                it,
                matrix.generate_weeks(it),
                rows,
                [m.id for m in members],
                team_name=team_names.get(it.team_id),
            )
        )
    analytics = CapacityAnalytics()
    return ProjectCapacityAnalytics(
        project_id=project_id,
        summary=analytics.cross_iteration_summary(rollups),
        iteration_trend=analytics.iteration_trend(rollups),
    )


@router.get("/capacity/stats", response_model=CapacityStats)
async def capacity_stats(db: Annotated[AsyncSession, Depends(get_db)]):
    iterations = await IterationStore(db).list_all()
    members = await MemberStore(db).list_all()
    return CapacityAnalytics().capacity_stats(iterations, members)
