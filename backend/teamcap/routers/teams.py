"""Team template API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from teamcap.database import get_db
from teamcap.engine.templates import TeamTemplateManager
from teamcap.routers.iterations import get_iteration_or_404
from teamcap.schemas.team import (
    Team,
    TeamApplyRequest,
    TeamApplyResponse,
    TeamDefinition,
    TeamResaveRequest,
    TeamSaveRequest,
    TeamSnapshot,
)
from teamcap.services.stores import MemberStore, StakeholderDirectory, TeamStore

router = APIRouter(tags=["teams"])


@router.post("/iterations/{iteration_id}/teams", response_model=TeamSnapshot, status_code=201)
async def save_team_from_iteration(
    iteration_id: int,
    data: TeamSaveRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Snapshot the iteration's current members as a reusable team."""
    iteration = await get_iteration_or_404(db, iteration_id)
    members = await MemberStore(db).list_by_iteration(iteration_id)
    snapshot = TeamTemplateManager().save_team_from_iteration(
        iteration_id,
        members,
        data.name,
        description=data.description,
        project_id=iteration.project_id,
    )
    return await TeamStore(db).create(snapshot)


@router.get("/projects/{project_id}/teams", response_model=list[Team])
async def list_teams(
    project_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await TeamStore(db).list_by_project(project_id)


@router.get("/teams/{team_id}", response_model=TeamSnapshot)
async def get_team(
    team_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    store = TeamStore(db)
    team = await store.get(team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return TeamSnapshot(team=team, definitions=await store.get_definitions(team_id))


@router.put("/teams/{team_id}", response_model=TeamSnapshot)
async def resave_team(
    team_id: int,
    data: TeamResaveRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Replace the team's name, description and definitions in one write."""
    store = TeamStore(db)
    team = await store.get(team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    definitions = [TeamDefinition(**d.model_dump()) for d in data.definitions]
    snapshot = TeamTemplateManager().resave_team(team, data.name, definitions, description=data.description)
    return await store.replace(snapshot)


@router.delete("/teams/{team_id}", status_code=204)
async def delete_team(
    team_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    if not await TeamStore(db).delete(team_id):
        raise HTTPException(status_code=404, detail="Team not found")


@router.post("/teams/{team_id}/apply", response_model=TeamApplyResponse, status_code=201)
async def apply_team(
    team_id: int,
    data: TeamApplyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Add the team's members to an iteration. Applying twice adds them twice."""
    store = TeamStore(db)
    team = await store.get(team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    target = await get_iteration_or_404(db, data.iteration_id)
    definitions = await store.get_definitions(team_id)
    names = await StakeholderDirectory(db).display_names(d.stakeholder_id for d in definitions)
    members = TeamTemplateManager().apply_team_to_iteration(team, definitions, target, display_names=names)
    saved = await MemberStore(db).add_many(members)
    return TeamApplyResponse(team_id=team_id, iteration_id=target.id, members=saved)
