"""Capacity iteration API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from teamcap.database import get_db
from teamcap.engine.capacity import copy_members_to_iteration, recompute_members
from teamcap.schemas.capacity import CapacityMember, CopyMembersRequest
from teamcap.schemas.iteration import Iteration, IterationCreate, IterationUpdate
from teamcap.services.stores import IterationStore, MemberStore
from teamcap.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["iterations"])


async def get_iteration_or_404(db: AsyncSession, iteration_id: int) -> Iteration:
    iteration = await IterationStore(db).get(iteration_id)
    if not iteration:
        raise HTTPException(status_code=404, detail="Iteration not found")
    return iteration


@router.get("/projects/{project_id}/iterations", response_model=list[Iteration])
async def list_iterations(
    project_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await IterationStore(db).list_by_project(project_id)


@router.post("/projects/{project_id}/iterations", response_model=Iteration, status_code=201)
async def create_iteration(
    project_id: int,
    data: IterationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await IterationStore(db).create(project_id, data)


@router.get("/iterations/{iteration_id}", response_model=Iteration)
async def get_iteration(
    iteration_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await get_iteration_or_404(db, iteration_id)


@router.patch("/iterations/{iteration_id}", response_model=Iteration)
async def update_iteration(
    iteration_id: int,
    data: IterationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Edit an iteration. Member capacities are not touched; use /recompute after date changes."""
    iteration = await IterationStore(db).update(iteration_id, data)
    if not iteration:
        raise HTTPException(status_code=404, detail="Iteration not found")
    return iteration


@router.delete("/iterations/{iteration_id}", status_code=204)
async def delete_iteration(
    iteration_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete an iteration together with its members and availability."""
    if not await IterationStore(db).delete(iteration_id):
        raise HTTPException(status_code=404, detail="Iteration not found")


@router.post("/iterations/{iteration_id}/recompute", response_model=list[CapacityMember])
async def recompute_iteration(
    iteration_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Recompute every member's effective capacity against the iteration's current working days."""
    iteration = await get_iteration_or_404(db, iteration_id)
    store = MemberStore(db)
    members = recompute_members(iteration, await store.list_by_iteration(iteration_id))
    saved = [await store.upsert(m) for m in members]
    logger.info("Recomputed %d members on iteration %s", len(saved), iteration_id)
    return saved


@router.post("/iterations/{iteration_id}/copy-members", response_model=list[CapacityMember], status_code=201)
async def copy_members(
    iteration_id: int,
    data: CopyMembersRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Copy members from another iteration, sized on this iteration's working days."""
    target = await get_iteration_or_404(db, iteration_id)
    await get_iteration_or_404(db, data.source_iteration_id)
    store = MemberStore(db)
    source_members = await store.list_by_iteration(data.source_iteration_id)
    if not source_members:
        raise HTTPException(status_code=400, detail="Source iteration has no members")
    return await store.add_many(copy_members_to_iteration(source_members, target))
