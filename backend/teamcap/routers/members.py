"""Capacity member API routes."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from teamcap.database import get_db
from teamcap.engine.capacity import upsert_member
from teamcap.routers.iterations import get_iteration_or_404
from teamcap.schemas.capacity import CapacityMember, CapacityMemberCreate, CapacityMemberUpdate
from teamcap.services.stores import MemberStore

router = APIRouter(prefix="/iterations", tags=["members"])


@router.get("/{iteration_id}/members", response_model=list[CapacityMember])
async def list_members(
    iteration_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await get_iteration_or_404(db, iteration_id)
    return await MemberStore(db).list_by_iteration(iteration_id)


@router.post("/{iteration_id}/members", response_model=CapacityMember, status_code=201)
async def add_member(
    iteration_id: int,
    data: CapacityMemberCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    iteration = await get_iteration_or_404(db, iteration_id)
    member = upsert_member(iteration, data)
    return await MemberStore(db).upsert(member)


@router.patch("/{iteration_id}/members/{member_id}", response_model=CapacityMember)
async def update_member(
    iteration_id: int,
    member_id: int,
    data: CapacityMemberUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    iteration = await get_iteration_or_404(db, iteration_id)
    store = MemberStore(db)
    existing = await store.get(member_id)
    if not existing or existing.iteration_id != iteration_id:
        raise HTTPException(status_code=404, detail="Member not found")
    return await store.upsert(upsert_member(iteration, data, existing=existing))


@router.delete("/{iteration_id}/members/{member_id}", status_code=204)
async def delete_member(
    iteration_id: int,
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    store = MemberStore(db)
    existing = await store.get(member_id)
    if not existing or existing.iteration_id != iteration_id:
        raise HTTPException(status_code=404, detail="Member not found")
    await store.delete(member_id)
