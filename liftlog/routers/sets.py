from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.db import get_db
from liftlog.core.deps import get_current_owner_id
from liftlog.schemas.routines import AddSetIn, SetOut, UpdateSetIn
from liftlog.services import workouts as workout_service

router = APIRouter(prefix="/exercises/{scheduled_exercise_id}/sets", tags=["sets"])


@router.post("", response_model=SetOut, status_code=status.HTTP_201_CREATED)
async def add_set(
    scheduled_exercise_id: int,
    payload: AddSetIn,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await workout_service.add_set(db, owner_id, scheduled_exercise_id, **payload.model_dump())


@router.patch("/{set_id}", response_model=SetOut)
async def update_set(
    scheduled_exercise_id: int,
    set_id: int,
    payload: UpdateSetIn,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    # exclude_unset keeps explicit nulls, so a field can be cleared
    changes = payload.model_dump(exclude_unset=True)
    return await workout_service.update_set(db, owner_id, scheduled_exercise_id, set_id, **changes)


@router.delete("/{set_id}")
async def delete_set(
    scheduled_exercise_id: int,
    set_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    await workout_service.delete_set(db, owner_id, scheduled_exercise_id, set_id)
    return {"deleted": True, "id": set_id}
