from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.calendar import Weekday
from liftlog.core.db import get_db
from liftlog.core.deps import get_current_owner_id
from liftlog.schemas.routines import (
    ActiveRoutineOut,
    CopyReportOut,
    CreateRoutineIn,
    DayTreeOut,
    DuplicateRoutineIn,
    DuplicateRoutineOut,
    RoutineOut,
    RoutineTreeOut,
    UpdateRoutineIn,
)
from liftlog.services import routines as routine_service
from liftlog.services import workouts as workout_service
from liftlog.services.duration import utcnow

router = APIRouter(prefix="/routines", tags=["routines"])


@router.get("", response_model=list[RoutineOut])
async def list_routines(
    templates_only: bool = False,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await routine_service.list_routines(db, owner_id, templates_only=templates_only)


@router.post("", response_model=RoutineTreeOut, status_code=status.HTTP_201_CREATED)
async def create_routine(
    payload: CreateRoutineIn,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    routine = await routine_service.create_weekly_routine(
        db, owner_id, payload.name, objective=payload.objective, is_template=payload.is_template
    )
    tree = await routine_service.get_routine_tree(db, owner_id, routine.id)
    return RoutineTreeOut.from_routine(tree, utcnow().date())


@router.get("/active", response_model=ActiveRoutineOut)
async def get_active_routine(
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    routine = await routine_service.get_active_routine(db, owner_id)
    if routine is None:
        return ActiveRoutineOut(active=False)
    return ActiveRoutineOut(active=True, routine=RoutineOut.model_validate(routine))


@router.get("/{routine_id}", response_model=RoutineTreeOut)
async def get_routine(
    routine_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    tree = await routine_service.get_routine_tree(db, owner_id, routine_id)
    return RoutineTreeOut.from_routine(tree, utcnow().date())


@router.patch("/{routine_id}", response_model=RoutineOut)
async def update_routine(
    routine_id: int,
    payload: UpdateRoutineIn,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True)
    # objective is the only column that may be cleared
    changes = {k: v for k, v in changes.items() if v is not None or k == "objective"}
    return await routine_service.update_routine(db, owner_id, routine_id, **changes)


@router.delete("/{routine_id}")
async def delete_routine(
    routine_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    await routine_service.delete_routine(db, owner_id, routine_id)
    return {"deleted": True, "id": routine_id}


@router.post("/{routine_id}/duplicate", response_model=DuplicateRoutineOut, status_code=status.HTTP_201_CREATED)
async def duplicate_routine(
    routine_id: int,
    payload: DuplicateRoutineIn,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    # Only the caller's own routines can be used as a source
    await routine_service.get_owned_routine(db, owner_id, routine_id)
    outcome = await routine_service.create_routine_from_template(
        db, owner_id, routine_id, payload.name, payload.objective
    )
    return DuplicateRoutineOut(
        routine=RoutineOut.model_validate(outcome.row),
        copy_report=CopyReportOut.model_validate(outcome.report),
    )


@router.post("/{routine_id}/activate", response_model=RoutineOut)
async def activate_routine(
    routine_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await routine_service.set_active_routine(db, owner_id, routine_id)


@router.post("/{routine_id}/start-week", response_model=RoutineOut)
async def start_week(
    routine_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await routine_service.start_weekly_session(db, owner_id, routine_id)


@router.get("/{routine_id}/days/by-name/{day_name}", response_model=DayTreeOut)
async def get_template_day(
    routine_id: int,
    day_name: Weekday,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    day = await workout_service.template_day_by_name(db, owner_id, routine_id, day_name)
    return DayTreeOut.from_day(day, utcnow().date())


@router.get("/{routine_id}/days/by-date/{day_date}", response_model=DayTreeOut | None)
async def get_dated_day(
    routine_id: int,
    day_date: date,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    day = await workout_service.dated_day_by_date(db, owner_id, routine_id, day_date)
    if day is None:
        return None
    return DayTreeOut.from_day(day, utcnow().date())
