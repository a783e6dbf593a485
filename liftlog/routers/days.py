from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.db import get_db
from liftlog.core.deps import get_current_owner_id
from liftlog.schemas.routines import (
    AddScheduledExerciseIn,
    CopyReportOut,
    DayOut,
    DayTreeOut,
    ScheduledExerciseOut,
    StartWorkoutIn,
    StartWorkoutOut,
    UpdateDayIn,
)
from liftlog.services import workouts as workout_service
from liftlog.services.duration import as_utc, utcnow
from liftlog.services.materializer import start_daily_workout

router = APIRouter(prefix="/days", tags=["days"])


@router.get("/{day_id}", response_model=DayTreeOut)
async def get_day(
    day_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    day = await workout_service.load_day(db, owner_id, day_id, now=now)
    return DayTreeOut.from_day(day, now.date())


@router.post("/{day_id}/start", response_model=StartWorkoutOut, status_code=status.HTTP_201_CREATED)
async def start_workout(
    day_id: int,
    payload: StartWorkoutIn | None = None,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    payload = payload or StartWorkoutIn()
    now = utcnow()
    start_time = as_utc(payload.start_time) if payload.start_time else now
    day_date = payload.date or start_time.date()

    await workout_service.get_owned_day(db, owner_id, day_id)
    outcome = await start_daily_workout(db, day_id, day_date, start_time)
    return StartWorkoutOut(
        day=DayOut.from_day(outcome.row, now.date()),
        copy_report=CopyReportOut.model_validate(outcome.report),
    )


@router.post("/{day_id}/complete", response_model=DayOut)
async def complete_workout(
    day_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    day = await workout_service.complete_workout(db, owner_id, day_id, now=now)
    return DayOut.from_day(day, now.date())


@router.patch("/{day_id}", response_model=DayOut)
async def update_day(
    day_id: int,
    payload: UpdateDayIn,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    day = await workout_service.update_day_note(db, owner_id, day_id, payload.note)
    return DayOut.from_day(day, utcnow().date())


@router.get("/{day_id}/last-completed", response_model=DayTreeOut | None)
async def get_last_completed(
    day_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    day = await workout_service.last_completed_for_day(db, owner_id, day_id)
    if day is None:
        return None
    return DayTreeOut.from_day(day, utcnow().date())


@router.get("/{day_id}/active", response_model=DayTreeOut | None)
async def get_running_workout(
    day_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    today = utcnow().date()
    day = await workout_service.running_workout_for_day(db, owner_id, day_id, today=today)
    if day is None:
        return None
    return DayTreeOut.from_day(day, today)


@router.post("/{day_id}/exercises", response_model=ScheduledExerciseOut, status_code=status.HTTP_201_CREATED)
async def add_exercise(
    day_id: int,
    payload: AddScheduledExerciseIn,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await workout_service.add_exercise(
        db,
        owner_id,
        day_id,
        payload.exercise_id,
        order_index=payload.order_index,
        session_note=payload.session_note,
    )


@router.delete("/{day_id}/exercises/{scheduled_exercise_id}")
async def remove_exercise(
    day_id: int,
    scheduled_exercise_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    await workout_service.remove_exercise(db, owner_id, day_id, scheduled_exercise_id)
    return {"deleted": True, "id": scheduled_exercise_id}
