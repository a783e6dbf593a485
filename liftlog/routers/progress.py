from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.calendar import monday_of
from liftlog.core.db import get_db
from liftlog.core.deps import get_current_owner_id
from liftlog.schemas.progress import CalendarOut, ExerciseHistoryOut, PersonalRecordOut, ProgressSummary
from liftlog.services import progress as progress_service
from liftlog.services.duration import utcnow

router = APIRouter(prefix="/progress", tags=["progress"])

MAX_CALENDAR_DAYS = 366


@router.get("/calendar", response_model=CalendarOut)
async def get_calendar(
    start: date | None = None,
    end: date | None = None,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    today = utcnow().date()
    start = start or monday_of(today)
    end = end or start + timedelta(days=6)
    if end < start:
        raise HTTPException(status_code=422, detail="end must not be before start")
    if (end - start).days >= MAX_CALENDAR_DAYS:
        raise HTTPException(status_code=422, detail=f"Range is limited to {MAX_CALENDAR_DAYS} days")

    return await progress_service.calendar(db, owner_id, start, end, today=today)


@router.get("/weekly", response_model=ProgressSummary)
async def get_weekly(
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await progress_service.weekly_summary(db, owner_id)


@router.get("/monthly", response_model=ProgressSummary)
async def get_monthly(
    year: int | None = Query(default=None, ge=1970, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    today = utcnow().date()
    return await progress_service.monthly_summary(db, owner_id, year or today.year, month or today.month)


@router.get("/exercises/{exercise_id}/history", response_model=ExerciseHistoryOut)
async def get_exercise_history(
    exercise_id: int,
    limit: int = Query(default=10, ge=1, le=200),
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await progress_service.exercise_history(db, owner_id, exercise_id, limit=limit)


@router.get("/exercises/{exercise_id}/record", response_model=PersonalRecordOut | None)
async def get_personal_record(
    exercise_id: int,
    owner_id: str = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db),
):
    return await progress_service.personal_record(db, owner_id, exercise_id)
