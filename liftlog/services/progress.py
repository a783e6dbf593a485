"""Calendar view and summary statistics over an owner's workouts."""
import logging
from collections.abc import Sequence
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.calendar import month_bounds, monday_of, weekday_of
from liftlog.dao import ExerciseSetDAO, RoutineDayDAO
from liftlog.models import RoutineDay
from liftlog.schemas.progress import (
    CalendarEntry,
    CalendarOut,
    ExerciseHistoryOut,
    HistorySession,
    HistorySet,
    PersonalRecordOut,
    ProgressSummary,
    SessionSummary,
)
from liftlog.services.duration import compute_duration_minutes, displayable_duration, utcnow
from liftlog.services.lifecycle import display_state, slot_display_state
from liftlog.services.routines import get_active_routine, get_routine_tree

logger = logging.getLogger(__name__)


async def calendar(
    db: AsyncSession, owner_id: str, start: date, end: date, *, today: date | None = None
) -> CalendarOut:
    """One entry per date of [start, end] for the active routine.

    A date with a dated workout shows that workout's state. A date without
    one shows the weekday's template slot as PENDING, or MISSED once past.
    """
    today = today or utcnow().date()
    active = await get_active_routine(db, owner_id)
    if active is None:
        return CalendarOut(start=start, end=end, routine_id=None, items=[])

    routine = await get_routine_tree(db, owner_id, active.id)
    templates = {d.day_name: d for d in routine.days if d.date is None}
    dated: dict[date, RoutineDay] = {}
    for day in await RoutineDayDAO.dated_in_range(db, [routine.id], start, end):
        dated.setdefault(day.date, day)

    items = []
    current = start
    while current <= end:
        weekday = weekday_of(current)
        template = templates.get(weekday)
        day = dated.get(current)
        if day is not None:
            minutes = compute_duration_minutes(day.start_time, day.end_time)
            items.append(
                CalendarEntry(
                    date=current,
                    day_name=weekday,
                    template_day_id=template.id if template else None,
                    day_id=day.id,
                    exercise_count=len(day.exercises),
                    display_state=display_state(day, today),
                    display_duration_minutes=displayable_duration(minutes),
                )
            )
        else:
            items.append(
                CalendarEntry(
                    date=current,
                    day_name=weekday,
                    template_day_id=template.id if template else None,
                    exercise_count=len(template.exercises) if template else 0,
                    display_state=slot_display_state(current, today),
                )
            )
        current += timedelta(days=1)

    return CalendarOut(start=start, end=end, routine_id=routine.id, items=items)


def summarize(days: Sequence[RoutineDay], start: date, end: date) -> ProgressSummary:
    sessions = []
    total_minutes = 0
    displayed = 0
    total_sets = 0
    total_volume = 0.0

    for day in days:
        minutes = compute_duration_minutes(day.start_time, day.end_time)
        shown = displayable_duration(minutes)
        sets = [s for e in day.exercises for s in e.sets]
        volume = sum(s.weight * s.reps for s in sets if s.weight is not None and s.reps is not None)

        total_minutes += minutes or 0
        if shown is not None:
            displayed += 1
        total_sets += len(sets)
        total_volume += volume
        sessions.append(
            SessionSummary(
                day_id=day.id,
                date=day.date,
                day_name=day.day_name,
                duration_minutes=minutes,
                display_duration_minutes=shown,
                total_sets=len(sets),
                total_volume=volume,
            )
        )

    return ProgressSummary(
        start=start,
        end=end,
        sessions_count=len(sessions),
        displayed_sessions=displayed,
        total_minutes=total_minutes,
        total_sets=total_sets,
        total_volume=total_volume,
        sessions=sessions,
    )


async def summary_between(db: AsyncSession, owner_id: str, start: date, end: date) -> ProgressSummary:
    days = await RoutineDayDAO.completed_for_owner(db, owner_id, start, end)
    logger.debug("Summarizing %d sessions for owner %s between %s and %s", len(days), owner_id, start, end)
    return summarize(days, start, end)


async def weekly_summary(db: AsyncSession, owner_id: str, *, today: date | None = None) -> ProgressSummary:
    monday = monday_of(today or utcnow().date())
    return await summary_between(db, owner_id, monday, monday + timedelta(days=6))


async def monthly_summary(db: AsyncSession, owner_id: str, year: int, month: int) -> ProgressSummary:
    first, last = month_bounds(year, month)
    return await summary_between(db, owner_id, first, last)


async def exercise_history(
    db: AsyncSession, owner_id: str, exercise_id: int, *, limit: int | None = 10
) -> ExerciseHistoryOut:
    """Weighted sets of one catalog exercise grouped per workout, oldest first.

    Only the ``limit`` most recent workouts are kept; ``None`` keeps them all.
    """
    rows = await ExerciseSetDAO.history_for_owner(db, owner_id, exercise_id)

    sessions: dict[int, HistorySession] = {}
    for exercise_set, day in rows:
        session = sessions.get(day.id)
        if session is None:
            session = sessions[day.id] = HistorySession(
                day_id=day.id, date=day.date, top_weight=exercise_set.weight, total_reps=0, volume=0.0, sets=[]
            )
        reps = exercise_set.reps or 0
        session.top_weight = max(session.top_weight, exercise_set.weight)
        session.total_reps += reps
        session.volume += exercise_set.weight * reps
        session.sets.append(
            HistorySet(
                set_id=exercise_set.id,
                set_number=exercise_set.set_number,
                reps=exercise_set.reps,
                weight=exercise_set.weight,
                rpe=exercise_set.rpe,
            )
        )

    ordered = list(sessions.values())
    if limit is not None:
        ordered = ordered[-limit:] if limit > 0 else []
    return ExerciseHistoryOut(exercise_id=exercise_id, sessions=ordered)


async def personal_record(db: AsyncSession, owner_id: str, exercise_id: int) -> PersonalRecordOut | None:
    """Heaviest logged set of the exercise; more reps, then the earlier date, break ties."""
    rows = await ExerciseSetDAO.history_for_owner(db, owner_id, exercise_id)
    if not rows:
        return None

    best_set, best_day = min(rows, key=lambda row: (-row[0].weight, -(row[0].reps or 0), row[1].date, row[0].id))
    return PersonalRecordOut(
        exercise_id=exercise_id,
        weight=best_set.weight,
        reps=best_set.reps,
        date=best_day.date,
        day_id=best_day.id,
        set_id=best_set.id,
    )
