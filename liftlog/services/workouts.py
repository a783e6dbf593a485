"""Reading and logging individual routine days."""
import logging
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.calendar import Weekday, monday_of
from liftlog.core.db import commit_or_raise
from liftlog.core.errors import InvalidTransition, NotFound, WriteConflict
from liftlog.dao import ExerciseSetDAO, RoutineDayDAO, ScheduledExerciseDAO
from liftlog.models import ExerciseSet, RoutineDay, ScheduledExercise
from liftlog.services.duration import as_utc, needs_auto_close, utcnow
from liftlog.services.lifecycle import DayState, classify
from liftlog.services.routines import get_owned_routine

logger = logging.getLogger(__name__)


async def get_owned_day(db: AsyncSession, owner_id: str, day_id: int, *, with_tree: bool = False) -> RoutineDay:
    day = await RoutineDayDAO.get_owned(db, day_id, owner_id, with_tree=with_tree)
    if day is None:
        raise NotFound("Day", day_id)
    return day


async def load_day(
    db: AsyncSession, owner_id: str, day_id: int, *, now: datetime | None = None
) -> RoutineDay:
    """Day with its subtree.

    A session found running for longer than ``AUTO_CLOSE_AFTER_SECONDS`` is
    closed here, at ``now``, on the assumption it was never finished. Nothing
    else closes stale sessions.
    """
    now = as_utc(now) if now else utcnow()
    day = await get_owned_day(db, owner_id, day_id, with_tree=True)
    if needs_auto_close(day, now):
        logger.info("Auto-closing workout %s started at %s", day.id, day.start_time)
        day.end_time = now
        day.is_completed = True
        await commit_or_raise(db, f"close workout {day_id}")
        day = await get_owned_day(db, owner_id, day_id, with_tree=True)
    return day


async def complete_workout(
    db: AsyncSession, owner_id: str, day_id: int, *, now: datetime | None = None
) -> RoutineDay:
    day = await get_owned_day(db, owner_id, day_id)
    state = classify(day)
    if state is not DayState.IN_PROGRESS:
        raise InvalidTransition(f"Day {day_id} is {state.value}, only an IN_PROGRESS day can be completed")

    day.end_time = as_utc(now) if now else utcnow()
    day.is_completed = True
    await commit_or_raise(db, f"complete workout {day_id}")
    logger.info("Completed workout %s", day_id)
    return day


async def update_day_note(db: AsyncSession, owner_id: str, day_id: int, note: str | None) -> RoutineDay:
    day = await get_owned_day(db, owner_id, day_id)
    day.note = note
    await commit_or_raise(db, f"update day {day_id}")
    await db.refresh(day)
    return day


async def template_day_by_name(
    db: AsyncSession, owner_id: str, routine_id: int, day_name: Weekday
) -> RoutineDay:
    await get_owned_routine(db, owner_id, routine_id)
    day = await RoutineDayDAO.template_by_name(db, routine_id, day_name)
    if day is None:
        raise NotFound("Template day", day_name.value)
    return day


async def dated_day_by_date(
    db: AsyncSession, owner_id: str, routine_id: int, day_date: date
) -> RoutineDay | None:
    await get_owned_routine(db, owner_id, routine_id)
    return await RoutineDayDAO.dated_by_date(db, routine_id, day_date)


async def last_completed_for_day(db: AsyncSession, owner_id: str, day_id: int) -> RoutineDay | None:
    """Most recent finished workout of the same routine and weekday as ``day_id``."""
    day = await get_owned_day(db, owner_id, day_id)
    return await RoutineDayDAO.last_completed(db, day.routine_id, day.day_name)


async def running_workout_for_day(
    db: AsyncSession, owner_id: str, day_id: int, *, today: date | None = None
) -> RoutineDay | None:
    """This week's started and unfinished workout for the weekday of ``day_id``, so it can be resumed."""
    day = await get_owned_day(db, owner_id, day_id)
    monday = monday_of(today or utcnow().date())
    return await RoutineDayDAO.running_since(db, day.routine_id, day.day_name, monday)


async def add_exercise(
    db: AsyncSession,
    owner_id: str,
    day_id: int,
    exercise_id: int,
    *,
    order_index: int | None = None,
    session_note: str | None = None,
) -> ScheduledExercise:
    await get_owned_day(db, owner_id, day_id)
    if order_index is None:
        order_index = await ScheduledExerciseDAO.next_order_index(db, day_id)
    exercise = await ScheduledExerciseDAO.add(
        db,
        day_id=day_id,
        exercise_id=exercise_id,
        order_index=order_index,
        session_note=session_note,
    )
    await commit_or_raise(db, f"add exercise to day {day_id}")
    return exercise


async def remove_exercise(db: AsyncSession, owner_id: str, day_id: int, scheduled_exercise_id: int) -> None:
    exercise = await ScheduledExerciseDAO.get_owned(db, scheduled_exercise_id, owner_id)
    if exercise is None or exercise.day_id != day_id:
        raise NotFound("Scheduled exercise", scheduled_exercise_id)
    await ScheduledExerciseDAO.delete_by_id(db, scheduled_exercise_id)
    await commit_or_raise(db, f"remove scheduled exercise {scheduled_exercise_id}")


async def add_set(
    db: AsyncSession,
    owner_id: str,
    scheduled_exercise_id: int,
    *,
    reps: int | None = None,
    weight: float | None = None,
    rpe: float | None = None,
    rest_seconds: int | None = None,
) -> ExerciseSet:
    """Append a set. No range checks on the numbers: zero and negative values are stored as given."""
    exercise = await ScheduledExerciseDAO.get_owned(db, scheduled_exercise_id, owner_id)
    if exercise is None:
        raise NotFound("Scheduled exercise", scheduled_exercise_id)

    set_number = await ExerciseSetDAO.next_set_number(db, scheduled_exercise_id)
    try:
        new_set = await ExerciseSetDAO.add(
            db,
            scheduled_exercise_id=scheduled_exercise_id,
            set_number=set_number,
            reps=reps,
            weight=weight,
            rpe=rpe,
            rest_seconds=rest_seconds,
        )
    except IntegrityError as e:
        # Another request took this set number between the read and the insert
        await db.rollback()
        raise WriteConflict(
            f"Set {set_number} of scheduled exercise {scheduled_exercise_id} was just added, retry"
        ) from e
    await commit_or_raise(db, f"add set to scheduled exercise {scheduled_exercise_id}")
    return new_set


async def update_set(
    db: AsyncSession, owner_id: str, scheduled_exercise_id: int, set_id: int, **changes
) -> ExerciseSet:
    if await ExerciseSetDAO.get_owned(db, set_id, scheduled_exercise_id, owner_id) is None:
        raise NotFound("Set", set_id)
    exercise_set = await ExerciseSetDAO.update_one_by_id(db, set_id, **changes)
    await commit_or_raise(db, f"update set {set_id}")
    return exercise_set


async def delete_set(db: AsyncSession, owner_id: str, scheduled_exercise_id: int, set_id: int) -> None:
    exercise_set = await ExerciseSetDAO.get_owned(db, set_id, scheduled_exercise_id, owner_id)
    if exercise_set is None:
        raise NotFound("Set", set_id)
    await ExerciseSetDAO.delete_by_id(db, set_id)
    await commit_or_raise(db, f"delete set {set_id}")
