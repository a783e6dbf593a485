"""Weekly routines: creation, duplication and the single-active-routine rule."""
import logging
from collections.abc import Sequence
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.calendar import Weekday, monday_of
from liftlog.core.config import settings
from liftlog.core.db import commit_or_raise
from liftlog.core.errors import NotFound, WriteFailure
from liftlog.dao import ExerciseSetDAO, RoutineDayDAO, ScheduledExerciseDAO, WeeklyRoutineDAO
from liftlog.models import RoutineDay, ScheduledExercise, WeeklyRoutine
from liftlog.services.copying import CopyOutcome, CopyReport
from liftlog.services.duration import utcnow

logger = logging.getLogger(__name__)


async def get_owned_routine(db: AsyncSession, owner_id: str, routine_id: int) -> WeeklyRoutine:
    routine = await WeeklyRoutineDAO.get_owned(db, routine_id, owner_id)
    if routine is None:
        raise NotFound("Routine", routine_id)
    return routine


async def get_routine_tree(db: AsyncSession, owner_id: str, routine_id: int) -> WeeklyRoutine:
    routine = await WeeklyRoutineDAO.get_tree(db, routine_id, owner_id)
    if routine is None:
        raise NotFound("Routine", routine_id)
    return routine


async def list_routines(
    db: AsyncSession, owner_id: str, *, templates_only: bool = False
) -> Sequence[WeeklyRoutine]:
    return await WeeklyRoutineDAO.list_for_owner(db, owner_id, templates_only=templates_only)


async def create_weekly_routine(
    db: AsyncSession,
    owner_id: str,
    name: str,
    *,
    objective: str | None = None,
    is_template: bool = True,
) -> WeeklyRoutine:
    """New routine with one empty template day per weekday."""
    try:
        routine = await WeeklyRoutineDAO.add(
            db,
            owner_id=owner_id,
            name=name,
            objective=objective,
            is_template=is_template,
            is_active=False,
        )
        await RoutineDayDAO.add_many(
            db,
            [{"routine_id": routine.id, "day_name": weekday, "date": None} for weekday in Weekday],
        )
    except SQLAlchemyError as e:
        await db.rollback()
        raise WriteFailure(f"Could not create routine {name!r}") from e

    await commit_or_raise(db, f"create routine {name!r}")
    logger.info("Created routine %s for owner %s", routine.id, owner_id)
    return routine


async def update_routine(db: AsyncSession, owner_id: str, routine_id: int, **changes) -> WeeklyRoutine:
    await get_owned_routine(db, owner_id, routine_id)
    routine = await WeeklyRoutineDAO.update_one_by_id(db, routine_id, **changes)
    await commit_or_raise(db, f"update routine {routine_id}")
    await db.refresh(routine)
    return routine


async def delete_routine(db: AsyncSession, owner_id: str, routine_id: int) -> None:
    """Delete a routine; days, exercises and sets go with it through the FK cascade."""
    await get_owned_routine(db, owner_id, routine_id)
    await WeeklyRoutineDAO.delete_by_id(db, routine_id)
    await commit_or_raise(db, f"delete routine {routine_id}")
    logger.info("Deleted routine %s", routine_id)


async def create_routine_from_template(
    db: AsyncSession,
    owner_id: str,
    template_routine_id: int,
    new_name: str,
    objective: str | None = None,
    *,
    today: date | None = None,
) -> CopyOutcome[WeeklyRoutine]:
    """Found a new routine from ``template_routine_id``.

    Template days are copied with their exercises and sets, nulls kept as
    they are. An exercise with no sets gets ``DEFAULT_FALLBACK_SETS`` empty
    sets so it can be filled in. Dated workouts of the source are history and
    are not copied. The copy starts inactive and is itself a template.
    """
    template = await WeeklyRoutineDAO.get_tree(db, template_routine_id)
    if template is None:
        raise NotFound("Routine", template_routine_id)

    today = today or utcnow().date()
    try:
        async with db.begin_nested():
            routine = await WeeklyRoutineDAO.add(
                db,
                owner_id=owner_id,
                name=new_name,
                objective=objective or template.objective,
                is_template=True,
                is_active=False,
                copied_from_id=template.id,
                week_start_date=monday_of(today),
            )
    except SQLAlchemyError as e:
        raise WriteFailure(f"Could not create routine {new_name!r}") from e

    report = CopyReport()
    for source_day in template.days:
        if source_day.date is not None:
            continue
        await _copy_template_day(db, source_day, routine.id, report)

    await commit_or_raise(db, f"create routine {new_name!r}")
    logger.info(
        "Created routine %s from %s: %d days, %d exercises, %d sets, %d skipped",
        routine.id,
        template_routine_id,
        report.days,
        report.exercises,
        report.sets,
        report.failed,
    )
    return CopyOutcome(row=routine, report=report)


async def _copy_template_day(
    db: AsyncSession, source: RoutineDay, routine_id: int, report: CopyReport
) -> None:
    try:
        async with db.begin_nested():
            day = await RoutineDayDAO.add(
                db,
                routine_id=routine_id,
                day_name=source.day_name,
                note=source.note,
                date=None,
            )
    except SQLAlchemyError as e:
        logger.warning("Skipped day %s while duplicating a routine: %s", source.id, e)
        report.record_failure("day", source.id, e)
        return
    report.days += 1

    for source_exercise in source.exercises:
        await _copy_template_exercise(db, source_exercise, day.id, report)


async def _copy_template_exercise(
    db: AsyncSession, source: ScheduledExercise, day_id: int, report: CopyReport
) -> None:
    try:
        async with db.begin_nested():
            exercise = await ScheduledExerciseDAO.add(
                db,
                day_id=day_id,
                exercise_id=source.exercise_id,
                order_index=source.order_index,
            )
    except SQLAlchemyError as e:
        logger.warning("Skipped scheduled exercise %s while duplicating a routine: %s", source.id, e)
        report.record_failure("exercise", source.id, e)
        return
    report.exercises += 1

    if source.sets:
        rows = [
            (s.id, {"set_number": s.set_number, "reps": s.reps, "weight": s.weight})
            for s in source.sets
        ]
    else:
        rows = [
            (source.id, {"set_number": n, "reps": None, "weight": None})
            for n in range(1, settings.DEFAULT_FALLBACK_SETS + 1)
        ]

    for source_id, values in rows:
        try:
            async with db.begin_nested():
                await ExerciseSetDAO.add(db, scheduled_exercise_id=exercise.id, **values)
        except SQLAlchemyError as e:
            logger.warning("Skipped set from %s while duplicating a routine: %s", source_id, e)
            report.record_failure("set", source_id, e)
            continue
        report.sets += 1


async def set_active_routine(db: AsyncSession, owner_id: str, routine_id: int) -> WeeklyRoutine:
    """Make ``routine_id`` the owner's only active routine in one UPDATE."""
    routine = await get_owned_routine(db, owner_id, routine_id)
    await WeeklyRoutineDAO.activate_exclusively(db, owner_id, routine_id)
    await commit_or_raise(db, f"activate routine {routine_id}")
    logger.info("Routine %s is now active for owner %s", routine_id, owner_id)
    return routine


async def get_active_routine(db: AsyncSession, owner_id: str) -> WeeklyRoutine | None:
    active = await WeeklyRoutineDAO.active_for_owner(db, owner_id)
    if len(active) > 1:
        logger.warning("Owner %s has %d active routines", owner_id, len(active))
    return active[0] if active else None


async def start_weekly_session(
    db: AsyncSession, owner_id: str, routine_id: int, *, today: date | None = None
) -> WeeklyRoutine:
    """Anchor the routine to the current week and make it the active one."""
    routine = await get_owned_routine(db, owner_id, routine_id)
    routine.week_start_date = monday_of(today or utcnow().date())
    await db.flush()
    return await set_active_routine(db, owner_id, routine_id)
