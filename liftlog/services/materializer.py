"""Create dated workouts from template days."""
import logging
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.calendar import to_date
from liftlog.core.db import commit_or_raise
from liftlog.core.errors import DuplicateWorkout, NotFound, WriteFailure
from liftlog.dao import ExerciseSetDAO, RoutineDayDAO, ScheduledExerciseDAO
from liftlog.models import RoutineDay, ScheduledExercise
from liftlog.services.copying import CopyOutcome, CopyReport
from liftlog.services.duration import as_utc
from liftlog.services.lifecycle import DayState, classify

logger = logging.getLogger(__name__)


async def start_daily_workout(
    db: AsyncSession,
    template_day_id: int,
    day_date: date | datetime | str,
    start_time: datetime,
) -> CopyOutcome[RoutineDay]:
    """Materialize a dated, in-progress workout from ``template_day_id``.

    The new day copies the source's scheduled exercises and their sets. Set
    numbers are kept, missing reps and weights become 0 so the workout can be
    logged straight away. The source day is only read.

    Any day may be used as source, dated ones included. A second workout for
    the same routine, weekday and date is rejected with ``DuplicateWorkout``.

    Exercises and sets that fail to copy are skipped and listed in the
    returned report. The returned day does not carry the copied subtree.
    """
    source = await RoutineDayDAO.get_tree(db, template_day_id)
    if source is None:
        raise NotFound("Day", template_day_id)

    source_state = classify(source)
    if source_state is not DayState.TEMPLATE:
        logger.info("Materializing day %s from a %s source", template_day_id, source_state.value)

    workout_date = to_date(day_date)
    # Stored as UTC; SQLite keeps wall-clock time only
    start_time = as_utc(start_time)
    try:
        async with db.begin_nested():
            workout = await RoutineDayDAO.add(
                db,
                routine_id=source.routine_id,
                day_name=source.day_name,
                date=workout_date,
                start_time=start_time,
                end_time=None,
                is_completed=False,
            )
    except IntegrityError as e:
        raise DuplicateWorkout(
            f"A {source.day_name.value} workout for {workout_date.isoformat()} already exists"
        ) from e
    except SQLAlchemyError as e:
        raise WriteFailure(f"Could not create workout from day {template_day_id}") from e

    report = CopyReport(days=1)
    for source_exercise in source.exercises:
        await _copy_exercise(db, source_exercise, workout.id, report)

    await commit_or_raise(db, f"start workout from day {template_day_id}")
    logger.info(
        "Started workout %s from day %s: %d exercises, %d sets, %d skipped",
        workout.id,
        template_day_id,
        report.exercises,
        report.sets,
        report.failed,
    )
    return CopyOutcome(row=workout, report=report)


async def _copy_exercise(
    db: AsyncSession, source: ScheduledExercise, day_id: int, report: CopyReport
) -> None:
    try:
        async with db.begin_nested():
            copy = await ScheduledExerciseDAO.add(
                db,
                day_id=day_id,
                exercise_id=source.exercise_id,
                order_index=source.order_index,
                session_note=source.session_note,
            )
    except SQLAlchemyError as e:
        logger.warning("Skipped scheduled exercise %s while starting a workout: %s", source.id, e)
        report.record_failure("exercise", source.id, e)
        return
    report.exercises += 1

    for source_set in source.sets:
        try:
            async with db.begin_nested():
                await ExerciseSetDAO.add(
                    db,
                    scheduled_exercise_id=copy.id,
                    set_number=source_set.set_number,
                    reps=source_set.reps or 0,
                    weight=source_set.weight or 0,
                )
        except SQLAlchemyError as e:
            logger.warning("Skipped set %s while starting a workout: %s", source_set.id, e)
            report.record_failure("set", source_set.id, e)
            continue
        report.sets += 1
