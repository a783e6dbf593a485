"""Builders for test data."""
from datetime import date, datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.calendar import Weekday
from liftlog.dao import RoutineDayDAO
from liftlog.models import ExerciseSet, RoutineDay, ScheduledExercise, WeeklyRoutine

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


async def build_routine(
    db: AsyncSession,
    *,
    owner_id: str = OWNER,
    name: str = "Push Pull Legs",
    objective: str | None = "Strength",
    is_active: bool = False,
    monday_sets: list[list[tuple[int | None, float | None]]] | None = None,
) -> WeeklyRoutine:
    """Routine with seven template days; Monday gets one scheduled exercise per
    entry of ``monday_sets``, each with the given (reps, weight) sets."""
    routine = WeeklyRoutine(owner_id=owner_id, name=name, objective=objective, is_template=True, is_active=is_active)
    db.add(routine)
    await db.flush()

    days = {w: RoutineDay(routine_id=routine.id, day_name=w) for w in Weekday}
    db.add_all(days.values())
    await db.flush()

    for index, sets in enumerate(monday_sets or []):
        exercise = ScheduledExercise(day_id=days[Weekday.MONDAY].id, exercise_id=100 + index, order_index=index)
        db.add(exercise)
        await db.flush()
        for number, (reps, weight) in enumerate(sets, start=1):
            db.add(ExerciseSet(scheduled_exercise_id=exercise.id, set_number=number, reps=reps, weight=weight))
    await db.commit()
    return routine


async def template_day(db: AsyncSession, routine_id: int, weekday: Weekday = Weekday.MONDAY) -> RoutineDay:
    return await RoutineDayDAO.template_by_name(db, routine_id, weekday)


def at(day: date, hour: int = 18, minute: int = 0, second: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=timezone.utc)
