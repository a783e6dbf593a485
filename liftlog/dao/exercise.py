from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.dao.base import BaseDAO
from liftlog.models import ExerciseSet, RoutineDay, ScheduledExercise, WeeklyRoutine


class ScheduledExerciseDAO(BaseDAO[ScheduledExercise]):
    model = ScheduledExercise

    @classmethod
    async def get_owned(
        cls, session: AsyncSession, scheduled_exercise_id: int, owner_id: str
    ) -> ScheduledExercise | None:
        query = (
            select(cls.model)
            .join(RoutineDay, cls.model.day_id == RoutineDay.id)
            .join(WeeklyRoutine, RoutineDay.routine_id == WeeklyRoutine.id)
            .where(cls.model.id == scheduled_exercise_id, WeeklyRoutine.owner_id == owner_id)
        )
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def next_order_index(cls, session: AsyncSession, day_id: int) -> int:
        result = await session.execute(
            select(func.max(cls.model.order_index)).where(cls.model.day_id == day_id)
        )
        current = result.scalar_one()
        return 0 if current is None else current + 1


class ExerciseSetDAO(BaseDAO[ExerciseSet]):
    model = ExerciseSet

    @classmethod
    async def get_owned(
        cls, session: AsyncSession, set_id: int, scheduled_exercise_id: int, owner_id: str
    ) -> ExerciseSet | None:
        query = (
            select(cls.model)
            .join(ScheduledExercise, cls.model.scheduled_exercise_id == ScheduledExercise.id)
            .join(RoutineDay, ScheduledExercise.day_id == RoutineDay.id)
            .join(WeeklyRoutine, RoutineDay.routine_id == WeeklyRoutine.id)
            .where(
                cls.model.id == set_id,
                cls.model.scheduled_exercise_id == scheduled_exercise_id,
                WeeklyRoutine.owner_id == owner_id,
            )
        )
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def next_set_number(cls, session: AsyncSession, scheduled_exercise_id: int) -> int:
        """Max + 1, so numbers keep increasing after deletions instead of filling gaps."""
        result = await session.execute(
            select(func.max(cls.model.set_number)).where(
                cls.model.scheduled_exercise_id == scheduled_exercise_id
            )
        )
        return (result.scalar_one() or 0) + 1

    @classmethod
    async def history_for_owner(
        cls, session: AsyncSession, owner_id: str, exercise_id: int
    ) -> Sequence[tuple[ExerciseSet, RoutineDay]]:
        """Logged sets of a catalog exercise on the owner's dated days, oldest first.

        Sets without a weight were never performed and are left out.
        """
        query = (
            select(cls.model, RoutineDay)
            .join(ScheduledExercise, cls.model.scheduled_exercise_id == ScheduledExercise.id)
            .join(RoutineDay, ScheduledExercise.day_id == RoutineDay.id)
            .join(WeeklyRoutine, RoutineDay.routine_id == WeeklyRoutine.id)
            .where(
                WeeklyRoutine.owner_id == owner_id,
                ScheduledExercise.exercise_id == exercise_id,
                RoutineDay.date.is_not(None),
                cls.model.weight.is_not(None),
            )
            .order_by(RoutineDay.date.asc(), RoutineDay.id.asc(), cls.model.set_number.asc())
        )
        result = await session.execute(query)
        return result.tuples().all()
