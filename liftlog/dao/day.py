from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from liftlog.core.calendar import Weekday
from liftlog.dao.base import BaseDAO
from liftlog.models import RoutineDay, ScheduledExercise, WeeklyRoutine


def _with_subtree(query):
    return query.options(
        selectinload(RoutineDay.exercises).selectinload(ScheduledExercise.sets)
    ).execution_options(populate_existing=True)


class RoutineDayDAO(BaseDAO[RoutineDay]):
    model = RoutineDay

    @classmethod
    async def get_tree(cls, session: AsyncSession, day_id: int) -> RoutineDay | None:
        """Day with its scheduled exercises and their sets."""
        query = _with_subtree(select(cls.model).where(cls.model.id == day_id))
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def get_owned(
        cls, session: AsyncSession, day_id: int, owner_id: str, *, with_tree: bool = False
    ) -> RoutineDay | None:
        query = (
            select(cls.model)
            .join(WeeklyRoutine, cls.model.routine_id == WeeklyRoutine.id)
            .where(cls.model.id == day_id, WeeklyRoutine.owner_id == owner_id)
        )
        if with_tree:
            query = _with_subtree(query)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def template_by_name(
        cls, session: AsyncSession, routine_id: int, day_name: Weekday
    ) -> RoutineDay | None:
        query = _with_subtree(
            select(cls.model).where(
                cls.model.routine_id == routine_id,
                cls.model.day_name == day_name,
                cls.model.date.is_(None),
            )
        )
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def dated_by_date(
        cls, session: AsyncSession, routine_id: int, day_date: date
    ) -> RoutineDay | None:
        query = _with_subtree(
            select(cls.model)
            .where(cls.model.routine_id == routine_id, cls.model.date == day_date)
            .order_by(cls.model.id)
            .limit(1)
        )
        result = await session.execute(query)
        return result.scalars().first()

    @classmethod
    async def dated_in_range(
        cls, session: AsyncSession, routine_ids: Iterable[int], start: date, end: date
    ) -> Sequence[RoutineDay]:
        query = _with_subtree(
            select(cls.model)
            .where(
                cls.model.routine_id.in_(list(routine_ids)),
                cls.model.date.is_not(None),
                cls.model.date >= start,
                cls.model.date <= end,
            )
            .order_by(cls.model.date.asc(), cls.model.id.asc())
        )
        result = await session.execute(query)
        return result.scalars().all()

    @classmethod
    async def last_completed(
        cls, session: AsyncSession, routine_id: int, day_name: Weekday
    ) -> RoutineDay | None:
        query = _with_subtree(
            select(cls.model)
            .where(
                cls.model.routine_id == routine_id,
                cls.model.day_name == day_name,
                cls.model.date.is_not(None),
                cls.model.start_time.is_not(None),
                cls.model.end_time.is_not(None),
            )
            .order_by(cls.model.end_time.desc(), cls.model.id.desc())
            .limit(1)
        )
        result = await session.execute(query)
        return result.scalars().first()

    @classmethod
    async def running_since(
        cls, session: AsyncSession, routine_id: int, day_name: Weekday, since: date
    ) -> RoutineDay | None:
        """Latest started, unfinished workout of a weekday dated on or after ``since``."""
        query = _with_subtree(
            select(cls.model)
            .where(
                cls.model.routine_id == routine_id,
                cls.model.day_name == day_name,
                cls.model.date.is_not(None),
                cls.model.date >= since,
                cls.model.start_time.is_not(None),
                cls.model.end_time.is_(None),
            )
            .order_by(cls.model.start_time.desc(), cls.model.id.desc())
            .limit(1)
        )
        result = await session.execute(query)
        return result.scalars().first()

    @classmethod
    async def completed_for_owner(
        cls, session: AsyncSession, owner_id: str, start: date, end: date
    ) -> Sequence[RoutineDay]:
        """Dated days of the owner within [start, end] that have both timestamps."""
        query = _with_subtree(
            select(cls.model)
            .join(WeeklyRoutine, cls.model.routine_id == WeeklyRoutine.id)
            .where(
                WeeklyRoutine.owner_id == owner_id,
                cls.model.date.is_not(None),
                cls.model.date >= start,
                cls.model.date <= end,
                cls.model.start_time.is_not(None),
                cls.model.end_time.is_not(None),
            )
            .order_by(cls.model.date.asc(), cls.model.id.asc())
        )
        result = await session.execute(query)
        return result.scalars().all()
