from collections.abc import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from liftlog.dao.base import BaseDAO
from liftlog.models import RoutineDay, ScheduledExercise, WeeklyRoutine


class WeeklyRoutineDAO(BaseDAO[WeeklyRoutine]):
    model = WeeklyRoutine

    @classmethod
    async def get_owned(
        cls, session: AsyncSession, routine_id: int, owner_id: str
    ) -> WeeklyRoutine | None:
        return await cls.find_one_or_none(session, id=routine_id, owner_id=owner_id)

    @classmethod
    async def get_tree(
        cls, session: AsyncSession, routine_id: int, owner_id: str | None = None
    ) -> WeeklyRoutine | None:
        """Routine with every day, scheduled exercise and set loaded.

        Days come ordered template rows first, then by date; exercises by
        ``order_index`` and sets by ``set_number`` via the relationship order.
        """
        query = (
            select(cls.model)
            .where(cls.model.id == routine_id)
            .options(
                selectinload(cls.model.days)
                .selectinload(RoutineDay.exercises)
                .selectinload(ScheduledExercise.sets)
            )
            .execution_options(populate_existing=True)
        )
        if owner_id is not None:
            query = query.where(cls.model.owner_id == owner_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def list_for_owner(
        cls, session: AsyncSession, owner_id: str, *, templates_only: bool = False
    ) -> Sequence[WeeklyRoutine]:
        filters = {"owner_id": owner_id}
        if templates_only:
            filters["is_template"] = True
        return await cls.find_all(
            session, order_by=(cls.model.created_at.desc(), cls.model.id.desc()), **filters
        )

    @classmethod
    async def active_for_owner(cls, session: AsyncSession, owner_id: str) -> Sequence[WeeklyRoutine]:
        query = (
            select(cls.model)
            .where(cls.model.owner_id == owner_id, cls.model.is_active.is_(True))
            .order_by(cls.model.id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(query)
        return result.scalars().all()

    @classmethod
    async def activate_exclusively(cls, session: AsyncSession, owner_id: str, routine_id: int) -> int:
        """Single UPDATE: the target becomes active and every other routine of the
        owner inactive, so no reader ever observes zero or two active rows."""
        statement = (
            update(cls.model)
            .where(cls.model.owner_id == owner_id)
            .values(is_active=(cls.model.id == routine_id))
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(statement)
        # Bring already loaded routines of the owner back in line with the table
        await session.execute(
            select(cls.model)
            .where(cls.model.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        return result.rowcount
