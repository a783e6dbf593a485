import logging
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.db import Base

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


class BaseDAO(Generic[T]):
    """Minimal CRUD surface over one table.

    Filters are equality filters passed as keyword arguments; a ``None`` value
    becomes an ``IS NULL`` test. Writes only flush, committing is up to the
    caller.
    """

    model: type[T]

    @classmethod
    async def find_one_or_none(cls, session: AsyncSession, **filters: Any) -> T | None:
        """First row matching ``filters`` ordered by id, or None."""
        logger.debug("Looking up one %s by %s", cls.model.__name__, filters)
        try:
            query = (
                select(cls.model)
                .filter_by(**filters)
                .order_by(cls.model.id)
                .limit(1)
                .execution_options(populate_existing=True)
            )
            result = await session.execute(query)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error("Failed to look up %s by %s: %s", cls.model.__name__, filters, e)
            raise

    @classmethod
    async def find_all(
        cls, session: AsyncSession, *, order_by: Sequence[Any] = (), **filters: Any
    ) -> Sequence[T]:
        logger.debug("Looking up %s rows by %s", cls.model.__name__, filters)
        try:
            query = select(cls.model).filter_by(**filters).execution_options(populate_existing=True)
            query = query.order_by(*order_by) if order_by else query.order_by(cls.model.id)
            result = await session.execute(query)
            records = result.scalars().all()
            logger.debug("Found %d %s rows", len(records), cls.model.__name__)
            return records
        except SQLAlchemyError as e:
            logger.error("Failed to look up %s rows by %s: %s", cls.model.__name__, filters, e)
            raise

    @classmethod
    async def add(cls, session: AsyncSession, **values: Any) -> T:
        new_instance = cls.model(**values)
        session.add(new_instance)
        try:
            await session.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to insert %s %s: %s", cls.model.__name__, values, e)
            raise
        return new_instance

    @classmethod
    async def add_many(cls, session: AsyncSession, rows: Sequence[dict[str, Any]]) -> list[T]:
        instances = [cls.model(**row) for row in rows]
        session.add_all(instances)
        try:
            await session.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to insert %d %s rows: %s", len(rows), cls.model.__name__, e)
            raise
        return instances

    @classmethod
    async def update_one_by_id(cls, session: AsyncSession, data_id: int, **values: Any) -> T | None:
        logger.debug("Updating %s id=%s with %s", cls.model.__name__, data_id, values)
        try:
            record = await session.get(cls.model, data_id)
            if record is None:
                return None
            for k, v in values.items():
                setattr(record, k, v)
            await session.flush()
            return record
        except SQLAlchemyError as e:
            logger.error("Failed to update %s id=%s: %s", cls.model.__name__, data_id, e)
            raise

    @classmethod
    async def delete_by_id(cls, session: AsyncSession, data_id: int) -> bool:
        logger.debug("Deleting %s id=%s", cls.model.__name__, data_id)
        try:
            statement = delete(cls.model).where(cls.model.id == data_id)
            result = await session.execute(statement)
            await session.flush()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("Failed to delete %s id=%s: %s", cls.model.__name__, data_id, e)
            raise
