from collections.abc import AsyncIterator

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from liftlog.core.config import settings
from liftlog.core.errors import WriteConflict, WriteFailure


class Base(AsyncAttrs, DeclarativeBase):
    pass


def make_engine(url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine.

    SQLite connections get foreign keys switched on so that ON DELETE CASCADE
    fires, and SQLAlchemy takes over BEGIN from the driver so SAVEPOINTs nest
    inside the outer transaction.
    """
    eng = create_async_engine(url, echo=echo)
    if eng.dialect.name == "sqlite":

        @event.listens_for(eng.sync_engine, "connect")
        def _on_sqlite_connect(dbapi_conn, _record):
            dbapi_conn.isolation_level = None
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(eng.sync_engine, "begin")
        def _on_sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return eng


engine = make_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as session:
        yield session


async def init_models(bind: AsyncEngine | None = None) -> None:
    """Create all tables. Used for local dev and tests, migrations cover deployments."""
    from liftlog import models  # noqa: F401  # registers the mappers

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def commit_or_raise(session: AsyncSession, action: str) -> None:
    """Commit, turning store errors into ``WriteConflict`` / ``WriteFailure``."""
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise WriteConflict(f"Could not {action}: conflicting write") from e
    except SQLAlchemyError as e:
        await session.rollback()
        raise WriteFailure(f"Could not {action}") from e
