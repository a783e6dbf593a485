from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.core.calendar import Weekday
from liftlog.core.db import Base

if TYPE_CHECKING:
    from liftlog.models.scheduled_exercise import ScheduledExercise
    from liftlog.models.weekly_routine import WeeklyRoutine


class RoutineDay(Base):
    """A weekday of a routine.

    ``date`` is NULL for the template row of a weekday; every dated row is
    one concrete workout of that weekday.
    """

    __tablename__ = "routine_days"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        # One dated workout per weekday and date; NULL dates never collide
        UniqueConstraint("routine_id", "day_name", "date", name="uq_routine_days_dated"),
        # Exactly one template row per weekday
        Index(
            "uq_routine_days_template",
            "routine_id",
            "day_name",
            unique=True,
            sqlite_where=text("date IS NULL"),
            postgresql_where=text("date IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    routine_id: Mapped[int] = mapped_column(
        ForeignKey("weekly_routines.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    day_name: Mapped[Weekday] = mapped_column(
        SAEnum(
            Weekday,
            name="weekday",
            native_enum=False,
            values_callable=lambda enum: [m.value for m in enum],
        ),
        nullable=False,
    )

    date: Mapped[dt.date | None] = mapped_column(Date, nullable=True, index=True)
    start_time: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_time: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    routine: Mapped[WeeklyRoutine] = relationship(back_populates="days")
    exercises: Mapped[list[ScheduledExercise]] = relationship(
        back_populates="day",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ScheduledExercise.order_index",
    )
