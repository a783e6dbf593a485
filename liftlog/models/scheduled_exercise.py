from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.core.db import Base

if TYPE_CHECKING:
    from liftlog.models.exercise_set import ExerciseSet
    from liftlog.models.routine_day import RoutineDay


class ScheduledExercise(Base):
    __tablename__ = "scheduled_exercises"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    day_id: Mapped[int] = mapped_column(
        ForeignKey("routine_days.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    # Id in the exercise catalog, which is owned by another service
    exercise_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    session_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    day: Mapped[RoutineDay] = relationship(back_populates="exercises")
    sets: Mapped[list[ExerciseSet]] = relationship(
        back_populates="exercise",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ExerciseSet.set_number",
    )
