from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.core.db import Base

if TYPE_CHECKING:
    from liftlog.models.scheduled_exercise import ScheduledExercise


class ExerciseSet(Base):
    __tablename__ = "exercise_sets"
    __mapper_args__ = {"eager_defaults": True}
    __table_args__ = (
        UniqueConstraint("scheduled_exercise_id", "set_number", name="uq_exercise_sets_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    scheduled_exercise_id: Mapped[int] = mapped_column(
        ForeignKey("scheduled_exercises.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    set_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # reps and weight are independently nullable: empty slots are valid sets
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    rpe: Mapped[float | None] = mapped_column(Float, nullable=True)
    rest_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    exercise: Mapped[ScheduledExercise] = relationship(back_populates="sets")
