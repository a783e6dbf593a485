from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.core.db import Base

if TYPE_CHECKING:
    from liftlog.models.routine_day import RoutineDay


class WeeklyRoutine(Base):
    __tablename__ = "weekly_routines"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Subject of the auth provider's token, users live outside this service
    owner_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    objective: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_template: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    copied_from_id: Mapped[int | None] = mapped_column(
        ForeignKey("weekly_routines.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Always a Monday
    week_start_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)

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

    days: Mapped[list[RoutineDay]] = relationship(
        back_populates="routine",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RoutineDay.id",
    )
