"""create routine tables

Revision ID: 3f1c9a7e2b10
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def upgrade() -> None:
    op.create_table(
        "weekly_routines",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("owner_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("objective", sa.Text(), nullable=True),
        sa.Column("is_template", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "copied_from_id",
            sa.Integer(),
            sa.ForeignKey("weekly_routines.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("week_start_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_weekly_routines_owner_id", "weekly_routines", ["owner_id"])
    op.create_index("ix_weekly_routines_is_active", "weekly_routines", ["is_active"])
    op.create_index("ix_weekly_routines_copied_from_id", "weekly_routines", ["copied_from_id"])

    op.create_table(
        "routine_days",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "routine_id",
            sa.Integer(),
            sa.ForeignKey("weekly_routines.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_name", sa.Enum(*WEEKDAYS, name="weekday", native_enum=False), nullable=False),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("routine_id", "day_name", "date", name="uq_routine_days_dated"),
    )
    op.create_index("ix_routine_days_routine_id", "routine_days", ["routine_id"])
    op.create_index("ix_routine_days_date", "routine_days", ["date"])
    op.create_index(
        "uq_routine_days_template",
        "routine_days",
        ["routine_id", "day_name"],
        unique=True,
        sqlite_where=sa.text("date IS NULL"),
        postgresql_where=sa.text("date IS NULL"),
    )

    op.create_table(
        "scheduled_exercises",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "day_id",
            sa.Integer(),
            sa.ForeignKey("routine_days.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("exercise_id", sa.Integer(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("session_note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_scheduled_exercises_day_id", "scheduled_exercises", ["day_id"])
    op.create_index("ix_scheduled_exercises_exercise_id", "scheduled_exercises", ["exercise_id"])

    op.create_table(
        "exercise_sets",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "scheduled_exercise_id",
            sa.Integer(),
            sa.ForeignKey("scheduled_exercises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("set_number", sa.Integer(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("rpe", sa.Float(), nullable=True),
        sa.Column("rest_seconds", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("scheduled_exercise_id", "set_number", name="uq_exercise_sets_number"),
    )
    op.create_index("ix_exercise_sets_scheduled_exercise_id", "exercise_sets", ["scheduled_exercise_id"])


def downgrade() -> None:
    op.drop_index("ix_exercise_sets_scheduled_exercise_id", table_name="exercise_sets")
    op.drop_table("exercise_sets")

    op.drop_index("ix_scheduled_exercises_exercise_id", table_name="scheduled_exercises")
    op.drop_index("ix_scheduled_exercises_day_id", table_name="scheduled_exercises")
    op.drop_table("scheduled_exercises")

    op.drop_index("uq_routine_days_template", table_name="routine_days")
    op.drop_index("ix_routine_days_date", table_name="routine_days")
    op.drop_index("ix_routine_days_routine_id", table_name="routine_days")
    op.drop_table("routine_days")

    op.drop_index("ix_weekly_routines_copied_from_id", table_name="weekly_routines")
    op.drop_index("ix_weekly_routines_is_active", table_name="weekly_routines")
    op.drop_index("ix_weekly_routines_owner_id", table_name="weekly_routines")
    op.drop_table("weekly_routines")
