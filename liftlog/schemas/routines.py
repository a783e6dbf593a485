import datetime as dt

from pydantic import BaseModel, Field

from liftlog.core.calendar import Weekday
from liftlog.services.duration import compute_duration_minutes, displayable_duration
from liftlog.services.lifecycle import DayState, DisplayState, classify, display_state


class CreateRoutineIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    objective: str | None = None
    is_template: bool = True


class UpdateRoutineIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    objective: str | None = None
    is_template: bool | None = None


class DuplicateRoutineIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    objective: str | None = None


class StartWorkoutIn(BaseModel):
    date: dt.date | None = None
    start_time: dt.datetime | None = None


class UpdateDayIn(BaseModel):
    note: str | None = None


class AddScheduledExerciseIn(BaseModel):
    exercise_id: int
    order_index: int | None = None
    session_note: str | None = None


# No positivity checks: the service stores whatever numbers it is given
class AddSetIn(BaseModel):
    reps: int | None = None
    weight: float | None = None
    rpe: float | None = None
    rest_seconds: int | None = None


class UpdateSetIn(BaseModel):
    reps: int | None = None
    weight: float | None = None
    rpe: float | None = None
    rest_seconds: int | None = None


class SetOut(BaseModel):
    id: int
    scheduled_exercise_id: int
    set_number: int
    reps: int | None = None
    weight: float | None = None
    rpe: float | None = None
    rest_seconds: int | None = None

    model_config = {"from_attributes": True}


class ScheduledExerciseOut(BaseModel):
    id: int
    day_id: int
    exercise_id: int
    order_index: int
    session_note: str | None = None

    model_config = {"from_attributes": True}


class ScheduledExerciseTreeOut(ScheduledExerciseOut):
    sets: list[SetOut] = []


class DayOut(BaseModel):
    id: int
    routine_id: int
    day_name: Weekday
    date: dt.date | None = None
    start_time: dt.datetime | None = None
    end_time: dt.datetime | None = None
    is_completed: bool
    note: str | None = None

    state: DayState
    display_state: DisplayState
    duration_minutes: int | None = None
    display_duration_minutes: int | None = None

    @classmethod
    def fields_of(cls, day, today: dt.date) -> dict:
        minutes = compute_duration_minutes(day.start_time, day.end_time)
        return {
            "id": day.id,
            "routine_id": day.routine_id,
            "day_name": day.day_name,
            "date": day.date,
            "start_time": day.start_time,
            "end_time": day.end_time,
            "is_completed": day.is_completed,
            "note": day.note,
            "state": classify(day),
            "display_state": display_state(day, today),
            "duration_minutes": minutes,
            "display_duration_minutes": displayable_duration(minutes),
        }

    @classmethod
    def from_day(cls, day, today: dt.date) -> "DayOut":
        return cls(**cls.fields_of(day, today))


class DayTreeOut(DayOut):
    exercises: list[ScheduledExerciseTreeOut] = []

    @classmethod
    def from_day(cls, day, today: dt.date) -> "DayTreeOut":
        exercises = [ScheduledExerciseTreeOut.model_validate(e) for e in day.exercises]
        return cls(**cls.fields_of(day, today), exercises=exercises)


class RoutineOut(BaseModel):
    id: int
    owner_id: str
    name: str
    objective: str | None = None
    is_template: bool
    is_active: bool
    copied_from_id: int | None = None
    week_start_date: dt.date | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class RoutineTreeOut(RoutineOut):
    template_days: list[DayTreeOut] = []
    workouts: list[DayOut] = []

    @classmethod
    def from_routine(cls, routine, today: dt.date) -> "RoutineTreeOut":
        """Template days Monday first, dated workouts newest first."""
        templates = sorted((d for d in routine.days if d.date is None), key=lambda d: d.day_name.iso)
        dated = sorted((d for d in routine.days if d.date is not None), key=lambda d: (d.date, d.id), reverse=True)
        base = RoutineOut.model_validate(routine).model_dump()
        return cls(
            **base,
            template_days=[DayTreeOut.from_day(d, today) for d in templates],
            workouts=[DayOut.from_day(d, today) for d in dated],
        )


class CopyFailureOut(BaseModel):
    kind: str
    source_id: int
    reason: str

    model_config = {"from_attributes": True}


class CopyReportOut(BaseModel):
    days: int
    exercises: int
    sets: int
    failed: int
    failures: list[CopyFailureOut]

    model_config = {"from_attributes": True}


class StartWorkoutOut(BaseModel):
    day: DayOut
    copy_report: CopyReportOut


class DuplicateRoutineOut(BaseModel):
    routine: RoutineOut
    copy_report: CopyReportOut


class ActiveRoutineOut(BaseModel):
    active: bool
    routine: RoutineOut | None = None
