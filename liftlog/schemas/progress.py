import datetime as dt

from pydantic import BaseModel

from liftlog.core.calendar import Weekday
from liftlog.services.lifecycle import DisplayState


class CalendarEntry(BaseModel):
    date: dt.date
    day_name: Weekday
    template_day_id: int | None = None
    day_id: int | None = None
    exercise_count: int = 0
    display_state: DisplayState
    display_duration_minutes: int | None = None


class CalendarOut(BaseModel):
    start: dt.date
    end: dt.date
    routine_id: int | None = None
    items: list[CalendarEntry]


class SessionSummary(BaseModel):
    day_id: int
    date: dt.date
    day_name: Weekday
    duration_minutes: int | None = None
    display_duration_minutes: int | None = None
    total_sets: int
    total_volume: float


class ProgressSummary(BaseModel):
    start: dt.date
    end: dt.date
    sessions_count: int
    displayed_sessions: int
    total_minutes: int
    total_sets: int
    total_volume: float
    sessions: list[SessionSummary]


class HistorySet(BaseModel):
    set_id: int
    set_number: int
    reps: int | None = None
    weight: float
    rpe: float | None = None


class HistorySession(BaseModel):
    day_id: int
    date: dt.date
    top_weight: float
    total_reps: int
    volume: float
    sets: list[HistorySet]


class ExerciseHistoryOut(BaseModel):
    exercise_id: int
    sessions: list[HistorySession]


class PersonalRecordOut(BaseModel):
    exercise_id: int
    weight: float
    reps: int | None = None
    date: dt.date
    day_id: int
    set_id: int
