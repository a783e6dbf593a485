from liftlog.core.db import Base
from liftlog.models.exercise_set import ExerciseSet
from liftlog.models.routine_day import RoutineDay
from liftlog.models.scheduled_exercise import ScheduledExercise
from liftlog.models.weekly_routine import WeeklyRoutine

__all__ = [
    "Base",
    "ExerciseSet",
    "RoutineDay",
    "ScheduledExercise",
    "WeeklyRoutine",
]
