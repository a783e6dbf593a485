from liftlog.dao.base import BaseDAO
from liftlog.dao.day import RoutineDayDAO
from liftlog.dao.exercise import ExerciseSetDAO, ScheduledExerciseDAO
from liftlog.dao.routine import WeeklyRoutineDAO

__all__ = [
    "BaseDAO",
    "ExerciseSetDAO",
    "RoutineDayDAO",
    "ScheduledExerciseDAO",
    "WeeklyRoutineDAO",
]
