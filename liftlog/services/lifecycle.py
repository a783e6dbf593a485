"""Lifecycle state of a routine day.

The canonical state is derived only from ``date``, ``start_time`` and
``end_time``. ``is_completed`` is a denormalized flag written alongside
``end_time`` and is never read here.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Protocol

from liftlog.core.calendar import is_past


class DayState(str, Enum):
    TEMPLATE = "TEMPLATE"
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class DisplayState(str, Enum):
    TEMPLATE = "TEMPLATE"
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    MISSED = "MISSED"


class DayLike(Protocol):
    date: date | None
    start_time: datetime | None
    end_time: datetime | None


def classify(day: DayLike) -> DayState:
    if day.date is None:
        return DayState.TEMPLATE
    if day.start_time is None:
        return DayState.PENDING
    if day.end_time is None:
        return DayState.IN_PROGRESS
    return DayState.COMPLETED


def display_state(day: DayLike, today: date) -> DisplayState:
    """``classify`` plus MISSED for a pending day whose date has already gone by."""
    state = classify(day)
    if state is DayState.PENDING and is_past(day.date, today):
        return DisplayState.MISSED
    return DisplayState(state.value)


def slot_display_state(slot_date: date, today: date) -> DisplayState:
    """State of a calendar slot that has no dated day yet."""
    return DisplayState.MISSED if is_past(slot_date, today) else DisplayState.PENDING
