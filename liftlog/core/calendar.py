"""Weekday arithmetic shared by routines, the classifier and progress views.

Weekdays use ISO numbering (Monday = 1 ... Sunday = 7), which is what
``date.isoweekday()`` returns, so no Sunday-is-zero adjustments are needed
anywhere else in the code base.
"""
from __future__ import annotations

import calendar as _stdcal
from datetime import date, datetime, timedelta
from enum import Enum


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def iso(self) -> int:
        return _ORDER.index(self) + 1

    @classmethod
    def from_iso(cls, number: int) -> "Weekday":
        if not 1 <= number <= 7:
            raise ValueError(f"ISO weekday must be within 1..7, got {number}")
        return _ORDER[number - 1]


_ORDER = list(Weekday)


def to_date(value: date | datetime | str) -> date:
    """Normalize a date, a timestamp or an ISO string to a date-only value."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value).date()


def weekday_of(day: date) -> Weekday:
    return Weekday.from_iso(day.isoweekday())


def monday_of(day: date) -> date:
    """Monday of the calendar week containing ``day`` (a Sunday maps back 6 days)."""
    return day - timedelta(days=day.isoweekday() - 1)


def date_in_week(monday: date, weekday: Weekday) -> date:
    return monday + timedelta(days=weekday.iso - 1)


def week_dates(monday: date) -> list[date]:
    return [monday + timedelta(days=i) for i in range(7)]


def is_past(day: date, today: date) -> bool:
    return day < today


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = _stdcal.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)
