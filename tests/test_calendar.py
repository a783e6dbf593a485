from datetime import date, datetime

import pytest

from liftlog.core.calendar import (
    Weekday,
    date_in_week,
    month_bounds,
    monday_of,
    to_date,
    week_dates,
    weekday_of,
)

# 2026-03-09 is a Monday
WEEK = [date(2026, 3, 9 + i) for i in range(7)]


@pytest.mark.parametrize("day", WEEK)
def test_monday_of_every_weekday(day):
    assert monday_of(day) == date(2026, 3, 9)


def test_monday_of_crosses_month_and_year():
    assert monday_of(date(2026, 3, 1)) == date(2026, 2, 23)  # Sunday
    assert monday_of(date(2027, 1, 1)) == date(2026, 12, 28)  # Friday


def test_weekday_numbering_is_iso():
    assert [w.iso for w in Weekday] == [1, 2, 3, 4, 5, 6, 7]
    assert Weekday.from_iso(7) is Weekday.SUNDAY
    assert [weekday_of(d) for d in WEEK] == list(Weekday)


@pytest.mark.parametrize("number", [0, 8])
def test_from_iso_rejects_out_of_range(number):
    with pytest.raises(ValueError):
        Weekday.from_iso(number)


def test_week_helpers():
    assert week_dates(date(2026, 3, 9)) == WEEK
    assert date_in_week(date(2026, 3, 9), Weekday.SUNDAY) == date(2026, 3, 15)


def test_to_date_accepts_dates_timestamps_and_strings():
    assert to_date(date(2026, 3, 9)) == date(2026, 3, 9)
    assert to_date(datetime(2026, 3, 9, 23, 59)) == date(2026, 3, 9)
    assert to_date("2026-03-09") == date(2026, 3, 9)


def test_month_bounds():
    assert month_bounds(2028, 2) == (date(2028, 2, 1), date(2028, 2, 29))
    assert month_bounds(2026, 12) == (date(2026, 12, 1), date(2026, 12, 31))
