from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from liftlog.services.lifecycle import DayState, DisplayState, classify, display_state, slot_display_state

TODAY = date(2026, 3, 11)  # a Wednesday
START = datetime(2026, 3, 11, 18, 0, tzinfo=timezone.utc)
END = datetime(2026, 3, 11, 19, 0, tzinfo=timezone.utc)


def day(date=None, start_time=None, end_time=None, is_completed=False):
    return SimpleNamespace(date=date, start_time=start_time, end_time=end_time, is_completed=is_completed)


@pytest.mark.parametrize(
    "record, expected",
    [
        (day(), DayState.TEMPLATE),
        (day(date=TODAY), DayState.PENDING),
        (day(date=TODAY, start_time=START), DayState.IN_PROGRESS),
        (day(date=TODAY, start_time=START, end_time=END), DayState.COMPLETED),
    ],
)
def test_classify_covers_every_state(record, expected):
    assert classify(record) is expected


def test_template_wins_over_timestamps():
    # A row without a date is a template no matter what else is set
    assert classify(day(start_time=START, end_time=END)) is DayState.TEMPLATE


def test_pending_wins_over_end_time():
    assert classify(day(date=TODAY, end_time=END)) is DayState.PENDING


def test_is_completed_flag_is_ignored():
    assert classify(day(date=TODAY, start_time=START, is_completed=True)) is DayState.IN_PROGRESS
    assert classify(day(date=TODAY, start_time=START, end_time=END, is_completed=False)) is DayState.COMPLETED


def test_past_pending_day_displays_as_missed():
    assert display_state(day(date=date(2026, 3, 9)), TODAY) is DisplayState.MISSED


def test_pending_today_or_later_stays_pending():
    assert display_state(day(date=TODAY), TODAY) is DisplayState.PENDING
    assert display_state(day(date=date(2026, 3, 13)), TODAY) is DisplayState.PENDING


def test_only_pending_days_can_be_missed():
    past = date(2026, 3, 2)
    assert display_state(day(date=past, start_time=START), TODAY) is DisplayState.IN_PROGRESS
    assert display_state(day(date=past, start_time=START, end_time=END), TODAY) is DisplayState.COMPLETED
    assert display_state(day(), TODAY) is DisplayState.TEMPLATE


def test_empty_calendar_slot():
    assert slot_display_state(date(2026, 3, 10), TODAY) is DisplayState.MISSED
    assert slot_display_state(TODAY, TODAY) is DisplayState.PENDING
