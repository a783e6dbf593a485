import logging
import math
from datetime import datetime, timezone

from liftlog.core.config import settings
from liftlog.services.lifecycle import DayLike, DayState, classify

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (SQLite drops the offset) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_duration_minutes(start_time: datetime | None, end_time: datetime | None) -> int | None:
    """Whole minutes between two timestamps, halves rounded up; None if either is missing."""
    if start_time is None or end_time is None:
        return None
    seconds = (as_utc(end_time) - as_utc(start_time)).total_seconds()
    return math.floor(seconds / 60 + 0.5)


def displayable_duration(minutes: int | None, floor: int | None = None) -> int | None:
    """Display policy: sessions shorter than ``floor`` minutes show no duration."""
    floor = settings.MIN_DISPLAY_DURATION_MINUTES if floor is None else floor
    if minutes is None or minutes < floor:
        return None
    return minutes


def needs_auto_close(day: DayLike, now: datetime, limit_seconds: int | None = None) -> bool:
    """True for a session left running longer than the limit (default 3 hours)."""
    limit = settings.AUTO_CLOSE_AFTER_SECONDS if limit_seconds is None else limit_seconds
    if classify(day) is not DayState.IN_PROGRESS:
        return False
    elapsed = (as_utc(now) - as_utc(day.start_time)).total_seconds()
    return elapsed > limit
