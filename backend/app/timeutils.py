"""Calendar helpers for the school timezone.

All functions are pure: callers pass "now" explicitly so scheduling logic can
be tested against fixed instants.
"""

import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
SCHOOL_DAYS = frozenset(range(5))  # Monday..Friday as date.weekday()


def iso_week_number(d: date | datetime) -> int:
    """ISO-8601 week number.

    Shift the date to the Thursday of its week (Sunday counts as day 7), then
    count weeks from January 1st of that Thursday's year.
    """
    if isinstance(d, datetime):
        d = d.date()
    day_num = d.isoweekday()  # Monday=1 .. Sunday=7
    thursday = d + timedelta(days=4 - day_num)
    year_start = date(thursday.year, 1, 1)
    days_since = (thursday - year_start).days
    return math.ceil((days_since + 1) / 7)


def weekday_name(d: date | datetime) -> str:
    return WEEKDAY_NAMES[d.weekday()]


def to_local(now: datetime, tz: ZoneInfo) -> datetime:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz)


def at_local_time(now: datetime, tz: ZoneInfo, hour: int, minute: int = 0) -> datetime:
    """The given wall-clock time on now's local calendar day."""
    local = to_local(now, tz)
    return datetime.combine(local.date(), time(hour, minute), tzinfo=tz)


def day_bounds(now: datetime, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """[start, end) of now's local calendar day."""
    start = at_local_time(now, tz, 0)
    end = datetime.combine(start.date() + timedelta(days=1), time(0), tzinfo=tz)
    return start, end


def next_publish_date(now: datetime, tz: ZoneInfo, hour: int = 13) -> datetime:
    """Next school-day occurrence of `hour`:00 local strictly after now.

    Saturday and Sunday roll forward to Monday.
    """
    candidate = at_local_time(now, tz, hour)
    if candidate <= to_local(now, tz):
        candidate = datetime.combine(candidate.date() + timedelta(days=1), time(hour), tzinfo=tz)

    weekday = candidate.weekday()
    if weekday == 5:
        candidate = datetime.combine(candidate.date() + timedelta(days=2), time(hour), tzinfo=tz)
    elif weekday == 6:
        candidate = datetime.combine(candidate.date() + timedelta(days=1), time(hour), tzinfo=tz)
    return candidate


def next_fire_time(
    now: datetime,
    tz: ZoneInfo,
    hour: int,
    minute: int = 0,
    weekdays: Optional[Iterable[int]] = None,
) -> datetime:
    """Next local `hour:minute` after now falling on one of `weekdays`."""
    allowed = frozenset(weekdays) if weekdays is not None else SCHOOL_DAYS
    local_now = to_local(now, tz)
    day = local_now.date()
    for offset in range(8):
        candidate = datetime.combine(day + timedelta(days=offset), time(hour, minute), tzinfo=tz)
        if candidate > local_now and candidate.weekday() in allowed:
            return candidate
    raise ValueError("weekdays must contain at least one day")


def seconds_until(now: datetime, target: datetime) -> float:
    delta = target.astimezone(timezone.utc) - to_local(now, timezone.utc)
    return max(delta.total_seconds(), 0.0)
