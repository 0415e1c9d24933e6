"""Tests for school-calendar helpers (pure functions, fixed instants)."""

import sys
import os
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.timeutils import (
    day_bounds,
    iso_week_number,
    next_fire_time,
    next_publish_date,
    seconds_until,
    weekday_name,
)

MX = ZoneInfo("America/Mexico_City")  # UTC-6, no DST since 2022


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestIsoWeek:
    def test_first_monday_of_2024_is_week_one(self):
        assert iso_week_number(date(2024, 1, 1)) == 1

    def test_sunday_belongs_to_previous_week(self):
        """Dec 31, 2023 is a Sunday and closes week 52."""
        assert iso_week_number(date(2023, 12, 31)) == 52

    def test_early_january_can_fall_in_week_53(self):
        assert iso_week_number(date(2021, 1, 1)) == 53

    def test_mid_march(self):
        assert iso_week_number(date(2024, 3, 13)) == 11

    def test_accepts_datetime(self):
        assert iso_week_number(datetime(2024, 1, 1, 23, 0)) == 1


class TestWeekdayName:
    def test_lowercase_english(self):
        assert weekday_name(date(2024, 3, 15)) == "friday"
        assert weekday_name(date(2024, 3, 17)) == "sunday"


class TestNextPublishDate:
    def test_friday_afternoon_rolls_to_monday(self):
        now = utc(2024, 3, 15, 20, 0)  # Friday 14:00 local
        result = next_publish_date(now, MX, 13)
        assert result == datetime(2024, 3, 18, 13, 0, tzinfo=MX)

    def test_weekday_morning_is_same_day(self):
        now = utc(2024, 3, 11, 16, 0)  # Monday 10:00 local
        assert next_publish_date(now, MX, 13) == datetime(2024, 3, 11, 13, 0, tzinfo=MX)

    def test_exactly_at_publish_hour_moves_forward(self):
        now = utc(2024, 3, 12, 19, 0)  # Tuesday 13:00 local
        assert next_publish_date(now, MX, 13) == datetime(2024, 3, 13, 13, 0, tzinfo=MX)

    def test_saturday_goes_to_monday(self):
        now = utc(2024, 3, 16, 16, 0)  # Saturday 10:00 local
        assert next_publish_date(now, MX, 13) == datetime(2024, 3, 18, 13, 0, tzinfo=MX)

    def test_sunday_goes_to_monday(self):
        now = utc(2024, 3, 17, 22, 0)  # Sunday 16:00 local
        assert next_publish_date(now, MX, 13) == datetime(2024, 3, 18, 13, 0, tzinfo=MX)

    def test_result_is_strictly_after_now(self):
        now = utc(2024, 3, 14, 18, 59)
        assert next_publish_date(now, MX, 13) > now


class TestFireTimes:
    def test_next_fire_skips_weekend(self):
        now = utc(2024, 3, 15, 19, 0)  # Friday 13:00 local, after the 12:00 slot
        assert next_fire_time(now, MX, 12) == datetime(2024, 3, 18, 12, 0, tzinfo=MX)

    def test_next_fire_later_today(self):
        now = utc(2024, 3, 13, 15, 0)  # Wednesday 09:00 local
        assert next_fire_time(now, MX, 13, 30) == datetime(2024, 3, 13, 13, 30, tzinfo=MX)

    def test_seconds_until(self):
        now = utc(2024, 3, 13, 15, 0)
        target = datetime(2024, 3, 13, 10, 0, tzinfo=MX)  # 16:00 UTC
        assert seconds_until(now, target) == 3600.0

    def test_seconds_until_past_is_zero(self):
        assert seconds_until(utc(2024, 3, 13, 15, 0), utc(2024, 3, 13, 14, 0)) == 0.0


class TestDayBounds:
    def test_local_day_window(self):
        now = utc(2024, 3, 14, 3, 0)  # Wednesday 21:00 local
        start, end = day_bounds(now, MX)
        assert start == datetime(2024, 3, 13, 0, 0, tzinfo=MX)
        assert end == datetime(2024, 3, 14, 0, 0, tzinfo=MX)
