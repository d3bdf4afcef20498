from datetime import date, datetime, timedelta

import pytest

from fleet_analytics.core.timezone_utils import (
    PACIFIC_TZ,
    UTC_TZ,
    ensure_utc,
    format_calendar_date,
    pacific_components,
    pacific_day_boundaries,
    pacific_to_utc,
    parse_calendar_date,
    parse_instant,
    utc_to_pacific,
)
from fleet_analytics.errors import InvalidInstant, InvalidRange

from .conftest import utc


@pytest.mark.parametrize("value", [
    "2025-09-22T00:06:24Z",
    "2025-09-22T00:06:24+00:00",
    "2025-09-22 00:06:24 UTC",
    "2025-09-21T17:06:24-07:00",
    datetime(2025, 9, 22, 0, 6, 24),
    1758499584,
])
def test_parse_instant_accepts_common_forms(value):
    assert parse_instant(value) == utc("2025-09-22T00:06:24")


def test_parse_instant_returns_utc():
    parsed = parse_instant("2025-09-21T17:06:24-07:00")
    assert parsed.utcoffset() == timedelta(0)


@pytest.mark.parametrize("value", ["", "garbage", "2025-13-01T00:00:00Z", None, True, [2025, 9, 22], 1e20, "0001-01-01T00:00:00+08:00"])
def test_parse_instant_rejects_bad_input(value):
    with pytest.raises(InvalidInstant):
        parse_instant(value)


def test_components_use_daylight_offset():
    # 00:06 UTC on Sep 22 is still the afternoon of Sep 21 in PDT
    assert pacific_components(utc("2025-09-22T00:06:24")) == (2025, 9, 21, 17, 6, 24)


def test_same_wall_hour_has_seasonal_offsets():
    summer = utc_to_pacific(utc("2025-07-01T19:00:00"))
    winter = utc_to_pacific(utc("2025-01-01T20:00:00"))
    assert summer.hour == winter.hour == 12
    assert summer.utcoffset() == timedelta(hours=-7)
    assert winter.utcoffset() == timedelta(hours=-8)


def test_naive_values_are_utc():
    naive = datetime(2025, 1, 1, 12, 0)
    assert ensure_utc(naive).tzinfo == UTC_TZ
    assert utc_to_pacific(naive).hour == 4


def test_pacific_to_utc_treats_naive_as_wall_clock():
    assert pacific_to_utc(datetime(2025, 7, 1, 0, 0)) == utc("2025-07-01T07:00:00")


@pytest.mark.parametrize("day, hours", [
    (date(2025, 3, 9), 23),   # spring forward
    (date(2025, 11, 2), 25),  # fall back
    (date(2025, 6, 15), 24),
])
def test_day_boundaries_follow_transitions(day, hours):
    start, end = pacific_day_boundaries(day)
    assert start.tzinfo is PACIFIC_TZ
    assert ensure_utc(end) - ensure_utc(start) == timedelta(hours=hours)


def test_day_boundaries_of_last_date():
    with pytest.raises(InvalidRange):
        pacific_day_boundaries(date.max)


def test_fall_back_day_starts_at_pdt_midnight():
    start, end = pacific_day_boundaries(date(2025, 11, 2))
    assert ensure_utc(start) == utc("2025-11-02T07:00:00")
    assert ensure_utc(end) == utc("2025-11-03T08:00:00")


def test_parse_calendar_date():
    assert parse_calendar_date("2024-02-29") == date(2024, 2, 29)
    assert parse_calendar_date(date(2025, 1, 5)) == date(2025, 1, 5)


@pytest.mark.parametrize("value", ["2025-02-30", "2025-3-1", "20250301", "", None, datetime(2025, 3, 1)])
def test_parse_calendar_date_rejects_bad_input(value):
    with pytest.raises(InvalidRange):
        parse_calendar_date(value)


def test_format_calendar_date_zero_pads():
    assert format_calendar_date(date(987, 3, 4)) == "0987-03-04"
