import pytest

from fleet_analytics.core.bucketing import bucket_by_day, group_by_pacific_date, month_calendar, summarize
from fleet_analytics.errors import InvalidRange
from fleet_analytics.models.location import LocationPing
from fleet_analytics.models.time_range import DateRange


def ping(timestamp, accuracy=None):
    return LocationPing(timestamp=timestamp, latitude=37.77, longitude=-122.42, accuracy=accuracy)


@pytest.fixture
def three_day_pings():
    return [
        ping("2025-03-01T18:00:00Z", accuracy=5.0),   # 10:00 PST Mar 1
        ping("2025-03-01T20:00:00Z", accuracy=15.0),  # 12:00 PST Mar 1
        ping("2025-03-03T17:00:00Z"),                 # 09:00 PST Mar 3
    ]


def test_empty_days_are_kept(three_day_pings):
    buckets = bucket_by_day(three_day_pings, DateRange("2025-03-01", "2025-03-03"))

    assert [b.date for b in buckets] == ["2025-03-01", "2025-03-02", "2025-03-03"]
    assert [b.count for b in buckets] == [2, 0, 1]
    assert buckets[1].has_data is False
    assert buckets[1].day_name == "Sunday"


def test_bucket_statistics(three_day_pings):
    first, _, third = bucket_by_day(three_day_pings, DateRange("2025-03-01", "2025-03-03"))

    assert first.day_name == "Saturday"
    assert first.avg_accuracy == pytest.approx(10.0)
    assert first.time_span_hours == pytest.approx(2.0)
    assert third.avg_accuracy == 0.0
    assert third.time_span_hours == 0.0


def test_pings_use_pacific_dates():
    buckets = bucket_by_day([ping("2025-09-22T00:06:24Z")], DateRange("2025-09-21", "2025-09-22"))
    assert [b.count for b in buckets] == [1, 0]


def test_pings_outside_window_are_ignored(three_day_pings):
    buckets = bucket_by_day(three_day_pings, DateRange("2025-03-02", "2025-03-02"))
    assert len(buckets) == 1
    assert buckets[0].count == 0


def test_fall_back_day_spans_twenty_five_hours():
    pings = [ping("2025-11-02T07:00:00Z"), ping("2025-11-03T07:59:00Z")]
    (bucket,) = bucket_by_day(pings, DateRange("2025-11-02", "2025-11-02"))
    assert bucket.count == 2
    assert bucket.time_span_hours == pytest.approx(24 + 59 / 60)


def test_today_flag(three_day_pings):
    buckets = bucket_by_day(three_day_pings, DateRange("2025-03-01", "2025-03-03"), today="2025-03-02")
    assert [b.is_today for b in buckets] == [False, True, False]


def test_group_by_pacific_date(three_day_pings):
    grouped = group_by_pacific_date(three_day_pings)
    assert sorted(grouped) == ["2025-03-01", "2025-03-03"]
    assert len(grouped["2025-03-01"]) == 2


def test_month_calendar_pads_to_sunday(three_day_pings):
    grid = month_calendar(three_day_pings, 2025, 3)

    # March 1, 2025 is a Saturday
    assert len(grid) == 6 + 31
    assert grid[0].date == "2025-02-23"
    assert grid[0].day_name == "Sunday"
    assert all(not b.is_current_month and b.count == 0 for b in grid[:6])
    assert grid[6].date == "2025-03-01"
    assert grid[6].count == 2
    assert grid[-1].date == "2025-03-31"


def test_month_calendar_starting_on_sunday():
    grid = month_calendar([], 2026, 2)
    assert len(grid) == 28
    assert grid[0].date == "2026-02-01"


@pytest.mark.parametrize("month", [0, 13])
def test_month_calendar_rejects_bad_month(month):
    with pytest.raises(InvalidRange):
        month_calendar([], 2025, month)


def test_month_calendar_cannot_pad_before_year_one():
    # January 1 of year 1 is a Monday, so the grid would open in year 0
    with pytest.raises(InvalidRange):
        month_calendar([], 1, 1)


def test_summarize_counts_only_the_month(three_day_pings):
    summary = summarize(month_calendar(three_day_pings, 2025, 3))
    assert summary == {"totalDays": 31, "activeDays": 2, "totalLocations": 3}


def test_bucket_serialization(three_day_pings):
    bucket = bucket_by_day(three_day_pings, DateRange("2025-03-01", "2025-03-01"))[0]
    assert bucket.to_dict()["locationCount"] == 2
    assert bucket.to_dict()["hasData"] is True
