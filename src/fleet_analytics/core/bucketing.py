"""Per-day aggregation of device location pings."""

import calendar
from collections import defaultdict
from datetime import date, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Union

import structlog

from ..errors import InvalidRange
from ..models.location import DayBucket, LocationPing
from ..models.time_range import DateRange
from .timezone_utils import PACIFIC_TZ, format_calendar_date, utc_to_pacific

logger = structlog.get_logger()

# Sunday-first calendar grid, matching the dashboard month view
_GRID_FIRST_WEEKDAY = calendar.SUNDAY


def group_by_pacific_date(
    pings: Iterable[LocationPing],
    tz: tzinfo = PACIFIC_TZ
) -> Dict[str, List[LocationPing]]:
    """Group pings by the calendar date they fall on in ``tz``.

    Pings within each day keep their input order.
    """
    grouped: Dict[str, List[LocationPing]] = defaultdict(list)
    for ping in pings:
        local_date = utc_to_pacific(ping.timestamp, tz).date()
        grouped[format_calendar_date(local_date)].append(ping)
    return dict(grouped)


def _fill_bucket(bucket: DayBucket, day_pings: List[LocationPing]) -> DayBucket:
    """Populate a bucket's statistics from the pings of its day."""
    if not day_pings:
        return bucket

    accuracies = [p.accuracy for p in day_pings if p.accuracy is not None]
    timestamps = [p.timestamp for p in day_pings]

    bucket.count = len(day_pings)
    bucket.avg_accuracy = sum(accuracies) / len(accuracies) if accuracies else 0.0
    bucket.time_span_hours = (max(timestamps) - min(timestamps)).total_seconds() / 3600
    bucket.has_data = True
    return bucket


def _empty_bucket(day: date, today: Optional[str], is_current_month: bool = True) -> DayBucket:
    formatted = format_calendar_date(day)
    return DayBucket(
        date=formatted,
        day_name=calendar.day_name[day.weekday()],
        is_current_month=is_current_month,
        is_today=formatted == today
    )


def bucket_by_day(
    pings: Iterable[LocationPing],
    date_range: DateRange,
    today: Optional[str] = None,
    tz: tzinfo = PACIFIC_TZ
) -> List[DayBucket]:
    """Produce one bucket per calendar day of ``date_range``.

    Days without pings are kept as empty buckets so the dashboard never
    loses a day. Pings outside the range are ignored.

    Args:
        pings: Location pings with UTC timestamps
        date_range: Inclusive window of calendar dates
        today: Calendar date flagged as ``is_today`` on its bucket
        tz: Zone the calendar days belong to

    Returns:
        Buckets ordered by date, exactly ``date_range.day_count`` long
    """
    grouped = group_by_pacific_date(pings, tz)
    start = date_range.start

    buckets = []
    for offset in range(date_range.day_count):
        day = start + timedelta(days=offset)
        bucket = _empty_bucket(day, today)
        buckets.append(_fill_bucket(bucket, grouped.get(bucket.date, [])))

    ignored = sum(len(v) for k, v in grouped.items() if k not in date_range)
    logger.debug(
        "Bucketed location pings by day",
        start_date=date_range.start_date,
        end_date=date_range.end_date,
        days=len(buckets),
        active_days=sum(1 for b in buckets if b.has_data),
        ignored_pings=ignored
    )

    return buckets


def month_calendar(
    pings: Iterable[LocationPing],
    year: int,
    month: int,
    today: Optional[str] = None,
    tz: tzinfo = PACIFIC_TZ
) -> List[DayBucket]:
    """Calendar grid for one month.

    The grid opens with the trailing days of the previous month needed to
    start on a Sunday. Those padding days are flagged ``is_current_month=False``
    and always left empty.

    Raises:
        InvalidRange: if ``month`` is outside 1..12, or the grid would open
            before the first representable date
    """
    month_range = DateRange.for_month(year, month)

    first = month_range.start
    leading = (first.weekday() - _GRID_FIRST_WEEKDAY) % 7
    try:
        padding = [
            _empty_bucket(first - timedelta(days=leading - i), today, is_current_month=False)
            for i in range(leading)
        ]
    except OverflowError as e:
        raise InvalidRange(f"No calendar grid before {month_range.start_date}") from e

    return padding + bucket_by_day(pings, month_range, today=today, tz=tz)


def summarize(buckets: List[DayBucket]) -> Dict[str, Union[int, float]]:
    """Totals reported alongside a list of day buckets."""
    in_month = [b for b in buckets if b.is_current_month]
    return {
        "totalDays": len(in_month),
        "activeDays": sum(1 for b in in_month if b.has_data),
        "totalLocations": sum(b.count for b in in_month),
    }
