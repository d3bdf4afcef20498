"""Timezone utilities for fleet analytics.

This module provides centralized timezone handling for the analytics layer.
Device heartbeats are stored in UTC but every report is bucketed by the
Pacific calendar day the fleet operates in. Conversions always go through the
tz database so that the same wall-clock hour resolves to UTC-7 in summer and
UTC-8 in winter.
"""

import re
from datetime import date, datetime, time as dt_time, timedelta, tzinfo
from typing import Any, Tuple
from zoneinfo import ZoneInfo

import structlog

from ..errors import InvalidInstant, InvalidRange

logger = structlog.get_logger()

# Timezone constants
PACIFIC_TZ = ZoneInfo("America/Los_Angeles")  # Pacific Standard/Daylight Time
UTC_TZ = ZoneInfo("UTC")

CALENDAR_DATE_FORMAT = "%Y-%m-%d"
_CALENDAR_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is in UTC timezone.

    Args:
        dt: Datetime that may be naive or in any timezone

    Returns:
        Datetime converted to UTC timezone
    """
    if dt.tzinfo is None:
        # Warehouse timestamps come back naive but are UTC
        return dt.replace(tzinfo=UTC_TZ)
    else:
        return dt.astimezone(UTC_TZ)


def utc_to_pacific(utc_dt: datetime, tz: tzinfo = PACIFIC_TZ) -> datetime:
    """Convert a UTC datetime to Pacific time.

    Args:
        utc_dt: Datetime in UTC (may be naive or timezone-aware)
        tz: Target zone, Pacific unless the service is configured otherwise

    Returns:
        Datetime converted to the target zone
    """
    return ensure_utc(utc_dt).astimezone(tz)


def pacific_to_utc(local_dt: datetime, tz: tzinfo = PACIFIC_TZ) -> datetime:
    """Convert a Pacific wall-clock datetime to UTC for warehouse queries.

    Naive datetimes are interpreted as wall-clock time in ``tz``.
    """
    if local_dt.tzinfo is None:
        local_dt = local_dt.replace(tzinfo=tz)
    return local_dt.astimezone(UTC_TZ)


def pacific_components(dt: datetime, tz: tzinfo = PACIFIC_TZ) -> Tuple[int, int, int, int, int, int]:
    """Break an instant into (year, month, day, hour, minute, second) in the target zone."""
    local = utc_to_pacific(dt, tz)
    return local.year, local.month, local.day, local.hour, local.minute, local.second


def format_calendar_date(value: date) -> str:
    """Format a date as a zero-padded ``YYYY-MM-DD`` string."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def pacific_day_boundaries(pacific_date: date, tz: tzinfo = PACIFIC_TZ) -> Tuple[datetime, datetime]:
    """Get Pacific day boundaries (midnight to the following midnight).

    The end is exclusive. Both values carry ``tz``, so compare them after
    ``ensure_utc`` when the elapsed time matters: a transition day is 23 or
    25 hours long.

    Args:
        pacific_date: Calendar date in the Pacific zone

    Returns:
        Tuple of (day_start, next_day_start), both timezone-aware

    Raises:
        InvalidRange: for the last representable date, which has no following midnight
    """
    try:
        next_date = pacific_date + timedelta(days=1)
    except OverflowError as e:
        raise InvalidRange(f"No day follows {format_calendar_date(pacific_date)}") from e

    day_start = datetime.combine(pacific_date, dt_time.min, tzinfo=tz)
    next_day_start = datetime.combine(next_date, dt_time.min, tzinfo=tz)
    return day_start, next_day_start


def _checked_utc(value: datetime) -> datetime:
    try:
        return ensure_utc(value)
    except (OverflowError, ValueError) as e:
        raise InvalidInstant(f"Instant out of range: {value.isoformat()}") from e


def parse_instant(value: Any) -> datetime:
    """Parse an instant into an aware UTC datetime.

    Accepts datetimes, ISO-8601 strings (with or without a trailing ``Z``),
    the ``YYYY-MM-DD HH:MM:SS UTC`` form used by warehouse exports, and epoch
    seconds. Naive values are taken as UTC.

    Raises:
        InvalidInstant: if the value cannot be interpreted as an instant
    """
    if isinstance(value, datetime):
        return _checked_utc(value)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=UTC_TZ)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidInstant(f"Epoch value out of range: {value!r}") from e

    if not isinstance(value, str):
        raise InvalidInstant(f"Unsupported instant type: {type(value).__name__}")

    text = value.strip()
    if text.endswith(" UTC"):
        text = text[:-4] + "+00:00"
    elif text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidInstant(f"Unparseable instant: {value!r}") from e

    if parsed.tzinfo is None:
        logger.debug("Instant provided without offset, assuming UTC", value=value)

    return _checked_utc(parsed)


def parse_calendar_date(value: Any) -> date:
    """Parse a ``YYYY-MM-DD`` calendar date.

    Raises:
        InvalidRange: if the value is not a real, zero-padded calendar date
    """
    if isinstance(value, datetime):
        raise InvalidRange(f"Expected a calendar date, got a datetime: {value.isoformat()}")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _CALENDAR_DATE_RE.fullmatch(value.strip()):
        raise InvalidRange(f"Expected a YYYY-MM-DD date, got {value!r}")

    try:
        return datetime.strptime(value.strip(), CALENDAR_DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidRange(f"Not a calendar date: {value!r}") from e
