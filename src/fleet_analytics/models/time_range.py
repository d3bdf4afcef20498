"""Time range models."""

import calendar
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Optional, Union

from ..core.timezone_utils import format_calendar_date, parse_calendar_date
from ..errors import InvalidRange


class TimeRange(str, Enum):
    """Named time ranges accepted by the analytics endpoints."""
    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"
    CUSTOM = "custom"

    @classmethod
    def lookup(cls, value: Union[str, "TimeRange", None]) -> Optional["TimeRange"]:
        """Return the matching member, or None for an unrecognized token."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None


# Days before the reference date that open each rolling window
ROLLING_WINDOW_DAYS = {
    TimeRange.DAY: 0,
    TimeRange.WEEK: 6,
    TimeRange.MONTH: 29,
    TimeRange.QUARTER: 89,
}


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of Pacific calendar dates.

    Both bounds are stored as zero-padded ``YYYY-MM-DD`` strings; ``date``
    objects are accepted and normalized on construction.
    """
    start_date: str
    end_date: str

    def __post_init__(self):
        start = parse_calendar_date(self.start_date)
        end = parse_calendar_date(self.end_date)
        if start > end:
            raise InvalidRange(
                f"Start date {format_calendar_date(start)} is after end date {format_calendar_date(end)}"
            )
        object.__setattr__(self, "start_date", format_calendar_date(start))
        object.__setattr__(self, "end_date", format_calendar_date(end))

    @classmethod
    def for_month(cls, year: int, month: int) -> "DateRange":
        """First through last calendar date of a month.

        Raises:
            InvalidRange: if ``month`` is outside 1..12 or ``year`` outside 1..9999
        """
        if not 1 <= month <= 12:
            raise InvalidRange(f"Month must be between 1 and 12, got {month}")
        if not 1 <= year <= 9999:
            raise InvalidRange(f"Year out of range: {year}")

        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @property
    def start(self) -> date:
        return parse_calendar_date(self.start_date)

    @property
    def end(self) -> date:
        return parse_calendar_date(self.end_date)

    @property
    def day_count(self) -> int:
        """Number of calendar days covered, counting both ends."""
        return (self.end - self.start).days + 1

    def __contains__(self, value: Union[str, date]) -> bool:
        return self.start <= parse_calendar_date(value) <= self.end

    def to_params(self) -> Dict[str, str]:
        """Named query parameters consumed by the warehouse queries."""
        return {"startDate": self.start_date, "endDate": self.end_date}
