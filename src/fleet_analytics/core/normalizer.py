"""Pacific calendar dates and date ranges for analytics queries."""

from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Callable, List, Optional, Union

import structlog

from ..errors import InvalidInstant, InvalidRange
from ..models.time_range import DateRange, TimeRange, ROLLING_WINDOW_DAYS
from .timezone_utils import (
    PACIFIC_TZ,
    UTC_TZ,
    format_calendar_date,
    parse_instant,
)

logger = structlog.get_logger()

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(UTC_TZ)


def _subtract_year(local: datetime) -> datetime:
    """Same month and day one year earlier; Feb 29 becomes Feb 28."""
    if local.year == 1:
        raise InvalidInstant(f"No year before {local.isoformat()}")
    try:
        return local.replace(year=local.year - 1)
    except ValueError:
        return local.replace(year=local.year - 1, day=28)


class PacificDateNormalizer:
    """Maps instants and time range tokens onto Pacific calendar dates.

    Every operation reads the clock at most once and keeps no state between
    calls, so a single instance can be shared across request handlers.
    """

    def __init__(self, clock: Optional[Clock] = None, timezone: tzinfo = PACIFIC_TZ):
        """Initialize the normalizer.

        Args:
            clock: Returns the current instant; defaults to the system clock
            timezone: Zone whose calendar days are reported
        """
        self.clock = clock or utc_now
        self.timezone = timezone

    def _to_zone(self, instant: Any) -> datetime:
        """Parse an instant and express it in the target zone."""
        parsed = parse_instant(instant)
        try:
            return parsed.astimezone(self.timezone)
        except (OverflowError, ValueError) as e:
            raise InvalidInstant(f"Instant out of range in {self.timezone}: {parsed.isoformat()}") from e

    def _reference(self, reference: Any = None) -> datetime:
        """Resolve the reference instant and express it in the target zone."""
        return self._to_zone(self.clock() if reference is None else reference)

    def today(self, reference: Any = None) -> str:
        """Calendar date of the current (or given) instant."""
        return format_calendar_date(self._reference(reference).date())

    def date_of(self, instant: Any) -> str:
        """Calendar date of an arbitrary instant.

        Raises:
            InvalidInstant: if ``instant`` cannot be parsed
        """
        local = self._to_zone(instant)
        return format_calendar_date(local.date())

    def is_today(self, instant: Any, reference: Any = None) -> bool:
        """Whether ``instant`` falls on the same calendar date as the reference."""
        return self.date_of(instant) == self.today(reference)

    def range_for(
        self,
        token: Union[str, TimeRange, None],
        reference: Any = None,
        start_date: Union[str, date, None] = None,
        end_date: Union[str, date, None] = None,
    ) -> DateRange:
        """Resolve a time range token into an inclusive date range.

        Rolling windows end on the reference date and reach back so that
        ``7d`` covers seven calendar days. Day arithmetic is done on the
        zone-aware datetime, which Python treats as wall-clock arithmetic, so
        a DST transition inside the window never adds or drops a day.

        Unrecognized tokens resolve like ``24h``.

        Args:
            token: One of ``24h``, ``7d``, ``30d``, ``90d``, ``1y``, ``custom``
            reference: Instant the range is anchored to; defaults to the clock
            start_date: First date of a ``custom`` range
            end_date: Last date of a ``custom`` range

        Raises:
            InvalidRange: for a ``custom`` range that is incomplete or reversed
            InvalidInstant: if ``reference`` cannot be parsed
        """
        time_range = TimeRange.lookup(token)

        if time_range is TimeRange.CUSTOM:
            if start_date is None or end_date is None:
                raise InvalidRange("A custom range needs both a start date and an end date")
            result = DateRange(start_date, end_date)
            logger.debug(
                "Resolved custom date range",
                start_date=result.start_date,
                end_date=result.end_date
            )
            return result

        if time_range is None:
            # TODO: confirm with the dashboard owners whether unknown tokens should be rejected
            logger.warning("Unknown time range, using 24h", token=token)
            time_range = TimeRange.DAY

        local_ref = self._reference(reference)

        try:
            if time_range is TimeRange.YEAR:
                local_start = _subtract_year(local_ref)
            else:
                local_start = local_ref - timedelta(days=ROLLING_WINDOW_DAYS[time_range])
        except OverflowError as e:
            raise InvalidInstant(
                f"Reference {local_ref.isoformat()} is too early for a {time_range.value} range"
            ) from e

        result = DateRange(
            format_calendar_date(local_start.date()),
            format_calendar_date(local_ref.date())
        )

        logger.debug(
            "Resolved date range",
            token=time_range.value,
            reference=local_ref.isoformat(),
            start_date=result.start_date,
            end_date=result.end_date,
            days=result.day_count
        )

        return result

    def month_range(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        reference: Any = None,
    ) -> DateRange:
        """First through last calendar date of a month.

        Year and month default to those of the reference instant.

        Raises:
            InvalidRange: if ``month`` is outside 1..12
        """
        if year is None or month is None:
            local_ref = self._reference(reference)
            year = local_ref.year if year is None else year
            month = local_ref.month if month is None else month

        return DateRange.for_month(year, month)

    @staticmethod
    def enumerate_dates(date_range: DateRange) -> List[str]:
        """Every calendar date of the range, in order."""
        start = date_range.start
        return [
            format_calendar_date(start + timedelta(days=offset))
            for offset in range(date_range.day_count)
        ]


default_normalizer = PacificDateNormalizer()


def today() -> str:
    """Today's Pacific calendar date."""
    return default_normalizer.today()


def date_of(instant: Any) -> str:
    """Pacific calendar date of ``instant``."""
    return default_normalizer.date_of(instant)


def range_for(
    token: Union[str, TimeRange, None],
    reference: Any = None,
    start_date: Union[str, date, None] = None,
    end_date: Union[str, date, None] = None,
) -> DateRange:
    """Resolve a time range token with the system clock."""
    return default_normalizer.range_for(token, reference, start_date, end_date)


def days_in(date_range: DateRange) -> List[str]:
    """Every calendar date of ``date_range``."""
    return PacificDateNormalizer.enumerate_dates(date_range)


__all__ = [
    "PacificDateNormalizer",
    "default_normalizer",
    "utc_now",
    "today",
    "date_of",
    "range_for",
    "days_in",
]
