"""Request-level helpers shared by the analytics route handlers."""

from typing import Any, Dict, Mapping, Optional, Tuple

import structlog

from .core.normalizer import PacificDateNormalizer, default_normalizer
from .errors import DateNormalizationError
from .models.time_range import DateRange, TimeRange

logger = structlog.get_logger()


def resolve_date_range(
    params: Mapping[str, Any],
    normalizer: Optional[PacificDateNormalizer] = None
) -> DateRange:
    """Resolve the date range requested by a query string or JSON body.

    ``timeRange`` defaults to ``24h``. Explicit ``startDate`` and ``endDate``
    without a ``timeRange`` select a custom range.

    Raises:
        InvalidRange: for an incomplete or reversed custom range
    """
    normalizer = normalizer or default_normalizer
    start_date = params.get("startDate") or None
    end_date = params.get("endDate") or None
    token = params.get("timeRange")

    if token is None:
        token = TimeRange.CUSTOM if (start_date or end_date) else TimeRange.DAY

    date_range = normalizer.range_for(token, start_date=start_date, end_date=end_date)
    logger.info(
        "Resolved request date range",
        time_range=str(token.value if isinstance(token, TimeRange) else token),
        start_date=date_range.start_date,
        end_date=date_range.end_date
    )
    return date_range


def error_response(exc: Exception) -> Tuple[int, Dict[str, str]]:
    """Translate an exception into an HTTP status and JSON body."""
    if isinstance(exc, DateNormalizationError):
        return 400, {"error": type(exc).__name__, "details": str(exc)}

    logger.error("Unhandled analytics error", error=str(exc))
    return 500, {"error": "Failed to fetch analytics data", "details": str(exc)}
