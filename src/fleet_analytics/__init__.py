"""
Fleet Analytics

Pacific calendar dates, date ranges and day buckets for fleet telemetry queries.
"""

from .core import PacificDateNormalizer, bucket_by_day
from .errors import InvalidInstant, InvalidRange
from .models import DateRange, ServiceConfig, TimeRange

__version__ = "0.1.0"
__all__ = [
    "PacificDateNormalizer",
    "bucket_by_day",
    "DateRange",
    "TimeRange",
    "ServiceConfig",
    "InvalidInstant",
    "InvalidRange",
]
