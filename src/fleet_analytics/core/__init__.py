"""Core date normalization components."""

from .timezone_utils import (
    ensure_utc,
    utc_to_pacific,
    pacific_to_utc,
    pacific_components,
    pacific_day_boundaries,
    parse_instant,
    parse_calendar_date,
    format_calendar_date,
    PACIFIC_TZ,
    UTC_TZ
)
from .normalizer import PacificDateNormalizer, default_normalizer
from .bucketing import bucket_by_day, group_by_pacific_date, month_calendar, summarize
from .uptime import bucket_uptime, time_slots, uptime_stats

__all__ = [
    "PacificDateNormalizer",
    "default_normalizer",
    "bucket_by_day",
    "group_by_pacific_date",
    "month_calendar",
    "summarize",
    "bucket_uptime",
    "time_slots",
    "uptime_stats",
    "ensure_utc",
    "utc_to_pacific",
    "pacific_to_utc",
    "pacific_components",
    "pacific_day_boundaries",
    "parse_instant",
    "parse_calendar_date",
    "format_calendar_date",
    "PACIFIC_TZ",
    "UTC_TZ"
]
