"""Data models and types for fleet analytics."""

from .time_range import DateRange, TimeRange, ROLLING_WINDOW_DAYS
from .location import LocationPing, DayBucket
from .uptime import Heartbeat, UptimeSlot, UptimeStats
from .config import ServiceConfig, WarehouseConfig

__all__ = [
    "DateRange",
    "TimeRange",
    "ROLLING_WINDOW_DAYS",
    "LocationPing",
    "DayBucket",
    "Heartbeat",
    "UptimeSlot",
    "UptimeStats",
    "ServiceConfig",
    "WarehouseConfig",
]
