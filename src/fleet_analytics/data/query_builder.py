"""Warehouse query construction for heartbeat analytics.

Queries filter on a half-open window of Pacific days. The bounds travel as
``@startDate`` / ``@endDate`` calendar date parameters and the warehouse
converts them with the named zone, so it applies the DST offset for each
bound itself.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Dict, Tuple

import structlog

from ..core.timezone_utils import PACIFIC_TZ, pacific_day_boundaries, pacific_to_utc
from ..models.config import WarehouseConfig
from ..models.time_range import DateRange

logger = structlog.get_logger()

ZONE_NAME = "America/Los_Angeles"


def pacific_window_clause(column: str, zone_name: str = ZONE_NAME) -> str:
    """Filter clause selecting ``column`` within the ``@startDate``..``@endDate`` days."""
    return (
        f"{column} >= PARSE_TIMESTAMP('%Y-%m-%d %H:%M:%S %Z', "
        f"CONCAT(@startDate, ' 00:00:00 {zone_name}'))\n"
        f"        AND {column} < PARSE_TIMESTAMP('%Y-%m-%d %H:%M:%S %Z', "
        f"CONCAT(FORMAT_DATE('%Y-%m-%d', DATE_ADD(PARSE_DATE('%Y-%m-%d', @endDate), INTERVAL 1 DAY)), "
        f"' 00:00:00 {zone_name}'))"
    )


def build_query_parameters(device_id: str, date_range: DateRange) -> Dict[str, str]:
    """Named parameters for a device query over ``date_range``."""
    if not device_id:
        raise ValueError("Device ID is required")
    return {"deviceId": device_id, **date_range.to_params()}


def utc_bounds(date_range: DateRange, tz: tzinfo = PACIFIC_TZ) -> Tuple[datetime, datetime]:
    """UTC instants matching the SQL window: first midnight, inclusive, to the midnight after the last day, exclusive."""
    start_local, _ = pacific_day_boundaries(date_range.start, tz)
    _, end_local = pacific_day_boundaries(date_range.end, tz)
    return pacific_to_utc(start_local, tz), pacific_to_utc(end_local, tz)


@dataclass(frozen=True)
class WarehouseQuery:
    """A parameterized warehouse query."""
    sql: str
    params: Dict[str, str] = field(default_factory=dict)


class HeartbeatQueryBuilder:
    """Builds the location queries run against the heartbeats table."""

    def __init__(self, config: WarehouseConfig, zone_name: str = ZONE_NAME):
        self.config = config
        self.zone_name = zone_name

    def _device_filter(self) -> str:
        return "(device_id = @deviceId OR device_name = @deviceId)"

    def daily_locations(self, device_id: str, date_range: DateRange) -> WarehouseQuery:
        """Location counts aggregated per Pacific day."""
        zone = self.zone_name
        sql = f"""
      SELECT
        DATE(location_timestamp, "{zone}") as date,
        COUNT(*) as location_count,
        AVG(location_accuracy) as avg_accuracy,
        FORMAT_DATETIME('%Y-%m-%dT%H:%M:%S', DATETIME(MIN(location_timestamp), "{zone}")) as first_location,
        FORMAT_DATETIME('%Y-%m-%dT%H:%M:%S', DATETIME(MAX(location_timestamp), "{zone}")) as last_location
      FROM
        {self.config.table_ref}
      WHERE
        {self._device_filter()}
        AND latitude IS NOT NULL
        AND longitude IS NOT NULL
        AND {pacific_window_clause("location_timestamp", zone)}
      GROUP BY
        DATE(location_timestamp, "{zone}")
      ORDER BY
        date ASC
    """
        return self._query(sql, device_id, date_range, kind="daily_locations")

    def raw_locations(self, device_id: str, date_range: DateRange) -> WarehouseQuery:
        """Every location ping, with timestamps rendered in Pacific time."""
        zone = self.zone_name
        sql = f"""
      SELECT
        latitude,
        longitude,
        FORMAT_DATETIME('%Y-%m-%dT%H:%M:%S', DATETIME(location_timestamp, "{zone}")) as location_timestamp,
        location_accuracy,
        battery_level,
        device_id,
        device_name
      FROM
        {self.config.table_ref}
      WHERE
        {self._device_filter()}
        AND latitude IS NOT NULL
        AND longitude IS NOT NULL
        AND {pacific_window_clause("location_timestamp", zone)}
      ORDER BY
        location_timestamp ASC
    """
        return self._query(sql, device_id, date_range, kind="raw_locations")

    def heartbeats(self, device_id: str, date_range: DateRange) -> WarehouseQuery:
        """Raw heartbeats in UTC, the input to uptime slot bucketing."""
        sql = f"""
      SELECT
        location_timestamp,
        last_seen,
        device_id,
        device_name,
        battery_level,
        cpu_usage,
        is_charging
      FROM
        {self.config.table_ref}
      WHERE
        {self._device_filter()}
        AND {pacific_window_clause("location_timestamp", self.zone_name)}
      ORDER BY
        location_timestamp ASC
    """
        return self._query(sql, device_id, date_range, kind="heartbeats")

    def _query(self, sql: str, device_id: str, date_range: DateRange, kind: str) -> WarehouseQuery:
        params = build_query_parameters(device_id, date_range)
        logger.debug(
            "Built warehouse query",
            kind=kind,
            table=self.config.table_ref,
            **params
        )
        return WarehouseQuery(sql=sql, params=params)
