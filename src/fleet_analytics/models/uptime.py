"""Device uptime models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..core.timezone_utils import parse_instant


class Heartbeat(BaseModel):
    """A device heartbeat as read from the warehouse."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    battery_level: Optional[float] = None
    cpu_usage: Optional[float] = None
    device_id: Optional[str] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _normalize_timestamp(cls, value):
        """Store every timestamp as an aware UTC instant."""
        return parse_instant(value)


@dataclass
class UptimeSlot:
    """Online status of a device over one fixed-length slot."""
    start: datetime
    display_time: str
    is_online: bool = False
    prev_is_online: Optional[bool] = None
    battery_level: float = 0.0
    cpu_usage: float = 0.0
    heartbeat_count: int = 0

    def to_dict(self) -> dict:
        """Serialize with the field names the uptime chart expects."""
        return {
            "time": self.start.isoformat(),
            "displayTime": self.display_time,
            "isOnline": int(self.is_online),
            "prevIsOnline": None if self.prev_is_online is None else int(self.prev_is_online),
            "batteryLevel": self.battery_level,
            "cpuUsage": self.cpu_usage,
            "heartbeatCount": self.heartbeat_count,
        }


@dataclass
class UptimeStats:
    """Session totals over a run of uptime slots. Durations are in minutes."""
    total_uptime: int = 0
    uptime_percentage: float = 0.0
    total_sessions: int = 0
    average_session_length: float = 0.0
    longest_session: int = 0
    longest_offline: int = 0
    first_online: Optional[str] = None
    last_online: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "totalUptime": self.total_uptime,
            "uptimePercentage": self.uptime_percentage,
            "totalSessions": self.total_sessions,
            "averageSessionLength": self.average_session_length,
            "longestSession": self.longest_session,
            "longestOffline": self.longest_offline,
            "firstOnline": self.first_online,
            "lastOnline": self.last_online,
        }
