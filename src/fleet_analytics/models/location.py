"""Device location models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.timezone_utils import parse_instant


class LocationPing(BaseModel):
    """A single location report from a device heartbeat."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: Optional[float] = Field(default=None, description="Reported accuracy in meters")
    battery_level: Optional[float] = None
    device_id: Optional[str] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _normalize_timestamp(cls, value):
        """Store every timestamp as an aware UTC instant."""
        return parse_instant(value)


@dataclass
class DayBucket:
    """Aggregated location activity for one Pacific calendar day."""
    date: str
    day_name: str
    count: int = 0
    avg_accuracy: float = 0.0
    time_span_hours: float = 0.0
    has_data: bool = False
    is_current_month: bool = True
    is_today: bool = False

    def to_dict(self) -> dict:
        """Serialize with the field names the dashboard expects."""
        return {
            "date": self.date,
            "dayName": self.day_name,
            "locationCount": self.count,
            "avgAccuracy": self.avg_accuracy,
            "timeSpan": self.time_span_hours,
            "hasData": self.has_data,
            "isCurrentMonth": self.is_current_month,
            "isToday": self.is_today,
        }
