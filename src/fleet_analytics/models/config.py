"""Configuration models for fleet analytics."""

import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


def _load_env_file():
    """Load environment variables from .env files in common locations."""
    env_paths = [
        Path.cwd() / ".env.local",  # Dashboard convention
        Path.cwd() / ".env",  # Current directory
        Path(__file__).parent.parent.parent.parent / "config" / ".env",  # ../../../config/.env
    ]

    for env_path in env_paths:
        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)
            break


class WarehouseConfig(BaseModel):
    """Analytics warehouse location."""
    project_id: str = Field(default="frontseat-admin", description="Cloud project holding the dataset")
    dataset: str = Field(default="frontseat_analytics")
    table: str = Field(default="heartbeats")
    credentials_path: Optional[Path] = Field(default=None, description="Service account key file")

    @property
    def table_ref(self) -> str:
        """Fully qualified, backtick-quoted table reference."""
        return f"`{self.project_id}.{self.dataset}.{self.table}`"

    @property
    def is_configured(self) -> bool:
        """Whether credentials are available for live queries."""
        return self.credentials_path is not None and self.credentials_path.exists()

    @classmethod
    def from_env(cls) -> "WarehouseConfig":
        """Create from environment variables."""
        _load_env_file()  # Load .env file
        credentials = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        return cls(
            project_id=os.getenv("GOOGLE_CLOUD_PROJECT_ID", "frontseat-admin"),
            dataset=os.getenv("WAREHOUSE_DATASET", "frontseat_analytics"),
            table=os.getenv("WAREHOUSE_TABLE", "heartbeats"),
            credentials_path=Path(credentials) if credentials else None,
        )


class ServiceConfig(BaseModel):
    """Complete service configuration."""
    timezone: str = Field(default="America/Los_Angeles", description="IANA zone used for calendar days")
    warehouse: WarehouseConfig = Field(default_factory=WarehouseConfig)

    # Logging
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Create from environment variables."""
        _load_env_file()  # Load .env file
        return cls(
            timezone=os.getenv("FLEET_TIMEZONE", "America/Los_Angeles"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            warehouse=WarehouseConfig.from_env(),
        )
