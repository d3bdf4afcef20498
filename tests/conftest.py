"""Shared fixtures for the fleet analytics tests."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from fleet_analytics.core.normalizer import PacificDateNormalizer

UTC = ZoneInfo("UTC")


def utc(iso: str) -> datetime:
    """Aware UTC datetime from an ISO string without offset."""
    return datetime.fromisoformat(iso).replace(tzinfo=UTC)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in ("FLEET_TIMEZONE", "LOG_LEVEL", "GOOGLE_CLOUD_PROJECT_ID", "WAREHOUSE_DATASET",
                 "WAREHOUSE_TABLE", "GOOGLE_APPLICATION_CREDENTIALS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def normalizer_at():
    """Build a normalizer whose clock is frozen at the given UTC instant."""
    def factory(iso: str) -> PacificDateNormalizer:
        instant = utc(iso)
        return PacificDateNormalizer(clock=lambda: instant)
    return factory
