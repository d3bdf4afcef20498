import pytest

from fleet_analytics.errors import InvalidInstant, InvalidRange
from fleet_analytics.handlers import error_response, resolve_date_range


def test_default_is_24h(normalizer_at):
    result = resolve_date_range({}, normalizer_at("2025-09-22T00:06:24"))
    assert result.to_params() == {"startDate": "2025-09-21", "endDate": "2025-09-21"}


def test_token_from_request(normalizer_at):
    result = resolve_date_range({"timeRange": "7d"}, normalizer_at("2025-09-22T00:06:24"))
    assert result.start_date == "2025-09-15"


def test_explicit_dates_select_custom(normalizer_at):
    result = resolve_date_range(
        {"startDate": "2025-03-01", "endDate": "2025-03-10"},
        normalizer_at("2025-09-22T00:06:24")
    )
    assert (result.start_date, result.end_date) == ("2025-03-01", "2025-03-10")


def test_token_wins_over_dates(normalizer_at):
    result = resolve_date_range(
        {"timeRange": "24h", "startDate": "2025-03-01", "endDate": "2025-03-10"},
        normalizer_at("2025-09-22T00:06:24")
    )
    assert result.start_date == "2025-09-21"


def test_reversed_custom_range(normalizer_at):
    with pytest.raises(InvalidRange) as excinfo:
        resolve_date_range(
            {"timeRange": "custom", "startDate": "2025-03-10", "endDate": "2025-03-01"},
            normalizer_at("2025-09-22T00:06:24")
        )

    status, body = error_response(excinfo.value)
    assert status == 400
    assert body["error"] == "InvalidRange"


def test_missing_end_date(normalizer_at):
    with pytest.raises(InvalidRange):
        resolve_date_range({"startDate": "2025-03-10"}, normalizer_at("2025-09-22T00:06:24"))


def test_error_responses():
    assert error_response(InvalidInstant("bad"))[0] == 400
    status, body = error_response(RuntimeError("warehouse down"))
    assert status == 500
    assert body["details"] == "warehouse down"
