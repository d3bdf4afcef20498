"""Main CLI interface."""

import logging
from typing import Optional

import typer
import structlog
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from ..core.normalizer import PacificDateNormalizer
from ..data.query_builder import HeartbeatQueryBuilder, utc_bounds
from ..errors import DateNormalizationError
from ..models.config import ServiceConfig
from ..models.time_range import DateRange

console = Console()
app = typer.Typer(help="Pacific calendar dates and date ranges for fleet analytics")

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

START_OPTION = typer.Option(None, "--start", help="First date of a custom range (YYYY-MM-DD)")
END_OPTION = typer.Option(None, "--end", help="Last date of a custom range (YYYY-MM-DD)")
REFERENCE_OPTION = typer.Option(None, "--reference", "-r", help="Reference instant (ISO format), defaults to now")
LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Logging level")


@app.command()
def today(
    reference: Optional[str] = REFERENCE_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Print today's calendar date."""
    normalizer = _build_normalizer(log_level)
    _run(lambda: console.print(normalizer.today(reference)))


@app.command("date-of")
def date_of(
    instant: str = typer.Argument(..., help="Instant to convert (ISO format, epoch seconds or 'YYYY-MM-DD HH:MM:SS UTC')"),
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Print the calendar date an instant falls on."""
    normalizer = _build_normalizer(log_level)
    _run(lambda: console.print(normalizer.date_of(instant)))


@app.command("range")
def show_range(
    token: str = typer.Argument("24h", help="Time range: 24h, 7d, 30d, 90d, 1y or custom"),
    start: Optional[str] = START_OPTION,
    end: Optional[str] = END_OPTION,
    reference: Optional[str] = REFERENCE_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Resolve a time range into start and end dates."""
    normalizer = _build_normalizer(log_level)

    def render():
        date_range = normalizer.range_for(token, reference, start, end)
        start_utc, end_utc = utc_bounds(date_range, normalizer.timezone)

        table = Table(title=f"Date range for {token}")
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("startDate", date_range.start_date)
        table.add_row("endDate", date_range.end_date)
        table.add_row("Days", str(date_range.day_count))
        table.add_row("UTC start", start_utc.isoformat())
        table.add_row("UTC end (exclusive)", end_utc.isoformat())

        console.print(table)

    _run(render)


@app.command()
def days(
    token: str = typer.Argument("7d", help="Time range: 24h, 7d, 30d, 90d, 1y or custom"),
    start: Optional[str] = START_OPTION,
    end: Optional[str] = END_OPTION,
    reference: Optional[str] = REFERENCE_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """List every calendar date of a time range."""
    normalizer = _build_normalizer(log_level)

    def render():
        date_range = normalizer.range_for(token, reference, start, end)
        for day in normalizer.enumerate_dates(date_range):
            console.print(day)

    _run(render)


@app.command()
def query(
    token: str = typer.Argument(..., help="Time range: 24h, 7d, 30d, 90d, 1y or custom"),
    device_id: str = typer.Argument(..., help="Device ID or device name"),
    raw: bool = typer.Option(False, "--raw/--daily", help="Raw pings instead of daily aggregates"),
    start: Optional[str] = START_OPTION,
    end: Optional[str] = END_OPTION,
    reference: Optional[str] = REFERENCE_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION
):
    """Print the warehouse query and parameters for a device."""
    config = _load_config(log_level)
    _setup_logging(config.log_level)
    normalizer = PacificDateNormalizer(timezone=config.zone)
    builder = HeartbeatQueryBuilder(config.warehouse, zone_name=config.timezone)

    def render():
        date_range = normalizer.range_for(token, reference, start, end)
        built = _build_query(builder, device_id, date_range, raw)

        console.print(Syntax(built.sql.strip(), "sql"))
        table = Table(title="Query parameters")
        table.add_column("Name", style="cyan")
        table.add_column("Value", style="green")
        for name, value in built.params.items():
            table.add_row(name, value)
        console.print(table)

    _run(render)


def _build_query(builder: HeartbeatQueryBuilder, device_id: str, date_range: DateRange, raw: bool):
    if raw:
        return builder.raw_locations(device_id, date_range)
    return builder.daily_locations(device_id, date_range)


def _run(action) -> None:
    """Run a command body, reporting validation errors."""
    try:
        action()
    except DateNormalizationError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)


def _build_normalizer(log_level: Optional[str]) -> PacificDateNormalizer:
    config = _load_config(log_level)
    _setup_logging(config.log_level)
    return PacificDateNormalizer(timezone=config.zone)


def _load_config(log_level: Optional[str] = None) -> ServiceConfig:
    """Load service configuration."""
    config = ServiceConfig.from_env()

    # Override with CLI options
    if log_level:
        config = config.model_copy(update={"log_level": log_level.upper()})

    return config


def _setup_logging(log_level: str) -> None:
    """Setup logging configuration."""
    # Set log level
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, force=True)


def main() -> None:
    """Main entry point."""
    app()
