"""
Observer Options

Shared handling of the --lat/--lon/--tz/--at options used by the commands.
"""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import typer

from spring_almanac.api.core.exceptions import ConfigurationError, InvalidTimezoneError
from spring_almanac.api.core.settings import AlmanacSettings
from spring_almanac.api.core.utils import ensure_utc, resolve_timezone
from spring_almanac.cli.utils.output import print_error


def load_settings() -> AlmanacSettings:
    """Read settings from the environment, exiting with a message if they are invalid."""
    try:
        return AlmanacSettings.from_env()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def parse_at(at: str | None) -> datetime:
    """
    Parse the --at option (ISO-8601; naive values are UTC). Defaults to now.
    """
    if not at:
        return datetime.now(UTC)
    try:
        return ensure_utc(datetime.fromisoformat(at.replace("Z", "+00:00")))
    except ValueError as e:
        print_error(f"Invalid time '{at}'. Use ISO-8601, e.g. 2025-01-15T02:00:00Z")
        raise typer.Exit(code=1) from e


def resolve_observer(
    lat: float | None,
    lon: float | None,
    tz: str | None,
    settings: AlmanacSettings,
) -> tuple[float, float, ZoneInfo]:
    """
    Fill in the observer from options and settings.

    Coordinates default to the configured location. The zone comes from --tz,
    else from the coordinates when they were given, else the configured zone.
    """
    latitude = settings.default_latitude if lat is None else lat
    longitude = settings.default_longitude if lon is None else lon
    zone_name = tz if tz or lat is not None or lon is not None else settings.default_timezone
    try:
        zone = resolve_timezone(zone_name, latitude, longitude, default=settings.default_timezone)
    except InvalidTimezoneError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    return latitude, longitude, zone


LAT_OPTION = typer.Option(None, "--lat", min=-90, max=90, help="Observer latitude in degrees")
LON_OPTION = typer.Option(None, "--lon", min=-180, max=180, help="Observer longitude in degrees")
TZ_OPTION = typer.Option(None, "--tz", help="IANA time zone (e.g. America/New_York)")
AT_OPTION = typer.Option(None, "--at", help="Time to compute for, ISO-8601 (default: now)")
JSON_OPTION = typer.Option(False, "--json", help="Output as JSON")
