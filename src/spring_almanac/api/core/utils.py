"""
Utility functions for time zones and time formatting.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timezonefinder import TimezoneFinder

from .constants import DEFAULT_TIMEZONE
from .exceptions import InvalidTimezoneError


logger = logging.getLogger(__name__)


__all__ = [
    "ensure_utc",
    "format_clock_time",
    "get_local_timezone",
    "resolve_timezone",
]

# Global timezone finder instance (created on first lookup)
_tz_finder: TimezoneFinder | None = None


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime (naive values are read as UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def get_local_timezone(lat: float, lon: float) -> ZoneInfo | None:
    """
    Get timezone for a given latitude and longitude.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees

    Returns:
        ZoneInfo object for the timezone, or None if timezone cannot be determined
    """
    global _tz_finder
    if _tz_finder is None:
        _tz_finder = TimezoneFinder()
    try:
        tz_name = _tz_finder.timezone_at(lat=lat, lng=lon)
    except ValueError as e:
        logger.warning(f"Could not look up timezone for ({lat}, {lon}): {e}")
        return None
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except ZoneInfoNotFoundError:
            logger.warning(f"Timezone {tz_name} is not available in the tz database")
    return None


def resolve_timezone(
    tz_name: str | None,
    lat: float | None = None,
    lon: float | None = None,
    default: str = DEFAULT_TIMEZONE,
) -> ZoneInfo:
    """
    Resolve the observer's time zone.

    An explicit IANA name wins; otherwise the zone is looked up from the
    coordinates, and finally the default zone is used.

    Args:
        tz_name: IANA time zone name (e.g. "America/New_York"), or None
        lat: Observer latitude in degrees
        lon: Observer longitude in degrees
        default: Zone used when nothing else resolves

    Returns:
        ZoneInfo for the observer

    Raises:
        InvalidTimezoneError: If ``tz_name`` (or ``default``) is not a known zone
    """
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise InvalidTimezoneError(f"Unknown timezone: {tz_name!r}") from e

    if lat is not None and lon is not None:
        tz = get_local_timezone(lat, lon)
        if tz is not None:
            logger.debug(f"Resolved timezone {tz.key} from coordinates ({lat}, {lon})")
            return tz

    try:
        return ZoneInfo(default)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(f"Unknown default timezone: {default!r}") from e


def format_clock_time(dt: datetime | None, tz: ZoneInfo) -> str:
    """
    Format a time as a 12-hour clock reading in the given zone.

    Args:
        dt: Instant to format (naive values are read as UTC), or None
        tz: Zone to display in

    Returns:
        Time such as "6:42 AM", or "--" when there is no time
    """
    if dt is None:
        return "--"
    local = ensure_utc(dt).astimezone(tz)
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"
