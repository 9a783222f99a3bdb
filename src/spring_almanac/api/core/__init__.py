"""Core subpackage for shared types, settings, utilities, and exceptions."""

from spring_almanac.api.core.settings import AlmanacSettings, configure_logging
from spring_almanac.api.core.types import HorizontalPosition, ObserverFrame
from spring_almanac.api.core.utils import (
    ensure_utc,
    format_clock_time,
    get_local_timezone,
    resolve_timezone,
)


__all__ = [
    "AlmanacSettings",
    "HorizontalPosition",
    "ObserverFrame",
    "configure_logging",
    "ensure_utc",
    "format_clock_time",
    "get_local_timezone",
    "resolve_timezone",
]
