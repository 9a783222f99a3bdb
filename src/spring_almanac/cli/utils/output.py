"""
CLI Output Utilities

Rich console formatting utilities for CLI output.
"""

import json
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from rich.console import Console

from spring_almanac.api.core.utils import format_clock_time


# Create console with unicode detection
console = Console()

# Detect if we can safely use unicode symbols
_use_unicode = console.is_terminal and not console.legacy_windows


def print_error(message: str) -> None:
    """Print error message in red."""
    console.print(f"[red]✗[/red] {message}", style="red")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print info message in blue."""
    info_icon = "ℹ" if _use_unicode else "i"
    console.print(f"[blue]{info_icon}[/blue] {message}")


def print_json(data: dict[str, Any] | list[Any]) -> None:
    """Print data as JSON."""
    console.print_json(json.dumps(data, default=str))


def format_altitude(degrees: float) -> str:
    """Format an altitude for display (e.g. "+47.9°")."""
    return f"{degrees:+.1f}°"


def format_local_datetime(dt: datetime, tz: ZoneInfo) -> str:
    """Format an instant as a short local date and clock time (e.g. "Sat Mar 29, 6:58 AM")."""
    local = dt.astimezone(tz)
    return f"{local:%a %b} {local.day}, {format_clock_time(dt, tz)}"
