"""
Moon Commands

Moon phase, position and rise/set times.
"""

from __future__ import annotations

import typer
from click import Context
from rich.console import Console
from rich.table import Table
from typer.core import TyperGroup

from spring_almanac.api.astronomy.moon import format_moon_times, get_moon_info
from spring_almanac.api.astronomy.position import direction_label
from spring_almanac.api.core.exceptions import EphemerisError
from spring_almanac.cli.utils.observer import (
    AT_OPTION,
    JSON_OPTION,
    LAT_OPTION,
    LON_OPTION,
    TZ_OPTION,
    load_settings,
    parse_at,
    resolve_observer,
)
from spring_almanac.cli.utils.output import format_altitude, format_local_datetime, print_error, print_json


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(help="Moon phase, position and rise/set", cls=SortedCommandsGroup)
console = Console()


@app.command("phase")
def show_phase(
    lat: float | None = LAT_OPTION,
    lon: float | None = LON_OPTION,
    tz: str | None = TZ_OPTION,
    at: str | None = AT_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """
    Show the Moon's phase, where it is, and when it rises and sets.

    Example:
        almanac moon phase
        almanac moon phase --lat 51.5 --lon -0.13 --json
    """
    settings = load_settings()
    latitude, longitude, zone = resolve_observer(lat, lon, tz, settings)
    when = parse_at(at)

    try:
        info = get_moon_info(when, latitude, longitude, zone)
    except EphemerisError as e:
        print_error(f"Failed to calculate Moon data: {e}")
        raise typer.Exit(code=1) from e

    times = format_moon_times(info.times, zone)

    if json_output:
        print_json(
            {
                "phase": info.phase.to_dict(),
                "position": info.position.to_dict(),
                "times": times,
                "nextFullMoon": info.next_full_moon.isoformat(),
                "nextNewMoon": info.next_new_moon.isoformat(),
                "zodiacSign": info.zodiac_sign,
            }
        )
        return

    phase = info.phase
    console.print(f"\n{phase.emoji}  [bold cyan]{phase.phase_name}[/bold cyan] - {phase.illumination}% illuminated")
    console.print(f"   [dim]{phase.description}[/dim]\n")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()

    position = info.position
    table.add_row("Altitude", format_altitude(position.altitude))
    table.add_row("Direction", f"{direction_label(position.azimuth)} ({position.azimuth:.0f}°)")
    table.add_row("Distance", f"{position.distance:,.0f} km")
    table.add_row("Moonrise", times["rise"])
    table.add_row("Moonset", times["set"])
    table.add_row("Next full moon", format_local_datetime(info.next_full_moon, zone))
    table.add_row("Next new moon", format_local_datetime(info.next_new_moon, zone))
    table.add_row("Moon in", info.zodiac_sign)

    console.print(table)
    console.print()
