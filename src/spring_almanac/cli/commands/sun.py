"""
Sun Commands

Daylight, twilight, spring progress and countdowns.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import typer
from click import Context
from rich.console import Console
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from typer.core import TyperGroup

from spring_almanac.api.almanac import build_countdown_payload, get_spring_target
from spring_almanac.api.astronomy.position import direction_label
from spring_almanac.api.astronomy.sun import (
    find_season_events,
    get_daylight_gain,
    get_daylight_info,
    get_spring_progress,
    previous_winter_solstice,
)
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
from spring_almanac.cli.utils.output import (
    format_altitude,
    format_local_datetime,
    print_error,
    print_info,
    print_json,
)


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(help="Daylight, twilight and countdowns", cls=SortedCommandsGroup)
console = Console()


def _format_countdown(countdown: dict[str, Any]) -> str:
    return (
        f"[bold]{countdown['days']}[/bold]d [bold]{countdown['hours']}[/bold]h "
        f"[bold]{countdown['minutes']}[/bold]m [bold]{countdown['seconds']}[/bold]s"
    )


@app.command("daylight")
def show_daylight(
    lat: float | None = LAT_OPTION,
    lon: float | None = LON_OPTION,
    tz: str | None = TZ_OPTION,
    at: str | None = AT_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """
    Show today's sunrise, sunset, twilight and how much daylight is coming back.

    Example:
        almanac sun daylight
        almanac sun daylight --lat 64.8 --lon -147.7 --tz America/Anchorage
    """
    settings = load_settings()
    latitude, longitude, zone = resolve_observer(lat, lon, tz, settings)
    when = parse_at(at)

    try:
        solstice = previous_winter_solstice(when)
        info = get_daylight_info(when, latitude, longitude, zone)
        gain = get_daylight_gain(when, latitude, longitude, zone, solstice)
        progress = get_spring_progress(
            when, latitude, longitude, zone, solstice, get_spring_target(when, settings)
        )
    except EphemerisError as e:
        print_error(f"Failed to calculate daylight: {e}")
        raise typer.Exit(code=1) from e

    if json_output:
        print_json({"daylight": info, "daylightGain": gain, "springProgress": progress})
        return

    twilight = info["twilight"]
    sun = info["sunPosition"]

    table = Table(title=f"Daylight - {when.astimezone(zone):%a %b %d, %Y} ({zone.key})")
    table.add_column("Event", style="cyan")
    table.add_column("Morning", justify="right")
    table.add_column("Evening", justify="right")
    table.add_row("Astronomical twilight", twilight["astronomicalDawn"], twilight["astronomicalDusk"])
    table.add_row("Nautical twilight", twilight["nauticalDawn"], twilight["nauticalDusk"])
    table.add_row("Civil twilight", twilight["civilDawn"], twilight["civilDusk"])
    table.add_row("[bold yellow]Sunrise / Sunset[/bold yellow]", info["sunrise"], info["sunset"])
    table.add_row(
        "Golden hour",
        f"{twilight['goldenHourMorning']['start']} - {twilight['goldenHourMorning']['end']}",
        f"{twilight['goldenHourEvening']['start']} - {twilight['goldenHourEvening']['end']}",
    )
    console.print(table)

    gain_style = "red" if gain["formatted"].startswith("-") else "green"
    console.print(f"\n  Day length: [bold]{info['daylightDuration']['formatted']}[/bold]")
    console.print(f"  Change since yesterday: [{gain_style}]{gain['formatted']}[/{gain_style}]")
    console.print(f"  Since the winter solstice: {gain['sinceSolstice']['formatted']}")
    console.print(
        f"  Sun: {format_altitude(sun['altitude'])} toward {direction_label(sun['azimuth'])} ({sun['azimuth']:.0f}°)"
    )

    console.print(f"\n  Progress to a 12-hour day: [bold]{progress['percentComplete']}%[/bold]")
    console.print(ProgressBar(total=100, completed=progress["percentComplete"], width=40))
    console.print(f"  {progress['daysRemaining']} days until the equinox\n")


@app.command("countdown")
def show_countdown(
    lat: float | None = LAT_OPTION,
    lon: float | None = LON_OPTION,
    tz: str | None = TZ_OPTION,
    at: str | None = AT_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """
    Count down to the spring equinox and the start of daylight saving time.

    Example:
        almanac sun countdown
        almanac sun countdown --tz Europe/London
    """
    settings = load_settings()
    _, _, zone = resolve_observer(lat, lon, tz, settings)
    when = parse_at(at)

    try:
        countdowns = build_countdown_payload(when, zone, settings)
    except EphemerisError as e:
        print_error(f"Failed to calculate countdowns: {e}")
        raise typer.Exit(code=1) from e

    if json_output:
        print_json(countdowns)
        return

    spring = countdowns["spring"]
    spring_at = format_local_datetime(datetime.fromisoformat(spring["target"]), zone)
    console.print(
        Panel(
            f"{_format_countdown(spring)}\n[dim]{spring_at}[/dim]",
            title="[green]Spring Equinox[/green]",
            expand=False,
        )
    )

    dst = countdowns["dst"]
    if dst is None:
        print_info(f"{zone.key} does not observe daylight saving time.")
        return

    dst_at = format_local_datetime(datetime.fromisoformat(dst["target"]), zone)
    console.print(
        Panel(
            f"{_format_countdown(dst)}\n[dim]{dst_at}[/dim]",
            title="[yellow]Clocks Spring Forward[/yellow]",
            expand=False,
        )
    )


@app.command("seasons")
def show_seasons(
    year: int = typer.Argument(..., min=1900, max=2050, help="Calendar year"),
    tz: str | None = TZ_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """
    List the equinoxes and solstices of a year.

    Example:
        almanac sun seasons 2026
    """
    settings = load_settings()
    _, _, zone = resolve_observer(None, None, tz, settings)

    try:
        events = find_season_events(year)
    except EphemerisError as e:
        print_error(f"Failed to calculate seasons: {e}")
        raise typer.Exit(code=1) from e

    if json_output:
        print_json([{"name": event.name, "time": event.time.isoformat()} for event in events])
        return

    table = Table(title=f"Equinoxes and Solstices {year}")
    table.add_column("Event", style="cyan")
    table.add_column(f"Local Time ({zone.key})", justify="right")
    for event in events:
        table.add_row(event.name, format_local_datetime(event.time, zone))
    console.print(table)
