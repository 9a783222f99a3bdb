"""
Lore Commands

Sky lore for the day and the calendar of upcoming events.
"""

from __future__ import annotations

import typer
from click import Context
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from typer.core import TyperGroup

from spring_almanac.api.almanac import season_events
from spring_almanac.api.catalogs.lore import (
    SkyLore,
    get_daily_sky_lore,
    get_random_sky_lore,
    get_sky_lore_by_category,
    get_this_weeks_events,
    get_upcoming_events,
    load_library,
)
from spring_almanac.api.core.enums import LoreCategory
from spring_almanac.api.core.exceptions import CatalogError, EphemerisError
from spring_almanac.cli.utils.observer import (
    AT_OPTION,
    JSON_OPTION,
    TZ_OPTION,
    load_settings,
    parse_at,
    resolve_observer,
)
from spring_almanac.cli.utils.output import format_local_datetime, print_error, print_info, print_json, print_warning


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(help="Sky lore and upcoming events", cls=SortedCommandsGroup)
console = Console()


def _print_lore(entries: list[SkyLore], json_output: bool) -> None:
    if json_output:
        print_json([entry.to_dict() for entry in entries])
        return
    if not entries:
        print_info("No sky lore to show.")
        return
    for entry in entries:
        console.print(
            Panel(
                entry.content,
                title=f"[bold cyan]{entry.title}[/bold cyan]",
                subtitle=f"[dim]{entry.culture} · {entry.category}[/dim]",
            )
        )


@app.command("today")
def show_today(
    at: str | None = AT_OPTION,
    limit: int | None = typer.Option(None, "--limit", "-n", min=0, help="Entries to show (default from settings)"),
    category: LoreCategory | None = typer.Option(None, "--category", "-c", help="Show every entry in a category"),
    json_output: bool = JSON_OPTION,
) -> None:
    """
    Show today's sky lore.

    The selection is the same all day and changes from one day to the next.

    Example:
        almanac lore today
        almanac lore today --category stars
    """
    settings = load_settings()
    when = parse_at(at)

    try:
        library = load_library(settings.lore_path, settings.events_path)
    except CatalogError as e:
        print_error(f"Failed to load sky lore: {e}")
        raise typer.Exit(code=1) from e

    if category is not None:
        entries = get_sky_lore_by_category(library.lore, category)
    else:
        entries = get_daily_sky_lore(when, library.lore, settings.lore_count if limit is None else limit)
    _print_lore(entries, json_output)


@app.command("random")
def show_random(json_output: bool = JSON_OPTION) -> None:
    """
    Show a random piece of sky lore.

    Example:
        almanac lore random
    """
    settings = load_settings()
    try:
        library = load_library(settings.lore_path, settings.events_path)
    except CatalogError as e:
        print_error(f"Failed to load sky lore: {e}")
        raise typer.Exit(code=1) from e

    entry = get_random_sky_lore(library.lore)
    _print_lore([entry] if entry else [], json_output)


@app.command("events")
def show_events(
    tz: str | None = TZ_OPTION,
    at: str | None = AT_OPTION,
    limit: int = typer.Option(5, "--limit", "-n", min=0, help="Maximum number of events to show"),
    week: bool = typer.Option(False, "--week", "-w", help="Only events in the next seven days"),
    json_output: bool = JSON_OPTION,
) -> None:
    """
    Show upcoming meteor showers, eclipses, equinoxes and solstices.

    Example:
        almanac lore events
        almanac lore events --week
    """
    settings = load_settings()
    _, _, zone = resolve_observer(None, None, tz, settings)
    when = parse_at(at)

    try:
        library = load_library(settings.lore_path, settings.events_path)
    except CatalogError as e:
        print_error(f"Failed to load events: {e}")
        raise typer.Exit(code=1) from e

    events = list(library.events)
    try:
        events += season_events(when, library.events)
    except EphemerisError as e:
        print_warning(f"Equinoxes and solstices unavailable: {e}")

    upcoming = get_this_weeks_events(when, events)[:limit] if week else get_upcoming_events(when, events, limit)

    if json_output:
        print_json([event.to_dict() for event in upcoming])
        return

    if not upcoming:
        print_info("No upcoming events.")
        return

    table = Table(title="Upcoming Sky Events")
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Event", style="bold")
    table.add_column("Type")
    table.add_column("Description", style="dim")
    for event in upcoming:
        table.add_row(format_local_datetime(event.date, zone), event.name, str(event.type), event.description)
    console.print(table)
