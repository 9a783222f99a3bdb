"""
Sky Commands

Constellations worth looking for right now.
"""

from __future__ import annotations

import typer
from click import Context
from rich.console import Console
from rich.table import Table
from typer.core import TyperGroup

from spring_almanac.api.catalogs.constellations import (
    best_object_now,
    compute_visible_objects,
    load_catalog,
    objects_by_difficulty,
)
from spring_almanac.api.core.enums import Difficulty
from spring_almanac.api.core.exceptions import CatalogError
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
from spring_almanac.cli.utils.output import format_altitude, print_error, print_info, print_json


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


app = typer.Typer(help="Constellations visible tonight", cls=SortedCommandsGroup)
console = Console()

_DIFFICULTY_STYLES = {
    Difficulty.EASY: "green",
    Difficulty.MODERATE: "yellow",
    Difficulty.CHALLENGING: "red",
}


@app.command("tonight")
def show_tonight(
    lat: float | None = LAT_OPTION,
    lon: float | None = LON_OPTION,
    tz: str | None = TZ_OPTION,
    at: str | None = AT_OPTION,
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Maximum number of constellations to show"),
    json_output: bool = JSON_OPTION,
) -> None:
    """
    Show constellations in season and at least 10° above the horizon.

    Constellations closest to overhead come first.

    Example:
        almanac sky tonight --lat 40.71 --lon -74.01
        almanac sky tonight --at 2025-01-15T02:00:00Z --json
    """
    settings = load_settings()
    latitude, longitude, zone = resolve_observer(lat, lon, tz, settings)
    when = parse_at(at)

    try:
        catalog = load_catalog(settings.catalog_path)
    except CatalogError as e:
        print_error(f"Failed to load constellation catalog: {e}")
        raise typer.Exit(code=1) from e

    visible = compute_visible_objects(when, latitude, longitude, catalog)[:limit]

    if json_output:
        print_json([result.to_dict() for result in visible])
        return

    if not visible:
        print_info("No catalog constellations are well placed right now.")
        return

    local_time = when.astimezone(zone).strftime("%Y-%m-%d %I:%M %p %Z")
    table = Table(title=f"Visible Constellations - {local_time}")
    table.add_column("Constellation", style="cyan", no_wrap=True)
    table.add_column("Brightest Star", style="dim")
    table.add_column("Direction", justify="center")
    table.add_column("Altitude", justify="right")
    table.add_column("Placement")
    table.add_column("Difficulty")

    for result in visible:
        obj = result.object
        placement = f"[bold]{result.altitude_bucket}[/bold]" if result.is_high_in_sky else str(result.altitude_bucket)
        style = _DIFFICULTY_STYLES.get(obj.difficulty, "white")
        table.add_row(
            obj.name,
            obj.brightest_star,
            result.direction,
            format_altitude(result.position.altitude),
            placement,
            f"[{style}]{obj.difficulty}[/{style}]",
        )

    console.print(table)


@app.command("best")
def show_best(
    lat: float | None = LAT_OPTION,
    lon: float | None = LON_OPTION,
    at: str | None = AT_OPTION,
    json_output: bool = JSON_OPTION,
) -> None:
    """
    Show the single best constellation to look for right now.

    Example:
        almanac sky best
    """
    settings = load_settings()
    latitude = settings.default_latitude if lat is None else lat
    longitude = settings.default_longitude if lon is None else lon
    when = parse_at(at)

    try:
        catalog = load_catalog(settings.catalog_path)
    except CatalogError as e:
        print_error(f"Failed to load constellation catalog: {e}")
        raise typer.Exit(code=1) from e

    best = best_object_now(when, latitude, longitude, catalog)
    if json_output:
        print_json(best.to_dict() if best else {})
        return
    if best is None:
        print_info("No catalog constellations are well placed right now.")
        return

    obj = best.object
    console.print(f"\n[bold cyan]{obj.name}[/bold cyan] ({obj.latin_name})")
    console.print(f"  Look [bold]{best.direction}[/bold], {format_altitude(best.position.altitude)} above the horizon")
    if obj.brightest_star:
        console.print(f"  Brightest star: {obj.brightest_star}")
    if obj.description:
        console.print(f"  [dim]{obj.description}[/dim]")
    if obj.mythology:
        console.print(f"\n  {obj.mythology}")
    console.print()


@app.command("list")
def list_constellations(
    difficulty: Difficulty | None = typer.Option(None, "--difficulty", "-d", help="Only this difficulty"),
    json_output: bool = JSON_OPTION,
) -> None:
    """
    List the constellation catalog.

    Example:
        almanac sky list --difficulty easy
    """
    settings = load_settings()
    try:
        catalog = load_catalog(settings.catalog_path)
    except CatalogError as e:
        print_error(f"Failed to load constellation catalog: {e}")
        raise typer.Exit(code=1) from e

    objects = objects_by_difficulty(catalog, difficulty) if difficulty is not None else catalog

    if json_output:
        print_json([obj.to_dict() for obj in objects])
        return

    table = Table(title=f"Constellation Catalog ({len(objects)})")
    table.add_column("Constellation", style="cyan", no_wrap=True)
    table.add_column("Abbr", justify="center")
    table.add_column("RA (h)", justify="right")
    table.add_column("Dec (°)", justify="right")
    table.add_column("Best Months")
    table.add_column("Difficulty")

    for obj in objects:
        style = _DIFFICULTY_STYLES.get(obj.difficulty, "white")
        table.add_row(
            obj.name,
            obj.abbreviation,
            f"{obj.ra_hours:.1f}",
            f"{obj.dec_degrees:+.0f}",
            ", ".join(str(m) for m in obj.best_viewing_months),
            f"[{style}]{obj.difficulty}[/{style}]",
        )

    console.print(table)
