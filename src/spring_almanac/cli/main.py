"""
Spring Almanac CLI - Main Application

This is the main entry point for the Spring Almanac command-line interface.
"""

import logging
import os

import typer
from click import Context
from dotenv import load_dotenv
from rich.console import Console
from typer.core import TyperGroup

# Import and register subcommands
from spring_almanac.cli.commands import lore, moon, sky, sun


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


# Create main app
app = typer.Typer(
    name="almanac",
    help="Spring Almanac - countdowns, daylight, the Moon and tonight's sky",
    add_completion=True,
    rich_markup_mode="rich",
    cls=SortedCommandsGroup,
)

# Console for rich output
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Spring Almanac

    Count down to spring and see what is up in the sky tonight.

    [bold green]Examples:[/bold green]

        almanac sky tonight --lat 40.71 --lon -74.01
        almanac sun countdown
        almanac moon phase --json
        almanac serve --port 8000

    [bold blue]Environment Variables:[/bold blue]

        ALMANAC_DEFAULT_LAT - Default latitude
        ALMANAC_DEFAULT_LON - Default longitude
        ALMANAC_DEFAULT_TZ  - Default IANA time zone
        ALMANAC_LOG_LEVEL   - Logging level (default WARNING)
    """
    from spring_almanac.api.core.settings import configure_logging

    load_dotenv()

    if verbose:
        configure_logging("DEBUG")
        console.print("[dim]Verbose mode enabled[/dim]")
    else:
        level = os.environ.get("ALMANAC_LOG_LEVEL", "WARNING").upper()
        configure_logging(level if level in logging.getLevelNamesMapping() else "WARNING")


@app.command(rich_help_panel="Utilities")
def version() -> None:
    """Show the CLI version."""
    from spring_almanac import __version__

    console.print(f"[bold]Spring Almanac[/bold] version [cyan]{__version__}[/cyan]")


@app.command(rich_help_panel="Utilities")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind", envvar="ALMANAC_HOST"),
    port: int = typer.Option(8000, "--port", "-p", min=1, max=65535, help="Port to listen on", envvar="ALMANAC_PORT"),
    reload: bool = typer.Option(False, "--reload", help="Restart when source files change"),
) -> None:
    """
    Run the almanac web service.

    Serves /api/data, /api/countdown, /manifest.json and /health.

    Example:
        almanac serve --port 8080
    """
    import uvicorn

    console.print(f"[bold]Spring Almanac[/bold] listening on [cyan]http://{host}:{port}[/cyan]")
    uvicorn.run("spring_almanac.web.app:create_app", factory=True, host=host, port=port, reload=reload)


# Register command groups
app.add_typer(sky.app, name="sky", help="Constellations visible tonight", rich_help_panel="Sky")
app.add_typer(moon.app, name="moon", help="Moon phase, position and rise/set", rich_help_panel="Sky")
app.add_typer(sun.app, name="sun", help="Daylight, twilight and countdowns", rich_help_panel="Sun & Seasons")
app.add_typer(lore.app, name="lore", help="Sky lore and upcoming events", rich_help_panel="Sun & Seasons")


if __name__ == "__main__":
    app()
