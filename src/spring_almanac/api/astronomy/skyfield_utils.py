"""
Skyfield Utilities

Centralized configuration for Skyfield ephemeris file location.
Provides a shared Loader, timescale and planetary ephemeris for the sun and
moon calculations.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..core.exceptions import EphemerisLoadError
from ..core.utils import ensure_utc


if TYPE_CHECKING:
    from skyfield.api import Loader
    from skyfield.timelib import Time, Timescale


logger = logging.getLogger(__name__)


__all__ = [
    "EPHEMERIS_FILE",
    "find_events",
    "get_ephemeris",
    "get_skyfield_directory",
    "get_skyfield_loader",
    "get_timescale",
    "to_skyfield_time",
    "to_skyfield_times",
]

EPHEMERIS_FILE = "de421.bsp"


def get_skyfield_directory() -> Path:
    """
    Get the Skyfield cache directory.

    Checks SKYFIELD_DIR environment variable first, then defaults to ~/.skyfield

    Returns:
        Path to Skyfield cache directory
    """
    env_dir = os.environ.get("SKYFIELD_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    return Path.home() / ".skyfield"


# Module-level instances - created lazily on first access
_loader: Loader | None = None
_timescale: Timescale | None = None
_ephemeris: Any | None = None


def get_skyfield_loader() -> Loader:
    """
    Get a shared Skyfield Loader instance.

    The loader is created once and reused for all subsequent calls so that all
    ephemeris files are stored in the same location.
    """
    global _loader
    if _loader is None:
        from skyfield.api import Loader

        skyfield_dir = get_skyfield_directory()
        skyfield_dir.mkdir(parents=True, exist_ok=True)
        _loader = Loader(str(skyfield_dir.resolve()))
    return _loader


def get_timescale() -> Timescale:
    """
    Get the shared Skyfield timescale.

    Raises:
        EphemerisLoadError: If the timescale cannot be built
    """
    global _timescale
    if _timescale is None:
        try:
            _timescale = get_skyfield_loader().timescale()
        except OSError as e:
            logger.error(f"Failed to load Skyfield timescale: {e}")
            raise EphemerisLoadError(f"Could not load Skyfield timescale: {e}") from e
    return _timescale


def get_ephemeris() -> Any:
    """
    Get the shared planetary ephemeris (JPL DE421, which includes the Moon).

    The file is downloaded into the Skyfield directory on first use.

    Raises:
        EphemerisLoadError: If the ephemeris cannot be downloaded or read
    """
    global _ephemeris
    if _ephemeris is None:
        try:
            _ephemeris = get_skyfield_loader()(EPHEMERIS_FILE)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load ephemeris {EPHEMERIS_FILE}: {e}")
            raise EphemerisLoadError(f"Could not load ephemeris {EPHEMERIS_FILE}: {e}") from e
        logger.info(f"Loaded ephemeris {EPHEMERIS_FILE} from {get_skyfield_directory()}")
    return _ephemeris


def to_skyfield_time(dt: datetime) -> Time:
    """Convert a datetime (naive values are read as UTC) to a Skyfield Time."""
    return get_timescale().from_datetime(ensure_utc(dt))


def to_skyfield_times(dts: Sequence[datetime]) -> Time:
    """Convert many datetimes to a single array-valued Skyfield Time."""
    return get_timescale().from_datetimes([ensure_utc(dt) for dt in dts])


def find_events(
    start: datetime,
    end: datetime,
    function: Callable[[Time], Any],
) -> tuple[int, list[tuple[datetime, int]]]:
    """
    Run a Skyfield discrete search between two instants.

    Returns:
        The function's value at ``start`` and the ``(utc_datetime, new_value)``
        changes found, in time order
    """
    from skyfield import almanac

    t0 = to_skyfield_time(start)
    t1 = to_skyfield_time(end)
    initial = int(function(t0))
    times, values = almanac.find_discrete(t0, t1, function)
    return initial, [(t.utc_datetime(), int(y)) for t, y in zip(times, values, strict=True)]
