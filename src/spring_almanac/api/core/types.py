"""
Type definitions for the Spring Almanac.

Value objects passed between the position engine, the visibility filter and
the presentation layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .utils import ensure_utc


__all__ = [
    "HorizontalPosition",
    "ObserverFrame",
]


@dataclass(frozen=True, slots=True)
class ObserverFrame:
    """Where and when the sky is being observed. Lives for a single computation."""

    timestamp: datetime  # UTC instant (naive values are read as UTC)
    latitude: float  # Degrees north (negative for south)
    longitude: float  # Degrees east (negative for west)

    @property
    def utc_timestamp(self) -> datetime:
        """The timestamp as an aware UTC datetime."""
        return ensure_utc(self.timestamp)


@dataclass(frozen=True, slots=True)
class HorizontalPosition:
    """Altitude/azimuth of an object for one observer frame."""

    altitude: float  # Degrees above horizon (-90 to +90)
    azimuth: float  # Compass bearing (0-360, 0 = North, 90 = East)

    def __str__(self) -> str:
        return f"Alt {self.altitude:.1f}°, Az {self.azimuth:.1f}°"
