"""
Physical and Astronomical Constants

Constants used throughout the Spring Almanac API for calculations.
"""

from datetime import UTC, datetime
from typing import Final


__all__ = [
    "ALTITUDE_HIGH_DEGREES",
    "ALTITUDE_MID_DEGREES",
    "COMPASS_LABELS_16",
    "DEFAULT_LATITUDE",
    "DEFAULT_LONGITUDE",
    "DEFAULT_TIMEZONE",
    "DEGREES_PER_COMPASS_SECTOR",
    "DEGREES_PER_HOUR_ANGLE",
    "EQUINOX_DAYLIGHT_MINUTES",
    "GMST_AT_J2000_HOURS",
    "GMST_HOURS_PER_DAY",
    "HIGH_IN_SKY_DEGREES",
    "HOURS_PER_DAY",
    "J2000_EPOCH",
    "MIN_VIEWING_ALTITUDE_DEGREES",
    "MOON_ZODIAC_EPOCH",
    "SECONDS_PER_DAY",
    "SIDEREAL_MONTH_DAYS",
    "SYNODIC_MONTH_DAYS",
]


# Time
J2000_EPOCH: Final[datetime] = datetime(2000, 1, 1, 12, 0, 0, tzinfo=UTC)
"""J2000.0 reference epoch (2000-01-01T12:00:00 UTC)."""

SECONDS_PER_DAY: Final[float] = 86400.0
"""Seconds in a mean solar day."""

HOURS_PER_DAY: Final[float] = 24.0
"""Hours in a day, also the modulus for sidereal time and right ascension."""

# Sidereal time (linear approximation)
GMST_AT_J2000_HOURS: Final[float] = 18.697374558
"""Greenwich Mean Sidereal Time at the J2000.0 epoch, in hours."""

GMST_HOURS_PER_DAY: Final[float] = 24.06570982441908
"""Sidereal hours elapsed per solar day."""

# Angles
DEGREES_PER_HOUR_ANGLE: Final[float] = 15.0
"""Degrees of sky rotation per hour of Right Ascension."""

DEGREES_PER_COMPASS_SECTOR: Final[float] = 22.5
"""Width of one sector on a 16-point compass rose."""

COMPASS_LABELS_16: Final[tuple[str, ...]] = (
    "N",
    "NNE",
    "NE",
    "ENE",
    "E",
    "ESE",
    "SE",
    "SSE",
    "S",
    "SSW",
    "SW",
    "WSW",
    "W",
    "WNW",
    "NW",
    "NNW",
)
"""16-point compass labels, clockwise from North."""

# Visibility thresholds
MIN_VIEWING_ALTITUDE_DEGREES: Final[float] = 10.0
"""Objects below this altitude are too close to the horizon to be worth observing."""

ALTITUDE_HIGH_DEGREES: Final[float] = 60.0
"""Altitudes strictly above this are 'High in sky'."""

ALTITUDE_MID_DEGREES: Final[float] = 30.0
"""Altitudes strictly above this (and not high) are 'Mid-sky'."""

HIGH_IN_SKY_DEGREES: Final[float] = 45.0
"""Altitudes strictly above this set the high-in-sky ranking flag."""

# Moon
SYNODIC_MONTH_DAYS: Final[float] = 29.53
"""Mean new-moon to new-moon period, used for the phase-search fallback."""

SIDEREAL_MONTH_DAYS: Final[float] = 27.321661
"""Time for the Moon to return to the same position against the stars."""

MOON_ZODIAC_EPOCH: Final[datetime] = datetime(2000, 1, 6, 18, 14, tzinfo=UTC)
"""Reference instant with the Moon at the start of Aries."""

# Daylight
EQUINOX_DAYLIGHT_MINUTES: Final[int] = 12 * 60
"""Approximate day length at the equinox."""

# Default observer (New York City)
DEFAULT_LATITUDE: Final[float] = 40.7128
DEFAULT_LONGITUDE: Final[float] = -74.006
DEFAULT_TIMEZONE: Final[str] = "America/New_York"
