"""
Celestial Position Engine

Converts (time, observer latitude/longitude, right ascension/declination)
into local horizontal coordinates and a human-facing direction label.

Uses the linear sidereal-time approximation and plain spherical trigonometry;
there is no refraction, nutation or parallax correction. Every function here
is total over finite inputs and never raises.
"""

from __future__ import annotations

import math
from datetime import datetime

import deal

from ..core.constants import (
    ALTITUDE_HIGH_DEGREES,
    ALTITUDE_MID_DEGREES,
    COMPASS_LABELS_16,
    DEGREES_PER_COMPASS_SECTOR,
    DEGREES_PER_HOUR_ANGLE,
    GMST_AT_J2000_HOURS,
    GMST_HOURS_PER_DAY,
    HIGH_IN_SKY_DEGREES,
    HOURS_PER_DAY,
    J2000_EPOCH,
    SECONDS_PER_DAY,
)
from ..core.enums import AltitudeBucket
from ..core.types import HorizontalPosition, ObserverFrame
from ..core.utils import ensure_utc


__all__ = [
    "altitude_bucket",
    "calculate_altitude",
    "calculate_azimuth",
    "days_since_j2000",
    "direction_label",
    "greenwich_mean_sidereal_time",
    "horizontal_position",
    "hour_angle",
    "is_high_in_sky",
    "local_sidereal_time",
    "parallactic_angle",
]

# Below this, cos(alt)·cos(lat) is treated as zero (object at zenith or observer at a pole)
_AZIMUTH_SINGULARITY_EPSILON = 1e-12


def _wrap_hours(hours: float) -> float:
    """Reduce an hour value into [0, 24)."""
    wrapped = hours % HOURS_PER_DAY
    # A tiny negative input rounds up to exactly 24.0
    if wrapped >= HOURS_PER_DAY:
        return 0.0
    return wrapped


def days_since_j2000(timestamp: datetime) -> float:
    """
    Days elapsed since J2000.0, including the fractional day.

    Naive datetimes are read as UTC.
    """
    return (ensure_utc(timestamp) - J2000_EPOCH).total_seconds() / SECONDS_PER_DAY


def greenwich_mean_sidereal_time(timestamp: datetime) -> float:
    """Greenwich Mean Sidereal Time in hours, in [0, 24)."""
    gmst = GMST_AT_J2000_HOURS + GMST_HOURS_PER_DAY * days_since_j2000(timestamp)
    return _wrap_hours(gmst)


def local_sidereal_time(timestamp: datetime, longitude: float) -> float:
    """
    Local Sidereal Time in hours.

    Args:
        timestamp: Instant of observation (naive values are read as UTC)
        longitude: Observer longitude in degrees (east positive)

    Returns:
        The right ascension currently on the observer's meridian, in [0, 24)
    """
    return _wrap_hours(greenwich_mean_sidereal_time(timestamp) + longitude / DEGREES_PER_HOUR_ANGLE)


def hour_angle(lst_hours: float, ra_hours: float) -> float:
    """
    Hour angle of an object, normalized to roughly [-12, 12] hours.

    Positive values are west of the meridian (the object has already transited).
    """
    ha = lst_hours - ra_hours
    if ha > 12:
        ha -= 24
    if ha < -12:
        ha += 24
    return ha


def calculate_altitude(hour_angle_hours: float, dec: float, lat: float) -> float:
    """
    Altitude above the horizon in degrees, in [-90, 90].

    Args:
        hour_angle_hours: Hour angle of the object
        dec: Declination in degrees
        lat: Observer latitude in degrees
    """
    dec_rad = math.radians(dec)
    lat_rad = math.radians(lat)
    ha_rad = math.radians(hour_angle_hours * DEGREES_PER_HOUR_ANGLE)

    sin_alt = math.sin(dec_rad) * math.sin(lat_rad) + math.cos(dec_rad) * math.cos(lat_rad) * math.cos(ha_rad)
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))


def calculate_azimuth(hour_angle_hours: float, dec: float, lat: float, altitude: float) -> float:
    """
    Azimuth in degrees, clockwise from North, in [0, 360).

    ``altitude`` must come from :func:`calculate_altitude` with the same hour angle.
    At the zenith or a geographic pole the bearing is undefined and North (0.0)
    is returned.
    """
    dec_rad = math.radians(dec)
    lat_rad = math.radians(lat)
    alt_rad = math.radians(altitude)
    ha_rad = math.radians(hour_angle_hours * DEGREES_PER_HOUR_ANGLE)

    denominator = math.cos(alt_rad) * math.cos(lat_rad)
    if abs(denominator) < _AZIMUTH_SINGULARITY_EPSILON:
        return 0.0

    cos_az = (math.sin(dec_rad) - math.sin(alt_rad) * math.sin(lat_rad)) / denominator
    azimuth = math.degrees(math.acos(max(-1.0, min(1.0, cos_az))))

    # West of the meridian
    if math.sin(ha_rad) > 0:
        azimuth = 360.0 - azimuth

    return azimuth % 360.0


def horizontal_position(frame: ObserverFrame, ra_hours: float, dec: float) -> HorizontalPosition:
    """
    Altitude and azimuth of an object for one observer frame.

    Both coordinates come from a single hour-angle value.
    """
    lst = local_sidereal_time(frame.utc_timestamp, frame.longitude)
    ha = hour_angle(lst, ra_hours)
    altitude = calculate_altitude(ha, dec, frame.latitude)
    azimuth = calculate_azimuth(ha, dec, frame.latitude, altitude)
    return HorizontalPosition(altitude=altitude, azimuth=azimuth)


@deal.post(lambda result: result in COMPASS_LABELS_16, message="Must be a 16-point compass label")
def direction_label(azimuth: float) -> str:
    """
    Convert an azimuth to a 16-point compass label.

    Half-way values round to the next sector clockwise.

    Examples:
        >>> direction_label(0)
        'N'
        >>> direction_label(11.25)
        'NNE'
        >>> direction_label(360)
        'N'
    """
    if not math.isfinite(azimuth):
        return COMPASS_LABELS_16[0]
    sector = math.floor(azimuth / DEGREES_PER_COMPASS_SECTOR + 0.5)
    return COMPASS_LABELS_16[sector % len(COMPASS_LABELS_16)]


def altitude_bucket(altitude: float) -> AltitudeBucket:
    """Classify an altitude into a coarse bucket (boundaries are strict)."""
    if altitude > ALTITUDE_HIGH_DEGREES:
        return AltitudeBucket.HIGH
    if altitude > ALTITUDE_MID_DEGREES:
        return AltitudeBucket.MID
    return AltitudeBucket.LOW


def is_high_in_sky(altitude: float) -> bool:
    return altitude > HIGH_IN_SKY_DEGREES


def parallactic_angle(hour_angle_hours: float, dec: float, lat: float) -> float:
    """
    Parallactic angle in degrees.

    The angle between the direction to the celestial pole and the direction to
    the zenith, as seen at the object. Used to orient the lit limb of the Moon.
    """
    ha_rad = math.radians(hour_angle_hours * DEGREES_PER_HOUR_ANGLE)
    dec_rad = math.radians(dec)
    lat_rad = math.radians(lat)
    return math.degrees(
        math.atan2(
            math.sin(ha_rad),
            math.tan(lat_rad) * math.cos(dec_rad) - math.sin(dec_rad) * math.cos(ha_rad),
        )
    )
