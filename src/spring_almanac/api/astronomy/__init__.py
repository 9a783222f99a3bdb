"""Astronomy subpackage: position engine, sun, moon and countdowns."""

from spring_almanac.api.astronomy.position import (
    altitude_bucket,
    calculate_altitude,
    calculate_azimuth,
    direction_label,
    horizontal_position,
    hour_angle,
    is_high_in_sky,
    local_sidereal_time,
)


__all__ = [
    "altitude_bucket",
    "calculate_altitude",
    "calculate_azimuth",
    "direction_label",
    "horizontal_position",
    "hour_angle",
    "is_high_in_sky",
    "local_sidereal_time",
]
