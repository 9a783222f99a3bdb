"""
Moon Calculations

Moon phase, illumination, position, rise/set times, the next full and new
moon, and the approximate zodiac sign the Moon is passing through.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any, NamedTuple
from zoneinfo import ZoneInfo

import deal
from skyfield import almanac
from skyfield.api import wgs84

from ..core.constants import DEGREES_PER_HOUR_ANGLE, MOON_ZODIAC_EPOCH, SIDEREAL_MONTH_DAYS, SYNODIC_MONTH_DAYS
from ..core.enums import MoonPhase
from ..core.utils import ensure_utc, format_clock_time
from .position import hour_angle, local_sidereal_time, parallactic_angle
from .skyfield_utils import find_events, get_ephemeris, to_skyfield_time, to_skyfield_times
from .sun import local_day_bounds


logger = logging.getLogger(__name__)


__all__ = [
    "MoonInfo",
    "MoonPhaseInfo",
    "MoonPosition",
    "MoonTimes",
    "PHASE_DESCRIPTIONS",
    "ZODIAC_SIGNS",
    "bright_limb_angle",
    "find_next_phase",
    "format_moon_times",
    "get_moon_info",
    "get_moon_phase",
    "get_moon_phase_values",
    "get_moon_position",
    "get_moon_times",
    "get_moon_zodiac",
    "phase_emoji",
    "phase_name",
]

# Upper phase bound of each named sector; the last sector wraps back to New Moon
_PHASE_SECTORS: tuple[tuple[float, MoonPhase, str], ...] = (
    (0.0625, MoonPhase.NEW_MOON, "🌑"),
    (0.1875, MoonPhase.WAXING_CRESCENT, "🌒"),
    (0.3125, MoonPhase.FIRST_QUARTER, "🌓"),
    (0.4375, MoonPhase.WAXING_GIBBOUS, "🌔"),
    (0.5625, MoonPhase.FULL_MOON, "🌕"),
    (0.6875, MoonPhase.WANING_GIBBOUS, "🌖"),
    (0.8125, MoonPhase.LAST_QUARTER, "🌗"),
    (0.9375, MoonPhase.WANING_CRESCENT, "🌘"),
)

PHASE_DESCRIPTIONS: dict[MoonPhase, str] = {
    MoonPhase.NEW_MOON: "The moon is between Earth and the Sun, invisible in the night sky. A time of new beginnings.",
    MoonPhase.WAXING_CRESCENT: "A sliver of moon appears in the western sky after sunset. The light is growing.",
    MoonPhase.FIRST_QUARTER: "Half the moon is illuminated. A time of decision and action.",
    MoonPhase.WAXING_GIBBOUS: "More than half illuminated and growing toward full. Building momentum.",
    MoonPhase.FULL_MOON: "The entire face is illuminated. Peak energy, illumination, and clarity.",
    MoonPhase.WANING_GIBBOUS: "Just past full, beginning to decrease. Time for gratitude and sharing.",
    MoonPhase.LAST_QUARTER: "Half illuminated but shrinking. A time of release and letting go.",
    MoonPhase.WANING_CRESCENT: "A thin crescent in the eastern pre-dawn sky. Rest and reflection before renewal.",
}

ZODIAC_SIGNS: tuple[str, ...] = (
    "Aries ♈",
    "Taurus ♉",
    "Gemini ♊",
    "Cancer ♋",
    "Leo ♌",
    "Virgo ♍",
    "Libra ♎",
    "Scorpio ♏",
    "Sagittarius ♐",
    "Capricorn ♑",
    "Aquarius ♒",
    "Pisces ♓",
)

# Hard cap on the hourly phase search (30 days)
MAX_PHASE_SEARCH_HOURS = 30 * 24


class MoonPhaseInfo(NamedTuple):
    """Moon phase information."""

    phase: float  # 0-1 (0 = new moon, 0.5 = full moon)
    phase_name: MoonPhase
    illumination: int  # Percent lit, 0-100
    emoji: str
    description: str
    angle: float  # Position angle of the bright limb, degrees

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "phaseName": str(self.phase_name),
            "illumination": self.illumination,
            "emoji": self.emoji,
            "description": self.description,
            "angle": self.angle,
        }


class MoonPosition(NamedTuple):
    """Moon position in the observer's sky."""

    altitude: float  # Degrees above horizon
    azimuth: float  # Compass bearing in degrees
    distance: float  # Kilometres from the observer
    parallactic_angle: float  # Degrees

    def to_dict(self) -> dict[str, Any]:
        return {
            "altitude": self.altitude,
            "azimuth": self.azimuth,
            "distance": self.distance,
            "parallacticAngle": self.parallactic_angle,
        }


class MoonTimes(NamedTuple):
    """Moonrise and moonset within the observer's local day."""

    rise: datetime | None = None
    set: datetime | None = None
    always_up: bool = False
    always_down: bool = False


class MoonInfo(NamedTuple):
    """Everything the almanac shows about the Moon."""

    phase: MoonPhaseInfo
    position: MoonPosition
    times: MoonTimes
    next_full_moon: datetime
    next_new_moon: datetime
    zodiac_sign: str


def _sector(phase: float) -> tuple[MoonPhase, str]:
    for upper, name, emoji in _PHASE_SECTORS:
        if phase < upper:
            return name, emoji
    return MoonPhase.NEW_MOON, "🌑"


def phase_name(phase: float) -> MoonPhase:
    """
    Name of the phase for a phase value in [0, 1).

    Each name covers a 0.125-wide sector centred on its principal phase.

    Examples:
        >>> phase_name(0.5)
        <MoonPhase.FULL_MOON: 'Full Moon'>
        >>> phase_name(0.97)
        <MoonPhase.NEW_MOON: 'New Moon'>
    """
    return _sector(phase)[0]


def phase_emoji(phase: float) -> str:
    return _sector(phase)[1]


@deal.post(lambda result: result in ZODIAC_SIGNS, message="Must be a zodiac sign")
def get_moon_zodiac(date: datetime) -> str:
    """
    Approximate zodiac sign of the Moon.

    Assumes a uniform sidereal month starting from a reference instant with
    the Moon at the start of Aries; good to about a sign.
    """
    days = (ensure_utc(date) - MOON_ZODIAC_EPOCH).total_seconds() / 86400
    position = (days % SIDEREAL_MONTH_DAYS) / SIDEREAL_MONTH_DAYS
    return ZODIAC_SIGNS[math.floor(position * 12) % 12]


@deal.pre(
    lambda start, target, phase_at, tolerance=0.02, max_hours=MAX_PHASE_SEARCH_HOURS: max_hours >= 1,
    message="Must search at least one hour",
)
def find_next_phase(
    start: datetime,
    target: float,
    phase_at: Callable[[Sequence[datetime]], Sequence[float]],
    tolerance: float = 0.02,
    max_hours: int = MAX_PHASE_SEARCH_HOURS,
) -> datetime:
    """
    Find the first hour at which the Moon's phase is within ``tolerance`` of ``target``.

    Checks whole hours from ``start`` (inclusive) for at most ``max_hours``
    steps. ``phase_at`` is called once with every hour of the search window. If
    nothing matches, falls back to an estimate from the mean synodic month.

    Args:
        start: Search start
        target: Phase value to find (0 = new, 0.5 = full)
        phase_at: Function returning the phase values (0-1) at a sequence of instants
        tolerance: Maximum distance from ``target`` that counts as a match
        max_hours: Hard cap on the number of hourly steps

    Returns:
        Datetime of the match, or the fallback estimate
    """
    hours = [start + timedelta(hours=i) for i in range(max_hours)]
    phases = phase_at(hours)
    for when, phase in zip(hours, phases, strict=True):
        if abs(phase - target) < tolerance:
            return when

    days_until = ((target - phases[0] + 1) % 1) * SYNODIC_MONTH_DAYS
    logger.warning(
        f"No phase {target} within {max_hours} hours of {start.isoformat()}, estimating {days_until:.2f} days"
    )
    return start + timedelta(days=days_until)


def bright_limb_angle(sun_ra_hours: float, sun_dec: float, moon_ra_hours: float, moon_dec: float) -> float:
    """
    Position angle of the Moon's bright limb in degrees, measured from north through east.
    """
    delta_ra = math.radians((sun_ra_hours - moon_ra_hours) * DEGREES_PER_HOUR_ANGLE)
    sun_dec_rad = math.radians(sun_dec)
    moon_dec_rad = math.radians(moon_dec)
    return math.degrees(
        math.atan2(
            math.cos(sun_dec_rad) * math.sin(delta_ra),
            math.sin(sun_dec_rad) * math.cos(moon_dec_rad)
            - math.cos(sun_dec_rad) * math.sin(moon_dec_rad) * math.cos(delta_ra),
        )
    )


def get_moon_phase_values(dates: Sequence[datetime]) -> list[float]:
    """
    Phase values in [0, 1) for many instants, from one array-valued Skyfield call.

    0 is new, 0.25 first quarter, 0.5 full and 0.75 last quarter.
    """
    eph = get_ephemeris()
    degrees = almanac.moon_phase(eph, to_skyfield_times(dates)).degrees
    return [float(value) / 360.0 % 1.0 for value in degrees]


def get_moon_phase(date: datetime) -> MoonPhaseInfo:
    """
    Get the Moon's phase at ``date``.

    Raises:
        EphemerisLoadError: If the ephemeris cannot be loaded
    """
    eph = get_ephemeris()
    t = to_skyfield_time(date)
    phase = float(almanac.moon_phase(eph, t).degrees) / 360.0 % 1.0
    fraction = float(almanac.fraction_illuminated(eph, "moon", t))

    earth = eph["earth"]
    sun_ra, sun_dec, _ = earth.at(t).observe(eph["sun"]).apparent().radec("date")
    moon_ra, moon_dec, _ = earth.at(t).observe(eph["moon"]).apparent().radec("date")

    name, emoji = _sector(phase)
    return MoonPhaseInfo(
        phase=phase,
        phase_name=name,
        illumination=math.floor(fraction * 100 + 0.5),
        emoji=emoji,
        description=PHASE_DESCRIPTIONS[name],
        angle=bright_limb_angle(sun_ra.hours, sun_dec.degrees, moon_ra.hours, moon_dec.degrees),
    )


def get_moon_position(date: datetime, lat: float, lon: float) -> MoonPosition:
    """Apparent position of the Moon for an observer."""
    eph = get_ephemeris()
    observer = eph["earth"] + wgs84.latlon(lat, lon)
    apparent = observer.at(to_skyfield_time(date)).observe(eph["moon"]).apparent()
    alt, az, distance = apparent.altaz()
    ra, dec, _ = apparent.radec("date")

    ha = hour_angle(local_sidereal_time(date, lon), float(ra.hours))
    return MoonPosition(
        altitude=float(alt.degrees),
        azimuth=float(az.degrees),
        distance=float(distance.km),
        parallactic_angle=parallactic_angle(ha, float(dec.degrees), lat),
    )


def get_moon_times(date: datetime, lat: float, lon: float, tz: ZoneInfo) -> MoonTimes:
    """
    Moonrise and moonset during the observer's local calendar day.

    When the Moon neither rises nor sets that day, ``always_up`` or
    ``always_down`` says which side of the horizon it stays on.
    """
    eph = get_ephemeris()
    start, end = local_day_bounds(date, tz)
    above_horizon = almanac.risings_and_settings(eph, eph["moon"], wgs84.latlon(lat, lon))
    initial, changes = find_events(start, end, above_horizon)

    if not changes:
        return MoonTimes(always_up=bool(initial), always_down=not initial)

    rise = next((when for when, rising in changes if rising), None)
    moonset = next((when for when, rising in changes if not rising), None)
    return MoonTimes(rise=rise, set=moonset)


def format_moon_times(times: MoonTimes, tz: ZoneInfo) -> dict[str, str]:
    """Format moonrise and moonset for display ("7:15 PM", "Always up", "Always down" or "--")."""
    if times.always_up:
        return {"rise": "Always up", "set": "Always up"}
    if times.always_down:
        return {"rise": "Always down", "set": "Always down"}
    return {"rise": format_clock_time(times.rise, tz), "set": format_clock_time(times.set, tz)}


def get_moon_info(now: datetime, lat: float, lon: float, tz: ZoneInfo) -> MoonInfo:
    """
    Get complete moon information for an observer.

    Raises:
        EphemerisLoadError: If the ephemeris cannot be loaded
    """
    now = ensure_utc(now)
    return MoonInfo(
        phase=get_moon_phase(now),
        position=get_moon_position(now, lat, lon),
        times=get_moon_times(now, lat, lon, tz),
        next_full_moon=find_next_phase(now, 0.5, get_moon_phase_values),
        next_new_moon=find_next_phase(now, 0.0, get_moon_phase_values),
        zodiac_sign=get_moon_zodiac(now),
    )
