"""
Sun Calculations

Sunrise, sunset, twilight and golden hour for the observer's local day,
daylight duration and how it grows toward the spring equinox, and the
dates of the equinoxes and solstices. Ephemeris work is done by Skyfield.
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime, time, timedelta
from typing import Any, NamedTuple
from zoneinfo import ZoneInfo

from skyfield import almanac
from skyfield.api import wgs84

from ..core.constants import EQUINOX_DAYLIGHT_MINUTES
from ..core.exceptions import EphemerisError
from ..core.utils import ensure_utc, format_clock_time
from .skyfield_utils import find_events, get_ephemeris, get_timescale, to_skyfield_time


logger = logging.getLogger(__name__)


__all__ = [
    "SeasonEvent",
    "SunPosition",
    "SunTimes",
    "daylight_seconds_from_events",
    "find_season_events",
    "format_daylight_gain",
    "format_since_solstice",
    "get_daylight_gain",
    "get_daylight_info",
    "get_daylight_minutes",
    "get_spring_progress",
    "get_sun_position",
    "get_sun_times",
    "local_day_bounds",
    "next_spring_equinox",
    "previous_winter_solstice",
]

# Sun altitude used for sunrise/sunset (upper limb with standard refraction)
SUNRISE_ALTITUDE_DEGREES = -0.8333
# Golden hour ends (morning) / starts (evening) when the sun is this high
GOLDEN_HOUR_ALTITUDE_DEGREES = 6.0

# Twilight level changes reported by almanac.dark_twilight_day:
# 0 night, 1 astronomical, 2 nautical, 3 civil twilight, 4 day
_TWILIGHT_TRANSITIONS: dict[tuple[int, int], str] = {
    (0, 1): "night_end",
    (1, 2): "nautical_dawn",
    (2, 3): "dawn",
    (3, 4): "sunrise",
    (4, 3): "sunset",
    (3, 2): "dusk",
    (2, 1): "nautical_dusk",
    (1, 0): "night",
}

# Index into almanac.SEASON_EVENTS
_MARCH_EQUINOX = 0
_DECEMBER_SOLSTICE = 3


class SunTimes(NamedTuple):
    """Sun events for one local calendar day. ``None`` when the event does not occur."""

    sunrise: datetime | None = None
    sunset: datetime | None = None
    solar_noon: datetime | None = None
    dawn: datetime | None = None  # Civil twilight start
    dusk: datetime | None = None  # Civil twilight end
    nautical_dawn: datetime | None = None
    nautical_dusk: datetime | None = None
    night_end: datetime | None = None  # Astronomical twilight start
    night: datetime | None = None  # Astronomical twilight end
    golden_hour_end: datetime | None = None  # Morning golden hour end
    golden_hour: datetime | None = None  # Evening golden hour start


class SunPosition(NamedTuple):
    """Sun position in the observer's sky."""

    altitude: float  # Degrees above horizon
    azimuth: float  # Compass bearing in degrees


class SeasonEvent(NamedTuple):
    """An equinox or solstice."""

    name: str  # "Vernal Equinox", "Summer Solstice", ...
    time: datetime  # UTC
    index: int  # 0 March equinox, 1 June solstice, 2 September equinox, 3 December solstice


def local_day_bounds(date: datetime, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """
    UTC start and end of the local calendar day containing ``date``.

    Naive datetimes are read as UTC before converting to ``tz``.
    """
    local_date = ensure_utc(date).astimezone(tz).date()
    start = datetime.combine(local_date, time.min, tzinfo=tz)
    end = datetime.combine(local_date + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)


def _observer(lat: float, lon: float) -> Any:
    return wgs84.latlon(lat, lon)


def get_sun_times(date: datetime, lat: float, lon: float, tz: ZoneInfo) -> SunTimes:
    """
    Get sun event times for the observer's local calendar day.

    Args:
        date: Any instant within the day of interest
        lat: Observer latitude in degrees
        lon: Observer longitude in degrees
        tz: Observer time zone (defines the calendar day)

    Returns:
        SunTimes with UTC datetimes; events that do not happen that day are None

    Raises:
        EphemerisLoadError: If the ephemeris cannot be loaded
    """
    eph = get_ephemeris()
    sun = eph["sun"]
    topos = _observer(lat, lon)
    start, end = local_day_bounds(date, tz)

    found: dict[str, datetime] = {}

    previous, changes = find_events(start, end, almanac.dark_twilight_day(eph, topos))
    for when, level in changes:
        name = _TWILIGHT_TRANSITIONS.get((previous, level))
        if name is not None:
            found.setdefault(name, when)
        previous = level

    golden = almanac.risings_and_settings(eph, sun, topos, horizon_degrees=GOLDEN_HOUR_ALTITUDE_DEGREES)
    _, changes = find_events(start, end, golden)
    for when, rising in changes:
        found.setdefault("golden_hour_end" if rising else "golden_hour", when)

    _, changes = find_events(start, end, almanac.meridian_transits(eph, sun, topos))
    for when, upper in changes:
        if upper:
            found.setdefault("solar_noon", when)

    logger.debug(f"Sun events for {start.date()} at ({lat}, {lon}): {sorted(found)}")
    return SunTimes(**found)


def get_sun_position(when: datetime, lat: float, lon: float) -> SunPosition:
    """Apparent altitude and azimuth of the Sun at ``when``."""
    eph = get_ephemeris()
    observer = eph["earth"] + _observer(lat, lon)
    alt, az, _distance = observer.at(to_skyfield_time(when)).observe(eph["sun"]).apparent().altaz()
    return SunPosition(altitude=float(alt.degrees), azimuth=float(az.degrees))


def daylight_seconds_from_events(
    day_start: datetime,
    day_end: datetime,
    sunrise: datetime | None,
    sunset: datetime | None,
    sun_up_at_noon: bool,
) -> float:
    """
    Seconds of daylight in a day given its sunrise and sunset.

    Handles days where only one of the events falls inside the day, and days
    with neither (polar day when the sun is up at noon, polar night otherwise).
    """
    if sunrise is not None and sunset is not None and sunset > sunrise:
        return (sunset - sunrise).total_seconds()
    if sunrise is None and sunset is None:
        return (day_end - day_start).total_seconds() if sun_up_at_noon else 0.0

    seconds = 0.0
    if sunset is not None:
        # Sun was already up at the start of the day
        seconds += (sunset - day_start).total_seconds()
    if sunrise is not None:
        # Sun is still up at the end of the day
        seconds += (day_end - sunrise).total_seconds()
    return seconds


def _daylight_seconds(date: datetime, lat: float, lon: float, tz: ZoneInfo) -> float:
    times = get_sun_times(date, lat, lon, tz)
    start, end = local_day_bounds(date, tz)
    sun_up_at_noon = False
    if times.sunrise is None and times.sunset is None:
        noon = times.solar_noon or start + (end - start) / 2
        sun_up_at_noon = get_sun_position(noon, lat, lon).altitude > SUNRISE_ALTITUDE_DEGREES
        logger.debug(f"No sunrise or sunset on {start.date()} at ({lat}, {lon}); sun up at noon: {sun_up_at_noon}")
    return daylight_seconds_from_events(start, end, times.sunrise, times.sunset, sun_up_at_noon)


def get_daylight_minutes(date: datetime, lat: float, lon: float, tz: ZoneInfo) -> int:
    """
    Minutes of daylight (sunrise to sunset) on the observer's local day.

    Returns 1440 for polar day and 0 for polar night.
    """
    seconds = _daylight_seconds(date, lat, lon, tz)
    return min(24 * 60, math.floor(seconds / 60 + 0.5))


def get_daylight_info(now: datetime, lat: float, lon: float, tz: ZoneInfo) -> dict[str, Any]:
    """
    Sunrise, sunset, day length, sun position and twilight table for today.

    Times are formatted as local clock readings ("6:42 AM"); missing events are "--".
    """
    times = get_sun_times(now, lat, lon, tz)
    position = get_sun_position(now, lat, lon)
    total_minutes = get_daylight_minutes(now, lat, lon, tz)
    hours, minutes = divmod(total_minutes, 60)

    def fmt(dt: datetime | None) -> str:
        return format_clock_time(dt, tz)

    return {
        "sunrise": fmt(times.sunrise),
        "sunset": fmt(times.sunset),
        "daylightDuration": {
            "hours": hours,
            "minutes": minutes,
            "totalMinutes": total_minutes,
            "formatted": f"{hours}h {minutes}m",
        },
        "sunPosition": {
            "altitude": position.altitude,
            "azimuth": position.azimuth,
        },
        "twilight": {
            "civilDawn": fmt(times.dawn),
            "civilDusk": fmt(times.dusk),
            "nauticalDawn": fmt(times.nautical_dawn),
            "nauticalDusk": fmt(times.nautical_dusk),
            "astronomicalDawn": fmt(times.night_end),
            "astronomicalDusk": fmt(times.night),
            "goldenHourMorning": {"start": fmt(times.sunrise), "end": fmt(times.golden_hour_end)},
            "goldenHourEvening": {"start": fmt(times.golden_hour), "end": fmt(times.sunset)},
        },
    }


def format_daylight_gain(gain_seconds: float) -> tuple[int, int, str]:
    """
    Split a day-over-day change in daylight into minutes and seconds.

    Returns:
        (minutes, seconds, formatted) where minutes carries the sign, seconds
        is always non-negative, and formatted reads "+2m 7s", "+45s" or "-1m 3s"
    """
    sign = "-" if gain_seconds < 0 else "+"
    minutes, seconds = divmod(math.floor(abs(gain_seconds) + 0.5), 60)
    formatted = f"{sign}{minutes}m {seconds}s" if minutes >= 1 else f"{sign}{seconds}s"
    return (-minutes if gain_seconds < 0 else minutes), seconds, formatted


def format_since_solstice(total_minutes: int) -> str:
    """Format minutes gained since the solstice ("1h 23m", or "45m" up to an hour)."""
    if total_minutes > 60:
        hours, minutes = divmod(total_minutes, 60)
        return f"{hours}h {minutes}m"
    return f"{total_minutes}m"


def get_daylight_gain(now: datetime, lat: float, lon: float, tz: ZoneInfo, solstice: datetime) -> dict[str, Any]:
    """
    How much daylight today gained over yesterday and since the winter solstice.

    Args:
        now: Current instant
        lat: Observer latitude in degrees
        lon: Observer longitude in degrees
        tz: Observer time zone
        solstice: The most recent December solstice
    """
    today_seconds = _daylight_seconds(now, lat, lon, tz)
    yesterday_seconds = _daylight_seconds(now - timedelta(days=1), lat, lon, tz)
    gain_minutes, gain_seconds, formatted = format_daylight_gain(today_seconds - yesterday_seconds)

    today_minutes = min(24 * 60, math.floor(today_seconds / 60 + 0.5))
    total_gained = today_minutes - get_daylight_minutes(solstice, lat, lon, tz)

    return {
        "todayMinutes": today_minutes,
        "yesterdayMinutes": min(24 * 60, math.floor(yesterday_seconds / 60 + 0.5)),
        "gainMinutes": gain_minutes,
        "gainSeconds": gain_seconds,
        "formatted": formatted,
        "sinceSolstice": {
            "totalMinutesGained": total_gained,
            "formatted": format_since_solstice(total_gained),
        },
    }


def get_spring_progress(
    now: datetime,
    lat: float,
    lon: float,
    tz: ZoneInfo,
    solstice: datetime,
    equinox: datetime,
) -> dict[str, Any]:
    """
    Progress from the winter solstice's day length toward a 12-hour equinox day.

    ``percentComplete`` is capped at 100 and ``daysRemaining`` never goes below 0.
    Where the solstice day is already 12 hours or longer (equator, southern
    hemisphere) progress reads as complete.
    """
    current = get_daylight_minutes(now, lat, lon, tz)
    at_solstice = get_daylight_minutes(solstice, lat, lon, tz)

    needed = EQUINOX_DAYLIGHT_MINUTES - at_solstice
    if needed > 0:
        percent = min(100, math.floor((current - at_solstice) / needed * 100 + 0.5))
    else:
        percent = 100

    remaining = (ensure_utc(equinox) - ensure_utc(now)).total_seconds() / 86400
    return {
        "currentDaylight": current,
        "targetDaylight": EQUINOX_DAYLIGHT_MINUTES,
        "percentComplete": percent,
        "daysRemaining": max(0, math.ceil(remaining)),
    }


def find_season_events(year: int) -> list[SeasonEvent]:
    """
    Equinoxes and solstices of a calendar year (UTC), in time order.

    Raises:
        EphemerisLoadError: If the ephemeris cannot be loaded
    """
    eph = get_ephemeris()
    ts = get_timescale()
    t0 = ts.utc(year, 1, 1)
    t1 = ts.utc(year + 1, 1, 1)
    times, values = almanac.find_discrete(t0, t1, almanac.seasons(eph))
    return [
        SeasonEvent(name=almanac.SEASON_EVENTS[int(y)], time=t.utc_datetime(), index=int(y))
        for t, y in zip(times, values, strict=True)
    ]


def next_spring_equinox(now: datetime) -> datetime:
    """The next March equinox strictly after ``now``."""
    now = ensure_utc(now)
    for year in (now.year, now.year + 1):
        for event in find_season_events(year):
            if event.index == _MARCH_EQUINOX and event.time > now:
                return event.time
    raise EphemerisError(f"No March equinox found after {now.isoformat()}")


def previous_winter_solstice(now: datetime) -> datetime:
    """The most recent December solstice at or before ``now``."""
    now = ensure_utc(now)
    for year in (now.year, now.year - 1):
        for event in reversed(find_season_events(year)):
            if event.index == _DECEMBER_SOLSTICE and event.time <= now:
                return event.time
    raise EphemerisError(f"No December solstice found before {now.isoformat()}")
