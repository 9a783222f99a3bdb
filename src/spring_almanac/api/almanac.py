"""
Almanac Payload

Combines countdowns, daylight, moon, visible constellations, sky lore and
upcoming events into the JSON document served to the web page.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from .astronomy.countdown import get_countdowns, next_dst_start
from .astronomy.moon import format_moon_times, get_moon_info
from .astronomy.sun import (
    find_season_events,
    get_daylight_gain,
    get_daylight_info,
    get_spring_progress,
    next_spring_equinox,
    previous_winter_solstice,
)
from .catalogs.constellations import CelestialObject, compute_visible_objects
from .catalogs.lore import AstronomicalEvent, LoreLibrary, get_daily_sky_lore, get_upcoming_events
from .core.enums import EventType
from .core.settings import AlmanacSettings
from .core.utils import ensure_utc


logger = logging.getLogger(__name__)


__all__ = [
    "build_almanac_payload",
    "build_countdown_payload",
    "get_dst_target",
    "get_spring_target",
    "season_events",
]

_SEASON_DESCRIPTIONS: dict[int, tuple[str, str, EventType]] = {
    0: (
        "March Equinox",
        "Day and night are nearly equal. The Sun crosses the celestial equator heading north.",
        EventType.EQUINOX,
    ),
    1: (
        "June Solstice",
        "The Sun reaches its northernmost point: the longest day north of the equator.",
        EventType.SOLSTICE,
    ),
    2: (
        "September Equinox",
        "Day and night are nearly equal again as the Sun crosses the equator heading south.",
        EventType.EQUINOX,
    ),
    3: (
        "December Solstice",
        "The shortest day in the north. From here the light begins to return.",
        EventType.SOLSTICE,
    ),
}


def get_spring_target(now: datetime, settings: AlmanacSettings) -> datetime:
    """The configured spring equinox, or the next March equinox after ``now``."""
    if settings.spring_equinox is not None:
        return settings.spring_equinox
    return next_spring_equinox(now)


def get_dst_target(now: datetime, tz: ZoneInfo, settings: AlmanacSettings) -> datetime | None:
    """The configured DST start, or the zone's next spring-forward transition."""
    if settings.dst_start is not None:
        return settings.dst_start
    return next_dst_start(now, tz)


def season_events(
    now: datetime,
    existing: tuple[AstronomicalEvent, ...] | list[AstronomicalEvent] = (),
) -> list[AstronomicalEvent]:
    """
    Equinoxes and solstices for this year and next as events.

    Skips any that already appear in ``existing`` (same type within a day).
    """
    year = ensure_utc(now).year
    events: list[AstronomicalEvent] = []
    for season in find_season_events(year) + find_season_events(year + 1):
        name, description, event_type = _SEASON_DESCRIPTIONS[season.index]
        duplicate = any(
            other.type == event_type and abs(other.date - season.time) < timedelta(days=1) for other in existing
        )
        if not duplicate:
            events.append(AstronomicalEvent(name=name, date=season.time, description=description, type=event_type))
    return events


def build_countdown_payload(now: datetime, tz: ZoneInfo, settings: AlmanacSettings) -> dict[str, Any]:
    """Countdowns to the spring equinox and DST start."""
    return get_countdowns(now, get_spring_target(now, settings), get_dst_target(now, tz, settings))


def build_almanac_payload(
    now: datetime,
    lat: float,
    lon: float,
    tz: ZoneInfo,
    catalog: tuple[CelestialObject, ...] | list[CelestialObject],
    library: LoreLibrary,
    settings: AlmanacSettings,
) -> dict[str, Any]:
    """
    Build the combined almanac document for one observer.

    Args:
        now: Current instant
        lat: Observer latitude in degrees
        lon: Observer longitude in degrees
        tz: Observer time zone
        catalog: Constellation catalog
        library: Sky lore and events
        settings: Result counts and date overrides

    Returns:
        JSON-serializable dictionary

    Raises:
        EphemerisError: If sun or moon positions cannot be computed
    """
    now = ensure_utc(now)
    spring = get_spring_target(now, settings)
    solstice = previous_winter_solstice(now)

    moon = get_moon_info(now, lat, lon, tz)
    constellations = compute_visible_objects(now, lat, lon, catalog)[: settings.top_constellations]
    events = list(library.events) + season_events(now, library.events)

    logger.debug(f"Built almanac for ({lat}, {lon}) {tz.key} with {len(constellations)} constellations")
    return {
        "timestamp": now.isoformat(),
        "location": {"lat": lat, "lon": lon, "timezone": tz.key},
        "countdowns": get_countdowns(now, spring, get_dst_target(now, tz, settings)),
        "daylight": get_daylight_info(now, lat, lon, tz),
        "daylightGain": get_daylight_gain(now, lat, lon, tz, solstice),
        "springProgress": get_spring_progress(now, lat, lon, tz, solstice, spring),
        "moon": {
            "phase": moon.phase.to_dict(),
            "position": moon.position.to_dict(),
            "times": format_moon_times(moon.times, tz),
            "nextFullMoon": moon.next_full_moon.isoformat(),
            "nextNewMoon": moon.next_new_moon.isoformat(),
            "zodiacSign": moon.zodiac_sign,
        },
        "constellations": [result.to_dict() for result in constellations],
        "skyLore": [entry.to_dict() for entry in get_daily_sky_lore(now, library.lore, settings.lore_count)],
        "upcomingEvents": [event.to_dict() for event in get_upcoming_events(now, events, settings.event_count)],
    }
