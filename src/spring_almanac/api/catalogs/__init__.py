"""Catalogs subpackage: constellation catalog and sky lore library."""

from spring_almanac.api.catalogs.constellations import (
    CelestialObject,
    VisibilityResult,
    best_object_now,
    compute_visible_objects,
    load_catalog,
    objects_by_difficulty,
)
from spring_almanac.api.catalogs.lore import (
    AstronomicalEvent,
    LoreLibrary,
    SkyLore,
    get_daily_sky_lore,
    get_upcoming_events,
    load_library,
)


__all__ = [
    "AstronomicalEvent",
    "CelestialObject",
    "LoreLibrary",
    "SkyLore",
    "VisibilityResult",
    "best_object_now",
    "compute_visible_objects",
    "get_daily_sky_lore",
    "get_upcoming_events",
    "load_catalog",
    "load_library",
    "objects_by_difficulty",
]
