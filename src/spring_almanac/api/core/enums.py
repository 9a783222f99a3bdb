"""
Common Enums

Enumerations used throughout the Spring Almanac API.
"""

from enum import StrEnum


__all__ = [
    "AltitudeBucket",
    "Difficulty",
    "EventType",
    "LoreCategory",
    "MoonPhase",
]


class AltitudeBucket(StrEnum):
    """Coarse description of how far above the horizon an object sits."""

    HIGH = "High in sky"  # Above 60°
    MID = "Mid-sky"  # Above 30°
    LOW = "Low on horizon"  # 30° and below


class Difficulty(StrEnum):
    """How hard a constellation is to pick out with the naked eye."""

    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


class MoonPhase(StrEnum):
    """Moon phase names."""

    NEW_MOON = "New Moon"
    WAXING_CRESCENT = "Waxing Crescent"
    FIRST_QUARTER = "First Quarter"
    WAXING_GIBBOUS = "Waxing Gibbous"
    FULL_MOON = "Full Moon"
    WANING_GIBBOUS = "Waning Gibbous"
    LAST_QUARTER = "Last Quarter"
    WANING_CRESCENT = "Waning Crescent"


class LoreCategory(StrEnum):
    """Sky lore topics."""

    SOLSTICE = "solstice"
    EQUINOX = "equinox"
    STARS = "stars"
    MOON = "moon"
    PLANETS = "planets"
    SEASONS = "seasons"
    TRADITIONS = "traditions"


class EventType(StrEnum):
    """Kinds of scheduled astronomical events."""

    METEOR_SHOWER = "meteor_shower"
    ECLIPSE = "eclipse"
    CONJUNCTION = "conjunction"
    OPPOSITION = "opposition"
    SOLSTICE = "solstice"
    EQUINOX = "equinox"
    SUPERMOON = "supermoon"
