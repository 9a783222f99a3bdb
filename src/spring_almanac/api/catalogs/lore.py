"""
Sky Lore and Astronomical Events

Loads the sky lore collection and the calendar of astronomical events from
YAML, and picks what to show for a given day.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import deal
import yaml
from cachetools import TTLCache, cached

from ..core.enums import EventType, LoreCategory
from ..core.exceptions import CatalogNotFoundError, InvalidCatalogFormatError
from ..core.utils import ensure_utc


logger = logging.getLogger(__name__)


__all__ = [
    "AstronomicalEvent",
    "LoreLibrary",
    "SkyLore",
    "default_events_path",
    "default_lore_path",
    "get_daily_sky_lore",
    "get_next_major_event",
    "get_random_sky_lore",
    "get_sky_lore_by_category",
    "get_this_weeks_events",
    "get_upcoming_events",
    "load_events",
    "load_library",
    "load_sky_lore",
]


@dataclass(frozen=True)
class SkyLore:
    """A short piece of astronomical folklore or history."""

    id: str
    title: str
    content: str
    culture: str
    category: LoreCategory
    relevant_months: tuple[int, ...]
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "culture": self.culture,
            "category": str(self.category),
            "relevantMonths": list(self.relevant_months),
        }
        if self.source:
            data["source"] = self.source
        return data


@dataclass(frozen=True)
class AstronomicalEvent:
    """A dated sky event (meteor shower peak, eclipse, equinox, ...)."""

    name: str
    date: datetime  # UTC
    description: str
    type: EventType

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "date": self.date.isoformat(),
            "description": self.description,
            "type": str(self.type),
        }


@dataclass(frozen=True)
class LoreLibrary:
    """Sky lore and events loaded together at startup."""

    lore: tuple[SkyLore, ...]
    events: tuple[AstronomicalEvent, ...]


def _data_dir() -> Path:
    return Path(__file__).parent.parent.parent / "data"


def default_lore_path() -> Path:
    return _data_dir() / "sky_lore.yaml"


def default_events_path() -> Path:
    return _data_dir() / "events.yaml"


def _read_yaml_list(path: Path, key: str) -> list[Any]:
    if not path.exists():
        raise CatalogNotFoundError(f"Could not find {key} data at {path}")

    logger.debug(f"Loading {key} from {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidCatalogFormatError(f"Could not parse {path}: {e}") from e

    records = data.get(key) if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise InvalidCatalogFormatError(f"{path} must contain a '{key}' list")
    return records


def _parse_lore(record: Any, source: Path) -> SkyLore:
    try:
        months = tuple(int(m) for m in record["relevant_months"])
        lore = SkyLore(
            id=str(record["id"]),
            title=str(record["title"]),
            content=str(record["content"]),
            culture=str(record["culture"]),
            category=LoreCategory(record["category"]),
            relevant_months=months,
            source=record.get("source"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidCatalogFormatError(f"Invalid sky lore entry {record!r} in {source}: {e}") from e

    if not lore.id:
        raise InvalidCatalogFormatError(f"Sky lore entry '{lore.title}' in {source} has an empty id")
    bad_months = [m for m in months if not 1 <= m <= 12]
    if bad_months:
        raise InvalidCatalogFormatError(f"Sky lore '{lore.id}' lists months outside 1-12: {bad_months}")
    return lore


def _parse_event(record: Any, source: Path) -> AstronomicalEvent:
    try:
        raw_date = record["date"]
        if isinstance(raw_date, datetime):
            date = raw_date
        else:
            date = datetime.fromisoformat(str(raw_date).replace("Z", "+00:00"))
        return AstronomicalEvent(
            name=str(record["name"]),
            date=ensure_utc(date),
            description=str(record["description"]),
            type=EventType(record["type"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidCatalogFormatError(f"Invalid event entry {record!r} in {source}: {e}") from e


# Cache for parsed data files, keyed by path (TTL=3600 seconds / 1 hour)
_lore_cache: TTLCache[str, tuple[SkyLore, ...]] = TTLCache(maxsize=16, ttl=3600)
_events_cache: TTLCache[str, tuple[AstronomicalEvent, ...]] = TTLCache(maxsize=16, ttl=3600)


@cached(_lore_cache)
def _load_lore_from_yaml(path: str) -> tuple[SkyLore, ...]:
    source = Path(path)
    lore = tuple(_parse_lore(record, source) for record in _read_yaml_list(source, "sky_lore"))
    logger.info(f"Loaded {len(lore)} sky lore entries from {source}")
    return lore


@cached(_events_cache)
def _load_events_from_yaml(path: str) -> tuple[AstronomicalEvent, ...]:
    source = Path(path)
    events = tuple(_parse_event(record, source) for record in _read_yaml_list(source, "events"))
    logger.info(f"Loaded {len(events)} astronomical events from {source}")
    return events


def load_sky_lore(path: Path | str | None = None) -> tuple[SkyLore, ...]:
    """
    Load the sky lore collection.

    Raises:
        CatalogNotFoundError: If the file does not exist
        InvalidCatalogFormatError: If an entry is malformed
    """
    lore_path = Path(path) if path is not None else default_lore_path()
    return _load_lore_from_yaml(str(lore_path.expanduser().resolve()))  # type: ignore[no-any-return]


def load_events(path: Path | str | None = None) -> tuple[AstronomicalEvent, ...]:
    """
    Load the astronomical events calendar.

    Raises:
        CatalogNotFoundError: If the file does not exist
        InvalidCatalogFormatError: If an entry is malformed
    """
    events_path = Path(path) if path is not None else default_events_path()
    return _load_events_from_yaml(str(events_path.expanduser().resolve()))  # type: ignore[no-any-return]


def load_library(lore_path: Path | str | None = None, events_path: Path | str | None = None) -> LoreLibrary:
    """Load sky lore and events together."""
    return LoreLibrary(lore=load_sky_lore(lore_path), events=load_events(events_path))


def _lore_rank(lore: SkyLore, day_of_year: int) -> int:
    return (ord(lore.id[0]) * day_of_year) % 100


@deal.pre(lambda date, lore, limit=3: limit >= 0, message="Limit must not be negative")
def get_daily_sky_lore(date: datetime, lore: tuple[SkyLore, ...] | list[SkyLore], limit: int = 3) -> list[SkyLore]:
    """
    Sky lore for a given day.

    Entries relevant to the (UTC) month are put in a day-of-year dependent
    order, so the same day always shows the same entries and the selection
    rotates from day to day.
    """
    utc = ensure_utc(date)
    day_of_year = utc.timetuple().tm_yday
    relevant = [entry for entry in lore if utc.month in entry.relevant_months]
    return sorted(relevant, key=lambda entry: _lore_rank(entry, day_of_year))[:limit]


@deal.pre(lambda date, events, limit=5: limit >= 0, message="Limit must not be negative")
def get_upcoming_events(
    date: datetime,
    events: tuple[AstronomicalEvent, ...] | list[AstronomicalEvent],
    limit: int = 5,
) -> list[AstronomicalEvent]:
    """Events strictly after ``date``, soonest first."""
    now = ensure_utc(date)
    return sorted((event for event in events if event.date > now), key=lambda event: event.date)[:limit]


def get_next_major_event(
    date: datetime,
    events: tuple[AstronomicalEvent, ...] | list[AstronomicalEvent],
) -> AstronomicalEvent | None:
    upcoming = get_upcoming_events(date, events, limit=1)
    return upcoming[0] if upcoming else None


def get_this_weeks_events(
    date: datetime,
    events: tuple[AstronomicalEvent, ...] | list[AstronomicalEvent],
) -> list[AstronomicalEvent]:
    """Events from ``date`` through seven days later, inclusive."""
    start = ensure_utc(date)
    end = start + timedelta(days=7)
    return sorted((event for event in events if start <= event.date <= end), key=lambda event: event.date)


def get_random_sky_lore(lore: tuple[SkyLore, ...] | list[SkyLore], rng: random.Random | None = None) -> SkyLore | None:
    """A random entry, or None for an empty collection."""
    if not lore:
        return None
    return (rng or random).choice(list(lore))


def get_sky_lore_by_category(
    lore: tuple[SkyLore, ...] | list[SkyLore],
    category: LoreCategory | str,
) -> list[SkyLore]:
    """
    Entries in one category, in collection order.

    Raises:
        ValueError: If ``category`` is not a known category
    """
    wanted = LoreCategory(category)
    return [entry for entry in lore if entry.category == wanted]
