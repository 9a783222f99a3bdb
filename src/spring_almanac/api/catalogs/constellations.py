"""
Constellation Catalog and Visibility

Loads the constellation catalog from YAML and works out which constellations
are worth looking for right now: favorable this month, at least 10° above the
horizon, annotated with a compass direction and ranked closest-to-overhead first.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import deal
import yaml
from cachetools import TTLCache, cached

from ..astronomy.position import (
    altitude_bucket,
    calculate_altitude,
    calculate_azimuth,
    direction_label,
    hour_angle,
    is_high_in_sky,
    local_sidereal_time,
)
from ..core.constants import MIN_VIEWING_ALTITUDE_DEGREES
from ..core.enums import AltitudeBucket, Difficulty
from ..core.exceptions import CatalogNotFoundError, InvalidCatalogFormatError
from ..core.types import HorizontalPosition
from ..core.utils import ensure_utc


logger = logging.getLogger(__name__)


__all__ = [
    "CelestialObject",
    "VisibilityResult",
    "best_object_now",
    "compute_visible_objects",
    "default_catalog_path",
    "load_catalog",
    "objects_by_difficulty",
]

_REQUIRED_FIELDS = ("name", "ra_hours", "dec_degrees", "best_viewing_months")


@dataclass(frozen=True)
class CelestialObject:
    """A constellation from the static catalog."""

    name: str
    ra_hours: float
    dec_degrees: float
    best_viewing_months: tuple[int, ...]
    latin_name: str = ""
    abbreviation: str = ""
    brightest_star: str = ""
    description: str = ""
    mythology: str = ""
    direction: str = ""  # Where it usually sits on a typical evening
    best_viewing_time: str = ""
    difficulty: Difficulty = Difficulty.MODERATE

    def is_favorable_in(self, month: int) -> bool:
        """Whether ``month`` (1-12) is in the curated viewing window."""
        return month in self.best_viewing_months

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "latinName": self.latin_name,
            "abbreviation": self.abbreviation,
            "brightestStar": self.brightest_star,
            "description": self.description,
            "mythology": self.mythology,
            "direction": self.direction,
            "bestViewingMonths": list(self.best_viewing_months),
            "bestViewingTime": self.best_viewing_time,
            "difficulty": str(self.difficulty),
            "rightAscension": self.ra_hours,
            "declination": self.dec_degrees,
        }


@dataclass(frozen=True)
class VisibilityResult:
    """A catalog object annotated with where it is in the sky right now."""

    object: CelestialObject
    position: HorizontalPosition
    direction: str
    altitude_bucket: AltitudeBucket
    is_high_in_sky: bool

    @property
    def score(self) -> int:
        """Ranking score: 2 when high in the sky, 1 when mid-sky, otherwise 0."""
        if self.is_high_in_sky:
            return 2
        if self.altitude_bucket is AltitudeBucket.MID:
            return 1
        return 0

    def to_dict(self) -> dict[str, Any]:
        """Catalog record plus ``currentDirection``, ``altitude`` (bucket label) and ``isHighInSky``."""
        data = self.object.to_dict()
        data.update(
            {
                "currentDirection": self.direction,
                "altitude": str(self.altitude_bucket),
                "isHighInSky": self.is_high_in_sky,
            }
        )
        return data


def default_catalog_path() -> Path:
    """Path to the constellation catalog shipped with the package."""
    return Path(__file__).parent.parent.parent / "data" / "constellations.yaml"


def _parse_object(record: Any, index: int, source: Path) -> CelestialObject:
    if not isinstance(record, dict):
        raise InvalidCatalogFormatError(f"Entry {index} in {source} is not a mapping")

    missing = [field for field in _REQUIRED_FIELDS if field not in record]
    if missing:
        raise InvalidCatalogFormatError(f"Entry {index} in {source} is missing {', '.join(missing)}")

    name = str(record["name"])
    try:
        ra_hours = float(record["ra_hours"])
        dec_degrees = float(record["dec_degrees"])
        months = tuple(int(m) for m in record["best_viewing_months"])
        difficulty = Difficulty(record.get("difficulty", Difficulty.MODERATE))
    except (TypeError, ValueError) as e:
        raise InvalidCatalogFormatError(f"Invalid value in entry '{name}' in {source}: {e}") from e

    if not 0 <= ra_hours <= 24:
        raise InvalidCatalogFormatError(f"'{name}' has right ascension {ra_hours}, expected 0-24 hours")
    if not -90 <= dec_degrees <= 90:
        raise InvalidCatalogFormatError(f"'{name}' has declination {dec_degrees}, expected -90 to +90 degrees")
    bad_months = [m for m in months if not 1 <= m <= 12]
    if bad_months:
        raise InvalidCatalogFormatError(f"'{name}' lists months outside 1-12: {bad_months}")

    return CelestialObject(
        name=name,
        ra_hours=ra_hours,
        dec_degrees=dec_degrees,
        best_viewing_months=months,
        latin_name=str(record.get("latin_name", "")),
        abbreviation=str(record.get("abbreviation", "")),
        brightest_star=str(record.get("brightest_star", "")),
        description=str(record.get("description", "")),
        mythology=str(record.get("mythology", "")),
        direction=str(record.get("direction", "")),
        best_viewing_time=str(record.get("best_viewing_time", "")),
        difficulty=difficulty,
    )


# Cache for parsed catalogs, keyed by path (TTL=3600 seconds / 1 hour)
_catalog_cache: TTLCache[str, tuple[CelestialObject, ...]] = TTLCache(maxsize=16, ttl=3600)


@cached(_catalog_cache)
def _load_catalog_from_yaml(path: str) -> tuple[CelestialObject, ...]:
    catalog_path = Path(path)
    if not catalog_path.exists():
        raise CatalogNotFoundError(f"Could not find constellation catalog at {catalog_path}")

    logger.debug(f"Loading constellation catalog from {catalog_path}")
    with catalog_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidCatalogFormatError(f"Could not parse {catalog_path}: {e}") from e

    records = data.get("constellations") if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise InvalidCatalogFormatError(f"{catalog_path} must contain a 'constellations' list")

    objects = tuple(_parse_object(record, i, catalog_path) for i, record in enumerate(records))
    logger.info(f"Loaded {len(objects)} constellations from {catalog_path}")
    return objects


def load_catalog(path: Path | str | None = None) -> tuple[CelestialObject, ...]:
    """
    Load and validate the constellation catalog.

    Parsed catalogs are cached per path.

    Args:
        path: YAML file to read (default: the packaged catalog)

    Returns:
        Catalog entries in file order

    Raises:
        CatalogNotFoundError: If the file does not exist
        InvalidCatalogFormatError: If an entry is malformed or out of range
    """
    catalog_path = Path(path) if path is not None else default_catalog_path()
    # cachetools.cached doesn't preserve return types
    return _load_catalog_from_yaml(str(catalog_path.expanduser().resolve()))  # type: ignore[no-any-return]


def compute_visible_objects(
    timestamp: datetime,
    latitude: float,
    longitude: float,
    catalog: tuple[CelestialObject, ...] | list[CelestialObject],
) -> list[VisibilityResult]:
    """
    Objects worth observing right now, best first.

    An object is kept when the current month is in its favorable months and it
    is at least 10° above the horizon. Results are ranked high-in-sky, then
    mid-sky, then the rest; ties keep catalog order.

    The month is the UTC calendar month of ``timestamp`` (naive values are
    read as UTC), not the observer's local month.

    Args:
        timestamp: Instant of observation
        latitude: Observer latitude in degrees
        longitude: Observer longitude in degrees
        catalog: Objects to consider

    Returns:
        Ranked results, possibly empty. Never raises for finite inputs; non-finite
        coordinates give an empty list.
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        logger.warning(f"Non-finite observer location ({latitude}, {longitude}), no objects are visible")
        return []

    month = ensure_utc(timestamp).month
    lst = local_sidereal_time(timestamp, longitude)

    visible: list[VisibilityResult] = []
    for obj in catalog:
        if not obj.is_favorable_in(month):
            continue

        ha = hour_angle(lst, obj.ra_hours)
        altitude = calculate_altitude(ha, obj.dec_degrees, latitude)
        # Written this way so NaN never passes
        if not altitude >= MIN_VIEWING_ALTITUDE_DEGREES:
            continue

        azimuth = calculate_azimuth(ha, obj.dec_degrees, latitude, altitude)
        visible.append(
            VisibilityResult(
                object=obj,
                position=HorizontalPosition(altitude=altitude, azimuth=azimuth),
                direction=direction_label(azimuth),
                altitude_bucket=altitude_bucket(altitude),
                is_high_in_sky=is_high_in_sky(altitude),
            )
        )

    # sorted() is stable, so equal scores keep catalog order
    return sorted(visible, key=lambda result: result.score, reverse=True)


def best_object_now(
    timestamp: datetime,
    latitude: float,
    longitude: float,
    catalog: tuple[CelestialObject, ...] | list[CelestialObject],
) -> VisibilityResult | None:
    """The top-ranked visible object, or None if nothing is visible."""
    visible = compute_visible_objects(timestamp, latitude, longitude, catalog)
    return visible[0] if visible else None


@deal.pre(lambda catalog, difficulty: difficulty in set(Difficulty), message="Unknown difficulty")
def objects_by_difficulty(
    catalog: tuple[CelestialObject, ...] | list[CelestialObject],
    difficulty: Difficulty | str,
) -> tuple[CelestialObject, ...]:
    """Catalog entries of the given difficulty, in catalog order."""
    return tuple(obj for obj in catalog if obj.difficulty == difficulty)
