"""
Almanac Settings

Configuration read from the environment (and a local ``.env`` file, if present).

Environment Variables:
    ALMANAC_DEFAULT_LAT          Default observer latitude (degrees)
    ALMANAC_DEFAULT_LON          Default observer longitude (degrees)
    ALMANAC_DEFAULT_TZ           Default IANA time zone
    ALMANAC_TOP_CONSTELLATIONS   Constellations returned by the almanac payload
    ALMANAC_LORE_COUNT           Sky lore entries returned per day
    ALMANAC_EVENT_COUNT          Upcoming events returned
    ALMANAC_SPRING_EQUINOX       Fixed ISO-8601 spring equinox instead of computing it
    ALMANAC_DST_START            Fixed ISO-8601 DST start instead of computing it
    ALMANAC_CATALOG_PATH         Alternative constellation catalog YAML
    ALMANAC_LORE_PATH            Alternative sky lore YAML
    ALMANAC_EVENTS_PATH          Alternative astronomical events YAML
    ALMANAC_LOG_LEVEL            Root logging level (DEBUG, INFO, ...)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import deal
from dotenv import load_dotenv

from .constants import DEFAULT_LATITUDE, DEFAULT_LONGITUDE, DEFAULT_TIMEZONE
from .exceptions import InvalidConfigurationError


logger = logging.getLogger(__name__)


__all__ = [
    "AlmanacSettings",
    "configure_logging",
]


def _parse_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise InvalidConfigurationError(f"{key} must be a number, got {raw!r}") from e


def _parse_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise InvalidConfigurationError(f"{key} must be an integer, got {raw!r}") from e
    if value < 0:
        raise InvalidConfigurationError(f"{key} must not be negative, got {value}")
    return value


def _parse_datetime(env: Mapping[str, str], key: str) -> datetime | None:
    raw = env.get(key)
    if raw is None or raw == "":
        return None
    try:
        # Accept a trailing "Z" for UTC
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidConfigurationError(f"{key} must be an ISO-8601 timestamp, got {raw!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _parse_path(env: Mapping[str, str], key: str) -> Path | None:
    raw = env.get(key)
    if raw is None or raw == "":
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True)
class AlmanacSettings:
    """Runtime configuration for the almanac services."""

    default_latitude: float = DEFAULT_LATITUDE
    default_longitude: float = DEFAULT_LONGITUDE
    default_timezone: str = DEFAULT_TIMEZONE
    top_constellations: int = 5
    lore_count: int = 3
    event_count: int = 3
    spring_equinox: datetime | None = None
    dst_start: datetime | None = None
    catalog_path: Path | None = None
    lore_path: Path | None = None
    events_path: Path | None = None
    log_level: str = "WARNING"

    @classmethod
    @deal.post(lambda result: -90 <= result.default_latitude <= 90, message="Latitude must be -90 to +90")
    @deal.post(lambda result: -180 <= result.default_longitude <= 180, message="Longitude must be -180 to +180")
    def from_env(cls, env: Mapping[str, str] | None = None) -> AlmanacSettings:
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (default: ``os.environ`` after loading ``.env``)

        Returns:
            Parsed settings

        Raises:
            InvalidConfigurationError: If a variable cannot be parsed or is out of range
        """
        if env is None:
            load_dotenv()
            env = os.environ

        latitude = _parse_float(env, "ALMANAC_DEFAULT_LAT", DEFAULT_LATITUDE)
        longitude = _parse_float(env, "ALMANAC_DEFAULT_LON", DEFAULT_LONGITUDE)
        if not -90 <= latitude <= 90:
            raise InvalidConfigurationError(f"ALMANAC_DEFAULT_LAT must be -90 to +90, got {latitude}")
        if not -180 <= longitude <= 180:
            raise InvalidConfigurationError(f"ALMANAC_DEFAULT_LON must be -180 to +180, got {longitude}")

        log_level = env.get("ALMANAC_LOG_LEVEL", "WARNING").upper()
        if log_level not in logging.getLevelNamesMapping():
            raise InvalidConfigurationError(f"ALMANAC_LOG_LEVEL is not a logging level: {log_level!r}")

        settings = cls(
            default_latitude=latitude,
            default_longitude=longitude,
            default_timezone=env.get("ALMANAC_DEFAULT_TZ") or DEFAULT_TIMEZONE,
            top_constellations=_parse_int(env, "ALMANAC_TOP_CONSTELLATIONS", 5),
            lore_count=_parse_int(env, "ALMANAC_LORE_COUNT", 3),
            event_count=_parse_int(env, "ALMANAC_EVENT_COUNT", 3),
            spring_equinox=_parse_datetime(env, "ALMANAC_SPRING_EQUINOX"),
            dst_start=_parse_datetime(env, "ALMANAC_DST_START"),
            catalog_path=_parse_path(env, "ALMANAC_CATALOG_PATH"),
            lore_path=_parse_path(env, "ALMANAC_LORE_PATH"),
            events_path=_parse_path(env, "ALMANAC_EVENTS_PATH"),
            log_level=log_level,
        )
        logger.debug(f"Loaded settings: {settings}")
        return settings


def configure_logging(level: str | int) -> None:
    """Configure root logging for command-line and server entry points."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
