"""
FastAPI application serving the almanac JSON API.

Routes:
    GET /health          Liveness check
    GET /api/data        Full almanac for a location (lat, lon, tz)
    GET /api/countdown   Spring equinox and DST countdowns
    GET /manifest.json   Web app manifest
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from spring_almanac import __version__
from spring_almanac.api.almanac import build_almanac_payload, build_countdown_payload
from spring_almanac.api.catalogs.constellations import load_catalog
from spring_almanac.api.catalogs.lore import load_library
from spring_almanac.api.core.exceptions import EphemerisError, InvalidTimezoneError
from spring_almanac.api.core.settings import AlmanacSettings
from spring_almanac.api.core.utils import resolve_timezone


logger = logging.getLogger(__name__)


__all__ = ["MANIFEST", "create_app"]

MANIFEST: dict[str, Any] = {
    "name": "Spring Countdown",
    "short_name": "Spring",
    "description": "Count down to spring and explore the night sky",
    "start_url": "/",
    "display": "standalone",
    "background_color": "#0f172a",
    "theme_color": "#f59e0b",
}

router = APIRouter()


def _now() -> datetime:
    return datetime.now(UTC)


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "timestamp": _now().isoformat()}


@router.get("/api/data")
def almanac_data(
    request: Request,
    lat: float | None = Query(None, ge=-90, le=90, description="Observer latitude in degrees"),
    lon: float | None = Query(None, ge=-180, le=180, description="Observer longitude in degrees"),
    tz: str | None = Query(None, description="IANA time zone, e.g. America/New_York"),
) -> dict[str, Any]:
    """Full almanac for one observer. Missing coordinates fall back to the configured default location."""
    settings: AlmanacSettings = request.app.state.settings
    latitude = settings.default_latitude if lat is None else lat
    longitude = settings.default_longitude if lon is None else lon

    # Coordinates given without a zone: look the zone up from them
    zone_name = tz if tz or lat is not None or lon is not None else settings.default_timezone
    try:
        zone = resolve_timezone(zone_name, latitude, longitude, default=settings.default_timezone)
    except InvalidTimezoneError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return build_almanac_payload(
        _now(),
        latitude,
        longitude,
        zone,
        request.app.state.catalog,
        request.app.state.library,
        settings,
    )


@router.get("/api/countdown")
def countdown(request: Request) -> dict[str, Any]:
    settings: AlmanacSettings = request.app.state.settings
    zone = resolve_timezone(settings.default_timezone)
    return build_countdown_payload(_now(), zone, settings)


@router.get("/manifest.json")
def manifest() -> dict[str, Any]:
    return MANIFEST


async def _ephemeris_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Ephemeris failure serving {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Ephemeris data is unavailable, try again later"})


def create_app(settings: AlmanacSettings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    The constellation catalog and the sky lore library are loaded once here
    and kept on ``app.state``.

    Args:
        settings: Configuration (default: read from the environment)

    Raises:
        CatalogError: If a data file is missing or malformed
    """
    settings = settings or AlmanacSettings.from_env()

    app = FastAPI(
        title="Spring Almanac",
        description="Countdown to spring, daylight, moon and tonight's constellations",
        version=__version__,
    )
    app.state.settings = settings
    app.state.catalog = load_catalog(settings.catalog_path)
    app.state.library = load_library(settings.lore_path, settings.events_path)
    app.add_exception_handler(EphemerisError, _ephemeris_error_handler)
    app.include_router(router)

    logger.info(
        f"Almanac app ready: {len(app.state.catalog)} constellations, "
        f"{len(app.state.library.lore)} lore entries, {len(app.state.library.events)} events"
    )
    return app
