"""
Spring Almanac

Countdowns to spring, daylight and twilight times, the Moon, and the
constellations worth looking for tonight.
"""

from spring_almanac.api.almanac import build_almanac_payload, build_countdown_payload
from spring_almanac.api.catalogs import compute_visible_objects, load_catalog, load_library
from spring_almanac.api.core.settings import AlmanacSettings


__version__ = "0.1.0"

__all__ = [
    "AlmanacSettings",
    "__version__",
    "build_almanac_payload",
    "build_countdown_payload",
    "compute_visible_objects",
    "load_catalog",
    "load_library",
]
