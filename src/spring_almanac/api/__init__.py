"""
Spring Almanac API - Business Logic Layer

This package contains the astronomy and content logic behind the almanac,
separated from the HTTP and CLI presentation layers.

The API is organized into logical subpackages:
- core: Constants, enums, exceptions, settings and shared helpers
- astronomy: Position engine, sun, moon and countdown calculations
- catalogs: Constellation catalog and sky lore library
"""

# Activate deal contracts for runtime validation
import deal


deal.activate()

__all__ = [
    # Package is organized into subpackages - import directly from them:
    # from spring_almanac.api.astronomy import ...
    # from spring_almanac.api.catalogs import ...
]
