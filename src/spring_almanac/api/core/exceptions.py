"""
Custom exception classes for the Spring Almanac.

The position engine and the visibility filter are total functions and never
raise; these exceptions cover the I/O edges around them: static data files,
ephemeris downloads, configuration and request input.
"""

from __future__ import annotations


__all__ = [
    # Base exception
    "AlmanacError",
    # Catalog exceptions
    "CatalogError",
    "CatalogNotFoundError",
    # Configuration exceptions
    "ConfigurationError",
    # Ephemeris exceptions
    "EphemerisError",
    "EphemerisLoadError",
    "InvalidCatalogFormatError",
    "InvalidConfigurationError",
    "InvalidTimezoneError",
    # Location exceptions
    "LocationError",
]


class AlmanacError(Exception):
    """
    Base exception for all Spring Almanac errors.

    All custom exceptions in this library inherit from this base class,
    making it easy to catch all almanac-related errors.
    """

    pass


# Catalog exceptions


class CatalogError(AlmanacError):
    """Base exception for static catalog (constellations, lore, events) errors."""

    pass


class CatalogNotFoundError(CatalogError):
    """Raised when a catalog data file cannot be found."""

    pass


class InvalidCatalogFormatError(CatalogError):
    """
    Raised when a catalog data file has an invalid format.

    This occurs when a record:
    - Is missing a required field
    - Has a right ascension outside 0-24 hours
    - Has a declination outside -90 to +90 degrees
    - Lists a month outside 1-12
    """

    pass


# Ephemeris exceptions


class EphemerisError(AlmanacError):
    """Base exception for sun and moon ephemeris errors."""

    pass


class EphemerisLoadError(EphemerisError):
    """Raised when the skyfield ephemeris or timescale cannot be loaded."""

    pass


# Configuration exceptions


class ConfigurationError(AlmanacError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when an environment setting cannot be parsed or is out of range."""

    pass


# Location exceptions


class LocationError(AlmanacError):
    """Base exception for observer location errors."""

    pass


class InvalidTimezoneError(LocationError):
    """Raised when an IANA time zone name is not recognised."""

    pass
