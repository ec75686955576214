"""
Configuration package for the Coffee Finder backend.
"""

from .settings import (
    METERS_PER_MILE,
    Settings,
    Environment,
    LogLevel,
    SearchSettings,
    GeocoderSettings,
    PlacesSettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "METERS_PER_MILE",
    "Settings",
    "Environment",
    "LogLevel",
    "SearchSettings",
    "GeocoderSettings",
    "PlacesSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
