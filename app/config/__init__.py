"""
Configuration package for the Venue Discovery Backend.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    DatabaseSettings,
    ProximitySettings,
    DirectionsSettings,
    NavigationSettings,
    PlacesSettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "DatabaseSettings",
    "ProximitySettings",
    "DirectionsSettings",
    "NavigationSettings",
    "PlacesSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
