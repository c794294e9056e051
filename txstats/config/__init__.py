"""Configuration package."""

from txstats.config.settings import (
    AggregatorSettings,
    AppSettings,
    ClientSettings,
    ServerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AggregatorSettings",
    "AppSettings",
    "ClientSettings",
    "ServerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
