"""Configuration module for the category analytics engine"""

from src.config.settings import (
    AnalyticsSettings,
    clear_settings_cache,
    get_settings,
    override_settings,
)

__all__ = [
    "AnalyticsSettings",
    "get_settings",
    "clear_settings_cache",
    "override_settings",
]
