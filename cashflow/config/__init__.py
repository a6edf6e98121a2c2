"""Configuration package."""

from cashflow.config.settings import (
    AppSettings,
    HabitSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "HabitSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
