"""Configuration package."""

from expense_tracker.config.settings import (
    AnimationSettings,
    AppSettings,
    GoogleSheetsSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AnimationSettings",
    "AppSettings",
    "GoogleSheetsSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
