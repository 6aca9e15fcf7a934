"""Configuration package."""

from expensewise.config.settings import (
    AppSettings,
    AvatarSettings,
    GoogleAISettings,
    PixabaySettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AvatarSettings",
    "GoogleAISettings",
    "PixabaySettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
