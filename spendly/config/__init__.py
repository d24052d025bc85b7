"""Configuration package."""

from spendly.config.settings import (
    AppSettings,
    DisplaySettings,
    LedgerSettings,
    Settings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "DisplaySettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
]
