"""
Configuration Management for Spendly

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here, including the
display currency. The ledger engine never reads preferences from ambient
state; callers pass the settings they resolved from here.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spendly.models.ledger import Currency, UnsetBudgetPolicy


class LedgerSettings(BaseSettings):
    """Ledger engine behavior."""

    model_config = SettingsConfigDict(
        env_prefix="SPENDLY_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    near_limit_threshold: float = Field(
        default=0.80,
        gt=0.0,
        le=1.0,
        description="Spent fraction at which the balance counts as near its limit"
    )
    unset_budget_policy: UnsetBudgetPolicy = Field(
        default=UnsetBudgetPolicy.TREAT_AS_ZERO,
        description="How to classify a ledger with no positive balance"
    )
    recent_transactions_limit: int = Field(
        default=5,
        ge=0,
        le=100,
        description="How many recent expenses the dashboard lists"
    )
    data_file: Optional[Path] = Field(
        default=None,
        description="JSON file backing the ledger; in-memory only when unset"
    )


class DisplaySettings(BaseSettings):
    """Presentation preferences handed to the formatting layer."""

    model_config = SettingsConfigDict(
        env_prefix="SPENDLY_DISPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    preferred_currency: Currency = Field(
        default=Currency.USD,
        description="Currency whose symbol prefixes displayed amounts"
    )

    @field_validator("preferred_currency", mode="before")
    @classmethod
    def fallback_unknown_currency(cls, v):
        """Unknown codes display as USD rather than failing startup."""
        return Currency.from_code(v) or Currency.USD


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPENDLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for the process log"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {allowed}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def display(self) -> DisplaySettings:
        return DisplaySettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
