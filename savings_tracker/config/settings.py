"""
Configuration Management for Savings Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The storage keys live in settings rather than in the gateway so that an
existing device store written by another client can be pointed at directly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_STORAGE_PATH = Path.home() / ".savings_tracker" / "storage.json"


class StorageSettings(BaseSettings):
    """On-device key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SAVINGS_TRACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    path: Path = Field(
        default=DEFAULT_STORAGE_PATH,
        description="Path of the JSON file backing the key-value store"
    )

    # Keys within the store
    savings_key: str = Field(
        default="bankSavings",
        min_length=1,
        description="Key holding the JSON array of account balances"
    )
    selected_index_key: str = Field(
        default="selectedIndex",
        min_length=1,
        description="Key holding the selected account index"
    )

    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a storage read/write before giving up"
    )

    @field_validator('path')
    @classmethod
    def expand_path(cls, v: Path) -> Path:
        """Expand '~' so the same value works from .env files."""
        return v.expanduser()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SAVINGS_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    currency_symbol: str = Field(
        default="",
        max_length=5,
        description="Prefix shown before amounts in user-facing messages"
    )


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

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


def validate_all_settings() -> dict[str, bool | str]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results: dict[str, bool | str] = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
