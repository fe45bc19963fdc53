"""
Configuration Management for Gastos

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so every tunable of the
storage layer is validated at startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


VALID_JOURNAL_MODES = {"DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class DatabaseSettings(BaseSettings):
    """SQLite storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GASTOS_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    path: str = Field(
        default="gastos.db",
        description="Path to the SQLite database file"
    )
    journal_mode: str = Field(
        default="WAL",
        description="SQLite journal mode (WAL lets readers run during a write)"
    )
    timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait on a locked database file"
    )

    @field_validator('journal_mode')
    @classmethod
    def validate_journal_mode(cls, v: str) -> str:
        """Only accept journal modes SQLite knows about."""
        mode = v.strip().upper()
        if mode not in VALID_JOURNAL_MODES:
            raise ValueError(
                f"Unsupported journal mode: {v}. Allowed: {sorted(VALID_JOURNAL_MODES)}"
            )
        return mode


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
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
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @property
    def effective_log_level(self) -> str:
        """Debug mode always wins over the configured level."""
        return "DEBUG" if self.debug_mode else self.log_level


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

    # Sub-settings are loaded lazily so a broken section does not
    # prevent reading the others
    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

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


def validate_all_settings() -> dict[str, Optional[object]]:
    """
    Validate all settings are properly configured.

    Returns a dict of {section_name: is_valid} plus
    {section_name_error: message} for every failing section.
    """
    results: dict[str, Optional[object]] = {}

    settings = get_settings()

    for name in ("database", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
