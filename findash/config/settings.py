"""
Configuration Management for FinDash

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage location, chart window and the remainder tolerance used by the
transaction form all come from one place and are validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINDASH_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".findash"),
        description="Directory holding one JSON file per storage key"
    )
    backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Storage backend: 'json' (files on disk) or 'memory' (ephemeral)"
    )

    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Expand '~' so the directory can live under the user's home."""
        return v.expanduser()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINDASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Reports
    chart_months: int = Field(
        default=6,
        ge=1,
        le=36,
        description="Number of trailing months shown in the trend chart"
    )

    # Transaction form
    remainder_epsilon: float = Field(
        default=0.001,
        gt=0.0,
        le=0.01,
        description="Tolerance below which an expense remainder is ignored"
    )

    # Presentation
    default_theme: str = Field(
        default="dark",
        description="Theme used when no preference has been stored"
    )

    # Audit
    audit_buffer_size: int = Field(
        default=200,
        ge=0,
        description="How many recent audit events are kept in memory"
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


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an
    '<name>_error' entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    sections = {
        "storage": lambda: settings.storage,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
