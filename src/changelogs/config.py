"""
Changelog Server Configuration
==============================

Centralized configuration using Pydantic BaseSettings.
Loads settings from environment variables and .env files.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Directory name changelogs are stored in, relative to the base directory.
# Layout: <base_dir>/<changelogs_dir>/<version>/<modid>.txt
DEFAULT_CHANGELOGS_DIR = "changelogs"
DEFAULT_PORT = 3000


class ChangelogSettings(BaseSettings):
    """Centralized configuration for the changelog server.

    Settings are loaded from:
    1. Keyword arguments (CLI overrides, highest priority)
    2. Environment variables prefixed with ``CHANGELOGS_``
    3. .env file in the working directory
    4. Default values (lowest priority)

    Usage:
        settings = ChangelogSettings()
        print(settings.changelog_root)
    """

    model_config = SettingsConfigDict(
        env_prefix="CHANGELOGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # ==========================================================================
    # Filesystem Layout
    # ==========================================================================

    base_dir: Path = Field(
        default_factory=Path.cwd,
        description="Directory containing the changelogs subdirectory"
    )

    changelogs_dir: str = Field(
        default=DEFAULT_CHANGELOGS_DIR,
        description="Name of the subdirectory holding <version>/<modid>.txt files"
    )

    # ==========================================================================
    # Server Configuration
    # ==========================================================================

    host: str = Field(
        default="0.0.0.0",
        description="Address to bind to"
    )

    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="Port to bind to"
    )

    quiet: bool = Field(
        default=False,
        description="Disable access logging for successful requests"
    )

    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to fetch changelogs cross-site"
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)"
    )

    json_logs: bool = Field(
        default=False,
        description="Emit log records as JSON lines"
    )

    log_file: Optional[Path] = Field(
        default=None,
        description="Optional rotating log file"
    )

    # ==========================================================================
    # Observability
    # ==========================================================================

    enable_metrics: bool = Field(
        default=False,
        description="Expose Prometheus metrics"
    )

    metrics_path: str = Field(
        default="/metrics",
        description="Route serving Prometheus metrics"
    )

    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error reporting"
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("metrics_path")
    @classmethod
    def _check_metrics_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("metrics_path must start with '/'")
        return value

    # ==========================================================================
    # Computed Properties
    # ==========================================================================

    @property
    def changelog_root(self) -> Path:
        """Directory scanned for version subdirectories."""
        return self.base_dir / self.changelogs_dir


# Global settings instance (lazy loaded)
_settings: Optional[ChangelogSettings] = None


def get_settings() -> ChangelogSettings:
    """Get the global settings instance.

    Creates the settings on first access (lazy loading).

    Returns:
        The global ChangelogSettings instance.
    """
    global _settings
    if _settings is None:
        _settings = ChangelogSettings()
    return _settings


def reload_settings(**overrides) -> ChangelogSettings:
    """Reload settings from the environment, applying keyword overrides.

    Useful after environment changes, for CLI flags, or for testing.

    Returns:
        The reloaded ChangelogSettings instance.
    """
    global _settings
    _settings = ChangelogSettings(**overrides)
    return _settings
