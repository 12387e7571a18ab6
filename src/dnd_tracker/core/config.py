"""Configuration management for the character tracker core.

This module provides centralized configuration using pydantic-settings,
supporting environment variables, .env files, and runtime overrides.

Example:
    >>> from dnd_tracker.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.content.backend
    'http'

Environment Variables:
    DND_TRACKER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DND_TRACKER_CONTENT_BACKEND: Content store backend (http, filesystem, memory)
    DND_TRACKER_CONTENT_BASE_URL: Base URL of the class content repository
    DND_TRACKER_CONTENT_LOCAL_ROOT: Root directory for the filesystem backend
    DND_TRACKER_CONTENT_PARALLEL_FETCH: Fetch candidate paths concurrently
    DND_TRACKER_CONTENT_MAX_SUBCLASS_CANDIDATES: Cap on subclass paths tried
    DND_TRACKER_PARSER_GENERAL_TITLE: Title of the preamble section
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dnd_tracker.core.exceptions import ConfigurationError


DEFAULT_CONTENT_BASE_URL = "https://raw.githubusercontent.com/Moze75/Ultimate_Tracker/main/Classes"


class ContentSettings(BaseSettings):
    """Configuration for the rule content source.

    Attributes:
        backend: Which content store implementation to build.
        base_url: Root URL of the class content repository (http backend).
        local_root: Root directory of the class content (filesystem backend).
        timeout_seconds: Per-request timeout for the http backend.
        max_retries: Attempts made on transient transport failures.
        parallel_fetch: Fetch candidate paths concurrently.
        max_workers: Thread pool size when parallel_fetch is enabled.
        max_subclass_candidates: Most subclass paths tried per lookup.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_TRACKER_CONTENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: Literal["http", "filesystem", "memory"] = Field(
        default="http",
        description="Content store backend",
    )
    base_url: str = Field(
        default=DEFAULT_CONTENT_BASE_URL,
        description="Root URL of the class content repository",
    )
    local_root: Path | None = Field(
        default=None,
        description="Root directory for the filesystem backend",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="HTTP request timeout",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retry attempts on transient transport failures",
    )
    parallel_fetch: bool = Field(
        default=False,
        description="Fetch candidate paths concurrently",
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        le=16,
        description="Thread pool size for parallel fetching",
    )
    max_subclass_candidates: int = Field(
        default=64,
        ge=1,
        le=500,
        description="Most subclass document paths tried per lookup",
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def strip_trailing_slashes(cls, value: str) -> str:
        """Normalize the base URL so paths can be joined with a single slash."""
        return value.rstrip("/")

    @model_validator(mode="after")
    def validate_backend_requirements(self) -> "ContentSettings":
        """Ensure the selected backend has what it needs.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the filesystem backend has no local_root.
        """
        if self.backend == "filesystem" and self.local_root is None:
            raise ConfigurationError(
                "Filesystem content backend requires DND_TRACKER_CONTENT_LOCAL_ROOT",
                config_key="local_root",
            )
        return self


class ParserSettings(BaseSettings):
    """Configuration for the rule section parser.

    Attributes:
        heading_depths: The two markdown heading depths that open a section.
        general_title: Title given to text found before the first heading.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_TRACKER_PARSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    heading_depths: tuple[int, int] = Field(
        default=(2, 3),
        description="Heading depths that open a new section",
    )
    general_title: str = Field(
        default="General",
        min_length=1,
        description="Title of the preamble section",
    )

    @model_validator(mode="after")
    def validate_heading_depths(self) -> "ParserSettings":
        """Ensure both heading depths are distinct real markdown depths.

        Raises:
            ConfigurationError: If a depth is outside 2..6 or both are equal.
        """
        low, high = self.heading_depths
        if not (2 <= low <= 6 and 2 <= high <= 6) or low == high:
            raise ConfigurationError(
                f"heading_depths must be two distinct values in 2..6, got {self.heading_depths}",
                config_key="heading_depths",
            )
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        content: Rule content source settings.
        parser: Section parser settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="D&D 5E Character Tracker",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    content: ContentSettings = Field(default_factory=ContentSettings)
    parser: ParserSettings = Field(default_factory=ParserSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "DEFAULT_CONTENT_BASE_URL",
    "ContentSettings",
    "ParserSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
