"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DndTrackerError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        InvalidMutationError: Rejected resource mutations.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dnd_tracker.core.config import (
    ContentSettings,
    ParserSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from dnd_tracker.core.exceptions import (
    ConfigurationError,
    ContentError,
    ContentFetchError,
    ContentNotFoundError,
    DndTrackerError,
    InvalidMutationError,
    OutOfRangeError,
    ParseDegradedError,
    ProgressionDataError,
    ResourceError,
    RulesError,
    ValidationError,
)
from dnd_tracker.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "DndTrackerError",
    "ContentError",
    "ContentFetchError",
    "ContentNotFoundError",
    "RulesError",
    "ParseDegradedError",
    "ProgressionDataError",
    "ResourceError",
    "InvalidMutationError",
    "OutOfRangeError",
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "ContentSettings",
    "ParserSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
