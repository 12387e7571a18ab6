"""Custom exception hierarchy for the D&D 5E character tracker core.

All exceptions inherit from DndTrackerError, enabling unified error handling
at the application boundary while preserving domain-specific context.

Most failures in this core are recoverable: the resolver, parser and ledger
turn them into Diagnostic records (see dnd_tracker.models.diagnostics) instead
of raising. Exceptions are raised only for configuration mistakes and for
hand-authored data that breaks its own invariants.

Example:
    >>> from dnd_tracker.core.exceptions import InvalidMutationError
    >>> raise InvalidMutationError("Total is computed", resource_key="lay_on_hands")
"""

from __future__ import annotations

from typing import Any


class DndTrackerError(Exception):
    """Base exception for all character tracker errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Content Domain Exceptions
# =============================================================================


class ContentError(DndTrackerError):
    """Base exception for rule content lookup errors."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize content error with path context.

        Args:
            message: Human-readable error description.
            path: Content path being fetched when the error occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if path:
            combined_details["path"] = path
        super().__init__(message, details=combined_details)


class ContentFetchError(ContentError):
    """Raised by a content store when the transport fails after retries."""


class ContentNotFoundError(ContentError):
    """No candidate path resolved for a class or subclass."""


# =============================================================================
# Rules Domain Exceptions
# =============================================================================


class RulesError(DndTrackerError):
    """Base exception for rule text and progression table errors."""


class ParseDegradedError(RulesError):
    """Malformed or unexpected heading syntax in rule text.

    The parser never raises this; it records it as a diagnostic and keeps
    the offending line as a plain paragraph.
    """

    def __init__(
        self,
        message: str,
        *,
        line_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize parse error with line context.

        Args:
            message: Human-readable error description.
            line_number: 1-based line number of the offending line.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if line_number is not None:
            combined_details["line_number"] = line_number
        super().__init__(message, details=combined_details)


class ProgressionDataError(RulesError):
    """Raised when a hand-authored progression table breaks its invariants.

    A later level with less capacity than an earlier one is a data error,
    detected when the table is built.
    """

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        level: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize progression data error with table context.

        Args:
            message: Human-readable error description.
            table: Name of the offending table.
            level: Character level where the regression was found.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if table:
            combined_details["table"] = table
        if level is not None:
            combined_details["level"] = level
        super().__init__(message, details=combined_details)


# =============================================================================
# Resource Domain Exceptions
# =============================================================================


class ResourceError(DndTrackerError):
    """Base exception for class resource errors."""

    def __init__(
        self,
        message: str,
        *,
        resource_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize resource error with resource context.

        Args:
            message: Human-readable error description.
            resource_key: Key of the resource involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if resource_key:
            combined_details["resource_key"] = resource_key
        super().__init__(message, details=combined_details)


class InvalidMutationError(ResourceError):
    """The caller attempted a mutation the resource kind does not allow.

    Typical case: setting the total of a computed (auto_level or
    auto_ability_mod) resource. Ledger state is left unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        resource_key: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid mutation error with operation context.

        Args:
            message: Human-readable error description.
            resource_key: Key of the resource involved.
            operation: Name of the rejected operation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if operation:
            combined_details["operation"] = operation
        super().__init__(message, resource_key=resource_key, details=combined_details)


class OutOfRangeError(DndTrackerError):
    """A level or other bounded value was outside its allowed range.

    Lookups clamp the value and proceed; this error only describes what
    happened in the attached diagnostic.
    """

    def __init__(
        self,
        message: str,
        *,
        value: int | None = None,
        minimum: int | None = None,
        maximum: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize out of range error with bounds context.

        Args:
            message: Human-readable error description.
            value: The value that was out of range.
            minimum: Inclusive lower bound.
            maximum: Inclusive upper bound.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if value is not None:
            combined_details["value"] = value
        if minimum is not None:
            combined_details["minimum"] = minimum
        if maximum is not None:
            combined_details["maximum"] = maximum
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(DndTrackerError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(DndTrackerError):
    """Raised when data validation fails."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "DndTrackerError",
    # Content exceptions
    "ContentError",
    "ContentFetchError",
    "ContentNotFoundError",
    # Rules exceptions
    "RulesError",
    "ParseDegradedError",
    "ProgressionDataError",
    # Resource exceptions
    "ResourceError",
    "InvalidMutationError",
    "OutOfRangeError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
