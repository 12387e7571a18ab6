"""Diagnostic records attached to results instead of raised exceptions."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dnd_tracker.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL
from dnd_tracker.core.exceptions import DndTrackerError, OutOfRangeError
from dnd_tracker.models.enums import DiagnosticKind


class Diagnostic(BaseModel):
    """A recoverable problem encountered while producing a result.

    Attributes:
        kind: Failure category.
        message: Human-readable description.
        details: Structured context (paths, keys, offending values).
    """

    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    message: str
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_error(cls, kind: DiagnosticKind, error: DndTrackerError) -> Diagnostic:
        """Build a diagnostic from a domain exception without raising it.

        Args:
            kind: Failure category.
            error: The exception describing the problem.

        Returns:
            A Diagnostic carrying the exception's message and details.
        """
        return cls(kind=kind, message=error.message, details=dict(error.details))

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


def clamp_level(
    level: int,
    *,
    minimum: int = MIN_CHARACTER_LEVEL,
    maximum: int = MAX_CHARACTER_LEVEL,
) -> tuple[int, Diagnostic | None]:
    """Clamp a character level into range.

    Args:
        level: Requested level.
        minimum: Inclusive lower bound.
        maximum: Inclusive upper bound.

    Returns:
        The clamped level, plus an out_of_range diagnostic when clamping
        changed the value.

    Example:
        >>> clamp_level(25)[0]
        20
    """
    clamped = min(max(level, minimum), maximum)
    if clamped == level:
        return level, None
    error = OutOfRangeError(
        f"Level {level} clamped to {clamped}",
        value=level,
        minimum=minimum,
        maximum=maximum,
    )
    return clamped, Diagnostic.from_error(DiagnosticKind.OUT_OF_RANGE, error)


__all__ = ["Diagnostic", "clamp_level"]
