"""Data models for the D&D 5E character tracker core.

Exports:
    Enums: ClassId, Ability, ResourceKind, RestType, CasterType,
        SectionOrigin, DiagnosticKind.
    Models: Character, ResourceState, Diagnostic.
"""

from __future__ import annotations

from dnd_tracker.models.character import Character, ResourceState, ability_modifier
from dnd_tracker.models.diagnostics import Diagnostic, clamp_level
from dnd_tracker.models.enums import (
    Ability,
    CasterType,
    ClassId,
    DiagnosticKind,
    ResourceKind,
    RestType,
    SectionOrigin,
)


__all__ = [
    # Enums
    "ClassId",
    "Ability",
    "ResourceKind",
    "RestType",
    "CasterType",
    "SectionOrigin",
    "DiagnosticKind",
    # Models
    "Character",
    "ResourceState",
    "Diagnostic",
    "ability_modifier",
    "clamp_level",
]
