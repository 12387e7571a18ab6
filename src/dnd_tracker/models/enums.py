"""Enumeration types for the D&D 5E character tracker core.

This module defines the closed vocabularies shared by the resolver, the
parser, the resource ledger and the progression tables: playable classes,
ability scores, resource kinds, caster archetypes and diagnostic kinds.
"""

from __future__ import annotations

from enum import StrEnum


class ClassId(StrEnum):
    """Playable classes, keyed by their canonical content folder name.

    The values are the French names used by the class content repository,
    so a ClassId can be used directly as a path segment.
    """

    BARBARIAN = "Barbare"
    BARD = "Barde"
    CLERIC = "Clerc"
    DRUID = "Druide"
    SORCERER = "Ensorceleur"
    FIGHTER = "Guerrier"
    WIZARD = "Magicien"
    MONK = "Moine"
    WARLOCK = "Occultiste"
    PALADIN = "Paladin"
    RANGER = "Rôdeur"
    ROGUE = "Roublard"

    @property
    def english_name(self) -> str:
        """Get the English (SRD) name of the class.

        Returns:
            English class name (e.g., 'Ranger' for RANGER).
        """
        return self.name.capitalize()


class Ability(StrEnum):
    """D&D 5E ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation.

        Returns:
            Three-letter abbreviation (e.g., 'CHA').
        """
        return self.name


class ResourceKind(StrEnum):
    """How the total of a class resource is obtained.

    FIXED totals are edited by the player. AUTO_LEVEL and AUTO_ABILITY_MOD
    totals are computed and reject direct writes. BOOLEAN resources are a
    single used/available flag.
    """

    FIXED = "fixed"
    AUTO_LEVEL = "auto_level"
    AUTO_ABILITY_MOD = "auto_ability_mod"
    BOOLEAN = "boolean"

    @property
    def is_computed(self) -> bool:
        """Whether the total comes from a formula."""
        return self in (ResourceKind.AUTO_LEVEL, ResourceKind.AUTO_ABILITY_MOD)


class RestType(StrEnum):
    """Rest types that recharge class resources."""

    SHORT_REST = "short_rest"
    LONG_REST = "long_rest"


class CasterType(StrEnum):
    """Spellcasting progression shapes."""

    FULL = "full"
    HALF = "half"
    PACT = "pact"
    NONE = "none"


class SectionOrigin(StrEnum):
    """Document a rule section was parsed from."""

    CLASS = "class"
    SUBCLASS = "subclass"

    @property
    def sort_rank(self) -> int:
        """Rank used when ordering sections of the same level.

        Returns:
            0 for class sections, 1 for subclass sections.
        """
        return 0 if self is SectionOrigin.CLASS else 1


class DiagnosticKind(StrEnum):
    """Recoverable failure categories reported alongside results."""

    NOT_FOUND = "not_found"
    PARSE_DEGRADED = "parse_degraded"
    INVALID_MUTATION = "invalid_mutation"
    OUT_OF_RANGE = "out_of_range"


__all__ = [
    "ClassId",
    "Ability",
    "ResourceKind",
    "RestType",
    "CasterType",
    "SectionOrigin",
    "DiagnosticKind",
]
