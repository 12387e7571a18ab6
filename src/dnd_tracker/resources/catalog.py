"""Declarative catalog of per-class resource pools.

Which pools a class tracks and how their totals are obtained is data, not
code: each class maps to a tuple of ResourceDefinition entries. The
ledger reads the catalog to know whether a total is player-edited
(FIXED), computed (AUTO_LEVEL, AUTO_ABILITY_MOD) or a simple used flag
(BOOLEAN).

Example:
    >>> catalog = ResourceCatalog()
    >>> [d.key for d in catalog.definitions_for(ClassId.PALADIN, 3)]
    ['lay_on_hands', 'channel_divinity']
"""

from __future__ import annotations

import math
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dnd_tracker.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL
from dnd_tracker.core.exceptions import ValidationError
from dnd_tracker.models.enums import Ability, ClassId, ResourceKind, RestType


class ResourceFormula(BaseModel):
    """How a resource total is computed from level and ability modifiers.

    For level formulas the total is ``constant + per_level * level`` plus
    the value of the highest breakpoint reached. Ability formulas give
    ``max(0, modifier)``.
    """

    model_config = ConfigDict(frozen=True)

    constant: int = 0
    per_level: int = 0
    breakpoints: dict[int, int] = Field(default_factory=dict)
    ability: Ability | None = None

    def evaluate(self, level: int, modifiers: Mapping[Ability, int] | None = None) -> int:
        """Compute the total at ``level``.

        Args:
            level: Character level.
            modifiers: Ability -> modifier, used by ability formulas.

        Returns:
            A non-negative total.
        """
        if self.ability is not None:
            return max(0, (modifiers or {}).get(self.ability, 0))

        reached = 0
        for threshold, value in sorted(self.breakpoints.items()):
            if level >= threshold:
                reached = value
        return max(0, self.constant + self.per_level * level + reached)


class ResourceDefinition(BaseModel):
    """Static shape of one class resource.

    Attributes:
        key: Persistence key (``used_<key>`` holds the used counter).
        label: Display name.
        kind: How the total is obtained.
        formula: Total formula; the authoritative total for computed kinds,
            the default total for FIXED resources.
        recharge: Rest that restores the resource.
        min_level: First level the resource exists at.
        legacy_keys: Older persistence keys mirrored on save.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    label: str
    kind: ResourceKind
    formula: ResourceFormula | None = None
    recharge: RestType = RestType.LONG_REST
    min_level: int = Field(default=MIN_CHARACTER_LEVEL, ge=MIN_CHARACTER_LEVEL, le=MAX_CHARACTER_LEVEL)
    legacy_keys: tuple[str, ...] = ()

    @model_validator(mode="after")
    def validate_formula_matches_kind(self) -> "ResourceDefinition":
        """Computed kinds need a formula; boolean resources have none."""
        if self.kind.is_computed and self.formula is None:
            raise ValueError(f"{self.kind} resource '{self.key}' requires a formula")
        if self.kind is ResourceKind.BOOLEAN and self.formula is not None:
            raise ValueError(f"boolean resource '{self.key}' cannot have a formula")
        if self.kind is ResourceKind.AUTO_ABILITY_MOD and self.formula and self.formula.ability is None:
            raise ValueError(f"resource '{self.key}' needs an ability formula")
        return self

    def is_active(self, level: int) -> bool:
        """Whether the resource exists at ``level``."""
        return level >= self.min_level

    def total_for(self, level: int, modifiers: Mapping[Ability, int] | None = None) -> int:
        """Formula total at ``level`` (0 for resources without a formula)."""
        if self.formula is None:
            return 0
        return self.formula.evaluate(level, modifiers)


# =============================================================================
# Catalog Data
# =============================================================================


def _fixed(key: str, label: str, recharge: RestType, **formula: object) -> ResourceDefinition:
    return ResourceDefinition(
        key=key,
        label=label,
        kind=ResourceKind.FIXED,
        formula=ResourceFormula(**formula),
        recharge=recharge,
    )


CLASS_RESOURCES: dict[ClassId, tuple[ResourceDefinition, ...]] = {
    ClassId.BARBARIAN: (
        _fixed("rage", "Rage", RestType.LONG_REST, breakpoints={1: 2, 3: 3, 6: 4, 12: 5, 17: 6}),
    ),
    ClassId.BARD: (
        ResourceDefinition(
            key="bardic_inspiration",
            label="Inspiration bardique",
            kind=ResourceKind.AUTO_ABILITY_MOD,
            formula=ResourceFormula(ability=Ability.CHA),
            recharge=RestType.LONG_REST,
        ),
    ),
    ClassId.CLERIC: (
        _fixed("channel_divinity", "Conduit divin", RestType.SHORT_REST, breakpoints={1: 1, 6: 2}),
    ),
    ClassId.DRUID: (
        _fixed("wild_shape", "Forme sauvage", RestType.SHORT_REST, constant=2),
    ),
    ClassId.SORCERER: (
        _fixed("sorcery_points", "Points de sorcellerie", RestType.LONG_REST, per_level=1),
        _fixed("innate_sorcery", "Sorcellerie innée", RestType.LONG_REST, constant=2),
    ),
    ClassId.FIGHTER: (
        _fixed("action_surge", "Fougue", RestType.SHORT_REST, breakpoints={1: 1, 17: 2}),
    ),
    ClassId.WIZARD: (
        ResourceDefinition(
            key="arcane_recovery",
            label="Restauration arcanique",
            kind=ResourceKind.BOOLEAN,
            recharge=RestType.LONG_REST,
        ),
    ),
    ClassId.MONK: (
        ResourceDefinition(
            key="credo_points",
            label="Points de crédo",
            kind=ResourceKind.FIXED,
            formula=ResourceFormula(per_level=1),
            recharge=RestType.SHORT_REST,
            legacy_keys=("ki_points",),
        ),
        ResourceDefinition(
            key="supernatural_metabolism",
            label="Métabolisme surnaturel",
            kind=ResourceKind.AUTO_LEVEL,
            formula=ResourceFormula(constant=1),
            recharge=RestType.LONG_REST,
            min_level=2,
        ),
    ),
    ClassId.PALADIN: (
        ResourceDefinition(
            key="lay_on_hands",
            label="Imposition des mains",
            kind=ResourceKind.AUTO_LEVEL,
            formula=ResourceFormula(per_level=5),
            recharge=RestType.LONG_REST,
        ),
        ResourceDefinition(
            key="channel_divinity",
            label="Conduit divin",
            kind=ResourceKind.AUTO_LEVEL,
            formula=ResourceFormula(breakpoints={3: 2, 11: 3}),
            recharge=RestType.SHORT_REST,
            min_level=3,
        ),
    ),
    ClassId.RANGER: (
        _fixed("favored_foe", "Ennemi juré", RestType.LONG_REST, breakpoints={1: 1, 5: 2, 9: 3, 13: 4, 17: 5}),
    ),
}


def sneak_attack_dice(level: int) -> str:
    """Rogue sneak attack dice: one d6 per two levels, rounded up."""
    return f"{math.ceil(level / 2)}d6"


# =============================================================================
# Catalog
# =============================================================================


class ResourceCatalog:
    """Lookup of resource definitions by class and level."""

    def __init__(
        self,
        resources: Mapping[ClassId, tuple[ResourceDefinition, ...]] = CLASS_RESOURCES,
    ) -> None:
        """Initialize the catalog.

        Raises:
            ValidationError: If a class lists the same key twice.
        """
        for class_id, definitions in resources.items():
            keys = [definition.key for definition in definitions]
            duplicates = {key for key in keys if keys.count(key) > 1}
            if duplicates:
                raise ValidationError(
                    f"Duplicate resource keys for {class_id}",
                    field_name="key",
                    invalid_value=sorted(duplicates),
                )
        self._resources = dict(resources)

    def all_definitions(self, class_key: ClassId | str) -> tuple[ResourceDefinition, ...]:
        """Every definition of a class, regardless of level."""
        return self._resources.get(class_key, ())

    def definitions_for(self, class_key: ClassId | str, level: int) -> tuple[ResourceDefinition, ...]:
        """Definitions active at ``level``, in catalog order."""
        return tuple(d for d in self.all_definitions(class_key) if d.is_active(level))

    def definition(self, class_key: ClassId | str, key: str) -> ResourceDefinition | None:
        """A single definition by key, active or not."""
        for definition in self.all_definitions(class_key):
            if definition.key == key:
                return definition
        return None

    def legacy_aliases(self, class_key: ClassId | str) -> dict[str, str]:
        """Legacy persistence key -> current key."""
        return {
            legacy: definition.key
            for definition in self.all_definitions(class_key)
            for legacy in definition.legacy_keys
        }

    def derived_values(self, class_key: ClassId | str, level: int) -> dict[str, str]:
        """Display-only values computed from level (not tracked pools)."""
        if class_key == ClassId.ROGUE:
            return {"sneak_attack": sneak_attack_dice(level)}
        return {}


__all__ = [
    "ResourceFormula",
    "ResourceDefinition",
    "CLASS_RESOURCES",
    "ResourceCatalog",
    "sneak_attack_dice",
]
