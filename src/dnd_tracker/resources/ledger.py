"""Per-character resource ledger.

The ledger applies player edits to a character's class resources while
keeping every pool valid (0 <= used <= total). Computed totals cannot be
written; FIXED totals can, and writing one resets the used counter.
Nothing here raises on a bad edit: the result carries an
``invalid_mutation`` diagnostic and the state is left untouched.

Example:
    >>> character = Character(level=5, class_key=ClassId.PALADIN)
    >>> ledger = ResourceLedger(character)
    >>> result = ledger.mutate("lay_on_hands", AdjustUsed(3))
    >>> result.state, result.delta
    (ResourceState(total=25, used=3), '+3 used')
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from dnd_tracker.core.exceptions import InvalidMutationError
from dnd_tracker.core.logging import get_logger
from dnd_tracker.models.character import USED_PREFIX, Character, ResourceState
from dnd_tracker.models.diagnostics import Diagnostic, clamp_level
from dnd_tracker.models.enums import Ability, ClassId, DiagnosticKind, ResourceKind, RestType
from dnd_tracker.resources.catalog import ResourceCatalog, ResourceDefinition


logger = get_logger(__name__)


# =============================================================================
# Operations
# =============================================================================


@dataclass(frozen=True)
class SetTotal:
    """Set the total of a FIXED resource; resets used to 0."""

    value: int
    name = "set_total"


@dataclass(frozen=True)
class AdjustUsed:
    """Spend (positive) or recover (negative) uses."""

    delta: int
    name = "adjust_used"


@dataclass(frozen=True)
class SetUsed:
    """Set the used counter directly."""

    value: int
    name = "set_used"


@dataclass(frozen=True)
class Toggle:
    """Flip a BOOLEAN resource between used and available."""

    name = "toggle"


Operation = SetTotal | AdjustUsed | SetUsed | Toggle


class MutationResult(BaseModel):
    """Outcome of one ledger mutation.

    Attributes:
        success: Whether the mutation was applied.
        key: Resource key.
        state: Pool state after the mutation (unchanged on failure).
        flag: Used flag after the mutation, for boolean resources.
        delta: Signed change for notifications ("+2 used", "updated").
        message: Human-readable summary.
        diagnostic: Why the mutation was rejected.
        character: Character after the mutation, the value to persist.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    key: str
    state: ResourceState | None = None
    flag: bool | None = None
    delta: str | None = None
    message: str
    diagnostic: Diagnostic | None = None
    character: Character


# =============================================================================
# Ledger
# =============================================================================


class ResourceLedger:
    """Holds and mutates one character's class resources.

    Single writer: the ledger assumes no concurrent edits of the same
    character.
    """

    def __init__(self, character: Character, catalog: ResourceCatalog | None = None) -> None:
        self.catalog = catalog or ResourceCatalog()
        self._character = character

    @property
    def character(self) -> Character:
        """Current character snapshot."""
        return self._character

    @property
    def definitions(self) -> tuple[ResourceDefinition, ...]:
        """Resources active at the character's level."""
        return self.catalog.definitions_for(self._character.class_key, self._character.level)

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    def computed_total(self, definition: ResourceDefinition) -> int:
        """Formula total at the character's current level and modifiers."""
        return definition.total_for(self._character.level, self._character.ability_modifiers)

    def state(self, key: str) -> ResourceState | None:
        """Current pool of a numeric resource, with defaults for new pools."""
        definition = self._active_definition(key)
        if definition is None or definition.kind is ResourceKind.BOOLEAN:
            return None
        return self._current_state(definition)

    def flag(self, key: str) -> bool | None:
        """Used flag of a boolean resource."""
        definition = self._active_definition(key)
        if definition is None or definition.kind is not ResourceKind.BOOLEAN:
            return None
        return self._character.flags.get(key, False)

    def _active_definition(self, key: str) -> ResourceDefinition | None:
        definition = self.catalog.definition(self._character.class_key, key)
        if definition is None or not definition.is_active(self._character.level):
            return None
        return definition

    def _current_state(self, definition: ResourceDefinition) -> ResourceState:
        stored = self._character.resources.get(definition.key)
        if definition.kind.is_computed:
            total = self.computed_total(definition)
            return ResourceState.clamped(total, stored.used if stored else 0)
        if stored is None:
            return ResourceState(total=self.computed_total(definition), used=0)
        return stored

    def _store(self, key: str, state: ResourceState) -> None:
        resources = {**self._character.resources, key: state}
        self._character = self._character.model_copy(update={"resources": resources})

    def _store_flag(self, key: str, value: bool) -> None:
        flags = {**self._character.flags, key: value}
        self._character = self._character.model_copy(update={"flags": flags})

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def _reject(
        self,
        key: str,
        operation: Operation,
        message: str,
        definition: ResourceDefinition | None = None,
    ) -> MutationResult:
        error = InvalidMutationError(message, resource_key=key, operation=operation.name)
        logger.warning("Invalid resource mutation", resource_key=key, operation=operation.name, reason=message)

        state: ResourceState | None = None
        flag: bool | None = None
        if definition is not None and definition.kind is ResourceKind.BOOLEAN:
            flag = self._character.flags.get(key, False)
        elif definition is not None:
            state = self._character.resources.get(key)

        return MutationResult(
            success=False,
            key=key,
            state=state,
            flag=flag,
            message=message,
            diagnostic=Diagnostic.from_error(DiagnosticKind.INVALID_MUTATION, error),
            character=self._character,
        )

    def mutate(self, key: str, operation: Operation) -> MutationResult:
        """Apply one operation to one resource.

        Args:
            key: Resource key.
            operation: SetTotal, AdjustUsed, SetUsed or Toggle.

        Returns:
            The mutation result. Rejected operations leave the ledger
            unchanged and carry an invalid_mutation diagnostic.
        """
        definition = self.catalog.definition(self._character.class_key, key)
        if definition is None:
            return self._reject(key, operation, f"Unknown resource '{key}'")
        if not definition.is_active(self._character.level):
            return self._reject(
                key,
                operation,
                f"{definition.label} is not available before level {definition.min_level}",
                definition,
            )

        if isinstance(operation, Toggle):
            if definition.kind is not ResourceKind.BOOLEAN:
                return self._reject(key, operation, f"{definition.label} is not an on/off resource", definition)
            value = not self._character.flags.get(key, False)
            self._store_flag(key, value)
            status = "used" if value else "available"
            logger.info("Resource toggled", resource_key=key, used=value)
            return MutationResult(
                success=True,
                key=key,
                flag=value,
                delta="updated",
                message=f"{definition.label} {status}",
                character=self._character,
            )

        if definition.kind is ResourceKind.BOOLEAN:
            return self._reject(key, operation, f"{definition.label} has no total or used counter", definition)

        if isinstance(operation, SetTotal):
            if definition.kind is not ResourceKind.FIXED:
                return self._reject(key, operation, f"Total of {definition.label} is computed", definition)
            if operation.value < 0:
                return self._reject(key, operation, "Total cannot be negative", definition)
            state = ResourceState(total=operation.value, used=0)
            self._store(key, state)
            logger.info("Resource total set", resource_key=key, total=state.total)
            return MutationResult(
                success=True,
                key=key,
                state=state,
                delta="updated",
                message=f"{definition.label} updated",
                character=self._character,
            )

        current = self._current_state(definition)
        if isinstance(operation, AdjustUsed):
            requested = current.used + operation.delta
        else:
            requested = operation.value
        state = ResourceState.clamped(current.total, requested)
        change = state.used - current.used
        self._store(key, state)

        action = "used" if change >= 0 else "recovered"
        logger.info("Resource used changed", resource_key=key, used=state.used, total=state.total)
        return MutationResult(
            success=True,
            key=key,
            state=state,
            delta=f"{change:+d} used",
            message=f"{abs(change)} {definition.label} {action}",
            character=self._character,
        )

    # -------------------------------------------------------------------------
    # Recompute and rest
    # -------------------------------------------------------------------------

    def recompute(
        self,
        *,
        level: int | None = None,
        ability_modifiers: Mapping[Ability, int] | None = None,
    ) -> tuple[Diagnostic, ...]:
        """Recompute pools after a level or ability modifier change.

        Computed totals follow their formula and used counters are clamped
        to the new total (never raised). FIXED totals are kept. Pools that
        become active are initialized from their defaults; pools of resources
        no longer available at the new level are dropped.

        Args:
            level: New character level, clamped into 1..20.
            ability_modifiers: New ability modifiers.

        Returns:
            Diagnostics (out_of_range when the level was clamped).
        """
        diagnostics: list[Diagnostic] = []
        update: dict[str, Any] = {}
        if level is not None:
            clamped, diagnostic = clamp_level(level)
            if diagnostic is not None:
                diagnostics.append(diagnostic)
                logger.info("Resource level clamped", requested=level, level=clamped)
            update["level"] = clamped
        if ability_modifiers is not None:
            update["ability_modifiers"] = dict(ability_modifiers)
        if update:
            self._character = self._character.model_copy(update=update)

        resources = dict(self._character.resources)
        flags = dict(self._character.flags)
        level = self._character.level
        for definition in self.catalog.all_definitions(self._character.class_key):
            if not definition.is_active(level):
                resources.pop(definition.key, None)
                flags.pop(definition.key, None)

        for definition in self.definitions:
            if definition.kind is ResourceKind.BOOLEAN:
                flags.setdefault(definition.key, False)
            else:
                resources[definition.key] = self._current_state(definition)

        self._character = self._character.model_copy(update={"resources": resources, "flags": flags})
        return tuple(diagnostics)

    def rest(self, rest_type: RestType) -> list[str]:
        """Restore resources recharged by a rest.

        A long rest restores everything; a short rest restores short-rest
        resources only.

        Returns:
            Keys of the restored resources.
        """
        restored: list[str] = []
        for definition in self.definitions:
            if rest_type is not RestType.LONG_REST and definition.recharge is not rest_type:
                continue
            if definition.kind is ResourceKind.BOOLEAN:
                self._store_flag(definition.key, False)
            else:
                current = self._current_state(definition)
                self._store(definition.key, ResourceState(total=current.total, used=0))
            restored.append(definition.key)

        logger.info("Rest taken", rest_type=str(rest_type), restored=restored)
        return restored

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_persisted(self) -> dict[str, Any]:
        """Flat persisted layout: ``<key>``, ``used_<key>`` and legacy mirrors.

        Only resources active at the character's level are written.
        Display-only derived values (e.g. sneak attack dice) are included.
        """
        data: dict[str, Any] = {}
        for definition in self.definitions:
            keys = (definition.key, *definition.legacy_keys)
            if definition.kind is ResourceKind.BOOLEAN:
                if definition.key in self._character.flags:
                    for key in keys:
                        data[f"{USED_PREFIX}{key}"] = self._character.flags[definition.key]
                continue
            state = self._character.resources.get(definition.key)
            if state is None:
                continue
            for key in keys:
                data[key] = state.total
                data[f"{USED_PREFIX}{key}"] = state.used

        data.update(self.catalog.derived_values(self._character.class_key, self._character.level))
        return data

    @classmethod
    def from_persisted(
        cls,
        data: Mapping[str, Any],
        *,
        class_key: ClassId | str,
        level: int,
        subclass_key: str | None = None,
        ability_modifiers: Mapping[Ability, int] | None = None,
        catalog: ResourceCatalog | None = None,
    ) -> ResourceLedger:
        """Build a ledger from persisted resources and bring it up to date.

        Legacy keys are read when the current key is missing, then every
        active pool is recomputed.
        """
        catalog = catalog or ResourceCatalog()
        level, _ = clamp_level(level)
        character = Character.from_persisted(
            data,
            class_key=class_key,
            level=level,
            subclass_key=subclass_key,
            ability_modifiers=ability_modifiers,
            aliases=catalog.legacy_aliases(class_key),
        )
        ledger = cls(character, catalog)
        ledger.recompute()
        return ledger


def mutate_resource(
    character: Character,
    key: str,
    operation: Operation,
    catalog: ResourceCatalog | None = None,
) -> MutationResult:
    """Apply one operation to a character's resource.

    Args:
        character: Character snapshot.
        key: Resource key.
        operation: The edit to apply.
        catalog: Resource catalog, defaults to the built-in one.

    Returns:
        The mutation result; ``result.character`` is the value to persist.
    """
    return ResourceLedger(character, catalog).mutate(key, operation)


__all__ = [
    "SetTotal",
    "AdjustUsed",
    "SetUsed",
    "Toggle",
    "Operation",
    "MutationResult",
    "ResourceLedger",
    "mutate_resource",
]
