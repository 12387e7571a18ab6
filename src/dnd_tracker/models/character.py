"""Character and resource state models consumed by the ledger.

The tracker core does not own characters: callers hand in a Character
snapshot and get back the next value to persist. The persisted layout of
class resources is flat, one integer per total and one per used counter
(``rage`` / ``used_rage``), with boolean features stored only as their
``used_<key>`` flag.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dnd_tracker.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL
from dnd_tracker.models.enums import Ability, ClassId


USED_PREFIX = "used_"


def ability_modifier(score: int) -> int:
    """Calculate the ability modifier for an ability score.

    Args:
        score: Raw ability score.

    Returns:
        floor((score - 10) / 2).

    Example:
        >>> ability_modifier(15)
        2
        >>> ability_modifier(9)
        -1
    """
    return (score - 10) // 2


class ResourceState(BaseModel):
    """Live total/used pair for one class resource.

    Invariant: 0 <= used <= total.
    """

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0, description="Pool size")
    used: int = Field(default=0, ge=0, description="Spent uses")

    @model_validator(mode="after")
    def validate_used_within_total(self) -> "ResourceState":
        """Reject states that spend more than the pool holds."""
        if self.used > self.total:
            raise ValueError(f"used ({self.used}) cannot exceed total ({self.total})")
        return self

    @property
    def remaining(self) -> int:
        """Uses left before the pool is empty."""
        return self.total - self.used

    @classmethod
    def clamped(cls, total: int, used: int) -> ResourceState:
        """Build a state with used clamped into [0, total].

        Args:
            total: Pool size; negative values become 0.
            used: Requested used count.

        Returns:
            A valid ResourceState.
        """
        total = max(0, total)
        return cls(total=total, used=min(max(0, used), total))


class Character(BaseModel):
    """Snapshot of the character fields the tracker core reads.

    Attributes:
        level: Character level, 1..20.
        class_key: Canonical class, or a pass-through name for unknown classes.
        subclass_key: Canonical subclass name, if chosen.
        ability_modifiers: Ability -> modifier, supplied by the caller.
        resources: Resource key -> live state for numeric pools.
        flags: Resource key -> used flag for boolean features.
    """

    model_config = ConfigDict(frozen=True)

    level: int = Field(default=1, ge=MIN_CHARACTER_LEVEL, le=MAX_CHARACTER_LEVEL)
    class_key: ClassId | str
    subclass_key: str | None = None
    ability_modifiers: dict[Ability, int] = Field(default_factory=dict)
    resources: dict[str, ResourceState] = Field(default_factory=dict)
    flags: dict[str, bool] = Field(default_factory=dict)

    @field_validator("class_key", mode="before")
    @classmethod
    def coerce_class_key(cls, value: Any) -> Any:
        """Promote exact canonical class names to ClassId."""
        if isinstance(value, str) and not isinstance(value, ClassId):
            try:
                return ClassId(value)
            except ValueError:
                return value
        return value

    def modifier(self, ability: Ability) -> int:
        """Get an ability modifier, 0 when the caller did not supply it."""
        return self.ability_modifiers.get(ability, 0)

    @classmethod
    def from_persisted(
        cls,
        data: Mapping[str, Any],
        *,
        class_key: ClassId | str,
        level: int = 1,
        subclass_key: str | None = None,
        ability_modifiers: Mapping[Ability, int] | None = None,
        aliases: Mapping[str, str] | None = None,
    ) -> Character:
        """Rebuild a character from the flat persisted resource layout.

        Integer ``<key>`` entries are totals, integer ``used_<key>`` entries
        are used counters and boolean ``used_<key>`` entries are flags.
        Other values (display strings, legacy flags) are ignored. Used
        counters are clamped into their pool.

        Args:
            data: Persisted class resources.
            class_key: Canonical class of the character.
            level: Character level.
            subclass_key: Canonical subclass name, if any.
            ability_modifiers: Caller-supplied ability modifiers.
            aliases: Legacy key -> current key, applied when the current
                key is absent from ``data``.

        Returns:
            A Character holding the parsed resources and flags.

        Example:
            >>> Character.from_persisted({"rage": 3, "used_rage": 1}, class_key=ClassId.BARBARIAN)
        """
        aliases = aliases or {}
        totals: dict[str, int] = {}
        used: dict[str, int] = {}
        flags: dict[str, bool] = {}

        for raw_key, value in data.items():
            is_used = raw_key.startswith(USED_PREFIX)
            key = raw_key[len(USED_PREFIX):] if is_used else raw_key
            if key in aliases:
                current = aliases[key]
                current_raw = f"{USED_PREFIX}{current}" if is_used else current
                if current_raw in data:
                    continue
                key = current

            if isinstance(value, bool):
                if is_used:
                    flags[key] = value
            elif isinstance(value, int):
                (used if is_used else totals)[key] = value

        resources = {
            key: ResourceState.clamped(totals.get(key, 0), used.get(key, 0))
            for key in sorted(set(totals) | set(used))
        }
        return cls(
            level=level,
            class_key=class_key,
            subclass_key=subclass_key,
            ability_modifiers=dict(ability_modifiers or {}),
            resources=resources,
            flags=flags,
        )


__all__ = [
    "ability_modifier",
    "ResourceState",
    "Character",
]
