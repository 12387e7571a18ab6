"""D&D 5E spell progression tables.

This module holds the level-indexed spellcasting data the tracker needs:

- Spell slots per level for full and half casters
- Pact magic slots for the warlock (Occultiste)
- Cantrips known and prepared spells per class
- Mystic arcanum levels

The tables are hand-authored from the 2024 Player's Handbook and checked
when the module is imported: a later level with less capacity than an
earlier one raises ProgressionDataError.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dnd_tracker.core.constants import MAX_CHARACTER_LEVEL, MAX_SPELL_LEVEL, MIN_CHARACTER_LEVEL
from dnd_tracker.core.exceptions import ProgressionDataError
from dnd_tracker.core.logging import get_logger
from dnd_tracker.models.diagnostics import Diagnostic, clamp_level
from dnd_tracker.models.enums import Ability, CasterType, ClassId
from dnd_tracker.names.aliases import CLASS_ALIASES, CLASS_IDS
from dnd_tracker.names.resolver import normalize_key, resolve_class


logger = get_logger(__name__)

SPELL_LEVELS = range(1, MAX_SPELL_LEVEL + 1)
CHARACTER_LEVELS = range(MIN_CHARACTER_LEVEL, MAX_CHARACTER_LEVEL + 1)

SlotRow = Mapping[int, int]


@dataclass(frozen=True)
class PactRow:
    """Pact magic at one warlock level.

    A row identical to the previous one must say why in ``note``.
    """

    total_slots: int
    slot_level: int
    note: str | None = None


# =============================================================================
# Spell Slots by Caster Type
# =============================================================================

# Full casters: Barde, Clerc, Druide, Ensorceleur, Magicien
FULL_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {1: 2},
    2:  {1: 3},
    3:  {1: 4, 2: 2},
    4:  {1: 4, 2: 3},
    5:  {1: 4, 2: 3, 3: 2},
    6:  {1: 4, 2: 3, 3: 3},
    7:  {1: 4, 2: 3, 3: 3, 4: 1},
    8:  {1: 4, 2: 3, 3: 3, 4: 2},
    9:  {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    10: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    11: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    12: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    13: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    16: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1, 9: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 1, 7: 1, 8: 1, 9: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 1, 8: 1, 9: 1},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 2, 8: 1, 9: 1},
}

# Half casters: Paladin, Rôdeur (slots from level 2)
HALF_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {},
    2:  {1: 2},
    3:  {1: 3},
    4:  {1: 3},
    5:  {1: 4, 2: 2},
    6:  {1: 4, 2: 2},
    7:  {1: 4, 2: 3},
    8:  {1: 4, 2: 3},
    9:  {1: 4, 2: 3, 3: 2},
    10: {1: 4, 2: 3, 3: 2},
    11: {1: 4, 2: 3, 3: 3},
    12: {1: 4, 2: 3, 3: 3},
    13: {1: 4, 2: 3, 3: 3, 4: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 2},
    16: {1: 4, 2: 3, 3: 3, 4: 2},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
}

# Occultiste pact magic
PACT_MAGIC_SLOTS: dict[int, PactRow] = {
    1:  PactRow(1, 1),
    2:  PactRow(2, 1),
    3:  PactRow(2, 2),
    4:  PactRow(2, 2, note="slot level rises on odd levels up to 9"),
    5:  PactRow(2, 3),
    6:  PactRow(2, 3, note="slot level rises on odd levels up to 9"),
    7:  PactRow(2, 4),
    8:  PactRow(2, 4, note="slot level rises on odd levels up to 9"),
    9:  PactRow(2, 5),
    10: PactRow(2, 5, note="slot level capped at 5, mystic arcanum covers 6+"),
    11: PactRow(3, 5),
    12: PactRow(3, 5, note="three slots from 11 to 16"),
    13: PactRow(3, 5, note="three slots from 11 to 16"),
    14: PactRow(3, 5, note="three slots from 11 to 16"),
    15: PactRow(3, 5, note="three slots from 11 to 16"),
    16: PactRow(3, 5, note="three slots from 11 to 16"),
    17: PactRow(4, 5),
    18: PactRow(4, 5, note="four slots from 17 to 20"),
    19: PactRow(4, 5, note="four slots from 17 to 20"),
    20: PactRow(4, 5, note="four slots from 17 to 20"),
}

MYSTIC_ARCANUM_LEVELS: tuple[int, ...] = (11, 13, 15, 17)


# =============================================================================
# Cantrips Known and Prepared Spells
# =============================================================================

# Breakpoints: level reached -> cantrips known
CANTRIPS_KNOWN: dict[ClassId, dict[int, int]] = {
    ClassId.BARD: {1: 2, 4: 3, 10: 4},
    ClassId.CLERIC: {1: 3, 4: 4, 10: 5},
    ClassId.DRUID: {1: 2, 4: 3, 10: 4},
    ClassId.SORCERER: {1: 4, 4: 5, 10: 6},
    ClassId.WARLOCK: {1: 2, 4: 3, 10: 4},
    ClassId.WIZARD: {1: 3, 4: 4, 10: 5},
}

# Index 0 is level 1
PREPARED_SPELLS: dict[ClassId, tuple[int, ...]] = {
    ClassId.WIZARD: (4, 5, 6, 7, 9, 10, 11, 12, 14, 15, 16, 16, 17, 18, 19, 21, 22, 23, 24, 25),
    ClassId.SORCERER: (2, 4, 6, 7, 9, 10, 11, 12, 14, 15, 16, 16, 17, 17, 18, 18, 19, 20, 21, 22),
    ClassId.WARLOCK: (2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 11, 11, 12, 12, 13, 13, 14, 14, 15, 15),
}


def _level_plus_mod(level: int, ability_mod: int) -> int:
    return max(1, level + ability_mod)


def _half_level_plus_mod(level: int, ability_mod: int) -> int:
    return max(1, level // 2 + ability_mod)


@dataclass(frozen=True)
class ClassProgression:
    """Spellcasting progression of one class.

    Attributes:
        class_id: The class.
        caster_type: Slot progression shape.
        ability: Spellcasting ability.
        cantrips: Level breakpoints -> cantrips known.
        prepared_table: Prepared spells per level (index 0 is level 1).
        prepared_formula: (level, ability modifier) -> prepared spells,
            used when there is no table.
        mystic_arcanum_levels: Levels granting a mystic arcanum.
    """

    class_id: ClassId
    caster_type: CasterType
    ability: Ability
    cantrips: Mapping[int, int]
    prepared_table: tuple[int, ...] | None = None
    prepared_formula: Callable[[int, int], int] | None = None
    mystic_arcanum_levels: tuple[int, ...] = ()


CLASS_PROGRESSIONS: dict[ClassId, ClassProgression] = {
    ClassId.WIZARD: ClassProgression(
        ClassId.WIZARD, CasterType.FULL, Ability.INT,
        CANTRIPS_KNOWN[ClassId.WIZARD],
        prepared_table=PREPARED_SPELLS[ClassId.WIZARD],
    ),
    ClassId.CLERIC: ClassProgression(
        ClassId.CLERIC, CasterType.FULL, Ability.WIS,
        CANTRIPS_KNOWN[ClassId.CLERIC],
        prepared_formula=_level_plus_mod,
    ),
    ClassId.DRUID: ClassProgression(
        ClassId.DRUID, CasterType.FULL, Ability.WIS,
        CANTRIPS_KNOWN[ClassId.DRUID],
        prepared_formula=_level_plus_mod,
    ),
    ClassId.BARD: ClassProgression(
        ClassId.BARD, CasterType.FULL, Ability.CHA,
        CANTRIPS_KNOWN[ClassId.BARD],
        prepared_formula=_level_plus_mod,
    ),
    ClassId.SORCERER: ClassProgression(
        ClassId.SORCERER, CasterType.FULL, Ability.CHA,
        CANTRIPS_KNOWN[ClassId.SORCERER],
        prepared_table=PREPARED_SPELLS[ClassId.SORCERER],
    ),
    ClassId.WARLOCK: ClassProgression(
        ClassId.WARLOCK, CasterType.PACT, Ability.CHA,
        CANTRIPS_KNOWN[ClassId.WARLOCK],
        prepared_table=PREPARED_SPELLS[ClassId.WARLOCK],
        mystic_arcanum_levels=MYSTIC_ARCANUM_LEVELS,
    ),
    ClassId.PALADIN: ClassProgression(
        ClassId.PALADIN, CasterType.HALF, Ability.CHA, {},
        prepared_formula=_half_level_plus_mod,
    ),
    ClassId.RANGER: ClassProgression(
        ClassId.RANGER, CasterType.HALF, Ability.WIS, {},
        prepared_formula=_half_level_plus_mod,
    ),
}


# =============================================================================
# Validation
# =============================================================================


def validate_slot_table(name: str, table: Mapping[int, SlotRow]) -> None:
    """Check a slot table covers levels 1..20 without regressing.

    Raises:
        ProgressionDataError: On a missing level, an invalid spell level or
            a capacity lower than at the previous level.
    """
    previous: SlotRow = {}
    for level in CHARACTER_LEVELS:
        if level not in table:
            raise ProgressionDataError("Missing level row", table=name, level=level)
        row = table[level]
        for spell_level, capacity in row.items():
            if spell_level not in SPELL_LEVELS or capacity < 0:
                raise ProgressionDataError(
                    f"Invalid entry {spell_level}: {capacity}",
                    table=name,
                    level=level,
                )
        for spell_level in SPELL_LEVELS:
            if row.get(spell_level, 0) < previous.get(spell_level, 0):
                raise ProgressionDataError(
                    f"Spell level {spell_level} capacity decreases",
                    table=name,
                    level=level,
                    details={"spell_level": spell_level},
                )
        previous = row


def validate_pact_table(name: str, table: Mapping[int, PactRow]) -> None:
    """Check pact rows never decrease and flat rows are annotated.

    Raises:
        ProgressionDataError: On a missing level, a decrease, or a row
            repeating the previous one without a note.
    """
    previous: PactRow | None = None
    for level in CHARACTER_LEVELS:
        if level not in table:
            raise ProgressionDataError("Missing level row", table=name, level=level)
        row = table[level]
        if row.total_slots < 1 or row.slot_level not in SPELL_LEVELS:
            raise ProgressionDataError("Invalid pact row", table=name, level=level)
        if previous is not None:
            if row.total_slots < previous.total_slots or row.slot_level < previous.slot_level:
                raise ProgressionDataError("Pact magic decreases", table=name, level=level)
            flat = (row.total_slots, row.slot_level) == (previous.total_slots, previous.slot_level)
            if flat and not row.note:
                raise ProgressionDataError("Flat pact row without a note", table=name, level=level)
        previous = row


def validate_class_progression(progression: ClassProgression) -> None:
    """Check cantrip breakpoints and prepared tables never decrease.

    Raises:
        ProgressionDataError: On a regression or a short prepared table.
    """
    name = str(progression.class_id)
    known = 0
    for level, count in sorted(progression.cantrips.items()):
        if count < known:
            raise ProgressionDataError("Cantrips known decreases", table=name, level=level)
        known = count

    table = progression.prepared_table
    if table is not None:
        if len(table) != MAX_CHARACTER_LEVEL:
            raise ProgressionDataError(
                f"Prepared table has {len(table)} rows",
                table=name,
            )
        for index in range(1, len(table)):
            if table[index] < table[index - 1]:
                raise ProgressionDataError("Prepared spells decrease", table=name, level=index + 1)


# =============================================================================
# Lookup results
# =============================================================================


class SlotTable(BaseModel):
    """Spell slots of a full or half caster at one level.

    Every spell level 1..9 is present; levels the character cannot cast
    have capacity 0 and used 0.
    """

    model_config = ConfigDict(frozen=True)

    caster_type: CasterType
    level: int
    capacities: dict[int, int]
    used: dict[int, int]
    diagnostics: tuple[Diagnostic, ...] = ()

    def capacity(self, spell_level: int) -> int:
        """Slots available at ``spell_level``."""
        return self.capacities.get(spell_level, 0)

    def to_persisted(self) -> dict[str, int]:
        """Flat ``level1..9`` / ``used1..9`` layout."""
        data: dict[str, int] = {}
        for spell_level in SPELL_LEVELS:
            data[f"level{spell_level}"] = self.capacities.get(spell_level, 0)
            data[f"used{spell_level}"] = self.used.get(spell_level, 0)
        return data


class PactSlotTable(BaseModel):
    """Pact magic slots at one warlock level."""

    model_config = ConfigDict(frozen=True)

    level: int
    slot_level: int
    total_slots: int
    used: int = Field(default=0, ge=0)
    diagnostics: tuple[Diagnostic, ...] = ()

    caster_type: CasterType = CasterType.PACT

    def to_persisted(self) -> dict[str, int]:
        """Flat ``pact_slot_level`` / ``pact_slots_total`` / ``pact_slots_used`` layout."""
        return {
            "pact_slot_level": self.slot_level,
            "pact_slots_total": self.total_slots,
            "pact_slots_used": self.used,
        }


# =============================================================================
# Tables
# =============================================================================


class ProgressionTables:
    """Validated slot tables for the three caster shapes.

    Args:
        full: Full caster slots by level.
        half: Half caster slots by level.
        pact: Pact magic rows by level.

    Raises:
        ProgressionDataError: If any table regresses.
    """

    def __init__(
        self,
        full: Mapping[int, SlotRow] = FULL_CASTER_SLOTS,
        half: Mapping[int, SlotRow] = HALF_CASTER_SLOTS,
        pact: Mapping[int, PactRow] = PACT_MAGIC_SLOTS,
    ) -> None:
        validate_slot_table("full", full)
        validate_slot_table("half", half)
        validate_pact_table("pact", pact)
        self._slots = {CasterType.FULL: full, CasterType.HALF: half}
        self._pact = pact

    def lookup(self, caster_type: CasterType, level: int) -> SlotRow | PactRow:
        """Raw table row for a caster type at a level (clamped to 1..20).

        Non-casters get an empty row.
        """
        level, _ = clamp_level(level)
        if caster_type is CasterType.PACT:
            return self._pact[level]
        if caster_type is CasterType.NONE:
            return {}
        return self._slots[caster_type][level]

    def lookup_slots(
        self,
        caster_type: CasterType,
        level: int,
        previous: SlotTable | PactSlotTable | None = None,
    ) -> SlotTable | PactSlotTable:
        """Slot table at a level, carrying used counters over from ``previous``.

        Used counters are clamped to the new capacity
        (``used = min(previous_used, capacity)``); spell levels absent from
        the new row get capacity 0 and used 0. A level outside 1..20 is
        clamped and reported as a diagnostic.

        Args:
            caster_type: Progression shape.
            level: Character level.
            previous: Table before the change, if any.

        Returns:
            A SlotTable for full/half/none casters, a PactSlotTable for pact.
        """
        clamped, diagnostic = clamp_level(level)
        diagnostics = (diagnostic,) if diagnostic else ()
        if diagnostic:
            logger.info("Progression level clamped", requested=level, level=clamped)

        if caster_type is CasterType.PACT:
            row = self._pact[clamped]
            previous_used = previous.used if isinstance(previous, PactSlotTable) else 0
            return PactSlotTable(
                level=clamped,
                slot_level=row.slot_level,
                total_slots=row.total_slots,
                used=min(max(0, previous_used), row.total_slots),
                diagnostics=diagnostics,
            )

        row = self.lookup(caster_type, clamped)
        previous_used = previous.used if isinstance(previous, SlotTable) else {}
        capacities = {spell_level: row.get(spell_level, 0) for spell_level in SPELL_LEVELS}
        used = {
            spell_level: min(max(0, previous_used.get(spell_level, 0)), capacity)
            for spell_level, capacity in capacities.items()
        }
        return SlotTable(
            caster_type=caster_type,
            level=clamped,
            capacities=capacities,
            used=used,
            diagnostics=diagnostics,
        )


for _progression in CLASS_PROGRESSIONS.values():
    validate_class_progression(_progression)

DEFAULT_TABLES = ProgressionTables()


# =============================================================================
# Class helpers
# =============================================================================


def find_progression(class_name: str | None) -> ClassProgression | None:
    """Find the spell progression of a class from any spelling of its name.

    Exact alias matches win; otherwise a known class name appearing as a
    whole word in the input is accepted ("Magicien (école d'évocation)").

    Returns:
        The ClassProgression, or None for non-casters and unknown classes.
    """
    if not class_name:
        return None
    class_id = resolve_class(class_name)
    if class_id is None:
        normalized = normalize_key(class_name)
        for key, aliases in CLASS_ALIASES.items():
            spellings = {normalize_key(alias) for alias in aliases}
            if any(re.search(rf"\b{re.escape(spelling)}\b", normalized) for spelling in spellings):
                class_id = CLASS_IDS[key]
                break
    if class_id is None:
        return None
    return CLASS_PROGRESSIONS.get(class_id)


def caster_type_for(class_name: str | None) -> CasterType:
    """Caster type of a class, NONE for non-casters."""
    progression = find_progression(class_name)
    return progression.caster_type if progression else CasterType.NONE


def max_cantrips(class_name: str | None, level: int) -> int | None:
    """Cantrips known at a level, None for classes without a progression."""
    progression = find_progression(class_name)
    if progression is None:
        return None
    level, _ = clamp_level(level)
    known = 0
    for threshold, count in sorted(progression.cantrips.items()):
        if level >= threshold:
            known = count
    return known


def max_prepared(class_name: str | None, level: int, ability_mod: int) -> int | None:
    """Prepared spells at a level, from the class table or formula."""
    progression = find_progression(class_name)
    if progression is None:
        return None
    level, _ = clamp_level(level)
    if progression.prepared_table is not None:
        return progression.prepared_table[level - 1]
    if progression.prepared_formula is not None:
        return progression.prepared_formula(level, ability_mod)
    return None


def mystic_arcanum_levels(class_name: str | None) -> tuple[int, ...]:
    """Levels at which the class gains a mystic arcanum."""
    progression = find_progression(class_name)
    return progression.mystic_arcanum_levels if progression else ()


def lookup_slots(
    caster_type: CasterType,
    level: int,
    previous: SlotTable | PactSlotTable | None = None,
) -> SlotTable | PactSlotTable:
    """Slot table lookup against the default tables."""
    return DEFAULT_TABLES.lookup_slots(caster_type, level, previous)


def slots_from_persisted(
    caster_type: CasterType,
    level: int,
    data: Mapping[str, Any] | None,
) -> SlotTable | PactSlotTable | None:
    """Rebuild the previous table from the flat persisted layout.

    Only the used counters matter to a recomputation; capacities are taken
    from the data when present.
    """
    if not data:
        return None
    if caster_type is CasterType.PACT:
        return PactSlotTable(
            level=level,
            slot_level=int(data.get("pact_slot_level") or 1),
            total_slots=int(data.get("pact_slots_total") or 0),
            used=max(0, int(data.get("pact_slots_used") or 0)),
        )
    return SlotTable(
        caster_type=caster_type,
        level=level,
        capacities={n: int(data.get(f"level{n}") or 0) for n in SPELL_LEVELS},
        used={n: int(data.get(f"used{n}") or 0) for n in SPELL_LEVELS},
    )


def compute_spell_slots(
    class_name: str | None,
    level: int,
    previous: Mapping[str, Any] | None = None,
) -> dict[str, int]:
    """Next persisted spell slot values for a class at a level.

    Args:
        class_name: Any spelling of the class name.
        level: Character level; 0 or less yields an empty result.
        previous: Previously persisted slot values.

    Returns:
        ``level1..9``/``used1..9`` for full and half casters,
        ``pact_slot_level``/``pact_slots_total``/``pact_slots_used`` for
        the warlock, an empty dict for non-casters.
    """
    progression = find_progression(class_name)
    if progression is None or level <= 0:
        return {}
    caster_type = progression.caster_type
    before = slots_from_persisted(caster_type, level, previous)
    return DEFAULT_TABLES.lookup_slots(caster_type, level, before).to_persisted()


__all__ = [
    "SlotRow",
    "PactRow",
    "FULL_CASTER_SLOTS",
    "HALF_CASTER_SLOTS",
    "PACT_MAGIC_SLOTS",
    "MYSTIC_ARCANUM_LEVELS",
    "CANTRIPS_KNOWN",
    "PREPARED_SPELLS",
    "ClassProgression",
    "CLASS_PROGRESSIONS",
    "validate_slot_table",
    "validate_pact_table",
    "validate_class_progression",
    "SlotTable",
    "PactSlotTable",
    "ProgressionTables",
    "DEFAULT_TABLES",
    "find_progression",
    "caster_type_for",
    "max_cantrips",
    "max_prepared",
    "mystic_arcanum_levels",
    "lookup_slots",
    "slots_from_persisted",
    "compute_spell_slots",
]
