"""Rule text parsing and spell progression lookups."""

from __future__ import annotations

from dnd_tracker.rules.markdown import Block, BlockKind, MarkdownLiteParser, parse_inline
from dnd_tracker.rules.progression import (
    PactSlotTable,
    ProgressionTables,
    SlotTable,
    caster_type_for,
    compute_spell_slots,
    find_progression,
    lookup_slots,
    max_cantrips,
    max_prepared,
    mystic_arcanum_levels,
)
from dnd_tracker.rules.sections import (
    ParseResult,
    RuleSection,
    SectionParser,
    group_by_level,
    sort_sections,
    visible,
)


__all__ = [
    # Sections
    "RuleSection",
    "ParseResult",
    "SectionParser",
    "visible",
    "sort_sections",
    "group_by_level",
    # Markdown
    "Block",
    "BlockKind",
    "MarkdownLiteParser",
    "parse_inline",
    # Progression
    "ProgressionTables",
    "SlotTable",
    "PactSlotTable",
    "lookup_slots",
    "find_progression",
    "caster_type_for",
    "max_cantrips",
    "max_prepared",
    "mystic_arcanum_levels",
    "compute_spell_slots",
]
