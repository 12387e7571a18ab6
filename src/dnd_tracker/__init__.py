"""D&D 5E character tracker core.

Class-content resolution and leveled-resource engine:

- map free-form, multi-locale class/subclass names to rule documents
- parse those documents into level-tagged rule sections
- track class resource pools (rage, lay on hands, ...) with strict invariants
- look up spell slot, cantrip and prepared spell progressions

Example:
    >>> from dnd_tracker import Character, ClassId, AdjustUsed, mutate_resource
    >>> character = Character(level=3, class_key=ClassId.BARBARIAN)
    >>> mutate_resource(character, "rage", AdjustUsed(1)).delta
    '+1 used'

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic models and enums.
    names: Class/subclass name canonicalization.
    content: Content stores, fetching and section resolution.
    rules: Section parser, markdown blocks and spell progression.
    resources: Resource catalog and ledger.
"""

from __future__ import annotations

from dnd_tracker.core.config import Settings, get_settings
from dnd_tracker.core.exceptions import DndTrackerError
from dnd_tracker.core.logging import configure_logging, get_logger
from dnd_tracker.models import (
    Ability,
    CasterType,
    Character,
    ClassId,
    Diagnostic,
    DiagnosticKind,
    ResourceKind,
    ResourceState,
    RestType,
    SectionOrigin,
)
from dnd_tracker.names import canonicalize_class, canonicalize_subclass
from dnd_tracker.resources import (
    AdjustUsed,
    MutationResult,
    ResourceCatalog,
    ResourceLedger,
    SetTotal,
    SetUsed,
    Toggle,
)
from dnd_tracker.rules import RuleSection, SectionParser, visible
from dnd_tracker.service import (
    TrackerService,
    ability_modifier,
    lookup_slots,
    mutate_resource,
    resolve_sections,
)


__version__ = "0.1.0"
__author__ = "dnd-tracker"

__all__ = [
    # Version
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "DndTrackerError",
    "configure_logging",
    "get_logger",
    # Models
    "Ability",
    "CasterType",
    "Character",
    "ClassId",
    "Diagnostic",
    "DiagnosticKind",
    "ResourceKind",
    "ResourceState",
    "RestType",
    "SectionOrigin",
    # Names
    "canonicalize_class",
    "canonicalize_subclass",
    # Rules
    "RuleSection",
    "SectionParser",
    "visible",
    # Resources
    "ResourceCatalog",
    "ResourceLedger",
    "MutationResult",
    "SetTotal",
    "AdjustUsed",
    "SetUsed",
    "Toggle",
    # Service
    "TrackerService",
    "resolve_sections",
    "mutate_resource",
    "lookup_slots",
    "ability_modifier",
]
