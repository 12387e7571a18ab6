"""Class resource catalog and per-character ledger."""

from __future__ import annotations

from dnd_tracker.resources.catalog import (
    CLASS_RESOURCES,
    ResourceCatalog,
    ResourceDefinition,
    ResourceFormula,
)
from dnd_tracker.resources.ledger import (
    AdjustUsed,
    MutationResult,
    Operation,
    ResourceLedger,
    SetTotal,
    SetUsed,
    Toggle,
    mutate_resource,
)


__all__ = [
    "CLASS_RESOURCES",
    "ResourceCatalog",
    "ResourceDefinition",
    "ResourceFormula",
    "ResourceLedger",
    "MutationResult",
    "Operation",
    "SetTotal",
    "AdjustUsed",
    "SetUsed",
    "Toggle",
    "mutate_resource",
]
