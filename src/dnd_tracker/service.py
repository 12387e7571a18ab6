"""Tracker service facade.

Bundles the section resolver, the resource ledger and the progression
tables behind the three operations the application calls:

- ``resolve_sections``: class/subclass name -> visible rule sections
- ``mutate_resource``: apply a player edit to a class resource
- ``lookup_slots``: spell slots for a caster type at a level

Example:
    >>> from dnd_tracker.content.store import InMemoryContentStore
    >>> service = TrackerService(InMemoryContentStore({"Rôdeur/README.md": "### Niveau 1 : Ennemi juré\\nTexte"}))
    >>> [s.title for s in service.resolve_sections("Rôdeur", level=3).sections]
    ['Ennemi juré']
"""

from __future__ import annotations

from collections.abc import Hashable
from functools import lru_cache

from dnd_tracker.content.fetcher import RequestGuard
from dnd_tracker.content.resolver import SectionResolution, SectionResolver
from dnd_tracker.content.store import ContentStore, build_content_store
from dnd_tracker.core.config import Settings, get_settings
from dnd_tracker.core.logging import get_logger
from dnd_tracker.models.character import Character, ability_modifier
from dnd_tracker.models.enums import CasterType
from dnd_tracker.resources.catalog import ResourceCatalog
from dnd_tracker.resources.ledger import MutationResult, Operation, ResourceLedger
from dnd_tracker.rules.progression import DEFAULT_TABLES, PactSlotTable, ProgressionTables, SlotTable


logger = get_logger(__name__)


class TrackerService:
    """Entry point for section resolution, resource edits and slot lookups.

    Attributes:
        settings: Application settings.
        store: Content store documents are read from.
        sections: Cached section resolver.
        catalog: Class resource catalog.
        tables: Spell progression tables.
    """

    def __init__(
        self,
        store: ContentStore | None = None,
        settings: Settings | None = None,
        *,
        catalog: ResourceCatalog | None = None,
        tables: ProgressionTables | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store if store is not None else build_content_store(self.settings.content)
        self.sections = SectionResolver(self.store, settings=self.settings)
        self.catalog = catalog or ResourceCatalog()
        self.tables = tables or DEFAULT_TABLES
        self._guard = RequestGuard()

    def resolve_sections(
        self,
        class_name: str,
        subclass_name: str | None = None,
        level: int = 1,
    ) -> SectionResolution:
        """Rule sections visible at ``level`` for a class and optional subclass."""
        return self.sections.resolve(class_name, subclass_name, level)

    def resolve_sections_latest(
        self,
        scope: Hashable,
        class_name: str,
        subclass_name: str | None = None,
        level: int = 1,
    ) -> SectionResolution | None:
        """Resolve sections, discarding the result if a newer request started.

        Args:
            scope: What the request is for, typically a character id.
            class_name: Free-form class name.
            subclass_name: Free-form subclass name, or None.
            level: Character level.

        Returns:
            The resolution, or None when a later request for the same scope
            was issued while this one was in flight.
        """
        ticket = self._guard.issue(scope)
        resolution = self.resolve_sections(class_name, subclass_name, level)
        if not self._guard.is_current(ticket):
            logger.debug("Discarded stale section resolution", scope=str(scope), class_name=class_name)
            return None
        return resolution

    def ledger(self, character: Character) -> ResourceLedger:
        """A ledger over ``character`` using this service's catalog."""
        return ResourceLedger(character, self.catalog)

    def mutate_resource(self, character: Character, key: str, operation: Operation) -> MutationResult:
        """Apply one operation to a character's resource."""
        return self.ledger(character).mutate(key, operation)

    def lookup_slots(
        self,
        caster_type: CasterType,
        level: int,
        previous: SlotTable | PactSlotTable | None = None,
    ) -> SlotTable | PactSlotTable:
        """Spell slots at ``level``, used counters carried over from ``previous``."""
        return self.tables.lookup_slots(caster_type, level, previous)


@lru_cache(maxsize=1)
def get_tracker_service() -> TrackerService:
    """Get the service built from application settings."""
    return TrackerService()


def resolve_sections(
    class_name: str,
    subclass_name: str | None = None,
    level: int = 1,
) -> SectionResolution:
    """Resolve visible rule sections with the default service."""
    return get_tracker_service().resolve_sections(class_name, subclass_name, level)


def mutate_resource(character: Character, key: str, operation: Operation) -> MutationResult:
    """Apply a resource edit with the default service."""
    return get_tracker_service().mutate_resource(character, key, operation)


def lookup_slots(
    caster_type: CasterType,
    level: int,
    previous: SlotTable | PactSlotTable | None = None,
) -> SlotTable | PactSlotTable:
    """Look up spell slots with the default service."""
    return get_tracker_service().lookup_slots(caster_type, level, previous)


__all__ = [
    "TrackerService",
    "get_tracker_service",
    "resolve_sections",
    "mutate_resource",
    "lookup_slots",
    "ability_modifier",
]
