"""Resolve a class/subclass name pair into visible rule sections.

Flow: spelling variants from the name resolver become candidate paths,
the fetcher returns the first path holding text, the parser splits it into
sections and the selector keeps what the character's level can see.

Parsed sections are cached per canonical (class, subclass) pair for the
lifetime of the resolver once the class document is found, so a missing
subclass is not fetched again until the cache is cleared. The level filter
is applied after the cache.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from dnd_tracker.content.fetcher import ContentFetcher, FetchResult
from dnd_tracker.content.paths import ContentPathBuilder
from dnd_tracker.content.store import ContentStore
from dnd_tracker.core.config import Settings, get_settings
from dnd_tracker.core.exceptions import ContentNotFoundError
from dnd_tracker.core.logging import get_logger
from dnd_tracker.models.diagnostics import Diagnostic, clamp_level
from dnd_tracker.models.enums import DiagnosticKind, SectionOrigin
from dnd_tracker.names.resolver import NameResolver, get_name_resolver
from dnd_tracker.rules.sections import RuleSection, SectionParser, visible


logger = get_logger(__name__)


class SectionResolution(BaseModel):
    """Visible sections for a class/subclass at a level.

    Attributes:
        sections: Visible sections in display order.
        class_path: Path of the class document used, if any.
        subclass_path: Path of the subclass document used, if any.
        diagnostics: not_found, parse_degraded and out_of_range reports.
        level: Level the sections were filtered for, after clamping.
    """

    model_config = ConfigDict(frozen=True)

    sections: tuple[RuleSection, ...] = ()
    class_path: str | None = None
    subclass_path: str | None = None
    diagnostics: tuple[Diagnostic, ...] = ()
    level: int = 1

    @property
    def found(self) -> bool:
        """Whether any document resolved."""
        return self.class_path is not None or self.subclass_path is not None


@dataclass(frozen=True)
class _Documents:
    sections: tuple[RuleSection, ...]
    class_path: str | None
    subclass_path: str | None
    diagnostics: tuple[Diagnostic, ...]


def _not_found(message: str, **details: object) -> Diagnostic:
    error = ContentNotFoundError(message, details=dict(details))
    return Diagnostic.from_error(DiagnosticKind.NOT_FOUND, error)


class SectionResolver:
    """Loads, parses, caches and filters class rule sections."""

    def __init__(
        self,
        store: ContentStore,
        *,
        settings: Settings | None = None,
        names: NameResolver | None = None,
        parser: SectionParser | None = None,
        fetcher: ContentFetcher | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.names = names or get_name_resolver()
        self.parser = parser or SectionParser(settings.parser)
        self.fetcher = fetcher or ContentFetcher(
            store,
            parallel=settings.content.parallel_fetch,
            max_workers=settings.content.max_workers,
        )
        self.paths = ContentPathBuilder()
        self.max_subclass_candidates = settings.content.max_subclass_candidates
        self._cache: dict[tuple[str, str | None], _Documents] = {}
        self._lock = threading.Lock()

    def clear_cache(self) -> None:
        """Forget every cached document."""
        with self._lock:
            self._cache.clear()

    def resolve(
        self,
        class_name: str,
        subclass_name: str | None = None,
        level: int = 1,
    ) -> SectionResolution:
        """Resolve the sections visible at ``level``.

        Args:
            class_name: Free-form class name.
            subclass_name: Free-form subclass name, or None.
            level: Character level, clamped into 1..20.

        Returns:
            Visible sections plus the documents used and diagnostics. A
            missing document is a not_found diagnostic, never an exception.
        """
        diagnostics: list[Diagnostic] = []
        clamped, level_diagnostic = clamp_level(level)
        if level_diagnostic is not None:
            diagnostics.append(level_diagnostic)

        subclass_name = subclass_name.strip() if subclass_name and subclass_name.strip() else None
        canonical_class = str(self.names.canonicalize_class(class_name))
        canonical_subclass = self.names.canonicalize_subclass(subclass_name) if subclass_name else None
        cache_key = (canonical_class, canonical_subclass)

        with self._lock:
            documents = self._cache.get(cache_key)
        if documents is None:
            documents = self._load(class_name, subclass_name, canonical_subclass)
            if documents.class_path is not None:
                with self._lock:
                    self._cache[cache_key] = documents
        else:
            logger.debug("Section cache hit", class_name=canonical_class, subclass_name=canonical_subclass)

        diagnostics.extend(documents.diagnostics)
        sections = visible(documents.sections, clamped)
        logger.info(
            "Sections resolved",
            class_name=canonical_class,
            subclass_name=canonical_subclass,
            level=clamped,
            sections=len(sections),
            diagnostics=len(diagnostics),
        )
        return SectionResolution(
            sections=tuple(sections),
            class_path=documents.class_path,
            subclass_path=documents.subclass_path,
            diagnostics=tuple(diagnostics),
            level=clamped,
        )

    def _load(
        self,
        class_name: str,
        subclass_name: str | None,
        canonical_subclass: str | None,
    ) -> _Documents:
        diagnostics: list[Diagnostic] = []
        sections: list[RuleSection] = []

        class_names = self.names.class_candidates(class_name)
        class_paths = self.paths.class_paths(class_names)
        class_hit = self.fetcher.fetch_first(class_paths)
        if class_hit is None:
            logger.warning("Class document not found", class_name=class_name, candidates=len(class_paths))
            diagnostics.append(
                _not_found("No class document found", class_name=class_name, candidates=len(class_paths))
            )
        else:
            parsed = self.parser.parse(class_hit.text, SectionOrigin.CLASS)
            sections.extend(parsed.sections)
            diagnostics.extend(parsed.diagnostics)

        subclass_hit: FetchResult | None = None
        if subclass_name:
            subclass_classes = class_names
            if class_hit is not None:
                subclass_classes = [class_hit.path.split("/", 1)[0]]
            subclass_names = list(
                dict.fromkeys([canonical_subclass or subclass_name, *self.names.subclass_candidates(subclass_name)])
            )
            subclass_paths = self.paths.subclass_paths(
                subclass_classes,
                subclass_names,
                limit=self.max_subclass_candidates,
            )
            subclass_hit = self.fetcher.fetch_first(subclass_paths)
            if subclass_hit is None:
                logger.warning(
                    "Subclass document not found",
                    class_name=class_name,
                    subclass_name=subclass_name,
                    candidates=len(subclass_paths),
                )
                diagnostics.append(
                    _not_found(
                        "No subclass document found",
                        class_name=class_name,
                        subclass_name=subclass_name,
                        candidates=len(subclass_paths),
                    )
                )
            else:
                parsed = self.parser.parse(subclass_hit.text, SectionOrigin.SUBCLASS)
                sections.extend(parsed.sections)
                diagnostics.extend(parsed.diagnostics)

        return _Documents(
            sections=tuple(sections),
            class_path=class_hit.path if class_hit else None,
            subclass_path=subclass_hit.path if subclass_hit else None,
            diagnostics=tuple(diagnostics),
        )


__all__ = [
    "SectionResolution",
    "SectionResolver",
]
