"""Rule section parsing, ordering and level filtering.

A class document is split into sections at two heading depths (``##`` and
``###`` by default). Each heading may carry a level tag in one of several
phrasings, French or English::

    ### Niveau 3 : Attaque supplémentaire
    ### Niv. 7 - Esquive totale
    ### Level 5: Extra Attack
    ### 3e niveau : Archétype
    ### 9 — Maître des ombres
    ### Dons (Niveau 4)
    ### Archétype - Niveau 7

Sections without a tag get level 0 and are always visible. Parsing never
fails: malformed headings are kept as body text and reported as
diagnostics on the ParseResult.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from dnd_tracker.core.config import ParserSettings
from dnd_tracker.core.constants import MAX_CHARACTER_LEVEL, UNLEVELED_SECTION
from dnd_tracker.core.exceptions import ParseDegradedError
from dnd_tracker.core.logging import get_logger
from dnd_tracker.models.diagnostics import Diagnostic, clamp_level
from dnd_tracker.models.enums import DiagnosticKind, SectionOrigin
from dnd_tracker.names.resolver import strip_diacritics
from dnd_tracker.rules.markdown import Block, MarkdownLiteParser


logger = get_logger(__name__)


class RuleSection(BaseModel):
    """A level-tagged block of rule text.

    Attributes:
        level: Character level the section applies from, 0 when untagged.
        title: Heading text without the level phrase.
        body: Markdown body of the section.
        origin: Whether the section comes from the class or subclass document.
    """

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=0, le=MAX_CHARACTER_LEVEL)
    title: str = Field(min_length=1)
    body: str = Field(min_length=1)
    origin: SectionOrigin = SectionOrigin.CLASS

    @property
    def sort_key(self) -> tuple[int, int, str, str]:
        """Total order: level, class before subclass, then title.

        Titles compare case- and accent-insensitively first, with the raw
        title breaking ties.
        """
        return (
            self.level,
            self.origin.sort_rank,
            strip_diacritics(self.title).casefold(),
            self.title,
        )

    def blocks(self) -> tuple[Block, ...]:
        """Parse the body into a markdown block tree."""
        return MarkdownLiteParser().parse(self.body)


class ParseResult(BaseModel):
    """Sections parsed from one document, in source order."""

    model_config = ConfigDict(frozen=True)

    sections: tuple[RuleSection, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    document_title: str | None = None


# =============================================================================
# Level extraction
# =============================================================================

_SEPARATOR = r"\s*(?:[:\-–—.]\s*)?"

LEVEL_PATTERNS: tuple[re.Pattern[str], ...] = (
    # Niveau 3 / Niv. 3 / Level 3 / Lvl. 3 / Nv 3
    re.compile(rf"^(?:niveau|niv\.?|level|lvl\.?|nv\.?)\s*(\d+){_SEPARATOR}(.*)$", re.IGNORECASE),
    # 3e niveau / 3ème niveau / 3rd level
    re.compile(
        rf"^(\d+)\s*(?:e|er|re|ère|eme|ème|st|nd|rd|th)\s+(?:niveau|level){_SEPARATOR}(.*)$",
        re.IGNORECASE,
    ),
    # 9: Name / 9 - Name / 9
    re.compile(r"^(\d+)\s*(?:[:\-–—]\s*(.*))?$"),
)

_TRAILING_LEVEL = re.compile(
    r"^(.*?)\s*\(\s*(?:niveau|niv\.?|level|lvl\.?|nv\.?)\s*(\d+)\s*\)\s*$",
    re.IGNORECASE,
)

# Archétype - Niveau 7 / Aptitude de 3e niveau : Attaque
_INLINE_LEVEL = re.compile(
    r"\b(?:(?:niveau|niv\.?|level|lvl\.?|nv\.?)\s*(\d+)\b"
    r"|(\d+)\s*(?:e|er|re|ère|eme|ème|st|nd|rd|th)\s+(?:niveau|level)\b)",
    re.IGNORECASE,
)
_DANGLING_BEFORE = re.compile(r"(?:[\s:\-–—.,(]|\b(?:de|du|au|à|at|of)\b)+$", re.IGNORECASE)
_DANGLING_AFTER = re.compile(r"^[\s:\-–—.,)]+")

_HEADING = re.compile(r"^ {0,3}(#+)(.*)$")
_FENCE = re.compile(r"^\s*(```|~~~)")


def extract_level(heading: str) -> tuple[int | None, str]:
    """Split a heading into its level number and title.

    Args:
        heading: Heading text without the leading hashes.

    Returns:
        (level, title). ``level`` is None when no phrasing matched. A level
        phrase in the middle of a heading is cut out of the title. The
        title falls back to the whole heading when the remainder is empty.

    Example:
        >>> extract_level("Niveau 3 - Attaque supplémentaire")
        (3, 'Attaque supplémentaire')
        >>> extract_level("Archétype - Niveau 7")
        (7, 'Archétype')
        >>> extract_level("Serment de dévotion")
        (None, 'Serment de dévotion')
    """
    text = heading.strip()
    for pattern in LEVEL_PATTERNS:
        match = pattern.match(text)
        if match:
            title = (match.group(2) or "").strip()
            return int(match.group(1)), title or text

    match = _TRAILING_LEVEL.match(text)
    if match:
        return int(match.group(2)), match.group(1).strip() or text

    match = _INLINE_LEVEL.search(text)
    if match:
        before = _DANGLING_BEFORE.sub("", text[: match.start()]).strip()
        after = _DANGLING_AFTER.sub("", text[match.end() :]).strip()
        title = " - ".join(part for part in (before, after) if part)
        return int(match.group(1) or match.group(2)), title or text

    return None, text


# =============================================================================
# Parser
# =============================================================================


@dataclass
class _OpenSection:
    title: str
    level: int
    lines: list[str] = field(default_factory=list)


class SectionParser:
    """Splits a rule document into leveled sections.

    Attributes:
        heading_depths: Heading depths that start a new section.
        general_title: Title of the section holding text before any heading.
    """

    def __init__(self, settings: ParserSettings | None = None) -> None:
        settings = settings or ParserSettings()
        self.heading_depths = frozenset(settings.heading_depths)
        self.general_title = settings.general_title

    def parse(self, text: str, origin: SectionOrigin = SectionOrigin.CLASS) -> ParseResult:
        """Parse a document.

        Args:
            text: Raw markdown text.
            origin: Origin stamped on every produced section.

        Returns:
            Sections in source order plus any diagnostics.
        """
        diagnostics: list[Diagnostic] = []
        document_title: str | None = None
        general = _OpenSection(title=self.general_title, level=UNLEVELED_SECTION)
        current = general
        finished: list[_OpenSection] = [general]
        in_fence = False

        def degrade(line_number: int, message: str, line: str) -> None:
            error = ParseDegradedError(message, line_number=line_number, details={"line": line})
            diagnostics.append(Diagnostic.from_error(DiagnosticKind.PARSE_DEGRADED, error))
            logger.debug("Degraded heading", line_number=line_number, reason=message)

        for line_number, line in enumerate((text or "").replace("\r\n", "\n").split("\n"), start=1):
            if _FENCE.match(line):
                in_fence = not in_fence
                current.lines.append(line)
                continue

            match = None if in_fence else _HEADING.match(line)
            if match is None:
                current.lines.append(line)
                continue

            depth = len(match.group(1))
            rest = match.group(2)
            is_boundary = depth in self.heading_depths

            if depth == 1 and rest[:1].isspace() and rest.strip():
                if document_title is None:
                    document_title = rest.strip().rstrip("#").strip()
                continue

            if not is_boundary:
                current.lines.append(line)
                continue

            if rest and not rest[0].isspace():
                degrade(line_number, "Heading marker not followed by a space", line)
                current.lines.append(line.strip())
                continue

            heading = rest.strip().rstrip("#").strip().strip("*_").strip()
            if not heading:
                degrade(line_number, "Empty heading", line)
                current.lines.append(line.strip())
                continue

            level, title = extract_level(heading)
            if level is None:
                level = UNLEVELED_SECTION
            elif level > MAX_CHARACTER_LEVEL:
                degrade(line_number, f"Level {level} out of range, treated as untagged", line)
                level = UNLEVELED_SECTION

            current = _OpenSection(title=title, level=level)
            finished.append(current)

        sections: list[RuleSection] = []
        for candidate in finished:
            body = "\n".join(candidate.lines).strip()
            title = candidate.title.strip()
            if not body or not title:
                continue
            sections.append(RuleSection(level=candidate.level, title=title, body=body, origin=origin))

        logger.debug(
            "Parsed rule document",
            origin=str(origin),
            sections=len(sections),
            diagnostics=len(diagnostics),
        )
        return ParseResult(
            sections=tuple(sections),
            diagnostics=tuple(diagnostics),
            document_title=document_title,
        )


# =============================================================================
# Selection
# =============================================================================


def sort_sections(sections: Iterable[RuleSection]) -> list[RuleSection]:
    """Sort sections by (level, origin, title)."""
    return sorted(sections, key=lambda section: section.sort_key)


def visible(sections: Iterable[RuleSection], level: int) -> list[RuleSection]:
    """Sections a character of ``level`` can see, in display order.

    Untagged (level 0) sections are always visible. ``level`` is clamped
    into 1..20.

    Args:
        sections: Sections to filter.
        level: Character level.

    Returns:
        Visible sections sorted by (level, origin, title).
    """
    clamped, diagnostic = clamp_level(level)
    if diagnostic is not None:
        logger.info("Section level clamped", requested=level, level=clamped)
    return sort_sections(
        section
        for section in sections
        if section.level == UNLEVELED_SECTION or section.level <= clamped
    )


def group_by_level(sections: Sequence[RuleSection]) -> dict[int, list[RuleSection]]:
    """Group sections by level, levels ascending, each group in display order."""
    grouped: dict[int, list[RuleSection]] = {}
    for section in sort_sections(sections):
        grouped.setdefault(section.level, []).append(section)
    return grouped


__all__ = [
    "RuleSection",
    "ParseResult",
    "LEVEL_PATTERNS",
    "extract_level",
    "SectionParser",
    "sort_sections",
    "visible",
    "group_by_level",
]
