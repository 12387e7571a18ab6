"""Lightweight markdown block parser for rule section bodies.

Rule documents use a small markdown dialect: headings, bold subtitle
lines, bullet/numbered/checkbox lists, block quotes, pipe tables,
``Label: value`` lines and boxed callouts written either as
``<!-- BOX --> ... <!-- /BOX -->`` or the older ``II ... ||`` form.

The parser is a single pass over the lines and produces a tree of
Block objects. It knows nothing about rendering.

Example:
    >>> blocks = MarkdownLiteParser().parse("**Rage**\\n- Bonus: +2\\n- [x] Used")
    >>> [block.kind for block in blocks]
    [<BlockKind.SUBTITLE: 'subtitle'>, <BlockKind.BULLET_LIST: 'bullet_list'>, <BlockKind.CHECKLIST: 'checklist'>]
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum


class BlockKind(StrEnum):
    """Block-level element types."""

    HEADING = "heading"
    SUBTITLE = "subtitle"
    PARAGRAPH = "paragraph"
    LABELED = "labeled"
    BULLET_LIST = "bullet_list"
    NUMBERED_LIST = "numbered_list"
    CHECKLIST = "checklist"
    QUOTE = "quote"
    TABLE = "table"
    BOX = "box"
    SPACER = "spacer"


@dataclass(frozen=True)
class Span:
    """A run of inline text with its emphasis."""

    text: str
    bold: bool = False
    italic: bool = False


Inline = tuple[Span, ...]


@dataclass(frozen=True)
class ListItem:
    """One list entry; ``checked`` is set only for checkbox items."""

    spans: Inline
    checked: bool | None = None


@dataclass(frozen=True)
class Block:
    """A node of the block tree.

    Only the fields relevant to ``kind`` are filled: ``spans`` for text
    blocks, ``depth`` for headings, ``label`` for labeled paragraphs,
    ``items`` for lists, ``rows`` for tables (header first) and
    ``children`` for boxes.
    """

    kind: BlockKind
    spans: Inline = ()
    depth: int = 0
    label: str | None = None
    items: tuple[ListItem, ...] = ()
    rows: tuple[tuple[Inline, ...], ...] = ()
    children: tuple[Block, ...] = ()

    @property
    def plain_text(self) -> str:
        """Text content without emphasis markers."""
        return "".join(span.text for span in self.spans)


# =============================================================================
# Inline parsing
# =============================================================================

_BRACKETS = re.compile(r"\[([^\]]+)\]")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"_(.+?)_")


def _split_italic(text: str, *, bold: bool) -> list[Span]:
    spans: list[Span] = []
    cursor = 0
    for match in _ITALIC.finditer(text):
        if match.start() > cursor:
            spans.append(Span(text[cursor:match.start()], bold=bold))
        spans.append(Span(match.group(1), bold=bold, italic=True))
        cursor = match.end()
    if cursor < len(text):
        spans.append(Span(text[cursor:], bold=bold))
    return spans


def parse_inline(text: str) -> Inline:
    """Split text into bold/italic spans.

    ``[text]`` brackets are removed first; ``**bold**`` may contain
    ``_italic_`` runs.

    Example:
        >>> parse_inline("Gain **[Rage]** _twice_")
        (Span(text='Gain ', bold=False, italic=False), Span(text='Rage', bold=True, italic=False), Span(text=' ', bold=False, italic=False), Span(text='twice', bold=False, italic=True))
    """
    cleaned = _BRACKETS.sub(r"\1", text)
    spans: list[Span] = []
    cursor = 0
    for match in _BOLD.finditer(cleaned):
        if match.start() > cursor:
            spans.extend(_split_italic(cleaned[cursor:match.start()], bold=False))
        spans.extend(_split_italic(match.group(1), bold=True))
        cursor = match.end()
    if cursor < len(cleaned):
        spans.extend(_split_italic(cleaned[cursor:], bold=False))
    return tuple(spans)


# =============================================================================
# Block parsing
# =============================================================================

_BOX_OPEN = re.compile(r"^\s*<!--\s*BOX\s*-->\s*(.*)$")
_BOX_CLOSE = re.compile(r"^(.*)<!--\s*/\s*BOX\s*-->\s*$")
_LEGACY_BOX_OPEN = re.compile(r"^\s*II(?=\s|$)\s*(.*)$")
_LEGACY_BOX_CLOSE = re.compile(r"^(.*?)\s*\|\|\s*$")
_CHECKBOX = re.compile(r"^\s*[-*]\s+\[([ xX])\]\s+(.*)$")
_BULLET = re.compile(r"^\s*[-*]\s+(.*)$")
_NUMBERED = re.compile(r"^\s*\d+[.)]\s+(.*)$")
_QUOTE = re.compile(r"^\s*>\s?(.*)$")
_HEADING = re.compile(r"^\s*(#{3,4})\s+(.*?)\s*#*\s*$")
_FULL_BOLD = re.compile(r"^\s*\*\*(.+?)\*\*\s*$")
_TABLE_ROW = re.compile(r"^\s*\|(.*)\|\s*$")
_TABLE_SEPARATOR = re.compile(r"^\s*\|?\s*:?-{2,}:?\s*(\|\s*:?-{2,}:?\s*)*\|?\s*$")
_LABELED = re.compile(r"^([\w'’ .\-/+()]+?)\s*:\s+(.*)$")


class MarkdownLiteParser:
    """Single-pass, line-oriented block tree builder.

    Consecutive list, quote and table lines are buffered and flushed as one
    block when a line of another kind (or a blank line) arrives. Box
    contents are collected until the closing marker and parsed recursively.
    """

    def parse(self, text: str) -> tuple[Block, ...]:
        """Parse markdown text into a tuple of blocks.

        Args:
            text: Markdown source.

        Returns:
            Top-level blocks in source order.
        """
        return _BlockBuilder(self).run(text or "")


@dataclass
class _BlockBuilder:
    parser: MarkdownLiteParser
    out: list[Block] = field(default_factory=list)
    bullets: list[ListItem] = field(default_factory=list)
    numbered: list[ListItem] = field(default_factory=list)
    checks: list[ListItem] = field(default_factory=list)
    quote: list[str] = field(default_factory=list)
    table: list[str] = field(default_factory=list)
    box: list[str] | None = None

    # -- buffers ------------------------------------------------------------

    def flush_lists(self, keep: BlockKind | None = None) -> None:
        if keep is not BlockKind.BULLET_LIST and self.bullets:
            self.out.append(Block(BlockKind.BULLET_LIST, items=tuple(self.bullets)))
            self.bullets = []
        if keep is not BlockKind.NUMBERED_LIST and self.numbered:
            self.out.append(Block(BlockKind.NUMBERED_LIST, items=tuple(self.numbered)))
            self.numbered = []
        if keep is not BlockKind.CHECKLIST and self.checks:
            self.out.append(Block(BlockKind.CHECKLIST, items=tuple(self.checks)))
            self.checks = []

    def flush_quote(self) -> None:
        if self.quote:
            joined = " ".join(self.quote).strip()
            self.out.append(Block(BlockKind.QUOTE, spans=parse_inline(joined)))
            self.quote = []

    def flush_table(self) -> None:
        if not self.table:
            return
        rows: list[tuple[Inline, ...]] = []
        for line in self.table:
            if _TABLE_SEPARATOR.match(line):
                continue
            match = _TABLE_ROW.match(line)
            inner = match.group(1) if match else line.strip().strip("|")
            rows.append(tuple(parse_inline(cell.strip()) for cell in inner.split("|")))
        self.out.append(Block(BlockKind.TABLE, rows=tuple(rows)))
        self.table = []

    def flush_all(self, keep: BlockKind | None = None) -> None:
        if keep is not BlockKind.QUOTE:
            self.flush_quote()
        if keep is not BlockKind.TABLE:
            self.flush_table()
        self.flush_lists(keep)

    def close_box(self) -> None:
        inner = "\n".join(self.box or [])
        self.box = None
        self.out.append(Block(BlockKind.BOX, children=self.parser.parse(inner)))

    # -- main loop ----------------------------------------------------------

    def run(self, text: str) -> tuple[Block, ...]:
        for raw in text.replace("\r\n", "\n").split("\n"):
            self.feed(raw)
        self.flush_all()
        if self.box is not None:
            self.close_box()
        return tuple(self.out)

    def feed(self, raw: str) -> None:
        if self.box is not None:
            self.feed_box(self.box, raw)
            return

        for opener in (_BOX_OPEN, _LEGACY_BOX_OPEN):
            match = opener.match(raw)
            if match:
                self.flush_all()
                self.box = []
                if match.group(1).strip():
                    self.feed_box(self.box, match.group(1))
                return

        match = _CHECKBOX.match(raw)
        if match:
            self.flush_all(keep=BlockKind.CHECKLIST)
            checked = match.group(1).lower() == "x"
            self.checks.append(ListItem(parse_inline(match.group(2)), checked=checked))
            return

        match = _BULLET.match(raw)
        if match:
            self.flush_all(keep=BlockKind.BULLET_LIST)
            self.bullets.append(ListItem(parse_inline(match.group(1))))
            return

        match = _NUMBERED.match(raw)
        if match:
            self.flush_all(keep=BlockKind.NUMBERED_LIST)
            self.numbered.append(ListItem(parse_inline(match.group(1))))
            return

        match = _QUOTE.match(raw)
        if match:
            self.flush_all(keep=BlockKind.QUOTE)
            self.quote.append(match.group(1))
            return

        if _TABLE_ROW.match(raw) or (self.table and _TABLE_SEPARATOR.match(raw)):
            self.flush_all(keep=BlockKind.TABLE)
            self.table.append(raw)
            return

        self.flush_all()

        if not raw.strip():
            self.out.append(Block(BlockKind.SPACER))
            return

        match = _HEADING.match(raw)
        if match:
            depth = len(match.group(1))
            self.out.append(Block(BlockKind.HEADING, spans=parse_inline(match.group(2)), depth=depth))
            return

        match = _FULL_BOLD.match(raw)
        if match:
            self.out.append(Block(BlockKind.SUBTITLE, spans=parse_inline(match.group(1))))
            return

        match = _LABELED.match(raw)
        if match:
            self.out.append(
                Block(
                    BlockKind.LABELED,
                    label=match.group(1).strip(),
                    spans=parse_inline(match.group(2)),
                )
            )
            return

        self.out.append(Block(BlockKind.PARAGRAPH, spans=parse_inline(raw.strip())))

    def feed_box(self, box: list[str], raw: str) -> None:
        for closer in (_BOX_CLOSE, _LEGACY_BOX_CLOSE):
            match = closer.match(raw)
            if match:
                if match.group(1).strip():
                    box.append(match.group(1))
                self.close_box()
                return
        box.append(raw)


__all__ = [
    "BlockKind",
    "Span",
    "ListItem",
    "Block",
    "parse_inline",
    "MarkdownLiteParser",
]
