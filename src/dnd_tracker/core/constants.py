"""Application-wide constants for the character tracker core.

D&D 5E rules bounds used by the lookups, plus content layout names shared
by the path builder and the parser.
"""

from __future__ import annotations

# =============================================================================
# D&D 5E Rules Constants
# =============================================================================

MAX_CHARACTER_LEVEL = 20
"""Maximum character level in D&D 5E."""

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""

UNLEVELED_SECTION = 0
"""Level given to rule sections that carry no level tag."""

MAX_SPELL_LEVEL = 9
"""Highest spell slot level."""

# =============================================================================
# Content Layout
# =============================================================================

SUBCLASS_FOLDER = "Subclasses"
"""Folder holding subclass documents inside a class folder."""

SUBCLASS_PREFIX = "Sous-classe"
"""Prefix used by subclass document names in the content repository."""

INDEX_FILENAMES = ("README.md", "index.md")
"""Folder index documents, tried before name-based documents."""

DASH_VARIANTS = ("-", "–", "—")
"""Hyphen, en dash and em dash, in the order they are tried."""


__all__ = [
    "MAX_CHARACTER_LEVEL",
    "MIN_CHARACTER_LEVEL",
    "UNLEVELED_SECTION",
    "MAX_SPELL_LEVEL",
    "SUBCLASS_FOLDER",
    "SUBCLASS_PREFIX",
    "INDEX_FILENAMES",
    "DASH_VARIANTS",
]
