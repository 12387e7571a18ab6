"""Class and subclass name canonicalization and spelling variants.

Player-entered class names come in several locales and spellings
("Rôdeur", "rodeur", "Ranger", "Rôdeur (Hunter)"). The resolver maps them
to a canonical ClassId and produces the ordered list of spellings the
content fetcher should try, without ever raising.

Example:
    >>> from dnd_tracker.names.resolver import canonicalize_class, class_candidates
    >>> canonicalize_class("ranger")
    <ClassId.RANGER: 'Rôdeur'>
    >>> class_candidates("Rodeur")[:2]
    ['Rodeur', 'Rôdeur']
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping
from functools import lru_cache

from dnd_tracker.core.logging import get_logger
from dnd_tracker.models.enums import ClassId
from dnd_tracker.names.aliases import CLASS_ALIASES, CLASS_IDS, SUBCLASS_ALIASES


logger = get_logger(__name__)

_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s{2,}")
_WORD_SEPARATORS = re.compile(r"([\s\-’']+)")
_LIGATURES = str.maketrans({"œ": "oe", "Œ": "Oe", "æ": "ae", "Æ": "Ae"})


# =============================================================================
# Text helpers
# =============================================================================


def strip_diacritics(text: str) -> str:
    """Remove combining accents ("Rôdeur" -> "Rodeur")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def strip_parentheticals(text: str) -> str:
    """Drop parenthesized asides ("Rôdeur (Ranger)" -> "Rôdeur")."""
    return _WHITESPACE.sub(" ", _PARENTHETICAL.sub(" ", text)).strip()


def title_case(text: str) -> str:
    """Capitalize each word, keeping spaces, hyphens and apostrophes as-is.

    Example:
        >>> title_case("credo de la paume")
        'Credo De La Paume'
    """
    parts = _WORD_SEPARATORS.split(text.lower())
    return "".join(
        part if _WORD_SEPARATORS.fullmatch(part) else part[:1].upper() + part[1:]
        for part in parts
    )


def sentence_case(text: str) -> str:
    """Lowercase everything but the first character."""
    lowered = text.strip().lower()
    return lowered[:1].upper() + lowered[1:]


def normalize_key(name: str) -> str:
    """Normalize a name into an alias table key.

    Trims, lowercases, strips diacritics, drops parentheticals and
    collapses every run of non-alphanumerics into a single space.

    Args:
        name: Free-form class or subclass name.

    Returns:
        The normalized key, possibly empty.

    Example:
        >>> normalize_key("  Voie de l’Arbre-Monde (2024) ")
        'voie de l arbre monde'
    """
    text = strip_diacritics(name.translate(_LIGATURES).strip().lower())
    text = _PARENTHETICAL.sub(" ", text)
    return _NON_ALNUM.sub(" ", text).strip()


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# =============================================================================
# Resolver
# =============================================================================


class NameResolver:
    """Canonicalizes class/subclass names and lists their spelling variants.

    Every registered alias is indexed by its normalized key, so any known
    spelling of a class leads to the same ClassId and the same alias list.
    """

    def __init__(
        self,
        *,
        class_ids: Mapping[str, ClassId] = CLASS_IDS,
        class_aliases: Mapping[str, tuple[str, ...]] = CLASS_ALIASES,
        subclass_aliases: Mapping[str, tuple[str, ...]] = SUBCLASS_ALIASES,
    ) -> None:
        self._class_aliases = dict(class_aliases)
        self._subclass_aliases = dict(subclass_aliases)

        self._class_index: dict[str, str] = {}
        self._class_ids: dict[str, ClassId] = {}
        for key, class_id in class_ids.items():
            self._class_index[key] = key
            self._class_ids[key] = class_id
            for alias in self._class_aliases.get(key, ()):
                self._class_index.setdefault(normalize_key(alias), key)

        self._subclass_index: dict[str, str] = {}
        for key, spellings in self._subclass_aliases.items():
            self._subclass_index[key] = key
            for alias in spellings:
                self._subclass_index.setdefault(normalize_key(alias), key)

    # -------------------------------------------------------------------------
    # Candidates
    # -------------------------------------------------------------------------

    @staticmethod
    def candidates(name: str, aliases: Iterable[str] = ()) -> list[str]:
        """List spelling variants of a name in priority order.

        Order: raw (trimmed), diacritic-stripped, parenthetical-stripped,
        title-cased, sentence-cased, then the given aliases. Empty strings
        and duplicates are dropped.

        Args:
            name: Free-form name.
            aliases: Registered alias spellings appended last.

        Returns:
            Ordered, deduplicated spellings.
        """
        raw = (name or "").strip()
        return _unique(
            [
                raw,
                strip_diacritics(raw),
                strip_parentheticals(raw),
                title_case(raw),
                sentence_case(raw),
                *aliases,
            ]
        )

    def class_candidates(self, name: str) -> list[str]:
        """Spellings of a class name, registered aliases last."""
        key = self._class_index.get(normalize_key(name or ""))
        aliases = self._class_aliases.get(key, ()) if key else ()
        return self.candidates(name, aliases)

    def subclass_candidates(self, name: str) -> list[str]:
        """Spellings of a subclass name, registered aliases last."""
        key = self._subclass_index.get(normalize_key(name or ""))
        aliases = self._subclass_aliases.get(key, ()) if key else ()
        return self.candidates(name, aliases)

    # -------------------------------------------------------------------------
    # Canonicalization
    # -------------------------------------------------------------------------

    def resolve_class(self, name: str) -> ClassId | None:
        """Map a class name to its ClassId, or None when unknown."""
        key = self._class_index.get(normalize_key(name or ""))
        return self._class_ids.get(key) if key else None

    def canonicalize_class(self, name: str) -> ClassId | str:
        """Map a class name to its canonical key.

        Unknown names fall back to a title-cased pass-through.

        Args:
            name: Free-form class name.

        Returns:
            The ClassId, or the title-cased input for unknown classes.
        """
        class_id = self.resolve_class(name)
        if class_id is not None:
            return class_id
        fallback = title_case((name or "").strip())
        if fallback:
            logger.debug("Unknown class name", class_name=name, fallback=fallback)
        return fallback

    def canonicalize_subclass(self, name: str) -> str:
        """Map a subclass name to its canonical spelling.

        Unknown subclasses keep their trimmed raw name.
        """
        key = self._subclass_index.get(normalize_key(name or ""))
        if key is None:
            return (name or "").strip()
        return self._subclass_aliases[key][0]


@lru_cache(maxsize=1)
def get_name_resolver() -> NameResolver:
    """Get the resolver built from the static alias tables."""
    return NameResolver()


def candidates(name: str) -> list[str]:
    """Spelling variants of a name without alias expansion."""
    return NameResolver.candidates(name)


def class_candidates(name: str) -> list[str]:
    """Spellings of a class name, registered aliases last."""
    return get_name_resolver().class_candidates(name)


def subclass_candidates(name: str) -> list[str]:
    """Spellings of a subclass name, registered aliases last."""
    return get_name_resolver().subclass_candidates(name)


def canonicalize_class(name: str) -> ClassId | str:
    """Map a class name to its ClassId, or a title-cased pass-through."""
    return get_name_resolver().canonicalize_class(name)


def resolve_class(name: str) -> ClassId | None:
    """Map a class name to its ClassId, or None when unknown."""
    return get_name_resolver().resolve_class(name)


def canonicalize_subclass(name: str) -> str:
    """Map a subclass name to its canonical spelling."""
    return get_name_resolver().canonicalize_subclass(name)


__all__ = [
    "NameResolver",
    "get_name_resolver",
    "normalize_key",
    "strip_diacritics",
    "strip_parentheticals",
    "title_case",
    "sentence_case",
    "candidates",
    "class_candidates",
    "subclass_candidates",
    "canonicalize_class",
    "resolve_class",
    "canonicalize_subclass",
]
