"""Class and subclass name resolution.

Exports:
    NameResolver: Alias-aware canonicalizer.
    normalize_key: Alias table key normalization.
    canonicalize_class / resolve_class / canonicalize_subclass.
    class_candidates / subclass_candidates: Ordered spelling variants.
"""

from __future__ import annotations

from dnd_tracker.names.resolver import (
    NameResolver,
    canonicalize_class,
    canonicalize_subclass,
    candidates,
    class_candidates,
    get_name_resolver,
    normalize_key,
    resolve_class,
    subclass_candidates,
)


__all__ = [
    "NameResolver",
    "get_name_resolver",
    "normalize_key",
    "candidates",
    "class_candidates",
    "subclass_candidates",
    "canonicalize_class",
    "resolve_class",
    "canonicalize_subclass",
]
