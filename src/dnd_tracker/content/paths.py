"""Candidate content paths for class and subclass documents.

Layout of the content repository::

    <Class>/README.md | index.md | <Class>.md
    <Class>/Subclasses/Sous-classe - <Subclass>.md
    <Class>/Subclasses/<Subclass>.md
    <Class>/Subclasses/<Subclass folder>/README.md | index.md | <Subclass>.md

Folder and file names are not consistent across the repository (dash
style, capitalization), so every plausible spelling is listed in the
order it should be tried.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from dnd_tracker.core.constants import (
    DASH_VARIANTS,
    INDEX_FILENAMES,
    SUBCLASS_FOLDER,
    SUBCLASS_PREFIX,
)
from dnd_tracker.names.resolver import title_case


def _dedupe(paths: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(paths))


class ContentPathBuilder:
    """Builds ordered, deduplicated candidate paths from name spellings."""

    @staticmethod
    def class_paths(class_names: Sequence[str]) -> tuple[str, ...]:
        """Candidate paths of the main class document.

        Args:
            class_names: Class spellings in priority order.

        Returns:
            For each spelling: index documents first, then ``<C>.md`` and
            its title-cased form.
        """
        paths: list[str] = []
        for name in class_names:
            files = [*INDEX_FILENAMES, f"{name}.md", f"{title_case(name)}.md"]
            paths.extend(f"{name}/{filename}" for filename in files)
        return _dedupe(paths)

    @staticmethod
    def subclass_stems(subclass_name: str) -> list[str]:
        """File or folder stems a subclass may be stored under."""
        base = subclass_name
        titled = title_case(subclass_name)
        stems = [
            f"{SUBCLASS_PREFIX} {dash} {spelling}"
            for dash in DASH_VARIANTS
            for spelling in (base, titled)
        ]
        stems.extend([base, titled])
        return list(dict.fromkeys(stems))

    @classmethod
    def subclass_paths(
        cls,
        class_names: Sequence[str],
        subclass_names: Sequence[str],
        limit: int | None = None,
    ) -> tuple[str, ...]:
        """Candidate paths of a subclass document.

        For each class spelling and each subclass spelling, direct files in
        ``<C>/Subclasses/`` are listed before folder layouts.

        Args:
            class_names: Class spellings in priority order.
            subclass_names: Subclass spellings in priority order.
            limit: Keep at most this many paths, highest priority first.

        Returns:
            Ordered, deduplicated candidate paths.
        """
        paths: list[str] = []
        for class_name in class_names:
            root = f"{class_name}/{SUBCLASS_FOLDER}"
            for subclass_name in subclass_names:
                stems = cls.subclass_stems(subclass_name)
                paths.extend(f"{root}/{stem}.md" for stem in stems)

                inner = [
                    *INDEX_FILENAMES,
                    f"{subclass_name}.md",
                    f"{title_case(subclass_name)}.md",
                ]
                for stem in stems:
                    paths.extend(f"{root}/{stem}/{filename}" for filename in inner)

        unique = _dedupe(paths)
        return unique if limit is None else unique[:limit]


__all__ = ["ContentPathBuilder"]
