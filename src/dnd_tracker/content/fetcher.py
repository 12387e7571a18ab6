"""Priority-ordered fetching of candidate content paths.

The fetcher owns only the order in which candidates are tried; the store
owns transport. The first path that returns text wins, and in parallel
mode the earliest-listed success still wins even when a later candidate
answers first.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Hashable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from dnd_tracker.content.store import ContentStore
from dnd_tracker.core.exceptions import ContentError
from dnd_tracker.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """A candidate path that resolved, with its text."""

    path: str
    text: str


class ContentFetcher:
    """Tries candidate paths against a store in strict priority order.

    Attributes:
        store: The content store queried.
        parallel: Fetch up to ``max_workers`` candidates concurrently.
        max_workers: Thread pool size in parallel mode.
    """

    def __init__(
        self,
        store: ContentStore,
        *,
        parallel: bool = False,
        max_workers: int = 4,
    ) -> None:
        self.store = store
        self.parallel = parallel
        self.max_workers = max(1, max_workers)

    def _try(self, path: str) -> str | None:
        """Fetch one path, treating store failures as not found."""
        try:
            text = self.store.fetch_text(path)
        except ContentError as exc:
            logger.warning("Content fetch failed", path=path, error=exc.message)
            return None
        if text is not None and not text.strip():
            return None
        return text

    def fetch_first(self, paths: Sequence[str]) -> FetchResult | None:
        """Return the first candidate path holding non-empty text.

        Args:
            paths: Candidate paths, highest priority first.

        Returns:
            The winning path and its text, or None if nothing resolved.
        """
        if self.parallel and len(paths) > 1:
            return self._fetch_first_parallel(paths)

        for path in paths:
            logger.debug("Trying content path", path=path)
            text = self._try(path)
            if text is not None:
                logger.debug("Content path resolved", path=path)
                return FetchResult(path=path, text=text)
        return None

    def _fetch_first_parallel(self, paths: Sequence[str]) -> FetchResult | None:
        """Fetch in windows of ``max_workers`` paths.

        Within a window every earlier candidate is awaited before a later
        one is accepted, so the result matches sequential mode.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for start in range(0, len(paths), self.max_workers):
                window = paths[start:start + self.max_workers]
                futures: list[Future[str | None]] = [
                    executor.submit(self._try, path) for path in window
                ]
                for index, (path, future) in enumerate(zip(window, futures)):
                    text = future.result()
                    if text is not None:
                        for pending in futures[index + 1:]:
                            pending.cancel()
                        logger.debug("Content path resolved", path=path, parallel=True)
                        return FetchResult(path=path, text=text)
        return None


# =============================================================================
# Latest request wins
# =============================================================================


@dataclass(frozen=True)
class RequestTicket:
    """Identifies one resolution request within a scope."""

    scope: Hashable
    serial: int


class RequestGuard:
    """Discards results of requests superseded by a newer one.

    Issue a ticket when a request starts; when its result arrives, keep it
    only if the ticket is still the latest for its scope. Nothing is
    cancelled, stale results are simply dropped.

    Example:
        >>> guard = RequestGuard()
        >>> first = guard.issue("character-1")
        >>> second = guard.issue("character-1")
        >>> guard.is_current(first), guard.is_current(second)
        (False, True)
    """

    def __init__(self) -> None:
        self._serials = itertools.count(1)
        self._latest: dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def issue(self, scope: Hashable) -> RequestTicket:
        """Start a request, superseding any in flight for ``scope``."""
        with self._lock:
            serial = next(self._serials)
            self._latest[scope] = serial
        return RequestTicket(scope=scope, serial=serial)

    def is_current(self, ticket: RequestTicket) -> bool:
        """Whether no newer request was issued for the ticket's scope."""
        with self._lock:
            return self._latest.get(ticket.scope) == ticket.serial


__all__ = [
    "FetchResult",
    "ContentFetcher",
    "RequestTicket",
    "RequestGuard",
]
