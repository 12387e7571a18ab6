"""Rule content lookup: stores, candidate paths, fetching and resolution.

Exports:
    ContentStore: Protocol of text sources.
    HttpContentStore / FileSystemContentStore / InMemoryContentStore.
    build_content_store: Store factory driven by settings.
    ContentPathBuilder: Candidate document paths.
    ContentFetcher / FetchResult: Priority-ordered fetching.
    RequestGuard / RequestTicket: Latest-request-wins guard.
    SectionResolver / SectionResolution: Name to visible sections.
"""

from __future__ import annotations

from dnd_tracker.content.fetcher import ContentFetcher, FetchResult, RequestGuard, RequestTicket
from dnd_tracker.content.paths import ContentPathBuilder
from dnd_tracker.content.resolver import SectionResolution, SectionResolver
from dnd_tracker.content.store import (
    ContentStore,
    FileSystemContentStore,
    HttpContentStore,
    InMemoryContentStore,
    build_content_store,
)


__all__ = [
    "ContentStore",
    "HttpContentStore",
    "FileSystemContentStore",
    "InMemoryContentStore",
    "build_content_store",
    "ContentPathBuilder",
    "ContentFetcher",
    "FetchResult",
    "RequestGuard",
    "RequestTicket",
    "SectionResolver",
    "SectionResolution",
]
