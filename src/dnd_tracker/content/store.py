"""Content stores: where class rule documents come from.

A content store answers one question: given a relative path such as
``Rôdeur/README.md``, what is the text at that path, or is it absent?
``None`` means not found. Transport failures raise ContentFetchError and
are turned into not-found diagnostics by the fetcher.

Example:
    >>> store = InMemoryContentStore({"Barde/README.md": "# Barde"})
    >>> store.fetch_text("Barde/README.md")
    '# Barde'
    >>> store.fetch_text("Barde/index.md") is None
    True
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import quote

import requests
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from dnd_tracker.core.config import ContentSettings, get_settings
from dnd_tracker.core.exceptions import ConfigurationError, ContentFetchError
from dnd_tracker.core.logging import get_logger


logger = get_logger(__name__)

_TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)


@runtime_checkable
class ContentStore(Protocol):
    """Anything that can return the text stored at a relative path."""

    def fetch_text(self, path: str) -> str | None:
        """Return the text at ``path``, or None when it does not exist.

        Raises:
            ContentFetchError: If the backend failed to answer.
        """
        ...


# =============================================================================
# HTTP
# =============================================================================


class HttpContentStore:
    """Fetches documents from a raw-file HTTP host such as GitHub.

    Each path segment is percent-encoded on its own so folder names with
    spaces, accents and dashes survive; the base URL is used as given.
    Connection errors and timeouts are retried with exponential backoff.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        max_retries: int = 2,
        session: requests.Session | None = None,
        wait: wait_base | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: Root URL of the content repository.
            timeout: Per-request timeout in seconds.
            max_retries: Extra attempts after a transient failure.
            session: Optional session to reuse (e.g., a mocked one).
            wait: Backoff strategy between attempts.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self.session.headers.update({"Cache-Control": "no-cache"})
        self._wait = wait or wait_exponential(multiplier=1, min=2, max=10)

    def url_for(self, path: str) -> str:
        """Build the absolute URL of a relative content path."""
        segments = [quote(segment, safe="!'()*") for segment in path.split("/") if segment]
        return "/".join([self.base_url, *segments])

    def fetch_text(self, path: str) -> str | None:
        """Fetch a document over HTTP.

        Args:
            path: Relative content path.

        Returns:
            Response text, or None on 404.

        Raises:
            ContentFetchError: On repeated transport failures or an
                unexpected HTTP status.
        """
        url = self.url_for(path)

        @retry(
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self._wait,
        )
        def _get() -> requests.Response:
            return self.session.get(url, timeout=self.timeout)

        logger.debug("Fetching content", path=path, url=url)
        try:
            response = _get()
        except RetryError as exc:
            raise ContentFetchError(
                f"Content host unreachable after {self.max_retries + 1} attempts",
                path=path,
                details={"url": url},
            ) from exc
        except requests.RequestException as exc:
            raise ContentFetchError(f"Content request failed: {exc}", path=path, details={"url": url}) from exc

        if response.status_code == 404:
            return None
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise ContentFetchError(
                f"Unexpected HTTP status {response.status_code}",
                path=path,
                details={"url": url, "status_code": response.status_code},
            ) from exc

        response.encoding = response.encoding or "utf-8"
        return response.text


# =============================================================================
# Filesystem
# =============================================================================


class FileSystemContentStore:
    """Reads UTF-8 documents from a local checkout of the content repository."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    def fetch_text(self, path: str) -> str | None:
        """Read a document below the root directory.

        Paths escaping the root are treated as not found.

        Raises:
            ContentFetchError: If the file exists but cannot be read.
        """
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root):
            logger.warning("Rejected content path outside root", path=path)
            return None
        if not target.is_file():
            return None
        try:
            return target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ContentFetchError(f"Failed to read content file: {exc}", path=path) from exc


# =============================================================================
# In-memory
# =============================================================================


class InMemoryContentStore:
    """Dictionary-backed store that records every attempted path.

    Attributes:
        documents: Path -> text.
        attempts: Paths requested, in call order.
    """

    def __init__(self, documents: Mapping[str, str] | None = None) -> None:
        self.documents: dict[str, str] = dict(documents or {})
        self.attempts: list[str] = []

    def add(self, path: str, text: str) -> None:
        """Register a document."""
        self.documents[path] = text

    def fetch_text(self, path: str) -> str | None:
        self.attempts.append(path)
        return self.documents.get(path)


def build_content_store(settings: ContentSettings | None = None) -> ContentStore:
    """Build the content store selected by configuration.

    Args:
        settings: Content settings, defaults to the application settings.

    Returns:
        A ready-to-use content store.

    Raises:
        ConfigurationError: If the filesystem backend has no root directory.
    """
    settings = settings or get_settings().content

    if settings.backend == "filesystem":
        if settings.local_root is None:
            raise ConfigurationError(
                "Filesystem content backend requires a local_root",
                config_key="local_root",
            )
        store: ContentStore = FileSystemContentStore(settings.local_root)
    elif settings.backend == "memory":
        store = InMemoryContentStore()
    else:
        store = HttpContentStore(
            settings.base_url,
            timeout=settings.timeout_seconds,
            max_retries=settings.max_retries,
        )

    logger.info("Content store ready", backend=settings.backend)
    return store


__all__ = [
    "ContentStore",
    "HttpContentStore",
    "FileSystemContentStore",
    "InMemoryContentStore",
    "build_content_store",
]
