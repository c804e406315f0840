"""Disk-based caching of fetched documentation pages.

Uses :mod:`diskcache` to persist page bodies on the filesystem with a
configurable time-to-live (TTL). The assembler reads every page twice (a
model pass, then an operation pass) and repeated builds usually read the
same pages again, so the HTTP source consults this cache before going to
the network.

Cache keys are SHA-256 hashes of the page URL.

See Also:
    :class:`~specmine.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``ttl_seconds``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Optional

import diskcache

from specmine.models import CacheConfig


class DocumentCache:
    """Disk-backed cache of page bodies.

    Stores dicts with ``content`` (the page text) and ``content_type`` in a
    :class:`diskcache.Cache` directory. Entries expire after
    :attr:`~specmine.models.CacheConfig.ttl_seconds`.

    Args:
        cache_dir: Root directory for the cache. A ``pages/`` subdirectory
            is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        from specmine.cache import DocumentCache
        from specmine.models import CacheConfig

        cache = DocumentCache("/tmp/specmine-cache", CacheConfig())
        cache.set("https://example.com/docs/resources/channel", "<h2>...</h2>", "text/html")
        hit = cache.get("https://example.com/docs/resources/channel")
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "pages"))

    @property
    def enabled(self) -> bool:
        """Whether the cache stores and serves entries."""
        return self._cache is not None

    def get(self, url: str) -> Optional[dict[str, str]]:
        """Look up a cached page.

        Returns:
            A ``dict`` with ``content`` and ``content_type`` on a hit, or
            ``None`` on a miss or when caching is disabled.
        """
        if self._cache is None:
            return None
        return self._cache.get(self._make_key(url))

    def set(self, url: str, content: str, content_type: str = "") -> None:
        """Store a page body. Silently ignored when caching is disabled."""
        if self._cache is None:
            return
        self._cache.set(
            self._make_key(url),
            {"content": content, "content_type": content_type},
            expire=self._config.ttl_seconds,
        )

    def invalidate(self, url: str) -> None:
        """Remove the entry for *url*."""
        if self._cache is None:
            return
        self._cache.delete(self._make_key(url))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (number of entries), ``directory`` (str path), and
            ``ttl_seconds`` (int).
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "pages"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()

    def _make_key(self, url: str) -> str:
        return hashlib.sha256(url.encode()).hexdigest()
