"""Disk-based page caching for specmine.

This package provides :class:`DocumentCache`, which stores fetched
documentation pages on disk using :mod:`diskcache`. Entries are keyed by
page URL with a configurable TTL.

The cache is consumed by :class:`~specmine.source.http.HttpDocumentSource`
and is controlled by the ``cache`` section of the configuration
(:class:`~specmine.models.CacheConfig`).
"""

from specmine.cache.cache import DocumentCache

__all__ = ["DocumentCache"]
