"""Fetch documentation pages over HTTP with :class:`httpx.AsyncClient`.

:class:`HttpDocumentSource` resolves a :class:`~specmine.models.DocumentRef`
to a URL, serves it from the :class:`~specmine.cache.DocumentCache` when
possible, and otherwise fetches it with retry and exponential backoff.
Every failure surfaces as :class:`~specmine.exceptions.DocumentSourceError`
so the assembler can drop the page and continue.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from specmine.cache import DocumentCache
from specmine.exceptions import DocumentSourceError
from specmine.models import DocumentRef, RequestConfig
from specmine.source.base import DocumentSource
from specmine.source.render import parse_document

logger = logging.getLogger(__name__)

DEFAULT_URL_TEMPLATE = "{docs_url}/{section}/{name}"


class HttpDocumentSource(DocumentSource):
    """Documentation pages fetched from the documentation site.

    Must be used as an async context manager (or closed with
    :meth:`aclose`) so the underlying :class:`httpx.AsyncClient` is
    released.

    Args:
        docs_url: Root of the documentation site.
        url_template: Page URL template; ``{docs_url}``, ``{section}`` and
            ``{name}`` are substituted. Defaults to
            ``{docs_url}/{section}/{name}``.
        request: Timeout, SSL, retry, and User-Agent settings.
        cache: Optional page cache consulted before the network.
        document_format: ``auto``, ``html``, or ``markdown``.
        transport: Optional httpx transport (tests pass a
            :class:`httpx.MockTransport`).
        backoff: Base delay in seconds between retries; doubles each
            attempt.

    Example::

        async with HttpDocumentSource("https://discord.com/developers/docs") as source:
            page = await source.get_document(DocumentRef(name="channel"))
    """

    def __init__(
        self,
        docs_url: str,
        url_template: Optional[str] = None,
        request: Optional[RequestConfig] = None,
        cache: Optional[DocumentCache] = None,
        document_format: str = "auto",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        backoff: float = 1.0,
    ) -> None:
        self._docs_url = docs_url.rstrip("/")
        self._url_template = url_template or DEFAULT_URL_TEMPLATE
        self._request = request or RequestConfig()
        self._cache = cache
        self._format = document_format
        self._transport = transport
        self._backoff = backoff
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpDocumentSource:
        self._ensure_client()
        return self

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # DocumentSource
    # ------------------------------------------------------------------ #

    def url_for(self, ref: DocumentRef) -> str:
        """Resolve *ref* to its page URL."""
        return self._url_template.format(
            docs_url=self._docs_url, section=ref.section, name=ref.name
        )

    async def get_document(self, ref: DocumentRef) -> BeautifulSoup:
        url = self.url_for(ref)
        content, content_type = await self.fetch(url)
        return parse_document(content, self._format, hint=content_type or url)

    async def fetch(self, url: str) -> tuple[str, str]:
        """Return ``(body, content_type)`` for *url*, from cache or network.

        Raises:
            DocumentSourceError: On HTTP error status, or connection errors
                after all retries.
        """
        if self._cache is not None:
            hit = self._cache.get(url)
            if hit is not None:
                logger.debug("Cache hit for %s", url)
                return hit["content"], hit.get("content_type", "")

        response = await self._get_with_retry(url)
        if response.status_code >= 400:
            raise DocumentSourceError(f"HTTP {response.status_code} fetching {url}")

        content_type = response.headers.get("content-type", "")
        if self._cache is not None:
            self._cache.set(url, response.text, content_type)
        return response.text, content_type

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._request.timeout,
                verify=self._request.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self._request.user_agent},
                transport=self._transport,
            )
        return self._client

    async def _get_with_retry(self, url: str) -> httpx.Response:
        """GET *url*, retrying 5xx responses and network errors.

        Retries up to ``max_retries`` times using :func:`asyncio.sleep`
        between attempts. The delay doubles each attempt.
        """
        client = self._ensure_client()
        max_retries = self._request.max_retries

        for attempt in range(max_retries + 1):
            delay = self._backoff * (2 ** attempt)
            try:
                response = await client.get(url)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    logger.debug(
                        "Connection error for %s: %s, retrying in %ss (attempt %d/%d)",
                        url, exc, delay, attempt + 1, max_retries,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise DocumentSourceError(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                logger.debug(
                    "Server error %d for %s, retrying in %ss (attempt %d/%d)",
                    response.status_code, url, delay, attempt + 1, max_retries,
                )
                await asyncio.sleep(delay)
                continue
            return response

        raise DocumentSourceError(f"Request failed after all retries: {url}")  # pragma: no cover
