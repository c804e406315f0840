"""The interface the extraction engine uses to obtain parsed pages."""

from __future__ import annotations

from abc import ABC, abstractmethod

from bs4 import BeautifulSoup

from specmine.models import DocumentRef


class DocumentSource(ABC):
    """Supplies a parsed, queryable tree for a documentation page.

    Implementations may hit the network, a cache, or the local filesystem.
    They signal any failure by raising
    :class:`~specmine.exceptions.DocumentSourceError`; the assembler logs
    it and moves on to the next page.
    """

    @abstractmethod
    async def get_document(self, ref: DocumentRef) -> BeautifulSoup:
        """Return the parsed page for *ref*.

        Raises:
            DocumentSourceError: If the page cannot be retrieved or parsed.
        """

    async def aclose(self) -> None:
        """Release resources held by the source. The default does nothing."""

    async def __aenter__(self) -> DocumentSource:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
