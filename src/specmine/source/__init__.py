"""Document sources -- where parsed documentation pages come from.

The extraction engine only needs something that turns a
:class:`~specmine.models.DocumentRef` into a BeautifulSoup tree. This
sub-package provides that interface and two implementations:

* :class:`~specmine.source.http.HttpDocumentSource` -- fetch pages from the
  documentation site with httpx, cached on disk.
* :class:`~specmine.source.local.DirectoryDocumentSource` -- read HTML or
  Markdown files from a local directory.

:func:`create_source` picks one from the resolved configuration.
"""

from __future__ import annotations

from typing import Optional

from specmine.cache import DocumentCache
from specmine.models import GlobalConfig
from specmine.source.base import DocumentSource
from specmine.source.http import HttpDocumentSource
from specmine.source.local import DirectoryDocumentSource
from specmine.source.render import detect_format, parse_document


def create_source(config: GlobalConfig, cache: Optional[DocumentCache] = None) -> DocumentSource:
    """Build the document source described by *config*.

    A configured ``source`` directory wins over HTTP fetching; the cache is
    only used for HTTP.
    """
    if config.source:
        return DirectoryDocumentSource(config.source, config.document_format)
    return HttpDocumentSource(
        docs_url=config.docs_url,
        url_template=config.url_template,
        request=config.request,
        cache=cache,
        document_format=config.document_format,
    )


__all__ = [
    "DocumentSource",
    "HttpDocumentSource",
    "DirectoryDocumentSource",
    "create_source",
    "detect_format",
    "parse_document",
]
