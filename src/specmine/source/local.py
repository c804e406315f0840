"""Read documentation pages from a local directory.

Useful for offline builds against a checkout of the documentation
repository, and for tests. For a page ``resources/channel`` the source
looks for, in order::

    <root>/resources/channel.html
    <root>/resources/channel.htm
    <root>/resources/channel.md
    <root>/channel.html
    <root>/channel.htm
    <root>/channel.md

Lookups are case-insensitive on the file stem, since documentation
repositories often name pages ``Channel.md``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup

from specmine.exceptions import DocumentSourceError
from specmine.models import DocumentRef
from specmine.source.base import DocumentSource
from specmine.source.render import parse_document

PAGE_SUFFIXES = (".html", ".htm", ".md")


class DirectoryDocumentSource(DocumentSource):
    """Documentation pages stored as files under *root*.

    Args:
        root: Directory holding the pages.
        document_format: ``auto`` (decided by file suffix), ``html``, or
            ``markdown``.
    """

    def __init__(self, root: str | Path, document_format: str = "auto") -> None:
        self._root = Path(root).expanduser()
        self._format = document_format

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, ref: DocumentRef) -> Optional[Path]:
        """Return the file backing *ref*, or ``None`` when there is none."""
        for directory in (self._root / ref.section, self._root):
            if not directory.is_dir():
                continue
            candidates = {p.name.lower(): p for p in directory.iterdir() if p.is_file()}
            for suffix in PAGE_SUFFIXES:
                match = candidates.get(f"{ref.name.lower()}{suffix}")
                if match is not None:
                    return match
        return None

    async def get_document(self, ref: DocumentRef) -> BeautifulSoup:
        path = self.path_for(ref)
        if path is None:
            raise DocumentSourceError(f"No page for {ref.path} under {self._root}")
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DocumentSourceError(f"Failed to read page {path}: {exc}") from exc
        return parse_document(content, self._format, hint=path.name)
