"""Turn raw page content (HTML or Markdown) into a BeautifulSoup tree.

Markdown pages are rendered with Python-Markdown first. The ``toc``
extension gives every heading an ``id`` slug (``### Channel Object`` ->
``id="channel-object"``), which is what the segmenter and table extractor
key on, so rendered Markdown and server-rendered HTML look the same to the
engine.
"""

from __future__ import annotations

import markdown
from bs4 import BeautifulSoup

from specmine.exceptions import DocumentSourceError

FORMATS = ("auto", "html", "markdown")

MARKDOWN_EXTENSIONS = ["tables", "toc", "fenced_code"]

_MARKDOWN_SUFFIXES = (".md", ".markdown")
_HTML_SUFFIXES = (".html", ".htm")
_MARKDOWN_TYPES = ("text/markdown", "text/x-markdown")
_HTML_TYPES = ("text/html", "application/xhtml+xml")


def detect_format(content: str, hint: str = "") -> str:
    """Decide whether *content* is ``html`` or ``markdown``.

    Args:
        content: The raw page text.
        hint: A file name, URL, content type, or explicit format. An
            explicit format wins, then the suffix of the name or URL path
            (query and fragment ignored), then the media type. The content
            itself is only sniffed when the hint is inconclusive.

    Returns:
        ``"html"`` or ``"markdown"``.
    """
    lowered = hint.strip().lower()
    if lowered in ("html", "markdown"):
        return lowered
    path = lowered.split("#", 1)[0].split("?", 1)[0]
    if path.endswith(_MARKDOWN_SUFFIXES):
        return "markdown"
    if path.endswith(_HTML_SUFFIXES):
        return "html"
    media_type = lowered.split(";", 1)[0].strip()
    if media_type in _MARKDOWN_TYPES:
        return "markdown"
    if media_type in _HTML_TYPES:
        return "html"
    if content.lstrip().startswith("<"):
        return "html"
    return "markdown"


def render_markdown(content: str) -> str:
    """Render Markdown to HTML with tables, heading ids, and fenced code."""
    return markdown.markdown(content, extensions=MARKDOWN_EXTENSIONS)


def parse_document(content: str, fmt: str = "auto", hint: str = "") -> BeautifulSoup:
    """Parse page content into a tree.

    Args:
        content: Raw page text.
        fmt: ``html``, ``markdown``, or ``auto`` to detect from *hint* and
            the content.
        hint: Passed to :func:`detect_format` when *fmt* is ``auto``.

    Raises:
        DocumentSourceError: If *fmt* is unknown or *content* is empty.
    """
    if fmt not in FORMATS:
        raise DocumentSourceError(f"Unknown document format: {fmt}")
    if not content.strip():
        raise DocumentSourceError(f"Empty document{f' ({hint})' if hint else ''}")

    resolved = detect_format(content, hint) if fmt == "auto" else fmt
    html = render_markdown(content) if resolved == "markdown" else content
    return BeautifulSoup(html, "html.parser")
