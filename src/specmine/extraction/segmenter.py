"""Split a documentation page into operation and model sections.

A page is a flat run of headings, paragraphs, and tables. A *section*
starts at a heading that matches a start predicate and runs over the
heading's following siblings up to, but excluding, the next sibling that
matches a stop predicate. The siblings are copied into a detached ``<div>``
fragment so that builders can query it freely without touching (or
moving nodes out of) the source tree, which is read twice per build.

Sections are yielded in document order; the assembler relies on that to
resolve key collisions as last-wins.

Conventions (one canonical layout, shared by raw HTML pages and Markdown
rendered with heading ids):

* operation heading -- ``h2``/``h3`` whose text matches
  ``<name> % <METHOD>[/<METHOD>...] <url>``;
* model heading -- ``h2``/``h3`` whose ``id`` ends with ``-object`` or whose
  text ends with the word "Object";
* a section ends at the next heading of the same or a higher rank.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Callable, Iterator

from bs4 import BeautifulSoup, NavigableString, Tag

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
SECTION_TAGS = ("h2", "h3")

OPERATION_HEADER_RE = re.compile(
    r"^\s*(?P<name>.+?)\s+%\s+(?P<methods>[A-Za-z]+(?:\s*/\s*[A-Za-z]+)*)\s+(?P<url>\S.*?)\s*$"
)

_OBJECT_TITLE_RE = re.compile(r"\bobject\s*$", re.IGNORECASE)

Predicate = Callable[[Tag], bool]


def text_of(tag: Tag) -> str:
    """Return the text of *tag* with runs of whitespace collapsed to one space."""
    return " ".join(tag.get_text().split())


@dataclass
class Section:
    """One segmented block: its start heading and a fragment of what follows.

    Attributes:
        heading: The start marker, still attached to the source tree.
        fragment: A detached ``<div>`` holding copies of the sibling nodes
            between the heading and the next stop marker. Empty (no
            children) when the heading is immediately followed by a stop
            marker or by nothing at all.
    """

    heading: Tag
    fragment: Tag

    @property
    def title(self) -> str:
        """The heading's text with surrounding whitespace removed."""
        return text_of(self.heading)


def heading_rank(tag: Tag) -> int:
    """Return 1-6 for ``h1``-``h6`` and 0 for anything else."""
    if tag.name in HEADING_TAGS:
        return int(tag.name[1])
    return 0


def is_operation_heading(tag: Tag) -> bool:
    """Whether *tag* is an ``h2``/``h3`` carrying an operation header line."""
    if tag.name not in SECTION_TAGS:
        return False
    return OPERATION_HEADER_RE.match(text_of(tag)) is not None


def is_model_heading(tag: Tag) -> bool:
    """Whether *tag* is an ``h2``/``h3`` introducing an object section."""
    if tag.name not in SECTION_TAGS:
        return False
    anchor_id = tag.get("id") or ""
    if anchor_id.lower().endswith("-object"):
        return True
    return _OBJECT_TITLE_RE.search(text_of(tag)) is not None


def stop_at_rank(start: Tag) -> Predicate:
    """Build a stop predicate: any heading ranked the same as or above *start*."""
    rank = heading_rank(start)

    def _stop(tag: Tag) -> bool:
        tag_rank = heading_rank(tag)
        return 0 < tag_rank <= rank

    return _stop


def collect_until(start: Tag, stop: Predicate) -> Tag:
    """Copy the siblings after *start* into a fresh fragment until *stop* matches.

    Whitespace-only strings between elements are skipped; other text nodes
    are kept so inline prose that is not wrapped in a tag survives.
    """
    fragment = BeautifulSoup("<div></div>", "html.parser").div
    for sibling in start.next_siblings:
        if isinstance(sibling, Tag):
            if stop(sibling):
                break
            fragment.append(copy.copy(sibling))
        elif isinstance(sibling, NavigableString) and sibling.strip():
            fragment.append(NavigableString(str(sibling)))
    return fragment


def segment(
    document: Tag,
    start: Predicate,
    stop: Callable[[Tag], Predicate] = stop_at_rank,
) -> Iterator[Section]:
    """Yield a :class:`Section` for every heading matching *start*.

    Args:
        document: Parsed page (a :class:`~bs4.BeautifulSoup` or any tag).
        start: Predicate selecting section headings.
        stop: Factory turning a start heading into its stop predicate.
            Defaults to :func:`stop_at_rank`.

    Yields:
        Sections in document order.
    """
    for heading in document.find_all(SECTION_TAGS):
        if not start(heading):
            continue
        yield Section(heading=heading, fragment=collect_until(heading, stop(heading)))


def operation_sections(document: Tag) -> Iterator[Section]:
    """Yield the operation sections of a page."""
    return segment(document, is_operation_heading)


def model_sections(document: Tag) -> Iterator[Section]:
    """Yield the model (object) sections of a page."""
    return segment(document, is_model_heading)
