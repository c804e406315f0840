"""Regex matchers that run over a cell's or paragraph's *rendered markup*.

Tree queries narrow the input to one table cell or one description
paragraph; the functions here then match precise patterns against that
fragment's serialized HTML to recover link targets that plain text loses.
They take strings, not tree nodes, so they can be tested on their own.

Two patterns are recognized:

``EMBEDDED_TYPE_RE``
    A description cell that *is* a typed cross-reference::

        array of <a href="#DOCS_GUILD/member">Guild Member</a> objects
        <a href="#DOCS_RESOURCES_USER/user-object">user</a> object ids

    It must start the cell. ``array of`` wraps the result as ``Array<T>``
    and an ``id``/``ids`` suffix turns it into ``snowflake``.

``RESPONSE_NOTE_RE``
    The first ``Return...`` sentence of an operation description, e.g.
    ``Returns a list of <a href="#channel-object">channel</a> objects.``
"""

from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup

from specmine.extraction.naming import anchor_fragment, is_object_anchor, type_from_anchor
from specmine.extraction.types import array_of
from specmine.models import ResponseType

EMBEDDED_TYPE_RE = re.compile(
    r"^\s*(?P<array>(?:an\s+)?array\s+of\s+)?"
    r"<a\s[^>]*?href=\"(?P<href>[^\"]*)\"[^>]*>(?P<label>.*?)</a>"
    r"(?:\s+objects?)?"
    r"(?:\s+(?P<ids>ids?)\b)?",
    re.IGNORECASE | re.DOTALL,
)

RESPONSE_NOTE_RE = re.compile(r"(Return[^.]+\.)")

COLLECTION_RE = re.compile(r"Returns?\s+(?:an?\s+)?(?:list|array)\s+of", re.IGNORECASE)


def match_embedded_type(markup: str) -> Optional[str]:
    """Infer a field type from a description cell's rendered markup.

    Args:
        markup: Inner HTML of the description cell.

    Returns:
        ``"snowflake"`` / ``"Array<snowflake>"`` for id references,
        ``"T"`` / ``"Array<T>"`` for object references (``T`` derived from
        the anchor target), or ``None`` when the cell does not start with
        an object link.
    """
    match = EMBEDDED_TYPE_RE.match(markup)
    if match is None:
        return None
    fragment = anchor_fragment(match.group("href"))
    if not fragment or not is_object_anchor(fragment):
        return None

    inferred = "snowflake" if match.group("ids") else type_from_anchor(fragment)
    if match.group("array"):
        return array_of(inferred)
    return inferred


def split_response_note(text: str) -> tuple[str, Optional[str]]:
    """Separate the ``Return...`` sentence from an operation description.

    Returns:
        ``(description, note)`` where ``description`` has every matching
        sentence removed and is stripped, and ``note`` is the first
        sentence (or ``None`` when there is none).
    """
    match = RESPONSE_NOTE_RE.search(text)
    if match is None:
        return text.strip(), None
    return RESPONSE_NOTE_RE.sub("", text).strip(), match.group(1)


def is_collection_note(note: str) -> bool:
    """Whether a response note describes a list/array of objects."""
    return COLLECTION_RE.search(note) is not None


def match_response_types(markup: str) -> list[ResponseType]:
    """Collect typed references from the ``Return...`` sentence of *markup*.

    Every anchor in that sentence whose target contains ``-object`` becomes
    a :class:`~specmine.models.ResponseType`. When the sentence phrases the
    response as a list or array, each type is wrapped as ``Array<T>``.

    Args:
        markup: Inner HTML of the description paragraph.

    Returns:
        The references in order of appearance; empty when the markup has no
        ``Return...`` sentence or no object links in it.
    """
    match = RESPONSE_NOTE_RE.search(markup)
    if match is None:
        return []
    sentence = match.group(1)
    collection = is_collection_note(BeautifulSoup(sentence, "html.parser").get_text())

    types: list[ResponseType] = []
    for anchor in BeautifulSoup(sentence, "html.parser").find_all("a"):
        fragment = anchor_fragment(anchor.get("href", ""))
        if "-object" not in fragment.lower():
            continue
        type_name = type_from_anchor(fragment)
        types.append(
            ResponseType(
                name=anchor.get_text().strip(),
                type=array_of(type_name) if collection else type_name,
            )
        )
    return types
