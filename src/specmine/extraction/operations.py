"""Build :class:`~specmine.models.Operation` records from operation sections.

An operation section looks like this once rendered::

    <h2>Get Channel Messages % GET /channels/{channel.id#DOCS_RESOURCES_CHANNEL/channel-object}/messages</h2>
    <p>Returns the messages for a channel. Returns an array of
       <a href="#DOCS_RESOURCES_CHANNEL/message-object">message</a> objects on success.</p>
    <h6 id="query-string-params">Query String Params</h6>
    <table>...</table>

The header line gives the name, verbs, and URL template; the first
paragraph gives the description and the "Returns ..." note; the URL tokens
and the parameter tables give the parameters.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from bs4 import Tag

from specmine.exceptions import StructureError
from specmine.extraction.markup import match_response_types, split_response_note
from specmine.extraction.naming import (
    clean_url,
    is_deprecated,
    operation_key,
    slugify,
    url_tokens,
)
from specmine.extraction.segmenter import (
    OPERATION_HEADER_RE,
    Section,
    operation_sections,
    text_of,
)
from specmine.extraction.tables import extract_parameters
from specmine.extraction.types import uri_parameter_type
from specmine.models import Operation, Parameter, ParameterLocation

logger = logging.getLogger(__name__)

DESCRIPTION_TAGS = ("p", "span")


def parse_header(title: str) -> tuple[str, str, str]:
    """Split an operation header line into ``(name, method, url)``.

    Only the first verb of ``GET/POST``-style lists is kept as the method.
    The URL is cleaned with :func:`~specmine.extraction.naming.clean_url`.

    Raises:
        StructureError: If *title* is not an operation header line.
    """
    match = OPERATION_HEADER_RE.match(title)
    if match is None:
        raise StructureError(f"Not an operation header: {title!r}")
    method = match.group("methods").split("/")[0].strip().upper()
    return match.group("name").strip(), method, clean_url(match.group("url"))


def description_element(fragment: Tag) -> Optional[Tag]:
    """Return the first top-level paragraph/span of a fragment, if any."""
    return fragment.find(DESCRIPTION_TAGS, recursive=False)


def uri_parameters(url: str, snowflakes: Iterable[str]) -> dict[str, Parameter]:
    """Synthesize a required ``uri`` parameter for each distinct URL token."""
    known = frozenset(snowflakes)
    return {
        token: Parameter(
            type=uri_parameter_type(token, known),
            location=ParameterLocation.URI,
            required=True,
        )
        for token in url_tokens(url)
    }


def merge_parameters(
    uri_params: dict[str, Parameter],
    table_params: dict[str, Parameter],
) -> dict[str, Parameter]:
    """Combine URI and table parameters, URI parameters first.

    A table field that reuses a URI token name is dropped so that URI
    parameters stay required and default-free.
    """
    merged = dict(uri_params)
    for name, parameter in table_params.items():
        if name in merged:
            logger.debug("Table field %r shadows a URL token; keeping the URL parameter", name)
            continue
        merged[name] = parameter
    return merged


def build_operation(
    section: Section,
    resource: str,
    link_base: str = "",
    snowflakes: Iterable[str] = (),
) -> Operation:
    """Build one :class:`~specmine.models.Operation` from an operation section.

    Args:
        section: Segmented operation block.
        resource: Owning resource/topic name.
        link_base: Page URL; the operation's deep link is
            ``{link_base}#{slug}``.
        snowflakes: URL tokens typed as ``snowflake``.

    Returns:
        The operation record. ``responseNote``/``responseTypes`` are set
        only when the description has a "Returns ..." sentence, and
        ``deprecated`` only when the title carries ``(deprecated)``.

    Raises:
        StructureError: If the section heading is not an operation header.
    """
    name, method, url = parse_header(section.title)
    key = operation_key(name)
    if not key:
        raise StructureError(f"Cannot derive an operation key from {name!r}")

    description = ""
    response_note: Optional[str] = None
    response_types = None
    element = description_element(section.fragment)
    if element is not None:
        description, response_note = split_response_note(text_of(element))
        if response_note is not None:
            response_types = match_response_types(element.decode_contents())

    parameters = merge_parameters(
        uri_parameters(url, snowflakes),
        extract_parameters(section.fragment),
    )

    return Operation(
        key=key,
        name=name,
        resource=resource,
        method=method,
        url=url,
        description=description,
        response_note=response_note,
        response_types=response_types,
        parameters=parameters,
        deprecated=True if is_deprecated(name) else None,
        link=f"{link_base}#{slugify(name)}",
    )


def iter_operations(
    document: Tag,
    resource: str,
    link_base: str = "",
    snowflakes: Iterable[str] = (),
) -> Iterator[Operation]:
    """Yield an operation for every well-formed operation section of *document*.

    Sections that fail with :class:`~specmine.exceptions.StructureError`
    are logged and skipped.
    """
    for section in operation_sections(document):
        try:
            yield build_operation(section, resource, link_base, snowflakes)
        except StructureError as exc:
            logger.debug("Skipping section in %s: %s", resource, exc)


def extract_operations(
    document: Tag,
    resource: str,
    link_base: str = "",
    snowflakes: Iterable[str] = (),
) -> dict[str, Operation]:
    """Extract all operations of a page keyed by operation key (last wins)."""
    operations: dict[str, Operation] = {}
    for operation in iter_operations(document, resource, link_base, snowflakes):
        assert operation.key is not None
        operations[operation.key] = operation
    return operations
