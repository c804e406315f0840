"""Read parameter and property tables out of a section fragment.

Not every table in a section describes fields, so a table is only read when
the heading right before it (its *marker*) matches a pattern: object
sections use ``... Structure`` headings, operation sections use
``JSON Params`` / ``Query String Params``. The marker is the heading's
``id`` or, when the heading has none, its slugified text; a table with no
preceding heading is skipped.

Each body row becomes one :class:`~specmine.models.Parameter` keyed by the
``Field`` column. Types go through :func:`~specmine.extraction.types.normalize_type`
except when the ``Description`` cell is itself a typed link (see
:func:`~specmine.extraction.markup.match_embedded_type`), which overrides
the free-text ``Type`` column.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from bs4 import Tag

from specmine.extraction.markup import match_embedded_type
from specmine.extraction.naming import clean_field_name, slugify
from specmine.extraction.segmenter import HEADING_TAGS, text_of
from specmine.extraction.types import coerce_default, normalize_type, parse_required
from specmine.models import Parameter, ParameterLocation

logger = logging.getLogger(__name__)

STRUCTURE_MARKER_RE = re.compile(r"structure", re.IGNORECASE)
PARAMS_MARKER_RE = re.compile(r"params|query", re.IGNORECASE)


def table_marker(table: Tag) -> Optional[str]:
    """Return the marker of *table*: the id (or slug) of its nearest preceding heading."""
    heading = table.find_previous_sibling(HEADING_TAGS)
    if heading is None:
        return None
    return heading.get("id") or slugify(text_of(heading)) or None


def find_tables(fragment: Tag, marker_pattern: re.Pattern[str]) -> Iterator[tuple[str, Tag]]:
    """Yield ``(marker, table)`` for every top-level table whose marker matches.

    Args:
        fragment: A section fragment from the segmenter.
        marker_pattern: Compiled pattern searched in each table's marker.
    """
    for table in fragment.find_all("table", recursive=False):
        marker = table_marker(table)
        if marker is None:
            logger.debug("Skipping table without a marker heading")
            continue
        if marker_pattern.search(marker) is None:
            continue
        yield marker, table


def table_headers(table: Tag) -> list[str]:
    """Return the header labels of *table* (``thead`` first, else the first row)."""
    thead = table.find("thead")
    if thead is not None:
        cells = thead.find_all("th")
    else:
        first_row = table.find("tr")
        cells = first_row.find_all(["th", "td"]) if first_row is not None else []
    return [text_of(cell) for cell in cells]


def table_rows(table: Tag) -> Iterator[dict[str, Tag]]:
    """Yield one ``{header: cell}`` mapping per body row of *table*.

    Without a ``thead`` the first row holds the labels and is never a body
    row, whether or not the remaining rows sit in a ``tbody``. Rows made
    only of ``th`` cells are header rows too and are skipped.
    """
    headers = table_headers(table)
    rows = [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]
    if table.find("thead") is None:
        rows = rows[1:]
    for tr in rows:
        if tr.find_parent("thead") is not None:
            continue
        cells = tr.find_all(["td", "th"], recursive=False)
        if cells and all(cell.name == "th" for cell in cells):
            continue
        yield {header: cell for header, cell in zip(headers, cells)}


def _cell(row: dict[str, Tag], label: str) -> Optional[Tag]:
    """Case-insensitive column lookup."""
    for header, cell in row.items():
        if header.lower() == label:
            return cell
    return None


def build_field(
    row: dict[str, Tag],
    location: Optional[ParameterLocation] = None,
) -> Optional[tuple[str, Parameter]]:
    """Turn one table row into a named :class:`~specmine.models.Parameter`.

    Args:
        row: Header-to-cell mapping from :func:`table_rows`.
        location: Set on the parameter when given; model properties pass
            ``None``.

    Returns:
        ``(name, parameter)``, or ``None`` when the row has no usable
        ``Field`` cell.
    """
    field_cell = _cell(row, "field")
    if field_cell is None:
        return None
    name, optional = clean_field_name(text_of(field_cell))
    if not name:
        return None

    description_cell = _cell(row, "description")
    type_cell = _cell(row, "type")
    default_cell = _cell(row, "default")
    required_cell = _cell(row, "required")

    raw_type = text_of(type_cell) if type_cell is not None else None
    type_, nullable = normalize_type(raw_type)
    if description_cell is not None:
        inferred = match_embedded_type(description_cell.decode_contents())
        if inferred is not None:
            type_ = inferred

    required = parse_required(text_of(required_cell)) if required_cell is not None else None
    if required is None and optional:
        required = False

    parameter = Parameter(
        type=type_,
        location=location,
        description=text_of(description_cell) if description_cell is not None else None,
        default=coerce_default(
            text_of(default_cell) if default_cell is not None else None, type_
        ),
        required=required,
        nullable=nullable,
    )
    return name, parameter


def extract_table(
    table: Tag,
    location: Optional[ParameterLocation] = None,
) -> dict[str, Parameter]:
    """Read every row of one table into an ordered ``{field: Parameter}`` mapping."""
    fields: dict[str, Parameter] = {}
    for row in table_rows(table):
        built = build_field(row, location)
        if built is None:
            logger.debug("Skipping table row without a Field cell")
            continue
        name, parameter = built
        fields[name] = parameter
    return fields


def extract_fields(
    fragment: Tag,
    marker_pattern: re.Pattern[str],
    location: Optional[ParameterLocation] = None,
) -> dict[str, Parameter]:
    """Read every matching table of *fragment*, later tables overlaying earlier ones."""
    fields: dict[str, Parameter] = {}
    for _, table in find_tables(fragment, marker_pattern):
        fields.update(extract_table(table, location))
    return fields


def location_for_marker(marker: str) -> ParameterLocation:
    """``query`` for query-string tables, ``json`` for everything else."""
    if "query" in marker.lower():
        return ParameterLocation.QUERY
    return ParameterLocation.JSON


def extract_parameters(fragment: Tag) -> dict[str, Parameter]:
    """Read the JSON and query-string parameter tables of an operation fragment."""
    parameters: dict[str, Parameter] = {}
    for marker, table in find_tables(fragment, PARAMS_MARKER_RE):
        parameters.update(extract_table(table, location_for_marker(marker)))
    return parameters


def extract_properties(fragment: Tag) -> dict[str, Parameter]:
    """Read the ``... Structure`` property tables of a model fragment."""
    return extract_fields(fragment, STRUCTURE_MARKER_RE)
