"""Build :class:`~specmine.models.Model` records from object sections."""

from __future__ import annotations

import logging
from typing import Iterator

from bs4 import Tag

from specmine.exceptions import StructureError
from specmine.extraction.naming import model_key
from specmine.extraction.segmenter import Section, model_sections, text_of
from specmine.extraction.tables import extract_properties
from specmine.models import Model

logger = logging.getLogger(__name__)

DESCRIPTION_TAGS = ("p", "span")


def model_description(fragment: Tag) -> str:
    """Text of the fragment's first child when it is a paragraph/span, else ``""``."""
    first = fragment.find(True, recursive=False)
    if first is None or first.name not in DESCRIPTION_TAGS:
        return ""
    return text_of(first)


def build_model(section: Section, resource: str, link_base: str = "") -> Model:
    """Build one :class:`~specmine.models.Model` from an object section.

    Raises:
        StructureError: If the heading has no ``id`` to derive a key from.
    """
    anchor_id = section.heading.get("id")
    if not anchor_id:
        raise StructureError(f"Object heading without an id: {section.title!r}")
    key = model_key(anchor_id)
    if not key:
        raise StructureError(f"Cannot derive a model key from id {anchor_id!r}")

    return Model(
        key=key,
        resource=resource,
        description=model_description(section.fragment),
        type="object",
        properties=extract_properties(section.fragment),
        link=f"{link_base}#{anchor_id}",
    )


def iter_models(document: Tag, resource: str, link_base: str = "") -> Iterator[Model]:
    """Yield a model for every object section of *document*, skipping malformed ones."""
    for section in model_sections(document):
        try:
            yield build_model(section, resource, link_base)
        except StructureError as exc:
            logger.debug("Skipping section in %s: %s", resource, exc)


def extract_models(document: Tag, resource: str, link_base: str = "") -> dict[str, Model]:
    """Extract all models of a page keyed by model key (last wins)."""
    models: dict[str, Model] = {}
    for model in iter_models(document, resource, link_base):
        assert model.key is not None
        models[model.key] = model
    return models
