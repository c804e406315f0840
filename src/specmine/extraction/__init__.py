"""Heuristic extraction engine -- documentation page to definition records.

This sub-package turns parsed documentation pages into the records of a
:class:`~specmine.models.Definition`. It never fetches anything; a
:class:`~specmine.source.base.DocumentSource` hands it BeautifulSoup trees.

Typical usage::

    from specmine.extraction import DefinitionAssembler

    assembler = DefinitionAssembler.from_config(config, source, overrides)
    definition = await assembler.build()

Sub-modules:

* :mod:`~specmine.extraction.segmenter` -- locate operation and object
  sections and copy their content into detached fragments.
* :mod:`~specmine.extraction.tables` -- read parameter/property tables.
* :mod:`~specmine.extraction.markup` -- regex matchers over rendered markup
  (typed links in descriptions, "Returns ..." notes).
* :mod:`~specmine.extraction.naming` -- keys, slugs, URL tokens, anchors.
* :mod:`~specmine.extraction.types` -- type normalization and default
  coercion.
* :mod:`~specmine.extraction.operations` / :mod:`~specmine.extraction.objects`
  -- build operation and model records.
* :mod:`~specmine.extraction.assembler` -- merge everything into one
  definition under the curated overrides.
"""

from specmine.extraction.assembler import DefinitionAssembler, document_refs
from specmine.extraction.objects import extract_models
from specmine.extraction.operations import extract_operations

__all__ = ["DefinitionAssembler", "document_refs", "extract_models", "extract_operations"]
