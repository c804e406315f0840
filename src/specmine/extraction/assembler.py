"""Assemble the aggregate :class:`~specmine.models.Definition`.

The assembler walks the configured pages in order, twice: first extracting
models from every page, then operations from every page. Each page's
records are built completely before anything is merged, and any exception
while fetching or extracting a page is logged and drops only that page's
contribution for the current pass, so a build never aborts half way.
Each page is fetched once per build and its parsed tree (or the failure)
is reused by both passes.

Curated overrides are deep-copied into the definition before extraction
starts, and heuristic records never replace an override key. The result of
a build where every page fails is therefore exactly the overrides.

Page retrieval is the only suspension point; extraction itself is
synchronous work over an already-parsed tree.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, TypeVar, Union

from bs4 import BeautifulSoup

from specmine.extraction.objects import extract_models
from specmine.extraction.operations import extract_operations
from specmine.models import (
    CuratedOverrides,
    Definition,
    DocumentRef,
    GlobalConfig,
    Model,
    Operation,
)
from specmine.source.base import DocumentSource

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", Operation, Model)

Fetched = Union[BeautifulSoup, Exception]


def document_refs(resources: Iterable[str], topics: Iterable[str] = ()) -> list[DocumentRef]:
    """Order pages as all resources, then all topics."""
    refs = [DocumentRef(name=name, section="resources") for name in resources]
    refs.extend(DocumentRef(name=name, section="topics") for name in topics)
    return refs


def merge_records(
    target: dict[str, dict[str, RecordT]],
    resource: str,
    records: dict[str, RecordT],
    protected: dict[str, RecordT],
) -> int:
    """Merge *records* into ``target[resource]`` without touching *protected* keys.

    Keys already present (from an earlier page) are overlaid in place, new
    keys are appended, and keys in *protected* (the curated overrides for
    this resource) are left alone.

    Returns:
        The number of records merged.
    """
    if not records:
        return 0
    section = target.setdefault(resource, {})
    merged = 0
    for key, record in records.items():
        if key in protected:
            logger.debug("Keeping curated %s.%s over extracted record", resource, key)
            continue
        section[key] = record
        merged += 1
    return merged


class DefinitionAssembler:
    """Build a :class:`~specmine.models.Definition` from a document source.

    Args:
        source: Supplies a parsed tree per page.
        refs: Pages to process, in order.
        base_uri: ``baseUri`` of the definition.
        version: ``version`` of the definition.
        docs_url: Documentation root used for deep links.
        snowflakes: URL tokens typed as ``snowflake``.
        overrides: Curated records that always win over extraction.

    Example::

        assembler = DefinitionAssembler.from_config(config, source, overrides)
        definition = await assembler.build()
        print(definition.to_json())
    """

    def __init__(
        self,
        source: DocumentSource,
        refs: Iterable[DocumentRef],
        base_uri: str,
        version: int,
        docs_url: str = "",
        snowflakes: Iterable[str] = (),
        overrides: Optional[CuratedOverrides] = None,
    ) -> None:
        self._source = source
        self._refs = list(refs)
        self._base_uri = base_uri
        self._version = version
        self._docs_url = docs_url.rstrip("/")
        self._snowflakes = frozenset(snowflakes)
        self._overrides = overrides or CuratedOverrides()

    @classmethod
    def from_config(
        cls,
        config: GlobalConfig,
        source: DocumentSource,
        overrides: Optional[CuratedOverrides] = None,
    ) -> DefinitionAssembler:
        """Create an assembler from the resolved :class:`~specmine.models.GlobalConfig`."""
        return cls(
            source=source,
            refs=document_refs(config.resources, config.topics),
            base_uri=config.base_uri,
            version=config.version,
            docs_url=config.docs_url,
            snowflakes=config.snowflakes,
            overrides=overrides,
        )

    @property
    def refs(self) -> list[DocumentRef]:
        """The pages processed by :meth:`build`, in order."""
        return list(self._refs)

    def link_base(self, ref: DocumentRef) -> str:
        """Page URL used as the prefix of deep links."""
        return f"{self._docs_url}/{ref.path}"

    def new_definition(self) -> Definition:
        """A definition seeded with a deep copy of the curated overrides."""
        seeded = self._overrides.model_copy(deep=True)
        return Definition(
            base_uri=self._base_uri,
            version=self._version,
            operations=seeded.operations,
            models=seeded.models,
        )

    async def build(self) -> Definition:
        """Run the model pass and then the operation pass over every page."""
        definition = self.new_definition()
        documents: dict[DocumentRef, Fetched] = {}
        for ref in self._refs:
            await self._run_pass(
                ref,
                documents,
                "models",
                definition.models,
                self._overrides.models,
                self._models_of,
            )
        for ref in self._refs:
            await self._run_pass(
                ref,
                documents,
                "operations",
                definition.operations,
                self._overrides.operations,
                self._operations_of,
            )
        return definition

    async def _document(
        self, ref: DocumentRef, documents: dict[DocumentRef, Fetched]
    ) -> BeautifulSoup:
        """Fetch *ref* on first use; later calls reuse the tree or re-raise the failure."""
        if ref not in documents:
            try:
                documents[ref] = await self._source.get_document(ref)
            except Exception as exc:
                documents[ref] = exc
        fetched = documents[ref]
        if isinstance(fetched, Exception):
            raise fetched
        return fetched

    def _models_of(self, document: BeautifulSoup, ref: DocumentRef) -> dict[str, Model]:
        return extract_models(document, ref.name, self.link_base(ref))

    def _operations_of(self, document: BeautifulSoup, ref: DocumentRef) -> dict[str, Operation]:
        return extract_operations(document, ref.name, self.link_base(ref), self._snowflakes)

    async def _run_pass(
        self,
        ref: DocumentRef,
        documents: dict[DocumentRef, Fetched],
        kind: str,
        target: dict[str, dict[str, RecordT]],
        overrides: dict[str, dict[str, RecordT]],
        extract: Callable[[BeautifulSoup, DocumentRef], dict[str, RecordT]],
    ) -> None:
        """Fetch one page, extract one kind of record, and merge it.

        Any exception is logged with the page name and swallowed; the page
        simply contributes nothing to this pass.
        """
        try:
            document = await self._document(ref, documents)
            records = extract(document, ref)
        except Exception as exc:
            logger.warning("Error extracting %s from %s: %s", kind, ref.path, exc)
            return

        if not records:
            logger.warning("No %s found in %s", kind, ref.path)
            return

        merged = merge_records(target, ref.name, records, overrides.get(ref.name, {}))
        logger.info("Merged %d %s from %s", merged, kind, ref.path)
