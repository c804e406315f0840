"""Build command -- extract the full definition and print or save it.

``specmine build`` resolves the configuration, loads the curated
overrides, opens the document source, and runs the
:class:`~specmine.extraction.DefinitionAssembler` under an overall timeout.
The definition JSON goes to stdout, or to the file given with ``-o``.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from specmine.exceptions import BuildTimeoutError, SpecmineError
from specmine.models import CuratedOverrides, Definition, GlobalConfig
from specmine.output import emit_json, error, info, success, warning


def open_cache(config: GlobalConfig, no_cache: bool = False):  # noqa: ANN201
    """Return the page cache for *config*, or ``None`` when caching is off."""
    from specmine.cache import DocumentCache
    from specmine.config import get_cache_dir

    if no_cache or not config.cache.enabled:
        return None
    return DocumentCache(get_cache_dir(), config.cache)


async def build_definition(
    config: GlobalConfig,
    overrides: Optional[CuratedOverrides] = None,
    no_cache: bool = False,
) -> Definition:
    """Build the definition for *config* with a fresh document source."""
    from specmine.extraction import DefinitionAssembler
    from specmine.source import create_source

    cache = open_cache(config, no_cache)
    try:
        async with create_source(config, cache) as source:
            assembler = DefinitionAssembler.from_config(config, source, overrides)
            return await assembler.build()
    finally:
        if cache is not None:
            cache.close()


def run_build(
    config: GlobalConfig,
    overrides: Optional[CuratedOverrides] = None,
    no_cache: bool = False,
    timeout: Optional[float] = None,
) -> Definition:
    """Run :func:`build_definition` to completion, bounded by *timeout* seconds.

    Raises:
        BuildTimeoutError: If the build does not finish in time. The
            in-flight build is cancelled and nothing partial is returned.
    """
    limit = timeout if timeout is not None else config.build_timeout

    async def _bounded() -> Definition:
        return await asyncio.wait_for(build_definition(config, overrides, no_cache), limit)

    try:
        return asyncio.run(_bounded())
    except asyncio.TimeoutError as exc:
        raise BuildTimeoutError(f"Definition build exceeded {limit}s") from exc


def build_command(
    source: Optional[str] = typer.Option(
        None, "--source", "-s", help="Local directory holding documentation pages."
    ),
    docs_url: Optional[str] = typer.Option(
        None, "--docs-url", help="Documentation site root."
    ),
    overrides: Optional[str] = typer.Option(
        None, "--overrides", help="Curated override file or directory."
    ),
    resource: Optional[list[str]] = typer.Option(
        None, "--resource", "-r", help="Resource page to read (repeatable)."
    ),
    topic: Optional[list[str]] = typer.Option(
        None, "--topic", "-t", help="Topic page to read (repeatable)."
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the page cache."),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds allowed for the whole build."
    ),
) -> None:
    """Build the API definition from the documentation.

    When ``--resource`` or ``--topic`` is given, only the named pages are
    read; otherwise the configured resources and topics are.

    Example::

        specmine build > discord.json
        specmine build --source ./docs --resource channel -o channel.json
    """
    from specmine.config import load_overrides, resolve_config

    try:
        config = resolve_config(
            cli_source=source, cli_docs_url=docs_url, cli_overrides=overrides
        )
        if resource or topic:
            config.resources = list(resource or [])
            config.topics = list(topic or [])
        curated = load_overrides(config.overrides)
        info(
            f"Building from {config.source or config.docs_url} "
            f"({len(config.resources)} resources, {len(config.topics)} topics)"
        )
        definition = run_build(config, curated, no_cache=no_cache, timeout=timeout)
    except SpecmineError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not definition.operations and not definition.models:
        warning("No operations or models were extracted.")

    operations = sum(len(ops) for ops in definition.operations.values())
    models = sum(len(m) for m in definition.models.values())
    emit_json(definition.to_json())
    success(f"Extracted {operations} operations and {models} models.")
