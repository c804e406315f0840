"""Inspect commands -- extract a single page and show what was found.

``specmine inspect operations RESOURCE`` and ``specmine inspect models
RESOURCE`` read one documentation page and print a table of the records
the heuristics produce for it. Curated overrides are not applied, so the
output shows exactly what the page yields.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from bs4 import BeautifulSoup

from specmine.exceptions import SpecmineError
from specmine.models import DocumentRef, GlobalConfig
from specmine.output import error, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


def _fetch_page(
    name: str, section: str, source: Optional[str]
) -> tuple[GlobalConfig, DocumentRef, BeautifulSoup]:
    """Resolve config and fetch one page, exiting with the error's code on failure."""
    from specmine.commands.build import open_cache
    from specmine.config import resolve_config
    from specmine.source import create_source

    async def _get(config: GlobalConfig, ref: DocumentRef) -> BeautifulSoup:
        cache = open_cache(config)
        try:
            async with create_source(config, cache) as doc_source:
                return await doc_source.get_document(ref)
        finally:
            if cache is not None:
                cache.close()

    try:
        config = resolve_config(cli_source=source)
        ref = DocumentRef(name=name, section=section)
        return config, ref, asyncio.run(_get(config, ref))
    except SpecmineError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _link_base(config: GlobalConfig, ref: DocumentRef) -> str:
    return f"{config.docs_url.rstrip('/')}/{ref.path}"


@inspect_app.command("operations")
def inspect_operations(
    resource: str = typer.Argument(help="Resource or topic page name."),
    section: str = typer.Option("resources", "--section", help="resources or topics."),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Local pages directory."),
) -> None:
    """List the operations extracted from one page.

    Example::

        specmine inspect operations channel
        specmine inspect operations gateway --section topics
    """
    from specmine.extraction import extract_operations

    config, ref, document = _fetch_page(resource, section, source)
    operations = extract_operations(
        document, ref.name, _link_base(config, ref), config.snowflakes
    )
    if not operations:
        info(f"No operations found in {ref.path}.")
        return

    headers = ["Key", "Method", "URL", "Parameters", "Deprecated"]
    rows = [
        [
            key,
            op.method or "-",
            op.url or "-",
            str(len(op.parameters or {})),
            "Yes" if op.deprecated else "",
        ]
        for key, op in operations.items()
    ]
    get_output().print_table(headers, rows, title=f"{ref.path} -- Operations ({len(rows)})")


@inspect_app.command("models")
def inspect_models(
    resource: str = typer.Argument(help="Resource or topic page name."),
    section: str = typer.Option("resources", "--section", help="resources or topics."),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Local pages directory."),
) -> None:
    """List the models extracted from one page.

    Example::

        specmine inspect models channel
    """
    from specmine.extraction import extract_models

    config, ref, document = _fetch_page(resource, section, source)
    models = extract_models(document, ref.name, _link_base(config, ref))
    if not models:
        info(f"No models found in {ref.path}.")
        return

    headers = ["Key", "Properties", "Description"]
    rows = [
        [key, str(len(model.properties or {})), (model.description or "-")[:60]]
        for key, model in models.items()
    ]
    get_output().print_table(headers, rows, title=f"{ref.path} -- Models ({len(rows)})")
