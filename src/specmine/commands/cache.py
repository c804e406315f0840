"""Cache commands -- inspect and empty the on-disk page cache."""

from __future__ import annotations

import typer

from specmine.exceptions import ConfigError
from specmine.output import error, format_response, info, success


cache_app = typer.Typer(no_args_is_help=True)


def _open():  # noqa: ANN202
    from specmine.cache import DocumentCache
    from specmine.config import get_cache_dir, load_global_config

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    return DocumentCache(get_cache_dir(), config.cache)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the number of cached pages, the cache directory, and the TTL."""
    cache = _open()
    try:
        format_response(cache.stats())
    finally:
        cache.close()


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Remove every cached page.

    Asks for confirmation unless ``--force`` is active.
    """
    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm("Remove all cached pages?"):
        info("Cancelled.")
        raise typer.Exit()

    cache = _open()
    try:
        if not cache.enabled:
            info("Caching is disabled; nothing to clear.")
            return
        cache.clear()
    finally:
        cache.close()
    success("Page cache cleared.")
