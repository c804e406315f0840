"""Typer application and CLI entry point for specmine.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``build``, ``inspect``, ``config``, ``cache``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a Ctrl-C handler and invokes the Typer
app. Unhandled exceptions are written to a crash log under the data
directory.

See Also:
    :mod:`specmine.config`: Configuration resolution.
    :mod:`specmine.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specmine import __version__
from specmine.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specmine",
    help="Extract a machine-readable API definition from Discord-style documentation.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

from specmine.commands.build import build_command  # noqa: E402
from specmine.commands.cache import cache_app  # noqa: E402
from specmine.commands.config import config_app  # noqa: E402
from specmine.commands.inspect import inspect_app  # noqa: E402

app.command("build")(build_command)
app.add_typer(inspect_app, name="inspect", help="Show what one documentation page yields.")
app.add_typer(config_app, name="config", help="Configuration management.")
app.add_typer(cache_app, name="cache", help="Page cache management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"specmine {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the primary output to this file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~specmine.output.OutputManager`, routes
    library logging to stderr, and stores shared flags in ``ctx.obj``.
    """
    from specmine.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)
    configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from specmine.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specmine`` console script.

    :class:`~specmine.exceptions.SpecmineError` instances that escape a
    command exit with the error's ``exit_code``. Any other exception writes
    a crash log and exits with :data:`EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specmine.exceptions import SpecmineError
        from specmine.output import error

        if isinstance(exc, SpecmineError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
