"""Shared test fixtures for specmine.

Provides page fixtures (raw HTML/Markdown and parsed trees), isolated
config environments, output state management, and a CLI runner. These
fixtures are discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from typer.testing import CliRunner

from specmine.models import GlobalConfig
from specmine.output import OutputFormat, OutputManager, reset_output, set_output
from specmine.source.render import parse_document


FIXTURES_DIR = Path(__file__).parent / "fixtures"

DOCS_URL = "https://discord.com/developers/docs"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager on next use. Handlers installed by
    :func:`~specmine.output.configure_logging` are removed for the same reason.
    """
    yield
    reset_output()
    logger = logging.getLogger("specmine")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Page fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    """Root of the on-disk page fixtures (``resources/``, ``topics/``, ``overrides/``)."""
    return FIXTURES_DIR


@pytest.fixture
def channel_html() -> str:
    """Raw HTML of the channel resource page."""
    return (FIXTURES_DIR / "resources" / "channel.html").read_text(encoding="utf-8")


@pytest.fixture
def guild_markdown() -> str:
    """Raw Markdown of the guild resource page."""
    return (FIXTURES_DIR / "resources" / "guild.md").read_text(encoding="utf-8")


@pytest.fixture
def gateway_html() -> str:
    """Raw HTML of the gateway topic page."""
    return (FIXTURES_DIR / "topics" / "gateway.html").read_text(encoding="utf-8")


@pytest.fixture
def channel_page(channel_html: str) -> BeautifulSoup:
    """Parsed channel resource page."""
    return parse_document(channel_html, "html")


@pytest.fixture
def guild_page(guild_markdown: str) -> BeautifulSoup:
    """Parsed (rendered) guild resource page."""
    return parse_document(guild_markdown, "markdown")


@pytest.fixture
def fixture_config(fixtures_dir: Path) -> GlobalConfig:
    """Configuration reading the on-disk fixtures instead of the network."""
    return GlobalConfig(
        source=str(fixtures_dir),
        resources=["channel", "guild"],
        topics=["gateway"],
        docs_url=DOCS_URL,
    )


# ---------------------------------------------------------------------------
# Isolated config directory
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect all specmine config/cache/data dirs to *tmp_path*.

    Sets ``XDG_CONFIG_HOME``, ``XDG_CACHE_HOME``, and ``XDG_DATA_HOME``,
    clears the ``SPECMINE_*`` environment variables, and changes the
    working directory so no project config leaks in.

    Returns:
        The tmp_path root.
    """
    monkeypatch.setattr("specmine.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ("SPECMINE_SOURCE", "SPECMINE_DOCS_URL", "SPECMINE_OVERRIDES"):
        monkeypatch.delenv(var, raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, plain-text OutputManager."""
    mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(mgr)
    return mgr


@pytest.fixture
def cli_runner() -> CliRunner:
    """A Typer CLI test runner."""
    return CliRunner()
