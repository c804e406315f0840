"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- emit_json and format_response in every format
- print_table in all three modes
- Output file redirection
- Logging configuration
- Global instance management
"""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from specmine import output as output_module
from specmine.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    configure_logging,
    get_output,
    log_level,
    reset_output,
    set_output,
)


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("specmine.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("specmine.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """AUTO resolves from the terminal; explicit formats are kept."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty):
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON

    def test_enum_from_string(self):
        assert OutputFormat("plain") is OutputFormat.PLAIN


class TestColorDisabling:
    def test_no_color_env_disables_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color()

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color()

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert not _should_disable_color()


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout; diagnostics go to stderr."""

    @pytest.mark.parametrize("method", ["info", "success", "warning", "error"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("fetching channel")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "fetching channel" in captured.err

    def test_emit_json_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.emit_json('{"version": 10}')
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"version": 10}
        assert captured.err == ""

    def test_warning_and_error_prefixes(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.warning("empty page")
        mgr.error("no source")
        err = capfd.readouterr().err
        assert "Warning: empty page" in err
        assert "Error: no source" in err


class TestQuietAndVerbose:
    def test_quiet_suppresses_info_and_success(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_warning_and_error(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.warning("careful")
        mgr.error("broken")
        err = capfd.readouterr().err
        assert "careful" in err
        assert "broken" in err

    def test_quiet_keeps_stdout_data(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True, quiet=True)
        mgr.emit_json("{}")
        assert capfd.readouterr().out.strip() == "{}"

    def test_debug_hidden_by_default(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("trace")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.debug("trace")
        assert "[debug] trace" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Data formatting
# ------------------------------------------------------------------ #


class TestEmitJson:
    def test_plain_mode_prints_verbatim(self, capfd, non_tty):
        text = '{\n  "operations": {}\n}'
        OutputManager(format=OutputFormat.PLAIN, no_color=True).emit_json(text)
        assert capfd.readouterr().out == text + "\n"

    def test_rich_mode_highlights(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).emit_json('{"version": 10}')
        out = capfd.readouterr().out
        assert "version" in out
        assert "10" in out


class TestFormatResponse:
    def test_json_mode_is_indented(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_response({"enabled": True, "size": 2})
        out = capfd.readouterr().out
        assert json.loads(out) == {"enabled": True, "size": 2}
        assert '\n  "size": 2' in out

    def test_plain_mode_dict_is_key_value(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"docs_url": "https://example.com", "topics": ["gateway"]})
        lines = capfd.readouterr().out.splitlines()
        assert lines == ["docs_url\thttps://example.com", 'topics\t["gateway"]']

    def test_plain_mode_list_falls_back_to_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_response(["a", "b"])
        assert json.loads(capfd.readouterr().out) == ["a", "b"]

    def test_unicode_kept(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_response({"name": "café"})
        assert "café" in capfd.readouterr().out


class TestPrintTable:
    HEADERS = ["Key", "Method", "URL"]
    ROWS = [["getChannel", "GET", "/channels/{channel.id}"]]

    def test_table_json_mode(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(self.HEADERS, self.ROWS)
        assert json.loads(capfd.readouterr().out) == [
            {"Key": "getChannel", "Method": "GET", "URL": "/channels/{channel.id}"}
        ]

    def test_table_plain_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(self.HEADERS, self.ROWS, title="ignored")
        assert capfd.readouterr().out.splitlines() == [
            "Key\tMethod\tURL",
            "getChannel\tGET\t/channels/{channel.id}",
        ]

    def test_table_rich_mode(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH, no_color=True)
        mgr.print_table(self.HEADERS, self.ROWS, title="channel operations")
        out = capfd.readouterr().out
        assert "channel operations" in out
        assert "getChannel" in out

    def test_table_empty_rows(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(self.HEADERS, [])
        assert json.loads(capfd.readouterr().out) == []


class TestOutputFile:
    def test_emit_json_writes_file(self, tmp_path, capfd, non_tty):
        target = tmp_path / "out" / "discord.json"
        mgr = OutputManager(format=OutputFormat.JSON, output_file=str(target))
        mgr.emit_json('{"version": 10}')
        assert capfd.readouterr().out == ""
        assert target.read_text(encoding="utf-8") == '{"version": 10}\n'

    def test_existing_trailing_newline_not_doubled(self, tmp_path, non_tty):
        target = tmp_path / "discord.json"
        OutputManager(output_file=str(target)).emit_json("{}\n")
        assert target.read_text(encoding="utf-8") == "{}\n"

    def test_format_response_respects_output_file(self, tmp_path, non_tty):
        target = tmp_path / "stats.json"
        OutputManager(format=OutputFormat.JSON, output_file=str(target)).format_response(
            {"size": 0}
        )
        assert json.loads(target.read_text(encoding="utf-8")) == {"size": 0}


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


class TestLogging:
    @pytest.mark.parametrize(
        ("quiet", "verbose", "expected"),
        [
            (False, False, logging.WARNING),
            (True, False, logging.ERROR),
            (False, True, logging.DEBUG),
            (True, True, logging.DEBUG),
        ],
    )
    def test_log_level(self, quiet, verbose, expected):
        assert log_level(quiet, verbose) == expected

    def test_configure_installs_single_rich_handler(self, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        configure_logging(mgr)
        configure_logging(mgr)
        logger = logging.getLogger("specmine")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.DEBUG

    def test_records_reach_stderr(self, capfd, non_tty):
        configure_logging(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        logging.getLogger("specmine.extraction.assembler").warning("Page %s is empty", "voice")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Page voice is empty" in captured.err


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_then_reset(self):
        custom = OutputManager(format=OutputFormat.JSON)
        set_output(custom)
        assert get_output() is custom
        reset_output()
        assert get_output() is not custom

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.info("fetched")
        output_module.print_table(["Key"], [["guild"]])
        captured = capfd.readouterr()
        assert "fetched" in captured.err
        assert captured.out.splitlines() == ["Key", "guild"]
