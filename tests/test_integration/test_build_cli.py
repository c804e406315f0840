"""End-to-end tests for ``specmine build`` against the on-disk page fixtures."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specmine.app import app
from specmine.exit_codes import EXIT_GENERIC_FAILURE, EXIT_TIMEOUT

runner = CliRunner()

PAGES = ["-r", "channel", "-r", "guild", "-t", "gateway"]


def _build(fixtures_dir: Path, out: Path, *extra: str):
    return runner.invoke(
        app,
        ["--quiet", "--no-color", "-o", str(out), "build", "--source", str(fixtures_dir), *PAGES, *extra],
    )


class TestBuildHelp:
    def test_build_help(self) -> None:
        result = runner.invoke(app, ["build", "--help"])
        assert result.exit_code == 0
        assert "--overrides" in result.output

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "specmine 0.1.0" in result.output


class TestBuildFromFixtures:
    def test_writes_definition_file(
        self, isolated_config: Path, fixtures_dir: Path
    ) -> None:
        out = isolated_config / "discord.json"
        result = _build(fixtures_dir, out)
        assert result.exit_code == 0, result.output

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["baseUri"] == "https://discord.com/api"
        assert data["version"] == 10
        assert list(data["operations"]) == ["channel", "guild", "gateway"]
        assert list(data["operations"]["gateway"]) == ["getGateway", "getGatewayBot"]
        assert list(data["models"]["channel"]) == ["channel", "overwrite"]

    def test_output_uses_four_space_indent(
        self, isolated_config: Path, fixtures_dir: Path
    ) -> None:
        out = isolated_config / "discord.json"
        _build(fixtures_dir, out)
        assert '\n    "baseUri": ' in out.read_text(encoding="utf-8")

    def test_rebuild_is_identical(self, isolated_config: Path, fixtures_dir: Path) -> None:
        first = isolated_config / "first.json"
        second = isolated_config / "second.json"
        _build(fixtures_dir, first)
        _build(fixtures_dir, second)
        assert first.read_text(encoding="utf-8") == second.read_text(encoding="utf-8")

    def test_single_resource(self, isolated_config: Path, fixtures_dir: Path) -> None:
        out = isolated_config / "channel.json"
        result = runner.invoke(
            app,
            ["--quiet", "-o", str(out), "build", "--source", str(fixtures_dir), "--resource", "channel"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert list(data["operations"]) == ["channel"]

    def test_stdout_when_no_output_file(
        self, isolated_config: Path, fixtures_dir: Path
    ) -> None:
        result = runner.invoke(
            app,
            ["--json", "--quiet", "build", "--source", str(fixtures_dir), "-t", "gateway"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert list(data["operations"]) == ["gateway"]

    def test_source_from_environment(
        self, isolated_config: Path, fixtures_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECMINE_SOURCE", str(fixtures_dir))
        out = isolated_config / "env.json"
        result = runner.invoke(app, ["--quiet", "-o", str(out), "build", "-r", "guild"])
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert list(data["models"]["guild"]) == ["guild", "guildMember"]


class TestBuildWithOverrides:
    def test_curated_records_merged(self, isolated_config: Path, fixtures_dir: Path) -> None:
        out = isolated_config / "curated.json"
        result = _build(fixtures_dir, out, "--overrides", str(fixtures_dir / "overrides"))
        assert result.exit_code == 0, result.output

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["operations"]["channel"]["getChannel"]["curated"] is True
        assert "getChannelMessages" in data["operations"]["channel"]
        assert list(data["operations"]["voice"]) == ["listVoiceRegions"]
        assert data["models"]["channel"]["overwrite"]["description"] == (
            "Curated permission overwrite."
        )

    def test_missing_overrides_path(self, isolated_config: Path, fixtures_dir: Path) -> None:
        out = isolated_config / "never.json"
        result = _build(fixtures_dir, out, "--overrides", str(isolated_config / "nope"))
        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "Overrides not found" in result.output
        assert not out.exists()


class TestBuildFailures:
    def test_unknown_pages_yield_empty_definition(
        self, isolated_config: Path, fixtures_dir: Path
    ) -> None:
        out = isolated_config / "empty.json"
        result = runner.invoke(
            app,
            ["--no-color", "-o", str(out), "build", "--source", str(fixtures_dir), "-r", "voice"],
        )
        assert result.exit_code == 0
        assert "No operations or models were extracted." in result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["operations"] == {}
        assert data["models"] == {}

    def test_timeout(
        self, isolated_config: Path, fixtures_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def _slow(*args, **kwargs):
            await asyncio.sleep(5)

        monkeypatch.setattr("specmine.commands.build.build_definition", _slow)
        out = isolated_config / "slow.json"
        result = _build(fixtures_dir, out, "--timeout", "0.05")
        assert result.exit_code == EXIT_TIMEOUT
        assert "exceeded 0.05s" in result.output
        assert not out.exists()
