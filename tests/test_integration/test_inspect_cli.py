"""Tests for ``specmine inspect`` on single fixture pages."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from specmine.app import app
from specmine.exit_codes import EXIT_SOURCE_ERROR

runner = CliRunner()


def _inspect(fixtures_dir: Path, *args: str, fmt: str = "--plain"):
    kind, name, *rest = args
    return runner.invoke(
        app,
        [fmt, "--quiet", "--no-color", "inspect", kind, name, "--source", str(fixtures_dir), *rest],
    )


class TestInspectOperations:
    def test_plain_table(self, isolated_config: Path, fixtures_dir: Path) -> None:
        result = _inspect(fixtures_dir, "operations", "channel")
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert "Key\tMethod\tURL\tParameters\tDeprecated" in lines
        assert "getChannelMessages\tGET\t/channels/{channel.id}/messages\t3\t" in lines
        assert any(
            line.startswith("triggerTypingIndicator\tPOST") and line.endswith("Yes")
            for line in lines
        )

    def test_topic_page_as_json(self, isolated_config: Path, fixtures_dir: Path) -> None:
        result = _inspect(fixtures_dir, "operations", "gateway", "--section", "topics", fmt="--json")
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [row["Key"] for row in rows] == ["getGateway", "getGatewayBot"]

    def test_missing_page(self, isolated_config: Path, fixtures_dir: Path) -> None:
        result = _inspect(fixtures_dir, "operations", "voice")
        assert result.exit_code == EXIT_SOURCE_ERROR
        assert "No page for resources/voice" in result.output


class TestInspectModels:
    def test_plain_table(self, isolated_config: Path, fixtures_dir: Path) -> None:
        result = _inspect(fixtures_dir, "models", "channel")
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "Key\tProperties\tDescription"
        assert "channel\t7\tRepresents a guild or DM channel within Discord." in lines
        assert any(line.startswith("overwrite\t") for line in lines)

    def test_markdown_page(self, isolated_config: Path, fixtures_dir: Path) -> None:
        result = _inspect(fixtures_dir, "models", "guild", fmt="--json")
        assert result.exit_code == 0, result.output
        assert [row["Key"] for row in json.loads(result.stdout)] == ["guild", "guildMember"]
