"""Tests for the kompile complete, highlight and version commands."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from kompile_cli.commands.complete import complete
from kompile_cli.commands.highlight import highlight
from kompile_cli.commands.version import version


class TestCompleteCommand:
    """Tests for kompile complete."""

    def test_prints_completions(
        self, cli_runner: CliRunner, hello_project: Path, kompile_yaml: Path
    ) -> None:
        result = cli_runner.invoke(
            complete,
            ["-p", str(hello_project), "-c", str(kompile_yaml), "--line", "1", "--ch", "4"],
        )

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload[0]["text"] == "println()"
        assert payload[0]["displayText"] == "println(message: Any?)"
        assert payload[0]["import"] is None

    def test_out_of_range_position(
        self, cli_runner: CliRunner, hello_project: Path, kompile_yaml: Path
    ) -> None:
        result = cli_runner.invoke(
            complete,
            ["-p", str(hello_project), "-c", str(kompile_yaml), "--line", "99", "--ch", "0"],
        )

        assert result.exit_code == 0
        assert json.loads(result.output) == []


class TestHighlightCommand:
    """Tests for kompile highlight."""

    def test_clean_project(
        self, cli_runner: CliRunner, hello_project: Path, kompile_yaml: Path
    ) -> None:
        result = cli_runner.invoke(highlight, ["-p", str(hello_project), "-c", str(kompile_yaml)])

        assert result.exit_code == 0
        assert "No diagnostics" in result.output

    def test_reports_errors_without_failing(
        self, cli_runner: CliRunner, hello_project: Path, erroring_kompile_yaml: Path
    ) -> None:
        result = cli_runner.invoke(
            highlight, ["-p", str(hello_project), "-c", str(erroring_kompile_yaml)]
        )

        assert result.exit_code == 0
        assert "File.kt:5:10: ERROR: Unresolved reference: foo" in result.output

    def test_json_output(
        self, cli_runner: CliRunner, hello_project: Path, erroring_kompile_yaml: Path
    ) -> None:
        result = cli_runner.invoke(
            highlight, ["-p", str(hello_project), "-c", str(erroring_kompile_yaml), "--json"]
        )

        payload = json.loads(result.output)
        (diagnostic,) = payload["map"]["File.kt"]
        assert diagnostic["severity"] == "ERROR"
        assert diagnostic["interval"]["start"] == {"line": 4, "ch": 9}


class TestVersionCommand:
    """Tests for kompile version."""

    def test_plain(self, cli_runner: CliRunner, kompile_yaml: Path) -> None:
        result = cli_runner.invoke(version, ["-c", str(kompile_yaml)])

        assert result.exit_code == 0
        assert "compiler 2.1.0, stdlib 2.1.0" in result.output

    def test_json(self, cli_runner: CliRunner, kompile_yaml: Path) -> None:
        result = cli_runner.invoke(version, ["-c", str(kompile_yaml), "--json"])

        assert json.loads(result.output) == {"version": "2.1.0", "stdlibVersion": "2.1.0"}
