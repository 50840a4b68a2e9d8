"""End-to-end tests for the AutoArgs CLI.

Runs `autoargs suggest` and `autoargs apply` against a copy of the sample
solution and against single files.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from autoargs.cli.main import app, position_to_offset

runner = CliRunner()

SINGLE_FILE = """\
using NSubstitute;

public interface IClock
{
    void Set(int hour, int minute);
}

public class ClockTests
{
    public void Run()
    {
        var clock = Substitute.For<IClock>();
        clock.Set();
    }
}
"""


def _position(text: str, marker: str) -> tuple[str, str]:
    """1-based (line, column) of the last character of ``marker``."""
    offset = text.index(marker) + len(marker) - 1
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return str(line), str(column)


@pytest.fixture
def solution(tmp_path: Path, csharp_sample_path: Path) -> Path:
    """Copy the sample solution so tests may rewrite it."""
    target = tmp_path / "solution"
    shutil.copytree(csharp_sample_path, target)
    return target


@pytest.fixture
def tests_file(solution: Path) -> Path:
    return solution / "Shop.Tests" / "OrderTests.cs"


@pytest.fixture
def single_file(tmp_path: Path) -> Path:
    path = tmp_path / "ClockTests.cs"
    path.write_text(SINGLE_FILE)
    return path


class TestCliHelp:
    """Test CLI help and basic commands."""

    def test_main_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "suggest" in result.output
        assert "apply" in result.output

    def test_apply_help(self):
        result = runner.invoke(app, ["apply", "--help"])
        assert result.exit_code == 0
        assert "--choice" in result.output
        assert "--write" in result.output


class TestSuggestCommand:
    """Test the suggest command."""

    def test_single_suggestion_json(self, solution: Path, tests_file: Path):
        line, column = _position(tests_file.read_text(), "Received().Place()")
        result = runner.invoke(
            app,
            ["suggest", str(tests_file), "-l", line, "-c", column, "-p", str(solution), "--json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {"index": 1, "title": "Add wildcard-match arguments", "group": None}
        ]

    def test_overloads_json(self, solution: Path, tests_file: Path):
        line, column = _position(tests_file.read_text(), "_orders.Cancel()")
        result = runner.invoke(
            app,
            ["suggest", str(tests_file), "-l", line, "-c", column, "-p", str(solution), "--json"],
        )
        assert result.exit_code == 0
        entries = json.loads(result.stdout)
        assert [e["title"] for e in entries] == [".Cancel(int)", ".Cancel(int, bool)"]
        assert {e["group"] for e in entries} == {"Add wildcard-match arguments"}

    def test_table_output(self, solution: Path, tests_file: Path):
        line, column = _position(tests_file.read_text(), "_orders.Cancel()")
        result = runner.invoke(
            app, ["suggest", str(tests_file), "-l", line, "-c", column, "-p", str(solution)]
        )
        assert result.exit_code == 0
        assert "Suggestions" in result.stdout
        assert ".Cancel(int, bool)" in result.stdout

    def test_no_suggestions(self, solution: Path, tests_file: Path):
        line, column = _position(tests_file.read_text(), "order.Total()")
        result = runner.invoke(
            app, ["suggest", str(tests_file), "-l", line, "-c", column, "-p", str(solution)]
        )
        assert result.exit_code == 0
        assert "No suggestions" in result.stdout

    def test_single_file_needs_reference(self, single_file: Path):
        line, column = _position(single_file.read_text(), "clock.Set()")
        args = ["suggest", str(single_file), "-l", line, "-c", column, "--json"]

        without = runner.invoke(app, args)
        assert without.exit_code == 0
        assert json.loads(without.stdout) == []

        with_reference = runner.invoke(app, [*args, "-r", "NSubstitute"])
        assert with_reference.exit_code == 0
        assert len(json.loads(with_reference.stdout)) == 1

    def test_position_outside_file(self, single_file: Path):
        result = runner.invoke(app, ["suggest", str(single_file), "-l", "999", "-c", "1"])
        assert result.exit_code != 0

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(
            app, ["suggest", str(tmp_path / "Missing.cs"), "-l", "1", "-c", "1"]
        )
        assert result.exit_code != 0


class TestApplyCommand:
    """Test the apply command."""

    def test_prints_rewritten_file(self, single_file: Path):
        text = single_file.read_text()
        line, column = _position(text, "clock.Set()")
        result = runner.invoke(
            app, ["apply", str(single_file), "-l", line, "-c", column, "-r", "NSubstitute"]
        )
        assert result.exit_code == 0
        assert result.stdout == text.replace(
            "clock.Set();", "clock.Set(Arg.Any<int>(), Arg.Any<int>())\n;"
        )
        assert single_file.read_text() == text

    def test_write_second_overload(self, solution: Path, tests_file: Path):
        line, column = _position(tests_file.read_text(), "_orders.Cancel()")
        result = runner.invoke(
            app,
            [
                "apply",
                str(tests_file),
                "-l",
                line,
                "-c",
                column,
                "-p",
                str(solution),
                "--choice",
                "2",
                "--write",
            ],
        )
        assert result.exit_code == 0
        assert "Applied: .Cancel(int, bool)" in result.stdout
        assert "_orders.Cancel(Arg.Any<int>(), Arg.Any<bool>())\n;" in tests_file.read_text()

    def test_invalid_choice(self, solution: Path, tests_file: Path):
        text = tests_file.read_text()
        line, column = _position(text, "_orders.Cancel()")
        result = runner.invoke(
            app,
            ["apply", str(tests_file), "-l", line, "-c", column, "-p", str(solution), "-n", "3"],
        )
        assert result.exit_code == 1
        assert tests_file.read_text() == text

    def test_no_suggestions(self, solution: Path, tests_file: Path):
        line, column = _position(tests_file.read_text(), "order.Total()")
        result = runner.invoke(
            app, ["apply", str(tests_file), "-l", line, "-c", column, "-p", str(solution)]
        )
        assert result.exit_code == 1


class TestPositionToOffset:
    """Test line and column conversion."""

    def test_first_character(self):
        assert position_to_offset("ab\ncd", 1, 1) == 0

    def test_second_line(self):
        assert position_to_offset("ab\ncd", 2, 2) == 4

    def test_crlf(self):
        assert position_to_offset("ab\r\ncd", 2, 1) == 4

    def test_end_of_line(self):
        assert position_to_offset("ab\ncd", 1, 3) == 2


class TestSuggestionsTable:
    """Test the suggestions table builder."""

    def test_rows(self):
        from autoargs.cli._tables import build_suggestions_table
        from autoargs.cli.main import SuggestionEntry

        table = build_suggestions_table(
            [
                SuggestionEntry(1, ".Cancel(int)", "Add wildcard-match arguments"),
                SuggestionEntry(2, ".Cancel(int, bool)", "Add wildcard-match arguments"),
            ]
        )
        assert [c.header for c in table.columns] == ["#", "Title", "Group"]
        assert table.row_count == 2
        assert list(table.columns[1].cells) == [".Cancel(int)", ".Cancel(int, bool)"]
