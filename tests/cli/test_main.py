"""Tests for the lorax CLI."""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from loraxmod.cli.main import cli

runner = CliRunner()

JS_SCHEMA = Path(__file__).parent.parent / "fixtures" / "javascript-mini.json"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Run every command in an empty project with no global config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LORAXMOD__LOGGING__LEVEL", raising=False)
    with patch("loraxmod.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield tmp_path


class TestGroup:
    """Top-level group behavior."""

    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "lorax, version 0.1.0" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ("extract", "diff", "resolve"):
            assert name in result.output

    def test_given_invalid_project_config_when_invoked_then_config_error(
        self, isolated_config: Path
    ) -> None:
        """Bad config values fail the command with the error code."""
        # Given
        config_dir = isolated_config / ".loraxmod"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("diff:\n  similarity_threshold: 2\n")

        # When
        result = runner.invoke(cli, ["resolve", str(JS_SCHEMA)])

        # Then
        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output


class TestResolve:
    """lorax resolve."""

    def test_given_node_type_when_resolved_then_prints_bindings(self) -> None:
        """Named node types print their intent -> field mapping."""
        # When
        result = runner.invoke(cli, ["resolve", str(JS_SCHEMA), "function_declaration"])

        # Then
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "function_declaration": {
                "identifier": "name",
                "body": "body",
                "parameters": "parameters",
            }
        }

    def test_all_types_skips_unresolved(self) -> None:
        result = runner.invoke(cli, ["resolve", str(JS_SCHEMA)])

        data = json.loads(result.stdout)
        assert list(data) == sorted(data)
        assert data["call_expression"] == {"callable": "function", "parameters": "arguments"}
        assert "statement_block" not in data

    def test_malformed_schema(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text('{"type": "module"}')

        result = runner.invoke(cli, ["resolve", str(bad)])

        assert result.exit_code == 1
        assert "SCHEMA_MALFORMED" in result.output


class TestErrors:
    """Language detection failures."""

    def test_given_file_log_output_when_command_fails_then_points_at_log(
        self, isolated_config: Path
    ) -> None:
        """Failures are logged to the configured file and the message names it."""
        # Given
        log_file = isolated_config / "logs" / "lorax.log"
        config_dir = isolated_config / ".loraxmod"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text(
            f"logging:\n  outputs:\n    - format: json\n      destination: {log_file}\n"
        )
        source = isolated_config / "a.cbl"
        source.write_text("x")

        # When
        result = runner.invoke(cli, ["extract", "--language", "cobol", str(source)])

        # Then
        assert result.exit_code == 1
        assert f"See {log_file} for details." in result.output
        events = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert events[-1]["event"] == "command_failed"
        assert events[-1]["error"] == "TREE_UNSUPPORTED_LANGUAGE"
        assert events[-1]["logger"] == "loraxmod.cli.utils"

    def test_console_only_logging_has_no_pointer(self, tmp_path: Path) -> None:
        source = tmp_path / "a.cbl"
        source.write_text("x")

        result = runner.invoke(cli, ["extract", "--language", "cobol", str(source)])

        assert result.exit_code == 1
        assert "for details" not in result.output

    def test_extract_unknown_extension(self, tmp_path: Path) -> None:
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")

        result = runner.invoke(cli, ["extract", str(notes)])

        assert result.exit_code == 1
        assert "Cannot detect language" in result.output

    def test_diff_unknown_language(self, tmp_path: Path) -> None:
        old = tmp_path / "a.cbl"
        new = tmp_path / "b.cbl"
        old.write_text("x")
        new.write_text("y")

        result = runner.invoke(cli, ["diff", "--language", "cobol", str(old), str(new)])

        assert result.exit_code == 1
        assert "TREE_UNSUPPORTED_LANGUAGE" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["extract", str(tmp_path / "missing.py")])

        assert result.exit_code == 2


class TestWithPythonGrammar:
    """extract and diff against real parse trees."""

    @pytest.fixture(autouse=True)
    def _grammar(self) -> None:
        pytest.importorskip("tree_sitter_python")

    @pytest.fixture
    def sources(self, tmp_path: Path) -> tuple[Path, Path]:
        old = tmp_path / "old.py"
        new = tmp_path / "new.py"
        old.write_text("def foo():\n    return 1\n")
        new.write_text("def bar():\n    return 1\n\ndef baz():\n    pass\n")
        return old, new

    def test_extract_root(self, sources: tuple[Path, Path], py_schema_path: Path) -> None:
        old, _ = sources

        result = runner.invoke(cli, ["extract", "-s", str(py_schema_path), str(old)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["node_type"] == "module"

    def test_extract_by_type(self, sources: tuple[Path, Path], py_schema_path: Path) -> None:
        _, new = sources

        result = runner.invoke(
            cli,
            ["extract", "-s", str(py_schema_path), "-t", "function_definition", str(new)],
        )

        data = json.loads(result.stdout)
        assert [n["extractions"]["identifier"] for n in data] == ["bar", "baz"]

    def test_extract_recurse(self, sources: tuple[Path, Path], py_schema_path: Path) -> None:
        old, _ = sources

        result = runner.invoke(cli, ["extract", "-r", "-s", str(py_schema_path), str(old)])

        data = json.loads(result.stdout)
        assert data[0]["node_type"] == "module"
        assert data[1]["node_type"] == "function_definition"

    def test_given_two_files_when_diffed_then_json_changes_and_summary(
        self, sources: tuple[Path, Path], py_schema_path: Path
    ) -> None:
        """The diff command prints the contract JSON shape."""
        # Given
        old, new = sources

        # When
        result = runner.invoke(cli, ["diff", "-s", str(py_schema_path), str(old), str(new)])

        # Then
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"] == {"REMOVE": 0, "RENAME": 1, "MOVE": 0, "MODIFY": 0, "ADD": 1}
        assert [c["type"] for c in data["changes"]] == ["RENAME", "ADD"]
        assert set(data["changes"][0]) == {
            "type",
            "node_type",
            "path",
            "old_identity",
            "new_identity",
            "old_value",
            "new_value",
        }

    def test_diff_summary_only(self, sources: tuple[Path, Path], py_schema_path: Path) -> None:
        old, new = sources

        result = runner.invoke(
            cli, ["diff", "--summary", "-s", str(py_schema_path), str(old), str(new)]
        )

        assert json.loads(result.stdout)["ADD"] == 1

    def test_diff_metadata(self, sources: tuple[Path, Path], py_schema_path: Path) -> None:
        old, new = sources

        result = runner.invoke(
            cli, ["diff", "--metadata", "-s", str(py_schema_path), str(old), str(new)]
        )

        rename = json.loads(result.stdout)["changes"][0]
        assert rename["start_line"] == 1
        assert rename["old_path"] == rename["new_path"] == ""

    def test_diff_table(self, sources: tuple[Path, Path], py_schema_path: Path) -> None:
        old, new = sources

        result = runner.invoke(
            cli, ["diff", "--table", "-s", str(py_schema_path), str(old), str(new)]
        )

        assert result.exit_code == 0
        assert "RENAME" in result.output
        assert "foo -> bar" in result.output
        assert "1 RENAME, 1 ADD" in result.output
