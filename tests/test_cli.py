"""Tests for the click command-line interface."""
from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from rxtract.cli import main


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _json_lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------

class TestParseCommand:
    def test_json_output(self, runner, tmp_config_file, tmp_log_file, document_config, document_lines) -> None:
        result = runner.invoke(main, ["parse", str(tmp_config_file(document_config)), str(tmp_log_file(document_lines))])
        assert result.exit_code == 0
        assert '{"float":9.57889,"bool":false,"duration":"2m4.545s"}' in result.output
        assert '{"float":2245.6,"bool":true,"duration":"1m6.545s"}' in result.output
        assert "Extracted 2 records with 0 errors" in result.output

    def test_stdin(self, runner, tmp_config_file, line_config) -> None:
        result = runner.invoke(
            main, ["parse", str(tmp_config_file(line_config)), "-"],
            input="web1 load=0.5 up=2m\nnoise\n",
        )
        assert result.exit_code == 0
        assert _json_lines(result.output) == [{"host": "web1", "load": 0.5, "uptime": 120}]

    def test_errors_reported(self, runner, tmp_config_file, tmp_log_file, line_config) -> None:
        args = ["parse", str(tmp_config_file(line_config)), str(tmp_log_file(["web1 load=high up=2m"]))]
        result = runner.invoke(main, args)
        assert result.exit_code == 0
        assert "high" in result.output
        assert "Extracted 1 record with 1 error" in result.output

        quiet = runner.invoke(main, args + ["--no-errors"])
        assert "high" not in quiet.output
        assert "Extracted 1 record with 1 error" in quiet.output

    def test_limit(self, runner, tmp_config_file, tmp_log_file, document_config, document_lines) -> None:
        result = runner.invoke(
            main,
            ["parse", str(tmp_config_file(document_config)), str(tmp_log_file(document_lines)), "-n", "1"],
        )
        assert result.exit_code == 0
        assert len(_json_lines(result.output)) == 1

    def test_several_files_with_workers(self, runner, tmp_config_file, tmp_log_file, line_config) -> None:
        first = tmp_log_file(["a load=1 up=1s"], name="a.log")
        second = tmp_log_file(["b load=2 up=2s"], name="b.log")
        result = runner.invoke(
            main, ["parse", str(tmp_config_file(line_config)), str(first), str(second), "-w", "2"],
        )
        assert result.exit_code == 0
        assert [r["host"] for r in _json_lines(result.output)] == ["a", "b"]

    def test_table_output(self, runner, tmp_config_file, tmp_log_file, document_config, document_lines) -> None:
        result = runner.invoke(
            main,
            ["parse", str(tmp_config_file(document_config)), str(tmp_log_file(document_lines)), "-o", "table"],
        )
        assert result.exit_code == 0
        assert "duration" in result.output
        assert "2245.6" in result.output

    def test_invalid_config(self, runner, tmp_config_file, tmp_log_file) -> None:
        result = runner.invoke(main, ["parse", str(tmp_config_file({"rules": []})), str(tmp_log_file(["x"]))])
        assert result.exit_code == 1
        assert "Invalid parser config" in result.output


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

class TestCheckCommand:
    def test_valid(self, runner, tmp_config_file, document_config) -> None:
        result = runner.invoke(main, ["check", str(tmp_config_file(document_config))])
        assert result.exit_code == 0
        assert "document" in result.output
        assert "duration" in result.output

    def test_regex_shown_literally(self, runner, tmp_config_file) -> None:
        config = {"start_match": "x", "rules": [{"name": "w", "type": "string", "regex": "([a-z]+)"}]}
        result = runner.invoke(main, ["check", str(tmp_config_file(config))])
        assert result.exit_code == 0
        assert "[a-z]" in result.output

    def test_invalid(self, runner, tmp_config_file) -> None:
        config = {"start_match": "x", "rules": [{"name": "n", "type": "int", "regex": r"\d+"}]}
        result = runner.invoke(main, ["check", str(tmp_config_file(config))])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------

class TestConvertCommand:
    @pytest.mark.parametrize("args,expected", [
        (["132m", "--type", "duration", "--to", "hours"], "2.2"),
        (["1mib", "-t", "datasize", "-T", "kib"], "1024"),
        (["1537335984", "-t", "time", "-f", "unix", "-T", "unix_milli"], "1537335984000"),
        (["ffff", "-t", "string"], '"ffff"'),
    ])
    def test_success(self, runner, args: list[str], expected: str) -> None:
        result = runner.invoke(main, ["convert", *args])
        assert result.exit_code == 0
        assert result.output.strip() == expected

    def test_failure(self, runner) -> None:
        result = runner.invoke(main, ["convert", "abc", "-t", "int"])
        assert result.exit_code == 1
        assert "Conversion failed" in result.output

    def test_empty_value(self, runner) -> None:
        result = runner.invoke(main, ["convert", "", "-t", "int"])
        assert result.exit_code == 1


def test_version(runner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
