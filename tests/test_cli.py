"""
Command-Line Interface Tests
============================

Tests for the pdp8lint command and the shared CLI error handling.
"""

import json
import logging

import click
import pytest
from click.testing import CliRunner

from pdp8_lsp.cli.errors import ExitCode, handle_cli_exception
from pdp8_lsp.cli.pdp8lint import format_diagnostic, main
from pdp8_lsp.cli.pdp8lsp import main as lsp_main
from pdp8_lsp.config import ENV_MAX_PROBLEMS
from pdp8_lsp.errors import ConfigError, ProtocolError


@pytest.fixture
def runner(monkeypatch):
    """CLI runner; the root logging setup done by the commands is undone afterwards."""
    monkeypatch.delenv(ENV_MAX_PROBLEMS, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield CliRunner()
    root.handlers[:] = handlers
    root.setLevel(level)


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


# =============================================================================
# pdp8lint Tests
# =============================================================================

class TestLint:
    """Test the pdp8lint command."""

    def test_clean_file(self, runner, tmp_path):
        path = write(tmp_path, "ok.asm", "CLA\nHLT\nEND\n")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output == ""

    def test_warnings_only(self, runner, tmp_path):
        path = write(tmp_path, "warn.asm", "FOO\nHLT\nEND\n")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.SUCCESS
        assert f"{path}:1:1: warning: Invalid keyword: FOO" in result.output

    def test_errors_fail(self, runner, tmp_path):
        path = write(tmp_path, "bad.asm", "CLA\nHLT")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert f"{path}:2:1: error: Missing END instruction." in result.output

    def test_json_output(self, runner, tmp_path):
        path = write(tmp_path, "bad.asm", "CLA\nHLT")
        result = runner.invoke(main, ["--format", "json", str(path)])
        report = json.loads(result.output)
        assert len(report) == 1
        assert report[0]["file"] == str(path)
        assert report[0]["severity"] == 1
        assert report[0]["range"]["start"] == {"line": 1, "character": 0}

    def test_max_problems(self, runner, tmp_path):
        path = write(tmp_path, "many.asm", "\n".join(f"Z{i}" for i in range(10)))
        result = runner.invoke(main, ["-m", "4", str(path)])
        assert result.output.count("Invalid keyword") == 3

    def test_max_problems_from_env(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv(ENV_MAX_PROBLEMS, "3")
        path = write(tmp_path, "many.asm", "\n".join(f"Z{i}" for i in range(10)))
        result = runner.invoke(main, [str(path)])
        assert result.output.count("Invalid keyword") == 2

    def test_invalid_max_problems(self, runner, tmp_path):
        path = write(tmp_path, "ok.asm", "HLT\nEND")
        result = runner.invoke(main, ["-m", "0", str(path)])
        assert result.exit_code == 2

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "nope.asm")])
        assert result.exit_code == 2

    def test_undecodable_file(self, runner, tmp_path):
        path = tmp_path / "binary.asm"
        path.write_bytes(b"\xff\xfe\x00CLA")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_several_files(self, runner, tmp_path):
        ok = write(tmp_path, "ok.asm", "HLT\nEND")
        bad = write(tmp_path, "bad.asm", "HLT")
        result = runner.invoke(main, [str(ok), str(bad)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert str(ok) not in result.output
        assert str(bad) in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_lsp_help(self, runner):
        result = runner.invoke(lsp_main, ["--help"])
        assert result.exit_code == 0
        assert "--log-file" in result.output


class TestFormatDiagnostic:
    """Test the text output format."""

    def test_one_based_positions(self, tmp_path):
        from pdp8_lsp.analyzer import analyze

        diagnostic = analyze("X, FOO\nHLT\nEND")[0]
        assert format_diagnostic(tmp_path / "a.asm", diagnostic) == (
            f"{tmp_path / 'a.asm'}:1:4: warning: Invalid keyword: FOO"
        )


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestHandleCliException:
    """Test exit codes chosen for each error type."""

    @pytest.mark.parametrize("error, code", [
        (ConfigError("maxNumberOfProblems", 0, "expected a positive integer"), ExitCode.INVALID_ARGS),
        (ProtocolError(ProtocolError.PARSE_ERROR, "bad frame"), ExitCode.BUILD_ERROR),
        (click.BadParameter("bad"), ExitCode.INVALID_ARGS),
        (FileNotFoundError("missing.asm"), ExitCode.INVALID_ARGS),
        (RuntimeError("boom"), ExitCode.INTERNAL_ERROR),
    ])
    def test_exit_codes(self, error, code):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(error)
        assert exc_info.value.code == code
