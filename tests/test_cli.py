"""
ityc Command-Line Test Suite
============================

Tests for the ityc command: reports, flags and exit codes.

Commands run in an isolated filesystem through click's CliRunner.
"""

import pytest
from click.testing import CliRunner

from itylang import __version__
from itylang.cli.errors import ExitCode
from itylang.cli.ityc import main


CLEAN_PROGRAM = "@Type Foo {\nIty x;\n}\n$\n"
SYNTAX_ERROR_PROGRAM = "@Type Foo {\nIty x\n}\n$\n"
LEXICAL_ERROR_PROGRAM = "@Type Foo {\nIty x; ?\n}\n$\n"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep ITYLANG_* settings of the calling shell out of the tests."""
    for name in ("ITYLANG_INCLUDE_PATH", "ITYLANG_STRICT_INCLUDES", "ITYLANG_ENCODING"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


def write(path, text):
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


class TestReports:
    """Test report output and the check exit codes."""

    def test_clean_program(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", CLEAN_PROGRAM)
            result = runner.invoke(main, ["main.txt"])

            assert result.exit_code == ExitCode.SUCCESS
            assert "Line #: 1 Token Text: @ Token Type: Start Symbol" in result.output
            assert "Line #: 1 Matched Rule Used: Program" in result.output
            assert result.output.count("Total NO of errors: 0") == 2

    def test_syntax_errors(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", SYNTAX_ERROR_PROGRAM)
            result = runner.invoke(main, ["main.txt"])

            assert result.exit_code == ExitCode.CHECK_FAILED
            assert "Not Matched: Expected ; or [ in variable declaration" in result.output

    def test_lexical_errors_skip_parser(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", LEXICAL_ERROR_PROGRAM)
            result = runner.invoke(main, ["main.txt"])

            assert result.exit_code == ExitCode.CHECK_FAILED
            assert "Line #: 2 Error in Token Text: Unknown character: ?" in result.output
            assert "Cannot parse due to scanner errors." in result.output
            assert "Matched Rule Used" not in result.output

    def test_force_parse(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", LEXICAL_ERROR_PROGRAM)
            result = runner.invoke(main, ["--force-parse", "main.txt"])

            assert result.exit_code == ExitCode.CHECK_FAILED
            assert "Cannot parse due to scanner errors." not in result.output
            assert "Matched Rule Used: Program" in result.output

    def test_scan_only(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", SYNTAX_ERROR_PROGRAM)
            result = runner.invoke(main, ["--scan-only", "main.txt"])

            # Only the scanner report, which has no errors
            assert result.exit_code == ExitCode.SUCCESS
            assert "Token Text: Foo" in result.output
            assert "Matched Rule Used" not in result.output

    def test_output_file(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", CLEAN_PROGRAM)
            result = runner.invoke(main, ["main.txt", "-o", "main.report"])

            assert result.exit_code == ExitCode.SUCCESS
            with open("main.report", encoding="utf-8") as f:
                saved = f.read()
            assert saved.endswith("Total NO of errors: 0\n")
            assert saved.strip() in result.output

    def test_verbose_output(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", CLEAN_PROGRAM)
            result = runner.invoke(main, ["-v", "main.txt"])

            assert result.exit_code == ExitCode.SUCCESS
            assert "Checking main.txt..." in result.output


class TestIncludes:
    """Test Require handling from the command line."""

    def test_sibling_include(self, runner):
        with runner.isolated_filesystem():
            write("fields.txt", "Cwq c;\n")
            write("main.txt", "@Type Foo {\nRequire(fields.txt)\n}\n$\n")
            result = runner.invoke(main, ["main.txt"])

            assert result.exit_code == ExitCode.SUCCESS
            assert "Token Text: Cwq Token Type: Character" in result.output

    def test_include_option(self, runner, tmp_path):
        lib = tmp_path / "lib"
        lib.mkdir()
        write(lib / "fields.txt", "Cwq c;\n")
        with runner.isolated_filesystem():
            write("main.txt", "@Type Foo {\nRequire(fields.txt)\n}\n$\n")
            result = runner.invoke(main, ["-I", str(lib), "main.txt"])

            assert result.exit_code == ExitCode.SUCCESS
            assert "Token Text: c Token Type: Identifier" in result.output

    def test_missing_include_is_skipped(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", "Require(nowhere.txt)\n" + CLEAN_PROGRAM)
            result = runner.invoke(main, ["main.txt"])

            assert result.exit_code == ExitCode.SUCCESS

    def test_strict_includes(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", "Require(nowhere.txt)\n" + CLEAN_PROGRAM)
            result = runner.invoke(main, ["--strict-includes", "main.txt"])

            assert result.exit_code == ExitCode.CHECK_FAILED
            assert "Required file not found: nowhere.txt" in result.output

    def test_strict_includes_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("ITYLANG_STRICT_INCLUDES", "1")
        with runner.isolated_filesystem():
            write("main.txt", "Require(nowhere.txt)\n" + CLEAN_PROGRAM)
            result = runner.invoke(main, ["main.txt"])

            assert result.exit_code == ExitCode.CHECK_FAILED


class TestArguments:
    """Test argument errors and informational options."""

    def test_missing_source(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["nope.txt"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_include_directory(self, runner):
        with runner.isolated_filesystem():
            write("main.txt", CLEAN_PROGRAM)
            result = runner.invoke(main, ["-I", "no_such_dir", "main.txt"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_undecodable_source(self, runner):
        with runner.isolated_filesystem():
            with open("main.txt", "wb") as f:
                f.write(b"@Type \xff { } $\n")
            result = runner.invoke(main, ["main.txt"])

            assert result.exit_code == ExitCode.INVALID_ARGS
            assert "cannot read source" in result.output

    def test_encoding_option(self, runner):
        with runner.isolated_filesystem():
            with open("main.txt", "wb") as f:
                f.write("@Type Foo { /* café\nIty x; } $\n".encode("latin-1"))
            result = runner.invoke(main, ["--encoding", "latin-1", "main.txt"])

            assert result.exit_code == ExitCode.SUCCESS

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert f"ityc, version {__version__}" in result.output
