"""
Frontend Pipeline Test Suite
============================

Tests for FrontendPipeline, FrontendOptions, FrontendResult and the
filesystem include resolver.

Test Organization
-----------------
- TestCheckSource: in-memory checking and the scan-before-parse rule
- TestRunFile: checking files, include search and read errors
- TestFrontendOptions: environment configuration
- TestFileIncludeResolver: include search order and read failures
"""

import logging
from pathlib import Path

import pytest

from itylang import ItyError
from itylang.frontend import (
    FileIncludeResolver,
    FrontendOptions,
    FrontendPipeline,
    SourceReadError,
    check_file,
    check_source,
)
from itylang.frontend.pipeline import PARSE_SKIPPED_MESSAGE


CLEAN_PROGRAM = "@Type Foo { Ity x; } $"


# =============================================================================
# In-Memory Checking
# =============================================================================

class TestCheckSource:
    """Test checking source text."""

    def test_clean_program(self):
        result = check_source(CLEAN_PROGRAM)
        assert result.ok
        assert result.error_count == 0
        assert not result.parse_skipped
        assert result.recognition.rule_names()[:3] == ["Program", "StartSymbols", "ClassDeclaration"]

    def test_syntax_errors(self):
        result = check_source("@Type Foo { Ity x $")
        assert not result.ok
        assert result.lexical_error_count == 0
        assert result.syntax_error_count == 2

    def test_lexical_errors_skip_recognition(self):
        """The recognizer does not run when the scanner found errors."""
        result = check_source('@Type Foo { CwqSequence s = "abc; } $')
        assert result.parse_skipped
        assert result.lexical_error_count == 1
        assert result.parser_report() == PARSE_SKIPPED_MESSAGE
        assert PARSE_SKIPPED_MESSAGE == "Cannot parse due to scanner errors."
        assert not result.ok

    def test_force_parse_on_lexical_errors(self):
        options = FrontendOptions(parse_on_lex_errors=True)
        result = check_source("@Type Foo { Ity x; ? } $", options=options)
        assert not result.parse_skipped
        assert result.lexical_error_count == 1
        assert result.syntax_error_count == 0
        assert result.error_count == 1

    def test_in_memory_includes(self):
        sources = {"fields.txt": "Ity a;\nCwq b;"}
        result = check_source("@Type Foo {\nRequire(fields.txt)\n} $", sources)
        assert result.ok
        assert [t.text for t in result.lex.tokens][4:7] == ["Ity", "a", ";"]

    def test_strict_includes_option(self):
        options = FrontendOptions(strict_includes=True)
        result = check_source("Require(missing.txt)\n" + CLEAN_PROGRAM, options=options)
        assert [e.message for e in result.lex.errors] == ["Required file not found: missing.txt"]
        assert result.parse_skipped

    def test_combined_report(self):
        report = check_source(CLEAN_PROGRAM).report()
        scanner, parser = report.split("\n\n")
        assert scanner.startswith("Line #: 1 Token Text: @ Token Type: Start Symbol")
        assert scanner.endswith("Total NO of errors: 0")
        assert parser.startswith("Line #: 1 Matched Rule Used: Program")
        assert parser.endswith("Total NO of errors: 0")

    def test_runs_are_independent(self):
        pipeline = FrontendPipeline()
        first = pipeline.run_source("@Type Foo { Ity x $")
        pipeline.run_source(CLEAN_PROGRAM)
        again = pipeline.run_source("@Type Foo { Ity x $")
        assert first.report() == again.report()


# =============================================================================
# File Checking
# =============================================================================

class TestRunFile:
    """Test checking files on disk."""

    def test_file_with_sibling_include(self, tmp_path):
        """Required units are found next to the checked file."""
        (tmp_path / "fields.txt").write_text("Ity a;\n")
        source = tmp_path / "main.txt"
        source.write_text("@Type Foo {\nRequire(fields.txt)\n}\n$\n")

        result = check_file(source)
        assert result.ok
        assert result.name == "main.txt"
        assert "a" in [t.text for t in result.lex.tokens]

    def test_include_path_option(self, tmp_path):
        lib = tmp_path / "lib"
        lib.mkdir()
        (lib / "fields.txt").write_text("Cwq c;\n")
        source = tmp_path / "main.txt"
        source.write_text("@Type Foo {\nRequire(fields.txt)\n} $\n")

        options = FrontendOptions(include_paths=[str(lib)])
        result = FrontendPipeline(options).run_file(str(source))
        assert "Cwq" in [t.text for t in result.lex.tokens]

    def test_sibling_directory_searched_first(self, tmp_path):
        lib = tmp_path / "lib"
        lib.mkdir()
        (lib / "fields.txt").write_text("Ity from_lib;\n")
        (tmp_path / "fields.txt").write_text("Ity from_sibling;\n")
        source = tmp_path / "main.txt"
        source.write_text("@Type Foo {\nRequire(fields.txt)\n} $\n")

        result = FrontendPipeline(FrontendOptions(include_paths=[str(lib)])).run_file(source)
        names = [t.text for t in result.lex.tokens]
        assert "from_sibling" in names
        assert "from_lib" not in names

    def test_file_does_not_require_itself(self, tmp_path):
        source = tmp_path / "main.txt"
        source.write_text("Require(main.txt)\n" + CLEAN_PROGRAM)
        result = check_file(source)
        assert result.ok

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceReadError) as exc_info:
            check_file(tmp_path / "nope.txt")
        assert "cannot read source: file not found" in str(exc_info.value)
        assert isinstance(exc_info.value, ItyError)

    def test_undecodable_file(self, tmp_path):
        source = tmp_path / "binary.txt"
        source.write_bytes(b"@Type \xff\xfe { } $")
        with pytest.raises(SourceReadError) as exc_info:
            check_file(source)
        assert "not valid utf-8" in str(exc_info.value)
        assert "hint:" in str(exc_info.value)

    def test_encoding_option(self, tmp_path):
        source = tmp_path / "latin.txt"
        source.write_bytes("@Type Foo { /* café\nCwqSequence s; } $\n".encode("latin-1"))
        options = FrontendOptions(encoding="latin-1")
        assert FrontendPipeline(options).run_file(source).ok

        with pytest.raises(SourceReadError):
            check_file(source)


# =============================================================================
# Configuration
# =============================================================================

class TestFrontendOptions:
    """Test FrontendOptions defaults and environment loading."""

    def test_defaults(self):
        options = FrontendOptions()
        assert options.include_paths == []
        assert options.strict_includes is False
        assert options.parse_on_lex_errors is False
        assert options.encoding == "utf-8"

    def test_from_env_unset(self, monkeypatch):
        for name in ("ITYLANG_INCLUDE_PATH", "ITYLANG_STRICT_INCLUDES", "ITYLANG_ENCODING"):
            monkeypatch.delenv(name, raising=False)
        assert FrontendOptions.from_env() == FrontendOptions()

    def test_from_env(self, monkeypatch):
        import os

        monkeypatch.setenv("ITYLANG_INCLUDE_PATH", os.pathsep.join(["lib", "", "vendor"]))
        monkeypatch.setenv("ITYLANG_STRICT_INCLUDES", "Yes")
        monkeypatch.setenv("ITYLANG_ENCODING", "latin-1")

        options = FrontendOptions.from_env()
        assert options.include_paths == ["lib", "vendor"]
        assert options.strict_includes is True
        assert options.encoding == "latin-1"

    def test_from_env_false_flag(self, monkeypatch):
        monkeypatch.setenv("ITYLANG_STRICT_INCLUDES", "0")
        assert FrontendOptions.from_env().strict_includes is False


# =============================================================================
# Include Resolver
# =============================================================================

class TestFileIncludeResolver:
    """Test the filesystem include resolver."""

    def test_found(self, tmp_path):
        (tmp_path / "a.txt").write_text("Ity a;")
        resolver = FileIncludeResolver([tmp_path])
        assert resolver("a.txt") == "Ity a;"
        assert resolver.find("a.txt") == tmp_path / "a.txt"

    def test_not_found(self, tmp_path):
        assert FileIncludeResolver([tmp_path])("missing.txt") is None

    def test_search_order(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (first / "a.txt").write_text("first")
        (second / "a.txt").write_text("second")
        (second / "b.txt").write_text("only second")

        resolver = FileIncludeResolver([first, second])
        assert resolver("a.txt") == "first"
        assert resolver("b.txt") == "only second"

    def test_directory_is_not_a_unit(self, tmp_path):
        (tmp_path / "units").mkdir()
        assert FileIncludeResolver([tmp_path])("units") is None

    def test_unreadable_file_is_not_found(self, tmp_path, caplog):
        (tmp_path / "bad.txt").write_bytes(b"\xff\xfe\xfa")
        resolver = FileIncludeResolver([tmp_path])
        with caplog.at_level(logging.WARNING, logger="itylang.frontend.includes"):
            assert resolver("bad.txt") is None
        assert "Cannot read required file" in caplog.text

    def test_accepts_strings(self, tmp_path):
        (tmp_path / "a.txt").write_text("x")
        resolver = FileIncludeResolver([str(tmp_path)])
        assert resolver.search_paths == [Path(tmp_path)]
        assert resolver("a.txt") == "x"
