# =============================================================================
# test_diagnostics.py - Diagnostics Sink Tests
# =============================================================================
# Tests for the diagnostic log and report rendering shared by the lexer
# and the recognizer.
# =============================================================================

import pytest

from itylang.frontend.diagnostics import (
    END_OF_FILE_SUFFIX,
    Diagnostic,
    DiagnosticKind,
    Diagnostics,
)


class TestRecording:
    """Test that entries are recorded in order."""

    def test_new_log_is_empty(self):
        diagnostics = Diagnostics()
        assert len(diagnostics) == 0
        assert diagnostics.error_count == 0
        assert not diagnostics.has_errors()

    def test_rule_and_error_entries(self):
        diagnostics = Diagnostics()
        rule = diagnostics.rule("Program", line=1)
        error = diagnostics.error("Expected end symbol ($ or #)", line=4)

        assert rule == Diagnostic(1, "Program", DiagnosticKind.MATCHED_RULE)
        assert error.is_error
        assert not rule.is_error
        assert diagnostics.entries == (rule, error)
        assert list(diagnostics) == [rule, error]

    def test_views_split_by_kind(self):
        diagnostics = Diagnostics()
        diagnostics.rule("A", 1)
        diagnostics.error("bad", 2)
        diagnostics.rule("B", 3)

        assert [d.message for d in diagnostics.matched_rules] == ["A", "B"]
        assert [d.message for d in diagnostics.errors] == ["bad"]
        assert diagnostics.error_count == 1
        assert diagnostics.has_errors()

    def test_entries_are_immutable(self):
        entry = Diagnostics().error("bad", 1)
        with pytest.raises(AttributeError):
            entry.line = 2


class TestFormatting:
    """Test report line formats."""

    def test_rule_line(self):
        diagnostics = Diagnostics()
        entry = diagnostics.rule("ClassBody", 3)
        assert diagnostics.format_entry(entry) == "Line #: 3 Matched Rule Used: ClassBody"

    def test_error_line_uses_label(self):
        parser_log = Diagnostics("Not Matched")
        lexer_log = Diagnostics("Error in Token Text")
        assert parser_log.format_entry(parser_log.error("oops", 2)) == "Line #: 2 Not Matched: oops"
        assert lexer_log.format_entry(lexer_log.error("oops", 2)) == "Line #: 2 Error in Token Text: oops"

    def test_end_of_file_suffix(self):
        diagnostics = Diagnostics()
        entry = diagnostics.error("Expected } at end of class body", 9, at_end=True)
        assert diagnostics.format_entry(entry).endswith(END_OF_FILE_SUFFIX)
        assert END_OF_FILE_SUFFIX == " (end of file)"

    def test_report_orders_rules_before_errors(self):
        """Rules come first even if errors were recorded in between."""
        diagnostics = Diagnostics()
        diagnostics.rule("Program", 1)
        diagnostics.error("first", 1)
        diagnostics.rule("EndSymbols", 2)
        diagnostics.error("second", 2)

        assert diagnostics.report().splitlines() == [
            "Line #: 1 Matched Rule Used: Program",
            "Line #: 2 Matched Rule Used: EndSymbols",
            "Line #: 1 Not Matched: first",
            "Line #: 2 Not Matched: second",
            "Total NO of errors: 2",
        ]

    def test_report_preamble(self):
        diagnostics = Diagnostics("Error in Token Text")
        report = diagnostics.report(preamble=["token one", "token two"])
        assert report.splitlines() == ["token one", "token two", "Total NO of errors: 0"]

    def test_count_line_matches_error_lines(self):
        diagnostics = Diagnostics()
        for line in range(1, 6):
            diagnostics.rule(f"R{line}", line)
            if line % 2:
                diagnostics.error(f"E{line}", line)

        lines = diagnostics.report().splitlines()
        assert len(diagnostics.error_lines()) == 3
        assert lines[-1] == "Total NO of errors: 3"
        assert lines[-4:-1] == diagnostics.error_lines()
