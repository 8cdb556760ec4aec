"""
Diagnostics Sink
================

Collects the per-run log of the lexer and of the recognizer and renders
the textual reports.

Every run creates its own Diagnostics object. Entries are append-only and
come in two kinds:

- MATCHED_RULE: a grammar production was entered (a parse trace entry,
  not a success confirmation)
- ERROR: a lexical or syntax error

Report Format
-------------
Matched rules first, then errors, then the count:

    Line #: 1 Matched Rule Used: Program
    Line #: 1 Matched Rule Used: ClassDeclaration
    Line #: 1 Not Matched: Expected ; or [ in variable declaration
    Total NO of errors: 1

An entry recorded while the cursor was past the last token gets the
suffix " (end of file)".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator


END_OF_FILE_SUFFIX = " (end of file)"


class DiagnosticKind(Enum):
    """The two kinds of diagnostic entries."""

    MATCHED_RULE = "Matched Rule Used"
    ERROR = "Error"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single diagnostic entry.

    Attributes:
        line: Source line the entry refers to (1-indexed)
        message: Rule name for MATCHED_RULE, description for ERROR
        kind: Entry kind
        at_end: True if recorded after the input was exhausted
    """
    line: int
    message: str
    kind: DiagnosticKind
    at_end: bool = False

    @property
    def is_error(self) -> bool:
        return self.kind is DiagnosticKind.ERROR


class Diagnostics:
    """
    Append-only diagnostic log for one lexer or recognizer run.

    The error label is what distinguishes the two reports:
    "Error in Token Text" for the lexer, "Not Matched" for the recognizer.

    Example:
        diagnostics = Diagnostics("Not Matched")
        diagnostics.rule("Program", line=1)
        diagnostics.error("Expected end symbol ($ or #)", line=3, at_end=True)
        print(diagnostics.report())
    """

    def __init__(self, error_label: str = "Not Matched"):
        self.error_label = error_label
        self._entries: list[Diagnostic] = []

    def rule(self, name: str, line: int, at_end: bool = False) -> Diagnostic:
        """Record that the production ``name`` was entered."""
        entry = Diagnostic(line, name, DiagnosticKind.MATCHED_RULE, at_end)
        self._entries.append(entry)
        return entry

    def error(self, message: str, line: int, at_end: bool = False) -> Diagnostic:
        """Record an error."""
        entry = Diagnostic(line, message, DiagnosticKind.ERROR, at_end)
        self._entries.append(entry)
        return entry

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[Diagnostic, ...]:
        """All entries in recording order."""
        return tuple(self._entries)

    @property
    def matched_rules(self) -> tuple[Diagnostic, ...]:
        return tuple(e for e in self._entries if not e.is_error)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(e for e in self._entries if e.is_error)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._entries if e.is_error)

    def has_errors(self) -> bool:
        """Return True if any errors have been recorded."""
        return any(e.is_error for e in self._entries)

    # =========================================================================
    # Formatting
    # =========================================================================

    def format_entry(self, entry: Diagnostic) -> str:
        """Format one entry as a report line."""
        if entry.is_error:
            text = f"Line #: {entry.line} {self.error_label}: {entry.message}"
        else:
            text = f"Line #: {entry.line} {entry.kind.value}: {entry.message}"
        if entry.at_end:
            text += END_OF_FILE_SUFFIX
        return text

    def rule_lines(self) -> list[str]:
        return [self.format_entry(e) for e in self.matched_rules]

    def error_lines(self) -> list[str]:
        return [self.format_entry(e) for e in self.errors]

    def report(self, preamble: Iterable[str] = ()) -> str:
        """
        Render the full textual report.

        Args:
            preamble: Lines printed before the rule lines (the lexer puts
                      its token listing here)

        Returns:
            The report, ending with "Total NO of errors: <n>"
        """
        lines = list(preamble)
        lines.extend(self.rule_lines())
        lines.extend(self.error_lines())
        lines.append(f"Total NO of errors: {self.error_count}")
        return "\n".join(lines)
