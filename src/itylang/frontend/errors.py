"""
Frontend Error Hierarchy
========================

Exceptions raised by the itylang frontend. They all inherit from
FrontendError, which itself inherits from ItyError.

Exception Hierarchy
-------------------
FrontendError (base for all frontend errors)
├── RecognizerFault - structural fault inside the recognizer
└── SourceReadError - the top-level source cannot be read

Only run-level problems are exceptions. Problems in the checked program
(unknown characters, missing semicolons, ...) become diagnostics.

Error Message Format
--------------------
    program.txt:5: error: cannot read source
    hint: check the file permissions
"""

from typing import Optional

from itylang.errors import ItyError


class FrontendError(ItyError):
    """
    Base exception for frontend errors.

    Attributes:
        message: The error description
        source_name: Name of the source unit involved (optional)
        line: Line number in that unit (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        source_name: Optional[str] = None,
        line: Optional[int] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.source_name = source_name
        self.line = line
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error with location prefix and hint.

        Example output:
            program.txt:12: error: cannot read source
            hint: check the file encoding
        """
        parts = []

        if self.source_name and self.line is not None:
            parts.append(f"{self.source_name}:{self.line}: error: {self.message}")
        elif self.source_name:
            parts.append(f"{self.source_name}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class RecognizerFault(FrontendError):
    """
    Structural fault inside the recognizer.

    Raised when the cursor is asked to consume past the end of the token
    stream. recognize() catches it and records a single top-level error,
    so callers never see this exception escape a recognition run.
    """
    pass


class SourceReadError(FrontendError):
    """
    The top-level source cannot be read.

    Raised when:
        - The file does not exist
        - Permission is denied
        - The content cannot be decoded with the configured encoding

    Missing *included* units are not errors of this kind; they are either
    skipped or reported as lexical diagnostics.
    """

    def __init__(self, path: str, reason: str, hint: Optional[str] = None):
        self.path = path
        self.reason = reason
        super().__init__(
            f"cannot read source: {reason}",
            source_name=path,
            hint=hint,
        )
