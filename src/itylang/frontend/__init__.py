"""
Ity Language Frontend
=====================

This package checks programs written in Ity, a small class language with
keywords such as ``Type``, ``Ity``, ``Cwq`` and ``TrueFor``. It provides:

- A lexer that classifies every lexeme and expands ``Require`` directives
- A recursive descent recognizer with panic-mode error recovery
- A diagnostics sink that renders the scanner and parser reports

Pipeline
--------
    Source → Lexer (+ Require expansion) → Recognizer → Reports

The recognizer runs only if the lexer reported no errors.

Usage
-----
>>> from itylang.frontend import check_source
>>> result = check_source("@Type Foo { Ity x; } $")
>>> result.ok
True
>>> print(result.parser_report())  # doctest: +ELLIPSIS
Line #: 1 Matched Rule Used: Program
...
Total NO of errors: 0

Not Covered
-----------
- No syntax tree is built
- No symbol table or type checking
- No code generation

Author: itylang contributors
"""

# =============================================================================
# Version Information
# =============================================================================

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from itylang.frontend.diagnostics import Diagnostic, DiagnosticKind, Diagnostics
from itylang.frontend.errors import FrontendError, RecognizerFault, SourceReadError
from itylang.frontend.includes import FileIncludeResolver
from itylang.frontend.lexer import KEYWORDS, Lexer, LexResult, Token, TokenCategory, scan
from itylang.frontend.pipeline import (
    FrontendOptions,
    FrontendPipeline,
    FrontendResult,
    check_file,
    check_source,
)
from itylang.frontend.recognizer import RecognitionResult, Recognizer, recognize

__all__ = [
    # Version
    "__version__",
    # Main API
    "FrontendPipeline",
    "FrontendOptions",
    "FrontendResult",
    "check_source",
    "check_file",
    # Errors
    "FrontendError",
    "RecognizerFault",
    "SourceReadError",
    # Lexer
    "Lexer",
    "LexResult",
    "Token",
    "TokenCategory",
    "KEYWORDS",
    "scan",
    "FileIncludeResolver",
    # Recognizer
    "Recognizer",
    "RecognitionResult",
    "recognize",
    # Diagnostics
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
]
