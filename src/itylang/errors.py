"""
itylang Error Hierarchy
=======================

This module defines the root of the exception hierarchy for itylang.
All exceptions inherit from ItyError, allowing callers to catch every
library error with a single except clause.

Exception Hierarchy
-------------------
ItyError (base)
└── FrontendError (lexer, recognizer and source loading)
    ├── RecognizerFault - cursor ran past the end of the token stream
    └── SourceReadError - top-level source file cannot be read

Design Philosophy
-----------------
Lexical and syntax errors in the checked program are NOT exceptions.
They are recorded as diagnostics and the run keeps going, so a single
malformed construct never hides the ones after it. Exceptions are reserved
for problems with the run itself (unreadable input, internal faults).

Error messages follow this format:
    name:line: error: description
    hint: suggestion for fixing (when available)
"""


class ItyError(Exception):
    """
    Base exception for all itylang errors.

    Example:
        try:
            result = FrontendPipeline().run_file("program.txt")
        except ItyError as e:
            print(f"Error: {e}")
    """
    pass
