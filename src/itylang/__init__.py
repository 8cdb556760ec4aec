"""
itylang - Checker for the Ity Class Language
============================================

This package checks source programs written in Ity against its fixed
grammar. Ity programs are a single class between a start symbol and an
end symbol:

    @
    Type Shape DerivedFrom Base {
        Ity sides;
        Valueless draw(Ity size) {
            sides = size + 1;
        }
    }
    $

Main Components
---------------
- **frontend**: lexer, recognizer and diagnostics
    Classifies tokens, expands ``Require(file)`` and reports syntax errors

- **cli**: command-line tool (ityc)
    Prints the scanner and parser reports for a source file

Quick Start
-----------
    >>> from itylang import check_source
    >>> result = check_source("@Type Foo { Ity x; } $")
    >>> result.error_count
    0

Command line:
    $ ityc program.txt
"""

__version__ = "1.0.0"
__author__ = "itylang contributors"

from itylang.errors import ItyError
from itylang.frontend import (
    FrontendOptions,
    FrontendPipeline,
    FrontendResult,
    check_file,
    check_source,
    recognize,
    scan,
)

__all__ = [
    "__version__",
    "ItyError",
    "FrontendOptions",
    "FrontendPipeline",
    "FrontendResult",
    "check_file",
    "check_source",
    "recognize",
    "scan",
]
