"""
Frontend Pipeline
=================

This module provides the main checking interface for Ity programs.
It runs the two passes in order:

    Source → Scan (with Require expansion) → Recognize

The recognizer only runs if the scanner reported no errors, unless
``parse_on_lex_errors`` is set.

Usage
-----
Command line:
    $ ityc program.txt

Programmatic:
    >>> from itylang.frontend import check_source
    >>> result = check_source("@Type Foo { Ity x; } $")
    >>> result.ok
    True

Configuration
-------------
FrontendOptions can be built directly or from the environment:

    ITYLANG_INCLUDE_PATH      Extra include directories (os.pathsep separated)
    ITYLANG_STRICT_INCLUDES   "1", "true" or "yes" to report missing Require targets
    ITYLANG_ENCODING          Source file encoding (default utf-8)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from itylang.frontend.errors import SourceReadError
from itylang.frontend.includes import FileIncludeResolver
from itylang.frontend.lexer import IncludeResolver, LexResult, scan
from itylang.frontend.recognizer import RecognitionResult, recognize

logger = logging.getLogger(__name__)

PARSE_SKIPPED_MESSAGE = "Cannot parse due to scanner errors."

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class FrontendOptions:
    """
    Frontend configuration options.

    Attributes:
        include_paths: Directories searched for required units, after the
                       directory of the file being checked
        strict_includes: Report unresolvable Require targets as lexical
                         errors instead of skipping them
        parse_on_lex_errors: Run the recognizer even if the scanner
                             reported errors
        encoding: Text encoding of source and included files
    """
    include_paths: list[str] = field(default_factory=list)
    strict_includes: bool = False
    parse_on_lex_errors: bool = False
    encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> "FrontendOptions":
        """
        Create FrontendOptions from environment variables.

        Unset variables keep their defaults.
        """
        options = cls()

        if include_path := os.environ.get("ITYLANG_INCLUDE_PATH"):
            options.include_paths = [p for p in include_path.split(os.pathsep) if p]

        if strict := os.environ.get("ITYLANG_STRICT_INCLUDES"):
            options.strict_includes = strict.strip().lower() in _TRUE_VALUES

        if encoding := os.environ.get("ITYLANG_ENCODING"):
            options.encoding = encoding

        return options


@dataclass
class FrontendResult:
    """
    Result of checking one program.

    Attributes:
        name: Name of the checked unit
        lex: Scanner output
        recognition: Recognizer output, or None if recognition was skipped
    """
    name: str
    lex: LexResult
    recognition: Optional[RecognitionResult] = None

    @property
    def parse_skipped(self) -> bool:
        return self.recognition is None

    @property
    def lexical_error_count(self) -> int:
        return self.lex.error_count

    @property
    def syntax_error_count(self) -> int:
        return self.recognition.error_count if self.recognition else 0

    @property
    def error_count(self) -> int:
        return self.lexical_error_count + self.syntax_error_count

    @property
    def ok(self) -> bool:
        """True if both passes ran and found nothing."""
        return not self.parse_skipped and self.error_count == 0

    def scanner_report(self) -> str:
        return self.lex.report()

    def parser_report(self) -> str:
        """The recognizer report, or the skip notice."""
        if self.recognition is None:
            return PARSE_SKIPPED_MESSAGE
        return self.recognition.report()

    def report(self) -> str:
        """Both reports, scanner first, separated by a blank line."""
        return f"{self.scanner_report()}\n\n{self.parser_report()}"


class FrontendPipeline:
    """
    Scan and recognize Ity programs.

    Example:
        pipeline = FrontendPipeline(FrontendOptions(include_paths=["lib"]))
        result = pipeline.run_file("program.txt")
        print(result.report())

    Attributes:
        options: Frontend configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()

    def run_source(
        self,
        source: str,
        name: str = "<input>",
        resolve_include: Optional[IncludeResolver] = None,
    ) -> FrontendResult:
        """
        Check source text.

        Args:
            source: The program text
            name: Name of the unit (a Require of the same name is skipped)
            resolve_include: Include resolver; defaults to searching the
                             configured include paths

        Returns:
            FrontendResult with both passes' diagnostics
        """
        if resolve_include is None:
            resolve_include = FileIncludeResolver(self.options.include_paths, self.options.encoding)

        lex = scan(
            source,
            resolve_include,
            name=name,
            strict_includes=self.options.strict_includes,
        )
        result = FrontendResult(name=name, lex=lex)

        if lex.error_count and not self.options.parse_on_lex_errors:
            logger.debug(f"{name}: {lex.error_count} lexical errors, skipping recognition")
            return result

        result.recognition = recognize(lex.tokens)
        logger.debug(f"{name}: {result.error_count} errors")
        return result

    def run_file(self, filepath: Union[str, Path]) -> FrontendResult:
        """
        Check a source file.

        The file's directory is searched for required units before the
        configured include paths.

        Raises:
            SourceReadError: If the file cannot be read or decoded
        """
        path = Path(filepath)
        try:
            source = path.read_text(encoding=self.options.encoding)
        except FileNotFoundError:
            raise SourceReadError(str(path), "file not found")
        except UnicodeDecodeError as e:
            raise SourceReadError(
                str(path),
                f"not valid {self.options.encoding}",
                hint="set ITYLANG_ENCODING or pass --encoding to ityc",
            ) from e
        except OSError as e:
            raise SourceReadError(str(path), e.strerror or str(e)) from e

        search_paths = [str(path.parent)]
        search_paths.extend(p for p in self.options.include_paths if p not in search_paths)
        resolver = FileIncludeResolver(search_paths, self.options.encoding)

        return self.run_source(source, name=path.name, resolve_include=resolver)


# =============================================================================
# Utility Functions
# =============================================================================

def check_source(
    source: str,
    sources: Optional[Mapping[str, str]] = None,
    *,
    name: str = "<input>",
    options: Optional[FrontendOptions] = None,
) -> FrontendResult:
    """
    Check source text with in-memory includes.

    Args:
        source: The program text
        sources: Texts of units that ``Require`` may name
        name: Name of the top-level unit
        options: Frontend options (include paths are not searched)

    Returns:
        FrontendResult with both passes' diagnostics
    """
    sources = dict(sources or {})
    return FrontendPipeline(options).run_source(source, name=name, resolve_include=sources.get)


def check_file(filepath: Union[str, Path], options: Optional[FrontendOptions] = None) -> FrontendResult:
    """Check a source file. See FrontendPipeline.run_file()."""
    return FrontendPipeline(options).run_file(filepath)
