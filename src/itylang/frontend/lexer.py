"""
Ity Lexer (Scanner)
===================

This module implements the lexer for the Ity class language. It converts
source text into an ordered, immutable sequence of tokens and expands
``Require(file)`` inclusion directives along the way.

Token Categories
----------------
- Program symbols: @ ^ (start), $ # (end)
- Keywords: Type, DerivedFrom, Ity, Cwq, TrueFor, However, ...
- Identifiers: letter or underscore, then letters, digits, underscores
- Constants: a run of digits, optionally containing '.'
- Literals: "double quoted" strings, 'single quoted' characters
- Operators: + - * / = < > ~ == != <= >= && || ->
- Braces: { } [ ] ( )
- Delimiters: ; ,

Comments
--------
- Rest of line: /* comment
- Multi-line: /< comment >/

Comments produce marker tokens (category Comment) so that the recognizer
can see them as class members; their content is discarded.

Inclusion
---------
A line starting with ``Require(name)`` asks the injected resolver for the
text of ``name``. The included unit is scanned completely, expanding its
own directives, before the rest of the requiring unit. Each unit is
scanned at most once per run, which also breaks inclusion cycles.

Error Handling
--------------
The lexer never raises for malformed input. Unclosed literals and unknown
characters are recorded as diagnostics and scanning continues.

Example Usage
-------------
>>> from itylang.frontend.lexer import scan
>>> result = scan("@Type Foo { Ity x; } $")
>>> for token in result.tokens:
...     print(token)
Line #: 1 Token Text: @ Token Type: Start Symbol
Line #: 1 Token Text: Type Token Type: Class
Line #: 1 Token Text: Foo Token Type: Identifier
Line #: 1 Token Text: { Token Type: Braces
Line #: 1 Token Text: Ity Token Type: Integer
Line #: 1 Token Text: x Token Type: Identifier
Line #: 1 Token Text: ; Token Type: Delimiter
Line #: 1 Token Text: } Token Type: Braces
Line #: 1 Token Text: $ Token Type: End Symbol
"""

import logging
import re
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from itylang.frontend.diagnostics import Diagnostic, Diagnostics

logger = logging.getLogger(__name__)


# =============================================================================
# Token Category Enumeration
# =============================================================================

class TokenCategory(Enum):
    """
    Token categories of the Ity language.

    The value of each member is the name printed in the scanner report.
    Keywords get their own categories so the recognizer can tell type
    keywords from statement keywords without looking at the text.
    """

    # === Program Symbols ===
    START_SYMBOL = "Start Symbol"           # @ ^
    END_SYMBOL = "End Symbol"               # $ #

    # === Names ===
    IDENTIFIER = "Identifier"

    # === Keyword-Derived Categories ===
    CLASS = "Class"                         # Type
    INHERITANCE = "Inheritance"             # DerivedFrom
    CONDITION = "Condition"                 # TrueFor, Else
    INTEGER = "Integer"                     # Ity
    SINTEGER = "SInteger"                   # Sity
    CHARACTER = "Character"                 # Cwq
    STRING = "String"                       # CwqSequence
    FLOAT = "Float"                         # Ifity
    SFLOAT = "SFloat"                       # Sifity
    VOID = "Void"                           # Valueless
    BOOLEAN = "Boolean"                     # Logical
    BREAK = "Break"                         # Endthis
    LOOP = "Loop"                           # However, When
    RETURN = "Return"                       # Respondwith
    STRUCT = "Struct"                       # Srap
    SWITCH = "Switch"                       # Scan, Conditionof
    INCLUSION = "Inclusion"                 # Require

    # === Punctuation ===
    BRACE = "Braces"                        # { } [ ] ( )
    DELIMITER = "Delimiter"                 # ; ,

    # === Operators ===
    ARITHMETIC = "Arithmetic Operation"     # + - * /
    RELATIONAL = "Relational Operator"      # == != <= >= < >
    LOGIC = "Logic Operator"                # && || ~
    ASSIGNMENT = "Assignment Operator"      # =
    ACCESS = "Access Operator"              # ->

    # === Literals ===
    CONSTANT = "Constant"
    STRING_LITERAL = "String Literal"
    CHARACTER_LITERAL = "Character Literal"

    # === Other ===
    COMMENT = "Comment"
    UNKNOWN = "Unknown"


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: Mapping[str, TokenCategory] = MappingProxyType({
    # Class structure
    "Type": TokenCategory.CLASS,
    "DerivedFrom": TokenCategory.INHERITANCE,

    # Type specifiers
    "Ity": TokenCategory.INTEGER,
    "Sity": TokenCategory.SINTEGER,
    "Cwq": TokenCategory.CHARACTER,
    "CwqSequence": TokenCategory.STRING,
    "Ifity": TokenCategory.FLOAT,
    "Sifity": TokenCategory.SFLOAT,
    "Valueless": TokenCategory.VOID,
    "Logical": TokenCategory.BOOLEAN,

    # Control flow
    "TrueFor": TokenCategory.CONDITION,
    "Else": TokenCategory.CONDITION,
    "However": TokenCategory.LOOP,
    "When": TokenCategory.LOOP,
    "Endthis": TokenCategory.BREAK,
    "Respondwith": TokenCategory.RETURN,
    "Srap": TokenCategory.STRUCT,
    "Scan": TokenCategory.SWITCH,
    "Conditionof": TokenCategory.SWITCH,

    # Inclusion
    "Require": TokenCategory.INCLUSION,
})

# Categories that name a data type (start of a declaration)
TYPE_CATEGORIES = frozenset({
    TokenCategory.INTEGER,
    TokenCategory.SINTEGER,
    TokenCategory.CHARACTER,
    TokenCategory.STRING,
    TokenCategory.FLOAT,
    TokenCategory.SFLOAT,
    TokenCategory.VOID,
    TokenCategory.BOOLEAN,
})

TYPE_KEYWORDS = frozenset(
    word for word, category in KEYWORDS.items() if category in TYPE_CATEGORIES
)

# Two-character operators are tried before any single character
TWO_CHAR_OPERATORS: Mapping[str, TokenCategory] = MappingProxyType({
    "==": TokenCategory.RELATIONAL,
    "!=": TokenCategory.RELATIONAL,
    "<=": TokenCategory.RELATIONAL,
    ">=": TokenCategory.RELATIONAL,
    "&&": TokenCategory.LOGIC,
    "||": TokenCategory.LOGIC,
    "->": TokenCategory.ACCESS,
})

SINGLE_CHAR_TOKENS: Mapping[str, TokenCategory] = MappingProxyType({
    "@": TokenCategory.START_SYMBOL,
    "^": TokenCategory.START_SYMBOL,
    "$": TokenCategory.END_SYMBOL,
    "#": TokenCategory.END_SYMBOL,
    "{": TokenCategory.BRACE,
    "}": TokenCategory.BRACE,
    "[": TokenCategory.BRACE,
    "]": TokenCategory.BRACE,
    "(": TokenCategory.BRACE,
    ")": TokenCategory.BRACE,
    "+": TokenCategory.ARITHMETIC,
    "-": TokenCategory.ARITHMETIC,
    "*": TokenCategory.ARITHMETIC,
    "/": TokenCategory.ARITHMETIC,
    "=": TokenCategory.ASSIGNMENT,
    "<": TokenCategory.RELATIONAL,
    ">": TokenCategory.RELATIONAL,
    "~": TokenCategory.LOGIC,
    ";": TokenCategory.DELIMITER,
    ",": TokenCategory.DELIMITER,
})

# Comment markers and the text of the tokens they produce
MULTILINE_COMMENT_START = "/<"
MULTILINE_COMMENT_END = ">/"
LINE_COMMENT = "/*"
COMMENT_START_TEXT = "/< (Comment Start)"
COMMENT_END_TEXT = ">/ (Comment End)"
LINE_COMMENT_TEXT = "/* (Comment)"

# Require(name) at the start of a line; a trailing ';' belongs to the directive
REQUIRE_PATTERN = re.compile(r"Require\s*\(\s*([A-Za-z0-9_.]+)\s*\)\s*;?")

# Line breaks: \r\n, \r or \n only; form feeds and other separators stay in the line
LINE_BREAK = re.compile(r"\r\n|\r|\n")

LEXICAL_ERROR_LABEL = "Error in Token Text"

IncludeResolver = Callable[[str], Optional[str]]


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of Ity source.

    Attributes:
        text: The lexeme (comment tokens carry a marker text instead)
        category: The TokenCategory classification
        line: Line number in the unit the token came from (1-indexed)
    """
    text: str
    category: TokenCategory
    line: int

    def __str__(self) -> str:
        """Format as a scanner report line."""
        return f"Line #: {self.line} Token Text: {self.text} Token Type: {self.category.value}"

    def is_type_keyword(self) -> bool:
        """Return True if this token names a data type."""
        return self.category in TYPE_CATEGORIES


# =============================================================================
# Scan Result
# =============================================================================

@dataclass(frozen=True)
class LexResult:
    """
    Output of one lexer run.

    Attributes:
        tokens: The token stream, in source order after inclusion
        diagnostics: Lexical errors recorded during the run
        included: Names of the units that were scanned, top-level first
    """
    tokens: tuple[Token, ...]
    diagnostics: Diagnostics
    included: tuple[str, ...] = ()

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return self.diagnostics.errors

    @property
    def error_count(self) -> int:
        return self.diagnostics.error_count

    @property
    def ok(self) -> bool:
        return self.error_count == 0

    def report(self) -> str:
        """Render the scanner report: tokens, errors, then the error count."""
        return self.diagnostics.report(preamble=(str(t) for t in self.tokens))


# =============================================================================
# Lexer Implementation
# =============================================================================

@dataclass
class _SourceUnit:
    """A unit being scanned: its remaining lines and its comment state."""
    name: str
    lines: deque = field(default_factory=deque)
    in_comment: bool = False

    @classmethod
    def from_text(cls, name: str, text: str) -> "_SourceUnit":
        return cls(name, deque(enumerate(LINE_BREAK.split(text), start=1)))


class Lexer:
    """
    Tokenizes Ity source code.

    The lexer works line by line, left to right, with one character of
    lookahead for two-character operators and comment markers. Units pulled
    in by ``Require`` are kept on a stack: the most recently required unit
    is scanned to the end before the unit that required it resumes.

    Usage:
        lexer = Lexer(source_text, resolve_include=sources.get)
        result = lexer.scan()

    Attributes:
        source: The top-level source text
        name: Name of the top-level unit (also guards against re-inclusion)
        resolve_include: Callable returning the text of a unit or None
        strict_includes: If True, a unit that cannot be resolved is a
                         lexical error instead of being skipped
    """

    @staticmethod
    def _is_ident_start(char: str) -> bool:
        """Letters of any script and underscore start an identifier."""
        return char.isalpha() or char == "_"

    @staticmethod
    def _is_ident_char(char: str) -> bool:
        return char.isalnum() or char == "_"

    @staticmethod
    def _is_constant_char(char: str) -> bool:
        return char.isdecimal() or char == "."

    def __init__(
        self,
        source: str,
        resolve_include: Optional[IncludeResolver] = None,
        name: str = "<input>",
        strict_includes: bool = False,
    ):
        self.source = source
        self.name = name
        self.resolve_include = resolve_include
        self.strict_includes = strict_includes

        # Per-run state, reset by scan()
        self._tokens: list[Token] = []
        self._diagnostics = Diagnostics(LEXICAL_ERROR_LABEL)
        self._included: set[str] = set()
        self._order: list[str] = []

        # Position within the line being scanned
        self._text = ""
        self._pos = 0
        self._line = 0

    def scan(self) -> LexResult:
        """
        Scan the source and every unit it requires.

        Returns:
            LexResult with the token stream and lexical diagnostics
        """
        self._tokens = []
        self._diagnostics = Diagnostics(LEXICAL_ERROR_LABEL)
        self._included = {self.name}
        self._order = [self.name]

        stack = [_SourceUnit.from_text(self.name, self.source)]
        while stack:
            unit = stack[-1]
            if not unit.lines:
                stack.pop()
                if stack:
                    logger.debug(f"Finished '{unit.name}', resuming '{stack[-1].name}'")
                continue

            line_number, text = unit.lines.popleft()
            required = self._scan_line(unit, line_number, text)
            if required is not None:
                logger.debug(f"Scanning '{required.name}' required by '{unit.name}' line {line_number}")
                stack.append(required)

        logger.debug(
            f"Scanned '{self.name}': {len(self._tokens)} tokens, "
            f"{self._diagnostics.error_count} errors"
        )
        return LexResult(tuple(self._tokens), self._diagnostics, tuple(self._order))

    # =========================================================================
    # Line Handling
    # =========================================================================

    def _scan_line(self, unit: _SourceUnit, line_number: int, text: str) -> Optional[_SourceUnit]:
        """
        Scan one physical line.

        Returns:
            A unit to scan next if the line requires one, otherwise None
        """
        line = text.strip()
        if not line:
            return None

        if unit.in_comment:
            end = line.find(MULTILINE_COMMENT_END)
            if end == -1:
                return None
            self._emit(COMMENT_END_TEXT, TokenCategory.COMMENT, line_number)
            unit.in_comment = False
            line = line[end + len(MULTILINE_COMMENT_END):].strip()
            if not line:
                return None

        match = REQUIRE_PATTERN.match(line)
        if match:
            rest = line[match.end():]
            if rest.strip():
                # Scanned after the required unit, as if it followed it inline
                unit.lines.appendleft((line_number, rest))
            return self._require(match.group(1), line_number)

        self._scan_characters(unit, line, line_number)
        return None

    def _require(self, name: str, line_number: int) -> Optional[_SourceUnit]:
        """Resolve a Require directive into a unit to scan, if any."""
        if name in self._included:
            logger.debug(f"'{name}' already included, skipping")
            return None

        text = self.resolve_include(name) if self.resolve_include else None
        if text is None:
            if self.strict_includes:
                self._error(f"Required file not found: {name}", line_number)
            else:
                logger.debug(f"Required file '{name}' not found, skipping")
            return None

        self._included.add(name)
        self._order.append(name)
        return _SourceUnit.from_text(name, text)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_line_end(self) -> bool:
        return self._pos >= len(self._text)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at the character at current position + offset.

        Returns empty string if past the end of the line.
        """
        pos = self._pos + offset
        if pos >= len(self._text):
            return ""
        return self._text[pos]

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self._peek()
        self._pos += 1
        return char

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _emit(self, text: str, category: TokenCategory, line: Optional[int] = None) -> None:
        self._tokens.append(Token(text, category, line or self._line))

    def _error(self, message: str, line: Optional[int] = None) -> None:
        self._diagnostics.error(message, line or self._line)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_characters(self, unit: _SourceUnit, line: str, line_number: int) -> None:
        """Scan the characters of one line outside any comment."""
        self._text = line
        self._pos = 0
        self._line = line_number

        while not self._at_line_end():
            char = self._peek()

            if char.isspace():
                self._advance()
                continue

            pair = char + self._peek(1)

            # Multi-line comment: /< ... >/
            if pair == MULTILINE_COMMENT_START:
                self._pos += 2
                self._emit(COMMENT_START_TEXT, TokenCategory.COMMENT)
                end = self._text.find(MULTILINE_COMMENT_END, self._pos)
                if end == -1:
                    unit.in_comment = True
                    return
                self._emit(COMMENT_END_TEXT, TokenCategory.COMMENT)
                self._pos = end + len(MULTILINE_COMMENT_END)
                continue

            # Rest-of-line comment: /*
            if pair == LINE_COMMENT:
                self._emit(LINE_COMMENT_TEXT, TokenCategory.COMMENT)
                return

            if pair in TWO_CHAR_OPERATORS:
                self._pos += 2
                self._emit(pair, TWO_CHAR_OPERATORS[pair])
                continue

            if char in SINGLE_CHAR_TOKENS:
                self._advance()
                self._emit(char, SINGLE_CHAR_TOKENS[char])
                continue

            if char == '"':
                self._scan_quoted('"', TokenCategory.STRING_LITERAL, "Unclosed string literal")
                continue

            if char == "'":
                self._scan_quoted("'", TokenCategory.CHARACTER_LITERAL, "Unclosed character literal")
                continue

            if char.isdecimal():
                self._scan_constant()
                continue

            if self._is_ident_start(char):
                self._scan_word()
                continue

            self._advance()
            self._error(f"Unknown character: {char}")

    def _scan_quoted(self, quote: str, category: TokenCategory, unclosed_message: str) -> None:
        """
        Scan a quoted literal. The lexeme keeps its quotes.

        A literal must close on the same line. If it does not, the error is
        recorded and the rest of the line is discarded.
        """
        end = self._text.find(quote, self._pos + 1)
        if end == -1:
            self._error(unclosed_message)
            self._pos = len(self._text)
            return

        self._emit(self._text[self._pos:end + 1], category)
        self._pos = end + 1

    def _scan_constant(self) -> None:
        """Scan a maximal run of digits and dots."""
        start = self._pos
        while self._is_constant_char(self._peek()):
            self._advance()
        self._emit(self._text[start:self._pos], TokenCategory.CONSTANT)

    def _scan_word(self) -> None:
        """
        Scan an identifier or keyword.

        Keywords are distinguished by an exact, case-sensitive lookup in
        the keyword table.
        """
        start = self._pos
        while self._is_ident_char(self._peek()):
            self._advance()
        word = self._text[start:self._pos]
        self._emit(word, KEYWORDS.get(word, TokenCategory.IDENTIFIER))


# =============================================================================
# Convenience Functions
# =============================================================================

def scan(
    source: str,
    resolve_include: Optional[IncludeResolver] = None,
    *,
    name: str = "<input>",
    strict_includes: bool = False,
) -> LexResult:
    """
    Tokenize Ity source text.

    Args:
        source: The source text
        resolve_include: Returns the text of a required unit, or None if
                         it cannot be found (a dict's ``get`` works)
        name: Name of the top-level unit
        strict_includes: Report unresolvable Require targets as errors

    Returns:
        LexResult with tokens and lexical diagnostics
    """
    return Lexer(source, resolve_include, name, strict_includes).scan()
