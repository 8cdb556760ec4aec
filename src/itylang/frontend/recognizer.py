"""
Ity Recursive Descent Recognizer
================================

This module checks a token stream from the lexer against the Ity grammar.
It does not build a tree: its output is a trace of the productions it
entered and the syntax errors it found.

Grammar
-------
Program          ::= StartSymbol ClassDeclaration EndSymbol
ClassDeclaration ::= 'Type' IDENTIFIER ('DerivedFrom' IDENTIFIER)? ClassBody
ClassBody        ::= '{' ClassMember* '}'
ClassMember      ::= Comment | RequireCommand | VariableDecl | MethodDecl
MethodDecl       ::= FuncDecl (';' | '{' VariableDecl* Statement* '}')
FuncDecl         ::= Type IDENTIFIER '(' ParameterList ')'
ParameterList    ::= (Parameter (',' Parameter)*)?
Parameter        ::= Type IDENTIFIER
VariableDecl     ::= Type IdList (';' | '[' (IDENTIFIER | CONSTANT) ']' ';')
IdList           ::= IDENTIFIER (',' IDENTIFIER)*

Statement        ::= Assignment | FuncCallStmt | TrueForStmt | HoweverStmt
                   | WhenStmt | RespondwithStmt | EndthisStmt | ScanStmt
                   | SrapStmt
Assignment       ::= IDENTIFIER '=' Expression ';'
FuncCallStmt     ::= IDENTIFIER '(' ArgumentList ')' ';'
ArgumentList     ::= (Expression (',' Expression)*)?
TrueForStmt      ::= 'TrueFor' '(' ConditionExpr ')' Block ('Else' Block)?
HoweverStmt      ::= 'However' '(' ConditionExpr ')' Block
WhenStmt         ::= 'When' '(' Expression ';' Expression ';' Expression ')' Block
RespondwithStmt  ::= 'Respondwith' Expression ';'
EndthisStmt      ::= 'Endthis' ';'
ScanStmt         ::= 'Scan' '(' 'Conditionof' IDENTIFIER ')' ';'
SrapStmt         ::= 'Srap' '(' Expression ')' ';'
RequireCommand   ::= 'Require' '(' (STRING_LITERAL | IDENTIFIER) ')' ';'
Block            ::= '{' Statement* '}'

ConditionExpr    ::= Condition (('&&' | '||' | '~') Condition)?
Condition        ::= Expression ComparisonOp Expression
ComparisonOp     ::= '==' | '!=' | '<' | '>' | '<=' | '>='
Expression       ::= Term (('+' | '-') Term)*
Term             ::= Factor (('*' | '/') Factor)*
Factor           ::= IDENTIFIER | CONSTANT | STRING_LITERAL | '(' Expression ')'

Comment tokens are accepted between members, declarations and statements.

Lookahead
---------
The grammar is LL(1) except in two places:

- A class member starting with Type IDENTIFIER is a method if the next
  token is '(' and a variable otherwise. The recognizer takes a
  checkpoint, consumes the two tokens, looks, and restores.
- A statement starting with IDENTIFIER is an assignment if the next token
  is '=' and a call if it is '('.

Error Recovery
--------------
Every production records its name when it is entered, whether or not it
then matches. On a mismatch it records an error and synchronizes: tokens
are discarded until one in the production's ``sync`` set (consumed) or
``stop`` set (left for the enclosing production). The end symbols ``$``
and ``#`` always stop recovery so that a broken class body still reaches
the end of the program.

Example Usage
-------------
>>> from itylang.frontend.lexer import scan
>>> from itylang.frontend.recognizer import recognize
>>> result = recognize(scan("@Type Foo { Ity x; } $").tokens)
>>> result.error_count
0
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from itylang.frontend.diagnostics import Diagnostic, Diagnostics
from itylang.frontend.errors import RecognizerFault
from itylang.frontend.lexer import TYPE_CATEGORIES, TYPE_KEYWORDS, Token, TokenCategory

logger = logging.getLogger(__name__)


SYNTAX_ERROR_LABEL = "Not Matched"

# =============================================================================
# Synchronization Sets
# =============================================================================
# Recovery compares token text against these sets. A ``sync`` token is
# consumed when found; a ``stop`` token belongs to an enclosing production
# and is left in place.

END_SYMBOLS = frozenset({"$", "#"})

STATEMENT_KEYWORDS = frozenset({
    "TrueFor", "However", "When", "Respondwith", "Endthis", "Scan", "Srap",
})

# Tokens that close or continue a statement list
STATEMENT_STOP = STATEMENT_KEYWORDS | {"}"}

# Tokens that start the next class member or close the class body
MEMBER_STOP = TYPE_KEYWORDS | {"}", "Require"}

# Tokens that can follow a declaration in a class or method body
DECLARATION_STOP = MEMBER_STOP | STATEMENT_KEYWORDS

# Recovery inside a parenthesized statement header skips to its closing
# parenthesis, or stops at the block that follows
HEADER_SYNC = frozenset({")"})
HEADER_STOP = STATEMENT_STOP | {"{"}

# Tokens that end a parameter
PARAMETER_STOP = frozenset({",", ")", ";", "{"}) | MEMBER_STOP

# Tokens that can follow a factor
FACTOR_STOP = frozenset({
    "+", "-", "*", "/", ")", ";", ",", "{",
    "==", "!=", "<", ">", "<=", ">=",
    "&&", "||", "~",
}) | STATEMENT_STOP

COMPARISON_OPERATORS = frozenset({"==", "!=", "<", ">", "<=", ">="})
CONDITION_CONNECTIVES = frozenset({"&&", "||", "~"})
ADDITIVE_OPERATORS = frozenset({"+", "-"})
MULTIPLICATIVE_OPERATORS = frozenset({"*", "/"})

SEMICOLON = frozenset({";"})
CLOSE_BRACE = frozenset({"}"})

# Categories that can start an expression (with the text '(')
EXPRESSION_START = (
    TokenCategory.IDENTIFIER,
    TokenCategory.CONSTANT,
    TokenCategory.STRING_LITERAL,
)


# =============================================================================
# Recognition Result
# =============================================================================

@dataclass(frozen=True)
class RecognitionResult:
    """
    Output of one recognizer run.

    Attributes:
        diagnostics: Matched-rule trace and syntax errors, in order
    """
    diagnostics: Diagnostics

    @property
    def matched_rules(self) -> tuple[Diagnostic, ...]:
        return self.diagnostics.matched_rules

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return self.diagnostics.errors

    @property
    def error_count(self) -> int:
        return self.diagnostics.error_count

    @property
    def ok(self) -> bool:
        return self.error_count == 0

    def rule_names(self) -> list[str]:
        """Names of the entered productions, in order."""
        return [entry.message for entry in self.matched_rules]

    def report(self) -> str:
        """Render the parser report: rules, errors, then the error count."""
        return self.diagnostics.report()


# =============================================================================
# Recognizer Implementation
# =============================================================================

class Recognizer:
    """
    Recursive descent recognizer for the Ity grammar.

    The cursor position is the only parser state. Past the last token the
    current token is None (end of input). Errors never propagate out of
    the production that found them; each production recovers on its own.

    Attributes:
        tokens: The token stream to check
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tuple(tokens)
        self._pos = 0
        self._diagnostics = Diagnostics(SYNTAX_ERROR_LABEL)

    def recognize(self) -> RecognitionResult:
        """
        Check the whole token stream.

        Always returns. An internal fault is recorded as a single
        "Parsing error" and the partial trace is kept.
        """
        self._pos = 0
        self._diagnostics = Diagnostics(SYNTAX_ERROR_LABEL)

        try:
            self._parse_program()
        except RecognizerFault as e:
            self._error(f"Parsing error: {e.message}")
        except RecursionError:
            self._error("Parsing error: nesting too deep")

        logger.debug(
            f"Recognized {len(self.tokens)} tokens: "
            f"{len(self._diagnostics.matched_rules)} rules, "
            f"{self._diagnostics.error_count} errors"
        )
        return RecognitionResult(self._diagnostics)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    @property
    def _current(self) -> Optional[Token]:
        return self._peek()

    def _at_end(self) -> bool:
        """Check if the cursor is past the last token."""
        return self._pos >= len(self.tokens)

    def _peek(self, offset: int = 0) -> Optional[Token]:
        """Look at token at current position + offset, None past the end."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return None
        return self.tokens[pos]

    def _advance(self) -> Token:
        """
        Consume and return the current token.

        Raises:
            RecognizerFault: If the cursor is already past the last token
        """
        if self._at_end():
            raise RecognizerFault("attempt to consume past end of input")
        token = self.tokens[self._pos]
        self._pos += 1
        return token

    def _check(self, *categories: TokenCategory) -> bool:
        """Check if current token is in one of the given categories."""
        token = self._peek()
        return token is not None and token.category in categories

    def _check_text(self, *texts: str) -> bool:
        token = self._peek()
        return token is not None and token.text in texts

    def _match(self, *categories: TokenCategory) -> Optional[Token]:
        """
        Consume current token if it is in one of the categories.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*categories):
            return self._advance()
        return None

    def _match_text(self, *texts: str) -> Optional[Token]:
        if self._check_text(*texts):
            return self._advance()
        return None

    def checkpoint(self) -> int:
        """Return a cursor position that restore() can return to."""
        return self._pos

    def restore(self, checkpoint: int) -> None:
        """Move the cursor back to a position returned by checkpoint()."""
        if not 0 <= checkpoint <= self._pos:
            raise RecognizerFault(f"invalid checkpoint {checkpoint}")
        self._pos = checkpoint

    # =========================================================================
    # Diagnostics and Recovery
    # =========================================================================

    def _location(self) -> tuple[int, bool]:
        """Line of the current token, or of the last token at end of input."""
        token = self._peek()
        if token is not None:
            return token.line, False
        if self.tokens:
            return self.tokens[-1].line, True
        return 1, True

    def _rule(self, name: str) -> None:
        line, at_end = self._location()
        self._diagnostics.rule(name, line, at_end)

    def _error(self, message: str) -> None:
        line, at_end = self._location()
        self._diagnostics.error(message, line, at_end)

    def _expected(
        self,
        message: str,
        sync: Iterable[str] = (),
        stop: Iterable[str] = (),
    ) -> None:
        """Record a syntax error and recover."""
        self._error(message)
        self._synchronize(sync, stop)

    def _synchronize(self, sync: Iterable[str] = (), stop: Iterable[str] = ()) -> None:
        """
        Discard tokens until a resumption point.

        Stops after consuming a token in ``sync``, before a token in
        ``stop`` or an end symbol not listed in ``sync``, or at the end of
        input. Never moves the cursor backwards.
        """
        sync = frozenset(sync)
        stop = frozenset(stop) | (END_SYMBOLS - sync)

        while not self._at_end():
            text = self.tokens[self._pos].text
            if text in sync:
                self._pos += 1
                return
            if text in stop:
                return
            self._pos += 1

    def _expect_text(
        self,
        text: str,
        message: str,
        sync: Iterable[str] = (),
        stop: Iterable[str] = (),
    ) -> bool:
        """
        Consume ``text`` or record ``message`` and recover.

        Returns:
            True if the token was present
        """
        if self._match_text(text):
            return True
        self._expected(message, sync, stop)
        return False

    # =========================================================================
    # Program Structure
    # =========================================================================

    def _parse_program(self) -> None:
        self._rule("Program")
        self._parse_start_symbols()
        self._parse_class_declaration()
        self._parse_end_symbols()

        if not self._at_end():
            self._error("Unexpected input after end symbol")
            self._pos = len(self.tokens)

    def _parse_start_symbols(self) -> None:
        self._rule("StartSymbols")
        if not self._match(TokenCategory.START_SYMBOL):
            self._error("Expected start symbol (@ or ^)")

    def _parse_end_symbols(self) -> None:
        self._rule("EndSymbols")
        if not self._match(TokenCategory.END_SYMBOL):
            self._error("Expected end symbol ($ or #)")

    def _parse_class_declaration(self) -> None:
        """
        Parse the class header and body.

        A broken header skips ahead to the body's '{' if there is one.
        """
        self._rule("ClassDeclaration")

        header_ok = False
        if not self._match_text("Type"):
            self._expected("Expected Type in class declaration", stop={"{"})
        elif not self._match(TokenCategory.IDENTIFIER):
            self._expected("Expected identifier after Type", stop={"{"})
        elif self._match_text("DerivedFrom") and not self._match(TokenCategory.IDENTIFIER):
            self._expected("Expected identifier after DerivedFrom", stop={"{"})
        else:
            header_ok = True

        if header_ok or self._check_text("{"):
            self._parse_class_body()

    def _parse_class_body(self) -> None:
        self._rule("ClassBody")

        if not self._match_text("{"):
            self._expected("Expected { at beginning of class body", sync=CLOSE_BRACE)
            return

        while (not self._at_end()
               and not self._check_text("}")
               and not self._check(TokenCategory.END_SYMBOL)):
            start = self._pos
            self._parse_class_member()
            if self._pos == start:
                break

        if not self._match_text("}"):
            self._error("Expected } at end of class body")

    def _parse_class_member(self) -> None:
        """Parse one class member, choosing the production by lookahead."""
        self._rule("ClassMember")

        if self._check(TokenCategory.COMMENT):
            self._parse_comment()
        elif self._check_text("Require"):
            self._parse_require_command()
        elif self._check(*TYPE_CATEGORIES):
            mark = self.checkpoint()
            self._advance()
            is_method = (self._match(TokenCategory.IDENTIFIER) is not None
                         and self._check_text("("))
            self.restore(mark)
            if is_method:
                self._parse_method_decl()
            else:
                self._parse_variable_decl()
        elif self._check(TokenCategory.IDENTIFIER):
            self._expected(f"Unknown type '{self._current.text}'",
                           sync=SEMICOLON, stop=MEMBER_STOP)
        else:
            self._expected("Invalid class member", sync=SEMICOLON, stop=MEMBER_STOP)

    def _parse_comment(self) -> None:
        self._rule("Comment")
        self._advance()

    def _parse_require_command(self) -> None:
        """
        Parse a Require command that appears inside a class body.

        Directives at the start of a line are expanded by the lexer and
        never reach the recognizer.
        """
        self._rule("RequireCommand")
        self._advance()  # Require

        if not self._expect_text("(", "Expected ( after Require", SEMICOLON, MEMBER_STOP):
            return
        if not self._match(TokenCategory.STRING_LITERAL, TokenCategory.IDENTIFIER):
            self._expected("Expected file name", SEMICOLON, MEMBER_STOP)
            return
        if not self._expect_text(")", "Expected ) in require command", SEMICOLON, MEMBER_STOP):
            return
        self._expect_text(";", "Expected ; after require command", SEMICOLON, MEMBER_STOP)

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_method_decl(self) -> None:
        self._rule("MethodDecl")
        self._parse_func_decl()

        if self._match_text(";"):
            return
        if not self._match_text("{"):
            self._expected("Expected ; or { after function declaration",
                           sync=SEMICOLON, stop=MEMBER_STOP)
            return

        # Declarations first, then statements
        while self._check(TokenCategory.COMMENT, *TYPE_CATEGORIES):
            if self._check(TokenCategory.COMMENT):
                self._parse_comment()
            else:
                self._parse_variable_decl()
        self._parse_statement_list()

        if not self._match_text("}"):
            self._expected("Expected } at end of method body", sync=CLOSE_BRACE)

    def _parse_func_decl(self) -> None:
        self._rule("FuncDecl")

        if not self._match(*TYPE_CATEGORIES):
            self._expected("Expected type in function declaration", stop=PARAMETER_STOP)
            return
        if not self._match(TokenCategory.IDENTIFIER):
            self._expected("Expected identifier for function name", stop=PARAMETER_STOP)
            return
        if not self._expect_text("(", "Expected ( after function name", stop=PARAMETER_STOP):
            return

        self._parse_parameter_list()

        self._expect_text(")", "Expected ) at end of parameter list", stop=PARAMETER_STOP)

    def _parse_parameter_list(self) -> None:
        self._rule("ParameterList")

        if self._check_text(")"):
            return

        self._parse_parameter()
        while True:
            if self._match_text(","):
                self._parse_parameter()
            elif self._check(*TYPE_CATEGORIES):
                self._error("Expected ',' between parameters")
                self._parse_parameter()
            else:
                break

    def _parse_parameter(self) -> None:
        self._rule("Parameter")

        if not self._match(*TYPE_CATEGORIES):
            self._expected("Expected type in parameter", stop=PARAMETER_STOP)
            return
        if not self._match(TokenCategory.IDENTIFIER):
            self._expected("Expected identifier in parameter", stop=PARAMETER_STOP)

    def _parse_variable_decl(self) -> None:
        """Parse a variable declaration, including the array form."""
        self._rule("VariableDecl")
        self._advance()  # type keyword

        self._parse_id_list()

        if self._match_text(";"):
            return

        if self._match_text("["):
            if (self._match(TokenCategory.IDENTIFIER, TokenCategory.CONSTANT)
                    and self._match_text("]")
                    and self._match_text(";")):
                return
            self._expected("Invalid array declaration", sync=SEMICOLON, stop=DECLARATION_STOP)
            return

        self._expected("Expected ; or [ in variable declaration", sync=SEMICOLON, stop=DECLARATION_STOP)

    def _parse_id_list(self) -> None:
        self._rule("IdList")

        if not self._match(TokenCategory.IDENTIFIER):
            self._expected("Expected identifier in ID list", stop={";", "[", "}"})
            return

        while self._match_text(","):
            if not self._match(TokenCategory.IDENTIFIER):
                self._error("Expected identifier after comma in ID list")
                break

    # =========================================================================
    # Statements
    # =========================================================================

    def _is_statement_start(self) -> bool:
        return (self._check(TokenCategory.IDENTIFIER)
                or self._check_text(*STATEMENT_KEYWORDS))

    def _parse_statement_list(self) -> None:
        """Parse statements and comments until something else comes up."""
        while self._is_statement_start() or self._check(TokenCategory.COMMENT):
            start = self._pos
            if self._check(TokenCategory.COMMENT):
                self._parse_comment()
            else:
                self._parse_statement()
            if self._pos == start:
                break

    def _parse_statement(self) -> None:
        """Parse any statement."""
        self._rule("Statement")
        token = self._current

        if token.category is TokenCategory.IDENTIFIER:
            mark = self.checkpoint()
            self._advance()
            follower = self._current
            self.restore(mark)

            if follower is not None and follower.text == "=":
                self._parse_assignment()
            elif follower is not None and follower.text == "(":
                self._parse_func_call_stmt()
            else:
                self._expected("Expected = or ( after identifier in statement",
                               sync=SEMICOLON, stop=STATEMENT_STOP)
            return

        handlers = {
            "TrueFor": self._parse_true_for_stmt,
            "However": self._parse_however_stmt,
            "When": self._parse_when_stmt,
            "Respondwith": self._parse_respondwith_stmt,
            "Endthis": self._parse_endthis_stmt,
            "Scan": self._parse_scan_stmt,
            "Srap": self._parse_srap_stmt,
        }
        handlers[token.text]()

    def _end_statement(self, message: str) -> None:
        """Expect the ';' that closes a simple statement."""
        self._expect_text(";", message, sync=SEMICOLON, stop=STATEMENT_STOP)

    def _parse_assignment(self) -> None:
        self._rule("Assignment")
        self._advance()  # identifier
        self._advance()  # =
        self._parse_expression()
        self._end_statement("Expected ; at end of assignment")

    def _parse_func_call_stmt(self) -> None:
        self._rule("FuncCallStmt")
        self._advance()  # identifier
        self._advance()  # (

        self._parse_argument_list()

        if not self._expect_text(")", "Expected ) at end of argument list",
                                 stop=STATEMENT_STOP | SEMICOLON):
            if not self._check_text(";"):
                return
        self._end_statement("Expected ; after function call")

    def _parse_argument_list(self) -> None:
        self._rule("ArgumentList")

        if self._check_text(")"):
            return

        self._parse_expression()
        while self._match_text(","):
            self._parse_expression()

    def _parse_condition_header(self, keyword: str) -> bool:
        """
        Parse '(' ConditionExpr ')' after TrueFor or However.

        Returns:
            True if the header was well formed
        """
        if not self._expect_text("(", f"Expected ( after {keyword}", HEADER_SYNC, HEADER_STOP):
            return False
        self._parse_condition_expr()
        return self._expect_text(
            ")", f"Expected ) after condition in {keyword} statement", HEADER_SYNC, HEADER_STOP
        )

    def _parse_true_for_stmt(self) -> None:
        self._rule("TrueForStmt")
        self._advance()  # TrueFor

        if self._parse_condition_header("TrueFor") or self._check_text("{"):
            self._parse_block()
            if self._match_text("Else"):
                self._parse_block()

    def _parse_however_stmt(self) -> None:
        self._rule("HoweverStmt")
        self._advance()  # However

        if self._parse_condition_header("However") or self._check_text("{"):
            self._parse_block()

    def _parse_when_stmt(self) -> None:
        """Parse When ( init ; condition ; step ) Block."""
        self._rule("WhenStmt")
        self._advance()  # When

        ok = self._expect_text("(", "Expected ( after When", HEADER_SYNC, HEADER_STOP)
        if ok:
            self._parse_expression()
            ok = self._expect_text(";", "Expected ; in When statement", HEADER_SYNC, HEADER_STOP)
        if ok:
            self._parse_expression()
            ok = self._expect_text(";", "Expected ; in When statement", HEADER_SYNC, HEADER_STOP)
        if ok:
            self._parse_expression()
            ok = self._expect_text(")", "Expected ) at end of When statement", HEADER_SYNC, HEADER_STOP)

        if ok or self._check_text("{"):
            self._parse_block()

    def _parse_respondwith_stmt(self) -> None:
        self._rule("RespondwithStmt")
        self._advance()  # Respondwith

        if self._is_expression_start():
            self._parse_expression()
        else:
            self._expected("Expected identifier or expression after Respondwith",
                           stop=STATEMENT_STOP | SEMICOLON)

        self._end_statement("Expected ; after Respondwith statement")

    def _parse_endthis_stmt(self) -> None:
        self._rule("EndthisStmt")
        self._advance()  # Endthis
        self._end_statement("Expected ; after Endthis")

    def _parse_scan_stmt(self) -> None:
        self._rule("ScanStmt")
        self._advance()  # Scan

        steps = (
            ("(", "Expected ( after Scan"),
            ("Conditionof", "Expected Conditionof in Scan statement"),
        )
        for text, message in steps:
            if not self._expect_text(text, message, sync=SEMICOLON, stop=STATEMENT_STOP):
                return

        if not self._match(TokenCategory.IDENTIFIER):
            self._expected("Expected identifier after Conditionof",
                           sync=SEMICOLON, stop=STATEMENT_STOP)
            return
        if not self._expect_text(")", "Expected ) in Scan statement",
                                 sync=SEMICOLON, stop=STATEMENT_STOP):
            return
        self._end_statement("Expected ; after Scan statement")

    def _parse_srap_stmt(self) -> None:
        self._rule("SrapStmt")
        self._advance()  # Srap

        if not self._expect_text("(", "Expected ( after Srap",
                                 sync=SEMICOLON, stop=STATEMENT_STOP):
            return
        self._parse_expression()
        if not self._expect_text(")", "Expected ) in Srap statement",
                                 sync=SEMICOLON, stop=STATEMENT_STOP):
            return
        self._end_statement("Expected ; after Srap statement")

    def _parse_block(self) -> None:
        self._rule("Block")

        if not self._match_text("{"):
            self._expected("Expected { at beginning of block", sync=SEMICOLON, stop=STATEMENT_STOP)
            return

        self._parse_statement_list()

        if not self._match_text("}"):
            self._expected("Expected } at end of block", sync=CLOSE_BRACE)

    # =========================================================================
    # Conditions and Expressions
    # =========================================================================

    def _parse_condition_expr(self) -> None:
        self._rule("ConditionExpr")
        self._parse_condition()
        if self._match_text(*CONDITION_CONNECTIVES):
            self._parse_condition()

    def _parse_condition(self) -> None:
        self._rule("Condition")
        self._parse_expression()
        self._parse_comparison_op()
        self._parse_expression()

    def _parse_comparison_op(self) -> None:
        self._rule("ComparisonOp")
        if not self._match_text(*COMPARISON_OPERATORS):
            self._error("Expected comparison operator (==, !=, >, >=, <, <=)")

    def _is_expression_start(self) -> bool:
        return self._check(*EXPRESSION_START) or self._check_text("(")

    def _parse_expression(self) -> None:
        self._rule("Expression")
        self._parse_term()
        while self._match_text(*ADDITIVE_OPERATORS):
            self._parse_term()

    def _parse_term(self) -> None:
        self._rule("Term")
        self._parse_factor()
        while self._match_text(*MULTIPLICATIVE_OPERATORS):
            self._parse_factor()

    def _parse_factor(self) -> None:
        self._rule("Factor")

        if self._match(*EXPRESSION_START):
            return

        if self._match_text("("):
            self._parse_expression()
            if not self._match_text(")"):
                self._expected("Expected ) at end of expression", stop=FACTOR_STOP)
            return

        self._expected("Expected identifier, number, string literal, or ( in factor",
                       stop=FACTOR_STOP)


# =============================================================================
# Convenience Functions
# =============================================================================

def recognize(tokens: Sequence[Token]) -> RecognitionResult:
    """
    Check a token stream against the Ity grammar.

    Args:
        tokens: Tokens from the lexer

    Returns:
        RecognitionResult with the rule trace and syntax errors
    """
    return Recognizer(tokens).recognize()
