"""
Pascal Recursive Descent Parser
===============================

This module implements a recursive descent parser for the Packal subset
of Pascal. It pulls tokens from the tokenizer one at a time (one token of
lookahead), validates the program structure and fills in the global
declaration table as declarations are consumed.

Grammar (Simplified EBNF)
-------------------------
program         ::= 'program' IDENTIFIER ';' global_decls block '.' EOF
global_decls    ::= function_decl? procedure_decl? const_decls? var_decls?
const_decls     ::= 'const' const_group+
const_group     ::= ident_list '=' number ';'
var_decls       ::= 'var' var_group+
var_group       ::= ident_list ':' var_type
ident_list      ::= IDENTIFIER (',' IDENTIFIER)*
var_type        ::= 'integer' ';'
                  | 'array' '[' number '..' number ']' 'of' 'integer' ';'
number          ::= ('+' | '-')? NUMBER
block           ::= 'begin' statement (';' statement)* 'end'
statement       ::= readln | writeln | <empty>
readln          ::= 'readln' '(' IDENTIFIER ')'
writeln         ::= 'writeln' '(' IDENTIFIER ')'

'function' and 'procedure' are recognised but not implemented.

Punctuation Runs
----------------
The tokenizer returns maximal punctuation runs, so ``readln(a);`` ends
with the single token ``');'``. When the parser expects ``')'`` and the
current run starts with it, the ``')'`` is consumed and ``';'`` stays as
the current token. Runs starting with a compound operator (':=', '..',
'<=', '>=', '<>') are never split below that operator.

Error Handling
--------------
Parsing is fail-fast. Grammar and declaration violations raise a
PascalError that unwinds to parse(), which records it on the diagnostic
sink and returns None. Duplicate declarations are warnings and parsing
continues.

Example Usage
-------------
>>> from packal.pascal.parser import parse_source
>>> program = parse_source("program P; var a : integer; begin readln(a) end.")
>>> program.declarations.kind_of("a")
<DeclarationKind.INTEGER: 4>
"""

import io
import logging
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO, Optional, Union

from packal.diagnostics import DiagnosticSink, Severity
from packal.errors import SourceLocation
from packal.pascal.errors import (
    PascalError,
    UnexpectedTokenError,
    UnsupportedFeatureError,
    UndeclaredIdentifierError,
    PascalTypeError,
    InvalidArrayBoundsError,
    NumberOutOfRangeError,
)
from packal.pascal.lexer import Token, Tokenizer, TokenType
from packal.pascal.options import FrontendOptions
from packal.pascal.program import (
    Declaration,
    DeclarationKind,
    GlobalArray,
    GlobalConstant,
    GlobalDeclarations,
    GlobalInteger,
    Program,
    ReadlnStatement,
    WritelnStatement,
)

logger = logging.getLogger(__name__)

# Multi-character operators that are never split apart
COMPOUND_OPERATORS = (":=", "..", "<=", ">=", "<>")

# Constants and array bounds are signed 64-bit values
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class Parser:
    """
    Recursive descent parser for Packal programs.

    The parser owns its tokenizer (and through it the byte source);
    close() or a ``with`` block releases it.

    Usage:
        with Parser.from_source(open("prog.pas", "rb"), sink, "prog.pas") as parser:
            program = parser.parse()

    Attributes:
        succeeded: True if the last parse() call returned a Program
    """

    def __init__(self, tokenizer: Tokenizer):
        self._tokenizer = tokenizer
        self._token = Token()
        self._program: Optional[Program] = None
        self.succeeded = False

    @classmethod
    def from_source(
        cls,
        source: BinaryIO,
        sink: Optional[DiagnosticSink] = None,
        filename: str = "<input>",
        options: Optional[FrontendOptions] = None,
    ) -> "Parser":
        """Create a parser over a binary byte source."""
        return cls(Tokenizer(source, sink, filename, options))

    @property
    def sink(self) -> DiagnosticSink:
        return self._tokenizer.sink

    @property
    def filename(self) -> str:
        return self._tokenizer.filename

    @property
    def options(self) -> FrontendOptions:
        return self._tokenizer.options

    def parse(self) -> Optional[Program]:
        """
        Parse a complete program.

        Returns:
            The Program, or None if a fatal diagnostic was recorded
        """
        self.succeeded = False
        self._program = None
        self._advance()

        try:
            program = self._parse_program()
        except PascalError as e:
            self._program = None
            logger.debug("parse of %s failed: %s", self.filename, e.message)
            self.sink.record(Severity.ERROR, e.diagnostic_message(), e.location)
            return None

        self.succeeded = True
        return program

    def close(self) -> None:
        """Release the tokenizer's byte source."""
        self._tokenizer.close()

    def __enter__(self) -> "Parser":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _advance(self) -> None:
        self._token = self._tokenizer.next_token()

    def _location(self, token: Optional[Token] = None) -> SourceLocation:
        token = token or self._token
        return SourceLocation(self.filename, token.line, token.column)

    def _check(self, *types: TokenType) -> bool:
        return self._token.type in types

    def _match(self, token_type: TokenType) -> bool:
        """Consume the current token if it has the given type."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _error(self, message: str) -> UnexpectedTokenError:
        return UnexpectedTokenError(
            message,
            found=self._token.describe(),
            location=self._location(),
        )

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """
        Expect and consume a token of the given type.

        Raises:
            UnexpectedTokenError: If the current token has another type
        """
        if not self._check(token_type):
            raise self._error(message)
        token = self._token
        self._advance()
        return token

    def _check_operator(self, text: str) -> bool:
        """Return True if the current token is, or starts with, operator ``text``."""
        token = self._token
        if token.type is not TokenType.OPERATOR or not token.value.startswith(text):
            return False
        if token.value == text:
            return True
        return not any(
            len(compound) > len(text) and token.value.startswith(compound)
            for compound in COMPOUND_OPERATORS
        )

    def _match_operator(self, text: str) -> bool:
        """Consume operator ``text`` from the current token if present."""
        if not self._check_operator(text):
            return False

        token = self._token
        if token.value == text:
            self._advance()
        else:
            self._token = replace(
                token,
                value=token.value[len(text):],
                column=token.column + len(text),
            )
        return True

    def _expect_operator(self, text: str, message: str) -> None:
        if not self._match_operator(text):
            raise self._error(message)

    def _warn(self, message: str, location: SourceLocation) -> None:
        self.sink.record(Severity.WARNING, message, location)

    @property
    def _declarations(self) -> GlobalDeclarations:
        return self._program.declarations

    # =========================================================================
    # Program Structure
    # =========================================================================

    def _parse_program(self) -> Program:
        self._expect(TokenType.PROGRAM, "Expected 'program' when parsing program")
        name = self._expect(
            TokenType.IDENTIFIER, "Expected identifier when parsing program"
        ).value
        self._expect_operator(";", "Expected operator ';' when parsing program")

        self._program = Program(name=name)
        logger.debug("parsing program %s", name)

        self._parse_global_declarations()
        self._parse_block()

        self._expect_operator(".", "Expected operator '.' when parsing program")
        if self.options.require_eof and not self._check(TokenType.EOF):
            raise self._error("Expected end of input after '.'")

        return self._program

    def _parse_global_declarations(self) -> None:
        # Fixed order: functions, procedures, constants, variables
        self._parse_global_function()
        self._parse_global_procedure()
        self._parse_global_constants()
        self._parse_global_variables()

    def _parse_global_function(self) -> None:
        if self._check(TokenType.FUNCTION):
            raise UnsupportedFeatureError("function", self._location())

    def _parse_global_procedure(self) -> None:
        if self._check(TokenType.PROCEDURE):
            raise UnsupportedFeatureError("procedure", self._location())

    # =========================================================================
    # Constants
    # =========================================================================

    def _parse_global_constants(self) -> None:
        if not self._match(TokenType.CONST):
            return

        self._parse_constant_group()
        while self._check(TokenType.IDENTIFIER):
            self._parse_constant_group()

    def _parse_constant_group(self) -> None:
        """
        Parse ``a, b = 5;``.

        A name repeated inside the list ends collection of the list: it and
        every later name in the same list are consumed but not declared.
        """
        first = self._expect(
            TokenType.IDENTIFIER, "Expected identifier when parsing constant"
        )
        names = {first.value: self._location(first)}
        truncated = False

        while self._match_operator(","):
            token = self._expect(
                TokenType.IDENTIFIER, "Expected identifier when parsing constant"
            )
            if token.value in names and not truncated:
                logger.debug("constant list truncated at repeated name %r", token.value)
                truncated = True
            if not truncated:
                names[token.value] = self._location(token)

        self._expect_operator("=", "Expected operator '=' when parsing constant")
        value = self._parse_number("constant")
        self._expect_operator(";", "Expected ';' when parsing constant")

        for name, location in names.items():
            if name in self._declarations:
                self._warn(
                    f'Constant "{name}" hides previous declaration of "{name}"',
                    location,
                )
            self._declarations.declare(name, GlobalConstant(value))
            logger.debug("declared constant %s = %d", name, value)

    def _parse_number(self, context: str) -> int:
        sign = 1
        if self._match_operator("-"):
            sign = -1
        else:
            self._match_operator("+")

        location = self._location()
        token = self._expect(
            TokenType.NUMBER, f"Expected number when parsing {context}"
        )
        value = sign * int(token.value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise NumberOutOfRangeError(value, location)
        return value

    # =========================================================================
    # Variables
    # =========================================================================

    def _parse_global_variables(self) -> None:
        if not self._match(TokenType.VAR):
            return

        self._parse_variable_group()
        while self._check(TokenType.IDENTIFIER):
            self._parse_variable_group()

    def _parse_variable_group(self) -> None:
        """Parse ``a, b : integer;`` or ``a : array [1..10] of integer;``."""
        first = self._expect(
            TokenType.IDENTIFIER, "Expected identifier when parsing variable"
        )
        names = {first.value: self._location(first)}

        while self._match_operator(","):
            token = self._expect(
                TokenType.IDENTIFIER, "Expected identifier when parsing variable"
            )
            if token.value in names:
                self._warn(
                    f'Variable "{token.value}" hides previous declaration of "{token.value}"',
                    self._location(token),
                )
                continue
            names[token.value] = self._location(token)

        self._expect_operator(":", "Expected ':' when parsing variable")
        declaration = self._parse_variable_type()
        label = "Array" if isinstance(declaration, GlobalArray) else "Integer"

        for name, location in names.items():
            if name in self._declarations:
                self._warn(
                    f'{label} variable "{name}" hides previous declaration of "{name}"',
                    location,
                )
            self._declarations.declare(name, declaration)
            logger.debug("declared %s variable %s", label.lower(), name)

    def _parse_variable_type(self) -> Declaration:
        if self._match(TokenType.INTEGER):
            self._expect_operator(";", "Expected ';' when parsing variable type")
            return GlobalInteger()

        if self._check(TokenType.ARRAY):
            return self._parse_array()

        raise self._error("Expected 'array' or 'integer' when parsing variable type")

    def _parse_array(self) -> GlobalArray:
        location = self._location()
        self._advance()

        self._expect_operator("[", "Expected '[' when parsing array")
        start = self._parse_number("array")
        self._expect_operator("..", "Expected '..' when parsing array")
        end = self._parse_number("array")
        self._expect_operator("]", "Expected ']' when parsing array")
        self._expect(TokenType.OF, "Expected 'of' when parsing array")
        self._expect(TokenType.INTEGER, "Expected 'integer' when parsing array")
        self._expect_operator(";", "Expected ';' when parsing variable type")

        if start > end:
            raise InvalidArrayBoundsError(start, end, location)
        return GlobalArray(start, end)

    # =========================================================================
    # Block and Statements
    # =========================================================================

    def _parse_block(self) -> None:
        self._expect(TokenType.BEGIN, "Expected 'begin' when parsing block")

        self._parse_statement()
        while self._match_operator(";"):
            self._parse_statement()

        self._expect(TokenType.END, "Expected 'end' when parsing block")

    def _parse_statement(self) -> None:
        statements = self._program.block.statements

        if self._check(TokenType.READLN):
            name, location = self._parse_io_statement("readln")
            statements.append(ReadlnStatement(name, location))
        elif self._check(TokenType.WRITELN):
            name, location = self._parse_io_statement("writeln")
            statements.append(WritelnStatement(name, location))
        # Anything else is an empty statement

    def _parse_io_statement(self, keyword: str) -> tuple[str, SourceLocation]:
        """Parse ``keyword '(' IDENTIFIER ')'`` and validate the argument."""
        location = self._location()
        self._advance()

        self._expect_operator("(", f"Expected '(' when parsing {keyword}")

        if not self._check(TokenType.IDENTIFIER):
            raise self._error(f"Expected identifier when parsing {keyword}")
        name = self._token.value
        self._check_argument(name, keyword)
        self._advance()

        self._expect_operator(")", f"Expected ')' when parsing {keyword}")
        return name, location

    def _check_argument(self, name: str, keyword: str) -> None:
        """Reject undeclared names and names that are not integer or array."""
        if name not in self._declarations:
            raise UndeclaredIdentifierError(
                name,
                keyword,
                location=self._location(),
                similar_identifiers=self._find_similar_names(name),
            )

        kind = self._declarations.kind_of(name)
        if kind not in (DeclarationKind.INTEGER, DeclarationKind.ARRAY):
            raise PascalTypeError(
                f"Function {keyword} takes array or integer",
                actual_kind=kind.name.lower(),
                location=self._location(),
            )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _find_similar_names(self, name: str) -> list[str]:
        """
        Find declared names close to ``name`` for error hints.

        Uses simple edit distance heuristic.
        """
        similar = []
        for declared in self._declarations:
            if (
                declared.lower() == name.lower() or
                abs(len(declared) - len(name)) <= 1 and
                self._edit_distance(name, declared) <= 2
            ):
                similar.append(declared)
        return similar[:3]

    @staticmethod
    def _edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein edit distance between two strings."""
        if len(s1) < len(s2):
            s1, s2 = s2, s1

        distances = range(len(s2) + 1)
        for i, c1 in enumerate(s1):
            new_distances = [i + 1]
            for j, c2 in enumerate(s2):
                if c1 == c2:
                    new_distances.append(distances[j])
                else:
                    new_distances.append(
                        1 + min(distances[j], distances[j + 1], new_distances[-1])
                    )
            distances = new_distances
        return distances[-1]


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: Union[str, bytes],
    filename: str = "<input>",
    sink: Optional[DiagnosticSink] = None,
    options: Optional[FrontendOptions] = None,
) -> Optional[Program]:
    """
    Parse program text held in memory.

    Args:
        source: Program text (str is encoded as UTF-8, so non-ASCII
                characters reach the tokenizer as unrecognised bytes)
        filename: Name used in diagnostics
        sink: Diagnostic sink (default: logging)
        options: Front-end options

    Returns:
        The Program, or None if a fatal diagnostic was recorded
    """
    if isinstance(source, str):
        source = source.encode("utf-8")

    with Parser.from_source(io.BytesIO(source), sink, filename, options) as parser:
        return parser.parse()


def parse_file(
    path: Union[str, Path],
    sink: Optional[DiagnosticSink] = None,
    options: Optional[FrontendOptions] = None,
) -> Optional[Program]:
    """
    Parse a program file.

    Raises:
        OSError: If the file cannot be opened
    """
    path = Path(path)
    with Parser.from_source(path.open("rb"), sink, str(path), options) as parser:
        return parser.parse()
