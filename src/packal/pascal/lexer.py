"""
Pascal Tokenizer
================

This module implements a streaming tokenizer for the Packal subset of
Pascal. It pulls raw bytes from a binary source through a fixed-size
buffer and converts them into a stream of tokens for the parser.

Token Categories
----------------
- Keywords: program, var, const, begin, end, integer, readln, writeln, ...
- Identifiers: a letter followed by letters and digits
- Numbers: a run of decimal digits
- Operators: a maximal run of punctuation bytes (':=' and ');' are one token)

Classification is byte-wise over ASCII classes. Bytes outside those
classes (control characters, non-ASCII) are reported to the diagnostic
sink and skipped.

Buffering
---------
The tokenizer owns a buffer of ``buffer_size`` bytes (65 KiB by default)
with two cursors: the next unread byte and the number of valid bytes. When
the buffer is drained, or fewer than ``low_water_mark`` bytes remain ahead
of the cursor, the unread tail is moved to the front and more bytes are
read behind it. Runs that reach the end of the buffered bytes are stitched
together across the refill, so buffering never changes a lexeme.

Example Usage
-------------
>>> import io
>>> from packal.pascal.lexer import Tokenizer
>>> tokenizer = Tokenizer(io.BytesIO(b"program P;"), filename="p.pas")
>>> for token in tokenizer.tokenize():
...     print(token)
Token(PROGRAM, 'program', 1:1)
Token(IDENTIFIER, 'P', 1:9)
Token(OPERATOR, ';', 1:10)
Token(EOF, 1:11)
"""

import logging
import string
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import BinaryIO, Iterator, Optional

from packal.diagnostics import DiagnosticSink, LoggingDiagnosticSink, Severity
from packal.errors import SourceLocation
from packal.pascal.options import FrontendOptions

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the Packal language.

    WORD is internal: it marks an identifier-or-keyword candidate before
    refinement and never leaves the tokenizer.
    """

    UNKNOWN = auto()        # Unrecognised byte (already reported)
    IDENTIFIER = auto()
    NUMBER = auto()         # Decimal digit run
    WORD = auto()
    OPERATOR = auto()       # Punctuation run

    # === Keywords ===
    PROGRAM = auto()
    FUNCTION = auto()
    PROCEDURE = auto()
    VAR = auto()
    CONST = auto()
    BEGIN = auto()
    END = auto()
    INTEGER = auto()
    ARRAY = auto()
    OF = auto()
    READLN = auto()
    WRITELN = auto()

    EOF = auto()


# Exact, case-sensitive keyword spellings
KEYWORDS: dict[str, TokenType] = {
    "program": TokenType.PROGRAM,
    "function": TokenType.FUNCTION,
    "procedure": TokenType.PROCEDURE,
    "var": TokenType.VAR,
    "const": TokenType.CONST,
    "begin": TokenType.BEGIN,
    "end": TokenType.END,
    "integer": TokenType.INTEGER,
    "array": TokenType.ARRAY,
    "of": TokenType.OF,
    "readln": TokenType.READLN,
    "writeln": TokenType.WRITELN,
}

# Display names used by the token dump
TYPE_NAMES: dict[TokenType, str] = {
    TokenType.UNKNOWN: "Unknown",
    TokenType.IDENTIFIER: "Identifier",
    TokenType.NUMBER: "Number",
    TokenType.WORD: "String",
    TokenType.OPERATOR: "Operator",
    TokenType.EOF: "Eof",
}


# =============================================================================
# Byte Classes (C locale isspace/isalpha/isdigit/ispunct)
# =============================================================================

WHITESPACE = frozenset(b" \t\n\r\x0b\x0c")
ALPHA = frozenset(string.ascii_letters.encode("ascii"))
DIGITS = frozenset(string.digits.encode("ascii"))
ALNUM = ALPHA | DIGITS
PUNCTUATION = frozenset(string.punctuation.encode("ascii"))

NEWLINE = ord("\n")


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single lexical token.

    Two tokens are equal when their type and text are equal; the position
    fields are informational only.

    Attributes:
        type: The TokenType classification
        value: The raw lexeme ("" for EOF and UNKNOWN)
        line: Line of the first byte of the lexeme (1-indexed)
        column: Column of the first byte of the lexeme (1-indexed)
    """
    type: TokenType = TokenType.UNKNOWN
    value: str = ""
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        if self.value:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    def is_operator(self, text: str) -> bool:
        """Return True if this is exactly the punctuation run ``text``."""
        return self.type is TokenType.OPERATOR and self.value == text

    def describe(self) -> str:
        """Short description for error hints."""
        if self.type is TokenType.EOF:
            return "end of input"
        if self.type is TokenType.UNKNOWN:
            return "unrecognised character"
        if self.type in TYPE_NAMES:
            return f"{TYPE_NAMES[self.type].lower()} '{self.value}'"
        return f"keyword '{self.value}'"


# =============================================================================
# Tokenizer Implementation
# =============================================================================

class Tokenizer:
    """
    Pull-based tokenizer over a binary byte source.

    The tokenizer takes ownership of ``source`` and closes it in close()
    (or when used as a context manager).

    Usage:
        with Tokenizer(open("prog.pas", "rb"), sink, "prog.pas") as tokenizer:
            token = tokenizer.next_token()

    Attributes:
        filename: Name of the input (for diagnostics)
        options: Buffer configuration
        sink: Where unrecognised bytes are reported
    """

    def __init__(
        self,
        source: BinaryIO,
        sink: Optional[DiagnosticSink] = None,
        filename: str = "<input>",
        options: Optional[FrontendOptions] = None,
    ):
        self.filename = filename
        self.options = options or FrontendOptions()
        self.sink = sink if sink is not None else LoggingDiagnosticSink()

        self._source = source
        self._buffer = bytearray(self.options.buffer_size)
        self._index = 0
        self._size = 0
        self._exhausted = False

        # Stream offset of _buffer[0], for column tracking across refills
        self._base = 0
        self._line = 1
        self._line_start = 0

    # =========================================================================
    # Public Interface
    # =========================================================================

    @staticmethod
    def type_name(token_type: TokenType) -> str:
        """Return the display name of a token type ("Identifier", "Begin", ...)."""
        return TYPE_NAMES.get(token_type, token_type.name.capitalize())

    def next_token(self) -> Token:
        """
        Return the next token.

        Once the source is exhausted every call returns an EOF token;
        the source is never read again.
        """
        return self._refine(self._next())

    def tokenize(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF token."""
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.EOF:
                return

    def close(self) -> None:
        """Release the byte source."""
        if not self._source.closed:
            self._source.close()

    def __enter__(self) -> "Tokenizer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # Buffer Management
    # =========================================================================

    def _fill(self) -> bool:
        """
        Make sure unread bytes are buffered, refilling if needed.

        Returns:
            False when the source is exhausted and nothing is left to read
        """
        ahead = self._size - self._index
        if ahead == 0 or (ahead < self.options.low_water_mark and not self._exhausted):
            self._refill()
        return self._index < self._size

    def _refill(self) -> None:
        """Move the unread tail to the buffer start and read behind it."""
        left = self._size - self._index
        if self._index:
            self._buffer[0:left] = self._buffer[self._index:self._size]
            self._base += self._index
            self._index = 0
        self._size = left

        if self._exhausted:
            return

        chunk = self._source.read(len(self._buffer) - left)
        if not chunk:
            self._exhausted = True
            logger.debug("%s: source exhausted at offset %d", self.filename, self._base + left)
            return

        self._buffer[left:left + len(chunk)] = chunk
        self._size = left + len(chunk)
        logger.debug("%s: refill kept %d bytes, read %d", self.filename, left, len(chunk))

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _column(self) -> int:
        return self._base + self._index - self._line_start + 1

    def _location(self, line: int, column: int) -> SourceLocation:
        return SourceLocation(self.filename, line, column)

    def _skip_whitespace(self) -> bool:
        """Skip whitespace; return False if input ends first."""
        while self._fill():
            byte = self._buffer[self._index]
            if byte not in WHITESPACE:
                return True
            self._index += 1
            if byte == NEWLINE:
                self._line += 1
                self._line_start = self._base + self._index
        return False

    def _next(self) -> Token:
        """Scan one raw token (WORD, NUMBER, OPERATOR, UNKNOWN or EOF)."""
        if not self._skip_whitespace():
            return Token(TokenType.EOF, "", self._line, self._column())

        line = self._line
        column = self._column()
        byte = self._buffer[self._index]

        if byte in ALPHA:
            return Token(TokenType.WORD, self._scan_run(ALNUM), line, column)

        if byte in DIGITS:
            return Token(TokenType.NUMBER, self._scan_run(DIGITS), line, column)

        if byte in PUNCTUATION:
            return Token(TokenType.OPERATOR, self._scan_run(PUNCTUATION), line, column)

        self.sink.record(
            Severity.ERROR,
            f"Unknown character {chr(byte)!r} (0x{byte:02X})",
            self._location(line, column),
        )
        self._index += 1
        return Token(TokenType.UNKNOWN, "", line, column)

    def _scan_run(self, charset: frozenset) -> str:
        """
        Consume a maximal run of bytes from ``charset``.

        When the run reaches the end of the buffered bytes, the fragment
        read so far is kept and scanning resumes after a refill.
        """
        fragments = []
        start = self._index

        while True:
            if self._index == self._size:
                fragments.append(bytes(self._buffer[start:self._index]))
                if not self._fill():
                    break
                start = self._index
                continue

            if self._buffer[self._index] not in charset:
                fragments.append(bytes(self._buffer[start:self._index]))
                break

            self._index += 1

        return b"".join(fragments).decode("ascii")

    # =========================================================================
    # Refinement
    # =========================================================================

    def _refine(self, token: Token) -> Token:
        """Reclassify WORD tokens as keywords or identifiers."""
        if token.type is TokenType.WORD:
            return replace(token, type=KEYWORDS.get(token.value, TokenType.IDENTIFIER))

        if token.type in (
            TokenType.NUMBER,
            TokenType.OPERATOR,
            TokenType.EOF,
            TokenType.UNKNOWN,
        ):
            return token

        self.sink.record(
            Severity.ERROR,
            f"Unknown token to refine (type: {self.type_name(token.type)}, value: {token.value})",
            self._location(token.line, token.column),
        )
        return token
