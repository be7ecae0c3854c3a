"""
Packal Pascal Front End
=======================

Tokenizer and recursive descent parser for a minimal Pascal-like
language.

Pipeline
--------
    bytes → Tokenizer → tokens → Parser → Program (name, declarations, block)

Both stages report to a diagnostic sink (see packal.diagnostics) instead
of printing. Parsing stops at the first fatal error.

Usage
-----
>>> from packal.pascal import parse_source
>>> program = parse_source('''
... program Echo;
... var a : integer;
... begin
...     readln(a);
...     writeln(a)
... end.
... ''')
>>> program.name
'Echo'

Language Subset
---------------
Supported:
- Program header: program Name;
- Constants: const a, b = 5; c = -1;
- Variables: var x, y : integer; v : array [1..10] of integer;
- Block statements: readln(name) and writeln(name), separated by ';'

Recognised but not supported:
- function and procedure declarations
"""

from packal.pascal.errors import (
    PascalError,
    PascalSyntaxError,
    PascalSemanticError,
    UnexpectedTokenError,
    UnsupportedFeatureError,
    UndeclaredIdentifierError,
    PascalTypeError,
    InvalidArrayBoundsError,
    NumberOutOfRangeError,
)
from packal.pascal.lexer import KEYWORDS, Token, Tokenizer, TokenType
from packal.pascal.options import FrontendOptions
from packal.pascal.parser import Parser, parse_file, parse_source
from packal.pascal.program import (
    Block,
    DeclarationKind,
    GlobalArray,
    GlobalConstant,
    GlobalDeclarations,
    GlobalInteger,
    Program,
    ProgramPrinter,
    ReadlnStatement,
    WritelnStatement,
)

__all__ = [
    # Errors
    "PascalError",
    "PascalSyntaxError",
    "PascalSemanticError",
    "UnexpectedTokenError",
    "UnsupportedFeatureError",
    "UndeclaredIdentifierError",
    "PascalTypeError",
    "InvalidArrayBoundsError",
    "NumberOutOfRangeError",
    # Tokenizer
    "KEYWORDS",
    "Token",
    "Tokenizer",
    "TokenType",
    # Configuration
    "FrontendOptions",
    # Parser
    "Parser",
    "parse_file",
    "parse_source",
    # Program structure
    "Block",
    "DeclarationKind",
    "GlobalArray",
    "GlobalConstant",
    "GlobalDeclarations",
    "GlobalInteger",
    "Program",
    "ProgramPrinter",
    "ReadlnStatement",
    "WritelnStatement",
]
