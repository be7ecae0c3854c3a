"""
Packal - Front End for a Minimal Pascal-like Language
=====================================================

Packal tokenizes and parses programs written in a small Pascal subset,
validating their structure and building a table of global declarations.
There is no code generator: a successful run means the program is
well-formed and every identifier it reads or writes is declared.

Main Components
---------------
- **pascal**: tokenizer, parser and program structures
- **diagnostics**: structured Info/Warning/Error records and sinks
- **cli**: the ``packal`` command-line tool

Quick Start
-----------
    >>> from packal import parse_source, DiagnosticCollector
    >>> collector = DiagnosticCollector()
    >>> program = parse_source("program P; var a, a : integer; begin end.", sink=collector)
    >>> collector.warning_count()
    1

Or use the command-line tool:
    $ packal hello.pas
    $ packal --tokens hello.pas
"""

__version__ = "1.0.0"

from packal.errors import PackalError, SourceLocation
from packal.diagnostics import (
    Severity,
    Diagnostic,
    DiagnosticSink,
    LoggingDiagnosticSink,
    DiagnosticCollector,
)
from packal.pascal import (
    FrontendOptions,
    Parser,
    Program,
    Token,
    Tokenizer,
    TokenType,
    parse_file,
    parse_source,
)

__all__ = [
    "__version__",
    # Errors
    "PackalError",
    "SourceLocation",
    # Diagnostics
    "Severity",
    "Diagnostic",
    "DiagnosticSink",
    "LoggingDiagnosticSink",
    "DiagnosticCollector",
    # Front end
    "FrontendOptions",
    "Parser",
    "Program",
    "Token",
    "Tokenizer",
    "TokenType",
    "parse_file",
    "parse_source",
]
