"""
Packal Error Hierarchy
======================

This module defines the root of the exception hierarchy for Packal.
All exceptions inherit from PackalError, allowing callers to catch every
front-end error with a single except clause if desired.

Exception Hierarchy
-------------------
PackalError (base)
└── PascalError (front end, see packal.pascal.errors)
    ├── PascalSyntaxError - structural grammar violations
    └── PascalSemanticError - declaration and reference violations

Error messages follow this format:
    filename:line:column: error: description
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class PackalError(Exception):
    """
    Base exception for all Packal errors.

        try:
            parse_file("hello.pas")
        except PackalError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in an input file for diagnostics.

    Attributes:
        filename: Name of the source file (or "<input>" for in-memory input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
