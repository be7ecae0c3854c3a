"""
Pascal Front-End Error Hierarchy
================================

Fatal diagnostics raised by the parser. All of them inherit from
PascalError, which itself inherits from PackalError.

Exception Hierarchy
-------------------
PascalError (base for all front-end errors)
├── PascalSyntaxError - structural grammar violations
│   ├── UnexpectedTokenError - wrong token where another was expected
│   └── UnsupportedFeatureError - grammar hooks with no implementation
└── PascalSemanticError - declaration and reference violations
    ├── UndeclaredIdentifierError - reference to an unknown name
    ├── PascalTypeError - argument of the wrong declaration kind
    ├── InvalidArrayBoundsError - array start greater than end
    └── NumberOutOfRangeError - value outside the 64-bit signed range

These errors never escape Parser.parse(): they unwind to it, are recorded
on the diagnostic sink and parsing stops. Non-fatal conditions (duplicate
declarations, unrecognised bytes) are reported directly to the sink and
never raised.

Error Message Format
--------------------
    prog.pas:3:12: error: Unknown identifier 'z' when parsing readln
    hint: did you mean 'a'?
"""

from typing import List, Optional

from packal.errors import PackalError, SourceLocation


# =============================================================================
# Base Front-End Exception
# =============================================================================

class PascalError(PackalError):
    """
    Base exception for all front-end errors.

    Attributes:
        message: The error description (without location prefix)
        location: Where in the input the error occurred
        hint: A suggestion for fixing the error
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def diagnostic_message(self) -> str:
        """Message text for a diagnostic record (location is carried separately)."""
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


# =============================================================================
# Syntax Errors
# =============================================================================

class PascalSyntaxError(PascalError):
    """
    Structural grammar violation.

    Examples:
        - missing 'program' keyword
        - missing ';' after the program name
        - identifier expected but a number found
    """
    pass


class UnexpectedTokenError(PascalSyntaxError):
    """
    The current token does not match the grammar production.

    The message keeps the production-oriented wording
    ("Expected operator ';' when parsing program"); the token actually
    found is kept in the hint.
    """

    def __init__(
        self,
        message: str,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
    ):
        self.found = found
        hint = f"found {found}" if found else None
        super().__init__(message, location=location, hint=hint)


class UnsupportedFeatureError(PascalSyntaxError):
    """A construct recognised by the grammar but not implemented."""

    def __init__(
        self,
        feature: str,
        location: Optional[SourceLocation] = None,
    ):
        self.feature = feature
        super().__init__(
            f"{feature} declarations are not supported",
            location=location,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class PascalSemanticError(PascalError):
    """
    Syntactically valid input that violates declaration rules.
    """
    pass


class UndeclaredIdentifierError(PascalSemanticError):
    """
    Reference to an identifier missing from the declaration table.

    Suggests similarly-named declarations when any are known.
    """

    def __init__(
        self,
        identifier: str,
        context: str,
        location: Optional[SourceLocation] = None,
        similar_identifiers: Optional[List[str]] = None,
    ):
        self.identifier = identifier
        self.similar_identifiers = similar_identifiers or []

        hint = None
        if self.similar_identifiers:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_identifiers[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"Unknown identifier '{identifier}' when parsing {context}",
            location=location,
            hint=hint,
        )


class PascalTypeError(PascalSemanticError):
    """
    Statement argument declared with the wrong kind.

    Example:
        const limit = 10;
        begin readln(limit) end.    { readln takes array or integer }
    """

    def __init__(
        self,
        message: str,
        actual_kind: Optional[str] = None,
        location: Optional[SourceLocation] = None,
    ):
        self.actual_kind = actual_kind
        hint = f"'{actual_kind}' given" if actual_kind else None
        super().__init__(message, location=location, hint=hint)


class InvalidArrayBoundsError(PascalSemanticError):
    """Array declared with a start index greater than its end index."""

    def __init__(
        self,
        start: int,
        end: int,
        location: Optional[SourceLocation] = None,
    ):
        self.start = start
        self.end = end
        super().__init__(
            f"Array start index {start} is greater than end index {end}",
            location=location,
        )


class NumberOutOfRangeError(PascalSemanticError):
    """Constant value or array bound outside the signed 64-bit range."""

    def __init__(
        self,
        value: int,
        location: Optional[SourceLocation] = None,
    ):
        self.value = value
        super().__init__(
            f"Number {value} does not fit in a 64-bit signed integer",
            location=location,
        )
