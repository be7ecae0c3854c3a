"""
Diagnostic Sink
===============

The tokenizer and parser never print anything themselves. They hand
structured records (severity, message, input location) to a diagnostic
sink passed in at construction time.

Two sinks are provided:

- LoggingDiagnosticSink forwards every record to the standard logging
  module. This is what the command-line tool uses.
- DiagnosticCollector keeps records in memory so callers (and tests) can
  inspect what was reported, optionally forwarding them to another sink.

Example:
    >>> collector = DiagnosticCollector()
    >>> collector.record(Severity.WARNING, 'Variable "a" hides previous declaration of "a"')
    >>> collector.warning_count()
    1
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from packal.errors import SourceLocation


class Severity(Enum):
    """Severity of a diagnostic record, with its logging level as value."""

    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Diagnostic:
    """
    A single diagnostic record.

    Attributes:
        severity: How serious the record is
        message: Human readable description
        location: Position in the input file, if known
    """
    severity: Severity
    message: str
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.severity.label}: {self.message}"
        return f"{self.severity.label}: {self.message}"


class DiagnosticSink(Protocol):
    """Anything that accepts diagnostic records."""

    def record(
        self,
        severity: Severity,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> None:
        ...


class LoggingDiagnosticSink:
    """
    Forwards diagnostics to a standard library logger.

    Args:
        logger: Logger to write to (default: the "packal.diagnostics" logger)
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("packal.diagnostics")

    def record(
        self,
        severity: Severity,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> None:
        # stacklevel=2 attributes the log record to the reporting call site
        self.logger.log(
            severity.value,
            str(Diagnostic(severity, message, location)),
            stacklevel=2,
        )


class DiagnosticCollector:
    """
    Collects diagnostics for later inspection or batch reporting.

    Example:
        collector = DiagnosticCollector()
        program = parse_source(text, sink=collector)
        if collector.has_errors():
            print(collector.report())

    Args:
        forward_to: Optional sink that also receives every record
    """

    def __init__(self, forward_to: Optional[DiagnosticSink] = None):
        self.diagnostics: List[Diagnostic] = []
        self.forward_to = forward_to

    def record(
        self,
        severity: Severity,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> None:
        self.diagnostics.append(Diagnostic(severity, message, location))
        if self.forward_to is not None:
            self.forward_to.record(severity, message, location)

    def _filter(self, severity: Severity) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is severity]

    @property
    def errors(self) -> List[Diagnostic]:
        return self._filter(Severity.ERROR)

    @property
    def warnings(self) -> List[Diagnostic]:
        return self._filter(Severity.WARNING)

    @property
    def infos(self) -> List[Diagnostic]:
        return self._filter(Severity.INFO)

    def has_errors(self) -> bool:
        """Return True if any error has been recorded."""
        return any(d.severity is Severity.ERROR for d in self.diagnostics)

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    def report(self) -> str:
        """Format all errors and warnings for display, with a summary line."""
        lines = [str(d) for d in self.diagnostics if d.severity is not Severity.INFO]

        error_word = "error" if self.error_count() == 1 else "errors"
        warning_word = "warning" if self.warning_count() == 1 else "warnings"
        lines.append(
            f"{self.error_count()} {error_word}, {self.warning_count()} {warning_word}"
        )
        return "\n".join(lines)

    def clear(self) -> None:
        """Forget all collected diagnostics."""
        self.diagnostics.clear()
