"""
Shared pytest fixtures for the Packal test suite.
"""

import pytest

from packal.diagnostics import DiagnosticCollector


@pytest.fixture
def collector() -> DiagnosticCollector:
    """A fresh in-memory diagnostic sink."""
    return DiagnosticCollector()
