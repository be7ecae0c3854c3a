"""
Unified CLI Error Handling
==========================

Exit codes and the last-resort exception handler for the packal tool.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes for the packal tool."""
    SUCCESS = 0
    FAILURE = 1          # Usage error, unreadable input or fatal parse error
    INTERNAL_ERROR = 3   # Unexpected internal error


def fail(message: str) -> NoReturn:
    """Print ``message`` to stderr and exit with ExitCode.FAILURE."""
    click.echo(message, err=True)
    sys.exit(ExitCode.FAILURE)


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception that escaped the front end and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print the full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from packal.errors import PackalError

    if isinstance(error, PackalError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.FAILURE)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Could not open file: {error.filename}", err=True)
        sys.exit(ExitCode.FAILURE)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
