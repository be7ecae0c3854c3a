"""
packal - Pascal Front-End Command-Line Interface
================================================

This module implements the command-line interface for the Packal front
end. It checks a program for structural and declaration errors, or dumps
the token stream.

Usage Examples
--------------
Check a program:
    $ packal hello.pas

Show every token:
    $ packal --tokens hello.pas

Print the parsed program:
    $ packal --dump hello.pas

Exit Codes
----------
0 - the program parsed (warnings do not count)
1 - usage error, missing or unreadable file, or fatal parse error
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from packal import __version__
from packal.cli.errors import ExitCode, fail, handle_cli_exception
from packal.diagnostics import DiagnosticSink, LoggingDiagnosticSink, Severity
from packal.errors import SourceLocation
from packal.pascal import FrontendOptions, Parser, ProgramPrinter, Tokenizer, TokenType


# =============================================================================
# Logging Setup
# =============================================================================

class ClickEchoHandler(logging.Handler):
    """Logging handler that writes records to stderr through click.echo."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(level: int) -> None:
    """
    Route the ``packal`` logger hierarchy to stderr at ``level``.

    Diagnostic records already read ``file:line:column: severity: message``,
    so the handler prints the bare message.
    """
    logger = logging.getLogger("packal")
    for handler in list(logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            logger.removeHandler(handler)

    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_files",
    nargs=-1,
    metavar="INPUT_FILE",
    type=click.Path(path_type=Path),
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Report every token instead of parsing",
)
@click.option(
    "--dump",
    is_flag=True,
    help="Print the parsed program after a successful parse",
)
@click.option(
    "--buffer-size",
    type=click.IntRange(min=2),
    default=None,
    help="Tokenizer buffer size in bytes (default: 66560, or $PACKAL_BUFFER_SIZE)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (includes tokenizer and parser tracing)",
)
@click.version_option(version=__version__, prog_name="packal")
@click.pass_context
def main(
    ctx: click.Context,
    input_files: tuple[Path, ...],
    tokens: bool,
    dump: bool,
    buffer_size: Optional[int],
    verbose: bool,
) -> None:
    """
    Check a Packal program for syntax and declaration errors.

    INPUT_FILE is the program source (.pas) to check.

    \b
    Examples:
        packal hello.pas             # Parse and validate
        packal --tokens hello.pas    # Dump the token stream
        packal --dump hello.pas      # Print declarations and statements
    """
    if len(input_files) != 1:
        fail(ctx.get_usage())

    input_file = input_files[0]
    if not input_file.is_file():
        fail(f"File does not exist: {input_file}")

    options = FrontendOptions.from_env()
    if buffer_size is not None:
        options = replace(
            options,
            buffer_size=buffer_size,
            low_water_mark=min(options.low_water_mark, buffer_size - 1),
        )

    if verbose:
        configure_logging(logging.DEBUG)
    elif tokens:
        configure_logging(logging.INFO)
    else:
        configure_logging(logging.WARNING)

    sink = LoggingDiagnosticSink()

    try:
        source = input_file.open("rb")
    except OSError:
        fail(f"Could not open file: {input_file}")

    try:
        if tokens:
            with Tokenizer(source, sink, str(input_file), options) as tokenizer:
                count = report_tokens(tokenizer, sink)
            if verbose:
                click.echo(f"Tokenized: {count} tokens")
            return

        with Parser.from_source(source, sink, str(input_file), options) as parser:
            program = parser.parse()

    except Exception as e:
        handle_cli_exception(e, verbose)

    if program is None:
        sys.exit(ExitCode.FAILURE)

    if dump:
        click.echo(ProgramPrinter().print(program))

    if verbose:
        click.echo(f"Parsed: {len(program.declarations)} declarations, "
                   f"{len(program.block.statements)} statements")

    click.echo(f"Parsed {input_file}: program {program.name}")


def report_tokens(tokenizer: Tokenizer, sink: DiagnosticSink) -> int:
    """
    Record every token before EOF as an Info diagnostic.

    Returns:
        The number of tokens reported
    """
    count = 0
    for token in tokenizer.tokenize():
        if token.type is TokenType.EOF:
            break
        sink.record(
            Severity.INFO,
            f"Type: {Tokenizer.type_name(token.type)}, Value: {token.value}",
            SourceLocation(tokenizer.filename, token.line, token.column),
        )
        count += 1
    return count


if __name__ == "__main__":
    main()
