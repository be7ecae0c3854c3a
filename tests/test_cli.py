# =============================================================================
# test_cli.py - packal Command-Line Tests
# =============================================================================
# Tests for argument handling, exit codes and output of the packal tool.
# =============================================================================

from pathlib import Path

import pytest
from click.testing import CliRunner

from packal import __version__
from packal.cli.errors import ExitCode
from packal.cli.packal import main


VALID = "program Hello;\nvar a : integer;\nbegin\n  readln(a);\n  writeln(a)\nend.\n"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write(name: str, text: str) -> None:
    with open(name, "w") as f:
        f.write(text)


# =============================================================================
# Argument Handling Tests
# =============================================================================

class TestArguments:
    """Input file validation."""

    def test_no_arguments(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code == ExitCode.FAILURE
        assert "Usage" in result.output

    def test_two_arguments(self, runner):
        with runner.isolated_filesystem():
            write("a.pas", VALID)
            write("b.pas", VALID)
            result = runner.invoke(main, ["a.pas", "b.pas"])
            assert result.exit_code == ExitCode.FAILURE
            assert "Usage" in result.output

    def test_missing_file(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["missing.pas"])
            assert result.exit_code == ExitCode.FAILURE
            assert "File does not exist: missing.pas" in result.output

    def test_directory(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["."])
            assert result.exit_code == ExitCode.FAILURE
            assert "File does not exist" in result.output

    def test_unreadable_file(self, runner, monkeypatch):
        def deny(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied", str(self))

        with runner.isolated_filesystem():
            write("locked.pas", VALID)
            monkeypatch.setattr(Path, "open", deny)
            result = runner.invoke(main, ["locked.pas"])
            assert result.exit_code == ExitCode.FAILURE
            assert "Could not open file: locked.pas" in result.output
            assert "Parsed" not in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_buffer_size_too_small(self, runner):
        with runner.isolated_filesystem():
            write("hello.pas", VALID)
            result = runner.invoke(main, ["--buffer-size", "1", "hello.pas"])
            assert result.exit_code == 2


# =============================================================================
# Parse Mode Tests
# =============================================================================

class TestParse:
    """Default mode: parse and validate."""

    def test_success(self, runner):
        with runner.isolated_filesystem():
            write("hello.pas", VALID)
            result = runner.invoke(main, ["hello.pas"])
            assert result.exit_code == 0, result.output
            assert "Parsed hello.pas: program Hello" in result.output

    def test_warnings_do_not_fail(self, runner):
        with runner.isolated_filesystem():
            write("dup.pas", "program P; var a, a : integer; begin end.")
            result = runner.invoke(main, ["dup.pas"])
            assert result.exit_code == 0, result.output
            assert 'dup.pas:1:19: warning: Variable "a" hides previous declaration' in result.output

    def test_fatal_error(self, runner):
        with runner.isolated_filesystem():
            write("bad.pas", "program P var a : integer; begin end.")
            result = runner.invoke(main, ["bad.pas"])
            assert result.exit_code == ExitCode.FAILURE
            assert "bad.pas:1:11: error: Expected operator ';' when parsing program" in result.output
            assert "Parsed" not in result.output

    def test_undeclared_identifier(self, runner):
        with runner.isolated_filesystem():
            write("undeclared.pas", "program P; var a : integer; begin writeln(b) end.")
            result = runner.invoke(main, ["undeclared.pas"])
            assert result.exit_code == ExitCode.FAILURE
            assert "Unknown identifier 'b' when parsing writeln" in result.output

    def test_diagnostic_line_format(self, runner):
        """Each diagnostic is one 'file:line:column: severity: message' line."""
        with runner.isolated_filesystem():
            write("dup.pas", "program P; var a, a : integer; begin end.")
            result = runner.invoke(main, ["dup.pas"])
            lines = [line for line in result.output.splitlines() if "warning" in line]
            assert lines == ['dup.pas:1:19: warning: Variable "a" hides previous declaration of "a"']

    def test_dump(self, runner):
        with runner.isolated_filesystem():
            write("hello.pas", VALID)
            result = runner.invoke(main, ["--dump", "hello.pas"])
            assert result.exit_code == 0, result.output
            assert "Program: Hello" in result.output
            assert "    Integer: a" in result.output
            assert "    Writeln: a" in result.output

    def test_small_buffer(self, runner):
        with runner.isolated_filesystem():
            write("hello.pas", VALID)
            result = runner.invoke(main, ["--buffer-size", "4", "hello.pas"])
            assert result.exit_code == 0, result.output
            assert "program Hello" in result.output

    def test_buffer_size_from_environment(self, runner):
        with runner.isolated_filesystem():
            write("hello.pas", VALID)
            result = runner.invoke(main, ["hello.pas"], env={"PACKAL_BUFFER_SIZE": "8"})
            assert result.exit_code == 0, result.output

    def test_verbose(self, runner):
        with runner.isolated_filesystem():
            write("hello.pas", VALID)
            result = runner.invoke(main, ["-v", "hello.pas"])
            assert result.exit_code == 0, result.output
            assert "Parsed: 1 declarations, 2 statements" in result.output


# =============================================================================
# Token Mode Tests
# =============================================================================

class TestTokens:
    """--tokens reports the token stream."""

    def test_token_report(self, runner):
        with runner.isolated_filesystem():
            write("hello.pas", "program P;")
            result = runner.invoke(main, ["--tokens", "hello.pas"])
            assert result.exit_code == 0, result.output
            assert "hello.pas:1:1: info: Type: Program, Value: program" in result.output
            assert "hello.pas:1:9: info: Type: Identifier, Value: P" in result.output
            assert "Type: Operator, Value: ;" in result.output
            assert "Type: Eof" not in result.output

    def test_tokens_do_not_parse(self, runner):
        """Token mode never runs the parser, so grammar errors are not reported."""
        with runner.isolated_filesystem():
            write("bad.pas", "begin end")
            result = runner.invoke(main, ["--tokens", "bad.pas"])
            assert result.exit_code == 0
            assert "error" not in result.output

    def test_unknown_byte_reported(self, runner):
        with runner.isolated_filesystem():
            with open("odd.pas", "wb") as f:
                f.write(b"a \x01 b")
            result = runner.invoke(main, ["--tokens", "odd.pas"])
            assert result.exit_code == 0
            assert "odd.pas:1:3: error: Unknown character" in result.output
            assert "Type: Unknown, Value: " in result.output

    def test_token_count_verbose(self, runner):
        with runner.isolated_filesystem():
            write("hello.pas", "program P;")
            result = runner.invoke(main, ["--tokens", "-v", "hello.pas"])
            assert "Tokenized: 3 tokens" in result.output
