# =============================================================================
# test_declarations.py - Declaration Table and Program Structure Tests
# =============================================================================

import pytest

from packal.pascal.parser import parse_source
from packal.pascal.program import (
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


# =============================================================================
# Declaration Table Tests
# =============================================================================

class TestGlobalDeclarations:
    """Both maps always hold the same names with matching kinds."""

    def test_declare(self):
        table = GlobalDeclarations()
        table.declare("limit", GlobalConstant(10))
        table.declare("count", GlobalInteger())
        table.declare("values", GlobalArray(1, 5))

        assert table.names == {
            "limit": DeclarationKind.CONSTANT,
            "count": DeclarationKind.INTEGER,
            "values": DeclarationKind.ARRAY,
        }
        assert set(table.variables) == set(table.names)
        for name, declaration in table.items():
            assert table.kind_of(name) is declaration.kind

    def test_unknown_name(self):
        table = GlobalDeclarations()
        assert table.kind_of("missing") is DeclarationKind.UNKNOWN
        assert table.get("missing") is None
        assert "missing" not in table

    def test_last_write_wins(self):
        table = GlobalDeclarations()
        table.declare("a", GlobalConstant(1))
        table.declare("a", GlobalArray(0, 9))

        assert len(table) == 1
        assert table.kind_of("a") is DeclarationKind.ARRAY
        assert table.get("a") == GlobalArray(0, 9)

    def test_names_are_case_sensitive(self):
        table = GlobalDeclarations()
        table.declare("a", GlobalInteger())
        assert "A" not in table

    def test_iteration_order(self):
        table = GlobalDeclarations()
        for name in ["z", "m", "a"]:
            table.declare(name, GlobalInteger())
        assert list(table) == ["z", "m", "a"]

    def test_repr(self):
        table = GlobalDeclarations()
        table.declare("a", GlobalInteger())
        assert repr(table) == "GlobalDeclarations({a: INTEGER})"


class TestDeclarationVariants:
    """Each payload knows its own kind."""

    @pytest.mark.parametrize("declaration,kind", [
        (GlobalConstant(3), DeclarationKind.CONSTANT),
        (GlobalInteger(), DeclarationKind.INTEGER),
        (GlobalArray(1, 2), DeclarationKind.ARRAY),
    ])
    def test_kind(self, declaration, kind):
        assert declaration.kind is kind

    @pytest.mark.parametrize("start,end,length", [
        (1, 10, 10),
        (0, 0, 1),
        (-5, 5, 11),
    ])
    def test_array_length(self, start, end, length):
        assert len(GlobalArray(start, end)) == length

    def test_statements_compare_without_location(self):
        assert ReadlnStatement("a") != WritelnStatement("a")
        assert ReadlnStatement("a") == ReadlnStatement("a", location=None)


# =============================================================================
# Program Printer Tests
# =============================================================================

class TestProgramPrinter:
    """Indented text dump used by ``packal --dump``."""

    def test_empty_program(self):
        assert ProgramPrinter().print(Program(name="Empty")).splitlines() == [
            "Program: Empty",
            "  Declarations",
            "  Block",
        ]

    def test_parsed_program(self, collector):
        program = parse_source(
            "program P;\n"
            "const limit = 10;\n"
            "var a : integer;\n"
            "    v : array [1..3] of integer;\n"
            "begin\n"
            "    readln(a);\n"
            "    writeln(v)\n"
            "end.\n",
            sink=collector,
        )

        assert ProgramPrinter().print(program).splitlines() == [
            "Program: P",
            "  Declarations",
            "    Constant: limit = 10",
            "    Integer: a",
            "    Array: v [1..3]",
            "  Block",
            "    Readln: a",
            "    Writeln: v",
        ]

    def test_printer_reusable(self):
        printer = ProgramPrinter()
        first = printer.print(Program(name="A"))
        second = printer.print(Program(name="A"))
        assert first == second
