"""
Program Structure and Declaration Table
=======================================

Data produced by the parser.

Structure
---------
Program
├── name - the identifier after 'program'
├── declarations: GlobalDeclarations
│   ├── names: name -> DeclarationKind
│   └── variables: name -> GlobalConstant | GlobalInteger | GlobalArray
└── block: Block
    └── statements: ReadlnStatement | WritelnStatement, in source order

Design Notes
------------
- Declaration payloads are a closed union of frozen dataclasses; each
  variant knows its own DeclarationKind.
- The two maps of GlobalDeclarations are only written through declare(),
  so they always hold the same names with matching kinds.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional, Union

from packal.errors import SourceLocation


# =============================================================================
# Declarations
# =============================================================================

class DeclarationKind(Enum):
    """Kind of a declared global name."""

    UNKNOWN = auto()
    ARRAY = auto()
    CONSTANT = auto()
    INTEGER = auto()


@dataclass(frozen=True)
class GlobalConstant:
    """A named integer constant: ``const limit = 10;``"""
    value: int

    @property
    def kind(self) -> DeclarationKind:
        return DeclarationKind.CONSTANT


@dataclass(frozen=True)
class GlobalInteger:
    """An integer variable: ``var count : integer;``"""

    @property
    def kind(self) -> DeclarationKind:
        return DeclarationKind.INTEGER


@dataclass(frozen=True)
class GlobalArray:
    """An integer array with inclusive bounds: ``var a : array [1..10] of integer;``"""
    start: int
    end: int

    @property
    def kind(self) -> DeclarationKind:
        return DeclarationKind.ARRAY

    def __len__(self) -> int:
        return self.end - self.start + 1


Declaration = Union[GlobalConstant, GlobalInteger, GlobalArray]


class GlobalDeclarations:
    """
    Declaration table for global names.

    Names are case-sensitive. Re-declaring a name replaces the previous
    entry (last write wins); warning about it is the parser's job.

    Attributes:
        names: Mapping of name to DeclarationKind
        variables: Mapping of name to declaration payload
    """

    def __init__(self):
        self.names: dict[str, DeclarationKind] = {}
        self.variables: dict[str, Declaration] = {}

    def declare(self, name: str, declaration: Declaration) -> None:
        """Add or replace the entry for ``name`` in both maps."""
        self.names[name] = declaration.kind
        self.variables[name] = declaration

    def kind_of(self, name: str) -> DeclarationKind:
        """Return the kind of ``name``, or UNKNOWN if it was never declared."""
        return self.names.get(name, DeclarationKind.UNKNOWN)

    def get(self, name: str) -> Optional[Declaration]:
        return self.variables.get(name)

    def items(self) -> Iterator[tuple[str, Declaration]]:
        return iter(self.variables.items())

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __repr__(self) -> str:
        entries = ", ".join(f"{name}: {kind.name}" for name, kind in self.names.items())
        return f"GlobalDeclarations({{{entries}}})"


# =============================================================================
# Statements
# =============================================================================

@dataclass(frozen=True)
class ReadlnStatement:
    """``readln(name)``"""
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class WritelnStatement:
    """``writeln(name)``"""
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False)


Statement = Union[ReadlnStatement, WritelnStatement]


@dataclass
class Block:
    """The statements between 'begin' and 'end', in source order."""
    statements: list[Statement] = field(default_factory=list)


# =============================================================================
# Program Root
# =============================================================================

@dataclass
class Program:
    """
    A successfully parsed program.

    Attributes:
        name: Program name from the header
        declarations: Global declaration table
        block: The main block
    """
    name: str = ""
    declarations: GlobalDeclarations = field(default_factory=GlobalDeclarations)
    block: Block = field(default_factory=Block)


# =============================================================================
# Pretty Printer
# =============================================================================

class ProgramPrinter:
    """
    Renders a Program as indented text for debugging.

    Usage:
        print(ProgramPrinter().print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, program: Program) -> str:
        """Render the program and return it as a string."""
        self.output = []
        self.indent_level = 0

        self._emit(f"Program: {program.name}")
        self._indent()

        self._emit("Declarations")
        self._indent()
        for name, declaration in program.declarations.items():
            self._emit(self._declaration_str(name, declaration))
        self._dedent()

        self._emit("Block")
        self._indent()
        for statement in program.block.statements:
            self._emit(self._statement_str(statement))
        self._dedent()

        self._dedent()
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        self.output.append(f"{'  ' * self.indent_level}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    @staticmethod
    def _declaration_str(name: str, declaration: Declaration) -> str:
        if isinstance(declaration, GlobalConstant):
            return f"Constant: {name} = {declaration.value}"
        if isinstance(declaration, GlobalArray):
            return f"Array: {name} [{declaration.start}..{declaration.end}]"
        return f"Integer: {name}"

    @staticmethod
    def _statement_str(statement: Statement) -> str:
        if isinstance(statement, ReadlnStatement):
            return f"Readln: {statement.name}"
        return f"Writeln: {statement.name}"
