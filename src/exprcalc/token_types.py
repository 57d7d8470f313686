"""
Token Types for the exprcalc parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()

    # Operators (+ - * /)
    OPERATOR = auto()

    # Punctuation
    PAREN = auto()
    COLON = auto()
    COMMA = auto()
    SEMI = auto()
    QMARK = auto()

    # Parser-only end-of-input sentinel; never produced by the lexer
    EOF = auto()


# Printable kind names used in error messages
KIND_NAMES = {
    TT.NUMBER: 'number',
    TT.STRING: 'string',
    TT.IDENT: 'identifier',
    TT.EOF: 'end of input',
}


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    pos: int = 0
    line: int = 0
    column: int = 0

    def describe(self) -> str:
        """Short human-readable form for diagnostics."""
        if self.type in (TT.NUMBER, TT.STRING, TT.IDENT):
            return f"{KIND_NAMES[self.type]} {self.value!r}"
        if self.type == TT.EOF:
            return KIND_NAMES[TT.EOF]
        return repr(self.value)

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
