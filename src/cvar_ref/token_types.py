"""
Token Types for the cvar front end

Shared between lexer, parser and the REPL highlighter to avoid circular
dependencies.
"""

from typing import Union
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Literals
    NUMBER = auto()
    IDENT = auto()

    # Reserved words: for, if, else
    KEYWORD = auto()

    # + - * / =
    OPERATOR = auto()

    # < >
    COMPARATOR = auto()

    # Punctuation
    PAREN = auto()
    BRACE = auto()
    SEMI = auto()

    # Special (never emitted by the lexer, synthesized by the parser)
    EOF = auto()


TokValue = Union[float, str, None]


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    value: TokValue
    line: int = 0
    column: int = 0

    def is_(self, token_type: TT, value: TokValue) -> bool:
        return self.type == token_type and self.value == value

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
