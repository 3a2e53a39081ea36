"""Token types, operator table, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Operator(Enum):
    """Binary operators and grouping brackets, keyed by source symbol."""

    POW = "^"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    LEFT_BRACKET = "("
    RIGHT_BRACKET = ")"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def priority(self) -> int:
        """Binding strength: lower binds tighter. Brackets sit below everything."""
        return _PRIORITY[self]

    @property
    def is_bracket(self) -> bool:
        return self in (Operator.LEFT_BRACKET, Operator.RIGHT_BRACKET)

    @property
    def right_associative(self) -> bool:
        return self is Operator.POW


_PRIORITY = {
    Operator.POW: 0,
    Operator.MUL: 1,
    Operator.DIV: 1,
    Operator.ADD: 2,
    Operator.SUB: 2,
    Operator.LEFT_BRACKET: 3,
    Operator.RIGHT_BRACKET: 3,
}

# Characters that always produce a single operator token
SINGLE_CHAR_OPERATORS = {
    "*": Operator.MUL,
    "/": Operator.DIV,
    "^": Operator.POW,
    "(": Operator.LEFT_BRACKET,
    ")": Operator.RIGHT_BRACKET,
}

# Characters that are a sign or a binary operator depending on what follows
SIGN_OPERATORS = {
    "+": Operator.ADD,
    "-": Operator.SUB,
}


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Number:
    """A numeric literal, sign already applied."""

    value: float
    span: Span | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True, slots=True)
class OperatorToken:
    """An operator or bracket."""

    op: Operator
    span: Span | None = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.op.symbol


Token = Number | OperatorToken


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return ch != "" and ch in "0123456789"


def is_space(ch: str) -> bool:
    """Return True if ch is insignificant whitespace."""
    return ch != "" and ch in " \t\r\n"


# Beyond this, integral floats are no longer exact integers
_EXACT_INT_LIMIT = 2**53


def format_number(value: float) -> str:
    """Render a value without a trailing ``.0`` when it is an exact integer."""
    if value.is_integer() and abs(value) < _EXACT_INT_LIMIT:
        return str(int(value))
    return repr(value)


def format_tokens(tokens: list[Token]) -> str:
    """Space-separated rendering, e.g. ``3 2 1 * +``."""
    return " ".join(str(t) for t in tokens)
