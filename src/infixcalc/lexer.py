"""Expression lexer — converts source text into a flat token list."""

from __future__ import annotations

import logging
import math
import re

from infixcalc.errors import InvalidExpression
from infixcalc.tokens import (
    SIGN_OPERATORS,
    SINGLE_CHAR_OPERATORS,
    Number,
    OperatorToken,
    Position,
    Span,
    Token,
    is_digit,
    is_space,
)

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"[0-9]+(?:\.[0-9]+)?")


class Lexer:
    """Tokenize an arithmetic expression into Number and OperatorToken objects."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            self._lex_one()
        logger.debug("tokenized %r into %d tokens", self._source, len(self._tokens))
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _error(self, message: str, start: Position | None = None) -> InvalidExpression:
        if start is None:
            start = self._current_pos()
        end = Position(start.line, start.column + 1, start.offset + 1)
        if self._pos > start.offset:
            end = self._current_pos()
        return InvalidExpression(message, Span(start, end), self._source)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _lex_one(self) -> None:
        ch = self._peek()

        if is_space(ch):
            self._advance()
            return

        if ch in SINGLE_CHAR_OPERATORS:
            start = self._current_pos()
            self._advance()
            self._tokens.append(
                OperatorToken(SINGLE_CHAR_OPERATORS[ch], Span(start, self._current_pos()))
            )
            return

        if ch in SIGN_OPERATORS:
            self._lex_sign()
            return

        if is_digit(ch):
            start = self._current_pos()
            value = self._lex_number(start)
            self._tokens.append(Number(value, Span(start, self._current_pos())))
            return

        raise self._error(f"unrecognized character {ch!r}")

    def _lex_sign(self) -> None:
        """A ``+``/``-`` is a sign when a digit follows, else a binary operator."""
        start = self._current_pos()
        sign = self._peek()
        nxt = self._peek(1)

        if is_digit(nxt):
            self._advance()
            value = self._lex_number(start)
            if sign == "-":
                value = -value
            self._tokens.append(Number(value, Span(start, self._current_pos())))
            return

        if is_space(nxt) or nxt == "(":
            self._advance()
            self._tokens.append(
                OperatorToken(SIGN_OPERATORS[sign], Span(start, self._current_pos()))
            )
            return

        if nxt == "":
            raise self._error(f"dangling operator {sign!r} at end of expression", start)
        raise self._error(f"unexpected {nxt!r} after {sign!r}", start)

    def _lex_number(self, start: Position) -> float:
        """Consume a run of digits and points; it must read as digits[.digits]."""
        chars = []
        while is_digit(self._peek()) or self._peek() == ".":
            chars.append(self._advance())
        text = "".join(chars)
        if _NUMBER.fullmatch(text) is None:
            raise self._error(f"malformed number {text!r}", start)
        value = float(text)
        if not math.isfinite(value):
            raise self._error(f"number {text!r} is out of range", start)
        return value


def tokenize(expression: str) -> list[Token]:
    """Convenience function: tokenize an expression string."""
    return Lexer(expression).tokenize()
