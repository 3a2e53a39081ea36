"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from infixcalc.lexer import tokenize
from infixcalc.postfix import to_postfix
from infixcalc.tokens import Number, Operator, OperatorToken, Token, format_tokens


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns plain values.

    Numbers come back as floats and operators as Operator members, which
    keeps expected lists short.
    """

    def _lex(source: str) -> list[float | Operator]:
        return [t.value if isinstance(t, Number) else t.op for t in tokenize(source)]

    return _lex


@pytest.fixture
def rpn():
    """Return a helper that renders the postfix order of source, e.g. ``3 2 +``."""

    def _rpn(source: str) -> str:
        return format_tokens(to_postfix(tokenize(source), source))

    return _rpn


@pytest.fixture
def postfix():
    """Return a helper that builds a postfix token list from numbers and symbols."""

    def _postfix(*items: float | str) -> list[Token]:
        tokens: list[Token] = []
        for item in items:
            if isinstance(item, str):
                tokens.append(OperatorToken(Operator(item)))
            else:
                tokens.append(Number(float(item)))
        return tokens

    return _postfix
