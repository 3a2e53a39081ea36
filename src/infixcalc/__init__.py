"""Infix arithmetic expression evaluator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infixcalc.debug import TraceHook

__version__ = "0.1.0"


def evaluate_expression(expression: str, *, trace: TraceHook | None = None) -> float:
    """Tokenize, reorder to postfix, and evaluate an infix expression."""
    from infixcalc.eval import evaluate
    from infixcalc.lexer import tokenize
    from infixcalc.postfix import to_postfix

    tokens = tokenize(expression)
    postfix = to_postfix(tokens, expression, trace)
    return evaluate(postfix, expression, trace)
