"""Postfix evaluator — runs a postfix token list on an operand stack."""

from __future__ import annotations

import logging
import math

from infixcalc.debug import TraceEvent, TraceHook
from infixcalc.errors import InvalidExpression
from infixcalc.tokens import Number, Operator, OperatorToken, Span, Token

logger = logging.getLogger(__name__)

# Divisors closer to zero than this are treated as zero
DIVISION_EPSILON = 1e-12


def evaluate(
    postfix: list[Token],
    source: str = "",
    trace: TraceHook | None = None,
) -> float:
    """Evaluate a postfix token list and return its single result."""
    stack: list[Number] = []

    for tok in postfix:
        match tok:
            case Number():
                stack.append(tok)
            case OperatorToken():
                if len(stack) < 2:
                    raise InvalidExpression(
                        f"missing operand for {tok.op.symbol!r}", tok.span, source
                    )
                a = stack.pop()
                b = stack.pop()
                value = _apply(tok, b.value, a.value, source)
                stack.append(Number(value, _join(b, a)))
        if trace is not None:
            trace(TraceEvent("eval", tok, tuple(stack)))

    if not stack:
        raise InvalidExpression("empty expression", None, source)
    if len(stack) > 1:
        # Point at the first value that was never consumed by an operator
        raise InvalidExpression("missing operator", stack[1].span, source)

    result = stack[0].value
    logger.debug("evaluated %d postfix tokens to %r", len(postfix), result)
    return result


def _apply(tok: OperatorToken, b: float, a: float, source: str) -> float:
    """Apply *tok* to left operand *b* and right operand *a*."""
    match tok.op:
        case Operator.POW:
            try:
                value = math.pow(b, a)
            except (ValueError, OverflowError):
                raise InvalidExpression(
                    f"cannot raise {b!r} to the power {a!r}", tok.span, source
                ) from None
        case Operator.ADD:
            value = a + b
        case Operator.SUB:
            value = b - a
        case Operator.MUL:
            value = a * b
        case Operator.DIV:
            if abs(a) < DIVISION_EPSILON:
                raise InvalidExpression("division by zero", tok.span, source)
            value = b / a
        case Operator.LEFT_BRACKET | Operator.RIGHT_BRACKET:
            raise InvalidExpression("bracket in postfix sequence", tok.span, source)

    if not math.isfinite(value):
        raise InvalidExpression("result out of range", tok.span, source)
    return value


def _join(left: Number, right: Number) -> Span | None:
    """Span covering both operands, when both are known."""
    if left.span is None or right.span is None:
        return None
    if left.span.start.offset <= right.span.start.offset:
        return Span(left.span.start, right.span.end)
    return Span(right.span.start, left.span.end)


def truncated_equal(a: float, b: float, places: int = 10) -> bool:
    """Compare two results after truncating both to *places* decimal places."""
    scale = 10**places
    scaled_a, scaled_b = a * scale, b * scale
    if not (math.isfinite(scaled_a) and math.isfinite(scaled_b)):
        return a == b
    return math.trunc(scaled_a) == math.trunc(scaled_b)
