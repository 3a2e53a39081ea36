"""Shunting-yard reordering of an infix token list into postfix order."""

from __future__ import annotations

import logging

from infixcalc.debug import TraceEvent, TraceHook
from infixcalc.errors import InvalidExpression
from infixcalc.tokens import Number, Operator, OperatorToken, Token

logger = logging.getLogger(__name__)


class ShuntingYard:
    """Reorder one token list. Instances are single-use."""

    def __init__(
        self, tokens: list[Token], source: str = "", trace: TraceHook | None = None
    ) -> None:
        self._tokens = tokens
        self._source = source
        self._trace = trace
        self._stack: list[OperatorToken] = []
        self._output: list[Token] = []

    def run(self) -> list[Token]:
        for tok in self._tokens:
            match tok:
                case Number():
                    self._output.append(tok)
                case OperatorToken(op=Operator.LEFT_BRACKET):
                    self._stack.append(tok)
                case OperatorToken(op=Operator.RIGHT_BRACKET):
                    self._close_bracket(tok)
                case OperatorToken():
                    self._push_operator(tok)
            self._emit(tok)

        self._drain()
        self._emit(None)
        logger.debug(
            "reordered %d tokens into %d postfix tokens", len(self._tokens), len(self._output)
        )
        return self._output

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _push_operator(self, tok: OperatorToken) -> None:
        op = tok.op
        while self._stack and self._binds_first(self._stack[-1].op, op):
            self._output.append(self._stack.pop())
        self._stack.append(tok)

    def _close_bracket(self, tok: OperatorToken) -> None:
        while self._stack:
            top = self._stack.pop()
            if top.op is Operator.LEFT_BRACKET:
                return
            self._output.append(top)
        raise InvalidExpression("unmatched closing bracket", tok.span, self._source)

    def _drain(self) -> None:
        while self._stack:
            top = self._stack.pop()
            if top.op is Operator.LEFT_BRACKET:
                raise InvalidExpression("unclosed bracket", top.span, self._source)
            self._output.append(top)

    def _emit(self, tok: Token | None) -> None:
        if self._trace is not None:
            self._trace(TraceEvent("postfix", tok, tuple(self._stack), tuple(self._output)))

    @staticmethod
    def _binds_first(top: Operator, incoming: Operator) -> bool:
        """Whether *top* must be output before *incoming* is pushed.

        A bracket on the stack is a barrier: its priority is the weakest, so
        no arithmetic operator ever displaces it.
        """
        if top.priority < incoming.priority:
            return True
        return top.priority == incoming.priority and not incoming.right_associative


def to_postfix(
    tokens: list[Token],
    source: str = "",
    trace: TraceHook | None = None,
) -> list[Token]:
    """Reorder infix *tokens* into postfix; the result holds no brackets."""
    return ShuntingYard(tokens, source, trace).run()
