"""Opt-in stage tracing and the --debug dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from infixcalc.tokens import Number, Token, format_number, format_tokens


@dataclass(frozen=True, slots=True)
class TraceEvent:
    """Snapshot taken after one token has been processed by a stage.

    For the ``postfix`` stage ``stack`` holds pending operators and ``output``
    the postfix sequence so far; for the ``eval`` stage ``stack`` holds
    operands as Number tokens and ``output`` is empty.
    """

    stage: str
    token: Token | None
    stack: tuple[Token, ...]
    output: tuple[Token, ...] = ()


TraceHook = Callable[[TraceEvent], None]


class StreamTracer:
    """Trace hook that writes one line per event to a text stream."""

    def __init__(self, file: TextIO = sys.stderr) -> None:
        self._file = file

    def __call__(self, event: TraceEvent) -> None:
        token = "end" if event.token is None else str(event.token)
        line = f"{event.stage:<8} {token:<6} stack=[{format_tokens(list(event.stack))}]"
        if event.stage == "postfix":
            line += f" output=[{format_tokens(list(event.output))}]"
        self._file.write(line + "\n")


def dump_tokens(
    tokens: list[Token],
    postfix: list[Token] | None = None,
    *,
    file: TextIO = sys.stderr,
) -> None:
    """Print the infix token list (and postfix order, if known) to *file*."""
    file.write("Tokens\n")
    for tok in tokens:
        if isinstance(tok, Number):
            file.write(f"  Number({format_number(tok.value)})\n")
        else:
            file.write(f"  Operator({tok.op.name})\n")
    if postfix is not None:
        file.write(f"Postfix\n  {format_tokens(postfix)}\n")
