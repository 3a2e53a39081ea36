"""The single error type, with formatted source context."""

from __future__ import annotations

from infixcalc.tokens import Position, Span


class InvalidExpression(Exception):
    """Raised on the first problem found in an expression, at any stage.

    ``span`` points at the offending character or token when one is known;
    errors about the expression as a whole (e.g. an empty input) carry none.
    """

    def __init__(self, message: str, span: Span | None = None, source: str = "") -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    @property
    def position(self) -> Position | None:
        return self.span.start if self.span is not None else None

    def format(self, filename: str = "<expr>") -> str:
        if self.span is None:
            return f"error: {self.message}"

        lines = self.source.splitlines(keepends=True)
        line_idx = self.span.start.line - 1
        col = self.span.start.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # A span running past its first line is cut at the line end
        end_col = self.span.end.column if self.span.end.line == self.span.start.line else 0
        underline_len = max(1, (end_col or len(source_line) + 1) - col)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.span.start.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.span.start.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )
