"""Minimal LSP server for expression files — diagnostics only.

Each non-blank line not starting with ``#`` is one expression.
"""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from infixcalc import __version__, evaluate_expression
from infixcalc.errors import InvalidExpression

server = LanguageServer(
    "infixcalc-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _diagnostic(exc: InvalidExpression, line: int, text: str) -> Diagnostic:
    """Convert an error on document line *line* (0-based) into a Diagnostic."""
    if exc.span is not None:
        start_col = exc.span.start.column - 1
        end_col = max(start_col + 1, exc.span.end.column - 1)
    else:
        # No location: flag the whole expression
        start_col = len(text) - len(text.lstrip())
        end_col = len(text.rstrip())
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=start_col),
            end=Position(line=line, character=end_col),
        ),
        message=exc.message,
        severity=DiagnosticSeverity.Error,
        source="infixcalc",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Evaluate every expression line and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    for line_no, text in enumerate(doc.source.splitlines()):
        stripped = text.strip()
        if not stripped or stripped.startswith("#"):
            continue
        try:
            evaluate_expression(text)
        except InvalidExpression as exc:
            diagnostics.append(_diagnostic(exc, line_no, text))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
