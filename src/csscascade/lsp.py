"""Minimal LSP server for selector files, one selector list per line, diagnostics only."""

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

from csscascade import __version__
from csscascade.errors import InvalidInput, ParseError
from csscascade.parser import parse

server = LanguageServer(
    "csscascade-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def check_source(source: str) -> list[Diagnostic]:
    """Diagnose each non-blank line of *source* as a selector list."""
    diagnostics: list[Diagnostic] = []
    seen: dict[str, int] = {}

    for line_no, line in enumerate(source.splitlines()):
        text = line.strip()
        if not text:
            continue
        indent = len(line) - len(line.lstrip())

        try:
            selectors = parse(text)
        except InvalidInput as exc:
            message = exc.message if isinstance(exc, ParseError) else str(exc)
            col = indent
            end = indent + len(text)
            if isinstance(exc, ParseError) and exc.position is not None:
                col = indent + exc.position.offset
                end = col + 1
            diagnostics.append(
                Diagnostic(
                    range=Range(
                        start=Position(line=line_no, character=col),
                        end=Position(line=line_no, character=end),
                    ),
                    message=message,
                    severity=DiagnosticSeverity.Error,
                    source="csscascade",
                )
            )
            continue

        for selector in selectors:
            canonical = selector.to_string()
            first = seen.setdefault(canonical, line_no)
            if first != line_no:
                diagnostics.append(
                    Diagnostic(
                        range=Range(
                            start=Position(line=line_no, character=indent),
                            end=Position(line=line_no, character=indent + len(text)),
                        ),
                        message=f"duplicate selector {canonical!r} (first on line {first + 1})",
                        severity=DiagnosticSeverity.Warning,
                        source="csscascade",
                    )
                )

    return diagnostics


def _validate(ls: LanguageServer, uri: str) -> None:
    """Check the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=check_source(doc.source))
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
