"""Minimal LSP server for LiquidDoc, diagnostics only."""

from __future__ import annotations

from collections.abc import Iterator

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

from liquid_doc import __version__
from liquid_doc.ast import LiquidDocUnsupportedNode, LiquidNode, LiquidRawTag
from liquid_doc.errors import GrammarError, line_col
from liquid_doc.parser import parse_or_raise, parse_template_or_raise
from liquid_doc.syntax import char_index

server = LanguageServer(
    "liquid-doc-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _lsp_position(source: str, offset: int) -> Position:
    line, col = line_col(source, offset)
    return Position(line=line - 1, character=col - 1)


def _unsupported(nodes: list[LiquidNode] | tuple[LiquidNode, ...]) -> Iterator[LiquidDocUnsupportedNode]:
    for node in nodes:
        if isinstance(node, LiquidDocUnsupportedNode):
            yield node
        elif isinstance(node, LiquidRawTag):
            yield from _unsupported(node.children)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    diagnostics: list[Diagnostic] = []

    try:
        if uri.endswith(".liquid"):
            ast = parse_template_or_raise(source)
        else:
            ast = parse_or_raise(source)
    except GrammarError as exc:
        start = _lsp_position(source, exc.offset)
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=start,
                    end=Position(line=start.line, character=start.character + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="liquid-doc",
            )
        )
    else:
        for node in _unsupported(ast.nodes):
            tag = node.source.split(None, 1)[0] if node.source.strip() else "@"
            diagnostics.append(
                Diagnostic(
                    range=Range(
                        start=_lsp_position(source, char_index(source, node.position.start)),
                        end=_lsp_position(source, char_index(source, node.position.end)),
                    ),
                    message=f"unsupported tag {tag}",
                    severity=DiagnosticSeverity.Warning,
                    source="liquid-doc",
                )
            )

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
