"""
fan Language Server implementation using pygls.

Feeds open/change/close notifications into a fan Workspace and answers
hover, definition, references and document symbol requests from it.
Offsets from the core are converted to LSP positions here.
"""

import logging
import sys
from typing import Optional, List

from pygls.lsp.server import LanguageServer
from pygls.workspace.position_codec import PositionCodec

from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_REFERENCES,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    InitializeParams,
    DidOpenTextDocumentParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    HoverParams,
    Hover,
    DefinitionParams,
    ReferenceParams,
    Location,
    DocumentSymbolParams,
    DocumentSymbol,
    SymbolKind,
    Diagnostic,
    DiagnosticSeverity,
    DiagnosticRelatedInformation,
    PublishDiagnosticsParams,
    Range,
    Position,
    MarkupContent,
    MarkupKind,
)

from fan import __version__
from fan.core.config import DiagnosticLevel, ServerConfig
from fan.core.ir import Span
from fan.core.outline import OutlineEntry, OutlineKind
from fan.core.store import LinkDiagnostic
from fan.core.workspace import DocumentLocation, Workspace

from .positions import LineIndex

logger = logging.getLogger(__name__)

DIAGNOSTIC_SOURCE = "fan"

_SEVERITY = {
    DiagnosticLevel.INFORMATION: DiagnosticSeverity.Information,
    DiagnosticLevel.HINT: DiagnosticSeverity.Hint,
}

_SYMBOL_KIND = {
    OutlineKind.CONTAINER: SymbolKind.Class,
    OutlineKind.DEFINITION: SymbolKind.Method,
}


class LspDiagnosticsSink:
    """Publishes linker diagnostics to the client, replacing earlier sets."""

    def __init__(self, ls: LanguageServer):
        self.ls = ls
        self.workspace: Workspace | None = None

    def range_for(self, uri: str, span: Span) -> Range:
        document = self.workspace.get(uri) if self.workspace else None
        if document is None:
            return Range(start=Position(line=0, character=0), end=Position(line=0, character=0))
        return LineIndex(document.text, self.ls.workspace.position_codec).range_of(span)

    def publish(self, uri: str, version: int | None, diagnostics: list[LinkDiagnostic]) -> None:
        lsp_diagnostics = [_make_diagnostic(d, uri, self.range_for) for d in diagnostics]
        logger.debug(f"Publishing {len(lsp_diagnostics)} diagnostics for {uri}")
        self.ls.text_document_publish_diagnostics(
            PublishDiagnosticsParams(uri=uri, version=version, diagnostics=lsp_diagnostics)
        )


def _make_diagnostic(diagnostic: LinkDiagnostic, uri: str, range_for) -> Diagnostic:
    """Convert a linker diagnostic on uri; range_for(uri, span) resolves positions."""
    related = [
        DiagnosticRelatedInformation(
            location=Location(uri=info.uri, range=range_for(info.uri, info.span)),
            message=info.message,
        )
        for info in diagnostic.related
    ]
    return Diagnostic(
        range=range_for(uri, diagnostic.span),
        message=diagnostic.message,
        severity=_SEVERITY[diagnostic.level],
        source=DIAGNOSTIC_SOURCE,
        related_information=related or None,
    )


def configure(ls: LanguageServer, config: ServerConfig) -> None:
    """Attach (or replace) the Workspace and settings of a server."""
    sink = LspDiagnosticsSink(ls)
    workspace = Workspace(sink, config)
    sink.workspace = workspace
    ls.fan_config = config
    ls.fan_workspace = workspace


# Create server instance
server = LanguageServer("fan-ls", f"v{__version__}")
configure(server, ServerConfig())


def _workspace(ls: LanguageServer) -> Workspace:
    return ls.fan_workspace


def _line_index(ls: LanguageServer, text: str) -> LineIndex:
    """Line index counting characters in the position encoding agreed with the client."""
    return LineIndex(text, ls.workspace.position_codec)


@server.feature(INITIALIZE)
def initialize(ls: LanguageServer, params: InitializeParams):
    """Initialize the language server."""
    client = params.client_info.name if params.client_info else "unknown client"
    logger.info(f"Initializing fan-ls {__version__} for {client}")


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams):
    """Handle document open."""
    doc = params.text_document
    _workspace(ls).open_document(doc.uri, doc.text, doc.version)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams):
    """Handle document change: full re-parse, then relink everything."""
    document = ls.workspace.get_text_document(params.text_document.uri)
    _workspace(ls).on_content_changed(document.uri, document.source, document.version)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params: DidCloseTextDocumentParams):
    """Handle document close."""
    _workspace(ls).on_document_closed(params.text_document.uri)


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: LanguageServer, params: HoverParams) -> Optional[Hover]:
    """Provide hover information."""
    workspace = _workspace(ls)
    uri = params.text_document.uri
    document = workspace.get(uri)
    if document is None:
        return None

    index = _line_index(ls, document.text)
    result = workspace.get_hover(uri, index.offset_at(params.position))
    if result is None:
        return None

    return Hover(
        contents=MarkupContent(kind=MarkupKind.Markdown, value=result.text),
        range=index.range_of(result.span) if result.span is not None else None,
    )


@server.feature(TEXT_DOCUMENT_DEFINITION)
def definition(ls: LanguageServer, params: DefinitionParams) -> Optional[Location]:
    """Provide go-to-definition."""
    workspace = _workspace(ls)
    uri = params.text_document.uri
    document = workspace.get(uri)
    if document is None:
        return None

    offset = _line_index(ls, document.text).offset_at(params.position)
    target = workspace.get_definition(uri, offset)
    if target is None:
        return None
    return _to_location(workspace, target, ls.workspace.position_codec)


@server.feature(TEXT_DOCUMENT_REFERENCES)
def references(ls: LanguageServer, params: ReferenceParams) -> Optional[List[Location]]:
    """Provide references, the definition first."""
    workspace = _workspace(ls)
    uri = params.text_document.uri
    document = workspace.get(uri)
    if document is None:
        return None

    offset = _line_index(ls, document.text).offset_at(params.position)
    found = workspace.get_references(uri, offset)
    if found is None:
        return None
    return [_to_location(workspace, loc, ls.workspace.position_codec) for loc in found]


@server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(ls: LanguageServer, params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    """Provide document symbols for outline view."""
    workspace = _workspace(ls)
    uri = params.text_document.uri
    document = workspace.get(uri)
    outline = workspace.get_outline(uri)
    if document is None or outline is None:
        return None

    index = _line_index(ls, document.text)
    return [_to_document_symbol(entry, index) for entry in outline]


# Helper functions


def _to_location(
    workspace: Workspace, target: DocumentLocation, codec: PositionCodec | None = None
) -> Location:
    """Convert a core location, resolving positions in the target document."""
    document = workspace.get(target.uri)
    text = document.text if document is not None else ""
    return Location(uri=target.uri, range=LineIndex(text, codec).range_of(target.span))


def _to_document_symbol(entry: OutlineEntry, index: LineIndex) -> DocumentSymbol:
    return DocumentSymbol(
        name=entry.label,
        kind=_SYMBOL_KIND[entry.kind],
        detail=entry.detail,
        range=index.range_of(entry.span),
        selection_range=index.range_of(entry.focus_span),
        children=[_to_document_symbol(child, index) for child in entry.children] or None,
    )


def start_server(
    config: ServerConfig | None = None,
    tcp: bool = False,
    host: str = "127.0.0.1",
    port: int = 2087,
):
    """Start the fan LSP server over stdio (default) or TCP."""
    config = config or ServerConfig()
    logging.basicConfig(
        level=config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    configure(server, config)

    if tcp:
        logger.info(f"Starting fan Language Server on {host}:{port}...")
        server.start_tcp(host, port)
    else:
        logger.info("Starting fan Language Server...")
        server.start_io()


if __name__ == "__main__":
    start_server()
