"""
Document lifecycle and query entry point.

The Workspace owns the open-document table: one model per open document,
rebuilt from scratch on every content change and dropped on close. Each
change is followed by a re-link pass over all open documents. Queries are
synchronous, never raise, and answer None for unknown or unparsable
documents.
"""

import logging

from pydantic import BaseModel, ConfigDict

from .config import ServerConfig
from .hover import HoverResult, hover_for_method, hover_for_node
from .ir import ActionDocument, ActionMethod, GrammarDocument, Span
from .linker import relink_all
from .loader import load_document
from .locator import locate
from .names import definition_of, name_of, references_of
from .outline import OutlineEntry, build_outline
from .store import DiagnosticsSink, OpenDocument

logger = logging.getLogger(__name__)


class DocumentLocation(BaseModel):
    """A span within a specific document."""

    uri: str
    span: Span

    model_config = ConfigDict(frozen=True)


class Workspace:
    """
    Open documents plus the editor-facing queries over them.

    Implements the DocumentStore protocol for the linker.
    """

    def __init__(self, sink: DiagnosticsSink, config: ServerConfig | None = None):
        self.sink = sink
        self.config = config or ServerConfig()
        self._documents: dict[str, OpenDocument] = {}

    # Document lifecycle

    def snapshot(self) -> list[OpenDocument]:
        """Open documents in the order they were opened."""
        return list(self._documents.values())

    def get(self, uri: str) -> OpenDocument | None:
        return self._documents.get(uri)

    def open_document(self, uri: str, text: str, version: int | None = None) -> OpenDocument:
        """Register a newly opened document, parse it and relink."""
        logger.info(f"Opened: {uri}")
        return self._update(uri, text, version)

    def on_content_changed(self, uri: str, text: str, version: int | None = None) -> OpenDocument:
        """Replace the document's model with a fresh parse of text and relink."""
        return self._update(uri, text, version)

    def on_document_closed(self, uri: str) -> None:
        """Drop the document's model and relink whatever it was paired with."""
        document = self._documents.pop(uri, None)
        if document is None:
            return

        logger.info(f"Closed: {uri}")
        if document.published_diagnostics:
            self.sink.publish(uri, document.version, [])
        relink_all(self, self.sink, self.config)

    def _update(self, uri: str, text: str, version: int | None) -> OpenDocument:
        previous = self._documents.get(uri)
        model = load_document(text, uri, max_depth=self.config.max_nesting_depth)

        # Assigning an existing key keeps its position in open order
        document = OpenDocument(
            uri=uri,
            version=version,
            text=text,
            model=model,
            published_diagnostics=previous.published_diagnostics if previous else False,
        )
        self._documents[uri] = document

        relink_all(self, self.sink, self.config)
        return document

    # Queries

    def get_outline(self, uri: str) -> list[OutlineEntry] | None:
        document = self.get(uri)
        if document is None or document.model is None:
            return None
        return build_outline(document.model, document.link)

    def get_hover(self, uri: str, offset: int) -> HoverResult | None:
        document = self.get(uri)
        if document is None:
            return None

        model = document.model
        if isinstance(model, GrammarDocument):
            node = locate(model, offset)
            return hover_for_node(node, document.link) if node is not None else None

        if isinstance(model, ActionDocument):
            method = _method_at(model, offset)
            return hover_for_method(method, document.link) if method is not None else None

        return None

    def get_definition(self, uri: str, offset: int) -> DocumentLocation | None:
        document = self.get(uri)
        if document is None:
            return None

        model = document.model
        if isinstance(model, GrammarDocument):
            node = locate(model, offset)
            name = name_of(node) if node is not None else None
            if name is None:
                return None
            span = definition_of(model, name)
            return DocumentLocation(uri=uri, span=span) if span is not None else None

        if isinstance(model, ActionDocument):
            # Jump from an action method to the rule it implements
            method = _method_at(model, offset)
            link = document.link
            if method is None or link.partner_uri is None:
                return None
            ruledef = link.ruledefs_by_name.get(method.name)
            if ruledef is None:
                return None
            return DocumentLocation(uri=link.partner_uri, span=ruledef.name.span)

        return None

    def get_references(self, uri: str, offset: int) -> list[DocumentLocation] | None:
        document = self.get(uri)
        if document is None or not isinstance(document.model, GrammarDocument):
            return None

        node = locate(document.model, offset)
        name = name_of(node) if node is not None else None
        if name is None:
            return None

        return [DocumentLocation(uri=uri, span=span) for span in references_of(document.model, name)]


def _method_at(model: ActionDocument, offset: int) -> ActionMethod | None:
    for method in model.methods:
        if method.span.contains(offset):
            return method
    return None
