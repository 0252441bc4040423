"""
Cross-document linking between a grammar document and its action document.

Every re-link pass reads one snapshot of the open documents and, for each
of them, finds the first open document of the opposite kind, rebuilds the
name index from scratch and (grammar side) publishes one diagnostic per
rule that has an action method.
"""

import logging

from .config import ServerConfig
from .ir import ActionDocument, ActionMethod, DocumentKind, GrammarDocument, RuleDef
from .store import (
    DiagnosticsSink,
    DocumentStore,
    LinkDiagnostic,
    LinkState,
    OpenDocument,
    RelatedLocation,
)

logger = logging.getLogger(__name__)

HAS_ACTION_METHOD = "Has Action Method"

_OPPOSITE = {
    DocumentKind.GRAMMAR: DocumentKind.ACTION,
    DocumentKind.ACTION: DocumentKind.GRAMMAR,
}


def find_partner(document: OpenDocument, snapshot: list[OpenDocument]) -> OpenDocument | None:
    """First other open document of the opposite kind, in snapshot order."""
    if document.kind is None:
        return None

    wanted = _OPPOSITE[document.kind]
    for candidate in snapshot:
        if candidate.uri != document.uri and candidate.kind == wanted:
            return candidate
    return None


def index_methods(model: ActionDocument) -> dict[str, ActionMethod]:
    """Method name -> first method declared with that name."""
    methods: dict[str, ActionMethod] = {}
    for method in model.methods:
        methods.setdefault(method.name, method)
    return methods


def index_ruledefs(model: GrammarDocument) -> dict[str, RuleDef]:
    """Rule name -> first rule definition with that name."""
    ruledefs: dict[str, RuleDef] = {}
    for ruledef in model.rules:
        ruledefs.setdefault(ruledef.name.text, ruledef)
    return ruledefs


def link_diagnostics(
    model: GrammarDocument,
    partner: OpenDocument,
    methods: dict[str, ActionMethod],
    config: ServerConfig,
) -> list[LinkDiagnostic]:
    """One diagnostic per rule definition that has a matching action method."""
    diagnostics = []
    for ruledef in model.rules:
        method = methods.get(ruledef.name.text)
        if method is None:
            continue
        diagnostics.append(
            LinkDiagnostic(
                span=ruledef.name.span,
                message=HAS_ACTION_METHOD,
                level=config.link_severity,
                related=(
                    RelatedLocation(
                        uri=partner.uri,
                        span=method.span,
                        message=f"{method.name}()",
                    ),
                ),
            )
        )
    return diagnostics


def relink_document(
    document: OpenDocument,
    snapshot: list[OpenDocument],
    sink: DiagnosticsSink,
    config: ServerConfig | None = None,
) -> None:
    """
    Recompute the cross-link state of one document.

    Args:
        document: Document to relink (its ``link`` is replaced)
        snapshot: All open documents for this pass
        sink: Receiver for the grammar side's diagnostics
        config: Server settings (diagnostic severity, enablement)
    """
    config = config or ServerConfig()
    previous = document.link.partner_uri
    partner = find_partner(document, snapshot)

    if partner is None:
        document.link = LinkState()
    elif isinstance(partner.model, ActionDocument):
        document.link = LinkState(
            partner_uri=partner.uri,
            partner_name=partner.model.name,
            methods_by_name=index_methods(partner.model),
        )
    elif isinstance(partner.model, GrammarDocument):
        document.link = LinkState(
            partner_uri=partner.uri,
            partner_name=partner.model.name,
            ruledefs_by_name=index_ruledefs(partner.model),
        )

    if previous != document.link.partner_uri:
        if document.link.linked:
            logger.debug(f"Linked {document.uri} -> {document.link.partner_uri}")
        else:
            logger.debug(f"Unlinked {document.uri} (was {previous})")

    if isinstance(document.model, GrammarDocument):
        diagnostics = []
        if partner is not None and config.link_diagnostics:
            diagnostics = link_diagnostics(
                document.model, partner, document.link.methods_by_name, config
            )
        sink.publish(document.uri, document.version, diagnostics)
        document.published_diagnostics = True
    elif document.published_diagnostics:
        # No longer a grammar: drop whatever was published while it was one
        sink.publish(document.uri, document.version, [])
        document.published_diagnostics = False


def relink_all(
    store: DocumentStore,
    sink: DiagnosticsSink,
    config: ServerConfig | None = None,
) -> None:
    """Relink every open document against a single snapshot of the store."""
    snapshot = store.snapshot()
    for document in snapshot:
        relink_document(document, snapshot, sink, config)
