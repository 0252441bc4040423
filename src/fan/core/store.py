"""
Open-document records and the interfaces the linker works against.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .config import DiagnosticLevel
from .ir import ActionMethod, DocumentKind, DocumentModel, RuleDef, Span


@dataclass
class LinkState:
    """
    Cross-link state of one open document.

    The partner is held as a URI handle into the open-document table and
    re-resolved on every re-link pass, never as a live model reference.

    Attributes:
        partner_uri: URI of the linked opposite-kind document
        partner_name: Grammar or action class name of the partner
        methods_by_name: Grammar side: rule name -> matching action method
        ruledefs_by_name: Action side: method name -> matching rule definition
    """

    partner_uri: str | None = None
    partner_name: str | None = None
    methods_by_name: dict[str, ActionMethod] = field(default_factory=dict)
    ruledefs_by_name: dict[str, RuleDef] = field(default_factory=dict)

    @property
    def linked(self) -> bool:
        return self.partner_uri is not None


@dataclass
class OpenDocument:
    """
    One open document with its last computed model.

    Attributes:
        uri: Document identity
        version: Editor version number of text
        text: Full document text
        model: Parsed model, or None if the text could not be parsed or has
            no recognised declaration line
        link: Cross-link state, rewritten by the linker
        published_diagnostics: True once diagnostics were published for uri
    """

    uri: str
    version: int | None
    text: str
    model: DocumentModel | None = None
    link: LinkState = field(default_factory=LinkState)
    published_diagnostics: bool = False

    @property
    def kind(self) -> DocumentKind | None:
        return self.model.kind if self.model is not None else None


@dataclass(frozen=True)
class RelatedLocation:
    """A secondary location attached to a diagnostic."""

    uri: str
    span: Span
    message: str


@dataclass(frozen=True)
class LinkDiagnostic:
    """Editor-neutral diagnostic produced by the linker."""

    span: Span
    message: str
    level: DiagnosticLevel = DiagnosticLevel.INFORMATION
    related: tuple[RelatedLocation, ...] = ()


@runtime_checkable
class DocumentStore(Protocol):
    """Source of the open documents, read once per re-link pass."""

    def snapshot(self) -> list[OpenDocument]: ...


@runtime_checkable
class DiagnosticsSink(Protocol):
    """Receiver of diagnostics; each publish replaces the previous set for uri."""

    def publish(self, uri: str, version: int | None, diagnostics: list[LinkDiagnostic]) -> None: ...
