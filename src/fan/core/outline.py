"""
Outline (document symbol) construction.

Produces editor-neutral outline entries; the protocol layer maps them to
its own symbol types.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from .ir import ActionDocument, DocumentModel, GrammarDocument, Span

if TYPE_CHECKING:
    from .store import LinkState


class OutlineKind(str, Enum):
    """Role of an outline entry."""

    CONTAINER = "container"  # grammar or action class
    DEFINITION = "definition"  # rule or method


class OutlineEntry(BaseModel):
    """
    One node of the outline tree.

    Attributes:
        label: Displayed name
        kind: Container or definition
        detail: Short description shown next to the label
        span: Full extent of the construct
        focus_span: Part to highlight/select (the identifier)
        annotated: True if the construct has a counterpart in the linked document
        children: Nested entries
    """

    label: str
    kind: OutlineKind
    detail: str | None = None
    span: Span
    focus_span: Span
    annotated: bool = False
    children: list[OutlineEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


def build_outline(model: DocumentModel, link: LinkState | None = None) -> list[OutlineEntry]:
    """
    Build the outline for a document.

    Args:
        model: Grammar or action document
        link: Current cross-link state of the document, if any

    Returns:
        A single top-level container entry with one child per rule or method
    """
    if isinstance(model, GrammarDocument):
        return [_grammar_outline(model, link)]
    return [_action_outline(model, link)]


def _grammar_outline(model: GrammarDocument, link: LinkState | None) -> OutlineEntry:
    methods = link.methods_by_name if link else {}
    partner = link.partner_name if link else None

    children = []
    for ruledef in model.rules:
        has_method = ruledef.name.text in methods
        children.append(
            OutlineEntry(
                label=ruledef.name.text,
                kind=OutlineKind.DEFINITION,
                detail=":action" if has_method else None,
                span=ruledef.span,
                focus_span=ruledef.name.span,
                annotated=has_method,
            )
        )

    return OutlineEntry(
        label=model.name,
        kind=OutlineKind.CONTAINER,
        detail="Grammar" + (f" ~~ {partner}" if partner else ""),
        span=model.span,
        focus_span=model.span,
        children=children,
    )


def _action_outline(model: ActionDocument, link: LinkState | None) -> OutlineEntry:
    ruledefs = link.ruledefs_by_name if link else {}
    partner = link.partner_name if link else None

    children = []
    for method in model.methods:
        has_rule = method.name in ruledefs
        children.append(
            OutlineEntry(
                label=method.name,
                kind=OutlineKind.DEFINITION,
                detail=":rule" if has_rule else None,
                span=method.span,
                focus_span=method.span,
                annotated=has_rule,
            )
        )

    return OutlineEntry(
        label=model.name,
        kind=OutlineKind.CONTAINER,
        detail="Action" + (f" ~~ {partner}" if partner else ""),
        span=model.span,
        focus_span=model.span,
        children=children,
    )
