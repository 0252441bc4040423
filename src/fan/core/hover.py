"""
Hover text for grammar and action documents.
"""

from pydantic import BaseModel, ConfigDict

from .ir import (
    ActionMethod,
    LeafNode,
    LiteralForm,
    LiteralRule,
    MarkerKind,
    MarkerRule,
    QuantifierSeparator,
    ReferenceRule,
    Rule,
    RuleName,
    Span,
)
from .store import LinkState


class HoverResult(BaseModel):
    """Markdown hover text with an optional span to highlight."""

    text: str
    span: Span | None = None

    model_config = ConfigDict(frozen=True)


_MARKER_TEXT = {
    MarkerKind.SIGNIFICANT_WS: "`+` significant whitespace",
    MarkerKind.INSIGNIFICANT_WS: "`-` insignificant whitespace",
}


def describe_rule(rule: Rule) -> str:
    """Short markdown description of a rule element."""
    if isinstance(rule, ReferenceRule):
        text = f"ref to `{rule.target}`"
    elif isinstance(rule, MarkerRule):
        text = _MARKER_TEXT[rule.marker]
    elif isinstance(rule, LiteralRule):
        if rule.form == LiteralForm.REGEX:
            text = f"regex literal `/{rule.value}/`"
        else:
            text = f"string literal `{rule.value!r}`"
    else:
        text = f"group of {len(rule.parts)} elements"

    if rule.quantifier is not None:
        text += f", repeated `({rule.quantifier.range})`"
    return text


def hover_for_node(node: LeafNode, link: LinkState | None = None) -> HoverResult:
    """
    Hover for a node found in a grammar document.

    Rule names highlight the name; separators describe and highlight their
    inner rule; only regex literals highlight themselves.
    """
    if isinstance(node, RuleName):
        text = f"rule `{node.text}`"
        if link is not None and node.text in link.methods_by_name:
            text += f"\n\nhas action method `{node.text}()` in `{link.partner_name}`"
        return HoverResult(text=text, span=node.span)

    if isinstance(node, QuantifierSeparator):
        return HoverResult(text=describe_rule(node.rule), span=node.rule.span)

    span = node.span if isinstance(node, LiteralRule) and node.form == LiteralForm.REGEX else None
    return HoverResult(text=describe_rule(node), span=span)


def hover_for_method(method: ActionMethod, link: LinkState | None = None) -> HoverResult:
    """Hover for an action method name."""
    text = f"method `{method.name}`"
    if link is not None and method.name in link.ruledefs_by_name:
        text += f"\n\naction for rule `{method.name}` in `{link.partner_name}`"
    return HoverResult(text=text, span=method.span)
