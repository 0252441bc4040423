"""
Name resolution within a single grammar document.

Maps a located node to the rule name it denotes, then finds that rule's
definition and every reference to it.
"""

from collections.abc import Iterator

from .ir import (
    GrammarDocument,
    LeafNode,
    QuantifierSeparator,
    ReferenceRule,
    Rule,
    RuleDef,
    RuleName,
    SequenceRule,
    Span,
    separator_of,
)


def name_of(node: LeafNode) -> str | None:
    """
    Return the rule name a node denotes.

    A rule name yields itself, a reference its target, and a separator the
    target of its inner rule when that is a reference. Markers, literals and
    other separators denote no name.
    """
    if isinstance(node, RuleName):
        return node.text
    if isinstance(node, QuantifierSeparator):
        inner = node.rule
        return inner.target if isinstance(inner, ReferenceRule) else None
    if isinstance(node, ReferenceRule):
        return node.target
    return None


def find_ruledef(model: GrammarDocument, name: str) -> RuleDef | None:
    """First rule definition with the given name, in declaration order."""
    for ruledef in model.rules:
        if ruledef.name.text == name:
            return ruledef
    return None


def definition_of(model: GrammarDocument, name: str) -> Span | None:
    """Name span of the first definition of name, or None if undefined."""
    ruledef = find_ruledef(model, name)
    return ruledef.name.span if ruledef else None


def iter_rules(rules: list[Rule]) -> Iterator[Rule]:
    """
    Pre-order walk over rules, descending into sequence parts and into
    quantifier separators.
    """
    for rule in rules:
        yield rule
        if isinstance(rule, SequenceRule):
            yield from iter_rules(rule.parts)
        separator = separator_of(rule)
        if separator is not None:
            yield from iter_rules([separator.rule])


def iter_references(model: GrammarDocument) -> Iterator[ReferenceRule]:
    """Every reference element in the document, in document order."""
    for ruledef in model.rules:
        for rule in iter_rules(list(ruledef.alternatives)):
            if isinstance(rule, ReferenceRule):
                yield rule


def references_of(model: GrammarDocument, name: str) -> list[Span]:
    """
    All occurrences of name: the definition's name span first, then each
    reference in document order. Empty if name has no definition.
    """
    definition = definition_of(model, name)
    if definition is None:
        return []

    spans = [definition]
    spans.extend(ref.span for ref in iter_references(model) if ref.target == name)
    return spans
