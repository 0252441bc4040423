"""
Offset resolution: find the innermost syntax node at a character offset.

Tie-break order, innermost first: a rule's name span, then a quantifier
separator, then a leaf element. A separator is preferred over the element
it decorates (and over the parts of a quantified group) because the cursor
is on the separator itself.
"""

from .ir import GrammarDocument, LeafNode, Rule, SequenceRule, separator_of


class _LeafSearch:
    """Depth-first walk over one rule definition's alternatives."""

    def __init__(self, offset: int):
        self.offset = offset
        self.found: LeafNode | None = None

    def visit_all(self, rules: list[Rule]) -> bool:
        """Visit rules in order; True means the search is over."""
        for rule in rules:
            if self.visit(rule):
                return True
        return False

    def visit(self, rule: Rule) -> bool:
        # Everything after this point starts beyond the offset
        if self.offset < rule.span.start:
            return True

        separator = separator_of(rule)

        if isinstance(rule, SequenceRule):
            done = self.visit_all(rule.parts)
            if not done and separator is not None and separator.span.contains(self.offset):
                self.found = separator
                done = True
            return done

        if rule.span.contains(self.offset):
            if separator is not None and separator.span.contains(self.offset):
                self.found = separator
            else:
                self.found = rule
            return True

        return False


def locate(model: GrammarDocument, offset: int) -> LeafNode | None:
    """
    Find the leaf node containing offset.

    Args:
        model: Parsed grammar document
        offset: Character offset into the document text

    Returns:
        RuleName, leaf rule or QuantifierSeparator; None if the offset falls
        outside every rule definition or between elements
    """
    for ruledef in model.rules:
        if offset < ruledef.span.start:
            break

        if ruledef.span.contains(offset):
            if ruledef.name.span.contains(offset):
                return ruledef.name

            search = _LeafSearch(offset)
            search.visit_all(ruledef.alternatives)
            return search.found

    return None
