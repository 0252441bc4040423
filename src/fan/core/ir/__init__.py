"""
fan syntax model types.

All types are re-exported from this package.
"""

from .documents import (
    ActionDocument,
    ActionMethod,
    DocumentKind,
    DocumentModel,
    GrammarDocument,
    LeafNode,
    RuleDef,
    RuleName,
)
from .rules import (
    LeafRule,
    LiteralForm,
    LiteralRule,
    MarkerKind,
    MarkerRule,
    Quantifier,
    QuantifierSeparator,
    ReferenceRule,
    Rule,
    SequenceRule,
    separator_of,
)
from .span import Span

__all__ = [
    # Spans
    "Span",
    # Rules
    "LeafRule",
    "LiteralForm",
    "LiteralRule",
    "MarkerKind",
    "MarkerRule",
    "Quantifier",
    "QuantifierSeparator",
    "ReferenceRule",
    "Rule",
    "SequenceRule",
    "separator_of",
    # Documents
    "ActionDocument",
    "ActionMethod",
    "DocumentKind",
    "DocumentModel",
    "GrammarDocument",
    "LeafNode",
    "RuleDef",
    "RuleName",
]
