"""
Rule element types for grammar documents.

A rule body is a tree of elements. Each element is one of four variants,
discriminated by ``kind``:

- ``SequenceRule``: ordered parts (an alternative or a parenthesised group)
- ``MarkerRule``: ``+`` / ``-`` whitespace markers
- ``ReferenceRule``: use of another rule by name
- ``LiteralRule``: a quoted string or a ``/regex/``

Any element may carry a ``Quantifier``, which may in turn carry a
``QuantifierSeparator`` wrapping one more element.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .span import Span


class MarkerKind(str, Enum):
    """Whitespace handling markers."""

    SIGNIFICANT_WS = "significant-ws"  # +
    INSIGNIFICANT_WS = "insignificant-ws"  # -


class LiteralForm(str, Enum):
    """How a literal matches text."""

    STRING = "string"
    REGEX = "regex"


class QuantifierSeparator(BaseModel):
    """
    Separator clause of a repetition, e.g. ``%% .semicolon``.

    Attributes:
        span: From the marker token to the end of the inner rule
        marker: ``%`` or ``%%``
        rule: The separator element
    """

    span: Span
    marker: str
    rule: Rule

    model_config = ConfigDict(frozen=True)


class Quantifier(BaseModel):
    """
    Repetition modifier attached to an element, e.g. ``(s?)``.

    Attributes:
        span: From the opening parenthesis through the separator, if any
        range: Text between the parentheses (``?``, ``s``, ``s?``, ``1..3``)
        separator: Optional separator clause
    """

    span: Span
    range: str
    separator: QuantifierSeparator | None = None

    model_config = ConfigDict(frozen=True)


class SequenceRule(BaseModel):
    """Concatenation of parts."""

    kind: Literal["sequence"] = "sequence"
    span: Span
    quantifier: Quantifier | None = None
    parts: list[Rule] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class MarkerRule(BaseModel):
    """Whitespace marker leaf."""

    kind: Literal["marker"] = "marker"
    span: Span
    quantifier: Quantifier | None = None
    marker: MarkerKind

    model_config = ConfigDict(frozen=True)


class ReferenceRule(BaseModel):
    """Reference to another rule by name, e.g. ``.semicolon``."""

    kind: Literal["reference"] = "reference"
    span: Span
    quantifier: Quantifier | None = None
    target: str
    modifiers: str = ""

    model_config = ConfigDict(frozen=True)


class LiteralRule(BaseModel):
    """String or regex literal leaf."""

    kind: Literal["literal"] = "literal"
    span: Span
    quantifier: Quantifier | None = None
    form: LiteralForm
    value: str

    model_config = ConfigDict(frozen=True)


Rule = Annotated[
    Union[SequenceRule, MarkerRule, ReferenceRule, LiteralRule],
    Field(discriminator="kind"),
]

LeafRule = Union[MarkerRule, ReferenceRule, LiteralRule]


def separator_of(rule: SequenceRule | LeafRule) -> QuantifierSeparator | None:
    """Return the separator clause attached to rule, if any."""
    if rule.quantifier is None:
        return None
    return rule.quantifier.separator


for _model in (QuantifierSeparator, Quantifier, SequenceRule, MarkerRule, ReferenceRule, LiteralRule):
    _model.model_rebuild()
