"""
Document-level model types.

A parsed grammar document is a ``GrammarDocument``; a scanned action
document is an ``ActionDocument``. Both are immutable snapshots: a content
change produces a new instance rather than mutating the old one.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .rules import LeafRule, QuantifierSeparator, SequenceRule
from .span import Span


class DocumentKind(str, Enum):
    """Kind of document, decided by its leading declaration line."""

    GRAMMAR = "grammar"
    ACTION = "action"


class RuleName(BaseModel):
    """The identifier of a rule definition."""

    text: str
    span: Span

    model_config = ConfigDict(frozen=True)


class RuleDef(BaseModel):
    """
    One named rule declaration.

    Attributes:
        name: Rule identifier and its span
        span: From the name through the last alternative (and ``;``)
        alternatives: One sequence per ``|``-separated alternative
    """

    name: RuleName
    span: Span
    alternatives: list[SequenceRule] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class GrammarDocument(BaseModel):
    """A parsed ``unit grammar NAME;`` document."""

    kind: Literal[DocumentKind.GRAMMAR] = DocumentKind.GRAMMAR
    name: str
    span: Span
    rules: list[RuleDef] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ActionMethod(BaseModel):
    """A method declared in an action document; span covers the name."""

    name: str
    span: Span

    model_config = ConfigDict(frozen=True)


class ActionDocument(BaseModel):
    """A scanned ``unit class NAME is Actions;`` document."""

    kind: Literal[DocumentKind.ACTION] = DocumentKind.ACTION
    name: str
    span: Span
    methods: list[ActionMethod] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


DocumentModel = Union[GrammarDocument, ActionDocument]

# Smallest addressable nodes returned by offset lookup
LeafNode = Union[RuleName, LeafRule, QuantifierSeparator]
