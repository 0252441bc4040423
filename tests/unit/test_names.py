"""Tests for rule name resolution."""

from __future__ import annotations

import pytest

from fan.core.ir import GrammarDocument, Span
from fan.core.locator import locate
from fan.core.names import (
    definition_of,
    find_ruledef,
    iter_references,
    name_of,
    references_of,
)
from fan.core.parser import parse_grammar


@pytest.fixture
def model(grammar_text: str) -> GrammarDocument:
    return parse_grammar(grammar_text)


def _text(text: str, span: Span) -> str:
    return text[span.start : span.end]


class TestNameOf:
    def test_rule_name(self, model: GrammarDocument, grammar_text: str) -> None:
        node = locate(model, grammar_text.index("semicolon:"))
        assert name_of(node) == "semicolon"

    def test_reference(self, model: GrammarDocument, grammar_text: str) -> None:
        node = locate(model, grammar_text.index("statement(s?)"))
        assert name_of(node) == "statement"

    def test_separator_with_reference(self, model: GrammarDocument, grammar_text: str) -> None:
        node = locate(model, grammar_text.index("%%"))
        assert name_of(node) == "semicolon"

    def test_separator_with_literal(self) -> None:
        text = "unit grammar G;\na: b(s) % ','"
        node = locate(parse_grammar(text), text.index("%"))
        assert name_of(node) is None

    def test_literal_and_marker(self, model: GrammarDocument, grammar_text: str) -> None:
        assert name_of(locate(model, grammar_text.index("'let'"))) is None
        assert name_of(locate(model, grammar_text.index("+name"))) is None


class TestDefinitionOf:
    def test_defined(self, model: GrammarDocument, grammar_text: str) -> None:
        span = definition_of(model, "statement")
        assert span is not None
        assert span.start == grammar_text.index("statement:")
        assert _text(grammar_text, span) == "statement"

    def test_undefined(self, model: GrammarDocument) -> None:
        assert definition_of(model, "missing") is None

    def test_first_definition_wins(self) -> None:
        text = "unit grammar G;\na: 'x'\na: 'y'"
        model = parse_grammar(text)
        assert definition_of(model, "a").start == text.index("a:")
        assert find_ruledef(model, "a") is model.rules[0]

    def test_idempotent(self, model: GrammarDocument) -> None:
        assert definition_of(model, "name") == definition_of(model, "name")

    def test_round_trip_through_locate(self, model: GrammarDocument) -> None:
        for ruledef in model.rules:
            name = ruledef.name.text
            span = definition_of(model, name)
            assert definition_of(model, name_of(locate(model, span.start))) == span


class TestReferencesOf:
    def test_definition_then_references(self, model: GrammarDocument, grammar_text: str) -> None:
        spans = references_of(model, "statement")
        assert len(spans) == 2
        assert spans[0] == definition_of(model, "statement")
        assert _text(grammar_text, spans[1]) == "statement(s?) %% .semicolon"

    def test_references_inside_separators(self, model: GrammarDocument, grammar_text: str) -> None:
        spans = references_of(model, "semicolon")
        assert [_text(grammar_text, s) for s in spans] == ["semicolon", ".semicolon"]

    def test_reference_after_marker(self, model: GrammarDocument, grammar_text: str) -> None:
        spans = references_of(model, "name")
        assert len(spans) == 2
        assert spans[1].start == grammar_text.index("+name") + 1

    def test_undefined_name_has_no_references(self) -> None:
        model = parse_grammar("unit grammar G;\na: b c b")
        assert references_of(model, "b") == []
        assert references_of(model, "missing") == []

    def test_unreferenced_rule(self, model: GrammarDocument) -> None:
        assert references_of(model, "program") == [definition_of(model, "program")]

    def test_references_in_groups(self) -> None:
        text = "unit grammar G;\na: (b (c b))(s)\nb: 'x'"
        spans = references_of(parse_grammar(text), "b")
        assert len(spans) == 3

    def test_results_contain_the_definition(self, model: GrammarDocument) -> None:
        for ruledef in model.rules:
            spans = references_of(model, ruledef.name.text)
            assert ruledef.name.span in spans


class TestIterReferences:
    def test_document_order(self, model: GrammarDocument) -> None:
        targets = [ref.target for ref in iter_references(model)]
        assert targets == ["statement", "semicolon", "name"]
