"""Tests for hover text."""

from __future__ import annotations

import pytest

from fan.core.actions import extract_action_document
from fan.core.hover import describe_rule, hover_for_method, hover_for_node
from fan.core.ir import ActionMethod, GrammarDocument, Span
from fan.core.locator import locate
from fan.core.parser import parse_grammar
from fan.core.store import LinkState


@pytest.fixture
def model(grammar_text: str) -> GrammarDocument:
    return parse_grammar(grammar_text)


class TestDescribeRule:
    def test_quantified_reference(self, model: GrammarDocument) -> None:
        rule = model.rules[0].alternatives[0].parts[0]
        assert describe_rule(rule) == "ref to `statement`, repeated `(s?)`"

    def test_markers(self, model: GrammarDocument) -> None:
        parts = model.rules[1].alternatives[0].parts
        assert describe_rule(parts[1]) == "`+` significant whitespace"
        assert describe_rule(parts[3]) == "`-` insignificant whitespace"

    def test_group(self) -> None:
        group = parse_grammar("unit grammar G;\na: ('x' b)").rules[0].alternatives[0].parts[0]
        assert describe_rule(group) == "group of 2 elements"


class TestHoverForNode:
    def test_rule_name_unlinked(self, model: GrammarDocument, grammar_text: str) -> None:
        node = locate(model, grammar_text.index("program:"))
        result = hover_for_node(node)
        assert result.text == "rule `program`"
        assert result.span == node.span

    def test_rule_name_linked(self, model: GrammarDocument, grammar_text: str) -> None:
        link = LinkState(
            partner_uri="file:///Actions.pm6",
            partner_name="Sample::Actions",
            methods_by_name={"program": ActionMethod(name="program", span=Span(start=0, end=7))},
        )
        node = locate(model, grammar_text.index("program:"))
        result = hover_for_node(node, link)
        assert result.text == (
            "rule `program`\n\nhas action method `program()` in `Sample::Actions`"
        )

    def test_separator_highlights_inner_rule(self, model: GrammarDocument, grammar_text: str) -> None:
        result = hover_for_node(locate(model, grammar_text.index("%%")))
        assert result.text == "ref to `semicolon`"
        assert grammar_text[result.span.start : result.span.end] == ".semicolon"

    def test_regex_literal_has_range(self, model: GrammarDocument, grammar_text: str) -> None:
        result = hover_for_node(locate(model, grammar_text.index(r"/\d+/")))
        assert result.text == r"regex literal `/\d+/`"
        assert grammar_text[result.span.start : result.span.end] == r"/\d+/"

    def test_string_literal_has_no_range(self, model: GrammarDocument, grammar_text: str) -> None:
        result = hover_for_node(locate(model, grammar_text.index("'let'")))
        assert result.text == "string literal `'let'`"
        assert result.span is None

    def test_reference_has_no_range(self, model: GrammarDocument, grammar_text: str) -> None:
        result = hover_for_node(locate(model, grammar_text.index("+name") + 1))
        assert result.text == "ref to `name`"
        assert result.span is None


class TestHoverForMethod:
    def test_unlinked(self, actions_text: str) -> None:
        method = extract_action_document(actions_text).methods[0]
        result = hover_for_method(method)
        assert result.text == "method `program`"
        assert result.span == method.span

    def test_linked(self, actions_text: str, grammar_text: str) -> None:
        grammar = parse_grammar(grammar_text)
        link = LinkState(
            partner_uri="file:///Sample.fan",
            partner_name="Sample",
            ruledefs_by_name={"statement": grammar.rules[1]},
        )
        method = extract_action_document(actions_text).methods[1]
        assert hover_for_method(method, link).text == (
            "method `statement`\n\naction for rule `statement` in `Sample`"
        )
