"""Tests for grammar/action cross-linking."""

from __future__ import annotations

from fan.core.config import DiagnosticLevel, ServerConfig
from fan.core.linker import (
    HAS_ACTION_METHOD,
    find_partner,
    index_methods,
    index_ruledefs,
    relink_all,
    relink_document,
)
from fan.core.loader import load_document
from fan.core.store import DiagnosticsSink, DocumentStore, LinkState, OpenDocument

GRAMMAR_URI = "file:///work/Sample.fan"
ACTIONS_URI = "file:///work/Actions.pm6"


def _open(uri: str, text: str, version: int | None = 1) -> OpenDocument:
    return OpenDocument(uri=uri, version=version, text=text, model=load_document(text))


class _Store:
    def __init__(self, *documents: OpenDocument):
        self.documents = list(documents)

    def snapshot(self) -> list[OpenDocument]:
        return list(self.documents)


class TestFindPartner:
    def test_opposite_kind(self, grammar_text: str, actions_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        actions = _open(ACTIONS_URI, actions_text)
        assert find_partner(grammar, [grammar, actions]) is actions
        assert find_partner(actions, [grammar, actions]) is grammar

    def test_first_in_order_wins(self, grammar_text: str, actions_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        first = _open("file:///a.pm6", actions_text)
        second = _open("file:///b.pm6", actions_text)
        assert find_partner(grammar, [second, grammar, first]) is second

    def test_same_kind_is_ignored(self, grammar_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        other = _open("file:///Other.fan", grammar_text)
        assert find_partner(grammar, [grammar, other]) is None

    def test_unparsed_document_has_no_partner(self, actions_text: str) -> None:
        broken = _open(GRAMMAR_URI, "unit grammar G;\na: (")
        actions = _open(ACTIONS_URI, actions_text)
        assert broken.model is None
        assert find_partner(broken, [broken, actions]) is None
        assert find_partner(actions, [broken, actions]) is None


class TestIndexes:
    def test_methods_first_wins(self) -> None:
        text = "unit class A is Actions;\nmethod a ($/) {\n}\nmethod a ($x) {\n}\n"
        model = load_document(text)
        methods = index_methods(model)
        assert list(methods) == ["a"]
        assert methods["a"] is model.methods[0]

    def test_ruledefs_first_wins(self) -> None:
        model = load_document("unit grammar G;\na: 'x'\na: 'y'")
        assert index_ruledefs(model)["a"] is model.rules[0]


class TestRelinkDocument:
    def test_grammar_publishes_one_diagnostic_per_linked_rule(
        self, sink, grammar_text: str, actions_text: str
    ) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text, version=3)
        actions = _open(ACTIONS_URI, actions_text)

        relink_document(grammar, [grammar, actions], sink)

        assert len(sink.calls) == 1
        uri, version, diagnostics = sink.calls[0]
        assert (uri, version) == (GRAMMAR_URI, 3)
        assert [d.message for d in diagnostics] == [HAS_ACTION_METHOD, HAS_ACTION_METHOD]

        first = diagnostics[0]
        assert grammar_text[first.span.start : first.span.end] == "program"
        assert first.level == DiagnosticLevel.INFORMATION
        (related,) = first.related
        assert related.uri == ACTIONS_URI
        assert related.message == "program()"
        assert actions_text[related.span.start : related.span.end] == "program"

    def test_link_state(self, sink, grammar_text: str, actions_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        actions = _open(ACTIONS_URI, actions_text)

        relink_document(grammar, [grammar, actions], sink)
        relink_document(actions, [grammar, actions], sink)

        assert grammar.link.partner_uri == ACTIONS_URI
        assert grammar.link.partner_name == "Sample::Actions"
        assert set(grammar.link.methods_by_name) == {"program", "statement"}
        assert actions.link.partner_uri == GRAMMAR_URI
        assert set(actions.link.ruledefs_by_name) == {"program", "statement", "name", "semicolon"}

    def test_action_side_publishes_nothing(self, sink, grammar_text: str, actions_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        actions = _open(ACTIONS_URI, actions_text)
        relink_document(actions, [grammar, actions], sink)
        assert sink.calls == []

    def test_grammar_without_partner_publishes_empty(self, sink, grammar_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        relink_document(grammar, [grammar], sink)

        assert sink.calls == [(GRAMMAR_URI, 1, [])]
        assert grammar.link == LinkState()
        assert grammar.published_diagnostics

    def test_severity_is_configurable(self, sink, grammar_text: str, actions_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        actions = _open(ACTIONS_URI, actions_text)
        config = ServerConfig(link_severity=DiagnosticLevel.HINT)

        relink_document(grammar, [grammar, actions], sink, config)

        assert {d.level for d in sink.last_for(GRAMMAR_URI)} == {DiagnosticLevel.HINT}

    def test_diagnostics_can_be_disabled(self, sink, grammar_text: str, actions_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        actions = _open(ACTIONS_URI, actions_text)

        relink_document(grammar, [grammar, actions], sink, ServerConfig(link_diagnostics=False))

        assert sink.last_for(GRAMMAR_URI) == []
        assert grammar.link.linked

    def test_former_grammar_clears_its_diagnostics(self, sink, actions_text: str) -> None:
        document = _open(GRAMMAR_URI, "plain text now")
        document.published_diagnostics = True

        relink_document(document, [document], sink)

        assert sink.calls == [(GRAMMAR_URI, 1, [])]
        assert not document.published_diagnostics

    def test_relink_replaces_stale_state(self, sink, grammar_text: str, actions_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        actions = _open(ACTIONS_URI, actions_text)
        relink_document(grammar, [grammar, actions], sink)

        relink_document(grammar, [grammar], sink)

        assert not grammar.link.linked
        assert grammar.link.methods_by_name == {}
        assert sink.last_for(GRAMMAR_URI) == []


class TestRelinkAll:
    def test_symmetric_pairing(self, sink, grammar_text: str, actions_text: str) -> None:
        grammar = _open(GRAMMAR_URI, grammar_text)
        actions = _open(ACTIONS_URI, actions_text)

        relink_all(_Store(grammar, actions), sink)

        assert grammar.link.partner_uri == actions.uri
        assert actions.link.partner_uri == grammar.uri

    def test_repeated_passes_do_not_accumulate(
        self, sink, grammar_text: str, actions_text: str
    ) -> None:
        store = _Store(_open(GRAMMAR_URI, grammar_text), _open(ACTIONS_URI, actions_text))

        relink_all(store, sink)
        relink_all(store, sink)

        published = sink.calls_for(GRAMMAR_URI)
        assert len(published) == 2
        assert len(published[0]) == len(published[1]) == 2

    def test_store_and_sink_protocols(self, sink) -> None:
        assert isinstance(_Store(), DocumentStore)
        assert isinstance(sink, DiagnosticsSink)
