"""Shared fixtures for fan tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from fan.core.store import LinkDiagnostic

GRAMMAR_TEXT = r"""unit grammar Sample;

# A tiny statement language
program: statement(s?) %% .semicolon
statement: 'let' +name -'=' /\d+/
name: /[a-z]+/
semicolon: ';'
"""

ACTIONS_TEXT = """unit class Sample::Actions is Actions;

method program ($/) {
    make $<statement>.map(*.made);
}

method statement ($/) {
    make $<name>.made => $/[1];
}
"""


@dataclass
class RecordingSink:
    """Diagnostics sink that remembers every publish call."""

    calls: list[tuple[str, int | None, list[LinkDiagnostic]]] = field(default_factory=list)

    def publish(self, uri: str, version: int | None, diagnostics: list[LinkDiagnostic]) -> None:
        self.calls.append((uri, version, list(diagnostics)))

    def last_for(self, uri: str) -> list[LinkDiagnostic] | None:
        for called_uri, _, diagnostics in reversed(self.calls):
            if called_uri == uri:
                return diagnostics
        return None

    def calls_for(self, uri: str) -> list[list[LinkDiagnostic]]:
        return [diagnostics for called_uri, _, diagnostics in self.calls if called_uri == uri]


@pytest.fixture
def grammar_text() -> str:
    return GRAMMAR_TEXT


@pytest.fixture
def actions_text() -> str:
    return ACTIONS_TEXT


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
