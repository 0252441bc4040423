"""
Method extraction for action documents.

Action documents are not parsed; a line scan finds the class header and
every ``method NAME (...) {`` declaration.
"""

import re

from .ir import ActionDocument, ActionMethod, Span

ACTION_HEADER = re.compile(r"^unit class ([a-zA-Z:0-9_-]+) is Actions;", re.MULTILINE)
METHOD_DECLARATION = re.compile(r"^method ([a-zA-Z0-9_-]+)[ \t]*\(.*?\)[ \t]*\{[ \t]*$", re.MULTILINE)


def extract_methods(text: str) -> list[ActionMethod]:
    """
    Find method declarations in source order.

    Each method's span covers its name only.
    """
    return [
        ActionMethod(name=m.group(1), span=Span(start=m.start(1), end=m.end(1)))
        for m in METHOD_DECLARATION.finditer(text)
    ]


def extract_action_document(text: str) -> ActionDocument | None:
    """
    Build an ActionDocument from source text.

    Returns:
        ActionDocument, or None if the text has no ``unit class NAME is Actions;`` line
    """
    header = ACTION_HEADER.search(text)
    if header is None:
        return None

    return ActionDocument(
        name=header.group(1),
        span=Span(start=0, end=len(text)),
        methods=extract_methods(text),
    )
