"""
Document loading: kind detection plus parsing/scanning.

``load_document`` is the boundary where parse failures stop: it logs them
and reports "no model" instead of raising.
"""

import logging
import re

from .actions import ACTION_HEADER, extract_action_document
from .errors import ParseError
from .ir import DocumentKind, DocumentModel
from .parser import DEFAULT_MAX_DEPTH, parse_grammar

logger = logging.getLogger(__name__)

GRAMMAR_HEADER = re.compile(r"^unit grammar ([a-zA-Z:0-9_-]+);", re.MULTILINE)


def detect_kind(text: str) -> DocumentKind | None:
    """
    Decide the document kind from its declaration line.

    A grammar header is checked first, so a document containing both
    declarations is a grammar.
    """
    if GRAMMAR_HEADER.search(text):
        return DocumentKind.GRAMMAR
    if ACTION_HEADER.search(text):
        return DocumentKind.ACTION
    return None


def parse_document(
    text: str,
    source: str = "<document>",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> DocumentModel | None:
    """
    Build the model for a document.

    Returns:
        GrammarDocument or ActionDocument, or None if the text declares neither

    Raises:
        ParseError: If a grammar document is malformed
    """
    kind = detect_kind(text)

    if kind == DocumentKind.GRAMMAR:
        return parse_grammar(text, source, max_depth=max_depth)
    if kind == DocumentKind.ACTION:
        return extract_action_document(text)
    return None


def load_document(
    text: str,
    source: str = "<document>",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> DocumentModel | None:
    """
    Like parse_document, but a parse failure is logged and yields None.
    """
    try:
        model = parse_document(text, source, max_depth=max_depth)
    except ParseError as e:
        logger.warning(f"Parse failed for {source}: {e}")
        return None

    if model is None:
        logger.debug(f"{source} is neither a grammar nor an action document")
    else:
        logger.debug(f"Loaded {model.kind.value} document {model.name!r} from {source}")
    return model
