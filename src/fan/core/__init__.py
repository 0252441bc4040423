"""
fan core: syntax model, parsing, offset/name resolution, outline and
cross-document linking. Independent of any editor protocol.
"""

from .errors import ConfigError, ErrorContext, FanError, ParseError
from .loader import detect_kind, load_document, parse_document
from .workspace import DocumentLocation, Workspace

__all__ = [
    "ConfigError",
    "DocumentLocation",
    "ErrorContext",
    "FanError",
    "ParseError",
    "Workspace",
    "detect_kind",
    "load_document",
    "parse_document",
]
