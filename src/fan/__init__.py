"""
fan-ls - language intelligence for fan grammar and action documents.

Answers editor queries (hover, go-to-definition, references, outline) over
``unit grammar NAME;`` documents and keeps each grammar linked with its
``unit class NAME is Actions;`` companion.
"""

from ._version import get_version

__version__ = get_version()

__all__ = ["__version__"]
