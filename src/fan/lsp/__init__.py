"""
fan Language Server Protocol implementation.

Provides IDE features for fan grammar and action documents:
- Go-to-definition
- Hover documentation
- References
- Document symbols
- Cross-link diagnostics between a grammar and its actions
"""

from .server import start_server

__all__ = ["start_server"]
