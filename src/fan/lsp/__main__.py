"""
Entry point for the fan LSP server.

Usage:
    python -m fan.lsp
"""

from .server import start_server

if __name__ == "__main__":
    start_server()
