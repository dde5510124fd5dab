"""
Entry point for themelens LSP server.

Usage:
    python -m themelens.lsp
"""

from .server import start_server

if __name__ == "__main__":
    start_server()
