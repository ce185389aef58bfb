"""
PDP-8 Assembly Language Server Package
======================================

Language Server Protocol front end: document synchronization, diagnostics
publishing and completion on top of the analyzer.

Usage:
    $ pdp8-lsp

Or from Python:
    from pdp8_lsp.server import LanguageServer
    server = LanguageServer()
    await server.run()
"""

from .server import (
    DocumentStore,
    LanguageServer,
    TextDocument,
    encode_message,
    main,
    read_message,
)

__all__ = [
    "LanguageServer",
    "DocumentStore",
    "TextDocument",
    "encode_message",
    "read_message",
    "main",
]
