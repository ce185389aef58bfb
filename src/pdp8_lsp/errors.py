"""
PDP-8 Analyzer Error Hierarchy
==============================

This module defines the exception hierarchy for the analyzer package.
All exceptions inherit from Pdp8Error, allowing callers to catch every
package-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Pdp8Error (base)
├── ConfigError - invalid configuration value
└── ProtocolError - language server protocol failure (carries a JSON-RPC code)

Design Philosophy
-----------------
The analysis core never raises for malformed assembly source. A program
that cannot be analyzed cleanly still produces a list of diagnostics, so the
exceptions here only cover the layers around the core: settings handling and
the editor transport.
"""

from typing import Any, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Pdp8Error(Exception):
    """
    Base exception for all analyzer errors.

        try:
            settings = LSPSettings.from_dict(payload, strict=True)
        except Pdp8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigError(Pdp8Error):
    """
    Invalid configuration value.

    Attributes:
        key: Name of the offending setting
        value: The rejected value
    """

    def __init__(self, key: str, value: Any, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"invalid setting {key}={value!r}: {reason}")


# =============================================================================
# Protocol Exceptions
# =============================================================================

class ProtocolError(Pdp8Error):
    """
    Error raised while handling a language server message.

    The server turns this exception into a JSON-RPC error response with
    the stored code, so handlers can simply raise it.

    Attributes:
        code: JSON-RPC error code (e.g. -32601 for an unknown method)
        message: Human readable description
        data: Optional structured payload for the error response
    """

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-RPC error object."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error
