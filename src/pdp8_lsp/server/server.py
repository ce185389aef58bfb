"""
PDP-8 Assembly Language Server
==============================

Language Server Protocol front end for the analyzer.

This server provides:
- Diagnostics, republished in full whenever a document is opened, changed,
  saved, or when the configuration or watched files change
- Completion of labels and mnemonics

The server uses JSON-RPC 2.0 over stdio with LSP ``Content-Length``
framing. Documents are synchronized in full (TextDocumentSyncKind.Full).

Architecture:
    LanguageServer
        ├── DocumentStore
        │       └── TextDocument (one per open uri)
        └── Analyzer (a new one for every validation run)

Usage:
    # Run as standalone server
    python -m pdp8_lsp.server.server

    # Or programmatically
    server = LanguageServer()
    await server.run()
"""

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pdp8_lsp import __version__
from pdp8_lsp.analyzer import Analyzer
from pdp8_lsp.completion import suggest_completions
from pdp8_lsp.config import LSPSettings
from pdp8_lsp.errors import ProtocolError

logger = logging.getLogger(__name__)

# TextDocumentSyncKind.Full
SYNC_FULL = 1


# =============================================================================
# Document Management
# =============================================================================

@dataclass
class TextDocument:
    """
    An open document.

    Attributes:
        uri: Document URI as sent by the client
        text: Current full text
        version: Client version number, if known
    """
    uri: str
    text: str
    version: Optional[int] = None


class DocumentStore:
    """Open documents, keyed by URI."""

    def __init__(self):
        self._documents: Dict[str, TextDocument] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, uri: str) -> bool:
        return uri in self._documents

    def open(self, uri: str, text: str, version: Optional[int] = None) -> TextDocument:
        document = TextDocument(uri, text, version)
        self._documents[uri] = document
        return document

    def update(self, uri: str, text: str, version: Optional[int] = None) -> TextDocument:
        """Replace a document's text, opening it if the client skipped didOpen."""
        document = self._documents.get(uri)
        if document is None:
            return self.open(uri, text, version)
        document.text = text
        if version is not None:
            document.version = version
        return document

    def get(self, uri: str) -> Optional[TextDocument]:
        return self._documents.get(uri)

    def close(self, uri: str) -> bool:
        """
        Forget a document.

        Returns:
            True if the document was open
        """
        return self._documents.pop(uri, None) is not None

    def all(self) -> List[TextDocument]:
        return list(self._documents.values())


# =============================================================================
# Message Framing
# =============================================================================

def encode_message(message: Dict[str, Any]) -> bytes:
    """Serialize a JSON-RPC message with its Content-Length header."""
    body = json.dumps(message).encode("utf-8")
    header = f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
    return header + body


async def read_message(reader: asyncio.StreamReader) -> Optional[Dict[str, Any]]:
    """
    Read one framed JSON-RPC message.

    Returns:
        The decoded message, or None at end of stream

    Raises:
        ProtocolError: If the header or body is malformed
    """
    headers: Dict[str, str] = {}
    while True:
        line = await reader.readline()
        if not line:
            return None
        line = line.decode("ascii", errors="replace").strip()
        if not line:
            break
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()

    try:
        length = int(headers["content-length"])
    except (KeyError, ValueError):
        raise ProtocolError(ProtocolError.PARSE_ERROR, "Missing or invalid Content-Length header")

    body = await reader.readexactly(length)
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(ProtocolError.PARSE_ERROR, f"Invalid JSON body: {e}")


def _write_stdout(message: Dict[str, Any]) -> None:
    sys.stdout.buffer.write(encode_message(message))
    sys.stdout.buffer.flush()


# =============================================================================
# Language Server
# =============================================================================

Handler = Callable[[Dict[str, Any]], Awaitable[Any]]


class LanguageServer:
    """
    Language server for PDP-8 style teaching assembly.

    Attributes:
        documents: Open documents
        settings: Current analyzer settings

    Example:
        server = LanguageServer(settings=LSPSettings.from_env())
        await server.run()  # Run until exit
    """

    # Server information
    SERVER_NAME = "pdp8-lsp"
    SERVER_VERSION = __version__

    def __init__(
        self,
        settings: Optional[LSPSettings] = None,
        writer: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        """
        Initialize the server.

        Args:
            settings: Initial settings (defaults if omitted)
            writer: Callable receiving every outgoing message; writes framed
                    messages to stdout when omitted
        """
        self.documents = DocumentStore()
        self.settings = settings or LSPSettings()
        self._writer = writer or _write_stdout
        self._handlers: Dict[str, Handler] = {}
        self._running = False
        self._shutdown_requested = False
        self._supports_workspace_folders = False

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register all supported methods."""
        self._handlers = {
            "initialize": self.handle_initialize,
            "initialized": self.handle_initialized,
            "shutdown": self.handle_shutdown,
            "exit": self.handle_exit,
            "textDocument/didOpen": self.handle_did_open,
            "textDocument/didChange": self.handle_did_change,
            "textDocument/didSave": self.handle_did_save,
            "textDocument/didClose": self.handle_did_close,
            "textDocument/completion": self.handle_completion,
            "completionItem/resolve": self.handle_completion_resolve,
            "workspace/didChangeConfiguration": self.handle_did_change_configuration,
            "workspace/didChangeWatchedFiles": self.handle_did_change_watched_files,
        }

    @property
    def methods(self) -> List[str]:
        return sorted(self._handlers)

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_requested

    # =========================================================================
    # Outgoing Messages
    # =========================================================================

    def send_notification(self, method: str, params: Dict[str, Any]) -> None:
        self._writer({"jsonrpc": "2.0", "method": method, "params": params})

    def validate(self, document: TextDocument) -> None:
        """Analyze a document and publish its full diagnostic list."""
        analyzer = Analyzer(self.settings.max_number_of_problems)
        diagnostics = analyzer.analyze(document.text)
        logger.debug(f"Publishing {len(diagnostics)} diagnostics for {document.uri}")
        self.publish_diagnostics(document.uri, [d.to_dict() for d in diagnostics], document.version)

    def validate_all(self) -> None:
        for document in self.documents.all():
            self.validate(document)

    def publish_diagnostics(
        self,
        uri: str,
        diagnostics: List[Dict[str, Any]],
        version: Optional[int] = None,
    ) -> None:
        params: Dict[str, Any] = {"uri": uri, "diagnostics": diagnostics}
        if version is not None:
            params["version"] = version
        self.send_notification("textDocument/publishDiagnostics", params)

    # =========================================================================
    # Lifecycle Handlers
    # =========================================================================

    async def handle_initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle initialize request.

        Returns server capabilities and info.
        """
        workspace = (params.get("capabilities") or {}).get("workspace") or {}
        self._supports_workspace_folders = bool(workspace.get("workspaceFolders"))

        capabilities: Dict[str, Any] = {
            "textDocumentSync": {
                "openClose": True,
                "change": SYNC_FULL,
                "save": {"includeText": True},
            },
            "completionProvider": {"resolveProvider": True},
        }
        if self._supports_workspace_folders:
            capabilities["workspace"] = {"workspaceFolders": {"supported": True}}

        if (options := params.get("initializationOptions")) is not None:
            self.settings = LSPSettings.from_dict(options)

        return {
            "capabilities": capabilities,
            "serverInfo": {
                "name": self.SERVER_NAME,
                "version": self.SERVER_VERSION,
            },
        }

    async def handle_initialized(self, params: Dict[str, Any]) -> None:
        logger.info(f"{self.SERVER_NAME} {self.SERVER_VERSION} initialized")

    async def handle_shutdown(self, params: Dict[str, Any]) -> None:
        self._shutdown_requested = True

    async def handle_exit(self, params: Dict[str, Any]) -> None:
        self.shutdown()

    # =========================================================================
    # Document Handlers
    # =========================================================================

    @staticmethod
    def _text_document(params: Dict[str, Any]) -> Dict[str, Any]:
        text_document = params.get("textDocument")
        if not isinstance(text_document, dict) or "uri" not in text_document:
            raise ProtocolError(ProtocolError.INVALID_PARAMS, "Missing textDocument.uri")
        return text_document

    async def handle_did_open(self, params: Dict[str, Any]) -> None:
        item = self._text_document(params)
        document = self.documents.open(item["uri"], item.get("text", ""), item.get("version"))
        self.validate(document)

    async def handle_did_change(self, params: Dict[str, Any]) -> None:
        item = self._text_document(params)
        changes = params.get("contentChanges") or []
        if not changes or "text" not in changes[-1]:
            raise ProtocolError(ProtocolError.INVALID_PARAMS, "Expected a full-text content change")
        # Full sync: the last change holds the whole document
        document = self.documents.update(item["uri"], changes[-1]["text"], item.get("version"))
        self.validate(document)

    async def handle_did_save(self, params: Dict[str, Any]) -> None:
        item = self._text_document(params)
        uri = item["uri"]
        if (text := params.get("text")) is not None:
            document = self.documents.update(uri, text)
        else:
            document = self.documents.get(uri)
        if document is not None:
            self.validate(document)

    async def handle_did_close(self, params: Dict[str, Any]) -> None:
        uri = self._text_document(params)["uri"]
        if self.documents.close(uri):
            self.publish_diagnostics(uri, [])

    # =========================================================================
    # Workspace Handlers
    # =========================================================================

    async def handle_did_change_configuration(self, params: Dict[str, Any]) -> None:
        self.settings = LSPSettings.from_dict(params.get("settings"))
        logger.debug(f"Settings changed: {self.settings}")
        self.validate_all()

    async def handle_did_change_watched_files(self, params: Dict[str, Any]) -> None:
        self.validate_all()

    # =========================================================================
    # Completion Handlers
    # =========================================================================

    async def handle_completion(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        document = self.documents.get(self._text_document(params)["uri"])
        if document is None:
            return []
        position = params.get("position") or {}
        items = suggest_completions(
            document.text,
            position.get("line", 0),
            position.get("character", 0),
        )
        return [item.to_dict() for item in items]

    async def handle_completion_resolve(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return params

    # =========================================================================
    # JSON-RPC Processing
    # =========================================================================

    async def process_message(
        self,
        message: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Process a JSON-RPC request or notification.

        Args:
            message: The decoded JSON-RPC message

        Returns:
            Response object, or None for notifications
        """
        method = message.get("method", "")
        params = message.get("params") or {}
        request_id = message.get("id")

        try:
            handler = self._handlers.get(method)
            if handler is None:
                if request_id is None:
                    # Unknown notifications ($/cancelRequest, ...) are ignored
                    return None
                raise ProtocolError(ProtocolError.METHOD_NOT_FOUND, f"Method not found: {method}")

            result = await handler(params)

            if request_id is not None:
                return {"jsonrpc": "2.0", "id": request_id, "result": result}
            return None

        except ProtocolError as e:
            logger.warning(f"{method}: {e}")
            error = e.to_dict()
        except Exception as e:
            logger.exception(f"{method} failed")
            error = {
                "code": ProtocolError.INTERNAL_ERROR,
                "message": f"Internal error: {str(e)}"
            }

        if request_id is not None:
            return {"jsonrpc": "2.0", "id": request_id, "error": error}
        return None

    # =========================================================================
    # Server Main Loop
    # =========================================================================

    async def serve(self, reader: asyncio.StreamReader) -> None:
        """
        Process messages from a stream until exit or end of input.

        Args:
            reader: Stream delivering framed JSON-RPC messages
        """
        self._running = True

        while self._running:
            try:
                message = await read_message(reader)
                if message is None:
                    break  # EOF

                response = await self.process_message(message)
                if response is not None:
                    self._writer(response)

            except ProtocolError as e:
                logger.warning(f"Dropping message: {e}")
            except asyncio.IncompleteReadError:
                break
            except Exception:
                # Log error but continue running
                logger.exception("Server error")

    async def run(self) -> None:
        """
        Run the language server on stdio.

        Reads framed JSON-RPC messages from stdin, processes them, and
        writes responses and notifications to stdout. Runs until the client
        sends exit or stdin is closed.
        """
        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        await asyncio.get_running_loop().connect_read_pipe(
            lambda: protocol, sys.stdin
        )
        await self.serve(reader)

    def shutdown(self) -> None:
        """Signal the server to stop after the current message."""
        self._running = False


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> None:
    """Run the language server from command line."""
    server = LanguageServer(settings=LSPSettings.from_env())
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
