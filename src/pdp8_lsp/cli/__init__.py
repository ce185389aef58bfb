"""
PDP-8 LSP Command-Line Interface
================================

This package provides command-line tools for the analyzer:

- **pdp8lint**: analyze source files and print diagnostics
- **pdp8-lsp**: run the language server on stdio

Each tool is implemented as a Click-based CLI application. Logging always
goes to stderr (or a file), because the language server owns stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

__all__ = ["pdp8lint", "pdp8lsp", "configure_logging"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """
    Set up root logging for a CLI tool.

    Args:
        verbose: Log at DEBUG level instead of WARNING
        log_file: Write the log to this file instead of stderr
    """
    level = logging.DEBUG if verbose else logging.WARNING
    if log_file is not None:
        logging.basicConfig(level=level, format=LOG_FORMAT, filename=str(log_file), force=True)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
