"""
PDP-8 LSP - Static Analysis for PDP-8 Style Teaching Assembly
=============================================================

This package analyzes programs written in the small PDP-8 style assembly
dialect used in computer architecture courses (the "basic computer" with
AND/ADD/LDA/STA/BUN/BSA/ISZ memory-reference instructions, register and
I/O instructions, and the ORG/END/DEC/HEX pseudo-instructions).

It reports problems while the program is being edited: misspelled
mnemonics, malformed operands, unresolved and unused labels, missing END or
HLT, instructions whose operand does not point at data, and more.

Main Components
---------------
- **analyzer**: the analysis engine (two address passes, three checks)
- **completion**: label and mnemonic completion
- **server**: Language Server Protocol front end (pdp8-lsp)
- **cli**: command-line linter (pdp8lint)

Quick Start
-----------
Analyze a program:
    >>> from pdp8_lsp import Analyzer
    >>> analyzer = Analyzer()
    >>> for diagnostic in analyzer.analyze("CLA\\nHLT\\nEND"):
    ...     print(diagnostic.message)

Or use the command-line tools:
    $ pdp8lint program.asm
    $ pdp8-lsp            # started by the editor

Version History
---------------
1.0.0 - Initial release with analyzer, completion, language server and linter
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from pdp8_lsp.analyzer import (
    Analyzer,
    AnalysisResult,
    Diagnostic,
    Severity,
    analyze,
)
from pdp8_lsp.completion import CompletionItem, CompletionItemKind, suggest_completions
from pdp8_lsp.config import LSPSettings
from pdp8_lsp.errors import ConfigError, Pdp8Error, ProtocolError

__all__ = [
    "__version__",
    # Analyzer
    "Analyzer",
    "AnalysisResult",
    "Diagnostic",
    "Severity",
    "analyze",
    # Completion
    "CompletionItem",
    "CompletionItemKind",
    "suggest_completions",
    # Configuration
    "LSPSettings",
    # Errors
    "Pdp8Error",
    "ConfigError",
    "ProtocolError",
]
