"""
PDP-8 Assembly Analyzer
=======================

Static analysis for the PDP-8 style teaching assembly dialect. Given the
text of a source file, the analyzer reports spelling, syntax and logic
problems as positioned diagnostics an editor can display.

Main Components
---------------
- **normalize_source**: splits text into SourceLines and strips comments
- **resolve_symbols**: pass 1, label addresses and label problems
- **materialize**: pass 2, the simulated 4096-word memory image
- **check_spelling / check_syntax / check_logic**: the diagnostic passes
- **Analyzer**: runs the pipeline with a fresh problem budget per run

Analysis Process
----------------
1. **Normalization**: one SourceLine per editor line, comments removed
2. **Symbol resolution**: walk the program with a location counter and
   bind every label to its address
3. **Materialization**: walk again and place each statement in memory,
   replacing label operands with addresses
4. **Checks**: spelling, then syntax, then logic, all sharing the budget

Example Usage
-------------
>>> from pdp8_lsp.analyzer import analyze
>>> diagnostics = analyze("DEC 40000\\nHLT\\nEND")
>>> [d.message for d in diagnostics]
['Invalid decimal value.']
"""

from pdp8_lsp.analyzer.analyzer import (
    DEFAULT_MAX_PROBLEMS,
    AnalysisResult,
    Analyzer,
    analyze,
)
from pdp8_lsp.analyzer.checks import check_logic, check_spelling, check_syntax
from pdp8_lsp.analyzer.diagnostics import (
    END_OF_LINE,
    Diagnostic,
    Position,
    ProblemBudget,
    Range,
    Severity,
)
from pdp8_lsp.analyzer.memory import (
    EMPTY_CELL,
    CellKind,
    MemoryCell,
    MemoryImage,
    materialize,
)
from pdp8_lsp.analyzer.source import SourceLine, normalize_source, strip_inline_comment
from pdp8_lsp.analyzer.symbols import DuplicateLabel, SymbolResolution, resolve_symbols

__all__ = [
    # Main class and functions
    "Analyzer",
    "AnalysisResult",
    "analyze",
    "DEFAULT_MAX_PROBLEMS",
    # Normalizer
    "SourceLine",
    "normalize_source",
    "strip_inline_comment",
    # Pass 1
    "SymbolResolution",
    "DuplicateLabel",
    "resolve_symbols",
    # Pass 2
    "MemoryImage",
    "MemoryCell",
    "CellKind",
    "EMPTY_CELL",
    "materialize",
    # Diagnostics
    "Diagnostic",
    "Severity",
    "Position",
    "Range",
    "ProblemBudget",
    "END_OF_LINE",
    "check_spelling",
    "check_syntax",
    "check_logic",
]
