"""
Analyzer - Main Interface
=========================

The Analyzer class runs the whole pipeline over one document snapshot:

    normalize -> resolve symbols -> materialize memory
              -> spelling -> syntax -> logic

Each call builds fresh state (symbol table, memory image, problem budget),
so one Analyzer can be reused across documents and two runs never see
each other's data.

Example Usage
-------------
>>> from pdp8_lsp.analyzer import Analyzer
>>> analyzer = Analyzer(max_number_of_problems=100)
>>> for diagnostic in analyzer.analyze("LDA 0100\\nHLT"):
...     print(diagnostic.line, diagnostic.message)
1 Missing END instruction.
0 The instruction address is pointing to an invalid memory address.
"""

import logging
from dataclasses import dataclass, field

from pdp8_lsp.analyzer.checks import check_logic, check_spelling, check_syntax
from pdp8_lsp.analyzer.diagnostics import Diagnostic, ProblemBudget
from pdp8_lsp.analyzer.memory import MemoryImage, materialize
from pdp8_lsp.analyzer.source import SourceLine, normalize_source
from pdp8_lsp.analyzer.symbols import SymbolResolution, resolve_symbols

logger = logging.getLogger(__name__)

DEFAULT_MAX_PROBLEMS = 100


@dataclass
class AnalysisResult:
    """
    Everything produced by one analysis run.

    Attributes:
        diagnostics: Spelling, syntax and logic findings, in that order
        lines: Normalized source lines
        resolution: Pass 1 symbol table and label side-tables
        memory: Pass 2 memory image
        budget: Problem budget after the run
    """
    diagnostics: list[Diagnostic]
    lines: list[SourceLine] = field(default_factory=list)
    resolution: SymbolResolution = field(default_factory=SymbolResolution)
    memory: MemoryImage = field(default_factory=MemoryImage)
    budget: ProblemBudget = field(default_factory=lambda: ProblemBudget(DEFAULT_MAX_PROBLEMS))


class Analyzer:
    """
    Static analyzer for PDP-8 style teaching assembly.

    Attributes:
        max_number_of_problems: Problem budget limit for each run
    """

    def __init__(self, max_number_of_problems: int = DEFAULT_MAX_PROBLEMS):
        self.max_number_of_problems = max_number_of_problems

    def run(self, text: str) -> AnalysisResult:
        """
        Analyze a document and keep the intermediate results.

        Args:
            text: Full document text

        Returns:
            AnalysisResult for this snapshot
        """
        budget = ProblemBudget(self.max_number_of_problems)
        if text == "":
            return AnalysisResult(diagnostics=[], budget=budget)

        lines = normalize_source(text)
        resolution = resolve_symbols(lines)
        memory = materialize(lines, resolution)

        spelling = check_spelling(lines, budget)
        syntax = check_syntax(lines, memory, budget)
        logic = check_logic(lines, memory, resolution, budget)

        logger.debug(
            f"Analyzed {len(lines)} lines: {len(spelling)} spelling, "
            f"{len(syntax)} syntax, {len(logic)} logic diagnostics "
            f"(budget {budget.count}/{budget.limit})"
        )

        return AnalysisResult(
            diagnostics=spelling + syntax + logic,
            lines=lines,
            resolution=resolution,
            memory=memory,
            budget=budget,
        )

    def analyze(self, text: str) -> list[Diagnostic]:
        """Analyze a document and return its diagnostics."""
        return self.run(text).diagnostics


def analyze(text: str, max_number_of_problems: int = DEFAULT_MAX_PROBLEMS) -> list[Diagnostic]:
    """
    Convenience function to analyze a document in one call.

    Args:
        text: Full document text
        max_number_of_problems: Problem budget limit

    Returns:
        List of diagnostics
    """
    return Analyzer(max_number_of_problems).analyze(text)
