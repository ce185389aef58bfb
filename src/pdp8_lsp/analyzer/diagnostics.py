"""
Diagnostic Model
================

Positioned findings produced by the checking passes, plus the problem
budget shared by the passes of one analysis run.

The types mirror the Language Server Protocol shapes so the server can
publish them without translation:

    {
        "range": {"start": {"line": 3, "character": 0},
                  "end": {"line": 3, "character": 2147483647}},
        "message": "Missing END instruction.",
        "severity": 1,
        "source": "pdp8-asm"
    }

Lines and characters are 0-based. A character of END_OF_LINE means "to the
end of the line".
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


# Largest LSP uinteger, used as the end column of whole-line diagnostics
END_OF_LINE = 2**31 - 1

DIAGNOSTIC_SOURCE = "pdp8-asm"


class Severity(IntEnum):
    """Diagnostic severity, numbered as in the LSP."""
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


@dataclass(frozen=True)
class Position:
    """A 0-based (line, character) position."""
    line: int
    character: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    """A span between two positions."""
    start: Position
    end: Position

    @classmethod
    def whole_line(cls, line: int) -> "Range":
        """Range covering an entire line."""
        return cls(Position(line, 0), Position(line, END_OF_LINE))

    @classmethod
    def from_column(cls, line: int, column: int, end: int) -> "Range":
        """Range on one line from column to end."""
        return cls(Position(line, column), Position(line, end))

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class Diagnostic:
    """
    A single finding attached to a source range.

    Attributes:
        range: Where the finding applies
        message: Human readable description
        severity: ERROR, WARNING or INFORMATION
        source: Tool name shown by the editor
    """
    range: Range
    message: str
    severity: Severity
    source: str = DIAGNOSTIC_SOURCE

    @property
    def line(self) -> int:
        return self.range.start.line

    def to_dict(self) -> dict[str, Any]:
        """Return the LSP Diagnostic object."""
        return {
            "range": self.range.to_dict(),
            "message": self.message,
            "severity": int(self.severity),
            "source": self.source,
        }


# =============================================================================
# Problem Budget
# =============================================================================

@dataclass
class ProblemBudget:
    """
    Counter limiting how many diagnostics one run may emit.

    A gated emission site checks ``exhausted`` first and calls ``spend()``
    after emitting. The budget runs out one short of the limit: with the
    default limit of 100 at most 99 gated diagnostics are produced.

    Attributes:
        limit: Configured maxNumberOfProblems
        count: Diagnostics emitted so far
    """
    limit: int
    count: int = 0

    @property
    def exhausted(self) -> bool:
        return self.count >= self.limit - 1

    def spend(self) -> None:
        self.count += 1
