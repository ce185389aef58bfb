"""
Source Line Normalizer
======================

Splits a document into one SourceLine per editor line and strips inline
comments. Blank and comment-only lines are kept, so the index of a
SourceLine is always the 0-based editor line it came from.

Comment Stripping
-----------------
A line that is not blank and does not start with a comment marker is cut
at the first ``/``; if there is none, at the first ``;``; if there is none,
at the first ``#``. The markers are tried in that order, so
``LDA X ; see a/b`` keeps ``LDA X ; see a``.

The text before the marker is kept with its original indentation, which
keeps every column computed from SourceLine.text valid in the editor.

Example
-------
>>> lines = normalize_source("FOO, LDA 5 / load\\n\\nHLT")
>>> [line.text for line in lines]
['FOO, LDA 5 ', '', 'HLT']
>>> lines[0].label_token, lines[0].mnemonic, lines[0].operand
('FOO', 'LDA', '5')
"""

from dataclasses import dataclass

from pdp8_lsp.isa import COMMENT_MARKERS, LABEL_SEPARATOR


# =============================================================================
# Source Line
# =============================================================================

@dataclass(frozen=True)
class SourceLine:
    """
    One normalized line of source.

    Attributes:
        index: 0-based line number in the document
        raw: The original line (without trailing carriage return)
        text: The line with any inline comment removed
    """
    index: int
    raw: str
    text: str

    @property
    def stripped(self) -> str:
        return self.text.strip()

    @property
    def is_blank(self) -> bool:
        """True for empty lines and lines that are entirely a comment."""
        stripped = self.stripped
        return stripped == "" or stripped.startswith(COMMENT_MARKERS)

    @property
    def has_label(self) -> bool:
        return LABEL_SEPARATOR in self.text

    @property
    def label_token(self) -> str:
        """First word before the first separator (the label candidate)."""
        head = self.stripped.split(LABEL_SEPARATOR)[0].split()
        return head[0] if head else ""

    @property
    def body(self) -> str:
        """Statement text after the last label separator."""
        return self.stripped.split(LABEL_SEPARATOR)[-1].strip()

    @property
    def body_column(self) -> int:
        """Column of the first character of body within the line."""
        start = self.text.rfind(LABEL_SEPARATOR) + 1
        segment = self.text[start:]
        return start + len(segment) - len(segment.lstrip())

    @property
    def tokens(self) -> list[str]:
        return self.body.split()

    @property
    def mnemonic(self) -> str:
        tokens = self.tokens
        return tokens[0] if tokens else ""

    @property
    def operand(self) -> str:
        """Everything after the mnemonic, stripped."""
        return self.body[len(self.mnemonic):].strip()


# =============================================================================
# Normalization
# =============================================================================

def strip_inline_comment(line: str) -> str:
    """
    Remove an inline comment from a single line.

    Blank and comment-only lines are returned unchanged.
    """
    stripped = line.strip()
    if stripped == "" or stripped.startswith(COMMENT_MARKERS):
        return line

    for marker in COMMENT_MARKERS:
        position = line.find(marker)
        if position != -1:
            return line[:position]
    return line


def normalize_source(text: str) -> list[SourceLine]:
    """
    Split document text into normalized source lines.

    Args:
        text: Full document text

    Returns:
        One SourceLine per document line, in order
    """
    lines = []
    for index, raw in enumerate(text.split("\n")):
        raw = raw.rstrip("\r")
        lines.append(SourceLine(index, raw, strip_inline_comment(raw)))
    return lines
