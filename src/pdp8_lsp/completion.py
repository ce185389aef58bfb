"""
Completion Provider
===================

Completion candidates for the editor: labels declared in the document and
the fixed mnemonic vocabulary.

Labels
------
Every line containing a label separator declares the text before it. When
the cursor line already has an operand (``LDA F``), only labels containing
that operand are offered.

Keywords
--------
The word being typed (the last word before the cursor, after any label) is
matched as a substring against the vocabulary, so ``D`` offers ``ADD``,
``LDA``, ``DEC`` and ``END``. An empty word offers everything.

Example
-------
>>> items = suggest_completions("FOO, DEC 5\\nLDA F", line=1, character=5)
>>> [item.label for item in items][:1]
['FOO']
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from pdp8_lsp.isa import KEYWORD_DESCRIPTIONS, LABEL_SEPARATOR

LABEL_DETAIL = "Label in this file"


class CompletionItemKind(IntEnum):
    """Completion item kinds used here, numbered as in the LSP."""
    VALUE = 12
    KEYWORD = 14


@dataclass(frozen=True)
class CompletionItem:
    """A single completion candidate."""
    label: str
    kind: CompletionItemKind
    detail: str
    documentation: str

    def to_dict(self) -> dict[str, Any]:
        """Return the LSP CompletionItem object."""
        return {
            "label": self.label,
            "kind": int(self.kind),
            "detail": self.detail,
            "documentation": self.documentation,
        }


def collect_labels(lines: list[str]) -> list[str]:
    """Return the declared labels, in document order."""
    labels = []
    for line in lines:
        stripped = line.strip()
        if LABEL_SEPARATOR in stripped:
            labels.append(stripped.split(LABEL_SEPARATOR)[0].strip())
    return labels


def _statement_words(text: str) -> list[str]:
    """Words of a line after any label."""
    return text.split(LABEL_SEPARATOR)[-1].split()


def suggest_completions(text: str, line: int, character: int) -> list[CompletionItem]:
    """
    Compute completion candidates at a cursor position.

    Args:
        text: Full document text
        line: 0-based cursor line
        character: 0-based cursor column

    Returns:
        Matching labels followed by matching keywords
    """
    lines = text.split("\n")
    if not 0 <= line < len(lines):
        return []

    current = lines[line].rstrip("\r")
    suggestions: list[CompletionItem] = []

    words = _statement_words(current)
    if len(words) > 1:
        operand = words[1]
        for label in collect_labels(lines):
            if operand in label:
                suggestions.append(CompletionItem(
                    label=label,
                    kind=CompletionItemKind.VALUE,
                    detail=LABEL_DETAIL,
                    documentation=LABEL_DETAIL,
                ))

    before_cursor = current[:character]
    if before_cursor.endswith((" ", "\t", LABEL_SEPARATOR)):
        typed = ""
    else:
        typed_words = _statement_words(before_cursor)
        typed = typed_words[-1] if typed_words else ""

    for keyword, description in KEYWORD_DESCRIPTIONS.items():
        if typed in keyword:
            suggestions.append(CompletionItem(
                label=keyword,
                kind=CompletionItemKind.KEYWORD,
                detail=description,
                documentation=description,
            ))

    return suggestions
