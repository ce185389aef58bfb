"""
Symbol Resolver (Pass 1)
========================

First walk over the normalized source. It assigns an address to every
label and records the label problems reported later by the logic checks.

Location Counter Rules
----------------------
- ``ORG <hex>`` with a valid address sets the LC; an invalid operand
  leaves it unchanged. ORG never occupies a cell.
- ``END`` stops the walk.
- A line with a label separator registers the label at the current LC
  and then occupies one cell.
- Any other non-blank line occupies one cell.

The line is classified by the first word before the first separator, so a
labelled ``X, ORG 100`` registers X and takes a cell here, while the
materializer (pass 2) treats it as an ORG. Only unlabelled ORG/END lines
are well-formed.
"""

import logging
from dataclasses import dataclass, field

from pdp8_lsp.analyzer.source import SourceLine
from pdp8_lsp.isa import is_valid_address_value, is_valid_label

logger = logging.getLogger(__name__)


# =============================================================================
# Result Types
# =============================================================================

@dataclass(frozen=True)
class DuplicateLabel:
    """
    A label declared a second time.

    Attributes:
        label: The label name
        previous_address: Address bound by the earlier declaration
        line: 0-based line of the redeclaration
        previous_line: 0-based line of the earlier declaration
    """
    label: str
    previous_address: int
    line: int
    previous_line: int


@dataclass
class SymbolResolution:
    """
    Output of the first pass.

    Attributes:
        symbols: Label -> assigned address
        duplicates: LC at the redeclaration -> DuplicateLabel
        unused: Label -> 0-based declaring line; entries are removed by the
                materializer when a label is used as an operand
        invalid: Malformed label token -> 0-based line
        declarations: Label -> 0-based line of the latest declaration
    """
    symbols: dict[str, int] = field(default_factory=dict)
    duplicates: dict[int, DuplicateLabel] = field(default_factory=dict)
    unused: dict[str, int] = field(default_factory=dict)
    invalid: dict[str, int] = field(default_factory=dict)
    declarations: dict[str, int] = field(default_factory=dict)


# =============================================================================
# Pass 1
# =============================================================================

def resolve_symbols(lines: list[SourceLine]) -> SymbolResolution:
    """
    Build the symbol table for a normalized program.

    Args:
        lines: Output of normalize_source()

    Returns:
        SymbolResolution with the symbol table and the label side-tables
    """
    result = SymbolResolution()
    lc = 0

    for line in lines:
        if line.is_blank:
            continue

        token = line.label_token

        if token == "ORG":
            words = line.stripped.split()
            operand = words[1] if len(words) > 1 else ""
            if is_valid_address_value(operand):
                lc = int(operand, 16)
            continue

        if token == "END":
            break

        if line.has_label:
            if is_valid_label(token):
                previous = result.symbols.get(token)
                if previous is not None:
                    result.duplicates[lc] = DuplicateLabel(
                        label=token,
                        previous_address=previous,
                        line=line.index,
                        previous_line=result.declarations[token],
                    )
                result.symbols[token] = lc
                result.declarations[token] = line.index
                result.unused[token] = line.index
            else:
                result.invalid[token] = line.index

        lc += 1

    logger.debug(
        f"Pass 1: {len(result.symbols)} labels, {len(result.duplicates)} duplicates, "
        f"{len(result.invalid)} invalid"
    )
    return result
