"""
Memory Materializer (Pass 2)
============================

Second, independent walk over the normalized source. It lays the program
out in a simulated 4096-word memory so the checks can reason about what
ends up at each address.

Cell Contents
-------------
Every cell holds one MemoryCell:

| Kind       | Text                 | Produced by                           |
|------------|----------------------|---------------------------------------|
| EMPTY      | ""                   | never written                         |
| REFERENCE  | "LDA 12" / "LDA 12 I"| MRI whose operand resolved            |
| UNRESOLVED | "LDA UNK-FOO|7"      | MRI whose operand is not a label or   |
|            |                      | an address (FOO, from source line 7)  |
| VERBATIM   | "FOO, DEC 5"         | every other statement, stripped       |

Label operands become the label address and hex operands become decimal,
so the target of a REFERENCE cell is always its decimal operand.

The walk uses the same ORG/END rules as the resolver, but it classifies a
line by the first word after the label separator.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from pdp8_lsp.analyzer.source import SourceLine
from pdp8_lsp.analyzer.symbols import SymbolResolution
from pdp8_lsp.isa import (
    INDIRECT_MARKER,
    LABEL_SEPARATOR,
    MEMORY_SIZE,
    is_mri,
    is_valid_address_value,
)

logger = logging.getLogger(__name__)

# Prefix of the text stored for an unresolved MRI operand
UNRESOLVED_PREFIX = "UNK-"


# =============================================================================
# Memory Cells
# =============================================================================

class CellKind(Enum):
    """What a memory cell was produced from."""
    EMPTY = auto()
    REFERENCE = auto()
    UNRESOLVED = auto()
    VERBATIM = auto()


@dataclass(frozen=True)
class MemoryCell:
    """
    Content of one memory word.

    Attributes:
        text: Normalized instruction text (see module docstring)
        kind: Where the content came from
        mnemonic: Instruction mnemonic ("" for empty cells)
        target: Resolved operand address (REFERENCE cells only)
        indirect: True when the MRI uses indirect addressing
        symbol: Operand text that failed to resolve (UNRESOLVED cells only)
        line: 1-based source line that produced the cell
    """
    text: str = ""
    kind: CellKind = CellKind.EMPTY
    mnemonic: str = ""
    target: Optional[int] = None
    indirect: bool = False
    symbol: Optional[str] = None
    line: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    @property
    def tokens(self) -> list[str]:
        return self.text.split()

    @property
    def operand(self) -> str:
        """Text after the mnemonic, ignoring any label."""
        body = self.text.split(LABEL_SEPARATOR)[-1].strip()
        return body[len(self.mnemonic):].strip()


EMPTY_CELL = MemoryCell()


@dataclass
class MemoryImage:
    """
    Output of the second pass.

    Attributes:
        cells: MEMORY_SIZE cells indexed by address
        address_to_line: Address -> 1-based source line
        unused_labels: Labels never used as an MRI operand -> 0-based line
    """
    cells: list[MemoryCell] = field(default_factory=lambda: [EMPTY_CELL] * MEMORY_SIZE)
    address_to_line: dict[int, int] = field(default_factory=dict)
    unused_labels: dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, address: int) -> MemoryCell:
        return self.cells[address]

    def store(self, address: int, cell: MemoryCell) -> bool:
        """
        Write a cell and remember its source line.

        Returns:
            False when the address lies outside memory (nothing is written)
        """
        if not 0 <= address < MEMORY_SIZE:
            logger.debug(f"Dropping write past end of memory at {address}: {cell.text!r}")
            return False
        self.cells[address] = cell
        if cell.line is not None:
            self.address_to_line[address] = cell.line
        return True

    def line_of(self, address: int) -> Optional[int]:
        """1-based source line stored at an address, if any."""
        return self.address_to_line.get(address)


# =============================================================================
# Pass 2
# =============================================================================

def _reference_cell(
    line: SourceLine,
    symbols: dict[str, int],
) -> MemoryCell:
    """Build the cell for an MRI statement."""
    tokens = line.tokens
    mnemonic = tokens[0]
    address = tokens[1] if len(tokens) > 1 else ""
    indirect = INDIRECT_MARKER in tokens[2:]
    suffix = f" {INDIRECT_MARKER}" if indirect else ""
    line_number = line.index + 1

    if address in symbols:
        target = symbols[address]
    elif is_valid_address_value(address):
        target = int(address, 16)
    else:
        return MemoryCell(
            text=f"{mnemonic} {UNRESOLVED_PREFIX}{address}|{line_number}{suffix}",
            kind=CellKind.UNRESOLVED,
            mnemonic=mnemonic,
            indirect=indirect,
            symbol=address,
            line=line_number,
        )

    return MemoryCell(
        text=f"{mnemonic} {target}{suffix}",
        kind=CellKind.REFERENCE,
        mnemonic=mnemonic,
        target=target,
        indirect=indirect,
        line=line_number,
    )


def materialize(lines: list[SourceLine], resolution: SymbolResolution) -> MemoryImage:
    """
    Lay the program out in simulated memory.

    Args:
        lines: Output of normalize_source()
        resolution: Output of resolve_symbols() for the same lines

    Returns:
        MemoryImage with cells, the address-to-line map and the final set
        of unused labels. The resolution itself is not modified.
    """
    memory = MemoryImage(unused_labels=dict(resolution.unused))
    lc = 0

    for line in lines:
        if line.is_blank:
            continue

        tokens = line.tokens
        instruction = line.mnemonic

        if instruction == "ORG":
            operand = tokens[1] if len(tokens) > 1 else ""
            if is_valid_address_value(operand):
                lc = int(operand, 16)
            continue

        if instruction == "END":
            break

        if is_mri(instruction):
            memory.store(lc, _reference_cell(line, resolution.symbols))
            operand = tokens[1] if len(tokens) > 1 else ""
            memory.unused_labels.pop(operand, None)
        else:
            memory.store(lc, MemoryCell(
                text=line.stripped,
                kind=CellKind.VERBATIM,
                mnemonic=instruction,
                line=line.index + 1,
            ))
        lc += 1

    logger.debug(
        f"Pass 2: {len(memory.address_to_line)} cells written, "
        f"{len(memory.unused_labels)} unused labels"
    )
    return memory
