"""
Diagnostic Passes
=================

The three checking passes run by the analyzer, in this order:

1. **Spelling** - every statement must start with a known mnemonic.
2. **Syntax** - operand rules on the source lines, then unresolved labels
   and malformed RRI/IO statements in the memory image.
3. **Logic** - duplicate origins, MRI operands that do not point at data,
   unreachable HLT, and the label report from the resolver.

All passes share one ProblemBudget. Every emission checks the budget first,
except the label report at the end of the logic pass, which is always
emitted in full.
"""

from typing import Optional

from pdp8_lsp.analyzer.diagnostics import Diagnostic, ProblemBudget, Range, Severity
from pdp8_lsp.analyzer.memory import CellKind, MemoryCell, MemoryImage
from pdp8_lsp.analyzer.source import SourceLine
from pdp8_lsp.analyzer.symbols import SymbolResolution
from pdp8_lsp.isa import (
    INDIRECT_MARKER,
    JUMP_INSTRUCTIONS,
    MEMORY_SIZE,
    SKIP_INSTRUCTIONS,
    is_io_like,
    is_keyword,
    is_mri,
    is_rri_like,
    is_valid_address_value,
    is_valid_decimal_value,
    is_valid_hex_value,
    is_valid_io,
    is_valid_literal,
    is_valid_rri,
    parse_int_prefix,
)


def _emit(
    diagnostics: list[Diagnostic],
    budget: ProblemBudget,
    range_: Range,
    message: str,
    severity: Severity,
) -> bool:
    """
    Append a diagnostic if the budget allows it.

    Returns:
        False when the budget is exhausted (nothing was added)
    """
    if budget.exhausted:
        return False
    diagnostics.append(Diagnostic(range_, message, severity))
    budget.spend()
    return True


def _statement_range(line: SourceLine) -> Range:
    """From the start of the statement (after any label) to end of line."""
    return Range.from_column(line.index, line.body_column, len(line.raw))


def _cell_range(cell: MemoryCell) -> Range:
    return Range.whole_line((cell.line or 1) - 1)


# =============================================================================
# Spelling Pass
# =============================================================================

def check_spelling(lines: list[SourceLine], budget: ProblemBudget) -> list[Diagnostic]:
    """
    Flag statements whose mnemonic is not in the vocabulary.

    The pass stops at the first END; anything below it is left to the
    syntax pass.
    """
    diagnostics: list[Diagnostic] = []

    for line in lines:
        if budget.exhausted:
            break
        if line.is_blank:
            continue

        token = line.mnemonic
        if is_keyword(token):
            if token == "END":
                break
            continue

        _emit(diagnostics, budget, _statement_range(line),
              f"Invalid keyword: {token}", Severity.WARNING)

    return diagnostics


# =============================================================================
# Syntax Pass
# =============================================================================

MSG_MISSING_ORIGIN = "Missing origin address."
MSG_INVALID_ORIGIN = "Invalid origin address."
MSG_INVALID_DECIMAL = "Invalid decimal value."
MSG_INVALID_HEX = "Invalid hexadecimal value."
MSG_INVALID_IMA = "Invalid IMA keyword."
MSG_AFTER_END = (
    "Instructions under END pseudo-instructions will be ignored by the "
    "assembler, you should comment or remove it."
)
MSG_MISSING_END = "Missing END instruction."
MSG_MISSING_HLT = "Missing HLT instruction will generate an infinite-loop."
MSG_INVALID_RRI = "Invalid RRI instruction syntax."
MSG_INVALID_IO = "Invalid IO instruction syntax."


def _check_source_syntax(
    lines: list[SourceLine],
    budget: ProblemBudget,
    diagnostics: list[Diagnostic],
) -> None:
    """Operand checks on the source lines, plus the END/HLT presence checks."""
    seen_end = False
    seen_hlt = False

    for line in lines:
        if budget.exhausted:
            break
        if line.is_blank:
            continue

        tokens = line.tokens
        mnemonic = line.mnemonic
        where = _statement_range(line)

        if mnemonic == "ORG":
            if len(tokens) == 1:
                _emit(diagnostics, budget, where, MSG_MISSING_ORIGIN, Severity.ERROR)
            elif not is_valid_address_value(tokens[1]) or len(tokens) > 2:
                _emit(diagnostics, budget, where, MSG_INVALID_ORIGIN, Severity.ERROR)

        elif mnemonic == "DEC":
            if not is_valid_decimal_value(line.operand):
                _emit(diagnostics, budget, where, MSG_INVALID_DECIMAL, Severity.WARNING)

        elif mnemonic == "HEX":
            if not is_valid_hex_value(line.operand):
                _emit(diagnostics, budget, where, MSG_INVALID_HEX, Severity.WARNING)

        elif mnemonic == "END":
            seen_end = True
            for later in lines[line.index + 1:]:
                if later.is_blank:
                    continue
                if not _emit(diagnostics, budget, Range.whole_line(later.index),
                             MSG_AFTER_END, Severity.INFORMATION):
                    break
            break

        elif mnemonic == "HLT":
            seen_hlt = True

        elif is_mri(mnemonic):
            if len(tokens) > 2 and tokens[2] != INDIRECT_MARKER:
                _emit(diagnostics, budget, where, MSG_INVALID_IMA, Severity.WARNING)

    last_line = len(lines) - 1
    if not seen_end:
        _emit(diagnostics, budget, Range.whole_line(last_line),
              MSG_MISSING_END, Severity.ERROR)
    if not seen_hlt:
        _emit(diagnostics, budget, Range.whole_line(last_line),
              MSG_MISSING_HLT, Severity.ERROR)


def _org_jump(text: str) -> Optional[int]:
    """
    Scan position to continue from after a cell that mentions ORG.

    Takes the characters from just after the "O" of "ORG" up to column 16
    (or from column 16 up to there, when "ORG" sits further right) and
    reads a leading decimal integer from them. Because the slice starts
    with "RG", a cell whose "ORG" lies within the first 16 columns never
    yields a number, and the scan ends there.
    """
    start = text.index("ORG") + 1
    low, high = sorted((start, 16))
    return parse_int_prefix(text[low:high].strip(), 10)


def _check_memory_syntax(
    memory: MemoryImage,
    budget: ProblemBudget,
    diagnostics: list[Diagnostic],
) -> None:
    """Unresolved operands and malformed RRI/IO statements in memory."""
    address = 0
    while address < len(memory):
        cell = memory[address]
        if "END" in cell.tokens or budget.exhausted:
            break

        if "ORG" in cell.text:
            jump = _org_jump(cell.text)
            # Only forward jumps are followed, so the scan terminates
            if jump is None or jump + 1 <= address:
                break
            address = jump + 1
            continue

        if cell.kind is CellKind.UNRESOLVED:
            _emit(diagnostics, budget, _cell_range(cell),
                  f"Unresolved label {cell.symbol}.", Severity.WARNING)
        elif is_rri_like(cell.text) and not is_valid_rri(cell.text):
            _emit(diagnostics, budget, _cell_range(cell), MSG_INVALID_RRI, Severity.ERROR)
        elif is_io_like(cell.text) and not is_valid_io(cell.text):
            _emit(diagnostics, budget, _cell_range(cell), MSG_INVALID_IO, Severity.ERROR)

        address += 1


def check_syntax(
    lines: list[SourceLine],
    memory: MemoryImage,
    budget: ProblemBudget,
) -> list[Diagnostic]:
    """
    Run both syntax phases.

    The source phase ends at the first END (after reporting any statements
    below it); the memory phase still runs.
    """
    diagnostics: list[Diagnostic] = []
    _check_source_syntax(lines, budget, diagnostics)
    _check_memory_syntax(memory, budget, diagnostics)
    return diagnostics


# =============================================================================
# Logic Pass
# =============================================================================

MSG_INVALID_TARGET = "The instruction address is pointing to an invalid memory address."
MSG_UNREACHABLE_HLT = (
    "The HLT instruction can't be reached, make sure that the previous jump "
    "instruction could be skipped."
)


def _literal_value(cell: MemoryCell) -> Optional[int]:
    """Numeric value of a DEC/HEX cell, or None if it is not valid data."""
    operand = cell.operand
    if not is_valid_literal(cell.mnemonic, operand):
        return None
    if cell.mnemonic == "DEC":
        return parse_int_prefix(operand, 10)
    return int(operand, 16)


def _points_to_literal(memory: MemoryImage, cell: MemoryCell) -> bool:
    """
    Check that an MRI operand addresses a DEC/HEX value.

    With indirect addressing the operand cell must itself hold a literal,
    whose value is then the address that has to hold data. A label placed
    past the end of memory never points at data.
    """
    if not 0 <= cell.target < MEMORY_SIZE:
        return False
    target = memory[cell.target]

    if cell.indirect:
        pointer = _literal_value(target)
        if pointer is None or not 0 <= pointer < MEMORY_SIZE:
            return False
        target = memory[pointer]

    return _literal_value(target) is not None


def _check_origins(
    lines: list[SourceLine],
    budget: ProblemBudget,
    diagnostics: list[Diagnostic],
) -> None:
    first_seen: dict[int, int] = {}

    for line in lines:
        if line.is_blank or line.mnemonic != "ORG":
            continue

        origin = parse_int_prefix(line.operand, 16)
        if origin is None:
            continue

        if origin in first_seen:
            message = (
                f"ORG Instructions duplicate at line {first_seen[origin]}, "
                f"causing an overwrite of the previous instructions."
            )
            if not _emit(diagnostics, budget, Range.whole_line(line.index),
                         message, Severity.ERROR):
                break
        else:
            first_seen[origin] = line.index + 1


def _check_memory_logic(
    memory: MemoryImage,
    budget: ProblemBudget,
    diagnostics: list[Diagnostic],
) -> None:
    for address in range(len(memory)):
        cell = memory[address]
        if "END" in cell.tokens or budget.exhausted:
            break
        if cell.is_empty:
            continue

        if cell.kind is CellKind.REFERENCE:
            if not _points_to_literal(memory, cell):
                _emit(diagnostics, budget, _cell_range(cell),
                      MSG_INVALID_TARGET, Severity.WARNING)

        elif cell.mnemonic == "HLT" and address >= 2:
            jump = memory[address - 1]
            before_jump = memory[address - 2]
            if (jump.mnemonic in JUMP_INSTRUCTIONS
                    and before_jump.mnemonic not in SKIP_INSTRUCTIONS):
                _emit(diagnostics, budget, _cell_range(cell),
                      MSG_UNREACHABLE_HLT, Severity.WARNING)


def _label_report(
    resolution: SymbolResolution,
    memory: MemoryImage,
) -> list[Diagnostic]:
    """Duplicate, unused and invalid labels. Not limited by the budget."""
    diagnostics = []

    for duplicate in resolution.duplicates.values():
        diagnostics.append(Diagnostic(
            Range.whole_line(duplicate.line),
            f'Duplicate label: "{duplicate.label}" at previous line {duplicate.previous_line + 1}',
            Severity.WARNING,
        ))

    for label, line in memory.unused_labels.items():
        diagnostics.append(Diagnostic(
            Range.whole_line(line),
            f'Unused label: "{label}", is better to remove it to prevent bad usage of the RAM',
            Severity.INFORMATION,
        ))

    for token, line in resolution.invalid.items():
        diagnostics.append(Diagnostic(
            Range.whole_line(line),
            f'Invalid label: "{token}"',
            Severity.ERROR,
        ))

    return diagnostics


def check_logic(
    lines: list[SourceLine],
    memory: MemoryImage,
    resolution: SymbolResolution,
    budget: ProblemBudget,
) -> list[Diagnostic]:
    """Run the logic checks and append the label report."""
    diagnostics: list[Diagnostic] = []
    _check_origins(lines, budget, diagnostics)
    _check_memory_logic(memory, budget, diagnostics)
    diagnostics.extend(_label_report(resolution, memory))
    return diagnostics
