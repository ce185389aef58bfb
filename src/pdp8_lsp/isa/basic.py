"""
PDP-8 Style Teaching Instruction Set
====================================

This module defines the vocabulary of the teaching assembly dialect: the
pseudo-instructions, the three instruction classes and the value validators
used by every analysis pass.

Instruction Classes
-------------------
1. **Pseudo-instructions**: ORG, END, DEC, HEX
   - ORG <hex>  sets the location counter (0-FFF)
   - END        stops the assembler
   - DEC <n>    stores a signed 16-bit decimal literal
   - HEX <n>    stores a signed 16-bit hexadecimal literal

2. **Memory-Reference Instructions (MRI)**: AND, ADD, LDA, STA, BUN, BSA, ISZ
   - Take an address operand (label or hex value)
   - An optional trailing ``I`` selects indirect addressing

3. **Register-Reference Instructions (RRI)**: CLA ... HLT
   - No operand, act on the accumulator (AC) and extension register (E)

4. **Input/Output Instructions**: INP, OUT, SKI, SKO, ION, IOF
   - No operand

Source Format
-------------
    [LBL,] MNEMONIC [OPERAND [I]]   / comment

Labels are at most three characters long and may not be a mnemonic.
Comments start with ``/``, ``;`` or ``#``.

All tables here are immutable and every function is pure, so the module can
be shared freely between analysis runs.
"""

import re
import string
from typing import Optional


# =============================================================================
# Machine Constants
# =============================================================================

# Simulated memory size in words (12-bit address space)
MEMORY_SIZE = 4096

# Signed 16-bit range accepted by DEC and HEX
WORD_MIN = -32768
WORD_MAX = 32767

# Comment markers, in the priority order used when stripping inline comments
COMMENT_MARKERS = ("/", ";", "#")

LABEL_SEPARATOR = ","
INDIRECT_MARKER = "I"
MAX_LABEL_LENGTH = 3


# =============================================================================
# Mnemonic Tables
# =============================================================================

PSEUDO_INSTRUCTIONS = ("ORG", "END", "DEC", "HEX")

MRI_INSTRUCTIONS = ("AND", "ADD", "LDA", "STA", "BUN", "BSA", "ISZ")

RRI_INSTRUCTIONS = (
    "CLA", "CLE", "CMA", "CME", "CIR", "CIL",
    "INC", "SPA", "SNA", "SZA", "SZE", "HLT",
)

IO_INSTRUCTIONS = ("INP", "OUT", "SKI", "SKO", "ION", "IOF")

# Every mnemonic the assembler accepts, in table order
KEYWORDS = PSEUDO_INSTRUCTIONS + MRI_INSTRUCTIONS + RRI_INSTRUCTIONS + IO_INSTRUCTIONS

# Words a label may not use. The empty string is here so that a bare
# separator (",LDA 5") is reported as an invalid label.
RESERVED_WORDS = frozenset(KEYWORDS + (INDIRECT_MARKER, ""))

# Instructions that may skip the instruction that follows them
SKIP_INSTRUCTIONS = ("ISZ", "SPA", "SNA", "SZA", "SZE")

# Unconditional transfers of control
JUMP_INSTRUCTIONS = ("BUN", "BSA")


# =============================================================================
# Keyword Descriptions
# =============================================================================
# Shown by the completion provider. "I" is not a mnemonic but is offered as
# a completion because it follows MRI operands.
# =============================================================================

KEYWORD_DESCRIPTIONS: dict[str, str] = {
    "ORG": "Change the address origin for the following instructions.",
    "END": "Point the assembler to stop looking for instructions below this point.",
    "DEC": "Point the assembler that the next value is using decimal notation.",
    "HEX": "Point the assembler that the next value is using hexadecimal notation.",
    "AND": "AND Operation between the Accumulator and the value specified at the given address.",
    "ADD": "ADD Operation between the Accumulator and the value specified at the given address.",
    "LDA": "Load the value specified at the given address into the Accumulator.",
    "STA": "Store the value contained in the Accumulator into the given address.",
    "BUN": "Jump to the given address.",
    "BSA": "Jump to the address next the given address, and store the current value of the PC into the given address.",
    "ISZ": "Increment the value specified at the given address, and if the value is 0 skip the next instruction.",
    "CLA": "Clear the Accumulator.",
    "CLE": "Clear the Extension Register.",
    "CMA": "Complement the Accumulator.",
    "CME": "Complement the Extension Register.",
    "CIR": "Shift to the right all the bits contained in the Accumulator, considering the Extension Register as the 17th bit of the Accumulator.",
    "CIL": "Shift to the left all the bits contained in the Accumulator, considering the Extension Register as the 17th bit of the Accumulator.",
    "INC": "Increment the Accumulator.",
    "SPA": "Skip the next instruction if the Accumulator contains a positive value.",
    "SNA": "Skip the next instruction if the Accumulator contains a negative value.",
    "SZA": "Skip the next instruction if the Accumulator is 0.",
    "SZE": "Skip the next instruction if the Extension Register is 0.",
    "HLT": "Stop the machine.",
    "INP": "Read the 16-bits word input from the keyboard as an ASCII value.",
    "OUT": "Print on the terminal the value of the Accumulator as an ASCII value.",
    "SKI": "Skip the next instruction if the Interrupt flag is true.",
    "SKO": "Skip the next instruction if the Interrupt flag is false.",
    "ION": "Enable the Interrupt mode.",
    "IOF": "Disable the Interrupt mode.",
    INDIRECT_MARKER: "Point the assembler to read the instruction using the indirect memory address cycle.",
}


# =============================================================================
# Mnemonic Classification
# =============================================================================

def is_keyword(token: str) -> bool:
    """Check whether a token is exactly one of the known mnemonics."""
    return token in KEYWORDS


def is_mri(token: str) -> bool:
    """Check whether a token is a memory-reference mnemonic."""
    return token in MRI_INSTRUCTIONS


def _last_token(text: str) -> str:
    parts = text.split()
    return parts[-1] if parts else ""


def is_valid_rri(text: str) -> bool:
    """
    Strict RRI check: the last token of the text is an RRI mnemonic.

    A label in front of the mnemonic is fine ("FIN, HLT"), anything after
    it is not ("HLT 5").
    """
    return _last_token(text) in RRI_INSTRUCTIONS


def is_valid_io(text: str) -> bool:
    """Strict IO check: the last token of the text is an IO mnemonic."""
    return _last_token(text) in IO_INSTRUCTIONS


def is_rri_like(text: str) -> bool:
    """Loose RRI check: an RRI mnemonic appears anywhere in the text."""
    return any(mnemonic in text for mnemonic in RRI_INSTRUCTIONS)


def is_io_like(text: str) -> bool:
    """Loose IO check: an IO mnemonic appears anywhere in the text."""
    return any(mnemonic in text for mnemonic in IO_INSTRUCTIONS)


# =============================================================================
# Labels
# =============================================================================

def is_valid_label(label: str) -> bool:
    """
    Check whether a token can be used as a label.

    Labels are at most three characters and must not collide with a
    mnemonic, the indirect marker or the empty string.

    Examples:
        >>> is_valid_label("FOO")
        True
        >>> is_valid_label("LOOP")
        False
        >>> is_valid_label("LDA")
        False
    """
    if len(label) > MAX_LABEL_LENGTH:
        return False
    return label not in RESERVED_WORDS


# =============================================================================
# Numeric Values
# =============================================================================

_DIGITS = {
    10: string.digits,
    16: string.hexdigits,
}

_HEX_LITERAL = re.compile(r"[+-]?[0-9A-Fa-f]+")


def parse_int_prefix(text: str, base: int = 10) -> Optional[int]:
    """
    Parse the leading integer of a string, ignoring whatever follows it.

    Leading whitespace and one sign character are accepted. Returns None
    when no digit follows.

    Examples:
        >>> parse_int_prefix("12abc")
        12
        >>> parse_int_prefix(" -1F zz", 16)
        -31
        >>> parse_int_prefix("RG 100") is None
        True
    """
    digits = _DIGITS[base]
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    end = 0
    while end < len(text) and text[end] in digits:
        end += 1

    if end == 0:
        return None
    return sign * int(text[:end], base)


def is_valid_address_value(text: str) -> bool:
    """
    Check whether a token is a hexadecimal address inside memory.

    Only hex digits are allowed (no sign, no prefix) and the value must be
    in the range 0 <= value < MEMORY_SIZE.
    """
    if not text or any(c not in string.hexdigits for c in text):
        return False
    return int(text, 16) < MEMORY_SIZE


def is_valid_decimal_value(text: str) -> bool:
    """
    Check a DEC operand.

    The leading integer is parsed leniently (``"12abc"`` reads as 12) and
    must fit in a signed 16-bit word.
    """
    value = parse_int_prefix(text, 10)
    return value is not None and WORD_MIN <= value <= WORD_MAX


def is_valid_hex_value(text: str) -> bool:
    """
    Check a HEX operand.

    Every character after an optional leading sign must be a hex digit and
    the value must fit in a signed 16-bit word.
    """
    text = text.strip()
    if not _HEX_LITERAL.fullmatch(text):
        return False
    return WORD_MIN <= int(text, 16) <= WORD_MAX


def is_valid_literal(mnemonic: str, operand: str) -> bool:
    """Check whether a DEC/HEX statement holds a value usable as data."""
    if mnemonic == "DEC":
        return is_valid_decimal_value(operand)
    if mnemonic == "HEX":
        return is_valid_hex_value(operand)
    return False
