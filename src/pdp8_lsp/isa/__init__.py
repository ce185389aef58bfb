"""
PDP-8 Analyzer ISA Package
==========================

Instruction set definitions shared by the analysis passes and the
completion provider.

Modules:
    basic: mnemonic tables, keyword descriptions and value validators.

Usage:
    from pdp8_lsp.isa import (
        KEYWORDS,
        is_mri,
        is_valid_label,
    )
"""

from pdp8_lsp.isa.basic import (
    # Machine constants
    MEMORY_SIZE,
    WORD_MIN,
    WORD_MAX,
    COMMENT_MARKERS,
    LABEL_SEPARATOR,
    INDIRECT_MARKER,
    MAX_LABEL_LENGTH,
    # Mnemonic tables
    PSEUDO_INSTRUCTIONS,
    MRI_INSTRUCTIONS,
    RRI_INSTRUCTIONS,
    IO_INSTRUCTIONS,
    KEYWORDS,
    RESERVED_WORDS,
    SKIP_INSTRUCTIONS,
    JUMP_INSTRUCTIONS,
    KEYWORD_DESCRIPTIONS,
    # Classification
    is_keyword,
    is_mri,
    is_valid_rri,
    is_valid_io,
    is_rri_like,
    is_io_like,
    is_valid_label,
    # Values
    parse_int_prefix,
    is_valid_address_value,
    is_valid_decimal_value,
    is_valid_hex_value,
    is_valid_literal,
)

__all__ = [
    # Machine constants
    "MEMORY_SIZE",
    "WORD_MIN",
    "WORD_MAX",
    "COMMENT_MARKERS",
    "LABEL_SEPARATOR",
    "INDIRECT_MARKER",
    "MAX_LABEL_LENGTH",
    # Mnemonic tables
    "PSEUDO_INSTRUCTIONS",
    "MRI_INSTRUCTIONS",
    "RRI_INSTRUCTIONS",
    "IO_INSTRUCTIONS",
    "KEYWORDS",
    "RESERVED_WORDS",
    "SKIP_INSTRUCTIONS",
    "JUMP_INSTRUCTIONS",
    "KEYWORD_DESCRIPTIONS",
    # Classification
    "is_keyword",
    "is_mri",
    "is_valid_rri",
    "is_valid_io",
    "is_rri_like",
    "is_io_like",
    "is_valid_label",
    # Values
    "parse_int_prefix",
    "is_valid_address_value",
    "is_valid_decimal_value",
    "is_valid_hex_value",
    "is_valid_literal",
]
