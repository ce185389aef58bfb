# =============================================================================
# test_checks.py - Diagnostic Pass Unit Tests
# =============================================================================
# Tests for the spelling, syntax and logic passes, run through analyze().
#
# Test coverage includes:
#   - Every diagnostic message and its severity
#   - Diagnostic ranges
#   - Stop conditions (END, "END" in memory, ORG mentions in memory)
#   - Indirect addressing target checks
#   - Unreachable HLT detection
#   - Label report (duplicate, unused, invalid)
# =============================================================================

from pdp8_lsp.analyzer import END_OF_LINE, Severity, analyze
from pdp8_lsp.analyzer.checks import (
    MSG_AFTER_END,
    MSG_INVALID_DECIMAL,
    MSG_INVALID_HEX,
    MSG_INVALID_IMA,
    MSG_INVALID_IO,
    MSG_INVALID_ORIGIN,
    MSG_INVALID_RRI,
    MSG_INVALID_TARGET,
    MSG_MISSING_END,
    MSG_MISSING_HLT,
    MSG_MISSING_ORIGIN,
    MSG_UNREACHABLE_HLT,
    _org_jump,
)


def messages(text: str) -> list[str]:
    return [d.message for d in analyze(text)]


CLEAN_PROGRAM = """\
ORG 100
LDA A
ADD B
STA C
HLT
A, DEC 83
B, DEC -23
C, DEC 0
END"""


# =============================================================================
# Clean Program Tests
# =============================================================================

class TestCleanProgram:
    """A well-formed program produces no diagnostics."""

    def test_no_diagnostics(self):
        assert analyze(CLEAN_PROGRAM) == []

    def test_comments_and_blank_lines(self):
        text = "/ adds two numbers\n\nORG 100 / origin\nLDA A ; load\nHLT # stop\nA, DEC 1\nEND\n"
        assert analyze(text) == []


# =============================================================================
# Spelling Pass Tests
# =============================================================================

class TestSpelling:
    """Test unknown mnemonic detection."""

    def test_unknown_mnemonic(self):
        diagnostics = analyze("FOO 5\nHLT\nEND")
        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.message == "Invalid keyword: FOO"
        assert diagnostic.severity is Severity.WARNING
        assert diagnostic.range.start.line == 0
        assert diagnostic.range.start.character == 0
        assert diagnostic.range.end.character == 5

    def test_range_starts_after_label(self):
        diagnostic = analyze("X, FOO\nHLT\nEND")[0]
        assert diagnostic.message == "Invalid keyword: FOO"
        assert diagnostic.range.start.character == 3
        assert diagnostic.range.end.character == 6

    def test_mnemonics_are_case_sensitive(self):
        assert "Invalid keyword: cla" in messages("cla\nHLT\nEND")

    def test_stops_at_end(self):
        """Lines below END are reported by the syntax pass only."""
        assert messages("CLA\nEND\nFOO") == [MSG_AFTER_END, MSG_MISSING_HLT]


# =============================================================================
# Syntax Pass Tests
# =============================================================================

class TestOriginSyntax:
    """Test ORG operand checks."""

    def test_missing_origin(self):
        diagnostics = analyze("ORG\nHLT\nEND")
        assert [d.message for d in diagnostics] == [MSG_MISSING_ORIGIN]
        assert diagnostics[0].severity is Severity.ERROR

    def test_origin_out_of_range(self):
        assert messages("ORG 1000\nHLT\nEND") == [MSG_INVALID_ORIGIN]

    def test_origin_extra_operand(self):
        assert messages("ORG 10 20\nHLT\nEND") == [MSG_INVALID_ORIGIN]


class TestOperandSyntax:
    """Test DEC, HEX and MRI operand checks."""

    def test_invalid_decimal(self):
        diagnostics = analyze("DEC 40000\nHLT\nEND")
        assert [d.message for d in diagnostics] == [MSG_INVALID_DECIMAL]
        assert diagnostics[0].severity is Severity.WARNING

    def test_invalid_hex(self):
        assert messages("HEX XYZ\nHLT\nEND") == [MSG_INVALID_HEX]

    def test_invalid_indirect_marker(self):
        diagnostics = analyze("LDA A X\nHLT\nA, DEC 1\nEND")
        assert [d.message for d in diagnostics] == [MSG_INVALID_IMA]
        assert diagnostics[0].severity is Severity.WARNING


class TestProgramStructure:
    """Test END and HLT presence checks."""

    def test_missing_end(self):
        diagnostics = analyze("CLA\nHLT")
        assert [d.message for d in diagnostics] == [MSG_MISSING_END]
        assert diagnostics[0].line == 1
        assert diagnostics[0].severity is Severity.ERROR

    def test_missing_hlt(self):
        diagnostics = analyze("CLA\nEND")
        assert [d.message for d in diagnostics] == [MSG_MISSING_HLT]
        assert diagnostics[0].line == 1

    def test_missing_both(self):
        assert messages("CLA") == [MSG_MISSING_END, MSG_MISSING_HLT]

    def test_statements_after_end(self):
        diagnostics = analyze("HLT\nEND\nCLA\n\nFOO")
        assert [d.message for d in diagnostics] == [MSG_AFTER_END, MSG_AFTER_END]
        assert [d.line for d in diagnostics] == [2, 4]
        assert all(d.severity is Severity.INFORMATION for d in diagnostics)


class TestMemorySyntax:
    """Test the checks run over the memory image."""

    def test_unresolved_label(self):
        diagnostics = analyze("LDA FOO\nHLT\nEND")
        assert [d.message for d in diagnostics] == ["Unresolved label FOO."]
        assert diagnostics[0].severity is Severity.WARNING
        assert diagnostics[0].range.end.character == END_OF_LINE

    def test_invalid_rri(self):
        diagnostics = analyze("CLA 5\nHLT\nEND")
        assert [d.message for d in diagnostics] == [MSG_INVALID_RRI]
        assert diagnostics[0].severity is Severity.ERROR

    def test_invalid_io(self):
        assert messages("OUT 1\nHLT\nEND") == [MSG_INVALID_IO]

    def test_labelled_rri_is_valid(self):
        assert MSG_INVALID_RRI not in messages("X, CLA\nHLT\nEND")

    def test_end_operand_stops_scan(self):
        """A cell mentioning END ends both memory scans."""
        assert messages("HEX END\nCLA 5\nHLT\nEND") == [MSG_INVALID_HEX]

    def test_org_mention_stops_scan(self):
        """An operand named ORG ends the scan before anything is reported."""
        assert analyze("LDA ORG\nCLA 5\nHLT\nEND") == []

    def test_org_jump_reads_number_past_column_16(self):
        assert _org_jump("X" * 16 + "20ORG") == 20

    def test_org_jump_within_first_columns(self):
        assert _org_jump("LDA UNK-ORG|1") is None


# =============================================================================
# Logic Pass Tests
# =============================================================================

class TestDuplicateOrigin:
    """Test detection of origins that overwrite earlier code."""

    def test_duplicate_origin(self):
        diagnostics = analyze("ORG 10\nHLT\nORG 10\nCLA\nEND")
        assert len(diagnostics) == 1
        assert diagnostics[0].message == (
            "ORG Instructions duplicate at line 1, causing an overwrite "
            "of the previous instructions."
        )
        assert diagnostics[0].line == 2
        assert diagnostics[0].severity is Severity.ERROR

    def test_cites_first_occurrence(self):
        diagnostics = analyze("ORG 10\nHLT\nORG 10\nCLA\nORG 10\nCLE\nEND")
        assert [d.line for d in diagnostics] == [2, 4]
        assert all("at line 1," in d.message for d in diagnostics)


class TestMemoryReferences:
    """Test that MRI operands point at data."""

    def test_target_not_data(self):
        diagnostics = analyze("LDA A\nHLT\nA, CLA\nEND")
        assert [d.message for d in diagnostics] == [MSG_INVALID_TARGET]
        assert diagnostics[0].line == 0
        assert diagnostics[0].severity is Severity.WARNING

    def test_target_empty_cell(self):
        assert messages("LDA 0100\nHLT\nEND") == [MSG_INVALID_TARGET]

    def test_indirect_valid(self):
        text = "LDA P I\nHLT\nP, HEX 3\nD, DEC 7\nEND"
        assert MSG_INVALID_TARGET not in messages(text)

    def test_indirect_pointer_to_empty_cell(self):
        assert messages("LDA P I\nHLT\nP, DEC 100\nEND") == [MSG_INVALID_TARGET]

    def test_indirect_pointer_outside_memory(self):
        assert messages("LDA P I\nHLT\nP, DEC 5000\nEND") == [MSG_INVALID_TARGET]

    def test_label_past_end_of_memory(self):
        """A is bound to 4096, one past the last cell."""
        diagnostics = analyze("ORG FFE\nLDA A\nCLA\nA, DEC 1\nHLT\nEND")
        assert [d.message for d in diagnostics] == [MSG_INVALID_TARGET]
        assert diagnostics[0].line == 1

    def test_indirect_label_past_end_of_memory(self):
        assert messages("ORG FFF\nLDA A I\nA, DEC 1\nHLT\nEND") == [MSG_INVALID_TARGET]

    def test_unresolved_cells_skipped(self):
        assert MSG_INVALID_TARGET not in messages("LDA FOO\nHLT\nEND")


class TestUnreachableHalt:
    """Test detection of HLT behind an unconditional jump."""

    def test_unreachable(self):
        diagnostics = analyze("CLA\nBUN A\nHLT\nA, DEC 0\nEND")
        assert [d.message for d in diagnostics] == [MSG_UNREACHABLE_HLT]
        assert diagnostics[0].line == 2
        assert diagnostics[0].severity is Severity.WARNING

    def test_skip_makes_reachable(self):
        assert analyze("SZA\nBUN A\nHLT\nA, DEC 0\nEND") == []

    def test_hlt_at_start(self):
        assert analyze("HLT\nEND") == []


class TestLabelReport:
    """Test duplicate, unused and invalid label diagnostics."""

    def test_duplicate_label(self):
        diagnostics = analyze("A, DEC 1\nA, DEC 2\nLDA A\nHLT\nEND")
        assert [d.message for d in diagnostics] == ['Duplicate label: "A" at previous line 1']
        assert diagnostics[0].line == 1
        assert diagnostics[0].severity is Severity.WARNING

    def test_unused_label(self):
        diagnostics = analyze("CLA\nX, HLT\nEND")
        assert [d.message for d in diagnostics] == [
            'Unused label: "X", is better to remove it to prevent bad usage of the RAM'
        ]
        assert diagnostics[0].line == 1
        assert diagnostics[0].severity is Severity.INFORMATION

    def test_invalid_label(self):
        diagnostics = analyze("LOOP, CLA\nHLT\nEND")
        assert [d.message for d in diagnostics] == ['Invalid label: "LOOP"']
        assert diagnostics[0].severity is Severity.ERROR
        assert diagnostics[0].range.start.character == 0
        assert diagnostics[0].range.end.character == END_OF_LINE
