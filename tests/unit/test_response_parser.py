"""Tests for review_assistant.services.response_parser."""

from review_assistant.models.schemas import AnalysisResult
from review_assistant.services.response_parser import extract_code_change, parse_analysis

# ── parse_analysis ───────────────────────────────────────────────────────────


class TestParseAnalysis:
    def test_all_sections(self):
        result = parse_analysis("OVERVIEW: A\nANALYSIS: B\nCHANGES: C\nRISKS: D")
        assert result == AnalysisResult(overview="A", analysis="B", changes="C", risks="D")

    def test_missing_sections_default_to_empty(self):
        result = parse_analysis("OVERVIEW: A")
        assert result.overview == "A"
        assert result.analysis == ""
        assert result.changes == ""
        assert result.risks == ""

    def test_empty_text(self):
        assert parse_analysis("") == AnalysisResult()

    def test_no_labels(self):
        assert parse_analysis("The model ignored the format.") == AnalysisResult()

    def test_multiline_section_body(self):
        raw = (
            "OVERVIEW: A small CLI.\n"
            "ANALYSIS: - uses globals\n"
            "- no tests\n"
            "RISKS: none"
        )
        result = parse_analysis(raw)
        assert result.analysis == "- uses globals\n- no tests"
        assert result.risks == "none"

    def test_sections_out_of_order(self):
        result = parse_analysis("RISKS: D\nOVERVIEW: A")
        assert result.overview == "A"
        assert result.risks == "D"

    def test_other_label_ends_section(self):
        # Any "word:" at line start starts a new segment, known label or not
        result = parse_analysis("OVERVIEW: A\nNote: unrelated\nCHANGES: C")
        assert result.overview == "A"
        assert result.changes == "C"

    def test_label_inside_line_does_not_split(self):
        result = parse_analysis("OVERVIEW: see CHANGES: below")
        assert result.overview == "see CHANGES: below"
        assert result.changes == ""

    def test_first_matching_segment_wins(self):
        result = parse_analysis("OVERVIEW: first\nOVERVIEW: second")
        assert result.overview == "first"

    def test_preamble_before_first_label_is_ignored(self):
        result = parse_analysis("Sure, here is the review.\nOVERVIEW: A")
        assert result.overview == "A"

    def test_lowercase_label_not_recognized(self):
        assert parse_analysis("overview: A").overview == ""

    def test_whitespace_trimmed(self):
        assert parse_analysis("OVERVIEW:    A   \n").overview == "A"


# ── extract_code_change ──────────────────────────────────────────────────────


class TestExtractCodeChange:
    def test_markers_present(self):
        change = extract_code_change("Here is why.\nCODE_START\nconst x = 1;\nCODE_END")
        assert change is not None
        assert change.description == "Here is why."
        assert change.content == "const x = 1;"

    def test_no_markers(self):
        assert extract_code_change("no markers here") is None

    def test_empty_text(self):
        assert extract_code_change("") is None

    def test_only_start_marker(self):
        assert extract_code_change("Intro\nCODE_START\nx = 1\n") is None

    def test_multiline_content_preserved(self):
        raw = "Refactor.\nCODE_START\ndef f():\n    return 1\nCODE_END\nDone."
        change = extract_code_change(raw)
        assert change.content == "def f():\n    return 1"
        assert change.description == "Refactor."

    def test_first_block_wins(self):
        raw = "A\nCODE_START\none\nCODE_END\nB\nCODE_START\ntwo\nCODE_END"
        change = extract_code_change(raw)
        assert change.content == "one"
        assert change.description == "A"

    def test_no_description(self):
        change = extract_code_change("CODE_START\nx = 1\nCODE_END")
        assert change.description == ""
        assert change.content == "x = 1"
