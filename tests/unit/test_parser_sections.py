"""Tests for section location and bounded section scans."""

import pytest

from src.parser.sections import (
    BACK_COVER,
    KEYWORDS,
    SALES_LABEL,
    SALESLETTER,
    SectionLocator,
    count_html_tags,
    detect_html_start,
    find_first,
    scan_section,
    stop_rules_for,
)


class TestHeaderRules:
    def test_exact_rule_is_case_insensitive(self):
        assert SALESLETTER.matches("SalesLetter")
        assert KEYWORDS.matches("keywords")

    def test_exact_rule_rejects_extra_text(self):
        assert not KEYWORDS.matches("KEYWORDS:")
        assert not SALESLETTER.matches("SALESLETTER draft")

    def test_contains_rule(self):
        assert BACK_COVER.matches("--- Back Book Cover ---")
        assert SALES_LABEL.matches("Amazon Book Description (final)")
        assert SALES_LABEL.matches("Sales Copy")

    def test_find_first(self):
        lines = ["a", "Back Book Cover", "b", "BACK BOOK COVER"]
        assert find_first(lines, BACK_COVER) == 1
        assert find_first(["nothing"], BACK_COVER) is None


class TestStopRules:
    def test_excludes_own_rules(self):
        rules = stop_rules_for("sales")
        assert SALESLETTER not in rules
        assert SALES_LABEL not in rules
        assert BACK_COVER in rules
        assert KEYWORDS in rules

    def test_unknown_section(self):
        with pytest.raises(ValueError):
            stop_rules_for("preface")


class TestHtmlDetection:
    def test_counts_tags(self):
        assert count_html_tags("<p>Hello</p><strong>World</strong><br>") == 5
        assert count_html_tags("plain text") == 0

    def test_counts_case_insensitively(self):
        assert count_html_tags("<P>x</P><BR>") == 3

    def test_attributes_do_not_count(self):
        assert count_html_tags('<p class="x">hi</p>') == 1

    def test_first_line_reaching_threshold_wins(self):
        lines = [
            "Intro <em>one</em>",
            "<p>Hello</p><strong>World</strong><br>",
            "<div><p><span>later</span></p></div>",
        ]
        assert detect_html_start(lines) == 1

    def test_tags_spread_across_lines_not_detected(self):
        lines = ["<p>", "text", "</p>", "<br>"]
        assert detect_html_start(lines) is None


class TestScanSection:
    def test_stops_before_other_header(self):
        lines = ["SALESLETTER", "one", "two", "KEYWORDS", "kw"]
        body = list(scan_section(lines, 0, stop_rules_for("sales")))
        assert body == ["one", "two"]

    def test_runs_to_end_without_stop(self):
        lines = ["Back Book Cover", "one", "two"]
        assert list(scan_section(lines, 0, stop_rules_for("back_cover"))) == ["one", "two"]

    def test_inclusive_start(self):
        lines = ["<p>a</p><br>", "b", "AI LLM"]
        body = list(scan_section(lines, 0, stop_rules_for("sales"), inclusive=True))
        assert body == ["<p>a</p><br>", "b"]

    def test_missing_start(self):
        assert list(scan_section(["a", "b"], None, [])) == []

    def test_own_header_repeated_does_not_stop(self):
        lines = ["SALESLETTER", "one", "Sales Copy notes", "two", "AI LLM"]
        body = list(scan_section(lines, 0, stop_rules_for("sales")))
        assert body == ["one", "Sales Copy notes", "two"]


class TestSectionLocator:
    def test_locates_all_sections(self):
        lines = [
            "Title: Sub",
            "SALESLETTER",
            "copy",
            "Back Book Cover",
            "blurb",
            "AI LLM",
            "Claude",
            "AI Image Generator",
            "Canva",
            "KEYWORDS",
            "a, b",
            "Image Prompts",
            "1. x",
        ]
        index = SectionLocator().locate(lines)
        assert index.sales == 1
        assert index.sales_inclusive is False
        assert index.back_cover == 3
        assert index.ai_llm == 5
        assert index.ai_image_generator == 7
        assert index.keywords == 9
        assert index.image_prompts == 11

    def test_salesletter_beats_earlier_label(self):
        lines = ["Sales Copy", "x", "SALESLETTER", "y"]
        index = SectionLocator().locate(lines)
        assert index.sales == 2

    def test_label_beats_html(self):
        lines = ["<p>a</p><p>b</p>", "Book Description", "copy"]
        index = SectionLocator().locate(lines)
        assert index.sales == 1
        assert index.sales_inclusive is False

    def test_html_fallback_is_inclusive(self):
        lines = ["Title: Sub", "<p>Hello</p><strong>World</strong><br>", "more"]
        index = SectionLocator().locate(lines)
        assert index.sales == 1
        assert index.sales_inclusive is True

    def test_missing_sections_are_none(self):
        index = SectionLocator().locate(["just text"])
        assert index.found() == {}

    def test_keywords_requires_exact_line(self):
        index = SectionLocator().locate(["Keywords: a, b"])
        assert index.keywords is None

    def test_custom_html_threshold(self):
        index = SectionLocator(html_threshold=2).locate(["<p>a</p>"])
        assert index.sales == 0
