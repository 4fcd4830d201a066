# -*- coding: utf-8 -*-
"""
Tests for SEO link injection.

Covers the scan phase (heading and markup exclusion, caps, casing),
the backfill phase (spread insertion), and the documented behaviour of
applying rules in sequence.
"""

from wp_article_pipeline.config import PipelineConfig
from wp_article_pipeline.link_injector import (
    apply_rule,
    backfill_links,
    build_anchor,
    choose_backfill_indices,
    find_paragraph_closings,
    inject_seo_links,
    inject_seo_links_with_report,
    link_keyword_in_segments,
)
from wp_article_pipeline.html_scanner import join_segments, scan_segments
from wp_article_pipeline.models import SeoLinkRule


def anchor(url: str, text: str) -> str:
    return f'<a href="{url}" target="_blank" rel="noopener">{text}</a>'


X = "https://x.com"


class TestBuildAnchor:
    """Tests for anchor markup."""

    def test_default_attributes(self):
        """Test the default anchor opens in a new tab with noopener."""
        assert build_anchor(X, "iPhone") == anchor(X, "iPhone")

    def test_configured_rel(self):
        """Test rel comes from config."""
        config = PipelineConfig(link_rel="nofollow noopener")
        assert 'rel="nofollow noopener"' in build_anchor(X, "a", config)

    def test_no_attributes(self):
        """Test empty target and rel give a bare anchor."""
        config = PipelineConfig(link_target="", link_rel="")
        assert build_anchor(X, "a", config) == f'<a href="{X}">a</a>'


class TestScanPhase:
    """Tests for linking keyword occurrences in text."""

    def test_heading_exclusion(self):
        """Test the keyword is linked in the paragraph but never in the heading."""
        content = "<h2>Buy iPhone Now</h2><p>The iPhone is great.</p>"
        rule = SeoLinkRule("iPhone", X, 5)

        result = inject_seo_links(content, [rule])

        assert result.startswith("<h2>Buy iPhone Now</h2>")
        assert result == (
            "<h2>Buy iPhone Now</h2>"
            f"<p>The {anchor(X, 'iPhone')} is great.</p>"
            f"<p>{anchor(X, 'iPhone')}</p>"
        )

    def test_heading_with_nested_markup(self):
        """Test inline tags inside a heading do not end the heading."""
        content = '<h3 class="t">Cheap <em>dog</em> food</h3><p>Feed your dog.</p>'
        result = inject_seo_links(content, [SeoLinkRule("dog", X, 1)])

        assert result == (
            '<h3 class="t">Cheap <em>dog</em> food</h3>'
            f"<p>Feed your {anchor(X, 'dog')}.</p>"
        )

    def test_quota_respected(self):
        """Test only max_count occurrences are linked; the rest are untouched."""
        content = "<p>Cat and cat and CAT.</p>"
        result = inject_seo_links(content, [SeoLinkRule("cat", X, 2)])

        assert result == f"<p>{anchor(X, 'Cat')} and {anchor(X, 'cat')} and CAT.</p>"

    def test_counter_spans_segments(self):
        """Test the cap counts across the whole document, not per paragraph."""
        content = "<p>dog</p><p>dog</p><p>dog</p>"
        result = inject_seo_links(content, [SeoLinkRule("dog", X, 2)])

        assert result == f"<p>{anchor(X, 'dog')}</p><p>{anchor(X, 'dog')}</p><p>dog</p>"

    def test_preserves_matched_casing(self):
        """Test matching ignores case and anchors keep the original text."""
        content = "<p>IPHONE and iphone</p>"
        result = inject_seo_links(content, [SeoLinkRule("iPhone", X, 2)])

        assert anchor(X, "IPHONE") in result
        assert anchor(X, "iphone") in result

    def test_markup_is_never_modified(self):
        """Test keywords inside tag attributes are not linked."""
        content = '<p><a href="https://shop.example/widget">Shop</a> widget</p>'
        result = inject_seo_links(content, [SeoLinkRule("widget", X, 1)])

        assert result == (
            f'<p><a href="https://shop.example/widget">Shop</a> {anchor(X, "widget")}</p>'
        )

    def test_regex_metacharacters_are_literal(self):
        """Test keywords are matched literally."""
        content = "<p>Learn C++ (2024) today</p>"
        result = inject_seo_links(content, [SeoLinkRule("C++ (2024)", X, 1)])
        assert result == f"<p>Learn {anchor(X, 'C++ (2024)')} today</p>"

    def test_dot_does_not_match_any_character(self):
        """Test '.' in a keyword only matches a dot."""
        result = inject_seo_links("<p>axb</p>", [SeoLinkRule("a.b", X, 1)])

        assert result.startswith("<p>axb</p>")
        assert result == f"<p>axb</p><p>{anchor(X, 'a.b')}</p>"

    def test_segments_function_returns_count(self):
        """Test the scan accumulator reports the replacement count."""
        segments = scan_segments("<h1>dog</h1><p>dog dog</p>")
        new_segments, count = link_keyword_in_segments(segments, SeoLinkRule("dog", X, 5))

        assert count == 2
        assert join_segments(new_segments).startswith("<h1>dog</h1>")


class TestBackfillIndices:
    """Tests for choosing backfill paragraphs."""

    def test_five_paragraphs_two_links(self):
        """Test picks with interval 1."""
        assert choose_backfill_indices(5, 2) == [0, 1]

    def test_ten_paragraphs_two_links(self):
        """Test picks are spread with a larger interval."""
        assert choose_backfill_indices(10, 2) == [2, 5]

    def test_four_paragraphs_one_link(self):
        """Test a single pick lands mid-document."""
        assert choose_backfill_indices(4, 1) == [1]

    def test_more_links_than_paragraphs(self):
        """Test picks are deduplicated and bounded by paragraph count."""
        assert choose_backfill_indices(1, 4) == [0]
        assert choose_backfill_indices(2, 5) == [0, 1]

    def test_nothing_to_do(self):
        """Test no picks without paragraphs or shortfall."""
        assert choose_backfill_indices(0, 3) == []
        assert choose_backfill_indices(3, 0) == []


class TestBackfillPhase:
    """Tests for inserting new keyword paragraphs."""

    def test_backfill_spreads_insertions(self):
        """Test two links go after distinct early paragraphs, not at the end."""
        content = "<p>One</p><p>Two</p><p>Three</p><p>Four</p><p>Five</p>"
        result = inject_seo_links(content, [SeoLinkRule("widget", X, 2)])
        link = f"<p>{anchor(X, 'widget')}</p>"

        assert result.count(link) == 2
        assert result == (
            f"<p>One</p>{link}<p>Two</p>{link}<p>Three</p><p>Four</p><p>Five</p>"
        )
        assert not result.endswith(link)

    def test_uppercase_paragraph_tags(self):
        """Test closing tags are found case-insensitively."""
        result = inject_seo_links("<P>Intro</P>", [SeoLinkRule("deal", X, 1)])
        assert result == f"<P>Intro</P><p>{anchor(X, 'deal')}</p>"

    def test_no_paragraphs_skips(self):
        """Test content without paragraphs is left alone."""
        content = "<h2>Title</h2><div>text</div>"
        assert inject_seo_links(content, [SeoLinkRule("missing", X, 1)]) == content

    def test_zero_remaining_does_nothing(self):
        """Test a non-positive shortfall inserts nothing."""
        content = "<p>One</p>"
        rule = SeoLinkRule("widget", X, 1)
        assert backfill_links(content, rule, 0) == (content, 0)
        assert backfill_links(content, rule, -2) == (content, 0)

    def test_guard_inserts_inline_before_last_paragraph(self, monkeypatch):
        """Test the guard path links inline before the last </p> when no closings are reported."""
        monkeypatch.setattr(
            "wp_article_pipeline.link_injector.find_paragraph_closings", lambda content: []
        )
        result, inserted = backfill_links("<p>One</p><p>Two</p>", SeoLinkRule("k", X, 1), 1)

        assert inserted == 1
        assert result == f"<p>One</p><p>Two {anchor(X, 'k')}</p>"

    def test_backfill_counts_insertions(self):
        """Test the backfill reports how many links it added."""
        _, inserted = backfill_links("<p>a</p><p>b</p><p>c</p>", SeoLinkRule("k", X, 3), 3)
        assert inserted == 3

    def test_paragraph_closings(self):
        """Test closing paragraph offsets are reported in order."""
        positions = find_paragraph_closings("<p>a</p><p>b</p>")
        assert [p.offset for p in positions] == [8, 16]


class TestRuleHandling:
    """Tests for rule-level behaviour."""

    def test_empty_rules_is_identity(self, sample_article_html: str):
        """Test no rules returns the content unchanged."""
        assert inject_seo_links(sample_article_html, []) == sample_article_html

    def test_empty_keyword_or_url_skipped(self, sample_article_html: str):
        """Test incomplete rules are skipped, not errors."""
        rules = [SeoLinkRule("", X, 2), SeoLinkRule("laptop", "", 2)]
        html, reports = inject_seo_links_with_report(sample_article_html, rules)

        assert html == sample_article_html
        assert all(r.skipped for r in reports)

    def test_zero_max_count(self):
        """Test max_count 0 links nothing and backfills nothing."""
        content = "<p>cat</p>"
        assert inject_seo_links(content, [SeoLinkRule("cat", X, 0)]) == content

    def test_negative_max_count(self):
        """Test a negative max_count is treated as no quota."""
        content = "<p>cat</p>"
        assert inject_seo_links(content, [SeoLinkRule("cat", X, -2)]) == content

    def test_report_counts(self, sample_article_html: str, sample_rules):
        """Test reports split scan links from backfilled ones."""
        _, reports = inject_seo_links_with_report(sample_article_html, sample_rules)
        laptop, battery = reports

        assert laptop.linked_in_text == 2
        assert laptop.backfilled == 0
        # The "Batteries" heading is skipped
        assert battery.linked_in_text == 1
        assert battery.shortfall == 0

    def test_apply_rule_skips_headings_in_fixture(self, sample_article_html: str):
        """Test heading text in a realistic article is never linked."""
        html, report = apply_rule(
            sample_article_html, SeoLinkRule("laptop", X, 10)
        )

        assert "<h2>Choosing a Laptop</h2>" in html
        assert "<h3>Laptop Batteries</h3>" in html
        # The third "laptop" is inside an href and stays untouched
        assert report.linked_in_text == 2
        assert report.backfilled == 3


class TestSequentialRules:
    """Characterization tests for rules applied in sequence."""

    def test_later_rule_links_inside_earlier_anchor(self):
        """Test a later rule sees and may nest inside an earlier rule's anchor."""
        a_url = "https://a.example"
        b_url = "https://b.example"
        rules = [
            SeoLinkRule("phone deals", a_url, 1),
            SeoLinkRule("phone", b_url, 1),
        ]

        result = inject_seo_links("<p>Best phone deals</p>", rules)

        assert result == (
            f'<p>Best <a href="{a_url}" target="_blank" rel="noopener">'
            f"{anchor(b_url, 'phone')} deals</a></p>"
        )

    def test_rerun_is_not_idempotent(self):
        """Test running twice adds links again, since backfilled text is new text."""
        rule = SeoLinkRule("deal", X, 1)

        first = inject_seo_links("<p>Intro</p>", [rule])
        second = inject_seo_links(first, [rule])

        assert first == f"<p>Intro</p><p>{anchor(X, 'deal')}</p>"
        assert second != first
        assert second.count("<a ") == 2
