# -*- coding: utf-8 -*-
"""
SEO link injection for article HTML.

Each SeoLinkRule turns up to max_count occurrences of its keyword into
anchors pointing at the rule's url. Rules are applied one after another:

1. Scan - walk the tag/text segments, skipping heading text and markup,
   and wrap case-insensitive keyword matches in anchors. The replacement
   count spans the whole document.
2. Backfill - if the scan fell short of max_count, add new
   <p><a>keyword</a></p> paragraphs spread evenly after existing </p> tags.

Each rule sees the output of the previous one, so a later rule may link
text inside an earlier rule's anchor. Running the injector again over its
own output adds more links, since backfilled paragraphs are new text.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from .config import PipelineConfig
from .html_scanner import find_tag_positions, join_segments, scan_segments
from .models import (
    HtmlSegment,
    InsertionPosition,
    LinkInjectionReport,
    SegmentKind,
    SeoLinkRule,
)

logger = logging.getLogger(__name__)

PARAGRAPH_CLOSE_RE = re.compile(r"</p>", re.IGNORECASE)


@dataclass(frozen=True)
class ScanState:
    """Accumulator threaded through a scan pass."""
    inside_heading: bool = False
    replacements: int = 0


def build_anchor(url: str, text: str, config: Optional[PipelineConfig] = None) -> str:
    """
    Build the anchor markup for an injected link.

    Args:
        url: Link target.
        text: Anchor text.
        config: Pipeline config supplying target/rel attributes.

    Returns:
        '<a href="url" target="_blank" rel="noopener">text</a>' by default.
    """
    config = config or PipelineConfig()
    attributes = config.anchor_attributes
    if attributes:
        return f'<a href="{url}" {attributes}>{text}</a>'
    return f'<a href="{url}">{text}</a>'


def keyword_pattern(keyword: str) -> re.Pattern:
    """Compile a case-insensitive pattern matching keyword literally."""
    return re.compile(re.escape(keyword), re.IGNORECASE)


def link_text_segment(
    text: str,
    pattern: re.Pattern,
    rule: SeoLinkRule,
    replacements: int,
    config: Optional[PipelineConfig] = None,
) -> tuple[str, int]:
    """
    Wrap keyword matches in one text segment while under the rule's cap.

    Args:
        text: Text segment (no markup).
        pattern: Compiled keyword pattern.
        rule: The rule being applied.
        replacements: Replacements made so far in the document.
        config: Pipeline config for anchor markup.

    Returns:
        Tuple of (new_text, replacements).
    """
    if replacements >= rule.max_count:
        return text, replacements

    pieces: list[str] = []
    last = 0
    for match in pattern.finditer(text):
        if replacements >= rule.max_count:
            break
        pieces.append(text[last:match.start()])
        pieces.append(build_anchor(rule.url, match.group(0), config))
        last = match.end()
        replacements += 1

    if not pieces:
        return text, replacements

    pieces.append(text[last:])
    return "".join(pieces), replacements


def link_keyword_in_segments(
    segments: Sequence[HtmlSegment],
    rule: SeoLinkRule,
    config: Optional[PipelineConfig] = None,
) -> tuple[list[HtmlSegment], int]:
    """
    Scan phase: link keyword occurrences outside headings and markup.

    Args:
        segments: Segments of the current content.
        rule: The rule being applied.
        config: Pipeline config for anchor markup.

    Returns:
        Tuple of (new_segments, replacement_count).
    """
    pattern = keyword_pattern(rule.keyword)
    state = ScanState()
    result: list[HtmlSegment] = []

    for segment in segments:
        if segment.heading_open:
            state = ScanState(True, state.replacements)
            result.append(segment)
            continue
        if segment.heading_close:
            state = ScanState(False, state.replacements)
            result.append(segment)
            continue
        if segment.is_tag or state.inside_heading:
            result.append(segment)
            continue

        text, count = link_text_segment(
            segment.text, pattern, rule, state.replacements, config
        )
        state = ScanState(state.inside_heading, count)
        result.append(HtmlSegment(SegmentKind.TEXT, text))

    return result, state.replacements


def find_paragraph_closings(content: str) -> list[InsertionPosition]:
    """Offsets just past every </p> tag, in document order."""
    return find_tag_positions(content, PARAGRAPH_CLOSE_RE)


def choose_backfill_indices(total_paragraphs: int, remaining: int) -> list[int]:
    """
    Pick paragraph indices to insert after, spread across the document.

    interval = max(1, total // (remaining + 1)); the i-th pick is
    min(interval * (i + 1) - 1, total - 1). Duplicates are dropped.

    Args:
        total_paragraphs: Number of </p> tags.
        remaining: Links still needed.

    Returns:
        Distinct paragraph indices in pick order.
    """
    if total_paragraphs <= 0 or remaining <= 0:
        return []

    interval = max(1, total_paragraphs // (remaining + 1))
    indices: list[int] = []
    for i in range(min(remaining, total_paragraphs)):
        index = min(interval * (i + 1) - 1, total_paragraphs - 1)
        if index not in indices:
            indices.append(index)
    return indices


def backfill_links(
    content: str,
    rule: SeoLinkRule,
    remaining: int,
    config: Optional[PipelineConfig] = None,
) -> tuple[str, int]:
    """
    Backfill phase: add keyword+link paragraphs after existing paragraphs.

    Args:
        content: Content after the scan phase.
        rule: The rule being applied.
        remaining: Links still needed (values <= 0 do nothing).
        config: Pipeline config for anchor markup.

    Returns:
        Tuple of (new_content, links_inserted).
    """
    if remaining <= 0:
        return content, 0

    anchor = build_anchor(rule.url, rule.keyword, config)
    closings = find_paragraph_closings(content)

    if not closings:
        # Unreachable while closings are matched case-insensitively; kept as a guard
        last_close = content.rfind("</p>")
        if last_close == -1:
            logger.info(
                f"No paragraph to anchor backfill for '{rule.keyword}', "
                f"skipping {remaining} link(s)"
            )
            return content, 0
        return content[:last_close] + f" {anchor}" + content[last_close:], 1

    indices = choose_backfill_indices(len(closings), remaining)
    link_paragraph = f"<p>{anchor}</p>"

    result = content
    inserted = 0
    for index in sorted(indices, reverse=True):
        if inserted >= remaining:
            break
        offset = closings[index].offset
        result = result[:offset] + link_paragraph + result[offset:]
        inserted += 1

    return result, inserted


def apply_rule(
    content: str,
    rule: SeoLinkRule,
    config: Optional[PipelineConfig] = None,
) -> tuple[str, LinkInjectionReport]:
    """
    Apply one rule: scan, then backfill any shortfall.

    Args:
        content: Current HTML.
        rule: Rule to apply.
        config: Pipeline config for anchor markup.

    Returns:
        Tuple of (new_content, report).
    """
    report = LinkInjectionReport(
        keyword=rule.keyword, url=rule.url, max_count=rule.max_count
    )
    if not rule.is_applicable:
        report.skipped = True
        return content, report

    segments, replaced = link_keyword_in_segments(scan_segments(content), rule, config)
    result = join_segments(segments)
    report.linked_in_text = replaced

    remaining = max(0, rule.max_count - replaced)
    if remaining > 0:
        result, report.backfilled = backfill_links(result, rule, remaining, config)

    return result, report


def inject_seo_links_with_report(
    content: str,
    rules: Sequence[SeoLinkRule],
    config: Optional[PipelineConfig] = None,
) -> tuple[str, list[LinkInjectionReport]]:
    """
    Apply every rule in order and report what each one did.

    Args:
        content: Article HTML.
        rules: Rules in application order.
        config: Pipeline config for anchor markup.

    Returns:
        Tuple of (html, reports), one report per rule.
    """
    if not rules:
        return content, []

    result = content
    reports: list[LinkInjectionReport] = []
    for rule in rules:
        result, report = apply_rule(result, rule, config)
        reports.append(report)
        if report.skipped:
            logger.debug(f"Skipped SEO link rule with empty keyword or url: {rule!r}")
        else:
            logger.info(
                f"SEO link '{rule.keyword}': {report.linked_in_text} in text, "
                f"{report.backfilled} backfilled (max {rule.max_count})"
            )

    return result, reports


def inject_seo_links(
    content: str,
    rules: Sequence[SeoLinkRule],
    config: Optional[PipelineConfig] = None,
) -> str:
    """
    Insert SEO links into article HTML.

    Never raises. Rules with an empty keyword or url are skipped.

    Args:
        content: Article HTML.
        rules: Rules in application order.
        config: Pipeline config for anchor markup.

    Returns:
        HTML with links inserted; content unchanged when rules is empty.
    """
    html, _ = inject_seo_links_with_report(content, rules, config)
    return html
