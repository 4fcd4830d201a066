# -*- coding: utf-8 -*-
"""
Flat tag/text scanner for article HTML.

Article bodies are small, generated HTML using a limited vocabulary
(headings, paragraphs, anchors, emphasis, lists). Rather than building a
tree, the body is treated as a sequence of segments, each either one tag
(any "<...>" run) or a run of text between tags.

Usage:
    segments = scan_segments(html)
    # ... rewrite text segments ...
    html = join_segments(segments)
"""

import re
from typing import Iterator

from .models import HtmlSegment, InsertionPosition, SegmentKind


def iter_segments(html: str) -> Iterator[HtmlSegment]:
    """
    Yield the segments of html from left to right.

    A tag starts at '<' and ends at the next '>'. A '<' with no closing '>'
    after it is ordinary text.

    Args:
        html: HTML text.

    Yields:
        HtmlSegment objects. Joining their text reproduces html exactly.
    """
    pos = 0
    length = len(html)

    while pos < length:
        lt = html.find("<", pos)
        if lt == -1:
            yield HtmlSegment(SegmentKind.TEXT, html[pos:])
            return

        gt = html.find(">", lt + 1)
        if gt == -1:
            yield HtmlSegment(SegmentKind.TEXT, html[pos:])
            return

        if lt > pos:
            yield HtmlSegment(SegmentKind.TEXT, html[pos:lt])
        yield HtmlSegment(SegmentKind.TAG, html[lt:gt + 1])
        pos = gt + 1


def scan_segments(html: str) -> list[HtmlSegment]:
    """Split html into a list of tag and text segments."""
    if not html:
        return []
    return list(iter_segments(html))


def join_segments(segments: list[HtmlSegment]) -> str:
    """Concatenate segments back into HTML."""
    return "".join(segment.text for segment in segments)


def find_tag_positions(html: str, pattern: re.Pattern) -> list[InsertionPosition]:
    """
    Find every match of pattern, reporting the offset just past each match.

    Args:
        html: Text to search.
        pattern: Compiled pattern (e.g. a closing tag).

    Returns:
        InsertionPosition per match, in document order.
    """
    return [
        InsertionPosition(offset=match.end(), matched_text=match.group(0))
        for match in pattern.finditer(html)
    ]
