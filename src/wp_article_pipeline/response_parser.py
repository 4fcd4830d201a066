# -*- coding: utf-8 -*-
"""
Recovery of article records from model completions.

Models are asked to return a JSON object with title, content, excerpt and
tags, but the output is frequently not valid JSON:
- It is wrapped in markdown code fences
- It has chatter before or after the object
- The HTML content contains raw newlines or unescaped quotes

Parsing is done in two phases. The strict phase runs json.loads over the
outermost {...} span. If that fails, the fallback phase pulls each field out
with patterns that tolerate broken quoting in the content value. Both phases
return a ParseOutcome; only recover_article raises.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from .content_normalizer import normalize_content
from .models import GenerationResult

logger = logging.getLogger(__name__)


class MalformedResponse(Exception):
    """Raised when no usable title/content pair can be recovered."""

    def __init__(self, reason: str, field: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.field = field


# A language tag only counts when the fence ends its line
CODE_FENCE_RE = re.compile(r"```(?:[A-Za-z0-9_+-]+(?=\r?\n))?\n?")
JSON_SPAN_RE = re.compile(r"\{[\s\S]*\}")
TITLE_RE = re.compile(r'"title"\s*:\s*"([^"]+)"')
EXCERPT_RE = re.compile(r'"excerpt"\s*:\s*"([^"]+)"')

CONTENT_KEY = '"content"'
EXCERPT_BOUNDARY = '", "excerpt"'
OBJECT_END = '"}'

REQUIRED_FIELDS = ("title", "content")


@dataclass(frozen=True)
class ParseOutcome:
    """Result of one parse phase: either fields or a failure reason."""
    fields: Optional[dict[str, Any]] = None
    reason: Optional[str] = None
    method: str = "strict"

    @property
    def ok(self) -> bool:
        return self.fields is not None

    @classmethod
    def success(cls, fields: dict[str, Any], method: str) -> "ParseOutcome":
        return cls(fields=fields, method=method)

    @classmethod
    def failure(cls, reason: str, method: str) -> "ParseOutcome":
        return cls(reason=reason, method=method)


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fence markers wherever they occur.

    Args:
        text: Raw completion text.

    Returns:
        Text without ``` markers (and their language tags), trimmed.
    """
    if not text:
        return ""
    return CODE_FENCE_RE.sub("", text).strip()


def find_json_span(text: str) -> str:
    """
    Return the text from the first '{' to the last '}'.

    Falls back to the whole text when there is no such span.
    """
    match = JSON_SPAN_RE.search(text)
    if match:
        return match.group(0)
    return text


def parse_strict(candidate: str) -> ParseOutcome:
    """
    Parse the candidate span as JSON.

    Args:
        candidate: Text expected to hold one JSON object.

    Returns:
        ParseOutcome with the decoded object, or the decoder's error.
    """
    try:
        parsed = json.loads(candidate)
    except (json.JSONDecodeError, ValueError) as e:
        return ParseOutcome.failure(str(e), "strict")

    if not isinstance(parsed, dict):
        return ParseOutcome.failure(
            f"expected a JSON object, got {type(parsed).__name__}", "strict"
        )
    return ParseOutcome.success(parsed, "strict")


def extract_content_value(text: str) -> Optional[str]:
    """
    Extract the content value without relying on its quoting.

    The value runs from the opening quote after "content": up to the last
    '", "excerpt"' in the remaining text, or else the last '"}'. Searching
    from the end lets the value contain stray quotes and raw newlines.

    Args:
        text: Candidate JSON-like text.

    Returns:
        The raw content value, or None when there is no "content" key.
    """
    key_pos = text.find(CONTENT_KEY)
    if key_pos == -1:
        return None

    value_start = text.find(":", key_pos) + 1
    value = text[value_start:].strip()
    if value.startswith('"'):
        value = value[1:]

    end = len(value)
    excerpt_pos = value.rfind(EXCERPT_BOUNDARY)
    brace_pos = value.rfind(OBJECT_END)
    if excerpt_pos != -1:
        end = excerpt_pos
    elif brace_pos != -1:
        end = brace_pos

    return value[:end]


def parse_fallback(candidate: str) -> ParseOutcome:
    """
    Extract fields one at a time from text that is not valid JSON.

    Args:
        candidate: JSON-like text.

    Returns:
        ParseOutcome with title, content and excerpt, or a failure reason.
    """
    title_match = TITLE_RE.search(candidate)
    excerpt_match = EXCERPT_RE.search(candidate)
    content = extract_content_value(candidate)

    if content is None or title_match is None:
        return ParseOutcome.failure(
            "Could not extract article fields from response", "fallback"
        )

    return ParseOutcome.success(
        {
            "title": title_match.group(1),
            "content": content,
            "excerpt": excerpt_match.group(1) if excerpt_match else "",
        },
        "fallback",
    )


def extract_fields(text: str) -> ParseOutcome:
    """
    Run the strict phase, then the fallback phase if it failed.

    Args:
        text: Completion text with code fences already removed.

    Returns:
        The first successful outcome, or a failure combining both reasons.
    """
    candidate = find_json_span(text)

    strict = parse_strict(candidate)
    if strict.ok:
        return strict

    logger.warning(f"Strict JSON parse failed ({strict.reason}), trying field extraction")
    fallback = parse_fallback(candidate)
    if fallback.ok:
        return fallback

    return ParseOutcome.failure(
        f"Failed to parse AI response: {strict.reason}; {fallback.reason}",
        "fallback",
    )


def clean_title(title: str) -> str:
    """
    Clean a generated title.

    Colons are replaced with spaces, whitespace runs collapse to one space.

    Args:
        title: Raw title.

    Returns:
        Cleaned title.
    """
    result = title.replace(":", " ")
    result = re.sub(r"\s+", " ", result)
    return result.strip()


def extract_tags(raw_tags: Any) -> Optional[tuple[str, ...]]:
    """
    Keep only non-blank string tags.

    Args:
        raw_tags: The decoded tags value (any type).

    Returns:
        Tuple of tags, or None when nothing usable remains.
    """
    if not isinstance(raw_tags, list):
        return None
    tags = [t for t in raw_tags if isinstance(t, str) and t.strip()]
    return tuple(tags) if tags else None


def _require_text(fields: dict[str, Any], name: str) -> str:
    value = fields.get(name)
    if not isinstance(value, str) or not value.strip():
        raise MalformedResponse(
            f"Invalid response format: missing {name}", field=name
        )
    return value


def recover_article(raw_response: str) -> GenerationResult:
    """
    Recover an article from a raw model completion.

    Args:
        raw_response: Completion text from any provider.

    Returns:
        GenerationResult with a cleaned title and normalized content.

    Raises:
        MalformedResponse: If title or content cannot be recovered.
    """
    text = strip_code_fences(raw_response or "")
    if not text:
        raise MalformedResponse("Empty response from AI provider")

    outcome = extract_fields(text)
    if not outcome.ok:
        raise MalformedResponse(outcome.reason or "Unparseable response")

    fields = outcome.fields
    title = _require_text(fields, "title")
    content = _require_text(fields, "content")

    excerpt = fields.get("excerpt")
    if not isinstance(excerpt, str):
        excerpt = ""

    title = clean_title(title)
    if not title:
        raise MalformedResponse("Invalid response format: empty title", field="title")
    content = normalize_content(content)
    if not content:
        raise MalformedResponse("Invalid response format: empty content", field="content")

    result = GenerationResult(
        title=title,
        content=content,
        excerpt=excerpt,
        tags=extract_tags(fields.get("tags")),
    )
    logger.debug(
        f"Recovered article via {outcome.method} parse: '{result.title}' "
        f"({len(result.content)} chars, {len(result.tags or ())} tags)"
    )
    return result
