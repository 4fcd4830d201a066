"""
Data models for the WordPress article pipeline.

This module defines the value types passed between the response parser,
the content normalizer and the SEO link injector.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


HEADING_OPEN_RE = re.compile(r"^<h[1-6][^>]*>", re.IGNORECASE)
HEADING_CLOSE_RE = re.compile(r"^</h[1-6]>", re.IGNORECASE)


class ArticleTone(Enum):
    """Writing tone requested from the model."""
    FRIENDLY = "friendly"
    FORMAL = "formal"
    EDUCATIONAL = "educational"
    SALES = "sales"
    PROFESSIONAL = "professional"
    HUMOROUS = "humorous"
    INSPIRATIONAL = "inspirational"
    STORYTELLING = "storytelling"
    NEWS = "news"
    REVIEW = "review"


class ArticleLength(Enum):
    """Target article length as a (min, max) word range."""
    SHORT = (400, 600)
    MEDIUM = (800, 1200)
    LONG = (1400, 2000)

    @property
    def min_words(self) -> int:
        return self.value[0]

    @property
    def max_words(self) -> int:
        return self.value[1]

    @property
    def label(self) -> str:
        """Human readable range, e.g. '800-1,200 words'."""
        return f"{self.min_words:,}-{self.max_words:,} words"


@dataclass(frozen=True)
class GenerationResult:
    """An article recovered from a model completion."""
    title: str
    content: str  # HTML
    excerpt: str = ""
    tags: Optional[tuple[str, ...]] = None  # None means no tags

    def with_content(self, content: str) -> "GenerationResult":
        """Return a copy with new content."""
        return GenerationResult(self.title, content, self.excerpt, self.tags)

    def with_tags(self, tags: Optional[list[str]]) -> "GenerationResult":
        """Return a copy with new tags (an empty list is stored as None)."""
        return GenerationResult(
            self.title,
            self.content,
            self.excerpt,
            tuple(tags) if tags else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
            "tags": list(self.tags) if self.tags else [],
        }


@dataclass(frozen=True)
class SeoLinkRule:
    """A keyword that should become a link to url, at most max_count times."""
    keyword: str
    url: str
    max_count: int = 1

    @property
    def is_applicable(self) -> bool:
        """Rules with an empty keyword or url are skipped by the injector."""
        return bool(self.keyword) and bool(self.url)

    def to_dict(self) -> dict[str, Any]:
        return {"keyword": self.keyword, "url": self.url, "maxCount": self.max_count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SeoLinkRule":
        """
        Build a rule from a stored record.

        Accepts both the camelCase ``maxCount`` key used by stored article
        records and ``max_count``.
        """
        raw_count = data.get("maxCount", data.get("max_count", 1))
        try:
            max_count = int(raw_count)
        except (TypeError, ValueError):
            max_count = 0
        return cls(
            keyword=str(data.get("keyword") or ""),
            url=str(data.get("url") or ""),
            max_count=max(0, max_count),
        )


class SegmentKind(Enum):
    """Kind of an HTML segment."""
    TAG = "tag"
    TEXT = "text"


@dataclass(frozen=True)
class HtmlSegment:
    """A piece of HTML: either one markup tag or a run of text."""
    kind: SegmentKind
    text: str

    @property
    def is_tag(self) -> bool:
        return self.kind is SegmentKind.TAG

    @property
    def heading_open(self) -> bool:
        """True for an opening <h1>-<h6> tag."""
        return self.is_tag and HEADING_OPEN_RE.match(self.text) is not None

    @property
    def heading_close(self) -> bool:
        """True for a closing </h1>-</h6> tag."""
        return self.is_tag and HEADING_CLOSE_RE.match(self.text) is not None


@dataclass(frozen=True)
class InsertionPosition:
    """A candidate insertion point discovered during a scan."""
    offset: int  # Character offset in the scanned string
    matched_text: str


@dataclass
class LinkInjectionReport:
    """Outcome of applying one rule."""
    keyword: str
    url: str
    max_count: int
    linked_in_text: int = 0
    backfilled: int = 0
    skipped: bool = False

    @property
    def total_links(self) -> int:
        return self.linked_in_text + self.backfilled

    @property
    def shortfall(self) -> int:
        return max(0, self.max_count - self.total_links)


@dataclass
class ArticleRequest:
    """Everything needed to generate one article."""
    keyword: str
    tone: ArticleTone = ArticleTone.FRIENDLY
    length: ArticleLength = ArticleLength.MEDIUM
    seo_keywords: list[str] = field(default_factory=list)
    seo_links: list[SeoLinkRule] = field(default_factory=list)
    existing_tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Normalize the keyword."""
        self.keyword = self.keyword.strip()
