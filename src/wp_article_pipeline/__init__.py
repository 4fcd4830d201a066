"""
WordPress Article Pipeline

Turns AI completions into publishable WordPress article HTML:
- Recovers title, content, excerpt and tags from malformed model output
- Normalizes newline conventions into paragraph markup
- Injects SEO links for configured keywords, with per-keyword caps
"""

__version__ = "1.0.0"
__author__ = "WordPress Article Pipeline Team"

from .config import PipelineConfig

from .models import (
    ArticleLength,
    ArticleRequest,
    ArticleTone,
    GenerationResult,
    HtmlSegment,
    InsertionPosition,
    LinkInjectionReport,
    SegmentKind,
    SeoLinkRule,
)

from .response_parser import (
    MalformedResponse,
    ParseOutcome,
    clean_title,
    extract_tags,
    recover_article,
    strip_code_fences,
)

from .content_normalizer import normalize_content

from .link_injector import (
    inject_seo_links,
    inject_seo_links_with_report,
)

from .rule_loader import (
    RuleLoadError,
    deduplicate_rules,
    load_rules,
    rules_from_records,
)

from .article_generator import (
    ArticleGenerationError,
    ArticleGenerator,
    merge_tags,
    process_completion,
)

__all__ = [
    # Configuration
    "PipelineConfig",
    # Models
    "ArticleLength",
    "ArticleRequest",
    "ArticleTone",
    "GenerationResult",
    "HtmlSegment",
    "InsertionPosition",
    "LinkInjectionReport",
    "SegmentKind",
    "SeoLinkRule",
    # Response recovery
    "MalformedResponse",
    "ParseOutcome",
    "clean_title",
    "extract_tags",
    "recover_article",
    "strip_code_fences",
    # Content normalization
    "normalize_content",
    # SEO links
    "inject_seo_links",
    "inject_seo_links_with_report",
    # Rule loading
    "RuleLoadError",
    "deduplicate_rules",
    "load_rules",
    "rules_from_records",
    # Generation
    "ArticleGenerationError",
    "ArticleGenerator",
    "merge_tags",
    "process_completion",
]
