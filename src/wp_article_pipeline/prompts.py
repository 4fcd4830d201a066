"""
Prompt construction for article generation.

The system prompt fixes the writing rules and the JSON output shape that
response_parser expects; the user prompt carries the topic and keywords.
"""

from typing import Optional

from .config import PipelineConfig
from .models import ArticleRequest, ArticleTone


TONE_INSTRUCTIONS: dict[ArticleTone, str] = {
    ArticleTone.FRIENDLY: "Write in a warm, friendly voice, like a friend chatting. Keep the language easy to follow.",
    ArticleTone.FORMAL: "Write in a formal, polite voice suited to an academic article.",
    ArticleTone.EDUCATIONAL: "Write in an instructive voice. Explain in detail with examples, as if teaching.",
    ArticleTone.SALES: "Write in a persuasive voice that builds interest, stresses benefits and value, and moves the reader to buy.",
    ArticleTone.PROFESSIONAL: "Write in a professional, credible voice. Support points with data and show expertise.",
    ArticleTone.HUMOROUS: "Write in a fun, humorous voice with light jokes, while still being useful.",
    ArticleTone.INSPIRATIONAL: "Write in an inspiring, encouraging voice that leaves the reader motivated and hopeful.",
    ArticleTone.STORYTELLING: "Write as a story with a narrative arc, characters and situations the reader can relate to.",
    ArticleTone.NEWS: "Write as a news report: concise, neutral and factual. Answer who, what, where, when and how.",
    ArticleTone.REVIEW: "Write as a review. Weigh pros and cons, give a rating, and stay fair so the reader can decide.",
}

OUTPUT_FORMAT = """OUTPUT FORMAT:
- Return JSON only
- Do NOT wrap it in a code block or markdown
- Format: {"title": "...", "content": "...", "excerpt": "...", "tags": ["tag1", "tag2", "tag3"]}
- content must be valid HTML (use <h2>, <h3>, <p>, <ul>, <li>, <strong>, <em>)
- excerpt must be a short 1-2 sentence summary of the article
- tags must be an array of strings"""


def build_system_prompt(request: ArticleRequest, config: Optional[PipelineConfig] = None) -> str:
    """
    Build the system prompt with writing rules for the request.

    Args:
        request: The article request.
        config: Pipeline config (language, tag limit).

    Returns:
        System prompt text.
    """
    config = config or PipelineConfig()
    tone = TONE_INSTRUCTIONS[request.tone]

    return f"""You are a professional writer producing high-quality, SEO-friendly, engaging articles in {config.language}.

WRITING RULES:
1. {tone}
2. Article length: {request.length.label}
3. Use subheadings (H2, H3) to break the content into readable sections
4. Keep paragraphs short, 3-4 sentences each
5. Include useful, accurate information
6. Avoid repetitive wording
7. Write original content, do not copy from elsewhere
8. NEVER use a colon (:) in the article title. Use connecting words or a full sentence instead
9. Create 3-{config.max_tags} short tags related to the article, suitable for SEO

{OUTPUT_FORMAT}"""


def build_user_prompt(request: ArticleRequest) -> str:
    """
    Build the user prompt naming the topic and required keywords.

    SEO link keywords are listed with the number of times each should
    appear, so the link injector finds them in the text instead of
    having to backfill.

    Args:
        request: The article request.

    Returns:
        User prompt text.
    """
    lines = [f'Write an article about: "{request.keyword}"']

    if request.seo_keywords:
        lines.append("")
        lines.append(f"SEO keywords to use in the article: {', '.join(request.seo_keywords)}")

    link_keywords = [rule for rule in request.seo_links if rule.is_applicable]
    if link_keywords:
        lines.append("")
        lines.append("Use each of these phrases naturally in the body text (not in headings):")
        for rule in link_keywords:
            times = "time" if rule.max_count == 1 else "times"
            lines.append(f'- "{rule.keyword}" about {rule.max_count} {times}')

    lines.append("")
    lines.append("Create an article that:")
    lines.append("1. Has an engaging, clickable title (no colon in the title)")
    lines.append("2. Covers the topic fully and answers the reader's questions")
    lines.append("3. Is SEO-friendly, with the main keyword in the title and body")
    lines.append("4. Is well structured and easy to read")

    return "\n".join(lines)


def build_prompts(
    request: ArticleRequest, config: Optional[PipelineConfig] = None
) -> tuple[str, str]:
    """Return (system_prompt, user_prompt) for the request."""
    return build_system_prompt(request, config), build_user_prompt(request)
