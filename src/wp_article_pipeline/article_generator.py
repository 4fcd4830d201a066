"""
Article generation flow.

Ties the pipeline together: prompt -> completion -> recovery -> SEO link
injection -> tag merge. Persistence and publishing stay with the caller,
which stores the returned GenerationResult and hands its content to
WordPress as the post body.
"""

import logging
from typing import Optional, Sequence

from .config import PipelineConfig
from .link_injector import inject_seo_links
from .llm_client import LLMClient, LLMClientError
from .models import ArticleRequest, GenerationResult, SeoLinkRule
from .prompts import build_prompts
from .response_parser import MalformedResponse, recover_article

logger = logging.getLogger(__name__)


class ArticleGenerationError(Exception):
    """Raised when an article cannot be generated.

    The message is suitable for storing as the article's error message.
    """
    pass


def merge_tags(existing: Sequence[str], generated: Sequence[str]) -> list[str]:
    """
    Merge generated tags into existing ones.

    Keeps first-seen order and drops exact duplicates.

    Args:
        existing: Tags already on the article.
        generated: Tags returned by the model.

    Returns:
        Merged tag list.
    """
    merged: list[str] = []
    seen: set[str] = set()
    for tag in list(existing) + list(generated):
        if tag not in seen:
            seen.add(tag)
            merged.append(tag)
    return merged


def process_completion(
    raw_response: str,
    rules: Sequence[SeoLinkRule] = (),
    existing_tags: Optional[Sequence[str]] = None,
    config: Optional[PipelineConfig] = None,
) -> GenerationResult:
    """
    Turn a raw completion into a publishable article.

    Args:
        raw_response: Completion text.
        rules: SEO link rules to apply to the content.
        existing_tags: Tags already on the article, merged with generated ones.
        config: Pipeline config.

    Returns:
        GenerationResult whose content is the final post body. tags is None
        when the model produced none, meaning existing tags stay as they are.

    Raises:
        MalformedResponse: If the completion cannot be recovered.
    """
    config = config or PipelineConfig()
    result = recover_article(raw_response)

    if config.apply_seo_links and rules:
        result = result.with_content(inject_seo_links(result.content, rules, config))

    if config.merge_tags and result.tags:
        result = result.with_tags(merge_tags(existing_tags or [], result.tags))

    return result


class ArticleGenerator:
    """
    Generates articles from requests using an LLM client.

    Usage:
        generator = ArticleGenerator(api_key="...")
        result = generator.generate(ArticleRequest(keyword="budget laptops"))
    """

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        api_key: Optional[str] = None,
        config: Optional[PipelineConfig] = None,
    ):
        """
        Initialize the generator.

        Args:
            client: Client to use. Created from api_key and config when None.
            api_key: Anthropic API key (ignored when client is given).
            config: Pipeline config.
        """
        self.config = config or PipelineConfig()
        self._client = client
        self._api_key = api_key

    @property
    def client(self) -> LLMClient:
        """Lazily create the LLM client on first use."""
        if self._client is None:
            self._client = LLMClient(api_key=self._api_key, config=self.config)
        return self._client

    def generate(self, request: ArticleRequest) -> GenerationResult:
        """
        Generate one article.

        Args:
            request: What to write and which links to insert.

        Returns:
            GenerationResult ready to store and publish.

        Raises:
            ArticleGenerationError: If the completion fails or cannot be recovered.
        """
        if not request.keyword:
            raise ArticleGenerationError("Generation failed: keyword is required")

        system_prompt, user_prompt = build_prompts(request, self.config)

        try:
            raw = self.client.complete(system_prompt, user_prompt)
        except LLMClientError as e:
            raise ArticleGenerationError(f"Generation failed: {e}") from e

        try:
            result = process_completion(
                raw,
                rules=request.seo_links,
                existing_tags=request.existing_tags,
                config=self.config,
            )
        except MalformedResponse as e:
            logger.error(f"Could not recover article for '{request.keyword}': {e.reason}")
            raise ArticleGenerationError(f"Generation failed: {e.reason}") from e

        logger.info(f"Article '{result.title}' generated for keyword '{request.keyword}'")
        return result
