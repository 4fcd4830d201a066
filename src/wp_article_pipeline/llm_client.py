"""
LLM client for article generation.

This module provides a thin client for calling Claude (Anthropic) and
returning the raw completion text that response_parser recovers articles
from.
"""

import logging
import os
from typing import Optional

import anthropic
import httpx

from .config import PipelineConfig

logger = logging.getLogger(__name__)


class LLMClientError(Exception):
    """Raised when LLM operations fail."""
    pass


class LLMClient:
    """
    Client for article completions.

    Supports Anthropic Claude API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[PipelineConfig] = None,
    ):
        """
        Initialize the LLM client.

        Args:
            api_key: API key for the LLM provider. If None, reads from ANTHROPIC_API_KEY env var.
            config: Pipeline config (model, token budget, timeouts).
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.config = config or PipelineConfig()

        if not self.api_key:
            raise LLMClientError(
                "No API key provided. Set ANTHROPIC_API_KEY environment variable "
                "or pass api_key parameter."
            )

        http_client = httpx.Client(
            timeout=httpx.Timeout(
                self.config.request_timeout, connect=self.config.connect_timeout
            ),
            follow_redirects=True,
        )
        self.client = anthropic.Anthropic(
            api_key=self.api_key,
            http_client=http_client,
        )

    @property
    def model(self) -> str:
        return self.config.model

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Request one completion.

        Args:
            system_prompt: System instructions.
            user_prompt: User message.

        Returns:
            The completion text.

        Raises:
            LLMClientError: If the call fails or returns no text.
        """
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.config.max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            logger.error(f"LLM API call failed: {e}")
            raise LLMClientError(f"LLM API call failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise LLMClientError("No content generated")

        if getattr(response, "stop_reason", None) == "max_tokens":
            logger.warning(
                f"Completion hit max_tokens ({self.config.max_tokens}); "
                "response may be truncated"
            )
        return text


def create_llm_client(
    api_key: Optional[str] = None,
    config: Optional[PipelineConfig] = None,
) -> LLMClient:
    """
    Factory function to create an LLM client.

    Args:
        api_key: Optional API key. If None, uses environment variable.
        config: Pipeline config.

    Returns:
        Configured LLMClient instance.
    """
    return LLMClient(api_key=api_key, config=config)
