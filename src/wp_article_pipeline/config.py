# -*- coding: utf-8 -*-
"""
Centralized configuration for the WordPress article pipeline.

This module provides a single configuration dataclass controlling the
completion call (model, token budget, timeouts), the markup of injected
links, and the post-processing steps applied to a recovered article.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_MODEL = "claude-sonnet-4-20250514"


@dataclass
class PipelineConfig:
    """
    Central configuration for article generation and post-processing.

    Attributes:
        model: Anthropic model identifier used for generation.
        max_tokens: Maximum tokens in the completion.
        request_timeout: Overall HTTP timeout in seconds.
        connect_timeout: HTTP connect timeout in seconds.

        link_target: Value of the target attribute on injected anchors.
        link_rel: Value of the rel attribute on injected anchors.

        apply_seo_links: Whether the request's SEO link rules are applied
            to the recovered content.
        merge_tags: Whether generated tags are merged into the request's
            existing tags. When False, the request's tags are left alone and
            the generated ones are returned as-is.
        max_tags: Upper bound on tags requested from the model.

        language: Language the article is written in.
    """

    # Completion call
    model: str = DEFAULT_MODEL
    max_tokens: int = 4096
    request_timeout: float = 60.0
    connect_timeout: float = 30.0

    # Link markup
    link_target: str = "_blank"
    link_rel: str = "noopener"

    # Post-processing
    apply_seo_links: bool = True
    merge_tags: bool = True
    max_tags: int = 5

    # Prompt
    language: str = "English"

    def __post_init__(self):
        """Validate configuration values."""
        if not self.model:
            raise ValueError("model must not be empty")
        if self.max_tokens < 256:
            raise ValueError(f"max_tokens must be >= 256, got {self.max_tokens}")
        if self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be > 0, got {self.request_timeout}"
            )
        if self.connect_timeout <= 0:
            raise ValueError(
                f"connect_timeout must be > 0, got {self.connect_timeout}"
            )
        if self.max_tags < 1:
            raise ValueError(f"max_tags must be >= 1, got {self.max_tags}")

    @property
    def anchor_attributes(self) -> str:
        """Attribute string placed after href on every injected anchor."""
        parts = []
        if self.link_target:
            parts.append(f'target="{self.link_target}"')
        if self.link_rel:
            parts.append(f'rel="{self.link_rel}"')
        return " ".join(parts)

    @classmethod
    def default(cls, **overrides) -> "PipelineConfig":
        """Create config with the standard generate-and-link behaviour."""
        return cls(**overrides)

    @classmethod
    def recovery_only(cls, **overrides) -> "PipelineConfig":
        """Create config that recovers articles without touching links or tags.

        Args:
            **overrides: Override any config values.

        Returns:
            PipelineConfig with link injection and tag merging disabled.
        """
        defaults = {
            "apply_seo_links": False,
            "merge_tags": False,
        }
        defaults.update(overrides)
        return cls(**defaults)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None, **overrides) -> "PipelineConfig":
        """Create config from WP_PIPELINE_* environment variables.

        Recognized variables:
            WP_PIPELINE_MODEL: model identifier
            WP_PIPELINE_MAX_TOKENS: integer token budget
            WP_PIPELINE_TIMEOUT: request timeout in seconds

        Args:
            environ: Mapping to read instead of os.environ.
            **overrides: Values that win over the environment.

        Returns:
            PipelineConfig built from the environment.
        """
        env = os.environ if environ is None else environ
        values = {}

        if env.get("WP_PIPELINE_MODEL"):
            values["model"] = env["WP_PIPELINE_MODEL"]
        if env.get("WP_PIPELINE_MAX_TOKENS"):
            try:
                values["max_tokens"] = int(env["WP_PIPELINE_MAX_TOKENS"])
            except ValueError as e:
                raise ValueError(
                    f"WP_PIPELINE_MAX_TOKENS must be an integer, "
                    f"got '{env['WP_PIPELINE_MAX_TOKENS']}'"
                ) from e
        if env.get("WP_PIPELINE_TIMEOUT"):
            try:
                values["request_timeout"] = float(env["WP_PIPELINE_TIMEOUT"])
            except ValueError as e:
                raise ValueError(
                    f"WP_PIPELINE_TIMEOUT must be a number, "
                    f"got '{env['WP_PIPELINE_TIMEOUT']}'"
                ) from e

        values.update(overrides)
        return cls(**values)
