"""Closed mapping from provider ids to provider classes."""

from __future__ import annotations

from typing import Optional

from ..config import ProjectConfig
from ..context import RunContext
from .anthropic import AnthropicProvider
from .base import LLMProvider
from .cohere import CohereProvider
from .config import LLMConfig, ProviderType
from .google_gemini import GoogleGeminiProvider
from .mistral_ai import MistralAIProvider
from .ollama import OllamaProvider
from .openai import OpenAIProvider

PROVIDERS: dict[ProviderType, type[LLMProvider]] = {
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.ANTHROPIC: AnthropicProvider,
    ProviderType.GOOGLE_GEMINI: GoogleGeminiProvider,
    ProviderType.OLLAMA: OllamaProvider,
    ProviderType.MISTRAL_AI: MistralAIProvider,
    ProviderType.COHERE: CohereProvider,
}


def create_provider(
    ctx: RunContext,
    provider_type: str | ProviderType,
    config: Optional[LLMConfig] = None,
) -> LLMProvider:
    """Instantiate the provider class registered for a provider id.

    Raises:
        UnsupportedLLMError: If the id is unknown
    """
    provider_cls = PROVIDERS[ProviderType.parse(provider_type)]
    return provider_cls(ctx, config)


def provider_from_config(
    ctx: RunContext,
    provider_name: str,
    project_config: Optional[ProjectConfig] = None,
) -> LLMProvider:
    """Create provider from a [llm.<provider_name>] table.

    Values missing from the table fall back to the provider's DEFAULT preset.

    Args:
        ctx: Run context
        provider_name: Name of the [llm.<name>] table
        project_config: Loaded config (defaults to ``ctx.config``)

    Returns:
        Configured provider

    Example toolweave.toml:
        [llm.claude]
        type = "anthropic"
        api_key = "${ANTHROPIC_API_KEY}"
        model = "claude-3-5-sonnet-20240620"
        max_tokens = 4096
        timeout_sec = 60
        context_window = 200000
    """
    project_config = project_config or ctx.config
    provider_cfg = project_config.provider(provider_name)
    provider_cls = PROVIDERS[ProviderType.parse(provider_cfg.type)]
    timeout_sec = provider_cfg.timeout_sec

    llm_config = provider_cls.DEFAULT.merged(
        base_url=provider_cfg.api_base,
        model=provider_cfg.model,
        api_key=provider_cfg.api_key,
        embedding_model=provider_cfg.embedding_model,
        temperature=provider_cfg.temperature,
        max_tokens=provider_cfg.max_tokens,
        timeout_ms=timeout_sec * 1000 if timeout_sec is not None else None,
        context_window=provider_cfg.context_window,
    )
    ctx.child_logger("llm").info(
        "Loaded provider '%s' (%s) from toolweave.toml", provider_name, provider_cfg.type
    )
    return provider_cls(ctx, llm_config)


__all__ = ["PROVIDERS", "create_provider", "provider_from_config"]
