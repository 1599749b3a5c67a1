"""LLM adapters and the closed registry that selects one per provider."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ...errors import UnsupportedLLMError
from ...llm.config import ProviderType
from .anthropic import AnthropicAdapter
from .base import LLMAdapter
from .cohere import CohereAdapter
from .google_gemini import GoogleGeminiAdapter
from .ollama import OllamaAdapter
from .openai import MistralAIAdapter, OpenAIAdapter

ADAPTERS: dict[ProviderType, type[LLMAdapter]] = {
    ProviderType.OPENAI: OpenAIAdapter,
    ProviderType.ANTHROPIC: AnthropicAdapter,
    ProviderType.GOOGLE_GEMINI: GoogleGeminiAdapter,
    ProviderType.OLLAMA: OllamaAdapter,
    ProviderType.MISTRAL_AI: MistralAIAdapter,
    ProviderType.COHERE: CohereAdapter,
}


def build_adapter(llm: Any, logger: Optional[logging.Logger] = None) -> LLMAdapter:
    """Select the adapter for an LLM provider instance.

    Raises:
        UnsupportedLLMError: If the provider has no registered adapter
    """
    adapter_cls = ADAPTERS.get(getattr(llm, "provider_type", None))
    if adapter_cls is None:
        raise UnsupportedLLMError(f"Unsupported LLM type: {type(llm).__name__}")
    return adapter_cls(logger=logger)


__all__ = [
    "ADAPTERS",
    "build_adapter",
    "LLMAdapter",
    "OpenAIAdapter",
    "MistralAIAdapter",
    "AnthropicAdapter",
    "GoogleGeminiAdapter",
    "OllamaAdapter",
    "CohereAdapter",
]
