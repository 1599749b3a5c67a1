"""Mistral AI provider (OpenAI-shaped chat API)."""

from __future__ import annotations

import os

from .config import LLMConfig, ProviderType
from .openai import OpenAIProvider
from .response import MistralAIResponse


class MistralAIProvider(OpenAIProvider):
    """Provider for the Mistral La Plateforme API."""

    provider_type = ProviderType.MISTRAL_AI
    response_class = MistralAIResponse

    DEFAULT = LLMConfig(
        base_url="https://api.mistral.ai/v1",
        model="mistral-large-latest",
        api_key=os.getenv("MISTRAL_API_KEY"),
        embedding_model="mistral-embed",
        temperature=0.7,
        max_tokens=4096,
        timeout_ms=30000,
    )


__all__ = ["MistralAIProvider"]
