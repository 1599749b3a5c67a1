"""LLM configuration types."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..errors import UnsupportedLLMError


class ProviderType(Enum):
    """Closed set of supported LLM vendors.

    The value is the ``type`` used in ``[llm.<name>]`` tables.
    """

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE_GEMINI = "google_gemini"
    OLLAMA = "ollama"
    MISTRAL_AI = "mistral_ai"
    COHERE = "cohere"

    @classmethod
    def parse(cls, value: str | ProviderType) -> ProviderType:
        """Resolve a provider id, rejecting unknown ones.

        Raises:
            UnsupportedLLMError: If the id is not one of the supported vendors
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedLLMError(
                f"Unsupported LLM type: {value}. Choose from: {[p.value for p in cls]}"
            ) from None


@dataclass
class LLMConfig:
    """Configuration for an LLM provider."""

    base_url: str
    model: str
    api_key: Optional[str] = None
    embedding_model: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 4096
    timeout_ms: int = 30000
    context_window: Optional[int] = None

    def merged(self, **overrides) -> LLMConfig:
        """Copy of this config with non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


__all__ = ["ProviderType", "LLMConfig"]
