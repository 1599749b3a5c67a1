"""LLM providers and normalized responses."""

from .anthropic import AnthropicProvider
from .base import LLMProvider
from .cohere import CohereProvider
from .config import LLMConfig, ProviderType
from .google_gemini import GoogleGeminiProvider
from .mistral_ai import MistralAIProvider
from .ollama import OllamaProvider
from .openai import OpenAIProvider
from .registry import PROVIDERS, create_provider, provider_from_config
from .response import (
    AnthropicResponse,
    CohereResponse,
    GoogleGeminiResponse,
    LLMResponse,
    MistralAIResponse,
    OllamaResponse,
    OpenAIResponse,
)
from .token_length import TOKEN_LIMITS, TokenLengthValidator

__all__ = [
    "LLMProvider",
    "LLMConfig",
    "ProviderType",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleGeminiProvider",
    "OllamaProvider",
    "MistralAIProvider",
    "CohereProvider",
    "PROVIDERS",
    "create_provider",
    "provider_from_config",
    "LLMResponse",
    "OpenAIResponse",
    "AnthropicResponse",
    "GoogleGeminiResponse",
    "OllamaResponse",
    "MistralAIResponse",
    "CohereResponse",
    "TOKEN_LIMITS",
    "TokenLengthValidator",
]
