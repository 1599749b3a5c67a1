"""Normalized read-only views over raw vendor response payloads.

Each vendor returns a differently shaped JSON document. The classes here
expose the same accessors for all of them:

- chat_completion / completion: generated text
- role: role of the generated message in the vendor's vocabulary
- tool_calls: raw vendor-shaped tool call records
- prompt_tokens / completion_tokens / total_tokens: usage counts
- embedding: embedding vector (for embed responses)
"""

from __future__ import annotations

from typing import Any, Optional


class LLMResponse:
    """Base response wrapper around a raw payload dict."""

    def __init__(self, raw: dict[str, Any], model: Optional[str] = None):
        self.raw = raw or {}
        self._model = model

    @property
    def model(self) -> Optional[str]:
        return self.raw.get("model") or self._model

    @property
    def chat_completion(self) -> Optional[str]:
        return None

    @property
    def completion(self) -> Optional[str]:
        return self.chat_completion

    @property
    def role(self) -> Optional[str]:
        return None

    @property
    def tool_calls(self) -> list[dict[str, Any]]:
        return []

    @property
    def embedding(self) -> Optional[list[float]]:
        embeddings = self.embeddings
        return embeddings[0] if embeddings else None

    @property
    def embeddings(self) -> list[list[float]]:
        return []

    @property
    def prompt_tokens(self) -> int:
        return 0

    @property
    def completion_tokens(self) -> int:
        return 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r}, completion={self.completion!r})"


class OpenAIResponse(LLMResponse):
    """Response from the OpenAI chat completions / embeddings API."""

    @property
    def _message(self) -> dict[str, Any]:
        choices = self.raw.get("choices") or [{}]
        return choices[0].get("message") or {}

    @property
    def chat_completion(self) -> Optional[str]:
        return self._message.get("content")

    @property
    def role(self) -> Optional[str]:
        return self._message.get("role")

    @property
    def tool_calls(self) -> list[dict[str, Any]]:
        return list(self._message.get("tool_calls") or [])

    @property
    def embeddings(self) -> list[list[float]]:
        return [item["embedding"] for item in self.raw.get("data", []) if "embedding" in item]

    @property
    def prompt_tokens(self) -> int:
        return (self.raw.get("usage") or {}).get("prompt_tokens", 0)

    @property
    def completion_tokens(self) -> int:
        return (self.raw.get("usage") or {}).get("completion_tokens", 0)

    @property
    def total_tokens(self) -> int:
        usage = self.raw.get("usage") or {}
        return usage.get("total_tokens", self.prompt_tokens + self.completion_tokens)


class MistralAIResponse(OpenAIResponse):
    """Response from the Mistral chat API (OpenAI-shaped)."""


class AnthropicResponse(LLMResponse):
    """Response from the Anthropic messages API."""

    @property
    def _blocks(self) -> list[dict[str, Any]]:
        return list(self.raw.get("content") or [])

    @property
    def chat_completion(self) -> Optional[str]:
        texts = [block.get("text", "") for block in self._blocks if block.get("type") == "text"]
        return "".join(texts) if texts else None

    @property
    def role(self) -> Optional[str]:
        return self.raw.get("role")

    @property
    def tool_calls(self) -> list[dict[str, Any]]:
        return [block for block in self._blocks if block.get("type") == "tool_use"]

    @property
    def stop_reason(self) -> Optional[str]:
        return self.raw.get("stop_reason")

    @property
    def prompt_tokens(self) -> int:
        return (self.raw.get("usage") or {}).get("input_tokens", 0)

    @property
    def completion_tokens(self) -> int:
        return (self.raw.get("usage") or {}).get("output_tokens", 0)


class GoogleGeminiResponse(LLMResponse):
    """Response from the Gemini generateContent / embedContent API."""

    @property
    def _content(self) -> dict[str, Any]:
        candidates = self.raw.get("candidates") or [{}]
        return candidates[0].get("content") or {}

    @property
    def _parts(self) -> list[dict[str, Any]]:
        return list(self._content.get("parts") or [])

    @property
    def chat_completion(self) -> Optional[str]:
        texts = [part["text"] for part in self._parts if "text" in part]
        return "".join(texts) if texts else None

    @property
    def role(self) -> Optional[str]:
        return self._content.get("role")

    @property
    def tool_calls(self) -> list[dict[str, Any]]:
        if self._parts and "functionCall" in self._parts[0]:
            return [part for part in self._parts if "functionCall" in part]
        return []

    @property
    def embeddings(self) -> list[list[float]]:
        if "embedding" in self.raw:
            return [self.raw["embedding"].get("values", [])]
        return [item.get("values", []) for item in self.raw.get("embeddings", [])]

    @property
    def prompt_tokens(self) -> int:
        return (self.raw.get("usageMetadata") or {}).get("promptTokenCount", 0)

    @property
    def completion_tokens(self) -> int:
        return (self.raw.get("usageMetadata") or {}).get("candidatesTokenCount", 0)

    @property
    def total_tokens(self) -> int:
        usage = self.raw.get("usageMetadata") or {}
        return usage.get("totalTokenCount", self.prompt_tokens + self.completion_tokens)


class OllamaResponse(LLMResponse):
    """Response from the Ollama /api/chat and /api/embeddings endpoints."""

    @property
    def _message(self) -> dict[str, Any]:
        return self.raw.get("message") or {}

    @property
    def chat_completion(self) -> Optional[str]:
        return self._message.get("content")

    @property
    def completion(self) -> Optional[str]:
        return self.chat_completion if self._message else self.raw.get("response")

    @property
    def role(self) -> Optional[str]:
        return self._message.get("role")

    @property
    def tool_calls(self) -> list[dict[str, Any]]:
        return list(self._message.get("tool_calls") or [])

    @property
    def embeddings(self) -> list[list[float]]:
        if "embedding" in self.raw:
            return [self.raw["embedding"]]
        return list(self.raw.get("embeddings") or [])

    @property
    def prompt_tokens(self) -> int:
        return self.raw.get("prompt_eval_count", 0)

    @property
    def completion_tokens(self) -> int:
        return self.raw.get("eval_count", 0)


class CohereResponse(LLMResponse):
    """Response from the Cohere v2 chat / embed API."""

    @property
    def _message(self) -> dict[str, Any]:
        return self.raw.get("message") or {}

    @property
    def chat_completion(self) -> Optional[str]:
        content = self._message.get("content") or []
        texts = [item.get("text", "") for item in content if item.get("type") == "text"]
        return "".join(texts) if texts else None

    @property
    def role(self) -> Optional[str]:
        return self._message.get("role")

    @property
    def tool_calls(self) -> list[dict[str, Any]]:
        return list(self._message.get("tool_calls") or [])

    @property
    def tool_plan(self) -> Optional[str]:
        return self._message.get("tool_plan")

    @property
    def embeddings(self) -> list[list[float]]:
        embeddings = self.raw.get("embeddings") or {}
        if isinstance(embeddings, dict):
            return list(embeddings.get("float", []))
        return list(embeddings)

    @property
    def _billed_units(self) -> dict[str, Any]:
        return (self.raw.get("usage") or {}).get("billed_units") or {}

    @property
    def prompt_tokens(self) -> int:
        return int(self._billed_units.get("input_tokens", 0))

    @property
    def completion_tokens(self) -> int:
        return int(self._billed_units.get("output_tokens", 0))


__all__ = [
    "LLMResponse",
    "OpenAIResponse",
    "MistralAIResponse",
    "AnthropicResponse",
    "GoogleGeminiResponse",
    "OllamaResponse",
    "CohereResponse",
]
