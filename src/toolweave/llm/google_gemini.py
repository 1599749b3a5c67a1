"""Google Gemini (Generative Language API) provider."""

from __future__ import annotations

import os
from typing import Any, Optional

from .base import LLMProvider
from .config import LLMConfig, ProviderType
from .response import GoogleGeminiResponse, LLMResponse


class GoogleGeminiProvider(LLMProvider):
    """Provider for Gemini models via ``models/{model}:generateContent``.

    Messages use Gemini's ``{"role", "parts"}`` shape and the API key is
    sent as the ``key`` query parameter.
    """

    provider_type = ProviderType.GOOGLE_GEMINI
    response_class = GoogleGeminiResponse

    DEFAULT = LLMConfig(
        base_url="https://generativelanguage.googleapis.com/v1beta",
        model="gemini-1.5-pro",
        api_key=os.getenv("GOOGLE_GEMINI_API_KEY"),
        embedding_model="text-embedding-004",
        temperature=0.0,
        max_tokens=4096,
        timeout_ms=60000,
    )

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _key_params(self) -> dict[str, str]:
        return {"key": self.config.api_key} if self.config.api_key else {}

    def user_message(self, text: str) -> dict[str, Any]:
        return {"role": "user", "parts": [{"text": text}]}

    def _chat_request(
        self,
        messages: list[dict[str, Any]],
        *,
        system: Optional[str],
        tools: Optional[list[dict[str, Any]]],
        tool_choice: Any,
        parallel_tool_calls: Optional[bool],
        temperature: float,
        max_tokens: int,
        stop_sequences: Optional[list[str]],
    ) -> tuple[str, dict[str, Any]]:
        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        }
        if stop_sequences:
            generation_config["stopSequences"] = stop_sequences

        payload: dict[str, Any] = {
            "contents": messages,
            "generationConfig": generation_config,
        }
        if system:
            payload["system_instruction"] = {"parts": [{"text": system}]}
        if tools:
            payload["tools"] = [{"function_declarations": tools}]
            if tool_choice is not None:
                payload["tool_config"] = tool_choice

        base = self.config.base_url.rstrip("/")
        return f"{base}/models/{self.config.model}:generateContent", payload

    async def _request(self, span_name, url, payload, *, params=None, attributes=None):
        # API key travels as a query parameter
        merged = {**self._key_params(), **(params or {})}
        return await super()._request(
            span_name, url, payload, params=merged, attributes=attributes
        )

    async def embed(self, text: str) -> LLMResponse:
        """Embed text via ``models/{embedding_model}:embedContent``."""
        model = self.config.embedding_model or "text-embedding-004"
        raw = await self._request(
            "llm.embed",
            f"{self.config.base_url.rstrip('/')}/models/{model}:embedContent",
            {"content": {"parts": [{"text": text}]}},
            attributes={"llm.input.length": len(text)},
        )
        return self.response_class(raw, model=model)


__all__ = ["GoogleGeminiProvider"]
