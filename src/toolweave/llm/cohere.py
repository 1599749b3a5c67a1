"""Cohere v2 chat provider."""

from __future__ import annotations

import os
from typing import Any, Optional

from .base import LLMProvider
from .config import LLMConfig, ProviderType
from .response import CohereResponse, LLMResponse


class CohereProvider(LLMProvider):
    """Provider for Cohere Command models via ``/v2/chat``."""

    provider_type = ProviderType.COHERE
    response_class = CohereResponse

    DEFAULT = LLMConfig(
        base_url="https://api.cohere.com/v2",
        model="command-r-plus",
        api_key=os.getenv("COHERE_API_KEY"),
        embedding_model="embed-english-v3.0",
        temperature=0.0,
        max_tokens=4096,
        timeout_ms=60000,
    )

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
        if system:
            messages = [{"role": "system", "content": system}, *messages]

        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if tools:
            payload["tools"] = tools
        if stop_sequences:
            payload["stop_sequences"] = stop_sequences

        return f"{self.config.base_url.rstrip('/')}/chat", payload

    async def embed(self, text: str) -> LLMResponse:
        """Embed text via ``/v2/embed``."""
        model = self.config.embedding_model or "embed-english-v3.0"
        raw = await self._request(
            "llm.embed",
            f"{self.config.base_url.rstrip('/')}/embed",
            {
                "model": model,
                "texts": [text],
                "input_type": "search_document",
                "embedding_types": ["float"],
            },
            attributes={"llm.input.length": len(text)},
        )
        return self.response_class(raw, model=model)


__all__ = ["CohereProvider"]
