"""Ollama local model provider."""

from __future__ import annotations

import os
from typing import Any, Optional

from .base import LLMProvider
from .config import LLMConfig, ProviderType
from .response import LLMResponse, OllamaResponse


class OllamaProvider(LLMProvider):
    """Provider for a local Ollama server (``/api/chat``)."""

    provider_type = ProviderType.OLLAMA
    response_class = OllamaResponse

    DEFAULT = LLMConfig(
        base_url=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
        model="llama3.1",
        embedding_model="llama3.1",
        temperature=0.0,
        max_tokens=2048,
        timeout_ms=120000,
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

        options: dict[str, Any] = {"temperature": temperature, "num_predict": max_tokens}
        if stop_sequences:
            options["stop"] = stop_sequences

        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "stream": False,
            "options": options,
        }
        if tools:
            payload["tools"] = tools

        return f"{self.config.base_url.rstrip('/')}/api/chat", payload

    async def embed(self, text: str) -> LLMResponse:
        """Embed text via ``/api/embeddings``."""
        model = self.config.embedding_model or self.config.model
        raw = await self._request(
            "llm.embed",
            f"{self.config.base_url.rstrip('/')}/api/embeddings",
            {"model": model, "prompt": text},
            attributes={"llm.input.length": len(text)},
        )
        return self.response_class(raw, model=model)


__all__ = ["OllamaProvider"]
