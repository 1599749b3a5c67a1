"""OpenAI-compatible chat completions provider.

Works with any server exposing the OpenAI ``/chat/completions`` API; the
DEEPSEEK and LOCAL presets point at such servers.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Optional

from .base import LLMProvider
from .config import LLMConfig, ProviderType
from .response import LLMResponse, OpenAIResponse

if TYPE_CHECKING:
    from ..context import RunContext


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI and OpenAI-compatible APIs."""

    provider_type = ProviderType.OPENAI
    response_class = OpenAIResponse

    # Pre-configured popular providers
    OPENAI = LLMConfig(
        base_url="https://api.openai.com/v1",
        model="gpt-4o-mini",
        api_key=os.getenv("OPENAI_API_KEY"),
        embedding_model="text-embedding-3-small",
        temperature=0.7,
        max_tokens=4096,
        timeout_ms=30000,
    )

    DEEPSEEK = LLMConfig(
        base_url="https://api.deepseek.com/v1",
        model="deepseek-chat",
        api_key=os.getenv("DEEPSEEK_API_KEY"),
        temperature=0.7,
        max_tokens=4096,
        timeout_ms=30000,
    )

    LOCAL = LLMConfig(
        base_url="http://localhost:8000/v1",
        model="qwen2.5-0.5b-instruct",
        temperature=0.8,
        max_tokens=2048,
        timeout_ms=30000,
    )

    DEFAULT = OPENAI

    @classmethod
    def from_name(cls, ctx: RunContext, preset_name: str) -> OpenAIProvider:
        """Create provider from a preset name.

        Args:
            ctx: Run context
            preset_name: One of "openai", "deepseek", "local"

        Returns:
            Configured OpenAIProvider instance
        """
        presets = {
            "openai": cls.OPENAI,
            "deepseek": cls.DEEPSEEK,
            "local": cls.LOCAL,
        }
        config = presets.get(preset_name.lower())
        if not config:
            raise ValueError(
                f"Unknown preset: {preset_name}. Choose from: {list(presets.keys())}"
            )
        return cls(ctx, config)

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
            if tool_choice is not None:
                payload["tool_choice"] = tool_choice
            if parallel_tool_calls is not None:
                payload["parallel_tool_calls"] = parallel_tool_calls
        if stop_sequences:
            payload["stop"] = stop_sequences

        return f"{self.config.base_url.rstrip('/')}/chat/completions", payload

    async def embed(self, text: str) -> LLMResponse:
        """Embed text via the ``/embeddings`` endpoint."""
        model = self.config.embedding_model or "text-embedding-3-small"
        raw = await self._request(
            "llm.embed",
            f"{self.config.base_url.rstrip('/')}/embeddings",
            {"model": model, "input": text},
            attributes={"llm.input.length": len(text)},
        )
        return self.response_class(raw, model=model)


__all__ = ["OpenAIProvider"]
