"""Anthropic messages API provider."""

from __future__ import annotations

import os
from typing import Any, Optional

from .base import LLMProvider
from .config import LLMConfig, ProviderType
from .response import AnthropicResponse

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(LLMProvider):
    """Provider for Claude models via ``/v1/messages``.

    Anthropic has no embeddings endpoint; ``embed`` raises NotImplementedError.
    """

    provider_type = ProviderType.ANTHROPIC
    response_class = AnthropicResponse

    DEFAULT = LLMConfig(
        base_url="https://api.anthropic.com/v1",
        model="claude-3-5-sonnet-20240620",
        api_key=os.getenv("ANTHROPIC_API_KEY"),
        temperature=0.0,
        max_tokens=4096,
        timeout_ms=60000,
    )

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "anthropic-version": ANTHROPIC_VERSION,
        }
        if self.config.api_key:
            headers["x-api-key"] = self.config.api_key
        return headers

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
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if system:
            payload["system"] = system
        if tools:
            payload["tools"] = tools
            if tool_choice is not None:
                payload["tool_choice"] = tool_choice
        if stop_sequences:
            payload["stop_sequences"] = stop_sequences

        return f"{self.config.base_url.rstrip('/')}/messages", payload


__all__ = ["AnthropicProvider"]
