"""OpenAI-format adapters (OpenAI, Mistral AI)."""

from __future__ import annotations

from typing import Any, Optional

from ...llm.config import ProviderType
from ...tools.base import Tool
from ..messages import MistralAIMessage, OpenAIMessage
from ..types import ToolCall
from .base import LLMAdapter


class OpenAIAdapter(LLMAdapter):
    """Adapter for the OpenAI chat completions tool-calling protocol."""

    provider_type = ProviderType.OPENAI
    message_class = OpenAIMessage
    allowed_tool_choices = ("auto", "none")

    def build_chat_params(
        self,
        tools: list[Tool],
        instructions: Optional[str],
        messages: list[dict[str, Any]],
        tool_choice: str,
        parallel_tool_calls: bool = True,
    ) -> dict[str, Any]:
        if instructions:
            messages = [self._system_message(instructions), *messages]
        params: dict[str, Any] = {"messages": messages}
        if tools:
            params["tools"] = self.build_tools(tools)
            params["tool_choice"] = self.build_tool_choice(tool_choice)
            params["parallel_tool_calls"] = parallel_tool_calls
        return params

    def build_tool_choice(self, choice: str) -> Any:
        if choice in self.allowed_tool_choices:
            return choice
        return {"type": "function", "function": {"name": choice}}

    def extract_tool_call_args(self, tool_call: dict[str, Any]) -> ToolCall:
        function = tool_call.get("function") or {}
        tool_name, method_name = self.split_function_name(function.get("name", ""))
        return ToolCall(
            tool_call_id=tool_call.get("id"),
            tool_name=tool_name,
            method_name=method_name,
            arguments=self.parse_arguments(function.get("arguments")),
        )


class MistralAIAdapter(OpenAIAdapter):
    """Mistral uses the OpenAI tool format with its own message shape."""

    provider_type = ProviderType.MISTRAL_AI
    message_class = MistralAIMessage
    allowed_tool_choices = ("auto", "none", "any")


__all__ = ["OpenAIAdapter", "MistralAIAdapter"]
