"""Ollama tool-calling adapter."""

from __future__ import annotations

from typing import Any, Optional

from ...llm.config import ProviderType
from ...tools.base import Tool
from ..messages import OllamaMessage
from ..types import ToolCall
from .base import LLMAdapter


class OllamaAdapter(LLMAdapter):
    """Adapter for Ollama's OpenAI-style tools.

    Ollama has no tool_choice or parallel_tool_calls parameters and its tool
    calls carry no id; the function name is used as the id.
    """

    provider_type = ProviderType.OLLAMA
    message_class = OllamaMessage
    allowed_tool_choices = ("auto",)

    def build_chat_params(
        self,
        tools: list[Tool],
        instructions: Optional[str],
        messages: list[dict[str, Any]],
        tool_choice: str,
        parallel_tool_calls: bool = True,
    ) -> dict[str, Any]:
        if tool_choice != "auto":
            self.logger.warning("Ollama does not support tool_choice; ignoring %r", tool_choice)
        if not parallel_tool_calls:
            self.logger.warning("Ollama does not support disabling parallel tool calls")

        if instructions:
            messages = [self._system_message(instructions), *messages]
        params: dict[str, Any] = {"messages": messages}
        if tools:
            params["tools"] = self.build_tools(tools)
        return params

    def extract_tool_call_args(self, tool_call: dict[str, Any]) -> ToolCall:
        function = tool_call.get("function") or {}
        function_name = function.get("name", "")
        tool_name, method_name = self.split_function_name(function_name)
        return ToolCall(
            tool_call_id=tool_call.get("id") or function_name,
            tool_name=tool_name,
            method_name=method_name,
            arguments=self.parse_arguments(function.get("arguments")),
        )


__all__ = ["OllamaAdapter"]
