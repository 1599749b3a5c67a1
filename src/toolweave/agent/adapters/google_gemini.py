"""Google Gemini function-calling adapter."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ...llm.config import ProviderType
from ...tools.base import Tool
from ..messages import GoogleGeminiMessage
from ..types import ToolCall
from .base import LLMAdapter


class GoogleGeminiAdapter(LLMAdapter):
    """Adapter for Gemini ``functionCall`` / ``functionResponse`` parts.

    Gemini function calls carry no id; the function name doubles as the id
    that correlates a ``function`` message with its call.
    """

    provider_type = ProviderType.GOOGLE_GEMINI
    message_class = GoogleGeminiMessage
    allowed_tool_choices = ("auto", "none", "any")

    def build_chat_params(
        self,
        tools: list[Tool],
        instructions: Optional[str],
        messages: list[dict[str, Any]],
        tool_choice: str,
        parallel_tool_calls: bool = True,
    ) -> dict[str, Any]:
        if not parallel_tool_calls:
            self.logger.warning("Google Gemini does not support disabling parallel tool calls")

        params: dict[str, Any] = {"messages": messages}
        if instructions:
            params["system"] = instructions
        if tools:
            params["tools"] = self.build_tools(tools)
            params["tool_choice"] = self.build_tool_choice(tool_choice)
        return params

    def build_tools(self, tools: Iterable[Tool]) -> list[dict[str, Any]]:
        return [schema for tool in tools for schema in tool.to_google_gemini_format()]

    def build_tool_choice(self, choice: str) -> dict[str, Any]:
        if choice in self.allowed_tool_choices:
            return {"function_calling_config": {"mode": choice.upper()}}
        return {
            "function_calling_config": {
                "mode": "ANY",
                "allowed_function_names": [choice],
            }
        }

    def extract_tool_call_args(self, tool_call: dict[str, Any]) -> ToolCall:
        function_call = tool_call.get("functionCall") or {}
        function_name = function_call.get("name", "")
        tool_name, method_name = self.split_function_name(function_name)
        return ToolCall(
            tool_call_id=function_name,
            tool_name=tool_name,
            method_name=method_name,
            arguments=self.parse_arguments(function_call.get("args")),
        )


__all__ = ["GoogleGeminiAdapter"]
