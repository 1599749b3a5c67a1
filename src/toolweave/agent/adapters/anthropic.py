"""Anthropic tool-use adapter."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ...llm.config import ProviderType
from ...tools.base import Tool
from ..messages import AnthropicMessage
from ..types import ToolCall
from .base import LLMAdapter


class AnthropicAdapter(LLMAdapter):
    """Adapter for Anthropic ``tool_use`` / ``tool_result`` blocks."""

    provider_type = ProviderType.ANTHROPIC
    message_class = AnthropicMessage
    allowed_tool_choices = ("auto", "any")

    def build_chat_params(
        self,
        tools: list[Tool],
        instructions: Optional[str],
        messages: list[dict[str, Any]],
        tool_choice: str,
        parallel_tool_calls: bool = True,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"messages": messages}
        if instructions:
            params["system"] = instructions
        if tools:
            params["tools"] = self.build_tools(tools)
            params["tool_choice"] = self.build_tool_choice(tool_choice, parallel_tool_calls)
        return params

    def build_tools(self, tools: Iterable[Tool]) -> list[dict[str, Any]]:
        return [schema for tool in tools for schema in tool.to_anthropic_format()]

    def build_tool_choice(self, choice: str, parallel_tool_calls: bool) -> dict[str, Any]:
        tool_choice: dict[str, Any] = {"disable_parallel_tool_use": not parallel_tool_calls}
        if choice in self.allowed_tool_choices:
            tool_choice["type"] = choice
        else:
            tool_choice["type"] = "tool"
            tool_choice["name"] = choice
        return tool_choice

    def extract_tool_call_args(self, tool_call: dict[str, Any]) -> ToolCall:
        tool_name, method_name = self.split_function_name(tool_call.get("name", ""))
        return ToolCall(
            tool_call_id=tool_call.get("id"),
            tool_name=tool_name,
            method_name=method_name,
            arguments=self.parse_arguments(tool_call.get("input")),
        )


__all__ = ["AnthropicAdapter"]
