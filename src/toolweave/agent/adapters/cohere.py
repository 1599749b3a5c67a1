"""Cohere v2 tool-calling adapter."""

from __future__ import annotations

from typing import Any, Optional

from ...llm.config import ProviderType
from ...tools.base import Tool
from ..messages import CohereMessage
from ..types import ToolCall
from .base import LLMAdapter


class CohereAdapter(LLMAdapter):
    """Adapter for Cohere v2 chat, which uses OpenAI-format tools."""

    provider_type = ProviderType.COHERE
    message_class = CohereMessage
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
            self.logger.warning("Cohere does not support forcing a tool; ignoring %r", tool_choice)

        if instructions:
            messages = [self._system_message(instructions), *messages]
        params: dict[str, Any] = {"messages": messages}
        if tools:
            params["tools"] = self.build_tools(tools)
        return params

    def extract_tool_call_args(self, tool_call: dict[str, Any]) -> ToolCall:
        function = tool_call.get("function") or {}
        tool_name, method_name = self.split_function_name(function.get("name", ""))
        return ToolCall(
            tool_call_id=tool_call.get("id"),
            tool_name=tool_name,
            method_name=method_name,
            arguments=self.parse_arguments(function.get("arguments")),
        )


__all__ = ["CohereAdapter"]
