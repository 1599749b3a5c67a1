"""Base class for LLM adapters.

An adapter translates the agent's uniform request (tools, instructions,
messages, tool_choice, parallel_tool_calls) into a vendor's chat parameters,
and the vendor's raw tool call records back into ToolCall values.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Iterable, Optional

from ...errors import ConfigurationError
from ...llm.config import ProviderType
from ...tools.base import FUNCTION_NAME_SEPARATOR, Tool
from ..messages import Message
from ..types import ToolCall


class LLMAdapter(ABC):
    """Vendor-specific request/response shaping for the agent loop."""

    provider_type: ClassVar[ProviderType]
    message_class: ClassVar[type[Message]] = Message
    allowed_tool_choices: ClassVar[tuple[str, ...]] = ("auto", "none")
    supports_tool_calling: ClassVar[bool] = True

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @property
    def tool_role(self) -> str:
        """Role used for tool-result messages ("tool", "tool_result", "function")."""
        return self.message_class.TOOL_ROLE

    @property
    def llm_role(self) -> str:
        return self.message_class.LLM_ROLE

    @property
    def user_role(self) -> str:
        return self.message_class.USER_ROLE

    @property
    def support_system_message(self) -> bool:
        """Whether instructions travel as a first-class system message."""
        return self.message_class.SYSTEM_ROLE is not None

    @abstractmethod
    def build_chat_params(
        self,
        tools: list[Tool],
        instructions: Optional[str],
        messages: list[dict[str, Any]],
        tool_choice: str,
        parallel_tool_calls: bool = True,
    ) -> dict[str, Any]:
        """Keyword arguments for ``LLMProvider.chat``."""

    @abstractmethod
    def extract_tool_call_args(self, tool_call: dict[str, Any]) -> ToolCall:
        """Normalize one vendor tool call record."""

    def build_tools(self, tools: Iterable[Tool]) -> list[dict[str, Any]]:
        return [schema for tool in tools for schema in tool.to_openai_format()]

    def build_message(
        self,
        role: str,
        content: Optional[str] = None,
        image_url: Optional[str] = None,
        tool_calls: Iterable[dict[str, Any]] = (),
        tool_call_id: Optional[str] = None,
    ) -> Message:
        return self.message_class(
            role=role,
            content=content or "",
            image_url=image_url,
            tool_calls=tuple(tool_calls or ()),
            tool_call_id=tool_call_id,
        )

    def available_tool_names(self, tools: Iterable[Tool]) -> list[str]:
        """LLM-facing function names (``tool__method``) of all tools."""
        return [name for tool in tools for name in tool.function_names()]

    def validate_tool_choice(self, tool_choice: str, tools: Iterable[Tool]) -> None:
        """Reject a tool_choice that is neither a keyword nor a function name.

        Raises:
            ConfigurationError: If the choice is not allowed
        """
        allowed = list(self.allowed_tool_choices) + self.available_tool_names(tools)
        if tool_choice not in allowed:
            raise ConfigurationError(
                f"Tool choice must be one of: {', '.join(allowed)}; got {tool_choice!r}"
            )

    @staticmethod
    def split_function_name(function_name: str) -> tuple[str, str]:
        tool_name, _, method_name = function_name.partition(FUNCTION_NAME_SEPARATOR)
        return tool_name, method_name

    def parse_arguments(self, arguments: Any) -> dict[str, Any]:
        """Decode tool call arguments given as a JSON string or a mapping."""
        if arguments is None or arguments == "":
            return {}
        if isinstance(arguments, dict):
            return dict(arguments)
        try:
            parsed = json.loads(arguments)
        except (TypeError, json.JSONDecodeError) as e:
            self.logger.warning("Could not decode tool call arguments %r: %s", arguments, e)
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def _system_message(self, instructions: str) -> dict[str, Any]:
        return self.build_message(role=self.message_class.SYSTEM_ROLE, content=instructions).to_dict()


__all__ = ["LLMAdapter"]
