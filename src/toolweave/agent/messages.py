"""Conversation messages in each vendor's wire shape.

Messages are immutable. Each vendor subclass declares its role vocabulary
and renders itself with ``to_dict()``; the base ``Message`` uses the
OpenAI shape and is what text-only (ReAct) runs record.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional


class StandardRole(Enum):
    """Vendor-independent meaning of a role."""

    SYSTEM = "system"
    LLM = "llm"
    TOOL = "tool"
    USER = "user"


@dataclass(frozen=True)
class Message:
    """A single message in a thread.

    Attributes:
        role: Role in the vendor's vocabulary
        content: Text content (may be empty when tool_calls are present)
        image_url: Optional image attached to a user message
        tool_calls: Vendor-shaped tool call records (LLM role only)
        tool_call_id: Id of the call a tool-role message answers
    """

    ROLES: ClassVar[tuple[str, ...]] = ("system", "assistant", "user", "tool")
    SYSTEM_ROLE: ClassVar[Optional[str]] = "system"
    LLM_ROLE: ClassVar[str] = "assistant"
    USER_ROLE: ClassVar[str] = "user"
    TOOL_ROLE: ClassVar[str] = "tool"

    role: str
    content: str = ""
    image_url: Optional[str] = None
    tool_calls: tuple[dict[str, Any], ...] = ()
    tool_call_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role not in self.ROLES:
            raise ValueError(f"Role must be one of {', '.join(self.ROLES)}, got {self.role!r}")
        if self.content is None:
            object.__setattr__(self, "content", "")
        if not isinstance(self.tool_calls, tuple):
            object.__setattr__(self, "tool_calls", tuple(self.tool_calls or ()))
        if not all(isinstance(call, dict) for call in self.tool_calls):
            raise ValueError("Tool calls must be dicts")
        if self.tool_calls and self.role != self.LLM_ROLE:
            raise ValueError(f"Only {self.LLM_ROLE!r} messages can carry tool_calls")
        if self.role == self.TOOL_ROLE and not self.tool_call_id:
            raise ValueError(f"{self.TOOL_ROLE!r} messages require a tool_call_id")

    @property
    def standard_role(self) -> StandardRole:
        if self.role == self.SYSTEM_ROLE:
            return StandardRole.SYSTEM
        if self.role == self.LLM_ROLE:
            return StandardRole.LLM
        if self.role == self.TOOL_ROLE:
            return StandardRole.TOOL
        return StandardRole.USER

    @property
    def is_system(self) -> bool:
        return self.standard_role is StandardRole.SYSTEM

    @property
    def is_llm(self) -> bool:
        return self.standard_role is StandardRole.LLM

    @property
    def is_tool(self) -> bool:
        return self.standard_role is StandardRole.TOOL

    @property
    def is_user(self) -> bool:
        return self.standard_role is StandardRole.USER

    def _content_parts(self) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = []
        if self.content:
            parts.append({"type": "text", "text": self.content})
        if self.image_url:
            parts.append({"type": "image_url", "image_url": {"url": self.image_url}})
        return parts

    def to_dict(self) -> dict[str, Any]:
        """OpenAI chat completions shape."""
        if self.is_llm and self.tool_calls:
            return {"role": self.role, "tool_calls": list(self.tool_calls)}
        if self.is_tool:
            return {"role": self.role, "content": self.content, "tool_call_id": self.tool_call_id}
        if self.image_url:
            return {"role": self.role, "content": self._content_parts()}
        return {"role": self.role, "content": self.content}


class OpenAIMessage(Message):
    """Message for the OpenAI chat completions API."""

    def to_dict(self) -> dict[str, Any]:
        if self.is_llm and self.tool_calls:
            return {"role": self.role, "tool_calls": list(self.tool_calls)}
        if self.is_tool:
            return {"role": self.role, "content": self.content, "tool_call_id": self.tool_call_id}
        return {"role": self.role, "content": self._content_parts()}


class AnthropicMessage(Message):
    """Message for the Anthropic messages API.

    Anthropic has no system role (instructions go in the ``system``
    parameter) and expects tool results as user messages.
    """

    ROLES = ("assistant", "user", "tool_result")
    SYSTEM_ROLE = None
    TOOL_ROLE = "tool_result"

    def to_dict(self) -> dict[str, Any]:
        if self.is_tool:
            return {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": self.tool_call_id,
                        "content": self.content,
                    }
                ],
            }
        if self.is_llm:
            blocks: list[dict[str, Any]] = []
            if self.content:
                blocks.append({"type": "text", "text": self.content})
            blocks.extend(self.tool_calls)
            return {"role": self.role, "content": blocks}

        blocks = []
        if self.image_url:
            blocks.append({"type": "image", "source": {"type": "url", "url": self.image_url}})
        if self.content:
            blocks.append({"type": "text", "text": self.content})
        return {"role": self.role, "content": blocks}


class GoogleGeminiMessage(Message):
    """Message for the Gemini generateContent API (``role`` + ``parts``)."""

    ROLES = ("user", "model", "function")
    SYSTEM_ROLE = None
    LLM_ROLE = "model"
    TOOL_ROLE = "function"

    def to_dict(self) -> dict[str, Any]:
        if self.is_tool:
            parts: list[dict[str, Any]] = [
                {
                    "functionResponse": {
                        "name": self.tool_call_id,
                        "response": {"name": self.tool_call_id, "content": self.content},
                    }
                }
            ]
        elif self.tool_calls:
            parts = list(self.tool_calls)
        else:
            parts = [{"text": self.content}]
        return {"role": self.role, "parts": parts}


class OllamaMessage(Message):
    """Message for the Ollama /api/chat endpoint (flat shape)."""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.image_url and self.image_url.startswith("data:") and "," in self.image_url:
            data["images"] = [self.image_url.split(",", 1)[1]]
        if self.tool_calls:
            data["tool_calls"] = list(self.tool_calls)
        if self.tool_call_id:
            data["tool_call_id"] = self.tool_call_id
        return data


class MistralAIMessage(Message):
    """Message for the Mistral chat API."""

    def to_dict(self) -> dict[str, Any]:
        if self.is_llm:
            data: dict[str, Any] = {"role": self.role, "content": self.content, "prefix": False}
            if self.tool_calls:
                data["tool_calls"] = list(self.tool_calls)
            return data
        if self.is_tool:
            return {
                "role": self.role,
                "content": self.content,
                "tool_call_id": self.tool_call_id,
            }
        if self.image_url:
            return {"role": self.role, "content": self._content_parts()}
        return {"role": self.role, "content": self.content}


class CohereMessage(Message):
    """Message for the Cohere v2 chat API."""

    def to_dict(self) -> dict[str, Any]:
        if self.is_llm and self.tool_calls:
            data: dict[str, Any] = {"role": self.role, "tool_calls": list(self.tool_calls)}
            if self.content:
                data["tool_plan"] = self.content
            return data
        if self.is_tool:
            return {"role": self.role, "tool_call_id": self.tool_call_id, "content": self.content}
        return {"role": self.role, "content": self.content}


def message_to_json(message: Message) -> str:
    """JSON rendering of a message, used for token estimates."""
    return json.dumps(message.to_dict())


__all__ = [
    "StandardRole",
    "Message",
    "OpenAIMessage",
    "AnthropicMessage",
    "GoogleGeminiMessage",
    "OllamaMessage",
    "MistralAIMessage",
    "CohereMessage",
    "message_to_json",
]
