"""Agent types - data structures for the agent loop.

This module contains the core data types used by the agent:
- AgentState: Where the loop currently is
- ToolCall: A normalized tool invocation request
- Observation: Result of executing a tool call
- Turn: What the LLM asked for in one iteration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class AgentState(Enum):
    """States of the agent loop.

    AWAITING_LLM -> PARSING_RESPONSE -> DISPATCHING_TOOL -> AWAITING_LLM ...
    ending in DONE, or MAX_ITERATIONS_EXCEEDED when the cap is hit. With
    manual tool execution the loop pauses in REQUIRES_ACTION until the
    caller submits tool outputs.
    """

    IDLE = "idle"
    AWAITING_LLM = "awaiting_llm"
    PARSING_RESPONSE = "parsing_response"
    DISPATCHING_TOOL = "dispatching_tool"
    REQUIRES_ACTION = "requires_action"
    DONE = "done"
    MAX_ITERATIONS_EXCEEDED = "max_iterations_exceeded"


@dataclass(frozen=True)
class ToolCall:
    """A tool call normalized from a vendor-specific representation."""

    tool_call_id: Optional[str]
    tool_name: str
    method_name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    @property
    def function_name(self) -> str:
        return f"{self.tool_name}__{self.method_name}"

    def to_dict(self) -> dict:
        return {
            "id": self.tool_call_id,
            "tool": self.tool_name,
            "method": self.method_name,
            "args": self.arguments,
        }


@dataclass
class Observation:
    """Result of a tool execution."""

    tool_name: str
    success: bool
    output: str
    error: Optional[str] = None
    latency_ms: int = 0

    @property
    def text(self) -> str:
        """What the LLM sees."""
        return self.output if self.success else (self.error or self.output)


@dataclass
class Turn:
    """Parsed outcome of one LLM response."""

    tool_calls: list[ToolCall] = field(default_factory=list)
    final_answer: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return self.final_answer is not None


__all__ = ["AgentState", "ToolCall", "Observation", "Turn"]
