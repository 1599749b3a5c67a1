"""Agent configuration - settings for agent loop behavior.

This module defines configuration options for agents:
- AgentMode: How the agent talks to the LLM about tools
- AgentConfig: All agent loop parameters
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import AgentSettings
from ..errors import ConfigurationError


class AgentMode(Enum):
    """How tool use is negotiated with the LLM.

    - REACT: Text protocol (Thought / Action / Action Input / Final Answer)
    - FUNCTION_CALLING: Vendor structured tool calls
    - AUTO: Function calling when the adapter supports it, ReAct otherwise
    """

    AUTO = "auto"
    REACT = "react"
    FUNCTION_CALLING = "function_calling"

    @classmethod
    def parse(cls, value: str | AgentMode) -> AgentMode:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Invalid agent mode: {value}. Choose from: {[m.value for m in cls]}"
            ) from None


@dataclass
class AgentConfig:
    """Configuration for the agent loop.

    Attributes:
        instructions: System instructions for the LLM
        mode: Which tool protocol to use
        max_iterations: Maximum LLM calls per run before giving up
        tool_choice: "auto", an adapter-specific keyword, or a function name
        parallel_tool_calls: Whether the LLM may request several tools per turn
        temperature: LLM temperature override (None = provider default)
    """

    instructions: Optional[str] = None
    mode: AgentMode = AgentMode.AUTO
    max_iterations: int = 10
    tool_choice: str = "auto"
    parallel_tool_calls: bool = True
    temperature: Optional[float] = None

    def __post_init__(self) -> None:
        self.mode = AgentMode.parse(self.mode)
        if self.max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")

    @classmethod
    def from_settings(cls, settings: AgentSettings) -> AgentConfig:
        """Build from the [agent] table of toolweave.toml."""
        return cls(
            instructions=settings.instructions,
            mode=AgentMode.parse(settings.mode),
            max_iterations=settings.max_iterations,
            tool_choice=settings.tool_choice,
            parallel_tool_calls=settings.parallel_tool_calls,
        )


__all__ = ["AgentMode", "AgentConfig"]
