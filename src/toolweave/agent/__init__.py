"""Agent loop, messages and LLM adapters."""

from .adapters import ADAPTERS, LLMAdapter, build_adapter
from .agent import Agent
from .config import AgentConfig, AgentMode
from .executor import ToolExecutor
from .loop import append_observation, build_react_prompt, parse_react_response
from .messages import (
    AnthropicMessage,
    CohereMessage,
    GoogleGeminiMessage,
    Message,
    MistralAIMessage,
    OllamaMessage,
    OpenAIMessage,
    StandardRole,
)
from .thread import Thread
from .types import AgentState, Observation, ToolCall, Turn

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentMode",
    "AgentState",
    "ToolCall",
    "Observation",
    "Turn",
    "ToolExecutor",
    "Thread",
    "Message",
    "StandardRole",
    "OpenAIMessage",
    "AnthropicMessage",
    "GoogleGeminiMessage",
    "OllamaMessage",
    "MistralAIMessage",
    "CohereMessage",
    "ADAPTERS",
    "LLMAdapter",
    "build_adapter",
    "append_observation",
    "build_react_prompt",
    "parse_react_response",
]
