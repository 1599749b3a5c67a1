"""Error types raised by toolweave.

Every error derives from ToolweaveError and from the builtin a caller would
naturally catch (ValueError for configuration mistakes, RuntimeError for
provider failures):

- ConfigurationError: invalid LLM, tool or template setup (raised at construction)
- ToolNotFoundError: the LLM asked for a tool that is not attached to the agent
- LLMError / TokenLimitExceededError: provider call failures
- MaxIterationsReachedError: the agent loop ran out of iterations
- OutputParserError: LLM output does not match the expected structure
"""

from __future__ import annotations

from typing import Iterable


class ToolweaveError(Exception):
    """Base class for all toolweave errors."""


class ConfigurationError(ToolweaveError, ValueError):
    """Invalid configuration detected before any LLM call is made."""


class UnsupportedLLMError(ConfigurationError):
    """No adapter or provider exists for the requested LLM."""


class UnrecognizedToolsError(ConfigurationError):
    """One or more requested tool names are absent from the registry."""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(f"Unrecognized Tools: {', '.join(self.names)}")


class TemplateVariableError(ConfigurationError):
    """Prompt template placeholders do not match the declared input variables."""


class ToolNotFoundError(ToolweaveError, ValueError):
    """The LLM requested a tool that is not available to the agent."""

    def __init__(self, tool_name: str, available: Iterable[str] = ()):
        self.tool_name = tool_name
        self.available = list(available)
        super().__init__(
            f"Tool: {tool_name} not found in tools: {', '.join(self.available) or '(none)'}"
        )


class LLMError(ToolweaveError, RuntimeError):
    """An LLM provider request failed."""


class TokenLimitExceededError(LLMError):
    """The request exceeds the model's context window.

    Attributes:
        token_overflow: Estimated number of tokens above the limit
    """

    def __init__(self, message: str, token_overflow: int = 0):
        super().__init__(message)
        self.token_overflow = token_overflow


class MaxIterationsReachedError(ToolweaveError):
    """The agent loop hit its iteration cap without a final answer."""

    def __init__(self, max_iterations: int):
        self.max_iterations = max_iterations
        super().__init__(f"Agent stopped after {max_iterations} iterations")


class OutputParserError(ToolweaveError, ValueError):
    """LLM output could not be parsed into the expected structure.

    Attributes:
        text: The output that failed to parse
    """

    def __init__(self, message: str, text: str):
        super().__init__(message)
        self.text = text


__all__ = [
    "ToolweaveError",
    "ConfigurationError",
    "UnsupportedLLMError",
    "UnrecognizedToolsError",
    "TemplateVariableError",
    "ToolNotFoundError",
    "LLMError",
    "TokenLimitExceededError",
    "MaxIterationsReachedError",
    "OutputParserError",
]
