"""Tools the agent can call, and the registry that resolves them by name."""

from .base import (
    FUNCTION_NAME_SEPARATOR,
    Tool,
    ToolFunction,
    ToolParameter,
    ToolResponse,
    snake_case,
    tool_function,
)
from .calculator import Calculator, evaluate_expression
from .file_system import FileSystem
from .registry import ToolRegistry, create_default_registry, format_tools_for_prompt
from .search import SerpApiSearch
from .wikipedia import Wikipedia

__all__ = [
    "FUNCTION_NAME_SEPARATOR",
    "Tool",
    "ToolFunction",
    "ToolParameter",
    "ToolResponse",
    "snake_case",
    "tool_function",
    "ToolRegistry",
    "create_default_registry",
    "format_tools_for_prompt",
    "Calculator",
    "evaluate_expression",
    "SerpApiSearch",
    "Wikipedia",
    "FileSystem",
]
