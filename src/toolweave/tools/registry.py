"""Tool registry - explicit mapping from canonical tool names to tool classes."""

from __future__ import annotations

from typing import Iterable, Optional

from ..config import ProjectConfig
from ..errors import UnrecognizedToolsError
from .base import Tool


class ToolRegistry:
    """Registry of tool classes with validation and prompt formatting."""

    def __init__(self):
        self._tools: dict[str, type[Tool]] = {}

    def register(self, tool_cls: type[Tool]) -> type[Tool]:
        """Register a tool class under its canonical name.

        Returns the class so it can be used as a decorator.
        """
        self._tools[tool_cls.name] = tool_cls
        return tool_cls

    def get(self, name: str) -> Optional[type[Tool]]:
        """Get tool class by name."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def validate_tools(self, names: Iterable[str]) -> None:
        """Reject any names that are not registered.

        Raises:
            UnrecognizedToolsError: Listing every unrecognized name
        """
        unrecognized = [name for name in names if name not in self._tools]
        if unrecognized:
            raise UnrecognizedToolsError(unrecognized)

    def build(
        self,
        names: Iterable[str],
        project_config: Optional[ProjectConfig] = None,
    ) -> list[Tool]:
        """Validate names, then instantiate each tool from its [tools.<name>] settings.

        Args:
            names: Canonical tool names
            project_config: Config supplying per-tool settings

        Returns:
            Tool instances in the requested order
        """
        names = list(names)
        self.validate_tools(names)
        project_config = project_config or ProjectConfig()
        return [
            self._tools[name].from_settings(project_config.tool_settings(name), project_config)
            for name in names
        ]

    def format_for_prompt(
        self,
        tool_names: Optional[list[str]] = None,
        detailed: bool = False,
    ) -> str:
        """Format tools for a system prompt.

        Args:
            tool_names: Specific tools to include (None = all)
            detailed: Include every function signature

        Returns:
            Formatted string for system prompt
        """
        names = self.names() if tool_names is None else tool_names
        tool_classes = [self._tools[name] for name in names if name in self._tools]
        return format_tools_for_prompt(tool_classes, detailed=detailed)


def format_tools_for_prompt(tools: Iterable[Tool | type[Tool]], detailed: bool = False) -> str:
    """Describe tools one per line ("name: description"), optionally with signatures."""
    lines = []
    for tool in tools:
        lines.append(tool.describe())
        if detailed:
            for function in tool.functions.values():
                lines.append(f"  • {function.get_signature()} - {function.description}")
                for param in function.parameters:
                    lines.append(f"      {param.to_string()}")
    return "\n".join(lines) if lines else "No tools available."


def create_default_registry() -> ToolRegistry:
    """Create a registry with the built-in tools."""
    from .calculator import Calculator
    from .file_system import FileSystem
    from .search import SerpApiSearch
    from .wikipedia import Wikipedia

    registry = ToolRegistry()
    for tool_cls in (Calculator, SerpApiSearch, Wikipedia, FileSystem):
        registry.register(tool_cls)
    return registry


__all__ = ["ToolRegistry", "format_tools_for_prompt", "create_default_registry"]
