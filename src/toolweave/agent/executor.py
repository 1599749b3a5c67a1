"""Tool execution for agents.

Resolves a normalized ToolCall to one of the agent's tools by exact name,
runs it inside a tracing span and turns the result into an Observation.
"""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Iterable

from opentelemetry import trace

from ..errors import ToolNotFoundError
from ..tools.base import Tool, ToolResponse
from .types import Observation, ToolCall

if TYPE_CHECKING:
    import logging

# Get tracer for tool execution spans
tracer = trace.get_tracer(__name__)

# Cap on tool output shown to the LLM
MAX_OBSERVATION_CHARS = 8000


class ToolExecutor:
    """Dispatches tool calls to an agent's tools."""

    def __init__(self, tools: Iterable[Tool], logger: "logging.Logger"):
        """Initialize tool executor.

        Args:
            tools: Tools available to the agent (names must be unique)
            logger: Logger for dispatch messages
        """
        self.tools: dict[str, Tool] = {}
        for tool in tools:
            if tool.name in self.tools:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            self.tools[tool.name] = tool
        self.logger = logger

    def resolve(self, tool_name: str) -> Tool:
        """Find a tool by exact name.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        tool = self.tools.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name, self.tools)
        return tool

    async def execute(self, tool_call: ToolCall) -> Observation:
        """Run a structured tool call (function-calling mode)."""
        tool = self.resolve(tool_call.tool_name)
        with tracer.start_as_current_span(
            "agent.tool_call",
            attributes={
                "tool.name": tool_call.tool_name,
                "tool.method": tool_call.method_name,
                "tool.arguments": json.dumps(tool_call.arguments, default=str)[:500],
            },
        ) as span:
            start = time.time()
            response = await tool.invoke(tool_call.method_name, tool_call.arguments)
            return self._observe(tool_call.function_name, response, span, start)

    async def execute_text(self, tool_name: str, text: str) -> Observation:
        """Run a tool with free-text input (ReAct mode)."""
        tool = self.resolve(tool_name)
        with tracer.start_as_current_span(
            "agent.tool_call",
            attributes={"tool.name": tool_name, "tool.input": text[:500]},
        ) as span:
            start = time.time()
            response = await tool.run_text(text)
            return self._observe(tool_name, response, span, start)

    def _observe(self, name: str, response: ToolResponse, span, start: float) -> Observation:
        latency_ms = int((time.time() - start) * 1000)
        output = response.to_text()
        if len(output) > MAX_OBSERVATION_CHARS:
            output = output[:MAX_OBSERVATION_CHARS] + "... (truncated)"

        span.set_attribute("tool.success", not response.is_error)
        span.set_attribute("tool.latency_ms", latency_ms)
        span.set_attribute("tool.output.size", len(output))

        if response.is_error:
            self.logger.warning("Tool %s returned an error: %s", name, output)
            return Observation(
                tool_name=name, success=False, output="", error=output, latency_ms=latency_ms
            )

        self.logger.info("Tool %s completed in %dms", name, latency_ms)
        return Observation(tool_name=name, success=True, output=output, latency_ms=latency_ms)


__all__ = ["ToolExecutor", "MAX_OBSERVATION_CHARS"]
