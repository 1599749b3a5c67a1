"""Agent - the tool-calling loop.

One state machine drives both tool protocols:

    AWAITING_LLM -> PARSING_RESPONSE -> DISPATCHING_TOOL -> AWAITING_LLM ...
                                     -> DONE
                                     -> REQUIRES_ACTION (manual tool execution)
    (cap reached)                    -> MAX_ITERATIONS_EXCEEDED

The protocol (ReAct text or structured function calling) is picked from the
agent mode and the adapter's ``supports_tool_calling`` flag.

Example:
    ```python
    from toolweave import Agent, RunContext, load_project_config
    from toolweave.llm import provider_from_config

    ctx = RunContext.from_config(load_project_config())
    llm = provider_from_config(ctx, "openai")

    agent = Agent(ctx, llm, tools=["calculator", "search"])
    answer = await agent.run(
        "What is the square root of the average temperature in Miami, Florida in May?"
    )
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Union

from opentelemetry import trace

from ..errors import ConfigurationError, MaxIterationsReachedError
from ..tools.base import Tool
from ..tools.registry import ToolRegistry, create_default_registry
from .adapters import ADAPTERS, LLMAdapter, build_adapter
from .config import AgentConfig, AgentMode
from .executor import ToolExecutor
from .messages import Message
from .strategies import AgentStrategy, FunctionCallingStrategy, ReActStrategy
from .thread import Thread
from .types import AgentState, ToolCall

if TYPE_CHECKING:
    from ..context import RunContext
    from ..llm.base import LLMProvider
    from ..llm.response import LLMResponse

# Get tracer for agent spans
tracer = trace.get_tracer(__name__)

MessageCallback = Callable[[Message], Any]
ToolExecutionCallback = Callable[[ToolCall], Any]


class Agent:
    """LLM agent that interleaves LLM calls with tool execution.

    The agent owns its thread; it is meant for one conversation at a time.
    """

    def __init__(
        self,
        ctx: RunContext,
        llm: LLMProvider,
        tools: Iterable[Union[str, Tool]] = (),
        config: Optional[AgentConfig] = None,
        registry: Optional[ToolRegistry] = None,
        add_message_callback: Optional[MessageCallback] = None,
        tool_execution_callback: Optional[ToolExecutionCallback] = None,
    ):
        """Initialize agent.

        Args:
            ctx: Run context (config, logger, agent id)
            llm: LLM provider
            tools: Tool instances and/or registered tool names
            config: Agent configuration (defaults to the [agent] table)
            registry: Registry resolving tool names (default: built-in tools)
            add_message_callback: Called with every message added to the thread
            tool_execution_callback: Called with every tool call before it runs

        Raises:
            UnrecognizedToolsError: If any tool name is not registered
            UnsupportedLLMError: If function calling is needed and the LLM has no adapter
            ConfigurationError: On an invalid tool_choice or mode
        """
        self.ctx = ctx
        self.llm = llm
        self.config = config or AgentConfig.from_settings(ctx.config.agent)
        self.logger = ctx.child_logger("agent")

        for callback in (add_message_callback, tool_execution_callback):
            if callback is not None and not callable(callback):
                raise TypeError("Callbacks must be callable")
        self.add_message_callback = add_message_callback
        self.tool_execution_callback = tool_execution_callback

        self.tools = self._resolve_tools(tools, registry)
        self.adapter, self.mode = self._select_protocol()
        self.message_class: type[Message] = self.adapter.message_class if self.adapter else Message
        self.executor = ToolExecutor(self.tools, self.logger)

        self._thread = Thread()
        self._instructions = self.config.instructions
        self._tool_choice = "auto"
        self.tool_choice = self.config.tool_choice

        self.state = AgentState.IDLE
        self.pending_tool_calls: list[ToolCall] = []
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0
        self.total_tokens = 0

        self._strategy: AgentStrategy = (
            ReActStrategy(self) if self.mode is AgentMode.REACT else FunctionCallingStrategy(self)
        )

    def _resolve_tools(
        self, tools: Iterable[Union[str, Tool]], registry: Optional[ToolRegistry]
    ) -> list[Tool]:
        tools = list(tools)
        names = [tool for tool in tools if isinstance(tool, str)]
        built: dict[str, Tool] = {}
        if names:
            registry = registry or create_default_registry()
            registry.validate_tools(names)
            built = dict(zip(names, registry.build(names, self.ctx.config)))

        resolved = []
        for tool in tools:
            if isinstance(tool, str):
                resolved.append(built[tool])
            elif isinstance(tool, Tool):
                resolved.append(tool)
            else:
                raise TypeError(f"Tools must be Tool instances or names, got {type(tool).__name__}")
        return resolved

    def _select_protocol(self) -> tuple[Optional[LLMAdapter], AgentMode]:
        mode = self.config.mode
        if mode is AgentMode.REACT:
            adapter_cls = ADAPTERS.get(getattr(self.llm, "provider_type", None))
            return (adapter_cls(logger=self.logger) if adapter_cls else None), mode

        adapter = build_adapter(self.llm, logger=self.logger)
        if mode is AgentMode.AUTO:
            mode = AgentMode.FUNCTION_CALLING if adapter.supports_tool_calling else AgentMode.REACT
        elif not adapter.supports_tool_calling:
            raise ConfigurationError(
                f"{type(self.llm).__name__} does not support function calling; use mode='react'"
            )
        return adapter, mode

    @property
    def thread(self) -> Thread:
        return self._thread

    @property
    def messages(self) -> list[Message]:
        return self._thread.messages

    @property
    def instructions(self) -> Optional[str]:
        return self._instructions

    @instructions.setter
    def instructions(self, value: Optional[str]) -> None:
        # Sent as a system message or a system parameter, per adapter, on every call
        self._instructions = value

    @property
    def tool_choice(self) -> str:
        return self._tool_choice

    @tool_choice.setter
    def tool_choice(self, value: str) -> None:
        if self.mode is AgentMode.FUNCTION_CALLING:
            self.adapter.validate_tool_choice(value, self.tools)
        self._tool_choice = value

    def add_message(
        self,
        role: Optional[str] = None,
        content: Optional[str] = None,
        image_url: Optional[str] = None,
        tool_calls: Iterable[dict[str, Any]] = (),
        tool_call_id: Optional[str] = None,
    ) -> Message:
        """Append a message to the thread.

        Args:
            role: Role in the adapter's vocabulary (default: user)
            content: Text content
            image_url: Optional image URL
            tool_calls: Raw tool calls (LLM role only)
            tool_call_id: Id of the call a tool message answers

        Returns:
            The appended message
        """
        message = self.message_class(
            role=role or self.message_class.USER_ROLE,
            content=content or "",
            image_url=image_url,
            tool_calls=tuple(tool_calls or ()),
            tool_call_id=tool_call_id,
        )
        self._thread.append(message)
        if self.add_message_callback is not None:
            self.add_message_callback(message)
        return message

    def submit_tool_output(self, tool_call_id: str, output: Any) -> Message:
        """Append a tool result message for a tool call.

        Also marks the call as answered when the agent is paused waiting for
        tool outputs.
        """
        self.pending_tool_calls = [
            call for call in self.pending_tool_calls if call.tool_call_id != tool_call_id
        ]
        return self.add_message(
            role=self.message_class.TOOL_ROLE,
            content=str(output),
            tool_call_id=tool_call_id,
        )

    def clear_messages(self) -> None:
        """Start over with an empty thread."""
        self._thread = Thread()
        self.pending_tool_calls = []
        self.state = AgentState.IDLE

    async def run(
        self, question: Optional[str] = None, auto_tool_execution: bool = True
    ) -> Optional[str]:
        """Run the loop until a final answer or the iteration cap.

        Args:
            question: New user input (optional in function-calling mode
                when the thread already holds messages)
            auto_tool_execution: Execute requested tools. When False the run
                pauses in REQUIRES_ACTION with the calls in
                ``pending_tool_calls``; answer each with submit_tool_output
                and call run() again to continue.

        Returns:
            Final answer text, or None when paused for tool outputs

        Raises:
            MaxIterationsReachedError: After max_iterations LLM calls without an answer
            ToolNotFoundError: If the LLM requests a tool the agent does not have
            ConfigurationError: If manual tool execution is requested in ReAct mode
            ValueError: If a paused run is resumed before every tool call is answered
        """
        if not auto_tool_execution and self.mode is AgentMode.REACT:
            raise ConfigurationError("Manual tool execution requires function-calling mode")
        if self.pending_tool_calls:
            missing = ", ".join(str(call.tool_call_id) for call in self.pending_tool_calls)
            raise ValueError(f"Tool outputs missing for: {missing}")

        max_iterations = self.config.max_iterations

        with tracer.start_as_current_span(
            "agent.run",
            attributes={
                "agent.id": self.ctx.agent_id,
                "agent.mode": self.mode.value,
                "agent.max_iterations": max_iterations,
                "agent.tools": ",".join(tool.name for tool in self.tools),
            },
        ) as run_span:
            await self._strategy.start(question)

            for iteration in range(1, max_iterations + 1):
                with tracer.start_as_current_span(
                    "agent.iteration", attributes={"iteration": iteration}
                ) as iter_span:
                    self.state = AgentState.AWAITING_LLM
                    response = await self._strategy.think()
                    self._record_usage(response)

                    self.state = AgentState.PARSING_RESPONSE
                    turn = self._strategy.parse(response)

                    if turn.is_final:
                        self.state = AgentState.DONE
                        iter_span.set_attribute("final_answer", True)
                        run_span.set_attribute("agent.iterations", iteration)
                        self.logger.info("Final answer after %d iteration(s)", iteration)
                        return turn.final_answer

                    if turn.tool_calls and not auto_tool_execution:
                        self.state = AgentState.REQUIRES_ACTION
                        self.pending_tool_calls = list(turn.tool_calls)
                        iter_span.set_attribute("tool_calls", len(turn.tool_calls))
                        run_span.set_attribute("agent.iterations", iteration)
                        self.logger.info(
                            "Waiting for output of %d tool call(s)", len(turn.tool_calls)
                        )
                        return None

                    if turn.tool_calls:
                        self.state = AgentState.DISPATCHING_TOOL
                        iter_span.set_attribute("tool_calls", len(turn.tool_calls))
                        for tool_call in turn.tool_calls:
                            if self.tool_execution_callback is not None:
                                self.tool_execution_callback(tool_call)
                            observation = await self._strategy.dispatch(tool_call)
                            self._strategy.observe(tool_call, observation)

            self.state = AgentState.MAX_ITERATIONS_EXCEEDED
            run_span.set_status(
                trace.Status(trace.StatusCode.ERROR, "max iterations reached")
            )
            self.logger.warning("Agent stopped after %d iterations", max_iterations)
            raise MaxIterationsReachedError(max_iterations)

    def _record_usage(self, response: LLMResponse) -> None:
        self.total_prompt_tokens += response.prompt_tokens or 0
        self.total_completion_tokens += response.completion_tokens or 0
        self.total_tokens += response.total_tokens or 0


__all__ = ["Agent"]
