"""Tool protocols for the agent loop.

Both strategies plug into the same Agent state machine:
- ReActStrategy: text prompt with Action / Action Input / Final Answer sentinels
- FunctionCallingStrategy: vendor structured tool calls via the LLM adapter
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from .loop import STOP_SEQUENCES, append_observation, build_react_prompt, parse_react_response
from .types import Observation, ToolCall, Turn

if TYPE_CHECKING:
    from ..llm.response import LLMResponse
    from .agent import Agent


class AgentStrategy(ABC):
    """One way of asking the LLM for tool calls and feeding back results."""

    def __init__(self, agent: Agent):
        self.agent = agent

    @abstractmethod
    async def start(self, question: Optional[str]) -> None:
        """Prepare a run for a new question."""

    @abstractmethod
    async def think(self) -> LLMResponse:
        """Call the LLM once."""

    @abstractmethod
    def parse(self, response: LLMResponse) -> Turn:
        """Record the response and extract tool calls or a final answer."""

    @abstractmethod
    async def dispatch(self, tool_call: ToolCall) -> Observation:
        """Execute one tool call."""

    @abstractmethod
    def observe(self, tool_call: ToolCall, observation: Observation) -> None:
        """Feed a tool result back into the context for the next LLM call."""


class ReActStrategy(AgentStrategy):
    """Text-based ReAct protocol.

    The whole run is one growing prompt: the LLM is stopped at
    "Observation:", the tool result is appended, and the LLM continues.
    """

    def __init__(self, agent: Agent):
        super().__init__(agent)
        self.prompt = ""

    async def start(self, question: Optional[str]) -> None:
        if not question:
            raise ValueError("A question is required for a ReAct run")
        self.prompt = build_react_prompt(question, self.agent.tools)
        self.agent.add_message(role=self.agent.message_class.USER_ROLE, content=question)

    async def think(self) -> LLMResponse:
        return await self.agent.llm.complete(
            self.prompt,
            system=self.agent.instructions,
            stop_sequences=STOP_SEQUENCES,
            temperature=self.agent.config.temperature,
        )

    def parse(self, response: LLMResponse) -> Turn:
        text = response.completion or ""
        self.prompt += text
        self.agent.add_message(role=self.agent.message_class.LLM_ROLE, content=text)

        step = parse_react_response(text)
        if step.is_action:
            return Turn(
                tool_calls=[
                    ToolCall(
                        tool_call_id=step.action,
                        tool_name=step.action,
                        method_name="execute",
                        arguments={"input": step.action_input or ""},
                    )
                ]
            )
        if step.is_final:
            return Turn(final_answer=step.final_answer)
        return Turn()

    async def dispatch(self, tool_call: ToolCall) -> Observation:
        return await self.agent.executor.execute_text(
            tool_call.tool_name, tool_call.arguments.get("input", "")
        )

    def observe(self, tool_call: ToolCall, observation: Observation) -> None:
        self.prompt = append_observation(self.prompt, observation.text)
        self.agent.submit_tool_output(tool_call.tool_call_id or tool_call.tool_name, observation.text)


class FunctionCallingStrategy(AgentStrategy):
    """Structured tool calls through the provider adapter.

    The thread is replayed on every call; a response without tool calls
    ends the run with its text as the answer.
    """

    async def start(self, question: Optional[str]) -> None:
        if question:
            self.agent.add_message(role=self.agent.adapter.user_role, content=question)
        elif not len(self.agent.thread):
            raise ValueError("A question is required when the thread is empty")

    async def think(self) -> LLMResponse:
        agent = self.agent
        params = agent.adapter.build_chat_params(
            tools=agent.tools,
            instructions=agent.instructions,
            messages=agent.thread.to_dicts(),
            tool_choice=agent.tool_choice,
            parallel_tool_calls=agent.config.parallel_tool_calls,
        )
        return await agent.llm.chat(**params, temperature=agent.config.temperature)

    def parse(self, response: LLMResponse) -> Turn:
        adapter = self.agent.adapter
        tool_calls = response.tool_calls
        self.agent.add_message(
            role=adapter.llm_role,
            content=response.chat_completion,
            tool_calls=tool_calls,
        )

        if tool_calls:
            return Turn(tool_calls=[adapter.extract_tool_call_args(call) for call in tool_calls])

        answer = response.chat_completion
        if answer is None:
            self.agent.logger.warning("LLM returned neither tool calls nor content")
            answer = ""
        return Turn(final_answer=answer)

    async def dispatch(self, tool_call: ToolCall) -> Observation:
        return await self.agent.executor.execute(tool_call)

    def observe(self, tool_call: ToolCall, observation: Observation) -> None:
        self.agent.submit_tool_output(
            tool_call.tool_call_id or tool_call.function_name, observation.text
        )


__all__ = ["AgentStrategy", "ReActStrategy", "FunctionCallingStrategy"]
