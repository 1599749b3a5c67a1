"""Tests for the Agent loop - ReAct and function-calling runs."""

import pytest

from conftest import MockLLMProvider, openai_tool_call
from toolweave.agent import Agent, AgentConfig, AgentMode, AgentState
from toolweave.agent.messages import Message, OpenAIMessage
from toolweave.errors import (
    ConfigurationError,
    MaxIterationsReachedError,
    ToolNotFoundError,
    UnrecognizedToolsError,
    UnsupportedLLMError,
)
from toolweave.tools import Calculator, Tool, ToolResponse, tool_function

MIAMI_QUESTION = "What is the square root of the average temperature in Miami, Florida in May?"


class FakeSearch(Tool):
    """Search tool returning a canned answer."""

    name = "search"
    description = "Search the web"

    def __init__(self, answer: str = "The average temperature in Miami in May is 74.6°F"):
        self.answer = answer
        self.queries = []

    @tool_function("Search the web", input="search query")
    async def execute(self, input: str) -> ToolResponse:
        self.queries.append(input)
        return ToolResponse(content=self.answer)


def react_agent(ctx, llm, tools, **config) -> Agent:
    return Agent(ctx, llm, tools=tools, config=AgentConfig(mode=AgentMode.REACT, **config))


# ============================================================================
# ReAct mode
# ============================================================================


class TestReActRun:
    """Tests for text-protocol runs."""

    @pytest.mark.asyncio
    async def test_miami_temperature(self, ctx, mock_llm: MockLLMProvider):
        """Search, calculate, then answer."""
        search = FakeSearch()
        mock_llm.set_responses(
            [
                " I need to find the average temperature in Miami in May, then take its square root.\n"
                "Action: search\n"
                'Action Input: "average temperature in Miami, FL in May"',
                " I need to calculate the square root of 74.6\n"
                "Action: calculator\n"
                "Action Input: sqrt(74.6)",
                " I now know the final answer\nFinal Answer: 8.6",
            ]
        )
        agent = react_agent(ctx, mock_llm, [Calculator(), search])

        answer = await agent.run(MIAMI_QUESTION)

        assert answer == "8.6"
        assert agent.state == AgentState.DONE
        assert search.queries == ["average temperature in Miami, FL in May"]
        assert len(mock_llm.calls) == 3

        final_prompt = mock_llm.calls[2]["messages"][0]["content"]
        assert f"Question: {MIAMI_QUESTION}" in final_prompt
        assert "Observation: The average temperature in Miami in May is 74.6°F\nThought:" in final_prompt
        assert "Observation: 8.63" in final_prompt
        assert mock_llm.calls[0]["stop_sequences"] == ["Observation:"]

    @pytest.mark.asyncio
    async def test_prompt_lists_tools(self, ctx, mock_llm):
        """The ReAct prompt names every tool."""
        mock_llm.set_responses(["Final Answer: done"])
        agent = react_agent(ctx, mock_llm, [Calculator(), FakeSearch()])

        await agent.run("anything")

        prompt = mock_llm.calls[0]["messages"][0]["content"]
        assert "one of [calculator, search]" in prompt
        assert "calculator: Useful for getting the result of a math expression" in prompt
        assert prompt.endswith("Thought:")

    @pytest.mark.asyncio
    async def test_echoed_observation_label_not_duplicated(self, ctx, mock_llm):
        """A response that echoes the stop sequence does not double the label."""
        mock_llm.set_responses(
            [
                "Action: calculator\nAction Input: 2+2\nObservation:",
                "Final Answer: 4",
            ]
        )
        agent = react_agent(ctx, mock_llm, [Calculator()])

        assert await agent.run("What is 2+2?") == "4"

        prompt = mock_llm.calls[1]["messages"][0]["content"]
        assert prompt.endswith("Action Input: 2+2\nObservation: 4\nThought:")
        assert "Observation:\nObservation:" not in prompt
        assert "Observation: Observation:" not in prompt

    @pytest.mark.asyncio
    async def test_action_wins_over_final_answer(self, ctx, mock_llm):
        """When a response has both, the tool is called first."""
        mock_llm.set_responses(
            [
                "Action: calculator\nAction Input: 3*3\nFinal Answer: guessing",
                "Final Answer: 9",
            ]
        )
        agent = react_agent(ctx, mock_llm, [Calculator()])

        assert await agent.run("What is 3*3?") == "9"
        assert len(mock_llm.calls) == 2

    @pytest.mark.asyncio
    async def test_response_without_markers_continues(self, ctx, mock_llm):
        """Text with neither marker is kept in the scratchpad and the loop goes on."""
        mock_llm.set_responses([" Let me think about this.", " I know it.\nFinal Answer: 42"])
        agent = react_agent(ctx, mock_llm, [Calculator()])

        assert await agent.run("Meaning of life?") == "42"
        assert "Let me think about this." in mock_llm.calls[1]["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_max_iterations_exhausted(self, ctx, mock_llm):
        """The run fails after exactly max_iterations LLM calls."""
        mock_llm.set_responses([" Still thinking."] * 5)
        agent = react_agent(ctx, mock_llm, [Calculator()], max_iterations=3)

        with pytest.raises(MaxIterationsReachedError, match="Agent stopped after 3 iterations"):
            await agent.run("Hard question")

        assert len(mock_llm.calls) == 3
        assert agent.state == AgentState.MAX_ITERATIONS_EXCEEDED

    @pytest.mark.asyncio
    async def test_unknown_tool_is_fatal(self, ctx, mock_llm):
        """An action naming a tool the agent lacks raises."""
        mock_llm.set_responses(["Action: weather\nAction Input: Miami"])
        agent = react_agent(ctx, mock_llm, [Calculator()])

        with pytest.raises(ToolNotFoundError, match="Tool: weather not found"):
            await agent.run("Weather in Miami?")

    @pytest.mark.asyncio
    async def test_tool_error_becomes_observation(self, ctx, mock_llm):
        """A failing calculation is shown to the LLM instead of raising."""
        mock_llm.set_responses(["Action: calculator\nAction Input: 2+", "Final Answer: unknown"])
        agent = react_agent(ctx, mock_llm, [Calculator()])

        assert await agent.run("What is 2+?") == "unknown"
        prompt = mock_llm.calls[1]["messages"][0]["content"]
        assert 'Observation: "2+" is an invalid mathematical expression' in prompt

    @pytest.mark.asyncio
    async def test_question_required(self, ctx, mock_llm):
        agent = react_agent(ctx, mock_llm, [Calculator()])

        with pytest.raises(ValueError):
            await agent.run()


# ============================================================================
# Function-calling mode
# ============================================================================


class TestFunctionCallingRun:
    """Tests for structured tool-call runs."""

    @pytest.mark.asyncio
    async def test_tool_call_round_trip(self, ctx, mock_llm):
        """Tool call, tool result, then a text answer."""
        mock_llm.set_responses(
            [
                openai_tool_call("call_1", "calculator__execute", {"input": "2+2"}),
                "The answer is 4.",
            ]
        )
        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        answer = await agent.run("What is 2+2?")

        assert answer == "The answer is 4."
        assert agent.mode == AgentMode.FUNCTION_CALLING
        assert [m.role for m in agent.messages] == ["user", "assistant", "tool", "assistant"]
        assert agent.messages[1].tool_calls[0]["id"] == "call_1"
        assert agent.messages[2].tool_call_id == "call_1"
        assert agent.messages[2].content == "4"

        second_request = mock_llm.calls[1]["messages"]
        assert second_request[-1] == {"role": "tool", "content": "4", "tool_call_id": "call_1"}

    @pytest.mark.asyncio
    async def test_tools_and_instructions_sent(self, ctx, mock_llm):
        """Tool schemas and a system message go out on every call."""
        mock_llm.set_responses(["Hello!"])
        agent = Agent(
            ctx,
            mock_llm,
            tools=[Calculator()],
            config=AgentConfig(instructions="You are a math tutor"),
        )

        await agent.run("Hi")

        call = mock_llm.calls[0]
        assert call["messages"][0] == {
            "role": "system",
            "content": [{"type": "text", "text": "You are a math tutor"}],
        }
        assert call["tools"][0]["function"]["name"] == "calculator__execute"
        assert call["tool_choice"] == "auto"
        assert call["parallel_tool_calls"] is True
        # Instructions are not stored in the thread
        assert all(m.role != "system" for m in agent.messages)

    @pytest.mark.asyncio
    async def test_unknown_function_is_fatal(self, ctx, mock_llm):
        mock_llm.set_responses([openai_tool_call("call_1", "weather__current", {"city": "Miami"})])
        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        with pytest.raises(ToolNotFoundError):
            await agent.run("Weather in Miami?")

    @pytest.mark.asyncio
    async def test_validation_error_becomes_tool_output(self, ctx, mock_llm):
        """Arguments that fail validation are reported to the LLM."""
        mock_llm.set_responses(
            [openai_tool_call("call_1", "calculator__execute", {}), "Sorry, I could not compute it."]
        )
        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        assert await agent.run("Compute") == "Sorry, I could not compute it."
        assert agent.messages[2].content.startswith("Error executing calculator__execute")

    @pytest.mark.asyncio
    async def test_token_totals_accumulate(self, ctx, mock_llm):
        mock_llm.set_responses(
            [openai_tool_call("call_1", "calculator__execute", {"input": "1+1"}), "2"]
        )
        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        await agent.run("1+1?")

        assert agent.total_prompt_tokens == 30
        assert agent.total_completion_tokens == 13
        assert agent.total_tokens == 43

    @pytest.mark.asyncio
    async def test_continue_existing_thread(self, ctx, mock_llm):
        """run() without a question continues from the thread."""
        mock_llm.set_responses(["Continuing."])
        agent = Agent(ctx, mock_llm, tools=[Calculator()])
        agent.add_message(content="Start here")

        assert await agent.run() == "Continuing."

    @pytest.mark.asyncio
    async def test_callbacks(self, ctx, mock_llm):
        added = []
        executed = []
        mock_llm.set_responses(
            [openai_tool_call("call_1", "calculator__execute", {"input": "5*5"}), "25"]
        )
        agent = Agent(
            ctx,
            mock_llm,
            tools=[Calculator()],
            add_message_callback=added.append,
            tool_execution_callback=executed.append,
        )

        await agent.run("5*5?")

        assert len(added) == 4
        assert all(isinstance(m, OpenAIMessage) for m in added)
        assert [call.function_name for call in executed] == ["calculator__execute"]
        assert executed[0].arguments == {"input": "5*5"}

    @pytest.mark.asyncio
    async def test_max_iterations_exhausted(self, ctx, mock_llm):
        """A model that never stops calling tools hits the cap."""
        mock_llm.set_responses(
            [
                openai_tool_call(f"call_{i}", "calculator__execute", {"input": f"{i}+1"})
                for i in range(5)
            ]
        )
        agent = Agent(
            ctx,
            mock_llm,
            tools=[Calculator()],
            config=AgentConfig(mode=AgentMode.FUNCTION_CALLING, max_iterations=3),
        )

        with pytest.raises(MaxIterationsReachedError, match="Agent stopped after 3 iterations"):
            await agent.run("Count forever")

        assert len(mock_llm.calls) == 3
        assert agent.state == AgentState.MAX_ITERATIONS_EXCEEDED
        assert [m.content for m in agent.messages if m.role == "tool"] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_manual_tool_execution(self, ctx, mock_llm):
        """The run pauses on tool calls until the caller submits outputs."""
        executed = []
        mock_llm.set_responses(
            [
                openai_tool_call("call_1", "calculator__execute", {"input": "2+2"}),
                "The answer is 4.",
            ]
        )
        agent = Agent(ctx, mock_llm, tools=[Calculator()], tool_execution_callback=executed.append)

        assert await agent.run("What is 2+2?", auto_tool_execution=False) is None
        assert agent.state == AgentState.REQUIRES_ACTION
        assert [call.tool_call_id for call in agent.pending_tool_calls] == ["call_1"]
        assert agent.pending_tool_calls[0].arguments == {"input": "2+2"}
        assert executed == []
        assert len(mock_llm.calls) == 1

        agent.submit_tool_output("call_1", 4)

        assert agent.pending_tool_calls == []
        assert await agent.run() == "The answer is 4."
        assert agent.state == AgentState.DONE
        assert [m.role for m in agent.messages] == ["user", "assistant", "tool", "assistant"]
        assert mock_llm.calls[1]["messages"][-1] == {
            "role": "tool",
            "content": "4",
            "tool_call_id": "call_1",
        }

    @pytest.mark.asyncio
    async def test_resume_requires_all_tool_outputs(self, ctx, mock_llm):
        mock_llm.set_responses([openai_tool_call("call_1", "calculator__execute", {"input": "1"})])
        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        await agent.run("One?", auto_tool_execution=False)

        with pytest.raises(ValueError, match="Tool outputs missing for: call_1"):
            await agent.run()
        assert len(mock_llm.calls) == 1

    @pytest.mark.asyncio
    async def test_manual_tool_execution_needs_function_calling(self, ctx, mock_llm):
        agent = react_agent(ctx, mock_llm, [Calculator()])

        with pytest.raises(ConfigurationError, match="function-calling mode"):
            await agent.run("2+2?", auto_tool_execution=False)


# ============================================================================
# Construction
# ============================================================================


class TestAgentConstruction:
    """Tests for tool resolution, protocol selection and validation."""

    def test_tools_by_name(self, ctx, mock_llm):
        agent = Agent(ctx, mock_llm, tools=["calculator", "file_system"])

        assert [tool.name for tool in agent.tools] == ["calculator", "file_system"]

    def test_unrecognized_tools_listed(self, ctx, mock_llm):
        with pytest.raises(UnrecognizedToolsError) as exc_info:
            Agent(ctx, mock_llm, tools=["calculator", "nope", "bogus"])

        assert exc_info.value.names == ["nope", "bogus"]
        assert "nope, bogus" in str(exc_info.value)

    def test_invalid_tool_type(self, ctx, mock_llm):
        with pytest.raises(TypeError):
            Agent(ctx, mock_llm, tools=[42])

    def test_auto_mode_uses_function_calling(self, ctx, mock_llm):
        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        assert agent.mode == AgentMode.FUNCTION_CALLING
        assert agent.message_class is OpenAIMessage

    def test_unsupported_llm(self, ctx):
        class UnknownLLM:
            pass

        with pytest.raises(UnsupportedLLMError, match="Unsupported LLM type: UnknownLLM"):
            Agent(ctx, UnknownLLM(), tools=[Calculator()])

    def test_react_mode_without_adapter(self, ctx):
        class TextOnlyLLM:
            pass

        agent = Agent(ctx, TextOnlyLLM(), tools=[Calculator()], config=AgentConfig(mode="react"))

        assert agent.adapter is None
        assert agent.message_class is Message

    def test_tool_choice_validation(self, ctx, mock_llm):
        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        agent.tool_choice = "calculator__execute"
        assert agent.tool_choice == "calculator__execute"

        with pytest.raises(ConfigurationError, match="Tool choice must be one of"):
            agent.tool_choice = "search__execute"

    def test_callbacks_must_be_callable(self, ctx, mock_llm):
        with pytest.raises(TypeError):
            Agent(ctx, mock_llm, add_message_callback="not callable")

    def test_clear_messages(self, ctx, mock_llm):
        agent = Agent(ctx, mock_llm, tools=[Calculator()])
        agent.add_message(content="hello")

        agent.clear_messages()

        assert agent.messages == []
        assert agent.state == AgentState.IDLE

    def test_submit_tool_output(self, ctx, mock_llm):
        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        message = agent.submit_tool_output("call_9", 42)

        assert message.role == "tool"
        assert message.tool_call_id == "call_9"
        assert message.content == "42"

    def test_config_from_project(self, project_config, ctx, mock_llm):
        project_config.agent.instructions = "Be brief"
        project_config.agent.max_iterations = 4

        agent = Agent(ctx, mock_llm, tools=[Calculator()])

        assert agent.instructions == "Be brief"
        assert agent.config.max_iterations == 4
