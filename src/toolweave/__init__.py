"""toolweave - LLM agents that call tools.

Quick Start:
    ```python
    from toolweave import Agent, RunContext, load_project_config
    from toolweave.llm import provider_from_config

    ctx = RunContext.from_config(load_project_config())
    llm = provider_from_config(ctx, "openai")

    agent = Agent(ctx, llm, tools=["calculator", "search"])
    answer = await agent.run("What is the square root of 74.6?")
    ```

Custom tools:
    ```python
    from toolweave import Tool, ToolResponse, tool_function

    class Weather(Tool):
        description = "Current weather lookup"

        @tool_function("Get current weather", city="City name")
        async def current(self, city: str) -> ToolResponse:
            ...

    agent = Agent(ctx, llm, tools=[Weather()])
    ```

Module structure:
    - agent/: Agent loop, messages, thread, provider adapters
    - llm/: LLM providers (direct HTTP) and normalized responses
    - tools/: Tool base class, registry and built-in tools
    - memory/: Conversation memory (truncate / summarize)
    - prompts/: Prompt templates and packaged prompts
    - output_parsers/: Structured output parsing and repair
    - evals/: RAGAS metrics
    - telemetry/: Logging and OpenTelemetry tracing
"""

# Agent
from .agent import Agent, AgentConfig, AgentMode, Message, Thread

# Config
from .config import ProjectConfig, load_project_config
from .context import RunContext

# Errors
from .errors import (
    ConfigurationError,
    LLMError,
    MaxIterationsReachedError,
    OutputParserError,
    TemplateVariableError,
    TokenLimitExceededError,
    ToolNotFoundError,
    ToolweaveError,
    UnrecognizedToolsError,
    UnsupportedLLMError,
)

# LLM
from .llm import LLMConfig, LLMProvider, LLMResponse, ProviderType

# Memory
from .memory import Conversation, ConversationMemory, MemoryStrategy

# Output parsers
from .output_parsers import OutputFixingParser, StructuredOutputParser

# Prompts
from .prompts import FewShotPromptTemplate, PromptTemplate, load_from_path

# Telemetry
from .telemetry import init_telemetry, shutdown_telemetry

# Tools
from .tools import Tool, ToolRegistry, ToolResponse, tool_function

__version__ = "0.1.0"

__all__ = [
    # Agent
    "Agent",
    "AgentConfig",
    "AgentMode",
    "Message",
    "Thread",
    # Config
    "ProjectConfig",
    "load_project_config",
    "RunContext",
    # LLM
    "LLMProvider",
    "LLMConfig",
    "LLMResponse",
    "ProviderType",
    # Memory
    "Conversation",
    "ConversationMemory",
    "MemoryStrategy",
    # Output parsers
    "StructuredOutputParser",
    "OutputFixingParser",
    # Prompts
    "PromptTemplate",
    "FewShotPromptTemplate",
    "load_from_path",
    # Tools
    "Tool",
    "ToolRegistry",
    "ToolResponse",
    "tool_function",
    # Telemetry
    "init_telemetry",
    "shutdown_telemetry",
    # Errors
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
