"""Test fixtures and configuration for toolweave tests.

Test Structure:
    tests/
    ├── conftest.py          # Shared fixtures (scripted LLM, run context)
    ├── unit/                # Pure unit tests (parsing, adapters, schemas)
    └── test_*.py            # Component tests driving agents, memory, tools

Running tests:
    pytest tests/unit -v     # Unit tests only
    pytest -v                # Everything
"""

import json
import sys
from pathlib import Path
from typing import Any

import pytest

from toolweave.config import ProjectConfig
from toolweave.context import RunContext
from toolweave.llm.base import LLMProvider
from toolweave.llm.config import LLMConfig, ProviderType
from toolweave.llm.response import OpenAIResponse

# Add tests directory to path so test modules can import the helpers below
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))


def openai_text(content: str, prompt_tokens: int = 10, completion_tokens: int = 5) -> dict:
    """Raw OpenAI chat completion carrying text."""
    return {
        "model": "mock-model",
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
    }


def openai_tool_call(call_id: str, name: str, arguments: dict[str, Any]) -> dict:
    """Raw OpenAI chat completion requesting one tool call."""
    return {
        "model": "mock-model",
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": call_id,
                            "type": "function",
                            "function": {"name": name, "arguments": json.dumps(arguments)},
                        }
                    ],
                }
            }
        ],
        "usage": {"prompt_tokens": 20, "completion_tokens": 8},
    }


class MockLLMProvider(LLMProvider):
    """Scripted LLM provider: chat() returns the configured responses in order."""

    provider_type = ProviderType.OPENAI
    response_class = OpenAIResponse
    DEFAULT = LLMConfig(base_url="http://mock.local/v1", model="mock-model")

    def __init__(self, ctx: RunContext):
        super().__init__(ctx)
        self.responses: list[Any] = []
        self.calls: list[dict[str, Any]] = []
        self.embeddings: dict[str, list[float]] = {}
        self.summaries: list[str] = []

    def set_responses(self, responses: list[Any]):
        """Set sequence of responses (text or raw dicts, or exceptions to raise)."""
        self.responses = list(responses)
        self.calls = []

    def _chat_request(self, messages, **kwargs):
        return "http://mock.local/v1/chat/completions", {"messages": messages}

    async def chat(self, messages, **kwargs):
        self.calls.append({"messages": messages, **kwargs})
        if not self.responses:
            return self.response_class(openai_text("Final Answer: No more responses configured"))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            response = openai_text(response)
        return self.response_class(response, model="mock-model")

    async def embed(self, text: str):
        vector = self.embeddings.get(text, [1.0, 0.0])
        return self.response_class({"data": [{"embedding": vector}]})

    async def summarize(self, text: str) -> str:
        self.summaries.append(text)
        return f"summary {len(self.summaries)}"


@pytest.fixture
def project_config() -> ProjectConfig:
    return ProjectConfig()


@pytest.fixture
def ctx(project_config) -> RunContext:
    """Create a run context with default configuration."""
    return RunContext(config=project_config, agent_id="test-agent")


@pytest.fixture
def mock_llm(ctx) -> MockLLMProvider:
    """Create a scripted LLM provider."""
    return MockLLMProvider(ctx)
