"""Tests for configuration management."""

from pathlib import Path

import pytest

from toolweave.config import (
    AgentSettings,
    LLMProviderConfig,
    ProjectConfig,
    load_project_config,
)
from toolweave.context import RunContext
from toolweave.errors import ConfigurationError


def test_llm_provider_config():
    """Test LLMProviderConfig."""
    config = LLMProviderConfig(
        name="claude",
        type="anthropic",
        api_key="test-key",
        model="claude-3-5-sonnet-20240620",
    )
    assert config.name == "claude"
    assert config.api_key == "test-key"
    assert config.max_tokens is None
    assert config.temperature is None
    assert config.timeout_sec is None


def test_project_config_defaults():
    """Test ProjectConfig defaults."""
    config = ProjectConfig()
    assert config.version == "0.1.0"
    assert config.agent == AgentSettings()
    assert config.agent.max_iterations == 10
    assert config.memory.strategy == "truncate"
    assert not config.telemetry.enabled
    assert len(config.llm_providers) == 0
    assert config.tools == {}


def test_project_config_load_full(tmp_path):
    """Test loading every table."""
    config_file = tmp_path / "toolweave.toml"
    config_file.write_text(
        """
name = "research-bot"
version = "1.0.0"

[llm.openai]
type = "openai"
api_key = "sk-test-key"
model = "gpt-4o-mini"
max_tokens = 4096
temperature = 0.2
context_window = 128000

[llm.local]
type = "ollama"
api_base = "http://localhost:11434"
model = "llama3.1"

[agent]
instructions = "You are a research assistant"
mode = "react"
max_iterations = 5
tool_choice = "none"

[memory]
strategy = "summarize"

[logging]
level = "DEBUG"

[telemetry]
enabled = true
otlp_endpoint = "http://localhost:4317"

[tools.search]
api_key = "serp-key"

[tools.file_system]
root = "/tmp/sandbox"
"""
    )

    config = ProjectConfig.load(config_file)
    assert config.name == "research-bot"
    assert config.version == "1.0.0"

    openai = config.provider("openai")
    assert openai.api_key == "sk-test-key"
    assert openai.max_tokens == 4096
    assert openai.temperature == 0.2
    assert openai.context_window == 128000

    local = config.provider("local")
    assert local.type == "ollama"
    assert local.api_base == "http://localhost:11434"

    assert config.agent.instructions == "You are a research assistant"
    assert config.agent.mode == "react"
    assert config.agent.max_iterations == 5
    assert config.agent.tool_choice == "none"
    assert config.memory.strategy == "summarize"
    assert config.logging.level == "DEBUG"
    assert config.telemetry.enabled
    assert config.telemetry.otlp_endpoint == "http://localhost:4317"
    assert config.tool_settings("search") == {"api_key": "serp-key"}
    assert config.tool_settings("file_system") == {"root": "/tmp/sandbox"}
    assert config.tool_settings("calculator") == {}


def test_provider_type_defaults_to_table_name(tmp_path):
    config_file = tmp_path / "toolweave.toml"
    config_file.write_text('[llm.anthropic]\nmodel = "claude-3-haiku-20240307"\n')

    config = ProjectConfig.load(config_file)
    assert config.provider("anthropic").type == "anthropic"


def test_env_var_expansion(tmp_path, monkeypatch):
    """${VAR} references are expanded, .env files fill in missing variables."""
    monkeypatch.setenv("TW_TEST_OPENAI_KEY", "sk-from-env")
    monkeypatch.delenv("TW_TEST_SERP_KEY", raising=False)
    (tmp_path / ".env").write_text('TW_TEST_SERP_KEY="serp-from-dotenv"\n')
    config_file = tmp_path / "toolweave.toml"
    config_file.write_text(
        """
[llm.openai]
api_key = "${TW_TEST_OPENAI_KEY}"

[tools.search]
api_key = "${TW_TEST_SERP_KEY}"
"""
    )

    config = ProjectConfig.load(config_file)
    assert config.provider("openai").api_key == "sk-from-env"
    assert config.tool_settings("search")["api_key"] == "serp-from-dotenv"
    monkeypatch.delenv("TW_TEST_SERP_KEY", raising=False)


def test_unknown_provider_raises():
    with pytest.raises(ConfigurationError, match="not configured"):
        ProjectConfig().provider("missing")


def test_invalid_toml_raises(tmp_path):
    config_file = tmp_path / "toolweave.toml"
    config_file.write_text("[llm.openai\nmodel = ")

    with pytest.raises(ConfigurationError, match="Failed to parse"):
        ProjectConfig.load(config_file)


def test_project_config_nonexistent_file():
    """Test loading non-existent config returns defaults."""
    config = ProjectConfig.load(Path("nonexistent.toml"))
    assert config.version == "0.1.0"
    assert config.agent.mode == "auto"


def test_load_project_config_searches_parents(tmp_path):
    (tmp_path / "toolweave.toml").write_text('name = "parent-project"\n')
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    config = load_project_config(nested)
    assert config.name == "parent-project"


def test_run_context_from_config():
    config = ProjectConfig()
    config.logging.level = "WARNING"

    ctx = RunContext.from_config(config, agent_id="bot-1")

    assert ctx.agent_id == "bot-1"
    assert ctx.config is config
    assert ctx.child_logger("agent").name == "toolweave.agent"
