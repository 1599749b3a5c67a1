"""Configuration management for toolweave projects.

Parses toolweave.toml files with support for:
- LLM provider configuration
- Agent loop defaults
- Conversation memory strategy
- Per-tool settings (API keys etc.)
- Logging and telemetry

Example toolweave.toml structure:

    [llm.openai]
    type = "openai"
    api_key = "${OPENAI_API_KEY}"
    model = "gpt-4o-mini"

    [agent]
    mode = "auto"
    max_iterations = 10

    [tools.search]
    api_key = "${SERPAPI_API_KEY}"

Note: Use proper TOML tables (not string-encoded Python dictionaries).
"""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigurationError

if sys.version_info >= (3, 11):
    import tomllib as toml
else:
    import tomli as toml

CONFIG_FILENAME = "toolweave.toml"

logger = logging.getLogger(__name__)


def _load_env_file(env_path: Path) -> None:
    """Load environment variables from .env file."""
    if not env_path.exists():
        return

    try:
        with open(env_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue

                # KEY=VALUE, KEY='VALUE' or KEY="VALUE"
                if "=" in line:
                    key, _, value = line.partition("=")
                    key = key.strip()
                    value = value.strip()

                    if value and value[0] in ('"', "'") and value[-1] == value[0]:
                        value = value[1:-1]

                    # Never override the real environment
                    if key and key not in os.environ:
                        os.environ[key] = value
    except OSError as e:
        logger.warning("[toolweave.config] Failed to load .env file %s: %s", env_path, e)


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} and $VAR environment variable references."""
    if isinstance(value, str):

        def replace_var(match):
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))

        pattern = r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)"
        return re.sub(pattern, replace_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class LLMProviderConfig:
    """LLM provider configuration ([llm.<name>] table)."""

    name: str  # e.g., "openai", "claude", "local"
    type: str  # provider id: "openai", "anthropic", "google_gemini", ...
    api_key: Optional[str] = None
    api_base: Optional[str] = None
    model: Optional[str] = None
    embedding_model: Optional[str] = None
    # Unset values fall back to the provider preset
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    timeout_sec: Optional[int] = None
    context_window: Optional[int] = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class AgentSettings:
    """Defaults for the agent loop ([agent] table)."""

    instructions: Optional[str] = None
    mode: str = "auto"  # "auto", "react" or "function_calling"
    max_iterations: int = 10
    tool_choice: str = "auto"
    parallel_tool_calls: bool = True


@dataclass
class MemorySettings:
    """Conversation memory settings ([memory] table)."""

    strategy: str = "truncate"  # "truncate" or "summarize"


@dataclass
class LoggingSettings:
    """Logging settings ([logging] table)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class TelemetrySettings:
    """OpenTelemetry settings ([telemetry] table)."""

    enabled: bool = False
    service_name: str = "toolweave"
    otlp_endpoint: Optional[str] = None


@dataclass
class ProjectConfig:
    """Complete toolweave project configuration."""

    name: Optional[str] = None
    version: str = "0.1.0"

    # LLM providers (key = provider name, value = config)
    llm_providers: dict[str, LLMProviderConfig] = field(default_factory=dict)

    agent: AgentSettings = field(default_factory=AgentSettings)
    memory: MemorySettings = field(default_factory=MemorySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    telemetry: TelemetrySettings = field(default_factory=TelemetrySettings)

    # Tool constructor settings (key = canonical tool name)
    tools: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path = Path(CONFIG_FILENAME)) -> ProjectConfig:
        """Load configuration from a toolweave.toml file.

        Loads the first .env file found next to the config file, in the
        current working directory, or in any parent directory, then expands
        ${VAR} references in the config.

        Args:
            path: Path to toolweave.toml

        Returns:
            Parsed ProjectConfig (defaults when the file does not exist)

        Raises:
            ConfigurationError: If the file cannot be parsed
        """
        if not path.exists():
            return cls()

        env_search_paths = [
            path.parent / ".env",
            Path.cwd() / ".env",
        ]
        current = path.parent.resolve()
        while current != current.parent:
            env_search_paths.append(current / ".env")
            current = current.parent

        for env_path in env_search_paths:
            if env_path.exists():
                _load_env_file(env_path)
                break

        try:
            raw_data = toml.loads(path.read_text(encoding="utf-8"))
            data = _expand_env_vars(raw_data)
        except (OSError, toml.TOMLDecodeError) as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectConfig:
        """Build a ProjectConfig from already-parsed TOML data."""
        config = cls()
        config.name = data.get("name")
        config.version = data.get("version", "0.1.0")

        for provider_name, provider_data in data.get("llm", {}).items():
            if not isinstance(provider_data, dict):
                continue
            config.llm_providers[provider_name] = LLMProviderConfig(
                name=provider_name,
                type=provider_data.get("type", provider_name),
                api_key=provider_data.get("api_key"),
                api_base=provider_data.get("api_base"),
                model=provider_data.get("model"),
                embedding_model=provider_data.get("embedding_model"),
                max_tokens=provider_data.get("max_tokens"),
                temperature=provider_data.get("temperature"),
                timeout_sec=provider_data.get("timeout_sec"),
                context_window=provider_data.get("context_window"),
                extra=provider_data.get("extra", {}),
            )

        if "agent" in data:
            agent_data = data["agent"]
            config.agent = AgentSettings(
                instructions=agent_data.get("instructions"),
                mode=agent_data.get("mode", "auto"),
                max_iterations=agent_data.get("max_iterations", 10),
                tool_choice=agent_data.get("tool_choice", "auto"),
                parallel_tool_calls=agent_data.get("parallel_tool_calls", True),
            )

        if "memory" in data:
            config.memory = MemorySettings(strategy=data["memory"].get("strategy", "truncate"))

        if "logging" in data:
            log_data = data["logging"]
            config.logging = LoggingSettings(
                level=log_data.get("level", "INFO"),
                format=log_data.get("format", LoggingSettings.format),
            )

        if "telemetry" in data:
            tel_data = data["telemetry"]
            config.telemetry = TelemetrySettings(
                enabled=tel_data.get("enabled", False),
                service_name=tel_data.get("service_name", "toolweave"),
                otlp_endpoint=tel_data.get("otlp_endpoint"),
            )

        config.tools = {
            name: dict(settings)
            for name, settings in data.get("tools", {}).items()
            if isinstance(settings, dict)
        }

        return config

    def provider(self, name: str) -> LLMProviderConfig:
        """Look up a configured LLM provider by name.

        Raises:
            ConfigurationError: If no [llm.<name>] table exists
        """
        try:
            return self.llm_providers[name]
        except KeyError:
            raise ConfigurationError(
                f"LLM provider '{name}' is not configured. "
                f"Configured providers: {sorted(self.llm_providers)}"
            ) from None

    def tool_settings(self, tool_name: str) -> dict[str, Any]:
        """Constructor keyword arguments for a tool ([tools.<name>] table)."""
        return dict(self.tools.get(tool_name, {}))


def load_project_config(start_dir: Path = Path(".")) -> ProjectConfig:
    """Load project configuration, searching up from start_dir."""
    current = start_dir.resolve()
    while current != current.parent:
        config_path = current / CONFIG_FILENAME
        if config_path.exists():
            return ProjectConfig.load(config_path)
        current = current.parent

    return ProjectConfig()


__all__ = [
    "CONFIG_FILENAME",
    "LLMProviderConfig",
    "AgentSettings",
    "MemorySettings",
    "LoggingSettings",
    "TelemetrySettings",
    "ProjectConfig",
    "load_project_config",
]
