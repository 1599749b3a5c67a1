"""Tool base class and function schema declarations.

A tool is a class whose public operations are methods decorated with
``@tool_function``. Parameter schemas come from the method signature via
Pydantic, so the same declaration drives argument validation and the
OpenAI / Anthropic / Gemini tool formats.

Example:
    class Weather(Tool):
        description = "Current weather lookup"

        @tool_function("Get current weather", city="City name")
        async def current(self, city: str, units: Literal["metric", "imperial"] = "metric") -> str:
            ...

    Weather.name                   # "weather"
    Weather.to_openai_format()     # [{"type": "function", "function": {"name": "weather__current", ...}}]
"""

from __future__ import annotations

import inspect
import logging
import re
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Optional

from pydantic import BaseModel, Field, create_model

from ..config import ProjectConfig
from ..errors import ConfigurationError, ToolNotFoundError

logger = logging.getLogger(__name__)

# Separator between tool name and method name in LLM-facing function names
FUNCTION_NAME_SEPARATOR = "__"

VALID_TYPES = ("object", "array", "string", "number", "integer", "boolean")


def snake_case(name: str) -> str:
    """Convert a class name to its canonical tool name (FileSystem -> file_system)."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.lower()


@dataclass
class ToolParameter:
    """Describes a tool parameter."""

    name: str
    type: str  # "string", "number", "integer", "boolean", "object", "array"
    description: str = ""
    required: bool = False
    default: Optional[Any] = None
    enum: Optional[list[Any]] = None
    examples: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.type not in VALID_TYPES:
            raise ConfigurationError(
                f"Invalid type {self.type!r} for parameter {self.name!r}. "
                f"Valid types are: {', '.join(VALID_TYPES)}"
            )

    @classmethod
    def from_json_schema(cls, name: str, schema: dict[str, Any], required: bool) -> ToolParameter:
        return cls(
            name=name,
            type=schema.get("type", "string"),
            description=schema.get("description", ""),
            required=required,
            default=schema.get("default"),
            enum=schema.get("enum"),
        )

    def to_string(self) -> str:
        """Format parameter for system prompt."""
        parts = [f"{self.name}: {self.type}"]
        if self.required:
            parts[0] += " (required)"
        if self.description:
            parts.append(f"- {self.description}")
        if self.enum:
            parts.append(f"- one of: {', '.join(str(v) for v in self.enum)}")
        if self.default is not None:
            parts.append(f"- default: {self.default}")
        if self.examples:
            examples_str = ", ".join(str(ex) for ex in self.examples[:2])
            parts.append(f"- e.g. {examples_str}")
        return " ".join(parts)


@dataclass
class _FunctionSpec:
    """Declaration attached to a method by @tool_function."""

    description: str
    param_descriptions: dict[str, str]


def tool_function(description: str = "", **param_descriptions: str):
    """Decorator to declare a Tool method as an LLM-callable function.

    Args:
        description: What the function does (defaults to the docstring)
        **param_descriptions: Description for each parameter, by name

    Example:
        @tool_function("Evaluates a pure math expression", input="math expression")
        async def execute(self, input: str) -> ToolResponse:
            ...
    """

    def wrapper(func: Callable[..., Any]):
        func.__tool_function__ = _FunctionSpec(
            description=description or inspect.getdoc(func) or "",
            param_descriptions=dict(param_descriptions),
        )
        return func

    return wrapper


def _model_from_signature(
    func: Callable[..., Any], model_name: str, param_descriptions: dict[str, str]
) -> Optional[type[BaseModel]]:
    """Build the input Pydantic model from a method signature."""
    sig = inspect.signature(func)
    hints = typing.get_type_hints(func)
    fields: dict[str, Any] = {}
    for name, param in sig.parameters.items():
        if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        ann = hints.get(
            name, str if param.default is inspect.Parameter.empty else type(param.default)
        )
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[name] = (ann, Field(default, description=param_descriptions.get(name)))
    return create_model(model_name, **fields) if fields else None


def _strip_titles(schema: Any) -> Any:
    if isinstance(schema, dict):
        return {k: _strip_titles(v) for k, v in schema.items() if k != "title"}
    if isinstance(schema, list):
        return [_strip_titles(item) for item in schema]
    return schema


@dataclass
class ToolFunction:
    """One LLM-callable operation of a tool."""

    tool_name: str
    method_name: str
    description: str
    input_model: Optional[type[BaseModel]] = None

    @property
    def name(self) -> str:
        """Function name as the LLM sees it: ``<tool>__<method>``."""
        return f"{self.tool_name}{FUNCTION_NAME_SEPARATOR}{self.method_name}"

    def json_schema(self) -> dict[str, Any]:
        """JSON schema for the function's parameters (object type)."""
        if self.input_model is None:
            return {"type": "object", "properties": {}, "required": []}
        schema = self.input_model.model_json_schema()
        return {
            "type": "object",
            "properties": _strip_titles(schema.get("properties", {})),
            "required": list(schema.get("required", [])),
        }

    @property
    def parameters(self) -> list[ToolParameter]:
        schema = self.json_schema()
        required = set(schema["required"])
        return [
            ToolParameter.from_json_schema(name, prop, name in required)
            for name, prop in schema["properties"].items()
        ]

    def get_signature(self) -> str:
        """Signature for prompts: name(param1, param2?)"""
        names = [p.name if p.required else f"{p.name}?" for p in self.parameters]
        return f"{self.name}({', '.join(names)})"

    def to_openai_format(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.json_schema(),
            },
        }

    def to_anthropic_format(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.json_schema(),
        }

    def to_google_gemini_format(self) -> dict[str, Any]:
        schema = self.json_schema()
        # Gemini's schema subset has no "default"
        schema["properties"] = {
            name: {k: v for k, v in prop.items() if k != "default"}
            for name, prop in schema["properties"].items()
        }
        declaration: dict[str, Any] = {"name": self.name, "description": self.description}
        if schema["properties"]:
            declaration["parameters"] = schema
        return declaration


@dataclass(frozen=True)
class ToolResponse:
    """Output of a tool operation.

    Attributes:
        content: Textual (or numeric) result
        image_url: URL of an image result
        is_error: True when the operation failed and content holds the error
    """

    content: Any = None
    image_url: Optional[str] = None
    is_error: bool = False

    def __post_init__(self) -> None:
        if self.content is None and self.image_url is None:
            raise ValueError("Either content or image_url must be provided")

    @classmethod
    def wrap(cls, value: Any) -> ToolResponse:
        return value if isinstance(value, ToolResponse) else cls(content=value)

    @classmethod
    def error(cls, message: str) -> ToolResponse:
        return cls(content=message, is_error=True)

    def to_text(self) -> str:
        if self.content is not None:
            return str(self.content)
        return str(self.image_url)

    def __str__(self) -> str:
        return self.to_text()


class Tool:
    """Base class for tools.

    Subclasses get a canonical ``name`` (snake_case of the class name unless
    set explicitly) and a ``functions`` mapping built from their
    ``@tool_function`` methods.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    functions: ClassVar[dict[str, ToolFunction]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.__dict__.get("name"):
            cls.name = snake_case(cls.__name__)

        functions: dict[str, ToolFunction] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                spec = getattr(value, "__tool_function__", None)
                if spec is None:
                    continue
                model_name = f"{cls.__name__}{attr.title().replace('_', '')}Input"
                functions[attr] = ToolFunction(
                    tool_name=cls.name,
                    method_name=attr,
                    description=spec.description,
                    input_model=_model_from_signature(value, model_name, spec.param_descriptions),
                )
        cls.functions = functions

    @classmethod
    def from_settings(
        cls, settings: dict[str, Any], project_config: Optional[ProjectConfig] = None
    ) -> Tool:
        """Build the tool from its [tools.<name>] settings."""
        return cls(**settings)

    @classmethod
    def function_names(cls) -> list[str]:
        return [function.name for function in cls.functions.values()]

    @classmethod
    def to_openai_format(cls) -> list[dict[str, Any]]:
        return [function.to_openai_format() for function in cls.functions.values()]

    @classmethod
    def to_anthropic_format(cls) -> list[dict[str, Any]]:
        return [function.to_anthropic_format() for function in cls.functions.values()]

    @classmethod
    def to_google_gemini_format(cls) -> list[dict[str, Any]]:
        return [function.to_google_gemini_format() for function in cls.functions.values()]

    @classmethod
    def describe(cls) -> str:
        """One-line description used in text prompts."""
        return f"{cls.name}: {cls.description}" if cls.description else cls.name

    async def invoke(self, method_name: str, arguments: Optional[dict[str, Any]] = None) -> ToolResponse:
        """Validate arguments and call one of the tool's functions.

        Any exception raised by validation or by the function is converted
        into an error ToolResponse so the agent can show it to the LLM.

        Raises:
            ToolNotFoundError: If the tool has no such function
        """
        function = self.functions.get(method_name)
        if function is None:
            raise ToolNotFoundError(
                f"{self.name}{FUNCTION_NAME_SEPARATOR}{method_name}", self.function_names()
            )

        try:
            kwargs: dict[str, Any] = {}
            if function.input_model is not None:
                validated = function.input_model.model_validate(arguments or {})
                kwargs = {name: getattr(validated, name) for name in type(validated).model_fields}
            result = getattr(self, method_name)(**kwargs)
            if inspect.isawaitable(result):
                result = await result
            return ToolResponse.wrap(result)
        except Exception as e:
            logger.warning("Tool %s.%s failed: %s", self.name, method_name, e)
            return ToolResponse.error(f"Error executing {function.name}: {e}")

    async def run_text(self, text: str) -> ToolResponse:
        """Call the tool's ``execute`` function with free-text input (ReAct mode)."""
        function = self.functions.get("execute")
        if function is None:
            return ToolResponse.error(
                f"Error: {self.name} does not accept free-text input. "
                f"Available functions: {', '.join(self.function_names())}"
            )
        params = function.parameters
        target = next((p for p in params if p.required), params[0] if params else None)
        arguments = {target.name: text} if target else {}
        return await self.invoke("execute", arguments)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


__all__ = [
    "FUNCTION_NAME_SEPARATOR",
    "VALID_TYPES",
    "snake_case",
    "ToolParameter",
    "ToolFunction",
    "ToolResponse",
    "Tool",
    "tool_function",
]
