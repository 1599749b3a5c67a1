"""Unit tests for tool declarations and the tool registry."""

from typing import Literal

import pytest

from toolweave.config import ProjectConfig
from toolweave.errors import ConfigurationError, ToolNotFoundError, UnrecognizedToolsError
from toolweave.tools.base import Tool, ToolParameter, ToolResponse, snake_case, tool_function
from toolweave.tools.registry import ToolRegistry, create_default_registry, format_tools_for_prompt


class WeatherStation(Tool):
    description = "Weather lookups"

    def __init__(self, default_city: str = "Paris"):
        self.default_city = default_city

    @tool_function("Get current weather", city="City name", units="Unit system")
    async def current(self, city: str, units: Literal["metric", "imperial"] = "metric") -> str:
        return f"20 degrees in {city} ({units})"

    @tool_function("Station uptime")
    def uptime(self) -> int:
        return 99

    @tool_function("Always fails")
    async def broken(self, code: int) -> str:
        raise RuntimeError(f"station offline ({code})")


class Named(Tool):
    name = "custom_name"

    @tool_function("Echo input", input="text to echo")
    async def execute(self, input: str) -> ToolResponse:
        return ToolResponse(content=input.upper())


class TestSnakeCase:
    @pytest.mark.parametrize(
        "class_name,expected",
        [
            ("Calculator", "calculator"),
            ("FileSystem", "file_system"),
            ("SerpApiSearch", "serp_api_search"),
            ("HTTPClient", "http_client"),
        ],
    )
    def test_snake_case(self, class_name, expected):
        assert snake_case(class_name) == expected


class TestToolDeclaration:
    def test_names(self):
        assert WeatherStation.name == "weather_station"
        assert Named.name == "custom_name"
        assert WeatherStation.function_names() == [
            "weather_station__current",
            "weather_station__uptime",
            "weather_station__broken",
        ]

    def test_json_schema(self):
        schema = WeatherStation.functions["current"].json_schema()

        assert schema["type"] == "object"
        assert schema["required"] == ["city"]
        assert schema["properties"]["city"] == {"type": "string", "description": "City name"}
        assert schema["properties"]["units"]["enum"] == ["metric", "imperial"]
        assert schema["properties"]["units"]["default"] == "metric"

    def test_function_without_parameters(self):
        function = WeatherStation.functions["uptime"]

        assert function.input_model is None
        assert function.json_schema() == {"type": "object", "properties": {}, "required": []}
        assert "parameters" not in function.to_google_gemini_format()

    def test_parameters_and_signature(self):
        function = WeatherStation.functions["current"]
        params = {p.name: p for p in function.parameters}

        assert params["city"].required
        assert not params["units"].required
        assert params["units"].enum == ["metric", "imperial"]
        assert function.get_signature() == "weather_station__current(city, units?)"

    def test_vendor_formats(self):
        openai = WeatherStation.to_openai_format()[0]
        anthropic = WeatherStation.to_anthropic_format()[0]
        gemini = WeatherStation.to_google_gemini_format()[0]

        assert openai["type"] == "function"
        assert openai["function"]["name"] == "weather_station__current"
        assert anthropic["input_schema"]["required"] == ["city"]
        assert "default" not in gemini["parameters"]["properties"]["units"]

    def test_describe(self):
        assert WeatherStation.describe() == "weather_station: Weather lookups"
        assert Named.describe() == "custom_name"

    def test_describe_keeps_trailing_punctuation(self):
        class UnitConverter(Named):
            name = "unit_converter"
            description = "Converts between units:"

        assert UnitConverter.describe() == "unit_converter: Converts between units:"


class TestToolParameter:
    def test_invalid_type(self):
        with pytest.raises(ConfigurationError, match="Invalid type 'date'"):
            ToolParameter(name="when", type="date")

    def test_to_string(self):
        param = ToolParameter(
            name="units", type="string", description="Unit system", required=True, enum=["a", "b"]
        )

        assert param.to_string() == "units: string (required) - Unit system - one of: a, b"


class TestToolResponse:
    def test_requires_content_or_image(self):
        with pytest.raises(ValueError, match="Either content or image_url"):
            ToolResponse()

    def test_image_only(self):
        response = ToolResponse(image_url="http://img.local/cat.png")

        assert response.to_text() == "http://img.local/cat.png"

    def test_wrap_and_error(self):
        assert ToolResponse.wrap(4).content == 4
        existing = ToolResponse(content="x")
        assert ToolResponse.wrap(existing) is existing
        assert ToolResponse.error("bad").is_error


class TestToolInvoke:
    @pytest.mark.asyncio
    async def test_invoke_applies_defaults(self):
        response = await WeatherStation().invoke("current", {"city": "Oslo"})

        assert str(response) == "20 degrees in Oslo (metric)"
        assert not response.is_error

    @pytest.mark.asyncio
    async def test_invoke_sync_method(self):
        response = await WeatherStation().invoke("uptime")

        assert response.content == 99

    @pytest.mark.asyncio
    async def test_invoke_validation_error(self):
        response = await WeatherStation().invoke("current", {"units": "kelvin"})

        assert response.is_error
        assert "weather_station__current" in response.content

    @pytest.mark.asyncio
    async def test_invoke_exception_becomes_error(self):
        response = await WeatherStation().invoke("broken", {"code": 7})

        assert response.is_error
        assert "station offline (7)" in response.content

    @pytest.mark.asyncio
    async def test_unknown_method(self):
        with pytest.raises(ToolNotFoundError) as exc_info:
            await WeatherStation().invoke("forecast", {})

        assert exc_info.value.tool_name == "weather_station__forecast"
        assert "weather_station__current" in exc_info.value.available

    @pytest.mark.asyncio
    async def test_run_text(self):
        response = await Named().run_text("hello")

        assert response.content == "HELLO"

    @pytest.mark.asyncio
    async def test_run_text_without_execute(self):
        response = await WeatherStation().run_text("Oslo")

        assert response.is_error
        assert "does not accept free-text input" in response.content


class TestToolRegistry:
    def test_register_and_get(self):
        registry = ToolRegistry()
        registry.register(WeatherStation)

        assert registry.get("weather_station") is WeatherStation
        assert registry.get("missing") is None
        assert "weather_station" in registry
        assert registry.names() == ["weather_station"]

    def test_register_as_decorator(self):
        registry = ToolRegistry()

        @registry.register
        class Clock(Tool):
            pass

        assert registry.get("clock") is Clock

    def test_validate_lists_all_unrecognized(self):
        registry = ToolRegistry()
        registry.register(WeatherStation)

        with pytest.raises(UnrecognizedToolsError, match="Unrecognized Tools: nope, bogus") as exc_info:
            registry.validate_tools(["weather_station", "nope", "bogus"])

        assert exc_info.value.names == ["nope", "bogus"]

    def test_build_uses_tool_settings(self):
        registry = ToolRegistry()
        registry.register(WeatherStation)
        registry.register(Named)
        config = ProjectConfig(tools={"weather_station": {"default_city": "Lima"}})

        tools = registry.build(["custom_name", "weather_station"], config)

        assert [tool.name for tool in tools] == ["custom_name", "weather_station"]
        assert tools[1].default_city == "Lima"

    def test_format_for_prompt(self):
        registry = ToolRegistry()
        registry.register(WeatherStation)

        brief = registry.format_for_prompt()
        detailed = registry.format_for_prompt(detailed=True)

        assert brief == "weather_station: Weather lookups"
        assert "weather_station__current(city, units?) - Get current weather" in detailed
        assert "city: string (required) - City name" in detailed

    def test_format_empty(self):
        assert format_tools_for_prompt([]) == "No tools available."

    def test_default_registry(self):
        registry = create_default_registry()

        assert set(registry.names()) == {"calculator", "search", "wikipedia", "file_system"}
