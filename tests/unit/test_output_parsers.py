"""Unit tests for structured output parsing and repair."""

import json

import pytest
from pydantic import BaseModel

from toolweave.errors import ConfigurationError, OutputParserError
from toolweave.output_parsers import OutputFixingParser, StructuredOutputParser, extract_json
from toolweave.prompts import PromptTemplate

PERSON_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Person's name"},
        "age": {"type": "integer", "description": "Person's age"},
        "interests": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["name", "age", "interests"],
    "additionalProperties": False,
}

PERSON = {"name": "Krystal", "age": 27, "interests": ["hiking", "chess"]}


class Person(BaseModel):
    name: str
    age: int


class TestExtractJson:
    def test_bare_json(self):
        assert extract_json('  {"a": 1}\n') == '{"a": 1}'

    def test_fenced_json(self):
        text = 'Here you go:\n```json\n{"a": 1}\n```\nAnything else?'

        assert extract_json(text) == '{"a": 1}'

    def test_fence_without_language(self):
        assert extract_json('```\n[1, 2]\n```') == "[1, 2]"


class TestStructuredOutputParser:
    def test_parse_valid_output(self):
        parser = StructuredOutputParser.from_json_schema(PERSON_SCHEMA)

        assert parser.parse(f"```json\n{json.dumps(PERSON)}\n```") == PERSON

    def test_parse_invalid_json(self):
        parser = StructuredOutputParser.from_json_schema(PERSON_SCHEMA)

        with pytest.raises(OutputParserError, match="Failed to parse") as exc_info:
            parser.parse('{"name": "Krystal",')

        assert exc_info.value.text == '{"name": "Krystal",'

    def test_parse_schema_violation(self):
        parser = StructuredOutputParser.from_json_schema(PERSON_SCHEMA)

        with pytest.raises(OutputParserError, match="'interests' is a required property"):
            parser.parse('{"name": "Krystal", "age": 27}')

    def test_invalid_schema_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid schema"):
            StructuredOutputParser.from_json_schema({"type": "person"})

    def test_format_instructions_embed_schema(self):
        parser = StructuredOutputParser.from_json_schema(PERSON_SCHEMA)

        instructions = parser.get_format_instructions()

        assert instructions.startswith("You must format your output as a JSON value")
        assert f"```json\n{json.dumps(PERSON_SCHEMA)}\n```" in instructions
        assert '{"foo": ["bar", "baz"]}' in instructions

    def test_from_model_returns_instances(self):
        parser = StructuredOutputParser.from_model(Person)

        person = parser.parse('{"name": "Ada", "age": 36}')

        assert person == Person(name="Ada", age=36)
        assert parser.schema["required"] == ["name", "age"]

    def test_from_model_rejects_wrong_types(self):
        parser = StructuredOutputParser.from_model(Person)

        with pytest.raises(OutputParserError):
            parser.parse('{"name": "Ada", "age": "thirty-six"}')

    def test_to_dict(self):
        parser = StructuredOutputParser.from_json_schema(PERSON_SCHEMA)

        assert parser.to_dict() == {"_type": "structured_output_parser", "schema": PERSON_SCHEMA}


class TestOutputFixingParser:
    @pytest.mark.asyncio
    async def test_valid_output_skips_llm(self, mock_llm):
        fixing = OutputFixingParser.from_llm(
            mock_llm, StructuredOutputParser.from_json_schema(PERSON_SCHEMA)
        )

        assert await fixing.parse(json.dumps(PERSON)) == PERSON
        assert mock_llm.calls == []

    @pytest.mark.asyncio
    async def test_invalid_output_is_fixed(self, mock_llm):
        mock_llm.set_responses([f"```json\n{json.dumps(PERSON)}\n```"])
        parser = StructuredOutputParser.from_json_schema(PERSON_SCHEMA)
        fixing = OutputFixingParser.from_llm(mock_llm, parser)

        result = await fixing.parse('{"name": "Krystal", "age": 27}')

        assert result == PERSON
        assert len(mock_llm.calls) == 1
        prompt = mock_llm.calls[0]["messages"][0]["content"]
        assert parser.get_format_instructions() in prompt
        assert '{"name": "Krystal", "age": 27}' in prompt
        assert "'interests' is a required property" in prompt
        assert "did not satisfy the constraints given in the Instructions" in prompt

    @pytest.mark.asyncio
    async def test_fix_that_still_fails_raises(self, mock_llm):
        mock_llm.set_responses(["still not json"])
        fixing = OutputFixingParser.from_llm(
            mock_llm, StructuredOutputParser.from_json_schema(PERSON_SCHEMA)
        )

        with pytest.raises(OutputParserError) as exc_info:
            await fixing.parse("not json")

        assert exc_info.value.text == "still not json"
        assert len(mock_llm.calls) == 1

    def test_format_instructions_delegate(self, mock_llm):
        parser = StructuredOutputParser.from_json_schema(PERSON_SCHEMA)

        fixing = OutputFixingParser.from_llm(mock_llm, parser)

        assert fixing.get_format_instructions() == parser.get_format_instructions()

    def test_custom_prompt_must_declare_fix_variables(self, mock_llm):
        parser = StructuredOutputParser.from_json_schema(PERSON_SCHEMA)
        prompt = PromptTemplate.from_template("Fix this: {completion}")

        with pytest.raises(ConfigurationError, match=r"\['error', 'instructions'\]"):
            OutputFixingParser(mock_llm, parser, prompt)

    def test_parser_type_checked(self, mock_llm):
        with pytest.raises(TypeError, match="parser must be a BaseOutputParser"):
            OutputFixingParser.from_llm(mock_llm, object())

    def test_to_dict(self, mock_llm):
        fixing = OutputFixingParser.from_llm(
            mock_llm, StructuredOutputParser.from_json_schema(PERSON_SCHEMA)
        )

        data = fixing.to_dict()

        assert data["_type"] == "output_fixing_parser"
        assert data["parser"]["_type"] == "structured_output_parser"
        assert data["prompt"]["input_variables"] == ["instructions", "completion", "error"]
