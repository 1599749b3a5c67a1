"""JSON output validated against a JSON Schema.

Example:
    ```python
    parser = StructuredOutputParser.from_json_schema(
        {
            "type": "object",
            "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
            "required": ["name", "age"],
        }
    )
    prompt = PromptTemplate(
        "Describe a fictional person.\n{format_instructions}", ["format_instructions"]
    )
    text = prompt.format(format_instructions=parser.get_format_instructions())
    person = parser.parse((await llm.complete(text)).completion)
    ```
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional

from jsonschema import SchemaError
from jsonschema import ValidationError as SchemaValidationError
from jsonschema.validators import validator_for
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from ..errors import ConfigurationError, OutputParserError
from .base import BaseOutputParser

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?")

FORMAT_INSTRUCTIONS = """\
You must format your output as a JSON value that adheres to a given "JSON Schema" instance.

"JSON Schema" is a declarative language that allows you to annotate and validate JSON documents.

For example, the example "JSON Schema" instance {{"properties": {{"foo": {{"description": "a list of test words", "type": "array", "items": {{"type": "string"}}}}}}, "required": ["foo"]}}
would match an object with one required property, "foo". The "type" property specifies "foo" must be an "array", and the "description" property semantically describes it as "a list of test words". The items within "foo" must be strings.
Thus, the object {{"foo": ["bar", "baz"]}} is a well-formatted instance of this example "JSON Schema". The object {{"properties": {{"foo": ["bar", "baz"]}}}} is not well-formatted.

Your output will be parsed and type-checked according to the provided schema instance, so make sure all fields in your output match the schema exactly and there are no trailing commas!

Here is the JSON Schema instance your output must adhere to. Include the enclosing markdown codeblock:
```json
{schema}
```
"""


def extract_json(text: str) -> str:
    """JSON text from a bare completion or from the first fenced code block."""
    text = text.strip()
    if "```" in text:
        return CODE_FENCE_PATTERN.split(text)[1].strip()
    return text


class StructuredOutputParser(BaseOutputParser):
    """Parses JSON output and validates it against a schema.

    Built from a pydantic model, ``parse`` returns a model instance;
    built from a plain JSON Schema it returns the decoded JSON value.
    """

    parser_type = "structured_output_parser"

    def __init__(self, schema: dict[str, Any], model: Optional[type[BaseModel]] = None):
        """Initialize the parser.

        Args:
            schema: JSON Schema the output must satisfy
            model: Pydantic model the validated output is converted to

        Raises:
            ConfigurationError: If the schema itself is not a valid JSON Schema
        """
        validator_cls = validator_for(schema)
        try:
            validator_cls.check_schema(schema)
        except SchemaError as e:
            raise ConfigurationError(f"Invalid schema: {e.message}") from e

        self.schema = schema
        self.model = model
        self._validator = validator_cls(schema)

    @classmethod
    def from_json_schema(cls, schema: dict[str, Any]) -> StructuredOutputParser:
        return cls(schema)

    @classmethod
    def from_model(cls, model: type[BaseModel]) -> StructuredOutputParser:
        return cls(model.model_json_schema(), model=model)

    def get_format_instructions(self) -> str:
        return FORMAT_INSTRUCTIONS.format(schema=json.dumps(self.schema))

    def parse(self, text: str) -> Any:
        """Decode and validate the JSON in an LLM completion.

        Raises:
            OutputParserError: If the text holds no valid JSON or the value
                does not satisfy the schema
        """
        try:
            data = json.loads(extract_json(text))
            self._validator.validate(data)
            if self.model is not None:
                return self.model.model_validate(data)
        except (json.JSONDecodeError, SchemaValidationError, ModelValidationError) as e:
            detail = e.message if isinstance(e, SchemaValidationError) else e
            raise OutputParserError(f'Failed to parse. Text: "{text}". Error: {detail}', text) from e
        return data

    def to_dict(self) -> dict[str, Any]:
        return {"_type": self.parser_type, "schema": self.schema}


__all__ = ["StructuredOutputParser", "extract_json"]
