"""Re-prompt the LLM when its output fails to parse."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from ..errors import ConfigurationError, OutputParserError
from ..prompts import PromptTemplate, load_packaged_prompt
from .base import BaseOutputParser

if TYPE_CHECKING:
    from ..llm.base import LLMProvider

logger = logging.getLogger(__name__)

FIX_PROMPT_VARIABLES = ("instructions", "completion", "error")


class OutputFixingParser:
    """Wraps a parser and asks the LLM once to repair output it rejects.

    Example:
        ```python
        fixing = OutputFixingParser.from_llm(llm, StructuredOutputParser.from_model(Person))
        person = await fixing.parse(completion)
        ```
    """

    parser_type = "output_fixing_parser"

    def __init__(self, llm: LLMProvider, parser: BaseOutputParser, prompt: PromptTemplate):
        """Initialize the parser.

        Args:
            llm: Provider used to repair the output
            parser: Parser whose errors trigger a repair
            prompt: Fix prompt with instructions, completion and error variables

        Raises:
            TypeError: If parser or prompt has the wrong type
            ConfigurationError: If the prompt lacks one of the fix variables
        """
        if not isinstance(parser, BaseOutputParser):
            raise TypeError(f"parser must be a BaseOutputParser, got {type(parser).__name__}")
        if not isinstance(prompt, PromptTemplate):
            raise TypeError(f"prompt must be a PromptTemplate, got {type(prompt).__name__}")
        missing = sorted(set(FIX_PROMPT_VARIABLES) - set(prompt.input_variables))
        if missing:
            raise ConfigurationError(f"Fix prompt is missing variables: {missing}")

        self.llm = llm
        self.parser = parser
        self.prompt = prompt

    @classmethod
    def from_llm(
        cls,
        llm: LLMProvider,
        parser: BaseOutputParser,
        prompt: Optional[PromptTemplate] = None,
    ) -> OutputFixingParser:
        """Create the parser, defaulting to the packaged fix prompt."""
        return cls(llm, parser, prompt or load_packaged_prompt("output_parsers/fix"))

    def get_format_instructions(self) -> str:
        return self.parser.get_format_instructions()

    async def parse(self, completion: str) -> Any:
        """Parse a completion, repairing it through the LLM on failure.

        Raises:
            OutputParserError: If the repaired completion fails to parse too
        """
        try:
            return self.parser.parse(completion)
        except OutputParserError as e:
            logger.info("Output failed to parse, asking the LLM to fix it: %s", e)
            prompt = self.prompt.format(
                instructions=self.parser.get_format_instructions(),
                completion=completion,
                error=e,
            )
            response = await self.llm.complete(prompt)
            return self.parser.parse(response.completion or "")

    def to_dict(self) -> dict[str, Any]:
        return {
            "_type": self.parser_type,
            "parser": self.parser.to_dict(),
            "prompt": self.prompt.to_dict(),
        }


__all__ = ["OutputFixingParser"]
