"""Base class for parsers that turn LLM output into structured data."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseOutputParser(ABC):
    """Parses the text of an LLM response."""

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse LLM output.

        Raises:
            OutputParserError: If the text does not have the expected structure
        """

    @abstractmethod
    def get_format_instructions(self) -> str:
        """Instructions to put in the prompt so the LLM answers in the parsed format."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serializable representation including ``_type``."""


__all__ = ["BaseOutputParser"]
