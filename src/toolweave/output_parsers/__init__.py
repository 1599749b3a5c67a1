"""Parsers turning LLM output into structured data."""

from .base import BaseOutputParser
from .fixing import OutputFixingParser
from .structured import StructuredOutputParser, extract_json

__all__ = [
    "BaseOutputParser",
    "OutputFixingParser",
    "StructuredOutputParser",
    "extract_json",
]
