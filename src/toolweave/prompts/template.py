"""Prompt templates with declared input variables.

A template's ``{name}`` placeholders must match its declared input variables
exactly; the check runs at construction so mismatches never reach an LLM.
Doubled braces (``{{`` / ``}}``) are literal braces.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml

from ..errors import TemplateVariableError

VARIABLE_PATTERN = re.compile(r"\{([^}]*)\}")
_SUBSTITUTION_PATTERN = re.compile(r"\{\{|\}\}|\{([^{}]*)\}")


def extract_variables_from_template(template: str) -> list[str]:
    """Return placeholder names in order of first appearance.

    Escaped placeholders (``{{name}}``) and empty braces are skipped.
    """
    variables: list[str] = []
    for match in VARIABLE_PATTERN.finditer(template):
        name = match.group(1).strip()
        if not name or name.startswith("{"):
            continue
        if name not in variables:
            variables.append(name)
    return variables


def check_template_variables(template: str, input_variables: Iterable[str]) -> None:
    """Check that template placeholders equal the declared variables.

    Raises:
        TemplateVariableError: On missing or extra variables
    """
    declared = set(input_variables)
    found = set(extract_variables_from_template(template))

    missing = sorted(found - declared)
    if missing:
        raise TemplateVariableError(f"Missing variables: {missing}")

    extra = sorted(declared - found)
    if extra:
        raise TemplateVariableError(f"Extra variables: {extra}")


def render_template(template: str, input_variables: Iterable[str], values: dict[str, Any]) -> str:
    """Substitute declared variables and unescape doubled braces."""
    declared = list(input_variables)
    missing = [name for name in declared if name not in values]
    if missing:
        raise TemplateVariableError(f"Missing values for variables: {missing}")

    def replace(match: re.Match) -> str:
        token = match.group(0)
        if token == "{{":
            return "{"
        if token == "}}":
            return "}"
        name = match.group(1).strip()
        if name in declared:
            return str(values[name])
        return token

    return _SUBSTITUTION_PATTERN.sub(replace, template)


class BasePromptTemplate(ABC):
    """Common behavior of prompt templates."""

    prompt_type: str = "base"

    input_variables: list[str]

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Render the prompt with the given variable values."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serializable representation including ``_type``."""

    def save(self, file_path: Union[str, Path]) -> None:
        """Save the template to a .json, .yaml or .yml file.

        Raises:
            ValueError: For any other file extension
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.to_dict()

        if path.suffix == ".json":
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        elif path.suffix in (".yaml", ".yml"):
            path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        else:
            raise ValueError(f"{path} must be json or yaml")


class PromptTemplate(BasePromptTemplate):
    """A template string plus its declared input variables.

    Example:
        prompt = PromptTemplate("Tell me a {adjective} joke.", ["adjective"])
        prompt.format(adjective="funny")  # "Tell me a funny joke."
    """

    prompt_type = "prompt"

    def __init__(
        self,
        template: str,
        input_variables: Iterable[str],
        validate_template: bool = True,
    ):
        self._template = template
        self._input_variables = tuple(input_variables)
        if validate_template:
            check_template_variables(template, self._input_variables)

    @property
    def template(self) -> str:
        return self._template

    @property
    def input_variables(self) -> list[str]:  # type: ignore[override]
        return list(self._input_variables)

    @classmethod
    def from_template(cls, template: str) -> PromptTemplate:
        """Create a template whose input variables are its placeholders."""
        return cls(template, extract_variables_from_template(template))

    def format(self, **kwargs: Any) -> str:
        return render_template(self._template, self._input_variables, kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_type": self.prompt_type,
            "input_variables": self.input_variables,
            "template": self._template,
        }

    def __repr__(self) -> str:
        return f"PromptTemplate(input_variables={self.input_variables!r})"


class FewShotPromptTemplate(BasePromptTemplate):
    """Prompt built from a prefix, formatted examples and a suffix.

    Example:
        example_prompt = PromptTemplate("Input: {input}\\nOutput: {output}", ["input", "output"])
        prompt = FewShotPromptTemplate(
            prefix="Write antonyms for the following words.",
            suffix="Input: {adjective}\\nOutput:",
            examples=[{"input": "happy", "output": "sad"}],
            example_prompt=example_prompt,
            input_variables=["adjective"],
        )
    """

    prompt_type = "few_shot"

    def __init__(
        self,
        examples: Iterable[dict[str, Any]],
        example_prompt: PromptTemplate,
        input_variables: Iterable[str],
        suffix: str,
        prefix: str = "",
        example_separator: str = "\n\n",
        validate_template: bool = True,
    ):
        self._examples = tuple(dict(example) for example in examples)
        self._example_prompt = example_prompt
        self._input_variables = tuple(input_variables)
        self._suffix = suffix
        self._prefix = prefix
        self._example_separator = example_separator
        if validate_template:
            check_template_variables(prefix + suffix, self._input_variables)

    @property
    def examples(self) -> list[dict[str, Any]]:
        return [dict(example) for example in self._examples]

    @property
    def example_prompt(self) -> PromptTemplate:
        return self._example_prompt

    @property
    def input_variables(self) -> list[str]:  # type: ignore[override]
        return list(self._input_variables)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def suffix(self) -> str:
        return self._suffix

    @property
    def example_separator(self) -> str:
        return self._example_separator

    def format(self, **kwargs: Any) -> str:
        prefix_vars = [v for v in self._input_variables if v in extract_variables_from_template(self._prefix)]
        suffix_vars = [v for v in self._input_variables if v in extract_variables_from_template(self._suffix)]

        pieces = []
        if self._prefix:
            pieces.append(render_template(self._prefix, prefix_vars, kwargs))
        pieces.extend(self._example_prompt.format(**example) for example in self._examples)
        pieces.append(render_template(self._suffix, suffix_vars, kwargs))
        return self._example_separator.join(pieces)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_type": self.prompt_type,
            "input_variables": self.input_variables,
            "prefix": self._prefix,
            "example_prompt": self._example_prompt.to_dict(),
            "examples": self.examples,
            "suffix": self._suffix,
            "example_separator": self._example_separator,
        }

    def __repr__(self) -> str:
        return (
            f"FewShotPromptTemplate(input_variables={self.input_variables!r}, "
            f"examples={len(self._examples)})"
        )


__all__ = [
    "VARIABLE_PATTERN",
    "extract_variables_from_template",
    "check_template_variables",
    "render_template",
    "BasePromptTemplate",
    "PromptTemplate",
    "FewShotPromptTemplate",
]
