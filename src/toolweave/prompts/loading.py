"""Load prompt templates from JSON or YAML files."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Union

import yaml

from .template import BasePromptTemplate, FewShotPromptTemplate, PromptTemplate

logger = logging.getLogger(__name__)


def _load_prompt(config: dict[str, Any]) -> PromptTemplate:
    return PromptTemplate(
        template=config["template"],
        input_variables=config.get("input_variables", []),
    )


def _load_few_shot_prompt(config: dict[str, Any]) -> FewShotPromptTemplate:
    example_prompt = config["example_prompt"]
    if not isinstance(example_prompt, PromptTemplate):
        example_prompt = _load_prompt(example_prompt)
    return FewShotPromptTemplate(
        examples=config.get("examples", []),
        example_prompt=example_prompt,
        input_variables=config.get("input_variables", []),
        suffix=config["suffix"],
        prefix=config.get("prefix", ""),
        example_separator=config.get("example_separator", "\n\n"),
    )


TYPE_TO_LOADER: dict[str, Callable[[dict[str, Any]], BasePromptTemplate]] = {
    "prompt": _load_prompt,
    "few_shot": _load_few_shot_prompt,
}


def load_from_config(config: dict[str, Any]) -> BasePromptTemplate:
    """Build a template from a parsed config dict, dispatching on ``_type``.

    Raises:
        ValueError: If ``_type`` names an unsupported template type
    """
    config = dict(config)
    if "_type" not in config:
        logger.warning("No `_type` key found, defaulting to `prompt`.")
    prompt_type = config.pop("_type", "prompt")

    loader = TYPE_TO_LOADER.get(prompt_type)
    if loader is None:
        raise ValueError(f"Loading {prompt_type} prompt not supported")
    return loader(config)


def load_from_path(file_path: Union[str, Path]) -> BasePromptTemplate:
    """Load a template from a .json, .yaml or .yml file.

    Raises:
        ValueError: For any other file extension
    """
    path = Path(file_path)
    if path.suffix == ".json":
        config = json.loads(path.read_text(encoding="utf-8"))
    elif path.suffix in (".yaml", ".yml"):
        config = yaml.safe_load(path.read_text(encoding="utf-8"))
    else:
        raise ValueError(f"Got unsupported file type {path.suffix}")
    return load_from_config(config)


def load_packaged_prompt(name: str) -> BasePromptTemplate:
    """Load one of the YAML templates shipped in ``toolweave/prompts/data``.

    Args:
        name: Relative name without extension, e.g. "react_agent" or "ragas/faithfulness_statements"
    """
    resource = resources.files("toolweave.prompts").joinpath(f"data/{name}.yaml")
    return load_from_config(yaml.safe_load(resource.read_text(encoding="utf-8")))


__all__ = ["TYPE_TO_LOADER", "load_from_config", "load_from_path", "load_packaged_prompt"]
