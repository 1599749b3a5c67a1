"""Prompt templates and template loading."""

from .loading import load_from_config, load_from_path, load_packaged_prompt
from .template import (
    BasePromptTemplate,
    FewShotPromptTemplate,
    PromptTemplate,
    check_template_variables,
    extract_variables_from_template,
)

__all__ = [
    "BasePromptTemplate",
    "PromptTemplate",
    "FewShotPromptTemplate",
    "check_template_variables",
    "extract_variables_from_template",
    "load_from_config",
    "load_from_path",
    "load_packaged_prompt",
]
