"""ReAct loop - text protocol building and parsing.

This module contains the pure logic of the text-based tool protocol:
- ReAct prompt building from the packaged template
- Response parsing (Action / Action Input / Final Answer)
- Observation appending without duplicating the "Observation:" label
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..prompts import load_packaged_prompt
from ..tools.base import Tool

OBSERVATION_MARKER = "Observation:"
FINAL_ANSWER_MARKER = "Final Answer:"
STOP_SEQUENCES = [OBSERVATION_MARKER]

ACTION_PATTERN = re.compile(r"Action: (.*)")
ACTION_INPUT_PATTERN = re.compile(r'Action Input: "?(.*?)"?\s*$', re.MULTILINE)


@dataclass
class ReActStep:
    """Parsed LLM response in the ReAct text protocol."""

    action: Optional[str] = None
    action_input: Optional[str] = None
    final_answer: Optional[str] = None

    @property
    def is_action(self) -> bool:
        return self.action is not None

    @property
    def is_final(self) -> bool:
        return self.action is None and self.final_answer is not None


def build_react_prompt(
    question: str,
    tools: Iterable[Tool],
    today: Optional[date] = None,
) -> str:
    """Fill the packaged ReAct template for a question.

    Args:
        question: The user's question
        tools: Tools the agent may use
        today: Date shown to the model (defaults to today)

    Returns:
        Prompt ending with "Thought:"
    """
    tools = list(tools)
    template = load_packaged_prompt("react_agent")
    return template.format(
        date=(today or date.today()).strftime("%B %d, %Y"),
        question=question,
        tool_names=f"[{', '.join(tool.name for tool in tools)}]",
        tools="\n".join(tool.describe() for tool in tools),
    )


def parse_react_response(text: str) -> ReActStep:
    """Parse an LLM response for an action or a final answer.

    An action takes precedence over a final answer in the same response.
    The final answer is everything after the last "Final Answer:" marker.
    """
    action_match = ACTION_PATTERN.search(text)
    if action_match:
        input_match = ACTION_INPUT_PATTERN.search(text)
        return ReActStep(
            action=action_match.group(1).strip(),
            action_input=input_match.group(1).strip() if input_match else "",
        )

    if FINAL_ANSWER_MARKER in text:
        return ReActStep(final_answer=text.split(FINAL_ANSWER_MARKER)[-1].strip())

    return ReActStep()


def append_observation(prompt: str, observation: str) -> str:
    """Append a tool result and the next "Thought:" to the prompt.

    If the prompt already ends with the "Observation:" label (the stop
    sequence was echoed back), the label is not repeated.
    """
    stripped = prompt.rstrip()
    if stripped.endswith(OBSERVATION_MARKER):
        return f"{stripped} {observation}\nThought:"
    return f"{prompt}\n{OBSERVATION_MARKER} {observation}\nThought:"


__all__ = [
    "OBSERVATION_MARKER",
    "FINAL_ANSWER_MARKER",
    "STOP_SEQUENCES",
    "ReActStep",
    "build_react_prompt",
    "parse_react_response",
    "append_observation",
]
