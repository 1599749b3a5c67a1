"""Calculator tool - safe arithmetic evaluation.

Expressions are parsed with ``ast`` and only arithmetic nodes, a fixed set
of math functions and the constants ``pi`` and ``e`` are evaluated. When an
expression cannot be evaluated the tool asks Google's calculator through the
search tool, if one is configured.
"""

from __future__ import annotations

import ast
import logging
import math
import operator
from typing import Any, Optional, Union

import httpx

from ..config import ProjectConfig
from .base import Tool, ToolResponse, tool_function
from .search import SerpApiSearch

logger = logging.getLogger(__name__)

Number = Union[int, float]

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_FUNCTIONS = {
    "sqrt": math.sqrt,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "log": math.log,
    "log10": math.log10,
    "exp": math.exp,
    "abs": abs,
    "round": round,
    "floor": math.floor,
    "ceil": math.ceil,
}

_CONSTANTS = {"pi": math.pi, "e": math.e}

MAX_EXPONENT = 10000
# Below the interpreter's int-to-str digit limit
MAX_RESULT_DIGITS = 4000


class CalculatorError(ValueError):
    """Expression contains something other than arithmetic."""


def _power_digits(base: Number, exponent: Number) -> float:
    """Approximate number of digits in base ** exponent."""
    if abs(base) <= 1 or exponent <= 0:
        return 0
    return exponent * math.log10(abs(base))


def _eval_node(node: ast.AST) -> Number:
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.Name) and node.id in _CONSTANTS:
        return _CONSTANTS[node.id]
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _eval_node(node.left)
        right = _eval_node(node.right)
        if isinstance(node.op, ast.Pow) and abs(right) > MAX_EXPONENT:
            raise CalculatorError(f"Exponent {right} is too large")
        if isinstance(node.op, ast.Pow) and _power_digits(left, right) > MAX_RESULT_DIGITS:
            raise CalculatorError("Result of exponentiation is too large")
        return _BINARY_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    if (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in _FUNCTIONS
        and not node.keywords
    ):
        args = [_eval_node(arg) for arg in node.args]
        return _FUNCTIONS[node.func.id](*args)
    raise CalculatorError(f"Unsupported expression: {ast.dump(node)}")


def evaluate_expression(expression: str) -> Number:
    """Evaluate an arithmetic expression ("^" is accepted as power).

    Integral float results are returned as ints, so "2+2" and "sqrt(16)" both
    give ints.

    Raises:
        SyntaxError: If the expression does not parse
        CalculatorError: If it contains unsupported constructs
        ArithmeticError: On division by zero or overflow
    """
    tree = ast.parse(expression.strip().replace("^", "**"), mode="eval")
    value = _eval_node(tree.body)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class Calculator(Tool):
    """Evaluates math expressions, falling back to Google's calculator."""

    description = (
        "Useful for getting the result of a math expression. The input to this tool "
        "should be a valid mathematical expression that could be executed by a simple calculator."
    )

    def __init__(self, search: Optional[SerpApiSearch] = None):
        self.search = search

    @classmethod
    def from_settings(
        cls, settings: dict[str, Any], project_config: Optional[ProjectConfig] = None
    ) -> Calculator:
        search_settings = project_config.tool_settings("search") if project_config else {}
        search = SerpApiSearch(**search_settings)
        return cls(search=search if search.api_key else None, **settings)

    @tool_function("Evaluates a pure math expression", input="math expression, e.g. sqrt(83+86)/2")
    async def execute(self, input: str) -> ToolResponse:
        try:
            return ToolResponse(content=evaluate_expression(input))
        except (SyntaxError, ArithmeticError, ValueError, TypeError) as e:
            logger.info("Calculator could not evaluate %r locally: %s", input, e)

        if self.search is None:
            return ToolResponse.error(f'"{input}" is an invalid mathematical expression')

        try:
            return await self.search.calculate(input)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Calculator search fallback failed for %r: %s", input, e)
            return ToolResponse.error(f'"{input}" is an invalid mathematical expression')


__all__ = ["Calculator", "CalculatorError", "evaluate_expression"]
