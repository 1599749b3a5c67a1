"""Google search via SerpApi."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

from .base import Tool, ToolResponse, tool_function

logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search"


class SerpApiSearch(Tool):
    """Google search through the SerpApi JSON API."""

    name = "search"
    description = (
        "A wrapper around SerpApi (Google search). Useful for when you need to answer "
        "questions about current events. Input should be a search query."
    )

    def __init__(
        self,
        api_key: Optional[str] = None,
        engine: str = "google",
        timeout_sec: int = 30,
    ):
        self.api_key = api_key or os.getenv("SERPAPI_API_KEY")
        self.engine = engine
        self.timeout_sec = timeout_sec

    @tool_function("Search Google and return the most relevant answer", input="search query")
    async def execute(self, input: str) -> ToolResponse:
        results = await self.search(input)
        return ToolResponse(content=extract_answer(results))

    async def calculate(self, input: str) -> ToolResponse:
        """Evaluate an expression with Google's calculator answer box."""
        results = await self.search(input)
        answer_box = results.get("answer_box") or {}
        result = answer_box.get("result") or answer_box.get("answer")
        if result is None:
            return ToolResponse.error(f'"{input}" is an invalid mathematical expression')
        return ToolResponse(content=result)

    async def search(self, query: str) -> dict[str, Any]:
        """Run a SerpApi query and return the raw JSON results."""
        if not self.api_key:
            raise ValueError("SerpApi api_key is required (set [tools.search] api_key or SERPAPI_API_KEY)")

        params = {"q": query, "engine": self.engine, "api_key": self.api_key}
        async with httpx.AsyncClient(timeout=self.timeout_sec) as client:
            response = await client.get(SERPAPI_URL, params=params)
            response.raise_for_status()
            results = response.json()

        if "error" in results:
            raise ValueError(f"SerpApi error: {results['error']}")
        logger.debug("SerpApi query %r returned keys %s", query, sorted(results))
        return results


def extract_answer(results: dict[str, Any]) -> str:
    """Pick the most direct answer out of SerpApi results."""
    answer_box = results.get("answer_box") or {}
    for key in ("answer", "snippet", "result"):
        if answer_box.get(key):
            return str(answer_box[key])
    if answer_box.get("snippet_highlighted_words"):
        return str(answer_box["snippet_highlighted_words"][0])

    knowledge_graph = results.get("knowledge_graph") or {}
    if knowledge_graph.get("description"):
        return str(knowledge_graph["description"])

    for result in results.get("organic_results") or []:
        if result.get("snippet"):
            return str(result["snippet"])

    return "No good search result found"


__all__ = ["SerpApiSearch", "extract_answer"]
