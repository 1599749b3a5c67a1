"""Wikipedia lookup through the MediaWiki API."""

from __future__ import annotations

from typing import Any

import httpx

from .base import Tool, ToolResponse, tool_function

USER_AGENT = "toolweave/0.1 (https://github.com/toolweave/toolweave)"


class Wikipedia(Tool):
    """Searches Wikipedia and returns the introduction of the best match."""

    description = (
        "A wrapper around Wikipedia. Useful for when you need to answer general questions "
        "about people, places, companies, facts, historical events, or other subjects. "
        "Input should be a search query."
    )

    def __init__(self, lang: str = "en", max_chars: int = 4000, timeout_sec: int = 30):
        self.lang = lang
        self.max_chars = max_chars
        self.timeout_sec = timeout_sec

    @property
    def api_url(self) -> str:
        return f"https://{self.lang}.wikipedia.org/w/api.php"

    @tool_function("Look up a topic on Wikipedia and return the page summary", input="search query")
    async def execute(self, input: str) -> ToolResponse:
        async with httpx.AsyncClient(
            timeout=self.timeout_sec, headers={"User-Agent": USER_AGENT}
        ) as client:
            hits = await self._query(
                client,
                {"list": "search", "srsearch": input, "srlimit": 1},
            )
            results = hits.get("search", [])
            if not results:
                return ToolResponse(content=f"No Wikipedia page found for '{input}'")

            title = results[0]["title"]
            pages = await self._query(
                client,
                {
                    "prop": "extracts",
                    "exintro": 1,
                    "explaintext": 1,
                    "redirects": 1,
                    "titles": title,
                },
            )

        page = next(iter(pages.get("pages", {}).values()), {})
        extract = page.get("extract", "")[: self.max_chars]
        return ToolResponse(content=f"Page: {title}\nSummary: {extract}")

    async def _query(self, client: httpx.AsyncClient, params: dict[str, Any]) -> dict[str, Any]:
        response = await client.get(
            self.api_url, params={"action": "query", "format": "json", **params}
        )
        response.raise_for_status()
        return response.json().get("query", {})


__all__ = ["Wikipedia"]
