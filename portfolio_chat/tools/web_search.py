"""Web search — Tavily first, DuckDuckGo Instant Answers as the keyless fallback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx
from pydantic import Field

from portfolio_chat.tools.base import BaseTool, ToolParams, ToolResult

if TYPE_CHECKING:
    from portfolio_chat.config import Settings

logger = logging.getLogger(__name__)

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
DUCKDUCKGO_URL = "https://api.duckduckgo.com/"
DEFAULT_USER_AGENT = "PortfolioChat/1.0 (Web Search)"
MAX_SOURCES = 3

NO_RESULTS_MESSAGE = (
    "I searched for information but couldn't find specific details. "
    "You might want to check online resources for more information."
)
SEARCH_ERROR_MESSAGE = (
    "I encountered an error while searching for information. Please try asking again."
)


class SearchProvider(Protocol):
    """One backend in the fallback chain.

    ``attempt`` returns text, or ``None`` when the provider had nothing usable.
    Transport failures may raise; the chain treats them as a miss.
    """

    name: str

    async def attempt(self, query: str) -> str | None: ...


class TavilyProvider:
    """Keyed POST API that returns a short answer plus sources."""

    name = "tavily"

    def __init__(self, api_key: str, timeout: float = 10.0) -> None:
        self._api_key = api_key
        self._timeout = timeout

    async def attempt(self, query: str) -> str | None:
        payload = {
            "api_key": self._api_key,
            "query": query,
            "search_depth": "basic",
            "include_answer": True,
            "include_raw_content": False,
            "max_results": MAX_SOURCES,
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.post(TAVILY_SEARCH_URL, json=payload)

        if not resp.is_success:
            logger.info("Tavily returned %d, falling back", resp.status_code)
            return None

        data = resp.json()
        if not isinstance(data, dict):
            logger.warning("Tavily returned a non-object payload, falling back")
            return None
        return _format_tavily(data) or None


def _format_tavily(data: dict[str, Any]) -> str:
    parts: list[str] = []
    answer = data.get("answer")
    if answer:
        parts.append(f"Answer: {answer}")

    raw_results = data.get("results")
    if not isinstance(raw_results, list):
        raw_results = []
    results = [r for r in raw_results if isinstance(r, dict)]
    if results:
        lines = ["Sources:"]
        for i, r in enumerate(results[:MAX_SOURCES], start=1):
            lines.append(
                f"{i}. {r.get('title', '')} ({r.get('url', '')})\n   {r.get('content', '')}"
            )
        parts.append("\n".join(lines))

    return "\n\n".join(parts).strip()


class DuckDuckGoProvider:
    """Keyless Instant Answer API."""

    name = "duckduckgo"

    def __init__(self, timeout: float = 10.0) -> None:
        self._timeout = timeout

    async def attempt(self, query: str) -> str | None:
        params = {"q": query, "format": "json", "no_html": "1", "skip_disambig": "1"}
        async with httpx.AsyncClient(
            timeout=self._timeout,
            headers={"User-Agent": DEFAULT_USER_AGENT},
        ) as client:
            resp = await client.get(DUCKDUCKGO_URL, params=params)

        if not resp.is_success:
            logger.info("DuckDuckGo returned %d", resp.status_code)
            return None

        data = resp.json()
        if not isinstance(data, dict):
            return None
        return _format_duckduckgo(data) or None


def _format_duckduckgo(data: dict[str, Any]) -> str:
    abstract = data.get("AbstractText")
    if abstract:
        url = data.get("AbstractURL")
        return f"{abstract}\nSource: {url}" if url else str(abstract)

    answer = data.get("Answer")
    if answer:
        return str(answer)

    topics = data.get("RelatedTopics")
    if not isinstance(topics, list):
        topics = []
    if topics:
        first = topics[0]
        if isinstance(first, dict):
            return str(first.get("Text") or "")
        if isinstance(first, str):
            return first
    return ""


class WebSearch:
    """Ordered provider chain; ``search`` never raises."""

    def __init__(self, providers: list[SearchProvider]) -> None:
        self.providers = providers

    @classmethod
    def from_settings(cls, settings: Settings) -> WebSearch:
        providers: list[SearchProvider] = []
        if settings.tavily_api_key:
            providers.append(
                TavilyProvider(settings.tavily_api_key, timeout=settings.search_timeout_seconds)
            )
        providers.append(DuckDuckGoProvider(timeout=settings.search_timeout_seconds))
        return cls(providers)

    async def search(self, query: str) -> str:
        failures = 0
        for provider in self.providers:
            try:
                text = await provider.attempt(query)
            except Exception:
                failures += 1
                logger.warning("Search provider '%s' failed", provider.name, exc_info=True)
                continue
            if text:
                logger.info("Search via %s answered %r", provider.name, query)
                return text

        if self.providers and failures == len(self.providers):
            return SEARCH_ERROR_MESSAGE
        return NO_RESULTS_MESSAGE


class WebSearchParams(ToolParams):
    query: str = Field(
        description=(
            "The search query. Be specific and include context "
            '(e.g. "The Grand Budapest Hotel movie Wes Anderson" rather than '
            '"Grand Budapest Hotel").'
        ),
        min_length=1,
    )


class WebSearchTool(BaseTool):
    """Exposes ``WebSearch`` to the model as ``web_search(query)``."""

    name = "web_search"
    description = (
        "Search the web for information about a topic, movie, show, game, book, or any "
        "other subject. Use this when you need details about something that was mentioned "
        "but is not in your knowledge base."
    )
    params_model = WebSearchParams

    def __init__(self, web_search: WebSearch) -> None:
        self._web_search = web_search

    async def execute(self, **kwargs: Any) -> ToolResult:
        return ToolResult(text=await self._web_search.search(kwargs["query"]))
