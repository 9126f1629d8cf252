from __future__ import annotations

from tavily import AsyncTavilyClient

from deep_research.config import settings
from deep_research.research_core.models.interfaces import SearchHit


async def search(
    query: str,
    *,
    max_results: int = 1,
    search_depth: str = "basic",
    topic: str = "general",
) -> list[SearchHit]:
    """Execute a Tavily web search and return the top hits."""
    client = AsyncTavilyClient(api_key=settings.tavily_api_key)
    response = await client.search(
        query=query,
        search_depth=search_depth,
        max_results=max_results,
        topic=topic,
    )
    return [
        SearchHit(
            title=r.get("title") or "",
            url=r.get("url") or "",
            snippet=r.get("content") or "",
        )
        for r in response.get("results", [])[:max_results]
    ]
