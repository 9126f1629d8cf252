from __future__ import annotations

import httpx

from deep_research.config import settings
from deep_research.research_core.models.interfaces import SearchHit

SERPAPI_URL = "https://serpapi.com/search"


def _parse_organic_results(payload: dict, max_results: int) -> list[SearchHit]:
    organic = payload.get("organic_results") or []
    hits: list[SearchHit] = []
    for item in organic[:max_results]:
        if not isinstance(item, dict):
            continue
        hits.append(
            SearchHit(
                title=str(item.get("title") or ""),
                url=str(item.get("link") or ""),
                snippet=str(item.get("snippet") or ""),
            )
        )
    return hits


async def search(query: str, *, max_results: int = 1) -> list[SearchHit]:
    """Execute a Google search through SerpAPI.

    API: GET https://serpapi.com/search?q=<query>&api_key=<key>&num=<n>
    """
    api_key = settings.serpapi_api_key
    if not api_key:
        raise ValueError("SERPAPI_API_KEY not configured")

    async with httpx.AsyncClient(timeout=settings.search_timeout_seconds) as client:
        response = await client.get(
            SERPAPI_URL,
            params={"q": query, "api_key": api_key, "num": max_results},
        )
        response.raise_for_status()
        payload = response.json()

    if not isinstance(payload, dict):
        raise ValueError("SerpAPI returned a non-object payload")
    if payload.get("error") and not payload.get("organic_results"):
        # SerpAPI reports "no results" through the error field as well
        if "hasn't returned any results" in str(payload["error"]):
            return []
        raise ValueError(f"SerpAPI error: {payload['error']}")
    return _parse_organic_results(payload, max_results)
