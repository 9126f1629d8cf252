from __future__ import annotations

from deep_research.config import settings
from deep_research.errors import SearchError
from deep_research.research_core.models.interfaces import SearchHit
from deep_research.tools import serpapi_search, tavily_search, web_utils

SUPPORTED_PROVIDERS = ("tavily", "serpapi")


async def _provider_search(provider: str, query: str) -> list[SearchHit]:
    if provider == "tavily":
        return await tavily_search.search(query, max_results=1)
    if provider == "serpapi":
        return await serpapi_search.search(query, max_results=1)
    raise SearchError(f"Unsupported SEARCH_PROVIDER: {provider}")


class WebSearchService:
    """``SearchService`` returning the single top hit for a query."""

    def __init__(self, provider: str | None = None):
        self.provider = (provider or settings.search_provider).lower().strip()

    async def search(self, query: str) -> SearchHit | None:
        if self.provider not in SUPPORTED_PROVIDERS:
            raise SearchError(f"Unsupported SEARCH_PROVIDER: {self.provider}")
        try:
            hits = await _provider_search(self.provider, query)
        except SearchError:
            raise
        except Exception as exc:
            raise SearchError(f"{self.provider} search failed for {query!r}: {exc}") from exc

        if not hits:
            return None
        hit = hits[0]
        if not web_utils.is_valid_url(hit.url):
            raise SearchError(f"{self.provider} returned an invalid URL for {query!r}: {hit.url!r}")
        return SearchHit(
            title=web_utils.collapse_whitespace(hit.title) or web_utils.extract_domain(hit.url),
            url=hit.url.strip(),
            snippet=web_utils.collapse_whitespace(hit.snippet),
        )
