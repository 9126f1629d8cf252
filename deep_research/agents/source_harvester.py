from __future__ import annotations

from loguru import logger

from deep_research.config import settings
from deep_research.research_core.models.interfaces import FetchService, SearchService, Source
from deep_research.tools import web_utils


class SourceHarvester:
    """Searches each query for its top result, then fetches page text.

    Queries and sources are processed one at a time, in order. A failing
    search or fetch is logged and skipped; a source whose fetch failed stays
    in the list with empty ``content``.
    """

    def __init__(
        self,
        search: SearchService,
        fetch: FetchService,
        *,
        max_queries: int | None = None,
        max_sources: int | None = None,
        min_paragraph_chars: int | None = None,
    ):
        self.search_service = search
        self.fetch_service = fetch
        self.max_queries = max(int(max_queries or settings.max_queries), 1)
        self.max_sources = max(int(max_sources or settings.max_sources), 1)
        self.min_paragraph_chars = (
            settings.min_paragraph_chars if min_paragraph_chars is None else min_paragraph_chars
        )

    async def collect(self, queries: list[str]) -> list[Source]:
        sources: list[Source] = []
        seen_urls: set[str] = set()

        for query in queries[: self.max_queries]:
            try:
                hit = await self.search_service.search(query)
            except Exception as exc:
                logger.warning(f"Error searching for {query!r}: {exc}")
                continue
            if hit is None:
                logger.info(f"No search result for {query!r}")
                continue
            if hit.url in seen_urls:
                logger.debug(f"Skipping duplicate source {hit.url}")
                continue
            seen_urls.add(hit.url)
            sources.append(Source(url=hit.url, title=hit.title, snippet=hit.snippet or ""))

        return sources[: self.max_sources]

    async def populate(self, sources: list[Source]) -> None:
        for source in sources:
            try:
                markup = await self.fetch_service.fetch(source.url)
            except Exception as exc:
                logger.warning(f"Error fetching {source.url}: {exc}")
                continue
            source.content = web_utils.extract_paragraphs(
                markup,
                min_length=self.min_paragraph_chars,
            )
            if not source.content:
                logger.info(f"No usable paragraphs in {source.url}")

    async def harvest(self, queries: list[str]) -> list[Source]:
        sources = await self.collect(queries)
        await self.populate(sources)
        return sources
