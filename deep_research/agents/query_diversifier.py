from __future__ import annotations

from typing import Any

from loguru import logger

from deep_research.config import settings
from deep_research.errors import ResearchError
from deep_research.research_core.extract.structured import ARRAY_KEYS, extract_json, find_array_property
from deep_research.research_core.models.interfaces import CompletionService
from deep_research.services.prompt_store import render_prompt

QUERY_KEYS = ("queries", "search_terms", "searchTerms", "terms") + ARRAY_KEYS
QUERY_ITEM_KEYS = ("query", "term", "text")


def _query_text(item: Any) -> str:
    if isinstance(item, str):
        return " ".join(item.split())
    if isinstance(item, dict):
        for key in QUERY_ITEM_KEYS:
            value = item.get(key)
            if isinstance(value, str) and value.strip():
                return " ".join(value.split())
    return ""


def clean_queries(parsed: Any, *, max_queries: int) -> list[str]:
    """Coerce a recovered payload into distinct, non-empty query strings."""
    if isinstance(parsed, dict):
        parsed = find_array_property(parsed, QUERY_KEYS)
    if not isinstance(parsed, list):
        return []

    queries: list[str] = []
    seen: set[str] = set()
    for item in parsed:
        query = _query_text(item)
        key = query.lower()
        if not query or key in seen:
            continue
        seen.add(key)
        queries.append(query)
        if len(queries) >= max_queries:
            break
    return queries


class QueryDiversifier:
    """Turns one research prompt into several angle-diverse search queries."""

    def __init__(
        self,
        completion: CompletionService,
        *,
        max_queries: int | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self.completion = completion
        self.max_queries = max(int(max_queries or settings.max_queries), 1)
        self.temperature = settings.query_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.query_max_tokens

    async def generate(self, prompt: str) -> list[str]:
        """Return up to ``max_queries`` queries; an empty list on any failure."""
        system_instruction = render_prompt(
            "query_diversifier.system_prompt",
            query_count=self.max_queries,
        )
        try:
            raw = await self.completion.complete(
                system_instruction,
                prompt,
                self.temperature,
                self.max_tokens,
            )
            parsed = extract_json(raw)
        except ResearchError as exc:
            logger.warning(f"Query generation failed, continuing without queries: {exc}")
            return []

        queries = clean_queries(parsed, max_queries=self.max_queries)
        if len(queries) < self.max_queries:
            logger.info(f"Recovered {len(queries)}/{self.max_queries} search queries")
        return queries
