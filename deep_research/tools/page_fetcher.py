from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import httpx
from loguru import logger

from deep_research.config import settings
from deep_research.errors import FetchError

USER_AGENT = "DeepResearchBot/1.0 (+https://example.local)"
SCRAPINGANT_URL = "https://api.scrapingant.com/v2/general"

Fetcher = Callable[[str], Awaitable[str]]


class PageFetchService:
    """``FetchService`` returning raw page markup, with bounded retries."""

    def __init__(
        self,
        *,
        provider: str | None = None,
        retry_max: int | None = None,
        timeout_seconds: float | None = None,
        fetcher: Fetcher | None = None,
    ):
        self.provider = (provider or settings.fetch_provider).lower().strip() or "direct"
        self.retry_max = max(int(settings.fetch_retry_max if retry_max is None else retry_max), 0)
        self.timeout_seconds = max(
            float(settings.fetch_timeout_seconds if timeout_seconds is None else timeout_seconds),
            1.0,
        )
        self._fetcher = fetcher

    async def fetch(self, url: str) -> str:
        fetcher = self._fetcher or self._fetch_default
        max_attempts = self.retry_max + 1
        last_error: Exception | None = None

        for attempt in range(1, max_attempts + 1):
            try:
                return await fetcher(url)
            except Exception as exc:
                last_error = exc
                logger.debug(f"Fetch attempt {attempt}/{max_attempts} failed for {url}: {exc}")
                if attempt < max_attempts:
                    await asyncio.sleep(min(0.25 * attempt, 1.0))

        raise FetchError(f"Fetch failed for {url}: {last_error}") from last_error

    async def _fetch_default(self, url: str) -> str:
        if self.provider == "direct":
            return await self._fetch_direct(url)
        if self.provider == "scrapingant":
            return await self._fetch_with_scrapingant(url)
        if self.provider in {"jina", "jina_reader"}:
            return await self._fetch_with_jina_reader(url)
        raise FetchError(f"Unsupported FETCH_PROVIDER: {self.provider}")

    async def _fetch_direct(self, url: str) -> str:
        async with httpx.AsyncClient(timeout=self.timeout_seconds, follow_redirects=True) as client:
            response = await client.get(url, headers={"User-Agent": USER_AGENT})
            response.raise_for_status()
            return response.text

    async def _fetch_with_scrapingant(self, url: str) -> str:
        api_key = settings.scrapingant_api_key
        if not api_key:
            raise FetchError("SCRAPINGANT_API_KEY not configured")
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.get(
                SCRAPINGANT_URL,
                params={"url": url, "x-api-key": api_key, "browser": "false"},
            )
            response.raise_for_status()
            data = response.json()
        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, str) or not content:
            raise FetchError("ScrapingAnt response missing content")
        return content

    async def _fetch_with_jina_reader(self, url: str) -> str:
        base = settings.jina_reader_base_url.strip()
        if not base:
            raise FetchError("Jina reader base URL not configured")
        target = base.format(url=url) if "{url}" in base else base.rstrip("/") + "/" + url
        async with httpx.AsyncClient(timeout=self.timeout_seconds, follow_redirects=True) as client:
            response = await client.get(target, headers={"X-Return-Format": "html"})
            response.raise_for_status()
        if not response.text:
            raise FetchError("Jina reader returned empty body")
        return response.text
