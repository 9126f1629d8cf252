from __future__ import annotations

from loguru import logger

from deep_research.config import settings
from deep_research.errors import MalformedDataError
from deep_research.research_core.extract.claims import normalize_claims
from deep_research.research_core.extract.structured import extract_json
from deep_research.research_core.models.interfaces import Claim, CompletionService, Source
from deep_research.services.prompt_store import render_prompt
from deep_research.tools import web_utils


class ClaimExtractor:
    """Asks the completion service for dated key points, one source at a time."""

    def __init__(
        self,
        completion: CompletionService,
        *,
        char_budget: int | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        bullet_min_length: int | None = None,
        loose_min_length: int | None = None,
    ):
        self.completion = completion
        self.char_budget = max(int(char_budget or settings.extraction_char_budget), 500)
        self.temperature = settings.extraction_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.extraction_max_tokens
        self.bullet_min_length = (
            settings.bullet_min_chars if bullet_min_length is None else bullet_min_length
        )
        self.loose_min_length = (
            settings.loose_line_min_chars if loose_min_length is None else loose_min_length
        )

    def build_user_prompt(self, source: Source) -> str:
        return render_prompt(
            "claim_extractor.user_prompt",
            title=source.title,
            url=source.url,
            content=web_utils.truncate_chars(source.content, self.char_budget),
        )

    async def extract(self, source: Source) -> list[Claim]:
        raw = await self.completion.complete(
            render_prompt("claim_extractor.system_prompt"),
            self.build_user_prompt(source),
            self.temperature,
            self.max_tokens,
        )
        try:
            parsed = extract_json(raw)
        except MalformedDataError as exc:
            logger.warning(f"Failed to parse JSON for {source.url}, scanning for bullets: {exc}")
            parsed = None

        claims = normalize_claims(
            parsed,
            raw,
            bullet_min_length=self.bullet_min_length,
            loose_min_length=self.loose_min_length,
        )
        for claim in claims:
            claim.source_url = source.url
        return claims

    async def extract_all(self, sources: list[Source]) -> list[Claim]:
        """Pool claims from every source with content, in source order."""
        pool: list[Claim] = []
        for source in sources:
            if not source.content:
                continue
            try:
                claims = await self.extract(source)
            except Exception as exc:
                logger.warning(f"Error extracting points from {source.url}: {exc}")
                continue
            logger.info(f"Extracted {len(claims)} key points from {source.url}")
            pool.extend(claims)
        return pool
