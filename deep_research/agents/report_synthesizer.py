from __future__ import annotations

import json

from loguru import logger

from deep_research.config import settings
from deep_research.research_core.models.interfaces import UNDATED, Claim, CompletionService, Source
from deep_research.services.prompt_store import render_prompt

NO_KEY_POINTS_MARKER = "- No key points could be extracted from the available sources."
NO_SOURCES_MARKER = "- No sources could be retrieved for this prompt."


def _format_claim(claim: Claim) -> str:
    if claim.date and claim.date != UNDATED:
        return f"- **{claim.text}** _({claim.date})_"
    return f"- **{claim.text}**"


def build_evidence_markdown(sources: list[Source], reconciled: dict[str, Claim]) -> str:
    """Evidence log: numbered source citations, one bullet per claim, counts."""
    source_lines = [f"{i}. [{s.title or s.url}]({s.url})" for i, s in enumerate(sources, 1)]
    claim_lines = [_format_claim(claim) for claim in reconciled.values()]

    parts = [
        "# Research Observations",
        "",
        "## Sources Analyzed",
        "\n".join(source_lines) if source_lines else NO_SOURCES_MARKER,
        "",
        "## Key Points Extracted",
        "",
        "\n".join(claim_lines) if claim_lines else NO_KEY_POINTS_MARKER,
        "",
        "---",
        f"*Total sources: {len(sources)} | Key points: {len(reconciled)}*",
        "",
    ]
    return "\n".join(parts)


def claims_to_json(reconciled: dict[str, Claim]) -> str:
    return json.dumps(
        [claim.to_dict() for claim in reconciled.values()],
        ensure_ascii=False,
        indent=2,
    )


class ReportSynthesizer:
    """Asks the completion service for a narrative report over reconciled claims."""

    def __init__(
        self,
        completion: CompletionService,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        fallback_text: str | None = None,
    ):
        self.completion = completion
        self.temperature = settings.synthesis_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.synthesis_max_tokens
        self.fallback_text = fallback_text or settings.synthesis_fallback_text

    async def synthesize(self, prompt: str, reconciled: dict[str, Claim]) -> str:
        """Narrative summary as returned by the model, or the fallback text."""
        user_content = render_prompt(
            "report_synthesizer.user_prompt",
            prompt=prompt,
            claims_json=claims_to_json(reconciled),
        )
        try:
            summary = await self.completion.complete(
                render_prompt("report_synthesizer.system_prompt"),
                user_content,
                self.temperature,
                self.max_tokens,
            )
        except Exception as exc:
            logger.warning(f"Synthesis failed, returning fallback summary: {exc}")
            return self.fallback_text
        return summary or self.fallback_text
