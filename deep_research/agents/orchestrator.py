from __future__ import annotations

import time
from uuid import uuid4

from loguru import logger

from deep_research.agents.claim_extractor import ClaimExtractor
from deep_research.agents.query_diversifier import QueryDiversifier
from deep_research.agents.report_synthesizer import ReportSynthesizer, build_evidence_markdown
from deep_research.agents.source_harvester import SourceHarvester
from deep_research.errors import PipelineError
from deep_research.llm_client import get_client
from deep_research.research_core.models.interfaces import (
    CompletionService,
    FetchService,
    RunResult,
    SearchService,
)
from deep_research.research_core.reconcile.service import ReconcileService
from deep_research.services import logger as log_service
from deep_research.tools.page_fetcher import PageFetchService
from deep_research.tools.search_provider import WebSearchService


class ResearchOrchestrator:
    """Runs the research pipeline for one prompt.

    Flow:
      1. Generate diverse search queries via LLM
      2. Search each query for its top result
      3. Fetch each source and keep its paragraph text
      4. Extract dated key points per source via LLM
      5. Deduplicate key points, keeping the most recent dating
      6. Render the evidence log and synthesize the summary

    Every collection built here belongs to a single ``run_research`` call, so
    one orchestrator may serve concurrent runs.
    """

    def __init__(
        self,
        completion: CompletionService | None = None,
        search: SearchService | None = None,
        fetch: FetchService | None = None,
        *,
        model: str | None = None,
    ):
        self.completion = completion or get_client(model=model)
        self.search = search or WebSearchService()
        self.fetch = fetch or PageFetchService()
        self.query_diversifier = QueryDiversifier(self.completion)
        self.source_harvester = SourceHarvester(self.search, self.fetch)
        self.claim_extractor = ClaimExtractor(self.completion)
        self.reconciler = ReconcileService()
        self.report_synthesizer = ReportSynthesizer(self.completion)

    async def run_research(self, prompt: str) -> RunResult:
        """Run one research and return both markdown documents with counts.

        Per-query and per-source failures are absorbed; anything else that
        escapes a stage is raised as ``PipelineError``.
        """
        prompt = (prompt or "").strip()
        if not prompt:
            raise PipelineError("Research prompt must not be empty")

        run_id = str(uuid4())
        started = time.monotonic()
        try:
            return await self._run(run_id, prompt, started)
        except PipelineError:
            raise
        except Exception as exc:
            logger.exception(f"Research run {run_id} failed")
            log_service.log_research_step(run_id, "run", "failed", {"error": str(exc)})
            raise PipelineError(f"Research failed: {exc}") from exc

    async def _run(self, run_id: str, prompt: str, started: float) -> RunResult:
        log_service.log_research_step(run_id, "run", "started", {"prompt": prompt[:200]})

        queries = await self.query_diversifier.generate(prompt)
        log_service.log_research_step(run_id, "queries", "completed", {"queries": queries})

        sources = await self.source_harvester.harvest(queries)
        log_service.log_research_step(
            run_id,
            "sources",
            "completed",
            {
                "sources": len(sources),
                "with_content": sum(1 for s in sources if s.content),
            },
        )

        pool = await self.claim_extractor.extract_all(sources)
        reconciled = self.reconciler.reconcile(pool)
        log_service.log_research_step(
            run_id,
            "claims",
            "completed",
            {"pooled": len(pool), "reconciled": len(reconciled)},
        )

        evidence = build_evidence_markdown(sources, reconciled)
        summary = await self.report_synthesizer.synthesize(prompt, reconciled)

        log_service.log_research_step(
            run_id,
            "run",
            "completed",
            {"runtime_ms": int((time.monotonic() - started) * 1000)},
        )
        return RunResult(
            evidence_markdown=evidence,
            summary_markdown=summary,
            source_count=len(sources),
            claim_count=len(reconciled),
            queries=queries,
            sources=sources,
        )


async def run_research(prompt: str, *, model: str | None = None) -> RunResult:
    """Run research with the configured OpenRouter, search and fetch services."""
    return await ResearchOrchestrator(model=model).run_research(prompt)
