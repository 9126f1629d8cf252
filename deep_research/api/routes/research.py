from __future__ import annotations

from fastapi import APIRouter, HTTPException

from deep_research.agents.orchestrator import ResearchOrchestrator
from deep_research.errors import PipelineError
from deep_research.models.schemas import ResearchRequest, ResearchResponse, SourceInfo
from deep_research.services import logger as log_service

router = APIRouter(prefix="/api/research", tags=["research"])


def get_orchestrator(model: str | None = None) -> ResearchOrchestrator:
    return ResearchOrchestrator(model=model)


@router.post("", response_model=ResearchResponse)
async def run_research(request: ResearchRequest):
    """Run one research synchronously and return both markdown documents."""
    orchestrator = get_orchestrator(request.model)
    try:
        result = await orchestrator.run_research(request.prompt)
    except PipelineError as exc:
        log_service.log_event("research_failed", str(exc), prompt=request.prompt[:100])
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ResearchResponse(
        observation=result.evidence_markdown,
        summary=result.summary_markdown,
        sources=result.source_count,
        key_points=result.claim_count,
        queries=result.queries,
        source_list=[SourceInfo(url=s.url, title=s.title) for s in result.sources],
    )
