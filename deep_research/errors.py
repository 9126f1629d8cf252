"""Error taxonomy for the research pipeline.

Collaborator adapters translate transport failures into ``CompletionError``,
``SearchError`` and ``FetchError``. Per-source and per-query stages absorb
those; only ``PipelineError`` is expected to reach callers of ``run_research``.
"""
from __future__ import annotations

EXCERPT_CHARS = 200


class ResearchError(Exception):
    """Base class for every error raised by the pipeline."""


class MalformedDataError(ResearchError):
    """Structured-data extraction exhausted every fallback strategy."""

    def __init__(self, message: str, text: str = ""):
        self.excerpt = (text or "")[:EXCERPT_CHARS]
        super().__init__(f"{message}: {self.excerpt!r}" if self.excerpt else message)


class CompletionError(ResearchError):
    """Text-completion service failed (transport, auth or quota)."""


class SearchError(ResearchError):
    """Web-search service failed."""


class FetchError(ResearchError):
    """Page-content fetch failed."""


class PipelineError(ResearchError):
    """Unrecoverable failure that escaped per-stage containment."""
