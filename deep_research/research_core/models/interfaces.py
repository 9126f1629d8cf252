from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

UNDATED = "undated"
RECENT = "recent"
SENTINEL_DATES = frozenset({UNDATED, RECENT})


@dataclass(slots=True)
class Source:
    url: str
    title: str
    snippet: str = ""
    content: str = ""


@dataclass(slots=True)
class Claim:
    text: str
    date: str = UNDATED
    source_url: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"point": self.text, "date": self.date, "source": self.source_url}


@dataclass(slots=True)
class SearchHit:
    title: str
    url: str
    snippet: str = ""


@dataclass(slots=True)
class RunResult:
    evidence_markdown: str
    summary_markdown: str
    source_count: int
    claim_count: int
    queries: list[str] = field(default_factory=list)
    sources: list[Source] = field(default_factory=list)


class CompletionService(Protocol):
    async def complete(
        self,
        system_instruction: str,
        user_content: str,
        temperature: float,
        max_tokens: int,
    ) -> str: ...


class SearchService(Protocol):
    async def search(self, query: str) -> SearchHit | None: ...


class FetchService(Protocol):
    async def fetch(self, url: str) -> str: ...
