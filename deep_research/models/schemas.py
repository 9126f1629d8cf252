from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


# --- Requests ---


class ResearchRequest(BaseModel):
    prompt: str = Field(min_length=1)
    model: str | None = None

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt must not be blank")
        return value.strip()


# --- Responses ---


class SourceInfo(BaseModel):
    url: str
    title: str


class ResearchResponse(BaseModel):
    success: bool = True
    observation: str
    summary: str
    sources: int
    key_points: int
    queries: list[str] = Field(default_factory=list)
    source_list: list[SourceInfo] = Field(default_factory=list)
