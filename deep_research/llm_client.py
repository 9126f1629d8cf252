"""OpenRouter completion service on the OpenAI-compatible SDK."""
from __future__ import annotations

import time
from typing import Any

from deep_research.config import settings
from deep_research.errors import CompletionError
from deep_research.services import logger as log_service


def _usage_tokens(response: Any) -> tuple[int, int]:
    usage = getattr(response, "usage", None)
    if usage is None:
        return 0, 0
    return (
        getattr(usage, "prompt_tokens", 0) or 0,
        getattr(usage, "completion_tokens", 0) or 0,
    )


def _response_text(response: Any) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    text = getattr(message, "content", None)
    return text if isinstance(text, str) else ""


class OpenRouterCompletionService:
    """``CompletionService`` implementation backed by ``AsyncOpenAI``."""

    def __init__(self, openai_client: Any, *, model: str | None = None, caller: str = "pipeline"):
        self._client = openai_client
        self.model = model or get_model()
        self.caller = caller

    async def complete(
        self,
        system_instruction: str,
        user_content: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        t0 = time.monotonic()
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": user_content},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as exc:
            elapsed_ms = int((time.monotonic() - t0) * 1000)
            log_service.log_llm_call(
                model=self.model,
                caller=self.caller,
                duration_ms=elapsed_ms,
                status="error",
                error=str(exc),
            )
            raise CompletionError(f"Completion failed for {self.model}: {exc}") from exc

        elapsed_ms = int((time.monotonic() - t0) * 1000)
        input_tokens, output_tokens = _usage_tokens(response)
        log_service.log_llm_call(
            model=self.model,
            caller=self.caller,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=elapsed_ms,
        )
        return _response_text(response)


def get_client(model: str | None = None) -> OpenRouterCompletionService:
    """Build the OpenRouter completion service from settings."""
    from openai import AsyncOpenAI

    base_url = settings.openrouter_base_url.strip() or "https://openrouter.ai/api/v1"
    openai_client = AsyncOpenAI(
        api_key=settings.openrouter_api_key,
        base_url=base_url,
        timeout=settings.completion_timeout_seconds,
    )
    return OpenRouterCompletionService(openai_client, model=model)


def get_model() -> str:
    """Get the active OpenRouter model id."""
    if settings.openrouter_model:
        return settings.openrouter_model
    return settings.default_model

