"""Tests for the OpenRouter completion service."""
import sys
import types
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from deep_research.errors import CompletionError
from deep_research.llm_client import OpenRouterCompletionService, get_client, get_model


def _openai_client(create: AsyncMock) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


class TestGetModel:
    def test_get_model_returns_default_when_no_override(self):
        with patch("deep_research.llm_client.settings") as mock_settings:
            mock_settings.openrouter_model = ""
            mock_settings.default_model = "google/gemini-2.0-flash-001"

            assert get_model() == "google/gemini-2.0-flash-001"

    def test_get_model_returns_openrouter_override(self):
        with patch("deep_research.llm_client.settings") as mock_settings:
            mock_settings.openrouter_model = "openai/gpt-4.1"
            mock_settings.default_model = "google/gemini-2.0-flash-001"

            assert get_model() == "openai/gpt-4.1"


class TestGetClient:
    def test_get_client_uses_openrouter_base_url_and_timeout(self):
        with patch("deep_research.llm_client.settings") as mock_settings:
            mock_settings.openrouter_api_key = "sk-or-valid-key"
            mock_settings.openrouter_base_url = "https://openrouter.ai/api/v1"
            mock_settings.completion_timeout_seconds = 45.0

            openai_module = types.ModuleType("openai")
            mock_openai = MagicMock()
            openai_module.AsyncOpenAI = mock_openai

            with patch.dict(sys.modules, {"openai": openai_module}):
                service = get_client(model="openai/gpt-4o-mini")

            mock_openai.assert_called_once_with(
                api_key="sk-or-valid-key",
                base_url="https://openrouter.ai/api/v1",
                timeout=45.0,
            )
            assert service.model == "openai/gpt-4o-mini"


class TestCompletionService:
    @pytest.mark.asyncio
    async def test_complete_sends_system_and_user_messages(self):
        response = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='["q1"]'))],
            usage=SimpleNamespace(prompt_tokens=11, completion_tokens=7),
        )
        create = AsyncMock(return_value=response)
        service = OpenRouterCompletionService(_openai_client(create), model="test/model")

        with patch("deep_research.llm_client.log_service.log_llm_call") as log_call:
            text = await service.complete("sys", "user", 0.3, 2000)

        assert text == '["q1"]'
        create.assert_awaited_once_with(
            model="test/model",
            messages=[
                {"role": "system", "content": "sys"},
                {"role": "user", "content": "user"},
            ],
            temperature=0.3,
            max_tokens=2000,
        )
        assert log_call.call_args.kwargs["input_tokens"] == 11
        assert log_call.call_args.kwargs["output_tokens"] == 7

    @pytest.mark.asyncio
    async def test_complete_returns_empty_string_when_no_content(self):
        response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=None))], usage=None)
        service = OpenRouterCompletionService(_openai_client(AsyncMock(return_value=response)), model="m")

        assert await service.complete("sys", "user", 0.7, 200) == ""

    @pytest.mark.asyncio
    async def test_complete_wraps_transport_failures(self):
        create = AsyncMock(side_effect=ConnectionError("network unreachable"))
        service = OpenRouterCompletionService(_openai_client(create), model="m")

        with patch("deep_research.llm_client.log_service.log_llm_call") as log_call:
            with pytest.raises(CompletionError) as excinfo:
                await service.complete("sys", "user", 0.7, 200)

        assert isinstance(excinfo.value.__cause__, ConnectionError)
        assert log_call.call_args.kwargs["status"] == "error"
