from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from deep_research.agents.query_diversifier import QueryDiversifier, clean_queries
from deep_research.errors import CompletionError


def _completion(response: str | Exception) -> AsyncMock:
    completion = AsyncMock()
    if isinstance(response, Exception):
        completion.complete = AsyncMock(side_effect=response)
    else:
        completion.complete = AsyncMock(return_value=response)
    return completion


@pytest.mark.asyncio
async def test_generate_returns_parsed_queries_and_calls_completion_once():
    completion = _completion('["q1", "q2", "q3", "q4", "q5"]')
    diversifier = QueryDiversifier(completion, max_queries=5)

    queries = await diversifier.generate("renewable energy trends")

    assert queries == ["q1", "q2", "q3", "q4", "q5"]
    completion.complete.assert_awaited_once()
    system_instruction, user_content, temperature, max_tokens = completion.complete.await_args.args
    assert "5" in system_instruction
    assert user_content == "renewable energy trends"
    assert temperature == pytest.approx(0.7)
    assert max_tokens == 200


@pytest.mark.asyncio
async def test_generate_truncates_to_max_queries():
    completion = _completion('```json\n["a", "b", "c", "d", "e", "f", "g"]\n```')
    queries = await QueryDiversifier(completion, max_queries=5).generate("topic")
    assert queries == ["a", "b", "c", "d", "e"]


@pytest.mark.asyncio
async def test_generate_keeps_whatever_was_recovered():
    completion = _completion('Here you go: ["only one", "and two"]')
    queries = await QueryDiversifier(completion, max_queries=5).generate("topic")
    assert queries == ["only one", "and two"]


@pytest.mark.asyncio
async def test_generate_returns_empty_list_on_malformed_output():
    completion = _completion("I am unable to help with that request.")
    assert await QueryDiversifier(completion).generate("topic") == []


@pytest.mark.asyncio
async def test_generate_returns_empty_list_on_completion_error():
    completion = _completion(CompletionError("quota exceeded"))
    assert await QueryDiversifier(completion).generate("topic") == []


@pytest.mark.asyncio
async def test_generate_propagates_unexpected_defects():
    completion = _completion(TypeError("bug in adapter"))
    with pytest.raises(TypeError):
        await QueryDiversifier(completion).generate("topic")


def test_clean_queries_dedupes_and_drops_empty_entries():
    parsed = ["Solar  policy", "solar policy", "", "   ", 7, {"query": "wind auctions"}, "Grid storage"]
    assert clean_queries(parsed, max_queries=5) == ["Solar policy", "wind auctions", "Grid storage"]


def test_clean_queries_accepts_wrapped_object():
    assert clean_queries({"queries": ["a", "b"]}, max_queries=5) == ["a", "b"]
    assert clean_queries({"results": ["c"]}, max_queries=5) == ["c"]
    assert clean_queries({"unrelated": "x"}, max_queries=5) == []
    assert clean_queries("just a string", max_queries=5) == []
