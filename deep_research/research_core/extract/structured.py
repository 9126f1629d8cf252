"""Best-effort recovery of a JSON value from free-form model output.

Strategies run in a fixed order and the first successful parse wins:

1. the whole trimmed text
2. the inside of a fenced code block (optionally tagged ``json``)
3. the span from the first ``[`` to the last ``]``
4. the span from the first ``{`` to the last ``}``, unwrapping a known
   array-valued property when present
5. the text with any leading noise before the first ``[``/``{`` and trailing
   noise after the last ``]``/``}`` removed

None of the strategies invent values; they only narrow the parse window.
"""
from __future__ import annotations

import json
import re
from typing import Any

from deep_research.errors import MalformedDataError

ARRAY_KEYS = (
    "points",
    "key_points",
    "keyPoints",
    "items",
    "data",
    "results",
    "extracted_points",
    "extractedPoints",
)

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL | re.IGNORECASE)


def find_array_property(obj: dict[str, Any], keys: tuple[str, ...] = ARRAY_KEYS) -> list[Any] | None:
    """Return the first array-valued property of ``obj`` named in ``keys``."""
    for key in keys:
        value = obj.get(key)
        if isinstance(value, list):
            return value
    return None


def _try_parse(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return False, None


def _span(text: str, opener: str, closer: str) -> str | None:
    start = text.find(opener)
    end = text.rfind(closer)
    if start < 0 or end <= start:
        return None
    return text[start : end + 1]


def _from_fence(text: str) -> tuple[bool, Any]:
    match = _FENCE_RE.search(text)
    if not match:
        return False, None
    return _try_parse(match.group(1).strip())


def _from_array_span(text: str) -> tuple[bool, Any]:
    candidate = _span(text, "[", "]")
    if candidate is None:
        return False, None
    ok, value = _try_parse(candidate)
    if ok and isinstance(value, list):
        return True, value
    return False, None


def _from_object_span(text: str) -> tuple[bool, Any]:
    candidate = _span(text, "{", "}")
    if candidate is None:
        return False, None
    ok, value = _try_parse(candidate)
    if not ok or not isinstance(value, dict):
        return False, None
    unwrapped = find_array_property(value)
    return True, value if unwrapped is None else unwrapped


def _from_trimmed(text: str) -> tuple[bool, Any]:
    starts = [i for i in (text.find("["), text.find("{")) if i >= 0]
    ends = [i for i in (text.rfind("]"), text.rfind("}")) if i >= 0]
    if not starts or not ends:
        return False, None
    start, end = min(starts), max(ends)
    if end <= start:
        return False, None
    return _try_parse(text[start : end + 1])


def extract_json(raw_text: str) -> Any:
    """Parse the JSON value embedded in ``raw_text``.

    Raises ``MalformedDataError`` with an excerpt of the input when no
    strategy succeeds.
    """
    text = (raw_text or "").strip()
    if not text:
        raise MalformedDataError("No structured data in empty text", text)

    for strategy in (_try_parse, _from_fence, _from_array_span, _from_object_span, _from_trimmed):
        ok, value = strategy(text)
        if ok:
            return value

    raise MalformedDataError("No valid JSON found in response", text)
