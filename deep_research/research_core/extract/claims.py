from __future__ import annotations

from typing import Any

from deep_research.research_core.extract.bullets import extract_bullets, extract_marked_lines
from deep_research.research_core.extract.structured import ARRAY_KEYS
from deep_research.research_core.models.interfaces import RECENT, UNDATED, Claim

TEXT_KEYS = ("point", "text", "summary", "content")
DATE_KEYS = ("date", "timestamp", "published_at", "time")

# Model spellings of "no date could be determined".
NO_DATE_VALUES = frozenset(
    {
        "undated",
        "no date",
        "no_date",
        "no date found",
        "not dated",
        "unknown",
        "unknown date",
        "n/a",
        "na",
        "none",
        "null",
        "",
    }
)


def _first_text(element: dict[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = element.get(key)
        if value is None or isinstance(value, (dict, list, bool)):
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def normalize_date(value: str) -> str:
    """Map sentinel spellings onto ``undated``/``recent``; keep concrete dates."""
    cleaned = " ".join(str(value).split())
    lowered = cleaned.lower()
    if lowered in NO_DATE_VALUES:
        return UNDATED
    if lowered == RECENT:
        return RECENT
    return cleaned


def claim_from_element(element: Any) -> Claim | None:
    if isinstance(element, str):
        text = " ".join(element.split())
        return Claim(text=text) if text else None
    if not isinstance(element, dict):
        return None

    text = " ".join(_first_text(element, TEXT_KEYS).split())
    if not text:
        return None
    return Claim(text=text, date=normalize_date(_first_text(element, DATE_KEYS)))


def _candidate_elements(parsed: Any) -> list[Any] | None:
    if isinstance(parsed, list) and parsed:
        return parsed
    if isinstance(parsed, dict):
        for key in ARRAY_KEYS:
            value = parsed.get(key)
            if isinstance(value, list) and value:
                return value
    return None


def normalize_claims(
    parsed: Any,
    raw_text: str,
    *,
    bullet_min_length: int = 3,
    loose_min_length: int = 20,
) -> list[Claim]:
    """Turn an arbitrarily shaped extraction payload into canonical claims.

    ``parsed`` is whatever ``extract_json`` recovered (``None`` when it
    failed). Without a usable array the raw text is scanned for bullet items,
    then for marker-led lines; those claims are ``undated``. Claims come back
    without ``source_url``; the caller stamps it.
    """
    elements = _candidate_elements(parsed)
    if elements is None:
        items = extract_bullets(raw_text, min_length=bullet_min_length)
        if not items:
            items = extract_marked_lines(raw_text, min_length=loose_min_length)
        elements = items

    claims: list[Claim] = []
    for element in elements:
        claim = claim_from_element(element)
        if claim is not None:
            claims.append(claim)
    return claims
