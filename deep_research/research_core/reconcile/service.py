from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from loguru import logger

from deep_research.research_core.models.interfaces import SENTINEL_DATES, Claim

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y-%m",
    "%Y",
    "%B %Y",
    "%b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def dedup_key(text: str) -> str:
    return text.strip().lower()


def is_sentinel_date(value: str) -> bool:
    return value.strip().lower() in SENTINEL_DATES


def parse_calendar_date(value: str, formats: tuple[str, ...] = DATE_FORMATS) -> datetime | None:
    """Parse a concrete date string; ``None`` when it is not a calendar date.

    Timezone-aware values are converted to naive UTC so any two results
    are comparable. Coarse labels such as ``Q1 2024`` do not parse.
    """
    cleaned = " ".join(value.split())
    if not cleaned:
        return None
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        parsed = None
    if parsed is None:
        for fmt in formats:
            try:
                parsed = datetime.strptime(cleaned, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class ReconcileService:
    """Deduplicate claims by normalized text, keeping the most recent dating.

    Matching is exact on the lower-cased, trimmed text; paraphrases stay
    separate entries.
    """

    def __init__(self, *, date_formats: tuple[str, ...] = DATE_FORMATS):
        self.date_formats = date_formats

    def should_replace(self, resident: Claim, candidate: Claim) -> bool:
        if is_sentinel_date(candidate.date):
            return False
        if is_sentinel_date(resident.date):
            return True

        candidate_dt = parse_calendar_date(candidate.date, self.date_formats)
        resident_dt = parse_calendar_date(resident.date, self.date_formats)
        if candidate_dt is None or resident_dt is None:
            logger.debug(
                f"Keeping resident claim; unparsable date in "
                f"{resident.date!r} vs {candidate.date!r}"
            )
            return False
        return candidate_dt > resident_dt

    def reconcile(self, pool: Iterable[Claim]) -> dict[str, Claim]:
        reconciled: dict[str, Claim] = {}
        for claim in pool:
            key = dedup_key(claim.text)
            if not key:
                continue
            resident = reconciled.get(key)
            if resident is None:
                reconciled[key] = claim
            elif self.should_replace(resident, claim):
                # reassigning an existing key keeps first-seen ordering
                reconciled[key] = claim
        return reconciled


def reconcile_claims(pool: Iterable[Claim]) -> dict[str, Claim]:
    return ReconcileService().reconcile(pool)
