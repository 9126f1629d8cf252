from __future__ import annotations

from datetime import datetime

import pytest

from deep_research.research_core.models.interfaces import Claim
from deep_research.research_core.reconcile.service import (
    ReconcileService,
    dedup_key,
    parse_calendar_date,
    reconcile_claims,
)


def _claim(text: str, date: str, source: str = "https://example.com/a") -> Claim:
    return Claim(text=text, date=date, source_url=source)


def test_dedup_key_is_case_and_whitespace_insensitive():
    assert dedup_key("  Solar Grew 20%  ") == dedup_key("solar grew 20%")


def test_later_concrete_date_replaces_earlier():
    pool = [
        _claim("Solar grew 20%", "2024-01-01", "https://a.example"),
        _claim("solar grew 20% ", "2024-06-01", "https://b.example"),
    ]
    reconciled = reconcile_claims(pool)
    assert len(reconciled) == 1
    survivor = reconciled["solar grew 20%"]
    assert survivor.date == "2024-06-01"
    assert survivor.source_url == "https://b.example"


def test_earlier_concrete_date_does_not_replace_later():
    pool = [_claim("Fact", "2024-06-01"), _claim("fact", "2024-01-01")]
    assert reconcile_claims(pool)["fact"].date == "2024-06-01"


def test_equal_dates_keep_the_resident():
    pool = [_claim("Fact", "2024-06-01", "https://first"), _claim("fact", "2024-06-01", "https://second")]
    assert reconcile_claims(pool)["fact"].source_url == "https://first"


@pytest.mark.parametrize(
    "order",
    [("undated", "2023-05-01"), ("2023-05-01", "undated")],
)
def test_concrete_date_beats_undated_regardless_of_order(order):
    pool = [_claim("Wind record", order[0]), _claim("Wind record", order[1])]
    assert reconcile_claims(pool)["wind record"].date == "2023-05-01"


def test_recent_never_replaces_a_resident():
    pool = [_claim("Fact", "undated", "https://first"), _claim("Fact", "recent", "https://second")]
    assert reconcile_claims(pool)["fact"].source_url == "https://first"


def test_concrete_date_replaces_recent_resident():
    pool = [_claim("Fact", "recent"), _claim("Fact", "2022-01-01")]
    assert reconcile_claims(pool)["fact"].date == "2022-01-01"


def test_sentinel_claim_occupies_an_empty_slot():
    reconciled = reconcile_claims([_claim("Only undated", "undated")])
    assert reconciled["only undated"].date == "undated"


def test_unparsable_dates_keep_the_resident_without_error():
    pool = [
        _claim("Fact", "Q1 2024", "https://first"),
        _claim("Fact", "sometime next spring", "https://second"),
        _claim("Fact", "2025-01-01", "https://third"),
    ]
    assert reconcile_claims(pool)["fact"].source_url == "https://first"


def test_paraphrases_are_not_merged():
    pool = [_claim("Solar grew 20% in 2023", "2023-12-31"), _claim("In 2023 solar grew by 20%", "2023-12-31")]
    assert len(reconcile_claims(pool)) == 2


def test_insertion_order_is_first_seen_key_order():
    pool = [
        _claim("B fact", "2020-01-01"),
        _claim("A fact", "2020-01-01"),
        _claim("b fact", "2024-01-01"),
    ]
    reconciled = reconcile_claims(pool)
    assert list(reconciled) == ["b fact", "a fact"]
    assert reconciled["b fact"].date == "2024-01-01"


def test_reconciliation_is_idempotent():
    pool = [
        _claim("Fact one", "2023-01-01"),
        _claim("fact one", "2024-01-01"),
        _claim("Fact two", "undated"),
        _claim("fact two", "recent"),
        _claim("Fact three", "Q2 2024"),
    ]
    service = ReconcileService()
    first = service.reconcile(pool)
    second = service.reconcile(pool)
    assert first == second
    assert service.reconcile(first.values()) == first


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-06-01", datetime(2024, 6, 1)),
        ("2024-06-01T12:30:00Z", datetime(2024, 6, 1, 12, 30)),
        ("2024-06", datetime(2024, 6, 1)),
        ("2024", datetime(2024, 1, 1)),
        ("March 2024", datetime(2024, 3, 1)),
        ("Mar 5, 2024", datetime(2024, 3, 5)),
        ("Q1 2024", None),
        ("recently", None),
        ("", None),
    ],
)
def test_parse_calendar_date(value, expected):
    assert parse_calendar_date(value) == expected
