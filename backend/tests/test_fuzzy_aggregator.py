"""Test fuzzy aggregation of product names across receipts."""
from decimal import Decimal

import pytest
from rapidfuzz import fuzz

from receipt_tally.processors.aggregation.fuzzy_aggregator import (
    FuzzyAggregator,
    aggregate_records,
    get_scorer,
)
from receipt_tally.processors.core.structures import Record


def _record(name: str, price: str) -> Record:
    return Record(name=name, price=Decimal(price))


def test_spelling_variants_merge():
    totals = aggregate_records(
        [
            _record("cheeseburger", "1.19"),
            _record("cheesburger", "1.19"),
            _record("fries", "2.00"),
        ],
        threshold=80,
        scorer="ratio",
    )
    assert dict(totals) == {
        "cheeseburger": Decimal("2.38"),
        "fries": Decimal("2.00"),
    }


def test_different_products_stay_apart():
    totals = aggregate_records(
        [_record("fries", "2.00"), _record("pommes", "2.50")],
        threshold=80,
        scorer="ratio",
    )
    assert len(totals) == 2


def test_threshold_is_strict():
    """ratio('abcd', 'abce') is exactly 75."""
    assert fuzz.ratio("abcd", "abce") == 75
    records = [_record("abcd", "1.00"), _record("abce", "1.00")]

    assert len(aggregate_records(records, threshold=75, scorer="ratio")) == 2
    assert dict(aggregate_records(records, threshold=74.9, scorer="ratio")) == {"abcd": Decimal("2.00")}


def test_tie_goes_to_smallest_key():
    aggregator = FuzzyAggregator(threshold=40, scorer="ratio")
    assert aggregator.absorb(_record("bbbb", "1.00")) == "bbbb"
    assert aggregator.absorb(_record("aaaa", "1.00")) == "aaaa"
    # Scores 50 against both keys
    assert aggregator.absorb(_record("aabb", "1.00")) == "aaaa"
    assert dict(aggregator.snapshot()) == {"bbbb": Decimal("1.00"), "aaaa": Decimal("2.00")}


def test_highest_score_wins():
    aggregator = FuzzyAggregator(threshold=70, scorer="ratio")
    aggregator.absorb(_record("cola", "1.00"))
    aggregator.absorb(_record("cola zero", "1.20"))
    assert len(aggregator) == 2
    assert aggregator.best_match("cola zer")[0] == "cola zero"
    assert aggregator.absorb(_record("cola zer", "1.20")) == "cola zero"


def test_first_seen_spelling_is_canonical():
    forward = aggregate_records(
        [_record("cheeseburger", "1.19"), _record("cheesburger", "1.19")], threshold=80, scorer="ratio"
    )
    backward = aggregate_records(
        [_record("cheesburger", "1.19"), _record("cheeseburger", "1.19")], threshold=80, scorer="ratio"
    )
    assert list(forward) == ["cheeseburger"]
    assert list(backward) == ["cheesburger"]


def test_same_input_same_result():
    records = [
        _record("pommes", "2.50"),
        _record("pomes", "2.50"),
        _record("cheeseburger", "1.19"),
        _record("cheesburger", "1.19"),
        _record("cola", "1.80"),
    ]
    assert dict(aggregate_records(records, threshold=80)) == dict(aggregate_records(records, threshold=80))


def test_entries_track_variants():
    aggregator = FuzzyAggregator(threshold=80, scorer="ratio")
    aggregator.absorb_all([
        _record("cheeseburger", "1.19"),
        _record("cheesburger", "1.19"),
        _record("cheeseburger", "1.19"),
    ])
    (entry,) = aggregator.entries()
    assert entry.canonical_name == "cheeseburger"
    assert entry.total == Decimal("3.57")
    assert entry.record_count == 3
    assert entry.variants == ["cheeseburger", "cheesburger"]


def test_snapshot_is_read_only():
    aggregator = FuzzyAggregator(threshold=80)
    aggregator.absorb(_record("tee", "1.00"))
    snapshot = aggregator.snapshot()
    with pytest.raises(TypeError):
        snapshot["tee"] = Decimal("0")


def test_empty_aggregator():
    aggregator = FuzzyAggregator(threshold=80)
    assert len(aggregator) == 0
    assert aggregator.best_match("anything") is None
    assert dict(aggregator.snapshot()) == {}


def test_scorer_lookup():
    assert get_scorer("ratio") is fuzz.ratio
    assert get_scorer("token_sort_ratio") is fuzz.token_sort_ratio
    with pytest.raises(ValueError):
        get_scorer("levenshtein")
    with pytest.raises(ValueError):
        FuzzyAggregator(scorer="levenshtein")


def test_token_sort_scorer_merges_reordered_names():
    totals = aggregate_records(
        [_record("pommes frites", "2.50"), _record("frites pommes", "2.50")],
        threshold=80,
        scorer="token_sort_ratio",
    )
    assert dict(totals) == {"pommes frites": Decimal("5.00")}
