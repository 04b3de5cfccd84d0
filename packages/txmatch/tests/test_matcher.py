"""Tests for import-vs-existing matching and intra-batch duplicates."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from txmatch.matcher import (
    find_internal_duplicates,
    find_matches,
    match_one,
    suggest_keep_transaction,
)
from txmatch.scoring import score_pair
from txmatch.types import TransactionCandidate

DAY = date(2024, 3, 1)


def tx(id, day=DAY, amount="150.00", description="Pagamento Pix Joao", origin="imported"):
    return TransactionCandidate(
        id=id,
        date=day,
        amount=Decimal(amount) if amount is not None else None,
        description=description,
        origin=origin,
    )


def existing(id, **kwargs):
    return tx(id, origin="existing", **kwargs)


def test_exact_duplicate():
    imported = [tx("i1", description="PAGAMENTO PIX JOAO")]
    pool = [existing("e1")]

    [result] = find_matches(imported, pool)

    assert result.existing is pool[0]
    assert result.imported is imported[0]
    assert result.score == 1.0
    assert result.is_likely_duplicate is True
    assert result.confidence == "high"
    assert "exact amount" in result.reasons
    assert "exact date" in result.reasons


def test_below_threshold_reports_no_match():
    imported = [tx("i1", amount="150.00", description="Uber trip")]
    pool = [
        existing(
            "e1",
            day=DAY + timedelta(days=3),
            amount="151.20",
            description="UBER *TRIP 887",
        )
    ]

    [result] = find_matches(imported, pool)

    assert result.existing is None
    assert result.has_match is False
    assert result.confidence == "low"
    assert result.is_likely_duplicate is False
    # The raw best score is still reported
    assert result.score == pytest.approx(0.5)
    assert result.reasons[0] == "similar amount"


def test_medium_confidence_match():
    imported = [tx("i1", amount="100.00", description="Netflix")]
    pool = [existing("e1", amount="100.50", description="supermercado extra")]

    [result] = find_matches(imported, pool)

    assert result.existing is pool[0]
    assert result.score == pytest.approx(0.6)
    assert result.confidence == "medium"
    assert result.is_likely_duplicate is False


def test_best_candidate_selected():
    imported = [tx("i1")]
    pool = [
        existing("far", day=DAY + timedelta(days=10), amount="999.00", description="Aluguel"),
        existing("close", day=DAY + timedelta(days=3)),
        existing("exact"),
    ]

    [result] = find_matches(imported, pool)

    assert result.existing.id == "exact"


def test_ties_go_to_first_encountered():
    imported = [tx("i1")]
    pool = [existing("first"), existing("second")]

    result = match_one(imported[0], pool)

    assert result.existing.id == "first"


def test_score_is_maximum_over_pool():
    imported = tx("i1", amount="100.00")
    pool = [
        existing("a", amount="100.50", day=DAY + timedelta(days=2)),
        existing("b", amount="100.00", day=DAY + timedelta(days=8), description="xyz"),
        existing("c", amount="100.50"),
    ]

    result = match_one(imported, pool)

    assert result.score == max(score_pair(imported, e).score for e in pool)
    assert result.existing.id == "c"


def test_empty_imported():
    assert find_matches([], [existing("e1")]) == []


def test_empty_existing():
    imported = [tx("i1"), tx("i2", amount="12.00")]

    results = find_matches(imported, [])

    assert len(results) == 2
    for result, original in zip(results, imported):
        assert result.imported is original
        assert result.existing is None
        assert result.confidence == "low"
        assert result.is_likely_duplicate is False
        assert result.score == 0.0
        assert result.reasons == []


def test_results_follow_imported_order():
    imported = [tx(f"i{n}", amount=f"{n}.00") for n in range(1, 6)]
    pool = [existing("e3", amount="3.00")]

    results = find_matches(imported, pool)

    assert [r.imported.id for r in results] == ["i1", "i2", "i3", "i4", "i5"]
    assert [r.existing.id if r.existing else None for r in results] == [
        None, None, "e3", None, None
    ]


def test_malformed_input_does_not_raise():
    imported = [
        TransactionCandidate(id="bad", date=None, amount=float("nan"), description=None),
    ]
    pool = [existing("e1")]

    [result] = find_matches(imported, pool)

    assert result.existing is None
    assert result.confidence == "low"


def test_likely_duplicate_implies_match():
    imported = [
        tx("i1"),
        tx("i2", day=DAY + timedelta(days=2)),
        tx("i3", amount="151.00", description="Netflix"),
        tx("i4", amount="9.99", day=DAY + timedelta(days=30), description="Spotify"),
    ]
    pool = [existing("e1"), existing("e2", amount="300.00", description="Netflix")]

    for result in find_matches(imported, pool):
        if result.is_likely_duplicate:
            assert result.existing is not None
            assert result.confidence == "high"
        if result.existing is None:
            assert result.score < 0.6


class TestInternalDuplicates:
    def test_pair_and_unrelated(self):
        a = tx("a")
        b = tx("b", description="PAGAMENTO PIX JOAO")
        c = tx("c", day=DAY + timedelta(days=20), amount="12.50", description="Netflix")

        groups = find_internal_duplicates([a, b, c])

        assert groups == [[a, b]]

    def test_no_singletons(self):
        batch = [
            tx("a", amount="10.00", description="Netflix"),
            tx("b", amount="25.00", day=DAY + timedelta(days=9), description="Aluguel"),
        ]

        assert find_internal_duplicates(batch) == []

    def test_empty(self):
        assert find_internal_duplicates([]) == []

    def test_star_around_seed(self):
        # a~b and b~c, but a and c do not match each other
        a = tx("a", day=DAY, description="Netflix")
        b = tx("b", day=DAY + timedelta(days=1), description="grocery store")
        c = tx("c", day=DAY + timedelta(days=3), description="grocery store")
        assert score_pair(a, b).score >= 0.8
        assert score_pair(b, c).score >= 0.8
        assert score_pair(a, c).score < 0.8

        # Seeded by a: c is compared against a only and stays out
        assert find_internal_duplicates([a, b, c]) == [[a, b]]
        # Seeded by b: both a and c join
        assert find_internal_duplicates([b, a, c]) == [[b, a, c]]

    def test_group_and_member_order(self):
        a1 = tx("a1")
        x1 = tx("x1", amount="42.00", day=DAY + timedelta(days=15), description="Farmacia")
        a2 = tx("a2")
        x2 = tx("x2", amount="42.00", day=DAY + timedelta(days=15), description="FARMÁCIA")
        a3 = tx("a3")

        groups = find_internal_duplicates([a1, x1, a2, x2, a3])

        assert [[t.id for t in g] for g in groups] == [["a1", "a2", "a3"], ["x1", "x2"]]

    def test_duplicate_ids_still_grouped_by_position(self):
        first = tx("same")
        second = tx("same")

        assert find_internal_duplicates([first, second]) == [[first, second]]

    def test_members_score_against_seed(self):
        batch = [
            tx("a"),
            tx("b", day=DAY + timedelta(days=1)),
            tx("c", amount="150.90"),
            tx("d", amount="80.00", description="Uber"),
        ]

        for group in find_internal_duplicates(batch):
            assert len(group) >= 2
            seed = group[0]
            for member in group[1:]:
                assert score_pair(seed, member).score >= 0.8


class TestSuggestKeep:
    def test_longest_description(self):
        group = [
            tx("a", description="PIX JOAO"),
            tx("b", description="PAGAMENTO PIX JOAO SILVA"),
            tx("c", description="Pagamento Pix Joao"),
        ]
        assert suggest_keep_transaction(group).id == "b"

    def test_first_wins_ties(self):
        group = [tx("a", description="abc"), tx("b", description="xyz")]
        assert suggest_keep_transaction(group).id == "a"

    def test_missing_description(self):
        group = [tx("a", description=None), tx("b", description="x")]
        assert suggest_keep_transaction(group).id == "b"

    def test_empty_group_raises(self):
        with pytest.raises(ValueError):
            suggest_keep_transaction([])
