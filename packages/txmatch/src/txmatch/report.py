"""Reconciliation summary and review selections over match results."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from txmatch.types import MatchResult, ReconciliationReport


def generate_reconciliation_report(results: Sequence[MatchResult]) -> ReconciliationReport:
    """Aggregate a batch of match results into a reconciliation report.

    "Needs review" counts matched results of medium confidence only: high
    confidence matches are accepted as they are and unmatched results have
    nothing to review against.
    """
    tiers = Counter(r.confidence for r in results)

    return ReconciliationReport(
        total_imported=len(results),
        exact_matches=sum(1 for r in results if r.score == 1.0),
        likely_duplicates=sum(1 for r in results if r.is_likely_duplicate),
        new_transactions=sum(1 for r in results if r.existing is None),
        needs_review=sum(
            1 for r in results if r.existing is not None and r.confidence == "medium"
        ),
        confidence={
            "high": tiers["high"],
            "medium": tiers["medium"],
            "low": tiers["low"],
        },
    )


def select_for_import(results: Sequence[MatchResult]) -> list[str]:
    """Ids of imported transactions to import by default (not likely duplicates)."""
    return [r.imported.id for r in results if not r.is_likely_duplicate]


def conflicts(results: Sequence[MatchResult]) -> list[MatchResult]:
    """Results a reviewer should look at: likely duplicates and medium confidence."""
    return [
        r for r in results if r.is_likely_duplicate or r.confidence == "medium"
    ]
