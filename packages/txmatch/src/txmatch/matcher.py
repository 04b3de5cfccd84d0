"""Matching of imported transactions against existing ones, and intra-batch duplicates."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from txmatch.config import CONFIG
from txmatch.scoring import confidence_for_score, score_pair
from txmatch.types import MatchResult, ScoredPair, TransactionCandidate

log = structlog.get_logger()


def match_one(
    imported: TransactionCandidate,
    existing: Sequence[TransactionCandidate],
) -> MatchResult:
    """Find the best existing transaction for a single imported one.

    The first existing candidate reaching the maximum score wins. It is only
    reported as a match when that score clears the minimum match threshold;
    the score and reasons are reported either way.
    """
    best: TransactionCandidate | None = None
    best_pair = ScoredPair(score=0.0)

    for candidate in existing:
        pair = score_pair(imported, candidate)
        if best is None or pair.score > best_pair.score:
            best = candidate
            best_pair = pair

    t = CONFIG.thresholds
    matched = best if best_pair.score >= t.min_match else None

    log.debug(
        "match_one_done",
        imported_id=imported.id,
        best_id=best.id if best is not None else None,
        matched_id=matched.id if matched is not None else None,
        score=round(best_pair.score, 4),
        reasons=best_pair.reasons,
    )

    return MatchResult(
        imported=imported,
        existing=matched,
        score=best_pair.score,
        reasons=list(best_pair.reasons),
        is_likely_duplicate=best_pair.score >= t.likely_duplicate,
        confidence=confidence_for_score(best_pair.score),
    )


def find_matches(
    imported: Sequence[TransactionCandidate],
    existing: Sequence[TransactionCandidate],
) -> list[MatchResult]:
    """Match every imported transaction against the full existing pool.

    Results come back in the order of ``imported``.
    """
    log.info("find_matches_start", imported=len(imported), existing=len(existing))

    results = [match_one(tx, existing) for tx in imported]

    log.info(
        "find_matches_done",
        comparisons=len(imported) * len(existing),
        matched=sum(1 for r in results if r.existing is not None),
        likely_duplicates=sum(1 for r in results if r.is_likely_duplicate),
    )
    return results


def find_internal_duplicates(
    transactions: Sequence[TransactionCandidate],
) -> list[list[TransactionCandidate]]:
    """Group transactions of one batch that duplicate each other.

    Each unclaimed transaction seeds a group; later unclaimed transactions
    join it when they score at or above the duplicate threshold against the
    seed (not against other members). Groups of one are dropped.
    """
    threshold = CONFIG.thresholds.likely_duplicate
    claimed: set[int] = set()
    groups: list[list[TransactionCandidate]] = []

    for i, seed in enumerate(transactions):
        if i in claimed:
            continue
        claimed.add(i)
        group = [seed]

        for j in range(i + 1, len(transactions)):
            if j in claimed:
                continue
            if score_pair(seed, transactions[j]).score >= threshold:
                group.append(transactions[j])
                claimed.add(j)

        if len(group) > 1:
            groups.append(group)

    log.info(
        "internal_duplicates_done",
        transactions=len(transactions),
        groups=len(groups),
        duplicates=sum(len(g) - 1 for g in groups),
    )
    return groups


def suggest_keep_transaction(
    group: Sequence[TransactionCandidate],
) -> TransactionCandidate:
    """Pick the member of a duplicate group with the longest description."""
    if not group:
        raise ValueError("cannot suggest a transaction from an empty group")

    best = group[0]
    for tx in group[1:]:
        if len(tx.description or "") > len(best.description or ""):
            best = tx
    return best
