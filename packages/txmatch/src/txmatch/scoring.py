"""Deterministic scoring of (imported, existing) transaction pairs.

An exact amount is also within the similar-amount tolerance and earns both
amount weights (0.4 + 0.3) under a single "exact amount" reason. A pair with
the same amount on the same day therefore scores 1.0 and is a likely
duplicate whatever the descriptions say.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from functools import lru_cache

from txmatch.config import CONFIG
from txmatch.normalize import normalize_description
from txmatch.types import Confidence, ScoredPair, TransactionCandidate


def jaro(s1: str, s2: str) -> float:
    """Classic Jaro similarity of two strings."""
    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    window = max(len(s1), len(s2)) // 2 - 1
    if window < 0:
        return 0.0

    s1_matched = [False] * len(s1)
    s2_matched = [False] * len(s2)
    matches = 0

    for i, ch in enumerate(s1):
        start = max(0, i - window)
        end = min(i + window + 1, len(s2))
        for j in range(start, end):
            if s2_matched[j] or s2[j] != ch:
                continue
            s1_matched[i] = True
            s2_matched[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    # Matched characters taken in order; mismatched positions are transpositions
    transpositions = 0
    k = 0
    for i, ch in enumerate(s1):
        if not s1_matched[i]:
            continue
        while not s2_matched[k]:
            k += 1
        if ch != s2[k]:
            transpositions += 1
        k += 1

    return (
        matches / len(s1)
        + matches / len(s2)
        + (matches - transpositions / 2) / matches
    ) / 3


@lru_cache(maxsize=8192)
def jaro_winkler(s1: str, s2: str) -> float:
    """Jaro similarity plus the Winkler common-prefix bonus.

    Each of the first ``winkler_prefix_max`` shared leading characters adds
    ``winkler_prefix_scale * (1 - jaro)``. The bonus applies regardless of the
    Jaro value.
    """
    j = jaro(s1, s2)
    if j == 1.0 or j == 0.0:
        return j

    prefix = 0
    for a, b in zip(s1[: CONFIG.winkler_prefix_max], s2[: CONFIG.winkler_prefix_max]):
        if a != b:
            break
        prefix += 1

    return j + CONFIG.winkler_prefix_scale * prefix * (1 - j)


def description_similarity(a: str | None, b: str | None) -> float:
    """Jaro-Winkler similarity of two normalized descriptions."""
    return jaro_winkler(normalize_description(a), normalize_description(b))


def confidence_for_score(score: float) -> Confidence:
    t = CONFIG.thresholds
    if score >= t.likely_duplicate:
        return "high"
    if score >= t.min_match:
        return "medium"
    return "low"


def _magnitude(amount: Decimal | float | str | None) -> Decimal | None:
    """Absolute value of an amount, or None when it is missing or not finite."""
    if amount is None or isinstance(amount, bool):
        return None
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return abs(value)


def _as_day(value: date | datetime | str | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def score_pair(
    imported: TransactionCandidate,
    existing: TransactionCandidate,
) -> ScoredPair:
    """Score a candidate pair; reasons are listed as amount, date, description."""
    weights = CONFIG.weights
    tol = CONFIG.tolerances
    score = 0.0
    reasons: list[str] = []

    # 1. Amount (magnitudes only)
    a_amount = _magnitude(imported.amount)
    b_amount = _magnitude(existing.amount)
    if a_amount is not None and b_amount is not None:
        diff = abs(a_amount - b_amount)
        if diff == 0:
            # An exact amount is also within tolerance and earns both weights
            score += weights.exact_amount + weights.similar_amount
            reasons.append("exact amount")
        elif b_amount > 0 and diff / b_amount <= Decimal(str(tol.amount_ratio)):
            score += weights.similar_amount
            reasons.append("similar amount")

    # 2. Date proximity, linear decay over the tolerance window
    a_day = _as_day(imported.date)
    b_day = _as_day(existing.date)
    if a_day is not None and b_day is not None:
        days = abs((a_day - b_day).days)
        if days == 0:
            score += weights.date_proximity
            reasons.append("exact date")
        elif days <= tol.date_days:
            score += weights.date_proximity * (1 - days / tol.date_days)
            reasons.append(f"date within {days} days")

    # 3. Description similarity
    similarity = description_similarity(imported.description, existing.description)
    if similarity >= tol.description_full:
        score += weights.description_similarity
        reasons.append("similar description")
    elif similarity >= tol.description_partial:
        score += weights.description_similarity * similarity
        reasons.append("partially similar description")

    return ScoredPair(score=min(score, CONFIG.max_score), reasons=reasons)
