"""Core types for the txmatch transaction reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Literal

Origin = Literal["existing", "imported"]
Confidence = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class TransactionCandidate:
    """A transaction being compared, from either the existing or imported pool."""

    id: str
    date: date | None
    amount: Decimal | float | None
    description: str | None
    origin: Origin = "imported"


@dataclass(frozen=True)
class ScoredPair:
    score: float
    reasons: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MatchResult:
    imported: TransactionCandidate
    existing: TransactionCandidate | None
    score: float
    reasons: list[str] = field(default_factory=list)
    is_likely_duplicate: bool = False
    confidence: Confidence = "low"

    @property
    def has_match(self) -> bool:
        return self.existing is not None


@dataclass(frozen=True)
class ReconciliationReport:
    total_imported: int = 0
    exact_matches: int = 0
    likely_duplicates: int = 0
    new_transactions: int = 0
    needs_review: int = 0
    confidence: dict[str, int] = field(
        default_factory=lambda: {"high": 0, "medium": 0, "low": 0}
    )

    def summary(self) -> str:
        """One-line summary for a human reviewer."""
        return (
            f"{self.new_transactions} new, "
            f"{self.likely_duplicates} likely duplicates, "
            f"{self.needs_review} to review"
        )

    def as_dict(self) -> dict[str, int | dict[str, int]]:
        return {
            "total_imported": self.total_imported,
            "exact_matches": self.exact_matches,
            "likely_duplicates": self.likely_duplicates,
            "new_transactions": self.new_transactions,
            "needs_review": self.needs_review,
            "confidence": dict(self.confidence),
        }
