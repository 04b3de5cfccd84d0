"""txmatch - Transaction reconciliation and duplicate matching."""

from txmatch.matcher import (
    find_internal_duplicates,
    find_matches,
    suggest_keep_transaction,
)
from txmatch.report import generate_reconciliation_report
from txmatch.types import MatchResult, ReconciliationReport, TransactionCandidate

__all__ = [
    "MatchResult",
    "ReconciliationReport",
    "TransactionCandidate",
    "find_internal_duplicates",
    "find_matches",
    "generate_reconciliation_report",
    "suggest_keep_transaction",
]
