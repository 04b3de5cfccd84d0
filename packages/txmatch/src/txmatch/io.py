"""CSV/JSONL/Excel input and output for transaction reconciliation."""

from __future__ import annotations

import csv
import json
import math
from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import pandas as pd

from txmatch.matcher import suggest_keep_transaction
from txmatch.types import MatchResult, Origin, TransactionCandidate

EXCEL_SUFFIXES = {".xlsx", ".xls"}

RESULT_FIELDS = [
    "imported_id", "imported_date", "imported_amount", "imported_description",
    "existing_id", "existing_date", "existing_amount", "existing_description",
    "score", "likely_duplicate", "confidence", "reasons",
]

GROUP_FIELDS = ["group", "id", "date", "amount", "description", "keep"]


def read_candidates(
    path: str | Path,
    origin: Origin = "imported",
    id_column: str = "id",
    date_column: str = "date",
    amount_column: str = "amount",
    description_column: str = "description",
) -> list[TransactionCandidate]:
    """Read transaction candidates from CSV, JSONL or Excel.

    Rows without an id get their row index. Unparseable dates and amounts
    are kept as None so that they simply score low.
    """
    path = Path(path)

    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        rows = _read_jsonl(path)
    elif suffix in EXCEL_SUFFIXES:
        rows = _read_excel(path, id_column)
    elif suffix == ".csv":
        rows = _read_csv(path)
    else:
        raise ValueError(f"unsupported input format: {path.suffix or path.name}")

    candidates: list[TransactionCandidate] = []
    for i, row in enumerate(rows):
        if i == 0:
            _check_columns(row, path, [date_column, amount_column, description_column])
        raw_id = row.get(id_column)
        candidates.append(TransactionCandidate(
            id=str(raw_id) if _present(raw_id) else str(i),
            date=parse_date(row.get(date_column)),
            amount=parse_amount(row.get(amount_column)),
            description=str(row[description_column]).strip()
            if _present(row.get(description_column)) else "",
            origin=origin,
        ))
    return candidates


def _check_columns(row: dict[str, Any], path: Path, columns: list[str]) -> None:
    missing = [c for c in columns if c not in row]
    if missing:
        raise ValueError(f"{path.name}: missing column(s) {', '.join(missing)}")


def _present(value: Any) -> bool:
    if value is None or value is pd.NaT:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return str(value).strip() != ""


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with path.open(newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def _read_jsonl(path: Path) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    with path.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            rows.append(json.loads(line))
    return rows


def _read_excel(path: Path, id_column: str) -> list[dict[str, Any]]:
    # Ids stay text; a blank cell would otherwise turn the column into floats
    df = pd.read_excel(path, dtype={id_column: str})
    return df.to_dict(orient="records")


def parse_date(value: Any) -> date | None:
    """Parse a date cell; None when missing or unparseable."""
    if not _present(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def parse_amount(value: Any) -> Decimal | None:
    """Parse an amount cell; None when missing or unparseable."""
    if not _present(value):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def result_rows(results: Sequence[MatchResult]) -> list[dict[str, Any]]:
    """Flatten match results into serializable rows."""
    rows: list[dict[str, Any]] = []
    for r in results:
        rows.append({
            "imported_id": r.imported.id,
            "imported_date": _iso(r.imported.date),
            "imported_amount": _str(r.imported.amount),
            "imported_description": r.imported.description or "",
            "existing_id": r.existing.id if r.existing else None,
            "existing_date": _iso(r.existing.date) if r.existing else None,
            "existing_amount": _str(r.existing.amount) if r.existing else None,
            "existing_description": r.existing.description if r.existing else None,
            "score": round(r.score, 4),
            "likely_duplicate": r.is_likely_duplicate,
            "confidence": r.confidence,
            "reasons": r.reasons,
        })
    return rows


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _str(value: Any) -> str | None:
    return str(value) if value is not None else None


def write_results(results: Sequence[MatchResult], path: str | Path) -> None:
    """Write match results to CSV, JSONL or Excel.

    JSONL keeps reasons as a list; the tabular formats join them with ``|``.
    """
    path = Path(path)
    rows = result_rows(results)
    if path.suffix.lower() != ".jsonl":
        rows = [{**row, "reasons": "|".join(row["reasons"])} for row in rows]
    _write_rows(rows, path, RESULT_FIELDS)


def write_groups(
    groups: Sequence[Sequence[TransactionCandidate]],
    path: str | Path,
) -> None:
    """Write duplicate groups, flagging the suggested keeper of each group."""
    rows: list[dict[str, Any]] = []
    for n, group in enumerate(groups):
        keep = suggest_keep_transaction(group)
        for tx in group:
            rows.append({
                "group": n,
                "id": tx.id,
                "date": _iso(tx.date),
                "amount": _str(tx.amount),
                "description": tx.description or "",
                "keep": tx is keep,
            })
    _write_rows(rows, Path(path), GROUP_FIELDS)


def _write_rows(rows: list[dict[str, Any]], path: Path, fieldnames: list[str]) -> None:
    suffix = path.suffix.lower()

    if suffix == ".jsonl":
        with path.open("w", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row) + "\n")
    elif suffix == ".xlsx":
        pd.DataFrame(rows, columns=fieldnames).to_excel(path, index=False)
    elif suffix == ".csv":
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)
    else:
        raise ValueError(f"unsupported output format: {path.suffix or path.name}")
