"""CLI tool for transaction reconciliation and duplicate detection."""

import argparse

import pandas as pd
import structlog

from txmatch.io import read_candidates, result_rows, write_groups, write_results
from txmatch.logging import LOG_FORMATS, configure_logging
from txmatch.matcher import find_internal_duplicates, find_matches, suggest_keep_transaction
from txmatch.report import conflicts, generate_reconciliation_report
from txmatch.types import MatchResult, ReconciliationReport


def _column_kwargs(args: argparse.Namespace) -> dict[str, str]:
    return {
        "id_column": args.id_column,
        "date_column": args.date_column,
        "amount_column": args.amount_column,
        "description_column": args.description_column,
    }


def cmd_match(args: argparse.Namespace) -> None:
    log = structlog.get_logger()
    log.info("load_files_start", imported=args.imported, existing=args.existing)
    imported = read_candidates(args.imported, origin="imported", **_column_kwargs(args))
    existing = read_candidates(args.existing, origin="existing", **_column_kwargs(args))
    log.info("files_loaded", imported_count=len(imported), existing_count=len(existing))

    results = find_matches(imported, existing)
    report = generate_reconciliation_report(results)

    shown = conflicts(results) if args.conflicts_only else results
    if args.show:
        _show_results(shown)

    _print_summary(report)

    if args.output:
        write_results(shown, args.output)
        print(f"\nSaved to: {args.output}")


def _results_frame(results: list[MatchResult]) -> pd.DataFrame:
    rows = result_rows(results)
    for row in rows:
        row["reasons"] = "; ".join(row["reasons"])
    return pd.DataFrame(rows)


def _show_results(results: list[MatchResult]) -> None:
    """Display match results on screen."""
    if not results:
        print("\n=== No results to show ===")
        return

    df = _results_frame(results)
    display_cols = [
        "imported_description", "existing_description",
        "score", "confidence", "likely_duplicate",
    ]
    print(f"\n=== Results ({len(df)}) ===")
    print(df[display_cols].to_string(index=False))


def _print_summary(report: ReconciliationReport) -> None:
    print("\n--- Reconciliation ---")
    print(f"Imported: {report.total_imported}")
    print(f"Exact matches: {report.exact_matches}")
    print(f"Likely duplicates: {report.likely_duplicates}")
    print(f"New: {report.new_transactions}")
    print(f"Needs review: {report.needs_review}")
    tiers = report.confidence
    print(f"Confidence: high={tiers['high']}, medium={tiers['medium']}, low={tiers['low']}")
    print(f"\n{report.summary()}")


def cmd_dupes(args: argparse.Namespace) -> None:
    transactions = read_candidates(args.input, origin="imported", **_column_kwargs(args))
    groups = find_internal_duplicates(transactions)

    print(f"=== Duplicate groups in {args.input} ===")
    if not groups:
        print("  No duplicates found.")
    for n, group in enumerate(groups, start=1):
        keep = suggest_keep_transaction(group)
        print(f"  Group {n} (x{len(group)})")
        for tx in group:
            marker = "*" if tx is keep else "-"
            print(f"    {marker} [{tx.id}] {tx.date} {tx.amount} {tx.description}")

    if groups:
        total = sum(len(g) for g in groups)
        print(f"\n  Total: {len(groups)} groups, {total} rows (* = suggested keep)")

    if args.output:
        write_groups(groups, args.output)
        print(f"\nSaved to: {args.output}")


def main(argv: list[str] | None = None) -> None:
    # Parent parser with global options (inherited by all subcommands)
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )
    parent_parser.add_argument(
        "--log-format",
        choices=list(LOG_FORMATS),
        default=None,
        help="Log output format (default: LOG_FORMAT env var or console)",
    )
    parent_parser.add_argument("--id-column", default="id", help="Id column name")
    parent_parser.add_argument("--date-column", default="date", help="Date column name")
    parent_parser.add_argument("--amount-column", default="amount", help="Amount column name")
    parent_parser.add_argument(
        "--description-column", default="description", help="Description column name"
    )

    parser = argparse.ArgumentParser(description="Transaction reconciliation CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # match subcommand
    match_parser = subparsers.add_parser(
        "match", parents=[parent_parser], help="Match imported transactions against existing ones"
    )
    match_parser.add_argument("--imported", required=True, help="Imported transactions file")
    match_parser.add_argument("--existing", required=True, help="Existing transactions file")
    match_parser.add_argument("--output", help="Output file (.csv, .jsonl or .xlsx)")
    match_parser.add_argument("--show", action="store_true", help="Display results on screen")
    match_parser.add_argument(
        "--conflicts-only",
        action="store_true",
        help="Only show/write likely duplicates and medium-confidence results",
    )
    match_parser.set_defaults(func=cmd_match)

    # dupes subcommand
    dupes_parser = subparsers.add_parser(
        "dupes", parents=[parent_parser], help="Find duplicates within one file"
    )
    dupes_parser.add_argument("--input", required=True, help="Transactions file")
    dupes_parser.add_argument("--output", help="Output file for groups (.csv, .jsonl or .xlsx)")
    dupes_parser.set_defaults(func=cmd_dupes)

    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_format)
    args.func(args)


if __name__ == "__main__":
    main()
