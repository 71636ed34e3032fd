#!/usr/bin/env python3
"""
Outstanding balances and party statements from an exported khata file.

Usage:
    python3 scripts/outstanding_report.py EXPORT.json
    python3 scripts/outstanding_report.py EXPORT.json --financial-year 2024-2025
    python3 scripts/outstanding_report.py EXPORT.json --party C1
    python3 scripts/outstanding_report.py EXPORT.json --json

Examples:
    # Receivables and payables, aged as of a given day
    python3 scripts/outstanding_report.py backup.json --as-of 2025-03-31

    # Statement for one party over the configured financial year
    python3 scripts/outstanding_report.py backup.json --party B1 --financial-year 2024-2025

    # Fail if any transaction points at a missing party or original
    python3 scripts/outstanding_report.py backup.json --strict
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from khata_config import LedgerSettings, get_ledger_settings  # noqa: E402
from khata_engines import (  # noqa: E402
    OutstandingReport,
    PartyStatement,
    build_party_statement,
    compute_outstanding,
)
from khata_ingestion import load_snapshot  # noqa: E402
from khata_kernel.domain.periods import financial_year_from_label  # noqa: E402
from khata_kernel.exceptions import KhataError  # noqa: E402
from khata_kernel.logging_config import configure_logging  # noqa: E402

W = 72


# =============================================================================
# Formatting helpers
# =============================================================================


def fmt_amount(value: Decimal) -> str:
    """Two-place display with thousands separators (display only)."""
    return f"{value:,.2f}"


def banner(title: str) -> None:
    print()
    print("=" * W)
    print(f"  {title}")
    print("=" * W)


def print_party_table(title: str, rows, currency: str) -> None:
    banner(title)
    if not rows:
        print("  (none)")
        return
    for row in rows:
        days = "" if row.days_outstanding is None else f"{row.days_outstanding:>5}d"
        print(
            f"  {row.name[:28]:<28} {row.kind.value:<12}"
            f" {currency} {fmt_amount(row.magnitude):>14} {days}"
        )


def print_outstanding(report: OutstandingReport, currency: str) -> None:
    print_party_table("RECEIVABLES (party owes us)", report.receivables, currency)
    print_party_table("PAYABLES (we owe party)", report.payables, currency)
    banner("TOTALS")
    print(f"  Total receivable : {currency} {fmt_amount(report.total_receivable):>14}")
    print(f"  Total payable    : {currency} {fmt_amount(-report.total_payable):>14}")
    print(f"  Net position     : {currency} {fmt_amount(report.net_position):>14}")


def print_statement(statement: PartyStatement, currency: str) -> None:
    banner(f"STATEMENT: {statement.party_name} ({statement.party_kind.value})")
    period = f"{statement.period_start or '-'} to {statement.period_end or '-'}"
    print(f"  Period           : {period}")
    print(f"  Opening balance  : {currency} {fmt_amount(statement.opening_balance):>14}")
    print("-" * W)
    for line in statement.lines:
        debit = fmt_amount(line.debit) if line.debit else ""
        credit = fmt_amount(line.credit) if line.credit else ""
        print(
            f"  {line.posting_date} {line.particulars[:26]:<26}"
            f" {debit:>12} {credit:>12} {fmt_amount(line.running_balance):>12}"
        )
    print("-" * W)
    side = statement.closing_direction.value if statement.closing_direction else "settled"
    print(f"  Closing balance  : {currency} {fmt_amount(abs(statement.closing_balance)):>14} {side}")


def _json_default(obj):
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    return str(obj)


# =============================================================================
# Main
# =============================================================================


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Outstanding balances and party statements from a khata export.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/outstanding_report.py backup.json\n"
            "  python3 scripts/outstanding_report.py backup.json --party C1\n"
            "  python3 scripts/outstanding_report.py backup.json --json\n"
        ),
    )
    parser.add_argument("export", type=Path, help="Exported JSON file")
    parser.add_argument(
        "--financial-year", type=str, default=None,
        help="Financial year label, e.g. 2024-2025",
    )
    parser.add_argument(
        "--settings", type=Path, default=None,
        help="YAML settings file (default: built-in settings)",
    )
    parser.add_argument(
        "--as-of", type=date.fromisoformat, default=None,
        help="Age outstanding balances as of this ISO date",
    )
    parser.add_argument("--party", type=str, default=None, help="Print this party's statement")
    parser.add_argument(
        "--strict", action="store_true",
        help="Fail on references to unknown parties or missing originals",
    )
    parser.add_argument("--json", action="store_true", help="Output JSON instead of text")
    parser.add_argument("--verbose", action="store_true", help="Emit structured logs on stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.verbose:
        configure_logging(level=logging.DEBUG)
    else:
        configure_logging(level=logging.WARNING)

    try:
        settings: LedgerSettings = get_ledger_settings(args.settings)
        snapshot = load_snapshot(args.export, financial_year=args.financial_year)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    strict = args.strict or settings.strict_references
    currency = settings.currency_code

    try:
        if args.party:
            period_start = period_end = None
            if args.financial_year:
                fy = financial_year_from_label(
                    args.financial_year, settings.financial_year_start_month,
                )
                period_start, period_end = fy.start, fy.end
            statement = build_party_statement(
                args.party,
                snapshot.parties,
                snapshot.transactions,
                period_start=period_start,
                period_end=period_end,
                tolerance=settings.settlement_tolerance,
                strict=strict,
            )
            if args.json:
                print(json.dumps(asdict(statement), indent=2, default=_json_default))
            else:
                print_statement(statement, currency)
            return 0

        report = compute_outstanding(
            snapshot.parties,
            snapshot.transactions,
            as_of_date=args.as_of,
            tolerance=settings.settlement_tolerance,
            strict=strict,
        )
    except (KhataError, ValueError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    if args.json:
        payload = {
            "receivables": [asdict(p) for p in report.receivables],
            "payables": [asdict(p) for p in report.payables],
            "total_receivable": report.total_receivable,
            "total_payable": report.total_payable,
            "net_position": report.net_position,
            "rejected_records": [str(err) for err in snapshot.rejected],
        }
        print(json.dumps(payload, indent=2, default=_json_default))
    else:
        print_outstanding(report, currency)
        if snapshot.rejected:
            print(f"\n  {len(snapshot.rejected)} record(s) rejected on load; run with --verbose for details.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
