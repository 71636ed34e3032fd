"""
Module: khata_engines.outstanding
Responsibility:
    Replay master parties and transactions into a signed balance per
    party, then classify parties into receivables and payables.  This is
    the one outstanding-balance engine; dashboards, the outstanding screen
    and the cash position all read from it.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import khata_kernel and sibling engine modules.

Invariants enforced:
    - Purity: balances are a function of (parties, transactions) only; no
      state survives between calls, so repeated calls are identical.
    - Decimal-only arithmetic; no rounding.
    - Seeding: every non-warehouse party starts at its signed opening
      balance; warehouses are not tracked.
    - Lenient posting: a posting to an untracked party id is a silent
      no-op, as is a return whose original is missing.  ``strict=True``
      raises ReferentialIntegrityError instead.
    - Order independence within a date: postings are additive, so the
      final balances do not depend on same-date ordering.
    - Classification: receivable when balance > tolerance (largest first),
      payable when balance < -tolerance (most negative first), settled in
      between.  Equal balances keep party input order.

Failure modes:
    - ReferentialIntegrityError only in strict mode.
    - TypeError for objects outside the Transaction union.

Usage:
    from khata_engines.outstanding import compute_balances, classify_balances

    balances = compute_balances(parties, transactions)
    receivables, payables = classify_balances(parties, balances)
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from khata_kernel.domain.amounts import SETTLEMENT_TOLERANCE, ZERO, is_settled
from khata_kernel.domain.parties import MasterParty, PartyKind
from khata_kernel.domain.transactions import Transaction
from khata_kernel.logging_config import get_logger
from khata_engines.integrity import check_referential_integrity
from khata_engines.posting import iter_postings
from khata_engines.tracer import traced_engine

logger = get_logger("engines.outstanding")


@dataclass(frozen=True)
class PartyBalance:
    """
    A party with its replayed balance.

    Contract:
        Frozen dataclass produced by classification.
    Guarantees:
        - ``days_outstanding`` is None when no as-of date was supplied and
          0 when the party has never been posted to.
    """

    party_id: str
    name: str
    kind: PartyKind
    balance: Decimal
    last_transaction_date: date | None = None
    days_outstanding: int | None = None

    @property
    def magnitude(self) -> Decimal:
        return abs(self.balance)


@dataclass(frozen=True)
class OutstandingReport:
    """
    Balances plus receivable/payable classification.

    Contract:
        Frozen dataclass; ``balances`` covers every tracked party.
    Guarantees:
        - ``total_receivable`` is the sum of receivable balances (>= 0).
        - ``total_payable`` is the sum of payable balances (<= 0).
    """

    balances: dict[str, Decimal]
    receivables: tuple[PartyBalance, ...]
    payables: tuple[PartyBalance, ...]
    tolerance: Decimal = SETTLEMENT_TOLERANCE
    as_of_date: date | None = None
    party_names: dict[str, str] = field(default_factory=dict)

    @property
    def total_receivable(self) -> Decimal:
        return sum((p.balance for p in self.receivables), ZERO)

    @property
    def total_payable(self) -> Decimal:
        return sum((p.balance for p in self.payables), ZERO)

    @property
    def net_position(self) -> Decimal:
        """Receivables minus what is owed (positive: the book is owed money)."""
        return self.total_receivable + self.total_payable

    def display_name(self, party_id: str) -> str:
        """Party name, falling back to the id."""
        return self.party_names.get(party_id, party_id)


def seed_balances(parties: Iterable[MasterParty]) -> dict[str, Decimal]:
    """Opening balance map for every party that participates in the ledger."""
    balances: dict[str, Decimal] = {}
    for party in parties:
        if party.participates_in_ledger:
            balances[party.id] = party.seed_balance
    return balances


def _replay(
    parties: Sequence[MasterParty],
    transactions: Sequence[Transaction],
    strict: bool,
) -> tuple[dict[str, Decimal], dict[str, date]]:
    """Seed and apply every posting; also track each party's last posting date."""
    if strict:
        check_referential_integrity(parties, transactions)

    balances = seed_balances(parties)
    last_dates: dict[str, date] = {}
    skipped = 0

    def update_balance(party_id: str, delta: Decimal, posting_date: date) -> None:
        nonlocal skipped
        if party_id not in balances:
            skipped += 1
            return
        balances[party_id] += delta
        last = last_dates.get(party_id)
        if last is None or posting_date > last:
            last_dates[party_id] = posting_date

    posting_count = 0
    for posting in iter_postings(transactions):
        posting_count += 1
        update_balance(posting.party_id, posting.amount, posting.posting_date)

    if skipped:
        logger.debug("postings_to_untracked_parties", extra={
            "skipped_count": skipped,
        })
    logger.info("balances_computed", extra={
        "party_count": len(balances),
        "transaction_count": len(transactions),
        "posting_count": posting_count,
        "skipped_count": skipped,
        "strict": strict,
    })
    return balances, last_dates


@traced_engine("outstanding", "1.0", fingerprint_fields=("parties", "transactions"))
def compute_balances(
    parties: Iterable[MasterParty],
    transactions: Iterable[Transaction],
    *,
    strict: bool = False,
) -> dict[str, Decimal]:
    """
    Signed balance per tracked party after replaying every transaction.

    Preconditions:
        - Party ids are unique across kinds (a repeated id keeps the last
          party's opening balance).
    Postconditions:
        - Positive balance: the party owes the business.
        - Negative balance: the business owes the party.
    Raises:
        ReferentialIntegrityError: only when ``strict`` is True.
    """
    balances, _ = _replay(list(parties), list(transactions), strict)
    return balances


def _sort_key_receivable(pb: PartyBalance) -> Decimal:
    return -pb.balance


def _sort_key_payable(pb: PartyBalance) -> Decimal:
    return pb.balance


def _classify(
    parties: Sequence[MasterParty],
    balances: dict[str, Decimal],
    tolerance: Decimal,
    last_dates: dict[str, date] | None = None,
    as_of_date: date | None = None,
) -> tuple[tuple[PartyBalance, ...], tuple[PartyBalance, ...]]:
    receivables: list[PartyBalance] = []
    payables: list[PartyBalance] = []
    seen: set[str] = set()

    for party in parties:
        if not party.participates_in_ledger or party.id in seen:
            continue
        seen.add(party.id)
        balance = balances.get(party.id, ZERO)
        if is_settled(balance, tolerance):
            continue

        last = (last_dates or {}).get(party.id)
        days: int | None = None
        if as_of_date is not None:
            days = (as_of_date - last).days if last is not None else 0

        entry = PartyBalance(
            party_id=party.id,
            name=party.name,
            kind=party.kind,
            balance=balance,
            last_transaction_date=last,
            days_outstanding=days,
        )
        if balance > tolerance:
            receivables.append(entry)
        else:
            payables.append(entry)

    # sorted() is stable, so equal balances keep party order.
    return (
        tuple(sorted(receivables, key=_sort_key_receivable)),
        tuple(sorted(payables, key=_sort_key_payable)),
    )


def classify_balances(
    parties: Iterable[MasterParty],
    balances: dict[str, Decimal],
    tolerance: Decimal = SETTLEMENT_TOLERANCE,
) -> tuple[tuple[PartyBalance, ...], tuple[PartyBalance, ...]]:
    """
    Split parties into (receivables, payables).

    Receivables are sorted largest debtor first; payables most negative
    (largest creditor) first.  Settled parties appear in neither.
    """
    return _classify(list(parties), balances, tolerance)


@traced_engine(
    "outstanding", "1.0",
    fingerprint_fields=("parties", "transactions", "as_of_date", "tolerance"),
)
def compute_outstanding(
    parties: Iterable[MasterParty],
    transactions: Iterable[Transaction],
    *,
    as_of_date: date | None = None,
    tolerance: Decimal = SETTLEMENT_TOLERANCE,
    strict: bool = False,
) -> OutstandingReport:
    """
    Full outstanding report: balances, classification and ageing of the
    last activity per party.

    ``as_of_date`` is supplied by the caller; the engine never reads the
    clock.
    """
    t0 = time.monotonic()
    parties = list(parties)
    transactions = list(transactions)

    balances, last_dates = _replay(parties, transactions, strict)
    receivables, payables = _classify(
        parties, balances, tolerance, last_dates=last_dates, as_of_date=as_of_date,
    )

    names: dict[str, str] = {}
    for party in parties:
        names.setdefault(party.id, party.name)

    report = OutstandingReport(
        balances=balances,
        receivables=receivables,
        payables=payables,
        tolerance=tolerance,
        as_of_date=as_of_date,
        party_names=names,
    )

    logger.info("outstanding_report_generated", extra={
        "receivable_count": len(receivables),
        "payable_count": len(payables),
        "total_receivable": report.total_receivable,
        "total_payable": report.total_payable,
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return report
