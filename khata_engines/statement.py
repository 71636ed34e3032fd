"""
Module: khata_engines.statement
Responsibility:
    Build a party's ledger statement for a period: opening balance brought
    forward, each posting in the period with a running balance, and the
    closing balance with its Dr/Cr side.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Uses the same posting rules as the balance engine, so a statement
    over an unbounded period closes at exactly the engine's balance.

Invariants enforced:
    - opening_balance = seed balance + postings dated before period_start.
    - closing_balance = opening_balance + sum of period postings.
    - Lines are chronological; same-date postings keep transaction input
      order, which fixes the intermediate running balances.

Failure modes:
    - PartyNotFoundError for unknown ids and warehouses.
    - ValueError if period_start is after period_end.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from khata_kernel.domain.amounts import SETTLEMENT_TOLERANCE, ZERO, is_settled
from khata_kernel.domain.parties import BalanceDirection, MasterParty, PartyKind
from khata_kernel.domain.transactions import Transaction, TransactionKind
from khata_kernel.exceptions import PartyNotFoundError
from khata_kernel.logging_config import get_logger
from khata_engines.integrity import check_referential_integrity
from khata_engines.posting import iter_postings
from khata_engines.tracer import traced_engine

logger = get_logger("engines.statement")


@dataclass(frozen=True)
class StatementLine:
    """One posting on a party statement."""

    posting_date: date
    transaction_id: str
    transaction_kind: TransactionKind
    particulars: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal


@dataclass(frozen=True)
class PartyStatement:
    """
    A party's ledger for a period.

    Contract:
        Frozen dataclass produced by ``build_party_statement``.
    Guarantees:
        - closing_balance == opening_balance + total_debit - total_credit.
    """

    party_id: str
    party_name: str
    party_kind: PartyKind
    period_start: date | None
    period_end: date | None
    opening_balance: Decimal
    lines: tuple[StatementLine, ...]
    closing_balance: Decimal
    tolerance: Decimal = SETTLEMENT_TOLERANCE

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    @property
    def closing_direction(self) -> BalanceDirection | None:
        """Dr when the party owes the business, Cr when owed, None if settled."""
        if is_settled(self.closing_balance, self.tolerance):
            return None
        if self.closing_balance > ZERO:
            return BalanceDirection.DEBIT
        return BalanceDirection.CREDIT


def _find_party(parties: Iterable[MasterParty], party_id: str) -> MasterParty:
    found: MasterParty | None = None
    for party in parties:
        if party.id == party_id and party.participates_in_ledger:
            found = party
    if found is None:
        raise PartyNotFoundError(party_id)
    return found


@traced_engine(
    "statement", "1.0",
    fingerprint_fields=("party_id", "parties", "transactions", "period_start", "period_end"),
)
def build_party_statement(
    party_id: str,
    parties: Iterable[MasterParty],
    transactions: Iterable[Transaction],
    *,
    period_start: date | None = None,
    period_end: date | None = None,
    tolerance: Decimal = SETTLEMENT_TOLERANCE,
    strict: bool = False,
) -> PartyStatement:
    """
    Statement for one party between two dates (both inclusive, both optional).

    With ``strict`` the whole book is checked for unresolved references
    first, as ``compute_balances`` does.

    Raises:
        PartyNotFoundError: If the party is unknown or a warehouse.
        ReferentialIntegrityError: In strict mode, if any transaction
            references an untracked party or original.
        ValueError: If period_start is after period_end.
    """
    if period_start is not None and period_end is not None and period_start > period_end:
        raise ValueError(f"period_start {period_start} is after period_end {period_end}")

    parties = list(parties)
    transactions = list(transactions)
    if strict:
        check_referential_integrity(parties, transactions)

    party = _find_party(parties, party_id)

    opening = party.seed_balance
    balance = opening
    lines: list[StatementLine] = []

    # Postings arrive in date order, so every brought-forward posting is
    # folded into the opening before the first period line is written.
    for posting in iter_postings(transactions):
        if posting.party_id != party_id:
            continue
        if period_start is not None and posting.posting_date < period_start:
            opening += posting.amount
            balance = opening
            continue
        if period_end is not None and posting.posting_date > period_end:
            break
        balance += posting.amount
        lines.append(StatementLine(
            posting_date=posting.posting_date,
            transaction_id=posting.transaction_id,
            transaction_kind=posting.transaction_kind,
            particulars=posting.particulars,
            debit=posting.amount if posting.amount > ZERO else ZERO,
            credit=-posting.amount if posting.amount < ZERO else ZERO,
            running_balance=balance,
        ))
    closing = balance

    logger.info("party_statement_built", extra={
        "party_id": party_id,
        "period_start": period_start,
        "period_end": period_end,
        "line_count": len(lines),
        "opening_balance": opening,
        "closing_balance": closing,
    })

    return PartyStatement(
        party_id=party.id,
        party_name=party.name,
        party_kind=party.kind,
        period_start=period_start,
        period_end=period_end,
        opening_balance=opening,
        lines=tuple(lines),
        closing_balance=closing,
        tolerance=tolerance,
    )
