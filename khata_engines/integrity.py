"""
Module: khata_engines.integrity
Responsibility:
    Find the references the lenient balance replay would silently ignore:
    postings aimed at parties that are not tracked (unknown ids, deleted
    masters, warehouses) and returns whose original transaction does not
    exist.  Backs the opt-in strict mode of the balance engine.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Only references that would affect posting are checked: the
      accountable party of purchases and sales (a customer shadowed by a
      broker is never posted to), the party of receipts and payments, and
      the original of returns.
    - Results are reported in chronological transaction order.

Failure modes:
    - ReferentialIntegrityError from ``check_referential_integrity`` when
      at least one reference is unresolved.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from khata_kernel.domain.parties import MasterParty
from khata_kernel.domain.transactions import (
    Payment,
    Purchase,
    PurchaseReturn,
    Receipt,
    Sale,
    SaleReturn,
    Transaction,
    TransactionKind,
)
from khata_kernel.exceptions import ReferentialIntegrityError
from khata_kernel.logging_config import get_logger
from khata_engines.posting import PostingResolver, order_transactions

logger = get_logger("engines.integrity")


@dataclass(frozen=True)
class UnresolvedReference:
    """A transaction field pointing at something the ledger does not track."""

    transaction_id: str
    transaction_kind: TransactionKind
    field: str
    reference: str


def _ledger_party_ids(parties: Iterable[MasterParty]) -> set[str]:
    return {p.id for p in parties if p.participates_in_ledger}


def find_unresolved_references(
    parties: Iterable[MasterParty],
    transactions: Iterable[Transaction],
) -> tuple[UnresolvedReference, ...]:
    """List every unresolved reference in the transaction set."""
    transactions = list(transactions)
    known = _ledger_party_ids(parties)
    resolver = PostingResolver(transactions)
    unresolved: list[UnresolvedReference] = []

    def check_party(tx: Transaction, field: str, party_id: str) -> None:
        if party_id not in known:
            unresolved.append(UnresolvedReference(tx.id, tx.kind, field, party_id))

    for tx in order_transactions(transactions):
        match tx:
            case Purchase():
                check_party(tx, "agent_id" if tx.agent_id else "supplier_id", tx.accountable_party_id)
            case Sale():
                check_party(tx, "broker_id" if tx.broker_id else "customer_id", tx.accountable_party_id)
            case Receipt() | Payment():
                check_party(tx, "party_id", tx.party_id)
            case PurchaseReturn():
                if resolver.find_purchase(tx.original_purchase_id) is None:
                    unresolved.append(UnresolvedReference(
                        tx.id, tx.kind, "original_purchase_id", tx.original_purchase_id,
                    ))
            case SaleReturn():
                if resolver.find_sale(tx.original_sale_id) is None:
                    unresolved.append(UnresolvedReference(
                        tx.id, tx.kind, "original_sale_id", tx.original_sale_id,
                    ))
            case _:
                raise TypeError(f"Unsupported transaction type: {type(tx).__name__}")

    return tuple(unresolved)


def check_referential_integrity(
    parties: Iterable[MasterParty],
    transactions: Iterable[Transaction],
) -> None:
    """
    Raise if any transaction references an untracked party or original.

    Raises:
        ReferentialIntegrityError: enumerating every unresolved reference.
    """
    unresolved = find_unresolved_references(parties, transactions)
    if unresolved:
        logger.warning("referential_integrity_failed", extra={
            "unresolved_count": len(unresolved),
            "transaction_ids": [ref.transaction_id for ref in unresolved],
        })
        raise ReferentialIntegrityError(unresolved)
