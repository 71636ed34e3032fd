"""
Module: khata_engines.posting
Responsibility:
    Turn transaction records into party postings.  This is the single
    home of the posting rules; the balance engine, the outstanding report
    and the party statement all consume ``generate_postings`` so the rules
    cannot drift between screens.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import khata_kernel.

Invariants enforced:
    - Sign convention: a positive amount moves the party towards owing the
      business (receivable); a negative amount moves the business towards
      owing the party (payable).
    - Accountable party resolution: an agent stands in for the supplier on
      a purchase, a broker for the customer on a sale; returns resolve
      through the original transaction.
    - Exhaustive dispatch: every member of the Transaction union has a
      rule; anything else raises TypeError instead of silently posting
      nothing.
    - Chronological order: postings are emitted by transaction date
      ascending; records sharing a date keep their input order.

Failure modes:
    - TypeError for an object that is not one of the six record types.
    - A return whose original cannot be found yields no postings (logged
      at DEBUG); strict callers use khata_engines.integrity first.

Posting rules (delta applied to the accountable party):

    Purchase        -total_amount                 (agent or supplier)
    Sale            +billed_amount                (broker or customer)
                    -total_brokerage              (broker, when > 0)
    Receipt         -amount, -cash_discount       (party)
    Payment         +amount                       (party)
    PurchaseReturn  +return_amount                (original purchase's party)
    SaleReturn      -return_amount                (original sale's party)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from khata_kernel.domain.amounts import ZERO
from khata_kernel.domain.parties import BalanceDirection
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
from khata_kernel.logging_config import get_logger

logger = get_logger("engines.posting")


@dataclass(frozen=True)
class Posting:
    """
    One signed movement on one party's balance.

    Contract:
        Frozen dataclass; ``amount`` is signed in the receivable direction.
    Guarantees:
        - ``side`` is DEBIT for amounts >= 0 and CREDIT otherwise.
        - ``magnitude`` is always non-negative.
    """

    party_id: str
    amount: Decimal
    transaction_id: str
    transaction_kind: TransactionKind
    posting_date: date
    particulars: str

    @property
    def side(self) -> BalanceDirection:
        return BalanceDirection.DEBIT if self.amount >= ZERO else BalanceDirection.CREDIT

    @property
    def magnitude(self) -> Decimal:
        return abs(self.amount)


def _short_ref(record_id: str) -> str:
    return record_id[-4:]


class PostingResolver:
    """
    Resolve transactions to postings against one transaction set.

    Contract:
        Built once per transaction set; indexes purchases and sales by id
        so returns can find their original.  When ids repeat, the first
        occurrence wins.
    Non-goals:
        - Does not know which parties exist; postings to unknown ids are
          filtered by the consumer.
    """

    def __init__(self, transactions: Iterable[Transaction]):
        self._purchases: dict[str, Purchase] = {}
        self._sales: dict[str, Sale] = {}
        for tx in transactions:
            if isinstance(tx, Purchase):
                self._purchases.setdefault(tx.id, tx)
            elif isinstance(tx, Sale):
                self._sales.setdefault(tx.id, tx)

    def find_purchase(self, purchase_id: str) -> Purchase | None:
        return self._purchases.get(purchase_id)

    def find_sale(self, sale_id: str) -> Sale | None:
        return self._sales.get(sale_id)

    def postings_for(self, tx: Transaction) -> tuple[Posting, ...]:
        """Postings produced by a single transaction."""

        def post(party_id: str, amount: Decimal, particulars: str) -> Posting:
            return Posting(
                party_id=party_id,
                amount=amount,
                transaction_id=tx.id,
                transaction_kind=tx.kind,
                posting_date=tx.date,
                particulars=particulars,
            )

        match tx:
            case Purchase():
                lot = tx.lot_number or _short_ref(tx.id)
                return (post(tx.accountable_party_id, -tx.total_amount, f"Purchase - Lot: {lot}"),)

            case Sale():
                bill = tx.bill_number or _short_ref(tx.id)
                postings = [post(tx.accountable_party_id, tx.billed_amount, f"Sale Bill: {bill}")]
                if tx.broker_id and tx.total_brokerage > ZERO:
                    postings.append(
                        post(tx.broker_id, -tx.total_brokerage, f"Brokerage on Sale: {bill}")
                    )
                return tuple(postings)

            case Receipt():
                postings = [post(tx.party_id, -tx.amount, f"Receipt - {tx.payment_method or 'Cash'}")]
                if tx.cash_discount > ZERO:
                    postings.append(post(tx.party_id, -tx.cash_discount, "Cash Discount Given"))
                return tuple(postings)

            case Payment():
                return (post(tx.party_id, tx.amount, f"Payment - {tx.payment_method or 'Cash'}"),)

            case PurchaseReturn():
                purchase = self.find_purchase(tx.original_purchase_id)
                if purchase is None:
                    logger.debug("posting_unresolved_original", extra={
                        "transaction_id": tx.id,
                        "transaction_kind": tx.kind.value,
                        "original_id": tx.original_purchase_id,
                    })
                    return ()
                lot = purchase.lot_number or _short_ref(purchase.id)
                return (
                    post(purchase.accountable_party_id, tx.return_amount, f"Purchase Return: {lot}"),
                )

            case SaleReturn():
                sale = self.find_sale(tx.original_sale_id)
                if sale is None:
                    logger.debug("posting_unresolved_original", extra={
                        "transaction_id": tx.id,
                        "transaction_kind": tx.kind.value,
                        "original_id": tx.original_sale_id,
                    })
                    return ()
                bill = sale.bill_number or _short_ref(sale.id)
                return (
                    post(sale.accountable_party_id, -tx.return_amount, f"Sale Return: {bill}"),
                )

            case _:
                logger.error("posting_unknown_transaction_type", extra={
                    "type": type(tx).__name__,
                })
                raise TypeError(f"Unsupported transaction type: {type(tx).__name__}")


def order_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort by date ascending; same-date records keep their input order."""
    return sorted(transactions, key=lambda tx: tx.date)


def iter_postings(transactions: Iterable[Transaction]) -> Iterator[Posting]:
    """Yield postings for the whole set in chronological order."""
    transactions = list(transactions)
    resolver = PostingResolver(transactions)
    for tx in order_transactions(transactions):
        yield from resolver.postings_for(tx)


def generate_postings(transactions: Iterable[Transaction]) -> tuple[Posting, ...]:
    """All postings for a transaction set, chronologically ordered."""
    return tuple(iter_postings(transactions))
