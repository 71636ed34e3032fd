"""
Module: khata_kernel.domain.transactions
Responsibility:
    The six transaction record types of the trading book, modelled as an
    explicit tagged union so that posting code can dispatch exhaustively.

Architecture position:
    Kernel > Domain -- pure, immutable, zero I/O.

Invariants enforced:
    - Every record has an ``id`` and a calendar ``date``; ISO strings and
      datetimes are normalised to ``date`` on construction.
    - Monetary fields are non-negative magnitudes stored as Decimal;
      direction comes from the posting rule, never from the stored sign.
    - Optional party links (agent, broker) are ``None`` when absent; empty
      strings are treated as absent.

Failure modes:
    - ValueError on unparsable dates or non-finite amounts.

Usage:
    from khata_kernel.domain.transactions import Sale

    sale = Sale(
        id="S1",
        date="2024-05-01",
        customer_id="C1",
        broker_id="B1",
        billed_amount="10000",
        brokerage_commission="200",
    )
    sale.accountable_party_id  # "B1"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import ClassVar

from khata_kernel.domain.amounts import ZERO, to_amount
from khata_kernel.domain.periods import to_calendar_date


class TransactionKind(str, Enum):
    """Discriminator for the transaction union."""

    PURCHASE = "Purchase"
    SALE = "Sale"
    RECEIPT = "Receipt"
    PAYMENT = "Payment"
    PURCHASE_RETURN = "PurchaseReturn"
    SALE_RETURN = "SaleReturn"


def _link(value: str | None) -> str | None:
    """Optional party link; blank means absent."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class _TransactionRecord:
    id: str
    date: date

    kind: ClassVar[TransactionKind]
    _amount_fields: ClassVar[tuple[str, ...]] = ()
    _link_fields: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", to_calendar_date(self.date))
        for name in self._amount_fields:
            object.__setattr__(self, name, to_amount(getattr(self, name)))
        for name in self._link_fields:
            object.__setattr__(self, name, _link(getattr(self, name)))


@dataclass(frozen=True)
class Purchase(_TransactionRecord):
    """Goods bought from a supplier, optionally through an agent."""

    supplier_id: str
    total_amount: Decimal
    agent_id: str | None = None
    lot_number: str | None = None

    kind: ClassVar[TransactionKind] = TransactionKind.PURCHASE
    _amount_fields: ClassVar[tuple[str, ...]] = ("total_amount",)
    _link_fields: ClassVar[tuple[str, ...]] = ("agent_id",)

    @property
    def accountable_party_id(self) -> str:
        """The agent carries the liability when one is linked."""
        return self.agent_id or self.supplier_id


@dataclass(frozen=True)
class Sale(_TransactionRecord):
    """Goods sold to a customer, optionally through a broker."""

    customer_id: str
    billed_amount: Decimal
    broker_id: str | None = None
    brokerage_commission: Decimal = ZERO
    extra_brokerage: Decimal = ZERO
    bill_number: str | None = None
    lot_number: str | None = None

    kind: ClassVar[TransactionKind] = TransactionKind.SALE
    _amount_fields: ClassVar[tuple[str, ...]] = (
        "billed_amount",
        "brokerage_commission",
        "extra_brokerage",
    )
    _link_fields: ClassVar[tuple[str, ...]] = ("broker_id",)

    @property
    def accountable_party_id(self) -> str:
        """The broker is billed when one is linked."""
        return self.broker_id or self.customer_id

    @property
    def total_brokerage(self) -> Decimal:
        return self.brokerage_commission + self.extra_brokerage


@dataclass(frozen=True)
class Receipt(_TransactionRecord):
    """Money received from a party, with an optional cash discount allowed."""

    party_id: str
    amount: Decimal
    cash_discount: Decimal = ZERO
    payment_method: str | None = None

    kind: ClassVar[TransactionKind] = TransactionKind.RECEIPT
    _amount_fields: ClassVar[tuple[str, ...]] = ("amount", "cash_discount")

    @property
    def accountable_party_id(self) -> str:
        return self.party_id


@dataclass(frozen=True)
class Payment(_TransactionRecord):
    """Money paid out to a party."""

    party_id: str
    amount: Decimal
    payment_method: str | None = None

    kind: ClassVar[TransactionKind] = TransactionKind.PAYMENT
    _amount_fields: ClassVar[tuple[str, ...]] = ("amount",)

    @property
    def accountable_party_id(self) -> str:
        return self.party_id


@dataclass(frozen=True)
class PurchaseReturn(_TransactionRecord):
    """Goods returned against an earlier purchase."""

    original_purchase_id: str
    return_amount: Decimal

    kind: ClassVar[TransactionKind] = TransactionKind.PURCHASE_RETURN
    _amount_fields: ClassVar[tuple[str, ...]] = ("return_amount",)


@dataclass(frozen=True)
class SaleReturn(_TransactionRecord):
    """Goods returned against an earlier sale."""

    original_sale_id: str
    return_amount: Decimal

    kind: ClassVar[TransactionKind] = TransactionKind.SALE_RETURN
    _amount_fields: ClassVar[tuple[str, ...]] = ("return_amount",)


Transaction = Purchase | Sale | Receipt | Payment | PurchaseReturn | SaleReturn

TRANSACTION_TYPES: tuple[type, ...] = (
    Purchase,
    Sale,
    Receipt,
    Payment,
    PurchaseReturn,
    SaleReturn,
)
