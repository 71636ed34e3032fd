"""
Module: khata_kernel.domain.parties
Responsibility:
    Master party value objects: every ledger account the business trades
    with (customers, suppliers, agents, transporters, brokers, expense
    accounts) plus warehouses, which are kept as masters but never carry
    a balance.

Architecture position:
    Kernel > Domain -- pure, immutable, zero I/O.

Invariants enforced:
    - opening_balance is a non-negative Decimal magnitude; its sign comes
      from opening_balance_direction.
    - A direction is required whenever opening_balance > 0.
    - Party ids form a single flat id space across all kinds (the balance
      engine indexes by id only).

Failure modes:
    - ValueError from MasterParty.__post_init__ on a negative opening
      balance or a missing direction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from khata_kernel.domain.amounts import ZERO, to_amount


class PartyKind(str, Enum):
    """Kind of master party."""

    CUSTOMER = "Customer"
    SUPPLIER = "Supplier"
    AGENT = "Agent"
    TRANSPORTER = "Transporter"
    BROKER = "Broker"
    WAREHOUSE = "Warehouse"
    EXPENSE = "Expense"

    @property
    def participates_in_ledger(self) -> bool:
        """Warehouses are locations, not accounts."""
        return self is not PartyKind.WAREHOUSE


class BalanceDirection(str, Enum):
    """Side of a balance.

    DEBIT: the party owes the business (receivable).
    CREDIT: the business owes the party (payable).
    """

    DEBIT = "Dr"
    CREDIT = "Cr"


@dataclass(frozen=True)
class MasterParty:
    """
    A master ledger account.

    Contract:
        Frozen dataclass; amounts are normalised to Decimal on construction.
    Guarantees:
        - ``seed_balance`` is the signed opening balance the engine starts
          from: negative for Credit, positive for Debit.
    Non-goals:
        - commission / commission_type are carried for agents and brokers
          but never read by the balance engine.
    """

    id: str
    name: str
    kind: PartyKind
    opening_balance: Decimal = ZERO
    opening_balance_direction: BalanceDirection | None = None
    commission: Decimal | None = None
    commission_type: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "opening_balance", to_amount(self.opening_balance))
        if self.commission is not None:
            object.__setattr__(self, "commission", to_amount(self.commission))
        if not isinstance(self.kind, PartyKind):
            object.__setattr__(self, "kind", PartyKind(self.kind))
        if self.opening_balance_direction is not None and not isinstance(
            self.opening_balance_direction, BalanceDirection
        ):
            object.__setattr__(
                self,
                "opening_balance_direction",
                BalanceDirection(self.opening_balance_direction),
            )

        if self.opening_balance < ZERO:
            raise ValueError(
                f"Opening balance for party {self.id} must be a non-negative magnitude"
            )
        if self.opening_balance > ZERO and self.opening_balance_direction is None:
            raise ValueError(
                f"Opening balance for party {self.id} requires a Dr/Cr direction"
            )

    @property
    def participates_in_ledger(self) -> bool:
        return self.kind.participates_in_ledger

    @property
    def seed_balance(self) -> Decimal:
        """Signed opening balance (Credit negated)."""
        if self.opening_balance == ZERO:
            return ZERO
        if self.opening_balance_direction is BalanceDirection.CREDIT:
            return -self.opening_balance
        return self.opening_balance
