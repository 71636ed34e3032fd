"""
Pure domain layer.

Immutable value objects with NO dependencies on:
- Storage
- Time/clock
- I/O
"""

from khata_kernel.domain.amounts import (
    SETTLEMENT_TOLERANCE,
    ZERO,
    is_settled,
    to_amount,
)
from khata_kernel.domain.parties import BalanceDirection, MasterParty, PartyKind
from khata_kernel.domain.periods import (
    FinancialYear,
    financial_year_containing,
    financial_year_from_label,
    to_calendar_date,
)
from khata_kernel.domain.transactions import (
    TRANSACTION_TYPES,
    Payment,
    Purchase,
    PurchaseReturn,
    Receipt,
    Sale,
    SaleReturn,
    Transaction,
    TransactionKind,
)

__all__ = [
    "SETTLEMENT_TOLERANCE",
    "ZERO",
    "is_settled",
    "to_amount",
    "BalanceDirection",
    "MasterParty",
    "PartyKind",
    "FinancialYear",
    "financial_year_containing",
    "financial_year_from_label",
    "to_calendar_date",
    "TRANSACTION_TYPES",
    "Payment",
    "Purchase",
    "PurchaseReturn",
    "Receipt",
    "Sale",
    "SaleReturn",
    "Transaction",
    "TransactionKind",
]
