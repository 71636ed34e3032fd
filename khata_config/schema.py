"""
Ledger settings schema.

The human-authored settings file is parsed into these types by the
loader.  Defaults reproduce the behaviour of the trading book: Indian
rupees, a one-paisa settlement band, lenient reference handling and an
April-to-March financial year.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LedgerSettings:
    """Settings consumed by scripts and application shells around the engines."""

    currency_code: str = "INR"
    settlement_tolerance: Decimal = Decimal("0.01")
    strict_references: bool = False
    financial_year_start_month: int = 4  # April

    def __post_init__(self) -> None:
        code = (self.currency_code or "").strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"currency_code must be a 3-letter code, got {self.currency_code!r}")
        object.__setattr__(self, "currency_code", code)
        if self.settlement_tolerance < 0:
            raise ValueError("settlement_tolerance cannot be negative")
        if not 1 <= self.financial_year_start_month <= 12:
            raise ValueError(
                f"financial_year_start_month must be 1..12, got {self.financial_year_start_month}"
            )
