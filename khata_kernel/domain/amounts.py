"""
Amounts -- Decimal normalisation for every monetary field.

Responsibility:
    Convert the loosely-typed numbers that arrive from data entry and the
    portable export (ints, strings, JSON floats) into finite ``Decimal``
    values, and define the settlement tolerance used to decide whether a
    party balance is outstanding.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Monetary values are always ``Decimal``, never float.
    - Floats are converted through ``str()`` so ``0.1`` becomes
      ``Decimal("0.1")`` rather than its binary expansion.
    - No rounding is applied; display rounding belongs to the caller.

Failure modes:
    - ValueError for unparsable or non-finite (NaN, Infinity) values.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")

# Balances within +/- this band are considered settled.
SETTLEMENT_TOLERANCE = Decimal("0.01")

AmountLike = Decimal | int | str | float


def to_amount(value: AmountLike | None) -> Decimal:
    """
    Normalise a monetary value to a finite Decimal.

    ``None`` is treated as zero, matching records where an optional
    amount was never filled in.

    Raises:
        ValueError: If the value cannot be parsed or is not finite.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return amount


def is_settled(balance: Decimal, tolerance: Decimal = SETTLEMENT_TOLERANCE) -> bool:
    """True if the balance lies inside the closed settlement band."""
    return -tolerance <= balance <= tolerance
