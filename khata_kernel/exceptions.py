"""
Typed exception hierarchy for the khata ledger.

Every error has a typed class (catch by type, not message), a ``code``
class attribute (machine-readable), and structured attributes carrying
the data needed to report it.

    KhataError (base)
    |
    +-- LedgerError
    |   +-- ReferentialIntegrityError
    |
    +-- PartyError
    |   +-- PartyNotFoundError
    |
    +-- RecordError
        +-- InvalidRecordError

Code                      | When raised
--------------------------|-----------------------------------------------
REFERENTIAL_INTEGRITY     | Strict replay found dangling party/return refs
PARTY_NOT_FOUND           | Statement requested for an untracked party
INVALID_RECORD            | An exported record cannot be mapped to a type

The balance engine itself never raises for dangling references; only the
opt-in strict mode surfaces them as ``ReferentialIntegrityError``.

Handling pattern:

    try:
        balances = compute_balances(parties, transactions, strict=True)
    except ReferentialIntegrityError as e:
        for ref in e.unresolved:
            warn_user(ref.transaction_id, ref.field, ref.reference)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from khata_engines.integrity import UnresolvedReference


class KhataError(Exception):
    """
    Base exception for all khata ledger errors.

    All subclasses must have a `code` class attribute.
    """

    code: str = "KHATA_ERROR"


# Ledger replay exceptions


class LedgerError(KhataError):
    """Base exception for balance replay errors."""

    code: str = "LEDGER_ERROR"


class ReferentialIntegrityError(LedgerError):
    """Transactions reference parties or originals that do not exist."""

    code: str = "REFERENTIAL_INTEGRITY"

    def __init__(self, unresolved: tuple[UnresolvedReference, ...]):
        self.unresolved = tuple(unresolved)
        preview = ", ".join(
            f"{ref.transaction_id}.{ref.field}={ref.reference}"
            for ref in self.unresolved[:5]
        )
        more = len(self.unresolved) - 5
        if more > 0:
            preview += f" (+{more} more)"
        super().__init__(
            f"{len(self.unresolved)} unresolved reference(s): {preview}"
        )


# Party exceptions


class PartyError(KhataError):
    """Base exception for party lookup errors."""

    code: str = "PARTY_ERROR"


class PartyNotFoundError(PartyError):
    """Party is unknown or does not participate in the ledger."""

    code: str = "PARTY_NOT_FOUND"

    def __init__(self, party_id: str):
        self.party_id = party_id
        super().__init__(f"Party not found in ledger: {party_id}")


# Record mapping exceptions


class RecordError(KhataError):
    """Base exception for exported-record errors."""

    code: str = "RECORD_ERROR"


class InvalidRecordError(RecordError):
    """An exported record cannot be mapped to a domain type."""

    code: str = "INVALID_RECORD"

    def __init__(self, record_type: str, record_id: str | None, reason: str):
        self.record_type = record_type
        self.record_id = record_id
        self.reason = reason
        super().__init__(
            f"Invalid {record_type} record {record_id or '<no id>'}: {reason}"
        )
