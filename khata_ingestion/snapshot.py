"""
Portable export reader.

Reads the JSON file the application writes on "export" (one key per
local-storage collection) and maps it into a ``LedgerSnapshot`` of typed
parties and transactions ready for the engines.

Collections may be stored under their plain key (``salesData``) or under
a financial-year key (``[FY-2024-2025]_salesData``).  When a financial
year is requested, the year-scoped key is preferred and the plain key is
the fallback.

Records that cannot be mapped are logged at WARNING and collected in
``LedgerSnapshot.rejected``; entries that are not JSON objects (the
application leaves ``null`` holes after deletes) are skipped.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any

from khata_kernel.domain.parties import MasterParty, PartyKind
from khata_kernel.domain.transactions import Transaction
from khata_kernel.exceptions import InvalidRecordError
from khata_kernel.logging_config import LogContext, get_logger
from khata_ingestion.records import (
    TransactionMapper,
    party_from_record,
    payment_from_record,
    purchase_from_record,
    purchase_return_from_record,
    receipt_from_record,
    sale_from_record,
    sale_return_from_record,
)

logger = get_logger("ingestion.snapshot")

MASTER_KEYS: dict[str, PartyKind] = {
    "masterCustomers": PartyKind.CUSTOMER,
    "masterSuppliers": PartyKind.SUPPLIER,
    "masterAgents": PartyKind.AGENT,
    "masterTransporters": PartyKind.TRANSPORTER,
    "masterBrokers": PartyKind.BROKER,
    "masterWarehouses": PartyKind.WAREHOUSE,
    "masterExpenses": PartyKind.EXPENSE,
}

TRANSACTION_KEYS: dict[str, TransactionMapper] = {
    "purchasesData": purchase_from_record,
    "salesData": sale_from_record,
    "receiptsData": receipt_from_record,
    "paymentsData": payment_from_record,
    "purchaseReturnsData": purchase_return_from_record,
    "saleReturnsData": sale_return_from_record,
}


@dataclass(frozen=True)
class LedgerSnapshot:
    """Typed contents of one export, in collection order."""

    parties: tuple[MasterParty, ...]
    transactions: tuple[Transaction, ...]
    rejected: tuple[InvalidRecordError, ...] = ()

    @property
    def party_count(self) -> int:
        return len(self.parties)

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)


def year_scoped_key(financial_year: str, key: str) -> str:
    """Storage key for a collection kept per financial year."""
    return f"[FY-{financial_year}]_{key}"


def _collection(data: Mapping[str, Any], key: str, financial_year: str | None) -> list[Any]:
    value: Any = None
    if financial_year:
        value = data.get(year_scoped_key(financial_year, key))
    if value is None:
        value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        # Values that failed to parse on export are kept as raw strings.
        value = json.loads(value, parse_float=Decimal)
    if not isinstance(value, list):
        raise ValueError(f"Collection {key} must be a JSON array")
    return value


def snapshot_from_mapping(
    data: Mapping[str, Any],
    financial_year: str | None = None,
) -> LedgerSnapshot:
    """Map an already-parsed export document into a snapshot."""
    parties: list[MasterParty] = []
    transactions: list[Transaction] = []
    rejected: list[InvalidRecordError] = []
    skipped = 0

    def reject(key: str, err: InvalidRecordError) -> None:
        logger.warning("record_rejected", extra={
            "collection": key,
            "record_type": err.record_type,
            "record_id": err.record_id,
            "reason": err.reason,
        })
        rejected.append(err)

    for key, kind in MASTER_KEYS.items():
        for row in _collection(data, key, financial_year):
            if not isinstance(row, dict):
                skipped += 1
                continue
            try:
                parties.append(party_from_record(row, kind))
            except InvalidRecordError as err:
                reject(key, err)

    for key, mapper in TRANSACTION_KEYS.items():
        for row in _collection(data, key, financial_year):
            if not isinstance(row, dict):
                skipped += 1
                continue
            try:
                transactions.append(mapper(row))
            except InvalidRecordError as err:
                reject(key, err)

    logger.info("snapshot_loaded", extra={
        "party_count": len(parties),
        "transaction_count": len(transactions),
        "rejected_count": len(rejected),
        "skipped_count": skipped,
    })
    return LedgerSnapshot(
        parties=tuple(parties),
        transactions=tuple(transactions),
        rejected=tuple(rejected),
    )


def load_snapshot(path: Path | str, financial_year: str | None = None) -> LedgerSnapshot:
    """
    Read an export file from disk.

    JSON numbers with a fraction are parsed straight to Decimal.

    Raises:
        FileNotFoundError: if the file does not exist.
        json.JSONDecodeError: if the file is not valid JSON.
        ValueError: if the top level is not an object or a collection is
            not an array.
    """
    path = Path(path)
    with LogContext.bind(source=str(path), financial_year=financial_year):
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f, parse_float=Decimal)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: export must be a JSON object")
        return snapshot_from_mapping(data, financial_year)
