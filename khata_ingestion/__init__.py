"""Reads the application's portable JSON export into typed ledger records."""

from khata_ingestion.snapshot import (
    MASTER_KEYS,
    TRANSACTION_KEYS,
    LedgerSnapshot,
    load_snapshot,
    snapshot_from_mapping,
    year_scoped_key,
)

__all__ = [
    "MASTER_KEYS",
    "TRANSACTION_KEYS",
    "LedgerSnapshot",
    "load_snapshot",
    "snapshot_from_mapping",
    "year_scoped_key",
]
