"""
Settings loader (``khata_config.loader``).

Responsibility
--------------
Load a YAML settings file and parse its ``ledger:`` section into a
``LedgerSettings`` instance.  Callers obtain settings through
``khata_config.get_ledger_settings()``; this module is the parsing step.

Invariants enforced
-------------------
* Unknown keys under ``ledger:`` are rejected, so a typo never silently
  falls back to a default.
* Amount-like values are parsed to ``Decimal`` through ``to_amount``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  effective settings for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Wrong shapes or values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

import yaml

from khata_config.schema import LedgerSettings
from khata_kernel.domain.amounts import to_amount

_KNOWN_KEYS = frozenset(f.name for f in fields(LedgerSettings))


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"ledger.{key} must be true or false, got {value!r}")


def parse_settings(data: dict[str, Any]) -> LedgerSettings:
    """
    Parse ``LedgerSettings`` from the loaded YAML document.

    An empty document or a missing ``ledger`` section yields defaults.
    """
    section = data.get("ledger") or {}
    if not isinstance(section, dict):
        raise ValueError("ledger section must be a mapping")

    unknown = set(section) - _KNOWN_KEYS
    if unknown:
        raise ValueError(f"Unknown ledger settings: {sorted(unknown)}")

    kwargs: dict[str, Any] = {}
    if "currency_code" in section:
        kwargs["currency_code"] = str(section["currency_code"])
    if "settlement_tolerance" in section:
        kwargs["settlement_tolerance"] = to_amount(section["settlement_tolerance"])
    if "strict_references" in section:
        kwargs["strict_references"] = _parse_bool(
            "strict_references", section["strict_references"]
        )
    if "financial_year_start_month" in section:
        month = section["financial_year_start_month"]
        if isinstance(month, bool) or not isinstance(month, int):
            raise ValueError(f"ledger.financial_year_start_month must be an integer, got {month!r}")
        kwargs["financial_year_start_month"] = month

    return LedgerSettings(**kwargs)


def load_settings(path: Path) -> LedgerSettings:
    """Load and parse a settings file."""
    return parse_settings(load_yaml_file(path))


def compute_checksum(settings: LedgerSettings) -> str:
    """Deterministic SHA-256 of the effective settings."""
    canonical = json.dumps(asdict(settings), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
