"""
khata_config: single public entrypoint for ledger settings.

Responsibility:
    ``get_ledger_settings()`` is the one way scripts and application
    shells obtain settings.  The engines never import this package; the
    caller passes tolerance, strictness and dates into them explicitly.

Failure modes:
    - ``FileNotFoundError`` -- the given settings file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ValueError`` -- unknown keys or out-of-range values.

Audit relevance:
    Every call emits a ``KHATA_CONFIG_TRACE`` log entry with the source
    path and the settings checksum, tying a report to the settings that
    produced it.
"""

from __future__ import annotations

from pathlib import Path

from khata_config.loader import compute_checksum, load_settings, parse_settings
from khata_config.schema import LedgerSettings
from khata_kernel.logging_config import get_logger

_logger = get_logger("config")

__all__ = [
    "LedgerSettings",
    "compute_checksum",
    "get_ledger_settings",
    "load_settings",
    "parse_settings",
]


def get_ledger_settings(path: Path | str | None = None) -> LedgerSettings:
    """
    Return the effective ledger settings.

    With no path the built-in defaults are returned.
    """
    if path is None:
        settings = LedgerSettings()
        source = "defaults"
    else:
        settings = load_settings(Path(path))
        source = str(path)

    _logger.info(
        "KHATA_CONFIG_TRACE",
        extra={
            "trace_type": "KHATA_CONFIG_TRACE",
            "settings_source": source,
            "checksum": compute_checksum(settings),
            "currency_code": settings.currency_code,
            "settlement_tolerance": settings.settlement_tolerance,
            "strict_references": settings.strict_references,
            "financial_year_start_month": settings.financial_year_start_month,
        },
    )
    return settings
