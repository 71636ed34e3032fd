"""
Structured JSON logging for the khata ledger.

Every logger lives under the ``khata`` namespace and writes one JSON
object per line.  Run-scoped fields (which export is being read, which
financial year, which party) are carried in context variables and merged
into every record, so engine code never has to thread them through.

Usage:
    from khata_kernel.logging_config import LogContext, get_logger

    logger = get_logger("engines.outstanding")
    with LogContext.bind(source="backup.json", financial_year="2024-2025"):
        logger.info("balances_computed", extra={"party_count": 12})
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

_LOGGER_PREFIX = "khata"

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

CONTEXT_FIELDS: tuple[str, ...] = (
    "correlation_id",
    "financial_year",
    "party_id",
    "transaction_id",
    "source",
)

_context: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"khata_log_{name}", default=None) for name in CONTEXT_FIELDS
}


def _check_fields(fields: dict[str, Any]) -> None:
    unknown = sorted(set(fields) - set(CONTEXT_FIELDS))
    if unknown:
        raise TypeError(f"Unknown log context fields: {unknown}")


class LogContext:
    """Run-scoped log fields, safe across threads and asyncio tasks."""

    @staticmethod
    def set(**fields: str | None) -> None:
        """Set context fields; None values leave the current value alone."""
        _check_fields(fields)
        for name, value in fields.items():
            if value is not None:
                _context[name].set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        return {
            name: value
            for name, var in _context.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _context.values():
            var.set(None)

    @staticmethod
    def bind(**fields: str | None):
        """
        Context manager that sets fields for the duration of a block and
        restores the previous values afterwards.

        Unknown field names raise TypeError immediately.
        """
        _check_fields(fields)
        return _bound(fields)


@contextmanager
def _bound(fields: dict[str, str | None]) -> Iterator[type[LogContext]]:
    tokens = [
        (_context[name], _context[name].set(value))
        for name, value in fields.items()
        if value is not None
    ]
    try:
        yield LogContext
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


# ---------------------------------------------------------------------------
# JSON formatting
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else arrived through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, UUID):
        return str(obj)
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # KhataError subclasses keep their structured data as public attributes.
    for key, value in vars(exc).items():
        if not key.startswith("_"):
            fields[f"exc_{key}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record: ts, level, logger, message, then fields.

    Fields are the bound LogContext overlaid with the record's ``extra``;
    an explicit extra wins over a context field of the same name.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = LogContext.get_all()
        fields.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS
        )
        for key, value in fields.items():
            payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``khata.<name>``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_setup_lock = threading.Lock()
_is_configured = False


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``khata`` logger.

    Only the first call has any effect until ``reset_logging()``; scripts
    and the test suite may both call it without doubling output.
    """
    global _is_configured
    with _setup_lock:
        if _is_configured:
            return
        _is_configured = True

    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())

    root = logging.getLogger(_LOGGER_PREFIX)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(handler)


def reset_logging() -> None:
    """Undo ``configure_logging``. Tests only."""
    global _is_configured
    with _setup_lock:
        _is_configured = False
    root = logging.getLogger(_LOGGER_PREFIX)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    root.propagate = True
