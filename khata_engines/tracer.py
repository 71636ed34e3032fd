"""
khata_engines.tracer -- KHATA_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps a pure engine function and, after each call,
    logs which engine ran, at which version, over which inputs and for how
    long.  Inputs are identified by a fingerprint rather than logged in
    full, so two runs over the same book can be matched without the log
    carrying every transaction.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Logs only; inputs and results pass through untouched.

Invariants enforced:
    - A fingerprint depends only on argument values: positional and
      keyword calls bind to the same parameter names, mapping keys are
      sorted, dataclasses render field by field and Decimals are
      normalised (``10.00`` and ``10`` match).
    - Iterators and generators passed for a fingerprinted parameter are
      materialised into a tuple before hashing, and the engine receives
      that tuple; an iterator and a list of the same items match.
    - Fingerprints are the first 16 hex characters of a SHA-256 digest.

Usage:
    from khata_engines.tracer import traced_engine

    @traced_engine("outstanding", "1.0", fingerprint_fields=("parties", "transactions"))
    def compute_balances(parties, transactions):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Iterable, Mapping, Sequence, Sized
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from khata_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")


@functools.singledispatch
def _canonicalize(value: Any) -> str:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        body = ",".join(
            f"{f.name}:{_canonicalize(getattr(value, f.name))}"
            for f in dataclasses.fields(value)
        )
        return f"{type(value).__name__}({body})"
    return str(value)


@_canonicalize.register(type(None))
def _(value) -> str:
    return "null"


@_canonicalize.register(bool)
def _(value) -> str:
    return "true" if value else "false"


@_canonicalize.register(Enum)
def _(value) -> str:
    return str(value.value)


@_canonicalize.register(Decimal)
def _(value) -> str:
    return str(value.normalize()) if value else "0"


@_canonicalize.register(date)
def _(value) -> str:
    return value.isoformat()


@_canonicalize.register(str)
def _(value) -> str:
    # str.__str__ so that str-valued enums render as their value.
    return str.__str__(value)


@_canonicalize.register(Mapping)
def _(value) -> str:
    pairs = sorted((str(k), _canonicalize(v)) for k, v in value.items())
    return "{" + ",".join(f"{k}:{v}" for k, v in pairs) + "}"


@_canonicalize.register(list)
@_canonicalize.register(tuple)
def _(value) -> str:
    return "[" + ",".join(_canonicalize(v) for v in value) + "]"


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """
    Fingerprint the named arguments.

    Fields absent from ``arguments`` hash the same as an explicit None.
    """
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine entry point so every call emits KHATA_ENGINE_TRACE.

    Args:
        engine_name: Engine identifier, e.g. "outstanding".
        engine_version: Version of the posting/classification rules.
        fingerprint_fields: Parameter names hashed into input_fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                # One-shot iterables are drained once and handed on as tuples.
                for name in fingerprint_fields:
                    value = bound.arguments.get(name)
                    if isinstance(value, Iterable) and not isinstance(
                        value, (str, Sequence, Mapping)
                    ):
                        bound.arguments[name] = tuple(value)
                fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)
                args, kwargs = bound.args, bound.kwargs

            started = time.monotonic()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.monotonic() - started) * 1000, 2)

            _logger.info("KHATA_ENGINE_TRACE", extra={
                "trace_type": "KHATA_ENGINE_TRACE",
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": elapsed_ms,
                "function": func.__qualname__,
                "result_size": len(result) if isinstance(result, Sized) else None,
            })
            return result

        return wrapper

    return decorator
