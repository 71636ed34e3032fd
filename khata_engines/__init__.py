"""
Module: khata_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    ledger engines.  This is the import surface for scripts and any
    application shell that renders balances.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import khata_kernel (and sibling engine modules).
    MUST NOT import khata_config or khata_ingestion.

Invariants enforced:
    - Purity: engines never read the clock; as-of dates are parameters.
    - Decimal-only arithmetic for all amounts.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every engine entry point is traced via ``@traced_engine`` (see
    ``khata_engines.tracer``), emitting KHATA_ENGINE_TRACE records with
    engine name, version, input fingerprint and duration.

Usage:
    from khata_engines import compute_balances, classify_balances
    from khata_engines import compute_outstanding, build_party_statement
"""

from khata_engines.integrity import (
    UnresolvedReference,
    check_referential_integrity,
    find_unresolved_references,
)
from khata_engines.outstanding import (
    OutstandingReport,
    PartyBalance,
    classify_balances,
    compute_balances,
    compute_outstanding,
    seed_balances,
)
from khata_engines.posting import (
    Posting,
    PostingResolver,
    generate_postings,
    iter_postings,
    order_transactions,
)
from khata_engines.statement import (
    PartyStatement,
    StatementLine,
    build_party_statement,
)
from khata_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # integrity
    "UnresolvedReference",
    "check_referential_integrity",
    "find_unresolved_references",
    # outstanding
    "OutstandingReport",
    "PartyBalance",
    "classify_balances",
    "compute_balances",
    "compute_outstanding",
    "seed_balances",
    # posting
    "Posting",
    "PostingResolver",
    "generate_postings",
    "iter_postings",
    "order_transactions",
    # statement
    "PartyStatement",
    "StatementLine",
    "build_party_statement",
    # tracer
    "compute_input_fingerprint",
    "traced_engine",
]
