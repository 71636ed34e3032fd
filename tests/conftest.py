"""
Pytest fixtures for the khata ledger test suite.

Provides:
- Structured logging configuration and capture
- A small sample book used across engine, ingestion and script tests

Record builders live in ``tests.builders``.
"""

import json
import logging
from datetime import date
from io import StringIO

import pytest

from khata_kernel.domain.parties import BalanceDirection, MasterParty, PartyKind
from khata_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from tests.builders import (
    make_party,
    payment,
    purchase,
    purchase_return,
    receipt,
    sale,
    sale_return,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture khata logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_balances(parties, transactions)
            logs = captured_logs()
            assert any(r["message"] == "balances_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("khata")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Sample book
# =============================================================================


@pytest.fixture
def sample_parties() -> list[MasterParty]:
    """One party of every kind, with a mix of opening balances."""
    return [
        make_party("C1", PartyKind.CUSTOMER, name="Ramesh Traders"),
        make_party("C2", PartyKind.CUSTOMER, opening="1500", name="Krishna Mills"),
        make_party("S1", PartyKind.SUPPLIER, opening="500", direction=BalanceDirection.CREDIT,
                   name="Gupta Farms"),
        make_party("A1", PartyKind.AGENT, name="Verma Agency"),
        make_party("B1", PartyKind.BROKER, name="Shah Brokers"),
        make_party("T1", PartyKind.TRANSPORTER, name="Roadways"),
        make_party("W1", PartyKind.WAREHOUSE, opening="900", name="Main Godown"),
        make_party("E1", PartyKind.EXPENSE, name="Labour"),
    ]


@pytest.fixture
def sample_transactions() -> list:
    """A month of trading touching every transaction type."""
    return [
        purchase("P1", date(2024, 5, 1), "S1", "2000", lot="L-01"),
        purchase("P2", date(2024, 5, 2), "S1", "3000", agent_id="A1", lot="L-02"),
        sale("SL1", date(2024, 5, 5), "C1", "10000", broker_id="B1", brokerage="200", bill="B-100"),
        sale("SL2", date(2024, 5, 6), "C2", "4000", bill="B-101"),
        receipt("R1", date(2024, 5, 10), "C2", "3000", discount="50", method="Bank"),
        payment("PM1", date(2024, 5, 12), "S1", "1500"),
        payment("PM2", date(2024, 5, 12), "T1", "250"),
        purchase_return("PR1", date(2024, 5, 15), "P2", "400"),
        sale_return("SR1", date(2024, 5, 16), "SL2", "100"),
    ]
