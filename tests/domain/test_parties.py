"""Tests for master parties and opening-balance seeding."""

from decimal import Decimal

import pytest

from khata_kernel.domain.parties import BalanceDirection, MasterParty, PartyKind


class TestPartyKind:

    @pytest.mark.parametrize("kind", [k for k in PartyKind if k is not PartyKind.WAREHOUSE])
    def test_accounting_kinds_participate(self, kind):
        assert kind.participates_in_ledger

    def test_warehouse_excluded(self):
        assert not PartyKind.WAREHOUSE.participates_in_ledger

    def test_values_match_export_labels(self):
        assert PartyKind("Customer") is PartyKind.CUSTOMER
        assert BalanceDirection("Cr") is BalanceDirection.CREDIT


class TestMasterParty:
    """Construction and validation."""

    def test_defaults(self):
        party = MasterParty(id="C1", name="Ramesh", kind=PartyKind.CUSTOMER)
        assert party.opening_balance == Decimal("0")
        assert party.opening_balance_direction is None
        assert party.seed_balance == Decimal("0")

    def test_string_inputs_normalised(self):
        party = MasterParty(
            id="S1",
            name="Gupta",
            kind="Supplier",
            opening_balance="500",
            opening_balance_direction="Cr",
        )
        assert party.kind is PartyKind.SUPPLIER
        assert party.opening_balance == Decimal("500")
        assert party.opening_balance_direction is BalanceDirection.CREDIT

    def test_negative_opening_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            MasterParty(
                id="C1", name="X", kind=PartyKind.CUSTOMER,
                opening_balance=Decimal("-1"),
                opening_balance_direction=BalanceDirection.DEBIT,
            )

    def test_direction_required_when_positive(self):
        with pytest.raises(ValueError, match="Dr/Cr"):
            MasterParty(
                id="C1", name="X", kind=PartyKind.CUSTOMER,
                opening_balance=Decimal("10"),
            )

    def test_frozen(self):
        party = MasterParty(id="C1", name="X", kind=PartyKind.CUSTOMER)
        with pytest.raises(AttributeError):
            party.name = "Y"

    def test_commission_carried(self):
        party = MasterParty(
            id="B1", name="Shah", kind=PartyKind.BROKER,
            commission="2.5", commission_type="Percentage",
        )
        assert party.commission == Decimal("2.5")
        assert party.commission_type == "Percentage"


class TestSeedBalance:
    """Credit openings are negated; debit openings are stored as-is."""

    def test_debit_positive(self):
        party = MasterParty(
            id="C1", name="X", kind=PartyKind.CUSTOMER,
            opening_balance=Decimal("1500"),
            opening_balance_direction=BalanceDirection.DEBIT,
        )
        assert party.seed_balance == Decimal("1500")

    def test_credit_negated(self):
        party = MasterParty(
            id="S1", name="X", kind=PartyKind.SUPPLIER,
            opening_balance=Decimal("500"),
            opening_balance_direction=BalanceDirection.CREDIT,
        )
        assert party.seed_balance == Decimal("-500")

    def test_zero_credit_is_plain_zero(self):
        party = MasterParty(
            id="S1", name="X", kind=PartyKind.SUPPLIER,
            opening_balance=Decimal("0"),
            opening_balance_direction=BalanceDirection.CREDIT,
        )
        assert party.seed_balance == Decimal("0")
        assert not party.seed_balance.is_signed()
