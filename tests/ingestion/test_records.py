"""Tests for mapping exported JSON objects to domain records."""

from datetime import date
from decimal import Decimal

import pytest

from khata_ingestion.records import (
    party_from_record,
    payment_from_record,
    purchase_from_record,
    purchase_return_from_record,
    receipt_from_record,
    sale_from_record,
    sale_return_from_record,
)
from khata_kernel.domain.parties import BalanceDirection, PartyKind
from khata_kernel.exceptions import InvalidRecordError


class TestPartyFromRecord:

    def test_full_record(self):
        party = party_from_record({
            "id": "S1",
            "name": "Gupta Farms",
            "type": "Supplier",
            "openingBalance": 500,
            "openingBalanceType": "Cr",
        }, PartyKind.SUPPLIER)
        assert party.kind is PartyKind.SUPPLIER
        assert party.seed_balance == Decimal("-500")

    def test_positive_opening_without_type_is_debit(self):
        party = party_from_record({"id": "C1", "name": "X", "openingBalance": "250"},
                                  PartyKind.CUSTOMER)
        assert party.opening_balance_direction is BalanceDirection.DEBIT

    def test_name_falls_back_to_id(self):
        assert party_from_record({"id": "C1"}, PartyKind.CUSTOMER).name == "C1"

    def test_broker_commission(self):
        party = party_from_record(
            {"id": "B1", "name": "Shah", "commission": 1.5, "commissionType": "Percentage"},
            PartyKind.BROKER,
        )
        assert party.commission == Decimal("1.5")
        assert party.commission_type == "Percentage"

    def test_missing_id(self):
        with pytest.raises(InvalidRecordError, match="missing id"):
            party_from_record({"name": "Anonymous"}, PartyKind.CUSTOMER)

    def test_bad_direction(self):
        with pytest.raises(InvalidRecordError) as exc_info:
            party_from_record({"id": "C1", "openingBalanceType": "Debit"}, PartyKind.CUSTOMER)
        assert exc_info.value.record_id == "C1"
        assert exc_info.value.code == "INVALID_RECORD"

    def test_negative_opening(self):
        with pytest.raises(InvalidRecordError):
            party_from_record({"id": "C1", "openingBalance": -5}, PartyKind.CUSTOMER)


class TestTransactionMappers:

    def test_purchase(self):
        tx = purchase_from_record({
            "id": "P1",
            "date": "2024-05-01T00:00:00.000Z",
            "supplierId": "S1",
            "agentId": "",
            "totalAmount": 2000,
            "lotNumber": "L-01",
            "quantity": 40,
        })
        assert tx.date == date(2024, 5, 1)
        assert tx.agent_id is None
        assert tx.total_amount == Decimal("2000")
        assert tx.lot_number == "L-01"

    def test_sale(self):
        tx = sale_from_record({
            "id": "S1",
            "date": "2024-05-05",
            "customerId": "C1",
            "brokerId": "B1",
            "billedAmount": "10000",
            "calculatedBrokerageCommission": 200,
            "calculatedExtraBrokerage": None,
            "billNumber": "B-100",
        })
        assert tx.accountable_party_id == "B1"
        assert tx.total_brokerage == Decimal("200")
        assert tx.bill_number == "B-100"

    def test_receipt_and_payment(self):
        r = receipt_from_record({"id": "R1", "date": "2024-05-10", "partyId": "C1",
                                 "amount": 3000, "cashDiscount": 50, "paymentMethod": "Bank"})
        p = payment_from_record({"id": "PM1", "date": "2024-05-12", "partyId": "S1",
                                 "amount": 1500})
        assert r.cash_discount == Decimal("50")
        assert r.payment_method == "Bank"
        assert p.amount == Decimal("1500")
        assert p.payment_method is None

    def test_returns(self):
        pr = purchase_return_from_record({"id": "PR1", "date": "2024-05-15",
                                          "originalPurchaseId": "P2", "returnAmount": 400})
        sr = sale_return_from_record({"id": "SR1", "date": "2024-05-16",
                                      "originalSaleId": "S2", "returnAmount": 100})
        assert pr.original_purchase_id == "P2"
        assert sr.return_amount == Decimal("100")

    def test_missing_required_link(self):
        with pytest.raises(InvalidRecordError, match="customerId"):
            sale_from_record({"id": "S1", "date": "2024-05-05", "billedAmount": 1})

    def test_missing_date(self):
        with pytest.raises(InvalidRecordError, match="missing date"):
            payment_from_record({"id": "PM1", "partyId": "S1", "amount": 1})

    def test_bad_date(self):
        with pytest.raises(InvalidRecordError, match="date"):
            payment_from_record({"id": "PM1", "date": "12/05/2024", "partyId": "S1", "amount": 1})

    def test_bad_amount(self):
        with pytest.raises(InvalidRecordError) as exc_info:
            receipt_from_record({"id": "R1", "date": "2024-05-10", "partyId": "C1",
                                 "amount": "three thousand"})
        assert exc_info.value.record_type == "Receipt"
        assert "amount" in exc_info.value.reason
