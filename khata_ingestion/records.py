"""
Record mappers: exported JSON objects -> typed domain records.

The browser application stores each collection as a JSON array of
camel-case objects.  Each mapper here reads one object and returns the
matching frozen domain type, raising InvalidRecordError when a required
field is missing or a value cannot be parsed.  Optional amounts that were
never filled in default to zero, as they do in the application.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from khata_kernel.domain.amounts import ZERO, to_amount
from khata_kernel.domain.parties import BalanceDirection, MasterParty, PartyKind
from khata_kernel.domain.periods import to_calendar_date
from khata_kernel.domain.transactions import (
    Payment,
    Purchase,
    PurchaseReturn,
    Receipt,
    Sale,
    SaleReturn,
    Transaction,
)
from khata_kernel.exceptions import InvalidRecordError


def _text(row: dict[str, Any], key: str) -> str | None:
    val = row.get(key)
    if val is None:
        return None
    val = str(val).strip()
    return val or None


def _required(row: dict[str, Any], key: str, record_type: str) -> str:
    val = _text(row, key)
    if val is None:
        raise InvalidRecordError(record_type, _text(row, "id"), f"missing {key}")
    return val


def _amount(row: dict[str, Any], key: str, record_type: str):
    try:
        return to_amount(row.get(key))
    except ValueError as e:
        raise InvalidRecordError(record_type, _text(row, "id"), f"{key}: {e}") from e


def _date(row: dict[str, Any], record_type: str):
    raw = row.get("date")
    if raw is None:
        raise InvalidRecordError(record_type, _text(row, "id"), "missing date")
    try:
        return to_calendar_date(raw)
    except (TypeError, ValueError) as e:
        raise InvalidRecordError(record_type, _text(row, "id"), f"date: {e}") from e


def party_from_record(row: dict[str, Any], kind: PartyKind) -> MasterParty:
    """
    Map a master record.

    ``kind`` comes from the collection the record was stored in.  A
    positive opening balance without ``openingBalanceType`` is read as
    Dr, which is how the application has always treated it.
    """
    record_type = kind.value
    party_id = _required(row, "id", record_type)
    name = _text(row, "name") or party_id
    opening = _amount(row, "openingBalance", record_type)
    if opening < ZERO:
        raise InvalidRecordError(record_type, party_id, "openingBalance is negative")

    raw_direction = _text(row, "openingBalanceType")
    direction: BalanceDirection | None = None
    if raw_direction is not None:
        try:
            direction = BalanceDirection(raw_direction)
        except ValueError as e:
            raise InvalidRecordError(
                record_type, party_id, f"openingBalanceType {raw_direction!r} is not Dr/Cr"
            ) from e
    elif opening > ZERO:
        direction = BalanceDirection.DEBIT

    commission = row.get("commission")
    return MasterParty(
        id=party_id,
        name=name,
        kind=kind,
        opening_balance=opening,
        opening_balance_direction=direction,
        commission=_amount(row, "commission", record_type) if commission is not None else None,
        commission_type=_text(row, "commissionType"),
    )


def purchase_from_record(row: dict[str, Any]) -> Purchase:
    return Purchase(
        id=_required(row, "id", "Purchase"),
        date=_date(row, "Purchase"),
        supplier_id=_required(row, "supplierId", "Purchase"),
        agent_id=_text(row, "agentId"),
        total_amount=_amount(row, "totalAmount", "Purchase"),
        lot_number=_text(row, "lotNumber"),
    )


def sale_from_record(row: dict[str, Any]) -> Sale:
    return Sale(
        id=_required(row, "id", "Sale"),
        date=_date(row, "Sale"),
        customer_id=_required(row, "customerId", "Sale"),
        broker_id=_text(row, "brokerId"),
        billed_amount=_amount(row, "billedAmount", "Sale"),
        brokerage_commission=_amount(row, "calculatedBrokerageCommission", "Sale"),
        extra_brokerage=_amount(row, "calculatedExtraBrokerage", "Sale"),
        bill_number=_text(row, "billNumber"),
        lot_number=_text(row, "lotNumber"),
    )


def receipt_from_record(row: dict[str, Any]) -> Receipt:
    return Receipt(
        id=_required(row, "id", "Receipt"),
        date=_date(row, "Receipt"),
        party_id=_required(row, "partyId", "Receipt"),
        amount=_amount(row, "amount", "Receipt"),
        cash_discount=_amount(row, "cashDiscount", "Receipt"),
        payment_method=_text(row, "paymentMethod"),
    )


def payment_from_record(row: dict[str, Any]) -> Payment:
    return Payment(
        id=_required(row, "id", "Payment"),
        date=_date(row, "Payment"),
        party_id=_required(row, "partyId", "Payment"),
        amount=_amount(row, "amount", "Payment"),
        payment_method=_text(row, "paymentMethod"),
    )


def purchase_return_from_record(row: dict[str, Any]) -> PurchaseReturn:
    return PurchaseReturn(
        id=_required(row, "id", "PurchaseReturn"),
        date=_date(row, "PurchaseReturn"),
        original_purchase_id=_required(row, "originalPurchaseId", "PurchaseReturn"),
        return_amount=_amount(row, "returnAmount", "PurchaseReturn"),
    )


def sale_return_from_record(row: dict[str, Any]) -> SaleReturn:
    return SaleReturn(
        id=_required(row, "id", "SaleReturn"),
        date=_date(row, "SaleReturn"),
        original_sale_id=_required(row, "originalSaleId", "SaleReturn"),
        return_amount=_amount(row, "returnAmount", "SaleReturn"),
    )


TransactionMapper = Callable[[dict[str, Any]], Transaction]
