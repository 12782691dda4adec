"""
Record Projector — Turns bound table rows into output records.

Each declared column becomes one output field; amount columns become two
(`<field>` formatted, `<field>_raw` in minor units). Absent columns or empty
cells take the column kind's default: '' for text, 0 for counters, the
configured currency for the currency column.
"""
from typing import Dict

from txn_history.schemas.schemas import OrderRecord, PaymentRecord, RefundRecord
from txn_history.services.schema import (
    AMOUNT, CURRENCY, INTEGER, ORDER_SCHEMA, PAYMENT_SCHEMA, REFUND_SCHEMA,
    BoundRow, TableSchema,
)
from txn_history.utils.currency import format_amount, to_minor_units


def project(row: BoundRow, schema: TableSchema, default_currency: str = "INR") -> Dict:
    """Map a row to a dict holding every declared field of `schema`."""
    currency = row.text("currency").strip() or default_currency
    out: Dict = {}
    for col in schema.columns:
        if col.kind == AMOUNT:
            raw = to_minor_units(row.value(col.field))
            out[col.field] = format_amount(raw, currency)
            out[f"{col.field}_raw"] = raw
        elif col.kind == INTEGER:
            out[col.field] = to_minor_units(row.value(col.field))
        elif col.kind == CURRENCY:
            out[col.field] = currency
        else:
            out[col.field] = row.text(col.field)
    return out


def project_payment(row: BoundRow, default_currency: str = "INR") -> PaymentRecord:
    return PaymentRecord(**project(row, PAYMENT_SCHEMA, default_currency))


def project_order(row: BoundRow, default_currency: str = "INR") -> OrderRecord:
    return OrderRecord(**project(row, ORDER_SCHEMA, default_currency))


def project_refund(row: BoundRow, default_currency: str = "INR") -> RefundRecord:
    return RefundRecord(**project(row, REFUND_SCHEMA, default_currency))
