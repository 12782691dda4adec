"""
CSV Importer — Loads Razorpay dashboard exports into the lookup tables.
"""
import csv
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Iterable

from sqlalchemy import Integer
from sqlalchemy.orm import Session

from txn_history.models import RazorpayOrder, RazorpayPayment, RazorpayRefund
from txn_history.utils.currency import to_minor_units
from txn_history.utils.log import log_event

MODELS = {
    "payments": RazorpayPayment,
    "orders": RazorpayOrder,
    "refunds": RazorpayRefund,
}


def _major_to_minor(value) -> int:
    """'1,234.50' rupees → 123450 paise."""
    text = "" if value is None else str(value).strip().replace(",", "")
    if not text:
        return 0
    try:
        return to_minor_units(Decimal(text) * 100)
    except InvalidOperation:
        return 0


def import_records(
    db: Session,
    kind: str,
    records: Iterable[Dict],
    replace: bool = False,
    major_units: bool = False,
) -> int:
    """Upsert export records into the table for `kind`.

    Unknown columns are ignored and rows without an id are skipped. Integer
    columns are coerced with to_minor_units; with `major_units`, amount
    columns are read as rupees and converted to paise.

    Returns:
        Number of rows written.
    """
    if kind not in MODELS:
        raise ValueError(f"Unknown table kind '{kind}' (expected one of {', '.join(MODELS)})")
    model = MODELS[kind]
    columns = {col.name: col for col in model.__table__.columns}

    if replace:
        db.query(model).delete()

    written = 0
    for record in records:
        values = {}
        for key, raw in record.items():
            name = (key or "").strip()
            col = columns.get(name)
            if col is None:
                continue
            if isinstance(col.type, Integer):
                if major_units and name.startswith("amount"):
                    values[name] = _major_to_minor(raw)
                else:
                    values[name] = to_minor_units(raw)
            else:
                text = "" if raw is None else str(raw)
                values[name] = text if text.strip() else None
        if not values.get("id"):
            continue
        db.merge(model(**values))
        written += 1

    db.commit()
    log_event("import", f"{model.__tablename__}: {written} rows written (replace={replace})")
    return written


def import_csv(db: Session, kind: str, path, replace: bool = False, major_units: bool = False) -> int:
    """Import one CSV export file. See import_records."""
    with open(Path(path), newline="", encoding="utf-8-sig") as f:
        return import_records(db, kind, csv.DictReader(f), replace=replace, major_units=major_units)
