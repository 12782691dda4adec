"""
CSV Import — Load a Razorpay export into the payments, orders or refunds table.

Usage:
    python import_csv.py payments exports/payments.csv
    python import_csv.py refunds exports/refunds.csv --replace
    python import_csv.py orders exports/orders.csv --major-units
"""
import argparse
import sys

from txn_history.database import SessionLocal, init_db
from txn_history.services.importer import MODELS, import_csv


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import a Razorpay CSV export")
    parser.add_argument("table", choices=sorted(MODELS), help="Which table the export belongs to")
    parser.add_argument("path", help="Path to the CSV file")
    parser.add_argument("--replace", action="store_true", help="Delete existing rows first")
    parser.add_argument(
        "--major-units", action="store_true",
        help="Amounts in the file are rupees (e.g. 500.00), not paise",
    )
    args = parser.parse_args(argv)

    init_db()
    db = SessionLocal()
    try:
        written = import_csv(db, args.table, args.path, replace=args.replace, major_units=args.major_units)
    except FileNotFoundError:
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Imported {written} rows into '{args.table}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
