#!/usr/bin/env python3
"""
Import transactions from a CSV file on disk into the configured database.

Uses the same parsing and upsert path as POST /api/transaction/import:
rows with an existing transaction_id only get their status updated.

Usage (from backend/):
  python import_transactions.py path/to/transactions.csv
"""
import sys
from pathlib import Path

from transactions_api.config import Settings
from transactions_api.db import build_engine, build_session_factory, session_scope
from transactions_api.errors import TransactionsApiError
from transactions_api.services import store
from transactions_api.services.csv_import import decode_upload, read_transactions
from transactions_api.services.timezones import GeoTimezoneLookup


def import_transactions(csv_path: Path, settings: Settings) -> int:
    """Parse the file, upsert every row and return the number of rows processed."""
    print(f"Starting transaction import from {csv_path}...")
    transactions = read_transactions(decode_upload(csv_path.read_bytes()), GeoTimezoneLookup())

    factory = build_session_factory(build_engine(settings.database_url))
    with session_scope(factory) as session:
        imported = store.upsert_transactions(session, transactions)

    print(f"\nImport complete:")
    print(f"  Rows imported/updated: {imported}")
    return imported


def main(argv: list) -> int:
    if len(argv) != 2:
        print("Usage: python import_transactions.py <file.csv>")
        return 2

    csv_path = Path(argv[1])
    if not csv_path.is_file():
        print(f"Error: {csv_path} does not exist")
        return 1

    try:
        import_transactions(csv_path, Settings.load())
    except TransactionsApiError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
