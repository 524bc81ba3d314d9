from __future__ import annotations

import csv
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from io import StringIO
from typing import Dict, List, Tuple

from transactions_api.errors import ParsingError
from transactions_api.models import DEFAULT_STATUS, Transaction
from transactions_api.services.timezones import TimezoneLookup


logger = logging.getLogger(__name__)

REQUIRED_HEADERS = {
    "transaction_id",
    "name",
    "email",
    "amount",
    "transaction_date",
    "client_location",
}
OPTIONAL_HEADERS = {"status"}

# Tried after ISO-8601, in order.
DATE_FORMATS = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)


def parse_amount(text: str | None) -> Decimal:
    """
    Parse a currency amount such as "$1,234.56", "(12.00)" or "-7".

    An empty value is read as zero.
    """
    if text is None:
        return Decimal("0")
    cleaned = text.replace("$", "").replace(",", "").strip()
    if not cleaned:
        return Decimal("0")

    negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        negative = True
        cleaned = cleaned[1:-1].strip()

    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise ParsingError(f"Invalid amount: {text!r}")
    if not value.is_finite():
        raise ParsingError(f"Invalid amount: {text!r}")
    return -value if negative else value


def parse_coordinates(text: str | None) -> Tuple[float, float]:
    """Parse "latitude,longitude" into a pair of floats."""
    parts = [p.strip() for p in (text or "").split(",")]
    if len(parts) != 2:
        raise ParsingError(f"Client location must be 'latitude,longitude', got {text!r}")
    try:
        latitude, longitude = float(parts[0]), float(parts[1])
    except ValueError:
        raise ParsingError(f"Client location has non-numeric coordinates: {text!r}")
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise ParsingError(f"Client location is out of range: {text!r}")
    return latitude, longitude


def parse_transaction_date(text: str | None) -> datetime:
    """Parse a local timestamp; values carrying a UTC offset are rejected."""
    value = (text or "").strip()
    if not value:
        raise ParsingError("Transaction date is empty.")

    parsed = None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        raise ParsingError(f"Invalid transaction date: {text!r}")
    if parsed.tzinfo is not None:
        raise ParsingError(f"Transaction date must be local time without an offset: {text!r}")
    return parsed


def decode_upload(raw_bytes: bytes) -> str:
    try:
        return raw_bytes.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ParsingError("CSV must be UTF-8 encoded.")


def _row_to_transaction(row: Dict[str, str], lookup: TimezoneLookup) -> Transaction:
    transaction_id = (row.get("transaction_id") or "").strip()
    if not transaction_id:
        raise ParsingError("transaction_id is empty.")

    client_location = (row.get("client_location") or "").strip()
    latitude, longitude = parse_coordinates(client_location)

    return Transaction(
        transaction_id=transaction_id,
        name=(row.get("name") or "").strip(),
        email=(row.get("email") or "").strip(),
        amount=parse_amount(row.get("amount")),
        transaction_date=parse_transaction_date(row.get("transaction_date")),
        client_location=client_location,
        timezone=lookup.resolve(latitude, longitude),
        status=(row.get("status") or "").strip() or DEFAULT_STATUS,
    )


def read_transactions(text: str, lookup: TimezoneLookup) -> List[Transaction]:
    """
    Parse CSV text into transient Transaction entities, in file order.

    Each record's time zone is resolved from its client location here, once.
    The whole file is rejected on the first malformed row: the ParsingError
    names the row (header is row 1) and nothing is returned.
    """
    reader = csv.DictReader(StringIO(text))
    headers = {h.strip() for h in (reader.fieldnames or [])}
    missing = REQUIRED_HEADERS - headers
    if missing:
        raise ParsingError(f"CSV is missing required columns: {', '.join(sorted(missing))}")

    transactions: List[Transaction] = []
    for row_number, raw_row in enumerate(reader, start=2):
        row = {(k or "").strip(): v for k, v in raw_row.items()}
        try:
            transactions.append(_row_to_transaction(row, lookup))
        except ParsingError as exc:
            raise ParsingError(f"Row {row_number}: {exc}") from exc

    logger.info(f"Parsed {len(transactions)} transactions from CSV")
    return transactions
