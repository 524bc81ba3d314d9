from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

if TYPE_CHECKING:
    from transactions_api.models import Transaction


logger = logging.getLogger(__name__)

SHEET_TITLE = "Transactions"
DATE_FORMAT = "yyyy-mm-dd hh:mm:ss"
MIN_DATE_COLUMN_WIDTH = 20

# (header, entity attribute) in export order.
COLUMNS = (
    ("TransactionId", "transaction_id"),
    ("Name", "name"),
    ("Email", "email"),
    ("Amount", "amount"),
    ("TransactionDate", "transaction_date"),
    ("ClientLocation", "client_location"),
    ("Status", "status"),
    ("TimeZone", "timezone"),
)


def build_export_path(export_dir: str, now: datetime | None = None) -> str:
    """Create `export_dir` if needed and return a timestamped report path inside it."""
    now = now or datetime.now()
    os.makedirs(export_dir, exist_ok=True)
    return os.path.join(export_dir, f"Transactions_Report_{now:%Y%m%d%H%M%S}.xlsx")


def _display_width(value: object) -> int:
    if value is None:
        return 0
    if isinstance(value, datetime):
        return len(DATE_FORMAT)
    return len(str(value))


def save_excel_file(transactions: Iterable["Transaction"], path: str) -> int:
    """
    Write transactions to a single-sheet workbook at `path`, in the given order.

    Returns the number of data rows written.
    """
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE

    worksheet.append([header for header, _ in COLUMNS])
    count = 0
    for transaction in transactions:
        worksheet.append([getattr(transaction, attr) for _, attr in COLUMNS])
        count += 1

    header_font = Font(bold=True, size=12)
    for cell in worksheet[1]:
        cell.font = header_font

    date_column = [header for header, _ in COLUMNS].index("TransactionDate") + 1
    for row in worksheet.iter_rows(min_row=2, min_col=date_column, max_col=date_column):
        for cell in row:
            cell.number_format = DATE_FORMAT

    # Auto-fit: openpyxl has no layout engine, so size columns by content length.
    for index, column in enumerate(worksheet.iter_cols(), start=1):
        width = max(_display_width(cell.value) for cell in column) + 2
        if index == date_column:
            width = max(width, MIN_DATE_COLUMN_WIDTH)
        worksheet.column_dimensions[get_column_letter(index)].width = width

    workbook.save(path)
    logger.info(f"Exported {count} transactions to {path}")
    return count
