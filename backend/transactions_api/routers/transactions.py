from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from sqlalchemy.orm import Session

from transactions_api.db import get_session
from transactions_api.models import Transaction
from transactions_api.schemas import (
    DeleteResult,
    ErrorOut,
    ExportResult,
    ImportResult,
    TransactionListOut,
    TransactionOut,
)
from transactions_api.services import store
from transactions_api.services.csv_import import decode_upload, read_transactions
from transactions_api.services.excel_export import build_export_path, save_excel_file
from transactions_api.services.range_filter import check_date_range, filter_by_user_time_zone


logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorOut},
        status.HTTP_404_NOT_FOUND: {"model": ErrorOut},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorOut},
    }
)

JANUARY_2024_START = datetime(2024, 1, 1)
JANUARY_2024_END = datetime(2024, 1, 31, 23, 59, 59, 999999)


def _export(request: Request, transactions: List[Transaction]) -> ExportResult:
    path = build_export_path(request.app.state.settings.export_dir)
    count = save_excel_file(transactions, path)
    return ExportResult(
        message="Export completed.",
        file_name=os.path.basename(path),
        file_path=path,
        record_count=count,
    )


def _listing(request: Request, transactions: List[Transaction], excel_export: bool) -> TransactionListOut:
    export = _export(request, transactions) if excel_export else None
    return TransactionListOut(
        items=[TransactionOut.model_validate(t) for t in transactions],
        export=export,
    )


@router.post("/import", response_model=ImportResult)
def import_csv(
    request: Request,
    file: Optional[UploadFile] = File(default=None),
    session: Session = Depends(get_session),
) -> ImportResult:
    """
    Import transactions from a CSV file.

    Behaviour:
    - Headers: transaction_id,name,email,amount,transaction_date,client_location[,status]
    - Each row's time zone is resolved from client_location before anything is stored.
    - A malformed row rejects the whole file; nothing is written.
    - A row whose transaction_id already exists only updates the stored status.
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The uploaded file is not a CSV.")

    raw_bytes = file.file.read()
    if not raw_bytes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

    transactions = read_transactions(decode_upload(raw_bytes), request.app.state.timezone_lookup)
    # Serialize before the upsert: the entities stay transient and keep the values from the file.
    items = [TransactionOut.model_validate(t) for t in transactions]
    imported = store.upsert_transactions(session, transactions)
    logger.info(f"Imported {imported} transactions from {file.filename}")

    return ImportResult(message="Import completed.", imported=imported, items=items)


@router.get("/export", response_model=ExportResult)
def export_to_excel(request: Request, session: Session = Depends(get_session)) -> ExportResult:
    """Export all transactions to an Excel file in the configured export directory."""
    transactions = store.query_all(session)
    if not transactions:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No transactions found.")
    return _export(request, transactions)


@router.get("/date-range-user-time-zone", response_model=TransactionListOut)
def transactions_in_user_time_zone(
    request: Request,
    start_date: datetime = Query(..., alias="startDate", description="Range start, in the user's time zone"),
    end_date: datetime = Query(..., alias="endDate", description="Range end (inclusive), in the user's time zone"),
    user_time_zone: Optional[str] = Query(default=None, alias="userTimeZone", description='IANA id, e.g. "Europe/Kiev"'),
    excel_export: bool = Query(default=False, alias="excelExport"),
    session: Session = Depends(get_session),
) -> TransactionListOut:
    """
    Transactions whose time, converted to the user's time zone, falls in the range.

    Example: startDate=2023-12-31 00:00:00, endDate=2024-01-01 23:59:59, userTimeZone=Europe/Kiev
    """
    transactions = filter_by_user_time_zone(store.query_all(session), start_date, end_date, user_time_zone)
    return _listing(request, transactions, excel_export)


@router.get("/date-range", response_model=TransactionListOut)
def transactions_in_date_range(
    request: Request,
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    excel_export: bool = Query(default=False, alias="excelExport"),
    session: Session = Depends(get_session),
) -> TransactionListOut:
    """
    Transactions within the range by each transaction's own local time.

    Same selection and order as range_filter.filter_by_local_time, run in SQL.
    """
    check_date_range(start_date, end_date)
    transactions = store.query_by_date_range(session, start_date, end_date)
    return _listing(request, transactions, excel_export)


@router.get("/january-2024", response_model=TransactionListOut)
def transactions_for_january_2024(
    request: Request,
    excel_export: bool = Query(default=False, alias="excelExport"),
    session: Session = Depends(get_session),
) -> TransactionListOut:
    """Transactions dated in January 2024 by local time."""
    transactions = store.query_by_date_range(session, JANUARY_2024_START, JANUARY_2024_END)
    return _listing(request, transactions, excel_export)


@router.delete("/delete-all", response_model=DeleteResult)
def delete_all_transactions(session: Session = Depends(get_session)) -> DeleteResult:
    """
    Delete every stored transaction (for testing/reset purposes).
    WARNING: This removes all transaction data!
    """
    deleted = store.delete_all(session)
    logger.warning(f"Deleted all transactions ({deleted} rows)")
    return DeleteResult(message="All transactions have been deleted.", transactions_deleted=deleted)
