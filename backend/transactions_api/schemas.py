from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel


class TransactionOut(BaseModel):
    transaction_id: str
    name: str
    email: str
    amount: Decimal
    transaction_date: datetime  # naive, local to `timezone`
    client_location: str
    timezone: str
    status: str

    class Config:
        from_attributes = True


class ImportResult(BaseModel):
    message: str
    imported: int
    items: List[TransactionOut]


class ExportResult(BaseModel):
    message: str
    file_name: str
    file_path: str
    record_count: int


class TransactionListOut(BaseModel):
    items: List[TransactionOut]
    # Set only when excelExport=true was requested.
    export: Optional[ExportResult] = None


class DeleteResult(BaseModel):
    message: str
    transactions_deleted: int


class ErrorOut(BaseModel):
    title: str
    status: int
    description: str
