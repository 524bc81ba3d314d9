"""Tests for the Excel report writer."""
import os
from datetime import datetime
from decimal import Decimal

from openpyxl import load_workbook

from conftest import make_transaction
from transactions_api.services.excel_export import build_export_path, save_excel_file


def test_build_export_path_creates_directory(tmp_path):
    export_dir = tmp_path / "Resources" / "export"

    path = build_export_path(str(export_dir), now=datetime(2024, 1, 2, 3, 4, 5))

    assert export_dir.is_dir()
    assert path == os.path.join(str(export_dir), "Transactions_Report_20240102030405.xlsx")


def test_save_excel_file_layout(tmp_path):
    path = str(tmp_path / "report.xlsx")
    transactions = [
        make_transaction("T2", datetime(2024, 1, 2, 8, 30, 0), name="Bob", amount=Decimal("12.50")),
        make_transaction("T1", datetime(2024, 1, 1, 2, 0, 0), status="Completed"),
    ]

    assert save_excel_file(transactions, path) == 2

    worksheet = load_workbook(path)["Transactions"]
    header = [cell.value for cell in worksheet[1]]
    assert header == [
        "TransactionId",
        "Name",
        "Email",
        "Amount",
        "TransactionDate",
        "ClientLocation",
        "Status",
        "TimeZone",
    ]
    assert all(cell.font.bold for cell in worksheet[1])
    assert worksheet["A1"].font.size == 12

    # Rows keep the given order.
    assert worksheet["A2"].value == "T2"
    assert worksheet["B2"].value == "Bob"
    assert worksheet["D2"].value == 12.5
    assert worksheet["E2"].value == datetime(2024, 1, 2, 8, 30, 0)
    assert worksheet["E2"].number_format == "yyyy-mm-dd hh:mm:ss"
    assert worksheet["A3"].value == "T1"
    assert worksheet["G3"].value == "Completed"
    assert worksheet["H3"].value == "America/New_York"

    assert worksheet.column_dimensions["E"].width >= 20


def test_save_excel_file_without_rows(tmp_path):
    path = str(tmp_path / "empty.xlsx")

    assert save_excel_file([], path) == 0
    assert load_workbook(path)["Transactions"].max_row == 1
