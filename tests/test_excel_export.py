"""Tests for the Excel export of sales."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from openpyxl import load_workbook

from pdv.data.excel_export import SALES_COLUMNS, SALES_SHEET_NAME, SUMMARY_SHEET_NAME, export_sales
from pdv.models.sale import SaleRecord, SalesReport


def _sale(sale_id: int, status: str = "completed") -> SaleRecord:
    return SaleRecord(
        id=sale_id,
        total=Decimal("40.00"),
        discount=Decimal("4.00"),
        final_total=Decimal("36.00"),
        payment_type="cartao_credito",
        status=status,
        created_at="2024-03-05T10:00:00Z",
        seller="Ana",
        item_count=3,
    )


def test_export_writes_header_and_rows(tmp_path: Path) -> None:
    path = export_sales(tmp_path / "out" / "vendas.xlsx", [_sale(1), _sale(2, "cancelled")])

    workbook = load_workbook(path)
    assert workbook.sheetnames == [SALES_SHEET_NAME]
    sheet = workbook[SALES_SHEET_NAME]
    assert [cell.value for cell in sheet[1]] == [column.header for column in SALES_COLUMNS]
    assert sheet.max_row == 3
    assert [cell.value for cell in sheet[2]] == [
        1,
        "2024-03-05T10:00:00Z",
        "Ana",
        3,
        40.0,
        4.0,
        36.0,
        "Cartão de Crédito",
        "Concluída",
    ]
    assert sheet.cell(row=3, column=9).value == "Cancelada"
    assert sheet.cell(row=1, column=1).font.bold


def test_export_adds_summary_sheet(tmp_path: Path) -> None:
    report = SalesReport(
        total_sales=2,
        total_revenue=Decimal("72.00"),
        average_ticket=Decimal("36.00"),
        cancelled_sales=1,
    )
    path = export_sales(tmp_path / "vendas.xlsx", [_sale(1)], report)

    workbook = load_workbook(path)
    assert workbook.sheetnames == [SALES_SHEET_NAME, SUMMARY_SHEET_NAME]
    summary = workbook[SUMMARY_SHEET_NAME]
    assert summary["A2"].value == "Receita total"
    assert summary["B2"].value == 72.0
    assert summary["B4"].value == 1
