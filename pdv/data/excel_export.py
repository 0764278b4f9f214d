"""Excel export of the sales listing and report."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.worksheet.worksheet import Worksheet

from pdv.log import get_logger
from pdv.models.sale import SaleRecord, SalesReport

logger = get_logger(__name__)

SALES_SHEET_NAME = "Vendas"
SUMMARY_SHEET_NAME = "Resumo"
MONEY_FORMAT = '"R$" #,##0.00'


@dataclass
class SalesColumn:
    """Header and width of one column of the sales sheet."""

    header: str
    width: int
    money: bool = False


SALES_COLUMNS: List[SalesColumn] = [
    SalesColumn("Venda", 8),
    SalesColumn("Data", 22),
    SalesColumn("Vendedor", 20),
    SalesColumn("Itens", 8),
    SalesColumn("Subtotal", 14, money=True),
    SalesColumn("Desconto", 14, money=True),
    SalesColumn("Total", 14, money=True),
    SalesColumn("Pagamento", 18),
    SalesColumn("Status", 12),
]


def _sale_row(sale: SaleRecord) -> list:
    return [
        sale.id,
        sale.created_at,
        sale.seller,
        sale.item_count,
        float(sale.total),
        float(sale.discount),
        float(sale.final_total),
        sale.payment_label,
        "Cancelada" if sale.status == "cancelled" else "Concluída",
    ]


def _write_sales(sheet: Worksheet, sales: Iterable[SaleRecord]) -> int:
    bold = Font(bold=True)
    for idx, column in enumerate(SALES_COLUMNS, start=1):
        cell = sheet.cell(row=1, column=idx, value=column.header)
        cell.font = bold
        sheet.column_dimensions[cell.column_letter].width = column.width

    count = 0
    for row_idx, sale in enumerate(sales, start=2):
        for col_idx, value in enumerate(_sale_row(sale), start=1):
            cell = sheet.cell(row=row_idx, column=col_idx, value=value)
            if SALES_COLUMNS[col_idx - 1].money:
                cell.number_format = MONEY_FORMAT
        count += 1
    return count


def _write_summary(sheet: Worksheet, report: SalesReport) -> None:
    rows = [
        ("Vendas concluídas", report.total_sales, False),
        ("Receita total", float(report.total_revenue), True),
        ("Ticket médio", float(report.average_ticket), True),
        ("Vendas canceladas", report.cancelled_sales, False),
    ]
    sheet.column_dimensions["A"].width = 22
    sheet.column_dimensions["B"].width = 16
    for row_idx, (label, value, money) in enumerate(rows, start=1):
        sheet.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
        cell = sheet.cell(row=row_idx, column=2, value=value)
        if money:
            cell.number_format = MONEY_FORMAT


def export_sales(
    path: Path | str,
    sales: Iterable[SaleRecord],
    report: Optional[SalesReport] = None,
) -> Path:
    """Write the sales (and the report summary, when given) to ``path``."""
    path = Path(path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SALES_SHEET_NAME
    count = _write_sales(sheet, sales)
    if report is not None:
        _write_summary(workbook.create_sheet(SUMMARY_SHEET_NAME), report)

    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    logger.info("Exported %s sales to %s", count, path)
    return path

