"""Sales tab: listing with filters, period report, cancellation and Excel export."""

from __future__ import annotations

from typing import List, Optional

from PyQt5.QtCore import QDate, pyqtSignal
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QDateEdit,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from pdv.api import ApiClient
from pdv.data.excel_export import SALES_COLUMNS, export_sales
from pdv.errors import TransportError
from pdv.models.sale import PaymentMethod, SaleRecord, SalesReport
from pdv.money import format_currency


class SalesWidget(QWidget):
    sessionExpired = pyqtSignal()

    def __init__(self, api: ApiClient, can_cancel: bool = False, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.api = api
        self.can_cancel = can_cancel
        self.sales: List[SaleRecord] = []
        self.report = SalesReport()

        today = QDate.currentDate()
        self.start_date = QDateEdit(today.addDays(-30))
        self.start_date.setCalendarPopup(True)
        self.end_date = QDateEdit(today)
        self.end_date.setCalendarPopup(True)
        self.payment_combo = QComboBox()
        self.payment_combo.addItem("Todas", "")
        for method in PaymentMethod:
            self.payment_combo.addItem(method.label, method.value)
        self.status_combo = QComboBox()
        self.status_combo.addItem("Todos", "")
        self.status_combo.addItem("Concluída", "completed")
        self.status_combo.addItem("Cancelada", "cancelled")

        search_button = QPushButton("Buscar")
        search_button.clicked.connect(self.refresh)

        filters = QHBoxLayout()
        filters.addWidget(QLabel("De"))
        filters.addWidget(self.start_date)
        filters.addWidget(QLabel("Até"))
        filters.addWidget(self.end_date)
        filters.addWidget(QLabel("Pagamento"))
        filters.addWidget(self.payment_combo)
        filters.addWidget(QLabel("Status"))
        filters.addWidget(self.status_combo)
        filters.addWidget(search_button)
        filters.addStretch()

        self.table = QTableWidget(0, len(SALES_COLUMNS))
        self.table.setHorizontalHeaderLabels([column.header for column in SALES_COLUMNS])
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.horizontalHeader().setStretchLastSection(True)

        report_group = QGroupBox("Relatório do Período")
        report_layout = QFormLayout()
        self.total_sales_label = QLabel("0")
        self.revenue_label = QLabel(format_currency(0))
        self.ticket_label = QLabel(format_currency(0))
        self.cancelled_label = QLabel("0")
        report_layout.addRow("Vendas concluídas", self.total_sales_label)
        report_layout.addRow("Receita total", self.revenue_label)
        report_layout.addRow("Ticket médio", self.ticket_label)
        report_layout.addRow("Vendas canceladas", self.cancelled_label)
        report_group.setLayout(report_layout)

        self.cancel_button = QPushButton("Cancelar Venda")
        self.cancel_button.setVisible(can_cancel)
        self.cancel_button.clicked.connect(self._on_cancel)
        self.export_button = QPushButton("Exportar Excel")
        self.export_button.clicked.connect(self._on_export)
        actions = QHBoxLayout()
        actions.addStretch()
        actions.addWidget(self.cancel_button)
        actions.addWidget(self.export_button)

        layout = QVBoxLayout()
        layout.addLayout(filters)
        layout.addWidget(self.table, 1)
        layout.addWidget(report_group)
        layout.addLayout(actions)
        self.setLayout(layout)

    def _fail(self, exc: TransportError) -> None:
        QMessageBox.warning(self, "Erro", str(exc))
        if exc.session_expired:
            self.sessionExpired.emit()

    def refresh(self) -> None:
        start = self.start_date.date().toPyDate()
        end = self.end_date.date().toPyDate()
        try:
            self.sales = self.api.list_sales(
                start_date=start,
                end_date=end,
                payment_type=self.payment_combo.currentData() or None,
                status=self.status_combo.currentData() or None,
            )
            self.report = self.api.sales_report(start_date=start, end_date=end)
        except TransportError as exc:
            self._fail(exc)
            return
        self._refresh_table()
        self._update_report()

    def _refresh_table(self) -> None:
        self.table.setRowCount(len(self.sales))
        for row, sale in enumerate(self.sales):
            values = [
                str(sale.id),
                sale.created_at,
                sale.seller,
                str(sale.item_count),
                format_currency(sale.total),
                format_currency(sale.discount),
                format_currency(sale.final_total),
                sale.payment_label,
                "Cancelada" if sale.status == "cancelled" else "Concluída",
            ]
            for col, val in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(val))
        self.table.resizeColumnsToContents()

    def _update_report(self) -> None:
        self.total_sales_label.setText(str(self.report.total_sales))
        self.revenue_label.setText(format_currency(self.report.total_revenue))
        self.ticket_label.setText(format_currency(self.report.average_ticket))
        self.cancelled_label.setText(str(self.report.cancelled_sales))

    def _on_cancel(self) -> None:
        row = self.table.currentRow()
        if not 0 <= row < len(self.sales):
            QMessageBox.information(self, "Vendas", "Selecione uma venda.")
            return
        sale = self.sales[row]
        if sale.status == "cancelled":
            QMessageBox.information(self, "Vendas", "Esta venda já foi cancelada.")
            return
        answer = QMessageBox.question(
            self,
            "Cancelar Venda",
            f"Tem certeza que deseja cancelar a venda #{sale.id}?",
            QMessageBox.Yes | QMessageBox.No,
        )
        if answer != QMessageBox.Yes:
            return
        try:
            self.api.cancel_sale(sale.id)
        except TransportError as exc:
            self._fail(exc)
            return
        self.refresh()

    def _on_export(self) -> None:
        if not self.sales:
            QMessageBox.information(self, "Exportar", "Nenhuma venda para exportar.")
            return
        path, _ = QFileDialog.getSaveFileName(self, "Exportar Vendas", "vendas.xlsx", "Excel (*.xlsx)")
        if not path:
            return
        try:
            export_sales(path, self.sales, self.report)
        except OSError as exc:
            QMessageBox.critical(self, "Erro", f"Falha ao exportar planilha:\n{exc}")
            return
        QMessageBox.information(self, "Exportar", f"Planilha salva em:\n{path}")
