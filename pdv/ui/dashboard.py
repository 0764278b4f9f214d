"""Dashboard tab: daily figures and the low-stock list."""

from __future__ import annotations

from typing import Dict, List, Optional

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from pdv.api import ApiClient
from pdv.errors import TransportError
from pdv.forms import DialogState, StockEditForm
from pdv.log import get_logger
from pdv.models.product import Product, stock_status
from pdv.money import format_currency

logger = get_logger(__name__)

STATS_FIELDS = [
    ("today_sales", "Vendas Hoje", False),
    ("today_revenue", "Faturamento Hoje", True),
    ("month_sales", "Vendas no Mês", False),
    ("month_revenue", "Faturamento no Mês", True),
    ("total_products", "Produtos", False),
    ("low_stock_products", "Estoque Baixo", False),
]


class StockEditDialog(QDialog):
    """Sets the stock of one product to an absolute quantity."""

    def __init__(self, product: Product, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Atualizar Estoque")
        self.form = StockEditForm(product_id=product.id, text=str(product.stock), original=product.stock)

        self.stock_input = QLineEdit(self.form.text)
        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #c62828;")

        layout = QFormLayout()
        layout.addRow("Produto", QLabel(product.name))
        layout.addRow("Estoque mínimo", QLabel(str(product.min_stock)))
        layout.addRow("Novo estoque", self.stock_input)
        layout.addRow(self.error_label)
        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)
        self.setLayout(layout)

    def _on_accept(self) -> None:
        self.form.text = self.stock_input.text()
        if not self.form.validate():
            self.error_label.setText(self.form.errors["stock"])
            return
        self.accept()


class DashboardWidget(QWidget):
    sessionExpired = pyqtSignal()

    def __init__(self, api: ApiClient, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.api = api
        self.low_stock: List[Product] = []
        self.edit_state: DialogState[Product] = DialogState.closed()

        stats_group = QGroupBox("Resumo")
        stats_layout = QGridLayout()
        self.stat_labels: Dict[str, QLabel] = {}
        for index, (key, title, _money) in enumerate(STATS_FIELDS):
            label = QLabel("-")
            label.setStyleSheet("font-size: 18px; font-weight: bold;")
            stats_layout.addWidget(QLabel(title), (index // 3) * 2, index % 3)
            stats_layout.addWidget(label, (index // 3) * 2 + 1, index % 3)
            self.stat_labels[key] = label
        stats_group.setLayout(stats_layout)

        self.table = QTableWidget(0, 5)
        self.table.setHorizontalHeaderLabels(["Produto", "Código", "Estoque", "Mínimo", "Status"])
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.cellDoubleClicked.connect(lambda row, _col: self._edit_stock(row))

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #c62828;")

        buttons = QHBoxLayout()
        self.refresh_button = QPushButton("Atualizar")
        self.refresh_button.clicked.connect(self.refresh)
        self.edit_button = QPushButton("Ajustar Estoque")
        self.edit_button.clicked.connect(lambda: self._edit_stock(self.table.currentRow()))
        buttons.addStretch()
        buttons.addWidget(self.refresh_button)
        buttons.addWidget(self.edit_button)

        low_group = QGroupBox("Produtos com Estoque Baixo")
        low_layout = QVBoxLayout()
        low_layout.addWidget(self.table)
        low_layout.addLayout(buttons)
        low_group.setLayout(low_layout)

        layout = QVBoxLayout()
        layout.addWidget(stats_group)
        layout.addWidget(self.error_label)
        layout.addWidget(low_group, 1)
        self.setLayout(layout)

    def _fail(self, exc: TransportError) -> None:
        self.error_label.setText(str(exc))
        if exc.session_expired:
            self.sessionExpired.emit()

    def refresh(self) -> None:
        self.error_label.clear()
        try:
            stats = self.api.dashboard_stats()
            self.low_stock = self.api.low_stock()
        except TransportError as exc:
            self._fail(exc)
            return
        for key, _title, money in STATS_FIELDS:
            value = stats.get(key)
            if value is None:
                text = "-"
            else:
                text = format_currency(value) if money else str(value)
            self.stat_labels[key].setText(text)
        self._refresh_table()

    def _refresh_table(self) -> None:
        self.table.setRowCount(len(self.low_stock))
        for row, product in enumerate(self.low_stock):
            values = [product.name, product.code, str(product.stock), str(product.min_stock), stock_status(product)]
            for col, val in enumerate(values):
                self.table.setItem(row, col, QTableWidgetItem(val))
        self.table.resizeColumnsToContents()

    def _edit_stock(self, row: int) -> None:
        if not 0 <= row < len(self.low_stock):
            return
        self.edit_state = DialogState.opened(self.low_stock[row])
        product = self.edit_state.entity
        dialog = StockEditDialog(product, self)
        try:
            if dialog.exec_() != QDialog.Accepted or not dialog.form.dirty:
                return
            updated = self.api.update_stock(product.id, dialog.form.quantity)
            logger.info("Stock of product %s set to %s", product.id, updated.stock)
        except TransportError as exc:
            self._fail(exc)
            return
        finally:
            self.edit_state = DialogState.closed()
        self.refresh()
