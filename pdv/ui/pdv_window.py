"""Checkout ("PDV") screen."""

from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import Qt, QThread, QTimer, pyqtSignal
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QDialog,
    QDoubleSpinBox,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from pdv import config
from pdv.api import ApiClient
from pdv.checkout import CheckoutFlow, CheckoutState
from pdv.errors import PdvError, TransportError, ValidationError
from pdv.models.sale import LineItem
from pdv.money import ZERO, format_currency
from pdv.printing.dispatcher import PrintDispatcher
from pdv.ui.payment_dialog import PaymentDialog
from pdv.ui.printer_settings import PrinterSettingsDialog
from pdv.ui.widgets import NumberLineEdit

ERROR_STYLE = "background: #ffebee; color: #c62828; padding: 6px; font-weight: bold;"
SUCCESS_STYLE = "background: #e8f5e9; color: #2e7d32; padding: 6px; font-weight: bold;"


def _big_font(size: int) -> QFont:
    font = QFont()
    font.setPointSize(size)
    font.setBold(True)
    return font


class BarcodeLookupWorker(QThread):
    """Runs one product lookup off the GUI thread."""

    found = pyqtSignal(object)
    failed = pyqtSignal(object)

    def __init__(self, api: ApiClient, code: str, parent=None):
        super().__init__(parent)
        self.api = api
        self.code = code

    def run(self):
        try:
            product = self.api.product_by_barcode(self.code)
        except PdvError as exc:
            self.failed.emit(exc)
        else:
            self.found.emit(product)


class PdvWidget(QWidget):
    """Barcode scanning, cart table, totals and sale finalization."""

    sessionExpired = pyqtSignal()

    def __init__(self, flow: CheckoutFlow, dispatcher: PrintDispatcher, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.flow = flow
        self.dispatcher = dispatcher
        self.lookup_worker: Optional[BarcodeLookupWorker] = None

        self._banner_timer = QTimer(self)
        self._banner_timer.setSingleShot(True)
        self._banner_timer.timeout.connect(self._clear_banner)

        self._build_ui()
        self._refresh()
        QTimer.singleShot(0, self.barcode_input.setFocus)

    def _build_ui(self) -> None:
        root_layout = QVBoxLayout()

        self.banner = QLabel()
        self.banner.setVisible(False)
        root_layout.addWidget(self.banner)

        content = QHBoxLayout()
        content.addLayout(self._build_left_panel(), 1)
        content.addLayout(self._build_right_panel(), 2)
        root_layout.addLayout(content, 1)
        self.setLayout(root_layout)

    def _build_left_panel(self) -> QVBoxLayout:
        layout = QVBoxLayout()

        scanner_group = QGroupBox("CÓDIGO DE BARRAS")
        scanner_layout = QVBoxLayout()
        self.barcode_input = QLineEdit()
        self.barcode_input.setPlaceholderText("Escaneie ou digite o código")
        self.barcode_input.setFont(_big_font(18))
        self.barcode_input.returnPressed.connect(self._on_barcode_submit)
        scanner_layout.addWidget(self.barcode_input)
        scanner_group.setLayout(scanner_layout)
        layout.addWidget(scanner_group)

        self.unit_price_label = QLabel()
        self.unit_price_label.setFont(_big_font(22))
        self.item_total_label = QLabel()
        self.item_total_label.setFont(_big_font(22))
        self.code_label = QLabel()
        self.code_label.setFont(_big_font(20))
        self.code_label.setAlignment(Qt.AlignCenter)
        for title, label in (
            ("VALOR UNITÁRIO", self.unit_price_label),
            ("TOTAL DO ITEM", self.item_total_label),
            ("CÓDIGO", self.code_label),
        ):
            group = QGroupBox(title)
            group_layout = QVBoxLayout()
            group_layout.addWidget(label)
            group.setLayout(group_layout)
            layout.addWidget(group)

        buttons = QHBoxLayout()
        self.clear_button = QPushButton("LIMPAR")
        self.clear_button.setStyleSheet("font-size: 16px; padding: 10px; background: #e53935; color: white;")
        self.clear_button.clicked.connect(self._on_clear)
        self.finalize_button = QPushButton("FINALIZAR")
        self.finalize_button.setStyleSheet("font-size: 16px; padding: 10px; background: #43a047; color: white;")
        self.finalize_button.clicked.connect(self._on_finalize)
        buttons.addWidget(self.clear_button)
        buttons.addWidget(self.finalize_button)
        layout.addLayout(buttons)

        self.printer_button = QPushButton("Impressora...")
        self.printer_button.clicked.connect(self._on_printer_settings)
        layout.addWidget(self.printer_button)

        layout.addStretch()
        return layout

    def _build_right_panel(self) -> QVBoxLayout:
        layout = QVBoxLayout()
        self.table = QTableWidget(0, 7)
        self.table.setHorizontalHeaderLabels(
            ["Nº Item", "Código", "Descrição", "Qtd", "Vlr. Unit.", "Total", ""]
        )
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.horizontalHeader().setStretchLastSection(True)
        layout.addWidget(self.table, 1)

        totals_group = QGroupBox("Totais")
        totals_layout = QGridLayout()
        self.discount_spin = QDoubleSpinBox()
        self.discount_spin.setRange(0, 100)
        self.discount_spin.setDecimals(1)
        self.discount_spin.setSingleStep(0.5)
        self.discount_spin.setSuffix(" %")
        self.discount_spin.valueChanged.connect(self._on_discount_changed)
        self.subtotal_label = QLabel()
        self.discount_amount_label = QLabel()
        self.total_label = QLabel()
        self.total_label.setFont(_big_font(20))
        self.count_label = QLabel()

        totals_layout.addWidget(QLabel("Itens"), 0, 0)
        totals_layout.addWidget(self.count_label, 0, 1)
        totals_layout.addWidget(QLabel("Subtotal"), 1, 0)
        totals_layout.addWidget(self.subtotal_label, 1, 1)
        totals_layout.addWidget(QLabel("Desconto"), 2, 0)
        totals_layout.addWidget(self.discount_spin, 2, 1)
        totals_layout.addWidget(self.discount_amount_label, 2, 2)
        totals_layout.addWidget(QLabel("TOTAL"), 3, 0)
        totals_layout.addWidget(self.total_label, 3, 1, 1, 2)
        totals_group.setLayout(totals_layout)
        layout.addWidget(totals_group)
        return layout

    def _show_banner(self, message: str, error: bool = True) -> None:
        self.banner.setText(message)
        self.banner.setStyleSheet(ERROR_STYLE if error else SUCCESS_STYLE)
        self.banner.setVisible(True)
        self._banner_timer.start(config.BANNER_TIMEOUT_MS)

    def _clear_banner(self) -> None:
        self.banner.clear()
        self.banner.setVisible(False)

    def _handle_error(self, exc: PdvError) -> None:
        self._show_banner(str(exc))
        if isinstance(exc, TransportError) and exc.session_expired:
            self.sessionExpired.emit()

    def _on_barcode_submit(self) -> None:
        if not self.barcode_input.text().strip():
            return
        try:
            code = self.flow.begin_scan(self.barcode_input.text())
        except PdvError as exc:
            self._handle_error(exc)
            return

        self.barcode_input.setEnabled(False)
        self.finalize_button.setEnabled(False)
        worker = BarcodeLookupWorker(self.flow.api, code, self)
        worker.found.connect(self._on_product_found)
        worker.failed.connect(self._on_lookup_failed)
        worker.finished.connect(worker.deleteLater)
        self.lookup_worker = worker
        worker.start()

    def _on_product_found(self, product) -> None:
        try:
            self.flow.finish_scan(product)
            self.barcode_input.clear()
        except PdvError as exc:
            self._handle_error(exc)
        self._lookup_done()

    def _on_lookup_failed(self, exc: PdvError) -> None:
        self.flow.abort_scan()
        self._handle_error(exc)
        self._lookup_done()

    def _lookup_done(self) -> None:
        self.lookup_worker = None
        self.barcode_input.setEnabled(True)
        self.barcode_input.setFocus()
        self._refresh()

    def wait_for_lookup(self) -> None:
        """Block until a running lookup thread has returned."""
        if self.lookup_worker is not None and self.lookup_worker.isRunning():
            self.lookup_worker.wait()

    def _on_discount_changed(self, value: float) -> None:
        try:
            self.flow.set_discount(round(value, 1))
        except ValidationError as exc:
            self._show_banner(str(exc))
        self._update_totals()

    def _set_quantity(self, product_id: int, quantity: int) -> None:
        try:
            self.flow.set_quantity(product_id, quantity)
        except PdvError as exc:
            self._handle_error(exc)
        self._refresh()

    def _remove(self, product_id: int) -> None:
        try:
            self.flow.remove(product_id)
        except PdvError as exc:
            self._handle_error(exc)
        self._refresh()

    def _on_clear(self) -> None:
        try:
            self.flow.clear()
        except PdvError as exc:
            self._handle_error(exc)
        self.discount_spin.setValue(0.0)
        self._clear_banner()
        self._refresh()
        self.barcode_input.setFocus()

    def _on_finalize(self) -> None:
        try:
            self.flow.open_payment()
        except PdvError as exc:
            self._handle_error(exc)
            return

        dialog = PaymentDialog(lambda amount, method: self.flow.totals(amount, method), self)
        if dialog.exec_() != QDialog.Accepted:
            self.flow.cancel_payment()
            self.barcode_input.setFocus()
            return

        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            result = self.flow.submit(dialog.payment())
        except PdvError as exc:
            if self.flow.state is CheckoutState.AWAITING_PAYMENT:
                self.flow.cancel_payment()
            self._handle_error(exc)
        else:
            self.discount_spin.setValue(0.0)
            self._show_banner(result.message, error=not result.receipt_printed)
        finally:
            QApplication.restoreOverrideCursor()
        self._refresh()
        self.barcode_input.setFocus()

    def _on_printer_settings(self) -> None:
        PrinterSettingsDialog(self.dispatcher, self).exec_()

    def _row_actions(self, line: LineItem) -> QWidget:
        widget = QWidget()
        layout = QHBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        minus = QPushButton("-")
        minus.clicked.connect(lambda _=False, pid=line.product_id, q=line.quantity: self._set_quantity(pid, q - 1))
        plus = QPushButton("+")
        plus.clicked.connect(lambda _=False, pid=line.product_id, q=line.quantity: self._set_quantity(pid, q + 1))
        remove = QPushButton("Remover")
        remove.clicked.connect(lambda _=False, pid=line.product_id: self._remove(pid))
        for button in (minus, plus, remove):
            layout.addWidget(button)
        widget.setLayout(layout)
        return widget

    def _quantity_editor(self, line: LineItem) -> NumberLineEdit:
        editor = NumberLineEdit(line.quantity, minimum=0, maximum=None)
        editor.editingDone.connect(
            lambda pid=line.product_id, e=editor: self._on_quantity_edited(pid, e)
        )
        return editor

    def _on_quantity_edited(self, product_id: int, editor: NumberLineEdit) -> None:
        line = self.flow.cart.get(product_id)
        quantity = editor.value()
        if line is None or quantity == line.quantity:
            return
        # deferred: the editor is destroyed by the table refresh
        QTimer.singleShot(0, lambda: self._set_quantity(product_id, quantity))

    def _refresh_table(self) -> None:
        lines = self.flow.cart.lines
        self.table.setRowCount(len(lines))
        for row, line in enumerate(lines):
            values = [
                str(row + 1),
                line.code,
                line.name,
                None,
                format_currency(line.unit_price),
                format_currency(line.line_total),
            ]
            for col, val in enumerate(values):
                if val is None:
                    continue
                self.table.setItem(row, col, QTableWidgetItem(val))
            self.table.setCellWidget(row, 3, self._quantity_editor(line))
            self.table.setCellWidget(row, 6, self._row_actions(line))
        self.table.resizeColumnsToContents()

    def _update_totals(self) -> None:
        totals = self.flow.totals()
        self.count_label.setText(str(self.flow.cart.item_count))
        self.subtotal_label.setText(format_currency(totals.subtotal))
        self.discount_amount_label.setText(f"- {format_currency(totals.discount_amount)}")
        self.total_label.setText(format_currency(totals.total))

    def _refresh(self) -> None:
        self._refresh_table()
        self._update_totals()
        last = self.flow.cart.last_line
        self.unit_price_label.setText(format_currency(last.unit_price if last else ZERO))
        self.item_total_label.setText(format_currency(last.line_total if last else ZERO))
        self.code_label.setText(last.code if last else "-----")
        has_items = not self.flow.cart.is_empty
        self.clear_button.setEnabled(has_items)
        self.finalize_button.setEnabled(has_items)

    def confirm_discard(self) -> bool:
        """Ask before leaving the screen with a non-empty cart."""
        if self.flow.cart.is_empty:
            return True
        answer = QMessageBox.question(
            self,
            "Carrinho em aberto",
            "Há itens no carrinho. Deseja descartá-los?",
            QMessageBox.Yes | QMessageBox.No,
        )
        return answer == QMessageBox.Yes
