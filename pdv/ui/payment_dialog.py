"""Payment dialog of the checkout screen."""

from __future__ import annotations

from typing import Callable, Optional

from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QVBoxLayout,
    QWidget,
)

from pdv.models.sale import PaymentIntent, PaymentMethod, Totals
from pdv.money import ZERO, Money, format_currency
from pdv.ui.widgets import CurrencyLineEdit

TotalsFn = Callable[[Money, PaymentMethod], Totals]


class PaymentDialog(QDialog):
    """Pick the payment method and, for cash, the amount received."""

    def __init__(self, compute_totals: TotalsFn, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Finalizar Venda")
        self.compute_totals = compute_totals

        self.method_combo = QComboBox()
        for method in PaymentMethod:
            self.method_combo.addItem(method.label, method.value)

        self.amount_input = CurrencyLineEdit()
        self.amount_input.valueChanged.connect(lambda _value: self._refresh())

        big = QFont()
        big.setPointSize(16)
        big.setBold(True)
        self.subtotal_label = QLabel()
        self.discount_label = QLabel()
        self.total_label = QLabel()
        self.total_label.setFont(big)
        self.change_label = QLabel()
        self.change_label.setFont(big)
        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #c62828;")

        form = QFormLayout()
        form.addRow("Subtotal", self.subtotal_label)
        form.addRow("Desconto", self.discount_label)
        form.addRow("Total", self.total_label)
        form.addRow("Forma de Pagamento", self.method_combo)
        form.addRow("Valor Recebido", self.amount_input)
        form.addRow("Troco", self.change_label)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.button(QDialogButtonBox.Ok).setText("Confirmar Venda")
        self.buttons.button(QDialogButtonBox.Cancel).setText("Cancelar")
        self.buttons.accepted.connect(self._on_accept)
        self.buttons.rejected.connect(self.reject)

        layout = QVBoxLayout()
        layout.addLayout(form)
        layout.addWidget(self.error_label)
        layout.addWidget(self.buttons)
        self.setLayout(layout)
        self.method_combo.currentIndexChanged.connect(lambda _index: self._refresh())
        self._refresh()

    def method(self) -> PaymentMethod:
        return PaymentMethod(self.method_combo.currentData())

    def payment(self) -> PaymentIntent:
        amount = self.amount_input.value() if self.method() is PaymentMethod.CASH else ZERO
        return PaymentIntent(method=self.method(), amount_tendered=amount)

    def _refresh(self) -> None:
        is_cash = self.method() is PaymentMethod.CASH
        self.amount_input.setEnabled(is_cash)
        totals = self.compute_totals(self.amount_input.value() if is_cash else ZERO, self.method())
        self.subtotal_label.setText(format_currency(totals.subtotal))
        self.discount_label.setText(
            f"{format_currency(totals.discount_amount)} ({totals.discount_percentage.normalize():f}%)"
        )
        self.total_label.setText(format_currency(totals.total))
        self.change_label.setText(format_currency(totals.change) if is_cash else "-")
        self.error_label.clear()

    def _on_accept(self) -> None:
        payment = self.payment()
        totals = self.compute_totals(payment.amount_tendered, payment.method)
        if payment.is_cash and payment.amount_tendered < totals.total:
            self.error_label.setText("Valor recebido insuficiente")
            return
        self.accept()
