"""Printer status and test dialog."""

from __future__ import annotations

from typing import Optional

from PyQt5.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pdv.money import format_currency
from pdv.printing.dispatcher import SAMPLE_LINES, SAMPLE_PAYMENT, SAMPLE_TOTALS, PrintDispatcher

OK_STYLE = "color: #2e7d32; font-weight: bold;"
WARN_STYLE = "color: #ef6c00; font-weight: bold;"
ERROR_STYLE = "color: #c62828; font-weight: bold;"


class PrinterSettingsDialog(QDialog):
    """Shows a fresh printer probe and lets the operator print a test receipt."""

    def __init__(self, dispatcher: PrintDispatcher, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Configurações de Impressora")
        self.setMinimumWidth(460)
        self.dispatcher = dispatcher

        status_group = QGroupBox("Status das Impressoras")
        status_layout = QVBoxLayout()
        self.thermal_label = QLabel()
        self.generic_label = QLabel()
        self.hint_label = QLabel()
        self.hint_label.setWordWrap(True)
        self.recheck_button = QPushButton("Verificar Novamente")
        self.recheck_button.clicked.connect(self.check_status)
        status_layout.addWidget(self.thermal_label)
        status_layout.addWidget(self.generic_label)
        status_layout.addWidget(self.hint_label)
        status_layout.addWidget(self.recheck_button)
        status_group.setLayout(status_layout)

        test_group = QGroupBox("Teste de Impressão")
        test_layout = QHBoxLayout()
        self.preview_button = QPushButton("Visualizar Nota Fiscal")
        self.preview_button.clicked.connect(self._on_preview)
        self.test_button = QPushButton("Testar Impressão")
        self.test_button.clicked.connect(self._on_test_print)
        test_layout.addWidget(self.preview_button)
        test_layout.addWidget(self.test_button)
        test_group.setLayout(test_layout)

        sample_group = QGroupBox("Dados do Teste")
        sample_layout = QVBoxLayout()
        sample_layout.addWidget(QLabel(f"Itens: {len(SAMPLE_LINES)} produtos"))
        sample_layout.addWidget(QLabel(f"Subtotal: {format_currency(SAMPLE_TOTALS.subtotal)}"))
        sample_layout.addWidget(
            QLabel(
                f"Desconto: {format_currency(SAMPLE_TOTALS.discount_amount)} "
                f"({SAMPLE_TOTALS.discount_percentage}%)"
            )
        )
        sample_layout.addWidget(QLabel(f"Total: {format_currency(SAMPLE_TOTALS.total)}"))
        sample_layout.addWidget(QLabel(f"Pagamento: {SAMPLE_PAYMENT.method.label}"))
        sample_layout.addWidget(QLabel(f"Valor Recebido: {format_currency(SAMPLE_PAYMENT.amount_tendered)}"))
        sample_layout.addWidget(QLabel(f"Troco: {format_currency(SAMPLE_TOTALS.change)}"))
        sample_group.setLayout(sample_layout)

        self.result_label = QLabel()
        self.result_label.setWordWrap(True)

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout()
        layout.addWidget(status_group)
        layout.addWidget(test_group)
        layout.addWidget(self.result_label)
        layout.addWidget(sample_group)
        layout.addWidget(buttons)
        self.setLayout(layout)

        self.check_status()

    def check_status(self) -> None:
        capability = self.dispatcher.probe()
        if capability.thermal_device_detected:
            self.thermal_label.setText("✔ Impressora Térmica Conectada")
            self.thermal_label.setStyleSheet(OK_STYLE)
        else:
            self.thermal_label.setText("⚠ Impressora Térmica Não Detectada")
            self.thermal_label.setStyleSheet(WARN_STYLE)
        if capability.generic_print_available:
            self.generic_label.setText("✔ Sistema de Impressão Disponível")
            self.generic_label.setStyleSheet(OK_STYLE)
        else:
            self.generic_label.setText("✖ Sistema de Impressão Indisponível")
            self.generic_label.setStyleSheet(ERROR_STYLE)
        self.hint_label.setText(capability.message)
        self.test_button.setEnabled(capability.generic_print_available)

    def _show_result(self, success: bool, message: str) -> None:
        self.result_label.setText(message)
        self.result_label.setStyleSheet(OK_STYLE if success else ERROR_STYLE)

    def _on_preview(self) -> None:
        if self.dispatcher.preview_sample():
            self._show_result(True, "Preview da nota fiscal aberto em nova janela.")
        else:
            self._show_result(False, "Preview indisponível.")

    def _on_test_print(self) -> None:
        capability = self.dispatcher.probe()
        if not capability.generic_print_available:
            self._show_result(
                False,
                "Impressora não disponível. Verifique se há uma impressora configurada no sistema.",
            )
            return
        if self.dispatcher.test_print():
            self._show_result(
                True,
                "Teste de impressão enviado com sucesso! Verifique se a nota fiscal foi impressa.",
            )
        else:
            self._show_result(False, "Falha no teste de impressão. Verifique a conexão com a impressora.")
