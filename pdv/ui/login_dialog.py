"""Login dialog."""

from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QApplication,
    QDialog,
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pdv.errors import PdvError
from pdv.forms import LoginForm
from pdv.session import AuthSession


class LoginDialog(QDialog):
    def __init__(self, session: AuthSession, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Sistema PDV - Login")
        self.setMinimumWidth(360)
        self.session = session
        self.form = LoginForm()

        self.email_input = QLineEdit()
        self.email_input.setPlaceholderText("email@exemplo.com")
        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.Password)
        self.password_input.returnPressed.connect(self._on_login)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #c62828;")
        self.error_label.setWordWrap(True)

        self.login_button = QPushButton("Entrar")
        self.login_button.setDefault(True)
        self.login_button.clicked.connect(self._on_login)
        self.test_button = QPushButton("Testar conexão")
        self.test_button.clicked.connect(self._on_test_connection)

        form_layout = QFormLayout()
        form_layout.addRow("Email", self.email_input)
        form_layout.addRow("Senha", self.password_input)

        layout = QVBoxLayout()
        title = QLabel("Sistema PDV")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 20px; font-weight: bold;")
        layout.addWidget(title)
        layout.addLayout(form_layout)
        layout.addWidget(self.error_label)
        layout.addWidget(self.login_button)
        layout.addWidget(self.test_button)
        self.setLayout(layout)

    def _on_login(self) -> None:
        self.error_label.setStyleSheet("color: #c62828;")
        self.form.email = self.email_input.text()
        self.form.password = self.password_input.text()
        if not self.form.validate():
            self.error_label.setText("\n".join(self.form.errors.values()))
            return

        self.login_button.setEnabled(False)
        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            self.session.login(self.form.email, self.form.password)
        except PdvError as exc:
            self.error_label.setText(str(exc))
            self.password_input.clear()
            return
        finally:
            QApplication.restoreOverrideCursor()
            self.login_button.setEnabled(True)
        self.accept()

    def _on_test_connection(self) -> None:
        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            message = self.session.check_connection()
        except PdvError as exc:
            self.error_label.setStyleSheet("color: #c62828;")
            self.error_label.setText(str(exc))
        else:
            self.error_label.setStyleSheet("color: #2e7d32;")
            self.error_label.setText(message)
        finally:
            QApplication.restoreOverrideCursor()
