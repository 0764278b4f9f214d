"""Main PyQt window of the PDV client."""

from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtGui import QCloseEvent
from PyQt5.QtWidgets import QAction, QInputDialog, QLineEdit, QMainWindow, QMessageBox, QTabWidget

from pdv.checkout import CheckoutFlow
from pdv.errors import PdvError
from pdv.log import get_logger
from pdv.printing.dispatcher import PrintDispatcher
from pdv.printing.qt_host import QtPrintHost
from pdv.session import AuthSession
from pdv.ui.dashboard import DashboardWidget
from pdv.ui.pdv_window import PdvWidget
from pdv.ui.sales_tab import SalesWidget

logger = get_logger(__name__)


class MainWindow(QMainWindow):
    """Tabs for the logged-in user; the dashboard and sales tabs need a manager."""

    loggedOut = pyqtSignal()
    quitRequested = pyqtSignal()

    def __init__(self, session: AuthSession) -> None:
        super().__init__()
        self.session = session
        user = session.user
        self.setWindowTitle(f"Sistema PDV - {user.name if user else ''}")
        self.resize(1200, 700)
        self._logging_out = False

        self.dispatcher = PrintDispatcher(QtPrintHost(parent=self))
        self.flow = CheckoutFlow(session.api, self.dispatcher, seller=user.name if user else "")

        self.tabs = QTabWidget()
        self.pdv_tab = PdvWidget(self.flow, self.dispatcher)
        self.pdv_tab.sessionExpired.connect(self._on_session_expired)
        self.tabs.addTab(self.pdv_tab, "PDV")

        self.dashboard_tab: Optional[DashboardWidget] = None
        self.sales_tab: Optional[SalesWidget] = None
        if session.is_manager():
            self.dashboard_tab = DashboardWidget(session.api)
            self.dashboard_tab.sessionExpired.connect(self._on_session_expired)
            self.tabs.addTab(self.dashboard_tab, "Dashboard")
            self.sales_tab = SalesWidget(session.api, can_cancel=session.is_manager())
            self.sales_tab.sessionExpired.connect(self._on_session_expired)
            self.tabs.addTab(self.sales_tab, "Vendas")
        self.tabs.currentChanged.connect(self._on_tab_changed)
        self.setCentralWidget(self.tabs)

        self._build_menu()
        self.statusBar().showMessage(f"{user.name} ({user.role})" if user else "")

    def _build_menu(self) -> None:
        menu = self.menuBar().addMenu("Conta")
        password_action = QAction("Alterar Senha", self)
        password_action.triggered.connect(self._on_change_password)
        logout_action = QAction("Sair", self)
        logout_action.triggered.connect(self._on_logout)
        menu.addAction(password_action)
        menu.addAction(logout_action)

    def _on_tab_changed(self, index: int) -> None:
        widget = self.tabs.widget(index)
        if widget is self.dashboard_tab or widget is self.sales_tab:
            widget.refresh()

    def _on_change_password(self) -> None:
        current, ok = QInputDialog.getText(self, "Alterar Senha", "Senha atual:", QLineEdit.Password)
        if not ok:
            return
        new, ok = QInputDialog.getText(self, "Alterar Senha", "Nova senha:", QLineEdit.Password)
        if not ok:
            return
        try:
            self.session.change_password(current, new)
        except PdvError as exc:
            QMessageBox.warning(self, "Erro", str(exc))
            return
        QMessageBox.information(self, "Alterar Senha", "Senha alterada com sucesso.")

    def _on_logout(self) -> None:
        if not self.pdv_tab.confirm_discard():
            return
        self._logout()

    def _on_session_expired(self) -> None:
        if self._logging_out:
            return
        logger.warning("Session expired, logging out")
        QMessageBox.warning(self, "Sessão", "Sessão expirada. Faça login novamente.")
        self._logout()

    def _logout(self) -> None:
        self._logging_out = True
        self.session.logout()
        self.close()
        self.loggedOut.emit()

    def closeEvent(self, event: QCloseEvent) -> None:
        if not self._logging_out and not self.pdv_tab.confirm_discard():
            event.ignore()
            return
        self.pdv_tab.wait_for_lookup()
        super().closeEvent(event)
        if not self._logging_out:
            self.quitRequested.emit()
