"""Entry point for the PDV desktop client."""

from PyQt5.QtWidgets import QApplication, QDialog
import sys

from pdv import config
from pdv.log import configure_logging, get_logger
from pdv.session import AuthSession
from pdv.ui.login_dialog import LoginDialog
from pdv.ui.main_window import MainWindow

logger = get_logger("main")


class Application:
    """Alternates between the login dialog and the main window until the user quits."""

    def __init__(self, session: AuthSession) -> None:
        self.session = session
        self.window = None

    def start(self) -> bool:
        if not self.session.restore():
            if LoginDialog(self.session).exec_() != QDialog.Accepted:
                return False
        self.window = MainWindow(self.session)
        self.window.loggedOut.connect(self._on_logged_out)
        self.window.quitRequested.connect(QApplication.quit)
        self.window.show()
        return True

    def _on_logged_out(self) -> None:
        self.window.deleteLater()
        self.window = None
        if not self.start():
            QApplication.quit()


def main() -> None:
    configure_logging()
    logger.info("Starting PDV client, backend at %s", config.API_BASE_URL)
    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)
    controller = Application(AuthSession())
    if not controller.start():
        return
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
