"""Receipt printing on Qt: viewer window, QTextDocument and system printers."""

from __future__ import annotations

from typing import Iterable, List, Optional

from PyQt5.QtCore import QSizeF, Qt, QTimer
from PyQt5.QtGui import QTextDocument
from PyQt5.QtPrintSupport import QPrinter, QPrinterInfo
from PyQt5.QtWidgets import QApplication, QDialog, QPushButton, QTextBrowser, QVBoxLayout, QWidget

from pdv import config
from pdv.errors import PrintFailure
from pdv.log import get_logger
from pdv.printing.receipt import ReceiptDocument

logger = get_logger(__name__)

# Words found in printer names/models, by vendor id of THERMAL_PRINTER_VENDORS.
VENDOR_KEYWORDS = {
    0x04B8: ("epson", "tm-t", "tm-m"),
    0x0519: ("star", "tsp"),
    0x0FE6: ("ics advent",),
    0x20D1: ("rongta",),
    0x0DD4: ("custom engineering", "custom kube", "custom vkp"),
    0x154F: ("snbc", "beiyang"),
    0x0483: ("stmicro",),
    0x1FC9: ("nxp",),
    0x1A86: ("ch340", "ch341", "qinheng"),
    0x0403: ("ftdi",),
}


def vendor_ids_for(description: str) -> List[int]:
    """Vendor ids whose keywords appear in a printer name or model."""
    text = description.lower()
    return [vid for vid, words in VENDOR_KEYWORDS.items() if any(word in text for word in words)]


def _make_printer(printer_name: str, width_mm: float, line_count: int) -> QPrinter:
    printer = QPrinter(QPrinter.HighResolution)
    if printer_name:
        printer.setPrinterName(printer_name)
    if not printer.isValid():
        raise PrintFailure(f"Printer not available: {printer_name or 'default'}")

    # Dynamic height to avoid truncation; 60mm base plus 12mm per line.
    height_mm = 60 + (line_count * 12)
    printer.setPaperSize(QSizeF(width_mm, height_mm), QPrinter.Millimeter)
    printer.setFullPage(True)
    return printer


def _print_html(document: QTextDocument, printer_name: str, width_mm: float) -> None:
    line_count = document.toPlainText().count("Qtd:")
    printer = _make_printer(printer_name, width_mm, line_count)
    document.setPageSize(QSizeF(printer.pageRect().size()))
    document.print_(printer)


class ReceiptViewer(QDialog):
    """Separate window showing a receipt, optionally printing it once loaded."""

    def __init__(
        self,
        document: ReceiptDocument,
        printer_name: str,
        width_mm: float,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Nota Fiscal")
        self.resize(400, 600)
        self.printer_name = printer_name
        self.width_mm = width_mm

        self.browser = QTextBrowser()
        self.browser.setHtml(document.html)
        print_button = QPushButton("Imprimir")
        print_button.clicked.connect(self.print_document)

        layout = QVBoxLayout()
        layout.addWidget(self.browser, 1)
        layout.addWidget(print_button)
        self.setLayout(layout)

    def print_receipt(self) -> None:
        _print_html(self.browser.document(), self.printer_name, self.width_mm)

    def print_document(self) -> None:
        try:
            self.print_receipt()
        except PrintFailure as exc:
            logger.error("Receipt viewer could not print: %s", exc)


class QtPrintHost:
    """``PrintHost`` backed by the Qt print system."""

    def __init__(
        self,
        printer_name: Optional[str] = None,
        receipt_width_mm: Optional[float] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        self.printer_name = printer_name if printer_name is not None else config.PRINTER_NAME
        self.receipt_width_mm = receipt_width_mm or config.RECEIPT_WIDTH_MM
        self.parent = parent
        self._viewers: List[ReceiptViewer] = []

    def supports_printing(self) -> bool:
        return bool(QPrinterInfo.availablePrinterNames())

    def supports_device_enumeration(self) -> bool:
        return True

    def authorized_vendor_ids(self) -> Iterable[int]:
        for info in QPrinterInfo.availablePrinters():
            description = f"{info.printerName()} {info.makeAndModel()}"
            for vendor_id in vendor_ids_for(description):
                yield vendor_id

    def open_viewer(self, document: ReceiptDocument, *, print_on_load: bool, auto_close: bool) -> bool:
        """Show ``document`` in a viewer window.

        With ``print_on_load`` the receipt is printed before returning; a
        PrintFailure closes the viewer and propagates to the caller.
        """
        if QApplication.instance() is None:
            return False
        viewer = ReceiptViewer(document, self.printer_name, self.receipt_width_mm, self.parent)
        viewer.setAttribute(Qt.WA_DeleteOnClose)
        self._viewers.append(viewer)
        viewer.finished.connect(lambda _result, v=viewer: self._forget(v))
        viewer.show()
        if print_on_load:
            try:
                viewer.print_receipt()
            except PrintFailure:
                viewer.close()
                raise
        if auto_close:
            timer = QTimer(viewer)
            timer.setSingleShot(True)
            timer.timeout.connect(viewer.close)
            timer.start(config.RECEIPT_AUTO_CLOSE_MS)
        return True

    def _forget(self, viewer: ReceiptViewer) -> None:
        if viewer in self._viewers:
            self._viewers.remove(viewer)

    def inject(self, document: ReceiptDocument) -> QTextDocument:
        text_document = QTextDocument()
        text_document.setHtml(document.html)
        return text_document

    def print_current(self, handle: QTextDocument) -> None:
        _print_html(handle, self.printer_name, self.receipt_width_mm)

    def remove(self, handle: QTextDocument) -> None:
        handle.clear()
