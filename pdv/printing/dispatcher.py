"""Printer probing and receipt print dispatch.

Printing is attempted in order:

1. open the receipt in its own viewer window and print once it is loaded;
2. if the viewer is refused or fails, print the document in place;
3. if both fail, report ``False``.

Nothing here raises to the caller: every failure becomes a ``False`` result
plus a logged diagnostic. A failed print never undoes a confirmed sale.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional, Protocol

from pdv.log import get_logger
from pdv.models.sale import LineItem, PaymentIntent, PaymentMethod, Totals
from pdv.printing.receipt import ReceiptDocument, SaleMeta, render_receipt

logger = get_logger(__name__)

# USB vendor ids of known thermal printer makers.
THERMAL_PRINTER_VENDORS = {
    0x04B8: "Epson",
    0x0519: "Star Micronics",
    0x0FE6: "ICS Advent",
    0x20D1: "Rongta",
    0x0DD4: "Custom Engineering",
    0x154F: "SNBC",
    0x0483: "STMicroelectronics",
    0x1FC9: "NXP",
    0x1A86: "QinHeng Electronics",
    0x0403: "FTDI",
}


class PrintHost(Protocol):
    """What the dispatcher needs from the environment it prints in."""

    def supports_printing(self) -> bool: ...

    def supports_device_enumeration(self) -> bool: ...

    def authorized_vendor_ids(self) -> Iterable[int]: ...

    def open_viewer(self, document: ReceiptDocument, *, print_on_load: bool, auto_close: bool) -> bool:
        """Show ``document`` in its own window. ``False`` means the window was refused."""
        ...

    def inject(self, document: ReceiptDocument) -> Any: ...

    def print_current(self, handle: Any) -> None: ...

    def remove(self, handle: Any) -> None: ...


@dataclass(frozen=True)
class PrinterCapability:
    generic_print_available: bool
    thermal_device_detected: bool

    @property
    def message(self) -> str:
        if self.thermal_device_detected:
            return (
                "Impressora térmica detectada! As notas fiscais serão impressas "
                "automaticamente na impressora térmica."
            )
        if self.generic_print_available:
            return (
                "Sistema de impressão disponível. As notas fiscais serão enviadas "
                "para a impressora padrão do sistema."
            )
        return (
            "Nenhuma impressora detectada. Verifique se há uma impressora "
            "configurada e conectada ao sistema."
        )


SAMPLE_META = SaleMeta(seller="Teste Sistema")

SAMPLE_LINES = (
    LineItem(
        product_id=1,
        name="Produto Teste 1",
        unit_price=Decimal("15.50"),
        quantity=2,
        stock_ceiling=2,
        barcode="7891234567890",
    ),
    LineItem(
        product_id=2,
        name="Produto Teste 2",
        unit_price=Decimal("8.75"),
        quantity=1,
        stock_ceiling=1,
        barcode="7891234567891",
    ),
)

SAMPLE_TOTALS = Totals(
    subtotal=Decimal("39.75"),
    discount_percentage=Decimal("10"),
    discount_amount=Decimal("3.98"),
    total=Decimal("35.77"),
    change=Decimal("14.23"),
)

SAMPLE_PAYMENT = PaymentIntent(method=PaymentMethod.CASH, amount_tendered=Decimal("50.00"))


class PrintDispatcher:
    """Probe printers and deliver receipts through a ``PrintHost``."""

    def __init__(self, host: PrintHost) -> None:
        self.host = host

    def detect_thermal_printer(self) -> bool:
        try:
            if not self.host.supports_device_enumeration():
                logger.debug("Device enumeration not supported")
                return False
            for vendor_id in self.host.authorized_vendor_ids():
                if vendor_id in THERMAL_PRINTER_VENDORS:
                    logger.info(
                        "Thermal printer detected: vendor %04x (%s)",
                        vendor_id,
                        THERMAL_PRINTER_VENDORS[vendor_id],
                    )
                    return True
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to detect thermal printer: %s", exc)
            return False
        logger.debug("No thermal printer detected")
        return False

    def is_printer_available(self) -> bool:
        try:
            return bool(self.host.supports_printing())
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to check print support: %s", exc)
            return False

    def probe(self) -> PrinterCapability:
        """Fresh capability check; never cached."""
        return PrinterCapability(
            generic_print_available=self.is_printer_available(),
            thermal_device_detected=self.detect_thermal_printer(),
        )

    def print_document(self, document: ReceiptDocument) -> bool:
        """Print ``document`` through the viewer, falling back to in-place printing."""
        if not self.is_printer_available():
            logger.warning("Printing not available")
            return False

        try:
            opened = self.host.open_viewer(document, print_on_load=True, auto_close=True)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Receipt viewer failed, printing in place: %s", exc)
            opened = False
        else:
            if not opened:
                logger.warning("Receipt viewer refused, printing in place")

        if opened:
            return True
        return self._print_in_place(document)

    def _print_in_place(self, document: ReceiptDocument) -> bool:
        handle: Optional[Any] = None
        try:
            handle = self.host.inject(document)
            self.host.print_current(handle)
            return True
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to print receipt in place: %s", exc)
            return False
        finally:
            if handle is not None:
                try:
                    self.host.remove(handle)
                except Exception as exc:  # noqa: BLE001
                    logger.warning("Failed to remove injected receipt: %s", exc)

    def print_receipt(
        self,
        meta: SaleMeta,
        lines: Iterable[LineItem],
        totals: Totals,
        payment: PaymentIntent,
    ) -> bool:
        try:
            document = render_receipt(meta, lines, totals, payment, auto_print=True, auto_close=True)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to render receipt: %s", exc)
            return False
        return self.print_document(document)

    def preview(
        self,
        meta: SaleMeta,
        lines: Iterable[LineItem],
        totals: Totals,
        payment: PaymentIntent,
    ) -> bool:
        """Open the receipt for inspection only: no fallback, no printing."""
        try:
            document = render_receipt(meta, lines, totals, payment, auto_print=False, auto_close=False)
            opened = self.host.open_viewer(document, print_on_load=False, auto_close=False)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Receipt preview unavailable: %s", exc)
            return False
        if not opened:
            logger.warning("Receipt preview refused")
        return bool(opened)

    def test_print(self) -> bool:
        return self.print_receipt(SAMPLE_META, SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT)

    def preview_sample(self) -> bool:
        return self.preview(SAMPLE_META, SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT)
