"""Checkout flow of the PDV screen.

``Idle -> Building -> AwaitingPayment -> Submitting -> Completed | Failed``.
A failed submission keeps the cart and returns to ``Building`` so the
operator can retry; the cart is cleared only once the backend confirms.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pdv import config
from pdv.api import ApiClient
from pdv.cart import Cart, validate_discount
from pdv.errors import TransportError, ValidationError
from pdv.log import get_logger
from pdv.models.product import Product
from pdv.models.sale import LineItem, PaymentIntent, PaymentMethod, SaleSnapshot, Totals
from pdv.money import MoneyLike
from pdv.printing.dispatcher import PrintDispatcher
from pdv.printing.receipt import SaleMeta

logger = get_logger(__name__)


class CheckoutState(Enum):
    IDLE = "idle"
    BUILDING = "building"
    AWAITING_PAYMENT = "awaiting_payment"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    FAILED = "failed"


_EDITABLE = (CheckoutState.IDLE, CheckoutState.BUILDING, CheckoutState.COMPLETED, CheckoutState.FAILED)


@dataclass(frozen=True)
class CheckoutResult:
    sale: Dict[str, Any]
    snapshot: SaleSnapshot
    receipt_printed: bool

    @property
    def message(self) -> str:
        if self.receipt_printed:
            return "Venda finalizada com sucesso!"
        return "Venda finalizada com sucesso! Não foi possível imprimir a nota fiscal."


class CheckoutFlow:
    """Drives one checkout screen session: its cart, payment and submission."""

    def __init__(
        self,
        api: ApiClient,
        dispatcher: Optional[PrintDispatcher] = None,
        seller: str = "",
    ) -> None:
        self.api = api
        self.dispatcher = dispatcher
        self.seller = seller
        self.cart = Cart()
        self.discount = Decimal("0")
        self.state = CheckoutState.IDLE
        self.history: List[CheckoutState] = [self.state]
        self.last_error: Optional[str] = None
        self.lookup_in_flight = False

    def _move(self, state: CheckoutState) -> None:
        if state is not self.state:
            logger.debug("Checkout %s -> %s", self.state.value, state.value)
            self.state = state
            self.history.append(state)

    def _sync(self) -> None:
        self._move(CheckoutState.IDLE if self.cart.is_empty else CheckoutState.BUILDING)

    def _require_editable(self) -> None:
        if self.state not in _EDITABLE:
            raise ValidationError("Conclua ou cancele o pagamento antes de alterar o carrinho.")

    def begin_scan(self, barcode: str) -> str:
        """Validate a scanned code and mark a lookup as running.

        Only one lookup runs at a time. Every call that returns must be
        followed by finish_scan or abort_scan.
        """
        code = barcode.strip()
        if not code:
            raise ValidationError("Informe o código de barras.")
        self._require_editable()
        if self.lookup_in_flight:
            raise ValidationError("Aguarde a consulta anterior.")
        self.lookup_in_flight = True
        return code

    def finish_scan(self, product: Product) -> LineItem:
        self.lookup_in_flight = False
        line = self.cart.add_item(product)
        self._sync()
        return line

    def abort_scan(self) -> None:
        self.lookup_in_flight = False

    def scan(self, barcode: str) -> LineItem:
        """Look the code up on the backend and add one unit to the cart."""
        code = self.begin_scan(barcode)
        try:
            product = self.api.product_by_barcode(code)
        except Exception:
            self.abort_scan()
            raise
        return self.finish_scan(product)

    def set_quantity(self, product_id: int, quantity: int) -> None:
        self._require_editable()
        self.cart.set_quantity(product_id, quantity)
        self._sync()

    def remove(self, product_id: int) -> None:
        self._require_editable()
        self.cart.remove_item(product_id)
        self._sync()

    def clear(self) -> None:
        self._require_editable()
        self.cart.clear()
        self.discount = Decimal("0")
        self.last_error = None
        self._move(CheckoutState.IDLE)

    def set_discount(self, percentage: MoneyLike) -> None:
        self.discount = validate_discount(percentage)

    def totals(
        self,
        amount_tendered: MoneyLike = 0,
        payment_method: PaymentMethod = PaymentMethod.CASH,
    ) -> Totals:
        return self.cart.compute_totals(self.discount, amount_tendered, payment_method)

    def open_payment(self) -> None:
        if self.lookup_in_flight:
            raise ValidationError("Aguarde a consulta anterior.")
        if self.state is not CheckoutState.BUILDING or self.cart.is_empty:
            raise ValidationError("Carrinho vazio")
        self._move(CheckoutState.AWAITING_PAYMENT)

    def cancel_payment(self) -> None:
        if self.state is not CheckoutState.AWAITING_PAYMENT:
            raise ValidationError("Nenhum pagamento em andamento.")
        self._sync()

    def submit(self, payment: PaymentIntent) -> CheckoutResult:
        """Post the sale, then clear the cart and print the receipt.

        Raises:
            ValidationError: empty cart or cash below total; nothing is sent.
            TransportError: backend failure; the cart is kept for a retry.
        """
        if self.state is not CheckoutState.AWAITING_PAYMENT:
            raise ValidationError("Abra o pagamento antes de finalizar.")
        snapshot = self.cart.finalize(self.discount, payment)

        self._move(CheckoutState.SUBMITTING)
        try:
            sale = self.api.create_sale(snapshot)
        except TransportError as exc:
            self.last_error = str(exc)
            logger.error("Sale submission failed: %s", exc)
            self._move(CheckoutState.FAILED)
            self._move(CheckoutState.BUILDING)
            raise

        logger.info(
            "Sale %s completed: %s items, total %s",
            sale.get("id"),
            sum(line.quantity for line in snapshot.lines),
            snapshot.totals.total,
        )
        self.cart.clear()
        self.discount = Decimal("0")
        self.last_error = None
        self._move(CheckoutState.COMPLETED)

        printed = False
        if self.dispatcher is not None:
            meta = SaleMeta(
                seller=self.seller or config.DEFAULT_SELLER,
                store_name=config.STORE_NAME,
                sale_id=sale.get("id"),
            )
            printed = self.dispatcher.print_receipt(meta, snapshot.lines, snapshot.totals, snapshot.payment)
            if not printed:
                logger.warning("Receipt for sale %s was not printed", sale.get("id"))
        return CheckoutResult(sale=sale, snapshot=snapshot, receipt_printed=printed)
