"""In-memory cart of the checkout screen."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple

from pdv.errors import InsufficientStock, OutOfStock, ValidationError
from pdv.log import get_logger
from pdv.models.product import Product
from pdv.models.sale import LineItem, PaymentIntent, PaymentMethod, SaleSnapshot, Totals
from pdv.money import ZERO, Money, MoneyLike, round_half_up, to_money

logger = get_logger(__name__)

HUNDRED = Decimal("100")


def validate_discount(percentage: MoneyLike) -> Decimal:
    """Return the discount percentage as a Decimal, rejecting values outside [0, 100]."""
    try:
        value = percentage if isinstance(percentage, Decimal) else Decimal(str(percentage))
    except InvalidOperation:
        raise ValidationError("Desconto inválido.") from None
    if not value.is_finite():
        raise ValidationError("Desconto inválido.")
    if value < 0 or value > HUNDRED:
        raise ValidationError("O desconto deve estar entre 0 e 100%.")
    return value


class Cart:
    """Ordered sale lines keyed by product id.

    Every line keeps ``1 <= quantity <= stock_ceiling``. Operations that would
    break this raise a ``StockConflict`` and leave the cart untouched.
    """

    def __init__(self) -> None:
        self._lines: Dict[int, LineItem] = {}

    @property
    def lines(self) -> Tuple[LineItem, ...]:
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def last_line(self) -> Optional[LineItem]:
        if not self._lines:
            return None
        return next(reversed(self._lines.values()))

    def __len__(self) -> int:
        return len(self._lines)

    def get(self, product_id: int) -> Optional[LineItem]:
        return self._lines.get(product_id)

    def add_item(self, product: Product) -> LineItem:
        """Add one unit of ``product``, merging with its existing line."""
        line = self._lines.get(product.id)
        if line is not None:
            if line.quantity + 1 > product.stock:
                logger.info("Insufficient stock for product %s (%s available)", product.id, product.stock)
                raise InsufficientStock(
                    f"Estoque insuficiente. Disponível: {product.stock}",
                    product_id=product.id,
                    available=product.stock,
                )
            line.quantity += 1
            line.stock_ceiling = product.stock
            return line

        if product.stock <= 0:
            logger.info("Product %s is out of stock", product.id)
            raise OutOfStock(
                "Produto sem estoque disponível",
                product_id=product.id,
                available=product.stock,
            )
        line = LineItem(
            product_id=product.id,
            name=product.name,
            unit_price=to_money(product.price),
            quantity=1,
            stock_ceiling=product.stock,
            barcode=product.barcode,
        )
        self._lines[product.id] = line
        return line

    def set_quantity(self, product_id: int, quantity: int) -> None:
        """Replace the quantity of a line; zero or less removes it."""
        if quantity <= 0:
            self.remove_item(product_id)
            return
        line = self._lines.get(product_id)
        if line is None:
            return
        if quantity > line.stock_ceiling:
            raise InsufficientStock(
                f"Estoque insuficiente. Disponível: {line.stock_ceiling}",
                product_id=product_id,
                available=line.stock_ceiling,
            )
        line.quantity = quantity

    def remove_item(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def subtotal(self) -> Money:
        return sum((line.line_total for line in self._lines.values()), ZERO)

    def compute_totals(
        self,
        discount_percentage: MoneyLike = 0,
        amount_tendered: MoneyLike = 0,
        payment_method: PaymentMethod = PaymentMethod.CASH,
    ) -> Totals:
        """Derive subtotal, discount, total and change without touching the cart."""
        percentage = validate_discount(discount_percentage)
        subtotal = self.subtotal()
        discount_amount = round_half_up(subtotal * percentage / HUNDRED)
        total = max(ZERO, subtotal - discount_amount)
        change = ZERO
        if payment_method is PaymentMethod.CASH:
            change = max(ZERO, to_money(amount_tendered) - total)
        return Totals(
            subtotal=subtotal,
            discount_percentage=percentage,
            discount_amount=discount_amount,
            total=total,
            change=change,
        )

    def validate_payment(self, totals: Totals, payment: PaymentIntent) -> None:
        if self.is_empty:
            raise ValidationError("Carrinho vazio")
        if payment.is_cash and to_money(payment.amount_tendered) < totals.total:
            raise ValidationError("Valor recebido insuficiente")

    def finalize(self, discount_percentage: MoneyLike, payment: PaymentIntent) -> SaleSnapshot:
        """Freeze the cart for submission and printing. Does not clear it."""
        totals = self.compute_totals(discount_percentage, payment.amount_tendered, payment.method)
        self.validate_payment(totals, payment)
        lines: List[LineItem] = [replace(line) for line in self._lines.values()]
        return SaleSnapshot(lines=tuple(lines), totals=totals, payment=payment)
