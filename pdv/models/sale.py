"""Sale data models: cart lines, payment, totals and backend records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pdv.money import ZERO, Money, to_money


class PaymentMethod(str, Enum):
    CASH = "dinheiro"
    CREDIT_CARD = "cartao_credito"
    DEBIT_CARD = "cartao_debito"
    PIX = "pix"

    @property
    def label(self) -> str:
        return _PAYMENT_LABELS[self]


_PAYMENT_LABELS = {
    PaymentMethod.CASH: "Dinheiro",
    PaymentMethod.CREDIT_CARD: "Cartão de Crédito",
    PaymentMethod.DEBIT_CARD: "Cartão de Débito",
    PaymentMethod.PIX: "PIX",
}


def payment_label(method: str) -> str:
    """Label for a wire value; unknown values are shown as they came."""
    try:
        return PaymentMethod(method).label
    except ValueError:
        return method


@dataclass
class LineItem:
    product_id: int
    name: str
    unit_price: Money
    quantity: int
    stock_ceiling: int
    barcode: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    @property
    def code(self) -> str:
        return self.barcode or str(self.product_id)


@dataclass(frozen=True)
class PaymentIntent:
    method: PaymentMethod = PaymentMethod.CASH
    amount_tendered: Money = ZERO

    @property
    def is_cash(self) -> bool:
        return self.method is PaymentMethod.CASH


@dataclass(frozen=True)
class Totals:
    subtotal: Money
    discount_percentage: Money
    discount_amount: Money
    total: Money
    change: Money


@dataclass(frozen=True)
class SaleSnapshot:
    """What gets posted to the backend and printed; taken at finalization."""

    lines: Tuple[LineItem, ...]
    totals: Totals
    payment: PaymentIntent

    def to_payload(self) -> Dict[str, Any]:
        """Body for ``POST /sales/``."""
        received = self.payment.amount_tendered if self.payment.is_cash else self.totals.total
        return {
            "items": [
                {
                    "product_id": int(line.product_id),
                    "quantity": int(line.quantity),
                    "unit_price": float(line.unit_price),
                }
                for line in self.lines
            ],
            "payment_method": self.payment.method.value,
            "discount_percentage": float(self.totals.discount_percentage),
            "amount_received": float(received),
        }


@dataclass
class SaleRecord:
    """A row of the sales listing."""

    id: int
    total: Money
    discount: Money
    final_total: Money
    payment_type: str
    status: str
    created_at: str
    seller: str = ""
    amount_received: Optional[Money] = None
    change: Optional[Money] = None
    item_count: int = 0

    @property
    def payment_label(self) -> str:
        return payment_label(self.payment_type)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SaleRecord":
        user = data.get("user") or {}
        items: List[Dict[str, Any]] = data.get("sale_items") or []
        received = data.get("amount_received")
        change = data.get("change")
        return cls(
            id=int(data.get("id") or 0),
            total=to_money(data.get("total")),
            discount=to_money(data.get("discount")),
            final_total=to_money(data.get("final_total")),
            payment_type=str(data.get("payment_type") or ""),
            status=str(data.get("status") or "completed"),
            created_at=str(data.get("created_at") or ""),
            seller=str(user.get("name") or ""),
            amount_received=to_money(received) if received is not None else None,
            change=to_money(change) if change is not None else None,
            item_count=sum(int(item.get("quantity") or 0) for item in items),
        )


@dataclass
class SalesReport:
    total_sales: int = 0
    total_revenue: Money = ZERO
    average_ticket: Money = ZERO
    cancelled_sales: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SalesReport":
        return cls(
            total_sales=int(data.get("total_sales") or 0),
            total_revenue=to_money(data.get("total_revenue")),
            average_ticket=to_money(data.get("average_ticket")),
            cancelled_sales=int(data.get("cancelled_sales") or 0),
        )
