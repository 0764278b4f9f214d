"""Dataclasses shared by the cart, the API client and the screens."""

from pdv.models.product import Product, User, stock_status
from pdv.models.sale import (
    LineItem,
    PaymentIntent,
    PaymentMethod,
    SaleRecord,
    SaleSnapshot,
    SalesReport,
    Totals,
)

__all__ = [
    "LineItem",
    "PaymentIntent",
    "PaymentMethod",
    "Product",
    "SaleRecord",
    "SaleSnapshot",
    "SalesReport",
    "Totals",
    "User",
    "stock_status",
]
