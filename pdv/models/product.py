"""Dataclasses representing products and users as the backend sends them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pdv.money import Money, to_money


def _to_int(value: Any, default: int = 0) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Product:
    id: int
    name: str
    price: Money
    stock: int
    barcode: str = ""
    min_stock: int = 0
    unit: str = "un"
    active: bool = True
    category_id: Optional[int] = None

    @property
    def low_stock(self) -> bool:
        return self.stock <= self.min_stock

    @property
    def code(self) -> str:
        """Code printed on receipts: the barcode, or the id when there is none."""
        return self.barcode or str(self.id)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Product":
        return cls(
            id=_to_int(data.get("id")),
            name=str(data.get("name") or ""),
            price=to_money(data.get("price")),
            stock=_to_int(data.get("stock")),
            barcode=str(data.get("barcode") or ""),
            min_stock=_to_int(data.get("min_stock")),
            unit=str(data.get("unit") or "un"),
            active=bool(data.get("active", True)),
            category_id=_to_int(data.get("category_id"), default=0) or None,
        )


def stock_status(product: Product) -> str:
    """Label used by the low-stock list."""
    if product.stock == 0:
        return "SEM ESTOQUE"
    if product.stock <= product.min_stock / 2:
        return "CRÍTICO"
    return "BAIXO"


@dataclass
class User:
    id: int
    name: str
    email: str
    role: str = "cashier"
    active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_manager(self) -> bool:
        return self.role in ("manager", "admin")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=_to_int(data.get("id")),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            role=str(data.get("role") or "cashier"),
            active=bool(data.get("active", True)),
        )
