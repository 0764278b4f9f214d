"""Tests for models built from backend JSON."""

from __future__ import annotations

from decimal import Decimal

import pytest

from pdv.models import Product, SaleRecord, SalesReport, User, stock_status
from pdv.models.sale import PaymentMethod, payment_label


def test_product_from_api_converts_types() -> None:
    product = Product.from_api(
        {
            "id": "7",
            "name": "Arroz 5kg",
            "price": "24.9",
            "stock": "3",
            "barcode": None,
            "min_stock": 5,
            "category_id": None,
        }
    )
    assert product.id == 7
    assert product.price == Decimal("24.90")
    assert product.stock == 3
    assert product.code == "7"
    assert product.category_id is None
    assert product.low_stock


@pytest.mark.parametrize(
    ("stock", "min_stock", "expected"),
    [(0, 10, "SEM ESTOQUE"), (5, 10, "CRÍTICO"), (6, 10, "BAIXO"), (10, 10, "BAIXO")],
)
def test_stock_status(stock: int, min_stock: int, expected: str) -> None:
    product = Product(id=1, name="x", price=Decimal("1"), stock=stock, min_stock=min_stock)
    assert stock_status(product) == expected


def test_user_roles() -> None:
    assert User.from_api({"role": "admin"}).is_manager
    assert User.from_api({"role": "admin"}).is_admin
    assert User.from_api({"role": "manager"}).is_manager
    cashier = User.from_api({})
    assert cashier.role == "cashier"
    assert not cashier.is_manager


def test_payment_labels() -> None:
    assert [m.label for m in PaymentMethod] == ["Dinheiro", "Cartão de Crédito", "Cartão de Débito", "PIX"]
    assert payment_label("cartao_debito") == "Cartão de Débito"
    assert payment_label("cheque") == "cheque"


def test_sale_record_defaults() -> None:
    record = SaleRecord.from_api({"id": 1, "total": 10, "final_total": 10})
    assert record.status == "completed"
    assert record.seller == ""
    assert record.item_count == 0
    assert record.amount_received is None


def test_sales_report_from_api() -> None:
    report = SalesReport.from_api(
        {"total_sales": 4, "total_revenue": 120.5, "average_ticket": 30.125, "cancelled_sales": 1}
    )
    assert report.total_revenue == Decimal("120.50")
    assert report.average_ticket == Decimal("30.13")
    assert report.cancelled_sales == 1
