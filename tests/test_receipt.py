"""Tests for receipt rendering."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pdv.models.sale import LineItem, PaymentIntent, PaymentMethod, Totals
from pdv.printing.dispatcher import SAMPLE_LINES, SAMPLE_META, SAMPLE_PAYMENT, SAMPLE_TOTALS
from pdv.printing.receipt import SaleMeta, render_receipt

NOW = datetime(2024, 3, 5, 14, 7, 9)


def _no_discount_totals() -> Totals:
    return Totals(
        subtotal=Decimal("39.75"),
        discount_percentage=Decimal("0"),
        discount_amount=Decimal("0"),
        total=Decimal("39.75"),
        change=Decimal("0"),
    )


def test_sample_receipt_contains_all_sections() -> None:
    doc = render_receipt(SAMPLE_META, SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT, now=NOW)

    assert doc.rendered_at == NOW
    assert "CUPOM FISCAL" in doc.html
    assert "05/03/2024 14:07:09" in doc.html
    assert "Teste Sistema" in doc.html
    assert "1. Produto Teste 1" in doc.html
    assert "Qtd: 2" in doc.html
    assert "Total: R$ 31,00" in doc.html
    assert "Cód: 7891234567890" in doc.html
    assert "Desconto (10%):" in doc.html
    assert "- R$ 3,98" in doc.html
    assert "R$ 35,77" in doc.html
    assert "Valor Recebido:" in doc.html
    assert "R$ 14,23" in doc.html
    assert "Obrigado pela preferência!" in doc.html


def test_discount_row_omitted_when_zero() -> None:
    doc = render_receipt(SAMPLE_META, SAMPLE_LINES, _no_discount_totals(), SAMPLE_PAYMENT, now=NOW)
    assert "Desconto" not in doc.html


def test_non_cash_receipt_has_no_change_rows() -> None:
    payment = PaymentIntent(PaymentMethod.PIX)
    doc = render_receipt(SAMPLE_META, SAMPLE_LINES, _no_discount_totals(), payment, now=NOW)
    assert "PIX" in doc.html
    assert "Valor Recebido" not in doc.html
    assert "Troco" not in doc.html


def test_line_total_is_recomputed_from_price_and_quantity() -> None:
    line = LineItem(product_id=9, name="Caneta", unit_price=Decimal("1.25"), quantity=4, stock_ceiling=10)
    doc = render_receipt(SaleMeta(), [line], _no_discount_totals(), SAMPLE_PAYMENT, now=NOW)
    assert "Total: R$ 5,00" in doc.html
    # no barcode falls back to the product id
    assert "Cód: 9" in doc.html


def test_text_is_html_escaped() -> None:
    line = LineItem(
        product_id=1,
        name="<b>Pão & Leite</b>",
        unit_price=Decimal("2"),
        quantity=1,
        stock_ceiling=1,
    )
    meta = SaleMeta(seller="<script>x</script>", store_name="Loja \"A\"")
    doc = render_receipt(meta, [line], _no_discount_totals(), SAMPLE_PAYMENT, now=NOW)
    assert "&lt;b&gt;Pão &amp; Leite&lt;/b&gt;" in doc.html
    assert "&lt;script&gt;x&lt;/script&gt;" in doc.html
    assert "Loja &quot;A&quot;" in doc.html


def test_print_script_respects_flags() -> None:
    auto = render_receipt(SAMPLE_META, SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT, now=NOW)
    assert "window.print()" in auto.html
    assert "window.close()" in auto.html

    keep_open = render_receipt(SAMPLE_META, SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT, auto_close=False, now=NOW)
    assert "window.print()" in keep_open.html
    assert "window.close()" not in keep_open.html

    preview = render_receipt(SAMPLE_META, SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT, auto_print=False, now=NOW)
    assert "<script>" not in preview.html


def test_sale_id_line_only_when_known() -> None:
    without = render_receipt(SaleMeta(), SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT, now=NOW)
    assert "Venda Nº" not in without.html
    with_id = render_receipt(SaleMeta(sale_id=42), SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT, now=NOW)
    assert "Venda Nº:" in with_id.html
    assert ">42<" in with_id.html
