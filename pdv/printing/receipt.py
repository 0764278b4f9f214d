"""Receipt rendering as a self-contained HTML document."""

from __future__ import annotations

import html
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from pdv import config
from pdv.models.sale import LineItem, PaymentIntent, Totals
from pdv.money import format_currency

RECEIPT_STYLE = """
    @media print {
      body { margin: 0; padding: 20px; font-family: 'Courier New', monospace; }
      .no-print { display: none; }
    }
    body { font-family: 'Courier New', monospace; font-size: 12px; line-height: 1.4;
           max-width: 300px; margin: 0 auto; padding: 20px; }
    .header { text-align: center; border-bottom: 2px solid #000; padding-bottom: 10px; margin-bottom: 15px; }
    .company-name { font-size: 16px; font-weight: bold; margin-bottom: 5px; }
    .receipt-title { font-size: 14px; font-weight: bold; margin: 10px 0; }
    .items-header { border-top: 1px solid #000; border-bottom: 1px solid #000;
                    padding: 5px 0; font-weight: bold; margin: 10px 0; }
    .item-name { font-weight: bold; }
    .item-code { font-size: 10px; color: #666; }
    table { width: 100%; border-collapse: collapse; }
    td { padding: 1px 0; }
    td.value { text-align: right; }
    .totals { border-top: 2px solid #000; padding-top: 10px; margin-top: 15px; }
    .final-total td { font-weight: bold; font-size: 14px; border-top: 1px solid #000; padding-top: 5px; }
    .payment-info { margin: 10px 0; padding: 5px 0; border-top: 1px solid #000; }
    .footer { text-align: center; margin-top: 20px; padding-top: 10px; border-top: 1px solid #000; font-size: 10px; }
"""


@dataclass(frozen=True)
class SaleMeta:
    seller: str = config.DEFAULT_SELLER
    store_name: str = config.STORE_NAME
    sale_id: Optional[int] = None


@dataclass(frozen=True)
class ReceiptDocument:
    html: str
    rendered_at: datetime


def _e(value: object) -> str:
    return html.escape(str(value))


def _row(label: str, value: str, css_class: str = "") -> str:
    attr = f" class='{css_class}'" if css_class else ""
    return f"<tr{attr}><td>{_e(label)}</td><td class='value'>{_e(value)}</td></tr>"


def _format_percentage(value: Decimal) -> str:
    return format(value.normalize(), "f").replace(".", ",")


def _print_script(auto_close: bool) -> str:
    close = (
        f"\n    setTimeout(function () {{ window.close(); }}, {config.RECEIPT_AUTO_CLOSE_MS});"
        if auto_close
        else ""
    )
    return f"""<script>
  window.onload = function () {{
    window.print();{close}
  }};
</script>"""


def render_receipt(
    meta: SaleMeta,
    lines: Iterable[LineItem],
    totals: Totals,
    payment: PaymentIntent,
    *,
    auto_print: bool = True,
    auto_close: bool = True,
    now: Optional[datetime] = None,
) -> ReceiptDocument:
    """Build the printable receipt for a finalized sale.

    The timestamp is taken here, so it reflects when the receipt was printed.
    Line totals are recomputed from unit price and quantity.
    """
    rendered_at = now or datetime.now()
    stamp = rendered_at.strftime("%d/%m/%Y %H:%M:%S")

    items: List[str] = []
    for index, line in enumerate(lines, start=1):
        line_total = line.unit_price * line.quantity
        items.append(
            "<div class='item-line'>"
            f"<div class='item-name'>{index}. {_e(line.name)}</div>"
            "<table><tr>"
            f"<td>Qtd: {line.quantity}</td>"
            f"<td>Unit: {_e(format_currency(line.unit_price))}</td>"
            f"<td class='value'>Total: {_e(format_currency(line_total))}</td>"
            "</tr></table>"
            f"<div class='item-code'>Cód: {_e(line.code)}</div>"
            "</div>"
        )

    totals_rows = [_row("Subtotal:", format_currency(totals.subtotal))]
    if totals.discount_amount != 0:
        totals_rows.append(
            _row(
                f"Desconto ({_format_percentage(totals.discount_percentage)}%):",
                f"- {format_currency(totals.discount_amount)}",
            )
        )
    totals_rows.append(_row("TOTAL:", format_currency(totals.total), "final-total"))

    payment_rows = [_row("Forma de Pagamento:", payment.method.label)]
    if payment.is_cash:
        payment_rows.append(_row("Valor Recebido:", format_currency(payment.amount_tendered)))
        payment_rows.append(_row("Troco:", format_currency(totals.change)))

    sale_line = _row("Venda Nº:", str(meta.sale_id)) if meta.sale_id is not None else ""
    script = _print_script(auto_close) if auto_print else ""

    document = f"""<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>Cupom - Venda</title>
<style>{RECEIPT_STYLE}</style>
</head>
<body>
<div class="header">
  <div class="company-name">{_e(meta.store_name)}</div>
  <div>Ponto de Venda</div>
  <div class="receipt-title">CUPOM FISCAL</div>
</div>
<table>
  {_row("Data/Hora:", stamp)}
  {_row("Vendedor:", meta.seller or config.DEFAULT_SELLER)}
  {sale_line}
</table>
<div class="items-header">ITENS DA VENDA</div>
{''.join(items)}
<div class="totals"><table>{''.join(totals_rows)}</table></div>
<div class="payment-info"><table>{''.join(payment_rows)}</table></div>
<div class="footer">
  <div>Obrigado pela preferência!</div>
  <div>{_e(meta.store_name)} - {stamp}</div>
</div>
{script}
</body>
</html>
"""
    return ReceiptDocument(html=document, rendered_at=rendered_at)
