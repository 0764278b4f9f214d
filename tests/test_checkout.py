"""Tests for the checkout flow state machine."""

from __future__ import annotations

from decimal import Decimal

import pytest

from fakes import FakeApi, FakePrintHost, make_product
from pdv.checkout import CheckoutFlow, CheckoutState
from pdv.errors import InsufficientStock, TransportError, ValidationError
from pdv.models.sale import PaymentIntent, PaymentMethod
from pdv.printing.dispatcher import PrintDispatcher


def _flow(host: FakePrintHost | None = None) -> CheckoutFlow:
    api = FakeApi(
        {
            "111": make_product(1, "15.50", stock=5, barcode="111"),
            "222": make_product(2, "8.75", stock=5, barcode="222"),
            "333": make_product(3, "1.00", stock=1, barcode="333"),
        }
    )
    dispatcher = PrintDispatcher(host or FakePrintHost())
    return CheckoutFlow(api, dispatcher, seller="Maria")


def _scan_sample(flow: CheckoutFlow) -> None:
    flow.scan("111")
    flow.scan(" 111 ")
    flow.scan("222")


def test_scan_moves_from_idle_to_building() -> None:
    flow = _flow()
    assert flow.state is CheckoutState.IDLE
    line = flow.scan("111")
    assert line.quantity == 1
    assert flow.state is CheckoutState.BUILDING


def test_scan_blank_code_is_rejected() -> None:
    flow = _flow()
    with pytest.raises(ValidationError):
        flow.scan("   ")
    assert flow.cart.is_empty


def test_scan_unknown_code_keeps_cart() -> None:
    flow = _flow()
    flow.scan("111")
    with pytest.raises(TransportError):
        flow.scan("999")
    assert len(flow.cart) == 1
    assert flow.lookup_in_flight is False


def test_second_lookup_waits_for_the_first() -> None:
    flow = _flow()
    code = flow.begin_scan(" 111 ")
    assert code == "111"
    assert flow.lookup_in_flight

    with pytest.raises(ValidationError, match="Aguarde"):
        flow.begin_scan("222")
    with pytest.raises(ValidationError, match="Aguarde"):
        flow.open_payment()

    flow.finish_scan(flow.api.product_by_barcode(code))
    assert not flow.lookup_in_flight
    assert flow.state is CheckoutState.BUILDING
    flow.scan("222")
    assert len(flow.cart) == 2


def test_aborted_lookup_releases_scanner() -> None:
    flow = _flow()
    flow.begin_scan("999")
    flow.abort_scan()
    assert not flow.lookup_in_flight
    assert flow.cart.is_empty
    assert flow.scan("111").quantity == 1


def test_scan_over_stock_raises_stock_conflict() -> None:
    flow = _flow()
    flow.scan("333")
    with pytest.raises(InsufficientStock):
        flow.scan("333")
    assert flow.cart.get(3).quantity == 1


def test_removing_last_line_returns_to_idle() -> None:
    flow = _flow()
    flow.scan("111")
    flow.remove(1)
    assert flow.state is CheckoutState.IDLE


def test_successful_submit_clears_cart_and_prints(fake_host: FakePrintHost) -> None:
    flow = _flow(fake_host)
    _scan_sample(flow)
    flow.set_discount(10)
    flow.open_payment()

    result = flow.submit(PaymentIntent(PaymentMethod.CASH, Decimal("50.00")))

    assert result.sale["id"] == 100
    assert result.receipt_printed is True
    assert result.snapshot.totals.change == Decimal("14.23")
    assert flow.cart.is_empty
    assert flow.discount == Decimal("0")
    assert flow.state is CheckoutState.COMPLETED
    assert flow.history[-3:] == [
        CheckoutState.AWAITING_PAYMENT,
        CheckoutState.SUBMITTING,
        CheckoutState.COMPLETED,
    ]
    html = fake_host.viewer_documents[0].html
    assert "Maria" in html
    assert "Venda Nº:" in html


def test_submitted_payload_matches_snapshot() -> None:
    flow = _flow()
    _scan_sample(flow)
    flow.open_payment()
    flow.submit(PaymentIntent(PaymentMethod.CREDIT_CARD))

    payload = flow.api.sales[0].to_payload()
    assert payload["payment_method"] == "cartao_credito"
    assert payload["amount_received"] == 39.75
    assert payload["items"] == [
        {"product_id": 1, "quantity": 2, "unit_price": 15.5},
        {"product_id": 2, "quantity": 1, "unit_price": 8.75},
    ]


def test_transport_failure_keeps_cart_for_retry() -> None:
    flow = _flow()
    _scan_sample(flow)
    flow.api.sale_error = TransportError("Erro no servidor. Tente novamente mais tarde.", status_code=500)
    flow.open_payment()

    with pytest.raises(TransportError):
        flow.submit(PaymentIntent(PaymentMethod.PIX))

    assert flow.cart.item_count == 3
    assert flow.state is CheckoutState.BUILDING
    assert flow.history[-2:] == [CheckoutState.FAILED, CheckoutState.BUILDING]
    assert flow.last_error.startswith("Erro no servidor")

    flow.api.sale_error = None
    flow.open_payment()
    result = flow.submit(PaymentIntent(PaymentMethod.PIX))
    assert result.sale["id"] == 100
    assert flow.cart.is_empty


def test_print_failure_does_not_fail_sale() -> None:
    host = FakePrintHost(viewer=False, print_error=RuntimeError("paper jam"))
    flow = _flow(host)
    _scan_sample(flow)
    flow.open_payment()

    result = flow.submit(PaymentIntent(PaymentMethod.DEBIT_CARD))

    assert result.receipt_printed is False
    assert "Não foi possível imprimir" in result.message
    assert flow.state is CheckoutState.COMPLETED
    assert len(flow.api.sales) == 1


def test_short_cash_is_rejected_before_submission() -> None:
    flow = _flow()
    _scan_sample(flow)
    flow.open_payment()
    with pytest.raises(ValidationError, match="Valor recebido insuficiente"):
        flow.submit(PaymentIntent(PaymentMethod.CASH, Decimal("20")))
    assert flow.api.sales == []
    assert flow.state is CheckoutState.AWAITING_PAYMENT


def test_cart_is_locked_while_awaiting_payment() -> None:
    flow = _flow()
    flow.scan("111")
    flow.open_payment()
    with pytest.raises(ValidationError):
        flow.scan("222")
    with pytest.raises(ValidationError):
        flow.set_quantity(1, 2)
    flow.cancel_payment()
    assert flow.state is CheckoutState.BUILDING
    flow.scan("222")


def test_invalid_transitions_are_rejected() -> None:
    flow = _flow()
    with pytest.raises(ValidationError):
        flow.open_payment()
    with pytest.raises(ValidationError):
        flow.cancel_payment()
    with pytest.raises(ValidationError):
        flow.submit(PaymentIntent())


def test_totals_follow_discount() -> None:
    flow = _flow()
    _scan_sample(flow)
    flow.set_discount("10")
    totals = flow.totals(Decimal("50"), PaymentMethod.CASH)
    assert totals.total == Decimal("35.77")
    with pytest.raises(ValidationError):
        flow.set_discount(150)
    assert flow.discount == Decimal("10")


def test_clear_resets_discount_and_state() -> None:
    flow = _flow()
    _scan_sample(flow)
    flow.set_discount(5)
    flow.clear()
    assert flow.cart.is_empty
    assert flow.discount == Decimal("0")
    assert flow.state is CheckoutState.IDLE
