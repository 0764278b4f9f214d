"""Tests for dialog state and form validation."""

from __future__ import annotations

import pytest

from pdv.forms import DialogState, LoginForm, StockEditForm, validate_login, validate_stock


def test_dialog_state_transitions() -> None:
    closed: DialogState[str] = DialogState.closed()
    assert not closed.is_open
    assert not closed.is_editing

    creating = DialogState.opened()
    assert creating.is_open
    assert not creating.is_editing

    editing = DialogState.opened("produto")
    assert editing.is_editing
    assert editing.entity == "produto"


@pytest.mark.parametrize("text", ["0", "12", " 7 "])
def test_valid_stock(text: str) -> None:
    assert validate_stock(text) == {}


@pytest.mark.parametrize("text", ["", "-1", "1.5", "abc", "٣"])
def test_invalid_stock(text: str) -> None:
    assert validate_stock(text) == {"stock": "Estoque deve ser um número válido e não negativo"}


def test_stock_edit_form() -> None:
    form = StockEditForm(product_id=3, text="5", original=5)
    assert not form.dirty
    form.text = "12"
    assert form.dirty
    assert form.validate()
    assert form.quantity == 12

    form.text = "x"
    assert not form.validate()
    assert "stock" in form.errors


def test_login_validation() -> None:
    assert validate_login("", "") == {"email": "Informe o email", "password": "Informe a senha"}
    assert validate_login("nobody", "x") == {"email": "Email inválido"}

    form = LoginForm(email="caixa@pdv.com", password="123456")
    assert form.validate()
    assert form.errors == {}
