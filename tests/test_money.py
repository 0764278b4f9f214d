"""Tests for money formatting and parsing."""

from __future__ import annotations

from decimal import Decimal

import pytest

from pdv.money import (
    CurrencyFormat,
    format_currency,
    format_for_editing,
    parse_currency,
    round_half_up,
    to_money,
)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (Decimal("0"), "R$ 0,00"),
        (Decimal("12.5"), "R$ 12,50"),
        (Decimal("1234.56"), "R$ 1.234,56"),
        (Decimal("1234567.8"), "R$ 1.234.567,80"),
        (15.5, "R$ 15,50"),
        (3, "R$ 3,00"),
    ],
)
def test_format_currency(amount, expected: str) -> None:
    assert format_currency(amount) == expected


def test_format_currency_negative_and_none() -> None:
    assert format_currency(Decimal("-3.5")) == "-R$ 3,50"
    assert format_currency(None) == "R$ 0,00"


@pytest.mark.parametrize("amount", ["0", "0.01", "12.50", "999.99", "1234.56", "1000000.00"])
def test_parse_reverses_format(amount: str) -> None:
    value = Decimal(amount)
    assert parse_currency(format_currency(value)) == value


def test_format_is_stable_after_parse() -> None:
    once = format_currency(Decimal("1234.5"))
    assert format_currency(parse_currency(once)) == once


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("", Decimal("0")),
        (None, Decimal("0")),
        ("abc", Decimal("0")),
        ("R$", Decimal("0")),
        ("12,", Decimal("12")),
        ("12,5", Decimal("12.50")),
        ("  R$ 1.234,56 ", Decimal("1234.56")),
        ("0,005", Decimal("0.01")),
    ],
)
def test_parse_is_lenient(text, expected: Decimal) -> None:
    assert parse_currency(text) == expected


def test_parse_garbage_after_normalization_is_zero() -> None:
    assert parse_currency("1,2,3") == Decimal("0")


def test_round_half_up_rounds_halves_away_from_zero() -> None:
    assert round_half_up(Decimal("3.975")) == Decimal("3.98")
    assert round_half_up(Decimal("0.005")) == Decimal("0.01")
    assert round_half_up(Decimal("0.004")) == Decimal("0.00")


def test_to_money_keeps_float_digits() -> None:
    assert to_money(8.75) == Decimal("8.75")
    assert to_money("15.5") == Decimal("15.50")
    assert to_money("not a number") == Decimal("0")
    assert to_money(None) == Decimal("0")


def test_format_for_editing_drops_symbol_and_trailing_zeros() -> None:
    assert format_for_editing(Decimal("12.50")) == "12,5"
    assert format_for_editing(Decimal("1234.00")) == "1234"
    assert format_for_editing(Decimal("0")) == ""


def test_custom_format_symbol_last() -> None:
    fmt = CurrencyFormat(symbol="€", decimal_sep=",", thousands_sep=" ", symbol_first=False)
    text = format_currency(Decimal("1234.5"), fmt)
    assert text == "1 234,50 €"
    assert parse_currency(text, fmt) == Decimal("1234.50")
