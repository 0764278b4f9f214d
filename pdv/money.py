"""Money values and their locale formatting.

Amounts are ``Decimal`` values quantized to the currency's minor unit, so
repeated additions and percentage discounts never drift the way binary floats
do. Formatting follows the configured locale (``R$ 1.234,56`` by default).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from pdv import config

Money = Decimal

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyLike = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class CurrencyFormat:
    symbol: str = config.CURRENCY_SYMBOL
    decimal_sep: str = config.DECIMAL_SEPARATOR
    thousands_sep: str = config.THOUSANDS_SEPARATOR
    symbol_first: bool = True
    symbol_spacing: str = " "


DEFAULT_FORMAT = CurrencyFormat()


def round_half_up(value: Decimal) -> Money:
    """Round to the minor unit, halves away from zero."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_money(value: Optional[MoneyLike]) -> Money:
    """Convert a number coming from JSON, user code or a Decimal into Money."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return round_half_up(value)
    if isinstance(value, float):
        # str() keeps 15.5 as "15.5" instead of its binary expansion
        value = str(value)
    try:
        return round_half_up(Decimal(value))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO


def format_currency(amount: Optional[MoneyLike], fmt: Optional[CurrencyFormat] = None) -> str:
    """Return ``amount`` in the locale currency style, e.g. ``R$ 1.234,56``."""
    fmt = fmt or DEFAULT_FORMAT
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    integral, _, fraction = str(abs(value)).partition(".")
    grouped = f"{int(integral):,}".replace(",", fmt.thousands_sep)
    number = f"{grouped}{fmt.decimal_sep}{fraction or '00'}"
    if fmt.symbol_first:
        return f"{sign}{fmt.symbol}{fmt.symbol_spacing}{number}"
    return f"{sign}{number}{fmt.symbol_spacing}{fmt.symbol}"


def parse_currency(text: Optional[str], fmt: Optional[CurrencyFormat] = None) -> Money:
    """Turn user or formatted text back into Money.

    Never raises: empty, partial or malformed input parses to zero, so a
    half-typed value cannot break the screen.
    """
    if not text:
        return ZERO
    fmt = fmt or DEFAULT_FORMAT
    clean = str(text).replace(fmt.symbol, "")
    clean = re.sub(r"\s+", "", clean)
    clean = clean.replace(fmt.thousands_sep, "").replace(fmt.decimal_sep, ".")
    clean = re.sub(r"[^0-9.]", "", clean)
    if clean.endswith("."):
        clean = clean[:-1]
    if not clean:
        return ZERO
    try:
        return round_half_up(Decimal(clean))
    except InvalidOperation:
        return ZERO


def format_for_editing(amount: Optional[MoneyLike], fmt: Optional[CurrencyFormat] = None) -> str:
    """Raw text shown while a money field has focus (``12.50`` -> ``12,5``)."""
    fmt = fmt or DEFAULT_FORMAT
    value = to_money(amount)
    if value == 0:
        return ""
    text = format(value.normalize(), "f")
    return text.replace(".", fmt.decimal_sep)
