"""Editing state machines behind the money and quantity fields.

They know nothing about Qt: the widgets in ``pdv.ui.widgets`` forward focus
and text events here and display whatever ``display_text`` says.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from pdv.money import (
    DEFAULT_FORMAT,
    ZERO,
    CurrencyFormat,
    Money,
    format_currency,
    format_for_editing,
    parse_currency,
    to_money,
)

ChangeCallback = Callable[[Money], None]


class CurrencyInputController:
    """Raw numeric text while focused, formatted currency while blurred."""

    def __init__(
        self,
        value: Money = ZERO,
        on_change: Optional[ChangeCallback] = None,
        on_blur: Optional[Callable[[], None]] = None,
        fmt: Optional[CurrencyFormat] = None,
    ) -> None:
        self.fmt = fmt or DEFAULT_FORMAT
        self.value: Money = to_money(value)
        self.has_focus = False
        self.on_change = on_change
        self.on_blur = on_blur
        self.display_text = self._blurred_text(self.value)

    def _blurred_text(self, value: Money) -> str:
        return format_currency(value, self.fmt) if value > 0 else ""

    def _clean(self, text: str) -> str:
        sep = self.fmt.decimal_sep
        allowed = re.escape("0123456789" + sep + ".")
        clean = re.sub(f"[^{allowed}]", "", text).replace(".", sep)
        if clean.count(sep) > 1:
            head, *rest = clean.split(sep)
            clean = head + sep + "".join(rest)
        if clean.startswith(sep):
            clean = "0" + clean
        return clean

    def focus_in(self) -> None:
        self.has_focus = True
        self.display_text = format_for_editing(self.value, self.fmt)

    def text_edited(self, text: str) -> Money:
        """Filter the typed text and propagate its value immediately."""
        self.display_text = self._clean(text)
        self.value = parse_currency(self.display_text, self.fmt)
        if self.on_change:
            self.on_change(self.value)
        return self.value

    def focus_out(self) -> None:
        self.has_focus = False
        self.display_text = self._blurred_text(self.value)
        if self.on_blur:
            self.on_blur()

    def set_value(self, amount: Money) -> None:
        """Update from the outside (e.g. the parent resetting the field)."""
        amount = to_money(amount)
        if self.has_focus:
            # typing "12," already means 12; rewriting it would move the cursor
            if amount != self.value:
                self.display_text = format_for_editing(amount, self.fmt)
        else:
            self.display_text = self._blurred_text(amount)
        self.value = amount


class NumberInputController:
    """Integer field clamped to ``[minimum, maximum]``."""

    def __init__(
        self,
        value: int = 0,
        minimum: Optional[int] = 0,
        maximum: Optional[int] = None,
        on_change: Optional[Callable[[int], None]] = None,
        on_blur: Optional[Callable[[], None]] = None,
    ) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.on_change = on_change
        self.on_blur = on_blur
        self.has_focus = False
        self.value = self._clamp(int(value))
        self.display_text = self._text_for(self.value)

    @staticmethod
    def _text_for(value: int) -> str:
        return "" if value == 0 else str(value)

    def _clamp(self, value: int) -> int:
        if self.minimum is not None and value < self.minimum:
            return self.minimum
        if self.maximum is not None and value > self.maximum:
            return self.maximum
        return value

    def focus_in(self) -> None:
        self.has_focus = True

    def text_edited(self, text: str) -> int:
        self.display_text = re.sub(r"[^0-9]", "", text)
        raw = int(self.display_text) if self.display_text else 0
        self.value = self._clamp(raw)
        if self.on_change:
            self.on_change(self.value)
        return self.value

    def focus_out(self) -> None:
        self.has_focus = False
        raw = int(self.display_text) if self.display_text else 0
        clamped = self._clamp(raw)
        if clamped != raw:
            self.display_text = str(clamped)
            self.value = clamped
            if self.on_change:
                self.on_change(clamped)
        if self.on_blur:
            self.on_blur()

    def set_value(self, value: int) -> None:
        self.value = self._clamp(int(value))
        self.display_text = self._text_for(self.value)

    def set_range(self, minimum: Optional[int], maximum: Optional[int]) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.set_value(self.value)
