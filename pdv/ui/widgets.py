"""Line edits for money and quantities."""

from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QFocusEvent, QFont
from PyQt5.QtWidgets import QLineEdit, QWidget

from pdv.input_controllers import CurrencyInputController, NumberInputController
from pdv.money import ZERO, Money


class _ControlledLineEdit(QLineEdit):
    """Forwards focus and typing to a controller and shows its text."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        font = QFont()
        font.setBold(True)
        self.setFont(font)
        self.textEdited.connect(self._on_text_edited)

    def _sync_text(self) -> None:
        if self.text() != self.controller.display_text:
            self.setText(self.controller.display_text)

    def _on_text_edited(self, text: str) -> None:
        self.controller.text_edited(text)
        self._sync_text()

    def focusInEvent(self, event: QFocusEvent) -> None:
        self.controller.focus_in()
        self._sync_text()
        super().focusInEvent(event)

    def focusOutEvent(self, event: QFocusEvent) -> None:
        self.controller.focus_out()
        self._sync_text()
        super().focusOutEvent(event)


class CurrencyLineEdit(_ControlledLineEdit):
    """Money field: raw number while editing, ``R$ 1.234,56`` otherwise."""

    valueChanged = pyqtSignal(object)
    editingDone = pyqtSignal()

    def __init__(self, value: Money = ZERO, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = CurrencyInputController(
            value,
            on_change=self.valueChanged.emit,
            on_blur=self.editingDone.emit,
        )
        self.setPlaceholderText("R$ 0,00")
        self.setText(self.controller.display_text)

    def value(self) -> Money:
        return self.controller.value

    def setValue(self, value: Money) -> None:
        self.controller.set_value(value)
        self._sync_text()


class NumberLineEdit(_ControlledLineEdit):
    """Integer field clamped to a range."""

    valueChanged = pyqtSignal(int)
    editingDone = pyqtSignal()

    def __init__(
        self,
        value: int = 0,
        minimum: Optional[int] = 0,
        maximum: Optional[int] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.controller = NumberInputController(
            value,
            minimum=minimum,
            maximum=maximum,
            on_change=self.valueChanged.emit,
            on_blur=self.editingDone.emit,
        )
        self.setText(self.controller.display_text)

    def value(self) -> int:
        return self.controller.value

    def setValue(self, value: int) -> None:
        self.controller.set_value(value)
        self._sync_text()

    def setRange(self, minimum: Optional[int], maximum: Optional[int]) -> None:
        self.controller.set_range(minimum, maximum)
        self._sync_text()
