"""Typed dialog and form state with pure validation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class DialogState(Generic[T]):
    """A dialog is closed, or open on an entity (``None`` when creating)."""

    is_open: bool = False
    entity: Optional[T] = None

    @classmethod
    def closed(cls) -> "DialogState[T]":
        return cls()

    @classmethod
    def opened(cls, entity: Optional[T] = None) -> "DialogState[T]":
        return cls(is_open=True, entity=entity)

    @property
    def is_editing(self) -> bool:
        return self.is_open and self.entity is not None


def validate_stock(text: str) -> Dict[str, str]:
    raw = text.strip()
    if not re.fullmatch(r"[0-9]+", raw):
        return {"stock": "Estoque deve ser um número válido e não negativo"}
    return {}


@dataclass
class StockEditForm:
    """Inline stock edit of the low-stock list."""

    product_id: int
    text: str = ""
    original: int = 0
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def dirty(self) -> bool:
        return self.text.strip() != str(self.original)

    def validate(self) -> bool:
        self.errors = validate_stock(self.text)
        return not self.errors

    @property
    def quantity(self) -> int:
        return int(self.text.strip())


def validate_login(email: str, password: str) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not email.strip():
        errors["email"] = "Informe o email"
    elif "@" not in email:
        errors["email"] = "Email inválido"
    if not password:
        errors["password"] = "Informe a senha"
    return errors


@dataclass
class LoginForm:
    email: str = ""
    password: str = ""
    errors: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> bool:
        self.errors = validate_login(self.email, self.password)
        return not self.errors
