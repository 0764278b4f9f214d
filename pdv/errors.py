"""Error types raised by the PDV client."""

from __future__ import annotations

from typing import Optional


class PdvError(Exception):
    """Base class for every error the client raises on purpose."""


class ValidationError(PdvError):
    """Input rejected on the client before anything reaches the backend."""


class StockConflict(PdvError):
    """Cart operation rejected by the last known stock figure."""

    def __init__(self, message: str, product_id: int, available: int) -> None:
        super().__init__(message)
        self.product_id = product_id
        self.available = available


class OutOfStock(StockConflict):
    """Product has no stock at all, so it cannot enter the cart."""


class InsufficientStock(StockConflict):
    """Requested quantity is above the stock ceiling of the line."""


class TransportError(PdvError):
    """Backend unreachable, non-2xx answer or unreadable body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def session_expired(self) -> bool:
        return self.status_code == 401


class PrintFailure(PdvError):
    """A print strategy could not deliver the receipt."""
