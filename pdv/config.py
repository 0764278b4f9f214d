"""Configuration constants for the PDV client.

Every value can be overridden from the environment.
"""

import os
from pathlib import Path

# Base URL of the PDV REST backend, including the API version prefix.
API_BASE_URL: str = os.getenv("PDV_API_URL", "http://localhost:8080/api/v1").rstrip("/")

# Seconds to wait for the backend before giving up on a request.
API_TIMEOUT: float = float(os.getenv("PDV_API_TIMEOUT", "10"))

# Where the bearer token survives between runs.
TOKEN_FILE: Path = Path(os.getenv("PDV_TOKEN_FILE", str(Path.home() / ".pdv" / "session.json")))

# Key under which the token is stored inside TOKEN_FILE.
TOKEN_KEY: str = "token"

# Locale used for money display.
CURRENCY_SYMBOL: str = "R$"
DECIMAL_SEPARATOR: str = ","
THOUSANDS_SEPARATOR: str = "."

# Name of the system printer receipts go to. Empty means the default printer.
PRINTER_NAME: str = os.getenv("PDV_PRINTER_NAME", "")

# Receipt paper width in millimeters for 80mm thermal rolls.
RECEIPT_WIDTH_MM: float = 80.0

# Store name printed on top of the receipt.
STORE_NAME: str = os.getenv("PDV_STORE_NAME", "SISTEMA PDV")

# Seller shown on the receipt when the operator is unknown.
DEFAULT_SELLER: str = "Sistema"

# How long the receipt viewer stays open after printing, in milliseconds.
RECEIPT_AUTO_CLOSE_MS: int = 1000

# How long error/success banners stay visible, in milliseconds.
BANNER_TIMEOUT_MS: int = 3000
