"""REST client for the PDV backend.

One ``ApiClient`` is created per login session and passed to whoever talks
to the backend; it carries the bearer token on its ``requests.Session``.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from pdv import config
from pdv.errors import TransportError
from pdv.log import get_logger
from pdv.models.product import Product, User
from pdv.models.sale import SaleRecord, SaleSnapshot, SalesReport

logger = get_logger(__name__)


def error_message(
    status_code: Optional[int],
    body: Any = None,
    default: str = "Erro de comunicação com o servidor",
    authenticated: bool = True,
) -> str:
    """Human readable message for a failed request.

    A 401 only means an expired session when a token was sent; without one it
    is a login failure and the backend message is kept.
    """
    if status_code == 401 and authenticated:
        return "Sessão expirada. Faça login novamente."
    if status_code == 403:
        return "Acesso negado."
    if status_code is not None and status_code >= 500:
        return "Erro no servidor. Tente novamente mais tarde."
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return default


class ApiClient:
    """Thin wrapper over ``requests.Session`` bound to the backend base URL."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.API_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self._token: Optional[str] = None
        self.token = token

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value
        if value:
            self.session.headers["Authorization"] = f"Bearer {value}"
        else:
            self.session.headers.pop("Authorization", None)

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, default_error: Optional[str] = None, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            TransportError: on connection problems, non-2xx answers or bodies
                that are not JSON.
        """
        url = self._url(path)
        kwargs.setdefault("timeout", self.timeout)
        default_error = default_error or "Erro de comunicação com o servidor"
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TransportError("Não foi possível conectar ao servidor.") from exc

        if not 200 <= response.status_code < 300:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = error_message(response.status_code, body, default_error, authenticated=bool(self.token))
            logger.warning("%s %s returned %s: %s", method, url, response.status_code, message)
            raise TransportError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error("%s %s returned an invalid body", method, url)
            raise TransportError("Resposta inválida do servidor.", status_code=response.status_code) from exc

    def health(self) -> Dict[str, Any]:
        root = self.base_url.rsplit("/api/", 1)[0]
        return self.request("GET", f"{root}/health")

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self.request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
            default_error="Erro ao fazer login",
        )
        if not isinstance(data, dict) or not data.get("token"):
            raise TransportError("Resposta inválida do servidor.")
        return data

    def profile(self) -> User:
        return User.from_api(self.request("GET", "/auth/profile"))

    def change_password(self, current_password: str, new_password: str) -> None:
        self.request(
            "PUT",
            "/auth/change-password",
            json={"current_password": current_password, "new_password": new_password},
            default_error="Erro ao alterar senha",
        )

    def product_by_barcode(self, code: str) -> Product:
        data = self.request(
            "GET",
            f"/products/barcode/{quote(code.strip(), safe='')}",
            default_error="Produto não encontrado",
        )
        return Product.from_api(data)

    def list_products(
        self,
        active: Optional[bool] = None,
        category_id: Optional[int] = None,
        low_stock: Optional[bool] = None,
    ) -> List[Product]:
        params: Dict[str, Any] = {}
        if active is not None:
            params["active"] = "true" if active else "false"
        if category_id is not None:
            params["category_id"] = category_id
        if low_stock is not None:
            params["low_stock"] = "true" if low_stock else "false"
        data = self.request("GET", "/products/", params=params)
        return [Product.from_api(item) for item in data or []]

    def update_stock(self, product_id: int, quantity: int) -> Product:
        data = self.request(
            "PUT",
            f"/products/{product_id}/stock",
            json={"quantity": quantity, "type": "set"},
            default_error="Erro ao atualizar estoque do produto",
        )
        return Product.from_api(data or {})

    def create_sale(self, snapshot: SaleSnapshot) -> Dict[str, Any]:
        data = self.request(
            "POST",
            "/sales/",
            json=snapshot.to_payload(),
            default_error="Erro ao finalizar venda",
        )
        return data or {}

    def list_sales(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[SaleRecord]:
        params: Dict[str, Any] = {}
        if start_date:
            params["start_date"] = start_date.isoformat()
        if end_date:
            params["end_date"] = end_date.isoformat()
        if payment_type:
            params["payment_type"] = payment_type
        if status:
            params["status"] = status
        data = self.request("GET", "/sales/", params=params, default_error="Erro ao carregar vendas")
        return [SaleRecord.from_api(item) for item in data or []]

    def sales_report(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> SalesReport:
        params: Dict[str, Any] = {}
        if start_date:
            params["start_date"] = start_date.isoformat()
        if end_date:
            params["end_date"] = end_date.isoformat()
        return SalesReport.from_api(self.request("GET", "/sales/report", params=params) or {})

    def cancel_sale(self, sale_id: int) -> None:
        self.request("PUT", f"/sales/{sale_id}/cancel", default_error="Erro ao cancelar venda")

    def dashboard_stats(self) -> Dict[str, Any]:
        return self.request("GET", "/dashboard/stats", default_error="Erro ao carregar dados do dashboard") or {}

    def low_stock(self) -> List[Product]:
        data = self.request(
            "GET",
            "/dashboard/low-stock",
            default_error="Erro ao carregar produtos com estoque baixo",
        )
        return [Product.from_api(item) for item in data or []]
