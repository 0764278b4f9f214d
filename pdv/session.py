"""Login session: the stored bearer token and the logged-in user."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pdv import config
from pdv.api import ApiClient
from pdv.errors import TransportError, ValidationError
from pdv.log import get_logger
from pdv.models.product import User

logger = get_logger(__name__)


class TokenStore:
    """Keeps the bearer token in a small JSON file between runs."""

    def __init__(self, path: Path | str | None = None, key: str | None = None) -> None:
        self.path: Path = Path(path) if path else config.TOKEN_FILE
        self.key = key or config.TOKEN_KEY

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, exc)
            return None
        token = data.get(self.key) if isinstance(data, dict) else None
        return str(token) if token else None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({self.key: token}), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class AuthSession:
    """Owns the API client of the running session and who is logged in."""

    def __init__(self, api: Optional[ApiClient] = None, store: Optional[TokenStore] = None) -> None:
        self.api = api or ApiClient()
        self.store = store or TokenStore()
        self.user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def is_admin(self) -> bool:
        return bool(self.user and self.user.is_admin)

    def is_manager(self) -> bool:
        return bool(self.user and self.user.is_manager)

    def restore(self) -> bool:
        """Resume a stored session. Any failure logs out."""
        token = self.store.load()
        if not token:
            return False
        self.api.token = token
        try:
            self.user = self.api.profile()
        except TransportError as exc:
            logger.warning("Could not restore session: %s", exc)
            self.logout()
            return False
        logger.info("Session restored for %s", self.user.email)
        return True

    def login(self, email: str, password: str) -> User:
        if not email.strip() or not password:
            raise ValidationError("Informe email e senha.")
        self.api.token = None
        data = self.api.login(email.strip(), password)
        token = str(data["token"])
        self.api.token = token
        self.store.save(token)
        user_data = data.get("user")
        self.user = User.from_api(user_data) if isinstance(user_data, dict) else self.api.profile()
        logger.info("Logged in as %s (%s)", self.user.email, self.user.role)
        return self.user

    def logout(self) -> None:
        self.store.clear()
        self.api.token = None
        self.user = None

    def change_password(self, current_password: str, new_password: str) -> None:
        if len(new_password) < 6:
            raise ValidationError("A nova senha deve ter pelo menos 6 caracteres.")
        self.api.change_password(current_password, new_password)

    def check_connection(self) -> str:
        """Ask the backend health endpoint whether the API is up."""
        data = self.api.health()
        if not isinstance(data, dict) or data.get("status") != "ok":
            raise TransportError("Servidor indisponível.")
        logger.info("Backend reachable at %s", self.api.base_url)
        return str(data.get("message") or "Conexão OK")
