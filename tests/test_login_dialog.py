"""Tests for the login dialog's connection check."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PyQt5.QtWidgets")

from fakes import FakeResponse, FakeSession  # noqa: E402
from pdv.api import ApiClient  # noqa: E402
from pdv.session import AuthSession, TokenStore  # noqa: E402
from pdv.ui.login_dialog import LoginDialog  # noqa: E402


def _dialog(tmp_path: Path, *responses) -> LoginDialog:
    api = ApiClient(base_url="http://pdv.test/api/v1", session=FakeSession(*responses))
    return LoginDialog(AuthSession(api, TokenStore(tmp_path / "session.json")))


def test_test_connection_shows_backend_message(qapp, tmp_path: Path) -> None:
    dialog = _dialog(tmp_path, FakeResponse(200, {"status": "ok", "message": "PDV API está funcionando"}))
    dialog.test_button.click()
    assert dialog.error_label.text() == "PDV API está funcionando"
    assert "#2e7d32" in dialog.error_label.styleSheet()


def test_test_connection_shows_error(qapp, tmp_path: Path) -> None:
    dialog = _dialog(tmp_path, FakeResponse(502, None))
    dialog.test_button.click()
    assert dialog.error_label.text()
    assert "#c62828" in dialog.error_label.styleSheet()
    assert not dialog.session.is_authenticated
