"""Shared pytest fixtures for the PDV client tests."""

from __future__ import annotations

import os

import pytest

from fakes import FakePrintHost

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def fake_host() -> FakePrintHost:
    return FakePrintHost()


@pytest.fixture(scope="session")
def qapp():
    widgets = pytest.importorskip("PyQt5.QtWidgets")
    return widgets.QApplication.instance() or widgets.QApplication([])
