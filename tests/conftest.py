"""pytest configuration and fixtures for pyqt-polyfield tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from pyqt_polyfield.forms.variant_registry import clear_registrations
from pyqt_polyfield.protocols.form_config import set_polyfield_config
from pyqt_polyfield.protocols.render_strategy import clear_render_strategies


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def isolated_registries():
    """Give every test empty registration tables and default config."""
    clear_registrations()
    clear_render_strategies()
    set_polyfield_config(None)
    yield
    clear_registrations()
    clear_render_strategies()
    set_polyfield_config(None)
